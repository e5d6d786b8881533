# ==============================================================================
# MODELS LAYER - domain data structures
# ==============================================================================
# All entities are dataclasses: typed, storage-independent and easy to
# serialize for the JSON API.
# ==============================================================================

from .entities import (
    # Users
    Account,
    Session,
    UserRole,

    # Catalog
    Product,

    # Cart
    Cart,
    CartLine,
    CheckoutReceipt,
    PaymentMethod,
    PaymentSelection,

    # Stock
    StockRecord,
    StockStatus,

    # Audit
    AuditLog,
    AuditType,
)

__all__ = [
    'Account',
    'Session',
    'UserRole',
    'Product',
    'Cart',
    'CartLine',
    'CheckoutReceipt',
    'PaymentMethod',
    'PaymentSelection',
    'StockRecord',
    'StockStatus',
    'AuditLog',
    'AuditType',
]
