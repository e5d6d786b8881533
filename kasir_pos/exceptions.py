# ==============================================================================
# DOMAIN ERRORS
# ==============================================================================
# Every ledger operation either returns its result or raises one of these.
# They are recoverable by the caller. The API layer maps `code` to a
# user-facing message; the domain carries no display text.
# ==============================================================================


class PosError(Exception):
    """Base class for all domain errors."""
    code = 'pos_error'


class UnknownProduct(PosError):
    """The product id could not be resolved."""
    code = 'unknown_product'

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f'Unknown product: {product_id!r}')


class CartLineNotFound(UnknownProduct):
    """The cart has no line for this product id."""
    code = 'cart_line_not_found'

    def __init__(self, product_id):
        super().__init__(product_id)
        self.args = (f'No cart line for product: {product_id!r}',)


class EmptyCart(PosError):
    code = 'empty_cart'

    def __init__(self):
        super().__init__('Cart is empty')


class InsufficientPayment(PosError):
    """Cash tendered is lower than the cart total."""
    code = 'insufficient_payment'

    def __init__(self, total, tendered):
        self.total = total
        self.tendered = tendered
        super().__init__(f'Tendered {tendered} is lower than total {total}')


class NoBoxStock(PosError):
    code = 'no_box_stock'

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f'No box left to open for product: {product_id!r}')


class InvalidQuantity(PosError):
    code = 'invalid_quantity'

    def __init__(self, quantity, reason: str = 'must be a positive integer'):
        self.quantity = quantity
        super().__init__(f'Invalid quantity {quantity!r}: {reason}')


class AuthFailure(PosError):
    """
    Credentials rejected.

    Raised the same way for an unknown identifier and for a wrong secret,
    so callers cannot tell which accounts exist.
    """
    code = 'auth_failure'

    def __init__(self):
        super().__init__('Invalid credentials')
