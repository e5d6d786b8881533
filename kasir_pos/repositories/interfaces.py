# ==============================================================================
# REPOSITORY INTERFACES
# ==============================================================================
#
# Contracts the services depend on. This allows:
#
# 1. STORAGE INDEPENDENCE
#    - Services depend on these protocols, not on concrete classes
#    - A database-backed catalog only needs a new implementation
#
# 2. TESTING
#    - Easy to hand a fake object to a service
#
# 3. DOCUMENTATION
#    - Clear contract for what each collaborator provides
#
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from kasir_pos.models import Account, AuditLog, CheckoutReceipt, Product


@runtime_checkable
class ICatalog(Protocol):
    """
    Product catalog lookup.
    Used by: CartLedger (find_by_id), the product search route (search).
    """

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """Product for this id, or None."""
        ...

    def search(self, text: str) -> List[Product]:
        """Products whose name or barcode matches, in catalog order."""
        ...


@runtime_checkable
class IAccountRepository(Protocol):
    """Registry of accounts allowed to log in."""

    def get_account(self, identifier: str) -> Optional[Account]:
        """Account for a (case-insensitive) identifier, or None."""
        ...


@runtime_checkable
class ISessionStore(Protocol):
    """
    Key-value store holding at most one serialized session.
    Absence of the key means "logged out".
    """

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        ...

    def set(self, key: str, value: Dict[str, Any]) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


@runtime_checkable
class IAuditRepository(Protocol):
    """Audit event sink."""

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> AuditLog:
        ...

    def load(self) -> List[AuditLog]:
        ...


@runtime_checkable
class ISalesJournal(Protocol):
    """
    Completed sales, in checkout order.
    Used by: CartLedger (record), StatsService (load).
    """

    def record(self, receipt: CheckoutReceipt) -> None:
        ...

    def load(self) -> List[CheckoutReceipt]:
        ...
