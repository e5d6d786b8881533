# ==============================================================================
# AUDIT SERVICE
# ==============================================================================
# Central place for recording what happened in the shop.
# Builds human readable messages and tags each event with a type.
# ==============================================================================

from typing import Any, Dict, List, Optional

from kasir_pos.formatting import format_currency
from kasir_pos.models import AuditLog, AuditType
from kasir_pos.repositories.interfaces import IAuditRepository


class AuditService:
    """
    Records and queries audit events.

    Types:
    - SESSION: login / logout
    - SALE: completed checkouts
    - STOCK: box openings and piece intake

    Rule: every completed sale is logged.
    """

    TYPE_SESSION = AuditType.SESSION.value
    TYPE_SALE = AuditType.SALE.value
    TYPE_STOCK = AuditType.STOCK.value

    def __init__(self, audit_repo: IAuditRepository):
        """
        Args:
            audit_repo: Audit repository
        """
        self.audit_repo = audit_repo

    # =========================================================================
    # RECORDING
    # =========================================================================

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> AuditLog:
        """
        Records a generic event.

        Args:
            log_type: Event type (SESSION, SALE, STOCK)
            user: User who performed the action
            message: Human readable message
            related_id: Related id (product id, user id...)
            details: Extra data
        """
        return self.audit_repo.log(log_type, user, message, related_id, details)

    def log_login(self, user: str, name: str, role: str) -> None:
        message = f"{name} logged in as {role}"
        self.log(self.TYPE_SESSION, user, message, user, {'role': role})

    def log_logout(self, user: str, name: str) -> None:
        self.log(self.TYPE_SESSION, user, f"{name} logged out", user)

    def log_sale(
        self,
        user: Optional[str],
        total: int,
        method: str,
        items_count: int,
        change_due: Any = None
    ) -> None:
        """
        Records a completed sale.

        Args:
            user: Cashier id (None when unknown)
            total: Sale total
            method: Payment method value
            items_count: Number of pieces sold
            change_due: Change handed back (cash only)
        """
        message = (
            f"Sale of {items_count} items - Total: {format_currency(total)} "
            f"- Payment: {method.upper()}"
        )
        if change_due is not None:
            message += f" - Change: {format_currency(change_due)}"
        self.log(
            self.TYPE_SALE,
            user,
            message,
            '',
            {'total': total, 'method': method, 'items_count': items_count}
        )

    def log_box_opened(
        self,
        user: Optional[str],
        product_id: str,
        name: str,
        pieces_per_box: int,
        box_stock: int,
        piece_stock: int
    ) -> None:
        message = (
            f"Box of {name} opened (+{pieces_per_box} pcs) - "
            f"now {box_stock} boxes / {piece_stock} pcs"
        )
        self.log(
            self.TYPE_STOCK,
            user,
            message,
            product_id,
            {'box_stock': box_stock, 'piece_stock': piece_stock}
        )

    def log_pieces_added(
        self,
        user: Optional[str],
        product_id: str,
        name: str,
        quantity: int,
        piece_stock: int
    ) -> None:
        message = f"Added {quantity} pcs of {name} - now {piece_stock} pcs"
        self.log(
            self.TYPE_STOCK,
            user,
            message,
            product_id,
            {'quantity': quantity, 'piece_stock': piece_stock}
        )

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_logs(self, limit: int = 100, log_type: str = None) -> List[AuditLog]:
        """
        Gets recent events.

        Args:
            limit: Maximum number of entries
            log_type: Only this type (optional)

        Returns:
            Entries, newest first
        """
        logs = self.audit_repo.load()
        if log_type:
            logs = [entry for entry in logs if entry.type == log_type.upper()]
        return logs[:max(0, limit)]
