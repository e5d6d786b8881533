# ==============================================================================
# CART LEDGER
# ==============================================================================
# Owns the sale in progress: lines, payment method, cash tendered, change.
# One ledger per logged-in user; it keeps no history. checkout() hands back
# a snapshot and resets the ledger.
# ==============================================================================

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Callable, List, Optional, Union

from kasir_pos.exceptions import (
    CartLineNotFound,
    EmptyCart,
    InsufficientPayment,
    InvalidQuantity,
    UnknownProduct,
)
from kasir_pos.models import (
    Cart,
    CartLine,
    CheckoutReceipt,
    PaymentMethod,
    PaymentSelection,
    Product,
)
from kasir_pos.performance_logger import profile_function
from kasir_pos.repositories.interfaces import ISalesJournal
from kasir_pos.services.audit_service import AuditService

CatalogLookup = Callable[[str], Optional[Product]]


def parse_amount(amount_text) -> Decimal:
    """
    Lenient parse of a typed cash amount.

    Anything that is not a finite, non-negative number becomes 0.
    """
    if amount_text is None or isinstance(amount_text, bool):
        return Decimal('0')
    try:
        value = Decimal(str(amount_text).strip())
    except (InvalidOperation, ValueError):
        return Decimal('0')
    if not value.is_finite() or value < 0:
        return Decimal('0')
    return value


class CartLedger:
    """
    Shopping cart of one cashier terminal.

    Responsibilities:
    - Add / update / remove lines
    - Compute totals
    - Hold the payment selection and compute change
    - Validate and complete the checkout
    """

    def __init__(
        self,
        catalog_lookup: CatalogLookup = None,
        audit_service: AuditService = None,
        sales_journal: ISalesJournal = None
    ):
        """
        Args:
            catalog_lookup: Callable id -> Product or None (default lookup)
            audit_service: Audit service (optional)
            sales_journal: Receives each completed receipt (optional)
        """
        self.catalog_lookup = catalog_lookup
        self.audit_service = audit_service
        self.sales_journal = sales_journal
        self._cart = Cart()
        self._payment = PaymentSelection()

    # =========================================================================
    # LINES
    # =========================================================================

    @profile_function(name='CartLedger.add_item')
    def add_item(self, product_id: str, catalog_lookup: CatalogLookup = None) -> CartLine:
        """
        Adds one unit of a product.

        An existing line grows by one at its captured price; otherwise a
        new line is created at the catalog's current price.

        Args:
            product_id: Product id
            catalog_lookup: Lookup to use instead of the default one

        Returns:
            Copy of the affected line

        Raises:
            UnknownProduct: the lookup cannot resolve the id
        """
        key = str(product_id)
        existing = self._cart.lines.get(key)
        if existing is not None:
            existing.quantity += 1
            return existing.copy()

        lookup = catalog_lookup or self.catalog_lookup
        product = lookup(key) if lookup else None
        if product is None:
            raise UnknownProduct(product_id)

        line = CartLine(
            product_id=product.id,
            name=product.name,
            unit_price=product.price,
            quantity=1,
        )
        self._cart.lines[key] = line
        return line.copy()

    def set_quantity(self, product_id: str, quantity: int) -> Optional[CartLine]:
        """
        Sets the quantity of an existing line.

        Args:
            product_id: Product id
            quantity: New quantity; <= 0 removes the line

        Returns:
            Copy of the updated line, or None when it was removed

        Raises:
            InvalidQuantity: quantity is not an integer (nothing changes)
            CartLineNotFound: no line for this product
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidQuantity(quantity, 'must be an integer')

        key = str(product_id)
        line = self._cart.lines.get(key)
        if line is None:
            raise CartLineNotFound(product_id)

        if quantity <= 0:
            del self._cart.lines[key]
            return None

        line.quantity = quantity
        return line.copy()

    def remove_item(self, product_id: str) -> None:
        """Removes a line. Raises CartLineNotFound if there is none."""
        self.set_quantity(product_id, 0)

    def clear(self) -> None:
        """Empties the cart and resets payment to cash with nothing tendered."""
        self._cart = Cart()
        self._payment = PaymentSelection()

    def lines(self) -> List[CartLine]:
        """Copies of the lines, in the order they were added."""
        return [line.copy() for line in self._cart.lines.values()]

    def is_empty(self) -> bool:
        return self._cart.is_empty()

    def total(self) -> int:
        return self._cart.total

    def item_count(self) -> int:
        return self._cart.item_count

    # =========================================================================
    # PAYMENT
    # =========================================================================

    @property
    def payment_method(self) -> PaymentMethod:
        return self._payment.method

    @property
    def cash_tendered(self) -> Decimal:
        return self._payment.tendered

    def set_payment_method(self, method: Union[PaymentMethod, str]) -> PaymentMethod:
        """
        Switches the payment method. The tendered amount is kept.

        Raises:
            ValueError: unknown method
        """
        self._payment.method = PaymentMethod(method)
        return self._payment.method

    def set_cash_tendered(self, amount_text) -> Decimal:
        """
        Stores the cash handed over, parsed leniently (bad input -> 0).

        Returns:
            The stored amount
        """
        self._payment.tendered = parse_amount(amount_text)
        return self._payment.tendered

    def change_due(self) -> Optional[Decimal]:
        """
        Change for a cash payment (tendered - total). May be negative.

        Returns:
            The change, or None for non-cash methods
        """
        if self._payment.method != PaymentMethod.CASH:
            return None
        return self._payment.tendered - self.total()

    # =========================================================================
    # CHECKOUT
    # =========================================================================

    @profile_function(name='CartLedger.checkout')
    def checkout(self, cashier_id: str = None) -> CheckoutReceipt:
        """
        Completes the sale and resets the ledger.

        Args:
            cashier_id: User completing the sale (for the receipt and audit)

        Returns:
            Snapshot of the sale

        Raises:
            EmptyCart: no lines (checked first)
            InsufficientPayment: cash payment lower than the total
        """
        if self._cart.is_empty():
            raise EmptyCart()

        total = self.total()
        change = self.change_due()
        if change is not None and change < 0:
            raise InsufficientPayment(total, self._payment.tendered)

        receipt = CheckoutReceipt(
            lines=tuple(self.lines()),
            total=total,
            method=self._payment.method,
            tendered=self._payment.tendered,
            change_due=change,
            completed_at=datetime.now(timezone.utc),
            cashier_id=cashier_id,
        )

        if self.audit_service:
            self.audit_service.log_sale(
                cashier_id,
                total,
                receipt.method.value,
                self.item_count(),
                change,
            )
        if self.sales_journal:
            self.sales_journal.record(receipt)

        self.clear()
        return receipt
