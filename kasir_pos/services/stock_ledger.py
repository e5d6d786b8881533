# ==============================================================================
# STOCK LEDGER
# ==============================================================================
# Per-product inventory held in two units: unopened boxes and loose pieces.
# open_box() is the only move between the two units.
#
# CONCURRENCY:
# The ledger is shared by every logged-in terminal of the process, so each
# read-modify-write runs under a per-product lock. A multi-process backend
# would need row locks or conditional updates instead.
# ==============================================================================

import threading
from typing import Dict, Iterable, List, Optional

from kasir_pos.config import ALL_CATEGORIES, MEDIUM_STOCK_FACTOR
from kasir_pos.exceptions import InvalidQuantity, NoBoxStock, UnknownProduct
from kasir_pos.models import StockRecord, StockStatus
from kasir_pos.performance_logger import profile_function
from kasir_pos.services.audit_service import AuditService


def classify_record(record: StockRecord) -> StockStatus:
    """
    Stock health of a record.

    Low:    total <= min_stock
    Medium: min_stock < total <= min_stock * 1.5
    Good:   above that
    """
    total = record.total_pieces
    if total <= record.min_stock:
        return StockStatus.LOW
    # Fraction keeps the 1.5x bound exact
    if total <= record.min_stock * MEDIUM_STOCK_FACTOR:
        return StockStatus.MEDIUM
    return StockStatus.GOOD


class StockLedger:
    """
    Inventory of the shop.

    Responsibilities:
    - Open boxes into pieces
    - Add loose pieces
    - Classify stock health
    - Search by name / barcode / category
    """

    def __init__(
        self,
        records: Iterable[StockRecord] = (),
        audit_service: AuditService = None
    ):
        """
        Args:
            records: Initial stock records (copied)
            audit_service: Audit service (optional)

        Raises:
            ValueError: duplicated product id
        """
        self.audit_service = audit_service
        self._records: Dict[str, StockRecord] = {}
        self._locks: Dict[str, threading.Lock] = {}
        for record in records:
            key = str(record.product_id)
            if key in self._records:
                raise ValueError(f'Duplicated product id: {key}')
            self._records[key] = record.copy()
            self._locks[key] = threading.Lock()

    def _resolve(self, product_id: str):
        key = str(product_id)
        record = self._records.get(key)
        if record is None:
            raise UnknownProduct(product_id)
        return record, self._locks[key]

    # =========================================================================
    # MOVEMENTS
    # =========================================================================

    @profile_function(name='StockLedger.open_box')
    def open_box(self, product_id: str, user: str = None) -> StockRecord:
        """
        Opens one box: box_stock - 1, piece_stock + pieces_per_box.

        Args:
            product_id: Product id
            user: User performing the action (audit)

        Returns:
            Copy of the updated record

        Raises:
            UnknownProduct: no record for this id
            NoBoxStock: no box left (nothing changes)
        """
        record, lock = self._resolve(product_id)
        with lock:
            if record.box_stock < 1:
                raise NoBoxStock(product_id)
            record.box_stock -= 1
            record.piece_stock += record.pieces_per_box
            snapshot = record.copy()

        if self.audit_service:
            self.audit_service.log_box_opened(
                user, snapshot.product_id, snapshot.name,
                snapshot.pieces_per_box, snapshot.box_stock, snapshot.piece_stock
            )
        return snapshot

    @profile_function(name='StockLedger.add_pieces')
    def add_pieces(self, product_id: str, quantity: int, user: str = None) -> StockRecord:
        """
        Adds loose pieces.

        Args:
            product_id: Product id
            quantity: Pieces to add, must be a positive integer
            user: User performing the action (audit)

        Returns:
            Copy of the updated record

        Raises:
            UnknownProduct: no record for this id
            InvalidQuantity: quantity is not a positive integer (nothing changes)
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidQuantity(quantity)

        record, lock = self._resolve(product_id)
        with lock:
            record.piece_stock += quantity
            snapshot = record.copy()

        if self.audit_service:
            self.audit_service.log_pieces_added(
                user, snapshot.product_id, snapshot.name, quantity, snapshot.piece_stock
            )
        return snapshot

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get(self, product_id: str) -> StockRecord:
        record, lock = self._resolve(product_id)
        with lock:
            return record.copy()

    def records(self) -> List[StockRecord]:
        return [self.get(key) for key in self._records]

    def classify(self, product_id: str) -> StockStatus:
        """
        Stock health of a product.

        Raises:
            UnknownProduct: no record for this id
        """
        return classify_record(self.get(product_id))

    def search(self, query: str = '', category: Optional[str] = None) -> List[StockRecord]:
        """
        Finds records by name (case-insensitive substring) or barcode.

        Args:
            query: Search text; empty matches everything
            category: Exact category, or None / '' / 'All' for any

        Returns:
            Copies of matching records, in ledger order
        """
        text = (query or '').strip()
        lowered = text.lower()
        results = []
        for record in self.records():
            matches_text = (
                not text
                or lowered in record.name.lower()
                or (bool(record.barcode) and text in record.barcode)
            )
            matches_category = (
                not category
                or category == ALL_CATEGORIES
                or record.category == category
            )
            if matches_text and matches_category:
                results.append(record)
        return results

    def categories(self) -> List[str]:
        """'All' followed by each category once, in first-seen order."""
        seen = [ALL_CATEGORIES]
        for record in self._records.values():
            if record.category and record.category not in seen:
                seen.append(record.category)
        return seen

    def low_stock(self) -> List[StockRecord]:
        """Records currently classified Low."""
        return [r for r in self.records() if classify_record(r) == StockStatus.LOW]
