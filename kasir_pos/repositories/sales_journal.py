# ==============================================================================
# SALES JOURNAL
# ==============================================================================
# Completed checkouts, oldest first: [CheckoutReceipt, ...]
# Receipts are frozen snapshots, so they are stored as handed over.
# Kept in memory for the dashboards; nothing is written to disk.
# ==============================================================================

import threading
from typing import List

from kasir_pos.models import CheckoutReceipt


class SalesJournal:
    """In-memory journal of completed sales."""

    def __init__(self):
        self._receipts: List[CheckoutReceipt] = []
        self._lock = threading.Lock()

    def record(self, receipt: CheckoutReceipt) -> None:
        with self._lock:
            self._receipts.append(receipt)

    def load(self) -> List[CheckoutReceipt]:
        """
        Gets every receipt.

        Returns:
            Receipts in checkout order
        """
        with self._lock:
            return list(self._receipts)

    def clear(self) -> None:
        with self._lock:
            self._receipts.clear()
