# ==============================================================================
# SALES STATISTICS
# ==============================================================================
# Figures for the dashboards, computed from the sales journal:
#
#   cashier → today's total, transaction count, target and achievement %
#   owner   → daily / weekly / monthly sales and top products
#
# Periods start at midnight UTC (weeks on Monday, months on the 1st) and
# end at the moment of the query.
# ==============================================================================

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from kasir_pos.config import DAILY_SALES_TARGET, TOP_PRODUCTS_LIMIT
from kasir_pos.models import CheckoutReceipt
from kasir_pos.repositories.interfaces import ISalesJournal

PERIODS = ('daily', 'weekly', 'monthly')


class StatsService:
    """
    Sales statistics over the journal of completed checkouts.

    Responsibilities:
    - Select sales by period (and by cashier)
    - Daily summary against the sales target
    - Period totals and the best-selling products
    """

    def __init__(
        self,
        sales_journal: ISalesJournal,
        daily_target: int = DAILY_SALES_TARGET,
        top_limit: int = TOP_PRODUCTS_LIMIT
    ):
        """
        Args:
            sales_journal: Source of completed sales
            daily_target: Daily sales target in whole Rupiah
            top_limit: Number of products in the ranking
        """
        self.sales_journal = sales_journal
        self.daily_target = daily_target
        self.top_limit = top_limit

    def _date_range(self, period: str, now: datetime = None) -> Tuple[datetime, datetime]:
        """
        Start and end of a period.

        Raises:
            ValueError: unknown period
        """
        now = now or datetime.now(timezone.utc)
        today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)

        if period == 'daily':
            return today_start, now
        if period == 'weekly':
            return today_start - timedelta(days=now.weekday()), now
        if period == 'monthly':
            return today_start.replace(day=1), now
        raise ValueError(f'Unknown period: {period!r}')

    def _sales_in(
        self,
        period: str,
        now: datetime = None,
        cashier_id: Optional[str] = None
    ) -> List[CheckoutReceipt]:
        start, end = self._date_range(period, now)
        return [
            receipt for receipt in self.sales_journal.load()
            if start <= receipt.completed_at <= end
            and (cashier_id is None or receipt.cashier_id == cashier_id)
        ]

    # =========================================================================
    # CASHIER
    # =========================================================================

    def daily_summary(self, cashier_id: str = None, now: datetime = None) -> Dict[str, Any]:
        """
        Today's sales against the target.

        Args:
            cashier_id: Only this cashier's sales (None = whole shop)
            now: Reference time (defaults to the current UTC time)

        Returns:
            {total_sales, transaction_count, target, achievement}
            achievement is a percentage with one decimal and may exceed 100
        """
        sales = self._sales_in('daily', now, cashier_id)
        total = sum(receipt.total for receipt in sales)
        achievement = round(total * 100 / self.daily_target, 1) if self.daily_target > 0 else 0.0
        return {
            'total_sales': total,
            'transaction_count': len(sales),
            'target': self.daily_target,
            'achievement': achievement,
        }

    # =========================================================================
    # OWNER
    # =========================================================================

    def period_sales(self, period: str = 'daily', now: datetime = None) -> int:
        """Sum of sale totals in the period."""
        return sum(receipt.total for receipt in self._sales_in(period, now))

    def top_products(
        self,
        period: str = 'daily',
        limit: int = None,
        now: datetime = None
    ) -> List[Dict[str, Any]]:
        """
        Best-selling products by sales amount.

        Returns:
            [{product_id, name, quantity, sales}], highest sales first;
            ties keep the order in which products were first sold
        """
        products: Dict[str, Dict[str, Any]] = {}
        for receipt in self._sales_in(period, now):
            for line in receipt.lines:
                entry = products.setdefault(line.product_id, {
                    'product_id': line.product_id,
                    'name': line.name,
                    'quantity': 0,
                    'sales': 0,
                })
                entry['quantity'] += line.quantity
                entry['sales'] += line.subtotal

        ranking = sorted(products.values(), key=lambda p: p['sales'], reverse=True)
        return ranking[:self.top_limit if limit is None else max(0, limit)]

    def business_stats(self, period: str = 'daily', now: datetime = None) -> Dict[str, Any]:
        """
        Owner dashboard figures.

        Args:
            period: Period of the selected total and the ranking

        Raises:
            ValueError: unknown period
        """
        now = now or datetime.now(timezone.utc)
        selected = self._sales_in(period, now)
        return {
            'period': period,
            'daily_sales': self.period_sales('daily', now),
            'weekly_sales': self.period_sales('weekly', now),
            'monthly_sales': self.period_sales('monthly', now),
            'selected_sales': sum(receipt.total for receipt in selected),
            'transaction_count': len(selected),
            'top_products': self.top_products(period, now=now),
        }
