"""
Order reports for the delivery chat.
"""

from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Callable, Optional

from src.core.orders.models import Order, OrderCounts

if TYPE_CHECKING:
    from src.db.repository import OrderRepository


class ReportService:
    """Daily, weekly and monthly counts plus the pending list."""

    def __init__(
        self,
        repository: "OrderRepository",
        today: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self._today = today

    def today(self) -> date:
        return self._today()

    async def daily(self, day: Optional[date] = None) -> OrderCounts:
        """Counts for orders created on one day (default today)."""
        day = day or self._today()
        start = datetime.combine(day, time.min)
        return await self.repository.aggregate_counts(start, start + timedelta(days=1))

    async def weekly(self) -> OrderCounts:
        """Counts since Monday of the current week."""
        today = self._today()
        monday = today - timedelta(days=today.weekday())
        return await self.repository.aggregate_counts(datetime.combine(monday, time.min))

    async def monthly(self) -> OrderCounts:
        """Counts since the first day of the current month."""
        first = self._today().replace(day=1)
        return await self.repository.aggregate_counts(datetime.combine(first, time.min))

    async def pending(self) -> list[Order]:
        return await self.repository.list_pending()
