"""
Order repository.
All order reads and writes go through here so the lifecycle code never
touches SQL directly.
"""

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, TypeVar

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.orders.exceptions import OrderIdCollisionError, PersistenceError
from src.core.orders.models import Order, OrderCounts, OrderHistoryEntry, OrderStatus
from src.core.retry import retry_async
from src.db.models import OrderHistoryRecord, OrderRecord
from src.db.sqlite import Database

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OrderRepository:
    """Async persistence for orders and their history."""

    def __init__(self, database: Database, attempts: int = 3, retry_delay: float = 2.0):
        self.database = database
        self.attempts = attempts
        self.retry_delay = retry_delay

    async def _run(
        self, work: Callable[[AsyncSession], Awaitable[T]], description: str
    ) -> T:
        """Run work in its own transaction, retrying transient failures."""

        async def attempt() -> T:
            async with self.database.session() as session:
                return await work(session)

        try:
            return await retry_async(
                attempt,
                attempts=self.attempts,
                delay=self.retry_delay,
                retry_on=(OperationalError,),
                description=description,
            )
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Database error during {description}: {e}", exc_info=True)
            raise PersistenceError(f"{description} failed") from e

    async def insert_order(self, order: Order, entry: OrderHistoryEntry) -> Order:
        """
        Insert a new order together with its first history entry.

        Raises:
            OrderIdCollisionError: order_id is already used
            PersistenceError: any other database failure
        """

        async def work(session: AsyncSession) -> Order:
            record = OrderRecord.from_domain(order)
            session.add(record)
            await session.flush()
            session.add(OrderHistoryRecord.from_domain(entry))
            await session.flush()
            return record.to_domain()

        try:
            return await self._run(work, f"insert order {order.order_id}")
        except IntegrityError as e:
            raise OrderIdCollisionError(f"Order id {order.order_id} already exists") from e

    async def update_status(
        self,
        order_id: str,
        expected: OrderStatus,
        fields: dict[str, Any],
        entry: OrderHistoryEntry,
    ) -> Optional[Order]:
        """
        Conditionally update an order and record the change.

        The update only applies while the order still has the expected
        status, so two competing transitions cannot both succeed.

        Returns:
            Updated order, or None if no order matched id and status
        """
        values = {
            key: value.value if isinstance(value, OrderStatus) else value
            for key, value in fields.items()
        }

        async def work(session: AsyncSession) -> Optional[Order]:
            result = await session.execute(
                update(OrderRecord)
                .where(OrderRecord.order_id == order_id)
                .where(OrderRecord.status == expected.value)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None

            session.add(OrderHistoryRecord.from_domain(entry))
            record = await session.scalar(
                select(OrderRecord).where(OrderRecord.order_id == order_id)
            )
            return record.to_domain()

        return await self._run(work, f"update order {order_id}")

    async def append_history(self, entry: OrderHistoryEntry) -> None:
        """Append an audit entry on its own."""

        async def work(session: AsyncSession) -> None:
            session.add(OrderHistoryRecord.from_domain(entry))

        await self._run(work, f"append history for {entry.order_id}")

    async def find_order_by_id(self, order_id: str) -> Optional[Order]:
        async def work(session: AsyncSession) -> Optional[Order]:
            record = await session.scalar(
                select(OrderRecord).where(OrderRecord.order_id == order_id)
            )
            return record.to_domain() if record else None

        return await self._run(work, f"find order {order_id}")

    async def history_for(self, order_id: str) -> list[OrderHistoryEntry]:
        """Audit trail of an order, oldest first."""

        async def work(session: AsyncSession) -> list[OrderHistoryEntry]:
            records = await session.scalars(
                select(OrderHistoryRecord)
                .where(OrderHistoryRecord.order_id == order_id)
                .order_by(OrderHistoryRecord.id)
            )
            return [record.to_domain() for record in records]

        return await self._run(work, f"load history for {order_id}")

    async def list_pending(self) -> list[Order]:
        """Pending orders, oldest first."""

        async def work(session: AsyncSession) -> list[Order]:
            records = await session.scalars(
                select(OrderRecord)
                .where(OrderRecord.status == OrderStatus.PENDING.value)
                .order_by(OrderRecord.created_at)
            )
            return [record.to_domain() for record in records]

        return await self._run(work, "list pending orders")

    async def aggregate_counts(
        self, start: datetime, end: Optional[datetime] = None
    ) -> OrderCounts:
        """Count orders created in [start, end) by status."""

        def count_status(status: OrderStatus):
            return func.sum(case((OrderRecord.status == status.value, 1), else_=0))

        async def work(session: AsyncSession) -> OrderCounts:
            query = select(
                func.count(OrderRecord.id),
                count_status(OrderStatus.PENDING),
                count_status(OrderStatus.DELIVERED),
                count_status(OrderStatus.CANCELLED),
            ).where(OrderRecord.created_at >= start)
            if end is not None:
                query = query.where(OrderRecord.created_at < end)

            total, pending, delivered, cancelled = (await session.execute(query)).one()
            return OrderCounts(
                total=total or 0,
                pending=pending or 0,
                delivered=delivered or 0,
                cancelled=cancelled or 0,
            )

        return await self._run(work, "aggregate order counts")
