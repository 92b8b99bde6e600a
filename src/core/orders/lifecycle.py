"""
Order lifecycle: creation and the pending -> delivered / cancelled transitions.
"""

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from src.core.orders.exceptions import OrderIdCollisionError
from src.core.orders.models import Order, OrderDraft, OrderHistoryEntry, OrderStatus
from src.core.orders.validators import PhoneValidator

if TYPE_CHECKING:
    from src.config import Settings
    from src.db.repository import OrderRepository

logger = logging.getLogger(__name__)


class TransitionOutcome(Enum):
    """Result of a status change request."""
    APPLIED = "applied"
    NOT_FOUND = "not_found"
    ALREADY_DELIVERED = "already_delivered"
    ALREADY_CANCELLED = "already_cancelled"
    INVALID_TRANSITION = "invalid_transition"


@dataclass
class TransitionResult:
    """Outcome of a transition plus the order as it stands afterwards."""
    outcome: TransitionOutcome
    order_id: str
    order: Optional[Order] = None

    @property
    def applied(self) -> bool:
        return self.outcome is TransitionOutcome.APPLIED


def generate_order_id(today: Optional[date] = None, rng: Optional[random.Random] = None) -> str:
    """ORD + YYYYMMDD + random 3-digit suffix."""
    today = today or date.today()
    suffix = (rng or random).randint(0, 999)
    return f"ORD{today.strftime('%Y%m%d')}{suffix:03d}"


class OrderLifecycle:
    """Owns order creation and status transitions."""

    def __init__(
        self,
        repository: "OrderRepository",
        config: "Settings",
        id_factory: Callable[[date], str] = generate_order_id,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.repository = repository
        self.config = config
        self._new_id = id_factory
        self._now = clock

    async def create(self, draft: OrderDraft) -> Order:
        """
        Persist a complete draft as a pending order.

        A taken order id is replaced by a fresh one, up to
        config.order_id_attempts times.

        Raises:
            OrderIdCollisionError: no free order id was found
            PersistenceError: the database failed
        """
        attempts = max(1, self.config.order_id_attempts)

        for attempt in range(1, attempts + 1):
            now = self._now()
            order = Order(
                order_id=self._new_id(now.date()),
                customer_name=draft.customer_name,
                phone_number=PhoneValidator.normalize(
                    draft.phone_number, self.config.country_code
                ),
                address=draft.address,
                items=draft.items,
                delivery_date=draft.delivery_date,
                added_by=draft.added_by,
                created_at=now,
            )
            entry = OrderHistoryEntry(
                order_id=order.order_id,
                status=OrderStatus.PENDING,
                changed_by=draft.added_by,
                notes="Order created",
                timestamp=now,
            )
            try:
                created = await self.repository.insert_order(order, entry)
            except OrderIdCollisionError:
                logger.warning(
                    f"Order id {order.order_id} already taken (attempt {attempt}/{attempts})"
                )
                continue

            logger.info(f"Order created successfully: {created.order_id}")
            return created

        raise OrderIdCollisionError(f"No free order id after {attempts} attempts")

    async def mark_delivered(self, order_id: str, delivery_person: str) -> TransitionResult:
        """Mark a pending order as delivered."""
        now = self._now()
        return await self._transition(
            order_id,
            OrderStatus.DELIVERED,
            changed_by=delivery_person,
            fields={
                "status": OrderStatus.DELIVERED,
                "delivery_person": delivery_person,
                "delivered_at": now,
            },
            now=now,
        )

    async def cancel(self, order_id: str, cancelled_by: str) -> TransitionResult:
        """Cancel a pending order."""
        now = self._now()
        return await self._transition(
            order_id,
            OrderStatus.CANCELLED,
            changed_by=cancelled_by,
            fields={
                "status": OrderStatus.CANCELLED,
                "cancelled_at": now,
            },
            now=now,
        )

    async def _transition(
        self,
        order_id: str,
        target: OrderStatus,
        changed_by: str,
        fields: dict,
        now: datetime,
    ) -> TransitionResult:
        entry = OrderHistoryEntry(
            order_id=order_id,
            status=target,
            changed_by=changed_by,
            notes=f"Status changed to {target.value}",
            timestamp=now,
        )

        updated = await self.repository.update_status(
            order_id, expected=OrderStatus.PENDING, fields=fields, entry=entry
        )
        if updated is not None:
            logger.info(f"Order {order_id} {target.value} by {changed_by}")
            return TransitionResult(TransitionOutcome.APPLIED, order_id, updated)

        # Nothing matched a pending order: find out why
        current = await self.repository.find_order_by_id(order_id)
        if current is None:
            outcome = TransitionOutcome.NOT_FOUND
        elif current.status is target:
            outcome = (
                TransitionOutcome.ALREADY_DELIVERED
                if target is OrderStatus.DELIVERED
                else TransitionOutcome.ALREADY_CANCELLED
            )
        else:
            outcome = TransitionOutcome.INVALID_TRANSITION

        logger.info(f"Order {order_id} not {target.value}: {outcome.value}")
        return TransitionResult(outcome, order_id, current)
