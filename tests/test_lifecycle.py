import asyncio
import re
from datetime import date, datetime

import pytest

from src.core.orders.exceptions import OrderIdCollisionError
from src.core.orders.lifecycle import (
    OrderLifecycle,
    TransitionOutcome,
    generate_order_id,
)
from src.core.orders.models import OrderHistoryEntry, OrderStatus

NOW = datetime(2024, 1, 15, 10, 30)


def test_generate_order_id_format():
    order_id = generate_order_id(date(2024, 1, 15))
    assert re.fullmatch(r"ORD20240115\d{3}", order_id)


def test_generate_order_id_pads_suffix():
    class Low:
        def randint(self, a, b):
            return 7

    assert generate_order_id(date(2024, 1, 15), rng=Low()) == "ORD20240115007"


async def test_create_order(lifecycle, repository, draft):
    order = await lifecycle.create(draft)

    assert re.fullmatch(r"ORD\d{8}\d{3}", order.order_id)
    assert order.status is OrderStatus.PENDING
    assert order.phone_number == "+2348012345678"
    assert order.customer_name == "Amaka Obi"
    assert order.delivery_date == date(2024, 1, 16)
    assert order.added_by == "Sales Desk"
    assert order.created_at == NOW
    assert order.delivered_at is None
    assert order.cancelled_at is None

    history = await repository.history_for(order.order_id)
    assert len(history) == 1
    assert history[0].status is OrderStatus.PENDING
    assert history[0].notes == "Order created"
    assert history[0].changed_by == "Sales Desk"

    stored = await repository.find_order_by_id(order.order_id)
    assert stored == order


async def test_mark_delivered(lifecycle, repository, draft):
    order = await lifecycle.create(draft)

    result = await lifecycle.mark_delivered(order.order_id, "Emeka")

    assert result.applied
    assert result.order.status is OrderStatus.DELIVERED
    assert result.order.delivery_person == "Emeka"
    assert result.order.delivered_at == NOW
    assert result.order.cancelled_at is None

    history = await repository.history_for(order.order_id)
    assert [entry.status for entry in history] == [OrderStatus.PENDING, OrderStatus.DELIVERED]
    assert history[1].changed_by == "Emeka"
    assert history[1].notes == "Status changed to delivered"


async def test_mark_delivered_twice(lifecycle, repository, draft):
    order = await lifecycle.create(draft)

    first = await lifecycle.mark_delivered(order.order_id, "Emeka")
    second = await lifecycle.mark_delivered(order.order_id, "Bisi")

    assert first.outcome is TransitionOutcome.APPLIED
    assert second.outcome is TransitionOutcome.ALREADY_DELIVERED
    assert second.order.delivery_person == "Emeka"

    history = await repository.history_for(order.order_id)
    delivered = [entry for entry in history if entry.status is OrderStatus.DELIVERED]
    assert len(delivered) == 1


async def test_cannot_deliver_cancelled_order(lifecycle, repository, draft):
    order = await lifecycle.create(draft)
    await lifecycle.cancel(order.order_id, "Manager")

    result = await lifecycle.mark_delivered(order.order_id, "Emeka")

    assert result.outcome is TransitionOutcome.INVALID_TRANSITION
    stored = await repository.find_order_by_id(order.order_id)
    assert stored.status is OrderStatus.CANCELLED
    assert stored.delivered_at is None
    assert stored.delivery_person is None


async def test_cancel(lifecycle, repository, draft):
    order = await lifecycle.create(draft)

    result = await lifecycle.cancel(order.order_id, "Manager")

    assert result.applied
    assert result.order.status is OrderStatus.CANCELLED
    assert result.order.cancelled_at == NOW
    assert result.order.delivered_at is None

    history = await repository.history_for(order.order_id)
    assert history[-1].status is OrderStatus.CANCELLED
    assert history[-1].changed_by == "Manager"


async def test_cancel_twice(lifecycle, draft):
    order = await lifecycle.create(draft)
    await lifecycle.cancel(order.order_id, "Manager")

    result = await lifecycle.cancel(order.order_id, "Manager")

    assert result.outcome is TransitionOutcome.ALREADY_CANCELLED


async def test_cannot_cancel_delivered_order(lifecycle, repository, draft):
    order = await lifecycle.create(draft)
    await lifecycle.mark_delivered(order.order_id, "Emeka")

    result = await lifecycle.cancel(order.order_id, "Manager")

    assert result.outcome is TransitionOutcome.INVALID_TRANSITION
    stored = await repository.find_order_by_id(order.order_id)
    assert stored.status is OrderStatus.DELIVERED
    assert stored.cancelled_at is None
    assert len(await repository.history_for(order.order_id)) == 2


async def test_unknown_order(lifecycle):
    delivered = await lifecycle.mark_delivered("ORD20240115999", "Emeka")
    cancelled = await lifecycle.cancel("ORD20240115999", "Manager")

    assert delivered.outcome is TransitionOutcome.NOT_FOUND
    assert delivered.order is None
    assert cancelled.outcome is TransitionOutcome.NOT_FOUND


async def test_conditional_update_only_applies_to_expected_status(lifecycle, repository, draft):
    order = await lifecycle.create(draft)
    await lifecycle.mark_delivered(order.order_id, "Emeka")

    entry = OrderHistoryEntry(order.order_id, OrderStatus.CANCELLED, "Manager")
    updated = await repository.update_status(
        order.order_id,
        expected=OrderStatus.PENDING,
        fields={"status": OrderStatus.CANCELLED, "cancelled_at": NOW},
        entry=entry,
    )

    assert updated is None
    assert len(await repository.history_for(order.order_id)) == 2


async def test_competing_transitions_apply_once(lifecycle, repository, draft):
    order = await lifecycle.create(draft)

    results = await asyncio.gather(
        lifecycle.mark_delivered(order.order_id, "Emeka"),
        lifecycle.cancel(order.order_id, "Manager"),
        lifecycle.mark_delivered(order.order_id, "Tola"),
    )

    outcomes = [result.outcome for result in results]
    assert outcomes.count(TransitionOutcome.APPLIED) == 1
    assert len(await repository.history_for(order.order_id)) == 2

    stored = await repository.find_order_by_id(order.order_id)
    assert stored.status is not OrderStatus.PENDING
    assert (stored.delivered_at is None) != (stored.cancelled_at is None)


async def test_order_id_collision_retries_with_fresh_id(repository, test_settings, draft):
    ids = iter(["ORD20240115001", "ORD20240115001", "ORD20240115002"])
    lifecycle = OrderLifecycle(repository, test_settings, id_factory=lambda day: next(ids))

    first = await lifecycle.create(draft)
    second = await lifecycle.create(draft)

    assert first.order_id == "ORD20240115001"
    assert second.order_id == "ORD20240115002"
    assert len(await repository.history_for("ORD20240115001")) == 1


async def test_order_id_collision_gives_up(repository, test_settings, draft):
    lifecycle = OrderLifecycle(repository, test_settings, id_factory=lambda day: "ORD20240115001")
    await lifecycle.create(draft)

    with pytest.raises(OrderIdCollisionError):
        await lifecycle.create(draft)


async def test_append_history_keeps_entries_in_order(lifecycle, repository, draft):
    order = await lifecycle.create(draft)

    await repository.append_history(
        OrderHistoryEntry(
            order_id=order.order_id,
            status=OrderStatus.PENDING,
            changed_by="Manager",
            notes="Customer asked to call first",
            timestamp=NOW,
        )
    )

    history = await repository.history_for(order.order_id)
    assert [entry.notes for entry in history] == ["Order created", "Customer asked to call first"]
    assert history[1].changed_by == "Manager"
