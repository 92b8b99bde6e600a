"""
Sales chat handler.
Turns order messages into pending orders and announces them.
"""

import logging
from typing import Optional

from aiogram import Router, F
from aiogram.types import Message

from src.bot.messages import (
    ORDER_REJECTED,
    format_order_confirmation,
    format_sales_confirmation,
)
from src.bot.messenger import Messenger
from src.config import Settings
from src.core.orders import OrderParser, Order
from src.core.orders.exceptions import PersistenceError
from src.core.orders.lifecycle import OrderLifecycle

logger = logging.getLogger(__name__)

router = Router(name="sales")


def sender_name(message: Message) -> str:
    """Display name of the message author."""
    user = message.from_user
    if user is None:
        return "unknown"
    return user.full_name or user.username or str(user.id)


def looks_like_order_attempt(text: str, config: Settings) -> bool:
    """Only longer messages get a visible rejection."""
    return len(text) > config.rejection_min_length


async def process_order_message(
    text: str,
    sender: str,
    parser: OrderParser,
    lifecycle: OrderLifecycle,
    messenger: Messenger,
    config: Settings,
) -> Optional[Order]:
    """
    Parse, store and announce one order message.

    Returns:
        Created order, or None if the message was not an order
    """
    draft = parser.parse(text, sender)

    if draft is None:
        if looks_like_order_attempt(text, config):
            logger.info(f"Rejected order message from {sender}")
            await messenger.send_to_sales(ORDER_REJECTED)
        return None

    try:
        order = await lifecycle.create(draft)
    except PersistenceError as e:
        logger.error(f"Failed to store order from {sender}: {e}", exc_info=True)
        await messenger.send_to_sales(ORDER_REJECTED)
        return None

    await messenger.send_to_delivery(format_order_confirmation(order))
    await messenger.send_to_sales(format_sales_confirmation(order))

    logger.info(f"Order processed and confirmations sent: {order.order_id}")
    return order


@router.message(F.text)
async def handle_sales_message(
    message: Message,
    parser: OrderParser,
    lifecycle: OrderLifecycle,
    messenger: Messenger,
    config: Settings,
) -> None:
    """Handle a message posted in the sales chat."""
    if message.from_user and message.from_user.is_bot:
        return

    try:
        await process_order_message(
            message.text, sender_name(message), parser, lifecycle, messenger, config
        )
    except Exception as e:
        logger.error(f"Error handling sales chat message: {e}", exc_info=True)
