"""
Delivery chat handler.
Applies done / cancel commands and answers report requests.
"""

import logging
from typing import Optional

from aiogram import Router, F
from aiogram.types import Message

from src.bot import messages
from src.bot.handlers.sales import sender_name
from src.bot.messenger import Messenger
from src.core.orders.commands import (
    CancelById,
    CancelByReply,
    Command,
    DeliverById,
    DeliverByReply,
    Help,
    Report,
    ReportKind,
    classify_command,
)
from src.core.orders.exceptions import PersistenceError
from src.core.orders.lifecycle import OrderLifecycle, TransitionOutcome, TransitionResult
from src.core.orders.reports import ReportService

logger = logging.getLogger(__name__)

router = Router(name="delivery")


def format_transition(result: TransitionResult, actor: str, delivering: bool) -> str:
    """Reply text for a deliver or cancel outcome."""
    order_id = result.order_id
    outcome = result.outcome

    if outcome is TransitionOutcome.APPLIED:
        if delivering:
            return messages.format_delivered(order_id, actor)
        return messages.format_cancelled(order_id, actor)
    if outcome is TransitionOutcome.NOT_FOUND:
        return messages.format_not_found(order_id)
    if outcome is TransitionOutcome.ALREADY_DELIVERED:
        return messages.format_already_delivered(order_id)
    if outcome is TransitionOutcome.ALREADY_CANCELLED:
        return messages.format_already_cancelled(order_id)
    if delivering:
        return messages.format_cannot_deliver_cancelled(order_id)
    return messages.format_cannot_cancel_delivered(order_id)


async def render_report(kind: ReportKind, reports: ReportService) -> str:
    if kind is ReportKind.DAILY:
        return messages.format_daily_report(await reports.daily(), reports.today())
    if kind is ReportKind.WEEKLY:
        return messages.format_weekly_report(await reports.weekly())
    if kind is ReportKind.MONTHLY:
        return messages.format_monthly_report(await reports.monthly())
    return messages.format_pending_orders(await reports.pending())


async def execute_command(
    command: Command,
    actor: str,
    lifecycle: OrderLifecycle,
    reports: ReportService,
) -> Optional[str]:
    """
    Run a classified command.

    Returns:
        Reply text, or None when there is nothing to say
    """
    if isinstance(command, (DeliverByReply, DeliverById, CancelByReply, CancelById)):
        delivering = isinstance(command, (DeliverByReply, DeliverById))
        try:
            if delivering:
                result = await lifecycle.mark_delivered(command.order_id, actor)
            else:
                result = await lifecycle.cancel(command.order_id, actor)
        except PersistenceError as e:
            logger.error(f"Error updating order {command.order_id}: {e}", exc_info=True)
            return messages.format_update_error(command.order_id)
        return format_transition(result, actor, delivering)

    if isinstance(command, Report):
        try:
            return await render_report(command.kind, reports)
        except PersistenceError as e:
            logger.error(f"Error generating {command.kind.value} report: {e}", exc_info=True)
            return f"❌ Error generating {command.kind.value} report."

    if isinstance(command, Help):
        return messages.HELP_MESSAGE

    return None


@router.message(F.text)
async def handle_delivery_message(
    message: Message,
    lifecycle: OrderLifecycle,
    reports: ReportService,
    messenger: Messenger,
) -> None:
    """Handle a message posted in the delivery chat."""
    if message.from_user and message.from_user.is_bot:
        return

    quoted = message.reply_to_message
    quoted_text = (quoted.text or quoted.caption or "") if quoted else None

    command = classify_command(message.text, quoted_text)

    try:
        reply = await execute_command(command, sender_name(message), lifecycle, reports)
        if reply:
            await messenger.send_to_delivery(reply)
    except Exception as e:
        logger.error(f"Error handling delivery chat message: {e}", exc_info=True)
