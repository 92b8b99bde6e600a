"""
Delivery chat command recognition.

Commands are plain text:
    done / cancel               as a reply to an order message
    done #ORD... / cancel #ORD...
    /daily /pending /weekly /monthly /help
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from src.core.orders.patterns import find_order_reference


class ReportKind(Enum):
    """Reports that can be requested from the delivery chat."""
    DAILY = "daily"
    PENDING = "pending"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class DeliverByReply:
    order_id: str


@dataclass(frozen=True)
class CancelByReply:
    order_id: str


@dataclass(frozen=True)
class DeliverById:
    order_id: str


@dataclass(frozen=True)
class CancelById:
    order_id: str


@dataclass(frozen=True)
class Report:
    kind: ReportKind


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class NoOp:
    pass


Command = Union[DeliverByReply, CancelByReply, DeliverById, CancelById, Report, Help, NoOp]

DELIVER_REPLY = "done"
CANCEL_REPLY = "cancel"
DELIVER_PREFIX = "done #"
CANCEL_PREFIX = "cancel #"

REPORT_COMMANDS = {f"/{kind.value}": kind for kind in ReportKind}
HELP_COMMAND = "/help"


def _typed_order_id(body: str, prefix: str) -> str:
    # Body was lowercased for matching; ids are stored upper case
    return body[len(prefix):].strip().upper()


def classify_command(text: Optional[str], quoted_text: Optional[str] = None) -> Command:
    """
    Classify a delivery chat message.

    Args:
        text: Message body
        quoted_text: Body of the message being replied to, if any

    Returns:
        Exactly one command; unrecognised text is NoOp
    """
    body = (text or "").strip().lower()
    is_reply = quoted_text is not None

    if is_reply and body in (DELIVER_REPLY, CANCEL_REPLY):
        order_id = find_order_reference(quoted_text)
        if not order_id:
            return NoOp()
        if body == DELIVER_REPLY:
            return DeliverByReply(order_id)
        return CancelByReply(order_id)

    if body.startswith(DELIVER_PREFIX):
        order_id = _typed_order_id(body, DELIVER_PREFIX)
        return DeliverById(order_id) if order_id else NoOp()

    if body.startswith(CANCEL_PREFIX):
        order_id = _typed_order_id(body, CANCEL_PREFIX)
        return CancelById(order_id) if order_id else NoOp()

    if body in REPORT_COMMANDS:
        return Report(REPORT_COMMANDS[body])

    if body == HELP_COMMAND:
        return Help()

    return NoOp()
