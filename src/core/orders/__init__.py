"""
Orders module for Delivery Bot.
Handles order extraction from chat messages and delivery commands.
"""

from src.core.orders.models import (
    Order,
    OrderCounts,
    OrderDraft,
    OrderHistoryEntry,
    OrderStatus,
)
from src.core.orders.validators import PhoneValidator, DateValidator
from src.core.orders.parser import OrderParser, order_parser
from src.core.orders.commands import classify_command, ReportKind

__all__ = [
    # Models
    "Order",
    "OrderCounts",
    "OrderDraft",
    "OrderHistoryEntry",
    "OrderStatus",
    # Validators
    "PhoneValidator",
    "DateValidator",
    # Parsing
    "OrderParser",
    "order_parser",
    # Commands
    "classify_command",
    "ReportKind",
]
