"""
Order message parser.
Combines labeled and heuristic extraction into a validated draft.
"""

import logging
from datetime import date
from typing import Optional

from src.core.orders.heuristics import FIELD_PRIORITY, extract_unlabeled_fields
from src.core.orders.labeled import FieldMap, extract_labeled_fields
from src.core.orders.models import OrderDraft
from src.core.orders.validators import DateValidator

logger = logging.getLogger(__name__)

# Anything shorter is not treated as an order attempt
MIN_LINES = 3


def split_lines(text: str) -> list[str]:
    """Trimmed, non-empty lines of a message."""
    return [line.strip() for line in text.strip().splitlines() if line.strip()]


def merge_fields(labeled: FieldMap, unlabeled: FieldMap) -> FieldMap:
    """Labeled values win; heuristic values only fill the gaps."""
    return FieldMap(
        customer_name=labeled.customer_name or unlabeled.customer_name,
        phone_number=labeled.phone_number or unlabeled.phone_number,
        address=labeled.address or unlabeled.address,
        items=labeled.items or unlabeled.items,
        delivery_date=labeled.delivery_date or unlabeled.delivery_date,
        claimed=labeled.claimed | unlabeled.claimed,
    )


class OrderParser:
    """Turn a free-text chat message into an order draft."""

    def __init__(self, today: Optional[date] = None):
        # Fixed "today" is only used by tests
        self._today = today

    def parse_date(self, text: str) -> Optional[date]:
        return DateValidator.parse(text, today=self._today)

    def parse(self, message_text: str, sender: Optional[str] = None) -> Optional[OrderDraft]:
        """
        Parse an order message.

        Args:
            message_text: Raw message body
            sender: Display name of whoever posted the message

        Returns:
            Complete OrderDraft, or None if the message is not a usable order
        """
        try:
            lines = split_lines(message_text)
            if len(lines) < MIN_LINES:
                return None

            fields = extract_labeled_fields(lines, parse_date=self.parse_date)

            if not fields.has_required():
                unlabeled = extract_unlabeled_fields(
                    lines,
                    claimed=fields.claimed,
                    missing=fields.unset(FIELD_PRIORITY),
                    parse_date=self.parse_date,
                )
                fields = merge_fields(fields, unlabeled)

            draft = OrderDraft(
                customer_name=fields.customer_name,
                phone_number=fields.phone_number,
                address=fields.address,
                items=fields.items,
                delivery_date=fields.delivery_date,
                added_by=sender,
            )

            if not draft.is_complete():
                logger.warning(
                    f"Incomplete order data parsed, missing: {', '.join(draft.missing_fields())}"
                )
                return None

            return draft.stripped()

        except Exception as e:
            logger.error(f"Error parsing order: {e}", exc_info=True)
            return None


order_parser = OrderParser()
