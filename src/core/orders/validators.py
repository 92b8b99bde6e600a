"""
Validators for order data.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional

from src.core.orders.patterns import digits_only


class PhoneValidator:
    """Validate and normalize phone numbers."""

    DEFAULT_COUNTRY_CODE = "234"

    @classmethod
    def normalize(cls, phone: str, country_code: str = DEFAULT_COUNTRY_CODE) -> str:
        """
        Normalize phone number to international form.

        08012345678 and 2348012345678 both become +2348012345678. A number
        that does not start with the country code gets it prepended, so
        national numbers without the leading 0 are changed too.
        """
        cleaned = digits_only(phone)

        if cleaned.startswith("0"):
            return f"+{country_code}{cleaned[1:]}"
        if not cleaned.startswith(country_code):
            return f"+{country_code}{cleaned}"
        return f"+{cleaned}"


class DateValidator:
    """Parse delivery dates."""

    # Tried in order, first strict match wins
    FORMATS = [
        "%d/%m/%Y",     # 15/03/2024
        "%m/%d/%Y",     # 03/15/2024
        "%Y-%m-%d",     # 2024-03-15
        "%d-%m-%Y",     # 15-03-2024
    ]

    TOMORROW = re.compile(r'tomorrow', re.IGNORECASE)
    TODAY = re.compile(r'today', re.IGNORECASE)

    @classmethod
    def parse(cls, date_str: str, today: Optional[date] = None) -> Optional[date]:
        """
        Parse delivery date.

        Relative words win over explicit dates. Unparseable text yields None.
        """
        today = today or date.today()

        if cls.TOMORROW.search(date_str):
            return today + timedelta(days=1)
        if cls.TODAY.search(date_str):
            return today

        date_str = date_str.strip()
        for fmt in cls.FORMATS:
            try:
                return datetime.strptime(date_str, fmt).date()
            except ValueError:
                continue

        return None
