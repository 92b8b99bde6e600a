"""
Regular expression families used to recognise order fields.
"""

import re
from typing import Optional, Sequence


NON_DIGIT = re.compile(r'\D')

PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15
PHONE_PREFIXES = ("0", "234", "1")

DATE_PATTERNS = [
    re.compile(r'\d{1,2}/\d{1,2}/\d{4}'),
    re.compile(r'\d{1,2}-\d{1,2}-\d{4}'),
    re.compile(r'\d{4}-\d{1,2}-\d{1,2}'),
    re.compile(r'(tomorrow|today)', re.IGNORECASE),
    re.compile(r'(monday|tuesday|wednesday|thursday|friday|saturday|sunday)', re.IGNORECASE),
]

NAME_PATTERNS = [
    re.compile(r'^[A-Za-z\s]{2,50}$'),          # letters and spaces only
    re.compile(r'^[A-Za-z]+\s+[A-Za-z]+'),      # at least two words
]

ADDRESS_PATTERNS = [
    re.compile(
        r'\d+.*(?:street|road|avenue|lane|close|way|estate|island|mainland)',
        re.IGNORECASE,
    ),
    re.compile(r'(?:no\.|number)\s*\d+', re.IGNORECASE),
    re.compile(r'\d+[,\s]'),                    # house number
    re.compile(r'.{20,}'),                      # long text
]

ITEM_PATTERNS = [
    re.compile(
        r'(?:cake|food|pizza|burger|rice|chicken|beef|fish|drink|water|juice)',
        re.IGNORECASE,
    ),
    re.compile(r'\d+\s*(?:pack|piece|bottle|plate|portion)', re.IGNORECASE),
    re.compile(r'(?:\d+\s*x\s*|\d+\s+)'),       # quantity
]

ORDER_REFERENCE = re.compile(r'Order #(\w+)')


def digits_only(text: str) -> str:
    """Strip everything but digits."""
    return NON_DIGIT.sub('', text)


def pattern_score(text: str, patterns: Sequence[re.Pattern]) -> int:
    """Number of patterns in the family that match the text."""
    return sum(1 for pattern in patterns if pattern.search(text))


def is_phone_number(text: str) -> bool:
    """Check whether a line looks like a phone number."""
    cleaned = digits_only(text)
    if not PHONE_MIN_DIGITS <= len(cleaned) <= PHONE_MAX_DIGITS:
        return False
    # Local (080...), country code (234...) and US (1...) forms; any other
    # number of this length is taken as international.
    return cleaned.startswith(PHONE_PREFIXES) or len(cleaned) >= PHONE_MIN_DIGITS


def is_date_string(text: str) -> bool:
    """Check whether a line mentions a delivery date."""
    return any(pattern.search(text) for pattern in DATE_PATTERNS)


def find_order_reference(text: Optional[str]) -> Optional[str]:
    """Extract the first order id quoted as 'Order #<id>'."""
    if not text:
        return None
    match = ORDER_REFERENCE.search(text)
    return match.group(1) if match else None
