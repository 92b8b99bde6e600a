"""
Extraction of explicitly labeled order fields ("Name: ...", "Phone: ...").
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable, Optional, Sequence

from src.core.orders.patterns import is_date_string
from src.core.orders.validators import DateValidator


@dataclass
class FieldMap:
    """Partial set of order fields found in a message."""
    customer_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    items: Optional[str] = None
    delivery_date: Optional[date] = None
    # Indexes of lines that produced a field
    claimed: set[int] = field(default_factory=set)

    def has_required(self) -> bool:
        return all([self.customer_name, self.phone_number, self.address, self.items])

    def unset(self, names: Iterable[str]) -> list[str]:
        """Names among the given fields that are still empty."""
        return [name for name in names if not getattr(self, name)]


def _after_prefix(line: str, prefix: str) -> str:
    return line[len(prefix):].strip()


def _after_colon(line: str) -> str:
    return line.split(":", 1)[1].strip()


def extract_labeled_fields(
    lines: Sequence[str],
    parse_date: Callable[[str], Optional[date]] = DateValidator.parse,
) -> FieldMap:
    """
    Scan lines for explicit field labels.

    Later lines overwrite earlier ones for the same field. A date line is
    claimed even when it cannot be parsed.
    """
    result = FieldMap()

    for index, line in enumerate(lines):
        lower = line.lower()

        if lower.startswith("name:"):
            result.customer_name = _after_prefix(line, "name:")
        elif "phone" in lower and ":" in lower:
            result.phone_number = _after_colon(line)
        elif lower.startswith("address:"):
            result.address = _after_prefix(line, "address:")
        elif "item" in lower and ":" in lower:
            result.items = _after_colon(line)
        elif is_date_string(line):
            result.delivery_date = parse_date(line)
        else:
            continue
        result.claimed.add(index)

    return result
