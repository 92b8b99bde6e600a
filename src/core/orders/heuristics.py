"""
Heuristic classification of unlabeled order lines.

Phone numbers and dates are picked out first because they are the most
distinctive. What is left is split into name, address and items either by
position (one line per missing field) or by pattern scoring.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional, Sequence

from src.core.orders.labeled import FieldMap
from src.core.orders.patterns import (
    ADDRESS_PATTERNS,
    ITEM_PATTERNS,
    NAME_PATTERNS,
    is_date_string,
    is_phone_number,
    pattern_score,
)
from src.core.orders.validators import DateValidator

logger = logging.getLogger(__name__)

NAME = "customer_name"
ADDRESS = "address"
ITEMS = "items"

# Tie-break and fallback order
FIELD_PRIORITY = (NAME, ADDRESS, ITEMS)


@dataclass
class LineScore:
    """Pattern scores of one candidate line."""
    index: int
    line: str
    name_score: int
    address_score: int
    item_score: int

    def score_for(self, field_name: str) -> int:
        return {
            NAME: self.name_score,
            ADDRESS: self.address_score,
            ITEMS: self.item_score,
        }[field_name]

    def best_among(self, fields: Sequence[str]) -> str:
        # max() keeps the first of equal scores, so fields act as tie-break order
        return max(fields, key=self.score_for)

    @property
    def best_type(self) -> str:
        return self.best_among(FIELD_PRIORITY)


def score_line(index: int, line: str) -> LineScore:
    return LineScore(
        index=index,
        line=line,
        name_score=pattern_score(line, NAME_PATTERNS),
        address_score=pattern_score(line, ADDRESS_PATTERNS),
        item_score=pattern_score(line, ITEM_PATTERNS),
    )


def assign_by_score(
    lines: Sequence[str], fields: Sequence[str] = FIELD_PRIORITY
) -> dict[str, str]:
    """
    Assign the given fields to lines by pattern score.

    Lines are visited from the most to the least confident (stable for
    ties). A line only takes its best field; if that field is taken the
    line is skipped. Fields left over get the first unused lines in
    priority order.
    """
    scores = [score_line(index, line) for index, line in enumerate(lines)]
    ranked = sorted(
        scores, key=lambda s: s.score_for(s.best_among(fields)), reverse=True
    )

    assigned: dict[str, str] = {}
    used: set[int] = set()

    for score in ranked:
        best = score.best_among(fields)
        if best not in assigned:
            assigned[best] = score.line
            used.add(score.index)

    unused = (line for index, line in enumerate(lines) if index not in used)
    for field_name in fields:
        if field_name in assigned:
            continue
        line = next(unused, None)
        if line is None:
            break
        assigned[field_name] = line

    return assigned


def extract_unlabeled_fields(
    lines: Sequence[str],
    claimed: Iterable[int] = (),
    missing: Iterable[str] = FIELD_PRIORITY,
    parse_date: Callable[[str], Optional[date]] = DateValidator.parse,
) -> FieldMap:
    """
    Classify lines that carry no label.

    Args:
        lines: Trimmed, non-empty message lines
        claimed: Indexes already used by the labeled pass
        missing: Text fields (name, address, items) still to be found
        parse_date: Date parser for the first date-like line

    Returns:
        FieldMap with whatever could be recognised
    """
    result = FieldMap()
    claimed = set(claimed)
    missing = set(missing)
    wanted = [field_name for field_name in FIELD_PRIORITY if field_name in missing]
    pool = [(index, line) for index, line in enumerate(lines) if index not in claimed]

    for position, (index, line) in enumerate(pool):
        if is_phone_number(line):
            result.phone_number = line
            result.claimed.add(index)
            pool.pop(position)
            break

    for position, (index, line) in enumerate(pool):
        if is_date_string(line):
            result.delivery_date = parse_date(line)
            result.claimed.add(index)
            pool.pop(position)
            break

    if not wanted or not pool:
        logger.debug(f"Nothing to classify: {len(pool)} line(s) for {wanted}")
        return result

    if len(pool) == len(wanted):
        assignments = {
            field_name: line for field_name, (_, line) in zip(wanted, pool)
        }
    else:
        assignments = assign_by_score([line for _, line in pool], wanted)

    for field_name, line in assignments.items():
        setattr(result, field_name, line)

    return result
