import pytest

from src.core.orders.patterns import (
    ADDRESS_PATTERNS,
    ITEM_PATTERNS,
    NAME_PATTERNS,
    digits_only,
    find_order_reference,
    is_date_string,
    is_phone_number,
    pattern_score,
)


@pytest.mark.parametrize("text", [
    "08012345678",
    "+234 801 234 5678",
    "2348012345678",
    "1 555 123 4567",
    "Call 0803 111 2222",
])
def test_phone_candidates(text):
    assert is_phone_number(text)


@pytest.mark.parametrize("text", [
    "0801234",                 # too short
    "0801234567890123",        # 16 digits, too long
    "12 Allen Avenue, Ikeja",
    "Amaka Obi",
])
def test_not_phone_candidates(text):
    assert not is_phone_number(text)


@pytest.mark.parametrize("text", [
    "15/03/2024",
    "2024-03-15",
    "15-03-2024",
    "Deliver tomorrow",
    "TODAY please",
    "friday evening",
])
def test_date_strings(text):
    assert is_date_string(text)


def test_plain_lines_are_not_dates():
    assert not is_date_string("2x Jollof rice")
    assert not is_date_string("12 Allen Avenue, Ikeja")


def test_digits_only():
    assert digits_only("+234 (801) 234-5678") == "2348012345678"


def test_scores_for_typical_lines():
    assert pattern_score("Amaka Obi", NAME_PATTERNS) == 2
    assert pattern_score("Amaka Obi", ADDRESS_PATTERNS) == 0
    assert pattern_score("12 Allen Avenue, Ikeja", ADDRESS_PATTERNS) == 3
    assert pattern_score("2x Jollof rice", ITEM_PATTERNS) == 2
    assert pattern_score("3 packs of jollof rice", ITEM_PATTERNS) == 3


def test_find_order_reference_takes_first_match():
    text = "✅ ORDER RECORDED\nOrder #ORD20240115042\nsee also Order #ORD20240115043"
    assert find_order_reference(text) == "ORD20240115042"


def test_find_order_reference_without_reference():
    assert find_order_reference("no order here") is None
    assert find_order_reference(None) is None
