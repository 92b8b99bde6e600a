from datetime import date

import pytest

from src.core.orders.validators import DateValidator, PhoneValidator

TODAY = date(2024, 1, 15)


class TestPhoneValidator:

    @pytest.mark.parametrize("raw", [
        "08012345678",
        "2348012345678",
        "+234 801 234 5678",
        "0801-234-5678",
        "8012345678",
    ])
    def test_normalize_to_international(self, raw):
        assert PhoneValidator.normalize(raw) == "+2348012345678"

    def test_normalized_number_is_stable(self):
        once = PhoneValidator.normalize("08012345678")
        assert PhoneValidator.normalize(once) == once

    def test_foreign_number_gets_country_code_prepended(self):
        # Only the configured country is recognised
        assert PhoneValidator.normalize("15551234567") == "+23415551234567"

    def test_national_number_starting_with_country_code_is_left_alone(self):
        assert PhoneValidator.normalize("2341234567") == "+2341234567"

    def test_custom_country_code(self):
        assert PhoneValidator.normalize("07911123456", country_code="44") == "+447911123456"


class TestDateValidator:

    def test_tomorrow(self):
        assert DateValidator.parse("Tomorrow", today=TODAY) == date(2024, 1, 16)

    def test_today(self):
        assert DateValidator.parse("deliver today", today=TODAY) == TODAY

    def test_tomorrow_defaults_to_current_date(self):
        from datetime import timedelta

        assert DateValidator.parse("tomorrow") == date.today() + timedelta(days=1)

    @pytest.mark.parametrize("text", [
        "15/03/2024",
        "03/15/2024",      # day/month impossible, month/day used
        "2024-03-15",
        "15-03-2024",
        "  15/03/2024  ",
    ])
    def test_explicit_formats(self, text):
        assert DateValidator.parse(text, today=TODAY) == date(2024, 3, 15)

    def test_day_first_wins_when_ambiguous(self):
        assert DateValidator.parse("04/05/2024", today=TODAY) == date(2024, 5, 4)

    @pytest.mark.parametrize("text", [
        "Friday",
        "Delivery: 15/03/2024",
        "32/13/2024",
    ])
    def test_unparseable_dates(self, text):
        assert DateValidator.parse(text, today=TODAY) is None
