"""Tests for amount and period input parsing."""

from datetime import date
from decimal import Decimal

import pytest

from budgetbook.utils.amount_parser import parse_amount
from budgetbook.utils.period_parser import parse_period_input


class TestParseAmount:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("123.45", Decimal("123.45")),
            ("$123.45", Decimal("123.45")),
            ("R$ 1,234.56", Decimal("1234.56")),
            ("1,234.5", Decimal("1234.50")),
            ("0", Decimal("0.00")),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", ["", "  ", "abc", "nan", "inf"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_amount(value)

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match="zero or greater"):
            parse_amount("-5")


class TestParsePeriodInput:
    today = date(2025, 1, 31)

    def test_default_is_this_month(self):
        assert parse_period_input(None, today=self.today) == "2025-01"
        assert parse_period_input("  ", today=self.today) == "2025-01"

    def test_exact_period(self):
        assert parse_period_input("2024-11", today=self.today) == "2024-11"

    @pytest.mark.parametrize(
        "value, expected",
        [("this month", "2025-01"), ("Last Month", "2024-12"), ("next month", "2025-02")],
    )
    def test_relative(self, value, expected):
        assert parse_period_input(value, today=self.today) == expected

    def test_month_name(self):
        assert parse_period_input("February 2025", today=self.today) == "2025-02"

    def test_unparseable(self):
        with pytest.raises(ValueError, match="Could not parse period"):
            parse_period_input("someday", today=self.today)
