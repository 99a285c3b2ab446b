"""Tests for the expense models and validators."""

from datetime import datetime, timezone

import pytest

from common.exceptions import ValidationError
from common.models import ExpensePatch, isoformat_utc, parse_datetime
from common.validators import (
    parse_amount,
    parse_id,
    parse_month,
    parse_year,
    validate_datetime,
    validate_optional_str,
    validate_required_str,
    validate_table_name,
)


class TestExpensePatch:
    """Tests for ExpensePatch."""

    def test_patch_changes_in_canonical_order(self):
        patch = ExpensePatch(date="2024-01-05", amount=3, description="  Tea ")
        assert patch.changes() == [("description", "Tea"), ("amount", 3), ("date", "2024-01-05")]

    def test_patch_keeps_zero_amount(self):
        assert ExpensePatch(amount=0).changes() == [("amount", 0)]
        assert not ExpensePatch(amount=0).is_empty()

    def test_patch_drops_blank_text(self):
        patch = ExpensePatch(description=" ", date="")
        assert not patch.is_empty()
        assert patch.changes() == []


class TestDatetimeHelpers:
    def test_isoformat_utc_naive_is_utc(self):
        assert isoformat_utc(datetime(2024, 1, 5, 12, 0)) == "2024-01-05T12:00:00.000Z"

    def test_parse_datetime_trailing_z(self):
        assert parse_datetime("2024-01-05T12:00:00.000Z") == datetime(2024, 1, 5, 12, tzinfo=timezone.utc)

    def test_parse_datetime_date_only(self):
        assert parse_datetime("2023-06-01") == datetime(2023, 6, 1, tzinfo=timezone.utc)


class TestValidators:
    """Tests for command input validation."""

    @pytest.mark.parametrize("raw, expected", [("0", 0), ("42", 42), (" 7 ", 7), ("+8", 8), (15, 15)])
    def test_parse_amount_accepts(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["-1", "12.5", "abc", "", None, True, -3, "1_000", "٣", "0x10", "+"])
    def test_parse_amount_rejects(self, raw):
        with pytest.raises(ValidationError, match="amount must be non-negative"):
            parse_amount(raw)

    @pytest.mark.parametrize("raw", ["0", "-4", "x", "1e3", "1_0", "٣", "²"])
    def test_parse_id_rejects(self, raw):
        with pytest.raises(ValidationError, match="id must be positive"):
            parse_id(raw)

    def test_parse_id_accepts(self):
        assert parse_id("12") == 12

    @pytest.mark.parametrize("raw", ["0", "13", "jan"])
    def test_parse_month_rejects(self, raw):
        with pytest.raises(ValidationError):
            parse_month(raw)

    def test_parse_month_and_year(self):
        assert parse_month("12") == 12
        assert parse_year("2024") == 2024
        with pytest.raises(ValidationError):
            parse_year("0")

    def test_required_str_trims(self):
        assert validate_required_str("  Lunch ", "description") == "Lunch"

    @pytest.mark.parametrize("raw", ["", "   ", None, 5])
    def test_required_str_rejects(self, raw):
        with pytest.raises(ValidationError):
            validate_required_str(raw, "description")

    def test_required_str_message(self):
        with pytest.raises(ValidationError, match="description required"):
            validate_required_str("  ", "description")

    def test_optional_str(self):
        assert validate_optional_str(None, "description") is None
        assert validate_optional_str(" x ", "description") == "x"

    def test_validate_datetime(self):
        assert validate_datetime("2024-01-05T14:00:00+02:00") == "2024-01-05T12:00:00.000Z"
        with pytest.raises(ValidationError):
            validate_datetime("yesterday")
        with pytest.raises(ValidationError):
            validate_datetime(20240105)

    @pytest.mark.parametrize("name", ["expensetable", "_expenses", "Expenses2024"])
    def test_table_name_accepts(self, name):
        assert validate_table_name(name) == name

    @pytest.mark.parametrize("name", ["", "1table", "expenses;", "public.expenses", "a b"])
    def test_table_name_rejects(self, name):
        with pytest.raises(ValidationError):
            validate_table_name(name)
