# tests/services/test_validation_service.py
"""
Tests for the field validators used by the storage entities.
"""

from datetime import datetime

import pytest

from formsafe.core.exceptions import FieldValidationError, MalformedInputError, OutOfRangeError
from formsafe.services import validation_service as validate


class TestNumericValidators:
    """Ids, quantities, money and discounts"""

    @pytest.mark.parametrize("value, expected", [
        (1, 1),
        (42, 42),
        ("42", 42),
        (" 7 ", 7),
        ("+3", 3),
        (5.0, 5),
        (2 ** 40, 2 ** 40),
    ])
    def test_positive_int_accepts(self, value, expected):
        assert validate.positive_int(value, "user_id") == expected

    @pytest.mark.parametrize("value", [0, -1, "0", "-15"])
    def test_positive_int_out_of_range(self, value):
        with pytest.raises(OutOfRangeError) as exc_info:
            validate.positive_int(value, "user_id")

        assert exc_info.value.field == "user_id"
        assert "not positive" in exc_info.value.message

    @pytest.mark.parametrize("value", ["abc", "1.5", 1.5, "", None, True, [1], "12abc"])
    def test_positive_int_malformed(self, value):
        with pytest.raises(MalformedInputError) as exc_info:
            validate.positive_int(value, "user_id")

        assert exc_info.value.field == "user_id"

    @pytest.mark.parametrize("value", [
        "9" * 5000, "9" * 20, 2 ** 63, -(2 ** 64), 10 ** 5000, 1e300
    ], ids=["long-string", "20-digits", "2^63", "-2^64", "10^5000", "1e300"])
    def test_positive_int_beyond_64_bits(self, value):
        with pytest.raises(MalformedInputError) as exc_info:
            validate.positive_int(value, "quantity")

        assert "64-bit" in exc_info.value.message

    def test_largest_64_bit_id(self):
        assert validate.positive_int(str(2 ** 63 - 1), "user_id") == 2 ** 63 - 1

    def test_optional_positive_int_allows_none(self):
        assert validate.optional_positive_int(None, "user_id") is None
        assert validate.optional_positive_int("9", "user_id") == 9

    def test_optional_positive_int_still_checks_range(self):
        with pytest.raises(OutOfRangeError):
            validate.optional_positive_int(0, "user_id")

    @pytest.mark.parametrize("value, expected", [
        (19.99, 19.99),
        ("19.99", 19.99),
        (3, 3.0),
        ("1e2", 100.0),
    ])
    def test_positive_money_accepts(self, value, expected):
        assert validate.positive_money(value, "price") == pytest.approx(expected)

    @pytest.mark.parametrize("value", [0, 0.0, -0.01, "-5"])
    def test_positive_money_out_of_range(self, value):
        with pytest.raises(OutOfRangeError):
            validate.positive_money(value, "price")

    @pytest.mark.parametrize("value", ["cheap", None, float("nan"), float("inf"), "inf", False])
    def test_positive_money_malformed(self, value):
        with pytest.raises(MalformedInputError):
            validate.positive_money(value, "price")

    @pytest.mark.parametrize("value", [
        10 ** 400, -(10 ** 400), 10 ** 5000
    ], ids=["10^400", "-10^400", "10^5000"])
    def test_money_too_large_for_float(self, value):
        with pytest.raises(MalformedInputError) as exc_info:
            validate.positive_money(value, "price")

        assert isinstance(exc_info.value.__cause__, OverflowError)

    def test_negative_discount_accepts(self):
        assert validate.negative_discount(-5.00, "discount") == -5.0
        assert validate.negative_discount("-0.5", "discount") == -0.5

    @pytest.mark.parametrize("value", [0, "0", 5.00, "5.00"])
    def test_negative_discount_out_of_range(self, value):
        with pytest.raises(OutOfRangeError) as exc_info:
            validate.negative_discount(value, "discount")

        assert "not negative" in exc_info.value.message

    def test_negative_discount_malformed(self):
        with pytest.raises(MalformedInputError):
            validate.negative_discount("ten percent", "discount")


class TestTextValidators:
    """Free text, state, ZIP and email"""

    def test_free_text_trims(self):
        assert validate.free_text("  Dylan McDonald  ", "name") == "Dylan McDonald"

    def test_free_text_strips_markup(self):
        value = validate.free_text("<script>alert(1)</script>Widget <b>Pro</b>", "product_name")
        assert "<" not in value
        assert ">" not in value
        assert value == "alert(1)Widget Pro"

    def test_free_text_strips_unterminated_tag(self):
        assert validate.free_text("Widget <img src=x onerror=1", "product_name") == "Widget"

    def test_free_text_strips_control_characters(self):
        assert validate.free_text("Main\x00 St\x1b", "address1") == "Main St"

    def test_free_text_keeps_newlines_inside(self):
        assert validate.free_text("line one\nline two", "description") == "line one\nline two"

    def test_free_text_accepts_numbers(self):
        assert validate.free_text(5055551234, "phone") == "5055551234"

    @pytest.mark.parametrize("value", [
        float("nan"), 1e20, 3.5, 10 ** 5000
    ], ids=["nan", "1e20", "3.5", "10^5000"])
    def test_free_text_rejects_floats_and_huge_numbers(self, value):
        with pytest.raises(MalformedInputError):
            validate.free_text(value, "phone")

    def test_free_text_rejects_none(self):
        with pytest.raises(MalformedInputError):
            validate.free_text(None, "name")

    def test_optional_free_text(self):
        assert validate.optional_free_text(None, "address2") is None
        assert validate.optional_free_text(" Suite 100 ", "address2") == "Suite 100"

    @pytest.mark.parametrize("value", ["NM", " TX "])
    def test_state_code_accepts(self, value):
        assert validate.state_code(value, "state") == value.strip()

    @pytest.mark.parametrize("value", ["nm", "New Mexico", "N", "NMX", "N1", ""])
    def test_state_code_rejects(self, value):
        with pytest.raises(FieldValidationError) as exc_info:
            validate.state_code(value, "state")

        assert exc_info.value.field == "state"

    @pytest.mark.parametrize("value", ["87104", "87104-1234", " 87104 "])
    def test_zip_code_accepts(self, value):
        assert validate.zip_code(value, "zip_code") == value.strip()

    @pytest.mark.parametrize("value", ["1234", "ABCDE", "87104-12", "871041234", "87104 1234"])
    def test_zip_code_rejects(self, value):
        with pytest.raises(MalformedInputError):
            validate.zip_code(value, "zip_code")

    @pytest.mark.parametrize("value", ["dmcdonald21@cnm.edu", " user+tag@example.co.uk "])
    def test_email_accepts(self, value):
        assert validate.email(value, "email") == value.strip()

    @pytest.mark.parametrize("value", ["not-an-email", "a@b", "@example.com", "a b@example.com", ""])
    def test_email_rejects(self, value):
        with pytest.raises(MalformedInputError):
            validate.email(value, "email")


class TestHexDigestValidators:
    """Password hash, salt and authentication token"""

    def test_password_hash_lowercases(self):
        value = "AB" * 64
        assert validate.password_hash(value, "password") == "ab" * 64

    def test_salt_accepts_64_hex(self):
        assert validate.salt("0f" * 32, "salt") == "0f" * 32

    @pytest.mark.parametrize("validator, length", [
        (validate.password_hash, 128),
        (validate.salt, 64),
        (validate.authentication_token, 32),
    ])
    def test_wrong_length_rejected(self, validator, length):
        with pytest.raises(MalformedInputError) as exc_info:
            validator("a" * (length - 1), "digest")

        assert str(length) in exc_info.value.message

    def test_non_hex_rejected_without_echoing_value(self):
        with pytest.raises(MalformedInputError) as exc_info:
            validate.salt("z" * 64, "salt")

        assert exc_info.value.value is None
        assert "z" * 64 not in str(exc_info.value)

    def test_authentication_token_nullable(self):
        assert validate.authentication_token(None, "authentication_token") is None

    def test_password_hash_not_nullable(self):
        with pytest.raises(MalformedInputError):
            validate.password_hash(None, "password")


class TestDateValidators:
    """MySQL formatted date-times"""

    def test_parses_components(self):
        parsed = validate.mysql_datetime("2014-09-22 13:45:07", "order_date")

        assert isinstance(parsed, datetime)
        assert (parsed.year, parsed.month, parsed.day) == (2014, 9, 22)
        assert (parsed.hour, parsed.minute, parsed.second) == (13, 45, 7)

    def test_leap_day(self):
        assert validate.mysql_datetime("2024-02-29 00:00:00", "order_date").day == 29

    def test_datetime_passes_through(self):
        now = datetime(2020, 1, 2, 3, 4, 5)
        assert validate.mysql_datetime(now, "ship_date") is now

    @pytest.mark.parametrize("value", [
        "2023-02-30 10:00:00",
        "2023-13-01 10:00:00",
        "2023-02-29 10:00:00",
        "2023-04-31 10:00:00",
        "2023-01-01 24:00:00",
        "2023-01-01 10:60:00",
        "0000-01-01 00:00:00",
    ])
    def test_rejects_impossible_dates(self, value):
        with pytest.raises(OutOfRangeError) as exc_info:
            validate.mysql_datetime(value, "order_date")

        assert exc_info.value.field == "order_date"
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.parametrize("value", [
        "2023-02-03",
        "2023/02/03 10:00:00",
        "23-02-03 10:00:00",
        "2023-02-03T10:00:00",
        "yesterday",
        None,
    ])
    def test_rejects_wrong_syntax(self, value):
        with pytest.raises(MalformedInputError):
            validate.mysql_datetime(value, "order_date")

    def test_format_round_trip(self):
        text = "2014-09-22 13:45:07"
        assert validate.format_mysql_datetime(validate.mysql_datetime(text, "order_date")) == text


class TestCheck:
    """Non-raising pre-check helper"""

    def test_valid(self):
        result = validate.check(validate.zip_code, "87104", "zip_code")

        assert result.valid is True
        assert result.value == "87104"
        assert result.error_type is None

    def test_invalid(self):
        result = validate.check(validate.positive_int, "-2", "quantity")

        assert result.valid is False
        assert result.error_type == "OutOfRangeError"
        assert "not positive" in result.message
