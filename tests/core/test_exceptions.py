# tests/core/test_exceptions.py
"""
Tests for the exception hierarchy and its helper constructors.
"""

from formsafe.core.exceptions import (
    ConfigurationError,
    CsrfContextNotFoundError,
    CsrfTokenMismatchError,
    CsrfVerificationError,
    FieldValidationError,
    FormsafeError,
    MalformedInputError,
    OutOfRangeError,
    RedisServiceError,
    SecurityError,
    SessionStoreError,
    ServiceError,
    malformed_input,
    out_of_range
)


class TestHierarchy:

    def test_validation_errors(self):
        assert issubclass(MalformedInputError, FieldValidationError)
        assert issubclass(OutOfRangeError, FieldValidationError)
        assert issubclass(FieldValidationError, FormsafeError)
        assert not issubclass(MalformedInputError, OutOfRangeError)

    def test_csrf_errors(self):
        assert issubclass(CsrfContextNotFoundError, CsrfVerificationError)
        assert issubclass(CsrfTokenMismatchError, CsrfVerificationError)
        assert issubclass(CsrfVerificationError, SecurityError)

    def test_service_errors(self):
        assert issubclass(RedisServiceError, ServiceError)
        assert issubclass(SessionStoreError, FormsafeError)
        assert issubclass(ConfigurationError, FormsafeError)


class TestDetails:

    def test_plain_message(self):
        error = FormsafeError("boom")
        assert str(error) == "boom"

    def test_field_context(self):
        error = malformed_input("quantity abc is not numeric", field="quantity", value="abc")

        assert isinstance(error, MalformedInputError)
        assert error.details == {"field": "quantity", "value": "abc"}
        assert str(error) == "quantity abc is not numeric | Details: {'field': 'quantity', 'value': 'abc'}"

    def test_entity_context(self):
        error = OutOfRangeError("Unable to construct OrderLine", field="discount", value=5.0, entity="OrderLine")

        assert error.details["entity"] == "OrderLine"
        assert error.details["value"] == "5.0"

    def test_out_of_range_helper(self):
        error = out_of_range("price 0 is not positive", field="price", value=0)

        assert isinstance(error, OutOfRangeError)
        assert error.value == 0
        assert error.details["value"] == "0"

    def test_csrf_name_is_truncated(self):
        error = CsrfTokenMismatchError("csrf_0123456789abcdef")

        assert error.details["csrf_name"] == "csrf_012..."
        assert error.csrf_name == "csrf_0123456789abcdef"
        assert error.details["error_type"] == "csrf_mismatch"

    def test_context_not_found_without_name(self):
        error = CsrfContextNotFoundError()

        assert error.message == "no such CSRF context"
        assert "csrf_name" not in error.details

    def test_session_id_is_truncated(self):
        error = SessionStoreError("Timed out", session_id="0123456789abcdef")
        assert error.details["session_id"] == "01234567..."

    def test_redis_context(self):
        error = RedisServiceError("Redis hget failed", key="k", operation="hget")

        assert error.details == {"service": "Redis", "operation": "hget", "key": "k"}

    def test_long_values_are_shortened(self):
        error = malformed_input("description is too long", field="description", value="x" * 500)

        assert error.details["value"] == "x" * 80 + "..."
        assert error.value == "x" * 500

    def test_huge_integers_do_not_break_details(self):
        error = out_of_range("quantity is too large", field="quantity", value=10 ** 5000)

        assert error.details["value"] == "<int too large to display>"
        assert "quantity is too large" in str(error)
