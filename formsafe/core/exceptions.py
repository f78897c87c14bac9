# formsafe/core/exceptions.py
"""
Core exceptions - standardized error handling for formsafe.

This module defines all custom exceptions used by the entities and the
CSRF handshake, providing consistent error handling and debugging information.
"""

from typing import Optional, Dict, Any


def _preview(value: Any, limit: int = 80) -> str:
    """Printable, bounded form of an offending value for error details"""
    try:
        text = str(value)
    except ValueError:
        # int too long for str() conversion
        return f"<{type(value).__name__} too large to display>"
    return text if len(text) <= limit else f"{text[:limit]}..."


class FormsafeError(Exception):
    """Base exception for all formsafe errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class FieldValidationError(FormsafeError):
    """Errors in input validation of a single entity field"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        entity: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize validation error.

        Args:
            message: Error description
            field: Field that failed validation
            value: Invalid value
            entity: Entity class being constructed, if any
            details: Additional validation context
        """
        super().__init__(message, details)
        self.field = field
        self.value = value
        self.entity = entity

        # Add field info to details
        if entity:
            self.details['entity'] = entity
        if field:
            self.details['field'] = field
        if value is not None:
            self.details['value'] = _preview(value)


class MalformedInputError(FieldValidationError):
    """Value cannot be interpreted as the expected type or syntax"""


class OutOfRangeError(FieldValidationError):
    """Value has the right type but violates a domain constraint"""


class SecurityError(FormsafeError):
    """Errors in security validation and authorization"""

    def __init__(
        self,
        message: str,
        error_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize security error.

        Args:
            message: Error description
            error_type: Type of security error (csrf_context, csrf_mismatch, ...)
            details: Additional security context
        """
        super().__init__(message, details)
        self.error_type = error_type

        if error_type:
            self.details['error_type'] = error_type


class CsrfVerificationError(SecurityError):
    """A submitted CSRF name/token pair was rejected"""

    def __init__(
        self,
        message: str,
        csrf_name: Optional[str] = None,
        error_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_type=error_type, details=details)
        self.csrf_name = csrf_name

        # Names are random but still only shown truncated
        if isinstance(csrf_name, str) and csrf_name:
            self.details['csrf_name'] = f"{csrf_name[:8]}..."


class CsrfContextNotFoundError(CsrfVerificationError):
    """No token is stored under the supplied CSRF name"""

    def __init__(self, csrf_name: Optional[str] = None):
        super().__init__(
            "no such CSRF context",
            csrf_name=csrf_name,
            error_type="csrf_context"
        )


class CsrfTokenMismatchError(CsrfVerificationError):
    """Supplied CSRF token differs from the stored one"""

    def __init__(self, csrf_name: Optional[str] = None):
        super().__init__(
            "CSRF token mismatch",
            csrf_name=csrf_name,
            error_type="csrf_mismatch"
        )


class SessionStoreError(FormsafeError):
    """Errors in session storage and locking"""

    def __init__(
        self,
        message: str,
        session_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize session store error.

        Args:
            message: Error description
            session_id: Session that failed
            details: Additional session context
        """
        super().__init__(message, details)
        self.session_id = session_id

        if session_id:
            self.details['session_id'] = f"{session_id[:8]}..."


class ServiceError(FormsafeError):
    """Errors in external service interactions"""

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize service error.

        Args:
            message: Error description
            service_name: Name of the failing service
            operation: Operation that failed
            details: Additional service context
        """
        super().__init__(message, details)
        self.service_name = service_name
        self.operation = operation

        if service_name:
            self.details['service'] = service_name
        if operation:
            self.details['operation'] = operation


class RedisServiceError(ServiceError):
    """Specific errors for Redis service interactions"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize Redis service error.

        Args:
            message: Error description
            key: Redis key that failed
            operation: Redis operation that failed
            details: Additional Redis context
        """
        super().__init__(message, service_name="Redis", operation=operation, details=details)
        self.key = key

        if key:
            self.details['key'] = key


class ConfigurationError(FormsafeError):
    """Errors in configuration and setup"""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.component = component

        if component:
            self.details['component'] = component


# Convenience functions for creating common errors

def malformed_input(message: str, field: str, value: Any = None) -> MalformedInputError:
    """Create a malformed input error with field context."""
    return MalformedInputError(message, field=field, value=value)


def out_of_range(message: str, field: str, value: Any = None) -> OutOfRangeError:
    """Create an out of range error with field context."""
    return OutOfRangeError(message, field=field, value=value)
