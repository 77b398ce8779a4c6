"""
Custom exceptions
Project: Invoicer (Estimates & Invoices backend)

Domain exceptions raised by the service layer and mapped to HTTP
responses in one place (the handlers registered in `invoicer.main`).

NOTE: BusinessValidationError is distinct from pydantic.ValidationError.
- pydantic.ValidationError: malformed input shape (handled by FastAPI -> 422)
- BusinessValidationError: business rule violations (handled by our handler -> 422)
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "NotFoundError",
    "DuplicateError",
    "BusinessValidationError",
    "ValidationError",       # alias of BusinessValidationError
    "ConflictError",
    "AuthorizationError",
    "PersistenceError",
]


class AppException(Exception):
    """
    Base exception for the application.

    Attributes:
        status_code: HTTP status code returned to the client
        error_code: Stable identifier of the error for the frontend
        detail: Human readable message
        extra: Optional additional data for the frontend
    """

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        detail: str,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.detail = detail
        self.error_code = error_code if error_code is not None else self.error_code
        self.extra = extra
        self.status_code = self.__class__.status_code
        super().__init__(detail)


class NotFoundError(AppException):
    """Raised when a catalog entry or a customer cannot be found."""

    status_code: int = 404
    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        detail: str = "Resource not found",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class DuplicateError(AppException):
    """Raised when a unique constraint would be violated."""

    status_code: int = 409
    error_code: str = "DUPLICATE_RESOURCE"

    def __init__(
        self,
        detail: str = "Resource already exists",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class BusinessValidationError(ValueError, AppException):
    """
    Raised for business rule violations.

    Inherits from ValueError so it can be raised from inside pydantic
    validators and still surface as a field error.

    Examples:
        - "Notes must be 150 characters or fewer."
        - "At least a name or company is required"
    """

    status_code: int = 422
    error_code: str = "BUSINESS_VALIDATION_ERROR"

    def __init__(
        self,
        detail: str = "Validation failed",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        # Call AppException.__init__ directly to skip ValueError's
        AppException.__init__(self, detail, error_code, extra)


ValidationError = BusinessValidationError


class ConflictError(AppException):
    """Raised when an operation conflicts with the current state of a resource."""

    status_code: int = 409
    error_code: str = "CONFLICT_STATE"

    def __init__(
        self,
        detail: str = "State conflict",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class AuthorizationError(AppException):
    """
    Raised when the caller cannot see a document.

    Used for documents owned by another user AND for documents that do
    not exist, so the response never tells the two apart.
    """

    status_code: int = 403
    error_code: str = "FORBIDDEN"

    def __init__(
        self,
        detail: str = "Access denied",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class PersistenceError(AppException):
    """
    Raised after a database error has rolled back a unit of work.

    The original exception is chained; the detail shown to the client
    stays generic.
    """

    status_code: int = 500
    error_code: str = "DATABASE_ERROR"

    def __init__(
        self,
        detail: str = "Internal server error",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)
