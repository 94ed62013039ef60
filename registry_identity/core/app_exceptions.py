"""Application-specific exceptions for consistent error handling.

Core operations raise these directly; the HTTP layer renders them through
``http_exception_handler`` so every failure carries a stable error code.
"""

from typing import Any

from fastapi import HTTPException, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError


class AppError(HTTPException):
    """Application error with standardized error code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | list[Any] | None = None,
    ):
        super().__init__(
            status_code=status_code,
            detail={
                "code": code,
                "message": message,
                "details": details,
            },
        )
        self.code = code
        self.message = message
        self.details = details


class _TypedAppError(AppError):
    """AppError whose status and code are fixed by the subclass."""

    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code_default: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | list[Any] | None = None):
        super().__init__(
            status_code=self.status_code_default,
            code=self.code_default,
            message=message,
            details=details,
        )


class ValidationError(_TypedAppError):
    """Malformed or empty required input."""

    status_code_default = status.HTTP_422_UNPROCESSABLE_ENTITY
    code_default = "VALIDATION_ERROR"


class AuthenticationError(_TypedAppError):
    """No usable credentials on the request."""

    status_code_default = status.HTTP_401_UNAUTHORIZED
    code_default = "UNAUTHORIZED"


class AuthorizationError(_TypedAppError):
    """Acting identity does not own the target resource."""

    status_code_default = status.HTTP_403_FORBIDDEN
    code_default = "FORBIDDEN"


class NotFoundError(_TypedAppError):
    status_code_default = status.HTTP_404_NOT_FOUND
    code_default = "NOT_FOUND"


class ConflictError(_TypedAppError):
    """Uniqueness violation not resolved by an upsert."""

    status_code_default = status.HTTP_409_CONFLICT
    code_default = "CONFLICT"


class TransientStoreError(_TypedAppError):
    """Connection, timeout or transaction failure in the backing store."""

    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE
    code_default = "STORE_UNAVAILABLE"


class EmailDeliveryError(_TypedAppError):
    """The notification provider rejected or failed to deliver a message."""

    status_code_default = status.HTTP_502_BAD_GATEWAY
    code_default = "EMAIL_DELIVERY_FAILED"


def store_error(exc: SQLAlchemyError) -> AppError:
    """Translate a SQLAlchemy failure into the matching application error."""
    if isinstance(exc, IntegrityError):
        return ConflictError("Conflicting write rejected by the store")
    return TransientStoreError(
        "The data store is temporarily unavailable",
        details={"type": type(exc).__name__},
    )


def invalid_request(exc: PydanticValidationError) -> ValidationError:
    """Wrap a pydantic failure on a request body as a ``ValidationError``."""
    details = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "issue": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return ValidationError("invalid json request", details=details)
