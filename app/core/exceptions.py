"""
Application exception hierarchy.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures (400)
    ├── NotFoundError - Resource not found (404)
    ├── PermissionDeniedError - Authorization failures (403)
    ├── ConflictError - State conflicts (409)
    ├── RateLimitError - Rate limit exceeded (429)
    └── ExternalServiceError - Third-party service failures (502)

Each class carries the HTTP status the DRF exception handler
(core.exception_handler) uses when one escapes a view. Views turn a failed
ServiceResult into one of these with exception_for_result().

Usage:
    from core.exceptions import NotFoundError

    raise NotFoundError(
        "Listing not found",
        error_code="LISTING_NOT_FOUND",
        details={"listing_id": str(listing_id)},
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any

    from core.services import ServiceResult


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | str | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to an API response body.

        Example:
            {
                "error": "Listing not found",
                "error_code": "LISTING_NOT_FOUND",
                "details": {"listing_id": "..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """Raised when request input fails a business rule."""

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class NotFoundError(BaseApplicationError):
    """
    Raised when a single resource that must exist does not.

    Note:
        A user without a connected account is not an error; status
        reconciliation reports ``not_connected`` instead.
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class PermissionDeniedError(BaseApplicationError):
    """Raised when the caller may not act on the resource (e.g. another seller's listing)."""

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class ConflictError(BaseApplicationError):
    """Raised when the operation conflicts with existing data (e.g. a taken email)."""

    default_error_code: str = "CONFLICT"
    status_code: int = 409


class RateLimitError(BaseApplicationError):
    """
    Raised when an upstream rate limit is hit.

    Include ``retry_after`` in details when the upstream provides it.
    """

    default_error_code: str = "RATE_LIMIT_EXCEEDED"
    status_code: int = 429


class ExternalServiceError(BaseApplicationError):
    """
    Raised when a third-party call (Stripe, storage) fails.

    Log the original error; only a best-effort message reaches the client.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    status_code: int = 502


def exception_for_result(
    result: ServiceResult,
    exception_map: dict[str, type[BaseApplicationError]],
    default: type[BaseApplicationError] = ValidationError,
) -> BaseApplicationError:
    """
    Build the application error for a failed ServiceResult.

    Codes missing from ``exception_map`` get ``default``. A ``details``
    entry in the field errors is passed on as a plain string; other field
    errors become the details dict.

    Example:
        result = CheckoutService.link_listing(charge_id, listing_id)
        if not result.success:
            raise exception_for_result(result, {"CHARGE_NOT_FOUND": NotFoundError})
    """
    errors = result.errors or {}
    details = errors["details"][0] if "details" in errors else errors
    exc_class = exception_map.get(result.error_code, default)
    return exc_class(result.error, error_code=result.error_code, details=details)
