"""
Service layer base classes.

- ServiceResult: Result wrapper for consistent success/failure handling
- BaseService: Base class with logging and transaction helpers

Services hold the business rules; views translate HTTP to service calls
and ServiceResult back to HTTP. Expected failures (bad input, missing rows)
come back as ServiceResult.failure; unexpected ones are raised.

Usage:
    from core.services import BaseService, ServiceResult

    class ListingService(BaseService):
        @classmethod
        def mark_sold(cls, listing_id) -> ServiceResult[Listing]:
            listing = Listing.objects.filter(pk=listing_id).first()
            if listing is None:
                return ServiceResult.failure(
                    "Listing not found", error_code="LISTING_NOT_FOUND"
                )
            ...
            return ServiceResult.success(listing)

    # In a view
    result = ListingService.mark_sold(pk)
    if not result.success:
        return Response(result.to_response(), status=status.HTTP_404_NOT_FOUND)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful
        error: Human-readable error message if failed
        error_code: Machine-readable error code for client handling
        errors: Field-level errors for validation failures
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """Create a successful result carrying ``data``."""
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            errors: Field-level errors (for validation failures)
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    @classmethod
    def from_exception(
        cls, exc: Exception, error_code: str | None = None
    ) -> ServiceResult[T]:
        """
        Create a failed result from an exception.

        Application errors keep their own message and code; anything else
        falls back to the exception class name.
        """
        message = getattr(exc, "message", None) or str(exc)
        code = error_code or getattr(exc, "error_code", None)
        return cls(
            success=False,
            error=message,
            error_code=code or exc.__class__.__name__.upper(),
        )

    def to_response(self) -> dict[str, Any]:
        """
        Convert to the API error/success body.

        Failure bodies always carry ``error`` so clients can show it
        directly in a toast.
        """
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {
            "success": False,
            "error": self.error,
        }
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        return response

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Services are stateless: use @classmethod or @staticmethod only.
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Logger named after the concrete service class."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Run the enclosed ORM work in a single database transaction.

        Only the local database is covered. Stripe calls made inside the
        block are not rolled back if the transaction is.
        """
        with transaction.atomic():
            yield

    @classmethod
    def handle_exception(
        cls,
        exc: Exception,
        context: str = "",
        log_level: int = logging.ERROR,
    ) -> ServiceResult:
        """
        Log an exception and convert it to a failed ServiceResult.

        Example:
            try:
                StripeAdapter.retrieve_account(account_id)
            except StripeError as e:
                return cls.handle_exception(e, "retrieving connected account")
        """
        message = f"{context}: {exc}" if context else str(exc)
        cls.get_logger().log(log_level, message, exc_info=True)
        return ServiceResult.from_exception(exc)

    @classmethod
    def validate_required(cls, **kwargs: Any) -> ServiceResult | None:
        """
        Check that every keyword argument has a non-empty value.

        Returns:
            A failure result naming the missing fields, or None when
            everything is present.
        """
        missing = [
            name
            for name, value in kwargs.items()
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if not missing:
            return None
        return ServiceResult.failure(
            "Missing required fields",
            error_code="MISSING_REQUIRED_FIELDS",
            errors={name: ["This field is required."] for name in missing},
        )
