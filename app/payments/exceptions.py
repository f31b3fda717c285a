"""
Payment-specific exceptions.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PaymentNotFoundError - Charge / checkout session lookup failures (404)
    ├── PaymentValidationError - Checkout input failures (400)
    └── PaymentProcessingError - Failures while talking to Stripe (500)
        └── StripeError - Base for all translated Stripe SDK errors
            ├── StripeInvalidAccountError - Connected account unusable (400)
            ├── StripeResourceMissingError - Stripe object does not exist (404)
            ├── StripeInvalidRequestError - Invalid request params
            ├── StripeRateLimitError - Rate limited (transient)
            └── StripeAPIUnavailableError - API unreachable or erroring (transient)

Stripe SDK exceptions are translated in exactly one place,
StripeAdapter._handle_stripe_error. Services and views only ever see the
classes in this module.

Usage:
    from payments.exceptions import StripeInvalidAccountError

    try:
        StripeAdapter.create_checkout_session(params)
    except StripeInvalidAccountError:
        return ServiceResult.failure(
            "Seller account is not properly set up for payments",
            error_code="SELLER_ACCOUNT_INVALID",
        )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """Base exception for payment domain errors."""

    default_error_code: str = "PAYMENT_ERROR"
    status_code: int = 400


class PaymentNotFoundError(PaymentError):
    """
    Raised when a charge or checkout session cannot be found.

    Example:
        raise PaymentNotFoundError(
            "Session not found",
            details={"session_id": session_id},
        )
    """

    default_error_code: str = "PAYMENT_NOT_FOUND"
    status_code: int = 404


class PaymentValidationError(PaymentError):
    """Raised when checkout input fails a payment rule (amount floor, missing account)."""

    default_error_code: str = "PAYMENT_VALIDATION_ERROR"
    status_code: int = 400


class PaymentProcessingError(PaymentError):
    """Raised when a payment operation fails after validation."""

    default_error_code: str = "PAYMENT_PROCESSING_ERROR"
    status_code: int = 500


# =============================================================================
# Stripe Exceptions
# =============================================================================


class StripeError(PaymentProcessingError):
    """
    Base exception for translated Stripe errors.

    Attributes:
        stripe_code: Stripe's error code (e.g. "account_invalid")
        is_retryable: Whether the failure is transient. Nothing in this
            project retries automatically; the flag is informational for
            callers and logs.
    """

    default_error_code: str = "STRIPE_ERROR"
    status_code: int = 502
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if stripe_code:
            details["stripe_code"] = stripe_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code


class StripeInvalidAccountError(StripeError):
    """
    The connected account cannot be used.

    Raised when the account id does not exist, was deauthorized, or is not
    allowed to take charges yet.
    """

    default_error_code: str = "INVALID_ACCOUNT"
    status_code: int = 400


class StripeResourceMissingError(StripeError):
    """A Stripe object (checkout session, account) was not found."""

    default_error_code: str = "RESOURCE_MISSING"
    status_code: int = 404


class StripeInvalidRequestError(StripeError):
    """Invalid parameters or an authentication problem with the API key."""

    default_error_code: str = "INVALID_REQUEST"


class StripeRateLimitError(StripeError):
    """Stripe rate limit hit."""

    default_error_code: str = "RATE_LIMITED"
    status_code: int = 429
    is_retryable: bool = True


class StripeAPIUnavailableError(StripeError):
    """Network failure or a 5xx from Stripe."""

    default_error_code: str = "API_UNAVAILABLE"
    is_retryable: bool = True
