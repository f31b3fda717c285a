"""
Stripe API adapter for Connect onboarding and Checkout.

All Stripe calls go through StripeAdapter so that API configuration,
error translation and timing logs live in one place.

Features:
- Configurable timeout on every API call, no automatic retries
- Stripe SDK errors translated to payments.exceptions
- Structured logging with timing metrics
- Optional connected-account context (Stripe-Account header) per call

Configuration (via settings):
- STRIPE_SECRET_KEY: Stripe API secret key
- STRIPE_API_TIMEOUT_SECONDS: API call timeout (default: 10)
- STRIPE_MAX_RETRIES: Network retries inside the SDK (default: 0)

Usage:
    from payments.adapters import StripeAdapter, CreateCheckoutSessionParams

    account = StripeAdapter.create_express_account()
    link = StripeAdapter.create_account_link(
        account.id,
        refresh_url="https://shop.example.com/profile?refresh=true",
        return_url="https://shop.example.com/profile?connected=true",
    )

    session = StripeAdapter.create_checkout_session(
        CreateCheckoutSessionParams(
            amount_cents=10000,
            product_name="Road bike",
            product_description="Purchase from marketplace",
            success_url="...",
            cancel_url="...",
            application_fee_cents=300,
            stripe_account="acct_1234",
        )
    )
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import stripe
from django.conf import settings

from payments.exceptions import (
    StripeAPIUnavailableError,
    StripeInvalidAccountError,
    StripeInvalidRequestError,
    StripeRateLimitError,
    StripeResourceMissingError,
)

# Stripe error codes that mean the connected account itself is unusable
INVALID_ACCOUNT_CODES = frozenset(
    {"account_invalid", "account_inactive", "account_country_invalid_address"}
)


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CreateCheckoutSessionParams:
    """
    Parameters for creating a one-item Checkout Session.

    Attributes:
        amount_cents: Line item unit amount (quantity is always 1)
        product_name: Line item product name
        product_description: Line item product description
        success_url: Redirect after payment ({CHECKOUT_SESSION_ID} is expanded by Stripe)
        cancel_url: Redirect when the buyer backs out
        currency: ISO 4217 currency code (default: 'usd')
        application_fee_cents: Platform fee, only sent with a connected account
        stripe_account: Connected account context; None creates a
            platform-level session
        metadata: Key-value pairs attached to the session
    """

    amount_cents: int
    product_name: str
    product_description: str
    success_url: str
    cancel_url: str
    currency: str = "usd"
    application_fee_cents: int | None = None
    stripe_account: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.amount_cents <= 0:
            raise ValueError("amount_cents must be positive")
        if not self.currency:
            raise ValueError("currency is required")
        if self.application_fee_cents is not None and self.stripe_account is None:
            raise ValueError("application_fee_cents requires stripe_account")


@dataclass
class ConnectedAccountResult:
    """
    Result from Stripe Account operations.

    Attributes:
        id: Account ID (acct_xxx)
        charges_enabled: Whether the account can take charges
        payouts_enabled: Whether the account can receive payouts
        details_submitted: Whether onboarding details were submitted
        capabilities: Capability name -> status ("active", "inactive", ...)
        requirements: Outstanding verification requirements
        business_profile: Public business details
        raw_response: Full Stripe response dict
    """

    id: str
    charges_enabled: bool = False
    payouts_enabled: bool = False
    details_submitted: bool = False
    capabilities: dict[str, Any] = field(default_factory=dict)
    requirements: dict[str, Any] = field(default_factory=dict)
    business_profile: dict[str, Any] = field(default_factory=dict)
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class AccountLinkResult:
    """Result from AccountLink creation: a single-use onboarding URL."""

    url: str
    expires_at: int | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class CheckoutSessionResult:
    """
    Result from Checkout Session operations.

    Attributes:
        id: Session ID (cs_xxx)
        url: Hosted checkout page URL (None once the session is complete)
        status: Session status (open, complete, expired)
        payment_status: paid, unpaid or no_payment_required
        payment_intent_id: PaymentIntent ID, whether Stripe returned the id
            or the expanded object
        amount_total: Total charged in cents
        metadata: Attached metadata
        raw_response: Full Stripe response dict
    """

    id: str
    url: str | None = None
    status: str | None = None
    payment_status: str | None = None
    payment_intent_id: str | None = None
    amount_total: int | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    raw_response: dict[str, Any] = field(default_factory=dict)


def _as_dict(value: Any) -> dict[str, Any]:
    """Plain dict from a StripeObject, a dict, or None."""
    if not value:
        return {}
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return dict(value)


def _payment_intent_id(value: Any) -> str | None:
    """payment_intent comes back as an id string unless expanded."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("id")
    return getattr(value, "id", None)


# =============================================================================
# Stripe Adapter
# =============================================================================


class StripeAdapter:
    """
    Adapter for Stripe API operations.

    All methods are classmethods; no instance state is kept.
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    @staticmethod
    def _configure_stripe() -> None:
        """Configure Stripe client with API key, timeout and retry policy."""
        stripe.api_key = settings.STRIPE_SECRET_KEY
        stripe.max_network_retries = getattr(settings, "STRIPE_MAX_RETRIES", 0)
        timeout = getattr(settings, "STRIPE_API_TIMEOUT_SECONDS", 10)
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)

    @classmethod
    def get_logger(cls) -> logging.Logger:
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    def _log_completed(
        cls, log_context: dict[str, Any], start_time: float, **fields: Any
    ) -> None:
        duration_ms = (time.time() - start_time) * 1000
        cls.get_logger().info(
            "Stripe operation completed",
            extra={**log_context, **fields, "duration_ms": duration_ms},
        )

    # =========================================================================
    # Connect Accounts
    # =========================================================================

    @classmethod
    def create_express_account(
        cls,
        country: str = "US",
        business_type: str = "individual",
        email: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> ConnectedAccountResult:
        """
        Create an Express connected account with card_payments and
        transfers capabilities requested.

        Raises:
            StripeInvalidRequestError: Invalid parameters or API key
            StripeAPIUnavailableError: Stripe unreachable
        """
        cls._configure_stripe()
        log_context = {
            "operation": "create_express_account",
            "country": country,
            "business_type": business_type,
        }

        start_time = time.time()
        cls.get_logger().info("Starting Stripe operation", extra=log_context)

        try:
            create_kwargs: dict[str, Any] = {
                "type": "express",
                "country": country,
                "capabilities": {
                    "card_payments": {"requested": True},
                    "transfers": {"requested": True},
                },
                "business_type": business_type,
            }
            if email:
                create_kwargs["email"] = email
            if metadata:
                create_kwargs["metadata"] = metadata

            account = stripe.Account.create(**create_kwargs)

            cls._log_completed(log_context, start_time, account_id=account.id)
            return cls._account_result(account)

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)
            raise

    @classmethod
    def retrieve_account(cls, account_id: str) -> ConnectedAccountResult:
        """
        Retrieve live status for a connected account.

        Raises:
            StripeInvalidAccountError: Account does not exist or is not
                connected to this platform
        """
        cls._configure_stripe()
        log_context = {"operation": "retrieve_account", "account_id": account_id}

        start_time = time.time()
        cls.get_logger().info("Starting Stripe operation", extra=log_context)

        try:
            account = stripe.Account.retrieve(account_id)

            cls._log_completed(
                log_context,
                start_time,
                charges_enabled=account.charges_enabled,
                details_submitted=account.details_submitted,
            )
            return cls._account_result(account)

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)
            raise

    @classmethod
    def create_account_link(
        cls,
        account_id: str,
        refresh_url: str,
        return_url: str,
        link_type: str = "account_onboarding",
    ) -> AccountLinkResult:
        """
        Create a single-use onboarding link for a connected account.

        Raises:
            StripeInvalidAccountError: Account does not exist
        """
        cls._configure_stripe()
        log_context = {
            "operation": "create_account_link",
            "account_id": account_id,
            "link_type": link_type,
        }

        start_time = time.time()
        cls.get_logger().info("Starting Stripe operation", extra=log_context)

        try:
            link = stripe.AccountLink.create(
                account=account_id,
                refresh_url=refresh_url,
                return_url=return_url,
                type=link_type,
            )

            cls._log_completed(log_context, start_time)
            return AccountLinkResult(
                url=link.url,
                expires_at=link.expires_at,
                raw_response=link.to_dict(),
            )

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)
            raise

    # =========================================================================
    # Checkout Sessions
    # =========================================================================

    @classmethod
    def create_checkout_session(
        cls, params: CreateCheckoutSessionParams
    ) -> CheckoutSessionResult:
        """
        Create a hosted Checkout Session for a single item.

        With ``params.stripe_account`` the session is created on the
        connected account (direct charge) and the application fee is
        attached to the PaymentIntent. Without it the session belongs to
        the platform and no Stripe-Account header is sent.

        Raises:
            StripeInvalidAccountError: Connected account unusable
            StripeInvalidRequestError: Invalid parameters
            StripeAPIUnavailableError: Stripe unreachable
        """
        cls._configure_stripe()
        log_context = {
            "operation": "create_checkout_session",
            "amount_cents": params.amount_cents,
            "currency": params.currency,
            "stripe_account": params.stripe_account,
            "application_fee_cents": params.application_fee_cents,
        }

        start_time = time.time()
        cls.get_logger().info("Starting Stripe operation", extra=log_context)

        try:
            create_kwargs: dict[str, Any] = {
                "payment_method_types": ["card"],
                "line_items": [
                    {
                        "price_data": {
                            "currency": params.currency,
                            "product_data": {
                                "name": params.product_name,
                                "description": params.product_description,
                            },
                            "unit_amount": params.amount_cents,
                        },
                        "quantity": 1,
                    }
                ],
                "mode": "payment",
                "success_url": params.success_url,
                "cancel_url": params.cancel_url,
                "metadata": params.metadata,
            }
            if params.stripe_account:
                if params.application_fee_cents is not None:
                    create_kwargs["payment_intent_data"] = {
                        "application_fee_amount": params.application_fee_cents,
                    }
                create_kwargs["stripe_account"] = params.stripe_account

            session = stripe.checkout.Session.create(**create_kwargs)

            cls._log_completed(log_context, start_time, session_id=session.id)
            return cls._session_result(session)

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)
            raise

    @classmethod
    def retrieve_checkout_session(
        cls,
        session_id: str,
        stripe_account: str | None = None,
    ) -> CheckoutSessionResult:
        """
        Retrieve a Checkout Session, optionally under a connected account.

        Raises:
            StripeResourceMissingError: No such session
            StripeInvalidAccountError: Connected account unusable
        """
        cls._configure_stripe()
        log_context = {
            "operation": "retrieve_checkout_session",
            "session_id": session_id,
            "stripe_account": stripe_account,
        }

        start_time = time.time()
        cls.get_logger().info("Starting Stripe operation", extra=log_context)

        try:
            if stripe_account:
                session = stripe.checkout.Session.retrieve(
                    session_id, stripe_account=stripe_account
                )
            else:
                session = stripe.checkout.Session.retrieve(session_id)

            cls._log_completed(
                log_context, start_time, payment_status=session.payment_status
            )
            return cls._session_result(session)

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_stripe_error(e, log_context, duration_ms)
            raise

    # =========================================================================
    # Response Mapping
    # =========================================================================

    @staticmethod
    def _account_result(account: Any) -> ConnectedAccountResult:
        return ConnectedAccountResult(
            id=account.id,
            charges_enabled=bool(account.charges_enabled),
            payouts_enabled=bool(account.payouts_enabled),
            details_submitted=bool(account.details_submitted),
            capabilities=_as_dict(account.capabilities),
            requirements=_as_dict(account.requirements),
            business_profile=_as_dict(account.business_profile),
            raw_response=account.to_dict(),
        )

    @staticmethod
    def _session_result(session: Any) -> CheckoutSessionResult:
        return CheckoutSessionResult(
            id=session.id,
            url=session.url,
            status=session.status,
            payment_status=session.payment_status,
            payment_intent_id=_payment_intent_id(session.payment_intent),
            amount_total=session.amount_total,
            metadata=_as_dict(session.metadata),
            raw_response=session.to_dict(),
        )

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_stripe_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Stripe SDK exceptions to payments.exceptions.

        Raises:
            StripeInvalidAccountError: Connected account unusable
            StripeResourceMissingError: Object not found
            StripeInvalidRequestError: Invalid request or API key
            StripeRateLimitError: Rate limited
            StripeAPIUnavailableError: Network failure, 5xx or unknown error
        """
        logger = cls.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}
        stripe_code = getattr(error, "code", None)

        if isinstance(error, (stripe.InvalidRequestError, stripe.PermissionError)):
            logger.error(
                "Invalid request to Stripe",
                extra={**log_context, "stripe_code": stripe_code},
            )

            message = str(getattr(error, "user_message", None) or error)
            if stripe_code in INVALID_ACCOUNT_CODES or isinstance(
                error, stripe.PermissionError
            ):
                raise StripeInvalidAccountError(message, stripe_code=stripe_code)

            if stripe_code == "resource_missing":
                raise StripeResourceMissingError(message, stripe_code=stripe_code)

            raise StripeInvalidRequestError(message, stripe_code=stripe_code)

        elif isinstance(error, stripe.RateLimitError):
            logger.warning("Rate limited by Stripe", extra=log_context)
            raise StripeRateLimitError(
                "Stripe rate limit exceeded. Please retry.",
                stripe_code="rate_limit",
            )

        elif isinstance(error, stripe.APIConnectionError):
            logger.error(
                "Connection error to Stripe", extra=log_context, exc_info=True
            )
            raise StripeAPIUnavailableError(
                "Could not connect to Stripe. Please retry.",
                stripe_code="api_connection_error",
            )

        elif isinstance(error, stripe.AuthenticationError):
            logger.critical(
                "Stripe authentication failed - check API key", extra=log_context
            )
            raise StripeInvalidRequestError(
                "Stripe authentication failed",
                stripe_code="authentication_error",
            )

        elif isinstance(error, stripe.StripeError):
            if stripe_code in INVALID_ACCOUNT_CODES:
                logger.error(
                    "Connected account rejected by Stripe",
                    extra={**log_context, "stripe_code": stripe_code},
                )
                raise StripeInvalidAccountError(str(error), stripe_code=stripe_code)

            logger.error("Stripe API error", extra=log_context, exc_info=True)
            raise StripeAPIUnavailableError(
                f"Stripe service error: {getattr(error, 'user_message', None) or error}",
                stripe_code=stripe_code or "api_error",
            )

        else:
            logger.error(
                f"Unexpected error from Stripe: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise StripeAPIUnavailableError(
                f"Unexpected Stripe error: {error}",
                stripe_code="unknown_error",
            )
