"""
Payment adapters for external services.

All Stripe API calls go through StripeAdapter for consistent error
translation, timeouts and logging.

Usage:
    from payments.adapters import StripeAdapter

    account = StripeAdapter.retrieve_account("acct_1234")
    if account.charges_enabled:
        ...
"""

from payments.adapters.stripe_adapter import (
    AccountLinkResult,
    CheckoutSessionResult,
    ConnectedAccountResult,
    CreateCheckoutSessionParams,
    StripeAdapter,
)

__all__ = [
    "AccountLinkResult",
    "CheckoutSessionResult",
    "ConnectedAccountResult",
    "CreateCheckoutSessionParams",
    "StripeAdapter",
]
