"""
Pytest fixtures for Stripe adapter tests.

Provides mock Stripe SDK resources and error instances so the adapter
can be exercised without network access.
"""

from unittest.mock import patch

import pytest
import stripe

from payments.tests.factories import (
    stripe_account,
    stripe_account_link,
    stripe_checkout_session,
)


# =============================================================================
# Stripe SDK Mocks
# =============================================================================


@pytest.fixture(autouse=True)
def mock_stripe_http_client():
    """Replace stripe.RequestsClient so no HTTP client is built."""
    with patch("stripe.RequestsClient") as mock:
        yield mock


@pytest.fixture
def mock_stripe_account():
    """Mock stripe.Account API."""
    with patch("stripe.Account") as mock:
        mock.create.return_value = stripe_account(id="acct_1New")
        mock.retrieve.return_value = stripe_account(
            id="acct_1Seller",
            charges_enabled=True,
            payouts_enabled=True,
            details_submitted=True,
            capabilities={"card_payments": "active", "transfers": "active"},
        )
        yield mock


@pytest.fixture
def mock_stripe_account_link():
    """Mock stripe.AccountLink API."""
    with patch("stripe.AccountLink") as mock:
        mock.create.return_value = stripe_account_link()
        yield mock


@pytest.fixture
def mock_stripe_checkout_session():
    """Mock stripe.checkout.Session API."""
    with patch("stripe.checkout.Session") as mock:
        mock.create.return_value = stripe_checkout_session()
        mock.retrieve.return_value = stripe_checkout_session(
            payment_status="paid",
            status="complete",
            payment_intent="pi_test_123",
            metadata={"postId": "abc"},
        )
        yield mock


# =============================================================================
# Stripe Error Instances
# =============================================================================


@pytest.fixture
def account_invalid_error():
    return stripe.InvalidRequestError(
        message="The provided key does not have access to account 'acct_1Gone'",
        param="stripe_account",
        code="account_invalid",
    )


@pytest.fixture
def resource_missing_error():
    return stripe.InvalidRequestError(
        message="No such checkout.session: 'cs_test_missing'",
        param="id",
        code="resource_missing",
    )


@pytest.fixture
def invalid_request_error():
    return stripe.InvalidRequestError(
        message="Invalid integer: abc",
        param="unit_amount",
        code="parameter_invalid_integer",
    )


@pytest.fixture
def permission_error():
    return stripe.PermissionError(message="Not allowed for this platform")


@pytest.fixture
def rate_limit_error():
    return stripe.RateLimitError(message="Too many requests")


@pytest.fixture
def api_connection_error():
    return stripe.APIConnectionError(message="Network error")


@pytest.fixture
def api_error():
    return stripe.APIError(message="Internal server error")


@pytest.fixture
def authentication_error():
    return stripe.AuthenticationError(message="Invalid API key")
