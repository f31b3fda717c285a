"""
Pytest fixtures for payment tests.

Stripe is never called: the SDK resources used by StripeAdapter are
patched per test and the HTTP client is replaced for every test in this
package.

Usage:
    def test_status(seller_client, mock_stripe_account):
        mock_stripe_account.retrieve.return_value = stripe_account(
            details_submitted=True, charges_enabled=True
        )
        response = seller_client.get("/api/v1/payments/connect/status/")
"""

from unittest.mock import patch

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import UserFactory
from marketplace.tests.factories import ListingFactory
from payments.tests.factories import (
    ConnectedAccountFactory,
    DirectChargeFactory,
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
        mock.create.return_value = stripe_account()
        mock.retrieve.return_value = stripe_account()
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
        mock.retrieve.return_value = stripe_checkout_session()
        yield mock


# =============================================================================
# User and Account Fixtures
# =============================================================================


@pytest.fixture
def seller(db):
    return UserFactory(email="seller@example.com")


@pytest.fixture
def seller_client(seller):
    client = APIClient()
    client.force_authenticate(user=seller)
    return client


@pytest.fixture
def connected_account(seller):
    """Seller's account before onboarding is finished."""
    return ConnectedAccountFactory(user=seller, stripe_account_id="acct_1Seller")


@pytest.fixture
def active_connected_account(seller):
    return ConnectedAccountFactory(
        user=seller,
        stripe_account_id="acct_1Active",
        details_submitted=True,
        charges_enabled=True,
        payouts_enabled=True,
    )


# =============================================================================
# Charge Fixtures
# =============================================================================


@pytest.fixture
def listing(seller):
    return ListingFactory(
        seller=seller,
        seller_email=seller.email,
        seller_stripe_account_id="acct_1Seller",
    )


@pytest.fixture
def pending_charge(listing):
    """Pending charge on a real account for ``listing``."""
    return DirectChargeFactory(
        connected_account_id="acct_1Seller",
        checkout_session_id="cs_test_real",
        listing=listing,
        metadata={"post_id": str(listing.id), "product_name": listing.title},
    )


@pytest.fixture
def pending_test_charge(listing):
    """Pending charge on a synthetic acct_test_ account."""
    return DirectChargeFactory(
        connected_account_id="acct_test_abcdefghij",
        checkout_session_id="cs_test_platform",
        listing=listing,
    )
