"""
Pytest fixtures for analytics tests.
"""

import pytest
from freezegun import freeze_time

from authentication.tests.factories import UserFactory
from marketplace.models import ListingStatus
from marketplace.tests.factories import ListingFactory
from payments.state_machines import DirectChargeState
from payments.tests.factories import ConnectedAccountFactory, DirectChargeFactory


@pytest.fixture
def sales_data(db):
    """
    Two sellers and their sales.

    Alice (acct_1Alice) has two electronics listings, one sold through a
    succeeded $100 charge. Bob (acct_1Bob) has one furniture listing with a
    pending $50 charge.
    """
    alice = UserFactory(email="alice@example.com")
    bob = UserFactory(email="bob@example.com")
    ConnectedAccountFactory(user=alice, stripe_account_id="acct_1Alice", charges_enabled=True)
    ConnectedAccountFactory(user=bob, stripe_account_id="acct_1Bob", charges_enabled=True)

    sold = ListingFactory(
        seller=alice,
        seller_stripe_account_id="acct_1Alice",
        category="electronics",
        status=ListingStatus.SOLD,
    )
    ListingFactory(
        seller=alice, seller_stripe_account_id="acct_1Alice", category="electronics"
    )
    couch = ListingFactory(
        seller=bob, seller_stripe_account_id="acct_1Bob", category="furniture"
    )

    with freeze_time("2024-03-01 12:00:00"):
        DirectChargeFactory(
            connected_account_id="acct_1Alice",
            amount=10000,
            application_fee_amount=300,
            status=DirectChargeState.SUCCEEDED,
            listing=sold,
        )
    with freeze_time("2024-03-02 12:00:00"):
        DirectChargeFactory(
            connected_account_id="acct_1Bob",
            amount=5000,
            application_fee_amount=150,
            status=DirectChargeState.PENDING,
            listing=couch,
        )
