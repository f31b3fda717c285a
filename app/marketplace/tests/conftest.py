"""
Fixtures for marketplace tests.

Usage:
    def test_mark_sold(seller_client, listing):
        response = seller_client.post(f"/api/v1/listings/{listing.id}/mark-sold/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import UserFactory
from marketplace.tests.factories import ListingFactory


@pytest.fixture
def seller(db):
    return UserFactory(email="seller@example.com")


@pytest.fixture
def buyer(db):
    return UserFactory(email="buyer@example.com")


@pytest.fixture
def listing(seller):
    """Available listing owned by ``seller``."""
    return ListingFactory(seller=seller, seller_email=seller.email)


@pytest.fixture
def seller_client(seller):
    client = APIClient()
    client.force_authenticate(user=seller)
    return client


@pytest.fixture
def buyer_client(buyer):
    client = APIClient()
    client.force_authenticate(user=buyer)
    return client
