"""
Payment services.

This module provides:
- ConnectService: Seller onboarding, account status, disconnect and links
- CheckoutService: Checkout session creation, completion and listing links
- TransactionSyncService: Settles pending charges that Stripe reports paid

Usage:
    from payments.services import CheckoutService

    result = CheckoutService.create_session(
        account_id="acct_1234",
        amount=10000,
        product_info={"name": "Road bike", "postId": str(listing.id)},
    )
    if not result.success:
        return Response(result.to_response(), status=400)
"""

from payments.services.checkout_service import CheckoutService
from payments.services.connect_service import (
    ConnectService,
    normalize_capability,
    not_connected_status,
)
from payments.services.transaction_sync_service import TransactionSyncService

__all__ = [
    "CheckoutService",
    "ConnectService",
    "TransactionSyncService",
    "normalize_capability",
    "not_connected_status",
]
