"""
Payments app for Stripe Connect marketplace payments.

This app handles:
- Seller onboarding to Stripe Connect Express accounts
- Account status reconciliation
- Checkout sessions as direct charges with a platform fee
- Settlement of paid sessions and listing sale

Related apps:
    - authentication: User model for account ownership
    - marketplace: Listings that charges pay for

Usage:
    from payments.services import CheckoutService

    result = CheckoutService.complete_session(session_id)
"""
