"""
URL configuration for payments API.

URL Structure:
    Connect:
        /connect/                                 POST
        /connect/status/                          GET
        /connect/disconnect/                      POST
        /connect/refresh-link/                    POST

    Checkout:
        /checkout-session/                        POST
        /checkout-session/{session_id}/           GET

    Transactions:
        /transactions/sync/                       POST
        /transactions/{id}/link-listing/          POST

All URLs are prefixed with /api/v1/payments/ in the main URL configuration.
"""

from django.urls import path

from payments.views import (
    CheckoutSessionCreateView,
    CheckoutSessionDetailView,
    ConnectAccountView,
    ConnectDisconnectView,
    ConnectRefreshLinkView,
    ConnectStatusView,
    TransactionLinkListingView,
    TransactionSyncView,
)

app_name = "payments"

urlpatterns = [
    # Stripe Connect onboarding
    path("connect/", ConnectAccountView.as_view(), name="connect"),
    path("connect/status/", ConnectStatusView.as_view(), name="connect-status"),
    path(
        "connect/disconnect/",
        ConnectDisconnectView.as_view(),
        name="connect-disconnect",
    ),
    path(
        "connect/refresh-link/",
        ConnectRefreshLinkView.as_view(),
        name="connect-refresh-link",
    ),
    # Checkout
    path(
        "checkout-session/",
        CheckoutSessionCreateView.as_view(),
        name="checkout-session",
    ),
    path(
        "checkout-session/<str:session_id>/",
        CheckoutSessionDetailView.as_view(),
        name="checkout-session-detail",
    ),
    # Transactions
    path(
        "transactions/sync/",
        TransactionSyncView.as_view(),
        name="transactions-sync",
    ),
    path(
        "transactions/<uuid:charge_id>/link-listing/",
        TransactionLinkListingView.as_view(),
        name="transactions-link-listing",
    ),
]
