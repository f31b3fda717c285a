"""
DRF views for payments app.

Endpoints:
    POST /api/v1/payments/connect/                         Start seller onboarding
    GET  /api/v1/payments/connect/status/?account_id=      Live account status
    POST /api/v1/payments/connect/disconnect/              Forget an account locally
    POST /api/v1/payments/connect/refresh-link/            New onboarding link
    POST /api/v1/payments/checkout-session/                Create a checkout session
    GET  /api/v1/payments/checkout-session/{session_id}/   Fetch and settle a session
    POST /api/v1/payments/transactions/sync/               Settle paid pending charges
    POST /api/v1/payments/transactions/{id}/link-listing/  Link a charge to a listing

Security:
    - Connect endpoints act on the authenticated user's accounts
    - Checkout endpoints are open: buyers arrive from listing pages and
      Stripe redirects, and completion only mirrors what Stripe reports
    - Linking a transaction is a staff repair operation
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import (
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    ValidationError,
    exception_for_result,
)
from payments.exceptions import (
    PaymentNotFoundError,
    PaymentProcessingError,
    PaymentValidationError,
)
from payments.serializers import (
    AccountIdSerializer,
    CheckoutSessionCreateSerializer,
    CheckoutSessionResponseSerializer,
    DirectChargeSerializer,
    LinkListingSerializer,
)
from payments.services import CheckoutService, ConnectService, TransactionSyncService


# Service error codes mapped to application errors. Anything unlisted is a
# translated Stripe failure and is reported as a bad gateway.
ERROR_EXCEPTIONS = {
    "MISSING_REQUIRED_FIELDS": ValidationError,
    "MISSING_ACCOUNT_ID": PaymentValidationError,
    "AMOUNT_TOO_SMALL": PaymentValidationError,
    "SELLER_ACCOUNT_INVALID": PaymentValidationError,
    "ACCOUNT_NOT_OWNED": PermissionDeniedError,
    "CONNECTED_ACCOUNT_NOT_FOUND": NotFoundError,
    "LISTING_NOT_FOUND": NotFoundError,
    "SESSION_NOT_FOUND": PaymentNotFoundError,
    "CHARGE_NOT_FOUND": PaymentNotFoundError,
    "CHECKOUT_SESSION_FAILED": PaymentProcessingError,
    "SESSION_RETRIEVE_FAILED": PaymentProcessingError,
    "RATE_LIMITED": RateLimitError,
}


def raise_for_failure(result) -> None:
    """Raise the application error for a failed ServiceResult."""
    if not result.success:
        raise exception_for_result(result, ERROR_EXCEPTIONS, default=ExternalServiceError)


# =============================================================================
# Connect
# =============================================================================


class ConnectAccountView(APIView):
    """
    Start Stripe Connect onboarding.

    POST /api/v1/payments/connect/

    Returns:
        {"success": true, "url": "https://connect.stripe.com/...", "accountId": "acct_..."}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="create_connect_account",
        summary="Start seller onboarding",
        tags=["Payments - Connect"],
        request=None,
        responses={200: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        result = ConnectService.create_account(request.user)
        raise_for_failure(result)
        return Response(result.data)


class ConnectStatusView(APIView):
    """
    Live status of the user's connected account.

    GET /api/v1/payments/connect/status/?account_id=acct_...

    Without ``account_id`` the user's newest account is reported. A user
    with no account gets ``status: "not_connected"``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_connect_status",
        summary="Get seller account status",
        tags=["Payments - Connect"],
        parameters=[
            OpenApiParameter(
                name="account_id",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
            )
        ],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        result = ConnectService.get_status(
            request.user, account_id=request.query_params.get("account_id") or None
        )
        raise_for_failure(result)
        return Response(result.data)


class ConnectDisconnectView(APIView):
    """
    Remove a connected account from this platform.

    POST /api/v1/payments/connect/disconnect/

    Request body:
        {"accountId": "acct_..."}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="disconnect_connect_account",
        summary="Disconnect seller account",
        tags=["Payments - Connect"],
        request=AccountIdSerializer,
        responses={200: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        serializer = AccountIdSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ConnectService.disconnect(
            request.user, serializer.validated_data.get("accountId", "")
        )
        raise_for_failure(result)
        return Response(result.data)


class ConnectRefreshLinkView(APIView):
    """
    Create a new onboarding link.

    POST /api/v1/payments/connect/refresh-link/

    Request body:
        {"accountId": "acct_..."}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="refresh_connect_account_link",
        summary="Refresh onboarding link",
        tags=["Payments - Connect"],
        request=AccountIdSerializer,
        responses={200: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        serializer = AccountIdSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ConnectService.refresh_link(
            request.user, serializer.validated_data.get("accountId", "")
        )
        raise_for_failure(result)
        return Response({"success": True, "url": result.data["url"]})


# =============================================================================
# Checkout
# =============================================================================


class CheckoutSessionCreateView(APIView):
    """
    Create a Stripe Checkout session for a listing.

    POST /api/v1/payments/checkout-session/

    Request body:
        {
            "accountId": "acct_...",
            "amount": 10000,
            "applicationFee": 300,
            "productInfo": {"name": "...", "description": "...", "postId": "..."}
        }

    Returns:
        {"sessionId": "cs_...", "url": "https://checkout.stripe.com/..."}
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="create_checkout_session",
        summary="Create checkout session",
        tags=["Payments - Checkout"],
        request=CheckoutSessionCreateSerializer,
        responses={200: CheckoutSessionResponseSerializer},
    )
    def post(self, request):
        serializer = CheckoutSessionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = CheckoutService.create_session(
            account_id=data.get("accountId"),
            amount=data.get("amount"),
            application_fee=data.get("applicationFee"),
            product_info=data.get("productInfo"),
            origin=request.headers.get("Origin"),
        )
        raise_for_failure(result)
        return Response(result.data)


class CheckoutSessionDetailView(APIView):
    """
    Fetch a checkout session and settle it if it has been paid.

    GET /api/v1/payments/checkout-session/{session_id}/

    Returns:
        {"session": {...Stripe Checkout Session...}}
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="get_checkout_session",
        summary="Get checkout session",
        tags=["Payments - Checkout"],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request, session_id):
        result = CheckoutService.complete_session(session_id)
        raise_for_failure(result)
        return Response(result.data)


# =============================================================================
# Transactions
# =============================================================================


class TransactionSyncView(APIView):
    """
    Settle every pending charge that Stripe reports as paid.

    POST /api/v1/payments/transactions/sync/

    Returns:
        {"success": true, "message": "...", "checked": n, "succeeded": n,
         "expired": n, "failed_lookups": n, "failed_updates": n}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="sync_transactions",
        summary="Sync pending transactions",
        tags=["Payments - Transactions"],
        request=None,
        responses={200: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        result = TransactionSyncService.sync_pending_charges()
        return Response(
            {
                "success": True,
                "message": "Transactions synced successfully",
                **result.data,
            }
        )


class TransactionLinkListingView(APIView):
    """
    Link a charge to the listing it paid for.

    POST /api/v1/payments/transactions/{id}/link-listing/

    Request body:
        {"listing_id": "<uuid>"}
    """

    permission_classes = [IsAdminUser]

    @extend_schema(
        operation_id="link_transaction_listing",
        summary="Link transaction to listing",
        tags=["Payments - Transactions"],
        request=LinkListingSerializer,
        responses={200: DirectChargeSerializer},
    )
    def post(self, request, charge_id):
        serializer = LinkListingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = CheckoutService.link_listing(
            charge_id, serializer.validated_data.get("listing_id", "")
        )
        raise_for_failure(result)

        return Response(
            {
                "success": True,
                "message": "Transaction updated with listing_id",
                "transaction": DirectChargeSerializer(result.data).data,
            }
        )
