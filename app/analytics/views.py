"""
Analytics API views.

Endpoints:
    GET  /api/v1/analytics/?action=summary|analytics|sellers|categories|sync
    POST /api/v1/analytics/                  {"action": "create_test_transaction", "data": {...}}
    POST /api/v1/analytics/refresh-views/    Rebuild the reporting views (admin only)
"""

from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from analytics.serializers import AnalyticsActionSerializer
from analytics.services import AnalyticsService
from payments.serializers import DirectChargeSerializer
from payments.services import TransactionSyncService

GET_ACTIONS = ("summary", "analytics", "sellers", "categories", "sync")


def invalid_action() -> Response:
    return Response({"error": "Invalid action"}, status=status.HTTP_400_BAD_REQUEST)


class AnalyticsView(APIView):
    """
    Marketplace reporting.

    GET dispatches on ``action`` (default ``summary``). POST only supports
    ``create_test_transaction`` and is limited to staff.
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAdminUser()]
        return [IsAuthenticated()]

    @extend_schema(
        operation_id="get_analytics",
        summary="Get marketplace analytics",
        tags=["Analytics"],
        parameters=[
            OpenApiParameter(
                name="action",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                enum=list(GET_ACTIONS),
                required=False,
            )
        ],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        action = request.query_params.get("action") or "summary"
        if action not in GET_ACTIONS:
            return invalid_action()
        return getattr(self, f"_get_{action}")()

    def _get_summary(self):
        result = AnalyticsService.transaction_summary()
        return Response({"success": True, "summary": result.data})

    def _get_analytics(self):
        result = AnalyticsService.marketplace_analytics()
        if not result.success:
            return self._fetch_failed()
        return Response(
            {"success": True, "analytics": result.data, "total_days": len(result.data)}
        )

    def _get_sellers(self):
        result = AnalyticsService.seller_performance()
        if not result.success:
            return self._fetch_failed()
        return Response(
            {"success": True, "sellers": result.data, "total_sellers": len(result.data)}
        )

    def _get_categories(self):
        result = AnalyticsService.category_performance()
        if not result.success:
            return self._fetch_failed()
        return Response(
            {
                "success": True,
                "categories": result.data,
                "total_categories": len(result.data),
            }
        )

    def _get_sync(self):
        result = TransactionSyncService.sync_pending_charges()
        return Response(
            {
                "success": True,
                "message": "Stripe data synchronized successfully",
                "timestamp": timezone.now().isoformat(),
                **result.data,
            }
        )

    @staticmethod
    def _fetch_failed():
        return Response(
            {"error": "Failed to fetch analytics data"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @extend_schema(
        operation_id="create_test_transaction",
        summary="Create a test transaction",
        tags=["Analytics"],
        request=AnalyticsActionSerializer,
        responses={201: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        serializer = AnalyticsActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if serializer.validated_data["action"] != "create_test_transaction":
            return invalid_action()

        result = AnalyticsService.create_test_transaction(
            serializer.validated_data.get("data")
        )
        return Response(
            {
                "success": True,
                "message": "Test transaction created successfully",
                "transaction": DirectChargeSerializer(result.data).data,
            },
            status=status.HTTP_201_CREATED,
        )


class RefreshViewsView(APIView):
    """
    Rebuild the reporting views and check that each answers a query.

    POST /api/v1/analytics/refresh-views/

    Returns:
        {
            "success": true,
            "message": "Analytics views updated successfully",
            "test_results": {"marketplace_analytics": "OK", ...},
            "sample_data": {"analytics_count": 1, ...}
        }
    """

    permission_classes = [IsAdminUser]

    @extend_schema(
        operation_id="refresh_analytics_views",
        summary="Refresh reporting views",
        tags=["Analytics"],
        request=None,
        responses={200: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        result = AnalyticsService.refresh_views()
        return Response(
            {
                "success": True,
                "message": "Analytics views updated successfully",
                **result.data,
            }
        )
