"""
Analytics business logic.

The transaction summary is computed with the ORM. Daily, seller and
category figures are read from the reporting views defined in
analytics.reporting_views; this module only plumbs parameters and
reshapes rows.

Usage:
    from analytics.services import AnalyticsService

    result = AnalyticsService.seller_performance()
    if result.success:
        rows = result.data
"""

from __future__ import annotations

import time
from datetime import timedelta
from typing import TYPE_CHECKING

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DatabaseError, connection, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone
from django.utils.crypto import get_random_string

from analytics.reporting_views import (
    CATEGORY_PERFORMANCE,
    MARKETPLACE_ANALYTICS,
    SELLER_PERFORMANCE,
    VIEW_NAMES,
    ReportingTables,
    view_statements,
)
from core.services import BaseService, ServiceResult
from marketplace.models import Listing
from payments.models import ConnectedAccount, DirectCharge
from payments.state_machines import DirectChargeState

if TYPE_CHECKING:
    from typing import Any


TEST_ACCOUNT_ID = "acct_test_demo"
TEST_AMOUNT = 10000
TEST_FEE = 300
TEST_DESCRIPTION = "Test transaction"


def _fetch_dicts(sql: str, params: list | None = None) -> list[dict[str, Any]]:
    with connection.cursor() as cursor:
        cursor.execute(sql, params or [])
        columns = [col[0] for col in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]


class AnalyticsService(BaseService):
    """Marketplace reporting."""

    # =========================================================================
    # Transaction Summary
    # =========================================================================

    @classmethod
    def transaction_summary(cls, days_back: int | None = None) -> ServiceResult[dict[str, Any]]:
        """
        Charge totals for the last ``days_back`` days.

        Volume, fees and average are in cents and count succeeded charges
        only. ``successful_rate`` is the percentage of charges in the
        window that succeeded.
        """
        days_back = days_back or settings.ANALYTICS_SUMMARY_DAYS
        since = timezone.now() - timedelta(days=days_back)
        succeeded = Q(status=DirectChargeState.SUCCEEDED)

        totals = DirectCharge.objects.created_since(since).aggregate(
            total=Count("id"),
            succeeded=Count("id", filter=succeeded),
            pending=Count("id", filter=Q(status=DirectChargeState.PENDING)),
            volume=Sum("amount", filter=succeeded),
            fees=Sum("application_fee_amount", filter=succeeded),
        )

        transaction_count = totals["succeeded"]
        total_volume = totals["volume"] or 0
        successful_rate = (
            round(transaction_count * 100 / totals["total"], 2) if totals["total"] else 0
        )
        average_transaction = (
            round(total_volume / transaction_count, 2) if transaction_count else 0
        )

        return ServiceResult.success(
            {
                "period": f"Last {days_back} days",
                "transaction_count": transaction_count,
                "total_volume": total_volume,
                "platform_fees": totals["fees"] or 0,
                "successful_rate": successful_rate,
                "average_transaction": average_transaction,
                "total_transactions": totals["total"],
                "successful_transactions": transaction_count,
                "pending_transactions": totals["pending"],
            }
        )

    # =========================================================================
    # Reporting Views
    # =========================================================================

    @classmethod
    def marketplace_analytics(cls, limit: int | None = None) -> ServiceResult[list[dict]]:
        """Daily rows from marketplace_analytics, newest first."""
        limit = limit or settings.ANALYTICS_DAILY_LIMIT
        return cls._read_view(
            f"SELECT * FROM {MARKETPLACE_ANALYTICS} "
            "ORDER BY transaction_date DESC LIMIT %s",
            [limit],
        )

    @classmethod
    def seller_performance(cls) -> ServiceResult[list[dict]]:
        """Rows from seller_performance, highest revenue first."""
        return cls._read_view(
            f"SELECT * FROM {SELLER_PERFORMANCE} ORDER BY actual_revenue DESC"
        )

    @classmethod
    def category_performance(cls) -> ServiceResult[list[dict]]:
        """Rows from category_performance, highest revenue first."""
        return cls._read_view(
            f"SELECT * FROM {CATEGORY_PERFORMANCE} ORDER BY actual_revenue DESC"
        )

    @classmethod
    def _read_view(cls, sql: str, params: list | None = None) -> ServiceResult[list[dict]]:
        try:
            return ServiceResult.success(_fetch_dicts(sql, params))
        except DatabaseError as e:
            return cls.handle_exception(e, "reading reporting view")

    # =========================================================================
    # View Refresh
    # =========================================================================

    @staticmethod
    def reporting_tables() -> ReportingTables:
        return ReportingTables.from_models(
            Listing, DirectCharge, ConnectedAccount, get_user_model()
        )

    @classmethod
    def refresh_views(cls) -> ServiceResult[dict[str, Any]]:
        """
        Re-issue the view definitions, then query each view.

        A view that fails to rebuild or to answer the query is reported as
        "Error"; the others are still refreshed.
        """
        logger = cls.get_logger()
        statements = view_statements(connection.vendor, cls.reporting_tables())

        for name, sql_list in statements.items():
            try:
                with transaction.atomic(), connection.cursor() as cursor:
                    for sql in sql_list:
                        cursor.execute(sql)
            except DatabaseError:
                logger.error(f"Failed to refresh view {name}", exc_info=True)

        test_results = {}
        sample_counts = {}
        for name in VIEW_NAMES:
            try:
                with transaction.atomic():
                    rows = _fetch_dicts(f"SELECT * FROM {name} LIMIT 1")
                test_results[name] = "OK"
                sample_counts[name] = len(rows)
            except DatabaseError:
                logger.warning(f"Reporting view {name} did not answer", exc_info=True)
                test_results[name] = "Error"
                sample_counts[name] = 0

        logger.info("Reporting views refreshed", extra={"test_results": test_results})
        return ServiceResult.success(
            {
                "test_results": test_results,
                "sample_data": {
                    "analytics_count": sample_counts[MARKETPLACE_ANALYTICS],
                    "seller_count": sample_counts[SELLER_PERFORMANCE],
                    "category_count": sample_counts[CATEGORY_PERFORMANCE],
                },
            }
        )

    # =========================================================================
    # Test Data
    # =========================================================================

    @classmethod
    def create_test_transaction(
        cls, data: dict[str, Any] | None = None
    ) -> ServiceResult[DirectCharge]:
        """
        Insert a synthetic charge for exercising the reports.

        Missing or empty fields fall back to a $100 succeeded charge with a
        $3 fee on acct_test_demo.
        """
        data = data or {}
        stamp = f"{int(time.time() * 1000)}{get_random_string(6)}"
        charge = DirectCharge.objects.create(
            connected_account_id=data.get("account_id") or TEST_ACCOUNT_ID,
            amount=data.get("amount") or TEST_AMOUNT,
            application_fee_amount=data.get("fee") or TEST_FEE,
            currency="usd",
            description=data.get("description") or TEST_DESCRIPTION,
            status=data.get("status") or DirectChargeState.SUCCEEDED,
            payment_intent_id=f"pi_test_{stamp}",
            checkout_session_id=f"cs_test_{stamp}",
            metadata={"test": True, "created_via_api": True, **(data.get("metadata") or {})},
        )
        cls.get_logger().info(
            f"Test transaction {charge.pk} created",
            extra={"charge_id": str(charge.pk), "amount": charge.amount},
        )
        return ServiceResult.success(charge)
