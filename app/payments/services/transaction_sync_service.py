"""
Bulk settlement of pending charges.

Buyers do not always come back to the success page, so a charge can stay
pending after Stripe has taken the payment. The sync re-checks every
pending charge with the same logic as checkout completion.

Usage:
    from payments.services import TransactionSyncService

    result = TransactionSyncService.sync_pending_charges()
    result.data
    # {"checked": 12, "succeeded": 3, "expired": 2,
    #  "failed_lookups": 1, "failed_updates": 0}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import DatabaseError

from core.services import BaseService, ServiceResult
from payments.exceptions import StripeError
from payments.models import DirectCharge
from payments.services.checkout_service import CheckoutService
from payments.state_machines import DirectChargeState

if TYPE_CHECKING:
    from typing import Any


class TransactionSyncService(BaseService):
    """Reconciles pending DirectCharge rows against Stripe."""

    @classmethod
    def sync_pending_charges(cls, limit: int | None = None) -> ServiceResult[dict[str, Any]]:
        """
        Settle every pending charge whose session Stripe reports as paid,
        and fail those whose session expired.

        A failed lookup or local update is logged and counted; the
        remaining charges are still checked.

        Args:
            limit: Check at most this many charges, oldest first

        Returns:
            ServiceResult with {"checked", "succeeded", "expired",
            "failed_lookups", "failed_updates"}
        """
        charges = (
            DirectCharge.objects.pending()
            .exclude(checkout_session_id__isnull=True)
            .exclude(checkout_session_id="")
            .order_by("created_at")
        )
        if limit is not None:
            charges = charges[:limit]

        summary = {
            "checked": 0,
            "succeeded": 0,
            "expired": 0,
            "failed_lookups": 0,
            "failed_updates": 0,
        }
        logger = cls.get_logger()

        for charge in charges:
            summary["checked"] += 1
            context = {
                "charge_id": str(charge.pk),
                "session_id": charge.checkout_session_id,
            }
            try:
                session = CheckoutService.retrieve_for_charge(charge)
            except StripeError as e:
                summary["failed_lookups"] += 1
                logger.warning(
                    f"Could not retrieve session for charge {charge.pk}: {e}",
                    extra=context,
                )
                continue

            try:
                outcome = CheckoutService.apply_session_outcome(charge.pk, session)
            except DatabaseError:
                summary["failed_updates"] += 1
                logger.error(
                    f"Failed to update charge {charge.pk}", extra=context, exc_info=True
                )
                continue

            if outcome == DirectChargeState.SUCCEEDED:
                summary["succeeded"] += 1
            elif outcome == DirectChargeState.FAILED:
                summary["expired"] += 1

        logger.info("Transaction sync finished", extra=summary)
        return ServiceResult.success(summary)
