"""
Tests for payment Celery tasks.

Tasks are called directly; the broker is not involved.
"""

from unittest.mock import patch

from core.services import ServiceResult
from payments.state_machines import DirectChargeState
from payments.tasks import SYNC_BATCH_SIZE, sync_pending_charges
from payments.tests.factories import DirectChargeFactory, stripe_checkout_session

SYNC_NOTHING_TO_DO = {
    "checked": 0,
    "succeeded": 0,
    "expired": 0,
    "failed_lookups": 0,
    "failed_updates": 0,
}


class TestSyncPendingChargesTask:
    """Tests for sync_pending_charges."""

    def test_settles_paid_charges(self, db, mock_stripe_checkout_session):
        charge = DirectChargeFactory(checkout_session_id="cs_test_task")
        mock_stripe_checkout_session.retrieve.return_value = stripe_checkout_session(
            id="cs_test_task", payment_status="paid"
        )

        summary = sync_pending_charges()

        assert summary == {
            "checked": 1,
            "succeeded": 1,
            "expired": 0,
            "failed_lookups": 0,
            "failed_updates": 0,
        }
        charge.refresh_from_db()
        assert charge.status == DirectChargeState.SUCCEEDED

    def test_default_batch_size(self, db):
        with patch(
            "payments.tasks.TransactionSyncService.sync_pending_charges",
            return_value=ServiceResult.success(SYNC_NOTHING_TO_DO),
        ) as mock_sync:
            sync_pending_charges()

        mock_sync.assert_called_once_with(limit=SYNC_BATCH_SIZE)

    def test_custom_limit(self, db):
        with patch(
            "payments.tasks.TransactionSyncService.sync_pending_charges",
            return_value=ServiceResult.success(SYNC_NOTHING_TO_DO),
        ) as mock_sync:
            sync_pending_charges(limit=10)

        mock_sync.assert_called_once_with(limit=10)
