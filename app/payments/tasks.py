"""
Celery tasks for payment processing.

This module provides async tasks for:
- Settling pending charges that Stripe reports as paid

Usage:
    from payments.tasks import sync_pending_charges

    # Queue a sync (also suitable for a periodic celery-beat entry)
    sync_pending_charges.delay()
"""

from __future__ import annotations

import logging

from celery import shared_task

from payments.services import TransactionSyncService

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Charges checked per run; the rest are picked up by the next run
SYNC_BATCH_SIZE = 500


# =============================================================================
# Transaction Sync Tasks
# =============================================================================


@shared_task
def sync_pending_charges(limit: int = SYNC_BATCH_SIZE) -> dict:
    """
    Settle pending charges off-request.

    Runs the same sync as POST /api/v1/payments/transactions/sync/.
    Individual Stripe failures are counted, not raised, so the task
    itself does not retry.

    Args:
        limit: Maximum number of pending charges to check

    Returns:
        Dict with checked, succeeded, expired, failed_lookups and
        failed_updates counts
    """
    logger.info("Starting pending charge sync", extra={"limit": limit})

    result = TransactionSyncService.sync_pending_charges(limit=limit)

    logger.info(
        f"Pending charge sync done: {result.data['succeeded']} settled",
        extra=result.data,
    )
    return result.data
