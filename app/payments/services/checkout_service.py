"""
Checkout session creation and completion.

Every purchase is a direct charge on the seller's connected account with
a platform application fee. Listings whose seller has not onboarded carry
a synthetic ``acct_test_`` id; those sessions are created on the platform
account instead, with no Stripe-Account context, so checkout still works
end to end in test mode.

Usage:
    from payments.services import CheckoutService

    result = CheckoutService.create_session(
        account_id=listing.seller_stripe_account_id,
        amount=10000,
        product_info={"name": "Road bike", "postId": str(listing.id)},
        origin="https://shop.example.com",
    )
    # result.data == {"sessionId": "cs_...", "url": "https://checkout.stripe.com/..."}

    # After the buyer returns from Stripe
    result = CheckoutService.complete_session(session_id)
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import DatabaseError, transaction

from core.services import BaseService, ServiceResult
from marketplace.models import Listing
from payments.adapters import CreateCheckoutSessionParams, StripeAdapter
from payments.exceptions import (
    StripeError,
    StripeInvalidAccountError,
    StripeResourceMissingError,
)
from payments.models import DirectCharge
from payments.services.connect_service import ConnectService
from payments.state_machines import DirectChargeState

if TYPE_CHECKING:
    from typing import Any

    from payments.adapters import CheckoutSessionResult


DEFAULT_PRODUCT_NAME = "Marketplace Item"
DEFAULT_PRODUCT_DESCRIPTION = "Purchase from marketplace"
DEFAULT_CHARGE_DESCRIPTION = "Marketplace purchase"


def _parse_uuid(value: Any) -> uuid.UUID | None:
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class CheckoutService(BaseService):
    """Stripe Checkout for marketplace purchases."""

    # =========================================================================
    # Fees
    # =========================================================================

    @staticmethod
    def calculate_application_fee(amount: int) -> int:
        """Platform fee in cents: PLATFORM_FEE_PERCENT of ``amount``, floored."""
        return amount * settings.PLATFORM_FEE_PERCENT // 100

    # =========================================================================
    # Session Creation
    # =========================================================================

    @classmethod
    def create_session(
        cls,
        account_id: str | None,
        amount: int | None,
        application_fee: int | None = None,
        product_info: dict[str, Any] | None = None,
        origin: str | None = None,
    ) -> ServiceResult[dict[str, Any]]:
        """
        Create a Checkout Session for one listing and record a pending charge.

        Args:
            account_id: Seller's connected account (or acct_test_ id)
            amount: Price in cents
            application_fee: Platform fee in cents; computed when omitted
            product_info: {"name", "description", "postId"}, all optional
            origin: Client origin for redirect URLs; BASE_URL when empty

        Returns:
            ServiceResult with {"sessionId", "url"}
        """
        if not account_id:
            return ServiceResult.failure(
                "Missing connected account ID", error_code="MISSING_ACCOUNT_ID"
            )
        if not amount or amount < settings.MIN_CHECKOUT_AMOUNT_CENTS:
            return ServiceResult.failure(
                f"Amount must be at least {settings.MIN_CHECKOUT_AMOUNT_CENTS} cents",
                error_code="AMOUNT_TOO_SMALL",
            )

        product_info = product_info or {}
        product_name = product_info.get("name") or DEFAULT_PRODUCT_NAME
        product_description = (
            product_info.get("description") or DEFAULT_PRODUCT_DESCRIPTION
        )
        post_id = str(product_info.get("postId") or "")
        fee = (
            application_fee
            if application_fee is not None
            else cls.calculate_application_fee(amount)
        )
        is_test = ConnectService.is_test_account(account_id)

        origin = (origin or settings.BASE_URL).rstrip("/")
        metadata = {"postId": post_id, "connectedAccountId": account_id}
        if is_test:
            metadata["testMode"] = "true"
            metadata["applicationFee"] = str(fee)

        params = CreateCheckoutSessionParams(
            amount_cents=amount,
            product_name=product_name,
            product_description=product_description,
            success_url=(
                f"{origin}/purchase-success"
                f"?session_id={{CHECKOUT_SESSION_ID}}&post_id={post_id}"
            ),
            cancel_url=f"{origin}/?cancelled=true",
            application_fee_cents=None if is_test else fee,
            stripe_account=None if is_test else account_id,
            metadata=metadata,
        )

        try:
            session = StripeAdapter.create_checkout_session(params)
        except StripeInvalidAccountError as e:
            cls.get_logger().error(
                f"Seller account {account_id} rejected by Stripe: {e}",
                extra={"account_id": account_id, "stripe_code": e.stripe_code},
            )
            return ServiceResult.failure(
                "Seller account is not properly set up for payments",
                error_code="SELLER_ACCOUNT_INVALID",
            )
        except StripeError as e:
            cls.get_logger().error(
                f"Failed to create checkout session for {account_id}: {e}",
                extra={"account_id": account_id},
                exc_info=True,
            )
            return ServiceResult.failure(
                "Failed to create checkout session",
                error_code="CHECKOUT_SESSION_FAILED",
                errors={"details": [e.message]},
            )

        cls._record_pending_charge(
            session_id=session.id,
            account_id=account_id,
            amount=amount,
            fee=fee,
            description=product_info.get("description") or DEFAULT_CHARGE_DESCRIPTION,
            post_id=post_id,
            product_name=product_name,
        )

        cls.get_logger().info(
            f"Checkout session {session.id} created",
            extra={
                "session_id": session.id,
                "account_id": account_id,
                "amount": amount,
                "application_fee": fee,
                "test_mode": is_test,
            },
        )
        return ServiceResult.success({"sessionId": session.id, "url": session.url})

    @classmethod
    def _record_pending_charge(
        cls,
        session_id: str,
        account_id: str,
        amount: int,
        fee: int,
        description: str,
        post_id: str,
        product_name: str,
    ) -> None:
        listing_uuid = _parse_uuid(post_id)
        listing = (
            Listing.objects.filter(pk=listing_uuid).first() if listing_uuid else None
        )
        try:
            DirectCharge.objects.create(
                connected_account_id=account_id,
                amount=amount,
                application_fee_amount=fee,
                description=description,
                checkout_session_id=session_id,
                listing=listing,
                metadata={"post_id": post_id, "product_name": product_name},
            )
        except DatabaseError:
            # The session exists on Stripe; the buyer can still pay
            cls.get_logger().error(
                f"Failed to record charge for session {session_id}",
                extra={"session_id": session_id, "account_id": account_id},
                exc_info=True,
            )

    # =========================================================================
    # Session Completion
    # =========================================================================

    @classmethod
    def complete_session(cls, session_id: str) -> ServiceResult[dict[str, Any]]:
        """
        Fetch a session and, the first time it is seen paid, settle it.

        Settling moves the local charge from pending to succeeded and marks
        the purchased listing sold. An expired session fails the charge.
        Repeat calls only return the session, and so does a failed local
        update.

        Returns:
            ServiceResult with {"session": <Stripe session dict>}
        """
        charge = DirectCharge.objects.filter(checkout_session_id=session_id).first()

        if charge is None:
            try:
                session = StripeAdapter.retrieve_checkout_session(session_id)
            except StripeError as e:
                cls.get_logger().warning(
                    f"Checkout session {session_id} not found: {e}",
                    extra={"session_id": session_id},
                )
                return ServiceResult.failure(
                    "Session not found", error_code="SESSION_NOT_FOUND"
                )
            return ServiceResult.success({"session": session.raw_response})

        try:
            session = cls.retrieve_for_charge(charge)
        except StripeResourceMissingError:
            return ServiceResult.failure(
                "Session not found", error_code="SESSION_NOT_FOUND"
            )
        except StripeError as e:
            cls.get_logger().error(
                f"Failed to retrieve checkout session {session_id}: {e}",
                extra={"session_id": session_id},
                exc_info=True,
            )
            return ServiceResult.failure(
                "Failed to retrieve session",
                error_code="SESSION_RETRIEVE_FAILED",
                errors={"details": [e.message]},
            )

        try:
            cls.apply_session_outcome(charge.pk, session)
        except DatabaseError:
            # Stripe holds the payment; the sync settles the charge later
            cls.get_logger().error(
                f"Failed to update charge {charge.pk} for session {session_id}",
                extra={"charge_id": str(charge.pk), "session_id": session_id},
                exc_info=True,
            )

        return ServiceResult.success({"session": session.raw_response})

    @staticmethod
    def retrieve_for_charge(charge: DirectCharge) -> CheckoutSessionResult:
        """Retrieve the charge's session in the same context it was created in."""
        stripe_account = None if charge.is_test else charge.connected_account_id
        return StripeAdapter.retrieve_checkout_session(
            charge.checkout_session_id, stripe_account=stripe_account
        )

    @classmethod
    def apply_session_outcome(
        cls, charge_id, session: CheckoutSessionResult
    ) -> DirectChargeState | None:
        """
        Settle a paid session or fail an expired one.

        Returns:
            The state the charge moved to, or None if nothing changed
        """
        if session.payment_status == "paid":
            if cls.settle_paid_session(charge_id, session):
                return DirectChargeState.SUCCEEDED
        elif session.status == "expired":
            if cls.fail_expired_session(charge_id):
                return DirectChargeState.FAILED
        return None

    @classmethod
    def fail_expired_session(cls, charge_id) -> bool:
        """
        Move a pending charge whose session expired unpaid to failed.

        Returns:
            True if this call performed the transition
        """
        with transaction.atomic():
            charge = DirectCharge.objects.select_for_update().get(pk=charge_id)
            if charge.status != DirectChargeState.PENDING:
                return False

            charge.mark_failed(reason="expired")
            charge.save()

        cls.get_logger().info(
            f"Charge {charge.pk} failed, session {charge.checkout_session_id} expired",
            extra={"charge_id": str(charge.pk)},
        )
        return True

    @classmethod
    def settle_paid_session(cls, charge_id, session: CheckoutSessionResult) -> bool:
        """
        Move a pending charge to succeeded and mark its listing sold.

        The row lock plus the pending check make this a one-time
        transition under concurrent completions.

        Returns:
            True if this call performed the transition
        """
        with transaction.atomic():
            charge = DirectCharge.objects.select_for_update().get(pk=charge_id)
            if charge.status != DirectChargeState.PENDING:
                return False

            charge.mark_succeeded(payment_intent_id=session.payment_intent_id)
            charge.save()

            listing_id = _parse_uuid(session.metadata.get("postId")) or charge.listing_id
            if listing_id:
                Listing.objects.filter(pk=listing_id).mark_sold()

        cls.get_logger().info(
            f"Charge {charge.pk} succeeded for session {charge.checkout_session_id}",
            extra={
                "charge_id": str(charge.pk),
                "payment_intent_id": charge.payment_intent_id,
                "listing_id": str(listing_id) if listing_id else None,
            },
        )
        return True

    # =========================================================================
    # Listing Link
    # =========================================================================

    @classmethod
    def link_listing(cls, charge_id, listing_id) -> ServiceResult[DirectCharge]:
        """Attach a charge to the listing it paid for."""
        missing = cls.validate_required(listing_id=listing_id)
        if missing is not None:
            return missing

        charge = DirectCharge.objects.filter(pk=charge_id).first()
        if charge is None:
            return ServiceResult.failure(
                "Transaction not found", error_code="CHARGE_NOT_FOUND"
            )

        listing_uuid = _parse_uuid(listing_id)
        listing = Listing.objects.filter(pk=listing_uuid).first() if listing_uuid else None
        if listing is None:
            return ServiceResult.failure(
                "Listing not found", error_code="LISTING_NOT_FOUND"
            )

        charge.listing = listing
        charge.save(update_fields=["listing", "updated_at"])
        cls.get_logger().info(f"Charge {charge.pk} linked to listing {listing.pk}")
        return ServiceResult.success(charge)
