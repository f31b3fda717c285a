"""
Stripe Connect onboarding and status reconciliation.

A seller's connected account lives in two places: Stripe, which owns the
account and its capabilities, and the local ConnectedAccount row, which
mirrors the flags so listings and checkout can be decided without an API
call. Local writes that follow a successful Stripe call are best-effort:
the remote state is authoritative and the next status refresh repairs
the mirror.

Usage:
    from payments.services import ConnectService

    result = ConnectService.create_account(request.user)
    if result.success:
        redirect_to(result.data["url"])

    status = ConnectService.get_status(request.user).data
    status["status"]  # not_connected | pending | restricted | active
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import DatabaseError
from django.utils.crypto import get_random_string

from core.services import BaseService, ServiceResult
from marketplace.models import Listing
from payments.adapters import StripeAdapter
from payments.exceptions import StripeError
from payments.models import ConnectedAccount, derive_connect_status
from payments.state_machines import AccountType, CapabilityStatus, ConnectStatus

if TYPE_CHECKING:
    from typing import Any

    from authentication.models import User


TEST_ACCOUNT_SUFFIX_LENGTH = 10
TEST_ACCOUNT_CHARS = "abcdefghijklmnopqrstuvwxyz0123456789"


def normalize_capability(value: Any) -> str:
    """
    Report a Stripe capability as a status string.

    Strings ("active", "pending", "inactive") pass through; any other
    truthy value counts as active.
    """
    if isinstance(value, str):
        return value
    return CapabilityStatus.ACTIVE if value else CapabilityStatus.INACTIVE


def not_connected_status() -> dict[str, Any]:
    return {
        "connected": False,
        "status": ConnectStatus.NOT_CONNECTED,
        "accountId": None,
        "capabilities": {
            "transfers": CapabilityStatus.INACTIVE,
            "card_payments": CapabilityStatus.INACTIVE,
        },
    }


class ConnectService(BaseService):
    """Seller payment-account onboarding, status and link management."""

    # =========================================================================
    # Onboarding
    # =========================================================================

    @staticmethod
    def onboarding_urls() -> tuple[str, str]:
        """(refresh_url, return_url) for account links."""
        base_url = settings.BASE_URL.rstrip("/")
        return (
            f"{base_url}/profile?refresh=true",
            f"{base_url}/profile?connected=true",
        )

    @classmethod
    def create_account(cls, user: User) -> ServiceResult[dict[str, Any]]:
        """
        Start (or resume) Stripe Connect onboarding for ``user``.

        A user who already has a connected account gets a fresh onboarding
        link for the newest one; otherwise a new Express account is created
        and recorded locally with every flag false.

        Returns:
            ServiceResult with {"success", "url", "accountId"}
        """
        existing = ConnectedAccount.objects.latest_for_user(user)

        if existing is not None:
            account_id = existing.stripe_account_id
            cls.get_logger().info(
                f"Reusing connected account {account_id} for user {user.pk}"
            )
        else:
            try:
                account = StripeAdapter.create_express_account(
                    metadata={"user_id": str(user.pk)},
                )
            except StripeError as e:
                return cls.handle_exception(e, "creating connected account")
            account_id = account.id
            cls._record_new_account(user, account_id)

        return cls._onboarding_link(account_id)

    @classmethod
    def refresh_link(cls, user: User, account_id: str) -> ServiceResult[dict[str, Any]]:
        """
        Create a new onboarding link for one of ``user``'s accounts.

        Account links are single-use and expire, so the client asks for a
        new one whenever Stripe sends the seller to the refresh URL.
        """
        failure = cls._check_ownership(user, account_id, must_exist=True)
        if failure is not None:
            return failure
        return cls._onboarding_link(account_id)

    @classmethod
    def _onboarding_link(cls, account_id: str) -> ServiceResult[dict[str, Any]]:
        refresh_url, return_url = cls.onboarding_urls()
        try:
            link = StripeAdapter.create_account_link(
                account_id,
                refresh_url=refresh_url,
                return_url=return_url,
            )
        except StripeError as e:
            return cls.handle_exception(e, f"creating account link for {account_id}")

        return ServiceResult.success(
            {"success": True, "url": link.url, "accountId": account_id}
        )

    @classmethod
    def _record_new_account(cls, user: User, account_id: str) -> None:
        try:
            ConnectedAccount.objects.create(
                user=user,
                stripe_account_id=account_id,
                account_type=AccountType.EXPRESS,
                charges_enabled=False,
                payouts_enabled=False,
                details_submitted=False,
            )
        except DatabaseError:
            # The Stripe account exists; onboarding continues without the row
            cls.get_logger().error(
                f"Failed to record connected account {account_id}",
                extra={"user_id": user.pk, "account_id": account_id},
                exc_info=True,
            )

    # =========================================================================
    # Status
    # =========================================================================

    @classmethod
    def get_status(
        cls, user: User, account_id: str | None = None
    ) -> ServiceResult[dict[str, Any]]:
        """
        Fetch live account status from Stripe and mirror it locally.

        Without ``account_id`` the user's newest account is used. Having
        no account at all is a normal state, reported as not_connected.
        """
        if not account_id:
            latest = ConnectedAccount.objects.latest_for_user(user)
            if latest is None:
                return ServiceResult.success(not_connected_status())
            account_id = latest.stripe_account_id
        else:
            failure = cls._check_ownership(user, account_id)
            if failure is not None:
                return failure

        try:
            account = StripeAdapter.retrieve_account(account_id)
        except StripeError as e:
            return cls.handle_exception(e, f"retrieving connected account {account_id}")

        cls._sync_account_flags(user, account)

        capabilities = account.capabilities or {}
        return ServiceResult.success(
            {
                "connected": account.details_submitted and account.charges_enabled,
                "status": derive_connect_status(
                    account.details_submitted, account.charges_enabled
                ),
                "accountId": account.id,
                "capabilities": {
                    "transfers": normalize_capability(capabilities.get("transfers")),
                    "card_payments": normalize_capability(
                        capabilities.get("card_payments")
                    ),
                },
                "requirements": account.requirements,
                "business_profile": account.business_profile,
            }
        )

    @classmethod
    def _sync_account_flags(cls, user: User, account) -> None:
        """Upsert the local mirror keyed by stripe_account_id."""
        flags = {
            "charges_enabled": account.charges_enabled,
            "payouts_enabled": account.payouts_enabled,
            "details_submitted": account.details_submitted,
        }
        try:
            ConnectedAccount.objects.update_or_create(
                stripe_account_id=account.id,
                defaults=flags,
                create_defaults={**flags, "user": user},
            )
        except DatabaseError:
            cls.get_logger().error(
                f"Failed to update connected account {account.id}",
                extra={"account_id": account.id, **flags},
                exc_info=True,
            )

    # =========================================================================
    # Disconnect
    # =========================================================================

    @classmethod
    def disconnect(cls, user: User, account_id: str) -> ServiceResult[dict[str, Any]]:
        """
        Forget a connected account locally.

        The Stripe account is not deleted; it may still hold transaction
        history and can be reconnected from the Stripe dashboard.
        """
        missing = cls.validate_required(account_id=account_id)
        if missing is not None:
            return missing

        deleted, _ = ConnectedAccount.objects.filter(
            user=user, stripe_account_id=account_id
        ).delete()
        if not deleted:
            return ServiceResult.failure(
                "Connected account not found",
                error_code="CONNECTED_ACCOUNT_NOT_FOUND",
            )

        cls.get_logger().info(f"Disconnected account {account_id} for user {user.pk}")
        return ServiceResult.success({"success": True})

    @classmethod
    def _check_ownership(
        cls, user: User, account_id: str, must_exist: bool = False
    ) -> ServiceResult | None:
        """
        Failure if ``account_id`` is recorded for a different user.

        Staff may act on any account. With ``must_exist`` an account with
        no local record is also rejected.
        """
        missing = cls.validate_required(account_id=account_id)
        if missing is not None:
            return missing

        record = ConnectedAccount.objects.filter(stripe_account_id=account_id).first()
        if record is None:
            if must_exist and not user.is_staff:
                return ServiceResult.failure(
                    "Connected account not found",
                    error_code="CONNECTED_ACCOUNT_NOT_FOUND",
                )
            return None
        if record.user_id != user.pk and not user.is_staff:
            return ServiceResult.failure(
                "You do not have access to this connected account",
                error_code="ACCOUNT_NOT_OWNED",
            )
        return None

    # =========================================================================
    # Listing Support
    # =========================================================================

    @staticmethod
    def payment_account_id_for(user: User) -> str | None:
        """Newest charges-enabled account id for ``user``, if any."""
        return (
            ConnectedAccount.objects.for_user(user)
            .charges_enabled()
            .order_by("-created_at")
            .values_list("stripe_account_id", flat=True)
            .first()
        )

    @staticmethod
    def generate_test_account_id() -> str:
        """Synthetic account id that checkout handles in test mode."""
        suffix = get_random_string(
            TEST_ACCOUNT_SUFFIX_LENGTH, allowed_chars=TEST_ACCOUNT_CHARS
        )
        return f"{settings.TEST_ACCOUNT_PREFIX}{suffix}"

    @staticmethod
    def is_test_account(account_id: str) -> bool:
        return account_id.startswith(settings.TEST_ACCOUNT_PREFIX)

    # =========================================================================
    # Duplicate Cleanup
    # =========================================================================

    @classmethod
    def dedupe_user_accounts(
        cls, user: User, dry_run: bool = False
    ) -> ServiceResult[dict[str, Any]]:
        """
        Reduce ``user`` to a single connected account.

        The newest charges-enabled account is kept, or the newest account
        when none can take charges. The others are deleted locally and the
        user's listings pointing at them are moved to the kept account.

        Returns:
            ServiceResult with {"kept", "removed", "listings_updated"}
        """
        accounts = list(ConnectedAccount.objects.for_user(user).order_by("-created_at"))
        if len(accounts) < 2:
            kept = accounts[0].stripe_account_id if accounts else None
            return ServiceResult.success(
                {"kept": kept, "removed": [], "listings_updated": 0}
            )

        keep = next((a for a in accounts if a.charges_enabled), accounts[0])
        removed = [a.stripe_account_id for a in accounts if a.pk != keep.pk]

        listings = Listing.objects.filter(
            seller=user, seller_stripe_account_id__in=removed
        )
        if dry_run:
            listings_updated = listings.count()
        else:
            with cls.atomic():
                listings_updated = listings.update(
                    seller_stripe_account_id=keep.stripe_account_id
                )
                ConnectedAccount.objects.filter(stripe_account_id__in=removed).delete()

        cls.get_logger().info(
            f"{'Would dedupe' if dry_run else 'Deduped'} connected accounts "
            f"for user {user.pk}: kept {keep.stripe_account_id}",
            extra={
                "user_id": user.pk,
                "removed": removed,
                "listings_updated": listings_updated,
            },
        )
        return ServiceResult.success(
            {
                "kept": keep.stripe_account_id,
                "removed": removed,
                "listings_updated": listings_updated,
            }
        )
