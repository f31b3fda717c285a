"""
ConnectedAccount model for Stripe Connect sellers.

A row is inserted when a seller starts onboarding and its flags are
upserted (keyed by stripe_account_id) every time status is reconciled.

Usage:
    from payments.models import ConnectedAccount

    account = ConnectedAccount.objects.latest_for_user(user)
    if account and account.can_accept_payments:
        ...
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from payments.state_machines import AccountType, ConnectStatus


class ConnectedAccountQuerySet(models.QuerySet):
    def for_user(self, user):
        return self.filter(user=user)

    def charges_enabled(self):
        return self.filter(charges_enabled=True)

    def latest_for_user(self, user) -> ConnectedAccount | None:
        """Most recently created account for ``user``, or None."""
        return self.for_user(user).order_by("-created_at").first()


class ConnectedAccount(UUIDPrimaryKeyMixin, BaseModel):
    """
    A seller's Stripe Connect account as last seen by this platform.

    Fields:
        user: Seller who owns the account (not unique, legacy duplicates exist)
        stripe_account_id: Stripe Account ID (acct_xxx)
        account_type: Connect account type (express for all new accounts)
        charges_enabled: Stripe allows charges on the account
        payouts_enabled: Stripe allows payouts to the account
        details_submitted: Seller finished the onboarding form

    Note:
        Nothing at the database level prevents a user from owning several
        rows. Onboarding reuses the newest one and the
        dedupe_connected_accounts command removes older duplicates.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="connected_accounts",
        help_text="Seller who owns this connected account",
    )
    stripe_account_id = models.CharField(
        max_length=255,
        unique=True,
        db_index=True,
        help_text="Stripe Account ID (acct_xxx)",
    )
    account_type = models.CharField(
        max_length=20,
        choices=AccountType.choices,
        default=AccountType.EXPRESS,
        help_text="Stripe Connect account type",
    )
    charges_enabled = models.BooleanField(
        default=False,
        help_text="Whether Stripe has enabled charges for this account",
    )
    payouts_enabled = models.BooleanField(
        default=False,
        help_text="Whether Stripe has enabled payouts for this account",
    )
    details_submitted = models.BooleanField(
        default=False,
        help_text="Whether the seller submitted onboarding details",
    )

    objects = ConnectedAccountQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Connected Account"
        verbose_name_plural = "Connected Accounts"
        indexes = [
            models.Index(fields=["user", "-created_at"], name="connacct_user_created_idx"),
        ]

    def __str__(self) -> str:
        return f"ConnectedAccount({self.stripe_account_id}, {self.connect_status})"

    @property
    def connect_status(self) -> str:
        return derive_connect_status(self.details_submitted, self.charges_enabled)

    @property
    def can_accept_payments(self) -> bool:
        return self.details_submitted and self.charges_enabled


def derive_connect_status(details_submitted: bool, charges_enabled: bool) -> str:
    """
    Map Stripe's two onboarding flags to a ConnectStatus.

    active when both are set, restricted when details are in but charges
    are still disabled, pending otherwise.
    """
    if details_submitted and charges_enabled:
        return ConnectStatus.ACTIVE
    if details_submitted:
        return ConnectStatus.RESTRICTED
    return ConnectStatus.PENDING
