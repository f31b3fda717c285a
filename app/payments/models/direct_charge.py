"""
DirectCharge model: one row per checkout session.

Usage:
    from payments.models import DirectCharge

    charge = DirectCharge.objects.create(
        connected_account_id="acct_1234",
        amount=10000,
        application_fee_amount=300,
        checkout_session_id="cs_test_abc",
    )

    # When Stripe reports the session paid
    charge.mark_succeeded(payment_intent_id="pi_123")
    charge.save()
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone
from django_fsm import FSMField, transition

from core.model_mixins import MetadataMixin, UUIDPrimaryKeyMixin
from core.models import BaseModel
from payments.state_machines import DirectChargeState


class DirectChargeQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=DirectChargeState.PENDING)

    def succeeded(self):
        return self.filter(status=DirectChargeState.SUCCEEDED)

    def created_since(self, since):
        return self.filter(created_at__gte=since)


class DirectCharge(UUIDPrimaryKeyMixin, MetadataMixin, BaseModel):
    """
    A buyer payment collected through Stripe Checkout.

    Inserted as PENDING before the checkout URL is returned to the buyer,
    then moved to SUCCEEDED when the session is first seen paid.

    Fields:
        connected_account_id: Seller's Stripe account id (may be a test id)
        amount: Charged amount in cents
        application_fee_amount: Platform fee in cents
        currency: ISO 4217 code
        description: Human-readable purchase description
        status: DirectChargeState (managed by django-fsm)
        checkout_session_id: Stripe Checkout Session ID (cs_xxx)
        payment_intent_id: Stripe PaymentIntent ID, set on success
        listing: Purchased listing, when known
        paid_at: When the charge was confirmed
        metadata: post_id, product_name and other free-form data

    State Flow:
        PENDING → SUCCEEDED
        PENDING → FAILED
    """

    connected_account_id = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Seller's Stripe account id (acct_xxx or acct_test_xxx)",
    )
    amount = models.PositiveIntegerField(
        help_text="Amount in cents",
    )
    application_fee_amount = models.PositiveIntegerField(
        default=0,
        help_text="Platform fee in cents",
    )
    currency = models.CharField(
        max_length=3,
        default="usd",
        help_text="ISO 4217 currency code",
    )
    description = models.CharField(
        max_length=500,
        blank=True,
        help_text="Purchase description",
    )
    status = FSMField(
        default=DirectChargeState.PENDING,
        choices=DirectChargeState.choices,
        db_index=True,
        help_text="Current state of the charge (managed by FSM)",
    )
    checkout_session_id = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
        help_text="Stripe Checkout Session ID (cs_xxx)",
    )
    payment_intent_id = models.CharField(
        max_length=255,
        blank=True,
        db_index=True,
        help_text="Stripe PaymentIntent ID (pi_xxx)",
    )
    listing = models.ForeignKey(
        "marketplace.Listing",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="charges",
        help_text="Listing this charge paid for",
    )
    paid_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When Stripe confirmed payment",
    )

    objects = DirectChargeQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Direct Charge"
        verbose_name_plural = "Direct Charges"

    def __str__(self) -> str:
        return f"DirectCharge({self.checkout_session_id}, {self.amount} {self.currency}, {self.status})"

    @property
    def is_test(self) -> bool:
        return self.connected_account_id.startswith(settings.TEST_ACCOUNT_PREFIX)

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=DirectChargeState.PENDING,
        target=DirectChargeState.SUCCEEDED,
    )
    def mark_succeeded(self, payment_intent_id: str | None = None):
        """
        Record that the buyer paid.

        Transition: PENDING -> SUCCEEDED
        """
        if payment_intent_id:
            self.payment_intent_id = payment_intent_id
        self.paid_at = timezone.now()

    @transition(
        field=status,
        source=DirectChargeState.PENDING,
        target=DirectChargeState.FAILED,
    )
    def mark_failed(self, reason: str = ""):
        """
        Record that the session expired or payment failed.

        Transition: PENDING -> FAILED
        """
        if reason:
            self.set_metadata("failure_reason", reason)
