"""
Marketplace models.

- Listing: An item a seller has put up for sale
- Message: A buyer/seller message about a listing (append-only)
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


def default_listing_location():
    return settings.LISTING_DEFAULT_LOCATION


class ListingStatus(models.TextChoices):
    """
    Availability of a listing.

    AVAILABLE → PENDING (seller edit) → SOLD (checkout completion or seller)
    """

    AVAILABLE = "available", "Available"
    PENDING = "pending", "Pending"
    SOLD = "sold", "Sold"


class ListingQuerySet(models.QuerySet):
    def missing_stripe_account(self):
        return self.filter(
            models.Q(seller_stripe_account_id="")
            | models.Q(seller_stripe_account_id__isnull=True)
        )

    def mark_sold(self):
        """
        Conditionally mark every unsold listing in the queryset sold.

        Returns:
            Number of listings updated
        """
        now = timezone.now()
        return self.exclude(status=ListingStatus.SOLD).update(
            status=ListingStatus.SOLD,
            sold_at=now,
            updated_at=now,
        )


class Listing(UUIDPrimaryKeyMixin, BaseModel):
    """
    An item for sale.

    Fields:
        title / description / category: What is being sold
        price: Asking price in dollars
        seller: Owning user, when the listing was created by a signed-in user
        seller_email: Seller contact, used by messaging and filters
        seller_stripe_account_id: Account checkout charges go to; a
            generated acct_test_ id when the seller has not onboarded
        status: ListingStatus
        image_url: Public URL of the uploaded image
        location: Free-form pickup location
        sold_at: When the listing was marked sold
    """

    title = models.CharField(
        max_length=200,
        help_text="Listing title",
    )
    description = models.TextField(
        blank=True,
        help_text="Listing description",
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Asking price in dollars",
    )
    category = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Listing category (e.g. electronics, furniture)",
    )
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="listings",
        help_text="User who created the listing",
    )
    seller_email = models.EmailField(
        db_index=True,
        help_text="Seller contact email",
    )
    seller_stripe_account_id = models.CharField(
        max_length=255,
        blank=True,
        db_index=True,
        help_text="Stripe account that receives payment for this listing",
    )
    status = models.CharField(
        max_length=20,
        choices=ListingStatus.choices,
        default=ListingStatus.AVAILABLE,
        db_index=True,
        help_text="Listing availability",
    )
    image_url = models.CharField(
        max_length=500,
        blank=True,
        help_text="Public URL of the listing image",
    )
    location = models.CharField(
        max_length=200,
        default=default_listing_location,
        help_text="Pickup location",
    )
    sold_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the listing was sold",
    )

    objects = ListingQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "listing"
        verbose_name_plural = "listings"

    def __str__(self):
        return f"{self.title} ({self.get_status_display()})"

    @property
    def is_sold(self):
        return self.status == ListingStatus.SOLD


class Message(UUIDPrimaryKeyMixin, BaseModel):
    """
    A message between a buyer and the seller of a listing.

    Messages are never edited or deleted; a conversation is every message
    for a listing where the user is either the buyer or the seller.
    """

    listing = models.ForeignKey(
        Listing,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Listing the conversation is about",
    )
    buyer_email = models.EmailField(
        db_index=True,
        help_text="Buyer participant",
    )
    seller_email = models.EmailField(
        db_index=True,
        help_text="Seller participant",
    )
    message = models.TextField(
        help_text="Message body",
    )

    class Meta:
        ordering = ["created_at"]
        verbose_name = "message"
        verbose_name_plural = "messages"

    def __str__(self):
        return f"Message({self.buyer_email} <-> {self.seller_email}, listing={self.listing_id})"
