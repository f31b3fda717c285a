"""
Marketplace business logic.

- ListingService: Listing creation, sale and Stripe account backfill
- MessageService: Sending and listing buyer/seller messages
- ListingImageService: Storing uploaded listing images

Usage:
    from marketplace.services import ListingService

    result = ListingService.create_listing(seller=request.user, **validated_data)
    if result.success:
        listing = result.data
"""

from __future__ import annotations

import os
import time
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.files.storage import default_storage
from django.db.models import Q
from django.utils import timezone
from django.utils.crypto import get_random_string

from core.services import BaseService, ServiceResult
from marketplace.models import Listing, ListingStatus, Message
from payments.services import ConnectService

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile
    from django.db.models import QuerySet

    from authentication.models import User


class ListingService(BaseService):
    """Listing lifecycle rules that go beyond plain CRUD."""

    @classmethod
    def create_listing(cls, seller: User, **data) -> ServiceResult[Listing]:
        """
        Create a listing owned by ``seller``.

        The payment destination is the seller's charges-enabled connected
        account when there is one; otherwise a synthetic test account id is
        assigned so checkout can still run in test mode.
        """
        missing = cls.validate_required(
            title=data.get("title"),
            price=data.get("price"),
            category=data.get("category"),
            seller_email=seller.email,
        )
        if missing is not None:
            return missing

        stripe_account_id = ConnectService.payment_account_id_for(seller)
        if stripe_account_id is None:
            stripe_account_id = ConnectService.generate_test_account_id()

        if not data.get("location"):
            data["location"] = settings.LISTING_DEFAULT_LOCATION
        # New listings always start available
        data.pop("status", None)

        listing = Listing.objects.create(
            seller=seller,
            seller_email=seller.email,
            seller_stripe_account_id=stripe_account_id,
            status=ListingStatus.AVAILABLE,
            **data,
        )
        cls.get_logger().info(
            f"Listing {listing.id} created by {seller.email}",
            extra={
                "listing_id": str(listing.id),
                "seller_stripe_account_id": stripe_account_id,
            },
        )
        return ServiceResult.success(listing)

    @classmethod
    def mark_sold(cls, listing: Listing) -> ServiceResult[Listing]:
        """Mark ``listing`` sold. Marking an already sold listing is a no-op."""
        if listing.status != ListingStatus.SOLD:
            listing.status = ListingStatus.SOLD
            listing.sold_at = timezone.now()
            listing.save(update_fields=["status", "sold_at", "updated_at"])
            cls.get_logger().info(f"Listing {listing.id} marked sold")
        return ServiceResult.success(listing)

    @classmethod
    def assign_test_accounts(cls) -> int:
        """
        Give every listing without a Stripe account a test account id and
        make it available again.

        Returns:
            Number of listings updated
        """
        updated = 0
        for listing in Listing.objects.missing_stripe_account():
            listing.seller_stripe_account_id = ConnectService.generate_test_account_id()
            listing.status = ListingStatus.AVAILABLE
            listing.save(
                update_fields=["seller_stripe_account_id", "status", "updated_at"]
            )
            updated += 1

        cls.get_logger().info(f"Assigned test Stripe accounts to {updated} listings")
        return updated


class MessageService(BaseService):
    """Buyer/seller messaging."""

    @classmethod
    def send_message(
        cls,
        sender: User,
        listing_id,
        buyer_email: str,
        seller_email: str,
        message: str,
    ) -> ServiceResult[Message]:
        """
        Append a message to the conversation about a listing.

        The sender must be the buyer or the seller named in the message.
        """
        missing = cls.validate_required(
            listing_id=listing_id,
            buyer_email=buyer_email,
            seller_email=seller_email,
            message=message,
        )
        if missing is not None:
            return missing

        sender_email = sender.email.lower()
        if sender_email not in (buyer_email.lower(), seller_email.lower()):
            return ServiceResult.failure(
                "You can only send messages you are a participant of",
                error_code="NOT_A_PARTICIPANT",
            )

        listing = Listing.objects.filter(pk=listing_id).first()
        if listing is None:
            return ServiceResult.failure(
                "Listing not found", error_code="LISTING_NOT_FOUND"
            )

        msg = Message.objects.create(
            listing=listing,
            buyer_email=buyer_email,
            seller_email=seller_email,
            message=message,
        )
        cls.get_logger().info(
            f"Message {msg.id} sent on listing {listing.id}",
            extra={"listing_id": str(listing.id), "sender": sender_email},
        )
        return ServiceResult.success(msg)

    @staticmethod
    def messages_for(user_email: str | None) -> QuerySet[Message]:
        """All messages where ``user_email`` is buyer or seller, oldest first."""
        if not user_email:
            return Message.objects.none()
        return (
            Message.objects.filter(
                Q(buyer_email__iexact=user_email) | Q(seller_email__iexact=user_email)
            )
            .select_related("listing")
            .order_by("created_at")
        )


class ListingImageService(BaseService):
    """Stores listing images in the default storage backend."""

    @staticmethod
    def build_file_name(original_name: str) -> str:
        """
        Unique storage path: ``<LISTING_IMAGE_DIR>/<ms timestamp>-<random>.<ext>``.
        """
        ext = os.path.splitext(original_name)[1].lstrip(".").lower() or "jpg"
        stamp = int(time.time() * 1000)
        token = get_random_string(8, allowed_chars="abcdefghijklmnopqrstuvwxyz0123456789")
        return f"{settings.LISTING_IMAGE_DIR}/{stamp}-{token}.{ext}"

    @classmethod
    def store(cls, upload: UploadedFile) -> ServiceResult[str]:
        """
        Save ``upload`` and return its public URL path.

        Storage failures are reported as a failed result; the listing form
        can be resubmitted without the image.
        """
        name = cls.build_file_name(upload.name)
        try:
            saved_name = default_storage.save(name, upload)
        except OSError as e:
            return cls.handle_exception(e, "storing listing image")

        url = default_storage.url(saved_name)
        cls.get_logger().info(f"Stored listing image {saved_name}")
        return ServiceResult.success(url)
