"""
Tests for marketplace services.
"""

import re
from unittest.mock import patch

from marketplace.models import ListingStatus
from marketplace.services import ListingImageService, ListingService, MessageService
from marketplace.tests.factories import ListingFactory, MessageFactory
from payments.models import ConnectedAccount

# =============================================================================
# TestListingService
# =============================================================================


class TestListingServiceCreate:
    """ListingService.create_listing"""

    def test_missing_category_fails(self, seller):
        result = ListingService.create_listing(
            seller=seller, title="Chair", price="10.00", category=""
        )

        assert not result.success
        assert result.error_code == "MISSING_REQUIRED_FIELDS"
        assert "category" in result.errors

    def test_prefers_charges_enabled_account_over_newer_incomplete_one(self, seller):
        ConnectedAccount.objects.create(
            user=seller, stripe_account_id="acct_enabled", charges_enabled=True
        )
        ConnectedAccount.objects.create(user=seller, stripe_account_id="acct_newer")

        result = ListingService.create_listing(
            seller=seller, title="Chair", price="10.00", category="furniture"
        )

        assert result.success
        assert result.data.seller_stripe_account_id == "acct_enabled"

    def test_incomplete_account_falls_back_to_test_id(self, seller):
        ConnectedAccount.objects.create(user=seller, stripe_account_id="acct_incomplete")

        result = ListingService.create_listing(
            seller=seller, title="Chair", price="10.00", category="furniture"
        )

        assert re.fullmatch(r"acct_test_[a-z0-9]{10}", result.data.seller_stripe_account_id)


class TestListingServiceMarkSold:
    """ListingService.mark_sold"""

    def test_mark_sold_sets_timestamp(self, listing):
        result = ListingService.mark_sold(listing)

        listing.refresh_from_db()
        assert result.success
        assert listing.status == ListingStatus.SOLD
        assert listing.sold_at is not None

    def test_mark_sold_twice_keeps_first_timestamp(self, listing):
        ListingService.mark_sold(listing)
        first_sold_at = listing.sold_at

        ListingService.mark_sold(listing)

        listing.refresh_from_db()
        assert listing.sold_at == first_sold_at


class TestListingServiceAssignTestAccounts:
    """ListingService.assign_test_accounts"""

    def test_backfills_listings_without_account(self, db):
        missing = ListingFactory(
            seller_stripe_account_id="", status=ListingStatus.PENDING
        )
        present = ListingFactory(seller_stripe_account_id="acct_1Keep")

        updated = ListingService.assign_test_accounts()

        missing.refresh_from_db()
        present.refresh_from_db()
        assert updated == 1
        assert missing.seller_stripe_account_id.startswith("acct_test_")
        assert missing.status == ListingStatus.AVAILABLE
        assert present.seller_stripe_account_id == "acct_1Keep"

    def test_nothing_to_backfill(self, listing):
        assert ListingService.assign_test_accounts() == 0


# =============================================================================
# TestMessageService
# =============================================================================


class TestMessageService:
    def test_participant_check_is_case_insensitive(self, buyer, listing):
        result = MessageService.send_message(
            sender=buyer,
            listing_id=listing.id,
            buyer_email=buyer.email.upper(),
            seller_email=listing.seller_email,
            message="Hi",
        )

        assert result.success
        assert result.data.listing == listing

    def test_blank_message_fails(self, buyer, listing):
        result = MessageService.send_message(
            sender=buyer,
            listing_id=listing.id,
            buyer_email=buyer.email,
            seller_email=listing.seller_email,
            message="   ",
        )

        assert not result.success
        assert "message" in result.errors

    def test_messages_for_empty_email_is_empty(self, listing):
        MessageFactory(listing=listing)

        assert not MessageService.messages_for("").exists()

    def test_messages_for_matches_either_side(self, listing):
        as_buyer = MessageFactory(listing=listing, buyer_email="pat@example.com")
        as_seller = MessageFactory(
            listing=ListingFactory(seller_email="Pat@Example.com"),
            buyer_email="x@example.com",
        )
        MessageFactory(listing=listing)

        messages = list(MessageService.messages_for("pat@example.com"))

        assert messages == [as_buyer, as_seller]


# =============================================================================
# TestListingImageService
# =============================================================================


class TestListingImageService:
    def test_build_file_name_format(self):
        name = ListingImageService.build_file_name("Photo.JPEG")

        assert re.fullmatch(r"listing-images/\d{13}-[a-z0-9]{8}\.jpeg", name)

    def test_build_file_name_without_extension_defaults_to_jpg(self):
        assert ListingImageService.build_file_name("photo").endswith(".jpg")

    def test_storage_failure_returns_failure(self):
        upload = type("Upload", (), {"name": "photo.png"})()

        with patch(
            "marketplace.services.default_storage.save",
            side_effect=OSError("disk full"),
        ):
            result = ListingImageService.store(upload)

        assert not result.success
        assert result.error_code == "OSERROR"

