"""
Tests for marketplace API views.

- ListingViewSet: list/filter, create, seller-only update/delete, mark-sold, upload
- MessageListCreateView: participant listing and sending
"""

import io

from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image
from rest_framework import status
from rest_framework.test import APIClient

from authentication.tests.factories import UserFactory
from marketplace.models import Listing, ListingStatus, Message
from marketplace.tests.factories import ListingFactory, MessageFactory
from payments.models import ConnectedAccount

# =============================================================================
# URL Constants
# =============================================================================

LISTINGS_URL = "/api/v1/listings/"
UPLOAD_URL = "/api/v1/listings/upload/"
MESSAGES_URL = "/api/v1/messages/"


def listing_detail_url(listing_id):
    return f"{LISTINGS_URL}{listing_id}/"


def listing_mark_sold_url(listing_id):
    return f"{LISTINGS_URL}{listing_id}/mark-sold/"


def make_image_file(name="photo.png", fmt="PNG"):
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color="red").save(buffer, format=fmt)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")


# =============================================================================
# TestListingList
# =============================================================================


class TestListingList:
    """GET /api/v1/listings/"""

    def test_list_is_public(self, api_client, listing):
        response = api_client.get(LISTINGS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        assert response.data["results"][0]["id"] == str(listing.id)

    def test_filter_by_category_is_case_insensitive(self, api_client, db):
        ListingFactory(category="Furniture")
        ListingFactory(category="electronics")

        response = api_client.get(LISTINGS_URL, {"category": "furniture"})

        assert response.data["count"] == 1
        assert response.data["results"][0]["category"] == "Furniture"

    def test_search_matches_title_and_description(self, api_client, db):
        ListingFactory(title="Road bike", description="")
        ListingFactory(title="Desk", description="Fits a bike rack")
        ListingFactory(title="Lamp", description="Warm light")

        response = api_client.get(LISTINGS_URL, {"search": "BIKE"})

        titles = {row["title"] for row in response.data["results"]}
        assert titles == {"Road bike", "Desk"}

    def test_filter_by_seller_email(self, api_client, listing):
        ListingFactory()

        response = api_client.get(
            LISTINGS_URL, {"seller_email": listing.seller_email.upper()}
        )

        assert response.data["count"] == 1

    def test_retrieve_is_public(self, api_client, listing):
        response = api_client.get(listing_detail_url(listing.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["title"] == listing.title


# =============================================================================
# TestListingCreate
# =============================================================================


class TestListingCreate:
    """POST /api/v1/listings/"""

    payload = {
        "title": "Standing desk",
        "description": "Electric, two motors",
        "price": "150.00",
        "category": "furniture",
    }

    def test_create_assigns_test_account_without_connected_account(
        self, seller_client, seller
    ):
        response = seller_client.post(LISTINGS_URL, self.payload, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["seller_email"] == seller.email
        assert response.data["seller_stripe_account_id"].startswith("acct_test_")
        assert len(response.data["seller_stripe_account_id"]) == len("acct_test_") + 10
        assert response.data["status"] == ListingStatus.AVAILABLE
        assert response.data["location"] == "Palo Alto, CA"

    def test_create_uses_charges_enabled_connected_account(self, seller_client, seller):
        ConnectedAccount.objects.create(
            user=seller,
            stripe_account_id="acct_1RealSeller",
            charges_enabled=True,
            details_submitted=True,
        )

        response = seller_client.post(LISTINGS_URL, self.payload, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["seller_stripe_account_id"] == "acct_1RealSeller"

    def test_create_ignores_client_supplied_status(self, seller_client):
        response = seller_client.post(
            LISTINGS_URL, {**self.payload, "status": "sold"}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["status"] == ListingStatus.AVAILABLE

    def test_create_keeps_given_location(self, seller_client):
        response = seller_client.post(
            LISTINGS_URL, {**self.payload, "location": "Berkeley, CA"}, format="json"
        )

        assert response.data["location"] == "Berkeley, CA"

    def test_create_missing_title_is_rejected(self, seller_client):
        payload = {k: v for k, v in self.payload.items() if k != "title"}

        response = seller_client.post(LISTINGS_URL, payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "title" in response.data

    def test_create_negative_price_is_rejected(self, seller_client):
        response = seller_client.post(
            LISTINGS_URL, {**self.payload, "price": "-1.00"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_requires_authentication(self, api_client, db):
        response = api_client.post(LISTINGS_URL, self.payload, format="json")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert not Listing.objects.exists()


# =============================================================================
# TestListingUpdateDelete
# =============================================================================


class TestListingUpdateDelete:
    """PATCH / DELETE /api/v1/listings/{id}/"""

    def test_seller_can_update(self, seller_client, listing):
        response = seller_client.patch(
            listing_detail_url(listing.id), {"price": "30.00"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        listing.refresh_from_db()
        assert str(listing.price) == "30.00"

    def test_other_user_cannot_update(self, buyer_client, listing):
        response = buyer_client.patch(
            listing_detail_url(listing.id), {"price": "1.00"}, format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_seller_matched_by_email_when_seller_unset(self, seller_client, seller):
        listing = ListingFactory(seller=None, seller_email=seller.email.upper())

        response = seller_client.patch(
            listing_detail_url(listing.id), {"title": "Renamed"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK

    def test_seller_can_delete(self, seller_client, listing):
        response = seller_client.delete(listing_detail_url(listing.id))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Listing.objects.filter(pk=listing.pk).exists()

    def test_other_user_cannot_delete(self, buyer_client, listing):
        response = buyer_client.delete(listing_detail_url(listing.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Listing.objects.filter(pk=listing.pk).exists()

    def test_staff_can_delete_any_listing(self, staff_client, listing):
        response = staff_client.delete(listing_detail_url(listing.id))

        assert response.status_code == status.HTTP_204_NO_CONTENT


# =============================================================================
# TestListingMarkSold
# =============================================================================


class TestListingMarkSold:
    """POST /api/v1/listings/{id}/mark-sold/"""

    def test_seller_marks_listing_sold(self, seller_client, listing):
        response = seller_client.post(listing_mark_sold_url(listing.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == ListingStatus.SOLD
        assert response.data["sold_at"] is not None

    def test_other_user_cannot_mark_sold(self, buyer_client, listing):
        response = buyer_client.post(listing_mark_sold_url(listing.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        listing.refresh_from_db()
        assert listing.status == ListingStatus.AVAILABLE

    def test_unknown_listing_is_not_found(self, seller_client):
        response = seller_client.post(
            listing_mark_sold_url("00000000-0000-0000-0000-000000000000")
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# TestListingUpload
# =============================================================================


class TestListingUpload:
    """POST /api/v1/listings/upload/"""

    def test_upload_stores_image_and_returns_url(
        self, authenticated_client, settings, tmp_path
    ):
        settings.MEDIA_ROOT = tmp_path

        response = authenticated_client.post(
            UPLOAD_URL, {"file": make_image_file()}, format="multipart"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["url"].startswith("/media/listing-images/")
        assert response.data["url"].endswith(".png")
        assert len(list((tmp_path / "listing-images").iterdir())) == 1

    def test_non_image_is_rejected(self, authenticated_client, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path
        upload = SimpleUploadedFile(
            "notes.txt", b"not an image", content_type="text/plain"
        )

        response = authenticated_client.post(
            UPLOAD_URL, {"file": upload}, format="multipart"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_missing_file_is_rejected(self, authenticated_client):
        response = authenticated_client.post(UPLOAD_URL, {}, format="multipart")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_upload_requires_authentication(self, api_client, db):
        response = api_client.post(
            UPLOAD_URL, {"file": make_image_file()}, format="multipart"
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# TestMessageList
# =============================================================================


class TestMessageList:
    """GET /api/v1/messages/?user_email="""

    def test_missing_user_email_returns_empty_list(self, buyer_client):
        response = buyer_client.get(MESSAGES_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []

    def test_returns_messages_where_user_is_buyer_or_seller(
        self, buyer_client, buyer, listing
    ):
        first = MessageFactory(listing=listing, buyer_email=buyer.email)
        second = MessageFactory(
            listing=ListingFactory(seller_email=buyer.email),
            buyer_email="someone@example.com",
        )
        MessageFactory()

        response = buyer_client.get(MESSAGES_URL, {"user_email": buyer.email})

        assert response.status_code == status.HTTP_200_OK
        assert [row["id"] for row in response.data] == [str(first.id), str(second.id)]
        assert response.data[0]["listing_id"] == str(listing.id)

    def test_cannot_read_other_users_messages(self, buyer_client):
        response = buyer_client.get(MESSAGES_URL, {"user_email": "other@example.com"})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "PERMISSION_DENIED"

    def test_staff_can_read_any_users_messages(self, staff_client, listing):
        MessageFactory(listing=listing, buyer_email="other@example.com")

        response = staff_client.get(MESSAGES_URL, {"user_email": "other@example.com"})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1


# =============================================================================
# TestMessageCreate
# =============================================================================


class TestMessageCreate:
    """POST /api/v1/messages/"""

    def test_buyer_sends_message(self, buyer_client, buyer, listing):
        response = buyer_client.post(
            MESSAGES_URL,
            {
                "listing_id": str(listing.id),
                "buyer_email": buyer.email,
                "seller_email": listing.seller_email,
                "message": "Would you take $20?",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["message"] == "Would you take $20?"
        assert Message.objects.filter(listing=listing).count() == 1

    def test_seller_can_reply(self, seller_client, listing):
        response = seller_client.post(
            MESSAGES_URL,
            {
                "listing_id": str(listing.id),
                "buyer_email": "buyer@example.com",
                "seller_email": listing.seller_email,
                "message": "Sure",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_non_participant_is_forbidden(self, listing):
        client = APIClient()
        client.force_authenticate(user=UserFactory())

        response = client.post(
            MESSAGES_URL,
            {
                "listing_id": str(listing.id),
                "buyer_email": "buyer@example.com",
                "seller_email": listing.seller_email,
                "message": "Hello",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "NOT_A_PARTICIPANT"

    def test_unknown_listing_is_not_found(self, buyer_client, buyer):
        response = buyer_client.post(
            MESSAGES_URL,
            {
                "listing_id": "00000000-0000-0000-0000-000000000000",
                "buyer_email": buyer.email,
                "seller_email": "seller@example.com",
                "message": "Hello",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_missing_fields_are_rejected(self, buyer_client, buyer):
        response = buyer_client.post(
            MESSAGES_URL, {"buyer_email": buyer.email}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "Missing required fields"
