"""
Serializers for marketplace models.
"""

from django.conf import settings
from rest_framework import serializers

from marketplace.models import Listing, Message


class ListingSerializer(serializers.ModelSerializer):
    """
    Listing read/write shape.

    Seller fields, payment account and sale state are set by the server and
    are read-only here.
    """

    class Meta:
        model = Listing
        fields = [
            "id",
            "title",
            "description",
            "price",
            "category",
            "seller_email",
            "seller_stripe_account_id",
            "status",
            "image_url",
            "location",
            "sold_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "seller_email",
            "seller_stripe_account_id",
            "sold_at",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {
            "location": {"required": False},
            "status": {"required": False},
        }

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price cannot be negative.")
        return value


class MessageSerializer(serializers.ModelSerializer):
    """Message read shape; listing is returned as its id."""

    listing_id = serializers.UUIDField(source="listing.id", read_only=True)
    listing_title = serializers.CharField(source="listing.title", read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "listing_id",
            "listing_title",
            "buyer_email",
            "seller_email",
            "message",
            "created_at",
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """Input for POST /api/v1/messages/."""

    listing_id = serializers.UUIDField()
    buyer_email = serializers.EmailField()
    seller_email = serializers.EmailField()
    message = serializers.CharField(max_length=5000)


class ListingImageUploadSerializer(serializers.Serializer):
    """
    Input for POST /api/v1/listings/upload/.

    ImageField runs the file through Pillow, so non-images are rejected.
    """

    file = serializers.ImageField()

    def validate_file(self, value):
        max_bytes = settings.LISTING_IMAGE_MAX_SIZE_MB * 1024 * 1024
        if value.size > max_bytes:
            raise serializers.ValidationError(
                f"Image must be at most {settings.LISTING_IMAGE_MAX_SIZE_MB} MB."
            )
        return value
