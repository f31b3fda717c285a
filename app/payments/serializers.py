"""
Serializers for payments API.

Request field names follow the web client's camelCase contract
(accountId, productInfo, postId); validation of business rules such as
the minimum amount happens in the services so the error messages match
what the client displays.
"""

from rest_framework import serializers

from payments.models import DirectCharge


class AccountIdSerializer(serializers.Serializer):
    """Input for disconnect and refresh-link."""

    accountId = serializers.CharField(max_length=255, required=False, allow_blank=True)


class ProductInfoSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(
        max_length=500, required=False, allow_blank=True
    )
    postId = serializers.CharField(
        max_length=64, required=False, allow_blank=True, allow_null=True
    )


class CheckoutSessionCreateSerializer(serializers.Serializer):
    """Input for POST /api/v1/payments/checkout-session/."""

    accountId = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )
    amount = serializers.IntegerField(required=False, allow_null=True)
    applicationFee = serializers.IntegerField(
        required=False, allow_null=True, min_value=0
    )
    productInfo = ProductInfoSerializer(required=False, allow_null=True)


class CheckoutSessionResponseSerializer(serializers.Serializer):
    sessionId = serializers.CharField()
    url = serializers.URLField()


class LinkListingSerializer(serializers.Serializer):
    """Input for POST /api/v1/payments/transactions/{id}/link-listing/."""

    listing_id = serializers.CharField(required=False, allow_blank=True)


class DirectChargeSerializer(serializers.ModelSerializer):
    class Meta:
        model = DirectCharge
        fields = [
            "id",
            "connected_account_id",
            "amount",
            "application_fee_amount",
            "currency",
            "description",
            "status",
            "checkout_session_id",
            "payment_intent_id",
            "listing",
            "metadata",
            "paid_at",
            "created_at",
        ]
        read_only_fields = fields
