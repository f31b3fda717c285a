"""
Serializers for analytics API.
"""

from rest_framework import serializers

from payments.state_machines import DirectChargeState


class SyntheticChargeSerializer(serializers.Serializer):
    """Optional overrides for a synthetic charge."""

    account_id = serializers.CharField(max_length=255, required=False, allow_blank=True)
    amount = serializers.IntegerField(required=False, min_value=0)
    fee = serializers.IntegerField(required=False, min_value=0)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=DirectChargeState.choices, required=False)
    metadata = serializers.DictField(required=False)


class AnalyticsActionSerializer(serializers.Serializer):
    """Input for POST /api/v1/analytics/."""

    action = serializers.CharField()
    data = SyntheticChargeSerializer(required=False)
