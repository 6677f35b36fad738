from rest_framework import serializers

from api.models import Donation

from .fields import CleanCharField


class DonationSerializer(serializers.Serializer):
    medicineName = CleanCharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1)
    expiryDate = serializers.DateField(required=False, allow_null=True)
    location = CleanCharField(max_length=255, required=False, allow_blank=True)
    organization = CleanCharField(max_length=255, required=False, allow_blank=True)
    notes = CleanCharField(required=False, allow_blank=True)
    status = serializers.CharField(required=False)

    def validate_status(self, v):
        return _normalize_status(v)


class DonationStatusSerializer(serializers.Serializer):
    status = serializers.CharField()

    def validate_status(self, v):
        return _normalize_status(v)


def _normalize_status(v):
    v = (v or '').strip().upper()
    if v not in dict(Donation.STATUS_CHOICES):
        raise serializers.ValidationError(f"Invalid donation status: {v or 'empty'}.")
    return v
