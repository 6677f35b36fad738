from django.conf import settings
from rest_framework import serializers

from api.models import PharmacyStaff

from .auth import USERNAME_MAX_LENGTH
from .fields import CleanCharField


class PharmacySerializer(serializers.Serializer):
    name = CleanCharField(max_length=255)
    registrationNumber = CleanCharField(max_length=64)
    address = CleanCharField(max_length=512, required=False, allow_blank=True)
    phone = CleanCharField(max_length=32, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    website = CleanCharField(max_length=255, required=False, allow_blank=True)


class PharmacyUpdateSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255, required=False)
    address = CleanCharField(max_length=512, required=False, allow_blank=True)
    phone = CleanCharField(max_length=32, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    website = CleanCharField(max_length=255, required=False, allow_blank=True)
    active = serializers.BooleanField(required=False)


class StaffCreateSerializer(serializers.Serializer):
    email = serializers.EmailField(max_length=USERNAME_MAX_LENGTH)
    firstName = CleanCharField(max_length=150, required=False, allow_blank=True)
    lastName = CleanCharField(max_length=150, required=False, allow_blank=True)
    password = serializers.CharField(min_length=8, max_length=128, required=False, trim_whitespace=False)
    role = serializers.ChoiceField(choices=[PharmacyStaff.ADMIN, PharmacyStaff.STAFF], default=PharmacyStaff.STAFF)

    def validate_email(self, v):
        return v.strip().lower()


class StaffUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=[PharmacyStaff.ADMIN, PharmacyStaff.STAFF], required=False)
    active = serializers.BooleanField(required=False)


class BillCreateSerializer(serializers.Serializer):
    billNumber = CleanCharField(max_length=32, required=False, allow_blank=True)
    customerName = CleanCharField(max_length=255, required=False, allow_blank=True)
    totalAmount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class ActivityQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, default=5)

    def validate_limit(self, v):
        if v < 1 or v > settings.ACTIVITY_MAX_LIMIT:
            raise serializers.ValidationError(f'Limit must be between 1 and {settings.ACTIVITY_MAX_LIMIT}.')
        return v
