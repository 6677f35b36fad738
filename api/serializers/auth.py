from django.contrib.auth.password_validation import validate_password as run_password_validators
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .fields import CleanCharField

# accounts use the e-mail address as their username
USERNAME_MAX_LENGTH = 150


def _check_password(value):
    try:
        run_password_validators(value)
    except DjangoValidationError as e:
        raise serializers.ValidationError(e.messages)
    return value


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        return v.strip().lower()

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password must not be empty.')
        return v


class SignupSerializer(serializers.Serializer):
    firstName = CleanCharField(max_length=150)
    lastName = CleanCharField(max_length=150)
    email = serializers.EmailField(max_length=USERNAME_MAX_LENGTH)
    password = serializers.CharField(min_length=8, max_length=128, trim_whitespace=False)

    def validate_email(self, v):
        return v.strip().lower()

    def validate_password(self, v):
        return _check_password(v)


class PharmacySignupSerializer(serializers.Serializer):
    pharmacyName = CleanCharField(max_length=255)
    registrationNumber = CleanCharField(max_length=64)
    address = CleanCharField(max_length=512, required=False, allow_blank=True)
    phone = CleanCharField(max_length=32, required=False, allow_blank=True)
    pharmacyEmail = serializers.EmailField(required=False, allow_blank=True)
    website = CleanCharField(max_length=255, required=False, allow_blank=True)
    adminFirstName = CleanCharField(max_length=150)
    adminLastName = CleanCharField(max_length=150)
    adminEmail = serializers.EmailField(max_length=USERNAME_MAX_LENGTH)
    adminPassword = serializers.CharField(min_length=8, max_length=128, trim_whitespace=False)

    def validate_adminEmail(self, v):
        return v.strip().lower()

    def validate_adminPassword(self, v):
        return _check_password(v)


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)


class ProfileUpdateSerializer(serializers.Serializer):
    firstName = CleanCharField(max_length=150, required=False)
    lastName = CleanCharField(max_length=150, required=False)
    imageUrl = serializers.URLField(max_length=512, required=False, allow_blank=True)
