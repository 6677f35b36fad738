from rest_framework import serializers

from .fields import CleanCharField


class MedicationSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255)
    description = CleanCharField(required=False, allow_blank=True)
    dosage = CleanCharField(max_length=100, required=False, allow_blank=True)
    frequency = CleanCharField(max_length=100, required=False, allow_blank=True)
    startDate = serializers.DateField(required=False, allow_null=True)
    endDate = serializers.DateField(required=False, allow_null=True)
    notes = CleanCharField(required=False, allow_blank=True)
    active = serializers.BooleanField(required=False)

    def validate(self, attrs):
        start, end = attrs.get('startDate'), attrs.get('endDate')
        if start and end and end < start:
            raise serializers.ValidationError({'endDate': 'End date must not be before the start date.'})
        return attrs
