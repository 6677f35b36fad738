from rest_framework import serializers

from .fields import CleanCharField


class ReminderSerializer(serializers.Serializer):
    medicationId = serializers.IntegerField(min_value=1)
    reminderTime = serializers.DateTimeField()
    notes = CleanCharField(required=False, allow_blank=True)
    completed = serializers.BooleanField(required=False)


class PendingRangeQuerySerializer(serializers.Serializer):
    start = serializers.DateTimeField(required=False)
    end = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        start, end = attrs.get('start'), attrs.get('end')
        if (start is None) != (end is None):
            raise serializers.ValidationError('Both start and end must be provided together.')
        if start and end and end < start:
            raise serializers.ValidationError('End must not be before start.')
        return attrs
