from rest_framework import serializers


class AdherenceQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(required=False, default=7, min_value=1, max_value=365)


class SalesSummaryQuerySerializer(serializers.Serializer):
    pharmacyId = serializers.IntegerField(min_value=1)
    period = serializers.CharField(required=False, default='week')
