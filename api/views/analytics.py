"""
Analytics endpoints.

User analytics only ever read the caller's own rows.  The sales summary
is keyed by the ``pharmacyId`` query parameter, which the route policy
checks for membership.
"""
from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..principal import principal_for
from ..serializers.analytics import AdherenceQuerySerializer, SalesSummaryQuerySerializer
from ..services import analytics as svc


@api_view(['GET'])
def user_dashboard(request):
    return Response(svc.user_dashboard(principal_for(request)))


@api_view(['GET'])
def user_adherence(request):
    q = AdherenceQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response(svc.user_adherence(principal_for(request), q.validated_data['days']))


@api_view(['GET'])
def user_medications(request):
    return Response(svc.user_medications(principal_for(request)))


@api_view(['GET'])
def sales_summary(request):
    q = SalesSummaryQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response(svc.sales_summary(q.validated_data['pharmacyId'], q.validated_data['period']))
