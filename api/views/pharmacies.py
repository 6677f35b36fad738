"""
Pharmacy management views.

Route policies decide who may reach each handler: platform ADMINs can
act on any pharmacy, everyone else only on pharmacies they own or
staff (see ``api.policies``).  Handlers here assume that check passed.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..dto import serialize_pharmacy
from ..principal import principal_for
from ..serializers.pharmacies import ActivityQuerySerializer, PharmacySerializer, PharmacyUpdateSerializer
from ..services import pharmacies as svc


@api_view(['GET', 'POST'])
def pharmacies_list(request):
    if request.method == 'GET':
        return Response([serialize_pharmacy(p) for p in svc.list_pharmacies()])
    s = PharmacySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    pharmacy = svc.create_pharmacy(principal_for(request), s.validated_data)
    return Response(serialize_pharmacy(pharmacy), status=status.HTTP_201_CREATED)


@api_view(['GET'])
def pharmacies_mine(request):
    return Response([serialize_pharmacy(p) for p in svc.list_mine(principal_for(request))])


@api_view(['GET', 'PUT', 'DELETE'])
def pharmacy_detail(request, pharmacy_id: int):
    if request.method == 'GET':
        return Response(serialize_pharmacy(svc.get_pharmacy(pharmacy_id)))
    if request.method == 'PUT':
        s = PharmacyUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        return Response(serialize_pharmacy(svc.update_pharmacy(pharmacy_id, s.validated_data)))
    svc.deactivate_pharmacy(principal_for(request), pharmacy_id)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
def pharmacy_activity(request, pharmacy_id: int):
    """Latest events at a pharmacy, newest first.  ``limit`` is 1..50, default 5."""
    q = ActivityQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    return Response(svc.recent_activity(pharmacy_id, q.validated_data['limit']))
