"""
Donation endpoints.

Donations can only be edited or deleted while ``PENDING``; the status
endpoint drives the ``PENDING -> COMPLETED | CANCELLED`` transitions.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..dto import serialize_donation
from ..principal import principal_for
from ..serializers.donations import DonationSerializer, DonationStatusSerializer
from ..services import donations as svc


@api_view(['GET', 'POST'])
def donations_list(request):
    principal = principal_for(request)
    if request.method == 'GET':
        return Response([serialize_donation(d) for d in svc.list_donations(principal)])
    s = DonationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    donation = svc.create_donation(principal, s.validated_data)
    return Response(serialize_donation(donation), status=status.HTTP_201_CREATED)


@api_view(['GET'])
def donations_pending(request):
    rows = svc.list_donations(principal_for(request), pending_only=True)
    return Response([serialize_donation(d) for d in rows])


@api_view(['GET', 'PUT', 'DELETE'])
def donation_detail(request, pk: int):
    principal = principal_for(request)
    if request.method == 'GET':
        return Response(serialize_donation(svc.get_donation(principal, pk)))
    if request.method == 'PUT':
        s = DonationSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(serialize_donation(svc.update_donation(principal, pk, s.validated_data)))
    svc.delete_donation(principal, pk)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PUT'])
def donation_status(request, pk: int):
    s = DonationStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    donation = svc.change_status(principal_for(request), pk, s.validated_data['status'])
    return Response(serialize_donation(donation))
