"""
Medication endpoints.

Every query is scoped to the caller, so another user's medication is
reported as not found rather than forbidden.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..dto import serialize_medication
from ..principal import principal_for
from ..serializers.medications import MedicationSerializer
from ..services import medications as svc


@api_view(['GET', 'POST'])
def medications_list(request):
    principal = principal_for(request)
    if request.method == 'GET':
        return Response([serialize_medication(m) for m in svc.list_medications(principal)])
    s = MedicationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    med = svc.create_medication(principal, s.validated_data)
    return Response(serialize_medication(med), status=status.HTTP_201_CREATED)


@api_view(['GET'])
def medications_active(request):
    meds = svc.list_medications(principal_for(request), active_only=True)
    return Response([serialize_medication(m) for m in meds])


@api_view(['GET', 'PUT', 'DELETE'])
def medication_detail(request, pk: int):
    principal = principal_for(request)
    if request.method == 'GET':
        return Response(serialize_medication(svc.get_medication(principal, pk)))
    if request.method == 'PUT':
        s = MedicationSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        med = svc.update_medication(principal, pk, s.validated_data)
        return Response(serialize_medication(med))
    svc.delete_medication(principal, pk)
    return Response(status=status.HTTP_204_NO_CONTENT)
