"""
Pharmacy staff management.

Staff can be added by e-mail (creating a PHARMACY account when the
address is unknown), have their role or active flag changed, and be
removed.  Removal deactivates the row so history is kept.  The owner's
own assignment is immutable.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..dto import serialize_staff
from ..principal import principal_for
from ..serializers.pharmacies import StaffCreateSerializer, StaffUpdateSerializer
from ..services import pharmacies as svc


@api_view(['GET', 'POST'])
def staff_list(request, pharmacy_id: int):
    if request.method == 'GET':
        return Response([serialize_staff(st) for st in svc.list_staff(pharmacy_id)])
    s = StaffCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    staff = svc.add_staff(principal_for(request), pharmacy_id, s.validated_data)
    return Response(serialize_staff(staff), status=status.HTTP_201_CREATED)


@api_view(['PUT', 'DELETE'])
def staff_detail(request, pharmacy_id: int, staff_id: int):
    principal = principal_for(request)
    if request.method == 'PUT':
        s = StaffUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        return Response(serialize_staff(svc.update_staff(principal, pharmacy_id, staff_id, s.validated_data)))
    svc.remove_staff(principal, pharmacy_id, staff_id)
    return Response(status=status.HTTP_204_NO_CONTENT)
