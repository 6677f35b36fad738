from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..dto import serialize_bill
from ..principal import principal_for
from ..serializers.pharmacies import BillCreateSerializer
from ..services import pharmacies as svc


@api_view(['GET', 'POST'])
def bills_list(request, pharmacy_id: int):
    if request.method == 'GET':
        return Response([serialize_bill(b) for b in svc.list_bills(pharmacy_id)])
    s = BillCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    bill = svc.create_bill(principal_for(request), pharmacy_id, s.validated_data)
    return Response(serialize_bill(bill), status=status.HTTP_201_CREATED)
