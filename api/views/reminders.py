from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..dto import serialize_reminder
from ..principal import principal_for
from ..serializers.reminders import PendingRangeQuerySerializer, ReminderSerializer
from ..services import reminders as svc


@api_view(['GET', 'POST'])
def reminders_list(request):
    principal = principal_for(request)
    if request.method == 'GET':
        return Response([serialize_reminder(r) for r in svc.list_reminders(principal)])
    s = ReminderSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    reminder = svc.create_reminder(principal, s.validated_data)
    return Response(serialize_reminder(reminder), status=status.HTTP_201_CREATED)


@api_view(['GET'])
def reminders_pending(request):
    """Uncompleted reminders, optionally limited to ``start``..``end`` (ISO-8601)."""
    q = PendingRangeQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    rows = svc.list_pending(principal_for(request), start=q.validated_data.get('start'), end=q.validated_data.get('end'))
    return Response([serialize_reminder(r) for r in rows])


@api_view(['GET', 'PUT', 'DELETE'])
def reminder_detail(request, pk: int):
    principal = principal_for(request)
    if request.method == 'GET':
        return Response(serialize_reminder(svc.get_reminder(principal, pk)))
    if request.method == 'PUT':
        s = ReminderSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        return Response(serialize_reminder(svc.update_reminder(principal, pk, s.validated_data)))
    svc.delete_reminder(principal, pk)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
def reminder_complete(request, pk: int):
    return Response(serialize_reminder(svc.complete_reminder(principal_for(request), pk)))
