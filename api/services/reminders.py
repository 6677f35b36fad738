"""Reminder lifecycle.

A reminder always belongs to the same user as its medication.  The
``completed_at`` stamp is maintained by :meth:`Reminder.save`.
"""
from __future__ import annotations

from api.exceptions import ResourceNotFound
from api.models import Reminder
from api.principal import Principal

from .medications import get_medication


def _scoped(principal: Principal):
    return Reminder.objects.select_related('medication').filter(user_id=principal.id)


def list_reminders(principal: Principal):
    return _scoped(principal).order_by('-reminder_time', '-id')


def list_pending(principal: Principal, *, start=None, end=None):
    qs = _scoped(principal).filter(completed=False)
    if start is not None and end is not None:
        qs = qs.filter(reminder_time__gte=start, reminder_time__lte=end)
    return qs.order_by('reminder_time', 'id')


def get_reminder(principal: Principal, pk) -> Reminder:
    reminder = _scoped(principal).filter(pk=pk).first()
    if reminder is None:
        raise ResourceNotFound('Reminder', 'id', pk)
    return reminder


def create_reminder(principal: Principal, data: dict) -> Reminder:
    med = get_medication(principal, data['medicationId'])
    reminder = Reminder(
        medication=med,
        user_id=principal.id,
        reminder_time=data['reminderTime'],
        notes=data.get('notes', ''),
        completed=data.get('completed', False),
    )
    reminder.save()
    return reminder


def update_reminder(principal: Principal, pk, data: dict) -> Reminder:
    reminder = get_reminder(principal, pk)
    if data.get('medicationId') and data['medicationId'] != reminder.medication_id:
        reminder.medication = get_medication(principal, data['medicationId'])
    if 'reminderTime' in data:
        reminder.reminder_time = data['reminderTime']
    if 'notes' in data:
        reminder.notes = data['notes']
    if 'completed' in data:
        reminder.completed = data['completed']
    reminder.save()
    return reminder


def complete_reminder(principal: Principal, pk) -> Reminder:
    """Mark a reminder as taken; repeating the call changes nothing."""
    reminder = get_reminder(principal, pk)
    if not reminder.completed:
        reminder.completed = True
        reminder.save()
    return reminder


def delete_reminder(principal: Principal, pk) -> None:
    get_reminder(principal, pk).delete()
