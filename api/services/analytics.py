"""
Read-only analytics over a user's medication history and a pharmacy's
sales.  Every figure is computed from stored rows; bucketing by day and
time of day happens in the configured ``TIME_ZONE``.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import timedelta
from decimal import Decimal

from django.db.models import Sum
from django.utils import timezone

from api.models import Bill, Medication, Reminder
from api.principal import Principal

from .pharmacies import get_pharmacy

logger = logging.getLogger(__name__)

DAYS_OF_WEEK = ('MONDAY', 'TUESDAY', 'WEDNESDAY', 'THURSDAY', 'FRIDAY', 'SATURDAY', 'SUNDAY')
TIMES_OF_DAY = ('MORNING', 'AFTERNOON', 'EVENING', 'NIGHT')
PERIODS = ('today', 'week', 'month', 'year')


def adherence_rate(completed: int, total: int) -> float:
    return round(completed / total * 100, 1) if total else 0.0


def time_of_day(hour: int) -> str:
    if 5 <= hour < 12:
        return 'MORNING'
    if 12 <= hour < 17:
        return 'AFTERNOON'
    if 17 <= hour < 21:
        return 'EVENING'
    return 'NIGHT'


def user_dashboard(principal: Principal, *, now=None) -> dict:
    now = now or timezone.now()
    reminders = Reminder.objects.filter(user_id=principal.id)
    recent = reminders.filter(reminder_time__gt=now - timedelta(days=7))
    total = recent.count()
    completed = recent.filter(completed=True).count()
    return {
        'activeMedicationsCount': Medication.objects.filter(user_id=principal.id, active=True).count(),
        'pendingRemindersCount': reminders.filter(completed=False).count(),
        'adherenceRate': adherence_rate(completed, total),
        'missedRemindersCount': total - completed,
    }


def user_adherence(principal: Principal, days: int = 7, *, now=None) -> dict:
    now = now or timezone.now()
    rows = Reminder.objects.filter(
        user_id=principal.id,
        reminder_time__gte=now - timedelta(days=days),
        reminder_time__lte=now,
    ).values_list('reminder_time', 'completed')

    by_day = {name: [0, 0] for name in DAYS_OF_WEEK}
    by_time = {name: [0, 0] for name in TIMES_OF_DAY}
    for when, done in rows:
        local = timezone.localtime(when)
        for bucket in (by_day[DAYS_OF_WEEK[local.weekday()]], by_time[time_of_day(local.hour)]):
            bucket[0] += int(done)
            bucket[1] += 1

    return {
        'days': days,
        'adherenceByDayOfWeek': OrderedDict((k, adherence_rate(*v)) for k, v in by_day.items()),
        'adherenceByTimeOfDay': OrderedDict((k, adherence_rate(*v)) for k, v in by_time.items()),
    }


def user_medications(principal: Principal) -> dict:
    qs = Medication.objects.filter(user_id=principal.id)
    return {
        'medicationsByStatus': {
            'ACTIVE': qs.filter(active=True).count(),
            'INACTIVE': qs.filter(active=False).count(),
        }
    }


def period_bounds(period: str, *, now=None):
    """Return ``(key, start, end)`` for a sales period; ``end`` is exclusive."""
    now = timezone.localtime(now or timezone.now())
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    key = (period or '').lower()
    if key not in PERIODS:
        logger.warning("Invalid period specified: %r. Defaulting to 'week'.", period)
        key = 'week'
    end = midnight + timedelta(days=1)
    if key == 'today':
        return key, midnight, end
    if key == 'week':
        return key, midnight - timedelta(days=now.weekday()), end
    if key == 'month':
        return key, midnight.replace(day=1), end
    return key, midnight.replace(month=1, day=1), end


def sales_summary(pharmacy_id, period: str = 'week', *, now=None) -> dict:
    pharmacy = get_pharmacy(pharmacy_id)
    key, start, end = period_bounds(period, now=now)
    total = (
        Bill.objects.filter(pharmacy=pharmacy, created_at__gte=start, created_at__lt=end)
        .aggregate(total=Sum('total_amount'))['total']
    ) or Decimal('0')
    return {
        'pharmacyId': pharmacy.id,
        'period': key,
        'totalAmount': float(total),
    }
