"""Points, streaks and achievements derived from reminder history."""
from __future__ import annotations

from collections import defaultdict
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from api.models import Donation, Reminder
from api.principal import Principal

STREAK_LOOKBACK_DAYS = 366

REWARD_CATALOGUE = (
    (1, '10% Off Next Prescription', 'Get 10% off your next prescription refill at participating pharmacies', 500),
    (2, 'Free Health Check', 'Complimentary basic health check at partner clinics', 1000),
    (3, 'Premium Membership Month', 'One month of premium membership features', 750),
)


def level_for(points: int) -> str:
    if points >= 1000:
        return 'PLATINUM'
    if points >= 500:
        return 'GOLD'
    if points >= 200:
        return 'SILVER'
    return 'BRONZE'


def current_streak(principal: Principal, *, now=None) -> int:
    """Consecutive fully completed days ending today.

    A day counts when it had at least one reminder and all of them were
    completed.  Today is skipped rather than breaking the streak while it
    still has outstanding (or no) reminders.
    """
    now = timezone.localtime(now or timezone.now())
    today = now.date()
    since = now.replace(hour=0, minute=0, second=0, microsecond=0) - timedelta(days=STREAK_LOOKBACK_DAYS)
    until = now.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)

    per_day = defaultdict(lambda: [0, 0])
    rows = Reminder.objects.filter(
        user_id=principal.id, reminder_time__gte=since, reminder_time__lt=until,
    ).values_list('reminder_time', 'completed')
    for when, done in rows:
        day = per_day[timezone.localtime(when).date()]
        day[0] += int(done)
        day[1] += 1

    def complete(day) -> bool:
        done, total = per_day.get(day, (0, 0))
        return total > 0 and done == total

    day = today if complete(today) else today - timedelta(days=1)
    streak = 0
    while streak < STREAK_LOOKBACK_DAYS and complete(day):
        streak += 1
        day -= timedelta(days=1)
    return streak


def adherence_points(principal: Principal, *, now=None) -> int:
    now = now or timezone.now()
    completed = Reminder.objects.filter(
        user_id=principal.id, completed=True, reminder_time__gt=now - timedelta(days=30),
    ).count()
    return completed * settings.REWARD_POINTS_PER_REMINDER


def available_rewards(points: int) -> list[dict]:
    return [
        {'id': rid, 'name': name, 'description': desc, 'points': cost, 'available': points >= cost}
        for rid, name, desc, cost in REWARD_CATALOGUE
    ]


def dashboard(principal: Principal, *, now=None) -> dict:
    points = adherence_points(principal, now=now)
    streak = current_streak(principal, now=now)
    total = points + streak * settings.REWARD_POINTS_PER_STREAK_DAY
    return {
        'totalPoints': total,
        'adherencePoints': points,
        'currentStreak': streak,
        'level': level_for(total),
        'availableRewards': available_rewards(total),
    }


def achievements(principal: Principal, *, now=None) -> list[dict]:
    streak = current_streak(principal, now=now)
    donated = Donation.objects.filter(user_id=principal.id, status=Donation.STATUS_COMPLETED).count()
    return [
        {
            'id': 1,
            'title': 'Perfect Week',
            'description': 'Take all medications on time for a week',
            'progress': min(streak, 7),
            'total': 7,
            'points': 100,
            'completed': streak >= 7,
        },
        {
            'id': 2,
            'title': 'Donation Hero',
            'description': 'Donate medicines 3 times',
            'progress': min(donated, 3),
            'total': 3,
            'points': 150,
            'completed': donated >= 3,
        },
    ]
