from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.urls import reverse

from api.models import Bill, Medication, Reminder
from api.principal import Principal
from api.services import analytics

pytestmark = pytest.mark.django_db

# a Wednesday
NOW = datetime(2024, 5, 15, 18, 30, tzinfo=dt_timezone.utc)


@pytest.fixture(autouse=True)
def utc(settings):
    settings.TIME_ZONE = 'UTC'


@pytest.fixture
def med(patient):
    return Medication.objects.create(user=patient, name='Metformin')


def remind(med, when, completed=False):
    return Reminder.objects.create(medication=med, user=med.user, reminder_time=when, completed=completed)


def test_time_of_day_buckets():
    assert [analytics.time_of_day(h) for h in (4, 5, 11, 12, 16, 17, 20, 21, 23)] == [
        'NIGHT', 'MORNING', 'MORNING', 'AFTERNOON', 'AFTERNOON', 'EVENING', 'EVENING', 'NIGHT', 'NIGHT',
    ]


def test_user_dashboard_counts(patient, med):
    Medication.objects.create(user=patient, name='Old', active=False)
    remind(med, NOW - timedelta(days=1), completed=True)
    remind(med, NOW - timedelta(days=2), completed=True)
    remind(med, NOW - timedelta(days=3))
    remind(med, NOW - timedelta(days=10))  # outside the window, still pending

    data = analytics.user_dashboard(Principal.from_user(patient), now=NOW)
    assert data == {
        'activeMedicationsCount': 1,
        'pendingRemindersCount': 2,
        'adherenceRate': 66.7,
        'missedRemindersCount': 1,
    }


def test_user_dashboard_without_reminders(patient):
    data = analytics.user_dashboard(Principal.from_user(patient), now=NOW)
    assert data['adherenceRate'] == 0.0
    assert data['missedRemindersCount'] == 0


def test_adherence_by_day_and_time(patient, med):
    # Tuesday 08:00 taken, Tuesday 13:00 missed, Monday 22:00 taken
    remind(med, datetime(2024, 5, 14, 8, tzinfo=dt_timezone.utc), completed=True)
    remind(med, datetime(2024, 5, 14, 13, tzinfo=dt_timezone.utc))
    remind(med, datetime(2024, 5, 13, 22, tzinfo=dt_timezone.utc), completed=True)
    # outside a 7 day window
    remind(med, NOW - timedelta(days=20))

    data = analytics.user_adherence(Principal.from_user(patient), 7, now=NOW)
    by_day = data['adherenceByDayOfWeek']
    by_time = data['adherenceByTimeOfDay']
    assert list(by_day) == list(analytics.DAYS_OF_WEEK)
    assert by_day['TUESDAY'] == 50.0
    assert by_day['MONDAY'] == 100.0
    assert by_day['SUNDAY'] == 0.0
    assert by_time == {'MORNING': 100.0, 'AFTERNOON': 0.0, 'EVENING': 0.0, 'NIGHT': 100.0}


def test_adherence_days_param_is_validated(client_for, patient):
    c = client_for(patient)
    assert c.get(reverse('analytics-user-adherence'), {'days': 0}).status_code == 400
    assert c.get(reverse('analytics-user-adherence'), {'days': 366}).status_code == 400
    r = c.get(reverse('analytics-user-adherence'))
    assert r.status_code == 200 and r.data['days'] == 7


def test_medications_by_status(client_for, patient, other_patient):
    Medication.objects.create(user=patient, name='A')
    Medication.objects.create(user=patient, name='B', active=False)
    Medication.objects.create(user=other_patient, name='C')
    r = client_for(patient).get(reverse('analytics-user-medications'))
    assert r.data == {'medicationsByStatus': {'ACTIVE': 1, 'INACTIVE': 1}}


def test_dashboard_alias_routes(client_for, patient):
    c = client_for(patient)
    assert c.get(reverse('analytics-dashboard')).data == c.get(reverse('analytics-user-dashboard')).data


def test_period_bounds():
    key, start, end = analytics.period_bounds('week', now=NOW)
    assert key == 'week'
    assert start == datetime(2024, 5, 13, tzinfo=dt_timezone.utc)
    assert analytics.period_bounds('MONTH', now=NOW)[1] == datetime(2024, 5, 1, tzinfo=dt_timezone.utc)
    assert analytics.period_bounds('year', now=NOW)[1] == datetime(2024, 1, 1, tzinfo=dt_timezone.utc)
    _, t0, t1 = analytics.period_bounds('today', now=NOW)
    assert (t0, t1) == (datetime(2024, 5, 15, tzinfo=dt_timezone.utc), datetime(2024, 5, 16, tzinfo=dt_timezone.utc))


def test_unknown_period_falls_back_to_week(caplog):
    assert analytics.period_bounds('fortnight', now=NOW)[0] == 'week'
    assert 'Defaulting' in caplog.text


def test_sales_summary_sums_bills_in_period(pharmacy):
    Bill.objects.create(pharmacy=pharmacy, bill_number='1', total_amount=Decimal('10.25'), created_at=NOW)
    Bill.objects.create(pharmacy=pharmacy, bill_number='2', total_amount=Decimal('4.75'),
                        created_at=NOW - timedelta(days=1))
    # last week, excluded from 'week' but part of 'month'
    Bill.objects.create(pharmacy=pharmacy, bill_number='3', total_amount=Decimal('100'),
                        created_at=NOW - timedelta(days=7))

    assert analytics.sales_summary(pharmacy.id, 'week', now=NOW)['totalAmount'] == 15.0
    assert analytics.sales_summary(pharmacy.id, 'today', now=NOW)['totalAmount'] == 10.25
    assert analytics.sales_summary(pharmacy.id, 'month', now=NOW)['totalAmount'] == 115.0


def test_sales_period_end_is_exclusive(pharmacy):
    next_midnight = datetime(2024, 5, 16, tzinfo=dt_timezone.utc)
    Bill.objects.create(pharmacy=pharmacy, bill_number='1', total_amount=Decimal('9'), created_at=next_midnight)
    Bill.objects.create(pharmacy=pharmacy, bill_number='2', total_amount=Decimal('2.5'),
                        created_at=next_midnight - timedelta(microseconds=1))
    assert analytics.sales_summary(pharmacy.id, 'today', now=NOW)['totalAmount'] == 2.5
    assert analytics.sales_summary(pharmacy.id, 'week', now=NOW)['totalAmount'] == 2.5
