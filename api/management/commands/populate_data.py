"""
Management command to populate the database with demo data.

Builds on the accounts created by ``ensure_test_users`` and gives the
demo patient a medication history and the demo pharmacy some sales, so
the analytics and rewards endpoints have something to show.
"""
import random
from datetime import timedelta
from decimal import Decimal

from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from api.models import Bill, Donation, Medication, Pharmacy, Reminder, User

MEDICATIONS = [
    ('Metformin', '500mg', 'Twice daily'),
    ('Lisinopril', '10mg', 'Once daily'),
    ('Atorvastatin', '20mg', 'Once daily'),
]


class Command(BaseCommand):
    help = 'Populate database with demo medications, reminders, donations and bills'

    def add_arguments(self, parser):
        parser.add_argument('--days', type=int, default=14, help='Days of reminder history to generate.')
        parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible data.')

    @transaction.atomic
    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        call_command('ensure_test_users', stdout=self.stdout)

        patient = User.objects.get(email='patient@pharmacare.test')
        pharmacist = User.objects.get(email='pharmacist@pharmacare.test')
        pharmacy = Pharmacy.objects.get(registration_number='RX-DEMO-001')

        meds = self.create_medications(patient)
        reminders = self.create_reminders(patient, meds, options['days'], rng)
        donations = self.create_donations(patient)
        bills = self.create_bills(pharmacy, pharmacist, rng)

        self.stdout.write(self.style.SUCCESS(
            f'Created {len(meds)} medications, {reminders} reminders, '
            f'{donations} donations and {bills} bills.'
        ))

    def create_medications(self, patient):
        today = timezone.localdate()
        meds = []
        for name, dosage, frequency in MEDICATIONS:
            med, _ = Medication.objects.get_or_create(
                user=patient, name=name,
                defaults={'dosage': dosage, 'frequency': frequency, 'start_date': today - timedelta(days=60)},
            )
            meds.append(med)
        return meds

    def create_reminders(self, patient, meds, days, rng):
        now = timezone.localtime()
        created = 0
        for offset in range(days, -1, -1):
            day = (now - timedelta(days=offset)).replace(minute=0, second=0, microsecond=0)
            for med, hour in zip(meds, (8, 13, 20)):
                when = day.replace(hour=hour)
                # past doses are mostly taken, future ones are open
                done = when < now and rng.random() < 0.85
                _, was_created = Reminder.objects.get_or_create(
                    user=patient, medication=med, reminder_time=when,
                    defaults={'completed': done},
                )
                created += int(was_created)
        return created

    def create_donations(self, patient):
        rows = [
            ('Paracetamol', 20, Donation.STATUS_COMPLETED),
            ('Ibuprofen', 12, Donation.STATUS_PENDING),
            ('Amoxicillin', 7, Donation.STATUS_CANCELLED),
        ]
        created = 0
        for name, qty, status in rows:
            _, was_created = Donation.objects.get_or_create(
                user=patient, medicine_name=name,
                defaults={
                    'quantity': qty,
                    'status': status,
                    'organization': 'City Health Shelter',
                    'completed_date': timezone.now() if status == Donation.STATUS_COMPLETED else None,
                },
            )
            created += int(was_created)
        return created

    def create_bills(self, pharmacy, pharmacist, rng):
        created = 0
        now = timezone.now()
        for n in range(1, 11):
            _, was_created = Bill.objects.get_or_create(
                pharmacy=pharmacy, bill_number=f'DEMO-{n:04d}',
                defaults={
                    'customer_name': f'Customer {n}',
                    'total_amount': Decimal(rng.randint(500, 15000)) / 100,
                    'created_by': pharmacist,
                    'created_at': now - timedelta(days=rng.randint(0, 40)),
                },
            )
            created += int(was_created)
        return created
