# api/management/commands/ensure_test_users.py
from django.core.management.base import BaseCommand
from django.db import transaction

from api.models import Pharmacy, PharmacyStaff, Role, User

TEST_SET = [
    ("admin@pharmacare.test", "Platform", "Admin", [Role.ADMIN]),
    ("patient@pharmacare.test", "Pat", "Ient", [Role.USER]),
    ("pharmacist@pharmacare.test", "Phil", "Armacist", [Role.PHARMACY]),
]

DEMO_PHARMACY = {
    "name": "Demo Pharmacy",
    "registration_number": "RX-DEMO-001",
    "address": "1 Main Street",
}


class Command(BaseCommand):
    help = "Ensure roles, demo users and a demo pharmacy exist (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="PharmaCare#2024", help="Password set on every demo user.")

    @transaction.atomic
    def handle(self, *args, **opts):
        for name, _ in Role.NAME_CHOICES:
            Role.get(name)

        users = {}
        for email, first, last, roles in TEST_SET:
            u, created = User.objects.get_or_create(
                email=email,
                defaults={"username": email, "first_name": first, "last_name": last, "is_active": True},
            )
            # always reset password, activation and roles
            u.set_password(opts["password"])
            u.is_active = True
            u.save()
            u.roles.set([Role.get(r) for r in roles])
            users[email] = u
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({', '.join(roles)})"))

        owner = users["pharmacist@pharmacare.test"]
        pharmacy, _ = Pharmacy.objects.get_or_create(
            registration_number=DEMO_PHARMACY["registration_number"],
            defaults={**DEMO_PHARMACY, "owner": owner},
        )
        PharmacyStaff.objects.update_or_create(
            pharmacy=pharmacy, user=owner, defaults={"role": PharmacyStaff.ADMIN, "active": True},
        )
        self.stdout.write(self.style.SUCCESS(f"ok: pharmacy {pharmacy.registration_number}"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
