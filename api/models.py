"""
Database models for the PharmaCare backend.

These models capture users and their roles, pharmacies and their staff,
and the per-user resources (medications, reminders and donations) that
make up the patient-facing side of the system.  Bills feed the sales
analytics of a pharmacy and audit events record security relevant
actions.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class Role(models.Model):
    """A coarse, system wide role held by a user.

    ``USER`` is a patient using the medication features, ``PHARMACY`` is a
    member of pharmacy staff and ``ADMIN`` is a platform administrator.
    """
    USER = 'USER'
    PHARMACY = 'PHARMACY'
    ADMIN = 'ADMIN'
    NAME_CHOICES = [
        (USER, 'User'),
        (PHARMACY, 'Pharmacy'),
        (ADMIN, 'Administrator'),
    ]
    name = models.CharField(max_length=20, choices=NAME_CHOICES, unique=True)

    @classmethod
    def get(cls, name: str) -> 'Role':
        role, _ = cls.objects.get_or_create(name=name)
        return role

    def __str__(self) -> str:
        return self.name


class User(AbstractUser):
    """Custom user model that logs in with its e-mail address.

    Roles are many-to-many so the same account can be a patient and work
    at one or more pharmacies.
    """
    email = models.EmailField(unique=True)
    image_url = models.URLField(max_length=512, blank=True)
    roles = models.ManyToManyField(Role, blank=True, related_name='users')

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    @property
    def role_names(self) -> set[str]:
        return {r.name for r in self.roles.all()}

    def has_role(self, name: str) -> bool:
        return name in self.role_names

    def __str__(self) -> str:
        return self.email


class Pharmacy(models.Model):
    """A pharmacy business with exactly one owning user."""
    name = models.CharField(max_length=255)
    registration_number = models.CharField(max_length=64, unique=True)
    address = models.CharField(max_length=512, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    website = models.CharField(max_length=255, blank=True)
    owner = models.ForeignKey(User, on_delete=models.PROTECT, related_name='owned_pharmacies')
    active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'pharmacies'

    def __str__(self) -> str:
        return f"{self.name} ({self.registration_number})"


class PharmacyStaff(models.Model):
    """Links a user to a pharmacy with a role inside that pharmacy.

    Deactivated rows are kept for history but no longer grant access.
    """
    ADMIN = 'ADMIN'
    STAFF = 'STAFF'
    ROLE_CHOICES = [
        (ADMIN, 'Admin'),
        (STAFF, 'Staff'),
    ]
    pharmacy = models.ForeignKey(Pharmacy, on_delete=models.CASCADE, related_name='staff')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='staff_assignments')
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=STAFF)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [('pharmacy', 'user')]
        verbose_name_plural = 'pharmacy staff'

    def __str__(self) -> str:
        return f"{self.user} at {self.pharmacy} as {self.role}"


class Medication(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='medications')
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    dosage = models.CharField(max_length=100, blank=True)
    frequency = models.CharField(max_length=100, blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.user_id})"


class Reminder(models.Model):
    """A scheduled dose of a medication.

    ``completed_at`` is kept in lockstep with ``completed`` on every save:
    it is stamped the first time the reminder is completed and cleared
    when the reminder is reopened.
    """
    medication = models.ForeignKey(Medication, on_delete=models.CASCADE, related_name='reminders')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='reminders')
    reminder_time = models.DateTimeField(db_index=True)
    notes = models.TextField(blank=True)
    completed = models.BooleanField(default=False, db_index=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['user', 'reminder_time'], name='reminder_user_time_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.completed and self.completed_at is None:
            self.completed_at = timezone.now()
        elif not self.completed:
            self.completed_at = None
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"Reminder {self.id} for {self.medication_id} @ {self.reminder_time:%F %T}"


class Donation(models.Model):
    """A medicine donation offered by a user.

    Status only ever moves out of ``PENDING``; ``COMPLETED`` and
    ``CANCELLED`` are terminal.
    """
    STATUS_PENDING = 'PENDING'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]
    TRANSITIONS = {
        STATUS_PENDING: {STATUS_COMPLETED, STATUS_CANCELLED},
        STATUS_COMPLETED: set(),
        STATUS_CANCELLED: set(),
    }

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='donations')
    medicine_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField()
    expiry_date = models.DateField(null=True, blank=True)
    location = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    organization = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    donation_date = models.DateTimeField(default=timezone.now)
    completed_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_pending(self) -> bool:
        return self.status == self.STATUS_PENDING

    def __str__(self) -> str:
        return f"{self.medicine_name} x{self.quantity} ({self.status})"


class Bill(models.Model):
    """A sale recorded by a pharmacy."""
    pharmacy = models.ForeignKey(Pharmacy, on_delete=models.CASCADE, related_name='bills')
    bill_number = models.CharField(max_length=32)
    customer_name = models.CharField(max_length=255, blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='bills_created')
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        unique_together = [('pharmacy', 'bill_number')]
        indexes = [
            models.Index(fields=['pharmacy', 'created_at'], name='bill_pharmacy_created_idx'),
        ]

    def __str__(self) -> str:
        return f"Bill #{self.bill_number} ({self.pharmacy_id})"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.BigIntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
