"""
Pharmacy, staff and bill management.

Access to a pharmacy is checked by the route policy before any of
these functions run; they only resolve rows and apply changes.
"""
from __future__ import annotations

import logging
import secrets

from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from api.exceptions import DuplicateResource, ResourceNotFound
from api.models import Bill, Pharmacy, PharmacyStaff, Role, User
from api.principal import Principal

from .audit import log_action

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Pharmacies
# ---------------------------------------------------------------------
def list_pharmacies():
    return Pharmacy.objects.order_by('id')


def list_mine(principal: Principal):
    """Pharmacies the principal owns or holds an active staff row at."""
    return (
        Pharmacy.objects.filter(
            Q(owner_id=principal.id)
            | Q(staff__user_id=principal.id, staff__active=True)
        )
        .distinct()
        .order_by('id')
    )


def get_pharmacy(pharmacy_id) -> Pharmacy:
    pharmacy = Pharmacy.objects.filter(pk=pharmacy_id).first()
    if pharmacy is None:
        raise ResourceNotFound('Pharmacy', 'id', pharmacy_id)
    return pharmacy


def create_pharmacy(principal: Principal, data: dict) -> Pharmacy:
    if Pharmacy.objects.filter(registration_number=data['registrationNumber']).exists():
        raise DuplicateResource('Pharmacy registration number already exists!')
    with transaction.atomic():
        pharmacy = Pharmacy.objects.create(
            name=data['name'],
            registration_number=data['registrationNumber'],
            address=data.get('address', ''),
            phone=data.get('phone', ''),
            email=data.get('email', ''),
            website=data.get('website', ''),
            owner_id=principal.id,
        )
        PharmacyStaff.objects.create(pharmacy=pharmacy, user_id=principal.id, role=PharmacyStaff.ADMIN)
    log_action(user=principal, action='pharmacy_create', object_type='pharmacy', object_id=pharmacy.id)
    return pharmacy


def update_pharmacy(pharmacy_id, data: dict) -> Pharmacy:
    pharmacy = get_pharmacy(pharmacy_id)
    for key in ('name', 'address', 'phone', 'email', 'website', 'active'):
        if key in data:
            setattr(pharmacy, key, data[key])
    pharmacy.save()
    return pharmacy


def deactivate_pharmacy(principal: Principal, pharmacy_id) -> Pharmacy:
    pharmacy = get_pharmacy(pharmacy_id)
    if pharmacy.active:
        pharmacy.active = False
        pharmacy.save(update_fields=['active', 'updated_at'])
        logger.info("Pharmacy %s deactivated by user %s", pharmacy.id, principal.id)
        log_action(user=principal, action='pharmacy_deactivate', object_type='pharmacy', object_id=pharmacy.id)
    return pharmacy


def recent_activity(pharmacy_id, limit: int) -> list[dict]:
    pharmacy = get_pharmacy(pharmacy_id)
    bills = Bill.objects.filter(pharmacy=pharmacy).order_by('-created_at', '-id')[:limit]
    return [
        {
            'id': f"bill-{bill.id}",
            'description': f"Bill #{bill.bill_number} created for {bill.customer_name or 'walk-in customer'}",
            'timestamp': bill.created_at.isoformat(),
            'type': 'BILL_CREATED',
        }
        for bill in bills
    ]


# ---------------------------------------------------------------------
# Staff
# ---------------------------------------------------------------------
def list_staff(pharmacy_id):
    pharmacy = get_pharmacy(pharmacy_id)
    return PharmacyStaff.objects.select_related('user').filter(pharmacy=pharmacy).order_by('id')


def _get_staff(pharmacy: Pharmacy, staff_id) -> PharmacyStaff:
    staff = PharmacyStaff.objects.select_related('user').filter(pharmacy=pharmacy, pk=staff_id).first()
    if staff is None:
        raise ResourceNotFound('PharmacyStaff', 'id', staff_id)
    return staff


def _guard_owner(pharmacy: Pharmacy, staff: PharmacyStaff) -> None:
    if staff.user_id == pharmacy.owner_id:
        raise ValidationError("The pharmacy owner's staff assignment cannot be changed.")


@transaction.atomic
def add_staff(principal: Principal, pharmacy_id, data: dict) -> PharmacyStaff:
    pharmacy = get_pharmacy(pharmacy_id)
    email = data['email']
    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        if not data.get('password'):
            raise ValidationError({'password': 'A password is required to create a new staff account.'})
        user = User.objects.create_user(
            username=email, email=email, password=data['password'],
            first_name=data.get('firstName', ''), last_name=data.get('lastName', ''),
        )
    elif PharmacyStaff.objects.filter(pharmacy=pharmacy, user=user).exists():
        raise DuplicateResource('User is already on the staff of this pharmacy.')
    elif user.has_role(Role.USER) and not user.has_role(Role.PHARMACY):
        # a PHARMACY role would lock the account out of the patient login
        raise ValidationError({'email': 'This e-mail belongs to a patient account and cannot be added as staff.'})
    user.roles.add(Role.get(Role.PHARMACY))
    staff = PharmacyStaff.objects.create(pharmacy=pharmacy, user=user, role=data.get('role', PharmacyStaff.STAFF))
    log_action(user=principal, action='staff_add', object_type='pharmacy', object_id=pharmacy.id,
               detail={'staffId': staff.id, 'userId': user.id, 'role': staff.role})
    return staff


def update_staff(principal: Principal, pharmacy_id, staff_id, data: dict) -> PharmacyStaff:
    pharmacy = get_pharmacy(pharmacy_id)
    staff = _get_staff(pharmacy, staff_id)
    _guard_owner(pharmacy, staff)
    if 'role' in data:
        staff.role = data['role']
    if 'active' in data:
        staff.active = data['active']
    staff.save()
    log_action(user=principal, action='staff_update', object_type='pharmacy', object_id=pharmacy.id,
               detail={'staffId': staff.id, 'role': staff.role, 'active': staff.active})
    return staff


def remove_staff(principal: Principal, pharmacy_id, staff_id) -> PharmacyStaff:
    pharmacy = get_pharmacy(pharmacy_id)
    staff = _get_staff(pharmacy, staff_id)
    _guard_owner(pharmacy, staff)
    staff.active = False
    staff.save(update_fields=['active', 'updated_at'])
    log_action(user=principal, action='staff_remove', object_type='pharmacy', object_id=pharmacy.id,
               detail={'staffId': staff.id})
    return staff


# ---------------------------------------------------------------------
# Bills
# ---------------------------------------------------------------------
def list_bills(pharmacy_id):
    pharmacy = get_pharmacy(pharmacy_id)
    return Bill.objects.filter(pharmacy=pharmacy).order_by('-created_at', '-id')


def _next_bill_number() -> str:
    return f"{timezone.now():%Y%m%d%H%M%S}-{secrets.token_hex(2).upper()}"


def create_bill(principal: Principal, pharmacy_id, data: dict) -> Bill:
    pharmacy = get_pharmacy(pharmacy_id)
    number = data.get('billNumber') or _next_bill_number()
    if Bill.objects.filter(pharmacy=pharmacy, bill_number=number).exists():
        raise DuplicateResource(f"Bill number {number} already exists for this pharmacy.")
    return Bill.objects.create(
        pharmacy=pharmacy,
        bill_number=number,
        customer_name=data.get('customerName', ''),
        total_amount=data['totalAmount'],
        created_by_id=principal.id,
    )
