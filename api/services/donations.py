"""Donation lifecycle and its status state machine.

``PENDING`` may move to ``COMPLETED`` or ``CANCELLED``; both are
terminal and a donation that has left ``PENDING`` is read-only.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from api.exceptions import InvalidTransition, ResourceNotFound
from api.models import Donation
from api.principal import Principal

from .audit import log_action

logger = logging.getLogger(__name__)

FIELD_MAP = {
    'medicineName': 'medicine_name',
    'quantity': 'quantity',
    'expiryDate': 'expiry_date',
    'location': 'location',
    'organization': 'organization',
    'notes': 'notes',
}


def _scoped(principal: Principal):
    return Donation.objects.select_related('user').filter(user_id=principal.id)


def list_donations(principal: Principal, *, pending_only: bool = False):
    qs = _scoped(principal)
    if pending_only:
        qs = qs.filter(status=Donation.STATUS_PENDING)
    return qs.order_by('-donation_date', '-id')


def get_donation(principal: Principal, pk, *, for_update: bool = False) -> Donation:
    qs = _scoped(principal)
    if for_update:
        qs = qs.select_for_update()
    donation = qs.filter(pk=pk).first()
    if donation is None:
        raise ResourceNotFound('Donation', 'id', pk)
    return donation


def create_donation(principal: Principal, data: dict) -> Donation:
    donation = Donation(user_id=principal.id, status=Donation.STATUS_PENDING, donation_date=timezone.now())
    for key, attr in FIELD_MAP.items():
        if key in data:
            setattr(donation, attr, data[key])
    donation.save()
    return donation


def _transition(donation: Donation, target: str) -> None:
    if target not in Donation.TRANSITIONS[donation.status]:
        raise InvalidTransition(donation.status, target)
    donation.status = target
    if target == Donation.STATUS_COMPLETED:
        donation.completed_date = timezone.now()


@transaction.atomic
def update_donation(principal: Principal, pk, data: dict) -> Donation:
    donation = get_donation(principal, pk, for_update=True)
    if not donation.is_pending:
        raise InvalidTransition(donation.status, action='update')
    for key, attr in FIELD_MAP.items():
        if key in data:
            setattr(donation, attr, data[key])
    target = data.get('status')
    if target and target != donation.status:
        _transition(donation, target)
    donation.save()
    return donation


@transaction.atomic
def change_status(principal: Principal, pk, target: str) -> Donation:
    donation = get_donation(principal, pk, for_update=True)
    previous = donation.status
    _transition(donation, target)
    donation.save()
    logger.info("Donation %s moved from %s to %s", donation.id, previous, target)
    log_action(user=principal, action='donation_status', object_type='donation', object_id=donation.id,
               detail={'from': previous, 'to': target})
    return donation


@transaction.atomic
def delete_donation(principal: Principal, pk) -> None:
    donation = get_donation(principal, pk, for_update=True)
    if not donation.is_pending:
        raise InvalidTransition(donation.status, action='delete')
    donation.delete()
