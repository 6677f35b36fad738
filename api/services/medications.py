"""Medication lifecycle, always scoped to the owning principal."""
from __future__ import annotations

import logging

from django.db import transaction

from api.exceptions import ResourceNotFound
from api.models import Medication
from api.principal import Principal

logger = logging.getLogger(__name__)

FIELD_MAP = {
    'name': 'name',
    'description': 'description',
    'dosage': 'dosage',
    'frequency': 'frequency',
    'startDate': 'start_date',
    'endDate': 'end_date',
    'notes': 'notes',
    'active': 'active',
}


def _apply(med: Medication, data: dict) -> None:
    for key, attr in FIELD_MAP.items():
        if key in data:
            setattr(med, attr, data[key])


def list_medications(principal: Principal, *, active_only: bool = False):
    qs = Medication.objects.filter(user_id=principal.id)
    if active_only:
        qs = qs.filter(active=True)
    return qs.order_by('-created_at', '-id')


def get_medication(principal: Principal, pk) -> Medication:
    med = Medication.objects.filter(pk=pk, user_id=principal.id).first()
    if med is None:
        raise ResourceNotFound('Medication', 'id', pk)
    return med


def create_medication(principal: Principal, data: dict) -> Medication:
    med = Medication(user_id=principal.id)
    _apply(med, data)
    if 'active' not in data:
        med.active = True
    med.save()
    logger.info("Medication %s created for user %s", med.id, principal.id)
    return med


def update_medication(principal: Principal, pk, data: dict) -> Medication:
    med = get_medication(principal, pk)
    _apply(med, data)
    med.save()
    return med


@transaction.atomic
def delete_medication(principal: Principal, pk) -> None:
    med = get_medication(principal, pk)
    # reminders go with it via the cascade
    med.delete()
    logger.info("Medication %s deleted by user %s", pk, principal.id)
