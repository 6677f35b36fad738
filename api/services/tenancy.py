"""
Pharmacy ownership predicates.

Both predicates fail closed: an unknown pharmacy, an unknown user, a
malformed id or any database error yields ``False``.
"""
from __future__ import annotations

import logging

from api.models import Pharmacy, PharmacyStaff, User
from api.principal import Principal

logger = logging.getLogger(__name__)


def _resolve(pharmacy_id, principal: Principal | None):
    if principal is None:
        return None, None
    pharmacy = Pharmacy.objects.filter(pk=int(pharmacy_id)).only('id', 'owner_id').first()
    if pharmacy is None:
        return None, None
    user = User.objects.filter(pk=principal.id).only('id').first()
    return pharmacy, user


def is_pharmacy_member(pharmacy_id, principal: Principal | None) -> bool:
    """Owner, or any active staff row regardless of its role."""
    try:
        pharmacy, user = _resolve(pharmacy_id, principal)
        if pharmacy is None or user is None:
            return False
        if pharmacy.owner_id == user.id:
            return True
        return PharmacyStaff.objects.filter(pharmacy=pharmacy, user=user, active=True).exists()
    except Exception:
        logger.exception("Membership check failed for pharmacy %r", pharmacy_id)
        return False


def is_pharmacy_admin(pharmacy_id, principal: Principal | None) -> bool:
    """Owner, or an active staff row with the ADMIN role."""
    try:
        pharmacy, user = _resolve(pharmacy_id, principal)
        if pharmacy is None or user is None:
            return False
        if pharmacy.owner_id == user.id:
            return True
        return PharmacyStaff.objects.filter(
            pharmacy=pharmacy, user=user, active=True, role=PharmacyStaff.ADMIN
        ).exists()
    except Exception:
        logger.exception("Admin check failed for pharmacy %r", pharmacy_id)
        return False
