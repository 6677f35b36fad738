import pytest

from api.models import PharmacyStaff, Role
from api.principal import Principal
from api.services.tenancy import is_pharmacy_admin, is_pharmacy_member

pytestmark = pytest.mark.django_db


def as_principal(user):
    return Principal.from_user(user)


def test_owner_is_member_and_admin(pharmacy, pharmacy_owner):
    p = as_principal(pharmacy_owner)
    assert is_pharmacy_member(pharmacy.id, p)
    assert is_pharmacy_admin(pharmacy.id, p)


def test_owner_without_staff_row_is_still_admin(pharmacy, pharmacy_owner):
    PharmacyStaff.objects.filter(pharmacy=pharmacy, user=pharmacy_owner).delete()
    assert is_pharmacy_admin(pharmacy.id, as_principal(pharmacy_owner))


def test_active_staff_is_member_but_not_admin(pharmacy, make_user):
    clerk = make_user('clerk@example.com', Role.PHARMACY)
    PharmacyStaff.objects.create(pharmacy=pharmacy, user=clerk, role=PharmacyStaff.STAFF)
    p = as_principal(clerk)
    assert is_pharmacy_member(pharmacy.id, p)
    assert not is_pharmacy_admin(pharmacy.id, p)


def test_active_admin_staff_is_admin(pharmacy, make_user):
    manager = make_user('manager@example.com', Role.PHARMACY)
    PharmacyStaff.objects.create(pharmacy=pharmacy, user=manager, role=PharmacyStaff.ADMIN)
    assert is_pharmacy_admin(pharmacy.id, as_principal(manager))


def test_deactivated_staff_loses_access(pharmacy, make_user):
    former = make_user('former@example.com', Role.PHARMACY)
    PharmacyStaff.objects.create(pharmacy=pharmacy, user=former, role=PharmacyStaff.ADMIN, active=False)
    p = as_principal(former)
    assert not is_pharmacy_member(pharmacy.id, p)
    assert not is_pharmacy_admin(pharmacy.id, p)


def test_staff_of_another_pharmacy_is_not_member(pharmacy, other_pharmacy):
    outsider = as_principal(other_pharmacy.owner)
    assert not is_pharmacy_member(pharmacy.id, outsider)
    assert not is_pharmacy_admin(pharmacy.id, outsider)


def test_platform_admin_is_not_member_by_itself(pharmacy, platform_admin):
    # ADMIN bypass is a policy concern, not part of the predicate
    assert not is_pharmacy_member(pharmacy.id, as_principal(platform_admin))


@pytest.mark.parametrize('pharmacy_id', [999999, 'not-a-number', None])
def test_unknown_or_malformed_pharmacy_fails_closed(pharmacy_owner, pharmacy_id):
    p = as_principal(pharmacy_owner)
    assert is_pharmacy_member(pharmacy_id, p) is False
    assert is_pharmacy_admin(pharmacy_id, p) is False


def test_missing_principal_or_deleted_user_fails_closed(pharmacy, pharmacy_owner):
    assert is_pharmacy_member(pharmacy.id, None) is False
    ghost = Principal(id=424242, email='ghost@example.com', roles=frozenset({Role.PHARMACY}))
    assert is_pharmacy_member(pharmacy.id, ghost) is False
    assert is_pharmacy_admin(pharmacy.id, ghost) is False
