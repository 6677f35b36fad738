from datetime import timedelta
from decimal import Decimal

import pytest
from django.urls import reverse
from django.utils import timezone

from api.models import AuditEvent, Bill, Pharmacy, PharmacyStaff, Role, User

from .conftest import PASSWORD

pytestmark = pytest.mark.django_db


def test_admin_creates_pharmacy_with_owner_staff_row(client_for, platform_admin):
    r = client_for(platform_admin).post(reverse('pharmacy-list'), {
        'name': 'New Pharmacy', 'registrationNumber': 'RX-500', 'address': '5 High St',
    }, format='json')
    assert r.status_code == 201
    pharmacy = Pharmacy.objects.get(pk=r.data['id'])
    assert pharmacy.owner == platform_admin and pharmacy.active
    assert PharmacyStaff.objects.filter(pharmacy=pharmacy, user=platform_admin, role=PharmacyStaff.ADMIN).exists()
    assert AuditEvent.objects.filter(action='pharmacy_create', object_id=pharmacy.id).exists()


def test_create_rejects_duplicate_registration_number(client_for, platform_admin, pharmacy):
    r = client_for(platform_admin).post(reverse('pharmacy-list'), {
        'name': 'Copy', 'registrationNumber': pharmacy.registration_number,
    }, format='json')
    assert r.status_code == 400


def test_admin_lists_all_pharmacies(client_for, platform_admin, pharmacy, other_pharmacy):
    r = client_for(platform_admin).get(reverse('pharmacy-list'))
    assert [p['id'] for p in r.data] == [pharmacy.id, other_pharmacy.id]


def test_mine_lists_owned_and_active_staff_pharmacies(client_for, make_user, pharmacy, other_pharmacy):
    clerk = make_user('clerk@example.com', Role.PHARMACY)
    PharmacyStaff.objects.create(pharmacy=pharmacy, user=clerk)
    PharmacyStaff.objects.create(pharmacy=other_pharmacy, user=clerk, active=False)
    r = client_for(clerk).get(reverse('pharmacy-mine'))
    assert r.status_code == 200
    assert [p['id'] for p in r.data] == [pharmacy.id]


def test_owner_updates_and_deactivates(client_for, pharmacy_owner, pharmacy):
    c = client_for(pharmacy_owner)
    r = c.put(reverse('pharmacy-detail', args=[pharmacy.id]), {'name': 'Renamed', 'phone': '555'}, format='json')
    assert r.status_code == 200
    assert r.data['name'] == 'Renamed'
    assert r.data['registrationNumber'] == 'RX-1'

    assert c.delete(reverse('pharmacy-detail', args=[pharmacy.id])).status_code == 204
    pharmacy.refresh_from_db()
    assert pharmacy.active is False
    # deactivation keeps the row readable for members
    assert c.get(reverse('pharmacy-detail', args=[pharmacy.id])).data['active'] is False


def test_admin_on_missing_pharmacy_gets_404(client_for, platform_admin):
    r = client_for(platform_admin).get(reverse('pharmacy-detail', args=[4040]))
    assert r.status_code == 404


# ---------------------------------------------------------------------
# staff
# ---------------------------------------------------------------------
def test_add_new_staff_account(client_for, pharmacy_owner, pharmacy):
    r = client_for(pharmacy_owner).post(reverse('pharmacy-staff', args=[pharmacy.id]), {
        'email': 'new.hire@example.com', 'firstName': 'New', 'lastName': 'Hire', 'password': PASSWORD,
    }, format='json')
    assert r.status_code == 201
    assert r.data['role'] == PharmacyStaff.STAFF
    hire = User.objects.get(email='new.hire@example.com')
    assert hire.role_names == {Role.PHARMACY}
    assert hire.check_password(PASSWORD)


def test_add_existing_pharmacy_user_as_staff(client_for, make_user, pharmacy_owner, pharmacy):
    pharmacist = make_user('locum@example.com', Role.PHARMACY)
    r = client_for(pharmacy_owner).post(reverse('pharmacy-staff', args=[pharmacy.id]),
                                        {'email': pharmacist.email, 'role': 'ADMIN'}, format='json')
    assert r.status_code == 201
    assert PharmacyStaff.objects.filter(pharmacy=pharmacy, user=pharmacist, role=PharmacyStaff.ADMIN).exists()


def test_patient_account_cannot_be_added_as_staff(client_for, pharmacy_owner, pharmacy, patient):
    r = client_for(pharmacy_owner).post(reverse('pharmacy-staff', args=[pharmacy.id]),
                                        {'email': patient.email}, format='json')
    assert r.status_code == 400
    patient.refresh_from_db()
    assert patient.role_names == {Role.USER}
    assert not PharmacyStaff.objects.filter(user=patient).exists()


def test_add_requires_password_for_unknown_email(client_for, pharmacy_owner, pharmacy):
    r = client_for(pharmacy_owner).post(reverse('pharmacy-staff', args=[pharmacy.id]),
                                        {'email': 'nobody@example.com'}, format='json')
    assert r.status_code == 400
    assert not User.objects.filter(email='nobody@example.com').exists()


def test_adding_existing_staff_member_is_rejected(client_for, pharmacy_owner, pharmacy):
    r = client_for(pharmacy_owner).post(reverse('pharmacy-staff', args=[pharmacy.id]),
                                        {'email': pharmacy_owner.email}, format='json')
    assert r.status_code == 400


def test_plain_staff_cannot_manage_staff(client_for, make_user, pharmacy):
    clerk = make_user('clerk@example.com', Role.PHARMACY)
    PharmacyStaff.objects.create(pharmacy=pharmacy, user=clerk)
    c = client_for(clerk)
    assert c.get(reverse('pharmacy-staff', args=[pharmacy.id])).status_code == 200
    r = c.post(reverse('pharmacy-staff', args=[pharmacy.id]), {'email': 'x@example.com', 'password': PASSWORD},
               format='json')
    assert r.status_code == 404


def test_update_and_remove_staff(client_for, make_user, pharmacy_owner, pharmacy):
    clerk = make_user('clerk@example.com', Role.PHARMACY)
    row = PharmacyStaff.objects.create(pharmacy=pharmacy, user=clerk)
    c = client_for(pharmacy_owner)
    url = reverse('pharmacy-staff-detail', args=[pharmacy.id, row.id])

    r = c.put(url, {'role': 'ADMIN'}, format='json')
    assert r.status_code == 200 and r.data['role'] == 'ADMIN'

    assert c.delete(url).status_code == 204
    row.refresh_from_db()
    assert row.active is False
    assert client_for(clerk).get(reverse('pharmacy-detail', args=[pharmacy.id])).status_code == 404


def test_owner_row_is_protected(client_for, platform_admin, pharmacy_owner, pharmacy):
    owner_row = PharmacyStaff.objects.get(pharmacy=pharmacy, user=pharmacy_owner)
    c = client_for(platform_admin)
    url = reverse('pharmacy-staff-detail', args=[pharmacy.id, owner_row.id])
    assert c.put(url, {'active': False}, format='json').status_code == 400
    assert c.delete(url).status_code == 400
    owner_row.refresh_from_db()
    assert owner_row.active and owner_row.role == PharmacyStaff.ADMIN


def test_staff_row_of_another_pharmacy_is_not_found(client_for, pharmacy_owner, pharmacy, other_pharmacy):
    foreign = PharmacyStaff.objects.get(pharmacy=other_pharmacy)
    r = client_for(pharmacy_owner).delete(reverse('pharmacy-staff-detail', args=[pharmacy.id, foreign.id]))
    assert r.status_code == 404


# ---------------------------------------------------------------------
# bills and activity
# ---------------------------------------------------------------------
def test_bills_and_activity(client_for, pharmacy_owner, pharmacy):
    c = client_for(pharmacy_owner)
    url = reverse('pharmacy-bills', args=[pharmacy.id])
    r = c.post(url, {'billNumber': 'B-1', 'customerName': 'Jane', 'totalAmount': '12.50'}, format='json')
    assert r.status_code == 201
    assert r.data['totalAmount'] == 12.5
    generated = c.post(url, {'totalAmount': '3.00'}, format='json')
    assert generated.status_code == 201 and generated.data['billNumber']

    dup = c.post(url, {'billNumber': 'B-1', 'totalAmount': '1.00'}, format='json')
    assert dup.status_code == 400

    assert len(c.get(url).data) == 2

    activity = c.get(reverse('pharmacy-activity', args=[pharmacy.id]), {'limit': 1})
    assert activity.status_code == 200
    assert len(activity.data) == 1
    assert activity.data[0]['type'] == 'BILL_CREATED'
    assert activity.data[0]['id'].startswith('bill-')


def test_activity_orders_newest_first_and_defaults_to_five(client_for, pharmacy_owner, pharmacy):
    now = timezone.now()
    for n in range(7):
        Bill.objects.create(pharmacy=pharmacy, bill_number=f'A-{n}', customer_name='C',
                            total_amount=Decimal('1'), created_at=now - timedelta(hours=n))
    r = client_for(pharmacy_owner).get(reverse('pharmacy-activity', args=[pharmacy.id]))
    assert len(r.data) == 5
    assert r.data[0]['description'] == 'Bill #A-0 created for C'


@pytest.mark.parametrize('limit', [0, 51, 'abc'])
def test_activity_limit_bounds(client_for, pharmacy_owner, pharmacy, limit):
    r = client_for(pharmacy_owner).get(reverse('pharmacy-activity', args=[pharmacy.id]), {'limit': limit})
    assert r.status_code == 400
