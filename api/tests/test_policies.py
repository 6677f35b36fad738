import pytest
from django.urls import reverse

from api.models import Pharmacy, PharmacyStaff, Role
from api.policies import ROUTE_POLICIES, policy_for
from api.routers import urlpatterns

pytestmark = pytest.mark.django_db


def test_every_named_route_has_a_policy():
    names = {p.name for p in urlpatterns}
    covered = {name for name, _ in ROUTE_POLICIES}
    assert names == covered


def test_unknown_route_or_method_is_denied():
    assert policy_for('pharmacy-detail', 'PATCH') is None
    assert policy_for('no-such-route', 'GET') is None
    assert policy_for(None, 'GET') is None
    assert policy_for('healthz', 'HEAD') is not None


def test_patch_on_a_known_route_is_rejected(client_for, patient):
    r = client_for(patient).patch(reverse('medication-list'), {}, format='json')
    assert r.status_code == 403
    assert r.data['status'] == 403


def test_anonymous_gets_401_with_error_body(client_for):
    r = client_for().get(reverse('medication-list'))
    assert r.status_code == 401
    assert set(r.data) == {'status', 'message'}


def test_public_routes_need_no_token(client_for):
    r = client_for().get(reverse('healthz'))
    assert r.status_code == 200
    assert r.data['ok'] is True


def test_role_check_returns_403(client_for, patient, pharmacy):
    c = client_for(patient)
    assert c.get(reverse('pharmacy-list')).status_code == 403
    assert c.get(reverse('pharmacy-mine')).status_code == 403
    assert c.get(reverse('pharmacy-staff', args=[pharmacy.id])).status_code == 403


def test_ownership_failure_returns_404_not_403(client_for, pharmacy, other_pharmacy):
    outsider = client_for(other_pharmacy.owner)
    r = outsider.get(reverse('pharmacy-detail', args=[pharmacy.id]))
    assert r.status_code == 404
    assert r.data['message'] == f"Pharmacy not found with id : '{pharmacy.id}'"
    # a pharmacy that does not exist looks exactly the same
    r2 = outsider.get(reverse('pharmacy-detail', args=[987654]))
    assert r2.status_code == 404
    assert r2.data['message'] == "Pharmacy not found with id : '987654'"


def test_staff_member_can_read_but_not_edit(client_for, pharmacy, make_user):
    clerk = make_user('clerk@example.com', Role.PHARMACY)
    PharmacyStaff.objects.create(pharmacy=pharmacy, user=clerk, role=PharmacyStaff.STAFF)
    c = client_for(clerk)
    assert c.get(reverse('pharmacy-detail', args=[pharmacy.id])).status_code == 200
    r = c.put(reverse('pharmacy-detail', args=[pharmacy.id]), {'name': 'Hijacked'}, format='json')
    assert r.status_code == 404
    pharmacy.refresh_from_db()
    assert pharmacy.name == 'Corner Pharmacy'


def test_platform_admin_bypasses_ownership(client_for, platform_admin, pharmacy):
    c = client_for(platform_admin)
    assert c.get(reverse('pharmacy-detail', args=[pharmacy.id])).status_code == 200
    assert c.get(reverse('pharmacy-staff', args=[pharmacy.id])).status_code == 200
    r = c.delete(reverse('pharmacy-detail', args=[pharmacy.id]))
    assert r.status_code == 204
    assert Pharmacy.objects.get(pk=pharmacy.id).active is False


def test_sales_summary_checks_membership_from_query(client_for, pharmacy, other_pharmacy):
    c = client_for(other_pharmacy.owner)
    r = c.get(reverse('analytics-sales-summary'), {'pharmacyId': pharmacy.id})
    assert r.status_code == 404
    ok = c.get(reverse('analytics-sales-summary'), {'pharmacyId': other_pharmacy.id})
    assert ok.status_code == 200
    assert ok.data['totalAmount'] == 0.0


def test_sales_summary_requires_pharmacy_id(client_for, pharmacy_owner):
    r = client_for(pharmacy_owner).get(reverse('analytics-sales-summary'))
    assert r.status_code == 400
    assert 'pharmacyId' in r.data['message']
