import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from api.models import Pharmacy, PharmacyStaff, Role, User

PASSWORD = 'Str0ng-Pass!42'


@pytest.fixture(autouse=True)
def _isolated(settings):
    # throttle counters live in the cache
    cache.clear()
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(email, *roles, password=PASSWORD, **extra):
        user = User.objects.create_user(username=email, email=email, password=password, **extra)
        user.roles.set([Role.get(r) for r in roles])
        return user
    return _make


@pytest.fixture
def client_for():
    def _client(user=None):
        c = APIClient()
        if user is not None:
            c.force_authenticate(user=user)
        return c
    return _client


@pytest.fixture
def patient(make_user):
    return make_user('pat@example.com', Role.USER, first_name='Pat', last_name='Smith')


@pytest.fixture
def other_patient(make_user):
    return make_user('other@example.com', Role.USER, first_name='Olly', last_name='Other')


@pytest.fixture
def platform_admin(make_user):
    return make_user('root@example.com', Role.ADMIN)


@pytest.fixture
def pharmacy_owner(make_user):
    return make_user('owner@example.com', Role.PHARMACY, first_name='Owen', last_name='Owner')


@pytest.fixture
def pharmacy(pharmacy_owner):
    p = Pharmacy.objects.create(name='Corner Pharmacy', registration_number='RX-1', owner=pharmacy_owner)
    PharmacyStaff.objects.create(pharmacy=p, user=pharmacy_owner, role=PharmacyStaff.ADMIN)
    return p


@pytest.fixture
def other_pharmacy(make_user):
    owner = make_user('owner2@example.com', Role.PHARMACY)
    p = Pharmacy.objects.create(name='Far Pharmacy', registration_number='RX-2', owner=owner)
    PharmacyStaff.objects.create(pharmacy=p, user=owner, role=PharmacyStaff.ADMIN)
    return p
