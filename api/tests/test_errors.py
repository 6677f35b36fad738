import pytest
from django.core.management import call_command
from django.db import DatabaseError, IntegrityError, transaction
from django.urls import reverse

from api.exceptions import api_exception_handler
from api.models import AuditEvent, Donation

pytestmark = pytest.mark.django_db


def test_system_check_passes():
    # loads the DRF settings, including the default permission class
    call_command('check')


def test_unique_violation_is_reported_as_duplicate():
    exc = IntegrityError('UNIQUE constraint failed: api_pharmacy.registration_number')
    resp = api_exception_handler(exc, {'view': None})
    assert resp.status_code == 400
    assert resp.data == {'status': 400, 'message': 'Resource already exists.'}


def test_other_integrity_errors_are_internal():
    for text in ('NOT NULL constraint failed: api_bill.total_amount', 'FOREIGN KEY constraint failed'):
        resp = api_exception_handler(IntegrityError(text), {'view': None})
        assert resp.status_code == 500
        assert resp.data['message'] == 'An unexpected error occurred.'


def test_failed_audit_write_keeps_status_change(client_for, patient, monkeypatch, caplog):
    donation = Donation.objects.create(user=patient, medicine_name='Paracetamol', quantity=3)

    def broken_create(**kwargs):
        with transaction.mark_for_rollback_on_error():
            raise DatabaseError('audit table unavailable')

    monkeypatch.setattr(AuditEvent.objects, 'create', broken_create)
    r = client_for(patient).put(reverse('donation-status', args=[donation.id]),
                                {'status': 'completed'}, format='json')
    assert r.status_code == 200
    assert r.data['status'] == Donation.STATUS_COMPLETED
    donation.refresh_from_db()
    assert donation.status == Donation.STATUS_COMPLETED
    assert donation.completed_date is not None
    assert 'Failed to write audit event donation_status' in caplog.text
