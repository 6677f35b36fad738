"""
Response mappers.

Each helper turns a model instance into the camelCase dictionary the
front-end consumes.  Timestamps are ISO-8601 strings.
"""
from __future__ import annotations

from .models import Bill, Donation, Medication, Pharmacy, PharmacyStaff, Reminder, User


def _iso(value):
    return value.isoformat() if value else None


def serialize_user(user: User) -> dict:
    return {
        'id': user.id,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'email': user.email,
        'imageUrl': user.image_url or None,
        'roles': sorted(user.role_names),
        'createdAt': _iso(user.date_joined),
    }


def serialize_pharmacy(pharmacy: Pharmacy) -> dict:
    return {
        'id': pharmacy.id,
        'name': pharmacy.name,
        'registrationNumber': pharmacy.registration_number,
        'address': pharmacy.address,
        'phone': pharmacy.phone,
        'email': pharmacy.email,
        'website': pharmacy.website,
        'ownerId': pharmacy.owner_id,
        'active': pharmacy.active,
        'createdAt': _iso(pharmacy.created_at),
        'updatedAt': _iso(pharmacy.updated_at),
    }


def serialize_staff(staff: PharmacyStaff) -> dict:
    user = staff.user
    return {
        'id': staff.id,
        'pharmacyId': staff.pharmacy_id,
        'userId': user.id,
        'role': staff.role,
        'active': staff.active,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'email': user.email,
        'createdAt': _iso(staff.created_at),
        'updatedAt': _iso(staff.updated_at),
    }


def serialize_medication(med: Medication) -> dict:
    return {
        'id': med.id,
        'name': med.name,
        'description': med.description,
        'dosage': med.dosage,
        'frequency': med.frequency,
        'startDate': _iso(med.start_date),
        'endDate': _iso(med.end_date),
        'notes': med.notes,
        'active': med.active,
        'userId': med.user_id,
        'createdAt': _iso(med.created_at),
        'updatedAt': _iso(med.updated_at),
    }


def serialize_reminder(reminder: Reminder) -> dict:
    med = reminder.medication
    return {
        'id': reminder.id,
        'medicationId': med.id,
        'medicationName': med.name,
        'dosage': med.dosage,
        'reminderTime': _iso(reminder.reminder_time),
        'notes': reminder.notes,
        'completed': reminder.completed,
        'completedAt': _iso(reminder.completed_at),
        'createdAt': _iso(reminder.created_at),
        'updatedAt': _iso(reminder.updated_at),
    }


def serialize_donation(donation: Donation) -> dict:
    user = donation.user
    donor = f"{user.first_name} {user.last_name}".strip() if user else ''
    return {
        'id': donation.id,
        'medicineName': donation.medicine_name,
        'quantity': donation.quantity,
        'expiryDate': _iso(donation.expiry_date),
        'location': donation.location,
        'status': donation.status,
        'organization': donation.organization,
        'notes': donation.notes,
        'donationDate': _iso(donation.donation_date),
        'completedDate': _iso(donation.completed_date),
        'donorName': donor or 'Unknown',
        'userId': donation.user_id,
        'createdAt': _iso(donation.created_at),
        'updatedAt': _iso(donation.updated_at),
    }


def serialize_bill(bill: Bill) -> dict:
    return {
        'id': bill.id,
        'pharmacyId': bill.pharmacy_id,
        'billNumber': bill.bill_number,
        'customerName': bill.customer_name,
        'totalAmount': float(bill.total_amount),
        'createdBy': bill.created_by_id,
        'createdAt': _iso(bill.created_at),
    }
