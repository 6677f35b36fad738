"""
Django admin registrations for the PharmaCare models.

Superusers can inspect and correct data through ``/admin/``.  Only
light configuration is applied: list columns, filters and search.
"""

from django.contrib import admin

from .models import AuditEvent, Bill, Donation, Medication, Pharmacy, PharmacyStaff, Reminder, Role, User


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'first_name', 'last_name', 'is_active', 'is_staff', 'date_joined')
    list_filter = ('roles', 'is_active')
    search_fields = ('email', 'first_name', 'last_name')
    filter_horizontal = ('roles',)


class PharmacyStaffInline(admin.TabularInline):
    model = PharmacyStaff
    extra = 0
    raw_id_fields = ('user',)


@admin.register(Pharmacy)
class PharmacyAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'registration_number', 'owner', 'active', 'created_at')
    list_filter = ('active',)
    search_fields = ('name', 'registration_number', 'owner__email')
    inlines = [PharmacyStaffInline]


@admin.register(PharmacyStaff)
class PharmacyStaffAdmin(admin.ModelAdmin):
    list_display = ('user', 'pharmacy', 'role', 'active')
    list_filter = ('role', 'active')
    search_fields = ('user__email', 'pharmacy__name')


@admin.register(Medication)
class MedicationAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'user', 'dosage', 'active', 'start_date', 'end_date')
    list_filter = ('active',)
    search_fields = ('name', 'user__email')


@admin.register(Reminder)
class ReminderAdmin(admin.ModelAdmin):
    list_display = ('id', 'medication', 'user', 'reminder_time', 'completed', 'completed_at')
    list_filter = ('completed',)
    search_fields = ('medication__name', 'user__email')


@admin.register(Donation)
class DonationAdmin(admin.ModelAdmin):
    list_display = ('id', 'medicine_name', 'quantity', 'user', 'status', 'donation_date')
    list_filter = ('status',)
    search_fields = ('medicine_name', 'organization', 'user__email')


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ('bill_number', 'pharmacy', 'customer_name', 'total_amount', 'created_at')
    search_fields = ('bill_number', 'customer_name', 'pharmacy__name')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action',)
    search_fields = ('action', 'user__email')
