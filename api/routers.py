"""
URL mappings for the PharmaCare API.

Every route carries a name; ``api.policies`` keys its authorization
table on these names, so a route added here without a matching policy
entry is denied.  Trailing slashes are deliberately omitted.
"""
from django.urls import path

from .auth_views import (
    login_view,
    logout_view,
    pharmacy_login_view,
    pharmacy_signup_view,
    refresh_view,
    signup_view,
    validate_view,
)
from .views import analytics, bills, donations, health, medications, pharmacies, reminders, rewards, staff, users

urlpatterns = [
    # Authentication
    path('auth/login', login_view, name='auth-login'),
    path('auth/signup', signup_view, name='auth-signup'),
    path('auth/pharmacy/login', pharmacy_login_view, name='auth-pharmacy-login'),
    path('auth/pharmacy/signup', pharmacy_signup_view, name='auth-pharmacy-signup'),
    path('auth/validate', validate_view, name='auth-validate'),
    path('auth/refresh', refresh_view, name='auth-refresh'),
    path('auth/logout', logout_view, name='auth-logout'),

    # Users
    path('api/users/me', users.current_user, name='user-me'),
    path('api/users/profile', users.current_user, name='user-profile'),

    # Medications
    path('api/medications', medications.medications_list, name='medication-list'),
    path('api/medications/active', medications.medications_active, name='medication-active'),
    path('api/medications/<int:pk>', medications.medication_detail, name='medication-detail'),

    # Reminders
    path('reminders', reminders.reminders_list, name='reminder-list'),
    path('reminders/pending', reminders.reminders_pending, name='reminder-pending'),
    path('reminders/<int:pk>', reminders.reminder_detail, name='reminder-detail'),
    path('reminders/<int:pk>/complete', reminders.reminder_complete, name='reminder-complete'),

    # Donations
    path('donations', donations.donations_list, name='donation-list'),
    path('donations/pending', donations.donations_pending, name='donation-pending'),
    path('donations/<int:pk>', donations.donation_detail, name='donation-detail'),
    path('donations/<int:pk>/status', donations.donation_status, name='donation-status'),

    # Pharmacies, staff and bills
    path('api/pharmacies', pharmacies.pharmacies_list, name='pharmacy-list'),
    path('api/pharmacies/mine', pharmacies.pharmacies_mine, name='pharmacy-mine'),
    path('api/pharmacies/<int:pharmacy_id>', pharmacies.pharmacy_detail, name='pharmacy-detail'),
    path('api/pharmacies/<int:pharmacy_id>/activity', pharmacies.pharmacy_activity, name='pharmacy-activity'),
    path('api/pharmacies/<int:pharmacy_id>/staff', staff.staff_list, name='pharmacy-staff'),
    path('api/pharmacies/<int:pharmacy_id>/staff/<int:staff_id>', staff.staff_detail, name='pharmacy-staff-detail'),
    path('api/pharmacies/<int:pharmacy_id>/bills', bills.bills_list, name='pharmacy-bills'),

    # Analytics
    path('api/analytics/dashboard', analytics.user_dashboard, name='analytics-dashboard'),
    path('api/analytics/user/dashboard', analytics.user_dashboard, name='analytics-user-dashboard'),
    path('api/analytics/user/adherence', analytics.user_adherence, name='analytics-user-adherence'),
    path('api/analytics/user/medications', analytics.user_medications, name='analytics-user-medications'),
    path('api/analytics/sales/summary', analytics.sales_summary, name='analytics-sales-summary'),

    # Rewards
    path('api/rewards/dashboard', rewards.rewards_dashboard, name='rewards-dashboard'),
    path('api/rewards/achievements', rewards.rewards_achievements, name='rewards-achievements'),

    # Health check
    path('healthz', health.healthz, name='healthz'),
]
