"""
Account services: registration, credential checks and token issuance.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework.exceptions import AuthenticationFailed, ValidationError
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from api.dto import serialize_staff, serialize_user
from api.exceptions import DuplicateResource
from api.models import Pharmacy, PharmacyStaff, Role, User
from api.principal import Principal

from .audit import log_action

logger = logging.getLogger(__name__)

ACCESS_DENIED_FOR_TYPE = 'Unauthorized: Access denied for this user type.'


def issue_tokens(user: User) -> dict:
    """Return a fresh refresh/access pair carrying the user's role names."""
    refresh = RefreshToken.for_user(user)
    refresh['roles'] = sorted(user.role_names)
    return {
        'accessToken': str(refresh.access_token),
        'refreshToken': str(refresh),
        'tokenType': 'Bearer',
    }


def _create_user(*, email: str, password: str, first_name: str, last_name: str, role: str) -> User:
    user = User.objects.create_user(
        username=email, email=email, password=password,
        first_name=first_name, last_name=last_name,
    )
    user.roles.add(Role.get(role))
    return user


def signup_user(*, first_name: str, last_name: str, email: str, password: str, ip=None) -> User:
    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateResource('Email is already in use!')
    with transaction.atomic():
        user = _create_user(email=email, password=password,
                            first_name=first_name, last_name=last_name, role=Role.USER)
    logger.info("User registered with id %s", user.id)
    log_action(user=user, action='signup', object_type='user', object_id=user.id, detail={'ip': ip})
    return user


def signup_pharmacy(data: dict, ip=None) -> PharmacyStaff:
    """Create the admin user, the pharmacy it owns and its ADMIN staff row."""
    email = data['adminEmail']
    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateResource('Admin email is already in use!')
    if Pharmacy.objects.filter(registration_number=data['registrationNumber']).exists():
        raise DuplicateResource('Pharmacy registration number already exists!')

    with transaction.atomic():
        admin = _create_user(
            email=email, password=data['adminPassword'],
            first_name=data['adminFirstName'], last_name=data['adminLastName'],
            role=Role.PHARMACY,
        )
        pharmacy = Pharmacy.objects.create(
            name=data['pharmacyName'],
            registration_number=data['registrationNumber'],
            address=data.get('address', ''),
            phone=data.get('phone', ''),
            email=data.get('pharmacyEmail', ''),
            website=data.get('website', ''),
            owner=admin,
        )
        staff = PharmacyStaff.objects.create(pharmacy=pharmacy, user=admin, role=PharmacyStaff.ADMIN)

    logger.info("Pharmacy %s registered with owner %s", pharmacy.id, admin.id)
    log_action(user=admin, action='pharmacy_signup', object_type='pharmacy', object_id=pharmacy.id,
               detail={'registrationNumber': pharmacy.registration_number, 'ip': ip})
    return staff


def _check_credentials(request, email: str, password: str) -> User:
    user = authenticate(request, username=email, password=password)
    if user is None:
        logger.info("Failed login for %s", email)
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'email': email, 'ip': request.META.get('REMOTE_ADDR')})
        raise AuthenticationFailed('Invalid email or password.')
    return user


def login_user(request, email: str, password: str) -> User:
    """Password login for patients; pharmacy accounts must use their own endpoint."""
    user = _check_credentials(request, email, password)
    roles = user.role_names
    if Role.USER not in roles or Role.PHARMACY in roles:
        logger.warning("Login for %s rejected at /auth/login: incorrect role", email)
        raise AuthenticationFailed(ACCESS_DENIED_FOR_TYPE)
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    return user


def primary_staff_assignment(user: User) -> PharmacyStaff | None:
    return (
        PharmacyStaff.objects.select_related('user', 'pharmacy')
        .filter(user=user, active=True)
        .order_by('id')
        .first()
    )


def login_pharmacy(request, email: str, password: str) -> PharmacyStaff:
    user = _check_credentials(request, email, password)
    if not user.has_role(Role.PHARMACY):
        raise AuthenticationFailed('Unauthorized: User is not pharmacy staff.')
    staff = primary_staff_assignment(user)
    if staff is None:
        logger.warning("Pharmacy user %s has no active staff assignment", user.id)
        raise AuthenticationFailed('Pharmacy staff details not found for this user.')
    log_action(user=user, action='pharmacy_login', object_type='pharmacy', object_id=staff.pharmacy_id,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    return staff


def validate_session(user: User, principal: Principal) -> dict:
    """Describe the caller for the front-end's session bootstrap."""
    if principal.has_role(Role.PHARMACY):
        staff = primary_staff_assignment(user)
        if staff is None:
            raise AuthenticationFailed('Token validation failed: no active pharmacy assignment.')
        return {'userType': 'pharmacy', 'userData': serialize_staff(staff)}
    if principal.has_role(Role.USER):
        return {'userType': 'user', 'userData': serialize_user(user)}
    raise AuthenticationFailed('Token validation failed: User role not supported for this context.')


def logout(user: User, refresh: str | None = None) -> int:
    """Blacklist one refresh token, or every outstanding token of ``user``."""
    if refresh:
        try:
            token = RefreshToken(refresh)
        except TokenError as e:
            raise ValidationError({'refresh': str(e)})
        if str(token.get(api_settings.USER_ID_CLAIM)) != str(user.id):
            raise ValidationError({'refresh': 'Token does not belong to this user.'})
        token.blacklist()
        count = 1
    else:
        count = 0
        for outstanding in OutstandingToken.objects.filter(user=user):
            _, created = BlacklistedToken.objects.get_or_create(token=outstanding)
            count += int(created)
    log_action(user=user, action='logout', object_type='user', object_id=user.id, detail={'blacklisted': count})
    return count
