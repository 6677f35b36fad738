"""
Authentication views.

Login, signup and token lifecycle endpoints for both patients and
pharmacy staff.  These live outside ``api.views`` so that the
authentication class in ``api.authentication`` never imports view code.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer

from .dto import serialize_staff, serialize_user
from .principal import principal_for
from .serializers.auth import LoginSerializer, LogoutSerializer, PharmacySignupSerializer, SignupSerializer
from .services import accounts


def _client_ip(request):
    return request.META.get('REMOTE_ADDR')


@api_view(['POST'])
def login_view(request):
    """Patient login with e-mail and password."""
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = accounts.login_user(request, s.validated_data['email'], s.validated_data['password'])
    return Response({**accounts.issue_tokens(user), 'user': serialize_user(user)})

# ScopedRateThrottle reads throttle_scope from the view class
login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
def signup_view(request):
    s = SignupSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    user = accounts.signup_user(
        first_name=vd['firstName'], last_name=vd['lastName'],
        email=vd['email'], password=vd['password'], ip=_client_ip(request),
    )
    return Response({**accounts.issue_tokens(user), 'user': serialize_user(user)}, status=status.HTTP_201_CREATED)

signup_view.cls.throttle_scope = 'signup'


@api_view(['POST'])
def pharmacy_login_view(request):
    """Staff login; the caller must hold the PHARMACY role and an active assignment."""
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    staff = accounts.login_pharmacy(request, s.validated_data['email'], s.validated_data['password'])
    return Response({**accounts.issue_tokens(staff.user), 'staff': serialize_staff(staff)})

pharmacy_login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
def pharmacy_signup_view(request):
    s = PharmacySignupSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    staff = accounts.signup_pharmacy(s.validated_data, ip=_client_ip(request))
    return Response({**accounts.issue_tokens(staff.user), 'staff': serialize_staff(staff)},
                    status=status.HTTP_201_CREATED)

pharmacy_signup_view.cls.throttle_scope = 'signup'


@api_view(['GET'])
def validate_view(request):
    return Response(accounts.validate_session(request.user, principal_for(request)))


@api_view(['POST'])
def refresh_view(request):
    """Exchange a refresh token for a new access token (and a rotated refresh)."""
    refresh = request.data.get('refreshToken') or request.data.get('refresh')
    s = TokenRefreshSerializer(data={'refresh': refresh})
    try:
        s.is_valid(raise_exception=True)
    except TokenError as e:
        raise InvalidToken(e.args[0])
    data = s.validated_data
    return Response({
        'accessToken': data['access'],
        'refreshToken': data.get('refresh', refresh),
        'tokenType': 'Bearer',
    })


@api_view(['POST'])
def logout_view(request):
    """Blacklist the given refresh token, or all of the caller's tokens."""
    s = LogoutSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    count = accounts.logout(request.user, s.validated_data.get('refresh') or None)
    return Response({'ok': True, 'blacklisted': count})
