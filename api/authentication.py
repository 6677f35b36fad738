"""
Bearer token authentication for the API.

Kept in its own module so that DRF can import the authentication class
from settings without pulling in any view code.
"""
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from rest_framework_simplejwt.settings import api_settings

from .models import User


class BearerAuthentication(JWTAuthentication):
    """JWT authentication that loads the user together with its roles.

    Role names are read on every authorization decision, so they are
    prefetched here instead of being queried per check.
    """

    def get_user(self, validated_token):
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise AuthenticationFailed('Token contained no recognizable user identification')
        user = (
            User.objects.prefetch_related('roles')
            .filter(**{api_settings.USER_ID_FIELD: user_id})
            .first()
        )
        if user is None or not user.is_active:
            raise AuthenticationFailed('User not found or inactive', code='user_not_found')
        return user
