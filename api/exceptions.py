"""
Domain exceptions and the DRF exception handler.

Every error leaves the API as ``{"status": <int>, "message": <str>}``.
Services raise the exceptions below (or DRF's own) and never build
error responses themselves.
"""
from __future__ import annotations

import logging

from django.db import IntegrityError
from rest_framework import exceptions, status
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class ResourceNotFound(exceptions.NotFound):
    """Raised when a resource is absent or not visible to the caller.

    The two cases are deliberately indistinguishable to the client.
    """

    def __init__(self, resource: str, field: str = 'id', value=None):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} not found with {field} : '{value}'")


class InvalidTransition(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid state transition.'
    default_code = 'invalid_transition'

    def __init__(self, current: str, target: str | None = None, action: str | None = None):
        self.current = current
        self.target = target
        if target:
            msg = f"Cannot change donation status from {current} to {target}."
        else:
            msg = f"Cannot {action or 'modify'} a donation with status {current}."
        super().__init__(msg)


class DuplicateResource(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Resource already exists.'
    default_code = 'duplicate'


def _message_from(data) -> str:
    """Flatten DRF error payloads into one human readable string."""
    if isinstance(data, dict):
        if 'detail' in data and len(data) == 1:
            return str(data['detail'])
        parts = []
        for field, errors in data.items():
            text = _message_from(errors)
            parts.append(text if field in ('detail', 'non_field_errors') else f"{field}: {text}")
        return '; '.join(parts)
    if isinstance(data, (list, tuple)):
        return ' '.join(_message_from(item) for item in data)
    return str(data)


# MySQL ER_DUP_ENTRY, PostgreSQL unique_violation
MYSQL_DUP_ENTRY = 1062
PG_UNIQUE_VIOLATION = '23505'


def is_unique_violation(exc: IntegrityError) -> bool:
    cause = exc.__cause__
    if getattr(cause, 'pgcode', None) == PG_UNIQUE_VIOLATION:
        return True
    args = getattr(cause, 'args', None) or exc.args
    if args and args[0] == MYSQL_DUP_ENTRY:
        return True
    text = str(exc).lower()
    return 'unique' in text or 'duplicate' in text


def api_exception_handler(exc, context):
    # rest_framework.views loads the permission classes at import time,
    # and api.permissions imports this module
    from rest_framework.views import exception_handler as drf_exception_handler

    if isinstance(exc, IntegrityError) and is_unique_violation(exc):
        logger.warning("Integrity error on %s: %s", context.get('view'), exc)
        exc = DuplicateResource('Resource already exists.')
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("Unhandled error in %s", context.get('view'), exc_info=exc)
        return Response(
            {'status': status.HTTP_500_INTERNAL_SERVER_ERROR, 'message': 'An unexpected error occurred.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    resp.data = {'status': resp.status_code, 'message': _message_from(resp.data)}
    return resp
