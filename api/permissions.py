"""
Permission class enforcing the route table in :mod:`api.policies`.

Returning ``False`` for an anonymous caller lets DRF answer 401; a role
mismatch is answered with 403 and a failed ownership check with 404 so
that the existence of a pharmacy is never revealed to outsiders.
"""
import logging

from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission

from .exceptions import ResourceNotFound
from .policies import policy_for
from .principal import principal_for

logger = logging.getLogger(__name__)


class RoutePolicyPermission(BasePermission):
    message = 'Access denied.'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        match = getattr(request, 'resolver_match', None)
        url_name = match.url_name if match else None
        policy = policy_for(url_name, request.method)
        if policy is None:
            logger.warning("No route policy for %s %s; denying", request.method, url_name)
            raise PermissionDenied(self.message)
        if policy.public:
            return True

        principal = principal_for(request)
        if principal is None:
            return False

        if policy.roles and not principal.has_any_role(policy.roles):
            raise PermissionDenied(self.message)

        if policy.ownership is None or principal.has_any_role(policy.bypass_roles):
            return True

        if policy.from_query:
            pharmacy_id = request.query_params.get(policy.pharmacy_kwarg)
        else:
            pharmacy_id = match.kwargs.get(policy.pharmacy_kwarg)
        if pharmacy_id in (None, ''):
            return True  # the view reports the missing parameter
        if not policy.ownership(pharmacy_id, principal):
            raise ResourceNotFound('Pharmacy', 'id', pharmacy_id)
        return True
