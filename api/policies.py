"""
Route authorization table.

Each ``(url name, HTTP method)`` pair served by the API is mapped to a
:class:`RoutePolicy`.  :class:`api.permissions.RoutePolicyPermission`
evaluates the policy before any view code runs:

1. public routes pass straight through;
2. the caller must be authenticated;
3. the caller must hold one of ``roles`` (empty means any role);
4. if an ``ownership`` predicate is set and the caller holds none of
   ``bypass_roles``, the predicate must accept the pharmacy id taken
   from the URL (or from the query string when ``from_query`` is set).

A pair missing from the table is denied.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Optional, Tuple

from .models import Role
from .services.tenancy import is_pharmacy_admin, is_pharmacy_member

ANY_ROLE: FrozenSet[str] = frozenset()
ACCOUNT_ROLES = frozenset({Role.USER, Role.PHARMACY, Role.ADMIN})
PHARMACY_OR_ADMIN = frozenset({Role.PHARMACY, Role.ADMIN})
ADMIN_ONLY = frozenset({Role.ADMIN})


@dataclass(frozen=True)
class RoutePolicy:
    roles: FrozenSet[str] = ANY_ROLE
    ownership: Optional[Callable] = None
    bypass_roles: FrozenSet[str] = field(default_factory=lambda: ADMIN_ONLY)
    public: bool = False
    pharmacy_kwarg: str = 'pharmacy_id'
    from_query: bool = False


PUBLIC = RoutePolicy(public=True)
AUTHENTICATED = RoutePolicy()
MEMBER = RoutePolicy(ownership=is_pharmacy_member)
PHARMACY_ADMIN = RoutePolicy(ownership=is_pharmacy_admin)
STAFF_MEMBER = RoutePolicy(roles=PHARMACY_OR_ADMIN, ownership=is_pharmacy_member)
STAFF_ADMIN = RoutePolicy(roles=PHARMACY_OR_ADMIN, ownership=is_pharmacy_admin)


def _each(names, methods, policy) -> Dict[Tuple[str, str], RoutePolicy]:
    return {(name, method): policy for name in names for method in methods}


ROUTE_POLICIES: Dict[Tuple[str, str], RoutePolicy] = {
    # auth
    **_each(['auth-login', 'auth-signup', 'auth-pharmacy-login', 'auth-pharmacy-signup', 'auth-refresh'], ['POST'], PUBLIC),
    ('auth-validate', 'GET'): AUTHENTICATED,
    ('auth-logout', 'POST'): AUTHENTICATED,
    # users
    **_each(['user-me', 'user-profile'], ['GET', 'PUT'], RoutePolicy(roles=ACCOUNT_ROLES)),
    # per-user resources; ownership is enforced by query scoping in services
    **_each(['medication-list'], ['GET', 'POST'], AUTHENTICATED),
    ('medication-active', 'GET'): AUTHENTICATED,
    **_each(['medication-detail'], ['GET', 'PUT', 'DELETE'], AUTHENTICATED),
    **_each(['reminder-list'], ['GET', 'POST'], AUTHENTICATED),
    ('reminder-pending', 'GET'): AUTHENTICATED,
    **_each(['reminder-detail'], ['GET', 'PUT', 'DELETE'], AUTHENTICATED),
    ('reminder-complete', 'POST'): AUTHENTICATED,
    **_each(['donation-list'], ['GET', 'POST'], AUTHENTICATED),
    ('donation-pending', 'GET'): AUTHENTICATED,
    **_each(['donation-detail'], ['GET', 'PUT', 'DELETE'], AUTHENTICATED),
    ('donation-status', 'PUT'): AUTHENTICATED,
    # pharmacies
    **_each(['pharmacy-list'], ['GET', 'POST'], RoutePolicy(roles=ADMIN_ONLY)),
    ('pharmacy-mine', 'GET'): RoutePolicy(roles=frozenset({Role.PHARMACY})),
    ('pharmacy-detail', 'GET'): MEMBER,
    ('pharmacy-detail', 'PUT'): PHARMACY_ADMIN,
    ('pharmacy-detail', 'DELETE'): PHARMACY_ADMIN,
    ('pharmacy-activity', 'GET'): STAFF_MEMBER,
    ('pharmacy-staff', 'GET'): STAFF_MEMBER,
    ('pharmacy-staff', 'POST'): STAFF_ADMIN,
    **_each(['pharmacy-staff-detail'], ['PUT', 'DELETE'], STAFF_ADMIN),
    **_each(['pharmacy-bills'], ['GET', 'POST'], STAFF_MEMBER),
    # analytics
    **_each(['analytics-dashboard', 'analytics-user-dashboard', 'analytics-user-adherence',
             'analytics-user-medications'], ['GET'], AUTHENTICATED),
    ('analytics-sales-summary', 'GET'): RoutePolicy(
        roles=PHARMACY_OR_ADMIN, ownership=is_pharmacy_member, pharmacy_kwarg='pharmacyId', from_query=True,
    ),
    # rewards
    **_each(['rewards-dashboard', 'rewards-achievements'], ['GET'], AUTHENTICATED),
    ('healthz', 'GET'): PUBLIC,
}


def policy_for(url_name: Optional[str], method: str) -> Optional[RoutePolicy]:
    if not url_name:
        return None
    if method == 'HEAD':
        method = 'GET'
    return ROUTE_POLICIES.get((url_name, method))
