"""
The authenticated caller as seen by the service layer.

A :class:`Principal` is resolved once per request from the
authenticated user and then passed explicitly into services, so no
service ever reaches back into the request.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional

from .models import Role

_REQUEST_ATTR = '_principal'


@dataclass(frozen=True)
class Principal:
    id: int
    email: str
    roles: FrozenSet[str]

    @classmethod
    def from_user(cls, user) -> 'Principal':
        return cls(id=user.id, email=user.email, roles=frozenset(user.role_names))

    def has_role(self, name: str) -> bool:
        return name in self.roles

    def has_any_role(self, names) -> bool:
        return bool(self.roles & set(names))

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles


def principal_for(request) -> Optional[Principal]:
    """Return the principal for ``request``, or None when anonymous."""
    cached = getattr(request, _REQUEST_ATTR, None)
    if cached is not None:
        return cached
    user = getattr(request, 'user', None)
    if not (user and user.is_authenticated):
        return None
    principal = Principal.from_user(user)
    setattr(request, _REQUEST_ATTR, principal)
    return principal
