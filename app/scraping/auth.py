"""
Role lookup for principals authenticated by the host.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from app.domain.scraping import ROLE_ADMIN, ROLE_VIEWER, Principal


class RoleLookup(Protocol):
    def role_for(self, identity: str) -> str: ...


class StaticRoleLookup:
    """
    Grants `admin` to a fixed set of identities and `viewer` to everyone else.
    """

    def __init__(self, admin_identities: Iterable[str]) -> None:
        self._admins = frozenset(item.strip().lower() for item in admin_identities if item.strip())

    def role_for(self, identity: str) -> str:
        return ROLE_ADMIN if identity.strip().lower() in self._admins else ROLE_VIEWER


def resolve_principal(identity: str | None, *, roles: RoleLookup) -> Principal | None:
    """
    Build a principal from an authenticated identity label, or None when absent.
    """

    if identity is None or not identity.strip():
        return None
    label = identity.strip()
    return Principal(identity=label, role=roles.role_for(label))
