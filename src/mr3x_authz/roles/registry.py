"""Closed role set and hierarchy ranks.

Roles are assigned by the backend and never mutated here. Each role
carries a float rank; ``INDEPENDENT_OWNER`` sits at 5.5, between
``BROKER`` and ``PROPRIETARIO``, so comparisons must not assume integer
ranks.

Example
-------
::

    from mr3x_authz.roles.registry import Role, outranks, rank

    rank(Role.BROKER)                       # 6.0
    outranks(Role.AGENCY_ADMIN, "BROKER")   # True
    outranks("NOT_A_ROLE", Role.API_CLIENT) # False
"""
from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)


class UnknownRoleError(ValueError):
    """Raised by strict lookups when a role string is not in the closed set.

    Attributes
    ----------
    role:
        The offending value, as received.
    """

    def __init__(self, role: object) -> None:
        self.role = role
        super().__init__(f"Unknown role {role!r}.")


class Role(str, Enum):
    """Platform roles, as issued by the authentication backend."""

    CEO = "CEO"
    ADMIN = "ADMIN"
    PLATFORM_MANAGER = "PLATFORM_MANAGER"
    AGENCY_ADMIN = "AGENCY_ADMIN"
    AGENCY_MANAGER = "AGENCY_MANAGER"
    BROKER = "BROKER"
    PROPRIETARIO = "PROPRIETARIO"
    INDEPENDENT_OWNER = "INDEPENDENT_OWNER"
    INQUILINO = "INQUILINO"
    BUILDING_MANAGER = "BUILDING_MANAGER"
    LEGAL_AUDITOR = "LEGAL_AUDITOR"
    REPRESENTATIVE = "REPRESENTATIVE"
    API_CLIENT = "API_CLIENT"

    @classmethod
    def parse(cls, value: object) -> Role | None:
        """Normalise *value* into a Role, or return ``None`` if unrecognised.

        Accepts Role members and strings in any case with surrounding
        whitespace.
        """
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            logger.debug("Unrecognised role string %r", value)
            return None

    @classmethod
    def from_value(cls, value: object) -> Role:
        """Strict variant of :meth:`parse`.

        Raises
        ------
        UnknownRoleError
            If *value* does not name a role.
        """
        role = cls.parse(value)
        if role is None:
            raise UnknownRoleError(value)
        return role


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------

ROLE_HIERARCHY: Mapping[Role, float] = MappingProxyType(
    {
        Role.CEO: 10.0,
        Role.ADMIN: 9.0,
        Role.PLATFORM_MANAGER: 9.0,
        Role.AGENCY_ADMIN: 8.0,
        Role.AGENCY_MANAGER: 7.0,
        Role.BROKER: 6.0,
        Role.INDEPENDENT_OWNER: 5.5,
        Role.PROPRIETARIO: 5.0,
        Role.INQUILINO: 4.0,
        Role.BUILDING_MANAGER: 3.0,
        Role.LEGAL_AUDITOR: 2.0,
        Role.REPRESENTATIVE: 1.0,
        Role.API_CLIENT: 0.0,
    }
)

PLATFORM_ROLES: frozenset[Role] = frozenset(
    [Role.CEO, Role.ADMIN, Role.PLATFORM_MANAGER]
)

AGENCY_ROLES: frozenset[Role] = frozenset([Role.AGENCY_ADMIN, Role.AGENCY_MANAGER])

OWNER_ROLES: frozenset[Role] = frozenset([Role.PROPRIETARIO, Role.INDEPENDENT_OWNER])


def rank(role: Role | str) -> float:
    """Return the hierarchy rank of *role*.

    Raises
    ------
    UnknownRoleError
        If *role* is not a known role.
    """
    return ROLE_HIERARCHY[Role.from_value(role)]


def rank_or_none(role: object) -> float | None:
    """Return the hierarchy rank of *role*, or ``None`` when unknown."""
    parsed = Role.parse(role)
    if parsed is None:
        return None
    return ROLE_HIERARCHY[parsed]


def outranks(role_a: object, role_b: object) -> bool:
    """Return True if *role_a* ranks strictly above *role_b*.

    Unknown roles never outrank and are never outranked.
    """
    rank_a = rank_or_none(role_a)
    rank_b = rank_or_none(role_b)
    if rank_a is None or rank_b is None:
        return False
    return rank_a > rank_b


def outranks_or_equal(role_a: object, role_b: object) -> bool:
    """Return True if *role_a* ranks at or above *role_b*."""
    rank_a = rank_or_none(role_a)
    rank_b = rank_or_none(role_b)
    if rank_a is None or rank_b is None:
        return False
    return rank_a >= rank_b


def roles_by_rank(roles: Iterable[Role] | None = None) -> list[Role]:
    """Return *roles* (default: all roles) from highest to lowest rank.

    Ties keep declaration order.
    """
    pool = list(roles) if roles is not None else list(Role)
    return sorted(pool, key=lambda r: -ROLE_HIERARCHY[r])


# ---------------------------------------------------------------------------
# Classification helpers
# ---------------------------------------------------------------------------


def is_platform_role(role: object) -> bool:
    return Role.parse(role) in PLATFORM_ROLES


def is_agency_role(role: object) -> bool:
    return Role.parse(role) in AGENCY_ROLES


def is_agency_managed_owner(role: object) -> bool:
    return Role.parse(role) is Role.PROPRIETARIO


def is_independent_owner(role: object) -> bool:
    return Role.parse(role) is Role.INDEPENDENT_OWNER


def is_owner(role: object) -> bool:
    return Role.parse(role) in OWNER_ROLES
