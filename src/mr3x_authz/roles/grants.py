"""Per-role ``resource:action`` grants carried by the session layer.

These coarse grants gate whole pages (``users:create``,
``contracts:approve``) independently of the module permission matrix.
An unknown role has no grants.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping

from mr3x_authz.roles.registry import Role

if TYPE_CHECKING:
    from mr3x_authz.policy.resources import UserContext


def _crud(resource: str, *extra: str) -> list[str]:
    return [f"{resource}:{verb}" for verb in ("read", "create", "update", "delete", *extra)]


_ADMIN_GRANTS: frozenset[str] = frozenset(
    [
        "dashboard:read",
        *_crud("users"),
        *_crud("agencies"),
        *_crud("properties"),
        *_crud("contracts"),
        *_crud("payments"),
        "reports:read", "reports:create", "reports:export",
        *_crud("chat"),
        *_crud("notifications"),
        "audit:read", "audit:create",
        "documents:read", "documents:create",
        "settings:read", "settings:update",
        "billing:read", "billing:update",
        *_crud("integrations"),
    ]
)

ROLE_GRANTS: Mapping[Role, frozenset[str]] = MappingProxyType(
    {
        Role.CEO: _ADMIN_GRANTS - {"documents:read", "documents:create"},
        Role.ADMIN: _ADMIN_GRANTS,
        Role.PLATFORM_MANAGER: _ADMIN_GRANTS,
        Role.AGENCY_ADMIN: frozenset(
            [
                "dashboard:read",
                *_crud("users"),
                "agencies:read", "agencies:update",
                *_crud("properties"),
                *_crud("contracts", "approve"),
                *_crud("payments", "approve"),
                "reports:read", "reports:create", "reports:export",
                *_crud("chat"),
                *_crud("notifications"),
                "audit:read",
                "documents:read", "documents:create",
                "settings:read", "settings:update",
                "billing:read", "billing:update",
                "integrations:read", "integrations:update",
            ]
        ),
        Role.AGENCY_MANAGER: frozenset(
            [
                "dashboard:read",
                *_crud("users"),
                "agencies:read", "agencies:update",
                *_crud("properties"),
                *_crud("contracts"),
                *_crud("payments"),
                "reports:read", "reports:create", "reports:export",
                *_crud("chat"),
                *_crud("notifications"),
                "audit:read", "audit:create",
                "settings:read", "settings:update",
            ]
        ),
        Role.BROKER: frozenset(
            [
                "dashboard:read",
                "users:read",
                "properties:read", "properties:create", "properties:update",
                "contracts:read", "contracts:create", "contracts:update",
                "payments:read", "payments:create", "payments:update",
                "reports:read", "reports:export",
                *_crud("chat"),
                "notifications:read", "notifications:create", "notifications:update",
                "settings:read", "settings:update",
            ]
        ),
        Role.PROPRIETARIO: frozenset(
            [
                "dashboard:read",
                *_crud("properties"),
                *_crud("contracts"),
                *_crud("payments"),
                "reports:read", "reports:create", "reports:export",
                *_crud("chat"),
                *_crud("notifications"),
                "settings:read", "settings:update",
            ]
        ),
        Role.INDEPENDENT_OWNER: frozenset(
            [
                "dashboard:read",
                *_crud("users"),
                *_crud("properties"),
                *_crud("contracts"),
                *_crud("payments"),
                "reports:read", "reports:create", "reports:export",
                *_crud("chat"),
                *_crud("notifications"),
                "documents:read", "documents:create",
                "settings:read", "settings:update",
                "integrations:read", "integrations:update",
            ]
        ),
        Role.INQUILINO: frozenset(
            [
                "dashboard:read",
                "properties:read",
                "contracts:read",
                "payments:read", "payments:create", "payments:update",
                "reports:read", "reports:export",
                *_crud("chat"),
                "notifications:read", "notifications:create",
                "settings:read", "settings:update",
            ]
        ),
        Role.BUILDING_MANAGER: frozenset(
            [
                "dashboard:read",
                "properties:read",
                "contracts:read",
                "payments:read",
                "reports:read", "reports:export",
                "chat:read", "chat:create", "chat:update",
                "notifications:read", "notifications:create", "notifications:update",
                "settings:read", "settings:update",
            ]
        ),
        Role.LEGAL_AUDITOR: frozenset(
            [
                "dashboard:read",
                "properties:read",
                "contracts:read",
                "payments:read",
                "reports:read", "reports:export",
                "audit:read", "audit:create",
                "settings:read",
            ]
        ),
        Role.REPRESENTATIVE: frozenset(
            [
                "dashboard:read",
                "users:read",
                "agencies:read",
                "reports:read", "reports:export",
                "settings:read", "settings:update",
            ]
        ),
        Role.API_CLIENT: frozenset(
            [
                "properties:read",
                "contracts:read",
                "payments:read",
                "reports:read",
            ]
        ),
    }
)


def grants_for_role(role: object) -> frozenset[str]:
    """Return the grant set for *role*; unknown roles get an empty set."""
    parsed = Role.parse(role)
    if parsed is None:
        return frozenset()
    return ROLE_GRANTS[parsed]


def has_permission(ctx: UserContext | None, grant: str) -> bool:
    """Return True if the actor's role carries *grant* (``"resource:action"``)."""
    if ctx is None:
        return False
    return grant in grants_for_role(ctx.role)


def has_role(ctx: UserContext | None, role: Role | str) -> bool:
    if ctx is None:
        return False
    actor_role = Role.parse(ctx.role)
    return actor_role is not None and actor_role is Role.parse(role)


def has_any_role(ctx: UserContext | None, roles: Iterable[Role | str]) -> bool:
    if ctx is None:
        return False
    return any(has_role(ctx, role) for role in roles)
