"""Role registry and coarse per-role grants."""
from __future__ import annotations

from mr3x_authz.roles.grants import (
    ROLE_GRANTS,
    grants_for_role,
    has_any_role,
    has_permission,
    has_role,
)
from mr3x_authz.roles.registry import (
    AGENCY_ROLES,
    OWNER_ROLES,
    PLATFORM_ROLES,
    ROLE_HIERARCHY,
    Role,
    UnknownRoleError,
    is_agency_managed_owner,
    is_agency_role,
    is_independent_owner,
    is_owner,
    is_platform_role,
    outranks,
    outranks_or_equal,
    rank,
    rank_or_none,
    roles_by_rank,
)

__all__ = [
    "AGENCY_ROLES",
    "OWNER_ROLES",
    "PLATFORM_ROLES",
    "ROLE_GRANTS",
    "ROLE_HIERARCHY",
    "Role",
    "UnknownRoleError",
    "grants_for_role",
    "has_any_role",
    "has_permission",
    "has_role",
    "is_agency_managed_owner",
    "is_agency_role",
    "is_independent_owner",
    "is_owner",
    "is_platform_role",
    "outranks",
    "outranks_or_equal",
    "rank",
    "rank_or_none",
    "roles_by_rank",
]
