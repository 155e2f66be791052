"""Tests for per-role resource:action grants."""
from __future__ import annotations

from mr3x_authz.policy.resources import UserContext
from mr3x_authz.roles.grants import (
    ROLE_GRANTS,
    grants_for_role,
    has_any_role,
    has_permission,
    has_role,
)
from mr3x_authz.roles.registry import Role


class TestGrantsForRole:
    def test_every_role_has_grants(self) -> None:
        assert set(ROLE_GRANTS) == set(Role)

    def test_unknown_role_has_no_grants(self) -> None:
        assert grants_for_role("UNKNOWN_ROLE") == frozenset()

    def test_agency_admin_can_approve_contracts(self) -> None:
        assert "contracts:approve" in grants_for_role(Role.AGENCY_ADMIN)

    def test_agency_manager_cannot_approve_contracts(self) -> None:
        assert "contracts:approve" not in grants_for_role(Role.AGENCY_MANAGER)

    def test_broker_cannot_delete_properties(self) -> None:
        grants = grants_for_role("BROKER")
        assert "properties:update" in grants
        assert "properties:delete" not in grants

    def test_ceo_has_no_document_grants(self) -> None:
        grants = grants_for_role("CEO")
        assert "documents:read" not in grants
        assert "users:delete" in grants

    def test_platform_manager_mirrors_admin(self) -> None:
        assert grants_for_role("PLATFORM_MANAGER") == grants_for_role("ADMIN")

    def test_api_client_read_only(self) -> None:
        assert all(g.endswith(":read") for g in grants_for_role(Role.API_CLIENT))


class TestHasPermission:
    def test_tenant_reads_contracts(self) -> None:
        ctx = UserContext(id="t1", role=Role.INQUILINO)
        assert has_permission(ctx, "contracts:read") is True
        assert has_permission(ctx, "contracts:update") is False

    def test_none_context_denied(self) -> None:
        assert has_permission(None, "dashboard:read") is False

    def test_unknown_role_denied(self) -> None:
        ctx = UserContext(id="x", role="GHOST")
        assert has_permission(ctx, "dashboard:read") is False


class TestHasRole:
    def test_has_role_matches_string(self) -> None:
        ctx = UserContext(id="b1", role=Role.BROKER)
        assert has_role(ctx, "BROKER") is True
        assert has_role(ctx, Role.AGENCY_ADMIN) is False

    def test_unknown_roles_never_match(self) -> None:
        ctx = UserContext(id="x", role="GHOST")
        assert has_role(ctx, "GHOST") is False

    def test_has_any_role(self) -> None:
        ctx = UserContext(id="a1", role="AGENCY_MANAGER")
        assert has_any_role(ctx, ["BROKER", "AGENCY_MANAGER"]) is True
        assert has_any_role(ctx, [Role.CEO]) is False
        assert has_any_role(None, [Role.CEO]) is False
