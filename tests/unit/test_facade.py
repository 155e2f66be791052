"""Tests for PermissionFacade, the single entry surface."""
from __future__ import annotations

import pytest

from mr3x_authz.config.config_loader import ConfigLoader
from mr3x_authz.facade import (
    AgreementActionSet,
    PermissionFacade,
    can_perform_action,
    get_permissions_for_role,
)
from mr3x_authz.permissions.matrix import DEFAULT_RESTRICTION_MESSAGE, PermissionMatrix
from mr3x_authz.permissions.module_permission import (
    FULL_PERMISSIONS,
    NO_PERMISSIONS,
    RESTRICTED_DEFAULT,
    Module,
)
from mr3x_authz.policy.agreement import PermissionsSummary
from mr3x_authz.policy.resources import (
    AgreementAction,
    AgreementContext,
    AgreementStatus,
    SignatureType,
    UserContext,
)
from mr3x_authz.roles.grants import grants_for_role
from mr3x_authz.roles.registry import Role


@pytest.fixture()
def facade() -> PermissionFacade:
    return PermissionFacade()


@pytest.fixture()
def owner() -> UserContext:
    return UserContext(id="o1", role=Role.PROPRIETARIO)


@pytest.fixture()
def pending() -> AgreementContext:
    return AgreementContext(
        status=AgreementStatus.PENDENTE_ASSINATURA,
        tenant_id="t1",
        owner_id="o1",
        agency_id="a1",
        broker_id="b1",
    )


# ---------------------------------------------------------------------------
# module_access
# ---------------------------------------------------------------------------

class TestModuleAccess:
    def test_owner_contracts_read_only(self, facade: PermissionFacade, owner: UserContext) -> None:
        access = facade.module_access(owner, "contracts")
        assert access.module is Module.CONTRACTS
        assert access.is_read_only is True
        assert access.restriction_message == (
            "Contratos de aluguel são assinados pela imobiliária em nome do proprietário"
        )
        assert access.is_agency_managed_owner is True
        assert access.is_owner is True
        assert access.is_independent_owner is False
        assert access.can_view is True
        assert access.can_sign is False
        assert access.can_export is True

    def test_owner_chat_not_read_only(self, facade: PermissionFacade, owner: UserContext) -> None:
        access = facade.module_access(owner, Module.CHAT)
        assert access.is_read_only is False
        assert access.restriction_message is None
        assert access.can_create is True

    def test_independent_owner_unrestricted(self, facade: PermissionFacade) -> None:
        user = UserContext(id="o2", role=Role.INDEPENDENT_OWNER)
        access = facade.module_access(user, "contracts")
        assert access.permissions == FULL_PERMISSIONS
        assert access.is_read_only is False
        assert access.is_independent_owner is True
        assert access.is_agency_managed_owner is False

    def test_can_carries_denial_message(self, facade: PermissionFacade, owner: UserContext) -> None:
        check = facade.module_access(owner, "properties").can("edit")
        assert check.allowed is False
        assert check.message == "Imóveis são gerenciados pela imobiliária"

    def test_no_context(self, facade: PermissionFacade) -> None:
        access = facade.module_access(None, "dashboard")
        assert access.permissions == NO_PERMISSIONS
        assert access.is_read_only is False
        assert access.is_owner is False
        check = access.can("view")
        assert check.allowed is False
        assert check.message == DEFAULT_RESTRICTION_MESSAGE

    def test_agency_staff_flags(self, facade: PermissionFacade) -> None:
        user = UserContext(id="u1", role=Role.AGENCY_ADMIN, agency_id="a1")
        access = facade.module_access(user, "payments")
        assert access.can_delete is True
        assert access.can_approve is True
        assert access.is_owner is False


# ---------------------------------------------------------------------------
# Role profiles
# ---------------------------------------------------------------------------

class TestPermissionsForRole:
    def test_owner_profile(self, facade: PermissionFacade) -> None:
        profile = facade.permissions_for_role("PROPRIETARIO")
        assert profile.role is Role.PROPRIETARIO
        assert profile.rank == 5.0
        assert set(profile.modules) == set(Module)
        assert Module.PROPERTIES in profile.read_only_modules
        assert profile.grants == grants_for_role(Role.PROPRIETARIO)
        assert profile.agreements.can_view is True
        assert profile.agreements.can_sign is False
        assert profile.is_platform_role is False

    def test_ceo_is_platform_role(self, facade: PermissionFacade) -> None:
        profile = facade.permissions_for_role(Role.CEO)
        assert profile.is_platform_role is True
        assert profile.read_only_modules == []
        assert profile.agreements.is_mr3x_role is True

    def test_unknown_role_profile(self, facade: PermissionFacade) -> None:
        profile = facade.permissions_for_role("GHOST")
        assert profile.role is None
        assert profile.rank is None
        assert all(p == NO_PERMISSIONS for p in profile.modules.values())
        assert profile.grants == frozenset()
        assert profile.agreements == PermissionsSummary()

    def test_to_dict_uses_plain_values(self, facade: PermissionFacade) -> None:
        payload = facade.permissions_for_role("INQUILINO").to_dict()
        assert payload["role"] == "INQUILINO"
        assert payload["modules"]["agreements"]["sign"] is True  # type: ignore[index]
        assert payload["grants"] == sorted(grants_for_role("INQUILINO"))

    def test_module_level_shortcut(self) -> None:
        assert get_permissions_for_role("BROKER").role is Role.BROKER


# ---------------------------------------------------------------------------
# Role-level agreement checks
# ---------------------------------------------------------------------------

class TestCanPerformAction:
    def test_accepts_string_action(self, facade: PermissionFacade, owner: UserContext) -> None:
        assert facade.can_perform_action(owner, "SIGN") is False
        assert facade.can_perform_action(owner, AgreementAction.VIEW) is True

    def test_tenant_signs(self) -> None:
        assert can_perform_action(UserContext(id="t1", role="INQUILINO"), "SIGN") is True

    def test_no_context(self, facade: PermissionFacade) -> None:
        assert facade.can_perform_action(None, "VIEW") is False

    def test_unknown_action_raises(self, facade: PermissionFacade, owner: UserContext) -> None:
        with pytest.raises(ValueError):
            facade.can_perform_action(owner, "TELEPORT")

    def test_summary(self, facade: PermissionFacade) -> None:
        summary = facade.summary(UserContext(id="m", role=Role.AGENCY_MANAGER))
        assert summary.can_approve is True


# ---------------------------------------------------------------------------
# Resource-level agreement checks
# ---------------------------------------------------------------------------

class TestAgreementChecks:
    def test_tenant_action_set(self, facade: PermissionFacade, pending: AgreementContext) -> None:
        action_set = facade.agreement_actions(UserContext(id="t1", role=Role.INQUILINO), pending)
        assert action_set.can_view is True
        assert action_set.can_sign is True
        assert action_set.can_sign_as_tenant is True
        assert action_set.can_sign_as_owner is False
        assert action_set.can_edit is False
        assert action_set.available_actions == (AgreementAction.VIEW, AgreementAction.SIGN)

    def test_agency_action_set(self, facade: PermissionFacade, pending: AgreementContext) -> None:
        admin = UserContext(id="u1", role=Role.AGENCY_ADMIN, agency_id="a1")
        action_set = facade.agreement_actions(admin, pending)
        assert action_set.can_sign_as_agency is True
        assert action_set.can_sign_as_witness is True
        assert action_set.can_sign_as_broker is False
        assert action_set.can_approve is True
        assert action_set.can_reject is True
        assert action_set.can_cancel is True
        assert action_set.can_send_for_signature is False

    def test_missing_inputs(self, facade: PermissionFacade, pending: AgreementContext) -> None:
        assert facade.agreement_actions(None, pending) == AgreementActionSet()
        assert facade.available_actions(None, pending) == []

    def test_check_methods_delegate(self, facade: PermissionFacade, pending: AgreementContext) -> None:
        tenant = UserContext(id="t1", role=Role.INQUILINO)
        assert facade.check_view(tenant, pending) is True
        assert facade.check_edit(tenant, pending) is False
        assert facade.check_delete(tenant, pending) is False
        assert facade.check_sign(tenant, pending, "TENANT") is True
        assert facade.check_sign(tenant, pending, SignatureType.OWNER) is False
        assert facade.check_approve(tenant, pending) is False
        assert facade.check_reject(tenant, pending) is False
        assert facade.check_cancel(tenant, pending) is False
        assert facade.check_send_for_signature(tenant, pending) is False


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_custom_matrix_feeds_policy(self) -> None:
        facade = PermissionFacade(matrix=PermissionMatrix(overrides={}))
        assert facade.policy.matrix is facade.matrix
        assert facade.matrix.get(Role.PROPRIETARIO, "contracts") == RESTRICTED_DEFAULT
        assert facade.can_perform_action(UserContext(id="t", role="INQUILINO"), "EDIT") is True

    def test_from_config_strict_approval(self, pending: AgreementContext) -> None:
        config = ConfigLoader().load_string("approval:\n  inclusive: false\n")
        facade = PermissionFacade.from_config(config)
        manager = UserContext(id="m", role=Role.AGENCY_MANAGER, agency_id="a1")
        admin = UserContext(id="a", role=Role.AGENCY_ADMIN, agency_id="a1")
        assert facade.check_approve(manager, pending) is False
        assert facade.check_approve(admin, pending) is True

    def test_from_config_inline_matrix(self) -> None:
        config = ConfigLoader().load_string(
            "matrix:\n"
            "  roles:\n"
            "    BROKER:\n"
            "      agreements: {view: true, edit: true, delete: true}\n"
        )
        facade = PermissionFacade.from_config(config)
        broker = UserContext(id="b1", role=Role.BROKER)
        draft = AgreementContext(status="RASCUNHO", broker_id="b1")
        assert facade.check_delete(broker, draft) is True

    def test_from_config_platform_roles(self) -> None:
        config = ConfigLoader().load_string("platform_roles: [CEO]\n")
        facade = PermissionFacade.from_config(config)
        admin = UserContext(id="x", role=Role.ADMIN)
        resource = AgreementContext(status="ATIVO", agency_id="a1")
        assert facade.check_view(admin, resource) is False
        assert facade.check_view(UserContext(id="c", role=Role.CEO), resource) is True


class TestLooseNames:
    def test_lower_case_action(self, facade: PermissionFacade) -> None:
        ceo = UserContext(id="u", role="ceo")
        assert facade.can_perform_action(ceo, "sign") is True

    def test_lower_case_slot(self, facade: PermissionFacade, pending: AgreementContext) -> None:
        tenant = UserContext(id="t1", role=Role.INQUILINO)
        assert facade.check_sign(tenant, pending, "tenant") is True

    def test_module_access_upper_case_action(
        self, facade: PermissionFacade, owner: UserContext
    ) -> None:
        access = facade.module_access(owner, "service_contracts")
        assert access.can("SIGN").allowed is True
        assert access.can("Edit").allowed is False
