"""Single entry surface for permission checks.

Callers never need to know whether an answer came from the static matrix
or from the agreement state policy. The actor is always passed
explicitly; sourcing it from a session is the caller's job.

Example
-------
::

    from mr3x_authz import PermissionFacade, UserContext

    facade = PermissionFacade()
    user = UserContext.from_session({"id": "u9", "role": "PROPRIETARIO"})
    facade.module_access(user, "contracts").is_read_only   # True
    facade.can_perform_action(user, "SIGN")                # False
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mr3x_authz.config.config_loader import AuthorizationConfig
from mr3x_authz.permissions.matrix import ActionCheck, PermissionMatrix
from mr3x_authz.permissions.module_permission import (
    Module,
    ModuleAction,
    ModulePermission,
    NO_PERMISSIONS,
)
from mr3x_authz.policy.agreement import AgreementPolicy, PermissionsSummary
from mr3x_authz.policy.resources import (
    AgreementAction,
    AgreementContext,
    SignatureType,
    UserContext,
)
from mr3x_authz.roles.grants import grants_for_role
from mr3x_authz.roles.registry import (
    Role,
    is_agency_managed_owner,
    is_independent_owner,
    is_owner,
    rank_or_none,
)


@dataclass(frozen=True)
class RolePermissionProfile:
    """Everything the static tables say about one role.

    Attributes
    ----------
    role:
        The resolved role, or ``None`` if the input was not a known role.
    rank:
        Hierarchy rank, ``None`` for unknown roles.
    modules:
        Effective permission for every module.
    read_only_modules:
        Modules shown read-only to this role.
    grants:
        Coarse ``resource:action`` grants.
    agreements:
        Role-level agreement summary.
    is_platform_role:
        Whether the role bypasses ownership scoping.
    """

    role: Role | None
    rank: float | None
    modules: dict[Module, ModulePermission]
    read_only_modules: list[Module]
    grants: frozenset[str]
    agreements: PermissionsSummary
    is_platform_role: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "role": self.role.value if self.role is not None else None,
            "rank": self.rank,
            "is_platform_role": self.is_platform_role,
            "modules": {m.value: p.to_dict() for m, p in self.modules.items()},
            "read_only_modules": [m.value for m in self.read_only_modules],
            "grants": sorted(self.grants),
            "agreements": self.agreements.to_dict(),
        }


@dataclass(frozen=True)
class ModuleAccess:
    """One module as a page sees it: flags, read-only state and owner kind."""

    module: Module
    permissions: ModulePermission
    is_read_only: bool
    restriction_message: str | None
    is_agency_managed_owner: bool
    is_independent_owner: bool
    is_owner: bool
    _matrix: PermissionMatrix = field(repr=False, compare=False)
    _role: object = field(repr=False, compare=False)

    @property
    def can_view(self) -> bool:
        return self.permissions.can_view

    @property
    def can_create(self) -> bool:
        return self.permissions.can_create

    @property
    def can_edit(self) -> bool:
        return self.permissions.can_edit

    @property
    def can_delete(self) -> bool:
        return self.permissions.can_delete

    @property
    def can_sign(self) -> bool:
        return self.permissions.can_sign

    @property
    def can_approve(self) -> bool:
        return self.permissions.can_approve

    @property
    def can_export(self) -> bool:
        return self.permissions.can_export

    def can(self, action: ModuleAction | str) -> ActionCheck:
        if self._role is None:
            return ActionCheck(allowed=False, message=self._matrix.default_message)
        return self._matrix.action_allowed(self._role, self.module, action)


@dataclass(frozen=True)
class AgreementActionSet:
    """Resource-level flags for one agreement, as an action menu needs them."""

    can_view: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_sign: bool = False
    can_sign_as_tenant: bool = False
    can_sign_as_owner: bool = False
    can_sign_as_agency: bool = False
    can_sign_as_broker: bool = False
    can_sign_as_witness: bool = False
    can_approve: bool = False
    can_reject: bool = False
    can_cancel: bool = False
    can_send_for_signature: bool = False
    available_actions: tuple[AgreementAction, ...] = ()


class PermissionFacade:
    """Answers every permission question the application asks.

    Parameters
    ----------
    matrix:
        Static matrix. Defaults to the one inside *policy*, else the
        built-in matrix.
    policy:
        Agreement state policy. Defaults to one built over *matrix*.
    """

    def __init__(
        self,
        matrix: PermissionMatrix | None = None,
        policy: AgreementPolicy | None = None,
    ) -> None:
        if policy is None:
            policy = AgreementPolicy(matrix=matrix)
        self._policy = policy
        self._matrix = matrix if matrix is not None else policy.matrix

    @classmethod
    def from_config(
        cls, config: AuthorizationConfig, base_dir: Path | None = None
    ) -> PermissionFacade:
        matrix = config.build_matrix(base_dir=base_dir)
        policy = AgreementPolicy(
            matrix=matrix,
            approval=config.approval.to_policy(),
            platform_roles=config.platform_roles,
        )
        return cls(matrix=matrix, policy=policy)

    @property
    def matrix(self) -> PermissionMatrix:
        return self._matrix

    @property
    def policy(self) -> AgreementPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Role level
    # ------------------------------------------------------------------

    def can_perform_action(self, ctx: UserContext | None, action: AgreementAction | str) -> bool:
        """Can this actor ever perform *action* on agreements."""
        return self._policy.can_perform_action(ctx, AgreementAction.from_value(action))

    def summary(self, ctx: UserContext | None) -> PermissionsSummary:
        return self._policy.summary(ctx)

    def module_access(self, ctx: UserContext | None, module: Module | str) -> ModuleAccess:
        """Return the page-level view of *module* for the actor.

        The restriction message is set only when the module is read-only.
        """
        module = Module.from_value(module)
        role = ctx.role if ctx is not None else None
        permissions = self._matrix.get(role, module) if ctx is not None else NO_PERMISSIONS
        read_only = ctx is not None and self._matrix.is_read_only_module(role, module)
        return ModuleAccess(
            module=module,
            permissions=permissions,
            is_read_only=read_only,
            restriction_message=self._matrix.restriction_message(module) if read_only else None,
            is_agency_managed_owner=is_agency_managed_owner(role),
            is_independent_owner=is_independent_owner(role),
            is_owner=is_owner(role),
            _matrix=self._matrix,
            _role=role,
        )

    def permissions_for_role(self, role: object) -> RolePermissionProfile:
        parsed = Role.parse(role)
        return RolePermissionProfile(
            role=parsed,
            rank=rank_or_none(parsed),
            modules=self._matrix.profile(role),
            read_only_modules=self._matrix.read_only_modules(role),
            grants=grants_for_role(role),
            agreements=self._policy.summary(UserContext(id="", role=role))
            if parsed is not None
            else PermissionsSummary(),
            is_platform_role=parsed in self._policy.platform_roles,
        )

    # ------------------------------------------------------------------
    # Resource level
    # ------------------------------------------------------------------

    def check_view(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        return self._policy.can_view(ctx, resource)

    def check_edit(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        return self._policy.can_edit(ctx, resource)

    def check_delete(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        return self._policy.can_delete(ctx, resource)

    def check_sign(
        self,
        ctx: UserContext | None,
        resource: AgreementContext | None,
        slot: SignatureType | str,
    ) -> bool:
        return self._policy.can_sign(ctx, resource, SignatureType.from_value(slot))

    def check_approve(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        return self._policy.can_approve(ctx, resource)

    def check_reject(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        return self._policy.can_reject(ctx, resource)

    def check_cancel(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        return self._policy.can_cancel(ctx, resource)

    def check_send_for_signature(
        self, ctx: UserContext | None, resource: AgreementContext | None
    ) -> bool:
        return self._policy.can_send_for_signature(ctx, resource)

    def available_actions(
        self, ctx: UserContext | None, resource: AgreementContext | None
    ) -> list[AgreementAction]:
        return self._policy.available_actions(ctx, resource)

    def agreement_actions(
        self, ctx: UserContext | None, resource: AgreementContext | None
    ) -> AgreementActionSet:
        """Return every resource-level flag for *resource* at once."""
        if ctx is None or resource is None:
            return AgreementActionSet()
        policy = self._policy
        return AgreementActionSet(
            can_view=policy.can_view(ctx, resource),
            can_edit=policy.can_edit(ctx, resource),
            can_delete=policy.can_delete(ctx, resource),
            can_sign=policy.can_perform_action(ctx, AgreementAction.SIGN),
            can_sign_as_tenant=policy.can_sign(ctx, resource, SignatureType.TENANT),
            can_sign_as_owner=policy.can_sign(ctx, resource, SignatureType.OWNER),
            can_sign_as_agency=policy.can_sign(ctx, resource, SignatureType.AGENCY),
            can_sign_as_broker=policy.can_sign(ctx, resource, SignatureType.BROKER),
            can_sign_as_witness=policy.can_sign(ctx, resource, SignatureType.WITNESS),
            can_approve=policy.can_approve(ctx, resource),
            can_reject=policy.can_reject(ctx, resource),
            can_cancel=policy.can_cancel(ctx, resource),
            can_send_for_signature=policy.can_send_for_signature(ctx, resource),
            available_actions=tuple(policy.available_actions(ctx, resource)),
        )


_DEFAULT_FACADE = PermissionFacade()


def can_perform_action(ctx: UserContext | None, action: AgreementAction | str) -> bool:
    return _DEFAULT_FACADE.can_perform_action(ctx, action)


def get_permissions_for_role(role: object) -> RolePermissionProfile:
    return _DEFAULT_FACADE.permissions_for_role(role)
