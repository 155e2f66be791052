"""State-dependent permissions for the agreement signing workflow.

The static matrix says what a role may ever do on the ``agreements``
module. This policy narrows that by the agreement's lifecycle state, the
actor's relationship to it, and which signature slots are still empty.

Lifecycle::

    RASCUNHO ──send──▶ PENDENTE_ASSINATURA ──▶ ATIVO / APROVADO ──▶ ENCERRADO
        │                     │
        └──────cancel─────────┴──▶ CANCELADO / REJEITADO

Every check is total: a missing actor, a missing agreement, an unknown
role or a malformed status all yield ``False`` (or an empty list).

Example
-------
::

    ctx = UserContext(id="u1", role=Role.AGENCY_ADMIN, agency_id="a1")
    draft = AgreementContext(status="RASCUNHO", agency_id="a1")
    get_available_actions(ctx, draft)
    # [VIEW, EDIT, DELETE, CANCEL, SEND_FOR_SIGNATURE]
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from mr3x_authz.permissions.matrix import DEFAULT_MATRIX, ActionCheck, PermissionMatrix
from mr3x_authz.permissions.module_permission import Module, ModuleAction
from mr3x_authz.policy.resources import (
    AgreementAction,
    AgreementContext,
    AgreementStatus,
    SignatureType,
    UserContext,
)
from mr3x_authz.roles.registry import (
    AGENCY_ROLES,
    OWNER_ROLES,
    PLATFORM_ROLES,
    ROLE_HIERARCHY,
    Role,
    rank_or_none,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Status predicates
# ---------------------------------------------------------------------------

EDITABLE_STATUSES: frozenset[AgreementStatus] = frozenset([AgreementStatus.RASCUNHO])
DELETABLE_STATUSES: frozenset[AgreementStatus] = frozenset([AgreementStatus.RASCUNHO])
SIGNABLE_STATUSES: frozenset[AgreementStatus] = frozenset(
    [AgreementStatus.PENDENTE_ASSINATURA]
)
APPROVABLE_STATUSES: frozenset[AgreementStatus] = frozenset(
    [AgreementStatus.PENDENTE_ASSINATURA]
)
TERMINAL_STATUSES: frozenset[AgreementStatus] = frozenset(
    [AgreementStatus.REJEITADO, AgreementStatus.CANCELADO, AgreementStatus.ENCERRADO]
)
IMMUTABLE_STATUSES: frozenset[AgreementStatus] = TERMINAL_STATUSES | frozenset(
    [AgreementStatus.ATIVO, AgreementStatus.APROVADO]
)


def is_editable_status(status: object) -> bool:
    return AgreementStatus.parse(status) in EDITABLE_STATUSES


def is_deletable_status(status: object) -> bool:
    return AgreementStatus.parse(status) in DELETABLE_STATUSES


def is_signable_status(status: object) -> bool:
    return AgreementStatus.parse(status) in SIGNABLE_STATUSES


def is_terminal_status(status: object) -> bool:
    return AgreementStatus.parse(status) in TERMINAL_STATUSES


def is_immutable_status(status: object) -> bool:
    """True for terminal, active and approved states, and for unknown values."""
    parsed = AgreementStatus.parse(status)
    return parsed is None or parsed in IMMUTABLE_STATUSES


def has_been_signed(resource: AgreementContext | None) -> bool:
    """True if any signature slot on *resource* is filled."""
    if resource is None:
        return False
    return any(resource.signature_for(slot) for slot in SignatureType)


# ---------------------------------------------------------------------------
# Action mapping
# ---------------------------------------------------------------------------

ACTION_TO_MODULE_ACTION: Mapping[AgreementAction, ModuleAction] = MappingProxyType(
    {
        AgreementAction.VIEW: ModuleAction.VIEW,
        AgreementAction.CREATE: ModuleAction.CREATE,
        AgreementAction.EDIT: ModuleAction.EDIT,
        AgreementAction.DELETE: ModuleAction.DELETE,
        AgreementAction.SIGN: ModuleAction.SIGN,
        AgreementAction.APPROVE: ModuleAction.APPROVE,
        AgreementAction.REJECT: ModuleAction.APPROVE,
        AgreementAction.CANCEL: ModuleAction.DELETE,
        AgreementAction.SEND_FOR_SIGNATURE: ModuleAction.EDIT,
    }
)

_DECISION_ACTIONS: frozenset[AgreementAction] = frozenset(
    [AgreementAction.APPROVE, AgreementAction.REJECT]
)


def _same(left: str | None, right: str | None) -> bool:
    return bool(left) and bool(right) and left == right


def _broker_identity(ctx: UserContext) -> str | None:
    return ctx.broker_id or ctx.id or None


# ---------------------------------------------------------------------------
# Policy objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ApprovalPolicy:
    """Minimum hierarchy rank required to approve or reject.

    Attributes
    ----------
    minimum_role:
        Role whose rank is the threshold.
    inclusive:
        When ``True`` (default) a role exactly at the threshold may
        approve; when ``False`` it must rank strictly above.
    """

    minimum_role: Role = Role.AGENCY_MANAGER
    inclusive: bool = True

    def permits(self, role: object) -> bool:
        actor_rank = rank_or_none(role)
        if actor_rank is None:
            return False
        threshold = ROLE_HIERARCHY[self.minimum_role]
        return actor_rank >= threshold if self.inclusive else actor_rank > threshold


@dataclass(frozen=True)
class PermissionsSummary:
    """Role-level agreement capabilities, before any agreement is loaded."""

    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_sign: bool = False
    can_approve: bool = False
    can_reject: bool = False
    can_cancel: bool = False
    can_send_for_signature: bool = False
    is_mr3x_role: bool = False

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)


class AgreementPolicy:
    """Combines static capability with agreement state and ownership.

    Every resource-level check, including approve, reject, cancel and
    send-for-signature, requires the agreement to be in the actor's
    scope (see :meth:`is_in_scope`). Platform roles are always in scope.

    Parameters
    ----------
    matrix:
        Permission matrix consulted for the ``agreements`` module.
    approval:
        Rank threshold for approve/reject.
    platform_roles:
        Roles that bypass ownership scoping.
    """

    def __init__(
        self,
        matrix: PermissionMatrix | None = None,
        approval: ApprovalPolicy | None = None,
        platform_roles: Iterable[Role] = PLATFORM_ROLES,
    ) -> None:
        self._matrix = matrix if matrix is not None else DEFAULT_MATRIX
        self._approval = approval if approval is not None else ApprovalPolicy()
        self._platform_roles = frozenset(platform_roles)

    @property
    def matrix(self) -> PermissionMatrix:
        return self._matrix

    @property
    def approval(self) -> ApprovalPolicy:
        return self._approval

    @property
    def platform_roles(self) -> frozenset[Role]:
        return self._platform_roles

    # ------------------------------------------------------------------
    # Role level
    # ------------------------------------------------------------------

    def action_allowed(self, ctx: UserContext | None, action: AgreementAction) -> ActionCheck:
        """Static check of *action* on the agreements module, with message."""
        action = AgreementAction.from_value(action)
        if ctx is None:
            return ActionCheck(allowed=False, message=self._matrix.default_message)
        check = self._matrix.action_allowed(
            ctx.role, Module.AGREEMENTS, ACTION_TO_MODULE_ACTION[action]
        )
        if check.allowed and action in _DECISION_ACTIONS and not self._approval.permits(ctx.role):
            return ActionCheck(allowed=False, message=self._matrix.default_message)
        return check

    def can_perform_action(self, ctx: UserContext | None, action: AgreementAction) -> bool:
        return self.action_allowed(ctx, action).allowed

    def is_platform_actor(self, ctx: UserContext | None) -> bool:
        if ctx is None:
            return False
        return Role.parse(ctx.role) in self._platform_roles

    def summary(self, ctx: UserContext | None) -> PermissionsSummary:
        if ctx is None:
            return PermissionsSummary()
        can = self.can_perform_action
        return PermissionsSummary(
            can_view=can(ctx, AgreementAction.VIEW),
            can_create=can(ctx, AgreementAction.CREATE),
            can_edit=can(ctx, AgreementAction.EDIT),
            can_delete=can(ctx, AgreementAction.DELETE),
            can_sign=can(ctx, AgreementAction.SIGN),
            can_approve=can(ctx, AgreementAction.APPROVE),
            can_reject=can(ctx, AgreementAction.REJECT),
            can_cancel=can(ctx, AgreementAction.CANCEL),
            can_send_for_signature=can(ctx, AgreementAction.SEND_FOR_SIGNATURE),
            is_mr3x_role=self.is_platform_actor(ctx),
        )

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    def is_in_scope(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        """True if the agreement belongs to the actor's affiliation."""
        if ctx is None or resource is None:
            return False
        role = Role.parse(ctx.role)
        if role is None:
            return False
        if role in self._platform_roles:
            return True
        if role in AGENCY_ROLES:
            return _same(ctx.agency_id, resource.agency_id)
        if role is Role.BROKER:
            return _same(_broker_identity(ctx), resource.broker_id)
        if role is Role.INQUILINO:
            return _same(ctx.id, resource.tenant_id)
        if role in OWNER_ROLES:
            return _same(ctx.id, resource.owner_id)
        return _same(ctx.agency_id, resource.agency_id)

    def is_entitled_to_slot(
        self,
        ctx: UserContext | None,
        resource: AgreementContext | None,
        slot: SignatureType,
    ) -> bool:
        """True if the actor is the party that signs in *slot*."""
        if ctx is None or resource is None:
            return False
        role = Role.parse(ctx.role)
        slot = SignatureType.from_value(slot)
        agency_signer = role in AGENCY_ROLES and _same(ctx.agency_id, resource.agency_id)
        broker_signer = role is Role.BROKER and _same(_broker_identity(ctx), resource.broker_id)

        if slot is SignatureType.TENANT:
            return role is Role.INQUILINO and _same(ctx.id, resource.tenant_id)
        if slot is SignatureType.OWNER:
            return role in OWNER_ROLES and _same(ctx.id, resource.owner_id)
        if slot is SignatureType.AGENCY:
            return agency_signer
        if slot is SignatureType.BROKER:
            return broker_signer
        return agency_signer or broker_signer

    # ------------------------------------------------------------------
    # Resource level
    # ------------------------------------------------------------------

    def can_view(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        return (
            resource is not None
            and self.can_perform_action(ctx, AgreementAction.VIEW)
            and self.is_in_scope(ctx, resource)
        )

    def can_edit(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        return (
            resource is not None
            and self.can_perform_action(ctx, AgreementAction.EDIT)
            and is_editable_status(resource.status)
            and self.is_in_scope(ctx, resource)
        )

    def can_delete(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        return (
            resource is not None
            and self.can_perform_action(ctx, AgreementAction.DELETE)
            and is_deletable_status(resource.status)
            and self.is_in_scope(ctx, resource)
        )

    def can_sign(
        self,
        ctx: UserContext | None,
        resource: AgreementContext | None,
        slot: SignatureType,
    ) -> bool:
        """True if the actor may fill *slot* now. A filled slot is never re-signed."""
        if resource is None or not self.can_perform_action(ctx, AgreementAction.SIGN):
            return False
        if not is_signable_status(resource.status):
            return False
        if not self.is_entitled_to_slot(ctx, resource, slot):
            return False
        return not resource.signature_for(SignatureType.from_value(slot))

    def signable_slots(
        self, ctx: UserContext | None, resource: AgreementContext | None
    ) -> list[SignatureType]:
        return [slot for slot in SignatureType if self.can_sign(ctx, resource, slot)]

    def can_approve(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        return (
            resource is not None
            and self.can_perform_action(ctx, AgreementAction.APPROVE)
            and AgreementStatus.parse(resource.status) in APPROVABLE_STATUSES
            and self.is_in_scope(ctx, resource)
        )

    def can_reject(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        return (
            resource is not None
            and self.can_perform_action(ctx, AgreementAction.REJECT)
            and AgreementStatus.parse(resource.status) in APPROVABLE_STATUSES
            and self.is_in_scope(ctx, resource)
        )

    def can_cancel(self, ctx: UserContext | None, resource: AgreementContext | None) -> bool:
        if resource is None or not self.can_perform_action(ctx, AgreementAction.CANCEL):
            return False
        status = AgreementStatus.parse(resource.status)
        if status is None or status in TERMINAL_STATUSES:
            return False
        return self.is_in_scope(ctx, resource)

    def can_send_for_signature(
        self, ctx: UserContext | None, resource: AgreementContext | None
    ) -> bool:
        """Only drafts may be dispatched, so an agreement is never sent twice."""
        return (
            resource is not None
            and self.can_perform_action(ctx, AgreementAction.SEND_FOR_SIGNATURE)
            and AgreementStatus.parse(resource.status) is AgreementStatus.RASCUNHO
            and self.is_in_scope(ctx, resource)
        )

    def available_actions(
        self, ctx: UserContext | None, resource: AgreementContext | None
    ) -> list[AgreementAction]:
        """Return the permitted actions in canonical menu order."""
        if ctx is None or resource is None:
            return []
        checks = (
            (AgreementAction.VIEW, self.can_view(ctx, resource)),
            (AgreementAction.EDIT, self.can_edit(ctx, resource)),
            (AgreementAction.DELETE, self.can_delete(ctx, resource)),
            (AgreementAction.SIGN, bool(self.signable_slots(ctx, resource))),
            (AgreementAction.APPROVE, self.can_approve(ctx, resource)),
            (AgreementAction.REJECT, self.can_reject(ctx, resource)),
            (AgreementAction.CANCEL, self.can_cancel(ctx, resource)),
            (AgreementAction.SEND_FOR_SIGNATURE, self.can_send_for_signature(ctx, resource)),
        )
        actions = [action for action, allowed in checks if allowed]
        logger.debug(
            "Available actions for user=%s role=%s status=%s: %s",
            ctx.id,
            ctx.role,
            resource.status,
            [a.value for a in actions],
        )
        return actions


DEFAULT_POLICY = AgreementPolicy()


# ---------------------------------------------------------------------------
# Module-level shortcuts over DEFAULT_POLICY
# ---------------------------------------------------------------------------


def can_view_agreement(ctx: UserContext | None, resource: AgreementContext | None) -> bool:
    return DEFAULT_POLICY.can_view(ctx, resource)


def can_edit_agreement(ctx: UserContext | None, resource: AgreementContext | None) -> bool:
    return DEFAULT_POLICY.can_edit(ctx, resource)


def can_delete_agreement(ctx: UserContext | None, resource: AgreementContext | None) -> bool:
    return DEFAULT_POLICY.can_delete(ctx, resource)


def can_sign_agreement(
    ctx: UserContext | None, resource: AgreementContext | None, slot: SignatureType
) -> bool:
    return DEFAULT_POLICY.can_sign(ctx, resource, slot)


def can_approve_agreement(ctx: UserContext | None, resource: AgreementContext | None) -> bool:
    return DEFAULT_POLICY.can_approve(ctx, resource)


def can_reject_agreement(ctx: UserContext | None, resource: AgreementContext | None) -> bool:
    return DEFAULT_POLICY.can_reject(ctx, resource)


def can_cancel_agreement(ctx: UserContext | None, resource: AgreementContext | None) -> bool:
    return DEFAULT_POLICY.can_cancel(ctx, resource)


def can_send_for_signature(ctx: UserContext | None, resource: AgreementContext | None) -> bool:
    return DEFAULT_POLICY.can_send_for_signature(ctx, resource)


def get_available_actions(
    ctx: UserContext | None, resource: AgreementContext | None
) -> list[AgreementAction]:
    return DEFAULT_POLICY.available_actions(ctx, resource)


def get_user_permissions_summary(ctx: UserContext | None) -> PermissionsSummary:
    return DEFAULT_POLICY.summary(ctx)
