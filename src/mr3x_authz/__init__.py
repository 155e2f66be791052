"""mr3x-authz — Role-based authorization model for the MR3X property platform.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import mr3x_authz as authz
>>> authz.action_allowed("PROPRIETARIO", "service_contracts", "sign").allowed
True
>>> user = authz.UserContext(id="t1", role=authz.Role.INQUILINO)
>>> draft = authz.AgreementContext(status="RASCUNHO", tenant_id="t1")
>>> authz.get_available_actions(user, draft)
[<AgreementAction.VIEW: 'VIEW'>]
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------
from mr3x_authz.roles.registry import (
    ROLE_HIERARCHY,
    Role,
    UnknownRoleError,
    outranks,
    rank,
)
from mr3x_authz.roles.grants import grants_for_role, has_any_role, has_permission, has_role

# ---------------------------------------------------------------------------
# Permission matrix
# ---------------------------------------------------------------------------
from mr3x_authz.permissions.module_permission import (
    Module,
    ModuleAction,
    ModulePermission,
    UnknownModuleError,
)
from mr3x_authz.permissions.matrix import (
    DEFAULT_MATRIX,
    ActionCheck,
    PermissionMatrix,
    action_allowed,
    get_module_permission,
    is_read_only_module,
    restriction_message,
)
from mr3x_authz.permissions.matrix_loader import MatrixConfigError, MatrixLoader

# ---------------------------------------------------------------------------
# Agreement policy
# ---------------------------------------------------------------------------
from mr3x_authz.policy.resources import (
    AgreementAction,
    AgreementContext,
    AgreementStatus,
    SignatureType,
    UserContext,
)
from mr3x_authz.policy.agreement import (
    AgreementPolicy,
    ApprovalPolicy,
    PermissionsSummary,
    can_approve_agreement,
    can_cancel_agreement,
    can_delete_agreement,
    can_edit_agreement,
    can_reject_agreement,
    can_send_for_signature,
    can_sign_agreement,
    can_view_agreement,
    get_available_actions,
    get_user_permissions_summary,
    has_been_signed,
    is_deletable_status,
    is_editable_status,
    is_immutable_status,
    is_signable_status,
)

# ---------------------------------------------------------------------------
# Facade and configuration
# ---------------------------------------------------------------------------
from mr3x_authz.config.config_loader import (
    AuthorizationConfig,
    AuthorizationConfigError,
    ConfigLoader,
)
from mr3x_authz.facade import (
    AgreementActionSet,
    ModuleAccess,
    PermissionFacade,
    RolePermissionProfile,
    can_perform_action,
    get_permissions_for_role,
)

__all__ = [
    "__version__",
    # Roles
    "ROLE_HIERARCHY",
    "Role",
    "UnknownRoleError",
    "grants_for_role",
    "has_any_role",
    "has_permission",
    "has_role",
    "outranks",
    "rank",
    # Matrix
    "ActionCheck",
    "DEFAULT_MATRIX",
    "MatrixConfigError",
    "MatrixLoader",
    "Module",
    "ModuleAction",
    "ModulePermission",
    "PermissionMatrix",
    "UnknownModuleError",
    "action_allowed",
    "get_module_permission",
    "is_read_only_module",
    "restriction_message",
    # Agreement policy
    "AgreementAction",
    "AgreementContext",
    "AgreementPolicy",
    "AgreementStatus",
    "ApprovalPolicy",
    "PermissionsSummary",
    "SignatureType",
    "UserContext",
    "can_approve_agreement",
    "can_cancel_agreement",
    "can_delete_agreement",
    "can_edit_agreement",
    "can_reject_agreement",
    "can_send_for_signature",
    "can_sign_agreement",
    "can_view_agreement",
    "get_available_actions",
    "get_user_permissions_summary",
    "has_been_signed",
    "is_deletable_status",
    "is_editable_status",
    "is_immutable_status",
    "is_signable_status",
    # Facade and configuration
    "AgreementActionSet",
    "AuthorizationConfig",
    "AuthorizationConfigError",
    "ConfigLoader",
    "ModuleAccess",
    "PermissionFacade",
    "RolePermissionProfile",
    "can_perform_action",
    "get_permissions_for_role",
]
