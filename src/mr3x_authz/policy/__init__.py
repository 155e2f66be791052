"""Resource-state policy for agreements."""
from __future__ import annotations

from mr3x_authz.policy.agreement import (
    DEFAULT_POLICY,
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
    is_terminal_status,
)
from mr3x_authz.policy.resources import (
    AgreementAction,
    AgreementContext,
    AgreementStatus,
    SignatureType,
    UserContext,
)

__all__ = [
    # Snapshots
    "AgreementAction",
    "AgreementContext",
    "AgreementStatus",
    "SignatureType",
    "UserContext",
    # Policy
    "AgreementPolicy",
    "ApprovalPolicy",
    "DEFAULT_POLICY",
    "PermissionsSummary",
    # Status predicates
    "has_been_signed",
    "is_deletable_status",
    "is_editable_status",
    "is_immutable_status",
    "is_signable_status",
    "is_terminal_status",
    # Checks
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
]
