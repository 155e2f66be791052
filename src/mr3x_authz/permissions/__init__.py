"""Static per-role, per-module permission matrix.

Example
-------
::

    from mr3x_authz.permissions import action_allowed, get_module_permission

    get_module_permission("PROPRIETARIO", "service_contracts").can_sign  # True
    action_allowed("INQUILINO", "properties", "create").allowed          # False
"""
from __future__ import annotations

from mr3x_authz.permissions.matrix import (
    BUILTIN_OVERRIDES,
    DEFAULT_MATRIX,
    DEFAULT_RESTRICTION_MESSAGE,
    RESTRICTION_MESSAGES,
    ActionCheck,
    PermissionMatrix,
    action_allowed,
    get_module_permission,
    is_read_only_module,
    restriction_message,
)
from mr3x_authz.permissions.matrix_loader import MatrixConfigError, MatrixLoader
from mr3x_authz.permissions.module_permission import (
    FULL_PERMISSIONS,
    NO_PERMISSIONS,
    RESTRICTED_DEFAULT,
    Module,
    ModuleAction,
    ModulePermission,
    UnknownModuleError,
)

__all__ = [
    # Records
    "FULL_PERMISSIONS",
    "NO_PERMISSIONS",
    "RESTRICTED_DEFAULT",
    "Module",
    "ModuleAction",
    "ModulePermission",
    "UnknownModuleError",
    # Matrix
    "ActionCheck",
    "BUILTIN_OVERRIDES",
    "DEFAULT_MATRIX",
    "DEFAULT_RESTRICTION_MESSAGE",
    "PermissionMatrix",
    "RESTRICTION_MESSAGES",
    "action_allowed",
    "get_module_permission",
    "is_read_only_module",
    "restriction_message",
    # Loader
    "MatrixConfigError",
    "MatrixLoader",
]
