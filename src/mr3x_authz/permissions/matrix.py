"""Static (role, module) permission matrix.

Lookup order for ``get(role, module)``:

1. Unknown role: :data:`NO_PERMISSIONS` (fail closed).
2. Explicit override for the role and module.
3. Restricted role (the agency-managed owner by default):
   :data:`RESTRICTED_DEFAULT`, view only.
4. Any other known role: :data:`FULL_PERMISSIONS`.

The split between steps 3 and 4 is deliberate. Agency-managed owners act
through their agency and are restricted unless a module says otherwise,
while every other role, independent owners included, is unrestricted
unless an override curtails it.

Example
-------
::

    check = action_allowed("PROPRIETARIO", "contracts", "sign")
    check.allowed   # False
    check.message   # 'Contratos de aluguel são assinados pela imobiliária ...'
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from mr3x_authz.permissions.module_permission import (
    FULL_PERMISSIONS,
    NO_PERMISSIONS,
    RESTRICTED_DEFAULT,
    Module,
    ModuleAction,
    ModulePermission,
)
from mr3x_authz.roles.registry import Role

logger = logging.getLogger(__name__)

DEFAULT_RESTRICTION_MESSAGE = "Esta ação é realizada pela imobiliária em seu nome"

RESTRICTION_MESSAGES: Mapping[Module, str] = MappingProxyType(
    {
        Module.PROPERTIES: "Imóveis são gerenciados pela imobiliária",
        Module.TENANT_ANALYSIS: "Análise de inquilinos é realizada pela imobiliária",
        Module.PAYMENTS: "Pagamentos são gerenciados pela imobiliária",
        Module.INVOICES: "Faturas são gerenciadas pela imobiliária",
        Module.CONTRACTS: (
            "Contratos de aluguel são assinados pela imobiliária em nome do proprietário"
        ),
        Module.INSPECTIONS: "Vistorias são realizadas pela imobiliária",
        Module.AGREEMENTS: "Acordos são gerenciados pela imobiliária",
    }
)

_VIEW = ModuleAction.VIEW
_CREATE = ModuleAction.CREATE
_EDIT = ModuleAction.EDIT
_DELETE = ModuleAction.DELETE
_SIGN = ModuleAction.SIGN
_EXPORT = ModuleAction.EXPORT


# ---------------------------------------------------------------------------
# Built-in overrides
# ---------------------------------------------------------------------------

_PROPRIETARIO: dict[Module, ModulePermission] = {
    Module.DASHBOARD: ModulePermission.only(_VIEW),
    Module.PROPERTIES: ModulePermission.only(
        _VIEW, message=RESTRICTION_MESSAGES[Module.PROPERTIES]
    ),
    Module.TENANT_ANALYSIS: ModulePermission.only(
        _VIEW, message=RESTRICTION_MESSAGES[Module.TENANT_ANALYSIS]
    ),
    Module.PAYMENTS: ModulePermission.only(
        _VIEW, _EXPORT, message=RESTRICTION_MESSAGES[Module.PAYMENTS]
    ),
    Module.INVOICES: ModulePermission.only(
        _VIEW, _EXPORT, message=RESTRICTION_MESSAGES[Module.INVOICES]
    ),
    Module.CONTRACTS: ModulePermission.only(
        _VIEW, _EXPORT, message=RESTRICTION_MESSAGES[Module.CONTRACTS]
    ),
    # Owners sign only the service contract with their agency.
    Module.SERVICE_CONTRACTS: ModulePermission.only(
        _VIEW,
        _SIGN,
        _EXPORT,
        message="Imóvel assina apenas o contrato de prestação de serviços com a imobiliária",
    ),
    Module.INSPECTIONS: ModulePermission.only(
        _VIEW, message=RESTRICTION_MESSAGES[Module.INSPECTIONS]
    ),
    Module.AGREEMENTS: ModulePermission.only(
        _VIEW, message=RESTRICTION_MESSAGES[Module.AGREEMENTS]
    ),
    Module.REPORTS: ModulePermission.only(_VIEW, _EXPORT),
    Module.NOTIFICATIONS: ModulePermission.only(_VIEW),
    Module.CHAT: ModulePermission.only(_VIEW, _CREATE),
    Module.PROFILE: ModulePermission.only(_VIEW, _EDIT),
    Module.DOCUMENTS: ModulePermission.only(_VIEW, _EXPORT),
}

_INQUILINO: dict[Module, ModulePermission] = {
    Module.PROPERTIES: ModulePermission.only(_VIEW),
    Module.TENANT_ANALYSIS: ModulePermission.only(),
    Module.CONTRACTS: ModulePermission.only(_VIEW, _SIGN),
    Module.SERVICE_CONTRACTS: ModulePermission.only(),
    Module.AGREEMENTS: ModulePermission.only(_VIEW, _SIGN),
    Module.INSPECTIONS: ModulePermission.only(_VIEW, _SIGN),
    Module.PAYMENTS: ModulePermission.only(_VIEW, _CREATE, _EDIT),
    Module.INVOICES: ModulePermission.only(_VIEW, _EXPORT),
    Module.REPORTS: ModulePermission.only(_VIEW, _EXPORT),
}

_BROKER: dict[Module, ModulePermission] = {
    Module.PROPERTIES: ModulePermission.only(_VIEW, _CREATE, _EDIT, _EXPORT),
    Module.CONTRACTS: ModulePermission.only(_VIEW, _CREATE, _EDIT, _SIGN, _EXPORT),
    Module.AGREEMENTS: ModulePermission.only(_VIEW, _CREATE, _EDIT, _SIGN, _EXPORT),
    Module.PAYMENTS: ModulePermission.only(_VIEW, _CREATE, _EDIT, _EXPORT),
    Module.REPORTS: ModulePermission.only(_VIEW, _EXPORT),
}

_BUILDING_MANAGER: dict[Module, ModulePermission] = {
    Module.PROPERTIES: ModulePermission.only(_VIEW),
    Module.CONTRACTS: ModulePermission.only(_VIEW),
    Module.AGREEMENTS: ModulePermission.only(_VIEW),
    Module.PAYMENTS: ModulePermission.only(_VIEW),
    Module.REPORTS: ModulePermission.only(_VIEW, _EXPORT),
}

_LEGAL_AUDITOR: dict[Module, ModulePermission] = {
    Module.PROPERTIES: ModulePermission.only(_VIEW),
    Module.CONTRACTS: ModulePermission.only(_VIEW, _EXPORT),
    Module.SERVICE_CONTRACTS: ModulePermission.only(_VIEW, _EXPORT),
    Module.AGREEMENTS: ModulePermission.only(_VIEW, _EXPORT),
    Module.INSPECTIONS: ModulePermission.only(_VIEW),
    Module.PAYMENTS: ModulePermission.only(_VIEW),
    Module.INVOICES: ModulePermission.only(_VIEW),
    Module.DOCUMENTS: ModulePermission.only(_VIEW, _EXPORT),
    Module.REPORTS: ModulePermission.only(_VIEW, _EXPORT),
}

_API_CLIENT: dict[Module, ModulePermission] = {
    Module.PROPERTIES: ModulePermission.only(_VIEW),
    Module.CONTRACTS: ModulePermission.only(_VIEW),
    Module.AGREEMENTS: ModulePermission.only(_VIEW),
    Module.PAYMENTS: ModulePermission.only(_VIEW),
    Module.REPORTS: ModulePermission.only(_VIEW),
}

# Representatives handle agency accounts and reporting only.
_REPRESENTATIVE: dict[Module, ModulePermission] = {
    Module.DASHBOARD: ModulePermission.only(_VIEW),
    Module.PROPERTIES: ModulePermission.only(),
    Module.TENANT_ANALYSIS: ModulePermission.only(),
    Module.PAYMENTS: ModulePermission.only(),
    Module.INVOICES: ModulePermission.only(),
    Module.CONTRACTS: ModulePermission.only(),
    Module.SERVICE_CONTRACTS: ModulePermission.only(),
    Module.INSPECTIONS: ModulePermission.only(),
    Module.AGREEMENTS: ModulePermission.only(),
    Module.DOCUMENTS: ModulePermission.only(),
    Module.REPORTS: ModulePermission.only(_VIEW, _EXPORT),
}

BUILTIN_OVERRIDES: dict[Role, dict[Module, ModulePermission]] = {
    Role.PROPRIETARIO: _PROPRIETARIO,
    Role.INQUILINO: _INQUILINO,
    Role.BROKER: _BROKER,
    Role.BUILDING_MANAGER: _BUILDING_MANAGER,
    Role.LEGAL_AUDITOR: _LEGAL_AUDITOR,
    Role.REPRESENTATIVE: _REPRESENTATIVE,
    Role.API_CLIENT: _API_CLIENT,
}

DEFAULT_RESTRICTED_ROLES: frozenset[Role] = frozenset([Role.PROPRIETARIO])


# ---------------------------------------------------------------------------
# ActionCheck
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ActionCheck:
    """Outcome of a static (role, module, action) check.

    Attributes
    ----------
    allowed:
        Whether the action is permitted.
    message:
        ``None`` when allowed; otherwise the text to show the user.
    """

    allowed: bool
    message: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


# ---------------------------------------------------------------------------
# PermissionMatrix
# ---------------------------------------------------------------------------


class PermissionMatrix:
    """Read-only permission table keyed by role and module.

    Parameters
    ----------
    overrides:
        Per-role module entries. Roles or modules absent here fall back
        to the restricted or full default.
    restricted_roles:
        Roles whose unlisted modules fall back to view-only.
    messages:
        Module restriction messages used by :meth:`restriction_message`.
    default_message:
        Fallback text for modules without a message.
    """

    def __init__(
        self,
        overrides: Mapping[Role, Mapping[Module, ModulePermission]] | None = None,
        restricted_roles: Iterable[Role] = DEFAULT_RESTRICTED_ROLES,
        messages: Mapping[Module, str] | None = None,
        default_message: str = DEFAULT_RESTRICTION_MESSAGE,
    ) -> None:
        self._overrides: Mapping[Role, Mapping[Module, ModulePermission]] = MappingProxyType(
            {
                role: MappingProxyType(dict(modules))
                for role, modules in (overrides or {}).items()
            }
        )
        self._restricted_roles = frozenset(restricted_roles)
        self._messages: Mapping[Module, str] = MappingProxyType(
            dict(RESTRICTION_MESSAGES if messages is None else messages)
        )
        self._default_message = default_message

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, role: object, module: Module | str) -> ModulePermission:
        """Return the permissions *role* holds on *module*.

        Raises
        ------
        UnknownModuleError
            If *module* is not a declared module.
        """
        module = Module.from_value(module)
        parsed = Role.parse(role)
        if parsed is None:
            return NO_PERMISSIONS

        entry = self._overrides.get(parsed, {}).get(module)
        if entry is not None:
            return entry
        if parsed in self._restricted_roles:
            return RESTRICTED_DEFAULT
        return FULL_PERMISSIONS

    def action_allowed(
        self,
        role: object,
        module: Module | str,
        action: ModuleAction | str,
    ) -> ActionCheck:
        """Check one static capability and attach a denial message."""
        permission = self.get(role, module)
        allowed = permission.allows(action)
        logger.debug(
            "Permission %s: role=%s module=%s action=%s",
            "ALLOW" if allowed else "DENY",
            role,
            module,
            action,
        )
        if allowed:
            return ActionCheck(allowed=True)
        return ActionCheck(allowed=False, message=permission.message or self._default_message)

    def is_restricted_role(self, role: object) -> bool:
        return Role.parse(role) in self._restricted_roles

    def is_read_only_module(self, role: object, module: Module | str) -> bool:
        """True only for restricted roles with no create/edit/delete on *module*."""
        if not self.is_restricted_role(role):
            return False
        return self.get(role, module).is_read_only

    def restriction_message(self, module: object) -> str:
        """Return display text for denials on *module*; never raises."""
        try:
            return self._messages.get(Module.from_value(module), self._default_message)
        except ValueError:
            return self._default_message

    def profile(self, role: object) -> dict[Module, ModulePermission]:
        """Return the effective permission for every module."""
        return {module: self.get(role, module) for module in Module}

    def read_only_modules(self, role: object) -> list[Module]:
        return [m for m in Module if self.is_read_only_module(role, m)]

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def overrides(self) -> Mapping[Role, Mapping[Module, ModulePermission]]:
        return self._overrides

    @property
    def restricted_roles(self) -> frozenset[Role]:
        return self._restricted_roles

    @property
    def messages(self) -> Mapping[Module, str]:
        return self._messages

    @property
    def default_message(self) -> str:
        return self._default_message

    def summary(self) -> dict[str, object]:
        """Return a plain dict summarising the matrix configuration."""
        return {
            "roles_with_overrides": sorted(r.value for r in self._overrides),
            "override_count": sum(len(m) for m in self._overrides.values()),
            "restricted_roles": sorted(r.value for r in self._restricted_roles),
            "messages": len(self._messages),
        }


DEFAULT_MATRIX = PermissionMatrix(overrides=BUILTIN_OVERRIDES)


# ---------------------------------------------------------------------------
# Module-level shortcuts over DEFAULT_MATRIX
# ---------------------------------------------------------------------------


def get_module_permission(role: object, module: Module | str) -> ModulePermission:
    return DEFAULT_MATRIX.get(role, module)


def action_allowed(
    role: object, module: Module | str, action: ModuleAction | str
) -> ActionCheck:
    return DEFAULT_MATRIX.action_allowed(role, module, action)


def is_read_only_module(role: object, module: Module | str) -> bool:
    return DEFAULT_MATRIX.is_read_only_module(role, module)


def restriction_message(module: object) -> str:
    return DEFAULT_MATRIX.restriction_message(module)
