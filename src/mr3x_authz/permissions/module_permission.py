"""Module-level permission records.

A :class:`ModulePermission` is the fixed seven-flag capability record a
role holds for one business module, plus an optional restriction
message shown to the user when an action is denied.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UnknownModuleError(ValueError):
    """Raised when a module name outside the declared set is looked up."""

    def __init__(self, module: object) -> None:
        self.module = module
        super().__init__(
            f"Unknown module {module!r}. Known modules: {sorted(m.value for m in Module)}."
        )


class Module(str, Enum):
    """Business areas that carry their own permission entry."""

    DASHBOARD = "dashboard"
    PROPERTIES = "properties"
    TENANT_ANALYSIS = "tenant_analysis"
    PAYMENTS = "payments"
    INVOICES = "invoices"
    CONTRACTS = "contracts"
    SERVICE_CONTRACTS = "service_contracts"
    INSPECTIONS = "inspections"
    AGREEMENTS = "agreements"
    REPORTS = "reports"
    NOTIFICATIONS = "notifications"
    CHAT = "chat"
    PROFILE = "profile"
    DOCUMENTS = "documents"

    @classmethod
    def from_value(cls, value: object) -> Module:
        """Return the Module named by *value*.

        Raises
        ------
        UnknownModuleError
            If *value* is not a declared module.
        """
        if isinstance(value, Module):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnknownModuleError(value)


class ModuleAction(str, Enum):
    """The seven capabilities tracked per module."""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    SIGN = "sign"
    APPROVE = "approve"
    EXPORT = "export"

    @classmethod
    def parse(cls, value: object) -> ModuleAction | None:
        """Return the action named by *value* in any case, or ``None``."""
        if isinstance(value, ModuleAction):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class ModulePermission:
    """Capabilities one role holds on one module.

    Attributes
    ----------
    can_view, can_create, can_edit, can_delete, can_sign, can_approve, can_export:
        One flag per :class:`ModuleAction`.
    message:
        Optional user-facing explanation attached to denials on this module.
    """

    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_sign: bool = False
    can_approve: bool = False
    can_export: bool = False
    message: str | None = None

    @property
    def is_read_only(self) -> bool:
        """True when the role can neither create, edit nor delete."""
        return not (self.can_create or self.can_edit or self.can_delete)

    def allows(self, action: ModuleAction | str) -> bool:
        """Return the flag for *action*; unknown actions are denied."""
        parsed = ModuleAction.parse(action)
        if parsed is None:
            return False
        return bool(getattr(self, f"can_{parsed.value}"))

    def to_dict(self) -> dict[str, object]:
        """Return a plain dict keyed by action name (plus ``message``)."""
        payload: dict[str, object] = {
            action.value: self.allows(action) for action in ModuleAction
        }
        if self.message:
            payload["message"] = self.message
        return payload

    @classmethod
    def only(cls, *actions: ModuleAction | str, message: str | None = None) -> ModulePermission:
        """Build a permission that grants exactly *actions*."""
        granted = {ModuleAction(a) for a in actions}
        return cls(
            **{f"can_{a.value}": a in granted for a in ModuleAction},
            message=message,
        )


FULL_PERMISSIONS = ModulePermission(
    can_view=True,
    can_create=True,
    can_edit=True,
    can_delete=True,
    can_sign=True,
    can_approve=True,
    can_export=True,
)

RESTRICTED_DEFAULT = ModulePermission(can_view=True)

NO_PERMISSIONS = ModulePermission()
