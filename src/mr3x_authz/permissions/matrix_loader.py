"""YAML loader for permission matrix documents.

MatrixLoader reads a matrix document and builds a :class:`PermissionMatrix`.
By default the document extends the built-in overrides: entries it names
replace the built-in entry for that (role, module), everything else is
kept.

Schema
------
::

    version: "1.0"
    extend: true
    restricted_roles:
      - PROPRIETARIO
    default_message: "Esta ação é realizada pela imobiliária em seu nome"
    messages:
      documents: "Documentos são emitidos pela imobiliária"
    roles:
      BROKER:
        agreements:
          view: true
          create: true
          edit: true
          sign: true
      INQUILINO:
        payments:
          view: true
          message: "Pagamentos são registrados pela imobiliária"

Booleans omitted from an entry default to ``false``.

Example
-------
::

    loader = MatrixLoader()
    matrix = loader.load("permissions.yaml")
    matrix.action_allowed("BROKER", "agreements", "delete").allowed
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from mr3x_authz.permissions.matrix import (
    BUILTIN_OVERRIDES,
    DEFAULT_RESTRICTED_ROLES,
    DEFAULT_RESTRICTION_MESSAGE,
    RESTRICTION_MESSAGES,
    PermissionMatrix,
)
from mr3x_authz.permissions.module_permission import Module, ModulePermission
from mr3x_authz.roles.registry import Role

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1.0", "1"])


class MatrixConfigError(ValueError):
    """Raised when a matrix document is malformed or invalid.

    Attributes
    ----------
    config_path:
        The path to the document that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class ModuleEntry(BaseModel):
    """One (role, module) entry as written in YAML."""

    model_config = {"extra": "forbid"}

    view: bool = False
    create: bool = False
    edit: bool = False
    delete: bool = False
    sign: bool = False
    approve: bool = False
    export: bool = False
    message: str | None = None

    def to_permission(self) -> ModulePermission:
        return ModulePermission(
            can_view=self.view,
            can_create=self.create,
            can_edit=self.edit,
            can_delete=self.delete,
            can_sign=self.sign,
            can_approve=self.approve,
            can_export=self.export,
            message=self.message,
        )


class MatrixDocument(BaseModel):
    """Validated top-level matrix document."""

    model_config = {"extra": "allow"}

    version: str = Field(default="1.0")
    extend: bool = Field(default=True)
    restricted_roles: list[Role] | None = Field(default=None)
    default_message: str = Field(default=DEFAULT_RESTRICTION_MESSAGE)
    messages: dict[Module, str] = Field(default_factory=dict)
    roles: dict[Role, dict[Module, ModuleEntry]] = Field(default_factory=dict)


class MatrixLoader:
    """Loads PermissionMatrix instances from YAML files, strings or dicts.

    Parameters
    ----------
    strict:
        When ``True``, unknown top-level keys are an error. Default
        ``False`` (unknown keys are ignored).
    """

    _KNOWN_TOP_KEYS: frozenset[str] = frozenset(
        [
            "version",
            "extend",
            "restricted_roles",
            "default_message",
            "messages",
            "roles",
            "description",
        ]
    )

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    def load(self, config_path: str | Path) -> PermissionMatrix:
        """Load a PermissionMatrix from a YAML file on disk.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        MatrixConfigError
            If the file cannot be parsed or is invalid.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Permission matrix not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw: dict[str, object] = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise MatrixConfigError(f"Failed to parse YAML: {exc}", str(config_path)) from exc

        return self._build_matrix(raw, config_path=str(config_path))

    def load_from_dict(
        self,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> PermissionMatrix:
        """Load a PermissionMatrix from an already-parsed document."""
        return self._build_matrix(config, config_path=config_path)

    def load_from_yaml_string(
        self,
        yaml_string: str,
        config_path: str | None = None,
    ) -> PermissionMatrix:
        """Load a PermissionMatrix from YAML text."""
        try:
            raw: dict[str, object] = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise MatrixConfigError(f"Failed to parse YAML string: {exc}", config_path) from exc
        return self._build_matrix(raw, config_path=config_path)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_matrix(
        self,
        raw: dict[str, object],
        config_path: str | None = None,
    ) -> PermissionMatrix:
        self._validate_structure(raw, config_path)

        raw = dict(raw)
        raw["version"] = str(raw.get("version", "1.0"))
        try:
            document = MatrixDocument.model_validate(raw)
        except ValidationError as exc:
            raise MatrixConfigError(f"Invalid matrix document: {exc}", config_path) from exc

        if document.version not in _SUPPORTED_VERSIONS:
            raise MatrixConfigError(
                f"Unsupported matrix version {document.version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}.",
                config_path,
            )

        overrides: dict[Role, dict[Module, ModulePermission]] = {}
        if document.extend:
            overrides = {role: dict(modules) for role, modules in BUILTIN_OVERRIDES.items()}
        for role, modules in document.roles.items():
            role_table = overrides.setdefault(role, {})
            for module, entry in modules.items():
                role_table[module] = entry.to_permission()

        messages = dict(RESTRICTION_MESSAGES) if document.extend else {}
        messages.update(document.messages)

        restricted = (
            document.restricted_roles
            if document.restricted_roles is not None
            else DEFAULT_RESTRICTED_ROLES
        )

        logger.info(
            "Loaded %d role overrides from %s (extend=%s)",
            len(document.roles),
            config_path or "<dict>",
            document.extend,
        )
        return PermissionMatrix(
            overrides=overrides,
            restricted_roles=restricted,
            messages=messages,
            default_message=document.default_message,
        )

    def _validate_structure(
        self,
        raw: dict[str, object],
        config_path: str | None,
    ) -> None:
        if not isinstance(raw, dict):
            raise MatrixConfigError("Matrix document must be a YAML mapping (dict).", config_path)

        if "roles" in raw and not isinstance(raw["roles"], dict):
            raise MatrixConfigError("Matrix document 'roles' must be a mapping.", config_path)

        if self._strict:
            unknown_keys = set(raw.keys()) - self._KNOWN_TOP_KEYS
            if unknown_keys:
                raise MatrixConfigError(
                    f"Unknown top-level keys: {sorted(unknown_keys)}. "
                    f"Known keys: {sorted(self._KNOWN_TOP_KEYS)}.",
                    config_path,
                )
