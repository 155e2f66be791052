"""Authorization configuration loader with Pydantic v2 validation.

Loads an optional ``authz.yaml`` into a typed :class:`AuthorizationConfig`.
Every section is optional; an empty file reproduces the built-in
behaviour. Unknown keys are allowed to support future additions.

Example
-------
::

    loader = ConfigLoader()
    config = loader.load_string(
        "approval:\\n  minimum_role: AGENCY_ADMIN\\n  inclusive: true\\n"
    )
    config.approval.minimum_role
    # <Role.AGENCY_ADMIN: 'AGENCY_ADMIN'>
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from mr3x_authz.permissions.matrix import DEFAULT_MATRIX, PermissionMatrix
from mr3x_authz.permissions.matrix_loader import MatrixLoader
from mr3x_authz.policy.agreement import ApprovalPolicy
from mr3x_authz.roles.registry import PLATFORM_ROLES, Role

logger = logging.getLogger(__name__)


class ApprovalConfig(BaseModel):
    """Who may approve or reject agreements awaiting signature."""

    model_config = {"extra": "allow"}

    minimum_role: Role = Field(default=Role.AGENCY_MANAGER)
    inclusive: bool = Field(default=True)

    def to_policy(self) -> ApprovalPolicy:
        return ApprovalPolicy(minimum_role=self.minimum_role, inclusive=self.inclusive)


class AuthorizationConfig(BaseModel):
    """Top-level authorization configuration schema."""

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    approval: ApprovalConfig = Field(default_factory=ApprovalConfig)
    platform_roles: list[Role] = Field(
        default_factory=lambda: sorted(PLATFORM_ROLES, key=lambda r: r.value)
    )
    matrix_file: Path | None = Field(default=None)
    matrix: dict[str, object] | None = Field(default=None)

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, value: object) -> str:
        return str(value)

    def build_matrix(self, base_dir: Path | None = None) -> PermissionMatrix:
        """Return the matrix this config describes.

        An inline ``matrix`` document wins over ``matrix_file``; with
        neither, the built-in matrix is returned. Relative ``matrix_file``
        paths resolve against *base_dir*.
        """
        loader = MatrixLoader()
        if self.matrix is not None:
            return loader.load_from_dict(self.matrix, config_path="<inline matrix>")
        if self.matrix_file is not None:
            path = self.matrix_file
            if not path.is_absolute() and base_dir is not None:
                path = base_dir / path
            return loader.load(path)
        return DEFAULT_MATRIX


class AuthorizationConfigError(ValueError):
    """Raised when an authorization config cannot be parsed or validated.

    Attributes
    ----------
    config_path:
        The path to the file that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class ConfigLoader:
    """Loads and validates authorization YAML configuration."""

    def load(self, config_path: Path) -> AuthorizationConfig:
        """Load and validate a configuration file.

        Raises
        ------
        FileNotFoundError:
            When the file does not exist.
        AuthorizationConfigError:
            When the YAML cannot be parsed or fails validation.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Authorization config not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw: dict[str, object] = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise AuthorizationConfigError(f"Failed to parse YAML: {exc}", str(config_path)) from exc

        config = self._validate(raw, str(config_path))
        if config.matrix_file is not None and not config.matrix_file.is_absolute():
            config.matrix_file = config_path.parent / config.matrix_file
        logger.info("Loaded authorization config from %s", config_path)
        return config

    def load_string(self, yaml_content: str) -> AuthorizationConfig:
        try:
            raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as exc:
            raise AuthorizationConfigError(f"Failed to parse YAML string: {exc}") from exc
        return self._validate(raw, None)

    def defaults(self) -> AuthorizationConfig:
        """Return a configuration with all defaults applied."""
        return AuthorizationConfig()

    def _validate(self, raw: object, config_path: str | None) -> AuthorizationConfig:
        try:
            return AuthorizationConfig.model_validate(raw)
        except ValidationError as exc:
            raise AuthorizationConfigError(f"Invalid authorization config: {exc}", config_path) from exc
