"""Optional YAML configuration for the authorization model."""
from __future__ import annotations

from mr3x_authz.config.config_loader import (
    ApprovalConfig,
    AuthorizationConfig,
    AuthorizationConfigError,
    ConfigLoader,
)

__all__ = [
    "ApprovalConfig",
    "AuthorizationConfig",
    "AuthorizationConfigError",
    "ConfigLoader",
]
