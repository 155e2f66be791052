"""Human- and machine-readable renderings of permission profiles."""
from __future__ import annotations

from mr3x_authz.report.renderer import ProfileRenderer

__all__ = ["ProfileRenderer"]
