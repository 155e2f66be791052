"""Render role permission profiles for terminals, logs and JSON consumers.

ProfileRenderer produces:
- Rich-formatted panels and tables (for CLI use)
- Plain tabular text (for log-friendly output)
- JSON (for programmatic consumption)

Example
-------
>>> from mr3x_authz.facade import get_permissions_for_role
>>> from mr3x_authz.report.renderer import ProfileRenderer
>>> profile = get_permissions_for_role("PROPRIETARIO")
>>> print(ProfileRenderer().render_json(profile))
"""
from __future__ import annotations

import io
import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mr3x_authz.facade import RolePermissionProfile
from mr3x_authz.permissions.module_permission import ModuleAction
from mr3x_authz.roles.registry import ROLE_HIERARCHY, Role, roles_by_rank


def _mark(flag: bool) -> str:
    return "[green]✓[/green]" if flag else "[red]✗[/red]"


class ProfileRenderer:
    """Renders RolePermissionProfile objects in multiple output formats."""

    # ------------------------------------------------------------------
    # Rich rendering
    # ------------------------------------------------------------------

    def render_summary(self, profile: RolePermissionProfile) -> str:
        """Render a Rich-formatted permission profile.

        Parameters
        ----------
        profile:
            The role profile to display.

        Returns
        -------
        str
            Text containing ANSI styling, ready to print.
        """
        output_buffer = io.StringIO()
        console = Console(file=output_buffer, highlight=False, width=120)

        role_name = profile.role.value if profile.role is not None else "UNKNOWN"
        overview = Table.grid(padding=(0, 2))
        overview.add_column(style="bold")
        overview.add_column()
        overview.add_row("Role", role_name)
        overview.add_row("Rank", "-" if profile.rank is None else f"{profile.rank:g}")
        overview.add_row("Platform role", "yes" if profile.is_platform_role else "no")
        overview.add_row(
            "Read-only modules",
            ", ".join(m.value for m in profile.read_only_modules) or "none",
        )
        console.print(Panel(overview, title="[bold cyan]Role Profile[/bold cyan]", border_style="cyan"))

        modules_table = Table(
            "Module",
            *[a.value for a in ModuleAction],
            "Message",
            title="Module Permissions",
            show_header=True,
            header_style="bold magenta",
        )
        for module, permission in profile.modules.items():
            modules_table.add_row(
                module.value,
                *[_mark(permission.allows(a)) for a in ModuleAction],
                permission.message or "",
            )
        console.print(modules_table)

        summary = profile.agreements.to_dict()
        agreements_table = Table("Capability", "Allowed", title="Agreements", header_style="bold yellow")
        for name, flag in summary.items():
            agreements_table.add_row(name, _mark(flag))
        console.print(agreements_table)

        return output_buffer.getvalue()

    def render_hierarchy(self) -> str:
        """Render the role hierarchy as a Rich table."""
        output_buffer = io.StringIO()
        console = Console(file=output_buffer, highlight=False)
        table = Table("Role", "Rank", title="Role Hierarchy", header_style="bold cyan")
        for role in roles_by_rank():
            table.add_row(role.value, f"{ROLE_HIERARCHY[role]:g}")
        console.print(table)
        return output_buffer.getvalue()

    # ------------------------------------------------------------------
    # Plain tabular rendering
    # ------------------------------------------------------------------

    def render_table(self, profile: RolePermissionProfile) -> str:
        """Render a plain-text profile for logs and redirected output."""
        role_name = profile.role.value if profile.role is not None else "UNKNOWN"
        sep = "-" * 72
        header = "  " + f"{'module':<20}" + "".join(f"{a.value:<8}" for a in ModuleAction)
        lines: list[str] = [
            sep,
            f" ROLE PROFILE: {role_name}",
            sep,
            f"  Rank          : {'-' if profile.rank is None else f'{profile.rank:g}'}",
            f"  Platform role : {'yes' if profile.is_platform_role else 'no'}",
            sep,
            header,
        ]
        for module, permission in profile.modules.items():
            flags = "".join(
                f"{('yes' if permission.allows(a) else 'no'):<8}" for a in ModuleAction
            )
            lines.append(f"  {module.value:<20}{flags}")
        lines.append(sep)
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # JSON rendering
    # ------------------------------------------------------------------

    def render_json(self, profile: RolePermissionProfile) -> str:
        return json.dumps(profile.to_dict(), indent=2, ensure_ascii=False)

    def render_hierarchy_json(self) -> str:
        payload = [{"role": r.value, "rank": ROLE_HIERARCHY[r]} for r in roles_by_rank(list(Role))]
        return json.dumps(payload, indent=2)
