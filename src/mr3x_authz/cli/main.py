"""CLI entry point for mr3x-authz.

Invoked as::

    mr3x-authz [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m mr3x_authz.cli.main

Commands
--------
- roles     Show the role hierarchy
- profile   Show the module permission profile of a role
- check     Evaluate one (role, module, action) against the matrix
- actions   List the agreement actions available to a user
- version   Show version information
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from mr3x_authz.config.config_loader import ConfigLoader
from mr3x_authz.facade import PermissionFacade
from mr3x_authz.permissions.module_permission import Module, ModuleAction
from mr3x_authz.policy.resources import AgreementContext, UserContext
from mr3x_authz.report.renderer import ProfileRenderer

console = Console()
err_console = Console(stderr=True)

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to an authorization YAML config.",
)


def _build_facade(config_path: str | None) -> PermissionFacade:
    if config_path is None:
        return PermissionFacade()
    path = Path(config_path)
    try:
        config = ConfigLoader().load(path)
        return PermissionFacade.from_config(config, base_dir=path.parent)
    except (ValueError, FileNotFoundError) as exc:
        err_console.print(f"[red]Invalid config:[/red] {escape(str(exc))}")
        sys.exit(1)


def _parse_json_object(label: str, raw: str) -> dict[str, object]:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        err_console.print(f"[red]Invalid {label} JSON:[/red] {escape(str(exc))}")
        sys.exit(1)
    if not isinstance(value, dict):
        err_console.print(f"[red]Invalid {label} JSON:[/red] expected an object.")
        sys.exit(1)
    return value


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="mr3x-authz")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """MR3X authorization CLI: inspect roles, permissions and agreement actions."""
    logging.basicConfig(level=getattr(logging, log_level.upper()))


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from mr3x_authz import __version__

    console.print(
        Panel(
            f"[bold]mr3x-authz[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Role-based authorization model for the MR3X platform.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# roles
# ---------------------------------------------------------------------------


@cli.command(name="roles")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of a table.")
def roles_command(as_json: bool) -> None:
    """Show the role hierarchy, highest rank first."""
    renderer = ProfileRenderer()
    if as_json:
        click.echo(renderer.render_hierarchy_json())
    else:
        click.echo(renderer.render_hierarchy(), nl=False)


# ---------------------------------------------------------------------------
# profile
# ---------------------------------------------------------------------------


@cli.command(name="profile")
@click.argument("role")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["rich", "text", "json"]),
    default="rich",
    show_default=True,
    help="Output format.",
)
@_config_option
def profile_command(role: str, output_format: str, config_path: str | None) -> None:
    """Show the permission profile of ROLE across all modules."""
    facade = _build_facade(config_path)
    profile = facade.permissions_for_role(role)
    if profile.role is None:
        err_console.print(f"[red]Unknown role:[/red] {escape(role)}")
        sys.exit(1)

    renderer = ProfileRenderer()
    if output_format == "json":
        click.echo(renderer.render_json(profile))
    elif output_format == "text":
        click.echo(renderer.render_table(profile))
    else:
        click.echo(renderer.render_summary(profile), nl=False)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("role")
@click.argument("module", type=click.Choice([m.value for m in Module], case_sensitive=False))
@click.argument("action", type=click.Choice([a.value for a in ModuleAction], case_sensitive=False))
@_config_option
def check_command(role: str, module: str, action: str, config_path: str | None) -> None:
    """Evaluate ROLE performing ACTION on MODULE. Exits 1 when denied."""
    facade = _build_facade(config_path)
    result = facade.matrix.action_allowed(role, module, action)

    status_str = "[green]ALLOWED[/green]" if result.allowed else "[red]DENIED[/red]"
    console.print(Panel(status_str, title="Permission Check Result", border_style="blue"))
    console.print(f"  Role: [cyan]{escape(role)}[/cyan]  Module: [cyan]{module}[/cyan]  Action: [cyan]{action}[/cyan]")
    if result.message:
        console.print(f"  Message: {result.message}")
    if facade.matrix.is_read_only_module(role, module):
        console.print("  [yellow]Module is read-only for this role.[/yellow]")

    sys.exit(0 if result.allowed else 1)


# ---------------------------------------------------------------------------
# actions
# ---------------------------------------------------------------------------


@cli.command(name="actions")
@click.option("--user", "-u", "user_json", required=True, help="Session user as a JSON object.")
@click.option("--resource", "-r", "resource_json", required=True, help="Agreement snapshot as a JSON object.")
@_config_option
def actions_command(user_json: str, resource_json: str, config_path: str | None) -> None:
    """List the agreement actions available to a user, in menu order."""
    facade = _build_facade(config_path)
    user = UserContext.from_session(_parse_json_object("user", user_json))
    resource = AgreementContext.from_dict(_parse_json_object("resource", resource_json))

    action_set = facade.agreement_actions(user, resource)
    if not action_set.available_actions:
        console.print("[yellow]No actions available.[/yellow]")
        return

    table = Table(title="Available Actions", box=box.SIMPLE)
    table.add_column("#", style="dim")
    table.add_column("Action", style="cyan")
    for index, action in enumerate(action_set.available_actions, start=1):
        table.add_row(str(index), action.value)
    console.print(table)

    slots = [
        name
        for name, flag in (
            ("TENANT", action_set.can_sign_as_tenant),
            ("OWNER", action_set.can_sign_as_owner),
            ("AGENCY", action_set.can_sign_as_agency),
            ("BROKER", action_set.can_sign_as_broker),
            ("WITNESS", action_set.can_sign_as_witness),
        )
        if flag
    ]
    if slots:
        console.print(f"  Signable slots: [magenta]{', '.join(slots)}[/magenta]")


if __name__ == "__main__":
    cli()
