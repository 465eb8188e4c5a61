"""CLI entry point for aumos-access-control.

Invoked as::

    acl [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m aumos_access_control.cli.main

Commands
--------
- version   Show version information
- validate  Validate a grants file
- roles     List the roles of a grants file with their inherited roles
- check     Check whether role(s) may perform an action on a resource
- filter    Filter a JSON document through the permitted attributes
"""
from __future__ import annotations

import json
import sys

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from aumos_access_control.access_control import AccessControl
from aumos_access_control.config.loader import GrantsLoader
from aumos_access_control.errors import AccessControlError
from aumos_access_control.grants.permission import Permission

console = Console()
err_console = Console(stderr=True)

_grants_option = click.option(
    "--grants",
    "-g",
    "grants_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a YAML or JSON grants file.",
)


def _load(grants_path: str, strict: bool = False) -> AccessControl:
    try:
        return GrantsLoader(strict=strict).load(grants_path)
    except AccessControlError as exc:
        err_console.print(f"[red]Invalid grants:[/red] {exc}")
        sys.exit(1)


def _resolve(
    ac: AccessControl,
    roles: tuple[str, ...],
    resource: str,
    action: str,
) -> Permission:
    try:
        return ac.permission({"role": list(roles), "resource": resource, "action": action})
    except AccessControlError as exc:
        err_console.print(f"[red]Query error:[/red] {exc}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="aumos-access-control")
def cli() -> None:
    """Access Control CLI: validate grants files and check permissions."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from aumos_access_control import __version__

    console.print(
        Panel(
            f"[bold]aumos-access-control[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Role and attribute based access control for Python applications.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@_grants_option
@click.option("--strict", is_flag=True, default=False, help="Reject unknown top-level keys.")
def validate_command(grants_path: str, strict: bool) -> None:
    """Validate a grants file and summarise its contents."""
    ac = _load(grants_path, strict=strict)
    console.print(
        Panel(
            f"[green]VALID[/green]\n"
            f"  Roles:     [cyan]{len(ac.get_roles())}[/cyan]\n"
            f"  Resources: [cyan]{len(ac.get_resources())}[/cyan]\n"
            f"  Locked:    [cyan]{ac.is_locked}[/cyan]",
            title="Grants File",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# roles
# ---------------------------------------------------------------------------


@cli.command(name="roles")
@_grants_option
def roles_command(grants_path: str) -> None:
    """List every role together with the roles it inherits from."""
    ac = _load(grants_path)
    grants = ac.get_grants()

    table = Table(title="Roles", box=box.SIMPLE)
    table.add_column("Role", style="cyan")
    table.add_column("Inherits", style="magenta")
    table.add_column("Resources")
    for role in ac.get_roles():
        resources = [name for name in grants[role] if not name.startswith("$")]
        table.add_row(
            role,
            ", ".join(ac.get_inherited_roles_of(role)) or "-",
            ", ".join(resources) or "-",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@_grants_option
@click.option("--role", "-r", "roles", multiple=True, required=True, help="Role to check (repeatable).")
@click.option("--resource", required=True, help="Resource name.")
@click.option(
    "--action",
    "-a",
    required=True,
    help="Action with optional possession, e.g. read or read:own.",
)
def check_command(grants_path: str, roles: tuple[str, ...], resource: str, action: str) -> None:
    """Check whether role(s) may perform an action on a resource."""
    ac = _load(grants_path)
    permission = _resolve(ac, roles, resource, action)

    status_str = "[green]GRANTED[/green]" if permission.granted else "[red]DENIED[/red]"
    console.print(Panel(status_str, title="Permission Check", border_style="blue"))
    console.print(f"  Roles:      [cyan]{', '.join(permission.roles)}[/cyan]")
    console.print(f"  Resource:   [cyan]{permission.resource}[/cyan]")
    console.print(f"  Action:     [cyan]{permission.action}:{permission.possession}[/cyan]")
    if permission.granted:
        console.print(f"  Attributes: {', '.join(permission.attributes)}")

    sys.exit(0 if permission.granted else 1)


# ---------------------------------------------------------------------------
# filter
# ---------------------------------------------------------------------------


@cli.command(name="filter")
@_grants_option
@click.option("--role", "-r", "roles", multiple=True, required=True, help="Role to check (repeatable).")
@click.option("--resource", required=True, help="Resource name.")
@click.option("--action", "-a", default="read", show_default=True, help="Action with optional possession.")
@click.option(
    "--data",
    "-d",
    "data_json",
    required=True,
    help='JSON object or list of objects, e.g. \'{"id": 1, "title": "x"}\'.',
)
def filter_command(
    grants_path: str,
    roles: tuple[str, ...],
    resource: str,
    action: str,
    data_json: str,
) -> None:
    """Print the JSON data reduced to the attributes the role(s) may see."""
    try:
        data = json.loads(data_json)
    except json.JSONDecodeError as exc:
        err_console.print(f"[red]Invalid JSON:[/red] {exc}")
        sys.exit(1)

    ac = _load(grants_path)
    permission = _resolve(ac, roles, resource, action)
    console.print_json(json.dumps(permission.filter(data)))
    sys.exit(0 if permission.granted else 1)


if __name__ == "__main__":
    cli()
