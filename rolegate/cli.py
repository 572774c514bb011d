"""CLI entry point for rolegate."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from rolegate_core.config import RBACConfig, RolegateConfig, load_config, load_roles
from rolegate_core.config.loader import DEFAULT_CONFIG_TEMPLATE
from rolegate_core.errors import RolegateError
from rolegate_core.loggers import ConsoleLogger
from rolegate_core.rbac import RBAC
from rolegate_core.roles import RoleDefinition

app = typer.Typer(
    name="rolegate",
    help="Role-based access control checks against a YAML roles file.",
)

config_app = typer.Typer(help="Manage rolegate configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: RolegateConfig | None = None

EXIT_DENIED = 1
EXIT_ERROR = 2


def _fail(message: object) -> typer.Exit:
    rprint(f"[red]Error:[/red] {escape(str(message))}")
    return typer.Exit(EXIT_ERROR)


def _get_config() -> RolegateConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to rolegate.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except RolegateError as e:
        raise _fail(e)
    logging.basicConfig(level=_config.log_level.upper())


def _load_roles(roles_file: str | None) -> dict[str, RoleDefinition]:
    path = roles_file or _get_config().roles_file
    try:
        return load_roles(path)
    except RolegateError as e:
        raise _fail(e)


def _rbac_config(cfg: RolegateConfig) -> RBACConfig:
    logger = ConsoleLogger() if cfg.rbac.console else None
    return RBACConfig(enable_logger=cfg.rbac.enable_logger, logger=logger)


def _describe_grant(entry: object) -> str:
    if isinstance(entry, str):
        return escape(entry)
    return escape(f"{entry.name} (when: {entry.when!r})")


@app.command()
def check(
    role: str = typer.Argument(..., help="Role name"),
    operation: str = typer.Argument(..., help="Operation, glob (a:*) or /regex/flags"),
    params: Annotated[
        str | None, typer.Option("--params", "-p", help="JSON params passed to conditions")
    ] = None,
    roles_file: Annotated[
        str | None, typer.Option("--roles", "-r", help="Path to roles YAML")
    ] = None,
) -> None:
    """Check whether ROLE may perform OPERATION. Exit code 1 means denied."""
    cfg = _get_config()
    roles = _load_roles(roles_file)

    try:
        parsed = json.loads(params) if params is not None else None
    except json.JSONDecodeError as e:
        raise _fail(f"invalid --params JSON: {e}")

    rbac = RBAC(roles, _rbac_config(cfg))
    try:
        allowed = asyncio.run(rbac.can(role, operation, parsed))
    except RolegateError as e:
        raise _fail(e)

    if allowed:
        rprint(f"[green]ALLOWED[/green] {escape(role)} -> {escape(operation)}")
    else:
        rprint(f"[red]DENIED[/red] {escape(role)} -> {escape(operation)}")
        raise typer.Exit(EXIT_DENIED)


@app.command("roles")
def list_roles(
    roles_file: Annotated[
        str | None, typer.Option("--roles", "-r", help="Path to roles YAML")
    ] = None,
) -> None:
    """List roles with their grants and parents."""
    roles = _load_roles(roles_file)
    if not roles:
        rprint("[yellow]No roles defined.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Roles ({len(roles)})")
    table.add_column("Role", style="cyan")
    table.add_column("Can", style="green")
    table.add_column("Inherits", style="yellow")
    for name, definition in roles.items():
        table.add_row(
            escape(name),
            "\n".join(_describe_grant(entry) for entry in definition.can) or "-",
            ", ".join(definition.inherits or []) or "-",
        )
    rprint(table)


@app.command()
def validate(
    roles_file: Annotated[
        str | None, typer.Option("--roles", "-r", help="Path to roles YAML")
    ] = None,
) -> None:
    """Validate a roles file and report parents that are not defined."""
    roles = _load_roles(roles_file)
    rprint(f"[green]Valid:[/green] {len(roles)} roles")

    for name, definition in roles.items():
        for parent in definition.inherits or []:
            if parent not in roles:
                rprint(f"  [yellow]warn:[/yellow] {name} inherits undefined role {parent!r}")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default rolegate.yaml in current directory."""
    target = Path("rolegate.yaml")
    if target.exists() and not force:
        rprint("[yellow]rolegate.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
