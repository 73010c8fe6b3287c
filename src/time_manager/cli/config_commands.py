"""CLI commands for configuration management."""

import json
import sys
from pathlib import Path
from typing import Any

import click  # type: ignore[import-not-found]
from rich.console import Console  # type: ignore[import-not-found]
from rich.table import Table  # type: ignore[import-not-found]

from time_manager.core.config import ConfigManager

console = Console()
error_console = Console(stderr=True)

# Never print the signing key
SECRET_KEYS = {"auth.secret_key"}


def _load(ctx: click.Context) -> ConfigManager:
    config_path = (ctx.obj or {}).get("config_path")
    return ConfigManager(Path(config_path) if config_path else None)


def _convert(value: str) -> Any:
    """Convert a command-line string into a bool, None, int or str."""
    lowered = value.lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    if lowered == "null":
        return None
    try:
        return int(value)
    except ValueError:
        return value


@click.group()  # type: ignore[misc]
def config() -> None:
    """Manage Time Manager configuration.

    Configuration is stored in ~/.time-manager/config.yml
    """
    pass


@config.command("show")  # type: ignore[misc]
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")  # type: ignore[misc]
@click.pass_context  # type: ignore[misc]
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show all configuration settings.

    Example:
        time-manager config show
        time-manager config show --json
    """
    config_mgr = _load(ctx)
    config_dict = config_mgr.to_dict()
    if config_dict.get("auth", {}).get("secret_key"):
        config_dict["auth"]["secret_key"] = "********"

    if as_json:
        click.echo(json.dumps(config_dict, indent=2))
        return

    table = Table(title="Time Manager Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    def add_rows(prefix: str, data: dict[str, Any]) -> None:
        for key, value in data.items():
            full_key = f"{prefix}.{key}" if prefix else key
            if isinstance(value, dict):
                add_rows(full_key, value)
            else:
                table.add_row(full_key, str(value))

    add_rows("", config_dict)
    console.print(table)
    console.print(f"\nConfig file: {config_mgr.config_path}")


@config.command("get")  # type: ignore[misc]
@click.argument("key")  # type: ignore[misc]
@click.pass_context  # type: ignore[misc]
def config_get(ctx: click.Context, key: str) -> None:
    """Get a specific configuration value.

    Example:
        time-manager config get server.port
    """
    if key in SECRET_KEYS:
        error_console.print(f"[red]Error:[/red] '{key}' cannot be displayed")
        sys.exit(1)

    value = _load(ctx).get(key)
    if value is None:
        error_console.print(f"[red]Error:[/red] Configuration key '{key}' not found")
        sys.exit(1)

    if isinstance(value, (dict, list)):
        click.echo(json.dumps(value, indent=2))
    else:
        click.echo(str(value))


@config.command("set")  # type: ignore[misc]
@click.argument("key")  # type: ignore[misc]
@click.argument("value")  # type: ignore[misc]
@click.pass_context  # type: ignore[misc]
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Set a configuration value.

    Use 'true'/'false' for booleans, numbers for integers.

    Example:
        time-manager config set server.port 8080
        time-manager config set logging.level DEBUG
    """
    config_mgr = _load(ctx)
    try:
        config_mgr.set(key, _convert(value))
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Set {key}")
