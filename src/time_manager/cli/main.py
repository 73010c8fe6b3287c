"""Main CLI application."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from time_manager import __version__
from time_manager.cli.config_commands import config
from time_manager.core.config import ConfigManager, Settings
from time_manager.core.errors import TimeManagerError
from time_manager.core.models import Role, User
from time_manager.core.policy import Requester
from time_manager.core.reports import ReportService
from time_manager.core.security import hash_password, is_strong_password, is_valid_email
from time_manager.core.storage import StorageManager

console = Console()
error_console = Console(stderr=True)


def load_config(ctx: click.Context) -> ConfigManager:
    """Load the config file selected on the command line."""
    config_path = ctx.obj.get("config_path")
    return ConfigManager(Path(config_path) if config_path else None)


def get_storage(ctx: click.Context) -> StorageManager:
    """Get StorageManager for the configured data directory."""
    settings = Settings.from_config(load_config(ctx))
    return StorageManager(settings.data_dir)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", type=click.Path(), help="Path to config file")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str]) -> None:
    """Time Manager - clock-in/clock-out backend.

    Run the API, manage accounts and print hours reports.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


cli.add_command(config)


@cli.command()
@click.option("--host", default=None, help="Host address (default: from config)")
@click.option("--port", type=int, default=None, help="Port number (default: from config)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int], reload: bool) -> None:
    """Start the API server.

    Examples:
        time-manager serve
        time-manager serve --host 0.0.0.0 --port 8080
    """
    from time_manager.api.server import run_server

    config_mgr = load_config(ctx)
    final_host = host or config_mgr.get("server.host", "localhost")
    final_port = port or config_mgr.get("server.port", 3000)

    click.echo("Starting Time Manager API server...")
    click.echo(f"   URL: http://{final_host}:{final_port}")
    click.echo(f"   Docs: http://{final_host}:{final_port}/docs")
    click.echo()

    try:
        run_server(config=config_mgr, host=final_host, port=final_port, reload=reload)
    except KeyboardInterrupt:
        click.echo("\nShutting down API server...")


@cli.group()
def user() -> None:
    """Manage user accounts."""
    pass


@user.command("create")
@click.argument("username")
@click.argument("email")
@click.option("--first-name", required=True, help="Given name")
@click.option("--last-name", required=True, help="Family name")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role]),
    default=Role.EMPLOYEE.value,
    show_default=True,
    help="Account role",
)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_context
def user_create(
    ctx: click.Context,
    username: str,
    email: str,
    first_name: str,
    last_name: str,
    role: str,
    password: str,
) -> None:
    """Create an account, e.g. the first manager.

    Example:
        time-manager user create alice alice@example.com --first-name Alice \\
            --last-name Smith --role manager
    """
    if not is_valid_email(email):
        error_console.print("[red]Error:[/red] Invalid email format")
        sys.exit(1)
    if not is_strong_password(password):
        error_console.print("[red]Error:[/red] Password: 8+ chars, 1 uppercase, 1 number")
        sys.exit(1)

    storage = get_storage(ctx)
    try:
        created = storage.create_user(
            User(
                username=username,
                email=email,
                password_hash=hash_password(password),
                first_name=first_name,
                last_name=last_name,
                role=Role(role),
            )
        )
    except TimeManagerError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Created {created.role.value} {username} (id {created.id})")


@user.command("list")
@click.pass_context
def user_list(ctx: click.Context) -> None:
    """List all accounts."""
    users = get_storage(ctx).load_users()
    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Username", style="cyan")
    table.add_column("Email")
    table.add_column("Role", style="magenta")
    table.add_column("Team", justify="right")

    for u in users:
        table.add_row(
            str(u.id),
            u.username,
            u.email,
            u.role.value,
            str(u.team_id) if u.team_id is not None else "-",
        )

    console.print(table)


@cli.command()
@click.argument("user_id", type=int)
@click.option("--start", "start_date", help="Window start (ISO 8601)")
@click.option("--end", "end_date", help="Window end (ISO 8601)")
@click.pass_context
def report(
    ctx: click.Context, user_id: int, start_date: Optional[str], end_date: Optional[str]
) -> None:
    """Print a user's worked hours.

    Example:
        time-manager report 3 --start 2025-11-01 --end 2025-11-30
    """
    service = ReportService(get_storage(ctx))
    # Local administration acts with manager rights
    operator = Requester(id=0, role=Role.MANAGER)

    try:
        result = service.user_report(operator, user_id, start_date, end_date)
    except TimeManagerError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column(style="bold")
    table.add_row("User:", str(result.user_id))
    table.add_row("Window:", f"{result.start_date or '-'} → {result.end_date or '-'}")
    table.add_row("Total Hours:", f"{result.total_hours:.2f}")
    table.add_row("Work Days:", str(result.work_days))
    table.add_row("Daily Average:", f"{result.average_daily_hours:.2f}")

    console.print("\n[bold cyan]Time Manager - Hours Report[/bold cyan]\n")
    console.print(table)


@cli.command()
@click.option("--label", default=None, help="Backup name (default: timestamp)")
@click.pass_context
def backup(ctx: click.Context, label: Optional[str]) -> None:
    """Copy the user, team and clock files into a backup folder.

    Example:
        time-manager backup --label before-migration
    """
    backup_path = get_storage(ctx).backup(label)
    console.print(f"[green]✓[/green] Backed up data to {backup_path}")


if __name__ == "__main__":
    cli(obj={})
