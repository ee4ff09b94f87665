"""Main CLI entry point for antigravity-settings."""

import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from antigravity_settings.commands import exit_on_error
from antigravity_settings.commands.maintenance_cmd import maintenance_app
from antigravity_settings.commands.settings_cmd import (
    apply_command,
    get_command,
    path_command,
    set_command,
    show_command,
    validate_command,
)
from antigravity_settings.config.messages import HELP_TEXT, PROJECT_TAGLINE
from antigravity_settings.constants import VERSION
from antigravity_settings.services.backend import LocalBackend
from antigravity_settings.utils import print_panel

PACKAGE_LOGGER = "antigravity_settings"

# Load .env file from current directory if it exists
load_dotenv(Path.cwd() / ".env", verbose=False)

# Create main Typer app
app = typer.Typer(
    name="agt-settings",
    help=PROJECT_TAGLINE,
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.add_typer(maintenance_app, name="maintenance")

# Create console for output
console = Console()


def _configure_logging(verbose: bool) -> None:
    """Configure the package logger for CLI use.

    Args:
        verbose: DEBUG level with logger name and line number when True,
            WARNING otherwise.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    package_logger.propagate = False
    package_logger.handlers.clear()

    if verbose:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
            datefmt="%H:%M:%S",
        )
    else:
        formatter = logging.Formatter("[%(levelname)s] %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    package_logger.addHandler(handler)


@app.command("show")
@exit_on_error
def show(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the configuration as JSON"),
) -> None:
    """Show the saved configuration (defaults filled, invalid values repaired)."""
    show_command(ctx, as_json)


@app.command("get")
@exit_on_error
def get(
    ctx: typer.Context,
    field: str = typer.Argument(..., help="Dotted field path, e.g. proxy.port"),
) -> None:
    """Print one configuration field."""
    get_command(ctx, field)


@app.command("set")
@exit_on_error
def set_(
    ctx: typer.Context,
    assignments: list[str] = typer.Argument(
        ..., help="FIELD=VALUE pairs, e.g. proxy.port=8045 proxy.enabled=true"
    ),
) -> None:
    """Change fields and save them in one validated commit.

    Values are parsed as YAML, so lists can be written as [30, 60, 120].
    Nothing is saved if any field is invalid.
    """
    set_command(ctx, assignments)


@app.command("apply")
@exit_on_error
def apply(
    ctx: typer.Context,
    field: str = typer.Argument(..., help="language or theme"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Apply language or theme immediately."""
    apply_command(ctx, field, value)


@app.command("validate")
@exit_on_error
def validate(ctx: typer.Context) -> None:
    """Check the configuration file and list every invalid field."""
    validate_command(ctx)


@app.command("path")
@exit_on_error
def path(ctx: typer.Context) -> None:
    """Show the data directory, configuration file and debug-log directory."""
    path_command(ctx)


@app.command("version")
def version() -> None:
    """Show version information."""
    print_panel(
        f"[bold cyan]antigravity-settings[/bold cyan] version [green]{VERSION}[/green]\n\n"
        f"{PROJECT_TAGLINE}",
        title="Version",
        style="cyan",
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    data_dir: Path | None = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory (default: AGT_STORAGE_DATA_DIR or ~/.antigravity_tools)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    help_flag: bool | None = typer.Option(
        None,
        "--help",
        "-h",
        help="Show this help message",
        is_eager=True,
    ),
) -> None:
    """agt-settings - Settings manager for Antigravity Tools.

    Reads and writes the same configuration file as the desktop application,
    with the same validation rules.

    Get started:
        agt-settings show                      # Current settings
        agt-settings set proxy.port=8045       # Change and save
        agt-settings apply language en         # Switch language now
    """
    if help_flag or ctx.invoked_subcommand is None:
        console.print(HELP_TEXT)
        raise typer.Exit()

    _configure_logging(verbose)
    ctx.obj = LocalBackend(data_dir=data_dir)
