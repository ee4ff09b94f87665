"""Maintenance commands for antigravity-settings.

Cache and log cleanup, update checks, launch-at-login and Antigravity
process detection.
"""

import logging

import typer
from rich.markup import escape
from rich.table import Table

from antigravity_settings.commands import exit_on_error
from antigravity_settings.commands.settings_cmd import get_backend
from antigravity_settings.config.messages import INFO_MESSAGES, SUCCESS_MESSAGES
from antigravity_settings.utils import console, print_info, print_success, print_warning

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024

maintenance_app = typer.Typer(
    name="maintenance",
    help="Cache, logs, updates and auto-launch",
    no_args_is_help=True,
)


@maintenance_app.command("cache-paths")
@exit_on_error
def cache_paths(ctx: typer.Context) -> None:
    """List existing Antigravity cache directories."""
    paths = get_backend(ctx).list_cache_paths()
    if not paths:
        print_info(INFO_MESSAGES["cache_not_found"])
        return
    for path in paths:
        typer.echo(path)


@maintenance_app.command("clear-cache")
@exit_on_error
def clear_cache(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete Antigravity cache directories."""
    backend = get_backend(ctx)
    paths = backend.list_cache_paths()
    if not paths:
        print_info(INFO_MESSAGES["cache_not_found"])
        return

    if not force:
        for path in paths:
            print_info(f"  [dim]{escape(path)}[/dim]")
        if not typer.confirm("Delete these directories?"):
            raise typer.Abort()

    result = backend.clear_cache()
    print_success(
        SUCCESS_MESSAGES["cache_cleared"].format(
            count=len(result["cleared_paths"]),
            size_mb=result["total_size_freed"] / BYTES_PER_MB,
        )
    )
    for error in result["errors"]:
        print_warning(escape(error))
    if result["errors"]:
        raise typer.Exit(code=1)


@maintenance_app.command("clear-logs")
@exit_on_error
def clear_logs(ctx: typer.Context) -> None:
    """Empty the application log directory."""
    get_backend(ctx).clear_log_cache()
    print_success(SUCCESS_MESSAGES["logs_cleared"])


@maintenance_app.command("check-update")
@exit_on_error
def check_update(ctx: typer.Context) -> None:
    """Check whether a newer release is available."""
    result = get_backend(ctx).check_for_updates()
    if result["has_update"]:
        print_info(
            INFO_MESSAGES["new_version_available"].format(
                latest=result["latest_version"],
                current=result["current_version"],
                url=result["download_url"],
            )
        )
    else:
        print_success(SUCCESS_MESSAGES["latest_version"].format(version=result["current_version"]))


@maintenance_app.command("update-settings")
@exit_on_error
def update_settings(
    ctx: typer.Context,
    auto_check: bool | None = typer.Option(
        None, "--auto-check/--no-auto-check", help="Check for updates automatically"
    ),
    interval: int | None = typer.Option(
        None, "--interval", "-i", help="Hours between automatic checks"
    ),
) -> None:
    """Show or change update-check preferences."""
    backend = get_backend(ctx)
    settings = backend.get_update_settings()

    if auto_check is not None or interval is not None:
        if auto_check is not None:
            settings["auto_check"] = auto_check
        if interval is not None:
            settings["check_interval_hours"] = interval
        backend.save_update_settings(settings)
        print_success(SUCCESS_MESSAGES["update_settings_saved"])

    table = Table(title="Update Check")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("auto_check", str(settings["auto_check"]))
    table.add_row("check_interval_hours", str(settings["check_interval_hours"]))
    table.add_row("last_check_time", str(settings["last_check_time"]))
    console.print(table)


@maintenance_app.command("autostart")
@exit_on_error
def autostart(
    ctx: typer.Context,
    enable: bool | None = typer.Option(
        None, "--enable/--disable", help="Start Antigravity Tools at login"
    ),
) -> None:
    """Show or change launch-at-login."""
    backend = get_backend(ctx)
    if enable is None:
        state = "enabled" if backend.is_auto_launch_enabled() else "disabled"
        typer.echo(f"Launch at login: {state}")
        return

    backend.toggle_auto_launch(enable)
    key = "auto_launch_enabled" if enable else "auto_launch_disabled"
    print_success(SUCCESS_MESSAGES[key])


@maintenance_app.command("detect-exe")
@exit_on_error
def detect_exe(
    ctx: typer.Context,
    bypass_config: bool = typer.Option(
        False, "--bypass-config", help="Ignore the configured executable path"
    ),
) -> None:
    """Locate the Antigravity executable."""
    path = get_backend(ctx).detect_executable_path(bypass_config=bypass_config)
    print_success(SUCCESS_MESSAGES["executable_detected"].format(path=escape(path)))


@maintenance_app.command("detect-args")
@exit_on_error
def detect_args(ctx: typer.Context) -> None:
    """Show the arguments of a running Antigravity process."""
    args = get_backend(ctx).detect_launch_arguments()
    print_success(SUCCESS_MESSAGES["args_detected"].format(args=escape(" ".join(args))))
