"""Configuration commands for antigravity-settings.

Commands for reading, changing and checking the saved configuration.
"""

import json
import logging
from typing import Any

import typer
import yaml
from rich.markup import escape
from rich.table import Table

from antigravity_settings.config.messages import ERROR_MESSAGES, INFO_MESSAGES, SUCCESS_MESSAGES
from antigravity_settings.exceptions import ValidationError
from antigravity_settings.models.config import fill_defaults, resolve_debug_output_dir
from antigravity_settings.services.backend import LocalBackend
from antigravity_settings.services.validator import FIELD_PATHS, get_field, validate
from antigravity_settings.utils import console, print_error, print_info, print_success
from antigravity_settings.utils.merge import build_patch, deep_merge, flatten, get_path

logger = logging.getLogger(__name__)


def get_backend(ctx: typer.Context) -> LocalBackend:
    """Backend created by the root callback (a default one if absent)."""
    if not isinstance(ctx.obj, LocalBackend):
        ctx.obj = LocalBackend()
    return ctx.obj


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def parse_assignment(assignment: str) -> tuple[str, Any]:
    """Split ``FIELD=VALUE``; the value is parsed as a YAML scalar or list.

    Raises:
        ValidationError: If there is no ``=`` or the field is unknown.
    """
    field, sep, raw = assignment.partition("=")
    field = field.strip()
    if not sep or not field:
        raise ValidationError(
            ERROR_MESSAGES["invalid_assignment"].format(value=assignment), field=assignment
        )
    if field not in FIELD_PATHS:
        raise ValidationError(ERROR_MESSAGES["unknown_field"].format(field=field), field=field)
    try:
        value = yaml.safe_load(raw) if raw.strip() else ""
    except yaml.YAMLError:
        value = raw
    return field, value


def show_command(ctx: typer.Context, as_json: bool) -> None:
    """Print the committed configuration."""
    store = get_backend(ctx).store
    data = store.current().to_dict()

    if as_json:
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    table = Table(title="Antigravity Tools Settings")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for path, value in flatten(data).items():
        table.add_row(path, escape(_format_value(value)))
    console.print(table)


def get_command(ctx: typer.Context, field: str) -> None:
    """Print one dotted field."""
    if field not in FIELD_PATHS:
        print_error(ERROR_MESSAGES["unknown_field"].format(field=field))
        raise typer.Exit(code=1)
    value = get_backend(ctx).store.get(field)
    typer.echo(_format_value(value))


def set_command(ctx: typer.Context, assignments: list[str]) -> None:
    """Stage every assignment into one candidate and commit it."""
    store = get_backend(ctx).store
    current = store.current()

    patch: dict[str, Any] = {}
    for assignment in assignments:
        field, value = parse_assignment(assignment)
        # String fields keep the literal text (api keys that look like numbers)
        if isinstance(get_field(current, field), str) and isinstance(value, int | float | bool):
            value = assignment.partition("=")[2].strip()
        patch = deep_merge(patch, build_patch(field, value))
    logger.debug(f"Committing patch: {patch}")

    result = store.commit_patch(patch)
    if result.violation is not None:
        print_error(f"{escape(result.violation.field)}: {escape(result.violation.message)}")
        raise typer.Exit(code=1)

    if not result.changed_fields:
        print_info(INFO_MESSAGES["no_changes"])
        return
    print_success(SUCCESS_MESSAGES["saved"])
    saved = result.config.to_dict()
    for path in result.changed_fields:
        shown = _format_value(get_path(saved, path))
        print_info(f"  [cyan]{path}[/cyan] = {escape(shown)}")
    if result.restart_required:
        print_info(f"[yellow]{INFO_MESSAGES['restart_hint']}[/yellow]")


def apply_command(ctx: typer.Context, field: str, value: str) -> None:
    """Apply language/theme immediately."""
    get_backend(ctx).store.apply_immediate(field, value)
    print_success(SUCCESS_MESSAGES["applied"].format(field=field, value=value))


def validate_command(ctx: typer.Context) -> None:
    """Check the stored file with commit-mode rules, listing every violation."""
    backend = get_backend(ctx)
    raw = backend.load_config()
    violations = validate(fill_defaults(raw))
    if not violations:
        print_success(SUCCESS_MESSAGES["config_valid"])
        return

    table = Table(title=f"Violations in {escape(backend.adapter.describe())}")
    table.add_column("Field", style="cyan")
    table.add_column("Rule", style="yellow")
    table.add_column("Message")
    for violation in violations:
        table.add_row(violation.field, violation.rule.value, escape(violation.message))
    console.print(table)
    raise typer.Exit(code=1)


def path_command(ctx: typer.Context) -> None:
    """Print where settings and logs live."""
    backend = get_backend(ctx)
    data_dir = backend.get_data_dir()
    debug_dir = resolve_debug_output_dir(backend.store.current(), data_dir)
    typer.echo(f"data_dir: {data_dir}")
    typer.echo(f"config_file: {backend.adapter.describe()}")
    typer.echo(f"debug_log_dir: {debug_dir}")
