"""CLI commands for antigravity-settings."""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import typer
from rich.markup import escape

from antigravity_settings.exceptions import SettingsError
from antigravity_settings.utils import print_error

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def exit_on_error(func: F) -> F:
    """Print SettingsError failures and exit with code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except SettingsError as e:
            logger.debug(f"{func.__name__} failed", exc_info=True)
            print_error(escape(str(e)))
            raise typer.Exit(code=1) from e

    return wrapper  # type: ignore[return-value]
