"""Pytest configuration and fixtures for antigravity-settings tests."""

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from antigravity_settings.config.paths import CONFIG_FILENAME
from antigravity_settings.services.config_store import ConfigStore
from antigravity_settings.services.notifier import ChangeNotifier
from antigravity_settings.services.persistence import FileConfigPersistence, InMemoryPersistence


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Temporary per-user data directory.

    Returns:
        Path to an existing empty directory
    """
    path = tmp_path / "antigravity_tools"
    path.mkdir()
    return path


@pytest.fixture
def config_file(data_dir: Path) -> Path:
    """Configuration file path inside the temporary data directory (not created)."""
    return data_dir / CONFIG_FILENAME


@pytest.fixture
def write_config(config_file: Path) -> Callable[[dict[str, Any]], Path]:
    """Write a raw configuration mapping to the temporary config file.

    Returns:
        Callable taking the mapping and returning the file path
    """

    def _write(data: dict[str, Any]) -> Path:
        config_file.write_text(json.dumps(data), encoding="utf-8")
        return config_file

    return _write


@pytest.fixture
def memory_adapter() -> InMemoryPersistence:
    """Non-durable persistence adapter."""
    return InMemoryPersistence()


@pytest.fixture
def notifier() -> ChangeNotifier:
    """Fresh change notifier."""
    return ChangeNotifier()


@pytest.fixture
def memory_store(memory_adapter: InMemoryPersistence, notifier: ChangeNotifier) -> ConfigStore:
    """Store over defaults, persisting in memory."""
    return ConfigStore(memory_adapter, notifier=notifier, io_timeout=5.0)


@pytest.fixture
def file_store(config_file: Path) -> ConfigStore:
    """Store persisting to the temporary config file."""
    return ConfigStore(FileConfigPersistence(config_file), io_timeout=5.0)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Undo CLI logging configuration so caplog sees package records."""
    yield
    package_logger = logging.getLogger("antigravity_settings")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
