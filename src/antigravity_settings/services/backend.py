"""Backend commands used by the preferences screen.

The screen never touches files or the OS directly; it goes through a
Backend. LocalBackend runs everything in-process against the per-user data
directory.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from antigravity_settings.config.messages import ERROR_MESSAGES
from antigravity_settings.config.settings import storage_settings
from antigravity_settings.exceptions import PersistenceError
from antigravity_settings.models.config import AppConfig
from antigravity_settings.models.results import CacheClearResult, UpdateCheckResult, UpdateSettings
from antigravity_settings.services import cache_service, launch_service
from antigravity_settings.services.config_store import (
    ConfigStore,
    load_config_store,
    resolve_data_dir,
)
from antigravity_settings.services.persistence import FileConfigPersistence, PersistenceAdapter
from antigravity_settings.services.update_service import UpdateService
from antigravity_settings.utils.file_utils import ensure_dir

logger = logging.getLogger(__name__)


class Backend(ABC):
    """Abstract backend command set."""

    @abstractmethod
    def load_config(self) -> dict[str, Any] | None:
        """Raw stored configuration (None when nothing is stored)."""

    @abstractmethod
    def save_config(self, config: AppConfig) -> None:
        """Persist a configuration atomically."""

    @abstractmethod
    def get_data_dir(self) -> Path:
        """Per-user data directory, created on demand."""

    @abstractmethod
    def get_update_settings(self) -> UpdateSettings:
        """Stored update-check preferences."""

    @abstractmethod
    def save_update_settings(self, settings: UpdateSettings) -> None:
        """Persist update-check preferences."""

    @abstractmethod
    def check_for_updates(self) -> UpdateCheckResult:
        """Compare the installed version with the latest release."""

    @abstractmethod
    def is_auto_launch_enabled(self) -> bool:
        """Whether the application starts at login."""

    @abstractmethod
    def toggle_auto_launch(self, enable: bool) -> bool:
        """Enable or disable start at login; returns the new state."""

    @abstractmethod
    def detect_executable_path(self, bypass_config: bool = False) -> str:
        """Locate the Antigravity executable."""

    @abstractmethod
    def detect_launch_arguments(self) -> list[str]:
        """Arguments of a running Antigravity process."""

    @abstractmethod
    def list_cache_paths(self) -> list[str]:
        """Existing Antigravity cache directories."""

    @abstractmethod
    def clear_cache(self) -> CacheClearResult:
        """Delete Antigravity caches, tolerating partial failure."""

    @abstractmethod
    def clear_log_cache(self) -> None:
        """Empty the application log directory."""


class LocalBackend(Backend):
    """In-process backend over the per-user data directory.

    Attributes:
        adapter: Persistence adapter for the configuration file.
        update_service: Update-check service rooted in the data directory.
    """

    def __init__(
        self,
        data_dir: Path | None = None,
        adapter: PersistenceAdapter | None = None,
        update_service: UpdateService | None = None,
        cache_candidates: list[Path] | None = None,
    ):
        """Initialize local backend.

        Args:
            data_dir: Data directory override (runtime setting or the
                platform default when None).
            adapter: Configuration adapter (file in the data directory when None).
            update_service: Update service (one rooted in the data directory when None).
            cache_candidates: Cache paths to manage (platform defaults when None).
        """
        self._data_dir = resolve_data_dir(data_dir)
        self.adapter = adapter or FileConfigPersistence(
            self._data_dir / storage_settings.config_filename
        )
        self.update_service = update_service or UpdateService(self._data_dir)
        self._cache_candidates = cache_candidates
        self._store: ConfigStore | None = None

    @property
    def store(self) -> ConfigStore:
        """Configuration store, loaded on first access."""
        if self._store is None:
            self._store = load_config_store(self.adapter)
        return self._store

    def load_config(self) -> dict[str, Any] | None:
        return self.adapter.load()

    def save_config(self, config: AppConfig) -> None:
        self.adapter.save(config)

    def get_data_dir(self) -> Path:
        try:
            ensure_dir(self._data_dir)
        except OSError as e:
            raise PersistenceError(
                ERROR_MESSAGES["save_failed"].format(error=e),
                path=self._data_dir,
                operation="create_data_dir",
            ) from e
        return self._data_dir

    def get_update_settings(self) -> UpdateSettings:
        return self.update_service.get_settings()

    def save_update_settings(self, settings: UpdateSettings) -> None:
        self.get_data_dir()
        self.update_service.save_settings(settings)

    def check_for_updates(self) -> UpdateCheckResult:
        return self.update_service.check_for_updates()

    def is_auto_launch_enabled(self) -> bool:
        return launch_service.is_auto_launch_enabled()

    def toggle_auto_launch(self, enable: bool) -> bool:
        return launch_service.toggle_auto_launch(enable)

    def detect_executable_path(self, bypass_config: bool = False) -> str:
        config = None if bypass_config else self.store.current()
        return launch_service.detect_executable_path(config, bypass_config=bypass_config)

    def detect_launch_arguments(self) -> list[str]:
        return launch_service.detect_launch_arguments()

    def list_cache_paths(self) -> list[str]:
        return cache_service.list_cache_paths(self._cache_candidates)

    def clear_cache(self) -> CacheClearResult:
        return cache_service.clear_cache(self._cache_candidates)

    def clear_log_cache(self) -> None:
        cache_service.clear_log_cache(self._data_dir)
