"""Update check service.

Stores the update-check preferences next to the configuration file and asks
the release API whether a newer version exists.

Key Classes:
    UpdateService: get/save update settings, check for updates
"""

import logging
import time
from pathlib import Path
from typing import Any

import httpx

from antigravity_settings.config.messages import ERROR_MESSAGES
from antigravity_settings.config.paths import UPDATE_SETTINGS_FILENAME
from antigravity_settings.config.settings import update_check_settings
from antigravity_settings.constants import (
    DEFAULT_UPDATE_AUTO_CHECK,
    DEFAULT_UPDATE_CHECK_INTERVAL_HOURS,
    UPDATE_DOWNLOAD_PAGE,
    VERSION,
)
from antigravity_settings.exceptions import NetworkError, PersistenceError, ValidationError
from antigravity_settings.models.enums import ViolationRule
from antigravity_settings.models.results import UpdateCheckResult, UpdateSettings
from antigravity_settings.utils.file_utils import file_exists, read_structured, write_structured
from antigravity_settings.utils.version import compare_versions, normalize_version

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600


def default_update_settings() -> UpdateSettings:
    """Update settings used before the user changes anything."""
    return UpdateSettings(
        auto_check=DEFAULT_UPDATE_AUTO_CHECK,
        last_check_time=0,
        check_interval_hours=DEFAULT_UPDATE_CHECK_INTERVAL_HOURS,
    )


class UpdateService:
    """Update-check preferences and release lookups."""

    def __init__(
        self,
        data_dir: Path,
        current_version: str = VERSION,
        releases_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize update service.

        Args:
            data_dir: Per-user data directory holding update_settings.json.
            current_version: Version reported as installed.
            releases_url: Latest-release API endpoint (runtime setting when None).
            timeout: HTTP timeout in seconds (runtime setting when None).
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self.settings_path = data_dir / UPDATE_SETTINGS_FILENAME
        self.current_version = current_version
        self.releases_url = releases_url or update_check_settings.releases_url
        self.timeout = timeout or update_check_settings.http_timeout_seconds
        self._transport = transport

    def get_settings(self) -> UpdateSettings:
        """Load update settings, defaulting missing or malformed values.

        Raises:
            PersistenceError: If the settings file exists but cannot be read.
        """
        settings = default_update_settings()
        if not file_exists(self.settings_path):
            return settings

        try:
            data = read_structured(self.settings_path)
        except OSError as e:
            raise PersistenceError(
                ERROR_MESSAGES["load_failed"].format(error=e),
                path=self.settings_path,
                operation="load",
            ) from e
        except ValueError as e:
            logger.warning(f"Ignoring unreadable update settings {self.settings_path}: {e}")
            return settings

        if not isinstance(data, dict):
            return settings
        if isinstance(data.get("auto_check"), bool):
            settings["auto_check"] = data["auto_check"]
        if isinstance(data.get("last_check_time"), int):
            settings["last_check_time"] = data["last_check_time"]
        interval = data.get("check_interval_hours")
        if isinstance(interval, int) and not isinstance(interval, bool) and interval >= 1:
            settings["check_interval_hours"] = interval
        return settings

    def save_settings(self, settings: UpdateSettings) -> None:
        """Persist update settings atomically.

        Raises:
            ValidationError: If check_interval_hours is below 1.
            PersistenceError: If the write fails.
        """
        interval = settings["check_interval_hours"]
        if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
            raise ValidationError(
                ERROR_MESSAGES["must_be_positive"].format(field="check_interval_hours"),
                field="check_interval_hours",
                value=interval,
                expected=">= 1",
                rule=ViolationRule.RANGE.value,
            )
        try:
            write_structured(self.settings_path, dict(settings))
        except OSError as e:
            raise PersistenceError(
                ERROR_MESSAGES["save_failed"].format(error=e),
                path=self.settings_path,
                operation="save",
            ) from e

    def is_check_due(self, now: float | None = None) -> bool:
        """Whether an automatic check should run now."""
        settings = self.get_settings()
        if not settings["auto_check"]:
            return False
        now = time.time() if now is None else now
        elapsed = now - settings["last_check_time"]
        return elapsed >= settings["check_interval_hours"] * SECONDS_PER_HOUR

    def check_for_updates(self) -> UpdateCheckResult:
        """Compare the installed version with the latest release.

        Records the check time in the update settings (best effort).

        Raises:
            NetworkError: On transport errors, non-200 responses or an
                unexpected payload.
        """
        release = self._fetch_latest_release()

        tag = release.get("tag_name")
        if not isinstance(tag, str) or not tag.strip():
            raise NetworkError(
                ERROR_MESSAGES["update_check_failed"].format(error="release has no tag_name"),
                url=self.releases_url,
            )
        latest = normalize_version(tag)
        try:
            has_update = compare_versions(latest, self.current_version) > 0
        except ValueError as e:
            raise NetworkError(
                ERROR_MESSAGES["update_check_failed"].format(error=e), url=self.releases_url
            ) from e

        download_url = release.get("html_url")
        result = UpdateCheckResult(
            has_update=has_update,
            latest_version=latest,
            current_version=self.current_version,
            download_url=download_url if isinstance(download_url, str) else UPDATE_DOWNLOAD_PAGE,
        )
        self._record_check_time()
        logger.info(f"Update check: installed={self.current_version} latest={latest}")
        return result

    def _fetch_latest_release(self) -> dict[str, Any]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"antigravity-settings/{self.current_version}",
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(self.releases_url, headers=headers)
        except httpx.TimeoutException as e:
            raise NetworkError(
                ERROR_MESSAGES["update_check_failed"].format(error="request timed out"),
                url=self.releases_url,
                cause=e,
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(
                ERROR_MESSAGES["update_check_failed"].format(error=e),
                url=self.releases_url,
                cause=e,
            ) from e

        if response.status_code != 200:
            raise NetworkError(
                ERROR_MESSAGES["update_check_failed"].format(
                    error=f"HTTP {response.status_code}"
                ),
                url=self.releases_url,
            )
        try:
            data = response.json()
        except ValueError as e:
            raise NetworkError(
                ERROR_MESSAGES["update_check_failed"].format(error="invalid JSON"),
                url=self.releases_url,
                cause=e,
            ) from e
        if not isinstance(data, dict):
            raise NetworkError(
                ERROR_MESSAGES["update_check_failed"].format(error="unexpected payload"),
                url=self.releases_url,
            )
        return data

    def _record_check_time(self) -> None:
        try:
            settings = self.get_settings()
            settings["last_check_time"] = int(time.time())
            self.save_settings(settings)
        except PersistenceError as e:
            logger.warning(f"Could not record update check time: {e}")
