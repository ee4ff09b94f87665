"""Runtime configuration settings for antigravity-settings.

This module uses Pydantic Settings for knobs of the settings manager itself
(not the user's configuration tree). They can be overridden via environment
variables or a ``.env`` file loaded by the CLI.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from antigravity_settings.config.paths import CONFIG_FILENAME


class StorageSettings(BaseSettings):
    """Where and how the configuration file is stored.

    Can be overridden via environment variables with AGT_STORAGE_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix="AGT_STORAGE_")

    data_dir: Path | None = Field(
        default=None,
        description="Override for the per-user data directory",
    )
    config_filename: str = Field(
        default=CONFIG_FILENAME,
        description="Configuration file name inside the data directory (.json or .yaml)",
    )
    io_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound for a single configuration load or save",
    )


class UpdateCheckSettings(BaseSettings):
    """Update check endpoint and defaults.

    Can be overridden via environment variables with AGT_UPDATE_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix="AGT_UPDATE_")

    releases_url: str = Field(
        default="https://api.github.com/repos/lbjlaq/Antigravity-Manager/releases/latest",
        description="Latest-release API endpoint",
    )
    http_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="HTTP timeout for the update check",
    )


# Singleton instances for easy import
storage_settings = StorageSettings()
update_check_settings = UpdateCheckSettings()
