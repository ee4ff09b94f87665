"""Constants for antigravity-settings.

This module centralizes the defaults, ranges and key names of the
configuration tree. Every default lives here so that schema evolution
(adding a field) is a one-line change plus a dataclass attribute.

For paths, messages, and runtime settings, import from:
- antigravity_settings.config.paths
- antigravity_settings.config.messages
- antigravity_settings.config.settings

For type-safe enums, import from:
- antigravity_settings.models.enums
"""

from typing import Final

from antigravity_settings import __version__
from antigravity_settings.models.enums import Language, Theme, ThinkingBudgetMode

# =============================================================================
# Version
# =============================================================================

VERSION: Final[str] = __version__

# =============================================================================
# General
# =============================================================================

VALID_LANGUAGES: Final[tuple[str, ...]] = tuple(Language.values())
VALID_THEMES: Final[tuple[str, ...]] = tuple(Theme.values())

DEFAULT_LANGUAGE: Final[str] = Language.ZH.value
DEFAULT_THEME: Final[str] = Theme.SYSTEM.value
DEFAULT_AUTO_REFRESH: Final[bool] = False
DEFAULT_REFRESH_INTERVAL_MINUTES: Final[int] = 15
DEFAULT_AUTO_SYNC: Final[bool] = False
DEFAULT_SYNC_INTERVAL_MINUTES: Final[int] = 5

MIN_INTERVAL_MINUTES: Final[int] = 1
MAX_INTERVAL_MINUTES: Final[int] = 60

# =============================================================================
# Proxy
# =============================================================================

DEFAULT_PROXY_PORT: Final[int] = 8080
MIN_PORT: Final[int] = 1
MAX_PORT: Final[int] = 65535
DEFAULT_REQUEST_TIMEOUT_SECONDS: Final[int] = 120

DEBUG_LOGS_DIRNAME: Final[str] = "debug_logs"

VALID_THINKING_MODES: Final[tuple[str, ...]] = tuple(ThinkingBudgetMode.values())
DEFAULT_THINKING_MODE: Final[str] = ThinkingBudgetMode.AUTO.value
DEFAULT_THINKING_CUSTOM_VALUE: Final[int] = 24576

# =============================================================================
# Quota protection / pinned models
# =============================================================================

DEFAULT_QUOTA_THRESHOLD_PERCENTAGE: Final[int] = 10
MIN_QUOTA_THRESHOLD_PERCENTAGE: Final[int] = 1
MAX_QUOTA_THRESHOLD_PERCENTAGE: Final[int] = 100

DEFAULT_PINNED_QUOTA_MODELS: Final[tuple[str, ...]] = (
    "gemini-3-pro-high",
    "gemini-3-flash",
    "gemini-3-pro-image",
    "claude-sonnet-4-5-thinking",
)

# =============================================================================
# Circuit breaker
# =============================================================================

DEFAULT_BACKOFF_STEPS_SECONDS: Final[tuple[int, ...]] = (30, 60, 120, 300, 600)

# =============================================================================
# Live-apply
# =============================================================================

# Fields that take effect without an explicit save
IMMEDIATE_FIELDS: Final[tuple[str, ...]] = ("language", "theme")

# Changing any of these requires an application restart to take effect
RESTART_REQUIRED_PREFIXES: Final[tuple[str, ...]] = ("proxy.upstream_proxy.",)

# =============================================================================
# Update checks
# =============================================================================

DEFAULT_UPDATE_AUTO_CHECK: Final[bool] = True
DEFAULT_UPDATE_CHECK_INTERVAL_HOURS: Final[int] = 24
UPDATE_DOWNLOAD_PAGE: Final[str] = "https://github.com/lbjlaq/Antigravity-Manager/releases/latest"
