"""Data models for antigravity-settings."""

from antigravity_settings.models.config import (
    AppConfig,
    CircuitBreakerConfig,
    DebugLoggingConfig,
    PinnedQuotaModelsConfig,
    ProxyConfig,
    QuotaProtectionConfig,
    ScheduledWarmupConfig,
    ThinkingBudgetConfig,
    UpstreamProxyConfig,
    defaults,
    fill_defaults,
    resolve_debug_output_dir,
)
from antigravity_settings.models.enums import Language, Theme, ThinkingBudgetMode, ViolationRule
from antigravity_settings.models.results import (
    CacheClearResult,
    CommitResult,
    UpdateCheckResult,
    UpdateSettings,
)

__all__ = [
    "AppConfig",
    "CacheClearResult",
    "CircuitBreakerConfig",
    "CommitResult",
    "DebugLoggingConfig",
    "Language",
    "PinnedQuotaModelsConfig",
    "ProxyConfig",
    "QuotaProtectionConfig",
    "ScheduledWarmupConfig",
    "Theme",
    "ThinkingBudgetConfig",
    "ThinkingBudgetMode",
    "UpdateCheckResult",
    "UpdateSettings",
    "UpstreamProxyConfig",
    "ViolationRule",
    "defaults",
    "fill_defaults",
    "resolve_debug_output_dir",
]
