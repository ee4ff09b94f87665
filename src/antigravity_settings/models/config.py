"""Configuration schema for Antigravity Tools.

Each section of the settings tree is a dataclass with ``from_dict`` and
``to_dict``. ``from_dict`` never rejects input: absent keys take their
default, present keys are kept verbatim (validation happens separately in
``services.validator``), and keys this version does not know about are kept
in ``extra`` and written back out, so files produced by newer or older
releases survive a load/save cycle.

Optional values (``None``) are omitted from ``to_dict`` output. An absent
``proxy.debug_logging.output_dir`` therefore stays absent on disk and is
resolved by consumers through ``resolve_debug_output_dir``.
"""

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from antigravity_settings.constants import (
    DEBUG_LOGS_DIRNAME,
    DEFAULT_AUTO_REFRESH,
    DEFAULT_AUTO_SYNC,
    DEFAULT_BACKOFF_STEPS_SECONDS,
    DEFAULT_LANGUAGE,
    DEFAULT_PINNED_QUOTA_MODELS,
    DEFAULT_PROXY_PORT,
    DEFAULT_QUOTA_THRESHOLD_PERCENTAGE,
    DEFAULT_REFRESH_INTERVAL_MINUTES,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_SYNC_INTERVAL_MINUTES,
    DEFAULT_THEME,
    DEFAULT_THINKING_CUSTOM_VALUE,
    DEFAULT_THINKING_MODE,
)


def _section(data: Mapping[str, Any], key: str) -> dict[str, Any]:
    """Return a nested section, treating non-mapping values as absent."""
    value = data.get(key)
    return dict(value) if isinstance(value, Mapping) else {}


def _unknown_keys(cls: type, data: Mapping[str, Any]) -> dict[str, Any]:
    """Collect keys of ``data`` that ``cls`` does not declare."""
    known = {f.name for f in fields(cls) if f.init and f.name != "extra"}
    return {k: v for k, v in data.items() if k not in known}


def _with_optional(result: dict[str, Any], **optional: Any) -> dict[str, Any]:
    """Add optional keys to ``result`` only when they hold a value."""
    for key, value in optional.items():
        if value is not None:
            result[key] = value
    return result


@dataclass
class UpstreamProxyConfig:
    """Outbound HTTP proxy used by the local proxy server.

    Attributes:
        enabled: Route upstream traffic through ``url``.
        url: Proxy URL; required when enabled.
    """

    enabled: bool = False
    url: str = ""
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UpstreamProxyConfig":
        """Create config from dictionary."""
        return cls(
            enabled=data.get("enabled", False),
            url=data.get("url", ""),
            extra=_unknown_keys(cls, data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"enabled": self.enabled, "url": self.url, **self.extra}


@dataclass
class DebugLoggingConfig:
    """Full request/response tracing for troubleshooting.

    Disabling keeps ``output_dir`` so re-enabling restores it.

    Attributes:
        enabled: Record the raw request chain.
        output_dir: Explicit directory; None means ``<data_dir>/debug_logs``.
    """

    enabled: bool = False
    output_dir: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DebugLoggingConfig":
        """Create config from dictionary."""
        return cls(
            enabled=data.get("enabled", False),
            output_dir=data.get("output_dir"),
            extra=_unknown_keys(cls, data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = _with_optional({"enabled": self.enabled}, output_dir=self.output_dir)
        return {**result, **self.extra}


@dataclass
class ThinkingBudgetConfig:
    """Thinking budget policy applied to upstream requests.

    Attributes:
        mode: One of auto, fixed, passthrough.
        custom_value: Budget in tokens, used when mode is fixed.
    """

    mode: str = DEFAULT_THINKING_MODE
    custom_value: int = DEFAULT_THINKING_CUSTOM_VALUE
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ThinkingBudgetConfig":
        """Create config from dictionary."""
        return cls(
            mode=data.get("mode", DEFAULT_THINKING_MODE),
            custom_value=data.get("custom_value", DEFAULT_THINKING_CUSTOM_VALUE),
            extra=_unknown_keys(cls, data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"mode": self.mode, "custom_value": self.custom_value, **self.extra}


@dataclass
class ProxyConfig:
    """Local API proxy settings.

    Attributes:
        enabled: Run the proxy server.
        port: TCP listen port.
        api_key: Key clients must present (may be empty).
        auto_start: Start the proxy together with the application.
        request_timeout: Upstream request timeout in seconds.
        enable_logging: Keep the proxy request monitor log.
        upstream_proxy: Outbound proxy settings.
        debug_logging: Request tracing settings.
        thinking_budget: Thinking budget policy.
    """

    enabled: bool = False
    port: int = DEFAULT_PROXY_PORT
    api_key: str = ""
    auto_start: bool = False
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT_SECONDS
    enable_logging: bool = False
    upstream_proxy: UpstreamProxyConfig = field(default_factory=UpstreamProxyConfig)
    debug_logging: DebugLoggingConfig = field(default_factory=DebugLoggingConfig)
    thinking_budget: ThinkingBudgetConfig = field(default_factory=ThinkingBudgetConfig)
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProxyConfig":
        """Create config from dictionary."""
        return cls(
            enabled=data.get("enabled", False),
            port=data.get("port", DEFAULT_PROXY_PORT),
            api_key=data.get("api_key", ""),
            auto_start=data.get("auto_start", False),
            request_timeout=data.get("request_timeout", DEFAULT_REQUEST_TIMEOUT_SECONDS),
            enable_logging=data.get("enable_logging", False),
            upstream_proxy=UpstreamProxyConfig.from_dict(_section(data, "upstream_proxy")),
            debug_logging=DebugLoggingConfig.from_dict(_section(data, "debug_logging")),
            thinking_budget=ThinkingBudgetConfig.from_dict(_section(data, "thinking_budget")),
            extra=_unknown_keys(cls, data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "enabled": self.enabled,
            "port": self.port,
            "api_key": self.api_key,
            "auto_start": self.auto_start,
            "request_timeout": self.request_timeout,
            "enable_logging": self.enable_logging,
            "upstream_proxy": self.upstream_proxy.to_dict(),
            "debug_logging": self.debug_logging.to_dict(),
            "thinking_budget": self.thinking_budget.to_dict(),
            **self.extra,
        }


@dataclass
class ScheduledWarmupConfig:
    """Scheduled warm-up of monitored models."""

    enabled: bool = False
    monitored_models: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScheduledWarmupConfig":
        """Create config from dictionary."""
        return cls(
            enabled=data.get("enabled", False),
            monitored_models=data.get("monitored_models", []),
            extra=_unknown_keys(cls, data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "enabled": self.enabled,
            "monitored_models": self.monitored_models,
            **self.extra,
        }


@dataclass
class QuotaProtectionConfig:
    """Quota protection thresholds.

    Attributes:
        enabled: Throttle accounts whose remaining quota is low.
        threshold_percentage: Remaining-quota percentage that triggers protection.
        monitored_models: Models whose quota is watched.
    """

    enabled: bool = False
    threshold_percentage: int = DEFAULT_QUOTA_THRESHOLD_PERCENTAGE
    monitored_models: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuotaProtectionConfig":
        """Create config from dictionary."""
        return cls(
            enabled=data.get("enabled", False),
            threshold_percentage=data.get(
                "threshold_percentage", DEFAULT_QUOTA_THRESHOLD_PERCENTAGE
            ),
            monitored_models=data.get("monitored_models", []),
            extra=_unknown_keys(cls, data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "enabled": self.enabled,
            "threshold_percentage": self.threshold_percentage,
            "monitored_models": self.monitored_models,
            **self.extra,
        }


@dataclass
class PinnedQuotaModelsConfig:
    """Models shown first on the quota dashboard, in display order."""

    models: list[str] = field(default_factory=lambda: list(DEFAULT_PINNED_QUOTA_MODELS))
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PinnedQuotaModelsConfig":
        """Create config from dictionary."""
        return cls(
            models=data.get("models", list(DEFAULT_PINNED_QUOTA_MODELS)),
            extra=_unknown_keys(cls, data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"models": self.models, **self.extra}


@dataclass
class CircuitBreakerConfig:
    """Account circuit breaker.

    Attributes:
        enabled: Back off from failing accounts.
        backoff_steps: Wait in seconds after the 1st, 2nd, ... failure.
    """

    enabled: bool = False
    backoff_steps: list[int] = field(default_factory=lambda: list(DEFAULT_BACKOFF_STEPS_SECONDS))
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CircuitBreakerConfig":
        """Create config from dictionary."""
        return cls(
            enabled=data.get("enabled", False),
            backoff_steps=data.get("backoff_steps", list(DEFAULT_BACKOFF_STEPS_SECONDS)),
            extra=_unknown_keys(cls, data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"enabled": self.enabled, "backoff_steps": self.backoff_steps, **self.extra}


@dataclass
class AppConfig:
    """Root of the settings tree.

    ``staged_from`` is bookkeeping for ``ConfigStore``: the live-apply
    values (language, theme) a staged candidate was derived from. It is
    not an init argument, so a stored key of the same name passes through
    ``extra`` like any other unknown key. It is neither serialized nor
    compared.
    """

    language: str = DEFAULT_LANGUAGE
    theme: str = DEFAULT_THEME
    auto_refresh: bool = DEFAULT_AUTO_REFRESH
    refresh_interval: int = DEFAULT_REFRESH_INTERVAL_MINUTES
    auto_sync: bool = DEFAULT_AUTO_SYNC
    sync_interval: int = DEFAULT_SYNC_INTERVAL_MINUTES
    default_export_path: str | None = None
    antigravity_executable: str | None = None
    antigravity_args: list[str] | None = None
    proxy: ProxyConfig = field(default_factory=ProxyConfig)
    scheduled_warmup: ScheduledWarmupConfig = field(default_factory=ScheduledWarmupConfig)
    quota_protection: QuotaProtectionConfig = field(default_factory=QuotaProtectionConfig)
    pinned_quota_models: PinnedQuotaModelsConfig = field(default_factory=PinnedQuotaModelsConfig)
    circuit_breaker: CircuitBreakerConfig = field(default_factory=CircuitBreakerConfig)
    extra: dict[str, Any] = field(default_factory=dict, repr=False)
    staged_from: dict[str, Any] | None = field(
        default=None, init=False, compare=False, repr=False
    )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppConfig":
        """Create config from dictionary, defaulting every absent field."""
        return cls(
            language=data.get("language", DEFAULT_LANGUAGE),
            theme=data.get("theme", DEFAULT_THEME),
            auto_refresh=data.get("auto_refresh", DEFAULT_AUTO_REFRESH),
            refresh_interval=data.get("refresh_interval", DEFAULT_REFRESH_INTERVAL_MINUTES),
            auto_sync=data.get("auto_sync", DEFAULT_AUTO_SYNC),
            sync_interval=data.get("sync_interval", DEFAULT_SYNC_INTERVAL_MINUTES),
            default_export_path=data.get("default_export_path"),
            antigravity_executable=data.get("antigravity_executable"),
            antigravity_args=data.get("antigravity_args"),
            proxy=ProxyConfig.from_dict(_section(data, "proxy")),
            scheduled_warmup=ScheduledWarmupConfig.from_dict(_section(data, "scheduled_warmup")),
            quota_protection=QuotaProtectionConfig.from_dict(_section(data, "quota_protection")),
            pinned_quota_models=PinnedQuotaModelsConfig.from_dict(
                _section(data, "pinned_quota_models")
            ),
            circuit_breaker=CircuitBreakerConfig.from_dict(_section(data, "circuit_breaker")),
            extra=_unknown_keys(cls, data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = _with_optional(
            {
                "language": self.language,
                "theme": self.theme,
                "auto_refresh": self.auto_refresh,
                "refresh_interval": self.refresh_interval,
                "auto_sync": self.auto_sync,
                "sync_interval": self.sync_interval,
            },
            default_export_path=self.default_export_path,
            antigravity_executable=self.antigravity_executable,
            antigravity_args=self.antigravity_args,
        )
        result.update(
            {
                "proxy": self.proxy.to_dict(),
                "scheduled_warmup": self.scheduled_warmup.to_dict(),
                "quota_protection": self.quota_protection.to_dict(),
                "pinned_quota_models": self.pinned_quota_models.to_dict(),
                "circuit_breaker": self.circuit_breaker.to_dict(),
            }
        )
        result.update(self.extra)
        return result

    def copy(self) -> "AppConfig":
        """Return an independent deep copy."""
        return copy.deepcopy(self)


def defaults() -> AppConfig:
    """Return a fully populated default configuration."""
    return AppConfig()


def fill_defaults(partial: "Mapping[str, Any] | AppConfig | None") -> AppConfig:
    """Complete a possibly partial or legacy configuration.

    Absent fields take their default, present fields are preserved verbatim
    and unknown keys pass through. Idempotent:
    ``fill_defaults(fill_defaults(x)) == fill_defaults(x)``.

    Args:
        partial: Raw mapping (as read from disk), an existing config, or None.

    Returns:
        Complete AppConfig that shares no mutable state with ``partial``.
    """
    if partial is None:
        return defaults()
    if isinstance(partial, AppConfig):
        return AppConfig.from_dict(copy.deepcopy(partial.to_dict()))
    return AppConfig.from_dict(copy.deepcopy(dict(partial)))


def resolve_debug_output_dir(config: AppConfig, data_dir: Path) -> Path:
    """Resolve where debug logs are written.

    Args:
        config: Configuration to read.
        data_dir: Per-user application data directory.

    Returns:
        The explicit ``proxy.debug_logging.output_dir`` when set, otherwise
        ``<data_dir>/debug_logs``.
    """
    output_dir = config.proxy.debug_logging.output_dir
    if isinstance(output_dir, str) and output_dir.strip():
        return Path(output_dir.strip()).expanduser()
    return data_dir / DEBUG_LOGS_DIRNAME
