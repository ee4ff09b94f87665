"""Validation of the configuration tree.

Two modes share one ordered rule table:

- Commit mode (``validate`` / ``check_commit``): every violation is
  reported; ``check_commit`` raises ``ValidationError`` for the first one
  in field-declaration order. Used before an explicit save.
- Load mode (``repair``): each violation is fixed in place by moving the
  value to the nearest valid one (clamp, sort, dedupe, fall back to the
  default). Used at startup so a damaged file never blocks the app.

Rules are plain functions; each takes the field value plus the whole config
(for cross-field invariants) and returns a Violation or None. The matching
repairer returns the corrected value.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from antigravity_settings.config.messages import ERROR_MESSAGES
from antigravity_settings.constants import (
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
    MAX_INTERVAL_MINUTES,
    MAX_PORT,
    MAX_QUOTA_THRESHOLD_PERCENTAGE,
    MIN_INTERVAL_MINUTES,
    MIN_PORT,
    MIN_QUOTA_THRESHOLD_PERCENTAGE,
    VALID_LANGUAGES,
    VALID_THEMES,
    VALID_THINKING_MODES,
)
from antigravity_settings.exceptions import ValidationError
from antigravity_settings.models.config import AppConfig
from antigravity_settings.models.enums import ViolationRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Violation:
    """A single breached invariant.

    Attributes:
        field: Dotted path of the offending field.
        rule: Nature of the breach.
        message: Human-readable description naming the field.
        value: The offending value.
        expected: Short description of what is accepted.
    """

    field: str
    rule: ViolationRule
    message: str
    value: Any = None
    expected: str | None = None

    def to_error(self) -> ValidationError:
        """Convert to the exception raised in commit mode."""
        return ValidationError(
            self.message,
            field=self.field,
            value=self.value,
            expected=self.expected,
            rule=self.rule.value,
        )


Check = Callable[[Any, AppConfig], Violation | None]
Repair = Callable[[Any, AppConfig], Any]


@dataclass(frozen=True)
class _Rule:
    path: str
    check: Check
    repair: Repair


# =============================================================================
# Field access
# =============================================================================


def get_field(config: AppConfig, path: str) -> Any:
    """Read a dotted attribute path from a config."""
    target: Any = config
    for name in path.split("."):
        target = getattr(target, name)
    return target


def set_field(config: AppConfig, path: str, value: Any) -> None:
    """Assign a dotted attribute path on a config in place."""
    *parents, leaf = path.split(".")
    target: Any = config
    for name in parents:
        target = getattr(target, name)
    setattr(target, leaf, value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _to_int(value: Any) -> int | None:
    """Best-effort integer coercion for legacy values ("15", 15.0)."""
    if _is_int(value):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


# =============================================================================
# Rule builders
# =============================================================================


def _boolean(path: str, default: bool) -> _Rule:
    def check(value: Any, _config: AppConfig) -> Violation | None:
        if isinstance(value, bool):
            return None
        return Violation(
            path,
            ViolationRule.TYPE,
            ERROR_MESSAGES["wrong_type"].format(field=path, expected="true or false"),
            value,
            "boolean",
        )

    def repair(value: Any, _config: AppConfig) -> Any:
        return value if isinstance(value, bool) else default

    return _Rule(path, check, repair)


def _choice(path: str, choices: tuple[str, ...], default: str) -> _Rule:
    def check(value: Any, _config: AppConfig) -> Violation | None:
        if value in choices:
            return None
        return Violation(
            path,
            ViolationRule.CHOICE,
            ERROR_MESSAGES["invalid_choice"].format(field=path, value=value),
            value,
            f"one of {', '.join(choices)}",
        )

    def repair(value: Any, _config: AppConfig) -> Any:
        return value if value in choices else default

    return _Rule(path, check, repair)


def _int_range(
    path: str,
    default: int,
    minimum: int,
    maximum: int | None = None,
    when: Callable[[AppConfig], bool] | None = None,
) -> _Rule:
    """Integer field within [minimum, maximum]; ``when`` limits commit checks."""
    if maximum is None:
        expected = f">= {minimum}"
    else:
        expected = f"{minimum}-{maximum}"

    def check(value: Any, config: AppConfig) -> Violation | None:
        if not _is_int(value):
            return Violation(
                path,
                ViolationRule.TYPE,
                ERROR_MESSAGES["wrong_type"].format(field=path, expected="an integer"),
                value,
                "integer",
            )
        if when is not None and not when(config):
            return None
        if value < minimum or (maximum is not None and value > maximum):
            if maximum is not None:
                message = ERROR_MESSAGES["out_of_range"].format(
                    field=path, minimum=minimum, maximum=maximum
                )
            elif minimum == 1:
                message = ERROR_MESSAGES["must_be_positive"].format(field=path)
            else:
                message = ERROR_MESSAGES["must_be_non_negative"].format(field=path)
            return Violation(path, ViolationRule.RANGE, message, value, expected)
        return None

    def repair(value: Any, _config: AppConfig) -> Any:
        number = _to_int(value)
        if number is None:
            return default
        number = max(minimum, number)
        if maximum is not None:
            number = min(maximum, number)
        return number

    return _Rule(path, check, repair)


def _string(path: str, default: str) -> _Rule:
    def check(value: Any, _config: AppConfig) -> Violation | None:
        if isinstance(value, str):
            return None
        return Violation(
            path,
            ViolationRule.TYPE,
            ERROR_MESSAGES["wrong_type"].format(field=path, expected="a string"),
            value,
            "string",
        )

    def repair(value: Any, _config: AppConfig) -> Any:
        return value if isinstance(value, str) else default

    return _Rule(path, check, repair)


def _optional_string(path: str) -> _Rule:
    def check(value: Any, _config: AppConfig) -> Violation | None:
        if value is None or isinstance(value, str):
            return None
        return Violation(
            path,
            ViolationRule.TYPE,
            ERROR_MESSAGES["wrong_type"].format(field=path, expected="a string or unset"),
            value,
            "string or null",
        )

    def repair(value: Any, _config: AppConfig) -> Any:
        if isinstance(value, str):
            # Empty string means "use the default location"
            return value if value.strip() else None
        return None

    return _Rule(path, check, repair)


def _string_list(path: str, default: tuple[str, ...] | None, unique: bool) -> _Rule:
    """List of strings; ``default`` None means the field itself is optional."""

    def check(value: Any, _config: AppConfig) -> Violation | None:
        if value is None and default is None:
            return None
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            return Violation(
                path,
                ViolationRule.TYPE,
                ERROR_MESSAGES["wrong_type"].format(field=path, expected="a list of strings"),
                value,
                "list of strings",
            )
        if unique:
            seen: set[str] = set()
            duplicates: set[str] = set()
            for item in value:
                if item in seen:
                    duplicates.add(item)
                seen.add(item)
            if duplicates:
                return Violation(
                    path,
                    ViolationRule.UNIQUENESS,
                    ERROR_MESSAGES["duplicates"].format(
                        field=path, duplicates=", ".join(sorted(duplicates))
                    ),
                    value,
                    "unique entries",
                )
        return None

    def repair(value: Any, _config: AppConfig) -> Any:
        if not isinstance(value, list):
            return None if default is None else list(default)
        items = [item for item in value if isinstance(item, str)]
        if unique:
            items = list(dict.fromkeys(items))
        return items

    return _Rule(path, check, repair)


# =============================================================================
# Cross-field and structural rules
# =============================================================================

_UPSTREAM_URL = "proxy.upstream_proxy.url"
_BACKOFF_STEPS = "circuit_breaker.backoff_steps"


def _check_upstream_url(value: Any, config: AppConfig) -> Violation | None:
    if not isinstance(value, str):
        return Violation(
            _UPSTREAM_URL,
            ViolationRule.TYPE,
            ERROR_MESSAGES["wrong_type"].format(field=_UPSTREAM_URL, expected="a string"),
            value,
            "string",
        )
    if config.proxy.upstream_proxy.enabled is True and not value.strip():
        return Violation(
            _UPSTREAM_URL,
            ViolationRule.REQUIRED,
            ERROR_MESSAGES["upstream_url_required"],
            value,
            "non-empty URL when proxy.upstream_proxy.enabled is true",
        )
    return None


def _repair_upstream_url(value: Any, config: AppConfig) -> Any:
    url = value.strip() if isinstance(value, str) else ""
    if not url and config.proxy.upstream_proxy.enabled is True:
        # Nearest valid state: keep the empty URL, switch the proxy off
        config.proxy.upstream_proxy.enabled = False
    return url


def _check_backoff_steps(value: Any, _config: AppConfig) -> Violation | None:
    if not isinstance(value, list) or not all(_is_int(step) for step in value):
        return Violation(
            _BACKOFF_STEPS,
            ViolationRule.TYPE,
            ERROR_MESSAGES["wrong_type"].format(
                field=_BACKOFF_STEPS, expected="a list of integers"
            ),
            value,
            "list of positive integers",
        )
    if not value:
        return Violation(
            _BACKOFF_STEPS,
            ViolationRule.REQUIRED,
            ERROR_MESSAGES["empty_steps"].format(field=_BACKOFF_STEPS),
            value,
            "at least one step",
        )
    if any(step <= 0 for step in value):
        return Violation(
            _BACKOFF_STEPS,
            ViolationRule.RANGE,
            ERROR_MESSAGES["must_be_positive"].format(field=_BACKOFF_STEPS),
            value,
            "positive integers",
        )
    if any(later < earlier for earlier, later in zip(value, value[1:])):
        return Violation(
            _BACKOFF_STEPS,
            ViolationRule.ORDERING,
            ERROR_MESSAGES["not_sorted"].format(field=_BACKOFF_STEPS),
            value,
            "ascending order",
        )
    return None


def _repair_backoff_steps(value: Any, _config: AppConfig) -> Any:
    if not isinstance(value, list):
        return list(DEFAULT_BACKOFF_STEPS_SECONDS)
    steps = sorted(n for n in (_to_int(step) for step in value) if n is not None and n > 0)
    return steps or list(DEFAULT_BACKOFF_STEPS_SECONDS)


# =============================================================================
# Rule table (field-declaration order)
# =============================================================================

RULES: tuple[_Rule, ...] = (
    _choice("language", VALID_LANGUAGES, DEFAULT_LANGUAGE),
    _choice("theme", VALID_THEMES, DEFAULT_THEME),
    _boolean("auto_refresh", True),
    _int_range(
        "refresh_interval",
        DEFAULT_REFRESH_INTERVAL_MINUTES,
        MIN_INTERVAL_MINUTES,
        MAX_INTERVAL_MINUTES,
    ),
    _boolean("auto_sync", False),
    _int_range(
        "sync_interval",
        DEFAULT_SYNC_INTERVAL_MINUTES,
        MIN_INTERVAL_MINUTES,
        MAX_INTERVAL_MINUTES,
        when=lambda config: config.auto_sync is True,
    ),
    _optional_string("default_export_path"),
    _optional_string("antigravity_executable"),
    _string_list("antigravity_args", None, unique=False),
    _boolean("proxy.enabled", False),
    _int_range("proxy.port", DEFAULT_PROXY_PORT, MIN_PORT, MAX_PORT),
    _string("proxy.api_key", ""),
    _boolean("proxy.auto_start", False),
    _int_range("proxy.request_timeout", DEFAULT_REQUEST_TIMEOUT_SECONDS, 1),
    _boolean("proxy.enable_logging", False),
    _boolean("proxy.upstream_proxy.enabled", False),
    _Rule(_UPSTREAM_URL, _check_upstream_url, _repair_upstream_url),
    _boolean("proxy.debug_logging.enabled", False),
    _optional_string("proxy.debug_logging.output_dir"),
    _choice("proxy.thinking_budget.mode", VALID_THINKING_MODES, DEFAULT_THINKING_MODE),
    _int_range("proxy.thinking_budget.custom_value", DEFAULT_THINKING_CUSTOM_VALUE, 0),
    _boolean("scheduled_warmup.enabled", False),
    _string_list("scheduled_warmup.monitored_models", (), unique=True),
    _boolean("quota_protection.enabled", False),
    _int_range(
        "quota_protection.threshold_percentage",
        DEFAULT_QUOTA_THRESHOLD_PERCENTAGE,
        MIN_QUOTA_THRESHOLD_PERCENTAGE,
        MAX_QUOTA_THRESHOLD_PERCENTAGE,
    ),
    _string_list("quota_protection.monitored_models", (), unique=True),
    _string_list("pinned_quota_models.models", DEFAULT_PINNED_QUOTA_MODELS, unique=False),
    _boolean("circuit_breaker.enabled", False),
    _Rule(_BACKOFF_STEPS, _check_backoff_steps, _repair_backoff_steps),
)

FIELD_PATHS: tuple[str, ...] = tuple(rule.path for rule in RULES)
_RULES_BY_PATH = {rule.path: rule for rule in RULES}


# =============================================================================
# Public API
# =============================================================================


def validate(config: AppConfig) -> list[Violation]:
    """Collect every violation, in field-declaration order.

    Args:
        config: Configuration to check (not modified).

    Returns:
        List of violations (empty when valid).
    """
    violations = []
    for rule in RULES:
        violation = rule.check(get_field(config, rule.path), config)
        if violation is not None:
            violations.append(violation)
    return violations


def validate_field(config: AppConfig, path: str) -> Violation | None:
    """Check a single field in the context of ``config``.

    Raises:
        KeyError: If ``path`` is not a known field.
    """
    rule = _RULES_BY_PATH[path]
    return rule.check(get_field(config, path), config)


def check_commit(config: AppConfig) -> None:
    """Commit-mode validation.

    Raises:
        ValidationError: For the first violation in field-declaration order.
    """
    violations = validate(config)
    if violations:
        raise violations[0].to_error()


def repair(config: AppConfig) -> tuple[AppConfig, list[Violation]]:
    """Load-mode validation: fix every violation instead of rejecting.

    Args:
        config: Configuration as loaded (not modified).

    Returns:
        Tuple of (repaired copy, violations that were repaired).
    """
    repaired = config.copy()
    fixed: list[Violation] = []
    for rule in RULES:
        value = get_field(repaired, rule.path)
        violation = rule.check(value, repaired)
        if violation is None:
            continue
        new_value = rule.repair(value, repaired)
        set_field(repaired, rule.path, new_value)
        fixed.append(violation)
        logger.warning(f"Repaired {rule.path}: {value!r} -> {new_value!r} ({violation.message})")
    return repaired, fixed
