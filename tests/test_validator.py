"""Tests for commit-mode validation and load-mode repair."""

import logging

import pytest

from antigravity_settings.constants import DEFAULT_BACKOFF_STEPS_SECONDS
from antigravity_settings.exceptions import ValidationError
from antigravity_settings.models.config import defaults, fill_defaults
from antigravity_settings.models.enums import ViolationRule
from antigravity_settings.services.validator import (
    FIELD_PATHS,
    check_commit,
    repair,
    validate,
    validate_field,
)


def _fields(violations) -> list[str]:
    return [v.field for v in violations]


class TestValidate:
    """Tests for commit-mode validation."""

    def test_defaults_are_valid(self) -> None:
        """Test that the default configuration passes."""
        assert validate(defaults()) == []

    @pytest.mark.parametrize("threshold", [0, 101, 150, -5])
    def test_threshold_out_of_range(self, threshold: int) -> None:
        """Test quota threshold bounds."""
        config = fill_defaults({"quota_protection": {"threshold_percentage": threshold}})

        violations = validate(config)

        assert _fields(violations) == ["quota_protection.threshold_percentage"]
        assert violations[0].rule is ViolationRule.RANGE
        assert "1 and 100" in violations[0].message

    @pytest.mark.parametrize("threshold", [1, 10, 100])
    def test_threshold_in_range(self, threshold: int) -> None:
        """Test accepted quota thresholds."""
        config = fill_defaults({"quota_protection": {"threshold_percentage": threshold}})

        assert validate(config) == []

    def test_unsorted_backoff_steps(self) -> None:
        """Test that backoff steps must ascend."""
        config = fill_defaults({"circuit_breaker": {"backoff_steps": [60, 30, 120]}})

        violations = validate(config)

        assert _fields(violations) == ["circuit_breaker.backoff_steps"]
        assert violations[0].rule is ViolationRule.ORDERING

    def test_sorted_backoff_steps(self) -> None:
        """Test ascending steps, including repeats."""
        config = fill_defaults({"circuit_breaker": {"backoff_steps": [30, 60, 60, 120]}})

        assert validate(config) == []

    def test_empty_backoff_steps(self) -> None:
        """Test that at least one step is required."""
        config = fill_defaults({"circuit_breaker": {"backoff_steps": []}})

        assert validate(config)[0].rule is ViolationRule.REQUIRED

    def test_non_positive_backoff_step(self) -> None:
        """Test that steps must be positive."""
        config = fill_defaults({"circuit_breaker": {"backoff_steps": [0, 30]}})

        assert validate(config)[0].rule is ViolationRule.RANGE

    def test_backoff_steps_wrong_type(self) -> None:
        """Test that steps must be integers."""
        config = fill_defaults({"circuit_breaker": {"backoff_steps": ["30s"]}})

        assert validate(config)[0].rule is ViolationRule.TYPE

    @pytest.mark.parametrize("port", [0, 65536, 70000])
    def test_port_out_of_range(self, port: int) -> None:
        """Test proxy port bounds."""
        config = fill_defaults({"proxy": {"port": port}})

        assert _fields(validate(config)) == ["proxy.port"]

    def test_port_must_be_integer(self) -> None:
        """Test that a numeric string port is rejected."""
        config = fill_defaults({"proxy": {"port": "8045"}})

        assert validate(config)[0].rule is ViolationRule.TYPE

    def test_upstream_enabled_requires_url(self) -> None:
        """Test that enabling the upstream proxy without a URL is rejected."""
        config = fill_defaults({"proxy": {"upstream_proxy": {"enabled": True, "url": ""}}})

        violations = validate(config)

        assert _fields(violations) == ["proxy.upstream_proxy.url"]
        assert violations[0].rule is ViolationRule.REQUIRED

    def test_upstream_whitespace_url_counts_as_empty(self) -> None:
        """Test that a blank URL is treated as missing."""
        config = fill_defaults({"proxy": {"upstream_proxy": {"enabled": True, "url": "   "}}})

        assert _fields(validate(config)) == ["proxy.upstream_proxy.url"]

    def test_upstream_disabled_allows_empty_url(self) -> None:
        """Test that the URL is optional while the upstream proxy is off."""
        config = fill_defaults({"proxy": {"upstream_proxy": {"enabled": False, "url": ""}}})

        assert validate(config) == []

    def test_upstream_enabled_with_url(self) -> None:
        """Test a complete upstream proxy."""
        config = fill_defaults(
            {"proxy": {"upstream_proxy": {"enabled": True, "url": "http://127.0.0.1:7890"}}}
        )

        assert validate(config) == []

    def test_duplicate_monitored_models(self) -> None:
        """Test that monitored model lists must be unique."""
        config = fill_defaults(
            {"scheduled_warmup": {"monitored_models": ["gemini-3-flash", "gemini-3-flash"]}}
        )

        violations = validate(config)

        assert violations[0].rule is ViolationRule.UNIQUENESS
        assert "gemini-3-flash" in violations[0].message

    def test_sync_interval_ignored_when_sync_off(self) -> None:
        """Test that the sync interval is only checked while auto-sync is on."""
        config = fill_defaults({"auto_sync": False, "sync_interval": 0})

        assert validate(config) == []

    def test_sync_interval_checked_when_sync_on(self) -> None:
        """Test the sync interval bound while auto-sync is on."""
        config = fill_defaults({"auto_sync": True, "sync_interval": 0})

        assert _fields(validate(config)) == ["sync_interval"]

    def test_unknown_language(self) -> None:
        """Test that only known locales are accepted."""
        config = fill_defaults({"language": "xx"})

        assert validate(config)[0].rule is ViolationRule.CHOICE

    def test_violations_in_declaration_order(self) -> None:
        """Test that every violation is reported, in schema order."""
        config = fill_defaults(
            {
                "circuit_breaker": {"backoff_steps": [60, 30]},
                "proxy": {"port": 0},
                "language": "xx",
            }
        )

        assert _fields(validate(config)) == [
            "language",
            "proxy.port",
            "circuit_breaker.backoff_steps",
        ]

    def test_does_not_modify_input(self) -> None:
        """Test that validation is read-only."""
        config = fill_defaults({"circuit_breaker": {"backoff_steps": [60, 30]}})

        validate(config)

        assert config.circuit_breaker.backoff_steps == [60, 30]


class TestCheckCommit:
    """Tests for check_commit and validate_field."""

    def test_raises_first_violation(self) -> None:
        """Test that the first violation becomes a ValidationError."""
        config = fill_defaults({"proxy": {"port": 0}, "theme": "neon"})

        with pytest.raises(ValidationError) as exc_info:
            check_commit(config)

        assert exc_info.value.field == "theme"
        assert exc_info.value.rule == "choice"

    def test_valid_config_passes(self) -> None:
        """Test that a valid config does not raise."""
        check_commit(defaults())

    def test_validate_field_single(self) -> None:
        """Test checking one field in context."""
        config = fill_defaults({"theme": "neon", "proxy": {"port": 0}})

        violation = validate_field(config, "proxy.port")

        assert violation is not None
        assert violation.field == "proxy.port"
        assert validate_field(defaults(), "theme") is None

    def test_field_paths_cover_schema(self) -> None:
        """Test that every serialized leaf has a rule."""
        assert "proxy.upstream_proxy.url" in FIELD_PATHS
        assert "circuit_breaker.backoff_steps" in FIELD_PATHS
        assert "pinned_quota_models.models" in FIELD_PATHS
        assert len(FIELD_PATHS) == len(set(FIELD_PATHS))


class TestRepair:
    """Tests for load-mode repair."""

    def test_valid_config_untouched(self) -> None:
        """Test that nothing is repaired in a valid config."""
        config, repaired = repair(defaults())

        assert repaired == []
        assert config == defaults()

    @pytest.mark.parametrize(("value", "expected"), [(150, 100), (0, 1), ("20", 20)])
    def test_threshold_clamped(self, value: object, expected: int) -> None:
        """Test clamping to the nearest valid threshold."""
        config, repaired = repair(
            fill_defaults({"quota_protection": {"threshold_percentage": value}})
        )

        assert config.quota_protection.threshold_percentage == expected
        assert _fields(repaired) == ["quota_protection.threshold_percentage"]

    def test_backoff_steps_sorted(self) -> None:
        """Test that unsorted steps are sorted."""
        config, _ = repair(fill_defaults({"circuit_breaker": {"backoff_steps": [60, 30, 120]}}))

        assert config.circuit_breaker.backoff_steps == [30, 60, 120]

    def test_empty_backoff_steps_restored(self) -> None:
        """Test that an empty schedule falls back to the defaults."""
        config, _ = repair(fill_defaults({"circuit_breaker": {"backoff_steps": [0, -1]}}))

        assert config.circuit_breaker.backoff_steps == list(DEFAULT_BACKOFF_STEPS_SECONDS)

    def test_duplicates_removed_in_order(self) -> None:
        """Test that deduplication keeps first occurrences."""
        config, _ = repair(
            fill_defaults({"quota_protection": {"monitored_models": ["b", "a", "b", "c", "a"]}})
        )

        assert config.quota_protection.monitored_models == ["b", "a", "c"]

    def test_upstream_without_url_disabled(self) -> None:
        """Test that an enabled upstream proxy with no URL is switched off."""
        config, repaired = repair(
            fill_defaults({"proxy": {"upstream_proxy": {"enabled": True, "url": " "}}})
        )

        assert config.proxy.upstream_proxy.enabled is False
        assert config.proxy.upstream_proxy.url == ""
        assert _fields(repaired) == ["proxy.upstream_proxy.url"]

    def test_wrong_types_fall_back_to_defaults(self) -> None:
        """Test type repairs."""
        config, _ = repair(
            fill_defaults(
                {
                    "theme": 3,
                    "proxy": {"enabled": "yes", "port": "not-a-port"},
                    "auto_refresh": "on",
                }
            )
        )

        assert config.theme == "system"
        assert config.proxy.enabled is False
        assert config.proxy.port == 8080
        assert config.auto_refresh is True

    def test_blank_optional_path_cleared(self) -> None:
        """Test that an empty export path means unset."""
        config, _ = repair(fill_defaults({"default_export_path": 42}))

        assert config.default_export_path is None

    def test_repaired_config_is_valid(self) -> None:
        """Test that repair always yields a committable config."""
        raw = {
            "language": "klingon",
            "refresh_interval": 999,
            "auto_sync": True,
            "sync_interval": -3,
            "proxy": {"port": 0, "thinking_budget": {"mode": "max", "custom_value": -1}},
            "quota_protection": {"threshold_percentage": 0},
            "circuit_breaker": {"backoff_steps": "fast"},
        }

        config, repaired = repair(fill_defaults(raw))

        assert validate(config) == []
        assert len(repaired) == 8

    def test_input_not_modified(self) -> None:
        """Test that repair works on a copy."""
        original = fill_defaults({"circuit_breaker": {"backoff_steps": [60, 30]}})

        repair(original)

        assert original.circuit_breaker.backoff_steps == [60, 30]

    def test_each_repair_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that every repaired field is logged at WARNING."""
        with caplog.at_level(logging.WARNING, logger="antigravity_settings"):
            repair(fill_defaults({"proxy": {"port": 0}, "theme": "neon"}))

        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert any("proxy.port" in m for m in messages)
        assert any("theme" in m for m in messages)
