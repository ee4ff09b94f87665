"""Tests for ChangeNotifier."""

import logging
from typing import Any

import pytest

from antigravity_settings.models.config import fill_defaults
from antigravity_settings.services.notifier import ChangeNotifier


def test_handler_receives_old_and_new(notifier: ChangeNotifier) -> None:
    """Test the handler signature."""
    calls: list[tuple[str, Any, Any]] = []
    notifier.on_field("language", lambda field, old, new: calls.append((field, old, new)))

    notifier.notify("language", "zh", "en")

    assert calls == [("language", "zh", "en")]


def test_equal_values_skip_handlers(notifier: ChangeNotifier) -> None:
    """Test that unchanged values do not fire."""
    calls: list[str] = []
    notifier.on_field("theme", lambda field, old, new: calls.append(new))

    notifier.notify("theme", "dark", "dark")

    assert calls == []


def test_handlers_run_in_registration_order(notifier: ChangeNotifier) -> None:
    """Test ordering of multiple handlers."""
    order: list[str] = []
    notifier.on_field("theme", lambda *_: order.append("first"))
    notifier.on_field("theme", lambda *_: order.append("second"))

    notifier.notify("theme", "light", "dark")

    assert order == ["first", "second"]


def test_unsubscribe(notifier: ChangeNotifier) -> None:
    """Test that the returned callable removes the handler."""
    calls: list[str] = []
    unsubscribe = notifier.on_field("theme", lambda field, old, new: calls.append(new))

    unsubscribe()
    unsubscribe()
    notifier.notify("theme", "light", "dark")

    assert calls == []
    assert notifier.watched_fields == []


def test_failing_handler_is_logged(
    notifier: ChangeNotifier, caplog: pytest.LogCaptureFixture
) -> None:
    """Test that one failing handler does not stop the rest."""
    calls: list[str] = []

    def broken(field: str, old: Any, new: Any) -> None:
        raise RuntimeError("locale bundle missing")

    notifier.on_field("language", broken)
    notifier.on_field("language", lambda field, old, new: calls.append(new))

    with caplog.at_level(logging.ERROR, logger="antigravity_settings"):
        notifier.notify("language", "zh", "en")

    assert calls == ["en"]
    assert "locale bundle missing" in caplog.text


class TestNotifyChanges:
    """Tests for notify_changes."""

    def test_fires_only_changed_fields(self, notifier: ChangeNotifier) -> None:
        """Test diffing two snapshots."""
        calls: list[str] = []
        notifier.on_field("proxy.port", lambda field, old, new: calls.append(field))
        notifier.on_field("theme", lambda field, old, new: calls.append(field))

        changed = notifier.notify_changes(
            fill_defaults(None), fill_defaults({"proxy": {"port": 9000}})
        )

        assert changed == ["proxy.port"]
        assert calls == ["proxy.port"]

    def test_only_and_exclude(self, notifier: ChangeNotifier) -> None:
        """Test field filters."""
        calls: list[str] = []
        notifier.on_field("language", lambda field, old, new: calls.append(field))
        notifier.on_field("proxy.port", lambda field, old, new: calls.append(field))
        old = fill_defaults(None)
        new = fill_defaults({"language": "en", "proxy": {"port": 9000}})

        notifier.notify_changes(old, new, only=("language", "theme"))
        notifier.notify_changes(old, new, exclude=("language", "theme"))

        assert calls == ["language", "proxy.port"]

    def test_unknown_field_ignored(self, notifier: ChangeNotifier) -> None:
        """Test that a handler on a nonexistent field is skipped."""
        notifier.on_field("proxy.nope", lambda *_: None)

        assert notifier.notify_changes(fill_defaults(None), fill_defaults(None)) == []
