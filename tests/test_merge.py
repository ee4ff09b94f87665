"""Tests for merge-patch helpers."""

from antigravity_settings.utils.merge import (
    build_patch,
    changed_paths,
    deep_merge,
    flatten,
    get_path,
)


def test_deep_merge_keeps_siblings() -> None:
    """Test that nested keys merge instead of replacing the section."""
    base = {"proxy": {"port": 8080, "upstream_proxy": {"enabled": False, "url": ""}}}

    merged = deep_merge(base, {"proxy": {"upstream_proxy": {"enabled": True}}})

    assert merged == {"proxy": {"port": 8080, "upstream_proxy": {"enabled": True, "url": ""}}}
    assert base["proxy"]["upstream_proxy"]["enabled"] is False


def test_deep_merge_replaces_lists() -> None:
    """Test that lists are replaced wholesale."""
    merged = deep_merge({"steps": [1, 2, 3]}, {"steps": [4]})

    assert merged == {"steps": [4]}


def test_build_patch() -> None:
    """Test building a nested patch from a dotted path."""
    assert build_patch("proxy.debug_logging.enabled", True) == {
        "proxy": {"debug_logging": {"enabled": True}}
    }
    assert build_patch("theme", "dark") == {"theme": "dark"}


def test_get_path() -> None:
    """Test dotted reads with defaults."""
    data = {"proxy": {"port": 8080}}

    assert get_path(data, "proxy.port") == 8080
    assert get_path(data, "proxy.nope", "x") == "x"
    assert get_path(data, "proxy.port.deeper") is None


def test_flatten_and_changed_paths() -> None:
    """Test leaf diffing."""
    old = {"a": 1, "b": {"c": [1], "d": "x"}, "gone": True}
    new = {"a": 1, "b": {"c": [1, 2], "d": "x"}, "added": 0}

    assert flatten(new) == {"a": 1, "b.c": [1, 2], "b.d": "x", "added": 0}
    assert changed_paths(old, new) == ["b.c", "added", "gone"]
