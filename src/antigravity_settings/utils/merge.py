"""Merge-patch helpers for nested configuration dictionaries.

Paths use dot notation (``proxy.upstream_proxy.url``).
"""

from collections.abc import Mapping
from typing import Any

_MISSING = object()


def deep_merge(base: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``patch`` onto ``base``. Patch wins for scalars/lists.

    Present keys overwrite, absent keys keep the base value, and nested
    mappings are merged key by key rather than replaced.

    Args:
        base: Base dictionary (not mutated).
        patch: Patch dictionary whose values take precedence.

    Returns:
        New merged dictionary.
    """
    result = dict(base)
    for key, value in patch.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def build_patch(path: str, value: Any) -> dict[str, Any]:
    """Build a nested patch that sets a single dotted path.

    >>> build_patch("proxy.upstream_proxy.enabled", True)
    {'proxy': {'upstream_proxy': {'enabled': True}}}
    """
    keys = path.split(".")
    patch: dict[str, Any] = {keys[-1]: value}
    for key in reversed(keys[:-1]):
        patch = {key: patch}
    return patch


def get_path(data: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Read a dotted path from nested mappings, returning ``default`` if absent."""
    current: Any = data
    for key in path.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current


def flatten(data: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested mappings into ``{dotted_path: leaf_value}``.

    Lists are leaves.
    """
    flat: dict[str, Any] = {}
    for key, value in data.items():
        path = f"{prefix}{key}"
        if isinstance(value, Mapping) and value:
            flat.update(flatten(value, f"{path}."))
        else:
            flat[path] = value
    return flat


def changed_paths(old: Mapping[str, Any], new: Mapping[str, Any]) -> list[str]:
    """List dotted paths whose leaf value differs between two trees.

    Paths present in only one tree count as changed. Order follows ``new``
    and then paths that disappeared from ``old``.
    """
    old_flat = flatten(old)
    new_flat = flatten(new)
    changed = [p for p, v in new_flat.items() if old_flat.get(p, _MISSING) != v]
    changed.extend(p for p in old_flat if p not in new_flat)
    return changed
