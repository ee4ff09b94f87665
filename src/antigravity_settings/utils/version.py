"""Version utilities for antigravity-settings."""

import re

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)(?:[-+].*)?$")


def parse_version(version: str) -> tuple[int, int, int]:
    """Parse a semantic version string into components.

    A leading ``v`` (release tags) and any pre-release/build suffix are
    ignored.

    Args:
        version: Version string (e.g., "4.0.15", "v4.1.0-beta.1")

    Returns:
        Tuple of (major, minor, patch)

    Raises:
        ValueError: If version format is invalid

    Example:
        >>> parse_version("v1.2.3")
        (1, 2, 3)
    """
    match = _VERSION_RE.match(version.strip())
    if not match:
        raise ValueError(f"Invalid version format: {version}. Expected format: X.Y.Z")

    return int(match.group(1)), int(match.group(2)), int(match.group(3))


def normalize_version(version: str) -> str:
    """Strip a leading ``v`` from a release tag."""
    version = version.strip()
    return version[1:] if version.startswith("v") else version


def compare_versions(v1: str, v2: str) -> int:
    """Compare two semantic versions.

    Returns:
        -1 if v1 < v2, 0 if v1 == v2, 1 if v1 > v2

    Raises:
        ValueError: If either version format is invalid

    Examples:
        >>> compare_versions("1.2.3", "1.2.4")
        -1
        >>> compare_versions("v2.0.0", "1.9.9")
        1
    """
    left = parse_version(v1)
    right = parse_version(v2)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0
