"""Result types for store operations and backend commands.

TypedDicts mirror the payloads exchanged with the backend collaborator;
CommitResult is a dataclass because it carries model objects.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypedDict

if TYPE_CHECKING:
    from antigravity_settings.models.config import AppConfig
    from antigravity_settings.services.validator import Violation


@dataclass
class CommitResult:
    """Outcome of ConfigStore.commit.

    Attributes:
        success: True when the candidate became the committed snapshot.
        config: The committed snapshot (the unchanged one on failure).
        violation: First commit-mode violation when rejected.
        changed_fields: Dotted paths whose value changed.
        restart_required: A changed field only takes effect after restart.
    """

    success: bool
    config: "AppConfig"
    violation: "Violation | None" = None
    changed_fields: list[str] = field(default_factory=list)
    restart_required: bool = False


class UpdateSettings(TypedDict):
    """Persisted update-check preferences."""

    auto_check: bool
    last_check_time: int  # Unix timestamp, 0 = never
    check_interval_hours: int


class UpdateCheckResult(TypedDict):
    """Result of comparing the running version with the latest release."""

    has_update: bool
    latest_version: str
    current_version: str
    download_url: str


class CacheClearResult(TypedDict):
    """Result of clearing application caches.

    Partial failures are reported in ``errors`` instead of raising.
    """

    cleared_paths: list[str]
    total_size_freed: int  # bytes
    errors: list[str]
