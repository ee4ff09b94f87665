"""Authoritative in-memory configuration with validated commits.

This module owns the committed configuration snapshot and the two ways it
changes:

- The general path: ``stage(patch)`` merge-patches the committed snapshot
  into a candidate; ``commit(candidate)`` validates it, writes it atomically
  and swaps it in. Any number of candidates may be staged; commits are
  serialized.
- The immediate path: ``apply_immediate(field, value)`` for language and
  theme, which take effect (handlers run, file written) without touching
  whatever candidate is pending elsewhere.

Key Classes:
    ConfigStore: Snapshot owner exposing current/stage/commit/apply_immediate

Typical Usage:
    >>> store = load_config_store(FileConfigPersistence(path))
    >>> store.notifier.on_field("language", lambda f, old, new: switch_locale(new))
    >>> candidate = store.stage({"proxy": {"upstream_proxy": {"enabled": True}}})
    >>> result = store.commit(candidate)
    >>> if not result.success:
    ...     print(result.violation.message)
"""

import copy
import logging
import threading
from collections.abc import Mapping
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FuturesTimeoutError
from pathlib import Path
from typing import Any

from antigravity_settings.config.messages import ERROR_MESSAGES
from antigravity_settings.config.settings import storage_settings
from antigravity_settings.constants import IMMEDIATE_FIELDS, RESTART_REQUIRED_PREFIXES
from antigravity_settings.exceptions import PersistenceError, ValidationError
from antigravity_settings.models.config import AppConfig, fill_defaults
from antigravity_settings.models.enums import ViolationRule
from antigravity_settings.models.results import CommitResult
from antigravity_settings.services.notifier import ChangeNotifier
from antigravity_settings.services.persistence import (
    FileConfigPersistence,
    PersistenceAdapter,
    run_with_timeout,
)
from antigravity_settings.services.validator import (
    get_field,
    repair,
    set_field,
    validate,
    validate_field,
)
from antigravity_settings.utils.merge import changed_paths, deep_merge
from antigravity_settings.utils.platform import default_data_dir

logger = logging.getLogger(__name__)


class ConfigStore:
    """Owner of the committed configuration snapshot.

    Callers only ever receive copies; the snapshot itself is replaced
    wholesale under ``_write_lock`` and never mutated in place.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        initial: AppConfig | None = None,
        notifier: ChangeNotifier | None = None,
        io_timeout: float | None = None,
    ):
        """Initialize the store.

        Args:
            adapter: Where commits are persisted.
            initial: Starting snapshot (defaults when None). Not validated;
                use ``load_config_store`` for the startup flow.
            notifier: Change notifier (a new one when None).
            io_timeout: Seconds to wait for a save (runtime setting when None).
        """
        self._adapter = adapter
        self._snapshot = fill_defaults(initial)
        self.notifier = notifier or ChangeNotifier()
        self._io_timeout = (
            storage_settings.io_timeout_seconds if io_timeout is None else io_timeout
        )
        self._write_lock = threading.RLock()
        # Save that timed out but is still running in its worker
        self._pending_save: Future[None] | None = None

    @property
    def adapter(self) -> PersistenceAdapter:
        """Persistence adapter backing this store."""
        return self._adapter

    def current(self) -> AppConfig:
        """Return a copy of the latest committed snapshot."""
        with self._write_lock:
            return self._snapshot.copy()

    def get(self, path: str) -> Any:
        """Read one dotted field from the committed snapshot (copied)."""
        with self._write_lock:
            return copy.deepcopy(get_field(self._snapshot, path))

    def stage(self, patch: Mapping[str, Any]) -> AppConfig:
        """Build a candidate by deep-merging ``patch`` onto ``current()``.

        Present keys overwrite, absent keys keep the committed value, at
        every nesting level. ``None`` clears an optional field.

        Args:
            patch: Partial configuration tree.

        Returns:
            Candidate configuration (not validated, not committed).
        """
        with self._write_lock:
            base = self._snapshot.to_dict()
        candidate = AppConfig.from_dict(copy.deepcopy(deep_merge(base, patch)))
        candidate.staged_from = {field: base[field] for field in IMMEDIATE_FIELDS}
        return candidate

    def commit(self, candidate: AppConfig) -> CommitResult:
        """Validate, persist and publish ``candidate``.

        ``auto_refresh`` is forced on and the upstream proxy URL trimmed
        before validation. A language/theme value applied immediately after
        the candidate was staged replaces the candidate's value when the
        candidate still holds the value it was staged with.

        Args:
            candidate: Configuration from ``stage`` (or any AppConfig).

        Returns:
            CommitResult; on violation ``success`` is False and the
            committed snapshot is unchanged.

        Raises:
            PersistenceError: If the write fails or times out. The committed
                snapshot is unchanged.
        """
        with self._write_lock:
            prepared = self._prepare(candidate)

            violations = validate(prepared)
            if violations:
                violation = violations[0]
                logger.info(f"Commit rejected on {violation.field}: {violation.message}")
                return CommitResult(
                    success=False, config=self._snapshot.copy(), violation=violation
                )

            previous = self._snapshot
            changed = changed_paths(previous.to_dict(), prepared.to_dict())
            if not changed:
                logger.debug("Commit has no changes; skipping write")
                return CommitResult(success=True, config=previous.copy())

            # Live-apply fields switch before the write resolves
            self.notifier.notify_changes(previous, prepared, only=IMMEDIATE_FIELDS)
            try:
                self._persist(prepared)
            except PersistenceError:
                self.notifier.notify_changes(prepared, previous, only=IMMEDIATE_FIELDS)
                raise

            self._snapshot = prepared
            self.notifier.notify_changes(previous, prepared, exclude=IMMEDIATE_FIELDS)

            restart_required = any(
                path.startswith(prefix) for path in changed for prefix in RESTART_REQUIRED_PREFIXES
            )
            logger.info(f"Committed configuration ({len(changed)} field(s) changed)")
            return CommitResult(
                success=True,
                config=prepared.copy(),
                changed_fields=changed,
                restart_required=restart_required,
            )

    def commit_patch(self, patch: Mapping[str, Any]) -> CommitResult:
        """Stage ``patch`` and commit it in one step."""
        return self.commit(self.stage(patch))

    def apply_immediate(self, field: str, value: Any) -> AppConfig:
        """Apply and persist a live-apply field outside the commit path.

        Pending candidates are not touched. Handlers for ``field`` run
        before the file is written.

        Args:
            field: ``language`` or ``theme``.
            value: New value.

        Returns:
            Copy of the updated committed snapshot.

        Raises:
            ValidationError: If ``field`` is not live-applicable or ``value``
                is not an accepted choice.
            PersistenceError: If the write fails; the field is reverted and
                handlers are notified of the revert.
        """
        if field not in IMMEDIATE_FIELDS:
            raise ValidationError(
                ERROR_MESSAGES["not_immediate"].format(field=field),
                field=field,
                value=value,
                expected=f"one of {', '.join(IMMEDIATE_FIELDS)}",
                rule=ViolationRule.CHOICE.value,
            )

        with self._write_lock:
            previous = self._snapshot
            old_value = get_field(previous, field)

            updated = previous.copy()
            set_field(updated, field, value)
            violation = validate_field(updated, field)
            if violation is not None:
                raise violation.to_error()
            if old_value == value:
                return updated

            self.notifier.notify(field, old_value, value)
            try:
                self._persist(updated)
            except PersistenceError:
                self.notifier.notify(field, value, old_value)
                raise

            self._snapshot = updated
            logger.info(f"Applied {field}={value!r}")
            return updated.copy()

    def _prepare(self, candidate: AppConfig) -> AppConfig:
        """Apply the commit-time policies to a copy of ``candidate``."""
        prepared = candidate.copy()
        prepared.staged_from = None
        # Downstream refresh scheduling depends on this unconditionally
        prepared.auto_refresh = True

        upstream = prepared.proxy.upstream_proxy
        if isinstance(upstream.url, str):
            upstream.url = upstream.url.strip()

        staged_from = candidate.staged_from or {}
        for field, staged_value in staged_from.items():
            live_value = get_field(self._snapshot, field)
            if get_field(candidate, field) == staged_value and live_value != staged_value:
                set_field(prepared, field, live_value)
        return prepared

    def _persist(self, config: AppConfig) -> None:
        """Save ``config``, one save at a time.

        A save abandoned on timeout must settle before the next one starts,
        otherwise it could land on top of a newer file.
        """
        self._settle_pending_save()
        run_with_timeout(
            lambda: self._adapter.save(config),
            self._io_timeout,
            operation="save",
            path=self._adapter_path(),
            on_abandon=self._track_abandoned_save,
        )

    def _adapter_path(self) -> Path | None:
        return getattr(self._adapter, "path", None)

    def _settle_pending_save(self) -> None:
        pending = self._pending_save
        if pending is None:
            return
        try:
            error = pending.exception(timeout=self._io_timeout)
        except FuturesTimeoutError as e:
            raise PersistenceError(
                ERROR_MESSAGES["save_in_progress"],
                path=self._adapter_path(),
                operation="save",
            ) from e
        self._pending_save = None
        if error is not None:
            logger.debug(f"Abandoned save failed: {error}")

    def _track_abandoned_save(self, future: Future[None]) -> None:
        self._pending_save = future
        future.add_done_callback(self._restore_after_abandoned_save)

    def _restore_after_abandoned_save(self, future: Future[None]) -> None:
        """Write the committed snapshot back over a save that outlived its commit."""
        if future.cancelled() or future.exception() is not None:
            return
        with self._write_lock:
            if self._pending_save is not future:
                # A later save already replaced it
                return
            self._pending_save = None
            try:
                self._adapter.save(self._snapshot)
            except PersistenceError as e:
                logger.warning(f"Could not restore configuration after a timed-out save: {e}")
                return
            logger.info("Restored committed configuration after a timed-out save")


def load_config_store(
    adapter: PersistenceAdapter,
    notifier: ChangeNotifier | None = None,
    io_timeout: float | None = None,
) -> ConfigStore:
    """Startup flow: load, fill defaults, repair, and wrap in a store.

    Never fails on bad data: a missing, unreadable or corrupt file yields
    defaults, and invalid values are repaired (and logged) rather than
    rejected. The repaired configuration is not written back until the
    next commit.

    Args:
        adapter: Persistence adapter to load from and save to.
        notifier: Optional notifier to attach.
        io_timeout: Seconds to wait for the load (runtime setting when None).

    Returns:
        Ready ConfigStore.
    """
    timeout = storage_settings.io_timeout_seconds if io_timeout is None else io_timeout
    try:
        raw = run_with_timeout(adapter.load, timeout, operation="load")
    except PersistenceError as e:
        logger.warning(f"Could not load configuration from {adapter.describe()}: {e}")
        logger.info("Using default configuration")
        raw = None

    config, repaired = repair(fill_defaults(raw))
    if repaired:
        logger.warning(
            f"Repaired {len(repaired)} invalid field(s) in {adapter.describe()}: "
            f"{', '.join(v.field for v in repaired)}"
        )
    return ConfigStore(adapter, config, notifier=notifier, io_timeout=timeout)


def resolve_data_dir(data_dir: Path | None = None) -> Path:
    """Data directory: explicit argument, AGT_STORAGE_DATA_DIR, or the default."""
    return data_dir or storage_settings.data_dir or default_data_dir()


def get_config_store(data_dir: Path | None = None) -> ConfigStore:
    """Open the per-user configuration store.

    Args:
        data_dir: Data directory override.

    Returns:
        ConfigStore backed by ``<data_dir>/<config_filename>``.
    """
    path = resolve_data_dir(data_dir) / storage_settings.config_filename
    return load_config_store(FileConfigPersistence(path))
