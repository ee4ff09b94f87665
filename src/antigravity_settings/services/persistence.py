"""Durable storage of the configuration tree.

Key Classes:
    PersistenceAdapter: Storage contract used by ConfigStore
    FileConfigPersistence: Single JSON/YAML file, written atomically
    InMemoryPersistence: Non-durable adapter for embedding and tests

``load`` returns the raw mapping exactly as stored (or None when nothing is
stored); completing it with defaults and repairing it is the caller's job.
"""

import copy
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from pathlib import Path
from typing import Any, TypeVar

from antigravity_settings.config.messages import ERROR_MESSAGES
from antigravity_settings.exceptions import PersistenceError
from antigravity_settings.models.config import AppConfig
from antigravity_settings.utils.file_utils import file_exists, read_structured, write_structured

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PersistenceAdapter(ABC):
    """Abstract storage for the configuration tree."""

    @abstractmethod
    def load(self) -> dict[str, Any] | None:
        """Load the stored configuration.

        Returns:
            Raw configuration mapping, or None when nothing is stored

        Raises:
            PersistenceError: If stored data exists but cannot be read
        """

    @abstractmethod
    def save(self, config: AppConfig) -> None:
        """Persist ``config`` atomically.

        Raises:
            PersistenceError: If the write fails; previously stored data
                is left untouched
        """

    def describe(self) -> str:
        """Human-readable location, for messages."""
        return type(self).__name__


class FileConfigPersistence(PersistenceAdapter):
    """Configuration stored as one JSON or YAML file.

    The format follows the file suffix (``.yaml``/``.yml`` for YAML,
    anything else JSON).
    """

    def __init__(self, path: Path):
        """Initialize file persistence.

        Args:
            path: Canonical configuration file path
        """
        self.path = path

    def load(self) -> dict[str, Any] | None:
        if not file_exists(self.path):
            logger.debug(f"No config file at {self.path}")
            return None

        try:
            data = read_structured(self.path)
        except (OSError, ValueError) as e:
            raise PersistenceError(
                ERROR_MESSAGES["load_failed"].format(error=e), path=self.path, operation="load"
            ) from e

        if data is None:
            return None
        if not isinstance(data, dict):
            raise PersistenceError(
                ERROR_MESSAGES["load_failed"].format(
                    error=f"expected a mapping, got {type(data).__name__}"
                ),
                path=self.path,
                operation="load",
            )
        return data

    def save(self, config: AppConfig) -> None:
        try:
            write_structured(self.path, config.to_dict())
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(
                ERROR_MESSAGES["save_failed"].format(error=e), path=self.path, operation="save"
            ) from e
        logger.debug(f"Saved configuration to {self.path}")

    def describe(self) -> str:
        return str(self.path)


class InMemoryPersistence(PersistenceAdapter):
    """Keeps the serialized configuration in memory.

    Attributes:
        data: Last saved mapping (None until the first save)
        save_count: Number of successful saves
    """

    def __init__(self, data: dict[str, Any] | None = None):
        self.data = copy.deepcopy(data)
        self.save_count = 0

    def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self.data)

    def save(self, config: AppConfig) -> None:
        self.data = config.to_dict()
        self.save_count += 1


def run_with_timeout(
    func: Callable[[], T],
    timeout: float,
    operation: str,
    path: Path | None = None,
    on_abandon: Callable[[Future[T]], None] | None = None,
) -> T:
    """Run blocking I/O with an upper bound on how long the caller waits.

    The worker thread is not killed on timeout. Callers that must know when
    an abandoned call finally settles pass ``on_abandon``, which receives
    the still-running future.

    Args:
        func: Zero-argument callable performing the I/O
        timeout: Seconds to wait
        operation: Name used in the error (load, save)
        path: Location used in the error
        on_abandon: Called with the future when it timed out and could not
            be cancelled

    Returns:
        Whatever ``func`` returns

    Raises:
        PersistenceError: On timeout; exceptions from ``func`` propagate
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"config-{operation}")
    try:
        future = executor.submit(func)
        try:
            return future.result(timeout=timeout)
        except FuturesTimeoutError as e:
            if not future.cancel() and on_abandon is not None:
                on_abandon(future)
            raise PersistenceError(
                ERROR_MESSAGES["io_timeout"].format(operation=operation, timeout=timeout),
                path=path,
                operation=operation,
            ) from e
    finally:
        executor.shutdown(wait=False)
