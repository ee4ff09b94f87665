"""Antigravity cache and log housekeeping."""

import logging
from pathlib import Path

from antigravity_settings.config.messages import ERROR_MESSAGES
from antigravity_settings.config.paths import LOGS_DIRNAME
from antigravity_settings.exceptions import PersistenceError
from antigravity_settings.models.results import CacheClearResult
from antigravity_settings.utils.file_utils import delete_path, empty_dir, get_path_size
from antigravity_settings.utils.platform import antigravity_cache_candidates

logger = logging.getLogger(__name__)


def list_cache_paths(candidates: list[Path] | None = None) -> list[str]:
    """Cache directories that currently exist.

    Args:
        candidates: Paths to consider (platform defaults when None).

    Returns:
        Existing paths as strings, in candidate order.
    """
    paths = antigravity_cache_candidates() if candidates is None else candidates
    return [str(path) for path in paths if path.exists()]


def clear_cache(candidates: list[Path] | None = None) -> CacheClearResult:
    """Delete every existing cache directory.

    A path that cannot be removed is recorded in ``errors``; the remaining
    paths are still processed.
    """
    result = CacheClearResult(cleared_paths=[], total_size_freed=0, errors=[])
    for raw in list_cache_paths(candidates):
        path = Path(raw)
        size = get_path_size(path)
        try:
            delete_path(path)
        except OSError as e:
            logger.warning(f"Failed to clear cache {path}: {e}")
            result["errors"].append(ERROR_MESSAGES["cache_clear_failed"].format(path=path, error=e))
            continue
        result["cleared_paths"].append(raw)
        result["total_size_freed"] += size

    logger.info(
        f"Cleared {len(result['cleared_paths'])} cache path(s), "
        f"{result['total_size_freed']} bytes, {len(result['errors'])} error(s)"
    )
    return result


def clear_log_cache(data_dir: Path) -> int:
    """Empty ``<data_dir>/logs``.

    Returns:
        Number of entries removed

    Raises:
        PersistenceError: If an entry cannot be deleted.
    """
    logs_dir = data_dir / LOGS_DIRNAME
    try:
        removed = empty_dir(logs_dir)
    except OSError as e:
        raise PersistenceError(
            ERROR_MESSAGES["cache_clear_failed"].format(path=logs_dir, error=e),
            path=logs_dir,
            operation="clear_logs",
        ) from e
    logger.info(f"Removed {removed} log entr{'y' if removed == 1 else 'ies'} from {logs_dir}")
    return removed
