"""Tests for cache and log cleanup."""

from pathlib import Path
from unittest.mock import patch

import pytest

from antigravity_settings.exceptions import PersistenceError
from antigravity_settings.services.cache_service import (
    clear_cache,
    clear_log_cache,
    list_cache_paths,
)
from antigravity_settings.utils.file_utils import delete_path


@pytest.fixture
def cache_dirs(tmp_path: Path) -> list[Path]:
    """Two populated cache directories and one that does not exist."""
    code_cache = tmp_path / "Code Cache"
    gpu_cache = tmp_path / "GPUCache"
    for directory in (code_cache, gpu_cache):
        (directory / "nested").mkdir(parents=True)
    (code_cache / "index").write_bytes(b"x" * 100)
    (code_cache / "nested" / "blob").write_bytes(b"y" * 50)
    (gpu_cache / "data_0").write_bytes(b"z" * 10)
    return [code_cache, tmp_path / "CachedData", gpu_cache]


class TestListCachePaths:
    """Tests for list_cache_paths."""

    def test_only_existing_paths(self, cache_dirs: list[Path]) -> None:
        """Test that missing candidates are skipped."""
        assert list_cache_paths(cache_dirs) == [str(cache_dirs[0]), str(cache_dirs[2])]

    def test_none_found(self, tmp_path: Path) -> None:
        """Test an empty result when nothing exists."""
        assert list_cache_paths([tmp_path / "missing"]) == []


class TestClearCache:
    """Tests for clear_cache."""

    def test_clears_and_reports_size(self, cache_dirs: list[Path]) -> None:
        """Test deletion and freed byte count."""
        result = clear_cache(cache_dirs)

        assert result["cleared_paths"] == [str(cache_dirs[0]), str(cache_dirs[2])]
        assert result["total_size_freed"] == 160
        assert result["errors"] == []
        assert not cache_dirs[0].exists()
        assert not cache_dirs[2].exists()

    def test_partial_failure(self, cache_dirs: list[Path]) -> None:
        """Test that one undeletable path does not stop the others."""
        locked = cache_dirs[0]

        def flaky_delete(path: Path) -> bool:
            if path == locked:
                raise PermissionError("in use")
            return delete_path(path)

        with patch(
            "antigravity_settings.services.cache_service.delete_path", side_effect=flaky_delete
        ):
            result = clear_cache(cache_dirs)

        assert result["cleared_paths"] == [str(cache_dirs[2])]
        assert result["total_size_freed"] == 10
        assert len(result["errors"]) == 1
        assert "in use" in result["errors"][0]
        assert locked.exists()

    def test_nothing_to_clear(self, tmp_path: Path) -> None:
        """Test the empty result."""
        result = clear_cache([tmp_path / "missing"])

        assert result == {"cleared_paths": [], "total_size_freed": 0, "errors": []}


class TestClearLogCache:
    """Tests for clear_log_cache."""

    def test_empties_logs_dir(self, data_dir: Path) -> None:
        """Test that log files are removed and the directory kept."""
        logs = data_dir / "logs"
        (logs / "old").mkdir(parents=True)
        (logs / "app.log").write_text("line\n", encoding="utf-8")
        (logs / "old" / "app.log.1").write_text("line\n", encoding="utf-8")

        removed = clear_log_cache(data_dir)

        assert removed == 2
        assert logs.is_dir()
        assert list(logs.iterdir()) == []

    def test_missing_logs_dir(self, data_dir: Path) -> None:
        """Test that a missing log directory is not an error."""
        assert clear_log_cache(data_dir) == 0

    def test_failure_raises(self, data_dir: Path) -> None:
        """Test that a deletion failure surfaces as PersistenceError."""
        (data_dir / "logs").mkdir()
        (data_dir / "logs" / "app.log").write_text("x", encoding="utf-8")

        with patch(
            "antigravity_settings.services.cache_service.empty_dir",
            side_effect=PermissionError("denied"),
        ):
            with pytest.raises(PersistenceError) as exc_info:
                clear_log_cache(data_dir)

        assert exc_info.value.operation == "clear_logs"
