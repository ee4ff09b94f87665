"""Tests for auto-launch and Antigravity process detection."""

from pathlib import Path
from unittest.mock import patch

import pytest

from antigravity_settings.exceptions import NotFoundError, PlatformUnsupportedError
from antigravity_settings.models.config import fill_defaults
from antigravity_settings.services.launch_service import (
    autostart_entry_path,
    detect_executable_path,
    detect_launch_arguments,
    is_auto_launch_enabled,
    toggle_auto_launch,
)

MODULE = "antigravity_settings.services.launch_service"


def _make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    path.chmod(0o755)
    return path


def _fake_process(proc_root: Path, pid: int, argv: list[str]) -> None:
    pid_dir = proc_root / str(pid)
    pid_dir.mkdir(parents=True)
    (pid_dir / "cmdline").write_bytes(b"\0".join(arg.encode() for arg in argv) + b"\0")


class TestAutoLaunch:
    """Tests for XDG autostart handling."""

    @pytest.fixture(autouse=True)
    def xdg_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
        """Point XDG_CONFIG_HOME at a temporary directory."""
        config_home = tmp_path / "xdg"
        monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
        return config_home

    def test_entry_location(self, xdg_home: Path) -> None:
        """Test the desktop entry path."""
        assert autostart_entry_path() == xdg_home / "autostart" / "antigravity-tools.desktop"

    def test_enable_and_disable(self) -> None:
        """Test toggling launch at login."""
        with patch(f"{MODULE}.IS_LINUX", True):
            assert is_auto_launch_enabled() is False

            assert toggle_auto_launch(True, exec_path="/opt/agt/antigravity-tools") is True
            content = autostart_entry_path().read_text(encoding="utf-8")
            assert "Exec=/opt/agt/antigravity-tools" in content
            assert is_auto_launch_enabled() is True

            assert toggle_auto_launch(False) is False
            assert is_auto_launch_enabled() is False

    def test_disable_when_not_enabled(self) -> None:
        """Test that disabling twice is harmless."""
        with patch(f"{MODULE}.IS_LINUX", True):
            assert toggle_auto_launch(False) is False

    def test_unsupported_platform(self) -> None:
        """Test that other platforms report the operation as unsupported."""
        with patch(f"{MODULE}.IS_LINUX", False):
            with pytest.raises(PlatformUnsupportedError):
                is_auto_launch_enabled()
            with pytest.raises(PlatformUnsupportedError) as exc_info:
                toggle_auto_launch(True)

        assert exc_info.value.operation == "toggle_auto_launch"


class TestDetectExecutablePath:
    """Tests for detect_executable_path."""

    def test_configured_path_first(self, tmp_path: Path) -> None:
        """Test that a usable configured path wins."""
        configured = _make_executable(tmp_path / "custom" / "antigravity")
        candidate = _make_executable(tmp_path / "opt" / "antigravity")
        config = fill_defaults({"antigravity_executable": str(configured)})

        assert detect_executable_path(config, candidates=[candidate]) == str(configured)

    def test_bypass_config(self, tmp_path: Path) -> None:
        """Test that bypassing ignores the configured path."""
        configured = _make_executable(tmp_path / "custom" / "antigravity")
        candidate = _make_executable(tmp_path / "opt" / "antigravity")
        config = fill_defaults({"antigravity_executable": str(configured)})

        result = detect_executable_path(config, bypass_config=True, candidates=[candidate])

        assert result == str(candidate)

    def test_unusable_configured_path_falls_through(self, tmp_path: Path) -> None:
        """Test fallback when the configured file is gone."""
        candidate = _make_executable(tmp_path / "opt" / "antigravity")
        config = fill_defaults({"antigravity_executable": str(tmp_path / "gone")})

        assert detect_executable_path(config, candidates=[candidate]) == str(candidate)

    def test_path_lookup(self, tmp_path: Path) -> None:
        """Test the PATH fallback."""
        with patch(f"{MODULE}.shutil.which", return_value="/usr/local/bin/antigravity"):
            assert detect_executable_path(None, candidates=[]) == "/usr/local/bin/antigravity"

    def test_not_found(self, tmp_path: Path) -> None:
        """Test that nothing found raises NotFoundError."""
        with patch(f"{MODULE}.shutil.which", return_value=None):
            with pytest.raises(NotFoundError):
                detect_executable_path(None, candidates=[tmp_path / "missing"])


class TestDetectLaunchArguments:
    """Tests for detect_launch_arguments."""

    def test_finds_running_process(self, tmp_path: Path) -> None:
        """Test reading the command line of a running Antigravity process."""
        proc_root = tmp_path / "proc"
        _fake_process(proc_root, 12, ["/usr/bin/bash", "-c", "sleep 1"])
        _fake_process(
            proc_root,
            40,
            ["/opt/Antigravity/antigravity", "--user-data-dir=/home/u/.ag", "--verbose"],
        )
        (proc_root / "self").mkdir()

        assert detect_launch_arguments(proc_root) == ["--user-data-dir=/home/u/.ag", "--verbose"]

    def test_lowest_pid_wins(self, tmp_path: Path) -> None:
        """Test deterministic choice among several processes."""
        proc_root = tmp_path / "proc"
        _fake_process(proc_root, 100, ["antigravity", "--second"])
        _fake_process(proc_root, 9, ["antigravity", "--first"])

        assert detect_launch_arguments(proc_root) == ["--first"]

    def test_no_process(self, tmp_path: Path) -> None:
        """Test NotFoundError when Antigravity is not running."""
        proc_root = tmp_path / "proc"
        _fake_process(proc_root, 12, ["/usr/bin/bash"])

        with pytest.raises(NotFoundError):
            detect_launch_arguments(proc_root)

    def test_no_procfs(self, tmp_path: Path) -> None:
        """Test NotFoundError where /proc does not exist."""
        with pytest.raises(NotFoundError):
            detect_launch_arguments(tmp_path / "no-proc")
