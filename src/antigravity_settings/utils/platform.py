"""Platform detection and per-user location helpers.

Locations follow the desktop application's conventions so that this package
reads and writes the same files as the GUI.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Final

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS: Final[bool] = sys.platform == "win32"
IS_MACOS: Final[bool] = sys.platform == "darwin"
IS_LINUX: Final[bool] = sys.platform.startswith("linux")

DATA_DIR_NAME: Final[str] = ".antigravity_tools"


def default_data_dir() -> Path:
    """Per-user application data directory (``~/.antigravity_tools``)."""
    return Path.home() / DATA_DIR_NAME


def xdg_config_home() -> Path:
    """``$XDG_CONFIG_HOME`` or ``~/.config``."""
    value = os.environ.get("XDG_CONFIG_HOME", "").strip()
    return Path(value) if value else Path.home() / ".config"


def antigravity_cache_candidates() -> list[Path]:
    """Directories where the Antigravity editor keeps its caches.

    Returns:
        Candidate paths for the current platform (existence not checked).
    """
    home = Path.home()
    if IS_MACOS:
        support = home / "Library" / "Application Support" / "Antigravity"
        return [
            support / "Cache",
            support / "CachedData",
            support / "Code Cache",
            support / "GPUCache",
            home / "Library" / "Caches" / "com.google.antigravity",
        ]
    if IS_WINDOWS:
        appdata = Path(os.environ.get("APPDATA", home / "AppData" / "Roaming"))
        local = Path(os.environ.get("LOCALAPPDATA", home / "AppData" / "Local"))
        return [
            appdata / "Antigravity" / "Cache",
            appdata / "Antigravity" / "CachedData",
            appdata / "Antigravity" / "Code Cache",
            appdata / "Antigravity" / "GPUCache",
            local / "Antigravity" / "Cache",
        ]
    config_home = xdg_config_home()
    cache_home = Path(os.environ.get("XDG_CACHE_HOME", "").strip() or home / ".cache")
    return [
        config_home / "Antigravity" / "Cache",
        config_home / "Antigravity" / "CachedData",
        config_home / "Antigravity" / "Code Cache",
        config_home / "Antigravity" / "GPUCache",
        cache_home / "Antigravity",
    ]


def antigravity_executable_candidates() -> list[Path]:
    """Well-known install locations of the Antigravity executable."""
    home = Path.home()
    if IS_MACOS:
        return [
            Path("/Applications/Antigravity.app/Contents/MacOS/Electron"),
            home / "Applications" / "Antigravity.app" / "Contents" / "MacOS" / "Electron",
        ]
    if IS_WINDOWS:
        local = Path(os.environ.get("LOCALAPPDATA", home / "AppData" / "Local"))
        program_files = Path(os.environ.get("PROGRAMFILES", "C:/Program Files"))
        return [
            local / "Programs" / "Antigravity" / "Antigravity.exe",
            program_files / "Antigravity" / "Antigravity.exe",
        ]
    return [
        Path("/usr/share/antigravity/antigravity"),
        Path("/opt/Antigravity/antigravity"),
        Path("/usr/bin/antigravity"),
        home / ".local" / "bin" / "antigravity",
    ]
