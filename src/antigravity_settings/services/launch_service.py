"""Launch-related helpers: login auto-start and Antigravity process detection.

Auto-start uses an XDG autostart desktop entry, so it is only available on
Linux. Executable detection checks the configured path, well-known install
locations and PATH. Argument detection reads the command line of a running
Antigravity process from /proc.
"""

import logging
import os
import shutil
import sys
from pathlib import Path

from antigravity_settings.config.messages import ERROR_MESSAGES
from antigravity_settings.config.paths import (
    ANTIGRAVITY_PROCESS_NAMES,
    APP_EXECUTABLE_NAME,
    AUTOSTART_DESKTOP_FILENAME,
    AUTOSTART_DIRNAME,
)
from antigravity_settings.exceptions import (
    NotFoundError,
    PersistenceError,
    PlatformUnsupportedError,
)
from antigravity_settings.models.config import AppConfig
from antigravity_settings.utils.file_utils import atomic_write_text, delete_path, file_exists
from antigravity_settings.utils.platform import (
    IS_LINUX,
    antigravity_executable_candidates,
    xdg_config_home,
)

logger = logging.getLogger(__name__)

PROC_ROOT = Path("/proc")

DESKTOP_ENTRY_TEMPLATE = """[Desktop Entry]
Type=Application
Name=Antigravity Tools
Exec={exec_path}
Terminal=false
X-GNOME-Autostart-enabled=true
"""


def autostart_entry_path() -> Path:
    """Location of the XDG autostart desktop entry."""
    return xdg_config_home() / AUTOSTART_DIRNAME / AUTOSTART_DESKTOP_FILENAME


def _require_autostart_support(operation: str) -> None:
    if not IS_LINUX:
        raise PlatformUnsupportedError(
            ERROR_MESSAGES["auto_launch_unsupported"].format(platform=sys.platform),
            operation=operation,
            platform=sys.platform,
        )


def is_auto_launch_enabled() -> bool:
    """Whether the application starts at login.

    Raises:
        PlatformUnsupportedError: Outside Linux.
    """
    _require_autostart_support("is_auto_launch_enabled")
    return file_exists(autostart_entry_path())


def toggle_auto_launch(enable: bool, exec_path: str | None = None) -> bool:
    """Create or remove the autostart entry.

    Args:
        enable: Desired state.
        exec_path: Command written to ``Exec=`` (the app executable on PATH,
            or its bare name, when None).

    Returns:
        The new state.

    Raises:
        PlatformUnsupportedError: Outside Linux.
        PersistenceError: If the entry cannot be written or removed.
    """
    _require_autostart_support("toggle_auto_launch")
    entry = autostart_entry_path()
    try:
        if enable:
            command = exec_path or shutil.which(APP_EXECUTABLE_NAME) or APP_EXECUTABLE_NAME
            atomic_write_text(entry, DESKTOP_ENTRY_TEMPLATE.format(exec_path=command))
            logger.info(f"Created autostart entry {entry}")
        elif delete_path(entry):
            logger.info(f"Removed autostart entry {entry}")
    except OSError as e:
        raise PersistenceError(
            ERROR_MESSAGES["save_failed"].format(error=e), path=entry, operation="auto_launch"
        ) from e
    return enable


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def detect_executable_path(
    config: AppConfig | None = None,
    bypass_config: bool = False,
    candidates: list[Path] | None = None,
) -> str:
    """Locate the Antigravity executable.

    Args:
        config: Configuration whose ``antigravity_executable`` is tried first.
        bypass_config: Ignore the configured path.
        candidates: Install locations to probe (platform defaults when None).

    Returns:
        Absolute path of the executable.

    Raises:
        NotFoundError: If nothing usable is found.
    """
    if config is not None and not bypass_config and config.antigravity_executable:
        configured = Path(config.antigravity_executable).expanduser()
        if _is_executable(configured):
            return str(configured)
        logger.warning(f"Configured Antigravity executable is not usable: {configured}")

    paths = antigravity_executable_candidates() if candidates is None else candidates
    for path in paths:
        if _is_executable(path):
            logger.debug(f"Found Antigravity executable at {path}")
            return str(path)

    for name in ANTIGRAVITY_PROCESS_NAMES:
        found = shutil.which(name)
        if found:
            return found

    raise NotFoundError(ERROR_MESSAGES["executable_not_found"], resource="antigravity_executable")


def _process_name(argv0: str) -> str:
    return Path(argv0).name


def _read_cmdline(pid_dir: Path) -> list[str]:
    raw = (pid_dir / "cmdline").read_bytes()
    return [part.decode(errors="replace") for part in raw.split(b"\0") if part]


def detect_launch_arguments(proc_root: Path | None = None) -> list[str]:
    """Arguments of a running Antigravity process (executable excluded).

    Args:
        proc_root: procfs mount point (/proc when None).

    Returns:
        Argument list of the first matching process, lowest PID first.

    Raises:
        NotFoundError: If no Antigravity process is running (or procfs is
            unavailable on this platform).
    """
    proc_root = proc_root or PROC_ROOT
    if not proc_root.is_dir():
        raise NotFoundError(ERROR_MESSAGES["args_not_found"], resource="antigravity_args")

    pid_dirs = sorted(
        (entry for entry in proc_root.iterdir() if entry.name.isdigit()),
        key=lambda entry: int(entry.name),
    )
    for pid_dir in pid_dirs:
        try:
            argv = _read_cmdline(pid_dir)
        except OSError:
            # Process exited or belongs to another user
            continue
        if argv and _process_name(argv[0]) in ANTIGRAVITY_PROCESS_NAMES:
            logger.debug(f"Found Antigravity process {pid_dir.name}: {argv}")
            return argv[1:]

    raise NotFoundError(ERROR_MESSAGES["args_not_found"], resource="antigravity_args")
