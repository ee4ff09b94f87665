"""Utility helpers for antigravity-settings."""

from antigravity_settings.utils.console import (
    console,
    print_error,
    print_info,
    print_panel,
    print_success,
    print_warning,
)
from antigravity_settings.utils.file_utils import (
    atomic_write_text,
    delete_path,
    dir_exists,
    ensure_dir,
    file_exists,
    get_path_size,
    read_structured,
    write_structured,
)
from antigravity_settings.utils.merge import build_patch, changed_paths, deep_merge, get_path

__all__ = [
    "atomic_write_text",
    "build_patch",
    "changed_paths",
    "console",
    "deep_merge",
    "delete_path",
    "dir_exists",
    "ensure_dir",
    "file_exists",
    "get_path",
    "get_path_size",
    "print_error",
    "print_info",
    "print_panel",
    "print_success",
    "print_warning",
    "read_structured",
    "write_structured",
]
