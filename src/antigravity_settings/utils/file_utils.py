"""File system utilities for antigravity-settings."""

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

JSON_INDENT = 2
YAML_SUFFIXES = (".yaml", ".yml")


def ensure_dir(path: Path) -> None:
    """Ensure directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists
    """
    path.mkdir(parents=True, exist_ok=True)


def file_exists(path: Path) -> bool:
    """Check if file exists.

    Args:
        path: Path to check

    Returns:
        True if file exists, False otherwise
    """
    return path.exists() and path.is_file()


def dir_exists(path: Path) -> bool:
    """Check if directory exists."""
    return path.exists() and path.is_dir()


def atomic_write_text(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` atomically.

    Data goes to a temporary file in the same directory, is flushed and
    fsync'd, then ``os.replace``d onto ``path``. A crash at any point leaves
    either the previous file or the complete new one. The temporary file is
    removed if anything fails.

    Args:
        path: Target file path
        content: Text to write (UTF-8)

    Raises:
        OSError: If the directory cannot be created or the write fails.
    """
    ensure_dir(path.parent)
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        tmp_path = None
    finally:
        if tmp_path is not None and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError as e:
                logger.debug(f"Could not remove temp file {tmp_path}: {e}")


def _inline_list_dumper() -> type[yaml.SafeDumper]:
    """Build a YAML dumper that keeps short lists inline."""

    class InlineListDumper(yaml.SafeDumper):
        pass

    def represent_list(dumper: yaml.SafeDumper, items: list[Any]) -> yaml.nodes.Node:
        # Keep short lists (<=3 items) inline, longer ones multi-line
        if len(items) <= 3:
            return dumper.represent_sequence("tag:yaml.org,2002:seq", items, flow_style=True)
        return dumper.represent_sequence("tag:yaml.org,2002:seq", items, flow_style=False)

    InlineListDumper.add_representer(list, represent_list)
    return InlineListDumper


def dump_structured(path: Path, data: dict[str, Any]) -> str:
    """Serialize ``data`` in the format implied by ``path``'s suffix.

    ``.yaml``/``.yml`` produce YAML, anything else JSON.
    """
    if path.suffix.lower() in YAML_SUFFIXES:
        return yaml.dump(
            data,
            Dumper=_inline_list_dumper(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    return json.dumps(data, indent=JSON_INDENT, ensure_ascii=False) + "\n"


def read_structured(path: Path) -> Any:
    """Read a JSON or YAML document, choosing the parser by suffix.

    Args:
        path: Path to the document

    Returns:
        Parsed data (None for an empty document)

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If the file cannot be read
        ValueError: If the content cannot be parsed (json.JSONDecodeError
            and yaml.YAMLError are re-raised as ValueError)
    """
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return None
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Cannot parse {path}: {e}") from e


def write_structured(path: Path, data: dict[str, Any]) -> None:
    """Atomically write ``data`` as JSON or YAML (by suffix)."""
    atomic_write_text(path, dump_structured(path, data))


def get_path_size(path: Path) -> int:
    """Total size in bytes of a file or directory tree.

    Unreadable entries are skipped.
    """
    if path.is_file():
        return path.stat().st_size
    total = 0
    for item in path.rglob("*"):
        try:
            if item.is_file() and not item.is_symlink():
                total += item.stat().st_size
        except OSError as e:
            logger.debug(f"Skipping {item} while sizing {path}: {e}")
    return total


def delete_path(path: Path) -> bool:
    """Delete a file or directory tree if it exists.

    Returns:
        True if something was deleted, False if the path did not exist
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False


def empty_dir(path: Path) -> int:
    """Delete every entry inside ``path``, keeping the directory itself.

    Returns:
        Number of entries removed
    """
    if not dir_exists(path):
        return 0
    removed = 0
    for item in path.iterdir():
        if delete_path(item):
            removed += 1
    return removed
