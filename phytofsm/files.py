"""Locating and reading definition and template files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from phytofsm.errors import InvalidFileError

PathLike = Union[str, "os.PathLike[str]"]


def _is_relative_marker(path: str) -> bool:
    return path in (".", "..") or path.startswith(("./", "../"))


def resolve_path(
    file_path: str,
    caller_dir: Optional[PathLike] = None,
    manifest_dir: Optional[PathLike] = None,
) -> Path:
    """Resolve a definition file path.

    Absolute paths are used as they are; paths starting with ``./`` or ``../``
    are taken relative to the caller's directory; any other relative path is
    looked up under ``src/`` of the project directory. Surrounding double
    quotes are removed first.
    """
    stripped = file_path.strip('"')
    path = Path(stripped)
    if path.is_absolute():
        return path
    if _is_relative_marker(stripped):
        base = Path(caller_dir) if caller_dir is not None else Path(".")
        return base / stripped
    base = Path(manifest_dir) if manifest_dir is not None else Path(".")
    return base / "src" / stripped


def read_text(path: PathLike) -> str:
    """Read a whole file as text."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidFileError(str(path), str(exc)) from exc