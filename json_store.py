from __future__ import annotations

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any


def read_json_bytes(path: Path) -> bytes:
    """
    Read the raw bytes of a JSON file.

    Missing or unreadable files raise OSError; the caller decides whether
    that is fatal.
    """
    return path.read_bytes()


def dump_json(payload: Any, *, indent: int = 2, sort_keys: bool = False) -> str:
    # NaN/Infinity are not JSON; refuse them rather than write an unreadable file.
    return json.dumps(payload, indent=indent, sort_keys=sort_keys, ensure_ascii=False, allow_nan=False) + "\n"


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _fsync_dir(directory: Path) -> None:
    if not hasattr(os, "O_DIRECTORY"):
        return
    fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = False) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.

    The temp file lives in the target directory so the final rename never
    crosses a filesystem. Serialization happens before anything touches disk.
    The replaced file keeps its permissions. The directory is synced after the
    rename so the new entry survives a power loss.
    """
    text = dump_json(payload, indent=indent, sort_keys=sort_keys)
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, mode)
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    _fsync_dir(path.parent)
