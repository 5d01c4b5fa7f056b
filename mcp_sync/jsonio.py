from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger as log


class SyncError(Exception):
    """Base error for file-level sync failures, tagged with the offending path"""

    def __init__(self, message: str, path: Path | None = None):
        self.message = message
        self.path = path
        super().__init__(self.message)


class FileAccessError(SyncError):
    pass


class JsonParseError(SyncError):
    pass


def read_json_file(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise JsonParseError(f"Malformed JSON at {path}: not valid UTF-8 ({e})", path) from e
    except OSError as e:
        raise FileAccessError(f"Failed to read {path}: {e}", path) from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise JsonParseError(f"Malformed JSON at {path}: {e}", path) from e


def ensure_parent_dir(path: Path) -> None:
    parent = path.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileAccessError(f"Failed to create directory {parent}: {e}", parent) from e


def write_json_file(path: Path, data: Any) -> None:
    """Write `data` as pretty JSON, replacing `path` atomically.

    The document is written to a temp file in the same directory and moved into
    place, so readers never see a half-written file.
    """
    ensure_parent_dir(path)
    try:
        tmp_fd, tmp_path = tempfile.mkstemp(prefix=path.name + ".", dir=str(path.parent))
    except OSError as e:
        raise FileAccessError(f"Failed to write {path}: {e}", path) from e
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        # Use replace to be atomic on POSIX
        Path(tmp_path).replace(path)
    except OSError as e:
        raise FileAccessError(f"Failed to write {path}: {e}", path) from e
    finally:
        Path(tmp_path).unlink(missing_ok=True)
    log.debug("Wrote JSON to {}", path)
