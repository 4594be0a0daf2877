"""State management: JSON files under STATE_DIR, locking, atomic writes."""
from __future__ import annotations

import fcntl
import json
from collections.abc import Callable
from pathlib import Path

from vrcxtracker._log import log
from vrcxtracker.config import STATE_DIR


def _state_dir() -> Path:
    """Get or create the state directory."""
    STATE_DIR.mkdir(parents=True, exist_ok=True)
    return STATE_DIR


def _read_state(filename: str) -> dict:
    """Read a JSON state file. Returns {} on any error."""
    try:
        return json.loads((_state_dir() / filename).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}


def _write_state(filename: str, data: dict) -> None:
    """Write a JSON state file atomically."""
    path = _state_dir() / filename
    tmp = path.with_suffix(".tmp")
    try:
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(path)
    except OSError as e:
        log(f"State write error: {e}")


def _clear_state(filename: str) -> None:
    """Remove a state file."""
    try:
        (_state_dir() / filename).unlink(missing_ok=True)
    except OSError as e:
        log(f"State clear error: {e}")


def _locked_update(filename: str, updater: Callable[[dict], dict | None]) -> dict | None:
    """Atomic read-modify-write with file locking. updater(data) returns new data or None to delete."""
    path = _state_dir() / filename
    lock_path = path.with_suffix(".lock")
    lock_path.touch(exist_ok=True)
    fd = lock_path.open("r")
    try:
        fcntl.flock(fd, fcntl.LOCK_EX)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            data = {}
        result = updater(data)
        if result is None:
            path.unlink(missing_ok=True)
        else:
            tmp = path.with_suffix(".tmp")
            tmp.write_text(json.dumps(result, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp.replace(path)
        return result
    finally:
        fcntl.flock(fd, fcntl.LOCK_UN)
        fd.close()
