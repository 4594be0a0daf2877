"""Shared fixtures for vrcxtracker tests."""
from __future__ import annotations

import importlib
import os
import sys
import time
from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from pathlib import Path
from types import ModuleType
from typing import Any

import pytest

TEST_WEBHOOK_URL = "https://discord.test/api/webhooks/123/secret-token"


@pytest.fixture()
def _add_project_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Add the project root to sys.path so we can import vrcxtracker."""
    root = str(Path(__file__).resolve().parent.parent)
    if root not in sys.path:
        monkeypatch.syspath_prepend(root)


@pytest.fixture()
def local_tz() -> Iterator[Callable[[str], None]]:
    """Pin the process time zone to a POSIX TZ string. UTC unless a test changes it."""
    saved = os.environ.get("TZ")

    def _set(zone: str) -> None:
        os.environ["TZ"] = zone
        time.tzset()

    _set("UTC0")
    yield _set
    if saved is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = saved
    time.tzset()


@pytest.fixture()
def tracker(
    _add_project_root: None, local_tz: Callable[[str], None],  # noqa: ARG001
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path,
) -> Any:
    """Import vrcxtracker with a sandboxed state directory and no real webhook calls."""
    import vrcxtracker as _tracker

    # __init__.py re-exports can shadow submodule names; use sys.modules.
    def _submod(name: str) -> ModuleType:
        importlib.import_module(f"vrcxtracker.{name}")
        return sys.modules[f"vrcxtracker.{name}"]

    _config = _submod("config")
    _log = _submod("_log")
    all_mods = [
        _config,
        _submod("state"),
        _submod("formatting"),
        _submod("webhook"),
        _submod("messages"),
        _submod("notifier"),
        _submod("__main__"),
        _submod("cli"),
    ]

    state_dir = tmp_path / "vrcxtracker-state"
    state_dir.mkdir()

    # Patch each attribute only in modules that actually have it
    patches: dict[str, object] = {
        "STATE_DIR": state_dir,
        "CONFIG_PATH": tmp_path / "config.json",
        "LOG_PATH": state_dir / "vrcxtracker.log",
        "DRY_RUN": False,
        "FILE_LOGGING": False,
        "WEBHOOK_URL": TEST_WEBHOOK_URL,
        "TIME_FORMAT": "%Y/%m/%d %H:%M:%S",
    }
    for attr, value in patches.items():
        for mod in all_mods:
            if hasattr(mod, attr):
                monkeypatch.setattr(mod, attr, value)

    # Clear caches
    monkeypatch.setattr(_config, "_tracker_config", None)
    monkeypatch.setattr(_log, "_file_logger", None)

    # Patch the re-exports on the package itself for direct access
    for attr, value in patches.items():
        if hasattr(_tracker, attr):
            monkeypatch.setattr(_tracker, attr, value)

    return _tracker


@pytest.fixture()
def mock_webhook(tracker: Any, monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, str, dict[str, Any]]]:  # noqa: ARG001
    """Replace _webhook_api with a call recorder. POSTs get sequential message ids."""
    calls: list[tuple[str, str, dict[str, Any]]] = []

    def fake_api(method: str, url: str, payload: dict[str, Any], timeout: int = 10) -> dict[str, Any] | None:  # noqa: ARG001
        calls.append((method, url, payload))
        if method == "POST":
            return {"id": str(1000 + len(calls))}
        return {}

    monkeypatch.setattr(sys.modules["vrcxtracker.webhook"], "_webhook_api", fake_api)
    return calls


@pytest.fixture()
def now() -> datetime:
    return datetime(2024, 1, 2, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def sample_context(tracker: Any) -> Any:
    """The viewer's visit to a Friends+ instance in Japan."""
    return tracker.InstanceContext(
        location_id="wrld_4cf554b4-430c-4f8f-b53e-1f294eed230b:12345~hidden(usr_aaaa1111)~region(jp)",
        user_id="usr_aaaa1111",
        display_name="Viewer",
        world_name="The Great Pug",
        join_id="join-1",
    )


@pytest.fixture()
def sample_records(tracker: Any) -> list[Any]:
    """Viewer (owner) present, a friend present, one member who left."""
    return [
        tracker.RosterRecord(
            user_id="usr_aaaa1111", display_name="Viewer",
            last_join_at=datetime(2024, 1, 2, 10, 0, 0, tzinfo=timezone.utc),
            is_currently=True, is_instance_owner=True,
        ),
        tracker.RosterRecord(
            user_id="usr_bbbb2222", display_name="Friendly",
            last_join_at=datetime(2024, 1, 2, 10, 5, 0, tzinfo=timezone.utc),
            is_currently=True, is_friend=True,
        ),
        tracker.RosterRecord(
            user_id="usr_cccc3333", display_name="Passerby",
            last_join_at=datetime(2024, 1, 2, 10, 0, 0, tzinfo=timezone.utc),
            last_leave_at=datetime(2024, 1, 2, 11, 30, 0, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture()
def sample_snapshot() -> dict[str, Any]:
    """A snapshot as the CLI reads it from stdin."""
    return {
        "context": {
            "location_id": "wrld_4cf554b4-430c-4f8f-b53e-1f294eed230b:12345~region(eu)",
            "user_id": "usr_aaaa1111",
            "display_name": "Viewer",
            "world_name": "The Great Pug",
            "join_id": "join-42",
        },
        "members": [
            {
                "user_id": "usr_aaaa1111",
                "display_name": "Viewer",
                "last_join_at": "2024-01-02T10:00:00Z",
                "is_currently": True,
            },
            {
                "user_id": "usr_cccc3333",
                "display_name": "Passerby",
                "last_join_at": "2024-01-02T10:00:00Z",
                "last_leave_at": "2024-01-02T10:30:00Z",
            },
        ],
    }
