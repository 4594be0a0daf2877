"""Snapshot handler and diagnostics for python3 -m vrcxtracker."""
from __future__ import annotations

import json
import sys

from vrcxtracker import __version__
from vrcxtracker._log import log
from vrcxtracker.config import STATE_DIR, WEBHOOK_URL, validate_webhook_url
from vrcxtracker.errors import TrackerError
from vrcxtracker.models import InstanceContext, RosterRecord, load_snapshots
from vrcxtracker.notifier import send_update


def _read_stdin_snapshots() -> list[tuple[InstanceContext, list[RosterRecord]]] | None:
    """Parse stdin into snapshots. Logs and returns None when the input is unusable."""
    raw = sys.stdin.read()
    if not raw.strip():
        log("Empty stdin, nothing to do")
        return None
    try:
        return load_snapshots(json.loads(raw))
    except json.JSONDecodeError as e:
        log(f"Invalid JSON on stdin: {e}")
    except (KeyError, TypeError, ValueError) as e:
        log(f"Invalid snapshot: {e!r}")
    return None


def main() -> None:
    """Read roster snapshots from stdin and post or update their embeds."""
    snapshots = _read_stdin_snapshots()
    if snapshots is None:
        sys.exit(1)

    failed = 0
    for context, records in snapshots:
        try:
            message_id = send_update(context, records)
        except TrackerError as e:
            log(f"Send failed for {context.location_id}: {e}")
            failed += 1
            continue
        print(f"📨 {context.location_id} → message {message_id}")

    if failed:
        sys.exit(1)


def health_check() -> None:
    """Run self-diagnostics and print results."""
    checks: list[tuple[str, bool, str]] = []

    url_errors = validate_webhook_url()
    checks.append(("Webhook URL", not url_errors,
                   _mask_url(WEBHOOK_URL) if not url_errors else "; ".join(url_errors)))

    state_ok = False
    state_err = ""
    try:
        STATE_DIR.mkdir(parents=True, exist_ok=True)
        test_file = STATE_DIR / ".health_check"
        test_file.write_text("ok")
        test_file.unlink()
        state_ok = True
    except OSError as e:
        state_err = str(e)
    checks.append(("State dir", state_ok, str(STATE_DIR) if state_ok else state_err))

    corrupt_files: list[str] = []
    if STATE_DIR.exists():
        for json_file in STATE_DIR.glob("*.json"):
            try:
                json.loads(json_file.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError):
                corrupt_files.append(json_file.name)
    state_clean = len(corrupt_files) == 0
    checks.append(("State files", state_clean,
                   "all valid" if state_clean else f"corrupt: {', '.join(corrupt_files[:3])}"))

    print(f"🩺 vrcxtracker v{__version__} health check")
    print("──────────────────────────────────────")
    all_ok = True
    for name, ok, detail in checks:
        icon = "✅" if ok else "❌"
        print(f"  {icon} {name:16s} {detail}")
        if not ok:
            all_ok = False
    print("──────────────────────────────────────")
    if not all_ok:
        sys.exit(1)


def _mask_url(url: str) -> str:
    """Hide the webhook token: keep everything up to the last path segment."""
    if not url:
        return "(not set)"
    head, _, token = url.rstrip("/").rpartition("/")
    return f"{head}/{token[:4]}***" if head else url[:8] + "***"


if __name__ == "__main__":
    from vrcxtracker.cli import cli_main
    cli_main()
