"""Command-line interface for vrcxtracker."""
from __future__ import annotations

import json
import sys

from vrcxtracker._log import log, setup_file_logging
from vrcxtracker.config import FILE_LOGGING, STATE_DIR


def _do_compose() -> None:
    """Compose embeds for stdin snapshots and print the payload JSON."""
    from vrcxtracker.__main__ import _read_stdin_snapshots
    from vrcxtracker.composer import compose
    from vrcxtracker.errors import TrackerError

    snapshots = _read_stdin_snapshots()
    if snapshots is None:
        sys.exit(1)

    payloads = []
    for context, records in snapshots:
        try:
            message = compose(context, records)
        except TrackerError as e:
            log(f"Compose failed for {context.location_id}: {e}")
            sys.exit(1)
        payloads.append(message.to_payload())

    output = payloads[0] if len(payloads) == 1 else payloads
    print(json.dumps(output, ensure_ascii=False, indent=2))


def _do_send() -> None:
    """Post or update embeds for stdin snapshots."""
    from vrcxtracker.__main__ import main
    main()


def _do_health() -> None:
    """Run health check diagnostics."""
    from vrcxtracker.__main__ import health_check
    health_check()


def _do_version() -> None:
    """Print version string."""
    from vrcxtracker import __version__
    print(f"🛰️ vrcxtracker {__version__}")


def _do_reset() -> None:
    """Forget every posted message so the next send starts fresh."""
    from vrcxtracker.messages import clear_message_ids

    clear_message_ids()
    print("🧹 cleared message map")


def _do_config() -> None:
    """Print effective configuration."""
    from vrcxtracker.__main__ import _mask_url
    from vrcxtracker.config import (
        CONFIG_PATH,
        HTTP_TIMEOUT,
        LOG_PATH,
        TIME_FORMAT,
        WEBHOOK_URL,
        validate_webhook_url,
    )

    print("⚙️  vrcxtracker config")
    print("──────────────────────────────────────")
    print(f"  🔗 webhook_url:      {_mask_url(WEBHOOK_URL)}")
    print(f"  ⏱️  http_timeout:     {HTTP_TIMEOUT}s")
    print(f"  🕒 time_format:      {TIME_FORMAT}")
    print(f"  📁 state_dir:        {STATE_DIR}")
    print(f"  📄 config_file:      {CONFIG_PATH}")
    print(f"  📝 log_file:         {LOG_PATH if FILE_LOGGING else '(disabled)'}")
    for error in validate_webhook_url():
        print(f"  ❌ {error}")
    print("──────────────────────────────────────")


def _print_usage() -> None:
    from vrcxtracker import __version__
    print(
        f"🛰️ vrcxtracker {__version__}\n"
        "\n"
        "usage: vrcxtracker <command> [--dry-run] < snapshot.json\n"
        "\n"
        "commands:\n"
        "  🧩 compose  print the embed payload for stdin snapshots\n"
        "  📨 send     post or update the Discord message\n"
        "  🩺 health   run self-diagnostics\n"
        "  🧹 reset    forget posted message ids\n"
        "  ⚙️  config   print effective configuration\n"
        "  🏷️  version  print version\n"
        "\n"
        "flags:\n"
        "  --version       alias for the version command\n"
        "  --dry-run       print payloads instead of calling the webhook\n"
    )


# All recognised subcommands and their flag aliases
_SUBCOMMANDS: frozenset[str] = frozenset({
    "compose", "send", "health", "reset", "config", "version",
})

_FLAG_MAP: dict[str, str] = {
    "--compose": "compose",
    "--send": "send",
    "--health": "health",
    "--reset": "reset",
    "--config": "config",
    "--version": "version",
}


def cli_main() -> None:
    """Unified CLI entry point.

    Piped stdin without a subcommand is treated as ``send``. Otherwise
    dispatches CLI subcommands.
    """
    args = sys.argv[1:]

    # --dry-run is consumed by config.py at import time; strip it from dispatch args
    args = [a for a in args if a != "--dry-run"]

    if FILE_LOGGING:
        setup_file_logging(STATE_DIR)

    if "--version" in args or "-V" in args:
        _do_version()
        return

    # Piped snapshot with no CLI intent
    if not args and not sys.stdin.isatty():
        _do_send()
        return

    if not args:
        _print_usage()
        return

    cmd = _FLAG_MAP.get(args[0], args[0])
    if cmd not in _SUBCOMMANDS:
        print(f"❌ vrcxtracker: unknown command '{cmd}'", file=sys.stderr)
        _print_usage()
        sys.exit(1)

    if cmd == "compose":
        _do_compose()
    elif cmd == "send":
        _do_send()
    elif cmd == "health":
        _do_health()
    elif cmd == "reset":
        _do_reset()
    elif cmd == "config":
        _do_config()
    elif cmd == "version":
        _do_version()
