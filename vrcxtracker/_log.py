"""Logging utility for vrcxtracker."""
from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

_file_logger: logging.Logger | None = None


def setup_file_logging(state_dir: Path) -> None:
    """Configure rotating file handler for long-running send loops."""
    global _file_logger
    log_path = state_dir / "vrcxtracker.log"
    state_dir.mkdir(parents=True, exist_ok=True)
    _file_logger = logging.getLogger("vrcxtracker")
    _file_logger.setLevel(logging.INFO)
    if not _file_logger.handlers:
        handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter("%(asctime)s %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
        _file_logger.addHandler(handler)


def log(msg: str) -> None:
    """Log to stderr, and to the rotating file once it is configured."""
    if _file_logger:
        _file_logger.info(msg)
    print(f"[vrcxtracker] {msg}", file=sys.stderr)
