"""Configuration: paths, webhook settings, display constants, embed caps."""
from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any

# ── Paths ────────────────────────────────────────────────────────────────────

CONFIG_DIR = Path(os.environ.get("VRCXTRACKER_HOME", "") or Path.home() / ".vrcxtracker")
CONFIG_PATH = CONFIG_DIR / "config.json"
STATE_DIR = CONFIG_DIR / "state"
LOG_PATH = STATE_DIR / "vrcxtracker.log"

# ── Config File Loader ───────────────────────────────────────────────────────

_tracker_config: dict | None = None


def _load_config() -> dict[str, Any]:
    """Load ~/.vrcxtracker/config.json (cached per invocation)."""
    global _tracker_config
    if _tracker_config is None:
        try:
            _tracker_config = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            _tracker_config = {}
    return _tracker_config  # type: ignore[return-value]


def _cfg_bool(env_key: str, config_key: str, default: bool) -> bool:
    """Read a boolean: env var ("1"/"0") → config file (true/false) → default."""
    env = os.environ.get(env_key)
    if env is not None:
        return env == "1"
    val = _load_config().get(config_key)
    if isinstance(val, bool):
        return val
    return default


def _cfg_int(env_key: str, config_key: str, default: int) -> int:
    """Read an integer: env var → config file → default."""
    env = os.environ.get(env_key)
    if env is not None:
        return int(env)
    val = _load_config().get(config_key)
    if isinstance(val, int) and not isinstance(val, bool):
        return val
    return default


def _cfg_str(env_key: str, config_key: str, default: str) -> str:
    """Read a string: env var → config file → default."""
    env = os.environ.get(env_key)
    if env is not None:
        return env
    val = _load_config().get(config_key)
    if isinstance(val, str):
        return val
    return default


# ── Webhook ──────────────────────────────────────────────────────────────────

WEBHOOK_URL = _cfg_str("VRCXTRACKER_WEBHOOK_URL", "discord_webhook_url", "").strip()
HTTP_TIMEOUT = _cfg_int("VRCXTRACKER_TIMEOUT", "http_timeout", 10)
FILE_LOGGING = _cfg_bool("VRCXTRACKER_FILE_LOG", "file_logging", False)


def validate_webhook_url(url: str | None = None) -> list[str]:
    """Validate the webhook URL format. Returns list of error strings."""
    value = WEBHOOK_URL if url is None else url.strip()
    errors: list[str] = []
    if not value:
        errors.append("discord_webhook_url: not set")
    elif not value.lower().startswith(("http://", "https://")):
        errors.append("discord_webhook_url: must start with http:// or https://")
    return errors

# ── Display ──────────────────────────────────────────────────────────────────

TIME_FORMAT = _cfg_str("VRCXTRACKER_TIME_FORMAT", "time_format", "%Y/%m/%d %H:%M:%S")

# ── CLI Mode ─────────────────────────────────────────────────────────────────

DRY_RUN = "--dry-run" in sys.argv

# ── Constants ────────────────────────────────────────────────────────────────

EMOJI: dict[str, str] = {
    "owner": "👑",
    "self": "👤",
    "friend": "\u2b50\ufe0f",
    "other": "\u2b1c\ufe0f",
}

CURRENT_FIELD_TITLE = "Current Members"
PAST_FIELD_TITLE = "Past Members"
CONTINUATION_FIELD_TITLE = "\u200b"
ELLIPSIS_LINE = "..."
UNKNOWN_TIME = "Unknown"

COLOR_ACTIVE = 0x2ECC71
COLOR_INACTIVE = 0xFFFF00

USER_URL = "https://vrchat.com/home/user/{user_id}"
LAUNCH_URL = "https://vrchat.com/home/launch?worldId={world_id}&instanceId={instance_id}"

# Discord embed caps, counted in UTF-16 code units.
MAX_EMBED_LENGTH = 6000
MAX_FIELD_COUNT = 25
MAX_FIELD_NAME_LENGTH = 256
MAX_FIELD_VALUE_LENGTH = 1024
MAX_TITLE_LENGTH = 256
MAX_DESCRIPTION_LENGTH = 4096
MAX_AUTHOR_NAME_LENGTH = 256
MAX_FOOTER_LENGTH = 2048
