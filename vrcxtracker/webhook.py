"""Discord webhook transport: post a new embed message, edit an existing one."""
from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from vrcxtracker import __version__
from vrcxtracker._log import log
from vrcxtracker._types import EmbedPayload
from vrcxtracker.config import DRY_RUN, HTTP_TIMEOUT, WEBHOOK_URL


def _endpoint(path: str = "", **query: str) -> str:
    """Webhook URL with an extra path suffix and query parameters merged in."""
    parts = urllib.parse.urlsplit(WEBHOOK_URL)
    params = dict(urllib.parse.parse_qsl(parts.query))
    params.update(query)
    return urllib.parse.urlunsplit((
        parts.scheme, parts.netloc, parts.path.rstrip("/") + path,
        urllib.parse.urlencode(params), "",
    ))


def _webhook_api(method: str, url: str, payload: dict, timeout: int = HTTP_TIMEOUT) -> dict | None:
    """Call the webhook endpoint. Returns parsed JSON ({} for empty bodies) or None."""
    data = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(
        url, data=data,
        headers={
            "Content-Type": "application/json",
            "User-Agent": f"vrcxtracker/{__version__}",
        },
        method=method,
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read()
            return json.loads(body) if body else {}
    except (urllib.error.URLError, urllib.error.HTTPError, TimeoutError, json.JSONDecodeError) as e:
        log(f"Webhook API [{method}]: {e}")
        return None


def send_message(embed: EmbedPayload) -> int | None:
    """Post a new message carrying ``embed``. Returns the message id, None on failure."""
    if DRY_RUN:
        print("[dry-run] send_message()")
        print(json.dumps(embed, ensure_ascii=False, indent=2))
        return 99999

    if not WEBHOOK_URL:
        log("Discord webhook URL not set")
        return None

    payload: dict[str, Any] = {"content": "", "embeds": [embed]}
    result = _webhook_api("POST", _endpoint(wait="true"), payload)
    if result and result.get("id"):
        return int(result["id"])

    log("Webhook send failed")
    return None


def update_message(message_id: int, embed: EmbedPayload) -> bool:
    """Replace the embed of a message this webhook posted earlier."""
    if DRY_RUN:
        print(f"[dry-run] update_message(message_id={message_id})")
        print(json.dumps(embed, ensure_ascii=False, indent=2))
        return True

    if not WEBHOOK_URL:
        log("Discord webhook URL not set")
        return False

    result = _webhook_api("PATCH", _endpoint(f"/messages/{message_id}"), {"embeds": [embed]})
    if result is None:
        log(f"Error updating message {message_id}")
        return False
    return True
