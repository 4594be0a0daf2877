"""Member line formatting: markdown escaping, timestamps, durations, tiers."""
from __future__ import annotations

import re
from datetime import datetime, timedelta
from enum import Enum

from vrcxtracker.config import EMOJI, TIME_FORMAT, UNKNOWN_TIME, USER_URL
from vrcxtracker.embed import text_length
from vrcxtracker.models import RosterRecord

_UNDERSCORE_RUN_RE = re.compile(r"__(_)?(?!:\d+>)")
_EMOJI_TOKEN_BEFORE_RE = re.compile(r"<a?:[^\n]+\Z")
_URL_BEFORE_RE = re.compile(r"https?://\S+\Z")


class DetailTier(Enum):
    """How much of a member line is rendered, richest first."""

    FULL = "full"
    COMPACT = "compact"
    MINIMAL = "minimal"


def _is_protected(text: str, pos: int) -> bool:
    """True when ``pos`` sits inside an emoji/mention token or a URL."""
    head = text[:pos]
    return bool(_EMOJI_TOKEN_BEFORE_RE.search(head) or _URL_BEFORE_RE.search(head))


def sanitize(text: str) -> str:
    """Escape Discord underline markers (``__`` / ``___``) outside links and emoji.

    Three-underscore runs alternate between ``_\\_\\_`` and ``\\_\\__`` so
    that paired runs keep balanced emphasis boundaries.
    """
    if not text:
        return ""
    idx = 0

    def _replace(m: re.Match[str]) -> str:
        nonlocal idx
        if _is_protected(text, m.start()):
            return m.group(0)
        if m.group(1):
            idx += 1
            return f"{m.group(1)}\\_\\_" if idx % 2 == 1 else f"\\_\\_{m.group(1)}"
        return "\\_\\_"

    return _UNDERSCORE_RUN_RE.sub(_replace, text)


def format_datetime(dt: datetime | None) -> str:
    """Format a timestamp with TIME_FORMAT in local time. None → empty string."""
    if dt is None:
        return ""
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.strftime(TIME_FORMAT)


def format_duration(delta: timedelta) -> str:
    """Human-readable elapsed time, e.g. ``1 day 2 hours 5 seconds``.

    Zero units are omitted; an all-zero duration is ``0 seconds``; negative
    durations yield an empty string.
    """
    total = int(delta.total_seconds())
    if total < 0:
        return ""
    if total == 0:
        return "0 seconds"
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    parts = []
    for value, unit in ((days, "day"), (hours, "hour"), (minutes, "minute"), (seconds, "second")):
        if value:
            parts.append(f"{value} {unit}" if value == 1 else f"{value} {unit}s")
    return " ".join(parts)


def member_emoji(record: RosterRecord, viewer_id: str) -> str:
    """Status glyph: owner, then self, then friend, else default."""
    if record.is_instance_owner:
        return EMOJI["owner"]
    if record.user_id == viewer_id:
        return EMOJI["self"]
    if record.is_friend:
        return EMOJI["friend"]
    return EMOJI["other"]


def format_member_times(record: RosterRecord) -> str:
    """Join/leave annotation appended after the member name."""
    joined = record.last_join_at
    if record.is_currently and joined is not None:
        return f": {format_datetime(joined)} (<t:{int(joined.timestamp())}:R>)"

    join_text = format_datetime(joined) if joined is not None else UNKNOWN_TIME
    if record.has_left:
        leave = record.last_leave_at
        text = f": {join_text} - {format_datetime(leave)}"
        if joined is not None and leave is not None:
            duration = format_duration(leave - joined)
            if duration:
                text += f" ({duration})"
        return text
    return f": {join_text}"


def _display_name(record: RosterRecord) -> str:
    name = record.display_name.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return f"`{sanitize(name)}`"


def render_member_line(record: RosterRecord, tier: DetailTier, viewer_id: str) -> str:
    """Render one roster record as a single line at the given tier."""
    emoji = member_emoji(record, viewer_id)
    name = _display_name(record)
    match tier:
        case DetailTier.FULL:
            url = USER_URL.format(user_id=record.user_id)
            return f"{emoji} [{name}]({url}){format_member_times(record)}"
        case DetailTier.COMPACT:
            return f"{emoji} {name}{format_member_times(record)}"
        case DetailTier.MINIMAL:
            return f"{emoji} {name}"
    raise ValueError(f"Unknown detail tier: {tier!r}")


def _truncate(text: str, max_len: int) -> str:
    """Truncate text to max_len UTF-16 units with an ellipsis."""
    if text_length(text) <= max_len:
        return text
    out = text[: max_len - 1]
    while text_length(out) > max_len - 1:
        out = out[:-1]
    return out + "…"
