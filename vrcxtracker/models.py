"""Roster records and instance context, plus loaders for JSON snapshots."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class RosterRecord:
    """One member's presence summary for an instance visit."""

    user_id: str
    display_name: str
    last_join_at: datetime | None = None
    last_leave_at: datetime | None = None
    is_currently: bool = False
    is_instance_owner: bool = False
    is_friend: bool = False

    @property
    def has_left(self) -> bool:
        """True when the leave timestamp is newer than the last join."""
        if self.last_leave_at is None:
            return False
        if self.last_join_at is None:
            return True
        return self.last_leave_at > self.last_join_at


@dataclass(frozen=True, slots=True)
class InstanceContext:
    """The viewer's visit to one instance.

    ``location_id`` is ``"{world}:{instance}"``; the instance part may carry
    ``~``-separated tokens such as ``region(jp)`` or ``group(grp_…)``.
    """

    location_id: str
    user_id: str
    display_name: str
    world_name: str | None = None
    group_name: str | None = None
    group_owner: str | None = None
    join_id: str = ""


def _parse_time(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp. ``None`` and ``""`` map to None.

    Naive values are taken as local time and made aware, so join and
    leave times from mixed sources stay comparable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return dt if dt.tzinfo is not None else dt.astimezone()


def record_from_dict(data: dict[str, Any]) -> RosterRecord:
    """Build a RosterRecord from a snapshot member object."""
    return RosterRecord(
        user_id=str(data["user_id"]),
        display_name=str(data.get("display_name") or ""),
        last_join_at=_parse_time(data.get("last_join_at")),
        last_leave_at=_parse_time(data.get("last_leave_at")),
        is_currently=bool(data.get("is_currently", False)),
        is_instance_owner=bool(data.get("is_instance_owner", False)),
        is_friend=bool(data.get("is_friend", False)),
    )


def context_from_dict(data: dict[str, Any]) -> InstanceContext:
    """Build an InstanceContext from a snapshot context object."""
    return InstanceContext(
        location_id=str(data["location_id"]),
        user_id=str(data["user_id"]),
        display_name=str(data.get("display_name") or ""),
        world_name=data.get("world_name"),
        group_name=data.get("group_name"),
        group_owner=data.get("group_owner"),
        join_id=str(data.get("join_id", "")),
    )


def snapshot_from_dict(data: dict[str, Any]) -> tuple[InstanceContext, list[RosterRecord]]:
    """Build (context, records) from ``{"context": {...}, "members": [...]}``."""
    context = context_from_dict(data["context"])
    records = [record_from_dict(m) for m in data.get("members", [])]
    return context, records


def load_snapshots(data: Any) -> list[tuple[InstanceContext, list[RosterRecord]]]:
    """Accept a single snapshot object or a list of them."""
    if isinstance(data, dict):
        return [snapshot_from_dict(data)]
    if isinstance(data, list):
        return [snapshot_from_dict(item) for item in data]
    raise ValueError(f"Snapshot must be an object or a list, got {type(data).__name__}")
