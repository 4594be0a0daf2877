"""Discord embed values, size measurement and the caps predicate."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, NamedTuple

from vrcxtracker.config import (
    MAX_AUTHOR_NAME_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_EMBED_LENGTH,
    MAX_FIELD_COUNT,
    MAX_FIELD_NAME_LENGTH,
    MAX_FIELD_VALUE_LENGTH,
    MAX_FOOTER_LENGTH,
    MAX_TITLE_LENGTH,
)

if TYPE_CHECKING:
    from vrcxtracker._types import EmbedPayload
    from vrcxtracker.composer import FormattingPolicy


class EmbedLimits(NamedTuple):
    total: int
    field_count: int
    field_name: int
    field_value: int
    title: int
    description: int
    author_name: int
    footer: int


EMBED_LIMITS = EmbedLimits(
    total=MAX_EMBED_LENGTH,
    field_count=MAX_FIELD_COUNT,
    field_name=MAX_FIELD_NAME_LENGTH,
    field_value=MAX_FIELD_VALUE_LENGTH,
    title=MAX_TITLE_LENGTH,
    description=MAX_DESCRIPTION_LENGTH,
    author_name=MAX_AUTHOR_NAME_LENGTH,
    footer=MAX_FOOTER_LENGTH,
)


def text_length(text: str) -> int:
    """Length in UTF-16 code units, the unit Discord counts embed text in."""
    return len(text.encode("utf-16-le")) // 2


@dataclass(frozen=True, slots=True)
class Segment:
    """One embed field: a titled chunk of member lines."""

    name: str
    value: str

    @property
    def lines(self) -> list[str]:
        return self.value.split("\n") if self.value else []


@dataclass(frozen=True, slots=True)
class EmbedHeader:
    title: str
    url: str
    description: str
    author_name: str
    footer_text: str
    color: int
    timestamp: datetime

    @property
    def length(self) -> int:
        return (
            text_length(self.title)
            + text_length(self.description)
            + text_length(self.author_name)
            + text_length(self.footer_text)
        )


def embed_length(header: EmbedHeader, segments: Sequence[Segment]) -> int:
    """Total embed size as Discord measures it (text fields plus field names/values)."""
    return header.length + sum(text_length(s.name) + text_length(s.value) for s in segments)


def violations(header: EmbedHeader, segments: Sequence[Segment],
               limits: EmbedLimits = EMBED_LIMITS) -> list[str]:
    """List every cap the header/segments combination breaks."""
    problems: list[str] = []
    if text_length(header.title) > limits.title:
        problems.append("title too long")
    if text_length(header.description) > limits.description:
        problems.append("description too long")
    if text_length(header.author_name) > limits.author_name:
        problems.append("author name too long")
    if text_length(header.footer_text) > limits.footer:
        problems.append("footer too long")
    if len(segments) > limits.field_count:
        problems.append(f"{len(segments)} fields > {limits.field_count}")
    for i, seg in enumerate(segments):
        if text_length(seg.name) > limits.field_name:
            problems.append(f"field {i} name too long")
        value_len = text_length(seg.value)
        if value_len == 0:
            problems.append(f"field {i} value empty")
        elif value_len > limits.field_value:
            problems.append(f"field {i} value {value_len} > {limits.field_value}")
    total = embed_length(header, segments)
    if total > limits.total:
        problems.append(f"total length {total} > {limits.total}")
    return problems


def fits(header: EmbedHeader, segments: Sequence[Segment], limits: EmbedLimits = EMBED_LIMITS) -> bool:
    return not violations(header, segments, limits)


@dataclass(frozen=True, slots=True)
class ComposedMessage:
    """Header plus ordered fields, guaranteed to satisfy EMBED_LIMITS."""

    header: EmbedHeader
    segments: tuple[Segment, ...]
    policy: FormattingPolicy | None = None
    reduced: bool = False

    @property
    def length(self) -> int:
        return embed_length(self.header, self.segments)

    def to_payload(self) -> EmbedPayload:
        """Discord embed JSON object."""
        h = self.header
        return {
            "title": h.title,
            "url": h.url,
            "description": h.description,
            "color": h.color,
            "author": {"name": h.author_name},
            "footer": {"text": h.footer_text},
            "timestamp": h.timestamp.isoformat(),
            "fields": [{"name": s.name, "value": s.value, "inline": False} for s in self.segments],
        }


def validate(message: ComposedMessage, limits: EmbedLimits = EMBED_LIMITS) -> bool:
    """True when the message satisfies every cap."""
    return fits(message.header, message.segments, limits)


def equal_without_timestamp(left: dict[str, Any] | None, right: dict[str, Any] | None) -> bool:
    """Compare two embed payloads ignoring their ``timestamp`` values."""
    if left is None or right is None:
        return left is right
    return {k: v for k, v in left.items() if k != "timestamp"} == {
        k: v for k, v in right.items() if k != "timestamp"
    }
