"""Compose a roster into one Discord embed that fits every size cap.

Members are rendered at the richest detail tiers that fit: each policy in
``POLICIES`` renders the current and past groups, packs the lines into
fields of at most 1024 units, and the first combination that passes
``embed.fits`` wins. When even the all-minimal policy overflows, the
reducer trims fields and lines until the embed fits, or raises
``CompositionExhaustedError``.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import NamedTuple

from vrcxtracker import __version__
from vrcxtracker._log import log
from vrcxtracker.config import (
    COLOR_ACTIVE,
    COLOR_INACTIVE,
    CONTINUATION_FIELD_TITLE,
    CURRENT_FIELD_TITLE,
    ELLIPSIS_LINE,
    LAUNCH_URL,
    MAX_AUTHOR_NAME_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_FIELD_COUNT,
    MAX_FIELD_VALUE_LENGTH,
    MAX_FOOTER_LENGTH,
    MAX_TITLE_LENGTH,
    PAST_FIELD_TITLE,
)
from vrcxtracker.embed import ComposedMessage, EmbedHeader, Segment, embed_length, fits, text_length, violations
from vrcxtracker.errors import CompositionExhaustedError, LocationFormatError
from vrcxtracker.formatting import DetailTier, _truncate, render_member_line, sanitize
from vrcxtracker.location import instance_type_of
from vrcxtracker.models import InstanceContext, RosterRecord

FOOTER_TEXT = f"vrcxtracker {__version__}"


class FormattingPolicy(NamedTuple):
    current: DetailTier
    past: DetailTier
    reducible: bool = False

    @property
    def label(self) -> str:
        return f"{self.current.value}/{self.past.value}"


# Richest first; only the last one may go through the reducer.
POLICIES: tuple[FormattingPolicy, ...] = (
    FormattingPolicy(DetailTier.FULL, DetailTier.FULL),
    FormattingPolicy(DetailTier.FULL, DetailTier.COMPACT),
    FormattingPolicy(DetailTier.FULL, DetailTier.MINIMAL),
    FormattingPolicy(DetailTier.COMPACT, DetailTier.MINIMAL),
    FormattingPolicy(DetailTier.MINIMAL, DetailTier.MINIMAL, reducible=True),
)


def build_header(
    context: InstanceContext,
    records: Sequence[RosterRecord],
    now: datetime | None = None,
) -> EmbedHeader:
    """Title, link, counts, author, footer and color for the instance embed.

    Raises LocationFormatError when the location id is not ``world:instance``.
    """
    parts = context.location_id.split(":")
    if len(parts) != 2:
        raise LocationFormatError(
            f"Location string is not in the expected format with a colon: {context.location_id!r}"
        )
    world_id, instance_id = parts

    instance_type = instance_type_of(instance_id)
    title = f"{context.world_name or ''} ({instance_type})"

    current_count = sum(1 for r in records if r.is_currently)
    desc_lines: list[str] = []
    if context.group_name:
        group = f"Group: {sanitize(context.group_name)}"
        if context.group_owner:
            group += f" ({sanitize(context.group_owner)})"
        desc_lines.append(group)
    desc_lines.append(f"Current Members Count: {current_count}")
    desc_lines.append(f"Past Members Count: {len(records) - current_count}")

    is_currently = any(r.user_id == context.user_id and r.is_currently for r in records)

    return EmbedHeader(
        title=_truncate(title, MAX_TITLE_LENGTH),
        url=LAUNCH_URL.format(world_id=world_id, instance_id=instance_id),
        description=_truncate("\n".join(desc_lines) + "\n", MAX_DESCRIPTION_LENGTH),
        author_name=_truncate(sanitize(context.display_name), MAX_AUTHOR_NAME_LENGTH),
        footer_text=_truncate(FOOTER_TEXT, MAX_FOOTER_LENGTH),
        color=COLOR_ACTIVE if is_currently else COLOR_INACTIVE,
        timestamp=now or datetime.now(timezone.utc),
    )


def pack_segments(
    lines: Iterable[str],
    title: str,
    max_length: int = MAX_FIELD_VALUE_LENGTH,
) -> list[Segment]:
    """Greedily pack whole lines into fields of at most ``max_length`` units.

    A line is never split. A line longer than ``max_length`` gets a field of
    its own and is left for the validator to reject.
    """
    slices: list[list[str]] = []
    slice_len = 0
    for line in lines:
        if not line.strip():
            continue
        line_len = text_length(line)
        if slices and slice_len + 1 + line_len <= max_length:
            slices[-1].append(line)
            slice_len += 1 + line_len
        else:
            slices.append([line])
            slice_len = line_len

    return [
        Segment(name=title if i == 0 else CONTINUATION_FIELD_TITLE, value="\n".join(chunk))
        for i, chunk in enumerate(slices)
    ]


def reduce_segments(header: EmbedHeader, segments: Sequence[Segment]) -> list[Segment]:
    """Trim fields, then lines of the last field, until the embed fits.

    Raises CompositionExhaustedError when nothing that fits is left.
    """
    working = list(segments)
    if fits(header, working):
        return working

    if len(working) > MAX_FIELD_COUNT:
        working = working[:MAX_FIELD_COUNT]
        log(f"Fields truncated to {MAX_FIELD_COUNT} due to limit")
        if fits(header, working):
            return working

    # Largest prefix whose next field is the first one that overflows
    while len(working) > 1:
        removed = working.pop()
        if fits(header, working):
            working.append(removed)
            break
    log(f"Reducing last of {len(working)} field(s)")

    if working:
        last = working[-1]
        lines = last.lines
        for keep in range(len(lines) - 1, -1, -1):
            candidate = Segment(name=last.name, value="\n".join([*lines[:keep], ELLIPSIS_LINE]))
            if fits(header, [*working[:-1], candidate]):
                working[-1] = candidate
                log(f"Last field trimmed to {keep}/{len(lines)} line(s)")
                break
        else:
            working.pop()

    if not fits(header, working):
        raise CompositionExhaustedError(
            f"Embed is too long after reducing fields: {'; '.join(violations(header, working))}",
            segment_count=len(segments),
            line_count=sum(len(s.lines) for s in segments),
            length=embed_length(header, working),
        )
    return working


def compose(
    context: InstanceContext,
    records: Iterable[RosterRecord],
    now: datetime | None = None,
) -> ComposedMessage:
    """Build the instance embed for ``records``, richest policy that fits."""
    records = list(records)
    header = build_header(context, records, now)

    groups = (
        (CURRENT_FIELD_TITLE, [r for r in records if r.is_currently]),
        (PAST_FIELD_TITLE, [r for r in records if not r.is_currently]),
    )
    rendered: dict[tuple[str, DetailTier], list[Segment]] = {}

    def group_segments(index: int, tier: DetailTier) -> list[Segment]:
        title, members = groups[index]
        key = (title, tier)
        if key not in rendered:
            lines = [render_member_line(m, tier, context.user_id) for m in members]
            rendered[key] = pack_segments(lines, title)
        return rendered[key]

    segments: list[Segment] = []
    for policy in POLICIES:
        segments = group_segments(0, policy.current) + group_segments(1, policy.past)
        if fits(header, segments):
            if policy is not POLICIES[0]:
                log(f"Embed built with pattern {policy.label} ({len(segments)} field(s))")
            return ComposedMessage(header=header, segments=tuple(segments), policy=policy)
        if policy.reducible:
            log(f"All patterns overflow, reducing {len(segments)} field(s)")
            reduced = reduce_segments(header, segments)
            return ComposedMessage(header=header, segments=tuple(reduced), policy=policy, reduced=True)

    raise CompositionExhaustedError(
        "No reducible formatting policy configured",
        segment_count=len(segments),
        line_count=sum(len(s.lines) for s in segments),
        length=embed_length(header, segments),
    )
