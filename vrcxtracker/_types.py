"""Type definitions for embed payloads and state structures."""
from __future__ import annotations

from typing import TypedDict


class EmbedAuthor(TypedDict):
    name: str


class EmbedFooter(TypedDict):
    text: str


class EmbedField(TypedDict):
    name: str
    value: str
    inline: bool


class EmbedPayload(TypedDict):
    title: str
    url: str
    description: str
    color: int
    author: EmbedAuthor
    footer: EmbedFooter
    timestamp: str
    fields: list[EmbedField]


class MessageMapState(TypedDict, total=False):
    """``messages.json``: join id → Discord message id."""

    messages: dict[str, int]


class LastPayloadState(TypedDict, total=False):
    """``payloads.json``: message id (as str) → last embed sent."""

    payloads: dict[str, EmbedPayload]
