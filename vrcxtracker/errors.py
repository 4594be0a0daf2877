"""Exception types raised by the composer and the notifier."""
from __future__ import annotations


class TrackerError(Exception):
    """Base class for vrcxtracker errors."""


class LocationFormatError(TrackerError, ValueError):
    """A location id is not of the form ``world:instance``."""


class CompositionExhaustedError(TrackerError):
    """The roster cannot be reduced into an embed that fits Discord's caps."""

    def __init__(self, message: str, segment_count: int, line_count: int, length: int) -> None:
        super().__init__(
            f"{message} (segments={segment_count}, lines={line_count}, length={length})"
        )
        self.segment_count = segment_count
        self.line_count = line_count
        self.length = length


class WebhookError(TrackerError):
    """Posting a new webhook message failed."""
