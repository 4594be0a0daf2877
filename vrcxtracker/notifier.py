"""Post or update the instance embed for one visit."""
from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from vrcxtracker._log import log
from vrcxtracker.composer import compose
from vrcxtracker.embed import equal_without_timestamp
from vrcxtracker.errors import WebhookError
from vrcxtracker.messages import get_last_payload, get_message_id, set_last_payload, set_message_id
from vrcxtracker.models import InstanceContext, RosterRecord
from vrcxtracker.webhook import send_message, update_message


def send_update(
    context: InstanceContext,
    records: Iterable[RosterRecord],
    now: datetime | None = None,
) -> int:
    """Compose the embed and edit this visit's message, or post a new one.

    Returns the Discord message id. Composition errors propagate unchanged;
    WebhookError is raised when no message could be posted.
    """
    message = compose(context, records, now)
    payload = message.to_payload()
    join_id = context.join_id or context.location_id

    message_id = get_message_id(join_id)
    if message_id is not None:
        if equal_without_timestamp(get_last_payload(message_id), payload):  # type: ignore[arg-type]
            return message_id
        if update_message(message_id, payload):
            set_last_payload(message_id, payload)
            return message_id
        log(f"Update of message {message_id} failed, posting a new one")

    new_id = send_message(payload)
    if new_id is None:
        raise WebhookError(f"Failed to send new message for join {join_id!r}")
    set_message_id(join_id, new_id)
    set_last_payload(new_id, payload)
    return new_id
