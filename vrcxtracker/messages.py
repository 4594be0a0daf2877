"""Message store: which Discord message belongs to which instance visit."""
from __future__ import annotations

from vrcxtracker._types import EmbedPayload, LastPayloadState, MessageMapState
from vrcxtracker.state import _clear_state, _locked_update, _read_state

MESSAGES_FILE = "messages.json"
PAYLOADS_FILE = "payloads.json"


def get_message_id(join_id: str) -> int | None:
    """Get the message id previously posted for this join."""
    state = _read_state(MESSAGES_FILE)
    value = state.get("messages", {}).get(join_id)
    return int(value) if value is not None else None


def set_message_id(join_id: str, message_id: int) -> None:
    """Remember the message posted for this join."""
    def updater(state: MessageMapState) -> MessageMapState:
        messages = state.get("messages", {})
        messages[join_id] = message_id
        state["messages"] = messages
        return state

    _locked_update(MESSAGES_FILE, updater)  # type: ignore[arg-type]


def clear_message_ids() -> None:
    """Forget every join → message mapping and cached payload."""
    _clear_state(MESSAGES_FILE)
    _clear_state(PAYLOADS_FILE)


def get_last_payload(message_id: int) -> EmbedPayload | None:
    """Embed last written to ``message_id``, if known."""
    state = _read_state(PAYLOADS_FILE)
    return state.get("payloads", {}).get(str(message_id))


def set_last_payload(message_id: int, payload: EmbedPayload) -> None:
    def updater(state: LastPayloadState) -> LastPayloadState:
        payloads = state.get("payloads", {})
        payloads[str(message_id)] = payload
        state["payloads"] = payloads
        return state

    _locked_update(PAYLOADS_FILE, updater)  # type: ignore[arg-type]
