"""vrcxtracker — VRCX instance roster → Discord webhook embeds."""
from __future__ import annotations

__version__ = "1.0.0"

# Re-export the primary entry points
from vrcxtracker._log import log as _log, setup_file_logging  # noqa: F401
from vrcxtracker.composer import POLICIES, FormattingPolicy, build_header, compose, pack_segments, reduce_segments  # noqa: F401
from vrcxtracker.config import (  # noqa: F401
    CONFIG_DIR,
    CONFIG_PATH,
    DRY_RUN,
    EMOJI,
    HTTP_TIMEOUT,
    LOG_PATH,
    STATE_DIR,
    TIME_FORMAT,
    WEBHOOK_URL,
    _cfg_bool,
    _cfg_int,
    _cfg_str,
    _load_config,
    validate_webhook_url,
)
from vrcxtracker.embed import (  # noqa: F401
    EMBED_LIMITS,
    ComposedMessage,
    EmbedHeader,
    EmbedLimits,
    Segment,
    embed_length,
    equal_without_timestamp,
    text_length,
    validate,
    violations,
)
from vrcxtracker.errors import CompositionExhaustedError, LocationFormatError, TrackerError, WebhookError  # noqa: F401
from vrcxtracker.formatting import (  # noqa: F401
    DetailTier,
    format_datetime,
    format_duration,
    format_member_times,
    member_emoji,
    render_member_line,
    sanitize,
)
from vrcxtracker.location import Instance, InstanceType, Region, instance_type_of, parse_location  # noqa: F401
from vrcxtracker.messages import clear_message_ids, get_last_payload, get_message_id, set_last_payload, set_message_id  # noqa: F401
from vrcxtracker.models import InstanceContext, RosterRecord, context_from_dict, load_snapshots, record_from_dict  # noqa: F401
from vrcxtracker.notifier import send_update  # noqa: F401
from vrcxtracker.state import _clear_state, _locked_update, _read_state, _state_dir, _write_state  # noqa: F401
from vrcxtracker.webhook import _webhook_api, send_message, update_message  # noqa: F401
