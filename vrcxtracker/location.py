"""VRChat location ids: world/instance split, instance type, region, owner."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from vrcxtracker.errors import LocationFormatError

_LOCATION_RE = re.compile(r"^(?P<world>wrld_[0-9a-fA-F-]+):(?P<instance>[A-Za-z0-9_-]+)(?P<tokens>(~[^~]+)*)$")
_USER_RE = re.compile(r"\((?P<user_id>usr_[0-9a-fA-F-]+)\)")

_UNSUPPORTED_PREFIXES = {
    "local:": "Local instances are not supported.",
    "offline:": "Offline instances are not supported.",
    "traveling:": "Traveling instances are not supported.",
}


class InstanceType(Enum):
    PUBLIC = "Public"
    FRIENDS_PLUS = "Friends+"
    FRIENDS = "Friends"
    INVITE_PLUS = "Invite+"
    INVITE = "Invite"
    GROUP_PUBLIC = "Group Public"
    GROUP_PLUS = "Group+"
    GROUP = "Group"

    def __str__(self) -> str:
        return self.value


class Region(Enum):
    US_WEST = ("us", "US West")
    US_EAST = ("use", "US East")
    EUROPE = ("eu", "Europe")
    JAPAN = ("jp", "Japan")

    def __init__(self, token: str, display: str) -> None:
        self.token = token
        self.display = display

    @classmethod
    def from_token(cls, token: str | None) -> Region | None:
        if not token:
            return None
        for region in cls:
            if region.token == token.lower():
                return region
        return None


@dataclass(frozen=True, slots=True)
class Instance:
    world_id: str
    instance_name: str
    type: InstanceType
    region: Region
    owner_id: str | None = None
    group_id: str | None = None
    nonce: str | None = None


def _token_arg(tokens: list[str], name: str) -> str | None:
    """Return the argument of the first ``name(arg)`` token."""
    prefix = f"{name}("
    for token in tokens:
        if token.startswith(prefix) and token.endswith(")"):
            return token[len(prefix):-1]
    return None


def _has_token(tokens: list[str], name: str) -> bool:
    return any(t.startswith(f"{name}(") for t in tokens)


def _split_tokens(instance_component: str) -> list[str]:
    return [t for t in instance_component.split("~")[1:] if t]


def _type_from_tokens(tokens: list[str]) -> InstanceType:
    if _has_token(tokens, "group"):
        access = _token_arg(tokens, "groupAccessType")
        return {
            "members": InstanceType.GROUP,
            "plus": InstanceType.GROUP_PLUS,
            "public": InstanceType.GROUP_PUBLIC,
        }.get(access or "", InstanceType.GROUP)
    if _has_token(tokens, "hidden"):
        return InstanceType.FRIENDS_PLUS
    if _has_token(tokens, "friends"):
        return InstanceType.FRIENDS
    if _has_token(tokens, "private"):
        return InstanceType.INVITE_PLUS if "canRequestInvite" in tokens else InstanceType.INVITE
    return InstanceType.PUBLIC


def instance_type_of(instance_component: str) -> InstanceType:
    """Instance type from the part after the ``:``. Never raises."""
    return _type_from_tokens(_split_tokens(instance_component))


def parse_location(location_id: str) -> Instance:
    """Parse a full location id such as ``wrld_…:12345~region(jp)``."""
    if not location_id or not location_id.strip():
        raise LocationFormatError("Location ID cannot be empty.")
    for prefix, reason in _UNSUPPORTED_PREFIXES.items():
        if location_id.startswith(prefix):
            raise LocationFormatError(reason)

    m = _LOCATION_RE.match(location_id)
    if not m:
        raise LocationFormatError(f"Invalid location ID format: {location_id!r}")

    tokens = [t for t in m.group("tokens").split("~") if t]
    creator = None
    for token in tokens:
        um = _USER_RE.search(token)
        if um:
            creator = um.group("user_id")
            break
    group_id = _token_arg(tokens, "group")

    return Instance(
        world_id=m.group("world"),
        instance_name=m.group("instance"),
        type=_type_from_tokens(tokens),
        region=Region.from_token(_token_arg(tokens, "region")) or Region.US_WEST,
        owner_id=creator or group_id,
        group_id=group_id,
        nonce=_token_arg(tokens, "nonce"),
    )
