"""Tests for location id parsing and instance type detection."""
from __future__ import annotations

from typing import Any

import pytest

WORLD = "wrld_4cf554b4-430c-4f8f-b53e-1f294eed230b"
USER = "usr_c1644b5b-3ca4-45b4-97c6-a2a0de70d469"
GROUP = "grp_71a7ff59-112c-4e78-a990-c7cc650776e5"


class TestInstanceTypeOf:
    """Test the lenient instance type lookup used for embed titles."""

    @pytest.mark.parametrize(
        ("component", "expected"),
        [
            ("12345", "Public"),
            (f"12345~hidden({USER})~region(us)", "Friends+"),
            (f"12345~friends({USER})", "Friends"),
            (f"12345~private({USER})~canRequestInvite", "Invite+"),
            (f"12345~private({USER})", "Invite"),
            (f"12345~group({GROUP})~groupAccessType(public)", "Group Public"),
            (f"12345~group({GROUP})~groupAccessType(plus)", "Group+"),
            (f"12345~group({GROUP})~groupAccessType(members)", "Group"),
            (f"12345~group({GROUP})", "Group"),
        ],
    )
    def test_types(self, tracker: Any, component: str, expected: str) -> None:
        assert str(tracker.instance_type_of(component)) == expected

    def test_garbage_is_public(self, tracker: Any) -> None:
        assert tracker.instance_type_of("~~~") is tracker.InstanceType.PUBLIC


class TestParseLocation:
    """Test strict location parsing."""

    def test_public_defaults_to_us_west(self, tracker: Any) -> None:
        inst = tracker.parse_location(f"{WORLD}:12345")
        assert inst.world_id == WORLD
        assert inst.instance_name == "12345"
        assert inst.type is tracker.InstanceType.PUBLIC
        assert inst.region is tracker.Region.US_WEST
        assert inst.owner_id is None

    def test_private_with_region_and_nonce(self, tracker: Any) -> None:
        inst = tracker.parse_location(f"{WORLD}:67890~private({USER})~canRequestInvite~region(jp)~nonce(abc)")
        assert inst.type is tracker.InstanceType.INVITE_PLUS
        assert inst.region is tracker.Region.JAPAN
        assert inst.region.display == "Japan"
        assert inst.owner_id == USER
        assert inst.nonce == "abc"

    def test_group_owner_falls_back_to_group(self, tracker: Any) -> None:
        inst = tracker.parse_location(f"{WORLD}:1~group({GROUP})~groupAccessType(plus)~region(eu)")
        assert inst.type is tracker.InstanceType.GROUP_PLUS
        assert inst.group_id == GROUP
        assert inst.owner_id == GROUP
        assert inst.region is tracker.Region.EUROPE

    @pytest.mark.parametrize("location", ["", "   ", "local:abc", "offline:abc", "traveling:abc"])
    def test_unsupported_raises(self, tracker: Any, location: str) -> None:
        with pytest.raises(tracker.LocationFormatError):
            tracker.parse_location(location)

    def test_malformed_raises(self, tracker: Any) -> None:
        with pytest.raises(tracker.LocationFormatError):
            tracker.parse_location("not-a-location")

    def test_format_error_is_value_error(self, tracker: Any) -> None:
        with pytest.raises(ValueError):
            tracker.parse_location("wrld_123")


class TestRegion:
    """Test region token lookup."""

    def test_from_token_case_insensitive(self, tracker: Any) -> None:
        assert tracker.Region.from_token("USE") is tracker.Region.US_EAST

    def test_unknown_token(self, tracker: Any) -> None:
        assert tracker.Region.from_token("mars") is None
        assert tracker.Region.from_token(None) is None
