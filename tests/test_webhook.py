"""Tests for the Discord webhook transport."""
from __future__ import annotations

import json
import sys
import urllib.error
from typing import Any

import pytest

TEST_WEBHOOK_URL = "https://discord.test/api/webhooks/123/secret-token"

EMBED = {"title": "t", "fields": []}


def _webhook_mod() -> Any:
    return sys.modules["vrcxtracker.webhook"]


class _FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        return None


class TestWebhookApi:
    """Test the urllib wrapper."""

    def test_parses_json_body(self, tracker: Any, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: dict[str, Any] = {}

        def fake_urlopen(req: Any, timeout: int = 10) -> _FakeResponse:
            seen["method"] = req.get_method()
            seen["body"] = json.loads(req.data)
            seen["agent"] = req.get_header("User-agent")
            return _FakeResponse(b'{"id": "5"}')

        monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
        assert _webhook_mod()._webhook_api("POST", "https://x.test/h", {"a": 1}) == {"id": "5"}
        assert seen == {"method": "POST", "body": {"a": 1}, "agent": f"vrcxtracker/{tracker.__version__}"}

    def test_empty_body_is_empty_dict(self, tracker: Any, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("urllib.request.urlopen", lambda req, timeout=10: _FakeResponse(b""))
        assert _webhook_mod()._webhook_api("PATCH", "https://x.test/h", {}) == {}

    def test_network_error_returns_none(
        self, tracker: Any, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        def boom(req: Any, timeout: int = 10) -> _FakeResponse:
            raise urllib.error.URLError("unreachable")

        monkeypatch.setattr("urllib.request.urlopen", boom)
        assert _webhook_mod()._webhook_api("POST", "https://x.test/h", {}) is None
        assert "Webhook API [POST]" in capsys.readouterr().err


class TestEndpoint:
    """Test URL building on top of the configured webhook."""

    def test_wait_query(self, tracker: Any) -> None:
        assert _webhook_mod()._endpoint(wait="true") == f"{TEST_WEBHOOK_URL}?wait=true"

    def test_message_path(self, tracker: Any) -> None:
        assert _webhook_mod()._endpoint("/messages/5") == f"{TEST_WEBHOOK_URL}/messages/5"

    def test_existing_query_kept(self, tracker: Any, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(_webhook_mod(), "WEBHOOK_URL", f"{TEST_WEBHOOK_URL}?thread_id=9")
        assert _webhook_mod()._endpoint(wait="true") == f"{TEST_WEBHOOK_URL}?thread_id=9&wait=true"


class TestSendMessage:
    """Test posting new messages."""

    def test_posts_embed_and_returns_id(self, tracker: Any, mock_webhook: list) -> None:
        assert tracker.send_message(EMBED) == 1001
        method, url, payload = mock_webhook[0]
        assert method == "POST"
        assert url.endswith("?wait=true")
        assert payload == {"content": "", "embeds": [EMBED]}

    def test_failure_returns_none(self, tracker: Any, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(_webhook_mod(), "_webhook_api", lambda *a, **k: None)
        assert tracker.send_message(EMBED) is None

    def test_missing_url(self, tracker: Any, mock_webhook: list, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(_webhook_mod(), "WEBHOOK_URL", "")
        assert tracker.send_message(EMBED) is None
        assert mock_webhook == []

    def test_dry_run_prints(
        self, tracker: Any, mock_webhook: list, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr(_webhook_mod(), "DRY_RUN", True)
        assert tracker.send_message(EMBED) == 99999
        assert "[dry-run] send_message()" in capsys.readouterr().out
        assert mock_webhook == []


class TestUpdateMessage:
    """Test editing existing messages."""

    def test_patches_message(self, tracker: Any, mock_webhook: list) -> None:
        assert tracker.update_message(55, EMBED) is True
        assert mock_webhook == [("PATCH", f"{TEST_WEBHOOK_URL}/messages/55", {"embeds": [EMBED]})]

    def test_failure_returns_false(self, tracker: Any, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(_webhook_mod(), "_webhook_api", lambda *a, **k: None)
        assert tracker.update_message(55, EMBED) is False
