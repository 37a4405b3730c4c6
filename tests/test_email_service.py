"""
test_email_service.py — Tests for app/email_service.py

Covers the Graph sendMail payload, the not-configured path, token
failures and delivery failures (feedback mail never raises).

Called by: pytest
Depends on: app/email_service.py
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.email_service import FEEDBACK_SUBJECT, build_feedback_message, feedback_email


@pytest.fixture()
def mail_settings():
    with patch("app.email_service.settings") as s:
        s.mail_configured = True
        s.mail_sender = "noreply@example.com"
        s.feedback_recipient = "team@example.com"
        yield s


def _graph(result=None, side_effect=None):
    gc = MagicMock()
    gc.post_json = AsyncMock(return_value=result, side_effect=side_effect)
    return gc


def test_build_feedback_message():
    msg = build_feedback_message("great site", "team@example.com")
    assert msg["message"]["subject"] == FEEDBACK_SUBJECT
    assert msg["message"]["body"] == {"contentType": "Text", "content": "great site"}
    assert msg["message"]["toRecipients"] == [{"emailAddress": {"address": "team@example.com"}}]
    assert msg["saveToSentItems"] is False


class TestFeedbackEmail:
    @pytest.mark.asyncio
    async def test_sends_via_graph(self, mail_settings):
        gc = _graph(result={})
        with patch("app.email_service.get_app_token", new_callable=AsyncMock, return_value="tok"), \
             patch("app.email_service.GraphClient", return_value=gc) as mock_cls:
            assert await feedback_email("great") is True
        mock_cls.assert_called_once_with("tok")
        path, payload = gc.post_json.call_args.args
        assert path == "/users/noreply@example.com/sendMail"
        assert payload["message"]["body"]["content"] == "great"

    @pytest.mark.asyncio
    async def test_not_configured(self):
        with patch("app.email_service.settings") as s, \
             patch("app.email_service.get_app_token", new_callable=AsyncMock) as mock_token:
            s.mail_configured = False
            assert await feedback_email("great") is False
        mock_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_token(self, mail_settings):
        with patch("app.email_service.get_app_token", new_callable=AsyncMock, return_value=None), \
             patch("app.email_service.GraphClient") as mock_cls:
            assert await feedback_email("great") is False
        mock_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_graph_rejects(self, mail_settings):
        gc = _graph(result={"error": 403, "detail": "Forbidden"})
        with patch("app.email_service.get_app_token", new_callable=AsyncMock, return_value="tok"), \
             patch("app.email_service.GraphClient", return_value=gc):
            assert await feedback_email("great") is False

    @pytest.mark.asyncio
    async def test_connection_error_swallowed(self, mail_settings):
        gc = _graph(side_effect=httpx.ConnectError("down"))
        with patch("app.email_service.get_app_token", new_callable=AsyncMock, return_value="tok"), \
             patch("app.email_service.GraphClient", return_value=gc):
            assert await feedback_email("great") is False

    @pytest.mark.asyncio
    async def test_throttled_with_date_retry_after(self, mail_settings):
        throttled = httpx.Response(429, headers={"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"})
        http = MagicMock()
        http.post = AsyncMock(return_value=throttled)
        with patch("app.email_service.get_app_token", new_callable=AsyncMock, return_value="tok"), \
             patch("app.utils.graph_client.http", http), \
             patch("app.utils.graph_client.asyncio.sleep", new_callable=AsyncMock):
            assert await feedback_email("great") is False
        assert http.post.await_count > 1

    @pytest.mark.asyncio
    async def test_non_json_reply_swallowed(self, mail_settings):
        http = MagicMock()
        http.post = AsyncMock(return_value=httpx.Response(200, text="not json"))
        with patch("app.email_service.get_app_token", new_callable=AsyncMock, return_value="tok"), \
             patch("app.utils.graph_client.http", http):
            assert await feedback_email("great") is False

    @pytest.mark.asyncio
    async def test_token_parse_error_swallowed(self, mail_settings):
        with patch("app.email_service.get_app_token", new_callable=AsyncMock,
                   side_effect=ValueError("bad token reply")), \
             patch("app.email_service.GraphClient") as mock_cls:
            assert await feedback_email("great") is False
        mock_cls.assert_not_called()
