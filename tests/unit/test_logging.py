"""Tests for structured logging with Logfire."""

import httpx
import pytest
import respx

from src.logging_config import mask_pii, redact_tokens, setup_logfire
from src.services.event_router import classify_event
from src.services.facebook_service import GraphAPIError, send_message
from src.services.signature import verify_request_signature


class TestMaskPii:
    def test_long_value_keeps_edges(self):
        assert mask_pii("1234567890") == "12******90"

    def test_short_value_fully_masked(self):
        assert mask_pii("abcd") == "****"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert mask_pii(value) == ""

    def test_custom_mask_char(self):
        assert mask_pii("secret-value", mask_char="#") == "se########ue"


class TestRedactTokens:
    def test_sensitive_keys_masked(self):
        data = {
            "access_token": "EAAB-long-token",
            "authorization_code": "1234567890",
            "sender_id": "user-456",
        }

        redacted = redact_tokens(data)

        assert redacted["access_token"] == "EA***********en"
        assert redacted["authorization_code"] == "12******90"
        assert redacted["sender_id"] == "user-456"

    def test_verify_token_param_masked(self):
        redacted = redact_tokens({"hub.mode": "subscribe", "hub.verify_token": "my-verify-token"})

        assert redacted == {"hub.mode": "subscribe", "hub.verify_token": "my***********en"}

    def test_original_not_modified(self):
        data = {"token": "abcdefgh"}

        redact_tokens(data)

        assert data == {"token": "abcdefgh"}

    def test_nested_dict(self):
        redacted = redact_tokens({"secret": {"token": "abcdefgh"}})

        assert redacted == {"secret": {"token": "ab****gh"}}


def test_setup_logfire_configures_environment(mock_logfire, mock_settings):
    from src.main import app

    setup_logfire(app)

    kwargs = mock_logfire.configure.call_args.kwargs
    assert kwargs["environment"] == "local"
    assert kwargs["send_to_logfire"] == "if-token-present"
    assert "token" not in kwargs
    mock_logfire.instrument_fastapi.assert_called_once_with(app)
    mock_logfire.instrument_pydantic.assert_called_once()


def test_setup_logfire_passes_token(mock_logfire, mock_settings):
    from src.main import app

    mock_settings.logfire_token = "lf-token"

    setup_logfire(app)

    assert mock_logfire.configure.call_args.kwargs["token"] == "lf-token"


def test_missing_signature_logs_warning(logfire_capture):
    verify_request_signature(b"{}", None, "secret")

    assert any(level == "warn" for level, _, _ in logfire_capture)


@pytest.mark.asyncio
@respx.mock
async def test_send_api_failure_logged_with_status(logfire_capture):
    respx.post("https://graph.facebook.com/v2.6/me/messages").mock(
        return_value=httpx.Response(400, json={"error": {"message": "Invalid OAuth access token."}})
    )

    with pytest.raises(GraphAPIError):
        await send_message("bad-token", "user-456", "hi")

    errors = [kwargs for level, _, kwargs in logfire_capture if level == "error"]
    assert errors
    assert errors[0]["status_code"] == 400


def test_malformed_event_logs_warning(logfire_capture, event_router):
    event_router.collect_events({"object": "page", "entry": [{"id": "p", "messaging": [{}]}]})

    assert [level for level, _, _ in logfire_capture] == ["warn"]


def test_classify_does_not_log(logfire_capture, make_event):
    classify_event(make_event(read={"watermark": 1}))

    assert logfire_capture == []
