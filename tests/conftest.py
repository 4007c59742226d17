"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Settings & logging: mock_settings (autouse), mock_logfire, logfire_capture
2. Messaging: mock_messaging_service, processor, event_router
3. Raw webhook data: make_event, make_payload, sign_body
4. HTTP: test_client
"""

import json
import os
from contextlib import contextmanager
from typing import Any
from unittest.mock import MagicMock, Mock, patch

import pytest

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import logfire

from src.models.user_models import FacebookUserInfo
from src.services.event_router import EventRouter
from src.services.message_processor import MessageProcessor
from src.services.messaging_protocol import MockMessagingService
from src.services.signature import compute_signature

TEST_APP_SECRET = "test-app-secret"
TEST_VERIFY_TOKEN = "test-verify-token"
TEST_PAGE_TOKEN = "test-page-token"
TEST_SERVER_URL = "https://bot.example.com"
GRAPH_URL = "https://graph.facebook.com/v2.6"

# Modules that call get_settings() at request time
_SETTINGS_CONSUMERS = (
    "src.config",
    "src.main",
    "src.api.webhook",
    "src.services.facebook_service",
    "src.logging_config",
)

# Modules that hold a module-level logfire reference
_LOGFIRE_CONSUMERS = (
    "src.services.facebook_service",
    "src.services.signature",
    "src.services.message_processor",
    "src.services.event_router",
    "src.services.thread_settings_service",
    "src.middleware.correlation_id",
    "src.logging_config",
    "src.main",
)


# =============================================================================
# Settings & Logging
# =============================================================================


@pytest.fixture(autouse=True)
def mock_settings(monkeypatch):
    """Application settings with test credentials, patched everywhere."""
    from src.config import Settings

    settings = Settings(
        facebook_app_secret=TEST_APP_SECRET,
        facebook_verify_token=TEST_VERIFY_TOKEN,
        facebook_page_access_token=TEST_PAGE_TOKEN,
        server_url=TEST_SERVER_URL,
        graph_api_base_url="https://graph.facebook.com",
        configure_thread_settings_on_startup=False,
        env="local",
        logfire_token=None,
        sentry_dsn=None,
    )

    for module in _SETTINGS_CONSUMERS:
        monkeypatch.setattr(f"{module}.get_settings", lambda: settings)
    return settings


@pytest.fixture
def mock_logfire(monkeypatch):
    """
    Mock Logfire for testing without actual logging.

    Returns the mock so tests can assert on structured log calls.
    """

    @contextmanager
    def mock_span(*args, **kwargs):
        yield {}

    mock_logfire_module = MagicMock()
    mock_logfire_module.info = Mock()
    mock_logfire_module.warn = Mock()
    mock_logfire_module.error = Mock()
    mock_logfire_module.span = mock_span
    mock_logfire_module.configure = Mock()
    mock_logfire_module.instrument_fastapi = Mock()
    mock_logfire_module.instrument_pydantic = Mock()

    for module in _LOGFIRE_CONSUMERS:
        monkeypatch.setattr(f"{module}.logfire", mock_logfire_module)

    return mock_logfire_module


@pytest.fixture
def logfire_capture():
    """Capture logfire info/warn/error calls as (level, args, kwargs)."""
    captured_logs = []

    original_info = logfire.info
    original_warn = logfire.warn
    original_error = logfire.error

    def capture_info(*args, **kwargs):
        captured_logs.append(("info", args, kwargs))
        return original_info(*args, **kwargs)

    def capture_warn(*args, **kwargs):
        captured_logs.append(("warn", args, kwargs))
        return original_warn(*args, **kwargs)

    def capture_error(*args, **kwargs):
        captured_logs.append(("error", args, kwargs))
        return original_error(*args, **kwargs)

    with (
        patch("logfire.info", side_effect=capture_info),
        patch("logfire.warn", side_effect=capture_warn),
        patch("logfire.error", side_effect=capture_error),
    ):
        yield captured_logs


# =============================================================================
# Messaging
# =============================================================================


@pytest.fixture
def sample_facebook_user_info():
    return FacebookUserInfo(
        id="user-456",
        first_name="Ada",
        last_name="Lovelace",
        locale="en_US",
        timezone=-7,
    )


@pytest.fixture
def mock_messaging_service():
    """Recording messaging service with no known profile."""
    return MockMessagingService()


@pytest.fixture
def processor(mock_messaging_service):
    return MessageProcessor(mock_messaging_service, server_url=TEST_SERVER_URL)


@pytest.fixture
def event_router(processor):
    return EventRouter(processor)


# =============================================================================
# Raw Webhook Data
# =============================================================================


@pytest.fixture
def make_event():
    """Build one raw ``messaging`` item with the given kind-specific fields."""

    def _make(sender_id: str = "user-456", **fields: Any) -> dict[str, Any]:
        return {
            "sender": {"id": sender_id},
            "recipient": {"id": "page-123"},
            "timestamp": 1458692752478,
            **fields,
        }

    return _make


@pytest.fixture
def make_payload():
    """Wrap raw events into a page webhook payload (one entry per list)."""

    def _make(*entries: list[dict[str, Any]]) -> dict[str, Any]:
        return {
            "object": "page",
            "entry": [
                {"id": "page-123", "time": 1458692752478, "messaging": events}
                for events in entries
            ],
        }

    return _make


@pytest.fixture
def sign_body():
    """Serialize a payload and return (body_bytes, headers) with a valid signature."""

    def _sign(payload: dict[str, Any], secret: str = TEST_APP_SECRET):
        body = json.dumps(payload).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "X-Hub-Signature": compute_signature(body, secret),
        }
        return body, headers

    return _sign


# =============================================================================
# HTTP
# =============================================================================


@pytest.fixture
def test_client(mock_settings, mock_logfire):
    """FastAPI TestClient for E2E tests (lifespan not run)."""
    from fastapi.testclient import TestClient

    from src.main import app

    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
