"""Configure page-level thread settings (greeting, get started, menu)."""

from typing import Any

import logfire

from src.constants import (
    GET_STARTED_PAYLOAD,
    HELP_PAYLOAD,
    JOKE_PAYLOAD,
    TASKS_PAYLOAD,
)
from src.models.outbound_models import PostbackButton, WebUrlButton
from src.models.thread_settings import ThreadSetting
from src.services.facebook_service import GraphAPIError, call_graph_api


async def apply_thread_setting(
    page_access_token: str,
    setting: ThreadSetting,
) -> dict[str, Any]:
    """
    Set or clear one thread setting.

    Set uses POST, clear uses DELETE; both send the JSON body rendered
    by the setting.

    Raises:
        GraphAPIError: If the call fails
    """
    body = await call_graph_api(
        setting.http_method,
        "me/thread_settings",
        page_access_token,
        json_body=setting.to_request_body(),
    )
    logfire.info(
        "Thread setting applied",
        kind=setting.kind.value,
        op=setting.op.value,
        result=body.get("result"),
    )
    return body


def build_persistent_menu(app_page_url: str) -> ThreadSetting:
    """The menu shown in every existing thread."""
    call_to_actions = [
        PostbackButton(title="Help", payload=HELP_PAYLOAD),
        PostbackButton(title="My Tasks", payload=TASKS_PAYLOAD),
        PostbackButton(title="Tell me a Joke", payload=JOKE_PAYLOAD),
        WebUrlButton(title="Visit app page", url=app_page_url),
    ]
    return ThreadSetting.persistent_menu(
        [button.model_dump() for button in call_to_actions]
    )


def build_startup_settings(greeting_text: str, server_url: str) -> list[ThreadSetting]:
    """Greeting, get-started button and persistent menu, in that order."""
    return [
        ThreadSetting.greeting(greeting_text),
        ThreadSetting.get_started_button(GET_STARTED_PAYLOAD),
        build_persistent_menu(f"{server_url}/"),
    ]


async def configure_thread_settings(
    page_access_token: str,
    settings: list[ThreadSetting],
) -> int:
    """
    Apply several thread settings, logging (not raising) each failure.

    Returns:
        Number of settings applied successfully
    """
    applied = 0
    for setting in settings:
        try:
            await apply_thread_setting(page_access_token, setting)
            applied += 1
        except GraphAPIError as e:
            logfire.error(
                "Thread setting failed",
                kind=setting.kind.value,
                op=setting.op.value,
                status_code=e.status_code,
                error=e.message,
            )
    return applied
