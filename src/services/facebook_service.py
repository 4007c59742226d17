"""Facebook Graph API client: Send API and User Profile API.

Every call is a single HTTP request. A 2xx response with a JSON body is
returned to the caller; anything else (transport error, non-2xx status,
unparseable body) raises GraphAPIError. Nothing is retried here.
"""

import time
from typing import Any

import httpx
import logfire

from src.config import get_settings
from src.constants import (
    ERROR_BODY_LOG_CHARS,
    FACEBOOK_GRAPH_API_VERSION,
    USER_PROFILE_FIELDS,
)
from src.models.outbound_models import OutboundIntent, SendResult, TextMessage
from src.models.user_models import FacebookUserInfo


class GraphAPIError(Exception):
    """Normalized failure of a Graph API call.

    ``status_code`` is None when the request never got a response
    (connection error, timeout).
    """

    def __init__(
        self,
        status_code: int | None,
        message: str,
        *,
        error_type: str | None = None,
        code: int | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error_type = error_type
        self.code = code

    def __str__(self) -> str:
        if self.status_code is None:
            return f"Graph API request failed: {self.message}"
        return f"Graph API error {self.status_code}: {self.message}"


def graph_api_url(path: str) -> str:
    """Build a versioned Graph API URL for ``path`` (e.g. ``me/messages``)."""
    settings = get_settings()
    return f"{settings.graph_api_base_url}/{FACEBOOK_GRAPH_API_VERSION}/{path.lstrip('/')}"


def _error_from_response(response: httpx.Response) -> GraphAPIError:
    try:
        data = response.json()
    except ValueError:
        data = None

    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return GraphAPIError(
            response.status_code,
            str(error["message"]),
            error_type=error.get("type"),
            code=error.get("code"),
        )
    message = response.text[:ERROR_BODY_LOG_CHARS] or response.reason_phrase
    return GraphAPIError(response.status_code, message)


async def call_graph_api(
    method: str,
    path: str,
    page_access_token: str,
    *,
    json_body: dict[str, Any] | None = None,
    params: dict[str, str] | None = None,
) -> dict[str, Any]:
    """
    Perform one Graph API request and return the parsed JSON body.

    Args:
        method: HTTP method (GET, POST, DELETE)
        path: Path below the API version, e.g. ``me/messages``
        page_access_token: Facebook Page access token
        json_body: Optional JSON request body
        params: Extra query parameters

    Raises:
        GraphAPIError: On transport failure, non-2xx status or bad JSON
    """
    start_time = time.time()
    url = graph_api_url(path)
    query = {"access_token": page_access_token, **(params or {})}

    try:
        settings = get_settings()
        async with httpx.AsyncClient(timeout=settings.facebook_api_timeout_seconds) as client:
            response = await client.request(method, url, params=query, json=json_body)
    except httpx.RequestError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Facebook API request error",
            method=method,
            path=path,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
        )
        raise GraphAPIError(None, str(e) or type(e).__name__) from e

    elapsed = time.time() - start_time

    if not response.is_success:
        error = _error_from_response(response)
        logfire.error(
            "Facebook API HTTP error",
            method=method,
            path=path,
            status_code=response.status_code,
            error=error.message,
            response_body=response.text[:ERROR_BODY_LOG_CHARS],
            response_time_ms=elapsed * 1000,
        )
        raise error

    try:
        data = response.json()
    except ValueError as e:
        logfire.error(
            "Facebook API returned invalid JSON",
            method=method,
            path=path,
            status_code=response.status_code,
            response_body=response.text[:ERROR_BODY_LOG_CHARS],
        )
        raise GraphAPIError(response.status_code, "Invalid JSON in response") from e

    if not isinstance(data, dict):
        raise GraphAPIError(response.status_code, "Unexpected response shape")

    logfire.info(
        "Facebook API call succeeded",
        method=method,
        path=path,
        status_code=response.status_code,
        response_time_ms=elapsed * 1000,
    )
    return data


def build_send_payload(recipient_id: str, intent: OutboundIntent) -> dict[str, Any]:
    """Render the full Send API body for an intent."""
    return {"recipient": {"id": recipient_id}, **intent.to_body()}


async def call_send_api(
    page_access_token: str,
    payload: dict[str, Any],
) -> SendResult:
    """
    POST a prepared body to the Send API.

    Returns:
        SendResult with the recipient id and, for messages, the message id
    """
    body = await call_graph_api(
        "POST", "me/messages", page_access_token, json_body=payload
    )
    result = SendResult(
        recipient_id=body.get("recipient_id"),
        message_id=body.get("message_id"),
    )
    if result.message_id:
        logfire.info(
            "Successfully sent message",
            message_id=result.message_id,
            recipient_id=result.recipient_id,
        )
    else:
        logfire.info(
            "Successfully called Send API",
            recipient_id=result.recipient_id,
        )
    return result


async def send_intent(
    page_access_token: str,
    recipient_id: str,
    intent: OutboundIntent,
) -> SendResult:
    """
    Send any outbound intent to a user.

    Args:
        page_access_token: Facebook Page access token
        recipient_id: Facebook user ID (PSID) to send to
        intent: What to send

    Raises:
        GraphAPIError: If the Send API call fails
    """
    logfire.info(
        "Sending Facebook message",
        recipient_id=recipient_id,
        intent=intent.kind,
        api_version=FACEBOOK_GRAPH_API_VERSION,
    )
    return await call_send_api(
        page_access_token, build_send_payload(recipient_id, intent)
    )


async def send_message(
    page_access_token: str,
    recipient_id: str,
    text: str,
) -> SendResult:
    """Send a plain text message (with developer metadata)."""
    return await send_intent(page_access_token, recipient_id, TextMessage(text=text))


async def get_user_info(
    page_access_token: str,
    user_id: str,
) -> FacebookUserInfo:
    """
    Get basic user info from the User Profile API (no consent required).

    ``first_name`` may be missing from the response; callers must treat
    every profile field as optional.

    Raises:
        GraphAPIError: If the profile could not be fetched
    """
    logfire.info("Fetching basic user info from Facebook", user_id=user_id)
    data = await call_graph_api(
        "GET",
        user_id,
        page_access_token,
        params={"fields": ",".join(USER_PROFILE_FIELDS)},
    )
    logfire.info(
        "User info fetched successfully",
        user_id=user_id,
        has_name=bool(data.get("first_name")),
        locale=data.get("locale"),
    )
    return FacebookUserInfo(
        id=str(data.get("id") or user_id),
        first_name=data.get("first_name") or None,
        last_name=data.get("last_name"),
        profile_pic=data.get("profile_pic"),
        locale=data.get("locale"),
        timezone=data.get("timezone"),
    )
