"""Facebook webhook endpoints.

GET answers the subscription handshake. POST receives batched messaging
events: the raw body is signature-checked, parsed and classified, then
every event is dispatched as a background task so the 200 goes back to
Facebook without waiting on any outbound call.
"""

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response
from fastapi.responses import PlainTextResponse

from src.config import get_settings
from src.constants import SIGNATURE_HEADER
from src.logging_config import redact_tokens
from src.services.event_router import EventRouter
from src.services.message_processor import get_message_processor
from src.services.messaging_protocol import get_messaging_service
from src.services.signature import (
    SignatureVerificationError,
    verify_request_signature,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def get_event_router() -> EventRouter:
    """Build the router for the configured page."""
    settings = get_settings()
    messaging_service = get_messaging_service(settings.facebook_page_access_token)
    return EventRouter(get_message_processor(messaging_service, settings.server_url))


@router.get("")
async def verify_webhook(request: Request):
    """Facebook webhook verification endpoint."""
    settings = get_settings()

    mode = request.query_params.get("hub.mode")
    token = request.query_params.get("hub.verify_token")
    challenge = request.query_params.get("hub.challenge")

    if mode == "subscribe" and token == settings.facebook_verify_token:
        logger.info("Webhook verified successfully")
        return PlainTextResponse(challenge or "")

    logger.warning(
        "Webhook verification failed. Make sure the verify tokens match. params=%s",
        redact_tokens(dict(request.query_params)),
    )
    return Response(status_code=403)


@router.post("")
async def handle_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    event_router: EventRouter = Depends(get_event_router),
):
    """Handle incoming Facebook Messenger webhook events."""
    settings = get_settings()
    body = await request.body()

    try:
        verify_request_signature(
            body,
            request.headers.get(SIGNATURE_HEADER),
            settings.facebook_app_secret,
        )
    except SignatureVerificationError as e:
        logger.warning("Rejected webhook: %s", e)
        raise HTTPException(status_code=403, detail="Invalid request signature")

    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    if not isinstance(payload, dict) or payload.get("object") != "page":
        return {"status": "ignored"}

    events = event_router.collect_events(payload)
    for event in events:
        background_tasks.add_task(event_router.dispatch, event)

    logger.info("Dispatched %d messaging events", len(events))
    return {"status": "ok"}
