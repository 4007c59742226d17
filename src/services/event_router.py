"""Classify Messenger webhook events and dispatch them to handlers.

Classification looks at which top-level field an event carries (an
empty object still counts), in a fixed order, and the first match wins:

    optin -> message -> delivery -> postback -> read -> account_linking

Anything else becomes an UnknownEvent that is only logged. Each event is
classified and dispatched on its own; a failure in one never stops its
siblings.
"""

from typing import Any

import logfire
from pydantic import ValidationError

from src.constants import (
    ATTACHMENT_ACK_TEXT,
    AUTHENTICATION_SUCCESS_TEXT,
    GET_STARTED_PAYLOAD,
    POSTBACK_ACK_TEXT,
    QUICK_REPLY_ACK_TEXT,
)
from src.logging_config import mask_pii
from src.models.messenger import (
    AccountLinkEvent,
    AuthenticationEvent,
    DeliveryEvent,
    InboundEvent,
    MessageEvent,
    PostbackEvent,
    ReadEvent,
    UnknownEvent,
)
from src.services.message_processor import MessageProcessor


def _base_fields(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "sender_id": (raw.get("sender") or {}).get("id"),
        "recipient_id": (raw.get("recipient") or {}).get("id"),
        "timestamp": raw.get("timestamp"),
    }


def classify_event(raw: dict[str, Any]) -> InboundEvent:
    """
    Build the typed event for one raw ``messaging`` item.

    Raises:
        ValidationError: If sender/recipient ids are missing or a field
            has the wrong type
    """
    base = _base_fields(raw)

    if raw.get("optin") is not None:
        return AuthenticationEvent(**base, ref=raw["optin"].get("ref"))

    if raw.get("message") is not None:
        message = raw["message"]
        quick_reply = message.get("quick_reply") or {}
        return MessageEvent(
            **base,
            message_id=message.get("mid"),
            text=message.get("text"),
            attachments=message.get("attachments") or [],
            quick_reply_payload=quick_reply.get("payload"),
            is_echo=bool(message.get("is_echo")),
            app_id=message.get("app_id"),
            metadata=message.get("metadata"),
        )

    if raw.get("delivery") is not None:
        delivery = raw["delivery"]
        return DeliveryEvent(
            **base,
            message_ids=delivery.get("mids") or [],
            watermark=delivery.get("watermark"),
            seq=delivery.get("seq"),
        )

    if raw.get("postback") is not None:
        postback = raw["postback"]
        return PostbackEvent(
            **base,
            payload=postback.get("payload"),
            title=postback.get("title"),
        )

    if raw.get("read") is not None:
        read = raw["read"]
        return ReadEvent(**base, watermark=read.get("watermark"), seq=read.get("seq"))

    if raw.get("account_linking") is not None:
        linking = raw["account_linking"]
        return AccountLinkEvent(
            **base,
            status=linking.get("status"),
            authorization_code=linking.get("authorization_code"),
        )

    return UnknownEvent(**base, raw=raw)


class EventRouter:
    """Route typed events to their handlers.

    Handlers that reply go through the MessageProcessor; Delivery, Read,
    AccountLink, Unknown and echo messages only log.
    """

    def __init__(self, processor: MessageProcessor):
        self._processor = processor

    def collect_events(self, payload: dict[str, Any]) -> list[InboundEvent]:
        """Classify every event of every entry, in arrival order.

        Events that cannot be classified are logged and skipped.
        """
        events: list[InboundEvent] = []
        entries = payload.get("entry") or []
        if not isinstance(entries, list):
            logfire.warn("Skipping webhook payload without an entry list")
            return events

        for entry in entries:
            if not isinstance(entry, dict):
                logfire.warn("Skipping malformed webhook entry", entry_type=type(entry).__name__)
                continue
            page_id = entry.get("id")
            raw_events = entry.get("messaging") or []
            if not isinstance(raw_events, list):
                logfire.warn("Skipping entry without a messaging list", page_id=page_id)
                continue
            for raw_event in raw_events:
                try:
                    events.append(classify_event(raw_event))
                except (ValidationError, AttributeError, TypeError) as e:
                    logfire.warn(
                        "Skipping malformed messaging event",
                        page_id=page_id,
                        error=str(e),
                    )
        return events

    async def dispatch(self, event: InboundEvent) -> None:
        """Run the handler for one event; log and absorb any error."""
        try:
            if isinstance(event, AuthenticationEvent):
                await self.on_authentication(event)
            elif isinstance(event, MessageEvent):
                await self.on_message(event)
            elif isinstance(event, DeliveryEvent):
                self.on_delivery(event)
            elif isinstance(event, PostbackEvent):
                await self.on_postback(event)
            elif isinstance(event, ReadEvent):
                self.on_read(event)
            elif isinstance(event, AccountLinkEvent):
                self.on_account_link(event)
            else:
                logfire.warn("Webhook received unknown messaging event", event=event.raw)
        except Exception as e:
            logfire.error(
                "Error handling messaging event",
                kind=event.kind,
                sender_id=event.sender_id,
                error=str(e),
                error_type=type(e).__name__,
            )

    async def on_authentication(self, event: AuthenticationEvent) -> None:
        logfire.info(
            "Received authentication",
            sender_id=event.sender_id,
            recipient_id=event.recipient_id,
            ref=event.ref,
            timestamp=event.timestamp,
        )
        await self._processor.send_text(event.sender_id, AUTHENTICATION_SUCCESS_TEXT)

    async def on_message(self, event: MessageEvent) -> None:
        logfire.info(
            "Received message",
            sender_id=event.sender_id,
            recipient_id=event.recipient_id,
            message_id=event.message_id,
            timestamp=event.timestamp,
        )

        if event.is_echo:
            logfire.info(
                "Received echo",
                message_id=event.message_id,
                app_id=event.app_id,
                metadata=event.metadata,
            )
            return

        if event.quick_reply_payload:
            logfire.info(
                "Quick reply tapped",
                message_id=event.message_id,
                payload=event.quick_reply_payload,
            )
            await self._processor.send_text(event.sender_id, QUICK_REPLY_ACK_TEXT)
            return

        if event.text:
            await self._processor.reply_to_text(event.sender_id, event.text)
        elif event.attachments:
            await self._processor.send_text(event.sender_id, ATTACHMENT_ACK_TEXT)

    def on_delivery(self, event: DeliveryEvent) -> None:
        for message_id in event.message_ids:
            logfire.info("Received delivery confirmation", message_id=message_id)
        logfire.info(
            "All messages before watermark were delivered",
            watermark=event.watermark,
            seq=event.seq,
        )

    async def on_postback(self, event: PostbackEvent) -> None:
        logfire.info(
            "Received postback",
            sender_id=event.sender_id,
            recipient_id=event.recipient_id,
            payload=event.payload,
            timestamp=event.timestamp,
        )
        if event.payload == GET_STARTED_PAYLOAD:
            await self._processor.show_intro(event.sender_id)
        else:
            await self._processor.send_text(event.sender_id, POSTBACK_ACK_TEXT)

    def on_read(self, event: ReadEvent) -> None:
        logfire.info(
            "Received message read event",
            sender_id=event.sender_id,
            watermark=event.watermark,
            seq=event.seq,
        )

    def on_account_link(self, event: AccountLinkEvent) -> None:
        logfire.info(
            "Received account link event",
            sender_id=event.sender_id,
            status=event.status,
            authorization_code=mask_pii(event.authorization_code),
        )
