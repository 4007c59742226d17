"""Incoming Facebook Messenger webhook models."""

from typing import Any, Literal, Union

from pydantic import BaseModel, Field


class MessagingEvent(BaseModel):
    """Fields shared by every messaging event."""

    sender_id: str
    recipient_id: str
    timestamp: int | None = None


class AuthenticationEvent(MessagingEvent):
    """User opted in through the Send to Messenger plugin."""

    kind: Literal["authentication"] = "authentication"
    ref: str | None = None


class MessageEvent(MessagingEvent):
    """Message sent to the page (or echoed back from it)."""

    kind: Literal["message"] = "message"
    message_id: str | None = None
    text: str | None = None
    attachments: list[dict[str, Any]] = Field(default_factory=list)
    quick_reply_payload: str | None = None
    is_echo: bool = False
    app_id: int | str | None = None
    metadata: str | None = None


class DeliveryEvent(MessagingEvent):
    """Messages up to ``watermark`` were delivered."""

    kind: Literal["delivery"] = "delivery"
    message_ids: list[str] = Field(default_factory=list)
    watermark: int | None = None
    seq: int | None = None


class PostbackEvent(MessagingEvent):
    """A postback button was tapped."""

    kind: Literal["postback"] = "postback"
    payload: str | None = None
    title: str | None = None


class ReadEvent(MessagingEvent):
    """Messages up to ``watermark`` were read."""

    kind: Literal["read"] = "read"
    watermark: int | None = None
    seq: int | None = None


class AccountLinkEvent(MessagingEvent):
    """Link / unlink account action."""

    kind: Literal["account_link"] = "account_link"
    status: str | None = None
    authorization_code: str | None = None


class UnknownEvent(MessagingEvent):
    """Anything we do not recognize; kept for logging."""

    kind: Literal["unknown"] = "unknown"
    raw: dict[str, Any] = Field(default_factory=dict)


InboundEvent = Union[
    AuthenticationEvent,
    MessageEvent,
    DeliveryEvent,
    PostbackEvent,
    ReadEvent,
    AccountLinkEvent,
    UnknownEvent,
]
