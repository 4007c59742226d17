"""Outbound Send API intents.

Each intent knows how to render the part of the Send API request body
that follows ``recipient``: either a ``message`` object or a
``sender_action`` string.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from src.constants import DEVELOPER_METADATA


# =============================================================================
# Buttons
# =============================================================================


class WebUrlButton(BaseModel):
    type: Literal["web_url"] = "web_url"
    url: str
    title: str


class PostbackButton(BaseModel):
    type: Literal["postback"] = "postback"
    title: str
    payload: str


class PhoneNumberButton(BaseModel):
    type: Literal["phone_number"] = "phone_number"
    title: str
    payload: str  # the phone number, e.g. "+16505551234"


class AccountLinkButton(BaseModel):
    type: Literal["account_link"] = "account_link"
    url: str


Button = Annotated[
    Union[WebUrlButton, PostbackButton, PhoneNumberButton, AccountLinkButton],
    Field(discriminator="type"),
]


def _dump_buttons(buttons: list[Any]) -> list[dict[str, Any]]:
    return [button.model_dump(exclude_none=True) for button in buttons]


# =============================================================================
# Template parts
# =============================================================================


class GenericElement(BaseModel):
    """One bubble of a generic template."""

    title: str
    subtitle: str | None = None
    item_url: str | None = None
    image_url: str | None = None
    buttons: list[Button] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        data = self.model_dump(exclude_none=True, exclude={"buttons"})
        if self.buttons:
            data["buttons"] = _dump_buttons(self.buttons)
        return data


class ReceiptLineItem(BaseModel):
    title: str
    subtitle: str | None = None
    quantity: int = 1
    price: float
    currency: str
    image_url: str | None = None


class ReceiptAddress(BaseModel):
    street_1: str
    street_2: str = ""
    city: str
    postal_code: str
    state: str
    country: str


class ReceiptSummary(BaseModel):
    subtotal: float | None = None
    shipping_cost: float | None = None
    total_tax: float | None = None
    total_cost: float


class ReceiptAdjustment(BaseModel):
    name: str
    amount: float


class QuickReplyOption(BaseModel):
    content_type: Literal["text"] = "text"
    title: str
    payload: str


# =============================================================================
# Intents
# =============================================================================


class TextMessage(BaseModel):
    """Plain text reply."""

    kind: Literal["text"] = "text"
    text: str
    metadata: str | None = DEVELOPER_METADATA

    def to_body(self) -> dict[str, Any]:
        message: dict[str, Any] = {"text": self.text}
        if self.metadata is not None:
            message["metadata"] = self.metadata
        return {"message": message}


class AttachmentMessage(BaseModel):
    """Image, audio, video or file hosted at ``url``."""

    kind: Literal["attachment"] = "attachment"
    attachment_type: Literal["image", "audio", "video", "file"]
    url: str

    def to_body(self) -> dict[str, Any]:
        return {
            "message": {
                "attachment": {
                    "type": self.attachment_type,
                    "payload": {"url": self.url},
                }
            }
        }


class ButtonTemplate(BaseModel):
    kind: Literal["button_template"] = "button_template"
    text: str
    buttons: list[Button] = Field(..., min_length=1)

    def to_body(self) -> dict[str, Any]:
        return {
            "message": {
                "attachment": {
                    "type": "template",
                    "payload": {
                        "template_type": "button",
                        "text": self.text,
                        "buttons": _dump_buttons(self.buttons),
                    },
                }
            }
        }


class GenericTemplate(BaseModel):
    kind: Literal["generic_template"] = "generic_template"
    elements: list[GenericElement] = Field(..., min_length=1)

    def to_body(self) -> dict[str, Any]:
        return {
            "message": {
                "attachment": {
                    "type": "template",
                    "payload": {
                        "template_type": "generic",
                        "elements": [e.to_payload() for e in self.elements],
                    },
                }
            }
        }


class ReceiptTemplate(BaseModel):
    kind: Literal["receipt_template"] = "receipt_template"
    recipient_name: str
    order_number: str
    currency: str
    payment_method: str
    timestamp: str | None = None
    line_items: list[ReceiptLineItem] = Field(default_factory=list)
    address: ReceiptAddress | None = None
    summary: ReceiptSummary
    adjustments: list[ReceiptAdjustment] = Field(default_factory=list)

    def to_body(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "template_type": "receipt",
            "recipient_name": self.recipient_name,
            "order_number": self.order_number,
            "currency": self.currency,
            "payment_method": self.payment_method,
        }
        if self.timestamp is not None:
            payload["timestamp"] = self.timestamp
        payload["elements"] = [
            item.model_dump(exclude_none=True) for item in self.line_items
        ]
        if self.address is not None:
            payload["address"] = self.address.model_dump()
        payload["summary"] = self.summary.model_dump(exclude_none=True)
        payload["adjustments"] = [a.model_dump() for a in self.adjustments]
        return {
            "message": {"attachment": {"type": "template", "payload": payload}}
        }


class QuickReplyMessage(BaseModel):
    kind: Literal["quick_reply"] = "quick_reply"
    text: str
    options: list[QuickReplyOption] = Field(..., min_length=1)

    def to_body(self) -> dict[str, Any]:
        return {
            "message": {
                "text": self.text,
                "quick_replies": [o.model_dump() for o in self.options],
            }
        }


class SenderActionMessage(BaseModel):
    kind: Literal["sender_action"] = "sender_action"
    action: Literal["mark_seen", "typing_on", "typing_off"]

    def to_body(self) -> dict[str, Any]:
        return {"sender_action": self.action}


class AccountLinkPrompt(BaseModel):
    """Button template with a single account_link call-to-action."""

    kind: Literal["account_link_prompt"] = "account_link_prompt"
    text: str = "Welcome. Link your account."
    authorize_url: str

    def to_body(self) -> dict[str, Any]:
        button = AccountLinkButton(url=self.authorize_url)
        return ButtonTemplate(text=self.text, buttons=[button]).to_body()


OutboundIntent = Annotated[
    Union[
        TextMessage,
        AttachmentMessage,
        ButtonTemplate,
        GenericTemplate,
        ReceiptTemplate,
        QuickReplyMessage,
        SenderActionMessage,
        AccountLinkPrompt,
    ],
    Field(discriminator="kind"),
]


class SendResult(BaseModel):
    """Successful Send API response."""

    recipient_id: str | None = None
    message_id: str | None = None
