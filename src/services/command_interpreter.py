"""Map free-text messages to replies.

``interpret_text`` is a pure lookup: the message is trimmed and
lowercased, checked against the greeting phrases first, then against the
keyword table as a whole-string match. Anything else is echoed back.
"""

import random
from typing import Callable, Literal, Union

from pydantic import BaseModel

from src.constants import (
    ASSET_AUDIO,
    ASSET_FILE,
    ASSET_GEAR_VR_SQUARE,
    ASSET_GIF,
    ASSET_IMAGE,
    ASSET_RIFT_SQUARE,
    ASSET_TOUCH,
    ASSET_VIDEO,
    GREETING_PHRASES,
)
from src.models.outbound_models import (
    AccountLinkPrompt,
    AttachmentMessage,
    ButtonTemplate,
    GenericElement,
    GenericTemplate,
    OutboundIntent,
    PhoneNumberButton,
    PostbackButton,
    QuickReplyMessage,
    QuickReplyOption,
    ReceiptAddress,
    ReceiptAdjustment,
    ReceiptLineItem,
    ReceiptSummary,
    ReceiptTemplate,
    SenderActionMessage,
    TextMessage,
    WebUrlButton,
)

RIFT_URL = "https://www.oculus.com/en-us/rift/"
TOUCH_URL = "https://www.oculus.com/en-us/touch/"


class GreetUser(BaseModel):
    """Reply "Hi <first name>!" after a profile lookup."""

    kind: Literal["greet"] = "greet"


class ShowIntro(BaseModel):
    """Send the personalized introduction."""

    kind: Literal["intro"] = "intro"


class SyncDemo(BaseModel):
    """Send numbered messages strictly one after another."""

    kind: Literal["sync"] = "sync"


class SendIntent(BaseModel):
    """Send a single prepared intent."""

    kind: Literal["send"] = "send"
    intent: OutboundIntent


Command = Union[GreetUser, ShowIntro, SyncDemo, SendIntent]


def normalize_text(text: str) -> str:
    return text.strip().lower()


# =============================================================================
# Intent builders
# =============================================================================


def build_button_template() -> ButtonTemplate:
    return ButtonTemplate(
        text="This is test text",
        buttons=[
            WebUrlButton(url=RIFT_URL, title="Open Web URL"),
            PostbackButton(title="Trigger Postback", payload="DEVELOPER_DEFINED_PAYLOAD"),
            PhoneNumberButton(title="Call Phone Number", payload="+16505551234"),
        ],
    )


def build_generic_template(server_url: str) -> GenericTemplate:
    return GenericTemplate(
        elements=[
            GenericElement(
                title="rift",
                subtitle="Next-generation virtual reality",
                item_url=RIFT_URL,
                image_url=server_url + ASSET_IMAGE,
                buttons=[
                    WebUrlButton(url=RIFT_URL, title="Open Web URL"),
                    PostbackButton(title="Call Postback", payload="Payload for first bubble"),
                ],
            ),
            GenericElement(
                title="touch",
                subtitle="Your Hands, Now in VR",
                item_url=TOUCH_URL,
                image_url=server_url + ASSET_TOUCH,
                buttons=[
                    WebUrlButton(url=TOUCH_URL, title="Open Web URL"),
                    PostbackButton(title="Call Postback", payload="Payload for second bubble"),
                ],
            ),
        ]
    )


def build_receipt_template(server_url: str, order_number: str | None = None) -> ReceiptTemplate:
    # The API requires a unique order number per receipt
    if order_number is None:
        order_number = f"order{random.randint(0, 999)}"
    return ReceiptTemplate(
        recipient_name="Peter Chang",
        order_number=order_number,
        currency="USD",
        payment_method="Visa 1234",
        timestamp="1428444852",
        line_items=[
            ReceiptLineItem(
                title="Oculus Rift",
                subtitle="Includes: headset, sensor, remote",
                quantity=1,
                price=599.00,
                currency="USD",
                image_url=server_url + ASSET_RIFT_SQUARE,
            ),
            ReceiptLineItem(
                title="Samsung Gear VR",
                subtitle="Frost White",
                quantity=1,
                price=99.99,
                currency="USD",
                image_url=server_url + ASSET_GEAR_VR_SQUARE,
            ),
        ],
        address=ReceiptAddress(
            street_1="1 Hacker Way",
            street_2="",
            city="Menlo Park",
            postal_code="94025",
            state="CA",
            country="US",
        ),
        summary=ReceiptSummary(
            subtotal=698.99,
            shipping_cost=20.00,
            total_tax=57.67,
            total_cost=626.66,
        ),
        adjustments=[
            ReceiptAdjustment(name="New Customer Discount", amount=-50),
            ReceiptAdjustment(name="$100 Off Coupon", amount=-100),
        ],
    )


def build_quick_reply() -> QuickReplyMessage:
    return QuickReplyMessage(
        text="What's your favorite movie genre?",
        options=[
            QuickReplyOption(title=genre, payload=f"DEVELOPER_DEFINED_PAYLOAD_FOR_PICKING_{genre.upper()}")
            for genre in ("Action", "Comedy", "Drama")
        ],
    )


def _attachment(attachment_type: str, path: str) -> Callable[[str], Command]:
    def build(server_url: str) -> Command:
        return SendIntent(
            intent=AttachmentMessage(attachment_type=attachment_type, url=server_url + path)
        )

    return build


def _fixed(intent_factory: Callable[[], OutboundIntent]) -> Callable[[str], Command]:
    return lambda server_url: SendIntent(intent=intent_factory())


# Keyword -> command builder. Builders receive the server URL for asset links.
COMMAND_TABLE: dict[str, Callable[[str], Command]] = {
    "image": _attachment("image", ASSET_IMAGE),
    "gif": _attachment("image", ASSET_GIF),
    "audio": _attachment("audio", ASSET_AUDIO),
    "video": _attachment("video", ASSET_VIDEO),
    "file": _attachment("file", ASSET_FILE),
    "button": _fixed(build_button_template),
    "generic": lambda server_url: SendIntent(intent=build_generic_template(server_url)),
    "receipt": lambda server_url: SendIntent(intent=build_receipt_template(server_url)),
    "quick reply": _fixed(build_quick_reply),
    "read receipt": _fixed(lambda: SenderActionMessage(action="mark_seen")),
    "typing on": _fixed(lambda: SenderActionMessage(action="typing_on")),
    "typing off": _fixed(lambda: SenderActionMessage(action="typing_off")),
    "account linking": lambda server_url: SendIntent(
        intent=AccountLinkPrompt(authorize_url=f"{server_url}/authorize")
    ),
    "info": lambda server_url: ShowIntro(),
    "sync": lambda server_url: SyncDemo(),
}


def interpret_text(text: str, server_url: str) -> Command:
    """
    Decide how to answer a text message.

    Args:
        text: Raw message text as received
        server_url: Base URL for asset and authorize links

    Returns:
        The command to execute; an echo of ``text`` when nothing matches
    """
    normalized = normalize_text(text)

    if normalized in GREETING_PHRASES:
        return GreetUser()

    builder = COMMAND_TABLE.get(normalized)
    if builder is not None:
        return builder(server_url.rstrip("/"))

    return SendIntent(intent=TextMessage(text=text))
