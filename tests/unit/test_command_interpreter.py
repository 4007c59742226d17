"""Tests for the text command interpreter."""

import pytest
from hypothesis import given, strategies as st

from src.constants import GREETING_PHRASES
from src.models.outbound_models import (
    AccountLinkPrompt,
    AttachmentMessage,
    ButtonTemplate,
    GenericTemplate,
    QuickReplyMessage,
    ReceiptTemplate,
    SenderActionMessage,
    TextMessage,
)
from src.services.command_interpreter import (
    COMMAND_TABLE,
    GreetUser,
    SendIntent,
    ShowIntro,
    SyncDemo,
    interpret_text,
)

SERVER_URL = "https://bot.test"


class TestNormalization:
    @pytest.mark.parametrize("text", ["Image", "image", " image ", "IMAGE\n"])
    def test_image_variants(self, text):
        command = interpret_text(text, SERVER_URL)

        assert isinstance(command, SendIntent)
        assert command.intent == AttachmentMessage(
            attachment_type="image", url="https://bot.test/assets/rift.png"
        )

    def test_unmatched_text_is_echoed_verbatim(self):
        command = interpret_text("xyz", SERVER_URL)

        assert command == SendIntent(intent=TextMessage(text="xyz"))

    def test_echo_keeps_original_casing_and_spacing(self):
        command = interpret_text("  Hello World?  ", SERVER_URL)

        assert command.intent.text == "  Hello World?  "

    def test_substring_does_not_match(self):
        command = interpret_text("send me an image please", SERVER_URL)

        assert isinstance(command.intent, TextMessage)

    def test_trailing_slash_in_server_url(self):
        command = interpret_text("file", SERVER_URL + "/")

        assert command.intent.url == "https://bot.test/assets/test.txt"


class TestKeywordTable:
    @pytest.mark.parametrize(
        "keyword, attachment_type, path",
        [
            ("gif", "image", "/assets/instagram_logo.gif"),
            ("audio", "audio", "/assets/sample.mp3"),
            ("video", "video", "/assets/allofus480.mov"),
            ("file", "file", "/assets/test.txt"),
        ],
    )
    def test_attachment_keywords(self, keyword, attachment_type, path):
        intent = interpret_text(keyword, SERVER_URL).intent

        assert intent.attachment_type == attachment_type
        assert intent.url == SERVER_URL + path

    @pytest.mark.parametrize(
        "keyword, intent_type",
        [
            ("button", ButtonTemplate),
            ("generic", GenericTemplate),
            ("receipt", ReceiptTemplate),
            ("quick reply", QuickReplyMessage),
        ],
    )
    def test_template_keywords(self, keyword, intent_type):
        assert isinstance(interpret_text(keyword, SERVER_URL).intent, intent_type)

    @pytest.mark.parametrize(
        "keyword, action",
        [
            ("read receipt", "mark_seen"),
            ("typing on", "typing_on"),
            ("Typing Off", "typing_off"),
        ],
    )
    def test_sender_action_keywords(self, keyword, action):
        assert interpret_text(keyword, SERVER_URL).intent == SenderActionMessage(action=action)

    def test_account_linking_points_to_authorize(self):
        intent = interpret_text("account linking", SERVER_URL).intent

        assert intent == AccountLinkPrompt(authorize_url="https://bot.test/authorize")

    def test_receipt_order_number(self):
        intent = interpret_text("receipt", SERVER_URL).intent

        assert intent.order_number.startswith("order")
        assert 0 <= int(intent.order_number[len("order"):]) <= 999

    def test_info_and_sync(self):
        assert isinstance(interpret_text("info", SERVER_URL), ShowIntro)
        assert isinstance(interpret_text(" SYNC ", SERVER_URL), SyncDemo)

    def test_table_covers_all_commands(self):
        assert set(COMMAND_TABLE) == {
            "image", "gif", "audio", "video", "file", "button", "generic",
            "receipt", "quick reply", "read receipt", "typing on",
            "typing off", "account linking", "info", "sync",
        }


class TestGreetings:
    @pytest.mark.parametrize("text", ["hi", "Hello", "  HEY THERE "])
    def test_greeting_phrases(self, text):
        assert isinstance(interpret_text(text, SERVER_URL), GreetUser)

    def test_greeting_wins_over_keyword(self, monkeypatch):
        monkeypatch.setattr(
            "src.services.command_interpreter.GREETING_PHRASES",
            GREETING_PHRASES | {"image"},
        )

        assert isinstance(interpret_text("image", SERVER_URL), GreetUser)

    def test_no_overlap_by_construction(self):
        assert not GREETING_PHRASES & set(COMMAND_TABLE)


class TestProperties:
    @given(text=st.text(max_size=200))
    def test_never_raises(self, text: str):
        """Property: every input maps to some command."""
        command = interpret_text(text, SERVER_URL)

        assert command.kind in {"greet", "intro", "sync", "send"}

    @given(text=st.text(max_size=200))
    def test_unknown_text_is_echoed(self, text: str):
        normalized = text.strip().lower()
        command = interpret_text(text, SERVER_URL)

        if normalized not in COMMAND_TABLE and normalized not in GREETING_PHRASES:
            assert command == SendIntent(intent=TextMessage(text=text))

    @given(
        keyword=st.sampled_from(sorted(COMMAND_TABLE)),
        left=st.text(alphabet=" \t\n", max_size=3),
        right=st.text(alphabet=" \t\n", max_size=3),
    )
    def test_case_and_whitespace_insensitive(self, keyword, left, right):
        plain = interpret_text(keyword, SERVER_URL)
        padded = interpret_text(f"{left}{keyword.upper()}{right}", SERVER_URL)

        assert type(plain) is type(padded)
        if isinstance(plain, SendIntent) and keyword != "receipt":
            assert plain == padded
