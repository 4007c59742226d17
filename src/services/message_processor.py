"""Reply execution for the event router.

MessageProcessor turns interpreter commands and fixed acknowledgments
into Send API calls. A failed send is logged here and goes no further;
nothing in this module raises GraphAPIError to its caller.
"""

from __future__ import annotations

import logfire

from src.constants import (
    GENERIC_GREETING_TEXT,
    INTRO_MESSAGE,
    SYNC_DEMO_MESSAGE_COUNT,
)
from src.models.outbound_models import OutboundIntent, SendResult, TextMessage
from src.services.command_interpreter import (
    Command,
    GreetUser,
    SendIntent,
    ShowIntro,
    SyncDemo,
    interpret_text,
)
from src.services.facebook_service import GraphAPIError
from src.services.messaging_protocol import MessagingService


class MessageProcessor:
    """Execute replies for one sender at a time.

    Example:
        >>> processor = MessageProcessor(messaging_service, server_url="https://bot.example")
        >>> await processor.reply_to_text("user456", "sync")

        # With a recording service for testing:
        >>> mock_messaging = MockMessagingService(fail_on_send=3)
        >>> processor = MessageProcessor(mock_messaging, server_url="https://bot.example")
    """

    def __init__(
        self,
        messaging_service: MessagingService,
        server_url: str,
        intro_message: str = INTRO_MESSAGE,
    ):
        """Initialize the message processor.

        Args:
            messaging_service: Service used for every outbound call
            server_url: Base URL for asset and authorize links
            intro_message: Text of the introduction flow
        """
        self._messaging = messaging_service
        self._server_url = server_url
        self._intro_message = intro_message

    async def send(self, recipient_id: str, intent: OutboundIntent) -> SendResult | None:
        """Send one intent; log and swallow a GraphAPIError.

        Returns:
            SendResult on success, None if the send failed
        """
        try:
            return await self._messaging.send(recipient_id, intent)
        except GraphAPIError as e:
            logfire.error(
                "Failed calling Send API",
                recipient_id=recipient_id,
                intent=intent.kind,
                status_code=e.status_code,
                error=e.message,
            )
            return None

    async def send_text(self, recipient_id: str, text: str) -> SendResult | None:
        return await self.send(recipient_id, TextMessage(text=text))

    async def reply_to_text(self, sender_id: str, message_text: str) -> Command:
        """Interpret a text message and execute the resulting command."""
        command = interpret_text(message_text, self._server_url)
        logfire.info(
            "Text command interpreted",
            sender_id=sender_id,
            command=command.kind,
            intent=command.intent.kind if isinstance(command, SendIntent) else None,
        )
        await self.execute(sender_id, command)
        return command

    async def execute(self, sender_id: str, command: Command) -> None:
        if isinstance(command, GreetUser):
            await self.greet_user(sender_id)
        elif isinstance(command, ShowIntro):
            await self.show_intro(sender_id)
        elif isinstance(command, SyncDemo):
            await self.run_sync_demo(sender_id)
        else:
            await self.send(sender_id, command.intent)

    async def _fetch_first_name(self, user_id: str) -> str | None:
        try:
            user_info = await self._messaging.get_user_info(user_id)
        except GraphAPIError as e:
            logfire.error(
                "Cannot get user information",
                user_id=user_id,
                status_code=e.status_code,
                error=e.message,
            )
            return None
        return user_info.first_name

    async def greet_user(self, user_id: str) -> None:
        """Reply "Hi <first name>!", or "Hello!" when the name is unknown."""
        first_name = await self._fetch_first_name(user_id)
        if first_name:
            await self.send_text(user_id, f"Hi {first_name}!")
        else:
            await self.send_text(user_id, GENERIC_GREETING_TEXT)

    async def show_intro(self, user_id: str) -> None:
        """Explain the bot, personalized with the user's first name if known."""
        first_name = await self._fetch_first_name(user_id)
        if first_name:
            await self.send_text(user_id, f"Hi {first_name}. {self._intro_message}")
        else:
            await self.send_text(user_id, self._intro_message)

    async def run_sync_demo(self, user_id: str) -> int:
        """Send "1".."5" in order, each only after the previous succeeded.

        Returns:
            Number of messages delivered before completion or abort
        """
        for n in range(1, SYNC_DEMO_MESSAGE_COUNT + 1):
            result = await self.send_text(user_id, str(n))
            if result is None:
                logfire.warn("Sync test FAILED. Aborted", user_id=user_id, failed_at=n)
                return n - 1
        logfire.info("Sync test completed", user_id=user_id)
        return SYNC_DEMO_MESSAGE_COUNT


def get_message_processor(
    messaging_service: MessagingService,
    server_url: str,
) -> MessageProcessor:
    """Factory function to create a MessageProcessor instance."""
    return MessageProcessor(messaging_service=messaging_service, server_url=server_url)
