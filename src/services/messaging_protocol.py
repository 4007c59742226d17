"""Messaging abstraction protocols for decoupling from the Facebook API.

This module provides a Protocol-based abstraction for messaging services,
allowing the application to:
- Mock messaging in tests without complex httpx mocking
- Support dependency injection for the event router and processor
"""

from typing import Protocol

from src.models.outbound_models import OutboundIntent, SendResult, TextMessage
from src.models.user_models import FacebookUserInfo
from src.services.facebook_service import GraphAPIError, get_user_info, send_intent


class MessagingService(Protocol):
    """Protocol for sending messages and fetching user info.

    Both send methods and get_user_info raise GraphAPIError on failure.
    """

    async def send(self, recipient_id: str, intent: OutboundIntent) -> SendResult:
        """Send an outbound intent to recipient."""
        ...

    async def send_text(self, recipient_id: str, text: str) -> SendResult:
        """Send a plain text message to recipient."""
        ...

    async def get_user_info(self, user_id: str) -> FacebookUserInfo:
        """Get user profile information."""
        ...


class FacebookMessagingService:
    """Facebook Messenger implementation of MessagingService.

    Wraps the facebook_service functions with a fixed page access token.

    Example:
        >>> service = FacebookMessagingService(page_access_token="...")
        >>> await service.send_text("user123", "Hello!")
        SendResult(recipient_id='user123', message_id='mid.1')
    """

    def __init__(self, page_access_token: str):
        """Initialize with Facebook Page access token.

        Args:
            page_access_token: Facebook Page access token for API calls
        """
        if not page_access_token:
            raise ValueError("page_access_token is required")
        self._token = page_access_token

    async def send(self, recipient_id: str, intent: OutboundIntent) -> SendResult:
        return await send_intent(
            page_access_token=self._token,
            recipient_id=recipient_id,
            intent=intent,
        )

    async def send_text(self, recipient_id: str, text: str) -> SendResult:
        return await self.send(recipient_id, TextMessage(text=text))

    async def get_user_info(self, user_id: str) -> FacebookUserInfo:
        return await get_user_info(page_access_token=self._token, user_id=user_id)


class MockMessagingService:
    """Recording implementation for testing.

    Allows tests to verify messaging behavior without making real API calls.

    Example:
        >>> service = MockMessagingService(fail_on_send=3)
        >>> await service.send_text("user123", "1")
        SendResult(recipient_id='user123', message_id='mid.1')
        >>> service.sent_texts
        ['1']
    """

    def __init__(
        self,
        user_info: FacebookUserInfo | None = None,
        user_info_error: GraphAPIError | None = None,
        fail_on_send: int | None = None,
    ):
        """Initialize mock service.

        Args:
            user_info: Profile returned by get_user_info
            user_info_error: Raised by get_user_info instead, if given
            fail_on_send: 1-based index of the send call that should fail
        """
        self._user_info = user_info
        self._user_info_error = user_info_error
        self._fail_on_send = fail_on_send
        self.sent: list[tuple[str, OutboundIntent]] = []
        self.get_user_info_calls: list[str] = []

    @property
    def sent_texts(self) -> list[str]:
        return [i.text for _, i in self.sent if isinstance(i, TextMessage)]

    async def send(self, recipient_id: str, intent: OutboundIntent) -> SendResult:
        self.sent.append((recipient_id, intent))
        if self._fail_on_send == len(self.sent):
            raise GraphAPIError(500, "Simulated send failure")
        return SendResult(recipient_id=recipient_id, message_id=f"mid.{len(self.sent)}")

    async def send_text(self, recipient_id: str, text: str) -> SendResult:
        return await self.send(recipient_id, TextMessage(text=text))

    async def get_user_info(self, user_id: str) -> FacebookUserInfo:
        self.get_user_info_calls.append(user_id)
        if self._user_info_error is not None:
            raise self._user_info_error
        if self._user_info is None:
            return FacebookUserInfo(id=user_id)
        return self._user_info


def get_messaging_service(page_access_token: str) -> FacebookMessagingService:
    """Factory function to get a MessagingService implementation.

    Args:
        page_access_token: Facebook Page access token

    Returns:
        MessagingService implementation (currently Facebook)
    """
    return FacebookMessagingService(page_access_token=page_access_token)
