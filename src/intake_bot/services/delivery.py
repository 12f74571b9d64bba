"""
Outbound sinks: hand bot replies to the chat channel.
"""

from abc import ABC, abstractmethod
from typing import Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from intake_bot.core.config import settings
from intake_bot.core.exceptions import DeliveryError
from intake_bot.core.logging import get_logger

logger = get_logger(__name__)


class OutboundSink(ABC):
    """Delivers reply text to the user."""

    @abstractmethod
    async def deliver(self, conversation_key: str, text: str) -> bool:
        """Deliver a reply; returns False instead of raising on failure."""
        ...

    async def close(self) -> None:
        return None


class NullOutboundSink(OutboundSink):
    """Used when replies are only returned in the HTTP response."""

    async def deliver(self, conversation_key: str, text: str) -> bool:
        logger.debug("No outbound sink configured", conversation_key=conversation_key)
        return False


class WebhookOutboundSink(OutboundSink):
    """POSTs ``{conversation_key, text}`` to a webhook."""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.webhook_url = webhook_url if webhook_url is not None else settings.delivery.webhook_url
        self.timeout = timeout if timeout is not None else settings.delivery.timeout
        self.max_attempts = max_attempts or settings.delivery.max_attempts
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _post(self, conversation_key: str, text: str) -> None:
        client = await self._get_client()
        response = await client.post(
            self.webhook_url,
            json={"conversation_key": conversation_key, "text": text},
        )
        if response.is_error:
            raise DeliveryError(
                f"HTTP {response.status_code}",
                details={"status_code": response.status_code},
            )

    async def deliver(self, conversation_key: str, text: str) -> bool:
        # Only transport errors are retried; an HTTP error answer is final
        sender = retry(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )(self._post)

        try:
            await sender(conversation_key, text)
        except (DeliveryError, httpx.RequestError) as e:
            logger.error(
                "Reply delivery failed",
                conversation_key=conversation_key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        logger.debug("Reply delivered", conversation_key=conversation_key)
        return True


def create_outbound_sink() -> OutboundSink:
    """Build the outbound sink described by the settings."""
    if settings.delivery.webhook_url:
        return WebhookOutboundSink()
    return NullOutboundSink()
