"""
Ticket sinks: where confirmed proposals are filed.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field

from intake_bot.core.config import settings
from intake_bot.core.exceptions import TicketSubmissionError
from intake_bot.core.logging import get_logger
from intake_bot.domain.conversation import Participant
from intake_bot.domain.proposal import Proposal
from intake_bot.domain.ticket import TicketReceipt

logger = get_logger(__name__)


class TicketRequest(BaseModel):
    """Everything a ticket sink receives for one confirmed proposal."""

    conversation_id: str
    participant: Participant
    transcript: str = Field(default="", description="Conversation history at confirmation time")
    proposal: Proposal


class TicketSink(ABC):
    """Files confirmed proposals in a ticketing system."""

    @abstractmethod
    async def submit(self, request: TicketRequest) -> TicketReceipt:
        """
        File a ticket.

        Raises:
            TicketSubmissionError: If the ticket was not created
        """
        ...

    @property
    def is_configured(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class MockTicketSink(TicketSink):
    """Pretends to file tickets; used in development and demos."""

    def __init__(self, base_url: Optional[str] = None) -> None:
        self.base_url = (base_url or settings.ticket.mock_base_url).rstrip("/")

    async def submit(self, request: TicketRequest) -> TicketReceipt:
        ticket_id = f"TICK-{int(time.time() * 1000)}"
        logger.info(
            "Mock ticket created",
            ticket_id=ticket_id,
            conversation_id=request.conversation_id,
            title=request.proposal.title,
        )
        return TicketReceipt(ticket_id=ticket_id, ticket_url=f"{self.base_url}/{ticket_id}")


class HttpTicketSink(TicketSink):
    """
    Files tickets by POSTing the request to a ticket API.

    The API must answer 2xx with a body carrying the ticket id
    (``ticket_id`` or ``ticket_key``) and ``ticket_url``. No retries are made:
    the user is asked to confirm again instead.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_url = api_url if api_url is not None else settings.ticket.api_url
        self.api_key = api_key if api_key is not None else settings.ticket.api_key
        self.timeout = timeout if timeout is not None else settings.ticket.timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _receipt(self, data: Any) -> TicketReceipt:
        if not isinstance(data, dict):
            raise TicketSubmissionError("Ticket API answered with an unexpected body")

        ticket_id = data.get("ticket_id") or data.get("ticket_key") or data.get("key")
        ticket_url = data.get("ticket_url") or data.get("url")
        if not ticket_id or not ticket_url:
            raise TicketSubmissionError(
                "Ticket API response has no ticket id or url",
                details={"keys": sorted(data.keys())},
            )

        return TicketReceipt(
            ticket_id=str(ticket_id),
            ticket_url=str(ticket_url),
            status=str(data.get("status") or "created"),
        )

    async def submit(self, request: TicketRequest) -> TicketReceipt:
        if not self.is_configured:
            raise TicketSubmissionError("Ticket API URL is not configured")

        client = await self._get_client()
        try:
            response = await client.post(self.api_url, json=request.model_dump(mode="json"))
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Ticket API request failed",
                status_code=e.response.status_code,
                response_text=e.response.text[:500],
            )
            raise TicketSubmissionError(
                f"HTTP {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error("Ticket API request error", error=str(e))
            raise TicketSubmissionError(f"Request failed: {e}") from e
        except ValueError as e:
            raise TicketSubmissionError("Ticket API response is not JSON") from e

        receipt = self._receipt(data)
        logger.info(
            "Ticket created",
            ticket_id=receipt.ticket_id,
            conversation_id=request.conversation_id,
        )
        return receipt


class FallbackTicketSink(TicketSink):
    """Tries the primary sink and files with a secondary one if it fails."""

    def __init__(self, primary: TicketSink, secondary: TicketSink) -> None:
        self.primary = primary
        self.secondary = secondary

    @property
    def is_configured(self) -> bool:
        return self.primary.is_configured

    async def submit(self, request: TicketRequest) -> TicketReceipt:
        try:
            return await self.primary.submit(request)
        except TicketSubmissionError as e:
            logger.warning(
                "Primary ticket sink failed, using fallback sink",
                error=e.message,
                fallback=type(self.secondary).__name__,
            )
            return await self.secondary.submit(request)

    async def close(self) -> None:
        await self.primary.close()
        await self.secondary.close()


def create_ticket_sink() -> TicketSink:
    """Build the ticket sink described by the settings."""
    http_sink = HttpTicketSink()
    if settings.ticket_mock_fallback:
        return FallbackTicketSink(http_sink, MockTicketSink())
    return http_sink
