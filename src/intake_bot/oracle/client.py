"""
Text-completion oracle clients.

The core only needs ``complete(prompt) -> text``; the HTTP client speaks the
OpenAI-compatible chat-completions dialect that most providers and gateways
expose.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from intake_bot.core.config import settings
from intake_bot.core.exceptions import OracleError
from intake_bot.core.logging import get_logger

logger = get_logger(__name__)


class CompletionClient(ABC):
    """Answers natural-language prompts with free text."""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """
        Complete a prompt.

        Raises:
            OracleError: If the service is unreachable or answers with nothing usable
        """
        ...

    @property
    def is_configured(self) -> bool:
        return True

    async def close(self) -> None:
        """Release any underlying resources."""
        return None


class HttpCompletionClient(CompletionClient):
    """
    Completion client for OpenAI-compatible ``/chat/completions`` endpoints.

    A single attempt is made per call; callers degrade to their local
    fallback instead of retrying.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API base URL, e.g. ``https://gateway.local/v1``
            api_key: Bearer token
            model: Model identifier sent with every request
            temperature: Sampling temperature
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url if base_url is not None else settings.oracle.base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.oracle.api_key
        self.model = model or settings.oracle.model
        self.temperature = temperature if temperature is not None else settings.oracle.temperature
        self.timeout = timeout if timeout is not None else settings.oracle.timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
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

    async def complete(self, prompt: str) -> str:
        if not self.is_configured:
            raise OracleError("Oracle base URL is not configured")

        client = await self._get_client()
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
        }

        try:
            response = await client.post("/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise OracleError(
                f"HTTP {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            raise OracleError(f"Request failed: {e}") from e
        except ValueError as e:
            raise OracleError("Completion response is not JSON") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise OracleError("Completion response has no message content") from e

        if not isinstance(content, str) or not content.strip():
            raise OracleError("Completion response is empty")

        logger.debug("Oracle answered", model=self.model, answer_length=len(content))
        return content.strip()
