"""Text-generation API client (Anthropic Messages API)."""

import logging

import anthropic
import httpx

from shortsbot.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class GenerationAPIClient:
    """Single-prompt completion client with a bounded timeout.

    The API key is passed per call because the operator can change it at
    runtime; the SDK client is rebuilt only when the key changes. All SDK
    clients share one httpx connection pool.
    """

    def __init__(
        self,
        model: str,
        max_tokens: int = 600,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._http = httpx.AsyncClient(transport=transport)
        self._client: anthropic.AsyncAnthropic | None = None
        self._client_key: str | None = None

    async def close(self) -> None:
        await self._http.aclose()

    def _get_client(self, api_key: str) -> anthropic.AsyncAnthropic:
        if self._client is None or self._client_key != api_key:
            self._client = anthropic.AsyncAnthropic(
                api_key=api_key,
                timeout=self.timeout,
                # Callers fall back to the local writer instead of waiting on retries
                max_retries=0,
                http_client=self._http,
            )
            self._client_key = api_key
        return self._client

    async def complete(self, api_key: str, prompt: str) -> str:
        """Send *prompt* as a single user message and return its text.

        Raises:
            UpstreamError: transport failure, error status or a reply without text.
        """
        client = self._get_client(api_key)
        try:
            message = await client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            raise UpstreamError(f"Generation API returned HTTP {e.status_code}") from e
        except anthropic.APIError as e:
            raise UpstreamError(f"Generation API request failed: {type(e).__name__}: {e}") from e

        text = "".join(block.text for block in message.content if block.type == "text")
        if not text.strip():
            raise UpstreamError("Generation API returned no text")

        logger.debug(f"Generation API returned {len(text)} chars (stop: {message.stop_reason})")
        return text
