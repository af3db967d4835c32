"""
Client for a hosted chat-completions API (OpenAI-compatible JSON).

Usage:
    client = CompletionClient.from_settings()
    text = await client.complete([{"role": "user", "content": "Who is No. 1?"}])
"""

import logging
from typing import Optional

import httpx

from courtside.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """The completion service failed or returned something unusable."""


class CompletionClient:
    def __init__(
        self,
        api_key: Optional[str],
        api_url: str,
        model: str,
        max_tokens: int = 600,
        temperature: float = 0.8,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "CompletionClient":
        config = config or default_settings
        return cls(
            api_key=config.llm_api_key,
            api_url=config.llm_api_url,
            model=config.llm_model,
            max_tokens=config.llm_max_tokens,
            temperature=config.llm_temperature,
            timeout=config.llm_timeout,
            transport=transport,
        )

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """
        Send the messages and return the first choice's text.

        Raises:
            CompletionError: Missing API key, transport failure, non-2xx
                             status, or a response without message content
        """
        if not self.api_key:
            raise CompletionError("No API key configured for the completion service")

        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise CompletionError(f"Completion request failed: {exc}") from exc

        if not response.is_success:
            logger.error(
                "Completion API error %d: %s", response.status_code, response.text[:500]
            )
            raise CompletionError(f"Completion API returned HTTP {response.status_code}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise CompletionError("Malformed completion response") from exc

        if not isinstance(content, str) or not content.strip():
            raise CompletionError("Empty completion response")
        return content.strip()
