"""Chat completions through OpenRouter's OpenAI-compatible API."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx
import openai

from litsearch.config import DEFAULT_OPENROUTER_BASE_URL
from litsearch.models import Outcome

logger = logging.getLogger(__name__)

SOURCE = "OpenRouter"

Message = dict[str, str]


class CompletionClient(Protocol):
    """Anything that can turn a message list into assistant text."""

    async def complete(
        self,
        model: str,
        messages: list[Message],
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> Outcome[Optional[str]]: ...


class OpenRouterClient:
    """Single-attempt chat completion client."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_OPENROUTER_BASE_URL,
    ):
        self._client: Optional[openai.AsyncOpenAI] = None
        if api_key:
            self._client = openai.AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                http_client=http_client,
                max_retries=0,
            )

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def complete(
        self,
        model: str,
        messages: list[Message],
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> Outcome[Optional[str]]:
        if self._client is None:
            logger.warning("OPEN_ROUTER_API is not set, skipping %s completion", model)
            return Outcome.failed(None, SOURCE, "not_configured")

        kwargs: dict = {}
        if temperature is not None:
            kwargs["temperature"] = temperature
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=messages,
                **kwargs,
            )
        except openai.APITimeoutError as e:
            logger.warning("%s completion timed out: %s", model, e)
            return Outcome.failed(None, SOURCE, "timeout", str(e))
        except openai.APIStatusError as e:
            logger.warning("%s completion returned HTTP %s", model, e.status_code)
            return Outcome.failed(None, SOURCE, "http_status", str(e.status_code))
        except openai.OpenAIError as e:
            logger.warning("%s completion failed: %s", model, e)
            return Outcome.failed(None, SOURCE, "transport", str(e))

        if not response.choices or response.choices[0].message.content is None:
            logger.warning("%s completion had no content", model)
            return Outcome.failed(None, SOURCE, "malformed", "empty choices")
        return Outcome(response.choices[0].message.content)
