"""OpenAI-compatible LLM provider (OpenAI, OpenRouter): BaseLLMClient implementation + registry builders."""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Sequence

import openai
from openai import AsyncOpenAI

from supportdesk.clients.llm.base import BaseLLMClient, LLMMessage
from supportdesk.core.exceptions import ProviderError

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenAILLMClient(BaseLLMClient):
    """Chat-completions client for any OpenAI-compatible endpoint."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        default_headers: Optional[Dict[str, str]] = None,
        provider_name: str = "openai",
    ) -> None:
        self._model = model
        self._provider_name = provider_name
        self._client = AsyncOpenAI(
            api_key=api_key or os.environ.get("OPENAI_API_KEY"),
            base_url=base_url,
            default_headers=default_headers or None,
        )

    @property
    def provider(self) -> str:
        return self._provider_name

    async def complete(
        self,
        system_prompt: str,
        messages: Sequence[LLMMessage],
        *,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> str:
        kwargs: Dict[str, Any] = {
            "model": self._model,
            "messages": self.build_messages(system_prompt, messages),
            "temperature": temperature,
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        try:
            response = await self._client.chat.completions.create(**kwargs)
        except openai.APIStatusError as exc:
            raise ProviderError(
                f"{self.provider} returned HTTP {exc.status_code}",
                details={"provider": self.provider, "status": exc.status_code},
                cause=exc,
            ) from exc
        except openai.APIError as exc:
            raise ProviderError(
                f"{self.provider} request failed: {exc}",
                details={"provider": self.provider},
                cause=exc,
            ) from exc

        if not response.choices:
            return self._require_text(None)
        return self._require_text(response.choices[0].message.content)

    async def test_connection(self) -> bool:
        try:
            await self._client.models.list()
            return True
        except openai.APIError as exc:
            logger.warning("OpenAILLMClient: connection test failed: %s", exc)
            return False


def openai_builder(config: Dict[str, Any]) -> OpenAILLMClient:
    return OpenAILLMClient(
        model=config.get("model", "gpt-4o-mini"),
        api_key=config.get("api_key"),
        base_url=config.get("base_url"),
    )


def openrouter_builder(config: Dict[str, Any]) -> OpenAILLMClient:
    headers: Dict[str, str] = {}
    if config.get("referer"):
        headers["HTTP-Referer"] = str(config["referer"])
    if config.get("title"):
        headers["X-Title"] = str(config["title"])
    return OpenAILLMClient(
        model=config.get("model", "deepseek/deepseek-chat-v3.1:free"),
        api_key=config.get("api_key") or os.environ.get("OPENROUTER_API_KEY"),
        base_url=config.get("base_url") or OPENROUTER_BASE_URL,
        default_headers=headers,
        provider_name="openrouter",
    )
