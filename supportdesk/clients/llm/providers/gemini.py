"""Google Gemini LLM provider: BaseLLMClient implementation + registry builder."""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Sequence

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from supportdesk.clients.llm.base import BaseLLMClient, LLMMessage
from supportdesk.core.exceptions import ProviderError

logger = logging.getLogger(__name__)


class GeminiLLMClient(BaseLLMClient):
    """Google Gemini client (gemini-2.0-flash, gemini-1.5-pro, etc.)."""

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        *,
        api_key: Optional[str] = None,
    ) -> None:
        self._model = model
        resolved_key = api_key or os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        self._client = genai.Client(api_key=resolved_key)

    @property
    def provider(self) -> str:
        return "gemini"

    async def complete(
        self,
        system_prompt: str,
        messages: Sequence[LLMMessage],
        *,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> str:
        contents: List[Dict[str, Any]] = []
        for msg in messages:
            content = (msg.get("content") or "").strip()
            if not content:
                continue
            role = "model" if msg.get("role") == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": content}]})

        config = genai_types.GenerateContentConfig(
            system_instruction=system_prompt or None,
            temperature=temperature,
            max_output_tokens=max_tokens,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as exc:
            raise ProviderError(
                f"gemini returned HTTP {exc.code}",
                details={"provider": "gemini", "status": exc.code},
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(
                f"gemini request failed: {exc}",
                details={"provider": "gemini"},
                cause=exc,
            ) from exc
        return self._require_text(response.text)

    async def test_connection(self) -> bool:
        try:
            await self.complete("", [{"role": "user", "content": "Say OK"}], max_tokens=5)
            return True
        except ProviderError as exc:
            logger.warning("GeminiLLMClient: connection test failed: %s", exc)
            return False


def gemini_builder(config: Dict[str, Any]) -> GeminiLLMClient:
    return GeminiLLMClient(
        model=config.get("model", "gemini-2.0-flash"),
        api_key=config.get("api_key"),
    )
