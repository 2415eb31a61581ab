"""No-op LLM client used when no provider is configured.

Every completion fails with ProviderError so the agent takes its
deterministic fallbacks (direct answers, canned replies, escalation)
instead of pretending a model answered.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from supportdesk.clients.llm.base import BaseLLMClient, LLMMessage
from supportdesk.core.exceptions import ProviderError


class NoOpLLMClient(BaseLLMClient):
    """Placeholder client when no API key is configured."""

    @property
    def provider(self) -> str:
        return "noop"

    async def complete(
        self,
        system_prompt: str,
        messages: Sequence[LLMMessage],
        *,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> str:
        raise ProviderError(
            "No language model configured. Set OPENROUTER_API_KEY, OPENAI_API_KEY or GEMINI_API_KEY.",
            details={"provider": "noop"},
        )

    async def test_connection(self) -> bool:
        return False


def noop_builder(config: Dict[str, Any]) -> NoOpLLMClient:
    return NoOpLLMClient()
