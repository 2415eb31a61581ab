from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Literal, Optional, Sequence, TypedDict

from supportdesk.core.exceptions import EmptyResponse


class LLMMessage(TypedDict):
    role: Literal["system", "user", "assistant"]
    content: str


class BaseLLMClient(ABC):
    """The completion capability every agent component depends on.

    ``complete()`` raises ``ProviderError`` on transport failures or non-2xx
    answers and ``EmptyResponse`` when the provider returns no content.
    """

    @property
    @abstractmethod
    def provider(self) -> str:
        ...

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        messages: Sequence[LLMMessage],
        *,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> str:
        ...

    @abstractmethod
    async def test_connection(self) -> bool:
        ...

    @staticmethod
    def build_messages(system_prompt: str, messages: Sequence[LLMMessage]) -> List[LLMMessage]:
        """Prepend the system prompt and drop empty turns."""
        out: List[LLMMessage] = []
        if system_prompt.strip():
            out.append({"role": "system", "content": system_prompt})
        for msg in messages:
            content = (msg.get("content") or "").strip()
            if content:
                out.append({"role": msg.get("role", "user"), "content": content})
        return out

    def _require_text(self, text: Optional[str]) -> str:
        cleaned = (text or "").strip()
        if not cleaned:
            raise EmptyResponse(
                f"{self.provider} returned an empty completion",
                details={"provider": self.provider},
            )
        return cleaned
