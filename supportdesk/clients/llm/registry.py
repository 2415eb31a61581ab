"""
LLM provider registry: map provider name -> build client from config dict.

Built-in providers (openrouter, openai, gemini, noop) are registered on
import; ``build_from_settings`` turns an ``LLMSettings`` into a client.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List

from supportdesk.clients.llm.base import BaseLLMClient
from supportdesk.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from supportdesk.config.settings import LLMSettings

Builder = Callable[[Dict[str, Any]], BaseLLMClient]


class LLMRegistry:
    """Maps provider id to a builder that takes a config dict and returns a BaseLLMClient."""

    def __init__(self) -> None:
        self._builders: Dict[str, Builder] = {}

    def register(self, provider: str, builder: Builder) -> None:
        self._builders[provider] = builder

    def get(self, provider: str) -> Builder | None:
        return self._builders.get(provider)

    @property
    def providers(self) -> List[str]:
        return sorted(self._builders)

    def build(self, provider: str, config: Dict[str, Any]) -> BaseLLMClient:
        """Build a client. Raises ConfigurationError for an unknown provider."""
        builder = self._builders.get(provider)
        if builder is None:
            raise ConfigurationError(
                f"Unknown LLM provider: {provider!r}. Registered: {self.providers}",
                details={"provider": provider},
            )
        return builder(config)

    def build_from_settings(self, settings: "LLMSettings") -> BaseLLMClient:
        return self.build(settings.provider, settings.to_builder_config())


default_registry = LLMRegistry()

from supportdesk.clients.llm.providers.gemini import gemini_builder  # noqa: E402
from supportdesk.clients.llm.providers.noop import noop_builder  # noqa: E402
from supportdesk.clients.llm.providers.openai import openai_builder, openrouter_builder  # noqa: E402

default_registry.register("openrouter", openrouter_builder)
default_registry.register("openai", openai_builder)
default_registry.register("gemini", gemini_builder)
default_registry.register("noop", noop_builder)
