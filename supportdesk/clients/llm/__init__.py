"""
LLM clients: base, registry, providers.

Build a client from env with
``default_registry.build_from_settings(LLMSettings.from_env())``.
"""
from supportdesk.clients.llm.base import BaseLLMClient, LLMMessage
from supportdesk.clients.llm.registry import LLMRegistry, default_registry

__all__ = [
    "BaseLLMClient",
    "LLMMessage",
    "LLMRegistry",
    "default_registry",
]
