"""LLM provider implementations (registered in supportdesk.clients.llm.registry)."""
from supportdesk.clients.llm.providers.gemini import GeminiLLMClient
from supportdesk.clients.llm.providers.noop import NoOpLLMClient
from supportdesk.clients.llm.providers.openai import OpenAILLMClient

__all__ = ["GeminiLLMClient", "NoOpLLMClient", "OpenAILLMClient"]
