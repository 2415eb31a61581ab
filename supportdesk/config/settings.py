"""
supportdesk.config.settings – env-driven settings for the agent and its collaborators.

Env vars:
  LLM:       LLM_PROVIDER, LLM_MODEL, LLM_BASE_URL, OPENROUTER_API_KEY,
             OPENAI_API_KEY, GEMINI_API_KEY / GOOGLE_API_KEY,
             OPENROUTER_REFERER, OPENROUTER_TITLE
  Knowledge: GOOGLE_SHEETS_API_KEY, GOOGLE_SHEET_ID, GOOGLE_SHEET_RANGE,
             SHEETS_CACHE_SECONDS, KNOWLEDGE_CSV_PATH
  Telegram:  TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID
  Agent:     AGENT_MAX_ATTEMPTS, AGENT_RELEVANCE_THRESHOLD, AGENT_HISTORY_WINDOW,
             AGENT_CONTEXT_MAX_LENGTH, AGENT_LLM_TIMEOUT_SECONDS,
             AGENT_SUPPORT_CONTACT, AGENT_MAX_DELIVERY_ATTEMPTS,
             AGENT_SESSION_TTL_SECONDS
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

_PROVIDERS = frozenset({"openrouter", "openai", "gemini", "noop"})

_DEFAULT_MODELS = {
    "openrouter": "deepseek/deepseek-chat-v3.1:free",
    "openai": "gpt-4o-mini",
    "gemini": "gemini-2.0-flash",
    "noop": "noop",
}


def _env(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass(frozen=True)
class LLMSettings:
    provider: str
    model: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    referer: Optional[str] = None
    title: Optional[str] = None

    def __post_init__(self) -> None:
        if self.provider not in _PROVIDERS:
            raise ValueError(f"provider must be one of {sorted(_PROVIDERS)}, got {self.provider!r}")
        if self.provider != "noop" and not self.api_key:
            raise ValueError(f"provider {self.provider!r} requires an API key")
        if not self.model:
            raise ValueError("model must be a non-empty string")

    @classmethod
    def from_env(cls, **overrides: object) -> LLMSettings:
        """Resolve the provider explicitly (LLM_PROVIDER) or from whichever key is set."""
        keys = {
            "openrouter": _env("OPENROUTER_API_KEY"),
            "openai": _env("OPENAI_API_KEY"),
            "gemini": _env("GEMINI_API_KEY") or _env("GOOGLE_API_KEY"),
        }
        provider = str(overrides.get("provider") or _env("LLM_PROVIDER") or "").lower()
        if not provider:
            provider = next((name for name, key in keys.items() if key), "noop")
        api_key = overrides.get("api_key") or keys.get(provider)
        model = str(overrides.get("model") or _env("LLM_MODEL") or _DEFAULT_MODELS.get(provider, ""))
        return cls(
            provider=provider,
            model=model,
            api_key=str(api_key) if api_key else None,
            base_url=str(overrides.get("base_url") or _env("LLM_BASE_URL") or "") or None,
            referer=_env("OPENROUTER_REFERER"),
            title=_env("OPENROUTER_TITLE"),
        )

    def to_builder_config(self) -> Dict[str, Any]:
        """Config dict consumed by LLMRegistry builders."""
        return {k: v for k, v in asdict(self).items() if v is not None and k != "provider"}


@dataclass(frozen=True)
class SheetsSettings:
    api_key: Optional[str] = None
    sheet_id: Optional[str] = None
    range: str = "Sheet1"
    cache_seconds: int = 300
    csv_path: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.cache_seconds, int) or self.cache_seconds < 0:
            raise ValueError(f"cache_seconds must be a non-negative integer, got {self.cache_seconds!r}")
        if not self.range.strip():
            raise ValueError("range must be a non-empty string")

    @property
    def sheets_enabled(self) -> bool:
        return bool(self.api_key and self.sheet_id)

    @classmethod
    def from_env(cls) -> SheetsSettings:
        return cls(
            api_key=_env("GOOGLE_SHEETS_API_KEY"),
            sheet_id=_env("GOOGLE_SHEET_ID"),
            range=_env("GOOGLE_SHEET_RANGE") or "Sheet1",
            cache_seconds=int(_env("SHEETS_CACHE_SECONDS") or "300"),
            csv_path=_env("KNOWLEDGE_CSV_PATH"),
        )


@dataclass(frozen=True)
class TelegramSettings:
    bot_token: Optional[str] = None
    chat_id: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    @classmethod
    def from_env(cls) -> TelegramSettings:
        return cls(bot_token=_env("TELEGRAM_BOT_TOKEN"), chat_id=_env("TELEGRAM_CHAT_ID"))


@dataclass(frozen=True)
class AgentSettings:
    """Tunables of the dialogue pipeline."""

    max_attempts: int = 2
    relevance_threshold: int = 30
    history_window: int = 6
    context_max_length: int = 3000
    llm_timeout_seconds: Optional[float] = 30.0
    """Per-call timeout for every completion. None = no timeout."""
    support_contact: str = "support@example.com"
    max_delivery_attempts: int = 3
    session_ttl_seconds: int = 3600

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts!r}")
        if not 0 <= self.relevance_threshold <= 100:
            raise ValueError(f"relevance_threshold must be within 0..100, got {self.relevance_threshold!r}")
        if self.history_window < 0:
            raise ValueError(f"history_window must be >= 0, got {self.history_window!r}")
        if self.context_max_length < 1:
            raise ValueError(f"context_max_length must be positive, got {self.context_max_length!r}")
        if self.max_delivery_attempts < 1:
            raise ValueError(f"max_delivery_attempts must be >= 1, got {self.max_delivery_attempts!r}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> AgentSettings:
        """Load from a dict. Missing or malformed keys use defaults."""
        if not data:
            return cls()
        defaults = cls()
        values: Dict[str, Any] = {}
        for name, default in asdict(defaults).items():
            raw = data.get(name)
            if raw is None:
                continue
            try:
                if name == "support_contact":
                    values[name] = str(raw).strip() or default
                elif name == "llm_timeout_seconds":
                    values[name] = float(raw) if float(raw) > 0 else None
                else:
                    values[name] = int(raw)
            except (TypeError, ValueError):
                continue
        return cls(**values)

    @classmethod
    def from_env(cls) -> AgentSettings:
        prefix = "AGENT_"
        raw = {
            name: os.environ.get(prefix + name.upper())
            for name in asdict(cls()).keys()
        }
        return cls.from_dict({k: v for k, v in raw.items() if v not in (None, "")})


@dataclass(frozen=True)
class Settings:
    llm: LLMSettings
    sheets: SheetsSettings
    telegram: TelegramSettings
    agent: AgentSettings


def load_settings() -> Settings:
    return Settings(
        llm=LLMSettings.from_env(),
        sheets=SheetsSettings.from_env(),
        telegram=TelegramSettings.from_env(),
        agent=AgentSettings.from_env(),
    )
