"""
supportdesk config: load from env.

load_settings() bundles LLMSettings, SheetsSettings, TelegramSettings and
AgentSettings; each can also be built on its own with from_env().
"""
from supportdesk.config.settings import (
    AgentSettings,
    LLMSettings,
    Settings,
    SheetsSettings,
    TelegramSettings,
    load_settings,
)

__all__ = [
    "AgentSettings",
    "LLMSettings",
    "Settings",
    "SheetsSettings",
    "TelegramSettings",
    "load_settings",
]
