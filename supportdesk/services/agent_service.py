"""AgentService: build a fully-wired SessionManager from Settings."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from supportdesk.agent.dialogue import DialogueOrchestrator
from supportdesk.agent.knowledge import KnowledgeStore
from supportdesk.agent.sessions import SessionManager
from supportdesk.agent.tickets import TicketDelivery
from supportdesk.clients.knowledge import BaseKnowledgeSource, CsvKnowledgeSource, GoogleSheetsSource
from supportdesk.clients.llm import BaseLLMClient, LLMRegistry, default_registry
from supportdesk.config.settings import Settings
from supportdesk.core.exceptions import KnowledgeSourceError
from supportdesk.integrations.telegram import TelegramTicketDelivery

logger = logging.getLogger(__name__)


@dataclass
class AgentComponents:
    manager: SessionManager
    llm: BaseLLMClient
    source: Optional[BaseKnowledgeSource]
    delivery: Optional[TicketDelivery]


class AgentService:
    """Factory for the LLM client, knowledge source, ticket delivery and session manager."""

    @staticmethod
    def build_llm(settings: Settings, registry: LLMRegistry = default_registry) -> BaseLLMClient:
        client = registry.build_from_settings(settings.llm)
        logger.info("AgentService: LLM provider=%s model=%s", settings.llm.provider, settings.llm.model)
        return client

    @staticmethod
    def build_knowledge_source(
        settings: Settings, *, csv_path: Optional[str] = None,
    ) -> Optional[BaseKnowledgeSource]:
        """CSV path (argument or KNOWLEDGE_CSV_PATH) wins over Google Sheets."""
        sheets = settings.sheets
        path = csv_path or sheets.csv_path
        if path:
            return CsvKnowledgeSource(path)
        if sheets.sheets_enabled:
            return GoogleSheetsSource(
                sheets.api_key or "",
                sheets.sheet_id or "",
                range=sheets.range,
                cache_seconds=sheets.cache_seconds,
            )
        logger.warning("AgentService: no knowledge source configured")
        return None

    @staticmethod
    def build_delivery(settings: Settings) -> Optional[TicketDelivery]:
        tg = settings.telegram
        if not tg.enabled:
            logger.info("AgentService: Telegram not configured; escalation points to %s",
                        settings.agent.support_contact)
            return None
        return TelegramTicketDelivery(tg.bot_token or "", tg.chat_id or "")

    @staticmethod
    async def load_knowledge(store: KnowledgeStore, source: Optional[BaseKnowledgeSource]) -> bool:
        """Initial load. A failing source leaves the store unloaded (chat answers "still loading")."""
        if source is None:
            return False
        try:
            store.load_sheet(await source.fetch())
        except KnowledgeSourceError as exc:
            logger.warning("AgentService: knowledge load from %s failed: %s", source.name, exc)
            return False
        return True

    @classmethod
    async def build(
        cls,
        settings: Settings,
        *,
        llm: Optional[BaseLLMClient] = None,
        source: Optional[BaseKnowledgeSource] = None,
        delivery: Optional[TicketDelivery] = None,
        csv_path: Optional[str] = None,
    ) -> AgentComponents:
        llm = llm or cls.build_llm(settings)
        source = source or cls.build_knowledge_source(settings, csv_path=csv_path)
        delivery = delivery or cls.build_delivery(settings)
        agent = settings.agent

        store = KnowledgeStore(llm, timeout_seconds=agent.llm_timeout_seconds)
        await cls.load_knowledge(store, source)

        orchestrator = DialogueOrchestrator(llm, store, settings=agent, delivery=delivery)
        manager = SessionManager(orchestrator)
        logger.info(
            "AgentService: agent ready (knowledge=%s, tickets=%s)",
            store.get_summary(),
            delivery is not None,
        )
        return AgentComponents(manager=manager, llm=llm, source=source, delivery=delivery)
