"""Knowledge router: status and reload of the knowledge base."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from supportdesk.agent.knowledge import KnowledgeStore
from supportdesk.api.dependencies import get_knowledge_source, get_knowledge_store
from supportdesk.api.schemas.knowledge import KnowledgeRefreshResponse, KnowledgeStatus
from supportdesk.clients.knowledge.base import BaseKnowledgeSource
from supportdesk.core.exceptions import KnowledgeSourceError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/knowledge", tags=["knowledge"])


async def load_from_source(store: KnowledgeStore, source: BaseKnowledgeSource) -> None:
    """Fetch rows from *source* and swap them into *store*. Raises KnowledgeSourceError."""
    sheet = await source.fetch()
    store.load_sheet(sheet)


@router.get("", response_model=KnowledgeStatus)
async def knowledge_status(store: KnowledgeStore = Depends(get_knowledge_store)):
    return KnowledgeStatus(
        loaded=store.is_loaded(),
        entries=store.entry_count,
        headers=store.headers,
        summary=store.get_summary(),
    )


@router.post("/refresh", response_model=KnowledgeRefreshResponse)
async def refresh_knowledge(
    store: KnowledgeStore = Depends(get_knowledge_store),
    source: Optional[BaseKnowledgeSource] = Depends(get_knowledge_source),
):
    if source is None:
        raise HTTPException(status_code=503, detail="No knowledge source configured")

    clear_cache = getattr(source, "clear_cache", None)
    if callable(clear_cache):
        clear_cache()
    try:
        await load_from_source(store, source)
    except KnowledgeSourceError as exc:
        logger.warning("knowledge: refresh from %s failed: %s", source.name, exc)
        raise HTTPException(status_code=502, detail=exc.message)

    return KnowledgeRefreshResponse(loaded=True, entries=store.entry_count, source=source.name)
