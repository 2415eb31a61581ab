"""FastAPI dependency providers."""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request, status

from supportdesk.agent.knowledge import KnowledgeStore
from supportdesk.agent.sessions import SessionManager
from supportdesk.clients.knowledge.base import BaseKnowledgeSource


def get_session_manager(request: Request) -> SessionManager:
    """The SessionManager built at startup; 503 if startup did not finish."""
    manager = getattr(request.app.state, "session_manager", None)
    if manager is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chat agent not initialised. Check server startup logs.",
        )
    return manager


def get_knowledge_store(request: Request) -> KnowledgeStore:
    return get_session_manager(request).orchestrator.knowledge


def get_knowledge_source(request: Request) -> Optional[BaseKnowledgeSource]:
    return getattr(request.app.state, "knowledge_source", None)
