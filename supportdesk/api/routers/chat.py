"""Chat router: send messages, inspect and end sessions."""
import logging
import os
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from supportdesk.agent.sessions import SessionManager
from supportdesk.api.dependencies import get_session_manager
from supportdesk.api.schemas.chat import ChatRequest, ChatResponse, TicketFlowResponse
from supportdesk.core.exceptions import SupportDeskError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/chat", tags=["chat"])
limiter = Limiter(key_func=get_remote_address)

CHAT_RATE_LIMIT = os.environ.get("CHAT_RATE_LIMIT", "30/minute")


@router.post("", response_model=ChatResponse)
@limiter.limit(CHAT_RATE_LIMIT)
async def chat(
    request: Request,
    body: ChatRequest,
    manager: SessionManager = Depends(get_session_manager),
):
    session_id = body.session_id or uuid.uuid4().hex
    try:
        result = await manager.handle_turn_result(session_id, body.query)
    except SupportDeskError as exc:
        logger.error("chat: agent error: %s", exc, exc_info=True, extra={"session_id": session_id})
        raise HTTPException(status_code=exc.http_status, detail=exc.message)

    return ChatResponse(
        answer=result.answer,
        session_id=session_id,
        language=result.language.value,
        route=result.route,
        ticket_flow_active=result.ticket_flow_active,
    )


@router.get("/sessions/{session_id}/ticket-flow", response_model=TicketFlowResponse)
async def ticket_flow_status(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    return TicketFlowResponse(session_id=session_id, active=manager.is_ticket_flow_active(session_id))


@router.delete("/sessions/{session_id}", status_code=204)
async def end_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
):
    if not manager.end_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return Response(status_code=204)
