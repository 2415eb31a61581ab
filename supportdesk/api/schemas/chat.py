"""Pydantic v2 schemas for the Chat API."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=8000)
    session_id: Optional[str] = Field(default=None, min_length=1, max_length=128)


class ChatResponse(BaseModel):
    answer: str
    session_id: str
    language: str
    route: str
    ticket_flow_active: bool = False


class TicketFlowResponse(BaseModel):
    session_id: str
    active: bool
