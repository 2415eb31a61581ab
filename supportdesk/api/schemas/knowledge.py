"""Pydantic v2 schemas for the knowledge base endpoints."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class KnowledgeStatus(BaseModel):
    loaded: bool
    entries: int
    headers: List[str] = []
    summary: str


class KnowledgeRefreshResponse(BaseModel):
    loaded: bool
    entries: int
    source: Optional[str] = None
