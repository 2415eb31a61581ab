"""Per-session conversation state threaded through every orchestration call."""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import List, Optional

from supportdesk.agent.assistance import AssistanceTracker
from supportdesk.agent.tickets import TicketIntakeMachine
from supportdesk.agent.types import ConversationTurn, Language


@dataclass
class SessionState:
    session_id: str
    assistance: AssistanceTracker
    tickets: Optional[TicketIntakeMachine] = None
    history: List[ConversationTurn] = field(default_factory=list)
    language: Language = Language.EN
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    created_at: float = field(default_factory=time.monotonic)
    last_active_at: float = field(default_factory=time.monotonic)

    def ticket_flow_active(self) -> bool:
        return self.tickets is not None and self.tickets.is_flow_active()

    def recent_history(self, window: int) -> List[ConversationTurn]:
        if window <= 0:
            return []
        return list(self.history[-window:])

    def touch(self, now: Optional[float] = None) -> None:
        self.last_active_at = time.monotonic() if now is None else now
