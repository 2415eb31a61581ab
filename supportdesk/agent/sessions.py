"""
SessionManager: the entry point the surrounding application talks to.

One SessionState per session id. A turn holds its session's lock from start
to finish, so turns of the same conversation never interleave while other
sessions proceed concurrently. Idle sessions are evicted lazily.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional

from supportdesk.agent.dialogue import DialogueOrchestrator
from supportdesk.agent.state import SessionState
from supportdesk.agent.types import TurnResult

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(
        self,
        orchestrator: DialogueOrchestrator,
        *,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._orchestrator = orchestrator
        self._ttl = orchestrator.settings.session_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, SessionState] = {}

    @property
    def orchestrator(self) -> DialogueOrchestrator:
        return self._orchestrator

    def __len__(self) -> int:
        return len(self._sessions)

    def session_ids(self) -> List[str]:
        return list(self._sessions)

    def get_session(self, session_id: str) -> Optional[SessionState]:
        return self._sessions.get(session_id)

    def _get_or_create(self, session_id: str) -> SessionState:
        session = self._sessions.get(session_id)
        if session is None:
            session = self._orchestrator.new_session(session_id)
            now = self._clock()
            session.created_at = now
            session.last_active_at = now
            self._sessions[session_id] = session
            logger.info("Session started", extra={"session_id": session_id})
        return session

    async def handle_turn_result(self, session_id: str, utterance: str) -> TurnResult:
        self.prune_idle_sessions()
        session = self._get_or_create(session_id)
        async with session.lock:
            session.touch(self._clock())
            result = await self._orchestrator.handle_turn(session, utterance)
            session.touch(self._clock())
        return result

    async def handle_turn(self, session_id: str, utterance: str) -> str:
        return (await self.handle_turn_result(session_id, utterance)).answer

    def is_ticket_flow_active(self, session_id: str) -> bool:
        session = self._sessions.get(session_id)
        return session is not None and session.ticket_flow_active()

    def end_session(self, session_id: str) -> bool:
        """Forget *session_id*. Returns False when it was not known."""
        removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info("Session ended", extra={"session_id": session_id})
        return removed is not None

    def prune_idle_sessions(self) -> int:
        """Drop sessions idle longer than the TTL that are not mid-turn; returns how many."""
        if self._ttl <= 0:
            return 0
        cutoff = self._clock() - self._ttl
        stale = [
            sid for sid, s in self._sessions.items()
            if s.last_active_at < cutoff and not s.lock.locked()
        ]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.info("Pruned %d idle session(s)", len(stale))
        return len(stale)
