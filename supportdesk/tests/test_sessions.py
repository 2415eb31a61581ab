"""Tests for SessionManager: per-session isolation, turn serialization, pruning."""
from __future__ import annotations

import asyncio
import unittest

from supportdesk.agent.dialogue import DialogueOrchestrator
from supportdesk.agent.knowledge import KnowledgeStore
from supportdesk.agent.sessions import SessionManager
from supportdesk.agent.types import SupportTicket, TurnResult
from supportdesk.clients.llm.base import BaseLLMClient
from supportdesk.config.settings import AgentSettings


def _run(coro):
    return asyncio.run(coro)


ROWS = [
    {"Question": "What are your hours?", "Answer": "9am-5pm"},
    {"Question": "Do you offer delivery?", "Answer": "Yes, within 10 km."},
]


class SlowLLM(BaseLLMClient):
    """Every prompt is judged not relevant; tracks how many calls overlap."""

    def __init__(self, delay: float = 0.01) -> None:
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def provider(self) -> str:
        return "slow"

    async def complete(self, system_prompt, messages, *, temperature=0.7, max_tokens=None):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        if system_prompt.startswith("You are a relevance checker"):
            return '{"isRelevant": false, "confidence": 0}'
        return "Could you share more details?"

    async def test_connection(self) -> bool:
        return True


class FakeDelivery:
    async def deliver(self, ticket: SupportTicket) -> None:
        return None


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _manager(llm=None, **kwargs) -> SessionManager:
    llm = llm or SlowLLM(delay=0)
    store = KnowledgeStore(llm)
    store.load(ROWS)
    orch = DialogueOrchestrator(llm, store, settings=AgentSettings(), delivery=FakeDelivery())
    return SessionManager(orch, **kwargs)


class TestSessionIsolation(unittest.TestCase):
    def test_sessions_do_not_share_state(self) -> None:
        manager = _manager()

        async def go():
            await manager.handle_turn("a", "Can you tell me a joke")
            await manager.handle_turn("a", "What is the weather like")
            await manager.handle_turn("b", "Can you tell me a joke")

        _run(go())
        self.assertTrue(manager.is_ticket_flow_active("a"))
        self.assertFalse(manager.is_ticket_flow_active("b"))
        self.assertEqual(manager.get_session("b").assistance.attempt_count, 1)
        self.assertEqual(len(manager.get_session("a").history), 4)
        self.assertEqual(len(manager.get_session("b").history), 2)

    def test_handle_turn_returns_text(self) -> None:
        manager = _manager()
        self.assertEqual(_run(manager.handle_turn("a", "what time do you open")), "9am-5pm")

    def test_handle_turn_result(self) -> None:
        manager = _manager()
        result = _run(manager.handle_turn_result("a", "what time do you open"))
        self.assertIsInstance(result, TurnResult)
        self.assertEqual(result.route, "direct_answer")
        self.assertEqual(manager.session_ids(), ["a"])

    def test_unknown_session_has_no_ticket_flow(self) -> None:
        self.assertFalse(_manager().is_ticket_flow_active("nobody"))


class TestTurnSerialization(unittest.TestCase):
    def test_same_session_turns_do_not_overlap(self) -> None:
        llm = SlowLLM()
        manager = _manager(llm)

        async def go():
            await asyncio.gather(*(manager.handle_turn("a", "Can you tell me a joke") for _ in range(3)))

        _run(go())
        self.assertEqual(llm.max_in_flight, 1)

    def test_different_sessions_run_concurrently(self) -> None:
        llm = SlowLLM()
        manager = _manager(llm)

        async def go():
            await asyncio.gather(
                manager.handle_turn("a", "Can you tell me a joke"),
                manager.handle_turn("b", "Can you tell me a joke"),
            )

        _run(go())
        self.assertEqual(llm.max_in_flight, 2)


class TestSessionLifecycle(unittest.TestCase):
    def test_end_session(self) -> None:
        manager = _manager()
        _run(manager.handle_turn("a", "hello"))
        self.assertTrue(manager.end_session("a"))
        self.assertFalse(manager.end_session("a"))
        self.assertEqual(len(manager), 0)

    def test_idle_sessions_are_pruned(self) -> None:
        clock = FakeClock()
        manager = _manager(ttl_seconds=10, clock=clock)
        _run(manager.handle_turn("old", "hello"))
        clock.now = 8.0
        _run(manager.handle_turn("recent", "hello"))
        clock.now = 15.0
        self.assertEqual(manager.prune_idle_sessions(), 1)
        self.assertEqual(manager.session_ids(), ["recent"])

    def test_pruning_happens_on_the_next_turn(self) -> None:
        clock = FakeClock()
        manager = _manager(ttl_seconds=10, clock=clock)
        _run(manager.handle_turn("old", "hello"))
        clock.now = 30.0
        _run(manager.handle_turn("new", "hello"))
        self.assertEqual(manager.session_ids(), ["new"])

    def test_zero_ttl_disables_pruning(self) -> None:
        clock = FakeClock()
        manager = _manager(ttl_seconds=0, clock=clock)
        _run(manager.handle_turn("a", "hello"))
        clock.now = 10_000.0
        self.assertEqual(manager.prune_idle_sessions(), 0)
        self.assertEqual(len(manager), 1)

    def test_ttl_defaults_to_settings(self) -> None:
        clock = FakeClock()
        manager = _manager(clock=clock)
        _run(manager.handle_turn("a", "hello"))
        clock.now = AgentSettings().session_ttl_seconds - 1
        self.assertEqual(manager.prune_idle_sessions(), 0)
        clock.now = AgentSettings().session_ttl_seconds + 1
        self.assertEqual(manager.prune_idle_sessions(), 1)


if __name__ == "__main__":
    unittest.main()
