"""Unit tests for AssistanceTracker."""
from __future__ import annotations

import asyncio
import unittest

from supportdesk.agent.assistance import (
    ESCALATION_MESSAGE,
    FALLBACK_FIRST,
    FALLBACK_LATER,
    AssistanceTracker,
)
from supportdesk.clients.llm.base import BaseLLMClient
from supportdesk.core.exceptions import ProviderError


def _run(coro):
    return asyncio.run(coro)


class FakeLLM(BaseLLMClient):
    def __init__(self, reply="") -> None:
        self.reply = reply
        self.calls = []

    @property
    def provider(self) -> str:
        return "fake"

    async def complete(self, system_prompt, messages, *, temperature=0.7, max_tokens=None):
        self.calls.append(
            {"system": system_prompt, "messages": list(messages),
             "temperature": temperature, "max_tokens": max_tokens}
        )
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply

    async def test_connection(self) -> bool:
        return True


class TestAttemptCounting(unittest.TestCase):
    def test_two_attempts_then_stop(self) -> None:
        tracker = AssistanceTracker(FakeLLM())
        self.assertTrue(tracker.should_try_to_help())
        self.assertEqual(tracker.record_attempt("first"), 1)
        self.assertTrue(tracker.should_try_to_help())
        self.assertEqual(tracker.record_attempt("second"), 2)
        self.assertFalse(tracker.should_try_to_help())

    def test_count_never_exceeds_max(self) -> None:
        tracker = AssistanceTracker(FakeLLM(), max_attempts=2)
        for query in ("a", "b", "c"):
            tracker.record_attempt(query)
        self.assertEqual(tracker.attempt_count, 2)
        self.assertEqual(tracker.context, ["a", "b", "c"])

    def test_reset(self) -> None:
        tracker = AssistanceTracker(FakeLLM())
        tracker.record_attempt("q")
        tracker.reset()
        self.assertEqual(tracker.attempt_count, 0)
        self.assertEqual(tracker.context, [])
        self.assertEqual(tracker.state.last_query, "")

    def test_state_is_a_copy(self) -> None:
        tracker = AssistanceTracker(FakeLLM())
        tracker.record_attempt("q")
        tracker.state.context.append("mutated")
        tracker.context.append("mutated")
        self.assertEqual(tracker.context, ["q"])
        self.assertEqual(tracker.state.last_query, "q")

    def test_invalid_max_attempts(self) -> None:
        with self.assertRaises(ValueError):
            AssistanceTracker(FakeLLM(), max_attempts=0)


class TestHelpfulResponse(unittest.TestCase):
    def test_first_attempt_prompt(self) -> None:
        llm = FakeLLM("What exactly are you trying to do?")
        tracker = AssistanceTracker(llm)
        reply = _run(tracker.generate_helpful_response("I need help", 1, "Knowledge Base: 3 entries"))
        self.assertEqual(reply, "What exactly are you trying to do?")
        call = llm.calls[0]
        self.assertIn("FIRST attempt", call["system"])
        self.assertIn("Knowledge Base: 3 entries", call["system"])
        self.assertIn("Do NOT mention support tickets", call["system"])
        self.assertEqual(call["messages"], [{"role": "user", "content": "I need help"}])
        self.assertEqual(call["temperature"], 0.7)
        self.assertEqual(call["max_tokens"], 300)

    def test_later_attempt_prompt(self) -> None:
        llm = FakeLLM("What's the main issue?")
        _run(AssistanceTracker(llm).generate_helpful_response("still stuck", 2, "summary"))
        self.assertIn("SECOND attempt", llm.calls[0]["system"])

    def test_fallbacks_when_the_model_fails(self) -> None:
        tracker = AssistanceTracker(FakeLLM(ProviderError("down")))
        self.assertEqual(_run(tracker.generate_helpful_response("q", 1, "s")), FALLBACK_FIRST)
        self.assertEqual(_run(tracker.generate_helpful_response("q", 2, "s")), FALLBACK_LATER)

    def test_escalation_message(self) -> None:
        self.assertEqual(AssistanceTracker.get_escalation_message(), ESCALATION_MESSAGE)


if __name__ == "__main__":
    unittest.main()
