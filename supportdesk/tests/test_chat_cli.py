"""Tests for the chat CLI loop (I/O injected through _set_io)."""
from __future__ import annotations

import asyncio
import unittest

from supportdesk.agent.dialogue import DialogueOrchestrator
from supportdesk.agent.knowledge import KnowledgeStore
from supportdesk.agent.sessions import SessionManager
from supportdesk.agent.social import SocialIntentMatcher
from supportdesk.clients.llm.providers.noop import NoOpLLMClient
from supportdesk.scripts import chat_cli


def _run(coro):
    return asyncio.run(coro)


class FakeDelivery:
    async def deliver(self, ticket) -> None:
        return None


def _manager() -> SessionManager:
    llm = NoOpLLMClient()
    store = KnowledgeStore(llm)
    store.load([{"Question": "What are your hours?", "Answer": "9am-5pm"}])
    orch = DialogueOrchestrator(
        llm, store, delivery=FakeDelivery(),
        social=SocialIntentMatcher(chooser=lambda pool: pool[0]),
    )
    return SessionManager(orch)


class TestRunChat(unittest.TestCase):
    def setUp(self) -> None:
        self.out = []
        self.addCleanup(chat_cli._reset_io)

    def _inputs(self, *lines):
        queue = list(lines)

        def fake_input(prompt: str = "") -> str:
            if not queue:
                raise EOFError
            return queue.pop(0)

        chat_cli._set_io(input_fn=fake_input, print_fn=self.out.append)

    def test_answers_until_quit(self) -> None:
        self._inputs("what time do you open", "", "hello", "/quit", "never read")
        turns = _run(chat_cli.run_chat(_manager(), session_id="cli-test"))
        self.assertEqual(turns, 2)
        self.assertIn("Bot: 9am-5pm", self.out)
        self.assertIn("Bot: Hello! 👋 How can I help you today?", self.out)

    def test_eof_ends_the_loop(self) -> None:
        self._inputs("hello")
        self.assertEqual(_run(chat_cli.run_chat(_manager())), 1)
        self.assertEqual(self.out[-1], "\nBye.")

    def test_status_and_reset(self) -> None:
        manager = _manager()
        self._inputs("hello", "/status", "/reset", "/quit")
        _run(chat_cli.run_chat(manager, session_id="cli-test"))
        self.assertIn("  Knowledge Base: 1 entries with fields: Question, Answer", self.out)
        self.assertIn("  Ticket flow: inactive", self.out)
        self.assertIn("  New conversation started.", self.out)
        self.assertIsNone(manager.get_session("cli-test"))

    def test_escalation_shows_ticket_hint(self) -> None:
        # the no-op model fails every relevance check, so two questions escalate
        self._inputs("Can you tell me a joke", "What is the weather like", "/quit")
        _run(chat_cli.run_chat(_manager(), session_id="cli-test"))
        self.assertIn("  (support ticket in progress, type 'cancel' to stop)", self.out)


class TestParseArgs(unittest.TestCase):
    def test_defaults(self) -> None:
        args = chat_cli._parse_args([])
        self.assertIsNone(args.csv)
        self.assertIsNone(args.log_level)

    def test_csv_and_level(self) -> None:
        args = chat_cli._parse_args(["--csv", "kb.csv", "--log-level", "DEBUG"])
        self.assertEqual((args.csv, args.log_level), ("kb.csv", "DEBUG"))


if __name__ == "__main__":
    unittest.main()
