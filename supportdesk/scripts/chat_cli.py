#!/usr/bin/env python3
"""
supportdesk chat CLI – talk to the support agent from a terminal.

Usage:
  python -m supportdesk.scripts.chat_cli [--csv PATH] [--log-level DEBUG]

Env: OPENROUTER_API_KEY / OPENAI_API_KEY / GEMINI_API_KEY for answers,
KNOWLEDGE_CSV_PATH or GOOGLE_SHEETS_API_KEY + GOOGLE_SHEET_ID for knowledge,
TELEGRAM_BOT_TOKEN + TELEGRAM_CHAT_ID for ticket delivery.

Commands inside the chat:
  /quit     leave
  /reset    start a new conversation
  /status   knowledge base and ticket-flow status
"""
from __future__ import annotations

import argparse
import asyncio
import uuid
from typing import List, Optional

from supportdesk.agent.sessions import SessionManager
from supportdesk.config.settings import load_settings
from supportdesk.core.logger import LoggerConfig, configure
from supportdesk.services.agent_service import AgentService

# Swappable for tests
_input_fn = input
_print_fn = print
_default_input_fn = input
_default_print_fn = print

PROMPT = "You: "
BANNER_WIDTH = 44


def _set_io(input_fn=None, print_fn=None) -> None:
    """Inject I/O for tests. None = keep current."""
    global _input_fn, _print_fn
    if input_fn is not None:
        _input_fn = input_fn
    if print_fn is not None:
        _print_fn = print_fn


def _reset_io() -> None:
    global _input_fn, _print_fn
    _input_fn = _default_input_fn
    _print_fn = _default_print_fn


def _out(msg: str = "") -> None:
    _print_fn(msg)


def _banner(title: str, lines: List[str]) -> None:
    top = "╭" + "─" * (BANNER_WIDTH - 2) + "╮"
    bot = "╰" + "─" * (BANNER_WIDTH - 2) + "╯"
    sep = "├" + "─" * (BANNER_WIDTH - 2) + "┤"
    _out(top)
    _out("│ " + title.center(BANNER_WIDTH - 4) + " │")
    _out(sep)
    for line in lines:
        _out("│ " + line.ljust(BANNER_WIDTH - 4) + " │")
    _out(bot)


def _new_session_id() -> str:
    return f"cli-{uuid.uuid4().hex[:12]}"


async def run_chat(manager: SessionManager, session_id: Optional[str] = None) -> int:
    """REPL until /quit or EOF. Returns the number of answered turns."""
    session_id = session_id or _new_session_id()
    turns = 0
    while True:
        try:
            text = _input_fn(PROMPT).strip()
        except EOFError:
            break
        if not text:
            continue
        if text == "/quit":
            break
        if text == "/reset":
            manager.end_session(session_id)
            session_id = _new_session_id()
            _out("  New conversation started.")
            continue
        if text == "/status":
            store = manager.orchestrator.knowledge
            _out(f"  {store.get_summary()}")
            flow = "active" if manager.is_ticket_flow_active(session_id) else "inactive"
            _out(f"  Ticket flow: {flow}")
            continue

        result = await manager.handle_turn_result(session_id, text)
        turns += 1
        _out(f"Bot: {result.answer}")
        if result.ticket_flow_active:
            _out("  (support ticket in progress, type 'cancel' to stop)")
    _out("\nBye.")
    return turns


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with the support agent.")
    parser.add_argument("--csv", help="Knowledge base CSV (header row + one entry per line)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    # Logs go to the file handler only so they do not interleave with the chat
    configure(LoggerConfig.from_env().with_overrides(level=args.log_level, console=False))

    settings = load_settings()
    components = await AgentService.build(settings, csv_path=args.csv)
    store = components.manager.orchestrator.knowledge

    _banner("supportdesk chat", [
        f"LLM: {components.llm.provider}",
        f"Knowledge: {store.entry_count} entries",
        f"Tickets: {'telegram' if components.delivery else 'off'}",
        "/quit  /reset  /status",
    ])
    if not store.is_loaded():
        _out("  Warning: knowledge base not loaded; set --csv or Google Sheets env.")
    await run_chat(components.manager)


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
