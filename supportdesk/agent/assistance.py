"""
AssistanceTracker: counts clarifying attempts within one unresolved topic.

While ``should_try_to_help()`` holds the agent asks a clarifying question;
once ``max_attempts`` have been recorded the caller escalates to a ticket.
"""
from __future__ import annotations

from typing import List, Optional

from supportdesk.agent.completion import run_completion
from supportdesk.agent.types import AssistanceState
from supportdesk.clients.llm.base import BaseLLMClient

ESCALATION_MESSAGE = "I'll connect you with our support team for specialized help."

FALLBACK_FIRST = "Could you tell me more about what you need?"
FALLBACK_LATER = "Can you rephrase your question? I want to help you properly."

_FIRST_ATTEMPT_PROMPT = """You are a helpful customer service assistant. A customer has a question that might not be directly in our knowledge base, but you should try to help them.

Our knowledge base covers: {summary}

Your goal for this FIRST attempt:
1. Try to understand what they're really asking for
2. Ask ONE clarifying question to better understand
3. Be brief and direct

IMPORTANT:
- Keep response under 2 sentences
- Ask ONE specific question
- Do NOT mention support tickets
- Be direct and helpful

Example responses:
- "Could you tell me more about what specifically you need help with?"
- "What exactly are you trying to do?"
- "Can you describe the issue in more detail?\""""

_LATER_ATTEMPT_PROMPT = """You are a helpful customer service assistant. This is your SECOND attempt to help a customer.

Our knowledge base covers: {summary}

Your goal for this SECOND attempt:
1. Try ONE more clarifying question from a different angle
2. Be brief - maximum 2 sentences

IMPORTANT:
- Keep it short (under 2 sentences)
- Ask ONE specific question
- Do NOT mention support tickets
- Be direct

Example responses:
- "Could you rephrase your question? I want to make sure I understand."
- "What's the main issue you're facing?"
- "Can you be more specific about what you need?\""""


def fallback_response(attempt_number: int) -> str:
    return FALLBACK_FIRST if attempt_number <= 1 else FALLBACK_LATER


class AssistanceTracker:
    def __init__(
        self,
        llm: BaseLLMClient,
        *,
        max_attempts: int = 2,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts!r}")
        self._llm = llm
        self._timeout = timeout_seconds
        self.max_attempts = max_attempts
        self._state = AssistanceState()

    def should_try_to_help(self) -> bool:
        return self._state.attempt_count < self.max_attempts

    def record_attempt(self, query: str) -> int:
        """Count one clarifying attempt for *query*; returns the new count."""
        self._state.attempt_count = min(self._state.attempt_count + 1, self.max_attempts)
        self._state.last_query = query
        self._state.context.append(query)
        return self._state.attempt_count

    @property
    def attempt_count(self) -> int:
        return self._state.attempt_count

    @property
    def context(self) -> List[str]:
        return list(self._state.context)

    @property
    def state(self) -> AssistanceState:
        return AssistanceState(
            attempt_count=self._state.attempt_count,
            last_query=self._state.last_query,
            context=list(self._state.context),
        )

    def reset(self) -> None:
        self._state = AssistanceState()

    async def generate_helpful_response(
        self, query: str, attempt_number: int, knowledge_summary: str,
    ) -> str:
        """One clarifying question from the model, or a fixed question if it fails."""
        template = _FIRST_ATTEMPT_PROMPT if attempt_number <= 1 else _LATER_ATTEMPT_PROMPT
        outcome = await run_completion(
            self._llm,
            template.format(summary=knowledge_summary),
            [{"role": "user", "content": query}],
            temperature=0.7,
            max_tokens=300,
            timeout_seconds=self._timeout,
            purpose=f"assistance attempt {attempt_number}",
        )
        return outcome.value_or(fallback_response(attempt_number))

    @staticmethod
    def get_escalation_message() -> str:
        return ESCALATION_MESSAGE
