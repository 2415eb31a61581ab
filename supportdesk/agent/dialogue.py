"""DialogueOrchestrator: the per-turn decision pipeline.

For every user message, in order:
  1. detect the language (English / Arabic)
  2. active ticket flow   -> cancel or feed the intake machine
  3. social message       -> canned reply
  4. knowledge not loaded -> "still loading"
  5. Arabic               -> translate the query to English for search
  6. schedule keywords    -> direct answer, else context-constrained answer
  7. low relevance        -> clarifying question, escalate when exhausted
  8. relevant             -> constrained answer; unhelpful answers clarify or escalate

The orchestrator holds no conversation state of its own: history, the
assistance counter and the ticket machine live on the SessionState passed in.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, FrozenSet, List, Optional, Tuple

from supportdesk.agent.assistance import AssistanceTracker
from supportdesk.agent.completion import run_completion
from supportdesk.agent.knowledge import NOT_RELEVANT, KnowledgeStore
from supportdesk.agent.language import LanguageDetector, Translator, arabic_phrase
from supportdesk.agent.social import GOODBYE, GREETING, THANKS, SocialIntentMatcher
from supportdesk.agent.state import SessionState
from supportdesk.agent.tickets import TicketDelivery, TicketIntakeMachine
from supportdesk.agent.types import Language, Outcome, TurnResult
from supportdesk.clients.llm.base import BaseLLMClient, LLMMessage
from supportdesk.config.settings import AgentSettings

logger = logging.getLogger(__name__)

LOADING_MESSAGE = "I'm currently loading our business information. Please try again in a moment."
ANSWER_FAILED_MESSAGE = (
    "I'm having trouble reaching our assistant right now. Please try again in a moment."
)
MIN_CONTEXT_LENGTH = 50

SCHEDULE_KEYWORDS = ("hours", "open", "close", "business hours", "schedule", "time", "ساعات", "وقت", "مفتوح")

_CANCEL_WORDS = re.compile(r"\b(?:cancel|stop|quit)\b", re.IGNORECASE)
_CANCEL_ARABIC = ("إلغاء", "الغاء", "توقف")

UNHELPFUL_PHRASES: FrozenSet[str] = frozenset({
    "don't know", "don't have", "cannot answer", "can't answer", "no information",
    "not sure", "unable to", "sorry",
    "لا أعرف", "لا أملك", "لا يمكنني", "عذراً",
})

_ANSWER_PROMPT = """You are a helpful business assistant. You can ONLY answer questions using the information provided in the knowledge base below.

IMPORTANT RULES:
1. ONLY use information from the knowledge base below
2. Be concise and professional (1-2 sentences max)
3. Do not make up information
4. Do not answer general knowledge questions{language_rule}

KNOWLEDGE BASE:
{context}

Remember: Stay strictly within the scope of the knowledge base. Be brief."""

_ARABIC_RULE = "\n5. IMPORTANT: The user is speaking Arabic. Respond in Arabic (العربية)."


def is_unhelpful(text: str) -> bool:
    """Phrase scan for "I don't know"-shaped answers."""
    lowered = text.lower()
    return any(phrase in lowered for phrase in UNHELPFUL_PHRASES)


def wants_cancel(text: str) -> bool:
    return bool(_CANCEL_WORDS.search(text)) or any(word in text for word in _CANCEL_ARABIC)


def has_schedule_keyword(query: str) -> bool:
    lowered = query.lower()
    return any(keyword in lowered for keyword in SCHEDULE_KEYWORDS)


class DialogueOrchestrator:
    def __init__(
        self,
        llm: BaseLLMClient,
        knowledge: KnowledgeStore,
        *,
        settings: Optional[AgentSettings] = None,
        delivery: Optional[TicketDelivery] = None,
        social: Optional[SocialIntentMatcher] = None,
        detector: Optional[LanguageDetector] = None,
        translator: Optional[Translator] = None,
        unhelpful: Callable[[str], bool] = is_unhelpful,
    ) -> None:
        self._llm = llm
        self._settings = settings or AgentSettings()
        self._knowledge = knowledge
        self._delivery = delivery
        self._social = social or SocialIntentMatcher()
        self._detector = detector or LanguageDetector()
        self._translator = translator or Translator(
            llm, timeout_seconds=self._settings.llm_timeout_seconds
        )
        self._is_unhelpful = unhelpful

    @property
    def knowledge(self) -> KnowledgeStore:
        return self._knowledge

    @property
    def settings(self) -> AgentSettings:
        return self._settings

    def new_session(self, session_id: str) -> SessionState:
        """Fresh per-session state: own assistance counter and own ticket machine."""
        s = self._settings
        tickets = None
        if self._delivery is not None:
            tickets = TicketIntakeMachine(
                self._delivery,
                support_contact=s.support_contact,
                max_delivery_attempts=s.max_delivery_attempts,
            )
        return SessionState(
            session_id=session_id,
            assistance=AssistanceTracker(
                self._llm, max_attempts=s.max_attempts, timeout_seconds=s.llm_timeout_seconds,
            ),
            tickets=tickets,
        )

    async def handle_turn(self, session: SessionState, utterance: str) -> TurnResult:
        """Run one turn and record it in the session history."""
        language = self._detector.detect(utterance).language
        session.language = language

        answer, route = await self._decide(session, utterance, language)

        session.history.append({"role": "user", "content": utterance})
        session.history.append({"role": "assistant", "content": answer})
        logger.info(
            "Turn answered via %s",
            route,
            extra={"session_id": session.session_id, "route": route, "language": language.value},
        )
        return TurnResult(
            answer=answer,
            language=language,
            route=route,
            ticket_flow_active=session.ticket_flow_active(),
        )

    async def _decide(
        self, session: SessionState, utterance: str, language: Language,
    ) -> Tuple[str, str]:
        arabic = language is Language.AR
        tracker = session.assistance

        # ── Step 2: active ticket flow takes the whole turn ──
        tickets = session.tickets
        if tickets is not None and tickets.is_flow_active():
            if wants_cancel(utterance):
                return await self._localize(tickets.cancel_flow(), arabic), "ticket_cancelled"
            reply = await tickets.process_input(utterance)
            return await self._localize(reply, arabic), "ticket_flow"

        # ── Step 3: greetings, thanks, small talk ──
        social = self._social.check(utterance)
        if social.is_friendly and social.response:
            if arabic and social.category in (GREETING, THANKS, GOODBYE):
                return arabic_phrase(social.category), "social"
            return await self._localize(social.response, arabic), "social"

        # ── Step 4: nothing to answer from yet ──
        if not self._knowledge.is_loaded():
            return (arabic_phrase("loading") if arabic else LOADING_MESSAGE), "not_loaded"

        # ── Step 5: search always runs on English text ──
        search_query = await self._translator.to_english(utterance) if arabic else utterance

        # ── Step 6: schedule fast path ──
        if has_schedule_keyword(search_query):
            direct = self._knowledge.get_direct_answer(search_query)
            if direct:
                tracker.reset()
                return await self._localize(direct, arabic), "direct_answer"
            context = self._knowledge.get_relevant_context(
                search_query, self._settings.context_max_length
            )
            if len(context) > MIN_CONTEXT_LENGTH:
                outcome = await self._answer(session, search_query, context, arabic)
                if not outcome.ok:
                    return await self._localize(ANSWER_FAILED_MESSAGE, arabic), "answer_failed"
                tracker.reset()
                return await self._localize(outcome.value or "", arabic), "context_answer"

        # ── Step 7: relevance gate on the original wording ──
        relevance = await self._knowledge.assess_relevance(utterance)
        if not relevance.ok:
            logger.warning(
                "Relevance check failed (%s); treating as not relevant",
                relevance.failure,
                extra={"session_id": session.session_id},
            )
        result = relevance.value_or(NOT_RELEVANT)
        if not result.is_relevant or result.confidence < self._settings.relevance_threshold:
            if tracker.should_try_to_help():
                attempt = tracker.record_attempt(utterance)
                if tracker.should_try_to_help():
                    return await self._clarify(session, utterance, attempt, arabic), "clarify"
            return await self._escalate(session, arabic), "escalate"

        # ── Step 8: constrained answer, then the unhelpful check ──
        context = self._knowledge.get_relevant_context(
            search_query, self._settings.context_max_length
        )
        outcome = await self._answer(session, search_query, context, arabic)
        if not outcome.ok:
            return await self._localize(ANSWER_FAILED_MESSAGE, arabic), "answer_failed"
        answer = outcome.value or ""

        if self._is_unhelpful(answer):
            if tracker.attempt_count >= 1:
                return await self._escalate(session, arabic), "escalate"
            attempt = tracker.record_attempt(utterance)
            return await self._clarify(session, utterance, attempt, arabic), "clarify"

        tracker.reset()
        return await self._localize(answer, arabic), "answer"

    # ── Helpers ──

    async def _answer(
        self, session: SessionState, query: str, context: str, arabic: bool,
    ) -> Outcome[str]:
        prompt = _ANSWER_PROMPT.format(
            language_rule=_ARABIC_RULE if arabic else "", context=context,
        )
        messages: List[LLMMessage] = [
            {"role": turn["role"], "content": turn["content"]}
            for turn in session.recent_history(self._settings.history_window)
        ]
        messages.append({"role": "user", "content": query})
        return await run_completion(
            self._llm,
            prompt,
            messages,
            temperature=0.7,
            max_tokens=500,
            timeout_seconds=self._settings.llm_timeout_seconds,
            purpose="knowledge answer",
        )

    async def _clarify(
        self, session: SessionState, utterance: str, attempt: int, arabic: bool,
    ) -> str:
        logger.info(
            "Assistance attempt %d/%d",
            attempt,
            session.assistance.max_attempts,
            extra={"session_id": session.session_id},
        )
        question = await session.assistance.generate_helpful_response(
            utterance, attempt, self._knowledge.get_summary()
        )
        return await self._localize(question, arabic)

    async def _escalate(self, session: SessionState, arabic: bool) -> str:
        message = AssistanceTracker.get_escalation_message()
        session.assistance.reset()
        if session.tickets is not None:
            full = message + "\n\n" + session.tickets.start_ticket_flow()
        else:
            full = (
                message
                + f"\n\nPlease contact our support team directly at {self._settings.support_contact}"
            )
        logger.info("Escalating to a support ticket", extra={"session_id": session.session_id})
        return await self._localize(full, arabic)

    async def _localize(self, text: str, arabic: bool) -> str:
        """Arabic translation when the user writes Arabic and *text* is not Arabic already."""
        if not arabic or not text or self._detector.is_arabic(text):
            return text
        return await self._translator.to_arabic(text)
