"""
KnowledgeStore: the loaded knowledge rows plus the three lookups the dialogue
pipeline runs against them.

  - get_direct_answer: Question/Answer match without any completion call
  - get_relevant_context: keyword-scored excerpt for constrained answering
  - assess_relevance / check_relevance: LLM topical-relevance classification

The store keeps one immutable KnowledgeSnapshot; ``load`` builds a new one and
swaps the reference, so concurrent readers see either the old or the new set.
"""
from __future__ import annotations

import json
import math
import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from supportdesk.agent.completion import run_completion
from supportdesk.agent.types import (
    NOT_LOADED,
    PARSE_ERROR,
    KnowledgeEntry,
    KnowledgeSnapshot,
    Outcome,
    RelevanceResult,
)
from supportdesk.clients.knowledge.base import KnowledgeSheet
from supportdesk.clients.llm.base import BaseLLMClient

logger = logging.getLogger(__name__)

DIRECT_MATCH_RATIO = 0.7
EXCERPT_PROMPT_CHARS = 2000

_WORD_STRIP = "!?.,;:'\"()[]{}؟،؛"

# Schedule phrasings all point at the same rows ("what time do you open" -> "hours").
_SCHEDULE_ALIASES = {
    "time": "hours",
    "open": "hours",
    "opening": "hours",
    "close": "hours",
    "closing": "hours",
    "schedule": "hours",
    "hours": "hours",
}

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

_RELEVANCE_PROMPT = """You are a relevance checker. Your job is to determine if a user's question can be answered using the provided business knowledge base.

Knowledge Base Contains:
{excerpt}

Analyze the user's question and respond with ONLY a JSON object in this exact format:
{{
  "isRelevant": true/false,
  "confidence": 0-100,
  "reasoning": "brief explanation"
}}

Rules:
- Return isRelevant: true if the question is related to ANY information in the knowledge base
- Even if partially related, return true with appropriate confidence score
- Return isRelevant: false ONLY for completely unrelated topics (weather, jokes, general knowledge)
- Confidence should be 0-100 (higher = more confident)
- Be generous with relevance - if there's ANY connection, mark as relevant
- Keep reasoning brief (one sentence)"""

NOT_RELEVANT = RelevanceResult(is_relevant=False, confidence=0)


def _canonical_words(text: str) -> List[str]:
    words = []
    for raw in text.lower().split():
        word = raw.strip(_WORD_STRIP)
        if word:
            words.append(_SCHEDULE_ALIASES.get(word, word))
    return words


def build_excerpt(headers: Sequence[str], entries: Sequence[KnowledgeEntry]) -> str:
    """Plain-text rendering of the whole knowledge base used in relevance prompts."""
    parts = [f"Available information categories: {', '.join(headers)}\n\n"]
    for index, entry in enumerate(entries, start=1):
        parts.append(f"Entry {index}:\n")
        for header in headers:
            if entry.get(header):
                parts.append(f"- {header}: {entry[header]}\n")
        parts.append("\n")
    return "".join(parts)


def parse_relevance(text: str) -> Optional[RelevanceResult]:
    """First JSON object in free text -> RelevanceResult, or None when unparseable."""
    match = _JSON_OBJECT.search(text or "")
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    flag = data.get("isRelevant", data.get("is_relevant"))
    try:
        confidence = float(data.get("confidence") or 0)
    except (TypeError, ValueError):
        confidence = 0.0
    # json.loads accepts Infinity, NaN and overflowing literals
    if not math.isfinite(confidence):
        return None
    return RelevanceResult(
        is_relevant=flag is True,
        confidence=int(confidence),
        reasoning=str(data.get("reasoning") or ""),
    )


class KnowledgeStore:
    def __init__(self, llm: BaseLLMClient, *, timeout_seconds: Optional[float] = None) -> None:
        self._llm = llm
        self._timeout = timeout_seconds
        self._snapshot: Optional[KnowledgeSnapshot] = None

    # ── Loading ──

    def load(
        self,
        entries: Iterable[Mapping[str, object]],
        headers: Optional[Sequence[str]] = None,
    ) -> None:
        """Replace the whole knowledge base. Loading the same rows twice is a no-op in effect."""
        rows: List[Dict[str, str]] = []
        seen: List[str] = list(headers or [])
        for entry in entries:
            row = {str(k).strip(): ("" if v is None else str(v).strip()) for k, v in entry.items()}
            if headers is None:
                seen.extend(k for k in row if k not in seen)
            rows.append(row)
        fields = tuple(seen)
        frozen = tuple(rows)
        self._snapshot = KnowledgeSnapshot(
            headers=fields, entries=frozen, excerpt=build_excerpt(fields, frozen),
        )
        logger.info("Knowledge base loaded: %d entries, fields=%s", len(frozen), list(fields))

    def load_sheet(self, sheet: KnowledgeSheet) -> None:
        self.load(sheet.rows, headers=sheet.headers)

    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def entry_count(self) -> int:
        return len(self._snapshot.entries) if self._snapshot else 0

    @property
    def headers(self) -> List[str]:
        return list(self._snapshot.headers) if self._snapshot else []

    def get_summary(self) -> str:
        snap = self._snapshot
        if snap is None:
            return "No knowledge base loaded"
        return f"Knowledge Base: {len(snap.entries)} entries with fields: {', '.join(snap.headers)}"

    # ── Lookups ──

    def _field(self, snap: KnowledgeSnapshot, name: str) -> Optional[str]:
        wanted = name.lower()
        return next((h for h in snap.headers if h.lower() == wanted), None)

    def get_direct_answer(self, query: str) -> Optional[str]:
        """Answer of the first row whose Question matches *query* closely enough."""
        snap = self._snapshot
        if snap is None:
            return None
        q_field = self._field(snap, "Question")
        a_field = self._field(snap, "Answer")
        if q_field is None or a_field is None:
            return None

        query_clean = query.lower().strip()
        query_words = [w for w in _canonical_words(query) if len(w) > 3]
        for entry in snap.entries:
            question = (entry.get(q_field) or "").lower().strip()
            answer = entry.get(a_field) or ""
            if not question or not answer:
                continue
            if question == query_clean:
                return answer
            if not query_words:
                continue
            question_words = _canonical_words(question)
            matched = sum(
                1 for qw in query_words
                if any(qw in sw or sw in qw for sw in question_words)
            )
            if matched / len(query_words) >= DIRECT_MATCH_RATIO:
                return answer
        return None

    def get_relevant_context(self, query: str, max_length: int = 3000) -> str:
        """Best-matching entries rendered as ``field: value`` lines, at most *max_length* chars."""
        snap = self._snapshot
        if snap is None:
            return ""
        query_lower = query.lower().strip()
        terms = [t for t in query_lower.split() if len(t) > 3]

        scored = []
        for entry in snap.entries:
            text = " ".join(entry.values()).lower()
            score = 100 if query_lower and query_lower in text else 0
            score += sum(10 for term in terms if term in text)
            scored.append((score, entry))

        # sorted() is stable: equal scores keep load order
        best = [e for s, e in sorted(scored, key=lambda pair: -pair[0]) if s > 0][:5]
        if not best:
            best = list(snap.entries[:3])

        context = "Relevant Information:\n\n"
        for entry in best:
            if len(context) > max_length:
                break
            for header in snap.headers:
                if entry.get(header):
                    context += f"{header}: {entry[header]}\n"
            context += "\n"
        return context[:max_length]

    # ── Relevance ──

    async def assess_relevance(self, query: str) -> Outcome[RelevanceResult]:
        snap = self._snapshot
        if snap is None:
            return Outcome.failed(NOT_LOADED)
        outcome = await run_completion(
            self._llm,
            _RELEVANCE_PROMPT.format(excerpt=snap.excerpt[:EXCERPT_PROMPT_CHARS]),
            [{"role": "user", "content": f'Question: "{query}"'}],
            temperature=0.3,
            max_tokens=200,
            timeout_seconds=self._timeout,
            purpose="relevance check",
        )
        if not outcome.ok:
            return Outcome.failed(outcome.failure or PARSE_ERROR)
        result = parse_relevance(outcome.value or "")
        if result is None:
            logger.warning("Relevance check returned unparseable text: %.200s", outcome.value)
            return Outcome.failed(PARSE_ERROR)
        return Outcome.success(result)

    async def check_relevance(self, query: str) -> RelevanceResult:
        """Relevance with failures treated as not relevant."""
        return (await self.assess_relevance(query)).value_or(NOT_RELEVANT)
