"""
English/Arabic language detection and LLM-backed translation.

Detection is a pure character-distribution check: the share of letters in the
Arabic block (U+0600..U+06FF) after NFKC normalization and removal of
whitespace, digits and punctuation. Strictly more than 30% means Arabic.
"""
from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Dict, Optional

from supportdesk.agent.completion import run_completion
from supportdesk.agent.types import Language, Outcome
from supportdesk.clients.llm.base import BaseLLMClient

ARABIC_THRESHOLD = 0.30

ARABIC_PHRASES: Dict[str, str] = {
    "greeting": "مرحباً! 👋 كيف يمكنني مساعدتك اليوم؟",
    "thanks": "على الرحب والسعة! 😊 سعيد بمساعدتك!",
    "goodbye": "مع السلامة! أتمنى لك يوماً رائعاً! 🌟",
    "loading": "جارٍ تحميل معلومات أعمالنا. الرجاء المحاولة مرة أخرى بعد لحظة.",
}

_TO_ARABIC_PROMPT = (
    "You are a translator. Translate the following English text to Arabic. "
    "Only provide the translation, nothing else. Keep the tone professional and friendly."
)
_TO_ENGLISH_PROMPT = (
    "You are a translator. Translate the following Arabic text to English. "
    "Only provide the translation, nothing else."
)


def arabic_phrase(key: str) -> str:
    return ARABIC_PHRASES.get(key, "")


@dataclass(frozen=True)
class LanguageDetection:
    language: Language
    confidence: float


def _is_arabic_char(ch: str) -> bool:
    return "\u0600" <= ch <= "\u06ff"


def _strip_for_detection(text: str) -> str:
    normalized = unicodedata.normalize("NFKC", text)
    kept = []
    for ch in normalized:
        if ch.isspace() or unicodedata.category(ch) == "Nd":
            continue
        if unicodedata.category(ch).startswith("P"):
            continue
        kept.append(ch)
    return "".join(kept)


class LanguageDetector:
    def __init__(self, threshold: float = ARABIC_THRESHOLD) -> None:
        self._threshold = threshold

    def arabic_ratio(self, text: str) -> Optional[float]:
        """Share of Arabic-block characters, or None when nothing is left to measure."""
        clean = _strip_for_detection(text or "")
        if not clean:
            return None
        return sum(1 for ch in clean if _is_arabic_char(ch)) / len(clean)

    def detect(self, text: str) -> LanguageDetection:
        ratio = self.arabic_ratio(text)
        if ratio is None:
            return LanguageDetection(Language.EN, 0.0)
        if ratio > self._threshold:
            return LanguageDetection(Language.AR, min(ratio * 100, 100.0))
        return LanguageDetection(Language.EN, min((1 - ratio) * 100, 100.0))

    def is_arabic(self, text: str) -> bool:
        return self.detect(text).language is Language.AR


class Translator:
    """Crosses the English/Arabic boundary through the completion capability."""

    def __init__(self, llm: BaseLLMClient, *, timeout_seconds: Optional[float] = None) -> None:
        self._llm = llm
        self._timeout = timeout_seconds

    async def translate(self, text: str, target: Language) -> Outcome[str]:
        if not text or not text.strip():
            return Outcome.success(text)
        prompt = _TO_ARABIC_PROMPT if target is Language.AR else _TO_ENGLISH_PROMPT
        return await run_completion(
            self._llm,
            prompt,
            [{"role": "user", "content": text}],
            temperature=0.3,
            max_tokens=300,
            timeout_seconds=self._timeout,
            purpose=f"translation to {target.value}",
        )

    async def to_arabic(self, text: str) -> str:
        """Arabic translation of *text*, or *text* itself when translation fails."""
        return (await self.translate(text, Language.AR)).value_or(text)

    async def to_english(self, text: str) -> str:
        return (await self.translate(text, Language.EN)).value_or(text)
