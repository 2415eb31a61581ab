"""Unit tests for LanguageDetector, Translator and run_completion."""
from __future__ import annotations

import asyncio
import unittest

from supportdesk.agent.completion import run_completion
from supportdesk.agent.language import ARABIC_PHRASES, LanguageDetector, Translator, arabic_phrase
from supportdesk.agent.types import EMPTY_RESPONSE, PROVIDER_ERROR, TIMEOUT, Language
from supportdesk.clients.llm.base import BaseLLMClient
from supportdesk.core.exceptions import EmptyResponse, ProviderError


def _run(coro):
    return asyncio.run(coro)


class FakeLLM(BaseLLMClient):
    """Returns *reply*, raises it when it is an exception, or sleeps *delay* first."""

    def __init__(self, reply="", delay: float = 0.0) -> None:
        self.reply = reply
        self.delay = delay
        self.calls = []

    @property
    def provider(self) -> str:
        return "fake"

    async def complete(self, system_prompt, messages, *, temperature=0.7, max_tokens=None):
        self.calls.append(
            {"system": system_prompt, "messages": list(messages),
             "temperature": temperature, "max_tokens": max_tokens}
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply

    async def test_connection(self) -> bool:
        return True


class TestLanguageDetector(unittest.TestCase):
    def setUp(self) -> None:
        self.detector = LanguageDetector()

    def test_pure_arabic(self) -> None:
        result = self.detector.detect("مرحبا كيف حالك")
        self.assertEqual(result.language, Language.AR)
        self.assertEqual(result.confidence, 100.0)

    def test_pure_english(self) -> None:
        result = self.detector.detect("What are your opening hours?")
        self.assertEqual(result.language, Language.EN)
        self.assertEqual(result.confidence, 100.0)

    def test_empty_and_punctuation_only_default_to_english(self) -> None:
        for text in ("", "   ", "123 !!! ..."):
            result = self.detector.detect(text)
            self.assertEqual(result.language, Language.EN, text)
            self.assertEqual(result.confidence, 0.0, text)

    def test_exactly_thirty_percent_is_english(self) -> None:
        # 3 Arabic letters out of 10
        result = self.detector.detect("abcdefg" + "بتث")
        self.assertEqual(result.language, Language.EN)
        self.assertAlmostEqual(result.confidence, 70.0)

    def test_just_above_thirty_percent_is_arabic(self) -> None:
        # 4 Arabic letters out of 13
        self.assertEqual(self.detector.detect("abcdefghi" + "بتثج").language, Language.AR)

    def test_digits_and_punctuation_are_ignored(self) -> None:
        self.assertEqual(self.detector.detect("ما هو 123؟ !!!").language, Language.AR)

    def test_presentation_forms_are_normalized(self) -> None:
        # Arabic presentation forms fold into the base block under NFKC
        self.assertEqual(
            self.detector.detect("ﻣﺮﺣﺒﺎ").language, Language.AR
        )

    def test_arabic_ratio_none_when_nothing_measurable(self) -> None:
        self.assertIsNone(self.detector.arabic_ratio("42 ?!"))

    def test_is_arabic(self) -> None:
        self.assertTrue(self.detector.is_arabic("شكرا جزيلا"))
        self.assertFalse(self.detector.is_arabic("thanks a lot"))


class TestArabicPhrases(unittest.TestCase):
    def test_known_key(self) -> None:
        self.assertEqual(arabic_phrase("loading"), ARABIC_PHRASES["loading"])

    def test_unknown_key_is_empty(self) -> None:
        self.assertEqual(arabic_phrase("nope"), "")

    def test_only_fixed_reply_phrases(self) -> None:
        self.assertEqual(set(ARABIC_PHRASES), {"greeting", "thanks", "goodbye", "loading"})


class TestTranslator(unittest.TestCase):
    def test_to_arabic_returns_translation(self) -> None:
        llm = FakeLLM("مرحبا")
        self.assertEqual(_run(Translator(llm).to_arabic("Hello")), "مرحبا")
        call = llm.calls[0]
        self.assertIn("English text to Arabic", call["system"])
        self.assertEqual(call["messages"], [{"role": "user", "content": "Hello"}])
        self.assertEqual(call["temperature"], 0.3)
        self.assertEqual(call["max_tokens"], 300)

    def test_to_english_uses_english_prompt(self) -> None:
        llm = FakeLLM("When do you open?")
        self.assertEqual(_run(Translator(llm).to_english("متى تفتحون")), "When do you open?")
        self.assertIn("Arabic text to English", llm.calls[0]["system"])

    def test_blank_text_skips_the_model(self) -> None:
        llm = FakeLLM("unused")
        self.assertEqual(_run(Translator(llm).to_arabic("  ")), "  ")
        self.assertEqual(llm.calls, [])

    def test_provider_error_degrades_to_original_text(self) -> None:
        translator = Translator(FakeLLM(ProviderError("boom")))
        outcome = _run(translator.translate("Hello", Language.AR))
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.failure, PROVIDER_ERROR)
        self.assertEqual(_run(translator.to_arabic("Hello")), "Hello")

    def test_timeout_degrades_to_original_text(self) -> None:
        translator = Translator(FakeLLM("late", delay=0.2), timeout_seconds=0.01)
        outcome = _run(translator.translate("Hello", Language.AR))
        self.assertEqual(outcome.failure, TIMEOUT)
        self.assertEqual(_run(translator.to_arabic("Hello")), "Hello")


class TestRunCompletion(unittest.TestCase):
    def _call(self, llm, timeout=None):
        return _run(run_completion(
            llm, "system", [{"role": "user", "content": "hi"}],
            temperature=0.5, max_tokens=10, timeout_seconds=timeout,
        ))

    def test_success_is_stripped(self) -> None:
        outcome = self._call(FakeLLM("  answer \n"))
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.value, "answer")

    def test_blank_text_is_empty_response(self) -> None:
        self.assertEqual(self._call(FakeLLM("   ")).failure, EMPTY_RESPONSE)

    def test_empty_response_exception(self) -> None:
        self.assertEqual(self._call(FakeLLM(EmptyResponse("nothing"))).failure, EMPTY_RESPONSE)

    def test_failures_are_logged_as_warnings(self) -> None:
        with self.assertLogs("supportdesk.agent.completion", level="WARNING") as logs:
            outcome = self._call(FakeLLM(ProviderError("HTTP 503")))
        self.assertEqual(outcome.failure, PROVIDER_ERROR)
        self.assertIn("HTTP 503", logs.output[0])

    def test_programming_errors_propagate(self) -> None:
        with self.assertRaises(AssertionError):
            self._call(FakeLLM(AssertionError("bug")))


if __name__ == "__main__":
    unittest.main()
