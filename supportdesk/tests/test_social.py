"""Unit tests for SocialIntentMatcher."""
from __future__ import annotations

import unittest

from supportdesk.agent.social import (
    AFFIRMATIVE,
    DEFAULT_RESPONSES,
    GOODBYE,
    GREETING,
    HOW_ARE_YOU,
    THANKS,
    SocialIntentMatcher,
    normalize,
)


def _first(pool):
    return pool[0]


class TestClassify(unittest.TestCase):
    def setUp(self) -> None:
        self.matcher = SocialIntentMatcher(chooser=_first)

    def test_greetings(self) -> None:
        for text in ("Hello!", "hi there", "Good morning", "heyyy", "مرحبا", "السلام عليكم"):
            self.assertEqual(self.matcher.classify(text), GREETING, text)

    def test_greeting_wins_even_with_a_question(self) -> None:
        self.assertEqual(self.matcher.classify("hi, what are your prices?"), GREETING)

    def test_thanks(self) -> None:
        for text in ("Thanks a lot", "thank you!", "that was helpful", "شكرا لك"):
            self.assertEqual(self.matcher.classify(text), THANKS, text)

    def test_thanks_beats_goodbye(self) -> None:
        self.assertEqual(self.matcher.classify("thank you, bye"), THANKS)

    def test_goodbyes(self) -> None:
        for text in ("goodbye", "ok bye", "take care", "مع السلامة"):
            self.assertEqual(self.matcher.classify(text), GOODBYE, text)

    def test_affirmative_only_for_short_messages(self) -> None:
        self.assertEqual(self.matcher.classify("ok"), AFFIRMATIVE)
        self.assertEqual(self.matcher.classify("Okay."), AFFIRMATIVE)
        self.assertIsNone(self.matcher.classify("ok then what"))

    def test_how_are_you(self) -> None:
        self.assertEqual(self.matcher.classify("how are you?"), HOW_ARE_YOU)
        self.assertEqual(self.matcher.classify("كيف حالك"), HOW_ARE_YOU)

    def test_words_inside_other_words_do_not_match(self) -> None:
        for text in ("hiking trails nearby", "the product is unhelpful", "what are your prices"):
            self.assertIsNone(self.matcher.classify(text), text)

    def test_empty_message(self) -> None:
        self.assertIsNone(self.matcher.classify("  ?! "))


class TestCheck(unittest.TestCase):
    def test_match_carries_response(self) -> None:
        match = SocialIntentMatcher(chooser=_first).check("Hello!")
        self.assertTrue(match.is_friendly)
        self.assertEqual(match.category, GREETING)
        self.assertEqual(match.response, DEFAULT_RESPONSES[GREETING][0])

    def test_no_match(self) -> None:
        match = SocialIntentMatcher().check("Do you offer delivery")
        self.assertFalse(match.is_friendly)
        self.assertIsNone(match.response)

    def test_chooser_sees_the_category_pool(self) -> None:
        seen = []

        def chooser(pool):
            seen.append(list(pool))
            return pool[-1]

        match = SocialIntentMatcher(chooser=chooser).check("bye")
        self.assertEqual(seen, [DEFAULT_RESPONSES[GOODBYE]])
        self.assertEqual(match.response, DEFAULT_RESPONSES[GOODBYE][-1])


class TestResponses(unittest.TestCase):
    def test_added_responses_join_the_pool(self) -> None:
        matcher = SocialIntentMatcher(chooser=lambda pool: pool[-1])
        matcher.add_greeting_response("Welcome to the shop!")
        matcher.add_thanks_response("No worries!")
        matcher.add_goodbye_response("Until next time!")
        self.assertEqual(matcher.check("hello").response, "Welcome to the shop!")
        self.assertEqual(matcher.check("thanks").response, "No worries!")
        self.assertEqual(matcher.check("goodbye").response, "Until next time!")

    def test_pools_are_per_instance(self) -> None:
        first = SocialIntentMatcher()
        first.add_greeting_response("Only here")
        self.assertNotIn("Only here", SocialIntentMatcher().responses(GREETING))
        self.assertNotIn("Only here", DEFAULT_RESPONSES[GREETING])

    def test_unknown_category(self) -> None:
        with self.assertRaises(KeyError):
            SocialIntentMatcher().add_response("complaint", "Sorry to hear that")


class TestNormalize(unittest.TestCase):
    def test_strips_punctuation_and_spaces(self) -> None:
        self.assertEqual(normalize("  Hello,   THERE!? "), "hello there")
        self.assertEqual(normalize("شكرا؟"), "شكرا")


if __name__ == "__main__":
    unittest.main()
