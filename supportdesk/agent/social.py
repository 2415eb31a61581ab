"""Greeting / thanks / goodbye / small-talk detection with canned replies."""
from __future__ import annotations

import random
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Pattern, Sequence

Chooser = Callable[[Sequence[str]], str]

GREETING = "greeting"
THANKS = "thanks"
GOODBYE = "goodbye"
AFFIRMATIVE = "affirmative"
HOW_ARE_YOU = "how_are_you"

_PUNCTUATION = re.compile(r"[!?.,;:؟،؛]")

GREETINGS = [
    "hi", "hello", "hey", "greetings", "good morning", "good afternoon",
    "good evening", "howdy", "hi there", "hello there", "hey there",
    "whats up", "what's up", "sup", "yo",
    "مرحبا", "السلام عليكم", "السلام", "أهلا", "اهلا", "هاي", "صباح الخير", "مساء الخير",
]

THANKS_WORDS = [
    "thank", "thanks", "thank you", "thx", "thanx", "appreciate",
    "appreciated", "grateful", "awesome", "great", "perfect",
    "nice", "helpful", "you helped", "you're helpful",
    "شكرا", "شكر", "ممتاز", "رائع",
]

GOODBYES = [
    "bye", "goodbye", "good bye", "see you", "see ya", "later",
    "catch you later", "gotta go", "have a good", "take care",
    "مع السلامة", "وداعا", "باي", "إلى اللقاء",
]

AFFIRMATIVES = [
    "yes", "yeah", "yep", "yup", "sure", "ok", "okay", "alright",
    "نعم", "حسنا", "تمام", "أكيد",
]

HOW_ARE_YOU_PHRASES = [
    "how are you", "how r u", "hows it going", "how's it going",
    "how are things", "you doing ok", "are you ok", "you good",
    "كيف حالك", "كيفك",
]

DEFAULT_RESPONSES: Dict[str, List[str]] = {
    GREETING: [
        "Hello! 👋 How can I help you today?",
        "Hi there! 😊 What can I do for you?",
        "Hey! Great to see you! How may I assist you today?",
        "Hello! I'm here to help. What do you need?",
        "Hi! 🌟 How can I make your day better?",
    ],
    THANKS: [
        "You're very welcome! 😊 Happy to help!",
        "My pleasure! Is there anything else I can assist you with?",
        "Glad I could help! 🌟 Feel free to ask if you need anything else!",
        "You're welcome! That's what I'm here for! 😊",
        "Anytime! Let me know if you need anything else!",
        "I'm happy I could help! Don't hesitate to reach out again! 💙",
    ],
    GOODBYE: [
        "Goodbye! Have a wonderful day! 🌟",
        "Take care! Feel free to come back anytime! 😊",
        "See you later! Have a great day! 👋",
        "Bye! Don't hesitate to return if you need help! 💙",
        "Have a fantastic day! See you soon! 🌞",
    ],
    AFFIRMATIVE: ["Great! How else can I help you? 😊"],
    HOW_ARE_YOU: ["I'm doing great, thank you for asking! 😊 How can I help you today?"],
}


def _phrase_pattern(phrases: Sequence[str]) -> Pattern[str]:
    # longest first so "thank you" wins over "thank"
    alternatives = "|".join(re.escape(p) for p in sorted(phrases, key=len, reverse=True))
    return re.compile(rf"(?<!\w)(?:{alternatives})(?!\w)")


def _elongated_start_pattern(phrases: Sequence[str]) -> Pattern[str]:
    """Phrase at the very start, last letter possibly stretched ("heyyy", "hiii")."""
    alternatives = "|".join(
        re.escape(p) + re.escape(p[-1]) + "*" for p in sorted(phrases, key=len, reverse=True)
    )
    return re.compile(rf"^(?:{alternatives})(?!\w)")


def normalize(message: str) -> str:
    cleaned = _PUNCTUATION.sub("", (message or "").lower().strip())
    return " ".join(cleaned.split())


@dataclass(frozen=True)
class SocialMatch:
    is_friendly: bool
    category: Optional[str] = None
    response: Optional[str] = None


NO_MATCH = SocialMatch(is_friendly=False)


class SocialIntentMatcher:
    """First matching category wins: greeting, thanks, goodbye, affirmative, how-are-you."""

    def __init__(self, chooser: Chooser = random.choice) -> None:
        self._choose = chooser
        self._responses = {k: list(v) for k, v in DEFAULT_RESPONSES.items()}
        self._greetings = _phrase_pattern(GREETINGS)
        self._greeting_start = _elongated_start_pattern(GREETINGS)
        self._thanks = _phrase_pattern(THANKS_WORDS)
        self._goodbyes = _phrase_pattern(GOODBYES)
        self._how_are_you = _phrase_pattern(HOW_ARE_YOU_PHRASES)

    def classify(self, message: str) -> Optional[str]:
        text = normalize(message)
        if not text:
            return None
        if self._greetings.search(text) or self._greeting_start.match(text):
            return GREETING
        if self._thanks.search(text):
            return THANKS
        if self._goodbyes.search(text):
            return GOODBYE
        if len(text.split()) <= 2 and text in AFFIRMATIVES:
            return AFFIRMATIVE
        if self._how_are_you.search(text):
            return HOW_ARE_YOU
        return None

    def check(self, message: str) -> SocialMatch:
        category = self.classify(message)
        if category is None:
            return NO_MATCH
        return SocialMatch(
            is_friendly=True, category=category, response=self._choose(self._responses[category]),
        )

    def responses(self, category: str) -> List[str]:
        return list(self._responses[category])

    def add_response(self, category: str, response: str) -> None:
        if category not in self._responses:
            raise KeyError(f"Unknown social category: {category!r}")
        self._responses[category].append(response)

    def add_greeting_response(self, response: str) -> None:
        self.add_response(GREETING, response)

    def add_thanks_response(self, response: str) -> None:
        self.add_response(THANKS, response)

    def add_goodbye_response(self, response: str) -> None:
        self.add_response(GOODBYE, response)
