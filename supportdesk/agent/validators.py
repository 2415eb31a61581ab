"""
Field validators for the support-ticket intake flow.

Each validator returns a FieldCheck: either ``ok`` with the normalized value,
or a corrective message to send back to the user. Nothing here raises.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

NOT_AVAILABLE = "N/A"

EMAIL_PATTERN = re.compile(r"^[a-z0-9][a-z0-9._%+-]*@[a-z0-9][a-z0-9.-]*\.[a-z]{2,}$")

DOMAIN_TYPOS = {
    "gmial.com": "gmail.com",
    "gmai.com": "gmail.com",
    "gnail.com": "gmail.com",
    "yahooo.com": "yahoo.com",
    "yaho.com": "yahoo.com",
    "hotmial.com": "hotmail.com",
    "outlok.com": "outlook.com",
}

NO_NUMBER_ANSWERS = frozenset({
    "n/a", "na", "none", "no", "dont have", "don't have", "not applicable",
    "لا يوجد", "لايوجد", "لا",
})

CONFIRMATIONS = frozenset({"yes", "y", "yeah", "yep", "correct", "نعم"})

_NAME_PUNCTUATION = frozenset(" -'.")
_REPEATED_CHAR = re.compile(r"^(.)\1{9,}$", re.DOTALL)
_SYMBOL_RUN = re.compile(r"(?:[^\w\s]|_){10,}")


@dataclass(frozen=True)
class FieldCheck:
    ok: bool
    value: Optional[str] = None
    message: str = ""
    suggestion: Optional[str] = None

    @classmethod
    def accept(cls, value: str) -> "FieldCheck":
        return cls(ok=True, value=value)

    @classmethod
    def reject(cls, message: str, suggestion: Optional[str] = None) -> "FieldCheck":
        return cls(ok=False, message=message, suggestion=suggestion)


def validate_name(raw: str) -> FieldCheck:
    name = raw.strip()
    if len(name) < 2:
        return FieldCheck.reject("Please provide your full name (at least 2 characters).")
    if any(ch.isdigit() for ch in name):
        return FieldCheck.reject("Please provide a valid name without numbers.")
    if any(not (ch.isalpha() or ch in _NAME_PUNCTUATION or ch.isspace()) for ch in name):
        return FieldCheck.reject("Please provide a valid name using only letters.")

    parts = name.split()
    if len(parts) < 2:
        return FieldCheck.reject(
            "Please provide your full name (first and last name). For example: John Smith"
        )
    if any(len(part) < 2 for part in parts):
        return FieldCheck.reject(
            "Please provide a complete name. Each part should be at least 2 letters."
        )
    return FieldCheck.accept(" ".join(part[0].upper() + part[1:].lower() for part in parts))


def validate_email(raw: str) -> FieldCheck:
    """Format checks, then the typo table. A known typo yields a suggestion, never a fix."""
    email = raw.strip().lower()
    if "@" not in email or "." not in email:
        return FieldCheck.reject(
            "That doesn't look like a valid email address. "
            "Please include '@' and a domain (e.g., name@example.com)."
        )
    if email.count("@") != 1 or ".." in email or not EMAIL_PATTERN.match(email):
        return FieldCheck.reject(
            "Please provide a valid email address. Example: john.smith@example.com"
        )

    local, domain = email.split("@")
    corrected = DOMAIN_TYPOS.get(domain)
    if corrected:
        suggestion = f"{local}@{corrected}"
        return FieldCheck.reject(
            f"Did you mean {suggestion}? Reply \"yes\" to use it, or type your email again.",
            suggestion=suggestion,
        )
    if local.endswith(".") or domain.startswith("."):
        return FieldCheck.reject(
            "Please provide a valid email address. Example: john.smith@example.com"
        )
    return FieldCheck.accept(email)


def is_confirmation(raw: str) -> bool:
    return raw.strip().lower().rstrip("!.") in CONFIRMATIONS


def validate_customer_number(raw: str) -> FieldCheck:
    trimmed = raw.strip()
    if trimmed.lower() in NO_NUMBER_ANSWERS:
        return FieldCheck.accept(NOT_AVAILABLE)

    cleaned = re.sub(r"[\s\-]", "", trimmed)
    if not cleaned or not cleaned.isascii() or not cleaned.isalnum():
        return FieldCheck.reject(
            "Customer numbers should only contain letters and numbers. "
            "Please provide a valid customer number or type 'N/A' if you don't have one."
        )
    if len(cleaned) < 3:
        return FieldCheck.reject(
            "That customer number seems too short. "
            "Please check and try again, or type 'N/A' if you don't have one."
        )
    if len(cleaned) > 20:
        return FieldCheck.reject(
            "That customer number seems too long. "
            "Please check and try again, or type 'N/A' if you don't have one."
        )
    return FieldCheck.accept(cleaned.upper())


def validate_problem(raw: str) -> FieldCheck:
    problem = raw.strip()
    if len(problem) < 10:
        return FieldCheck.reject(
            "Please provide more details about your problem (at least 10 characters). "
            "The more details you provide, the better we can help!"
        )
    if _REPEATED_CHAR.match(problem) or _SYMBOL_RUN.search(problem):
        return FieldCheck.reject(
            "Please provide a meaningful description of your problem so we can help you effectively."
        )
    if len(problem.split()) < 3:
        return FieldCheck.reject(
            "Please describe your problem in more detail (at least 3 words). "
            "For example: 'I cannot log into my account after password reset.'"
        )
    return FieldCheck.accept(problem)
