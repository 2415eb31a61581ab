"""Shared data types of the dialogue agent."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, List, Literal, Mapping, Optional, Tuple, TypedDict, TypeVar

T = TypeVar("T")


class Language(str, Enum):
    EN = "en"
    AR = "ar"


class ConversationTurn(TypedDict):
    role: Literal["user", "assistant"]
    content: str


KnowledgeEntry = Mapping[str, str]


@dataclass(frozen=True)
class KnowledgeSnapshot:
    """Immutable view of the loaded knowledge base; swapped whole on reload."""

    headers: Tuple[str, ...]
    entries: Tuple[KnowledgeEntry, ...]
    excerpt: str


@dataclass(frozen=True)
class RelevanceResult:
    is_relevant: bool
    confidence: int
    reasoning: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", max(0, min(100, int(self.confidence))))


# Failure reasons carried by Outcome
TIMEOUT = "timeout"
PROVIDER_ERROR = "provider_error"
EMPTY_RESPONSE = "empty_response"
PARSE_ERROR = "parse_error"
NOT_LOADED = "not_loaded"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or a tagged failure reason; callers pick the fallback."""

    value: Optional[T] = None
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def value_or(self, default: T) -> T:
        return self.value if self.ok and self.value is not None else default

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, reason: str) -> "Outcome[T]":
        return cls(failure=reason)


@dataclass
class AssistanceState:
    attempt_count: int = 0
    last_query: str = ""
    context: List[str] = field(default_factory=list)


class TicketStep(str, Enum):
    IDLE = "idle"
    COLLECT_NAME = "collect_name"
    COLLECT_EMAIL = "collect_email"
    COLLECT_CUSTOMER_NUMBER = "collect_customer_number"
    COLLECT_PROBLEM = "collect_problem"
    SUBMITTING = "submitting"
    COMPLETED = "completed"


@dataclass
class TicketData:
    name: Optional[str] = None
    email: Optional[str] = None
    customer_number: Optional[str] = None
    problem: Optional[str] = None


@dataclass(frozen=True)
class SupportTicket:
    name: str
    email: str
    customer_number: str
    problem: str
    timestamp: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "email": self.email,
            "customer_number": self.customer_number,
            "problem": self.problem,
            "timestamp": self.timestamp,
        }


@dataclass
class TicketFlowState:
    current_step: TicketStep = TicketStep.IDLE
    data: TicketData = field(default_factory=TicketData)
    is_active: bool = False
    pending_email: Optional[str] = None
    """Typo-corrected address awaiting the user's confirmation."""
    pending_ticket: Optional[SupportTicket] = None
    delivery_failures: int = 0


@dataclass(frozen=True)
class TurnResult:
    answer: str
    language: Language
    route: str
    ticket_flow_active: bool = False
