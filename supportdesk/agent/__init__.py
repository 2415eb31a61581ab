"""
Dialogue agent: language handling, knowledge lookups, social replies,
assistance attempts, the ticket intake machine and the per-turn orchestrator.
"""
from supportdesk.agent.assistance import AssistanceTracker
from supportdesk.agent.dialogue import DialogueOrchestrator, is_unhelpful
from supportdesk.agent.knowledge import KnowledgeStore
from supportdesk.agent.language import LanguageDetection, LanguageDetector, Translator
from supportdesk.agent.sessions import SessionManager
from supportdesk.agent.social import SocialIntentMatcher, SocialMatch
from supportdesk.agent.state import SessionState
from supportdesk.agent.tickets import TicketDelivery, TicketIntakeMachine
from supportdesk.agent.types import (
    Language,
    Outcome,
    RelevanceResult,
    SupportTicket,
    TicketStep,
    TurnResult,
)

__all__ = [
    "AssistanceTracker",
    "DialogueOrchestrator",
    "KnowledgeStore",
    "Language",
    "LanguageDetection",
    "LanguageDetector",
    "Outcome",
    "RelevanceResult",
    "SessionManager",
    "SessionState",
    "SocialIntentMatcher",
    "SocialMatch",
    "SupportTicket",
    "TicketDelivery",
    "TicketIntakeMachine",
    "TicketStep",
    "Translator",
    "TurnResult",
    "is_unhelpful",
]
