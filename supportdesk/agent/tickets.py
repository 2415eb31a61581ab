"""
TicketIntakeMachine: sequential, validated support-ticket form.

  idle -> collect_name -> collect_email -> collect_customer_number
       -> collect_problem -> submitting -> completed

A rejected field re-prompts and leaves the step unchanged. The ticket is
built once, when the problem description is accepted; if delivery fails the
machine stays in ``submitting`` and the next user message re-sends the same
ticket, up to ``max_delivery_attempts`` tries in total.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from supportdesk.agent import validators
from supportdesk.agent.types import SupportTicket, TicketData, TicketFlowState, TicketStep
from supportdesk.core.exceptions import DeliveryError, InvalidFlowState

logger = logging.getLogger(__name__)

START_PROMPT = (
    "Let me collect some information to create your support ticket.\n\n"
    "First, may I have your full name?"
)
CANCELLED = "Support ticket submission cancelled. How else can I help you?"
ASK_CUSTOMER_NUMBER = (
    "Great! What's your customer number? (If you don't have one, just type 'N/A' or 'None')"
)
ASK_PROBLEM_NO_NUMBER = (
    "No problem! Now, please describe your issue in detail. "
    "The more information you provide, the better we can help you."
)
ASK_PROBLEM = (
    "Perfect! Now, please describe your problem in detail. "
    "The more information you provide, the better we can help you."
)


class TicketDelivery(Protocol):
    async def deliver(self, ticket: SupportTicket) -> None:
        """Hand *ticket* to the notification channel; raise DeliveryError on failure."""
        ...


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_summary(ticket: SupportTicket) -> str:
    return (
        "✅ Your support ticket has been submitted successfully!\n\n"
        "📋 **Summary:**\n"
        f"• Name: {ticket.name}\n"
        f"• Email: {ticket.email}\n"
        f"• Customer #: {ticket.customer_number}\n"
        f"• Problem: {ticket.problem}\n\n"
        f"Our support team has been notified and will contact you at {ticket.email} "
        "within 24 hours.\n\n"
        "Is there anything else I can help you with?"
    )


class TicketIntakeMachine:
    def __init__(
        self,
        delivery: TicketDelivery,
        *,
        support_contact: str = "support@example.com",
        max_delivery_attempts: int = 3,
        timestamp: Callable[[], str] = utc_timestamp,
    ) -> None:
        self._delivery = delivery
        self._contact = support_contact
        self._max_delivery_attempts = max(1, max_delivery_attempts)
        self._timestamp = timestamp
        self._state = TicketFlowState()

    # ── State ──

    def is_flow_active(self) -> bool:
        return self._state.is_active

    @property
    def current_step(self) -> TicketStep:
        return self._state.current_step

    @property
    def flow_state(self) -> TicketFlowState:
        """Copy of the current state; mutating it does not affect the machine."""
        return replace(self._state, data=replace(self._state.data))

    def _enter(self, step: TicketStep) -> None:
        self._state.current_step = step
        self._state.is_active = step not in (TicketStep.IDLE, TicketStep.COMPLETED)
        logger.info("Ticket flow -> %s", step.value, extra={"ticket_step": step.value})

    def reset_flow(self) -> None:
        self._state = TicketFlowState()

    def start_ticket_flow(self) -> str:
        self._state = TicketFlowState(data=TicketData())
        self._enter(TicketStep.COLLECT_NAME)
        return START_PROMPT

    def cancel_flow(self) -> str:
        step = self._state.current_step
        self.reset_flow()
        logger.info("Ticket flow cancelled at %s", step.value, extra={"ticket_step": step.value})
        return CANCELLED

    # ── Input ──

    async def process_input(self, text: str) -> str:
        """Feed one user message to the current step and return the reply."""
        step = self._state.current_step
        if not self._state.is_active:
            raise InvalidFlowState(
                "Ticket flow is not active", details={"step": step.value},
            )
        text = (text or "").strip()
        if step is TicketStep.COLLECT_NAME:
            return self._collect_name(text)
        if step is TicketStep.COLLECT_EMAIL:
            return self._collect_email(text)
        if step is TicketStep.COLLECT_CUSTOMER_NUMBER:
            return self._collect_customer_number(text)
        if step is TicketStep.COLLECT_PROBLEM:
            return await self._collect_problem(text)
        if step is TicketStep.SUBMITTING:
            return await self._submit()
        raise InvalidFlowState(f"No handler for step {step.value}", details={"step": step.value})

    def _collect_name(self, text: str) -> str:
        check = validators.validate_name(text)
        if not check.ok:
            return check.message
        self._state.data.name = check.value
        self._enter(TicketStep.COLLECT_EMAIL)
        return f"Thank you, {check.value}! Now, what's your email address?"

    def _collect_email(self, text: str) -> str:
        pending = self._state.pending_email
        if pending and validators.is_confirmation(text):
            return self._accept_email(pending)

        check = validators.validate_email(text)
        if check.ok:
            return self._accept_email(check.value or "")
        self._state.pending_email = check.suggestion
        return check.message

    def _accept_email(self, email: str) -> str:
        self._state.data.email = email
        self._state.pending_email = None
        self._enter(TicketStep.COLLECT_CUSTOMER_NUMBER)
        return ASK_CUSTOMER_NUMBER

    def _collect_customer_number(self, text: str) -> str:
        check = validators.validate_customer_number(text)
        if not check.ok:
            return check.message
        self._state.data.customer_number = check.value
        self._enter(TicketStep.COLLECT_PROBLEM)
        return ASK_PROBLEM_NO_NUMBER if check.value == validators.NOT_AVAILABLE else ASK_PROBLEM

    async def _collect_problem(self, text: str) -> str:
        check = validators.validate_problem(text)
        if not check.ok:
            return check.message
        data = self._state.data
        data.problem = check.value
        self._state.pending_ticket = SupportTicket(
            name=data.name or "",
            email=data.email or "",
            customer_number=data.customer_number or validators.NOT_AVAILABLE,
            problem=data.problem or "",
            timestamp=self._timestamp(),
        )
        self._enter(TicketStep.SUBMITTING)
        return await self._submit()

    async def _submit(self) -> str:
        ticket = self._state.pending_ticket
        if ticket is None:
            raise InvalidFlowState("Submitting without a ticket", details={"step": "submitting"})
        try:
            await self._delivery.deliver(ticket)
        except DeliveryError as exc:
            self._state.delivery_failures += 1
            failures = self._state.delivery_failures
            logger.error(
                "Ticket delivery failed (%d/%d): %s",
                failures, self._max_delivery_attempts, exc,
                extra={"ticket_step": TicketStep.SUBMITTING.value},
            )
            if failures >= self._max_delivery_attempts:
                self.reset_flow()
                return (
                    "I'm sorry, we still couldn't submit your ticket. "
                    f"Please contact us directly at {self._contact} or call our support line."
                )
            return (
                "I apologize, but I encountered an error while submitting your ticket. "
                f"Please try contacting us directly at {self._contact} or call our support line. "
                "You can also send any message to try submitting it again."
            )

        self._state.pending_ticket = None
        self._enter(TicketStep.COMPLETED)
        return format_summary(ticket)
