"""Telegram Bot API ticket delivery: posts finalized support tickets to a chat."""
from __future__ import annotations

import html
import logging
from typing import List, Optional, Union

import httpx

from supportdesk.agent.types import SupportTicket
from supportdesk.core.exceptions import DeliveryError

logger = logging.getLogger(__name__)

_MAX_MESSAGE_LEN = 4096
_ELLIPSIS = "…"


def _esc(value: str) -> str:
    return html.escape(value, quote=False)


def _fit_escaped(value: str, budget: int) -> str:
    """Escape *value*, cutting the raw text so the result fits in *budget* chars."""
    escaped = _esc(value)
    if len(escaped) <= budget:
        return escaped
    room = budget - len(_ELLIPSIS)
    parts: List[str] = []
    used = 0
    for char in value:
        piece = _esc(char)
        if used + len(piece) > room:
            break
        parts.append(piece)
        used += len(piece)
    return "".join(parts).rstrip() + _ELLIPSIS


def format_ticket(ticket: SupportTicket) -> str:
    """HTML message body for *ticket*; user-supplied fields are escaped.

    An over-long problem description is shortened before escaping, so the
    message stays within Telegram's limit without losing the footer or
    splitting an entity.
    """
    header = (
        "🎫 <b>NEW SUPPORT TICKET</b>\n\n"
        "👤 <b>Customer Information:</b>\n"
        f"• Name: {_esc(ticket.name)}\n"
        f"• Email: {_esc(ticket.email)}\n"
        f"• Customer #: {_esc(ticket.customer_number)}\n\n"
        "📝 <b>Problem Description:</b>\n"
    )
    footer = (
        "\n\n"
        f"🕐 <b>Submitted:</b> {_esc(ticket.timestamp)}\n\n"
        "━━━━━━━━━━━━━━━━━━━━\n"
        "<i>Sent via support chat</i>"
    )
    budget = max(0, _MAX_MESSAGE_LEN - len(header) - len(footer))
    return header + _fit_escaped(ticket.problem, budget) + footer


class TelegramTicketDelivery:
    BASE = "https://api.telegram.org/bot{token}"

    def __init__(
        self,
        token: str,
        chat_id: Union[int, str],
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base = self.BASE.format(token=token)
        self._chat_id = chat_id
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def deliver(self, ticket: SupportTicket) -> None:
        """Send *ticket* to the configured chat. Raises DeliveryError on any failure."""
        payload = {"chat_id": self._chat_id, "text": format_ticket(ticket), "parse_mode": "HTML"}
        try:
            async with self._client() as client:
                resp = await client.post(f"{self._base}/sendMessage", json=payload)
        except httpx.HTTPError as exc:
            logger.error("TelegramTicketDelivery: sendMessage transport error: %s", exc)
            raise DeliveryError(
                f"Telegram request failed: {exc}", details={"channel": "telegram"}, cause=exc,
            ) from exc

        if resp.status_code != 200:
            logger.error(
                "TelegramTicketDelivery: sendMessage failed (chat=%s status=%s): %s",
                self._chat_id, resp.status_code, resp.text,
            )
            raise DeliveryError(
                f"Telegram API error: {resp.status_code}",
                details={"channel": "telegram", "status": resp.status_code},
            )
        logger.info("TelegramTicketDelivery: ticket for %s delivered", ticket.email)

    async def test_connection(self) -> bool:
        """True when the bot token is accepted (getMe)."""
        try:
            async with self._client() as client:
                resp = await client.get(f"{self._base}/getMe")
        except httpx.HTTPError as exc:
            logger.warning("TelegramTicketDelivery: getMe failed: %s", exc)
            return False
        if resp.status_code != 200:
            return False
        try:
            return bool(resp.json().get("ok"))
        except ValueError:
            return False
