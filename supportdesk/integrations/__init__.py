"""Outbound notification channels for finalized support tickets."""
from supportdesk.integrations.telegram import TelegramTicketDelivery, format_ticket

__all__ = ["TelegramTicketDelivery", "format_ticket"]
