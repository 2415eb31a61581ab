"""supportdesk: bilingual knowledge-base support agent with ticket escalation."""

__version__ = "0.1.0"
