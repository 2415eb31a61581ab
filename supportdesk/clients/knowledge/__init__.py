"""Knowledge sources: Google Sheets (cached) and local CSV."""
from supportdesk.clients.knowledge.base import BaseKnowledgeSource, KnowledgeSheet
from supportdesk.clients.knowledge.csv_file import CsvKnowledgeSource
from supportdesk.clients.knowledge.sheets import GoogleSheetsSource

__all__ = [
    "BaseKnowledgeSource",
    "CsvKnowledgeSource",
    "GoogleSheetsSource",
    "KnowledgeSheet",
]
