"""Knowledge source contract: fetch() -> KnowledgeSheet."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Sequence


@dataclass(frozen=True)
class KnowledgeSheet:
    """Rows of a tabular knowledge base; the first source row names the fields."""

    headers: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)

    @classmethod
    def from_values(cls, values: Sequence[Sequence[object]]) -> "KnowledgeSheet":
        """Build from a raw grid (header row first). Missing cells become ""."""
        if not values:
            return cls(headers=[], rows=[])
        headers = [str(h).strip() for h in values[0]]
        rows: List[Dict[str, str]] = []
        for raw in values[1:]:
            row = {
                header: (str(raw[i]).strip() if i < len(raw) and raw[i] is not None else "")
                for i, header in enumerate(headers)
            }
            if any(row.values()):
                rows.append(row)
        return cls(headers=headers, rows=rows)


class BaseKnowledgeSource(ABC):
    """Anything that can produce the knowledge rows (spreadsheet, CSV, ...)."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def fetch(self) -> KnowledgeSheet:
        """Return the current rows. Raises KnowledgeSourceError on failure."""
        ...
