"""Local CSV knowledge source (header row + one entry per line)."""
from __future__ import annotations

import asyncio
import csv
from pathlib import Path
from typing import List

from supportdesk.clients.knowledge.base import BaseKnowledgeSource, KnowledgeSheet
from supportdesk.core.exceptions import KnowledgeSourceError


class CsvKnowledgeSource(BaseKnowledgeSource):
    def __init__(self, path: str | Path, *, encoding: str = "utf-8-sig") -> None:
        self._path = Path(path)
        self._encoding = encoding

    @property
    def name(self) -> str:
        return f"csv:{self._path.name}"

    async def fetch(self) -> KnowledgeSheet:
        return await asyncio.to_thread(self._read)

    def _read(self) -> KnowledgeSheet:
        try:
            with self._path.open(newline="", encoding=self._encoding) as fh:
                values: List[List[str]] = [row for row in csv.reader(fh)]
        except OSError as exc:
            raise KnowledgeSourceError(
                f"Cannot read knowledge CSV {self._path}: {exc}",
                details={"source": self.name},
                cause=exc,
            ) from exc
        if not values:
            raise KnowledgeSourceError(f"Knowledge CSV {self._path} is empty", details={"source": self.name})
        return KnowledgeSheet.from_values(values)
