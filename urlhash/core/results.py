"""
Per-URL outcomes and their synchronized accumulation.
"""

import asyncio
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Outcome:
    """Result of one task: a digest on success, an error message otherwise."""
    digest: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, digest: str) -> "Outcome":
        return cls(digest=digest)

    @classmethod
    def failure(cls, message: str) -> "Outcome":
        return cls(error=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def text(self) -> str:
        """Digest or error message, whichever this outcome carries."""
        return self.digest if self.ok else self.error


@dataclass(frozen=True)
class ResultEntry:
    """A (url, outcome) pair."""
    url: str
    outcome: Outcome

    @property
    def result(self) -> str:
        return self.outcome.text

    def format_line(self) -> str:
        return f"{self.url}  {self.result}"


class ResultCollector:
    """
    Append-only result set shared by concurrent tasks.

    All writes go through ``add``; ``drain`` is only meaningful once every
    producer has finished.
    """

    def __init__(self):
        self._entries: List[ResultEntry] = []
        self._lock = asyncio.Lock()

    async def add(self, entry: ResultEntry):
        """Append an entry under the lock."""
        async with self._lock:
            self._entries.append(entry)

    def drain(self) -> List[ResultEntry]:
        """Return every entry recorded so far."""
        return list(self._entries)

    def __len__(self) -> int:
        """Number of entries recorded so far."""
        return len(self._entries)
