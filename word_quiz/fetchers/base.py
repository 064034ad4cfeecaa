from __future__ import annotations

from abc import ABC, abstractmethod


class ContentFetcher(ABC):
    @abstractmethod
    async def fetch(self, source_id: str, bust_cache: bool = False) -> str:
        """Return the raw text behind *source_id* or raise FetchFailure."""
        ...

    @abstractmethod
    def name(self) -> str:
        ...
