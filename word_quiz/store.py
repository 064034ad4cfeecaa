"""Keyed cache of parsed record lists, one entry per content source."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from word_quiz.errors import UnknownSource
from word_quiz.parsers.content_parser import parse_content

if TYPE_CHECKING:
    from word_quiz.fetchers.base import ContentFetcher
    from word_quiz.models import Record, RecordKind

_log = logging.getLogger("word_quiz.store")


class RecordStore:
    def __init__(self, fetcher: ContentFetcher, source_kinds: dict[str, RecordKind]):
        self.fetcher = fetcher
        self.source_kinds = dict(source_kinds)
        self._cache: dict[str, list[Record]] = {}

    def kind_of(self, source_id: str) -> RecordKind:
        try:
            return self.source_kinds[source_id]
        except KeyError:
            raise UnknownSource(f"Unknown content source: {source_id}") from None

    async def load(self, source_id: str, force_refresh: bool = False) -> list[Record]:
        """Return the records for *source_id*, fetching only when needed.

        A forced refresh always goes to the fetcher (with cache busting) and
        replaces the cached entry, even with an empty list. A failed fetch
        raises FetchFailure and leaves the cache as it was.
        """
        kind = self.kind_of(source_id)
        if not force_refresh and source_id in self._cache:
            _log.debug("Cache hit: %s", source_id)
            return self._cache[source_id]

        text = await self.fetcher.fetch(source_id, bust_cache=force_refresh)
        records = parse_content(text, kind)
        self._cache[source_id] = records
        _log.info(
            "%s %s: %d %s records",
            "Refreshed" if force_refresh else "Loaded",
            source_id, len(records), kind.value,
        )
        return records

    def cached(self, source_id: str) -> list[Record] | None:
        return self._cache.get(source_id)

    def set_fetcher(self, fetcher: ContentFetcher) -> None:
        """Switch to *fetcher* and drop everything fetched through the old one."""
        _log.info("Content fetcher changed to %s, clearing cache", fetcher.name())
        self.fetcher = fetcher
        self.invalidate()

    def invalidate(self) -> None:
        self._cache.clear()
