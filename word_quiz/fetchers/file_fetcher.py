from __future__ import annotations

import logging
from pathlib import Path

from word_quiz.errors import FetchFailure
from word_quiz.fetchers.base import ContentFetcher

log = logging.getLogger("word_quiz.fetch")


class FileFetcher(ContentFetcher):
    """Serve content files from a local directory."""

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir

    async def fetch(self, source_id: str, bust_cache: bool = False) -> str:
        path = self.data_dir / source_id
        # Source ids come from config, but never let one escape data_dir
        if path.resolve().parent != self.data_dir.resolve():
            raise FetchFailure(f"Invalid source: {source_id}")
        try:
            text = path.read_text(encoding="utf-8-sig")
        except OSError as e:
            log.warning("Reading %s failed: %s", path, e)
            raise FetchFailure(f"Could not read {source_id}: {e}") from e
        log.info("Read %s (%d bytes)", path.name, len(text))
        return text

    def name(self) -> str:
        return f"file/{self.data_dir}"
