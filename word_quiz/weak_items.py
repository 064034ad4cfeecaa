"""Persistent set of record ids the learner has answered wrongly."""
from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from word_quiz.db import WEAK_ITEMS_KEY

if TYPE_CHECKING:
    from word_quiz.db import Database

_log = logging.getLogger("word_quiz.weak")


class WeakItemTracker:
    def __init__(self, db: Database, key: str = WEAK_ITEMS_KEY):
        self.db = db
        self.key = key

    def _load(self) -> list[int]:
        raw = self.db.get_item(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            _log.warning("Stored weak items are not valid JSON, treating as empty")
            return []
        if not isinstance(data, list):
            return []
        ids: list[int] = []
        for v in data:
            # bool is an int subclass; true/false are not ids
            if isinstance(v, int) and not isinstance(v, bool) and v not in ids:
                ids.append(v)
        return ids

    def _save(self, ids: list[int]) -> None:
        self.db.set_item(self.key, json.dumps(ids))

    def add(self, record_id: int) -> bool:
        """Add *record_id*; returns False if it was already present."""
        ids = self._load()
        if record_id in ids:
            return False
        ids.append(record_id)
        self._save(ids)
        return True

    def remove(self, record_id: int) -> bool:
        ids = self._load()
        if record_id not in ids:
            return False
        self._save([i for i in ids if i != record_id])
        return True

    def clear(self) -> None:
        self.db.remove_item(self.key)

    def contains(self, record_id: int) -> bool:
        return record_id in self._load()

    def count(self) -> int:
        return len(self._load())

    def all(self) -> set[int]:
        return set(self._load())

    def ordered(self) -> list[int]:
        """Ids in the order they were first missed."""
        return self._load()
