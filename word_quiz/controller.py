"""Owns the active quiz session and serialises the actions that fetch content."""
from __future__ import annotations

import asyncio
import logging
import random
from contextlib import contextmanager
from typing import TYPE_CHECKING

from word_quiz.errors import ActionInProgress, FetchFailure, InvalidTransition
from word_quiz.models import VocabularyRecord
from word_quiz.session import QuizSession
from word_quiz.session_builder import build_session
from word_quiz.timer import DEFAULT_TICK_SECONDS

if TYPE_CHECKING:
    from word_quiz.models import Record, SessionFilters, SessionResult
    from word_quiz.session import GradeResult
    from word_quiz.store import RecordStore
    from word_quiz.weak_items import WeakItemTracker

_log = logging.getLogger("word_quiz.controller")


class QuizController:
    def __init__(
        self,
        store: RecordStore,
        weak_items: WeakItemTracker,
        time_limit_seconds: float = 0,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        refresh_timeout_seconds: float = 5.0,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.weak_items = weak_items
        self.time_limit_seconds = time_limit_seconds
        self.tick_seconds = tick_seconds
        self.refresh_timeout_seconds = refresh_timeout_seconds
        self.rng = rng or random.Random()
        self.active: QuizSession | None = None
        self.source_id: str | None = None
        self._generation = 0
        self._in_flight: set[str] = set()

    @contextmanager
    def _guard(self, action: str):
        if action in self._in_flight:
            raise ActionInProgress(f"{action} is already in progress")
        self._in_flight.add(action)
        try:
            yield
        finally:
            self._in_flight.discard(action)

    def busy(self, action: str) -> bool:
        return action in self._in_flight

    # ── Session lifecycle ─────────────────────────────────────────────────

    async def start_session(
        self,
        source_id: str,
        filters: SessionFilters,
        time_limit_seconds: float | None = None,
    ) -> QuizSession | None:
        """Load *source_id*, build a session and present its first question.

        Any running session is abandoned first. Returns None if the session
        was abandoned (or superseded) while the content was still loading.
        """
        with self._guard("start"):
            self.abandon()
            generation = self._generation
            kind = self.store.kind_of(source_id)

            records = await self.store.load(source_id)
            if generation != self._generation:
                _log.info("Start for %s superseded while loading, dropping it", source_id)
                return None

            session = build_session(records, kind, filters, self.weak_items, self.rng)
            limit = self.time_limit_seconds if time_limit_seconds is None else time_limit_seconds
            quiz = QuizSession(
                session,
                records,
                weak_items=self.weak_items,
                time_limit_seconds=limit,
                tick_seconds=self.tick_seconds,
                rng=self.rng,
            )
            quiz.start()
            self.active = quiz
            self.source_id = source_id
            return quiz

    def _require_active(self) -> QuizSession:
        if self.active is None:
            raise InvalidTransition("No active session")
        return self.active

    def submit_answer(self, selected_index: int) -> GradeResult | None:
        return self._require_active().submit_answer(selected_index)

    def advance(self) -> SessionResult | None:
        return self._require_active().advance()

    def abandon(self) -> None:
        """Cancel the running session (if any) and invalidate pending starts."""
        self._generation += 1
        if self.active is not None:
            self.active.abandon()
            self.active = None
            self.source_id = None

    def view(self) -> dict:
        if self.active is None:
            return {"state": "idle"}
        data = self.active.view()
        data["source"] = self.source_id
        return data

    # ── Content ───────────────────────────────────────────────────────────

    async def refresh(self, source_id: str) -> list[Record]:
        """Force-refetch *source_id*, giving up after the refresh timeout."""
        with self._guard("refresh"):
            self.store.kind_of(source_id)
            try:
                return await asyncio.wait_for(
                    self.store.load(source_id, force_refresh=True),
                    timeout=self.refresh_timeout_seconds,
                )
            except asyncio.TimeoutError:
                _log.warning("Refresh of %s timed out after %.1fs", source_id, self.refresh_timeout_seconds)
                raise FetchFailure(f"Refreshing {source_id} timed out") from None

    # ── Weak items ────────────────────────────────────────────────────────

    async def weak_list(self, source_id: str) -> list[dict]:
        """Weak ids that exist in *source_id*, in the order they were missed."""
        records = await self.store.load(source_id)
        by_id = {r.id: r for r in records}
        entries = []
        for record_id in self.weak_items.ordered():
            r = by_id.get(record_id)
            if r is None:
                continue
            if isinstance(r, VocabularyRecord):
                entries.append({"id": r.id, "term": r.term, "meanings": "/".join(r.meanings[:2])})
            else:
                entries.append({"id": r.id, "term": r.prompt, "meanings": r.correct_answer})
        return entries

    def remove_weak(self, record_id: int) -> bool:
        return self.weak_items.remove(record_id)

    def clear_weak(self, confirmed: bool) -> None:
        if not confirmed:
            raise InvalidTransition("Clearing weak items needs confirmation")
        _log.info("Clearing %d weak items", self.weak_items.count())
        self.weak_items.clear()
