"""Filter and sample records into a fixed-order quiz session."""
from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

from word_quiz.errors import EmptyFilterResult, NoWeakItems
from word_quiz.models import (
    DIFFICULTY_TIERS,
    GrammarRecord,
    Record,
    RecordKind,
    Session,
    SessionFilters,
)

if TYPE_CHECKING:
    from word_quiz.weak_items import WeakItemTracker

_log = logging.getLogger("word_quiz.builder")

DEFAULT_COUNT = 20


def as_int(value: Any) -> int | None:
    """Lenient integer coercion: anything non-numeric becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def make_filters(
    weak_only: bool = False,
    range_start: Any = None,
    range_end: Any = None,
    difficulty: Any = None,
    count: Any = None,
) -> SessionFilters:
    """Build SessionFilters from loosely typed form/query values."""
    n = as_int(count)
    tier = str(difficulty).strip() if difficulty is not None else None
    return SessionFilters(
        weak_only=bool(weak_only),
        range_start=as_int(range_start),
        range_end=as_int(range_end),
        difficulty=tier if tier in DIFFICULTY_TIERS else None,
        count=DEFAULT_COUNT if n is None else n,
    )


def filter_records(
    records: list[Record],
    filters: SessionFilters,
    weak_items: WeakItemTracker | None = None,
) -> list[Record]:
    if filters.weak_only:
        weak_ids = weak_items.all() if weak_items is not None else set()
        selected = [r for r in records if r.id in weak_ids]
        if not selected:
            raise NoWeakItems("No weak items to practise yet.")
        return selected

    selected = list(records)
    start = as_int(filters.range_start)
    end = as_int(filters.range_end)
    if start is not None:
        selected = [r for r in selected if r.id >= start]
    if end is not None:
        selected = [r for r in selected if r.id <= end]

    # Vocabulary has no tiers, so the difficulty filter only narrows grammar
    if filters.difficulty in DIFFICULTY_TIERS:
        selected = [
            r for r in selected
            if not isinstance(r, GrammarRecord) or r.difficulty_tier == filters.difficulty
        ]
    return selected


def build_session(
    records: list[Record],
    kind: RecordKind,
    filters: SessionFilters,
    weak_items: WeakItemTracker | None = None,
    rng: random.Random | None = None,
) -> Session:
    """Filter, shuffle and truncate *records* into a new Session.

    Raises NoWeakItems / EmptyFilterResult without touching any state when
    nothing is left to ask.
    """
    rng = rng or random.Random()
    pool = filter_records(records, filters, weak_items)

    count = as_int(filters.count)
    if count is None:
        count = DEFAULT_COUNT

    rng.shuffle(pool)
    items = pool[: max(count, 0)]
    if not items:
        raise EmptyFilterResult("No items matched. Check the range and difficulty settings.")

    _log.info(
        "Built %s session: %d items (from %d matching, %d total)",
        kind.value, len(items), len(pool), len(records),
    )
    return Session(kind=kind, items=items)
