"""Shared test fixtures."""
from __future__ import annotations

import random

import pytest

from word_quiz.db import Database
from word_quiz.errors import FetchFailure
from word_quiz.fetchers.base import ContentFetcher
from word_quiz.models import GrammarRecord, RecordKind, VocabularyRecord
from word_quiz.store import RecordStore
from word_quiz.weak_items import WeakItemTracker


class FakeFetcher(ContentFetcher):
    """In-memory fetcher that records every call."""

    def __init__(self, texts: dict[str, str] | None = None, fail: bool = False):
        self.texts = dict(texts or {})
        self.fail = fail
        self.calls: list[tuple[str, bool]] = []

    async def fetch(self, source_id: str, bust_cache: bool = False) -> str:
        self.calls.append((source_id, bust_cache))
        if self.fail or source_id not in self.texts:
            raise FetchFailure(f"cannot fetch {source_id}")
        return self.texts[source_id]

    def name(self) -> str:
        return "fake"


VOCAB_CSV = """\
number,english,meaning1,meaning2
1,apple,fruit,red
2,run,走る、運営する
3,book,本,予約する
4,happy,幸せな
5,decide,決める,決心する
6,borrow,借りる
"""

GRAMMAR_CSV = """\
id,question,correct,wrong1,wrong2,wrong3,source,difficulty,explanation
5,I ___ to school.,go,goes,went,going,MIT,2,Present tense with I.
6,She ___ a book yesterday.,read,reads,reading,has read,Basic,1,Past simple.
7,"If I ___ you, I would apologise.",were,am,be,been,Conditionals,3,Second conditional.
"""


@pytest.fixture
def tmp_db(tmp_path):
    """Create a fresh temporary database."""
    db = Database(tmp_path / "test.db")
    yield db
    db.close()


@pytest.fixture
def weak_items(tmp_db):
    return WeakItemTracker(tmp_db)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def vocab_csv():
    return VOCAB_CSV


@pytest.fixture
def grammar_csv():
    return GRAMMAR_CSV


@pytest.fixture
def vocab_records():
    return [
        VocabularyRecord(1, "apple", ["fruit", "red"]),
        VocabularyRecord(2, "run", ["走る、運営する"]),
        VocabularyRecord(3, "book", ["本", "予約する"]),
        VocabularyRecord(4, "happy", ["幸せな"]),
        VocabularyRecord(5, "decide", ["決める", "決心する"]),
        VocabularyRecord(6, "borrow", ["借りる"]),
    ]


@pytest.fixture
def grammar_records():
    return [
        GrammarRecord(5, "I ___ to school.", "go", ["goes", "went", "going"], "MIT", "2", "Present tense with I."),
        GrammarRecord(6, "She ___ a book yesterday.", "read", ["reads", "reading", "has read"], "Basic", "1"),
        GrammarRecord(7, "If I ___ you, I would apologise.", "were", ["am", "be", "been"], "Conditionals", "3"),
    ]


@pytest.fixture
def fake_fetcher():
    return FakeFetcher({"words.csv": VOCAB_CSV, "grammar.csv": GRAMMAR_CSV})


@pytest.fixture
def store(fake_fetcher):
    return RecordStore(
        fake_fetcher,
        {"words.csv": RecordKind.VOCABULARY, "grammar.csv": RecordKind.GRAMMAR},
    )
