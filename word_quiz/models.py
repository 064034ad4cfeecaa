from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class RecordKind(str, Enum):
    VOCABULARY = "vocabulary"
    GRAMMAR = "grammar"


DIFFICULTY_TIERS = ("1", "2", "3")


@dataclass
class VocabularyRecord:
    id: int
    term: str
    meanings: list[str]

    @property
    def kind(self) -> RecordKind:
        return RecordKind.VOCABULARY

    @property
    def prompt_text(self) -> str:
        return self.term


@dataclass
class GrammarRecord:
    id: int
    prompt: str
    correct_answer: str
    distractors: list[str]
    source_label: str = ""
    difficulty_tier: str = ""  # "1" | "2" | "3" | ""
    explanation: str = ""

    @property
    def kind(self) -> RecordKind:
        return RecordKind.GRAMMAR

    @property
    def prompt_text(self) -> str:
        return self.prompt


Record = Union[VocabularyRecord, GrammarRecord]


@dataclass
class ChoiceOption:
    display_text: str
    is_correct: bool
    item: Record


@dataclass
class MissedItem:
    prompt_text: str
    correct_display_text: str


@dataclass
class SessionFilters:
    weak_only: bool = False
    range_start: int | None = None
    range_end: int | None = None
    difficulty: str | None = None
    count: int = 20


@dataclass
class Session:
    kind: RecordKind
    items: list[Record]
    current_index: int = 0
    score: int = 0
    missed: list[MissedItem] = field(default_factory=list)
    outcomes: list[bool | None] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.outcomes:
            self.outcomes = [None] * len(self.items)

    @property
    def current_item(self) -> Record:
        return self.items[self.current_index]


@dataclass
class SessionResult:
    score: int
    total: int
    missed: list[MissedItem]

    @property
    def flawless(self) -> bool:
        return self.total > 0 and self.score == self.total

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "total": self.total,
            "flawless": self.flawless,
            "missed": [
                {"prompt": m.prompt_text, "correct": m.correct_display_text}
                for m in self.missed
            ],
        }
