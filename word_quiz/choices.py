"""Build the multiple-choice options for one question."""
from __future__ import annotations

import random

from word_quiz.models import ChoiceOption, GrammarRecord, Record, VocabularyRecord

VOCAB_CHOICE_COUNT = 4
MEANING_DELIMITER = "、"
DISPLAY_SEPARATOR = " / "


def meaning_display(record: VocabularyRecord) -> str:
    """First meaning, or "first / second" when there are two or more.

    Meanings are joined and re-split on the ideographic comma so a single
    CSV field such as "果物、赤い" still yields two display parts.
    """
    joined = MEANING_DELIMITER.join(record.meanings)
    parts = [p.strip() for p in joined.split(MEANING_DELIMITER) if p.strip()]
    if not parts:
        return ""
    if len(parts) > 1:
        return f"{parts[0]}{DISPLAY_SEPARATOR}{parts[1]}"
    return parts[0]


def display_text(record: Record) -> str:
    """Text shown for *record* when it is the correct option."""
    if isinstance(record, VocabularyRecord):
        return meaning_display(record)
    return record.correct_answer


def _vocabulary_choices(
    target: VocabularyRecord,
    records: list[Record],
    rng: random.Random,
) -> list[ChoiceOption]:
    others: dict[int, VocabularyRecord] = {}
    for r in records:
        if isinstance(r, VocabularyRecord) and r.id != target.id and r.id not in others:
            others[r.id] = r
    k = min(VOCAB_CHOICE_COUNT - 1, len(others))
    picks = rng.sample(list(others.values()), k)

    options = [ChoiceOption(meaning_display(target), True, target)]
    options.extend(ChoiceOption(meaning_display(r), False, r) for r in picks)
    return options


def _grammar_choices(target: GrammarRecord) -> list[ChoiceOption]:
    options = [ChoiceOption(target.correct_answer, True, target)]
    options.extend(ChoiceOption(d, False, target) for d in target.distractors)
    return options


def generate_choices(
    target: Record,
    records: list[Record],
    rng: random.Random | None = None,
) -> list[ChoiceOption]:
    """Return the shuffled options for *target*; exactly one is correct.

    Vocabulary distractors are drawn from other records; grammar distractors
    come only from the target record itself.
    """
    rng = rng or random.Random()
    if isinstance(target, VocabularyRecord):
        options = _vocabulary_choices(target, records, rng)
    elif isinstance(target, GrammarRecord):
        options = _grammar_choices(target)
    else:
        raise TypeError(f"Unsupported record type: {type(target).__name__}")
    rng.shuffle(options)
    return options
