"""Parse comma-delimited quiz content into vocabulary or grammar records.

Two row layouts:
  id,term,meaning1,meaning2,...                                   (vocabulary)
  id,prompt,correct,wrong1,wrong2,wrong3,source,difficulty,explanation  (grammar)

Lines whose first field is not an integer (header rows, notes, garbage) are
skipped without complaint.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path

from word_quiz.models import GrammarRecord, Record, RecordKind, VocabularyRecord

_log = logging.getLogger("word_quiz.parser")

GRAMMAR_MIN_FIELDS = 6


def split_fields(line: str) -> list[str]:
    """Split *line* on commas, treating quoted stretches as literal text.

    A ``"`` toggles quoted mode and is dropped from the output; each field is
    stripped of surrounding whitespace.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    fields.append("".join(current).strip())
    return fields


def _parse_id(token: str) -> int | None:
    try:
        return int(token)
    except ValueError:
        return None


def _vocabulary_record(record_id: int, fields: list[str]) -> VocabularyRecord | None:
    if len(fields) < 2:
        return None
    meanings = [m for m in fields[2:] if m]
    if not meanings:
        return None
    return VocabularyRecord(id=record_id, term=fields[1], meanings=meanings)


def _grammar_record(record_id: int, fields: list[str]) -> GrammarRecord | None:
    if len(fields) < GRAMMAR_MIN_FIELDS:
        return None
    correct = fields[2]
    distractors: list[str] = []
    for candidate in fields[3:6]:
        if candidate and candidate != correct and candidate not in distractors:
            distractors.append(candidate)
    if not distractors:
        return None

    def optional(i: int) -> str:
        return fields[i] if len(fields) > i else ""

    return GrammarRecord(
        id=record_id,
        prompt=fields[1],
        correct_answer=correct,
        distractors=distractors,
        source_label=optional(6),
        difficulty_tier=optional(7),
        explanation=optional(8),
    )


def parse_content(text: str, kind: RecordKind) -> list[Record]:
    records: list[Record] = []
    skipped = 0

    for lineno, line in enumerate(re.split(r"\r\n|\r|\n", text), 1):
        if not line.strip():
            continue
        fields = split_fields(line)
        record_id = _parse_id(fields[0])
        if record_id is None:
            _log.debug("line %d: no numeric id, skipped", lineno)
            skipped += 1
            continue

        if kind == RecordKind.VOCABULARY:
            record = _vocabulary_record(record_id, fields)
        else:
            record = _grammar_record(record_id, fields)

        if record is None:
            _log.debug("line %d: incomplete %s row, skipped", lineno, kind.value)
            skipped += 1
            continue
        records.append(record)

    _log.debug("Parsed %d %s records (%d lines skipped)", len(records), kind.value, skipped)
    return records


def parse_content_file(path: Path, kind: RecordKind) -> list[Record]:
    # utf-8-sig: spreadsheet exports often carry a BOM that would break the id
    text = path.read_text(encoding="utf-8-sig")
    return parse_content(text, kind)
