"""Tests for the comma-delimited content parser."""
from __future__ import annotations

from word_quiz.models import GrammarRecord, RecordKind, VocabularyRecord
from word_quiz.parsers.content_parser import parse_content, parse_content_file, split_fields


class TestSplitFields:
    def test_plain(self):
        assert split_fields("1,apple,fruit") == ["1", "apple", "fruit"]

    def test_trims_whitespace(self):
        assert split_fields(" 1 , apple ,  fruit ") == ["1", "apple", "fruit"]

    def test_quoted_comma_is_literal(self):
        assert split_fields('7,"If I ___ you, I would",were') == ["7", "If I ___ you, I would", "were"]

    def test_quotes_dropped(self):
        assert split_fields('"1","apple"') == ["1", "apple"]

    def test_trailing_empty_field(self):
        assert split_fields("1,apple,") == ["1", "apple", ""]


class TestVocabularyParser:
    def test_scenario_apple(self):
        records = parse_content("1,apple,fruit,red", RecordKind.VOCABULARY)
        assert records == [VocabularyRecord(1, "apple", ["fruit", "red"])]

    def test_parse_basic(self, vocab_csv):
        records = parse_content(vocab_csv, RecordKind.VOCABULARY)
        assert len(records) == 6
        assert [r.id for r in records] == [1, 2, 3, 4, 5, 6]
        assert records[1].meanings == ["走る、運営する"]

    def test_header_skipped(self, vocab_csv):
        records = parse_content(vocab_csv, RecordKind.VOCABULARY)
        assert all(r.term != "english" for r in records)

    def test_non_integer_first_field_dropped(self):
        text = "abc,apple,fruit\n1.5,pear,fruit\n,plum,fruit\n2,kiwi,fruit"
        records = parse_content(text, RecordKind.VOCABULARY)
        assert [r.id for r in records] == [2]

    def test_empty_meanings_filtered(self):
        records = parse_content("1,apple,,fruit,,", RecordKind.VOCABULARY)
        assert records[0].meanings == ["fruit"]

    def test_no_meanings_dropped(self):
        text = "1,apple,,\n2,pear\n3,plum,fruit"
        records = parse_content(text, RecordKind.VOCABULARY)
        assert [r.id for r in records] == [3]

    def test_line_endings(self):
        text = "1,a,x\r\n2,b,y\r3,c,z\n\n\n4,d,w"
        records = parse_content(text, RecordKind.VOCABULARY)
        assert [r.id for r in records] == [1, 2, 3, 4]

    def test_empty_text(self):
        assert parse_content("", RecordKind.VOCABULARY) == []

    def test_parse_file_with_bom(self, tmp_path):
        f = tmp_path / "words.csv"
        f.write_text("\ufeff1,apple,fruit\n", encoding="utf-8")
        records = parse_content_file(f, RecordKind.VOCABULARY)
        assert records[0].id == 1


class TestGrammarParser:
    def test_scenario_present_tense(self):
        line = "5,I ___ to school.,go,goes,went,going,MIT,2,Present tense with I."
        [r] = parse_content(line, RecordKind.GRAMMAR)
        assert isinstance(r, GrammarRecord)
        assert r.id == 5
        assert r.prompt == "I ___ to school."
        assert r.correct_answer == "go"
        assert set(r.distractors) == {"goes", "went", "going"}
        assert r.source_label == "MIT"
        assert r.difficulty_tier == "2"
        assert r.explanation == "Present tense with I."

    def test_header_skipped(self, grammar_csv):
        records = parse_content(grammar_csv, RecordKind.GRAMMAR)
        assert [r.id for r in records] == [5, 6, 7]

    def test_quoted_prompt(self, grammar_csv):
        records = parse_content(grammar_csv, RecordKind.GRAMMAR)
        assert records[2].prompt == "If I ___ you, I would apologise."

    def test_too_few_fields_dropped(self):
        text = "1,prompt,right,wrong1,wrong2\n2,prompt,right,wrong1,wrong2,wrong3"
        records = parse_content(text, RecordKind.GRAMMAR)
        assert [r.id for r in records] == [2]

    def test_optional_fields_default_empty(self):
        [r] = parse_content("2,prompt,right,a,b,c", RecordKind.GRAMMAR)
        assert r.source_label == ""
        assert r.difficulty_tier == ""
        assert r.explanation == ""

    def test_blank_distractors_filtered(self):
        [r] = parse_content("2,prompt,right,a,,", RecordKind.GRAMMAR)
        assert r.distractors == ["a"]

    def test_distractor_equal_to_answer_removed(self):
        [r] = parse_content("2,prompt,right,right,b,b", RecordKind.GRAMMAR)
        assert r.distractors == ["b"]

    def test_no_usable_distractor_dropped(self):
        text = "2,prompt,right,,,\n3,prompt,right,right,right,\n4,prompt,right,a,,"
        records = parse_content(text, RecordKind.GRAMMAR)
        assert [r.id for r in records] == [4]
