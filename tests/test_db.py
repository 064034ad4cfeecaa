"""Tests for the client-local key/value store."""
from __future__ import annotations

import pytest

from word_quiz.db import THEME_KEY, Database


class TestKeyValue:
    def test_missing_key(self, tmp_db):
        assert tmp_db.get_item("nope") is None

    def test_set_and_get(self, tmp_db):
        tmp_db.set_item("k", "v")
        assert tmp_db.get_item("k") == "v"

    def test_overwrite(self, tmp_db):
        tmp_db.set_item("k", "v1")
        tmp_db.set_item("k", "v2")
        assert tmp_db.get_item("k") == "v2"

    def test_remove(self, tmp_db):
        tmp_db.set_item("k", "v")
        tmp_db.remove_item("k")
        assert tmp_db.get_item("k") is None

    def test_persists_across_connections(self, tmp_path):
        db = Database(tmp_path / "state.db")
        db.set_item("k", "v")
        db.close()

        db2 = Database(tmp_path / "state.db")
        assert db2.get_item("k") == "v"
        db2.close()


class TestTheme:
    def test_default_light(self, tmp_db):
        assert tmp_db.get_theme() == "light"

    def test_set_dark(self, tmp_db):
        tmp_db.set_theme("dark")
        assert tmp_db.get_theme() == "dark"
        assert tmp_db.get_item(THEME_KEY) == "dark"

    def test_malformed_value_is_neutral(self, tmp_db):
        tmp_db.set_item(THEME_KEY, "purple")
        assert tmp_db.get_theme() == "light"

    def test_reject_unknown_theme(self, tmp_db):
        with pytest.raises(ValueError):
            tmp_db.set_theme("purple")
