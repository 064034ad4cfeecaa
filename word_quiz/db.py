from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

SCHEMA = """
CREATE TABLE IF NOT EXISTS local_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

WEAK_ITEMS_KEY = "weakWords"
THEME_KEY = "theme"
THEMES = ("light", "dark")


class Database:
    """Client-local key/value store (the app's equivalent of browser localStorage)."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self._init_schema()

    def _init_schema(self) -> None:
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    # ── Key/value ─────────────────────────────────────────────────────────

    def get_item(self, key: str) -> str | None:
        row = self.conn.execute(
            "SELECT value FROM local_store WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        self.conn.execute(
            "INSERT OR REPLACE INTO local_store (key, value, updated_at) VALUES (?, ?, ?)",
            (key, value, datetime.now(timezone.utc).isoformat()),
        )
        self.conn.commit()

    def remove_item(self, key: str) -> None:
        self.conn.execute("DELETE FROM local_store WHERE key = ?", (key,))
        self.conn.commit()

    # ── Theme ─────────────────────────────────────────────────────────────

    def get_theme(self) -> str:
        """Stored theme, or "light" when missing or unrecognised."""
        value = self.get_item(THEME_KEY)
        return value if value in THEMES else "light"

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        self.set_item(THEME_KEY, theme)
