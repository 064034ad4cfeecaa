from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from word_quiz.models import RecordKind

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "content_base_url": "",
    "data_dir": "data",
    "vocab_sources": ["words.csv"],
    "grammar_sources": ["grammar.csv"],
    "session_size": 20,
    "time_limit_seconds": 0,
    "timer_tick_seconds": 0.05,
    "refresh_timeout_seconds": 5.0,
    "fetch_timeout_seconds": 10.0,
    "db_path": "quiz_state.db",
    "access_password": "",
}

PASSWORD_MASK = "********"

# Settings that decide how content is fetched; changing one needs a new fetcher
FETCH_KEYS = ("content_base_url", "data_dir", "fetch_timeout_seconds")

_STR_KEYS = ("content_base_url", "data_dir", "db_path", "access_password")
_LIST_KEYS = ("vocab_sources", "grammar_sources")
_FLOAT_KEYS = (
    "time_limit_seconds",
    "timer_tick_seconds",
    "refresh_timeout_seconds",
    "fetch_timeout_seconds",
)


@dataclass
class Settings:
    content_base_url: str = DEFAULTS["content_base_url"]
    data_dir: str = DEFAULTS["data_dir"]
    vocab_sources: list[str] = field(default_factory=lambda: list(DEFAULTS["vocab_sources"]))
    grammar_sources: list[str] = field(default_factory=lambda: list(DEFAULTS["grammar_sources"]))
    session_size: int = DEFAULTS["session_size"]
    time_limit_seconds: float = DEFAULTS["time_limit_seconds"]
    timer_tick_seconds: float = DEFAULTS["timer_tick_seconds"]
    refresh_timeout_seconds: float = DEFAULTS["refresh_timeout_seconds"]
    fetch_timeout_seconds: float = DEFAULTS["fetch_timeout_seconds"]
    db_path: str = DEFAULTS["db_path"]
    access_password: str = DEFAULTS["access_password"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def data_full_path(self) -> Path:
        return self.project_root / self.data_dir

    @property
    def db_full_path(self) -> Path:
        return self.project_root / self.db_path

    def source_kinds(self) -> dict[str, RecordKind]:
        kinds = {name: RecordKind.VOCABULARY for name in self.vocab_sources}
        kinds.update({name: RecordKind.GRAMMAR for name in self.grammar_sources})
        return kinds

    def to_dict(self) -> dict:
        return {
            "content_base_url": self.content_base_url,
            "data_dir": self.data_dir,
            "vocab_sources": self.vocab_sources,
            "grammar_sources": self.grammar_sources,
            "session_size": self.session_size,
            "time_limit_seconds": self.time_limit_seconds,
            "timer_tick_seconds": self.timer_tick_seconds,
            "refresh_timeout_seconds": self.refresh_timeout_seconds,
            "fetch_timeout_seconds": self.fetch_timeout_seconds,
            "db_path": self.db_path,
            "access_password": self.access_password,
        }

    def public_dict(self) -> dict:
        """Like to_dict(), with the gate password masked."""
        d = self.to_dict()
        if d["access_password"]:
            d["access_password"] = PASSWORD_MASK
        return d


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")


def _number(key: str, value, kind: type):
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number")
    try:
        n = kind(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a number") from None
    if kind is int and isinstance(value, float) and value != n:
        raise ValueError(f"{key} must be a whole number")
    if n < 0:
        raise ValueError(f"{key} must not be negative")
    return n


def coerce_settings(updates: dict) -> dict:
    """Validate a partial settings update against the Settings field types.

    Unknown keys are dropped. Numeric strings are converted. Raises
    ValueError on the first value that does not fit, so callers can reject
    the whole update.
    """
    clean = {}
    for key, value in updates.items():
        if key == "session_size":
            clean[key] = _number(key, value, int)
        elif key in _FLOAT_KEYS:
            clean[key] = _number(key, value, float)
        elif key in _STR_KEYS:
            if not isinstance(value, str):
                raise ValueError(f"{key} must be a string")
            clean[key] = value
        elif key in _LIST_KEYS:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"{key} must be a list of strings")
            clean[key] = list(value)
    if clean.get("timer_tick_seconds") == 0:
        raise ValueError("timer_tick_seconds must be positive")
    return clean
