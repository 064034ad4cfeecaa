"""CLI entry point for word-quiz.

Usage:
  python -m word_quiz serve [--port PORT] [--host HOST]
  python -m word_quiz stop
  python -m word_quiz restart [--port PORT]
  python -m word_quiz status
  python -m word_quiz check SOURCE
  python -m word_quiz weak [--clear]
"""
from __future__ import annotations

import asyncio
import os
import signal
import sys
from pathlib import Path

PID_FILE = Path(__file__).resolve().parent.parent / ".server.pid"


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "stop":
        _stop()
    elif command == "restart":
        _restart(args[1:])
    elif command == "status":
        _status()
    elif command == "check":
        _check(args[1:])
    elif command == "weak":
        _weak(args[1:])
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, stop, restart, status, check, weak")
        sys.exit(1)


def _flags(args: list[str]) -> dict[str, str]:
    """``--name value`` pairs from *args*; a flag without a value is ignored."""
    return {a: b for a, b in zip(args, args[1:]) if a.startswith("--") and not b.startswith("--")}


def _alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except (ProcessLookupError, PermissionError):
        return False
    return True


def _running_pid() -> int | None:
    """PID of the running server; a stale or unreadable PID file is removed."""
    try:
        pid = int(PID_FILE.read_text().strip())
    except (FileNotFoundError, ValueError):
        pid = None
    if pid is not None and _alive(pid):
        return pid
    PID_FILE.unlink(missing_ok=True)
    return None


def _stop(wait_seconds: float = 5.0) -> bool:
    """SIGTERM the server and wait for it to exit. Returns True if one was running."""
    import time

    pid = _running_pid()
    if pid is None:
        print("Server is not running.")
        return False
    try:
        os.kill(pid, signal.SIGTERM)
    except ProcessLookupError:
        pass
    deadline = time.monotonic() + wait_seconds
    while _alive(pid) and time.monotonic() < deadline:
        time.sleep(0.1)
    PID_FILE.unlink(missing_ok=True)
    if _alive(pid):
        print(f"Server (PID {pid}) did not exit within {wait_seconds:.0f}s.")
    else:
        print(f"Stopped server (PID {pid}).")
    return True


def _status():
    pid = _running_pid()
    print("Server is not running." if pid is None else f"Server is running (PID {pid}).")


def _restart(args: list[str]):
    _stop()
    _serve(args)


def _serve(args: list[str]):
    import uvicorn

    pid = _running_pid()
    if pid is not None:
        print(f"Server already running (PID {pid}). Use 'restart' or 'stop' first.")
        sys.exit(1)

    flags = _flags(args)
    host = flags.get("--host", "127.0.0.1")
    port = int(flags.get("--port", "8766"))

    PID_FILE.write_text(str(os.getpid()))
    print(f"Word Quiz listening on http://{host}:{port} (Ctrl+C to stop)")
    try:
        uvicorn.run("word_quiz.app:app", host=host, port=port, timeout_graceful_shutdown=5)
    finally:
        PID_FILE.unlink(missing_ok=True)


def _check(args: list[str]):
    """Fetch and parse one source, then report what came out of it."""
    if not args:
        print("Usage: check SOURCE")
        sys.exit(1)
    source = args[0]

    from word_quiz.app import _get_fetcher
    from word_quiz.config import load_settings
    from word_quiz.errors import QuizError
    from word_quiz.models import GrammarRecord
    from word_quiz.store import RecordStore

    settings = load_settings()
    store = RecordStore(_get_fetcher(settings), settings.source_kinds())
    try:
        records = asyncio.run(store.load(source))
    except QuizError as e:
        print(f"Error: {e}")
        sys.exit(1)

    kind = store.kind_of(source)
    print(f"{source} ({kind.value})")
    print("=" * 40)
    print(f"Records:   {len(records)}")
    if records:
        ids = [r.id for r in records]
        print(f"Id range:  {min(ids)}-{max(ids)}")
        dupes = len(ids) - len(set(ids))
        if dupes:
            print(f"Duplicate ids: {dupes}")
    grammar = [r for r in records if isinstance(r, GrammarRecord)]
    if grammar:
        for tier in ("1", "2", "3"):
            n = sum(1 for r in grammar if r.difficulty_tier == tier)
            print(f"Tier {tier}:    {n}")
        short = sum(1 for r in grammar if len(r.distractors) < 3)
        print(f"Fewer than 3 distractors: {short}")


def _weak(args: list[str]):
    from word_quiz.config import load_settings
    from word_quiz.db import Database
    from word_quiz.weak_items import WeakItemTracker

    settings = load_settings()
    db = Database(settings.db_full_path)
    tracker = WeakItemTracker(db)
    if "--clear" in args:
        n = tracker.count()
        tracker.clear()
        print(f"Cleared {n} weak items.")
    else:
        ids = tracker.ordered()
        print(f"Weak items: {len(ids)}")
        if ids:
            print(", ".join(str(i) for i in ids))
    db.close()


if __name__ == "__main__":
    main()
