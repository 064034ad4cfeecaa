"""FastAPI application with all routes."""
from __future__ import annotations

import logging

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from word_quiz.config import (
    FETCH_KEYS,
    PASSWORD_MASK,
    Settings,
    coerce_settings,
    load_settings,
    save_settings,
)
from word_quiz.controller import QuizController
from word_quiz.db import Database
from word_quiz.errors import (
    ActionInProgress,
    EmptyFilterResult,
    FetchFailure,
    InvalidTransition,
    QuizError,
    UnknownSource,
)
from word_quiz.session_builder import as_float, as_int, make_filters
from word_quiz.store import RecordStore
from word_quiz.weak_items import WeakItemTracker

app = FastAPI(title="Word Quiz")

# Global state (initialized in startup)
_db: Database | None = None
_settings: Settings | None = None
_controller: QuizController | None = None

_log = logging.getLogger("word_quiz.app")

ERROR_STATUS = {
    UnknownSource: 404,
    ActionInProgress: 409,
    InvalidTransition: 409,
    EmptyFilterResult: 422,
    FetchFailure: 502,
}


def get_db() -> Database:
    assert _db is not None
    return _db


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def get_controller() -> QuizController:
    assert _controller is not None
    return _controller


def _get_fetcher(s: Settings):
    if s.content_base_url:
        from word_quiz.fetchers.http_fetcher import HttpFetcher
        return HttpFetcher(s.content_base_url, timeout=s.fetch_timeout_seconds)
    from word_quiz.fetchers.file_fetcher import FileFetcher
    return FileFetcher(s.data_full_path)


def build_controller(db: Database, settings: Settings, fetcher=None) -> QuizController:
    store = RecordStore(fetcher or _get_fetcher(settings), settings.source_kinds())
    return QuizController(
        store,
        WeakItemTracker(db),
        time_limit_seconds=settings.time_limit_seconds,
        tick_seconds=settings.timer_tick_seconds,
        refresh_timeout_seconds=settings.refresh_timeout_seconds,
    )


@app.on_event("startup")
async def startup():
    global _db, _settings, _controller
    if _db is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _db = Database(_settings.db_full_path)
    _controller = build_controller(_db, _settings)
    _log.info("Serving %d content sources", len(_settings.source_kinds()))


@app.on_event("shutdown")
async def shutdown():
    if _controller:
        _controller.abandon()
    if _db:
        _db.close()


@app.exception_handler(QuizError)
async def quiz_error_handler(request: Request, exc: QuizError):
    status = next((code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 400)
    return JSONResponse({"error": str(exc), "type": type(exc).__name__}, status_code=status)


async def _body(request: Request) -> dict:
    return await request.json() if await request.body() else {}


# ── API: Gate ─────────────────────────────────────────────────────────────

@app.post("/api/gate")
async def api_gate(request: Request):
    body = await _body(request)
    password = get_settings().access_password
    ok = not password or body.get("password", "") == password
    if not ok:
        raise HTTPException(403, "Wrong password")
    return {"ok": True}


# ── API: Content ──────────────────────────────────────────────────────────

@app.get("/api/sources")
async def api_sources():
    store = get_controller().store
    return {
        "sources": [
            {"id": name, "kind": kind.value, "cached": store.cached(name) is not None}
            for name, kind in store.source_kinds.items()
        ]
    }


@app.post("/api/content/refresh")
async def api_content_refresh(request: Request):
    body = await _body(request)
    source = body.get("source", "")
    records = await get_controller().refresh(source)
    return {"source": source, "count": len(records)}


# ── API: Session ──────────────────────────────────────────────────────────

@app.post("/api/session/start")
async def api_session_start(request: Request):
    body = await _body(request)
    controller = get_controller()
    s = get_settings()

    filters = make_filters(
        weak_only=body.get("weak_only", False),
        range_start=body.get("range_start"),
        range_end=body.get("range_end"),
        difficulty=body.get("difficulty"),
        count=body.get("count", s.session_size),
    )
    quiz = await controller.start_session(
        body.get("source", ""),
        filters,
        time_limit_seconds=as_float(body.get("time_limit")),
    )
    if quiz is None:
        return {"state": "idle", "error": "Session start was cancelled."}
    return controller.view()


@app.get("/api/session")
async def api_session():
    return get_controller().view()


@app.post("/api/session/answer")
async def api_session_answer(request: Request):
    body = await _body(request)
    selected = as_int(body.get("selected_index"))
    if selected is None:
        raise HTTPException(400, "selected_index must be an integer")
    controller = get_controller()
    grade = controller.submit_answer(selected)
    data = controller.view()
    data["already_graded"] = grade is None
    return data


@app.post("/api/session/next")
async def api_session_next():
    controller = get_controller()
    controller.advance()
    return controller.view()


@app.post("/api/session/abandon")
async def api_session_abandon():
    get_controller().abandon()
    return {"state": "idle"}


# ── API: Weak items ───────────────────────────────────────────────────────

@app.get("/api/weak")
async def api_weak(source: str = ""):
    controller = get_controller()
    data: dict = {"count": controller.weak_items.count()}
    if source:
        data["items"] = await controller.weak_list(source)
    return data


@app.delete("/api/weak/{record_id}")
async def api_weak_remove(record_id: int):
    controller = get_controller()
    removed = controller.remove_weak(record_id)
    return {"removed": removed, "count": controller.weak_items.count()}


@app.post("/api/weak/clear")
async def api_weak_clear(request: Request):
    body = await _body(request)
    controller = get_controller()
    controller.clear_weak(body.get("confirm") is True)
    return {"count": 0}


# ── API: Theme ────────────────────────────────────────────────────────────

@app.get("/api/theme")
async def api_get_theme():
    return {"theme": get_db().get_theme()}


@app.put("/api/theme")
async def api_put_theme(request: Request):
    body = await _body(request)
    try:
        get_db().set_theme(body.get("theme", ""))
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"theme": get_db().get_theme()}


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().public_dict()


def _apply_to_controller(s: Settings, changed: set[str]) -> None:
    controller = get_controller()
    controller.time_limit_seconds = s.time_limit_seconds
    controller.tick_seconds = s.timer_tick_seconds
    controller.refresh_timeout_seconds = s.refresh_timeout_seconds
    controller.store.source_kinds = s.source_kinds()
    if changed.intersection(FETCH_KEYS):
        controller.store.set_fetcher(_get_fetcher(s))


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await request.json()
    if not isinstance(body, dict):
        raise HTTPException(400, "Settings must be a JSON object")
    # A masked password echoed back from GET leaves the real one alone
    if body.get("access_password") == PASSWORD_MASK:
        body.pop("access_password")
    try:
        updates = coerce_settings(body)
    except ValueError as e:
        raise HTTPException(400, str(e))

    s = get_settings()
    changed = {k for k, v in updates.items() if getattr(s, k) != v}
    for k, v in updates.items():
        setattr(s, k, v)
    save_settings(s)
    _apply_to_controller(s, changed)
    if changed:
        _log.info("Settings updated: %s", ", ".join(sorted(changed)))
    return s.public_dict()
