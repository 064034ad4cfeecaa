"""Quiz session state machine: present, grade, advance, complete."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from word_quiz.choices import display_text, generate_choices
from word_quiz.errors import InvalidTransition
from word_quiz.models import MissedItem, RecordKind, SessionResult
from word_quiz.timer import DEFAULT_TICK_SECONDS, QuestionTimer

if TYPE_CHECKING:
    from word_quiz.models import ChoiceOption, Record, Session
    from word_quiz.weak_items import WeakItemTracker

_log = logging.getLogger("word_quiz.session")

# Selection index used when the per-question timer runs out
TIMEOUT = -1


class QuizState(str, Enum):
    AWAITING_START = "awaiting_start"
    PRESENTING = "presenting"
    GRADED = "graded"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


@dataclass
class GradeResult:
    correct: bool
    selected_index: int
    correct_index: int

    @property
    def timed_out(self) -> bool:
        return self.selected_index == TIMEOUT

    def to_dict(self) -> dict:
        return {
            "correct": self.correct,
            "selected_index": self.selected_index,
            "correct_index": self.correct_index,
            "timed_out": self.timed_out,
        }


class QuizSession:
    """Drives one Session from its first question to the result summary.

    ``records`` is the full record list of the source; vocabulary questions
    draw their distractors from it.
    """

    def __init__(
        self,
        session: Session,
        records: list[Record],
        weak_items: WeakItemTracker | None = None,
        time_limit_seconds: float = 0,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        rng: random.Random | None = None,
    ):
        self.session = session
        self.records = records
        self.weak_items = weak_items
        self.time_limit_seconds = time_limit_seconds
        self.tick_seconds = tick_seconds
        self.rng = rng or random.Random()
        self.state = QuizState.AWAITING_START
        self.choices: list[ChoiceOption] = []
        self.last_grade: GradeResult | None = None
        self.result: SessionResult | None = None
        self._timer: QuestionTimer | None = None

    # ── Transitions ───────────────────────────────────────────────────────

    def start(self) -> None:
        self._require(QuizState.AWAITING_START, "start")
        self.session.current_index = 0
        _log.info("Session started: %d %s items", len(self.session.items), self.session.kind.value)
        self._present()

    def submit_answer(self, selected_index: int) -> GradeResult | None:
        """Grade the current question.

        Returns None when the question was already graded (a late timeout or
        a double click). Any index that matches no option counts as wrong.
        """
        if self.state == QuizState.GRADED:
            return None
        self._require(QuizState.PRESENTING, "submit_answer")
        self._stop_timer()

        item = self.session.current_item
        correct_index = self.correct_index()
        is_correct = 0 <= selected_index < len(self.choices) and self.choices[selected_index].is_correct

        idx = self.session.current_index
        if is_correct:
            self.session.score += 1
        else:
            correct_text = self.choices[correct_index].display_text if correct_index >= 0 else display_text(item)
            self.session.missed.append(MissedItem(item.prompt_text, correct_text))
            if self.session.kind == RecordKind.VOCABULARY and self.weak_items is not None:
                self.weak_items.add(item.id)
        self.session.outcomes[idx] = is_correct

        self.state = QuizState.GRADED
        self.last_grade = GradeResult(is_correct, selected_index, correct_index)
        _log.debug(
            "Q%d graded: %s (selected %d)",
            idx + 1, "correct" if is_correct else "wrong", selected_index,
        )
        return self.last_grade

    def advance(self) -> SessionResult | None:
        """Move to the next question; returns the result once the last is done."""
        self._require(QuizState.GRADED, "advance")
        self._stop_timer()
        if self.session.current_index + 1 < len(self.session.items):
            self.session.current_index += 1
            self._present()
            return None

        self.state = QuizState.COMPLETED
        self.choices = []
        self.result = SessionResult(
            score=self.session.score,
            total=len(self.session.items),
            missed=list(self.session.missed),
        )
        _log.info(
            "Session complete: %d/%d%s",
            self.result.score, self.result.total, " (flawless)" if self.result.flawless else "",
        )
        return self.result

    def abandon(self) -> None:
        self._stop_timer()
        if self.state in (QuizState.COMPLETED, QuizState.ABANDONED):
            return
        _log.info("Session abandoned at Q%d", self.session.current_index + 1)
        self.state = QuizState.ABANDONED

    # ── Queries ───────────────────────────────────────────────────────────

    @property
    def finished(self) -> bool:
        return self.state in (QuizState.COMPLETED, QuizState.ABANDONED)

    def correct_index(self) -> int:
        for i, c in enumerate(self.choices):
            if c.is_correct:
                return i
        return -1

    def timer_fraction(self) -> float:
        return self._timer.fraction_remaining() if self._timer else 1.0

    def view(self) -> dict:
        """Everything the presentation layer needs for the current state."""
        s = self.session
        data: dict = {
            "state": self.state.value,
            "kind": s.kind.value,
            "progress": {
                "current": min(s.current_index + 1, len(s.items)),
                "total": len(s.items),
                "score": s.score,
                "outcomes": list(s.outcomes),
            },
        }
        if self.state in (QuizState.PRESENTING, QuizState.GRADED):
            data["prompt"] = s.current_item.prompt_text
            data["choices"] = [c.display_text for c in self.choices]
            data["time_limit"] = self.time_limit_seconds
            data["timer_fraction"] = self.timer_fraction()
        if self.state == QuizState.GRADED and self.last_grade is not None:
            data["grade"] = self.last_grade.to_dict()
            explanation = getattr(s.current_item, "explanation", "")
            if explanation:
                data["explanation"] = explanation
        if self.result is not None:
            data["result"] = self.result.to_dict()
        return data

    # ── Internals ─────────────────────────────────────────────────────────

    def _require(self, state: QuizState, action: str) -> None:
        if self.state != state:
            raise InvalidTransition(f"Cannot {action} while {self.state.value}")

    def _present(self) -> None:
        item = self.session.current_item
        self.choices = generate_choices(item, self.records, self.rng)
        self.last_grade = None
        self.state = QuizState.PRESENTING
        if self.time_limit_seconds > 0:
            index = self.session.current_index
            self._timer = QuestionTimer(
                self.time_limit_seconds,
                lambda: self._on_timeout(index),
                tick_seconds=self.tick_seconds,
            )
            self._timer.start()
        else:
            self._timer = None

    def _on_timeout(self, index: int) -> None:
        if self.state != QuizState.PRESENTING or self.session.current_index != index:
            return
        _log.debug("Q%d timed out", index + 1)
        self.submit_answer(TIMEOUT)

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
