"""Error taxonomy for the quiz engine.

Malformed content lines are not errors: the parser skips them.
"""
from __future__ import annotations


class QuizError(Exception):
    """Base class for user-facing quiz failures."""


class FetchFailure(QuizError):
    """Content could not be read (network error, non-2xx response, missing file)."""


class EmptyFilterResult(QuizError):
    """The active filters left nothing to quiz on."""


class NoWeakItems(EmptyFilterResult):
    pass


class InvalidTransition(QuizError):
    pass


class ActionInProgress(QuizError):
    """A start or refresh is already waiting on a fetch."""


class UnknownSource(QuizError):
    pass
