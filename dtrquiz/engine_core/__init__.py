"""
Engine Core - Deterministic stabilization and scoring.

The engine is the pure part of the quiz:
1. StabilityBuffer turns per-frame detections into one answer
2. evaluate() scores that answer against the active case
3. QuizState holds the counters the session mutates
"""

from .stability import StabilityBuffer, StabilityReading
from .evaluator import (
    Outcome,
    OutcomeKind,
    evaluate,
    apply_delta,
    CORRECT_DELTA,
    HARMFUL_DELTA,
    INCORRECT_DELTA,
)
from .state import QuizPhase, QuizState, QuizSummary

__all__ = [
    "StabilityBuffer",
    "StabilityReading",
    "Outcome",
    "OutcomeKind",
    "evaluate",
    "apply_delta",
    "CORRECT_DELTA",
    "HARMFUL_DELTA",
    "INCORRECT_DELTA",
    "QuizPhase",
    "QuizState",
    "QuizSummary",
]
