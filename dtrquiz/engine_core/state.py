"""
Quiz State - The single mutable record of a quiz run.

Only the state machine (session.quiz.QuizSession) writes to QuizState.
Everything else reads snapshots via to_dict().
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any
import math

from .evaluator import Outcome


class QuizPhase(Enum):
    """Phase of the quiz state machine."""
    IDLE = "idle"  # Not started, or restarted
    AWAITING_ANSWER = "awaiting_answer"  # Case presented, buffer filling
    EVALUATED = "evaluated"  # Answer scored, waiting for next()
    COMPLETED = "completed"  # Terminal


@dataclass
class QuizState:
    """Counters and flags for the current run."""
    phase: QuizPhase = QuizPhase.IDLE
    case_index: int = 0
    score: int = 0
    correct_count: int = 0
    mistake_count: int = 0
    awaiting_answer: bool = False
    last_outcome: Outcome | None = None

    @property
    def answered(self) -> int:
        return self.correct_count + self.mistake_count

    def reset(self) -> None:
        """Back to a fresh IDLE state."""
        self.phase = QuizPhase.IDLE
        self.case_index = 0
        self.score = 0
        self.correct_count = 0
        self.mistake_count = 0
        self.awaiting_answer = False
        self.last_outcome = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "case_index": self.case_index,
            "score": self.score,
            "correct_count": self.correct_count,
            "mistake_count": self.mistake_count,
            "awaiting_answer": self.awaiting_answer,
            "answered": self.answered,
            "last_outcome": self.last_outcome.to_dict() if self.last_outcome else None,
        }


@dataclass(frozen=True)
class QuizSummary:
    """Final results shown when the quiz completes."""
    score: int
    correct_count: int
    mistake_count: int
    total_cases: int

    @property
    def accuracy(self) -> float:
        if self.total_cases == 0:
            return 0.0
        return self.correct_count / self.total_cases

    @property
    def percentage(self) -> int:
        """Accuracy as a whole percent, halves rounded up."""
        return math.floor(self.accuracy * 100 + 0.5)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "correct_count": self.correct_count,
            "mistake_count": self.mistake_count,
            "total_cases": self.total_cases,
            "accuracy": self.accuracy,
            "percentage": self.percentage,
        }
