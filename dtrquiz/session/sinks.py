"""
Output sinks - Where the quiz sends everything the user sees or hears.

PresentationSink receives:
- status text (optionally flagged as an error)
- the case being presented
- the currently detected tool (or None) and the stability progress
- feedback after an evaluation, and the running scores
- the final summary

FeedbackSink plays the correct / wrong cues.

Implementations here:
- LoggingPresentationSink: writes the stream to the log (CLI)
- RecordingPresentationSink: keeps the latest values and a history (API, tests)
- NullFeedbackSink / RecordingFeedbackSink
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any
import logging

from ..catalog import Case
from ..engine_core import Outcome, QuizSummary

logger = logging.getLogger(__name__)


class PresentationSink(ABC):
    """Abstract renderer for quiz output."""

    @abstractmethod
    def show_status(self, message: str, is_error: bool = False) -> None:
        pass

    @abstractmethod
    def show_case(self, case: Case, index: int, total: int) -> None:
        pass

    @abstractmethod
    def show_detection(self, label: str | None, confidence: float) -> None:
        """label is None when nothing in the alphabet is in view."""
        pass

    @abstractmethod
    def show_progress(self, progress: float) -> None:
        pass

    @abstractmethod
    def show_feedback(self, outcome: Outcome) -> None:
        pass

    @abstractmethod
    def clear_feedback(self) -> None:
        pass

    @abstractmethod
    def show_scores(self, score: int, correct: int, mistakes: int) -> None:
        pass

    @abstractmethod
    def show_summary(self, summary: QuizSummary) -> None:
        pass


class FeedbackSink(ABC):
    """Audio (or haptic) cue after an answer."""

    @abstractmethod
    def play_correct(self) -> None:
        pass

    @abstractmethod
    def play_wrong(self) -> None:
        pass


class NullFeedbackSink(FeedbackSink):
    def play_correct(self) -> None:
        pass

    def play_wrong(self) -> None:
        pass


@dataclass
class RecordingFeedbackSink(FeedbackSink):
    cues: list[str] = field(default_factory=list)

    def play_correct(self) -> None:
        self.cues.append("correct")

    def play_wrong(self) -> None:
        self.cues.append("wrong")


class LoggingPresentationSink(PresentationSink):
    """Renders the quiz to the log. Progress and detections go to DEBUG."""

    def show_status(self, message: str, is_error: bool = False) -> None:
        logger.log(logging.ERROR if is_error else logging.INFO, "%s", message)

    def show_case(self, case: Case, index: int, total: int) -> None:
        logger.info(
            "Case %d/%d [%s]: %s - present the correct tool",
            index + 1, total, case.id, case.description,
        )

    def show_detection(self, label: str | None, confidence: float) -> None:
        if label is None:
            logger.debug("Show a tool...")
        else:
            logger.debug("Tool %s (%.2f)", label, confidence)

    def show_progress(self, progress: float) -> None:
        logger.debug("Stability %.0f%%", progress * 100)

    def show_feedback(self, outcome: Outcome) -> None:
        logger.info("%s", outcome.message)

    def clear_feedback(self) -> None:
        pass

    def show_scores(self, score: int, correct: int, mistakes: int) -> None:
        logger.info("Score %d | correct %d | mistakes %d", score, correct, mistakes)

    def show_summary(self, summary: QuizSummary) -> None:
        logger.info(
            "Quiz complete! Final score %d, accuracy %d/%d (%d%%), mistakes %d",
            summary.score,
            summary.correct_count,
            summary.total_cases,
            summary.percentage,
            summary.mistake_count,
        )


@dataclass
class RecordingPresentationSink(PresentationSink):
    """
    Keeps the latest value of every output plus an event history.

    The API reads its snapshot; tests assert against history.
    """
    status: str = ""
    status_is_error: bool = False
    case: Case | None = None
    detected_label: str | None = None
    detected_confidence: float = 0.0
    progress: float = 0.0
    feedback: Outcome | None = None
    scores: tuple[int, int, int] = (0, 0, 0)
    summary: QuizSummary | None = None

    history: list[tuple[str, Any]] = field(default_factory=list)
    max_history: int = 500

    def _record(self, kind: str, value: Any) -> None:
        self.history.append((kind, value))
        if len(self.history) > self.max_history:
            del self.history[: len(self.history) - self.max_history]

    def show_status(self, message: str, is_error: bool = False) -> None:
        self.status = message
        self.status_is_error = is_error
        self._record("status", message)

    def show_case(self, case: Case, index: int, total: int) -> None:
        self.case = case
        self.summary = None
        self._record("case", index)

    def show_detection(self, label: str | None, confidence: float) -> None:
        self.detected_label = label
        self.detected_confidence = confidence

    def show_progress(self, progress: float) -> None:
        self.progress = progress

    def show_feedback(self, outcome: Outcome) -> None:
        self.feedback = outcome
        self._record("feedback", outcome)

    def clear_feedback(self) -> None:
        self.feedback = None

    def show_scores(self, score: int, correct: int, mistakes: int) -> None:
        self.scores = (score, correct, mistakes)
        self._record("scores", self.scores)

    def show_summary(self, summary: QuizSummary) -> None:
        self.summary = summary
        self.case = None
        self._record("summary", summary)

    def events(self, kind: str) -> list[Any]:
        return [value for k, value in self.history if k == kind]
