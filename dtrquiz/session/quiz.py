"""
Quiz Session - The scoring state machine.

    IDLE --start()--> AWAITING_ANSWER(0)
    AWAITING_ANSWER(i) --on_stable_detection()--> EVALUATED(i)
    EVALUATED(i) / AWAITING_ANSWER(i) --advance()--> AWAITING_ANSWER(i+1)
    ... --advance() on the last case--> COMPLETED (terminal)
    any --restart()--> IDLE

Evaluation is one-shot per case: once awaiting_answer drops, further
stable detections are ignored until the next case is presented.
advance() while still awaiting skips the case unanswered.
"""

from __future__ import annotations
import logging

from ..catalog import Case, CaseCatalog
from ..engine_core import (
    Outcome,
    QuizPhase,
    QuizState,
    QuizSummary,
    StabilityBuffer,
    apply_delta,
    evaluate,
)
from .sinks import FeedbackSink, NullFeedbackSink, PresentationSink, RecordingPresentationSink

logger = logging.getLogger(__name__)


class QuizSession:
    """
    Owns the quiz state and the stability buffer it gates.

    Usage:
        session = QuizSession(catalog, buffer, presentation=sink)
        session.start()
        ...
        outcome = session.on_stable_detection("7-8")
        session.advance()
    """

    def __init__(
        self,
        catalog: CaseCatalog,
        buffer: StabilityBuffer,
        presentation: PresentationSink | None = None,
        feedback: FeedbackSink | None = None,
    ):
        self.catalog = catalog
        self.buffer = buffer
        self.presentation = presentation or RecordingPresentationSink()
        self.feedback = feedback or NullFeedbackSink()
        self.state = QuizState()
        self.summary: QuizSummary | None = None

    @property
    def phase(self) -> QuizPhase:
        return self.state.phase

    @property
    def total_cases(self) -> int:
        return len(self.catalog)

    @property
    def current_case(self) -> Case | None:
        if self.state.phase in (QuizPhase.IDLE, QuizPhase.COMPLETED):
            return None
        return self.catalog[self.state.case_index]

    def is_awaiting_answer(self) -> bool:
        return self.state.awaiting_answer

    def is_finished(self) -> bool:
        return self.state.phase == QuizPhase.COMPLETED

    def start(self) -> None:
        """Reset scores and present the first case."""
        self.state.reset()
        self.summary = None
        logger.info("Quiz started: %d case(s) from '%s'", self.total_cases, self.catalog.name)
        self.presentation.show_scores(0, 0, 0)
        self.present_case(0)

    def present_case(self, index: int) -> bool:
        """
        Make case `index` the active one and start awaiting an answer.

        Returns False (and changes nothing) once the quiz is completed.
        """
        if self.state.phase == QuizPhase.COMPLETED:
            logger.warning("present_case(%d) ignored: quiz completed", index)
            return False
        if not 0 <= index < self.total_cases:
            raise IndexError(f"Case index {index} out of range 0..{self.total_cases - 1}")

        case = self.catalog[index]
        self.state.case_index = index
        self.state.awaiting_answer = True
        self.state.last_outcome = None
        self.state.phase = QuizPhase.AWAITING_ANSWER
        self.buffer.clear()

        self.presentation.clear_feedback()
        self.presentation.show_progress(0.0)
        self.presentation.show_case(case, index, self.total_cases)
        logger.info("Presenting case %d/%d (%s)", index + 1, self.total_cases, case.id)
        return True

    def on_stable_detection(self, label: str) -> Outcome | None:
        """
        Score a stabilized answer for the active case.

        Returns the Outcome, or None when no answer is awaited.
        """
        if not self.state.awaiting_answer:
            logger.debug("Stable detection %s ignored in phase %s", label, self.state.phase.value)
            return None

        self.state.awaiting_answer = False
        self.buffer.clear()
        self.presentation.show_progress(0.0)

        case = self.catalog[self.state.case_index]
        outcome = evaluate(case, label, self.catalog.harmful_lookup(case.id, label))

        self.state.score = apply_delta(self.state.score, outcome.delta)
        if outcome.is_correct:
            self.state.correct_count += 1
        else:
            self.state.mistake_count += 1
        self.state.last_outcome = outcome
        self.state.phase = QuizPhase.EVALUATED

        logger.info(
            "Case %s answered %s: %s (%+d) score=%d",
            case.id, label, outcome.kind.value, outcome.delta, self.state.score,
        )

        self.presentation.show_feedback(outcome)
        if outcome.is_correct:
            self.feedback.play_correct()
        else:
            self.feedback.play_wrong()
        self.presentation.show_scores(
            self.state.score, self.state.correct_count, self.state.mistake_count
        )
        return outcome

    def advance(self) -> QuizPhase:
        """Present the next case, or complete the quiz after the last one."""
        if self.state.phase in (QuizPhase.IDLE, QuizPhase.COMPLETED):
            logger.debug("advance() ignored in phase %s", self.state.phase.value)
            return self.state.phase

        next_index = self.state.case_index + 1
        if next_index < self.total_cases:
            self.present_case(next_index)
        else:
            self._complete()
        return self.state.phase

    def restart(self) -> None:
        """Drop all progress and return to IDLE."""
        self.state.reset()
        self.summary = None
        self.buffer.clear()
        self.presentation.clear_feedback()
        self.presentation.show_progress(0.0)
        self.presentation.show_scores(0, 0, 0)
        logger.info("Quiz reset")

    def _complete(self) -> None:
        self.state.awaiting_answer = False
        self.state.phase = QuizPhase.COMPLETED
        self.buffer.clear()

        self.summary = QuizSummary(
            score=self.state.score,
            correct_count=self.state.correct_count,
            mistake_count=self.state.mistake_count,
            total_cases=self.total_cases,
        )
        logger.info(
            "Quiz complete: score=%d correct=%d/%d (%d%%) mistakes=%d",
            self.summary.score,
            self.summary.correct_count,
            self.summary.total_cases,
            self.summary.percentage,
            self.summary.mistake_count,
        )
        self.presentation.clear_feedback()
        self.presentation.show_progress(0.0)
        self.presentation.show_summary(self.summary)
