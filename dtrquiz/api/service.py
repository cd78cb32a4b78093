"""
API Service - Business logic layer between the HTTP API and the quiz.

The service:
1. Owns the single quiz of this process (a SessionManager)
2. Feeds client-side classifier output through the frame loop
3. Serializes all quiz mutations behind one lock
4. Formats responses for the client

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging
import threading

from .schemas import (
    # Requests
    FrameRequest,
    # Responses
    CatalogResponse,
    ErrorResponse,
    FrameResponse,
    HealthResponse,
    QuizStateResponse,
    # Shared
    CaseInfo,
    FeedbackInfo,
    SummaryInfo,
    # Enums
    ErrorCode,
    OutcomeKindName,
    QuizPhaseName,
)
from .. import __version__
from ..config import QuizConfig
from ..engine_core import Outcome, QuizPhase, QuizSummary
from ..errors import StartupError
from ..session import (
    NoWaitTicker,
    RecordingFeedbackSink,
    RecordingPresentationSink,
    SessionManager,
)
from ..vision import PassthroughClassifier, StaticFrameSource

logger = logging.getLogger(__name__)


@dataclass
class QuizAPIService:
    """
    Main API service for the browser client.

    Usage:
        service = QuizAPIService()
        service.start()
        response = service.process_frame(FrameRequest(predictions=[...]))
        service.next_case()
    """
    config: QuizConfig = field(default_factory=QuizConfig)
    manager: SessionManager | None = None

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self):
        if self.manager is None:
            self.manager = SessionManager(
                config=self.config,
                classifier_factory=PassthroughClassifier,
                source_factory=StaticFrameSource,
                presentation=RecordingPresentationSink(),
                feedback=RecordingFeedbackSink(),
                ticker=NoWaitTicker(),
            )

    @property
    def presentation(self) -> RecordingPresentationSink:
        return self.manager.presentation

    def health(self) -> HealthResponse:
        return HealthResponse(status="ok", service="dtrquiz", version=__version__)

    def get_catalog(self) -> CatalogResponse:
        catalog = self.manager.catalog
        total = len(catalog)
        return CatalogResponse(
            name=catalog.name,
            tools=list(catalog.labels),
            cases=[
                CaseInfo(
                    case_id=case.id,
                    index=i,
                    total=total,
                    description=case.description,
                    image=case.image,
                )
                for i, case in enumerate(catalog)
            ],
        )

    def get_state(self) -> QuizStateResponse:
        with self._lock:
            return self._build_state()

    def start(self) -> QuizStateResponse | ErrorResponse:
        """Start (or restart) the quiz at case 0."""
        with self._lock:
            try:
                self.manager.start()
            except StartupError as e:
                return ErrorResponse(
                    error=str(e),
                    error_code=ErrorCode.STARTUP_FAILED,
                    details={"type": type(e).__name__},
                )
            return self._build_state()

    def process_frame(self, request: FrameRequest) -> FrameResponse | ErrorResponse:
        """Run one tick on the client's predictions."""
        with self._lock:
            error = self._check_playable()
            if error:
                return error

            predictions = [(p.label, p.probability) for p in request.predictions]
            result = self.manager.loop.step(frame=predictions)

            detection = result.detection
            reading = result.reading
            return FrameResponse(
                polled=result.polled,
                detected_label=detection.label if detection else None,
                confidence=detection.confidence if detection else None,
                accepted=reading.accepted if reading else False,
                progress=self.presentation.progress,
                error=result.error,
                outcome=self._convert_outcome(result.outcome),
                quiz=self._build_state(),
            )

    def next_case(self) -> QuizStateResponse | ErrorResponse:
        with self._lock:
            error = self._check_playable()
            if error:
                return error
            self.manager.next_case()
            return self._build_state()

    def restart(self) -> QuizStateResponse:
        with self._lock:
            self.manager.restart()
            self.presentation.show_status("Press start to play")
            return self._build_state()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_playable(self) -> ErrorResponse | None:
        phase = self.manager.session.phase
        if phase == QuizPhase.IDLE or not self.manager.is_started:
            return ErrorResponse(
                error="Quiz not started",
                error_code=ErrorCode.QUIZ_NOT_STARTED,
            )
        if phase == QuizPhase.COMPLETED:
            return ErrorResponse(
                error="Quiz completed; restart to play again",
                error_code=ErrorCode.QUIZ_COMPLETED,
            )
        return None

    def _build_state(self) -> QuizStateResponse:
        session = self.manager.session
        state = session.state
        sink = self.presentation

        case_info = None
        case = session.current_case
        if case is not None:
            case_info = CaseInfo(
                case_id=case.id,
                index=state.case_index,
                total=session.total_cases,
                description=case.description,
                image=case.image,
            )

        return QuizStateResponse(
            phase=QuizPhaseName(state.phase.value),
            started=self.manager.is_started,
            case=case_info,
            case_index=state.case_index,
            total_cases=session.total_cases,
            score=state.score,
            correct_count=state.correct_count,
            mistake_count=state.mistake_count,
            awaiting_answer=state.awaiting_answer,
            status=sink.status,
            status_is_error=sink.status_is_error,
            detected_tool=sink.detected_label,
            progress=sink.progress,
            feedback=self._convert_outcome(sink.feedback),
            summary=self._convert_summary(session.summary),
        )

    def _convert_outcome(self, outcome: Outcome | None) -> FeedbackInfo | None:
        if outcome is None:
            return None
        return FeedbackInfo(
            kind=OutcomeKindName(outcome.kind.value),
            message=outcome.message,
            delta=outcome.delta,
            answer=outcome.answer,
            expected_answer=outcome.expected_answer,
            reason=outcome.reason,
            correct_diagram=outcome.correct_diagram,
        )

    def _convert_summary(self, summary: QuizSummary | None) -> SummaryInfo | None:
        if summary is None:
            return None
        data: dict[str, Any] = summary.to_dict()
        return SummaryInfo(**data)
