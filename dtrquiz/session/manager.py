"""
Session Manager - Brings a quiz up and tears it down.

LIFECYCLE:
1. start(): load the classifier, open the frame source, present case 0.
   Either failure is fatal: the error is shown on the status sink and
   raised to the caller; the quiz stays IDLE.
2. The frame loop runs (or the caller feeds frames with step()).
3. next_case(): advance to the next case or complete the quiz.
4. restart(): stop the loop, release the source, reset to IDLE.

One quiz per manager. State is in memory only and dies with the process.
"""

from __future__ import annotations
from typing import Any, Callable
import logging

from ..catalog import CaseCatalog, create_dtr_catalog, load_catalog
from ..config import QuizConfig
from ..engine_core import QuizPhase, StabilityBuffer
from ..errors import CameraError, ClassifierLoadError
from ..vision import ClassificationAdapter, Classifier, FrameSource, StaticFrameSource
from .game_loop import FrameLoop, IntervalTicker, Ticker
from .quiz import QuizSession
from .sinks import FeedbackSink, PresentationSink

logger = logging.getLogger(__name__)

ClassifierFactory = Callable[[], Classifier]
FrameSourceFactory = Callable[[], FrameSource]


def resolve_catalog(config: QuizConfig) -> CaseCatalog:
    """Configured JSON catalog, or the built-in one."""
    if config.catalog_path:
        return load_catalog(config.catalog_path)
    return create_dtr_catalog()


def _no_classifier() -> Classifier:
    raise ClassifierLoadError("No classifier configured")


class SessionManager:
    """
    Wires catalog, buffer, session, classifier and frame loop.

    Usage:
        manager = SessionManager(
            config=QuizConfig.from_env(),
            classifier_factory=lambda: load_classifier("mymodel:predict"),
            source_factory=lambda: OpenCVFrameSource(0),
        )
        manager.start()
        manager.loop.run()
    """

    def __init__(
        self,
        config: QuizConfig | None = None,
        catalog: CaseCatalog | None = None,
        classifier_factory: ClassifierFactory | None = None,
        source_factory: FrameSourceFactory | None = None,
        presentation: PresentationSink | None = None,
        feedback: FeedbackSink | None = None,
        ticker: Ticker | None = None,
    ):
        self.config = config or QuizConfig()
        self.catalog = catalog or resolve_catalog(self.config)
        self.classifier_factory = classifier_factory or _no_classifier
        self.source_factory = source_factory or StaticFrameSource
        self.ticker = ticker or IntervalTicker(self.config.tick_interval)

        self.buffer = StabilityBuffer.from_config(self.config, self.catalog.labels)
        self.session = QuizSession(
            catalog=self.catalog,
            buffer=self.buffer,
            presentation=presentation,
            feedback=feedback,
        )

        self.classifier: Classifier | None = None
        self.source: FrameSource | None = None
        self.loop: FrameLoop | None = None

    @property
    def presentation(self) -> PresentationSink:
        return self.session.presentation

    @property
    def is_started(self) -> bool:
        return self.loop is not None

    def start(self) -> QuizSession:
        """
        Initialize classifier and camera, then present the first case.

        Raises ClassifierLoadError or CameraError; nothing is started
        in that case.
        """
        if self.is_started:
            self.restart()

        self.presentation.show_status("Loading AI model...")
        classifier = self._load_classifier()
        self.presentation.show_status("Model ready!")

        source = self._open_source()

        self.classifier = classifier
        self.source = source
        self.loop = FrameLoop(
            session=self.session,
            adapter=ClassificationAdapter(classifier),
            source=source,
            ticker=self.ticker,
        )
        self.session.start()
        self.presentation.show_status("Game started!")
        return self.session

    def next_case(self) -> QuizPhase:
        return self.session.advance()

    def restart(self) -> None:
        """Stop everything and return to IDLE."""
        if self.loop is not None:
            self.loop.stop()
        if self.source is not None:
            try:
                self.source.close()
            except Exception as e:
                logger.warning("Error closing frame source: %s", e)
        self.loop = None
        self.source = None
        self.classifier = None
        self.session.restart()

    def snapshot(self) -> dict[str, Any]:
        """Current quiz state for display."""
        data = self.session.state.to_dict()
        data["total_cases"] = self.session.total_cases
        data["started"] = self.is_started
        data["summary"] = self.session.summary.to_dict() if self.session.summary else None
        return data

    def _load_classifier(self) -> Classifier:
        try:
            classifier = self.classifier_factory()
        except ClassifierLoadError as e:
            self._fatal(f"Failed to load model: {e}")
            raise
        except Exception as e:
            self._fatal(f"Failed to load model: {e}")
            raise ClassifierLoadError(str(e)) from e

        known = set(classifier.labels())
        missing = [label for label in self.catalog.labels if known and label not in known]
        if missing:
            logger.warning("Classifier has no class for tool(s): %s", ", ".join(missing))
        return classifier

    def _open_source(self) -> FrameSource:
        try:
            source = self.source_factory()
            source.open()
        except CameraError as e:
            self._fatal(f"Camera error: {e}")
            raise
        except Exception as e:
            self._fatal(f"Camera error: {e}")
            raise CameraError(str(e)) from e
        return source

    def _fatal(self, message: str) -> None:
        logger.error("%s", message)
        self.presentation.show_status(message, is_error=True)
