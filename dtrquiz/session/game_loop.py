"""
Frame Loop - The per-tick polling loop.

Each tick:
1. Pull a frame from the source
2. Classify it (argmax label + confidence)
3. Show the detected tool and feed the stability buffer
4. On stabilization, hand the label to the quiz session

A tick that fails (frame grab or classifier error) is treated as no
detection: it is logged, the buffer is left as it was, and the loop
carries on at the next tick. Ticks never overlap; stop() takes effect
at the next tick boundary.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable
import logging
import time

from ..config import DEFAULT_TICK_INTERVAL
from ..engine_core import Outcome, QuizPhase, StabilityReading
from ..vision import ClassificationAdapter, Detection, FrameSource
from .quiz import QuizSession

logger = logging.getLogger(__name__)


class Ticker(ABC):
    """Paces the loop between ticks."""

    @abstractmethod
    def wait(self) -> None:
        pass


class IntervalTicker(Ticker):
    """Sleeps a fixed interval after every tick."""

    def __init__(
        self,
        interval: float = DEFAULT_TICK_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.interval = interval
        self._sleep = sleep

    def wait(self) -> None:
        if self.interval > 0:
            self._sleep(self.interval)


class NoWaitTicker(Ticker):
    """Runs ticks back to back; counts waits."""

    def __init__(self):
        self.waits = 0

    def wait(self) -> None:
        self.waits += 1


@dataclass
class TickResult:
    """What happened during one tick."""
    phase: QuizPhase
    polled: bool = False
    detection: Detection | None = None
    reading: StabilityReading | None = None
    outcome: Outcome | None = None
    error: str | None = None


class FrameLoop:
    """
    Drives classification -> stabilization -> evaluation.

    Usage:
        loop = FrameLoop(session, ClassificationAdapter(classifier), source)
        loop.run()           # until completed or stop()

        # or one tick at a time, e.g. with client-side predictions
        result = loop.step(frame=predictions)
    """

    def __init__(
        self,
        session: QuizSession,
        adapter: ClassificationAdapter,
        source: FrameSource | None = None,
        ticker: Ticker | None = None,
    ):
        self.session = session
        self.adapter = adapter
        self.source = source
        self.ticker = ticker or IntervalTicker()
        self.running = False
        self.ticks = 0

    def should_poll(self) -> bool:
        """Only a started, unfinished quiz consumes frames."""
        return self.session.phase in (QuizPhase.AWAITING_ANSWER, QuizPhase.EVALUATED)

    def step(self, frame: Any = None) -> TickResult:
        """
        Run one tick. If no frame is given it is read from the source.
        """
        self.ticks += 1
        if not self.should_poll():
            return TickResult(phase=self.session.phase)

        try:
            if frame is None and self.source is not None:
                frame = self.source.read()
            detection = self.adapter.classify(frame)
        except Exception as e:
            logger.warning("Frame %d skipped: %s: %s", self.ticks, type(e).__name__, e)
            return TickResult(
                phase=self.session.phase,
                polled=True,
                error=f"{type(e).__name__}: {e}",
            )

        return self._process_detection(detection)

    def _process_detection(self, detection: Detection) -> TickResult:
        session = self.session
        buffer = session.buffer
        presentation = session.presentation

        in_alphabet = session.catalog.is_label(detection.label)
        presentation.show_detection(
            detection.label if in_alphabet else None, detection.confidence
        )
        logger.debug("Detected %s (%.2f)", detection.label, detection.confidence)

        reading = buffer.observe(
            detection.label, detection.confidence, session.is_awaiting_answer()
        )
        presentation.show_progress(reading.progress)

        outcome = None
        if reading.stable_label is not None:
            outcome = session.on_stable_detection(reading.stable_label)

        return TickResult(
            phase=session.phase,
            polled=True,
            detection=detection,
            reading=reading,
            outcome=outcome,
        )

    def run(
        self,
        max_ticks: int | None = None,
        on_tick: Callable[[TickResult], None] | None = None,
    ) -> int:
        """
        Poll until stop(), quiz completion/reset, or max_ticks.

        on_tick is called after every tick; it may call session.advance()
        or stop().

        Returns the number of ticks run.
        """
        self.running = True
        count = 0
        try:
            while self.running and self.should_poll():
                if max_ticks is not None and count >= max_ticks:
                    break
                result = self.step()
                count += 1
                if on_tick is not None:
                    on_tick(result)
                if not self.running or not self.should_poll():
                    break
                self.ticker.wait()
        finally:
            self.running = False
        logger.info("Frame loop stopped after %d tick(s) in phase %s", count, self.session.phase.value)
        return count

    def stop(self) -> None:
        """Ask the loop to exit at the next tick boundary."""
        self.running = False
