"""
Stability Buffer - Debounces noisy per-frame detections.

A label only becomes the user's answer once it dominates a sliding
window of recent accepted detections:

    frame -> accept(label, confidence, awaiting) -> window (FIFO, capacity N)
          -> is_stable() when one label holds ceil(N * Q) slots

The window is emptied:
- whenever the session is not awaiting an answer
- when an awaited frame fails the acceptance predicate (detection lost)
- after a stable result is consumed (the state machine calls clear())
"""

from __future__ import annotations
from collections import Counter, deque
from dataclasses import dataclass
from typing import Iterable
import math

from ..config import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_QUORUM_FRACTION,
    QuizConfig,
)
from ..errors import ConfigError, StabilityError


@dataclass(frozen=True)
class StabilityReading:
    """What the buffer concluded from one frame."""
    accepted: bool
    stable_label: str | None
    progress: float


class StabilityBuffer:
    """
    Fixed-capacity sliding window over accepted labels.

    Usage:
        buffer = StabilityBuffer(alphabet=["1-2", "7-8"])
        reading = buffer.observe("7-8", 0.93, awaiting_answer=True)
        if reading.stable_label:
            ...
    """

    def __init__(
        self,
        alphabet: Iterable[str],
        capacity: int = DEFAULT_BUFFER_SIZE,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        quorum_fraction: float = DEFAULT_QUORUM_FRACTION,
    ):
        self.alphabet = frozenset(alphabet)
        if not self.alphabet:
            raise ConfigError("Label alphabet must not be empty")
        if capacity < 1:
            raise ConfigError(f"capacity must be >= 1, got {capacity}")
        if not 0.0 <= confidence_threshold <= 1.0:
            raise ConfigError(
                f"confidence_threshold must be in [0, 1], got {confidence_threshold}"
            )
        if not 0.5 < quorum_fraction <= 1.0:
            raise ConfigError(f"quorum_fraction must be in (0.5, 1], got {quorum_fraction}")

        self.capacity = capacity
        self.confidence_threshold = confidence_threshold
        self.quorum_fraction = quorum_fraction
        # round() strips float noise such as 10 * 0.7 == 7.000000000000001
        self.quorum = math.ceil(round(capacity * quorum_fraction, 9))
        self._window: deque[str] = deque()

    @classmethod
    def from_config(cls, config: QuizConfig, alphabet: Iterable[str]) -> StabilityBuffer:
        return cls(
            alphabet=alphabet,
            capacity=config.buffer_size,
            confidence_threshold=config.confidence_threshold,
            quorum_fraction=config.quorum_fraction,
        )

    def __len__(self) -> int:
        return len(self._window)

    @property
    def window(self) -> tuple[str, ...]:
        """Snapshot of the window, oldest first."""
        return tuple(self._window)

    def is_eligible(self, label: str | None, confidence: float) -> bool:
        """Acceptance predicate, ignoring the awaiting flag."""
        return (
            label is not None
            and label in self.alphabet
            and confidence >= self.confidence_threshold
        )

    def accept(self, label: str | None, confidence: float, awaiting_answer: bool) -> bool:
        """
        Offer one detection to the window.

        Returns True if the label was pushed. A rejected detection clears
        the window (not awaiting, or detection lost while filling).
        """
        if not awaiting_answer:
            self.clear()
            return False

        if not self.is_eligible(label, confidence):
            if self._window:
                self.clear()
            return False

        self._window.append(label)
        if len(self._window) > self.capacity:
            self._window.popleft()
        return True

    def is_stable(self) -> str | None:
        """Return the label holding the quorum, or None."""
        counts = Counter(self._window)
        winners = [label for label, count in counts.items() if count >= self.quorum]
        if len(winners) > 1:
            raise StabilityError(f"Multiple labels reached quorum: {sorted(winners)}")
        return winners[0] if winners else None

    def progress(self) -> float:
        """Fill fraction in [0, 1] for the stability indicator."""
        if self.is_stable() is not None:
            return 1.0
        return min(1.0, len(self._window) / self.capacity)

    def observe(self, label: str | None, confidence: float, awaiting_answer: bool) -> StabilityReading:
        """accept() then report stability and progress for this frame."""
        accepted = self.accept(label, confidence, awaiting_answer)
        stable = self.is_stable() if accepted else None
        progress = 1.0 if stable is not None else self.progress()
        return StabilityReading(accepted=accepted, stable_label=stable, progress=progress)

    def clear(self) -> None:
        self._window.clear()
