"""
Quiz Errors - Exception hierarchy for the quiz engine.

Three families:
- Startup errors: classifier or camera could not be brought up.
  Fatal, the session never starts.
- Frame errors: a single tick failed. Recovered by the frame loop,
  which treats the tick as "no detection" and moves on.
- Load-time errors: bad configuration or a malformed catalog.
  Raised while wiring the quiz, never mid-session.
"""

from __future__ import annotations


class QuizError(Exception):
    """Base class for all quiz errors."""


class StartupError(QuizError):
    """Raised when the quiz cannot start."""


class ClassifierLoadError(StartupError):
    """The classifier model could not be loaded."""


class CameraError(StartupError):
    """The frame source could not be opened."""


class ClassificationError(QuizError):
    """A single classification call failed or returned nothing usable."""


class ConfigError(QuizError):
    """Invalid configuration value."""


class CatalogError(QuizError):
    """Raised when case catalog validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            f"Catalog validation failed with {len(errors)} error(s): "
            + "; ".join(errors)
        )


class StabilityError(QuizError):
    """More than one label satisfied the quorum at the same time."""
