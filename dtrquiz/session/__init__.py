"""
Session Module - Runs one quiz.

A session is one play-through of the catalog:
- Created when the user presses start
- Holds score, counters and the active case
- Consumes frames through the frame loop
- Reset on restart

Sessions are EPHEMERAL: nothing is persisted.
"""

from .quiz import QuizSession
from .game_loop import FrameLoop, TickResult, Ticker, IntervalTicker, NoWaitTicker
from .manager import SessionManager, resolve_catalog
from .sinks import (
    PresentationSink,
    FeedbackSink,
    LoggingPresentationSink,
    RecordingPresentationSink,
    NullFeedbackSink,
    RecordingFeedbackSink,
)

__all__ = [
    "QuizSession",
    "FrameLoop",
    "TickResult",
    "Ticker",
    "IntervalTicker",
    "NoWaitTicker",
    "SessionManager",
    "resolve_catalog",
    "PresentationSink",
    "FeedbackSink",
    "LoggingPresentationSink",
    "RecordingPresentationSink",
    "NullFeedbackSink",
    "RecordingFeedbackSink",
]
