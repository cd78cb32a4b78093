"""
API Module - Browser client interface.

Exposes the quiz via REST API. The browser client:
1. Starts the quiz
2. Classifies camera frames locally and posts the predictions
3. Renders case, detected tool, stability progress and feedback
4. Moves to the next case, and finally shows the summary

There is one quiz per server process. Nothing is persisted.
"""

from .schemas import (
    # Requests
    FrameRequest,
    PredictionIn,
    # Responses
    QuizStateResponse,
    FrameResponse,
    CatalogResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    CaseInfo,
    FeedbackInfo,
    SummaryInfo,
    # Enums
    ErrorCode,
    QuizPhaseName,
    OutcomeKindName,
)
from .service import QuizAPIService
from .app import create_app

__all__ = [
    # Requests
    "FrameRequest",
    "PredictionIn",
    # Responses
    "QuizStateResponse",
    "FrameResponse",
    "CatalogResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "CaseInfo",
    "FeedbackInfo",
    "SummaryInfo",
    # Enums
    "ErrorCode",
    "QuizPhaseName",
    "OutcomeKindName",
    # Service
    "QuizAPIService",
    "create_app",
]
