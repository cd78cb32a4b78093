"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between the browser client and the
quiz engine. The client runs the tool classifier itself and posts the
raw per-label probabilities for every frame.

Error Codes:
- QUIZ_NOT_STARTED: start must be called first
- QUIZ_COMPLETED: the quiz is over, restart to play again
- INVALID_PREDICTIONS: frame body could not be read as predictions
- STARTUP_FAILED: classifier or camera could not be initialized
- INTERNAL_ERROR: unexpected failure
"""

from enum import Enum
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class QuizPhaseName(str, Enum):
    """Quiz state machine phases."""
    IDLE = "idle"
    AWAITING_ANSWER = "awaiting_answer"
    EVALUATED = "evaluated"
    COMPLETED = "completed"


class OutcomeKindName(str, Enum):
    """Answer classification."""
    CORRECT = "correct"
    HARMFUL_INCORRECT = "harmful_incorrect"
    PLAIN_INCORRECT = "plain_incorrect"


class ErrorCode(str, Enum):
    """Structured error codes."""
    QUIZ_NOT_STARTED = "QUIZ_NOT_STARTED"
    QUIZ_COMPLETED = "QUIZ_COMPLETED"
    INVALID_PREDICTIONS = "INVALID_PREDICTIONS"
    STARTUP_FAILED = "STARTUP_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CaseInfo(BaseModel):
    """A case as shown to the user (without its answer)."""
    case_id: str
    index: int
    total: int
    description: str = ""
    image: Optional[str] = None


class FeedbackInfo(BaseModel):
    """Feedback after an answer is evaluated."""
    kind: OutcomeKindName
    message: str
    delta: int
    answer: str
    expected_answer: str
    reason: Optional[str] = Field(None, description="Only for harmful choices")
    correct_diagram: str = Field("", description="Diagram file for the correct tool")


class SummaryInfo(BaseModel):
    """Final results."""
    score: int
    correct_count: int
    mistake_count: int
    total_cases: int
    accuracy: float = Field(..., ge=0.0, le=1.0)
    percentage: int = Field(..., ge=0, le=100)


# =============================================================================
# Request Models
# =============================================================================

class PredictionIn(BaseModel):
    """One label's probability, as produced by the classifier."""
    label: str = Field(
        ...,
        validation_alias=AliasChoices("label", "className"),
        description="Class label; Teachable Machine's className is accepted",
    )
    probability: float = Field(..., ge=0.0, le=1.0)


class FrameRequest(BaseModel):
    """Classifier output for one frame, in any order."""
    predictions: list[PredictionIn] = Field(default_factory=list)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class QuizStateResponse(BaseModel):
    """Everything the client renders."""
    phase: QuizPhaseName
    started: bool = False
    case: Optional[CaseInfo] = None
    case_index: int = 0
    total_cases: int = 0
    score: int = Field(0, ge=0)
    correct_count: int = 0
    mistake_count: int = 0
    awaiting_answer: bool = False

    status: str = ""
    status_is_error: bool = False
    detected_tool: Optional[str] = Field(None, description="None means 'Show a tool...'")
    progress: float = Field(0.0, ge=0.0, le=1.0, description="Stability indicator")

    feedback: Optional[FeedbackInfo] = None
    summary: Optional[SummaryInfo] = None
    api_version: str = "v1"


class FrameResponse(BaseModel):
    """Result of one tick."""
    polled: bool
    detected_label: Optional[str] = None
    confidence: Optional[float] = None
    accepted: bool = False
    progress: float = Field(0.0, ge=0.0, le=1.0)
    error: Optional[str] = Field(None, description="Transient frame error, if any")
    outcome: Optional[FeedbackInfo] = None
    quiz: QuizStateResponse
    api_version: str = "v1"


class CatalogResponse(BaseModel):
    """Cases and tool alphabet of the loaded catalog."""
    name: str
    tools: list[str]
    cases: list[CaseInfo]
    api_version: str = "v1"


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
