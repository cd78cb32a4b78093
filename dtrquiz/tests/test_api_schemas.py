"""
Tests for API Pydantic schemas.

Tests:
- Request validation and aliases
- Response serialization
- Error codes
- OpenAPI schema generation
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    ErrorCode,
    ErrorResponse,
    FeedbackInfo,
    FrameRequest,
    OutcomeKindName,
    PredictionIn,
    QuizPhaseName,
    QuizStateResponse,
    SummaryInfo,
)
from ..engine_core import OutcomeKind, QuizPhase


class TestPydanticSchemas:
    """Tests for request and response models."""

    def test_prediction_label(self):
        p = PredictionIn.model_validate({"label": "7-8", "probability": 0.9})
        assert p.label == "7-8"

    def test_prediction_class_name_alias(self):
        p = PredictionIn.model_validate({"className": "13-14", "probability": 0.3})
        assert p.label == "13-14"

    @pytest.mark.parametrize("probability", [-0.1, 1.01])
    def test_probability_range(self, probability):
        with pytest.raises(ValidationError):
            PredictionIn.model_validate({"label": "7-8", "probability": probability})

    def test_missing_label(self):
        with pytest.raises(ValidationError):
            PredictionIn.model_validate({"probability": 0.5})

    def test_frame_request_defaults_to_empty(self):
        assert FrameRequest().predictions == []

    def test_state_score_never_negative(self):
        with pytest.raises(ValidationError):
            QuizStateResponse(phase=QuizPhaseName.IDLE, score=-3)

    def test_state_serializes_enums(self):
        state = QuizStateResponse(
            phase=QuizPhaseName.EVALUATED,
            feedback=FeedbackInfo(
                kind=OutcomeKindName.HARMFUL_INCORRECT,
                message="HARMFUL CHOICE!",
                delta=-8,
                answer="17-18",
                expected_answer="7-8",
                reason="Drill damages enamel",
            ),
        )
        data = state.model_dump(mode="json")
        assert data["phase"] == "evaluated"
        assert data["feedback"]["kind"] == "harmful_incorrect"
        assert data["api_version"] == "v1"

    def test_summary_percentage_bounds(self):
        with pytest.raises(ValidationError):
            SummaryInfo(
                score=0, correct_count=0, mistake_count=0, total_cases=0,
                accuracy=0.0, percentage=101,
            )

    def test_error_response(self):
        error = ErrorResponse(error="Quiz not started", error_code=ErrorCode.QUIZ_NOT_STARTED)
        data = error.model_dump(mode="json")
        assert data["error_code"] == "QUIZ_NOT_STARTED"
        assert data["details"] is None


class TestEnumParity:
    """API enums mirror the engine's enums."""

    def test_phase_names(self):
        assert {p.value for p in QuizPhaseName} == {p.value for p in QuizPhase}

    def test_outcome_kind_names(self):
        assert {k.value for k in OutcomeKindName} == {k.value for k in OutcomeKind}


class TestErrorCodes:
    """Tests for error code coverage."""

    def test_all_error_codes_defined(self):
        required_codes = [
            "QUIZ_NOT_STARTED",
            "QUIZ_COMPLETED",
            "INVALID_PREDICTIONS",
            "STARTUP_FAILED",
            "INTERNAL_ERROR",
        ]
        for code in required_codes:
            assert hasattr(ErrorCode, code), f"Missing error code: {code}"
            assert ErrorCode[code].value == code

    def test_error_code_values_are_upper_snake_case(self):
        for code in ErrorCode:
            assert code.value == code.value.upper()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    @pytest.fixture
    def schema(self):
        from ..api import create_app
        from ..config import QuizConfig

        return create_app(config=QuizConfig()).openapi()

    def test_response_models_in_schema(self, schema):
        schemas = schema["components"]["schemas"]
        for name in [
            "QuizStateResponse",
            "FrameResponse",
            "CatalogResponse",
            "HealthResponse",
            "ErrorResponse",
            "FrameRequest",
        ]:
            assert name in schemas, f"Missing schema: {name}"

    def test_endpoints_present(self, schema):
        paths = schema["paths"]
        assert "get" in paths["/api/v1/quiz"]
        for path in ["/api/v1/quiz/start", "/api/v1/quiz/frame", "/api/v1/quiz/next",
                     "/api/v1/quiz/restart"]:
            assert "200" in paths[path]["post"]["responses"]
