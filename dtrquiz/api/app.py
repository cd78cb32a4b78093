"""
FastAPI Application - REST API for the browser quiz client.

Endpoints:
    GET    /api/v1/health          Service health
    GET    /api/v1/catalog         Cases and tool labels
    GET    /api/v1/quiz            Current quiz state
    POST   /api/v1/quiz/start      Start (or restart) at case 0
    POST   /api/v1/quiz/frame      Submit classifier output for one frame
    POST   /api/v1/quiz/next       Next case, or final summary after the last
    POST   /api/v1/quiz/restart    Reset to idle

Frame Flow:
    1. The client grabs a camera frame and runs the tool classifier
    2. POST /frame with the per-label probabilities (~every 150ms)
    3. The server debounces them; once one tool is held long enough the
       answer is scored and the response carries `outcome`
    4. POST /next when the user is ready

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Union

from ..config import QuizConfig


def create_app(service=None, config: QuizConfig | None = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional QuizAPIService instance (creates new if not provided)
        config: Optional config (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.encoders import jsonable_encoder
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from .service import QuizAPIService
    from .schemas import (
        # Request models
        FrameRequest,
        # Response models
        CatalogResponse,
        ErrorResponse,
        FrameResponse,
        HealthResponse,
        QuizStateResponse,
        # Enums
        ErrorCode,
    )

    config = config or QuizConfig.from_env()
    api_service = service or QuizAPIService(config=config)

    app = FastAPI(
        title="DTR Quiz API",
        description="""
Dental tool recognition quiz - show the right instrument to the camera.

## Frame Flow

1. The client classifies each camera frame and posts the raw
   probabilities to `POST /quiz/frame`
2. A tool must dominate the recent frames before it counts as an answer
3. The answer is scored: correct +10, harmful choice -8, other wrong -3
   (the score never drops below zero)
4. `POST /quiz/next` moves on; after the last case the summary is returned

## Error Codes

| Code | Description |
|------|-------------|
| `QUIZ_NOT_STARTED` | Call `/quiz/start` first |
| `QUIZ_COMPLETED` | Quiz over, call `/quiz/restart` |
| `INVALID_PREDICTIONS` | Frame body malformed |
| `STARTUP_FAILED` | Classifier or camera unavailable |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_by_code = {
        ErrorCode.QUIZ_NOT_STARTED: 409,
        ErrorCode.QUIZ_COMPLETED: 409,
        ErrorCode.INVALID_PREDICTIONS: 422,
        ErrorCode.STARTUP_FAILED: 503,
        ErrorCode.INTERNAL_ERROR: 500,
    }

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_by_code.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(result):
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        return result

    # =========================================================================
    # Info Endpoints
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Info"])
    def health() -> HealthResponse:
        return api_service.health()

    @app.get(
        "/api/v1/catalog",
        response_model=CatalogResponse,
        tags=["Info"],
        summary="List cases and tool labels",
    )
    def get_catalog() -> CatalogResponse:
        return api_service.get_catalog()

    # =========================================================================
    # Quiz Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/quiz",
        response_model=QuizStateResponse,
        tags=["Quiz"],
        summary="Get the current quiz state",
    )
    def get_quiz() -> QuizStateResponse:
        return api_service.get_state()

    @app.post(
        "/api/v1/quiz/start",
        response_model=QuizStateResponse,
        responses={503: {"model": ErrorResponse, "description": "Startup failed"}},
        tags=["Quiz"],
        summary="Start the quiz at the first case",
    )
    def start_quiz() -> Union[QuizStateResponse, JSONResponse]:
        return respond(api_service.start())

    @app.post(
        "/api/v1/quiz/frame",
        response_model=FrameResponse,
        responses={409: {"model": ErrorResponse, "description": "Quiz not running"}},
        tags=["Quiz"],
        summary="Submit classifier output for one frame",
    )
    def submit_frame(body: FrameRequest) -> Union[FrameResponse, JSONResponse]:
        """
        **Request Body:**
        ```json
        {"predictions": [{"label": "7-8", "probability": 0.91},
                         {"label": "1-2", "probability": 0.04}]}
        ```
        """
        return respond(api_service.process_frame(body))

    @app.post(
        "/api/v1/quiz/next",
        response_model=QuizStateResponse,
        responses={409: {"model": ErrorResponse, "description": "Quiz not running"}},
        tags=["Quiz"],
        summary="Advance to the next case",
    )
    def next_case() -> Union[QuizStateResponse, JSONResponse]:
        return respond(api_service.next_case())

    @app.post(
        "/api/v1/quiz/restart",
        response_model=QuizStateResponse,
        tags=["Quiz"],
        summary="Reset the quiz",
    )
    def restart_quiz() -> QuizStateResponse:
        return api_service.restart()

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request, exc):
        return make_error_response(
            ErrorResponse(
                error="Invalid frame payload",
                error_code=ErrorCode.INVALID_PREDICTIONS,
                details={"errors": jsonable_encoder(exc.errors())},
            )
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request, exc):
        return make_error_response(
            ErrorResponse(error=str(exc), error_code=ErrorCode.INTERNAL_ERROR)
        )

    return app
