"""
Pytest fixtures for DTR Quiz tests.
"""

import pytest

from ..catalog import Case, CaseCatalog, TOOLS, create_dtr_catalog
from ..engine_core import StabilityBuffer
from ..session import QuizSession, RecordingFeedbackSink, RecordingPresentationSink


@pytest.fixture
def dtr_catalog() -> CaseCatalog:
    """The built-in six-case catalog."""
    return create_dtr_catalog()


@pytest.fixture
def small_catalog() -> CaseCatalog:
    """Two cases over three tools, one harmful combination."""
    return CaseCatalog(
        labels=["1-2", "7-8", "17-18"],
        cases=[
            Case(
                id="tartar",
                expected_answer="7-8",
                description="Tartar buildup",
                harmful_answer="17-18",
                harmful_reason="Drill damages enamel",
            ),
            Case(id="inspection", expected_answer="1-2", description="General inspection"),
        ],
        name="small",
    )


@pytest.fixture
def buffer() -> StabilityBuffer:
    """Default-sized buffer over the DTR tools."""
    return StabilityBuffer(alphabet=TOOLS)


@pytest.fixture
def presentation() -> RecordingPresentationSink:
    return RecordingPresentationSink()


@pytest.fixture
def feedback() -> RecordingFeedbackSink:
    return RecordingFeedbackSink()


@pytest.fixture
def session(dtr_catalog, buffer, presentation, feedback) -> QuizSession:
    """A DTR quiz session, not yet started."""
    return QuizSession(
        catalog=dtr_catalog,
        buffer=buffer,
        presentation=presentation,
        feedback=feedback,
    )


@pytest.fixture
def started_session(session) -> QuizSession:
    """A DTR quiz session awaiting an answer for case A."""
    session.start()
    return session
