"""
Answer Evaluator - Scores one stabilized answer against a case.

Outcomes:
- CORRECT            answer is the expected tool            +10
- HARMFUL_INCORRECT  catalog has a harmful entry for it     -8
- PLAIN_INCORRECT    any other wrong tool                   -3

evaluate() is pure. The session applies the delta with apply_delta(),
which floors the running score at zero.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..catalog import Case, HarmfulEntry

CORRECT_DELTA = 10
HARMFUL_DELTA = -8
INCORRECT_DELTA = -3


class OutcomeKind(Enum):
    """Classification of an answer."""
    CORRECT = "correct"
    HARMFUL_INCORRECT = "harmful_incorrect"
    PLAIN_INCORRECT = "plain_incorrect"


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating an answer, including the feedback payload."""
    kind: OutcomeKind
    delta: int
    message: str
    case_id: str
    answer: str
    expected_answer: str

    # Only set for HARMFUL_INCORRECT
    reason: str | None = None

    # Reference diagram shown for the correct tool after every answer
    correct_diagram: str = ""

    @property
    def is_correct(self) -> bool:
        return self.kind == OutcomeKind.CORRECT

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "delta": self.delta,
            "message": self.message,
            "case_id": self.case_id,
            "answer": self.answer,
            "expected_answer": self.expected_answer,
            "reason": self.reason,
            "correct_diagram": self.correct_diagram,
        }


def evaluate(case: Case, answer: str, harmful: HarmfulEntry | None = None) -> Outcome:
    """
    Evaluate a stabilized answer for a case.

    `harmful` is the catalog's entry for (case, answer), as returned by
    CaseCatalog.harmful_lookup(); None means the answer is not harmful.
    """
    expected = case.expected_answer
    diagram = f"{expected}.png"

    if answer == expected:
        return Outcome(
            kind=OutcomeKind.CORRECT,
            delta=CORRECT_DELTA,
            message=f"Correct! Tool {answer} is appropriate. +{CORRECT_DELTA} points",
            case_id=case.id,
            answer=answer,
            expected_answer=expected,
            correct_diagram=diagram,
        )

    if harmful is not None and harmful.case_id == case.id and harmful.answer == answer:
        return Outcome(
            kind=OutcomeKind.HARMFUL_INCORRECT,
            delta=HARMFUL_DELTA,
            message=(
                f"HARMFUL CHOICE! {HARMFUL_DELTA} points. "
                f"{harmful.reason}. Correct tool: {expected}"
            ),
            case_id=case.id,
            answer=answer,
            expected_answer=expected,
            reason=harmful.reason,
            correct_diagram=diagram,
        )

    return Outcome(
        kind=OutcomeKind.PLAIN_INCORRECT,
        delta=INCORRECT_DELTA,
        message=(
            f"Incorrect. {INCORRECT_DELTA} points. "
            f"You selected: Tool {answer}. Correct tool: {expected}"
        ),
        case_id=case.id,
        answer=answer,
        expected_answer=expected,
        correct_diagram=diagram,
    )


def apply_delta(score: int, delta: int) -> int:
    """Apply a score delta, never going below zero."""
    return max(0, score + delta)
