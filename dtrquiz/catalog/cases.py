"""
Case Catalog - Ordered, immutable quiz cases.

A case pairs a pathology scenario with the one tool that treats it.
Some cases also name a harmful tool: a wrong answer that earns an extra
penalty and an explanation.

Catalogs are validated when built. A malformed catalog (unknown label,
duplicate case id, harmful answer equal to the expected one) is a
load-time error and never reaches a running session.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable
import json

from ..errors import CatalogError


@dataclass(frozen=True)
class Case:
    """One quiz prompt."""
    id: str
    expected_answer: str
    description: str = ""
    image: str | None = None

    # Zero or one harmful wrong answer per case
    harmful_answer: str | None = None
    harmful_reason: str | None = None

    @property
    def has_harmful_entry(self) -> bool:
        return self.harmful_answer is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "expected_answer": self.expected_answer,
            "description": self.description,
            "image": self.image,
            "harmful_answer": self.harmful_answer,
            "harmful_reason": self.harmful_reason,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Case:
        return cls(
            id=data.get("id", ""),
            expected_answer=data.get("expected_answer", ""),
            description=data.get("description", ""),
            image=data.get("image"),
            harmful_answer=data.get("harmful_answer"),
            harmful_reason=data.get("harmful_reason"),
        )


@dataclass(frozen=True)
class HarmfulEntry:
    """A (case, wrong answer) pair carrying an extra penalty."""
    case_id: str
    answer: str
    reason: str


class CaseCatalog:
    """
    Static, zero-indexed list of cases over a fixed label alphabet.

    Usage:
        catalog = CaseCatalog(labels=TOOLS, cases=[...])
        case = catalog[0]
        entry = catalog.harmful_lookup(case.id, "17-18")
    """

    def __init__(
        self,
        labels: Iterable[str],
        cases: Iterable[Case],
        name: str = "custom",
    ):
        self.name = name
        self.labels: tuple[str, ...] = tuple(labels)
        self.cases: tuple[Case, ...] = tuple(cases)

        errors = validate_catalog(self.labels, self.cases)
        if errors:
            raise CatalogError(errors)

        self._by_id = {case.id: case for case in self.cases}
        self._harmful = {
            (entry.case_id, entry.answer): entry for entry in self.harmful_entries
        }

    def __len__(self) -> int:
        return len(self.cases)

    def __getitem__(self, index: int) -> Case:
        return self.cases[index]

    def __iter__(self):
        return iter(self.cases)

    @property
    def harmful_entries(self) -> list[HarmfulEntry]:
        return [
            HarmfulEntry(case_id=case.id, answer=case.harmful_answer, reason=case.harmful_reason)
            for case in self.cases
            if case.harmful_answer is not None
        ]

    def get_case(self, case_id: str) -> Case | None:
        return self._by_id.get(case_id)

    def harmful_lookup(self, case_id: str, answer: str) -> HarmfulEntry | None:
        """Return the harmful entry matching both case and answer exactly."""
        return self._harmful.get((case_id, answer))

    def is_label(self, label: str | None) -> bool:
        return label in self.labels

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "labels": list(self.labels),
            "cases": [case.to_dict() for case in self.cases],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CaseCatalog:
        """
        Build a catalog from its JSON form:

            {
                "name": "...",
                "labels": ["1-2", "7-8"],
                "cases": [{"id": "A.png", "expected_answer": "7-8", ...}]
            }
        """
        if not isinstance(data, dict):
            raise CatalogError(["Catalog must be a JSON object"])
        raw_cases = data.get("cases")
        if not isinstance(raw_cases, list):
            raise CatalogError(["'cases' must be a list"])
        bad = [i for i, c in enumerate(raw_cases) if not isinstance(c, dict)]
        if bad:
            raise CatalogError([f"Case #{i} must be an object" for i in bad])

        labels = data.get("labels")
        if labels is None:
            labels = []
        if not isinstance(labels, list):
            raise CatalogError(["'labels' must be a list"])

        return cls(
            labels=labels,
            cases=[Case.from_dict(c) for c in raw_cases],
            name=data.get("name", "custom"),
        )


def validate_catalog(labels: tuple[str, ...], cases: tuple[Case, ...]) -> list[str]:
    """Return every problem found; an empty list means the catalog is valid."""
    errors: list[str] = []

    # Type problems are reported first; hashing a list or dict would raise
    valid_labels = [label for label in labels if isinstance(label, str) and label]
    if len(valid_labels) != len(labels):
        errors.append("Labels must be non-empty strings")

    if not labels:
        errors.append("Label alphabet is empty")
    if len(set(valid_labels)) != len(valid_labels):
        errors.append("Label alphabet contains duplicates")
    if not cases:
        errors.append("Catalog has no cases")

    label_set = set(valid_labels)
    seen_ids: set[str] = set()

    for index, case in enumerate(cases):
        type_errors = _case_type_errors(case)
        if type_errors:
            errors.extend(f"Case #{index} {problem}" for problem in type_errors)
            continue

        where = f"Case '{case.id}'" if case.id else f"Case #{index}"

        if not case.id:
            errors.append(f"{where} has empty id")
        elif case.id in seen_ids:
            errors.append(f"{where} is defined more than once")
        seen_ids.add(case.id)

        if case.expected_answer not in label_set:
            errors.append(f"{where} expects unknown label '{case.expected_answer}'")

        if case.harmful_answer is not None:
            if case.harmful_answer not in label_set:
                errors.append(f"{where} names unknown harmful label '{case.harmful_answer}'")
            if case.harmful_answer == case.expected_answer:
                errors.append(f"{where} marks its expected answer as harmful")
            if not case.harmful_reason:
                errors.append(f"{where} has a harmful answer without a reason")
        elif case.harmful_reason:
            errors.append(f"{where} has a harmful reason without a harmful answer")

    return errors


def _case_type_errors(case: Case) -> list[str]:
    problems = []
    for name in ("id", "expected_answer", "description"):
        if not isinstance(getattr(case, name), str):
            problems.append(f"field '{name}' must be a string")
    for name in ("image", "harmful_answer", "harmful_reason"):
        value = getattr(case, name)
        if value is not None and not isinstance(value, str):
            problems.append(f"field '{name}' must be a string or null")
    return problems


def load_catalog(path: str | Path) -> CaseCatalog:
    """Load and validate a catalog from a JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise CatalogError([f"Catalog file not found: {path}"])
    except json.JSONDecodeError as e:
        raise CatalogError([f"Invalid JSON in {path}: {e}"])

    catalog = CaseCatalog.from_dict(data)
    if catalog.name == "custom":
        catalog.name = path.stem
    return catalog
