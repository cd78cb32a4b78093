"""
Detection data structures.

A classifier produces one Prediction per label for every frame.
The adapter reduces that list to a single Detection: the argmax.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import math

from ..errors import ClassificationError


@dataclass(frozen=True)
class Prediction:
    """Raw classifier output for one label."""
    label: str
    probability: float

    @classmethod
    def coerce(cls, item: Any) -> Prediction:
        """
        Accept the shapes classifiers commonly return:
        Prediction, (label, probability) pairs, or dicts keyed
        label/probability (or className/probability, as Teachable
        Machine exports do). NaN and infinite probabilities are rejected.
        """
        if isinstance(item, Prediction):
            if not math.isfinite(item.probability):
                raise ClassificationError(f"Prediction probability is not finite: {item!r}")
            return item
        if isinstance(item, dict):
            label = item.get("label", item.get("className"))
            probability = item.get("probability", item.get("confidence"))
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            label, probability = item
        else:
            raise ClassificationError(f"Unrecognized prediction: {item!r}")

        if label is None or probability is None:
            raise ClassificationError(f"Prediction missing label or probability: {item!r}")
        try:
            probability = float(probability)
        except (TypeError, ValueError):
            raise ClassificationError(f"Prediction probability is not a number: {item!r}")
        if not math.isfinite(probability):
            raise ClassificationError(f"Prediction probability is not finite: {item!r}")
        return cls(label=str(label), probability=probability)


@dataclass(frozen=True)
class Detection:
    """The single best label for a frame."""
    label: str
    confidence: float
