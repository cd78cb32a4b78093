"""
Classifiers and the Classification Adapter.

The model itself is a black box: frame -> per-label probabilities.
Implementations:
- CallableClassifier: wraps any function (e.g. a Keras/ONNX wrapper)
- PassthroughClassifier: the frame already is a prediction list
  (the browser ran the model and posted its output)
- ScriptedClassifier: plays back a fixed sequence, for demos and tests

ClassificationAdapter reduces a prediction list to one Detection.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from itertools import cycle
from typing import Any, Callable, Iterable, Sequence
import importlib

from .detection import Detection, Prediction
from ..errors import ClassificationError, ClassifierLoadError


class Classifier(ABC):
    """Abstract base class for frame classifiers."""

    @abstractmethod
    def predict(self, frame: Any) -> list[Prediction]:
        """Return one prediction per label, in any order."""
        pass

    def labels(self) -> list[str]:
        """Labels the model was trained on, if known."""
        return []


class CallableClassifier(Classifier):
    """
    Wraps a plain function returning predictions.

    The function may return Prediction objects, (label, probability)
    pairs or dicts; they are normalized with Prediction.coerce().
    """

    def __init__(self, fn: Callable[[Any], Iterable[Any]], labels: Sequence[str] | None = None):
        self.fn = fn
        self._labels = list(labels or [])

    def predict(self, frame: Any) -> list[Prediction]:
        return [Prediction.coerce(p) for p in self.fn(frame)]

    def labels(self) -> list[str]:
        return list(self._labels)


class PassthroughClassifier(Classifier):
    """The frame is a prediction list produced elsewhere."""

    def predict(self, frame: Any) -> list[Prediction]:
        if frame is None:
            raise ClassificationError("No predictions supplied")
        return [Prediction.coerce(p) for p in frame]


class ScriptedClassifier(Classifier):
    """
    Returns scripted detections, one per call.

    Each script item is a (label, confidence) pair, an Exception
    instance (raised to simulate a transient failure) or None (an
    empty frame). The remaining labels get an even share of what is
    left so the output looks like a real softmax.
    """

    def __init__(
        self,
        script: Iterable[Any],
        labels: Sequence[str],
        repeat: bool = False,
    ):
        self._labels = list(labels)
        items = list(script)
        self._script = cycle(items) if repeat and items else iter(items)
        self.calls = 0

    def predict(self, frame: Any) -> list[Prediction]:
        self.calls += 1
        try:
            item = next(self._script)
        except StopIteration:
            raise ClassificationError("Script exhausted")

        if isinstance(item, Exception):
            raise item
        if item is None:
            return []

        label, confidence = item
        others = [lbl for lbl in self._labels if lbl != label]
        rest = (1.0 - confidence) / len(others) if others else 0.0
        predictions = [Prediction(label=label, probability=confidence)]
        predictions.extend(Prediction(label=lbl, probability=rest) for lbl in others)
        return predictions

    def labels(self) -> list[str]:
        return list(self._labels)


class ClassificationAdapter:
    """Picks the highest-confidence label from a classifier's output."""

    def __init__(self, classifier: Classifier):
        self.classifier = classifier

    def classify(self, frame: Any) -> Detection:
        """
        Argmax over the prediction list.

        Ties go to the first prediction seen. Errors from the classifier
        propagate; the frame loop treats them as no detection.
        """
        predictions = self.classifier.predict(frame)
        return best_prediction(predictions)


def best_prediction(predictions: Iterable[Prediction]) -> Detection:
    """Return the first prediction with the highest probability."""
    best: Prediction | None = None
    for p in predictions:
        if best is None or p.probability > best.probability:
            best = p
    if best is None:
        raise ClassificationError("Classifier returned no predictions")
    return Detection(label=best.label, confidence=best.probability)


def load_classifier(target: str, labels: Sequence[str] | None = None) -> Classifier:
    """
    Import a classifier given as "package.module:attribute".

    The attribute may be a Classifier instance, a Classifier subclass
    (instantiated with no arguments) or a plain prediction function.
    """
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise ClassifierLoadError(f"Expected 'module:attribute', got {target!r}")

    try:
        module = importlib.import_module(module_name)
        obj = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ClassifierLoadError(f"Cannot load classifier {target!r}: {e}") from e

    if isinstance(obj, Classifier):
        return obj
    if isinstance(obj, type) and issubclass(obj, Classifier):
        try:
            return obj()
        except Exception as e:
            raise ClassifierLoadError(f"Cannot instantiate {target!r}: {e}") from e
    if callable(obj):
        return CallableClassifier(obj, labels=labels)
    raise ClassifierLoadError(f"{target!r} is not a classifier or callable")
