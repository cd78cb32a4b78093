"""
Vision Layer - Frames in, one detection per frame out.

Architecture:
    FrameSource -> Classifier -> ClassificationAdapter -> Detection

The classifier is a black box. The vision layer only picks the most
confident label; deciding whether that label is an answer is the
stability buffer's job.
"""

from .detection import Prediction, Detection
from .classifier import (
    Classifier,
    CallableClassifier,
    PassthroughClassifier,
    ScriptedClassifier,
    ClassificationAdapter,
    best_prediction,
    load_classifier,
)
from .camera import FrameSource, StaticFrameSource, OpenCVFrameSource

__all__ = [
    "Prediction",
    "Detection",
    "Classifier",
    "CallableClassifier",
    "PassthroughClassifier",
    "ScriptedClassifier",
    "ClassificationAdapter",
    "best_prediction",
    "load_classifier",
    "FrameSource",
    "StaticFrameSource",
    "OpenCVFrameSource",
]
