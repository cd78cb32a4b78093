"""
Frame sources.

The frame loop pulls one frame per tick. Opening a source that cannot
deliver frames is a fatal startup error (CameraError); a single failed
read later on is transient and only costs that tick.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any
import logging

from ..errors import CameraError, ClassificationError

logger = logging.getLogger(__name__)


class FrameSource(ABC):
    """Abstract base class for frame sources."""

    def open(self) -> None:
        """Acquire the device. Raise CameraError if unavailable."""

    @abstractmethod
    def read(self) -> Any:
        """Return the next frame."""
        pass

    def close(self) -> None:
        """Release the device."""


class StaticFrameSource(FrameSource):
    """
    Returns the same frame every tick.

    Used with classifiers that ignore pixels (scripted or
    client-side predictions).
    """

    def __init__(self, frame: Any = None):
        self.frame = frame
        self.is_open = False

    def open(self) -> None:
        self.is_open = True

    def read(self) -> Any:
        return self.frame

    def close(self) -> None:
        self.is_open = False


class OpenCVFrameSource(FrameSource):
    """
    Webcam capture via OpenCV.

    Frames are RGB arrays resized to the square input the classifier
    expects. Requires the `camera` extra (opencv-python).
    """

    def __init__(self, index: int = 0, frame_size: int = 224):
        self.index = index
        self.frame_size = frame_size
        self._cap = None
        self._cv2 = None

    def open(self) -> None:
        try:
            import cv2
        except ImportError:
            raise CameraError(
                "OpenCV not installed. Install with: pip install 'dtrquiz[camera]'"
            )
        self._cv2 = cv2
        self._cap = cv2.VideoCapture(self.index)
        if not self._cap.isOpened():
            self._cap = None
            raise CameraError(f"Failed to open camera device {self.index}")
        logger.info("Camera %d opened", self.index)

    def read(self) -> Any:
        if self._cap is None:
            raise ClassificationError("Camera is not open")
        ok, frame = self._cap.read()
        if not ok or frame is None:
            raise ClassificationError("Frame capture failed")
        cv2 = self._cv2
        frame = cv2.resize(frame, (self.frame_size, self.frame_size), interpolation=cv2.INTER_AREA)
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("Camera %d released", self.index)
