"""
Quiz configuration.

Values come from keyword arguments or from DTRQUIZ_* environment
variables via QuizConfig.from_env():

    DTRQUIZ_BUFFER_SIZE            stability window capacity (16)
    DTRQUIZ_CONFIDENCE_THRESHOLD   minimum confidence to accept a frame (0.70)
    DTRQUIZ_QUORUM_FRACTION        share of the window one label must hold (0.80)
    DTRQUIZ_TICK_INTERVAL          seconds between classifications (0.15)
    DTRQUIZ_CAMERA_INDEX           webcam device index (0)
    DTRQUIZ_FRAME_SIZE             square classifier input size in pixels (224)
    DTRQUIZ_CATALOG                path to a JSON case catalog (built-in if unset)
    ALLOWED_ORIGINS                comma-separated CORS origins for the API ("*")
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os

from .errors import ConfigError

DEFAULT_BUFFER_SIZE = 16  # ~2.4 seconds of held detection at 150ms ticks
DEFAULT_CONFIDENCE_THRESHOLD = 0.70
DEFAULT_QUORUM_FRACTION = 0.80
DEFAULT_TICK_INTERVAL = 0.15
DEFAULT_FRAME_SIZE = 224


@dataclass
class QuizConfig:
    """Tunables for stabilization, the polling loop and the frame source."""
    buffer_size: int = DEFAULT_BUFFER_SIZE
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    quorum_fraction: float = DEFAULT_QUORUM_FRACTION
    tick_interval: float = DEFAULT_TICK_INTERVAL

    camera_index: int = 0
    frame_size: int = DEFAULT_FRAME_SIZE

    # None means the built-in DTR pathology catalog
    catalog_path: str | None = None

    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ConfigError on the first out-of-range value."""
        if self.buffer_size < 1:
            raise ConfigError(f"buffer_size must be >= 1, got {self.buffer_size}")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ConfigError(
                f"confidence_threshold must be in [0, 1], got {self.confidence_threshold}"
            )
        # A quorum above one half guarantees at most one stable label
        if not 0.5 < self.quorum_fraction <= 1.0:
            raise ConfigError(
                f"quorum_fraction must be in (0.5, 1], got {self.quorum_fraction}"
            )
        if self.tick_interval < 0:
            raise ConfigError(f"tick_interval must be >= 0, got {self.tick_interval}")
        if self.frame_size < 1:
            raise ConfigError(f"frame_size must be >= 1, got {self.frame_size}")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> QuizConfig:
        """Build a config from DTRQUIZ_* variables, falling back to defaults."""
        env = os.environ if environ is None else environ

        def read(name: str, cast, default):
            raw = env.get(name)
            if raw is None or raw == "":
                return default
            try:
                return cast(raw)
            except ValueError:
                raise ConfigError(f"{name}={raw!r} is not a valid {cast.__name__}")

        origins = env.get("ALLOWED_ORIGINS", "*")
        return cls(
            buffer_size=read("DTRQUIZ_BUFFER_SIZE", int, DEFAULT_BUFFER_SIZE),
            confidence_threshold=read(
                "DTRQUIZ_CONFIDENCE_THRESHOLD", float, DEFAULT_CONFIDENCE_THRESHOLD
            ),
            quorum_fraction=read("DTRQUIZ_QUORUM_FRACTION", float, DEFAULT_QUORUM_FRACTION),
            tick_interval=read("DTRQUIZ_TICK_INTERVAL", float, DEFAULT_TICK_INTERVAL),
            camera_index=read("DTRQUIZ_CAMERA_INDEX", int, 0),
            frame_size=read("DTRQUIZ_FRAME_SIZE", int, DEFAULT_FRAME_SIZE),
            catalog_path=env.get("DTRQUIZ_CATALOG") or None,
            allowed_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )
