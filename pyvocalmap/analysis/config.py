"""
Analysis configuration.

Groups the tunable subset of the analysis constants into one immutable
object that is passed down the pipeline.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

from pyvocalmap.analysis import constants as C

ENV_PREFIX = "PVM_"


@dataclass(slots=True, frozen=True)
class AnalysisConfig:
    """Immutable set of tunable analysis parameters."""

    frame_size: int = C.FRAME_SIZE
    hop_size: int = C.HOP_SIZE
    rolloff_fraction: float = C.ROLLOFF_FRACTION
    min_peak_magnitude: float = C.MIN_PEAK_MAGNITUDE
    peak_relative_height: float = C.PEAK_RELATIVE_HEIGHT
    min_pitch_hz: float = C.MIN_PITCH_HZ
    max_pitch_hz: float = C.MAX_PITCH_HZ
    voicing_threshold: float = C.VOICING_THRESHOLD
    lpc_order: int = C.LPC_ORDER
    vocal_threshold: float = C.VOCAL_THRESHOLD
    min_segment_length: float = C.MIN_SEGMENT_LENGTH
    onset_threshold: float = C.ONSET_THRESHOLD

    def __post_init__(self):
        if self.frame_size < 2:
            raise ValueError(f"frame_size must be at least 2, got {self.frame_size}")
        if not 0 < self.hop_size <= self.frame_size:
            raise ValueError(
                f"hop_size must be in (0, frame_size={self.frame_size}], got {self.hop_size}"
            )
        for name in ("rolloff_fraction", "peak_relative_height", "voicing_threshold", "vocal_threshold"):
            value = getattr(self, name)
            if not 0.0 < value < 1.0:
                raise ValueError(f"{name} must be in (0, 1), got {value}")
        if not 0.0 < self.min_pitch_hz < self.max_pitch_hz:
            raise ValueError(
                f"pitch range must satisfy 0 < min < max, got {self.min_pitch_hz}..{self.max_pitch_hz}"
            )
        if self.lpc_order < 2:
            raise ValueError(f"lpc_order must be at least 2, got {self.lpc_order}")
        if self.min_segment_length < 0 or self.min_peak_magnitude < 0 or self.onset_threshold < 0:
            raise ValueError("min_segment_length, min_peak_magnitude and onset_threshold must be >= 0")

    @classmethod
    def from_env(cls, **overrides) -> AnalysisConfig:
        """Build a config from ``PVM_*`` environment variables.

        ``PVM_FRAME_SIZE=4096`` overrides ``frame_size`` and so on. Explicit
        keyword overrides win over the environment.
        """
        values = {}
        for f in fields(cls):
            raw = os.environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            kind = int if isinstance(f.default, int) else float
            try:
                values[f.name] = kind(raw)
            except ValueError as e:
                raise ValueError(f"{ENV_PREFIX}{f.name.upper()}={raw!r} is not a valid {kind.__name__}") from e
        values.update(overrides)
        return cls(**values)

    def pitch_lag_bounds(self, sample_rate: int) -> tuple[int, int]:
        """Lag range (in samples) covering the vocal pitch search range."""
        min_lag = max(1, int(sample_rate // self.max_pitch_hz))
        max_lag = max(min_lag + 1, int(sample_rate // self.min_pitch_hz))
        return min_lag, max_lag

    def min_segment_frames(self, sample_rate: int) -> int:
        """Minimum number of frames a vocal run must span to be reported."""
        return int(self.min_segment_length * sample_rate // self.hop_size)
