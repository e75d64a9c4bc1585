"""
Base Scorer Interface and Frame Context.

Provides the abstract interface that the vocal-likelihood scorers implement,
plus the per-frame and column-wise views of the extracted features they read.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

import numpy as np

if TYPE_CHECKING:
    from pyvocalmap.analysis.types import HarmonicFeatures, SpectralFeatures, TemporalFeatures


@dataclass
class FrameContext:
    """Scalar features of a single frame."""

    index: int

    # Spectral
    centroid: float
    rolloff: float
    flatness: float

    # Harmonic
    harmonic_ratio: float
    inharmonicity: float

    # Temporal
    energy: float
    zcr: float

    @classmethod
    def from_features(
        cls,
        spectral: SpectralFeatures,
        harmonic: HarmonicFeatures,
        temporal: TemporalFeatures,
        index: int,
    ) -> FrameContext:
        """Create FrameContext from the feature containers and a frame index."""
        return cls(
            index=index,
            centroid=float(spectral.centroid[index]),
            rolloff=float(spectral.rolloff[index]),
            flatness=float(spectral.flatness[index]),
            harmonic_ratio=float(harmonic.harmonic_ratio[index]),
            inharmonicity=float(harmonic.inharmonicity[index]),
            energy=float(temporal.energy[index]),
            zcr=float(temporal.zcr[index]),
        )


@dataclass
class FrameColumns:
    """The same features as FrameContext, one array per feature over all frames."""

    centroid: np.ndarray
    rolloff: np.ndarray
    flatness: np.ndarray
    harmonic_ratio: np.ndarray
    inharmonicity: np.ndarray
    energy: np.ndarray
    zcr: np.ndarray

    @classmethod
    def from_features(
        cls,
        spectral: SpectralFeatures,
        harmonic: HarmonicFeatures,
        temporal: TemporalFeatures,
    ) -> FrameColumns:
        return cls(
            centroid=np.asarray(spectral.centroid, dtype=np.float64),
            rolloff=np.asarray(spectral.rolloff, dtype=np.float64),
            flatness=np.asarray(spectral.flatness, dtype=np.float64),
            harmonic_ratio=np.asarray(harmonic.harmonic_ratio, dtype=np.float64),
            inharmonicity=np.asarray(harmonic.inharmonicity, dtype=np.float64),
            energy=np.asarray(temporal.energy, dtype=np.float64),
            zcr=np.asarray(temporal.zcr, dtype=np.float64),
        )

    def __len__(self) -> int:
        return len(self.energy)

    def context(self, index: int) -> FrameContext:
        return FrameContext(
            index=index,
            centroid=float(self.centroid[index]),
            rolloff=float(self.rolloff[index]),
            flatness=float(self.flatness[index]),
            harmonic_ratio=float(self.harmonic_ratio[index]),
            inharmonicity=float(self.inharmonicity[index]),
            energy=float(self.energy[index]),
            zcr=float(self.zcr[index]),
        )


FrameData = Union[FrameContext, FrameColumns]


class Scorer(ABC):
    """
    Abstract base class for vocal-likelihood scorers.

    Each scorer rates how voice-like a frame looks from one feature family
    and returns a score in [0, 1]. ``evaluate`` is written with numpy
    element-wise operations so the same rule serves a single FrameContext
    and a whole FrameColumns block.
    """

    name: str = "base"
    weight: float = 0.1  # Default weight in ensemble

    @abstractmethod
    def evaluate(self, data: FrameData) -> np.ndarray:
        """
        Score one frame or a column block.

        Args:
            data: FrameContext (0-d result) or FrameColumns (one score per frame)

        Returns:
            Scores in [0, 1]
        """
        pass

    def score(self, ctx: FrameContext) -> float:
        return float(self.evaluate(ctx))

    def score_batch(self, contexts: list[FrameContext]) -> np.ndarray:
        """Score multiple frames one context at a time."""
        return np.array([self.score(ctx) for ctx in contexts], dtype=np.float64)

    @abstractmethod
    def explain(self, ctx: FrameContext) -> str:
        """Human-readable explanation of the score."""
        pass


def in_range(value, bounds: tuple[float, float]) -> np.ndarray:
    """Open-interval membership test, element-wise."""
    value = np.asarray(value, dtype=np.float64)
    return (value > bounds[0]) & (value < bounds[1])
