"""
Scorer Ensemble - Weighted fusion into a per-frame vocal probability.

Combines the spectral, harmonic and temporal scorers with fixed weights
(0.4 / 0.35 / 0.25). The vectorized path scores all frames at once; the
per-context path exists for explanations and both produce the same numbers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from pyvocalmap.analysis.scorers.base import FrameColumns, FrameContext, Scorer
from pyvocalmap.analysis.scorers.harmonic import HarmonicScorer
from pyvocalmap.analysis.scorers.spectral import SpectralScorer
from pyvocalmap.analysis.scorers.temporal import TemporalScorer

if TYPE_CHECKING:
    from pyvocalmap.analysis.types import HarmonicFeatures, SpectralFeatures, TemporalFeatures


class VocalScorerEnsemble:
    """
    3-Scorer ensemble producing the vocal probability of each frame.

    0. SpectralScorer - vocal frequency band, tonality
    1. HarmonicScorer - harmonic energy share, partial alignment
    2. TemporalScorer - energy, zero-crossing rate
    """

    def __init__(self, scorers: list[Scorer] | None = None):
        self.scorers: list[Scorer] = scorers if scorers is not None else [
            SpectralScorer(),  # 0
            HarmonicScorer(),  # 1
            TemporalScorer(),  # 2
        ]

        self.weights = np.array([scorer.weight for scorer in self.scorers], dtype=np.float64)
        # Normalize to sum to 1
        self.weights /= np.sum(self.weights)

    def score(self, ctx: FrameContext) -> float:
        """Vocal probability of a single frame."""
        scores = np.array([scorer.score(ctx) for scorer in self.scorers], dtype=np.float64)
        return float(np.clip(np.dot(scores, self.weights), 0.0, 1.0))

    def score_frames(self, contexts: list[FrameContext]) -> np.ndarray:
        """Score a list of frame contexts, each scorer batching over the whole list."""
        if not contexts:
            return np.zeros(0, dtype=np.float64)
        scores = np.stack([scorer.score_batch(contexts) for scorer in self.scorers])
        return np.clip(self.weights @ scores, 0.0, 1.0)

    def score_columns(self, columns: FrameColumns) -> np.ndarray:
        if len(columns) == 0:
            return np.zeros(0, dtype=np.float64)
        combined = np.zeros(len(columns), dtype=np.float64)
        for scorer, weight in zip(self.scorers, self.weights):
            combined += weight * scorer.evaluate(columns)
        return np.clip(combined, 0.0, 1.0)

    def score_arrays(
        self,
        spectral: SpectralFeatures,
        harmonic: HarmonicFeatures,
        temporal: TemporalFeatures,
    ) -> np.ndarray:
        """Vectorized vocal probability for every frame."""
        return self.score_columns(FrameColumns.from_features(spectral, harmonic, temporal))

    def explain_score(self, ctx: FrameContext) -> str:
        """Get detailed explanation of score breakdown."""
        lines = [f"Vocal probability (frame {ctx.index}): {self.score(ctx):.3f}"]
        lines.append("-" * 40)

        for scorer, weight in zip(self.scorers, self.weights):
            lines.append(f"  {scorer.name:10} | Score: {scorer.score(ctx):.2f} | Weight: {weight:.2f}")
            lines.append(f"    {scorer.explain(ctx)}")

        return "\n".join(lines)
