"""
Temporal Scorer - Enough energy, speech-like zero-crossing rate.
"""

from __future__ import annotations

import numpy as np

from pyvocalmap.analysis import constants as C
from pyvocalmap.analysis.scorers.base import FrameContext, FrameData, Scorer, in_range


class TemporalScorer(Scorer):
    name = "temporal"
    weight = C.TEMPORAL_WEIGHT

    def evaluate(self, data: FrameData) -> np.ndarray:
        energy = np.asarray(data.energy, dtype=np.float64)

        energy_score = np.where(energy > C.VOCAL_ENERGY_MIN, 1.0, energy / C.VOCAL_ENERGY_MIN)
        zcr_score = np.where(in_range(data.zcr, C.VOCAL_ZCR_RANGE), 1.0, C.ZCR_MISS_SCORE)
        return (energy_score + zcr_score) / 2.0

    def explain(self, ctx: FrameContext) -> str:
        return f"Temporal: energy {ctx.energy:.4f}, zcr {ctx.zcr:.3f} -> {self.score(ctx):.2f}"
