"""
Spectral Scorer - Does the spectrum sit where voices sit?

- Centroid inside the vocal brightness band
- Rolloff inside the vocal bandwidth
- Low flatness (tonal, not noise-like)
"""

from __future__ import annotations

import numpy as np

from pyvocalmap.analysis import constants as C
from pyvocalmap.analysis.scorers.base import FrameContext, FrameData, Scorer, in_range


class SpectralScorer(Scorer):
    name = "spectral"
    weight = C.SPECTRAL_WEIGHT

    def evaluate(self, data: FrameData) -> np.ndarray:
        centroid = np.where(in_range(data.centroid, C.VOCAL_CENTROID_RANGE), 1.0, C.CENTROID_MISS_SCORE)
        rolloff = np.where(in_range(data.rolloff, C.VOCAL_ROLLOFF_RANGE), 1.0, C.ROLLOFF_MISS_SCORE)
        flatness = np.where(np.asarray(data.flatness) < C.VOCAL_FLATNESS_MAX, 1.0, C.FLATNESS_MISS_SCORE)
        return (centroid + rolloff + flatness) / 3.0

    def explain(self, ctx: FrameContext) -> str:
        lo, hi = C.VOCAL_CENTROID_RANGE
        return (
            f"Spectral: centroid {ctx.centroid:.0f} Hz ({'in' if lo < ctx.centroid < hi else 'out of'} "
            f"{lo:.0f}-{hi:.0f}), rolloff {ctx.rolloff:.0f} Hz, flatness {ctx.flatness:.2f} "
            f"-> {self.score(ctx):.2f}"
        )
