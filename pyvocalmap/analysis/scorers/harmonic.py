"""
Harmonic Scorer - Voiced sound is strongly harmonic.
"""

from __future__ import annotations

import numpy as np

from pyvocalmap.analysis import constants as C
from pyvocalmap.analysis.scorers.base import FrameContext, FrameData, Scorer


class HarmonicScorer(Scorer):
    name = "harmonic"
    weight = C.HARMONIC_WEIGHT

    def evaluate(self, data: FrameData) -> np.ndarray:
        ratio = np.asarray(data.harmonic_ratio, dtype=np.float64)
        inharm = np.asarray(data.inharmonicity, dtype=np.float64)

        ratio_score = np.where(ratio > C.VOCAL_HARMONIC_RATIO_MIN, 1.0, ratio / C.VOCAL_HARMONIC_RATIO_MIN)
        inharm_score = np.where(inharm < C.VOCAL_INHARMONICITY_MAX, 1.0, np.maximum(0.0, 1.0 - inharm))
        return (ratio_score + inharm_score) / 2.0

    def explain(self, ctx: FrameContext) -> str:
        return (
            f"Harmonic: ratio {ctx.harmonic_ratio:.2f}, inharmonicity {ctx.inharmonicity:.2f} "
            f"-> {self.score(ctx):.2f}"
        )
