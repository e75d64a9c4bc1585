"""
Vocal Probability Scorers.

Per-frame vocal likelihood from three feature families:
- SpectralScorer: centroid, rolloff and flatness inside vocal ranges
- HarmonicScorer: harmonic energy ratio, inharmonicity
- TemporalScorer: frame energy, zero-crossing rate
"""

from pyvocalmap.analysis.scorers.base import FrameColumns, FrameContext, Scorer
from pyvocalmap.analysis.scorers.ensemble import VocalScorerEnsemble
from pyvocalmap.analysis.scorers.harmonic import HarmonicScorer
from pyvocalmap.analysis.scorers.spectral import SpectralScorer
from pyvocalmap.analysis.scorers.temporal import TemporalScorer

__all__ = [
    # Base
    'Scorer',
    'FrameContext',
    'FrameColumns',
    # Scorers
    'SpectralScorer',
    'HarmonicScorer',
    'TemporalScorer',
    # Ensemble
    'VocalScorerEnsemble',
]
