"""
pyvocalmap Analysis Module - Vocal feature extraction and segmentation.

Architecture:
├── constants.py     - All thresholds and parameters
├── config.py        - Tunable parameter set (PVM_* overrides)
├── types.py         - Feature containers and result records
├── framing.py       - Hann-windowed overlapping frames
├── fft.py           - Iterative radix-2 FFT plans
├── spectral.py      - Centroid, rolloff, flux, flatness
├── harmonic.py      - Peaks, harmonic ratio, inharmonicity
├── temporal.py      - Energy, zero crossings, autocorrelation
├── pitch.py         - Autocorrelation + cepstral f0 fusion
├── formants.py      - LPC formants (Levinson-Durbin)
├── segmentation.py  - Hysteresis segmenter, vocal type, instrumental gaps
├── onsets.py        - Phrase/word/syllable onsets
├── structure.py     - Five-section breakdown
├── aggregate.py     - Confidence, density, voice characteristics
├── main.py          - Pipeline orchestration
└── scorers/         - Vocal probability scorers
    ├── base.py      - Abstract scorer interface
    ├── spectral.py  - Spectral scorer
    ├── harmonic.py  - Harmonic scorer
    ├── temporal.py  - Temporal scorer
    └── ensemble.py  - Weighted ensemble
"""

from pyvocalmap.analysis.config import AnalysisConfig
from pyvocalmap.analysis.fft import FFTPlan, next_pow2

# Main entry point
from pyvocalmap.analysis.main import AnalysisTables, analyze_vocals

# Scorers
from pyvocalmap.analysis.scorers import (
    FrameContext,
    HarmonicScorer,
    Scorer,
    SpectralScorer,
    TemporalScorer,
    VocalScorerEnsemble,
)

# Records
from pyvocalmap.analysis.types import (
    FormantCharacteristics,
    InstrumentalSegment,
    OnsetEvent,
    OnsetType,
    PitchCharacteristics,
    Section,
    SectionSummary,
    StructuralBreakdown,
    VocalCharacteristics,
    VocalFeatures,
    VocalSegment,
    VocalType,
)

__all__ = [
    # Core
    'AnalysisConfig',
    'AnalysisTables',
    'analyze_vocals',
    'FFTPlan',
    'next_pow2',

    # Scorers
    'Scorer',
    'FrameContext',
    'SpectralScorer',
    'HarmonicScorer',
    'TemporalScorer',
    'VocalScorerEnsemble',

    # Records
    'VocalFeatures',
    'VocalSegment',
    'VocalType',
    'OnsetEvent',
    'OnsetType',
    'InstrumentalSegment',
    'Section',
    'SectionSummary',
    'StructuralBreakdown',
    'VocalCharacteristics',
    'PitchCharacteristics',
    'FormantCharacteristics',
]
