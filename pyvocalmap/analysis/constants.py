"""
Analysis Constants - All thresholds and parameters.

Centralized configuration for all analysis parameters to avoid magic numbers
and enable easy tuning.
"""

from __future__ import annotations

# ============================================================================
# FRAMING
# ============================================================================

FRAME_SIZE = 2048  # Samples per analysis frame
HOP_SIZE = 512  # Samples between frame starts (4x overlap)
FRAME_TIME_TOLERANCE = 1e-6  # Frames; absorbs float error when mapping seconds back to frames

# Numerical floor used wherever a ratio or logarithm could blow up
EPS = 1e-10

# ============================================================================
# SPECTRAL FEATURES
# ============================================================================

ROLLOFF_FRACTION = 0.85  # Fraction of energy below the rolloff frequency

# ============================================================================
# HARMONIC ANALYSIS
# ============================================================================

MIN_PEAK_MAGNITUDE = 0.1  # Absolute floor for spectral peak picking
PEAK_RELATIVE_HEIGHT = 0.05  # Peaks must also reach 5% of the frame maximum
HARMONIC_BIN_DIVISORS = (2, 3, 5)  # Bins divisible by these count as harmonic
INHARMONICITY_PEAKS = 5  # Fundamental + up to 4 partials
HARMONIC_STRENGTH_PEAKS = 10  # Peak count giving full harmonic strength

# ============================================================================
# PITCH
# ============================================================================

MIN_PITCH_HZ = 80.0  # Lowest vocal f0 considered
MAX_PITCH_HZ = 800.0  # Highest vocal f0 considered
VOICING_THRESHOLD = 0.4  # Minimum periodicity confidence for a voiced frame
LOG_MAGNITUDE_FLOOR = 1e-10  # Floor before log() in cepstral analysis
CEPSTRAL_MIN_SIGNIFICANCE = 8.0  # Peak prominence, in standard deviations of the lag window

# ============================================================================
# FORMANTS
# ============================================================================

LPC_ORDER = 14  # All-pole model order
PRE_EMPHASIS = 0.97  # First-order pre-emphasis coefficient
MIN_FORMANT_HZ = 90.0  # Resonances below this are treated as glottal/DC
N_FORMANTS = 3  # F1, F2, F3

# ============================================================================
# VOCAL PROBABILITY WEIGHTS
# ============================================================================

SPECTRAL_WEIGHT = 0.4
HARMONIC_WEIGHT = 0.35
TEMPORAL_WEIGHT = 0.25

# Spectral sub-score ranges (Hz)
VOCAL_CENTROID_RANGE = (500.0, 4000.0)
VOCAL_ROLLOFF_RANGE = (1000.0, 6000.0)
VOCAL_FLATNESS_MAX = 0.5

CENTROID_MISS_SCORE = 0.3
ROLLOFF_MISS_SCORE = 0.5
FLATNESS_MISS_SCORE = 0.2

# Harmonic sub-score thresholds
VOCAL_HARMONIC_RATIO_MIN = 0.4
VOCAL_INHARMONICITY_MAX = 0.3

# Temporal sub-score thresholds
VOCAL_ENERGY_MIN = 0.01
VOCAL_ZCR_RANGE = (0.01, 0.15)
ZCR_MISS_SCORE = 0.5

# ============================================================================
# SEGMENTATION
# ============================================================================

VOCAL_THRESHOLD = 0.5  # Probability separating vocal from instrumental frames
MIN_SEGMENT_LENGTH = 0.5  # Seconds; shorter vocal runs are discarded

# Vocal type decision tree
SHOUT_INTENSITY = 0.9
SHOUT_VARIANCE = 0.1
WHISPER_MEAN = 0.6
WHISPER_INTENSITY = 0.7
RAP_VARIANCE = 0.15
LEAD_MEAN = 0.8
LEAD_INTENSITY = 0.7
HARMONY_MEAN = 0.6

# Instrumental gaps
INSTRUMENTAL_EDGE_GAP = 1.0  # Seconds before the first / after the last vocal
INSTRUMENTAL_INNER_GAP = 2.0  # Seconds between two vocal segments
INSTRUMENTAL_ONLY_CONFIDENCE = 0.9
INSTRUMENTAL_EDGE_CONFIDENCE = 0.8
INSTRUMENTAL_INNER_CONFIDENCE = 0.7

# ============================================================================
# ONSETS
# ============================================================================

ONSET_THRESHOLD = 0.02  # Frame-to-frame energy rise
ONSET_CONFIDENCE_SCALE = 10.0
PHRASE_CONFIDENCE = 0.8
PHRASE_SPECTRAL_CHANGE = 0.1
WORD_CONFIDENCE = 0.5

# ============================================================================
# AGGREGATION
# ============================================================================

CONFIDENCE_BOOST = 1.1
MAX_OVERALL_CONFIDENCE = 0.95
HAS_VOCALS_CONFIDENCE = 0.3
ROUGHNESS_JITTER_SCALE = 2.0

N_SECTIONS = 5
