"""
Harmonic Analyzer - Peak picking, harmonicity and inharmonicity.

Evaluates per frame:
- Spectral peaks (local maxima above a magnitude floor)
- Harmonic ratio (energy share of harmonically indexed bins)
- Inharmonicity (deviation of partials from an ideal harmonic series)
- Harmonic strength (peak count saturation)
"""

from __future__ import annotations

import numpy as np
from scipy.signal import find_peaks

from pyvocalmap.analysis import constants as C
from pyvocalmap.analysis.types import HarmonicFeatures, SpectralFeatures


def find_spectral_peaks(
    magnitude: np.ndarray,
    min_magnitude: float = C.MIN_PEAK_MAGNITUDE,
    relative_height: float = C.PEAK_RELATIVE_HEIGHT,
) -> np.ndarray:
    """Bin indices of local maxima, DC and Nyquist excluded."""
    if len(magnitude) < 3:
        return np.zeros(0, dtype=np.int64)
    peak_max = float(np.max(magnitude[1:]))
    height = max(min_magnitude, relative_height * peak_max)
    if peak_max < height:
        return np.zeros(0, dtype=np.int64)
    peaks, _ = find_peaks(magnitude[1:], height=height)
    return (peaks + 1).astype(np.int64)


def harmonic_bin_mask(n_bins: int, divisors: tuple[int, ...] = C.HARMONIC_BIN_DIVISORS) -> np.ndarray:
    """Bins whose index is a multiple of one of ``divisors``."""
    idx = np.arange(n_bins)
    mask = np.zeros(n_bins, dtype=bool)
    for d in divisors:
        mask |= idx % d == 0
    return mask


def harmonic_ratio(magnitude: np.ndarray, mask: np.ndarray | None = None) -> np.ndarray:
    """Share of energy on harmonically indexed bins, per row."""
    magnitude = np.atleast_2d(magnitude)
    if mask is None:
        mask = harmonic_bin_mask(magnitude.shape[1])
    energy = magnitude.astype(np.float64) ** 2
    total = energy.sum(axis=1)
    harmonic = energy[:, mask].sum(axis=1)
    return np.divide(harmonic, total, out=np.zeros_like(total), where=total > 0)


def inharmonicity(peaks: np.ndarray, n_partials: int = C.INHARMONICITY_PEAKS) -> float:
    """
    Mean relative deviation of the first partials from the harmonic series.

    The lowest peak is taken as the fundamental; partial ``i`` is expected at
    ``(i + 1) * fundamental``. Fewer than two peaks is maximally inharmonic.
    """
    if len(peaks) < 2:
        return 1.0

    fundamental = float(peaks[0])
    n = min(len(peaks), n_partials)
    deviation = 0.0
    for i in range(1, n):
        expected = fundamental * (i + 1)
        deviation += abs(float(peaks[i]) - expected) / expected
    return deviation / (n - 1)


def harmonic_strength(peaks: np.ndarray) -> float:
    return min(1.0, len(peaks) / C.HARMONIC_STRENGTH_PEAKS)


def analyze_harmonics(
    spectral: SpectralFeatures,
    min_magnitude: float = C.MIN_PEAK_MAGNITUDE,
    relative_height: float = C.PEAK_RELATIVE_HEIGHT,
) -> HarmonicFeatures:
    """Compute harmonic descriptors for every frame."""
    n_frames = spectral.n_frames
    mask = harmonic_bin_mask(spectral.magnitude.shape[1])

    peaks = tuple(
        find_spectral_peaks(spectral.magnitude[i], min_magnitude, relative_height)
        for i in range(n_frames)
    )
    inharm = np.array([inharmonicity(p) for p in peaks], dtype=np.float64)
    strength = np.array([harmonic_strength(p) for p in peaks], dtype=np.float64)
    ratio = harmonic_ratio(spectral.magnitude, mask) if n_frames else np.zeros(0)

    return HarmonicFeatures(
        harmonic_ratio=ratio,
        inharmonicity=inharm,
        peaks=peaks,
        harmonic_strength=strength,
    )
