"""
Spectral Feature Extractor.

Per-frame magnitude/phase spectra plus four scalar summaries:
- Centroid: energy-weighted mean frequency (brightness)
- Rolloff: frequency below which a fixed fraction of the energy lies
- Flux: half-wave rectified frame-to-frame magnitude increase
- Flatness: geometric / arithmetic mean (noise-likeness)
"""

from __future__ import annotations

import numpy as np

from pyvocalmap.analysis import constants as C
from pyvocalmap.analysis.fft import FFTPlan, magnitude_phase
from pyvocalmap.analysis.types import FrameBlock, SpectralFeatures

# Frames transformed per batch; bounds the complex scratch block
CHUNK_FRAMES = 256


def spectral_centroid(magnitude: np.ndarray, freqs: np.ndarray) -> np.ndarray:
    """Magnitude-weighted mean frequency per row, 0 for silent rows."""
    magnitude = np.atleast_2d(magnitude)
    total = magnitude.sum(axis=1)
    weighted = magnitude @ freqs
    return np.divide(weighted, total, out=np.zeros_like(total), where=total > C.EPS)


def spectral_rolloff(magnitude: np.ndarray, freqs: np.ndarray, fraction: float = C.ROLLOFF_FRACTION) -> np.ndarray:
    """Lowest bin frequency where cumulative energy reaches ``fraction`` of the total."""
    magnitude = np.atleast_2d(magnitude)
    cumulative = np.cumsum(magnitude ** 2, axis=1)
    total = cumulative[:, -1]
    reached = cumulative >= (total * fraction)[:, None]
    idx = np.argmax(reached, axis=1)
    rolloff = freqs[idx]
    rolloff[total <= 0] = 0.0
    return rolloff


def spectral_flux(magnitude: np.ndarray, previous: np.ndarray | None = None) -> np.ndarray:
    """
    Half-wave rectified sum of magnitude increases between consecutive rows.

    ``previous`` is the row preceding the block; without it the first row's
    flux is 0.
    """
    magnitude = np.atleast_2d(magnitude)
    flux = np.zeros(len(magnitude), dtype=np.float64)
    if len(magnitude) == 0:
        return flux

    if len(magnitude) > 1:
        diff = np.diff(magnitude, axis=0)
        flux[1:] = np.maximum(diff, 0.0).sum(axis=1)
    if previous is not None:
        flux[0] = np.maximum(magnitude[0] - previous, 0.0).sum()
    return flux


def spectral_flatness(magnitude: np.ndarray) -> np.ndarray:
    """
    Geometric mean over arithmetic mean of the non-zero inner bins.

    DC and Nyquist are excluded; rows without any energy get 0.
    """
    magnitude = np.atleast_2d(magnitude)
    inner = magnitude[:, 1:-1]
    mask = inner > 0
    count = mask.sum(axis=1)
    safe_count = np.maximum(count, 1)

    log_sum = np.where(mask, np.log(np.where(mask, inner, 1.0)), 0.0).sum(axis=1)
    arith = np.where(mask, inner, 0.0).sum(axis=1) / safe_count
    geo = np.exp(log_sum / safe_count)

    flatness = np.divide(geo, arith, out=np.zeros_like(arith), where=(count > 0) & (arith > C.EPS))
    return np.clip(flatness, 0.0, 1.0)


def extract_spectral_features(
    block: FrameBlock,
    plan: FFTPlan | None = None,
    rolloff_fraction: float = C.ROLLOFF_FRACTION,
) -> SpectralFeatures:
    """
    Transform every frame and compute the spectral summaries.

    Frames are zero-padded to the plan size (next power of two >= frame
    size). Only the bins up to Nyquist are kept.
    """
    if plan is None:
        plan = FFTPlan.for_length(block.frame_size)

    n_frames = block.n_frames
    n_bins = plan.n_bins
    sr = block.sample_rate
    freqs = np.arange(n_bins) * sr / plan.size

    magnitude = np.zeros((n_frames, n_bins), dtype=np.float32)
    phase = np.zeros((n_frames, n_bins), dtype=np.float32)
    centroid = np.zeros(n_frames, dtype=np.float64)
    rolloff = np.zeros(n_frames, dtype=np.float64)
    flux = np.zeros(n_frames, dtype=np.float64)
    flatness = np.zeros(n_frames, dtype=np.float64)

    previous = None
    for start in range(0, n_frames, CHUNK_FRAMES):
        stop = min(start + CHUNK_FRAMES, n_frames)
        spectrum = plan.transform_frames(block.frames[start:stop])
        mag, ph = magnitude_phase(spectrum)

        magnitude[start:stop] = mag
        phase[start:stop] = ph
        centroid[start:stop] = spectral_centroid(mag, freqs)
        rolloff[start:stop] = spectral_rolloff(mag, freqs, rolloff_fraction)
        flux[start:stop] = spectral_flux(mag, previous)
        flatness[start:stop] = spectral_flatness(mag)
        previous = mag[-1]

    magnitude.flags.writeable = False
    phase.flags.writeable = False

    return SpectralFeatures(
        magnitude=magnitude,
        phase=phase,
        centroid=centroid,
        rolloff=rolloff,
        flux=flux,
        flatness=flatness,
        n_fft=plan.size,
        sample_rate=sr,
    )
