"""
Temporal Feature Extractor - energy, zero crossings, autocorrelation, envelope.
"""

from __future__ import annotations

import numpy as np

from pyvocalmap.analysis.fft import FFTPlan
from pyvocalmap.analysis.types import FrameBlock, TemporalFeatures

CHUNK_FRAMES = 256


def frame_energy(frames: np.ndarray) -> np.ndarray:
    """Mean squared amplitude per frame."""
    frames = np.atleast_2d(frames)
    if frames.shape[1] == 0:
        return np.zeros(len(frames))
    return np.mean(frames ** 2, axis=1)


def zero_crossing_rate(frames: np.ndarray) -> np.ndarray:
    """Sign changes (``x >= 0`` vs ``x < 0``) divided by the frame length."""
    frames = np.atleast_2d(frames)
    if frames.shape[1] == 0:
        return np.zeros(len(frames))
    signs = frames >= 0
    crossings = np.count_nonzero(signs[:, 1:] != signs[:, :-1], axis=1)
    return crossings / frames.shape[1]


def envelope(frames: np.ndarray) -> np.ndarray:
    """Peak absolute amplitude per frame."""
    frames = np.atleast_2d(frames)
    if frames.shape[1] == 0:
        return np.zeros(len(frames))
    return np.max(np.abs(frames), axis=1)


def autocorrelation(frames: np.ndarray, plan: FFTPlan | None = None) -> np.ndarray:
    """
    Biased autocorrelation ``r[l] = sum_i x[i] x[i + l] / N`` for ``l < N``.

    Computed through the power spectrum with zero-padding to at least ``2N``
    so the circular correlation equals the linear one.
    """
    frames = np.atleast_2d(frames)
    n_frames, n = frames.shape
    if plan is None:
        plan = FFTPlan.for_length(2 * n)
    if plan.size < 2 * n - 1:
        raise ValueError(f"autocorrelation plan too small: {plan.size} < {2 * n - 1}")

    out = np.zeros((n_frames, n), dtype=np.float32)
    for start in range(0, n_frames, CHUNK_FRAMES):
        stop = min(start + CHUNK_FRAMES, n_frames)
        spectrum = plan.transform_frames(frames[start:stop])
        power = spectrum.real ** 2 + spectrum.imag ** 2
        acf = plan.inverse_frames(power).real[:, :n]
        out[start:stop] = acf / n
    return out


def analyze_temporal(block: FrameBlock, plan: FFTPlan | None = None) -> TemporalFeatures:
    """Compute the temporal descriptors for every frame of ``block``."""
    frames = block.frames
    acf = autocorrelation(frames, plan)
    acf.flags.writeable = False
    return TemporalFeatures(
        energy=frame_energy(frames),
        zcr=zero_crossing_rate(frames),
        autocorrelation=acf,
        envelope=envelope(frames),
    )
