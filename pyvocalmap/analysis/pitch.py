"""
Pitch Estimator - Dual-method f0 tracking.

Two independent estimators are fused per frame:
- Autocorrelation (time domain): strongest periodicity lag
- Cepstrum (frequency domain): most prominent quefrency of the log spectrum

Both search the same lag window (vocal range, 80-800 Hz by default). The
fused f0 is the confidence-weighted mean of the candidates; the final
confidence is re-measured as the frame's normalized self-correlation at the
fused period.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np
from scipy.signal import find_peaks

from pyvocalmap.analysis import constants as C
from pyvocalmap.analysis.config import AnalysisConfig
from pyvocalmap.analysis.fft import FFTPlan
from pyvocalmap.analysis.types import FrameBlock, PitchTrack, SpectralFeatures, TemporalFeatures

CHUNK_FRAMES = 256


class PitchCandidate(NamedTuple):
    f0: float
    confidence: float


NO_PITCH = PitchCandidate(0.0, 0.0)


def _refine_peak(values: np.ndarray, idx: int) -> float:
    """Parabolic interpolation of a peak position."""
    if idx <= 0 or idx >= len(values) - 1:
        return float(idx)
    a, b, c = float(values[idx - 1]), float(values[idx]), float(values[idx + 1])
    denom = a - 2.0 * b + c
    if abs(denom) < C.EPS:
        return float(idx)
    shift = 0.5 * (a - c) / denom
    return idx + max(-0.5, min(0.5, shift))


def _best_lag(values: np.ndarray, min_lag: int, max_lag: int) -> int:
    """
    Index of the highest local maximum of ``values`` inside ``[min_lag, max_lag)``.

    Falls back to the plain maximum when the window holds no interior peak.
    Returns -1 when the window is empty.
    """
    max_lag = min(max_lag, len(values))
    if max_lag <= min_lag:
        return -1
    window = values[min_lag:max_lag]
    peaks, _ = find_peaks(window)
    if len(peaks):
        return min_lag + int(peaks[np.argmax(window[peaks])])
    return min_lag + int(np.argmax(window))


def autocorrelation_pitch(acf: np.ndarray, sample_rate: int, min_lag: int, max_lag: int) -> PitchCandidate:
    """f0 from the strongest autocorrelation peak; confidence = peak / zero-lag value."""
    r0 = float(acf[0]) if len(acf) else 0.0
    if r0 <= C.EPS:
        return NO_PITCH

    lag = _best_lag(acf, min_lag, max_lag)
    if lag < 0 or acf[lag] <= 0:
        return NO_PITCH

    precise_lag = _refine_peak(acf, lag)
    f0 = sample_rate / precise_lag
    confidence = min(1.0, max(0.0, float(acf[lag]) / r0))
    return PitchCandidate(f0, confidence)


def log_spectrum(magnitude: np.ndarray, floor: float = C.LOG_MAGNITUDE_FLOOR) -> np.ndarray:
    """Full symmetric log-magnitude spectrum rebuilt from the bins up to Nyquist."""
    half = np.log(np.maximum(np.asarray(magnitude, dtype=np.float64), floor))
    mirrored = half[..., -2:0:-1]
    return np.concatenate([half, mirrored], axis=-1)


def cepstral_pitch(
    cepstrum: np.ndarray,
    sample_rate: int,
    min_lag: int,
    max_lag: int,
    min_significance: float = C.CEPSTRAL_MIN_SIGNIFICANCE,
) -> PitchCandidate:
    """
    f0 from the most prominent quefrency peak of a real cepstrum magnitude.

    Ranking by prominence keeps the slowly decaying spectral-envelope part of
    the cepstrum from outbidding the pitch peak near the low end of the
    window. A peak whose prominence stays under ``min_significance``
    standard deviations of the window is noise (a pure tone has no
    rahmonics) and gives no candidate. Confidence is the peak normalized by
    the largest cepstral value over quefrencies ``1 .. max_lag`` (the
    zeroth coefficient is the mean log level).
    """
    upper = min(max_lag, len(cepstrum))
    if upper <= max(1, min_lag):
        return NO_PITCH
    local_max = float(np.max(cepstrum[1:upper]))
    if local_max <= C.EPS:
        return NO_PITCH

    window = cepstrum[min_lag:upper]
    peaks, props = find_peaks(window, prominence=0)
    if len(peaks) == 0:
        return NO_PITCH
    best = int(np.argmax(props["prominences"]))
    spread = float(np.std(window))
    if spread <= C.EPS or props["prominences"][best] < min_significance * spread:
        return NO_PITCH

    q = min_lag + int(peaks[best])
    if cepstrum[q] <= 0:
        return NO_PITCH

    precise_q = _refine_peak(cepstrum, q)
    f0 = sample_rate / precise_q
    confidence = min(1.0, float(cepstrum[q]) / local_max)
    return PitchCandidate(f0, confidence)


def fuse_pitch(a: PitchCandidate, b: PitchCandidate) -> float:
    """Confidence-weighted mean of two f0 candidates (0 when both are unsure)."""
    total = a.confidence + b.confidence
    if total <= 0:
        return 0.0
    return (a.f0 * a.confidence + b.f0 * b.confidence) / total


def periodicity_confidence(frame: np.ndarray, f0: float, sample_rate: int) -> float:
    """Normalized self-correlation of ``frame`` at the period of ``f0``."""
    if f0 <= 0:
        return 0.0
    period = int(round(sample_rate / f0))
    if period <= 0 or period >= len(frame):
        return 0.0
    energy = float(np.dot(frame, frame))
    if energy <= C.EPS:
        return 0.0
    corr = float(np.dot(frame[:-period], frame[period:]))
    return min(1.0, max(0.0, corr / energy))


def is_voiced(f0: float, confidence: float, config: AnalysisConfig) -> bool:
    return confidence > config.voicing_threshold and config.min_pitch_hz < f0 < config.max_pitch_hz


def estimate_pitch(
    block: FrameBlock,
    temporal: TemporalFeatures,
    spectral: SpectralFeatures,
    config: AnalysisConfig,
    plan: FFTPlan | None = None,
) -> PitchTrack:
    """
    Fused f0, confidence and voicing decision for every frame.

    ``f0`` is reported as 0 for unvoiced frames.
    """
    n_frames = block.n_frames
    sr = block.sample_rate
    min_lag, max_lag = config.pitch_lag_bounds(sr)
    if plan is None:
        plan = FFTPlan(spectral.n_fft)

    f0 = np.zeros(n_frames, dtype=np.float64)
    confidence = np.zeros(n_frames, dtype=np.float64)
    voicing = np.zeros(n_frames, dtype=bool)

    for start in range(0, n_frames, CHUNK_FRAMES):
        stop = min(start + CHUNK_FRAMES, n_frames)
        mag = spectral.magnitude[start:stop]
        cepstra = np.abs(plan.transform_frames(log_spectrum(mag)))
        silent = np.max(mag, axis=1) <= C.EPS

        for j, i in enumerate(range(start, stop)):
            acf_candidate = autocorrelation_pitch(temporal.autocorrelation[i], sr, min_lag, max_lag)
            cep_candidate = NO_PITCH if silent[j] else cepstral_pitch(cepstra[j], sr, min_lag, max_lag)

            fused = fuse_pitch(acf_candidate, cep_candidate)
            conf = periodicity_confidence(block.frames[i], fused, sr)
            voiced = is_voiced(fused, conf, config)

            confidence[i] = conf
            voicing[i] = voiced
            f0[i] = fused if voiced else 0.0

    return PitchTrack(f0=f0, confidence=confidence, voicing=voicing)
