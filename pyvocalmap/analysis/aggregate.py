"""
Aggregator - Track-level vocal statistics.

Overall confidence and density come from the vocal segments; the voice
quality summary is computed over voiced frames only.
"""

from __future__ import annotations

import numpy as np

from pyvocalmap.analysis import constants as C
from pyvocalmap.analysis.types import (
    FormantCharacteristics,
    FormantTrack,
    HarmonicFeatures,
    PitchCharacteristics,
    PitchTrack,
    SpectralFeatures,
    TemporalFeatures,
    VocalCharacteristics,
    VocalSegment,
)


def _finite(value: float) -> float:
    return float(np.nan_to_num(value, nan=0.0, posinf=0.0, neginf=0.0))


def _mean(values: np.ndarray) -> float:
    return _finite(np.mean(values)) if len(values) else 0.0


def overall_confidence(segments: tuple[VocalSegment, ...]) -> float:
    """Mean segment confidence, boosted by 10% and capped at 0.95."""
    if not segments:
        return 0.0
    mean = np.mean([s.confidence for s in segments])
    return _finite(min(C.MAX_OVERALL_CONFIDENCE, C.CONFIDENCE_BOOST * mean))


def vocal_density(segments: tuple[VocalSegment, ...], duration: float) -> float:
    """Fraction of the track covered by vocal segments."""
    if duration <= 0 or not segments:
        return 0.0
    total = sum(s.duration for s in segments)
    return _finite(min(1.0, max(0.0, total / duration)))


def semitone_range(f0: np.ndarray) -> float:
    if len(f0) == 0:
        return 0.0
    lo, hi = float(np.min(f0)), float(np.max(f0))
    return _finite(12.0 * np.log2(hi / lo)) if lo > 0 else 0.0


def jitter(f0: np.ndarray) -> float:
    """Mean relative change of f0 between consecutive voiced frames."""
    f0 = np.asarray(f0, dtype=np.float64)
    if len(f0) < 2:
        return 0.0
    prev, cur = f0[:-1], f0[1:]
    valid = (prev > 0) & (cur > 0)
    rel = np.divide(np.abs(cur - prev), prev, out=np.zeros_like(prev), where=valid)
    return _finite(rel.sum() / (len(f0) - 1))


def shimmer(amplitudes: np.ndarray) -> float:
    """Mean absolute amplitude change between consecutive frames over mean amplitude."""
    amplitudes = np.asarray(amplitudes, dtype=np.float64)
    if len(amplitudes) < 2:
        return 0.0
    mean_amp = float(np.mean(amplitudes))
    if mean_amp <= C.EPS:
        return 0.0
    return _finite(np.mean(np.abs(np.diff(amplitudes))) / mean_amp)


def _formant_mean(values: np.ndarray) -> float:
    return _mean(values[values > 0])


def vocal_characteristics(
    pitch: PitchTrack,
    formants: FormantTrack,
    harmonic: HarmonicFeatures,
    spectral: SpectralFeatures,
    temporal: TemporalFeatures,
) -> VocalCharacteristics:
    """Voice quality summary over voiced frames; the all-zero default when none are voiced."""
    voiced = np.asarray(pitch.voicing, dtype=bool)
    if not voiced.any():
        return VocalCharacteristics.default()

    f0 = pitch.f0[voiced]
    hnr = _mean(harmonic.harmonic_ratio[voiced])
    frame_jitter = jitter(f0)

    return VocalCharacteristics(
        pitch=PitchCharacteristics(
            fundamental=_mean(f0),
            range=semitone_range(f0),
            variance=_finite(np.var(f0)),
        ),
        formants=FormantCharacteristics(
            f1=_formant_mean(formants.f1[voiced]),
            f2=_formant_mean(formants.f2[voiced]),
            f3=_formant_mean(formants.f3[voiced]),
        ),
        spectral_centroid=_mean(spectral.centroid[voiced]),
        harmonic_to_noise_ratio=hnr,
        jitter=frame_jitter,
        shimmer=shimmer(temporal.envelope[voiced]),
        breathiness=min(1.0, max(0.0, 1.0 - hnr)),
        roughness=max(0.0, C.ROUGHNESS_JITTER_SCALE * frame_jitter),
    )
