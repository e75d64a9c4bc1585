"""
Main Vocal Analysis Entry Point.

Orchestrates the complete vocal analysis pipeline:
1. Framing and feature extraction (spectral, harmonic, temporal)
2. Pitch and formant tracking
3. Per-frame vocal probability with the scorer ensemble
4. Segmentation, onsets and structure
5. Aggregation into a VocalFeatures record
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from pyvocalmap.audio import AudioBuffer

from pyvocalmap.analysis.aggregate import overall_confidence, vocal_characteristics, vocal_density
from pyvocalmap.analysis.config import AnalysisConfig
from pyvocalmap.analysis.fft import FFTPlan
from pyvocalmap.analysis.formants import analyze_formants
from pyvocalmap.analysis.framing import extract_frames, hann_window
from pyvocalmap.analysis.harmonic import analyze_harmonics
from pyvocalmap.analysis.onsets import detect_vocal_onsets
from pyvocalmap.analysis.pitch import estimate_pitch
from pyvocalmap.analysis.scorers import VocalScorerEnsemble
from pyvocalmap.analysis.segmentation import find_instrumental_segments, segment_vocals
from pyvocalmap.analysis.spectral import extract_spectral_features
from pyvocalmap.analysis.structure import analyze_structure
from pyvocalmap.analysis.temporal import analyze_temporal
from pyvocalmap.analysis.types import VocalFeatures


@dataclass(slots=True, frozen=True)
class AnalysisTables:
    """Read-only tables shared by every analysis run with the same config."""

    window: np.ndarray
    spectrum_plan: FFTPlan
    autocorrelation_plan: FFTPlan
    ensemble: VocalScorerEnsemble

    @classmethod
    def build(cls, config: AnalysisConfig) -> AnalysisTables:
        return cls(
            window=hann_window(config.frame_size),
            spectrum_plan=FFTPlan.for_length(config.frame_size),
            autocorrelation_plan=FFTPlan.for_length(2 * config.frame_size),
            ensemble=VocalScorerEnsemble(),
        )


def analyze_vocals(
    buffer: AudioBuffer,
    config: AnalysisConfig | None = None,
    tables: AnalysisTables | None = None,
) -> VocalFeatures:
    """
    Map the vocal content of a decoded audio buffer.

    The pipeline:

    1. **Feature Extraction**: Hann-windowed frames, own FFT, spectral
       centroid/rolloff/flux/flatness, harmonic ratio and inharmonicity,
       energy, zero-crossing rate and autocorrelation.

    2. **Pitch & Formants**: autocorrelation and cepstral f0 fused per
       frame; LPC envelope resonances F1-F3.

    3. **Scoring**: weighted spectral/harmonic/temporal scorers give the
       vocal probability of each frame.

    4. **Segmentation**: hysteresis runs above the vocal threshold, minimum
       duration filter, vocal type, onsets, instrumental gaps and the
       five-section structure.

    5. **Aggregation**: overall confidence, density and voice quality
       summary over voiced frames.

    Args:
        buffer: Decoded audio (any channel count; channels are averaged)
        config: Analysis parameters, defaults when omitted
        tables: Prebuilt window and FFT tables for ``config``

    Returns:
        VocalFeatures for the whole buffer. Buffers shorter than one frame
        give the "no vocals" record.
    """
    config = config or AnalysisConfig()
    tables = tables or AnalysisTables.build(config)
    t0 = time.perf_counter()

    sr = buffer.sample_rate
    duration = buffer.duration
    signal = buffer.to_mono()

    # ===== PHASE 1: Feature Extraction =====
    block = extract_frames(signal, sr, config.frame_size, config.hop_size, tables.window)
    logging.info(f"Analyzing {duration:.2f}s at {sr} Hz: {block.n_frames} frames")

    if block.n_frames == 0:
        logging.info("Buffer shorter than one analysis frame, no vocals reported")
        return VocalFeatures.empty(duration, find_instrumental_segments((), duration))

    spectral = extract_spectral_features(block, tables.spectrum_plan, config.rolloff_fraction)
    harmonic = analyze_harmonics(spectral, config.min_peak_magnitude, config.peak_relative_height)
    temporal = analyze_temporal(block, tables.autocorrelation_plan)
    logging.info(f"Feature extraction: {time.perf_counter() - t0:.3f}s")

    # ===== PHASE 2: Pitch & Formants =====
    t1 = time.perf_counter()
    pitch = estimate_pitch(block, temporal, spectral, config, tables.spectrum_plan)
    formants = analyze_formants(spectral, config, tables.spectrum_plan)
    logging.info(
        f"Pitch & formants: {int(pitch.voicing.sum())}/{block.n_frames} voiced frames "
        f"in {time.perf_counter() - t1:.3f}s"
    )

    # ===== PHASE 3: Scoring =====
    t2 = time.perf_counter()
    probabilities = tables.ensemble.score_arrays(spectral, harmonic, temporal)
    logging.debug(f"Vocal probability: mean {float(np.mean(probabilities)):.3f}")

    # ===== PHASE 4: Segmentation =====
    segments = segment_vocals(
        probabilities,
        sr,
        config.hop_size,
        config.vocal_threshold,
        config.min_segment_frames(sr),
        duration,
    )
    instrumental = find_instrumental_segments(segments, duration)
    onsets = detect_vocal_onsets(segments, temporal, sr, config.hop_size, config.onset_threshold)
    breakdown = analyze_structure(segments, duration)
    logging.info(
        f"Found {len(segments)} vocal segments, {len(onsets)} onsets in {time.perf_counter() - t2:.3f}s"
    )

    # ===== PHASE 5: Aggregation =====
    features = VocalFeatures(
        vocal_confidence=overall_confidence(segments),
        vocal_density=vocal_density(segments, duration),
        vocal_segments=segments,
        vocal_characteristics=vocal_characteristics(pitch, formants, harmonic, spectral, temporal),
        vocal_onsets=onsets,
        instrumental_segments=instrumental,
        breakdown=breakdown,
        duration=duration,
    )

    logging.info(f"Total: {time.perf_counter() - t0:.3f}s, vocal confidence {features.vocal_confidence:.3f}")
    return features
