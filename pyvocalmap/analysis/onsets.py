"""
Onset Detector - Energy rises inside vocal segments.

An onset is a frame whose energy exceeds the previous frame's by more than
the onset threshold. The size of that jump is both its strength and its
spectral change, and the two decide whether it marks a phrase, a word or a
syllable.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from pyvocalmap.analysis import constants as C
from pyvocalmap.analysis.types import OnsetEvent, OnsetType, TemporalFeatures, VocalSegment


class OnsetCandidate(NamedTuple):
    offset: int  # Frames after the first frame of the window
    confidence: float
    spectral_change: float


def classify_onset(confidence: float, spectral_change: float) -> OnsetType:
    if confidence > C.PHRASE_CONFIDENCE and spectral_change > C.PHRASE_SPECTRAL_CHANGE:
        return OnsetType.PHRASE
    if confidence > C.WORD_CONFIDENCE:
        return OnsetType.WORD
    return OnsetType.SYLLABLE


def energy_onsets(energy: np.ndarray, threshold: float = C.ONSET_THRESHOLD) -> list[OnsetCandidate]:
    """Frames of a window whose energy jump over the previous frame exceeds ``threshold``."""
    energy = np.asarray(energy, dtype=np.float64)
    if len(energy) < 2:
        return []

    delta = np.diff(energy)
    hits = np.flatnonzero(delta > threshold) + 1
    return [
        OnsetCandidate(
            offset=int(i),
            confidence=min(1.0, float(delta[i - 1]) * C.ONSET_CONFIDENCE_SCALE),
            spectral_change=float(delta[i - 1]),
        )
        for i in hits
    ]


def detect_vocal_onsets(
    segments: tuple[VocalSegment, ...],
    temporal: TemporalFeatures,
    sample_rate: int,
    hop_size: int,
    threshold: float = C.ONSET_THRESHOLD,
) -> tuple[OnsetEvent, ...]:
    """Onsets of every vocal segment, sorted by time."""
    n_frames = len(temporal.energy)
    hop_duration = hop_size / sample_rate
    onsets = []

    for segment in segments:
        start = min(n_frames, int(np.floor(segment.start_time / hop_duration + C.FRAME_TIME_TOLERANCE)))
        end = min(n_frames, int(np.floor(segment.end_time / hop_duration + C.FRAME_TIME_TOLERANCE)))

        for candidate in energy_onsets(temporal.energy[start:end], threshold):
            onsets.append(
                OnsetEvent(
                    time=segment.start_time + candidate.offset * hop_duration,
                    confidence=candidate.confidence,
                    type=classify_onset(candidate.confidence, candidate.spectral_change),
                )
            )

    onsets.sort(key=lambda o: o.time)
    return tuple(onsets)
