"""
Segmenter - Vocal probability series -> labeled vocal segments.

A two-state machine walks the per-frame probabilities:
- INSTRUMENTAL -> IN_VOCAL when a frame rises above the threshold
- IN_VOCAL -> INSTRUMENTAL when a frame falls to or below it

Each closed run becomes a VocalSegment only if it spans the minimum number
of frames. The gaps between segments are reported as instrumental segments.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple

import numpy as np

from pyvocalmap.analysis import constants as C
from pyvocalmap.analysis.types import InstrumentalSegment, VocalSegment, VocalType


class SegmenterState(Enum):
    INSTRUMENTAL = "instrumental"
    IN_VOCAL = "in_vocal"


class VocalRun(NamedTuple):
    """Frames ``[start, end)`` above threshold; ``open_ended`` if the buffer ended mid-run."""

    start: int
    end: int
    open_ended: bool = False

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(slots=True, frozen=True)
class SegmenterMachine:
    state: SegmenterState = SegmenterState.INSTRUMENTAL
    start: int = 0


def step(
    machine: SegmenterMachine,
    index: int,
    probability: float,
    threshold: float = C.VOCAL_THRESHOLD,
) -> tuple[SegmenterMachine, VocalRun | None]:
    """Feed one frame; returns the next machine and the run it closed, if any."""
    if machine.state is SegmenterState.INSTRUMENTAL:
        if probability > threshold:
            return SegmenterMachine(SegmenterState.IN_VOCAL, index), None
        return machine, None

    if probability <= threshold:
        return replace(machine, state=SegmenterState.INSTRUMENTAL), VocalRun(machine.start, index)
    return machine, None


def finish(machine: SegmenterMachine, n_frames: int) -> VocalRun | None:
    """Flush a run still open when the frames run out."""
    if machine.state is SegmenterState.IN_VOCAL:
        return VocalRun(machine.start, n_frames, open_ended=True)
    return None


def find_vocal_runs(probabilities: np.ndarray, threshold: float = C.VOCAL_THRESHOLD) -> list[VocalRun]:
    """All above-threshold runs, in order, regardless of length."""
    runs = []
    machine = SegmenterMachine()
    for i, p in enumerate(probabilities):
        machine, closed = step(machine, i, float(p), threshold)
        if closed is not None:
            runs.append(closed)
    last = finish(machine, len(probabilities))
    if last is not None:
        runs.append(last)
    return runs


def classify_vocal_type(probabilities: np.ndarray, intensity: float) -> VocalType:
    """Decision tree over mean, population variance and peak probability of a run."""
    probabilities = np.asarray(probabilities, dtype=np.float64)
    mean = float(np.mean(probabilities))
    variance = float(np.var(probabilities))

    if intensity > C.SHOUT_INTENSITY and variance > C.SHOUT_VARIANCE:
        return VocalType.SHOUT
    if mean < C.WHISPER_MEAN and intensity < C.WHISPER_INTENSITY:
        return VocalType.WHISPER
    if variance > C.RAP_VARIANCE:
        return VocalType.RAP
    if mean > C.LEAD_MEAN and intensity > C.LEAD_INTENSITY:
        return VocalType.LEAD
    if mean > C.HARMONY_MEAN:
        return VocalType.HARMONY
    return VocalType.BACKING


def segment_vocals(
    probabilities: np.ndarray,
    sample_rate: int,
    hop_size: int,
    threshold: float = C.VOCAL_THRESHOLD,
    min_frames: int = 0,
    duration: float | None = None,
) -> tuple[VocalSegment, ...]:
    """
    Turn a probability series into vocal segments.

    Runs shorter than ``min_frames`` are dropped. A run still open at the end
    of the series ends at ``duration`` (the buffer length) when given.
    """
    probabilities = np.asarray(probabilities, dtype=np.float64)
    segments = []

    for run in find_vocal_runs(probabilities, threshold):
        if run.length < max(1, min_frames):
            continue

        probs = probabilities[run.start:run.end]
        intensity = float(np.max(probs))
        start_time = run.start * hop_size / sample_rate
        end_time = run.end * hop_size / sample_rate
        if duration is not None:
            end_time = duration if run.open_ended else min(end_time, duration)
        if end_time <= start_time:
            continue

        segments.append(
            VocalSegment(
                start_time=start_time,
                end_time=end_time,
                confidence=float(np.mean(probs)),
                vocal_intensity=intensity,
                vocal_type=classify_vocal_type(probs, intensity),
            )
        )

    return tuple(segments)


def find_instrumental_segments(
    segments: tuple[VocalSegment, ...],
    duration: float,
) -> tuple[InstrumentalSegment, ...]:
    """
    Instrumental stretches around and between vocal segments.

    Without any vocals the whole track is instrumental. Otherwise only gaps
    long enough to matter are reported: over 1 s at either edge, over 2 s
    between two segments.
    """
    if duration <= 0:
        return ()
    if not segments:
        return (InstrumentalSegment(0.0, duration, C.INSTRUMENTAL_ONLY_CONFIDENCE),)

    out = []
    first, last = segments[0], segments[-1]

    if first.start_time > C.INSTRUMENTAL_EDGE_GAP:
        out.append(InstrumentalSegment(0.0, first.start_time, C.INSTRUMENTAL_EDGE_CONFIDENCE))

    for prev, nxt in zip(segments, segments[1:]):
        if nxt.start_time - prev.end_time > C.INSTRUMENTAL_INNER_GAP:
            out.append(InstrumentalSegment(prev.end_time, nxt.start_time, C.INSTRUMENTAL_INNER_CONFIDENCE))

    if duration - last.end_time > C.INSTRUMENTAL_EDGE_GAP:
        out.append(InstrumentalSegment(last.end_time, duration, C.INSTRUMENTAL_EDGE_CONFIDENCE))

    return tuple(out)
