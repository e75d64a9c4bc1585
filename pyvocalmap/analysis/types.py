"""
Record types for the vocal analysis pipeline.

Per-frame features are stored column-wise: one array per feature, all of the
same length (the number of frames). Result records are small frozen
dataclasses with closed enumerations for every categorical field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

import numpy as np

from pyvocalmap.analysis import constants as C


class VocalType(str, Enum):
    LEAD = "lead"
    HARMONY = "harmony"
    BACKING = "backing"
    RAP = "rap"
    WHISPER = "whisper"
    SHOUT = "shout"


class OnsetType(str, Enum):
    PHRASE = "phrase"
    WORD = "word"
    SYLLABLE = "syllable"


class Section(str, Enum):
    INTRO = "intro"
    VERSE = "verse"
    CHORUS = "chorus"
    BRIDGE = "bridge"
    OUTRO = "outro"


def _check_lengths(owner: str, n: int, **arrays: np.ndarray) -> None:
    for name, arr in arrays.items():
        if len(arr) != n:
            raise ValueError(f"{owner}.{name} length mismatch ({len(arr)} != {n})")


# ============================================================================
# PER-FRAME FEATURE CONTAINERS
# ============================================================================


@dataclass(slots=True, frozen=True)
class FrameBlock:
    """Immutable block of overlapping, Hann-windowed analysis frames."""

    frames: np.ndarray       # (n_frames, frame_size), read-only
    start_times: np.ndarray  # Frame start in seconds
    frame_size: int
    hop_size: int
    sample_rate: int

    def __post_init__(self):
        if self.frames.ndim != 2 or self.frames.shape[1] != self.frame_size:
            raise ValueError(f"FrameBlock.frames shape mismatch: {self.frames.shape} for frame_size {self.frame_size}")
        _check_lengths("FrameBlock", len(self.frames), start_times=self.start_times)

    @property
    def n_frames(self) -> int:
        return self.frames.shape[0]

    @property
    def hop_duration(self) -> float:
        return self.hop_size / self.sample_rate

    def __len__(self) -> int:
        return self.n_frames


@dataclass(slots=True, frozen=True)
class SpectralFeatures:
    """Magnitude/phase spectra (first half, up to Nyquist) and scalar summaries."""

    magnitude: np.ndarray  # (n_frames, n_fft // 2 + 1)
    phase: np.ndarray      # (n_frames, n_fft // 2 + 1)
    centroid: np.ndarray   # Hz
    rolloff: np.ndarray    # Hz
    flux: np.ndarray       # Half-wave rectified magnitude increase
    flatness: np.ndarray   # Geometric / arithmetic mean, 0..1
    n_fft: int
    sample_rate: int

    def __post_init__(self):
        n = len(self.magnitude)
        _check_lengths(
            "SpectralFeatures", n,
            phase=self.phase, centroid=self.centroid, rolloff=self.rolloff,
            flux=self.flux, flatness=self.flatness,
        )

    @property
    def n_frames(self) -> int:
        return len(self.magnitude)


@dataclass(slots=True, frozen=True)
class HarmonicFeatures:
    harmonic_ratio: np.ndarray     # 0..1
    inharmonicity: np.ndarray      # >= 0, 1 when fewer than two peaks
    peaks: tuple[np.ndarray, ...]  # Spectral peak bin indices per frame
    harmonic_strength: np.ndarray  # 0..1

    def __post_init__(self):
        n = len(self.harmonic_ratio)
        _check_lengths(
            "HarmonicFeatures", n,
            inharmonicity=self.inharmonicity, peaks=self.peaks,
            harmonic_strength=self.harmonic_strength,
        )


@dataclass(slots=True, frozen=True)
class TemporalFeatures:
    energy: np.ndarray           # Mean squared amplitude
    zcr: np.ndarray              # Sign changes per sample, 0..1
    autocorrelation: np.ndarray  # (n_frames, frame_size) biased lag series
    envelope: np.ndarray         # Peak absolute amplitude

    def __post_init__(self):
        n = len(self.energy)
        _check_lengths(
            "TemporalFeatures", n,
            zcr=self.zcr, autocorrelation=self.autocorrelation, envelope=self.envelope,
        )


@dataclass(slots=True, frozen=True)
class PitchTrack:
    f0: np.ndarray          # Hz, 0 for unvoiced frames
    confidence: np.ndarray  # 0..1
    voicing: np.ndarray     # bool

    def __post_init__(self):
        _check_lengths("PitchTrack", len(self.f0), confidence=self.confidence, voicing=self.voicing)


@dataclass(slots=True, frozen=True)
class FormantTrack:
    frequencies: np.ndarray  # (n_frames, 3) Hz, 0 where missing
    bandwidths: np.ndarray   # (n_frames, 3) Hz, 0 where missing

    def __post_init__(self):
        _check_lengths("FormantTrack", len(self.frequencies), bandwidths=self.bandwidths)

    @property
    def f1(self) -> np.ndarray:
        return self.frequencies[:, 0]

    @property
    def f2(self) -> np.ndarray:
        return self.frequencies[:, 1]

    @property
    def f3(self) -> np.ndarray:
        return self.frequencies[:, 2]


# ============================================================================
# RESULT RECORDS
# ============================================================================


@dataclass(slots=True, frozen=True)
class VocalSegment:
    start_time: float
    end_time: float
    confidence: float
    vocal_intensity: float
    vocal_type: VocalType

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def overlaps(self, start: float, end: float) -> bool:
        return self.start_time < end and self.end_time > start

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "confidence": self.confidence,
            "vocal_intensity": self.vocal_intensity,
            "vocal_type": self.vocal_type.value,
        }


@dataclass(slots=True, frozen=True)
class OnsetEvent:
    time: float
    confidence: float
    type: OnsetType

    def to_dict(self) -> dict:
        return {"time": self.time, "confidence": self.confidence, "type": self.type.value}


@dataclass(slots=True, frozen=True)
class InstrumentalSegment:
    start_time: float
    end_time: float
    confidence: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def to_dict(self) -> dict:
        return {"start_time": self.start_time, "end_time": self.end_time, "confidence": self.confidence}


@dataclass(slots=True, frozen=True)
class SectionSummary:
    has_vocals: bool
    duration: float

    def to_dict(self) -> dict:
        return {"has_vocals": self.has_vocals, "duration": self.duration}


@dataclass(slots=True, frozen=True)
class StructuralBreakdown:
    """Five fixed song-structure buckets partitioning the track duration."""

    intro: SectionSummary
    verse: SectionSummary
    chorus: SectionSummary
    bridge: SectionSummary
    outro: SectionSummary

    @classmethod
    def empty(cls, duration: float = 0.0) -> StructuralBreakdown:
        """All-instrumental breakdown over ``duration``."""
        bucket = duration / C.N_SECTIONS
        summaries = [SectionSummary(False, bucket) for _ in range(C.N_SECTIONS - 1)]
        summaries.append(SectionSummary(False, duration - bucket * (C.N_SECTIONS - 1)))
        return cls(*summaries)

    def __iter__(self) -> Iterator[tuple[Section, SectionSummary]]:
        for section in Section:
            yield section, getattr(self, section.value)

    @property
    def total_duration(self) -> float:
        return sum(summary.duration for _, summary in self)

    def to_dict(self) -> dict:
        return {section.value: summary.to_dict() for section, summary in self}


@dataclass(slots=True, frozen=True)
class PitchCharacteristics:
    fundamental: float = 0.0  # Mean f0 of voiced frames (Hz)
    range: float = 0.0        # Semitones between lowest and highest f0
    variance: float = 0.0     # Hz^2

    def to_dict(self) -> dict:
        return {"fundamental": self.fundamental, "range": self.range, "variance": self.variance}


@dataclass(slots=True, frozen=True)
class FormantCharacteristics:
    f1: float = 0.0  # Vowel openness
    f2: float = 0.0  # Vowel frontness
    f3: float = 0.0  # Consonant clarity

    def to_dict(self) -> dict:
        return {"f1": self.f1, "f2": self.f2, "f3": self.f3}


@dataclass(slots=True, frozen=True)
class VocalCharacteristics:
    """Voice quality summary aggregated over voiced frames."""

    pitch: PitchCharacteristics = field(default_factory=PitchCharacteristics)
    formants: FormantCharacteristics = field(default_factory=FormantCharacteristics)
    spectral_centroid: float = 0.0        # Vocal brightness (Hz)
    harmonic_to_noise_ratio: float = 0.0  # Mean harmonic ratio, 0..1
    jitter: float = 0.0                   # Relative cycle-to-cycle f0 perturbation
    shimmer: float = 0.0                  # Relative frame-to-frame amplitude perturbation
    breathiness: float = 0.0              # 1 - harmonic-to-noise ratio
    roughness: float = 0.0                # Scaled jitter

    @classmethod
    def default(cls) -> VocalCharacteristics:
        """All-zero record used when no frame is voiced."""
        return cls()

    def to_dict(self) -> dict:
        return {
            "pitch": self.pitch.to_dict(),
            "formants": self.formants.to_dict(),
            "spectral_centroid": self.spectral_centroid,
            "harmonic_to_noise_ratio": self.harmonic_to_noise_ratio,
            "jitter": self.jitter,
            "shimmer": self.shimmer,
            "breathiness": self.breathiness,
            "roughness": self.roughness,
        }


@dataclass(slots=True, frozen=True)
class VocalFeatures:
    """Immutable result of one vocal analysis pass."""

    vocal_confidence: float
    vocal_density: float
    vocal_segments: tuple[VocalSegment, ...]
    vocal_characteristics: VocalCharacteristics
    vocal_onsets: tuple[OnsetEvent, ...]
    instrumental_segments: tuple[InstrumentalSegment, ...]
    breakdown: StructuralBreakdown
    duration: float

    @property
    def has_vocals(self) -> bool:
        return self.vocal_confidence > C.HAS_VOCALS_CONFIDENCE

    @classmethod
    def empty(cls, duration: float, instrumental: tuple[InstrumentalSegment, ...] = ()) -> VocalFeatures:
        """The "no vocals" record."""
        return cls(
            vocal_confidence=0.0,
            vocal_density=0.0,
            vocal_segments=(),
            vocal_characteristics=VocalCharacteristics.default(),
            vocal_onsets=(),
            instrumental_segments=instrumental,
            breakdown=StructuralBreakdown.empty(duration),
            duration=duration,
        )

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dictionary."""
        return {
            "has_vocals": self.has_vocals,
            "vocal_confidence": self.vocal_confidence,
            "vocal_density": self.vocal_density,
            "duration": self.duration,
            "vocal_segments": [s.to_dict() for s in self.vocal_segments],
            "vocal_characteristics": self.vocal_characteristics.to_dict(),
            "vocal_onsets": [o.to_dict() for o in self.vocal_onsets],
            "instrumental_segments": [s.to_dict() for s in self.instrumental_segments],
            "breakdown": self.breakdown.to_dict(),
        }

    def summary(self) -> str:
        """Human-readable summary."""
        pitch = self.vocal_characteristics.pitch
        sections = ", ".join(
            section.value for section, summary in self.breakdown if summary.has_vocals
        ) or "none"

        lines = [
            f"Vocals:     {'yes' if self.has_vocals else 'no'} ({self.vocal_confidence:.1%} confidence)",
            f"Density:    {self.vocal_density:.1%} of {self.duration:.1f}s",
            f"Segments:   {len(self.vocal_segments)} vocal, {len(self.instrumental_segments)} instrumental",
            f"Onsets:     {len(self.vocal_onsets)}",
            f"Pitch:      {pitch.fundamental:.1f} Hz mean, {pitch.range:.1f} semitone range",
            f"Sections:   {sections}",
        ]
        return "\n".join(lines)
