"""
Tests for analysis/aggregate.py: track-level confidence and voice quality.
"""

import numpy as np
import pytest

from pyvocalmap.analysis.aggregate import (
    jitter,
    overall_confidence,
    semitone_range,
    shimmer,
    vocal_characteristics,
    vocal_density,
)
from pyvocalmap.analysis.types import (
    FormantTrack,
    HarmonicFeatures,
    PitchTrack,
    SpectralFeatures,
    TemporalFeatures,
    VocalCharacteristics,
    VocalSegment,
    VocalType,
)


def seg(start, end, confidence=0.8):
    return VocalSegment(start, end, confidence, confidence, VocalType.LEAD)


def frame_features(voicing, f0, harmonic_ratio, centroid, envelope, formants):
    n = len(voicing)
    pitch = PitchTrack(
        f0=np.asarray(f0, dtype=np.float64),
        confidence=np.where(voicing, 0.9, 0.0),
        voicing=np.asarray(voicing, dtype=bool),
    )
    formant_track = FormantTrack(frequencies=np.asarray(formants, dtype=np.float64), bandwidths=np.zeros((n, 3)))
    harmonic = HarmonicFeatures(
        harmonic_ratio=np.asarray(harmonic_ratio, dtype=np.float64),
        inharmonicity=np.zeros(n),
        peaks=tuple(np.zeros(0, dtype=np.int64) for _ in range(n)),
        harmonic_strength=np.zeros(n),
    )
    spectral = SpectralFeatures(
        magnitude=np.zeros((n, 3)),
        phase=np.zeros((n, 3)),
        centroid=np.asarray(centroid, dtype=np.float64),
        rolloff=np.zeros(n),
        flux=np.zeros(n),
        flatness=np.zeros(n),
        n_fft=4,
        sample_rate=22050,
    )
    temporal = TemporalFeatures(
        energy=np.zeros(n),
        zcr=np.zeros(n),
        autocorrelation=np.zeros((n, 4)),
        envelope=np.asarray(envelope, dtype=np.float64),
    )
    return pitch, formant_track, harmonic, spectral, temporal


class TestTrackLevel:
    def test_confidence_boost_and_cap(self):
        assert overall_confidence((seg(0, 1, 0.5),)) == pytest.approx(0.55)
        assert overall_confidence((seg(0, 1, 0.9), seg(2, 3, 0.9))) == pytest.approx(0.95)
        assert overall_confidence(()) == 0.0

    def test_density(self):
        assert vocal_density((seg(2, 4), seg(7, 9)), 10.0) == pytest.approx(0.4)
        assert vocal_density((seg(0, 8), seg(0, 8)), 10.0) == 1.0
        assert vocal_density((), 10.0) == 0.0
        assert vocal_density((seg(0, 1),), 0.0) == 0.0


class TestVoiceQuality:
    def test_semitone_range(self):
        assert semitone_range(np.array([110.0, 220.0])) == pytest.approx(12.0)
        assert semitone_range(np.array([])) == 0.0

    def test_jitter(self):
        assert jitter(np.array([100.0, 110.0, 99.0])) == pytest.approx(0.1)
        assert jitter(np.array([100.0])) == 0.0

    def test_jitter_skips_unvoiced_pairs(self):
        assert jitter(np.array([100.0, 0.0, 100.0])) == 0.0

    def test_shimmer(self):
        assert shimmer(np.array([1.0, 2.0, 1.0])) == pytest.approx(0.75)
        assert shimmer(np.array([0.0, 0.0])) == 0.0


class TestVocalCharacteristics:
    def test_voiced_frames_only(self):
        features = frame_features(
            voicing=[False, True, True, False],
            f0=[0.0, 200.0, 220.0, 0.0],
            harmonic_ratio=[0.0, 0.6, 0.8, 0.0],
            centroid=[5000.0, 1000.0, 2000.0, 5000.0],
            envelope=[0.0, 0.5, 0.5, 0.0],
            formants=[[0, 0, 0], [500, 1500, 0], [700, 0, 0], [0, 0, 0]],
        )
        vc = vocal_characteristics(*features)

        assert vc.pitch.fundamental == pytest.approx(210.0)
        assert vc.pitch.variance == pytest.approx(100.0)
        assert vc.pitch.range == pytest.approx(12 * np.log2(1.1))
        assert vc.formants.f1 == pytest.approx(600.0)
        assert vc.formants.f2 == pytest.approx(1500.0)
        assert vc.formants.f3 == 0.0
        assert vc.spectral_centroid == pytest.approx(1500.0)
        assert vc.harmonic_to_noise_ratio == pytest.approx(0.7)
        assert vc.breathiness == pytest.approx(0.3)
        assert vc.jitter == pytest.approx(0.1)
        assert vc.roughness == pytest.approx(0.2)
        assert vc.shimmer == 0.0

    def test_no_voiced_frames(self):
        features = frame_features(
            voicing=[False, False],
            f0=[0.0, 0.0],
            harmonic_ratio=[0.5, 0.5],
            centroid=[100.0, 100.0],
            envelope=[0.1, 0.2],
            formants=[[0, 0, 0], [0, 0, 0]],
        )
        assert vocal_characteristics(*features) == VocalCharacteristics.default()
