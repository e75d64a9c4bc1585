"""
Tests for analysis/pitch.py: autocorrelation + cepstral f0 fusion.
"""

import numpy as np
import pytest

from conftest import SR, harmonic_tone, sine_tone
from pyvocalmap.analysis.config import AnalysisConfig
from pyvocalmap.analysis.fft import FFTPlan
from pyvocalmap.analysis.framing import extract_frames
from pyvocalmap.analysis.pitch import (
    NO_PITCH,
    PitchCandidate,
    autocorrelation_pitch,
    cepstral_pitch,
    estimate_pitch,
    fuse_pitch,
    is_voiced,
    log_spectrum,
    periodicity_confidence,
)
from pyvocalmap.analysis.spectral import extract_spectral_features
from pyvocalmap.analysis.temporal import analyze_temporal


def _track(signal, config=None):
    config = config or AnalysisConfig()
    block = extract_frames(signal, SR, config.frame_size, config.hop_size)
    spectral = extract_spectral_features(block)
    temporal = analyze_temporal(block, FFTPlan.for_length(2 * config.frame_size))
    return estimate_pitch(block, temporal, spectral, config)


class TestCandidates:
    def test_autocorrelation_silence(self):
        assert autocorrelation_pitch(np.zeros(512), SR, 27, 275) == NO_PITCH

    def test_autocorrelation_picks_period(self):
        """A periodic lag series peaks at its period."""
        lags = np.arange(512)
        acf = np.cos(2 * np.pi * lags / 100) * (1 - lags / 512)
        f0, conf = autocorrelation_pitch(acf, SR, 27, 275)
        assert f0 == pytest.approx(SR / 100, rel=0.01)
        assert 0.0 < conf <= 1.0

    def test_cepstral_flat_is_no_pitch(self):
        assert cepstral_pitch(np.zeros(2048), SR, 27, 275) == NO_PITCH

    def test_cepstral_picks_prominent_peak(self):
        """A sharp quefrency peak wins over a smooth decay at the window start."""
        cep = np.zeros(2048)
        q = np.arange(1, 300)
        cep[1:300] = 50.0 / q
        cep[150] += 10.0
        f0, conf = cepstral_pitch(cep, SR, 27, 275)
        assert f0 == pytest.approx(SR / 150, rel=0.01)
        assert 0.0 < conf <= 1.0

    def test_cepstral_noise_is_no_pitch(self):
        """Without rahmonics the best peak is not significant."""
        rng = np.random.default_rng(1)
        cep = np.abs(rng.standard_normal(2048))
        assert cepstral_pitch(cep, SR, 27, 275) == NO_PITCH
        assert cepstral_pitch(cep, SR, 27, 275, min_significance=0.0).confidence > 0.0

    def test_log_spectrum_symmetric(self):
        """The rebuilt spectrum has the full length and mirrored bins."""
        full = log_spectrum(np.arange(1.0, 6.0))
        assert full.shape == (8,)
        assert np.allclose(full[1:], full[1:][::-1])

    def test_log_spectrum_floor(self):
        assert log_spectrum(np.zeros(3)).min() == pytest.approx(np.log(1e-10))


class TestFusion:
    def test_weighted_mean(self):
        assert fuse_pitch(PitchCandidate(200.0, 0.75), PitchCandidate(220.0, 0.25)) == pytest.approx(205.0)

    def test_both_unsure(self):
        assert fuse_pitch(NO_PITCH, NO_PITCH) == 0.0

    def test_periodicity_confidence(self):
        """A periodic frame correlates with itself one period later."""
        x = np.sin(2 * np.pi * np.arange(2048) / 100)
        assert periodicity_confidence(x, SR / 100, SR) > 0.9
        assert periodicity_confidence(x, 0.0, SR) == 0.0
        assert periodicity_confidence(np.zeros(2048), 220.0, SR) == 0.0

    def test_voicing_rule(self):
        config = AnalysisConfig()
        assert is_voiced(220.0, 0.9, config)
        assert not is_voiced(220.0, 0.3, config)
        assert not is_voiced(900.0, 0.9, config)
        assert not is_voiced(50.0, 0.9, config)


class TestEstimatePitch:
    @pytest.mark.parametrize("f0", [150.0, 220.0, 400.0])
    def test_harmonic_tone(self, f0):
        """Voiced frames of a harmonic tone report its f0 within 2%."""
        track = _track(harmonic_tone(f0, 1.0))
        assert track.voicing.mean() > 0.9
        assert np.median(track.f0[track.voicing]) == pytest.approx(f0, rel=0.02)
        assert np.all((track.confidence >= 0.0) & (track.confidence <= 1.0))

    @pytest.mark.parametrize("f0", [150.0, 220.0, 400.0])
    def test_pure_sine(self, f0):
        """A sine has no cepstral pitch peak; the autocorrelation estimate carries it."""
        track = _track(sine_tone(f0, 1.0))
        voiced = track.f0[track.voicing]
        assert track.voicing.mean() > 0.9
        assert np.median(voiced) == pytest.approx(f0, rel=0.02)
        assert np.mean(voiced) == pytest.approx(f0, rel=0.02)

    def test_silence_is_unvoiced(self):
        track = _track(np.zeros(SR))
        assert not track.voicing.any()
        assert np.all(track.f0 == 0.0)
        assert np.all(track.confidence == 0.0)

    def test_noise_is_mostly_unvoiced(self):
        rng = np.random.default_rng(0)
        track = _track(0.3 * rng.standard_normal(SR))
        assert track.voicing.mean() < 0.2
