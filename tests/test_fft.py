"""
Tests for analysis/fft.py: iterative radix-2 FFT plans.

Validates:
    - next_pow2 edge cases
    - Forward transform matches numpy.fft.fft
    - Zero-padding, interleaved view and batch transforms
    - Inverse transform and non power-of-two rejection
"""

import numpy as np
import pytest

from pyvocalmap.analysis.fft import FFTPlan, magnitude_phase, next_pow2


class TestNextPow2:
    @pytest.mark.parametrize(
        "n, expected",
        [(0, 1), (1, 1), (2, 2), (3, 4), (1000, 1024), (1024, 1024), (1025, 2048)],
    )
    def test_values(self, n, expected):
        """next_pow2 returns the smallest power of two >= n."""
        assert next_pow2(n) == expected


class TestFFTPlan:
    @pytest.mark.parametrize("size", [1, 2, 8, 64, 1024])
    def test_matches_numpy(self, size):
        """Forward transform agrees with numpy.fft.fft."""
        rng = np.random.default_rng(size)
        x = rng.standard_normal(size)
        result = FFTPlan(size).transform(x)
        expected = np.fft.fft(x)
        assert np.allclose(result, expected, rtol=1e-9, atol=1e-9 * max(1.0, np.abs(expected).max()))

    def test_zero_pads_short_input(self):
        """Input shorter than the plan is zero-padded."""
        x = np.arange(5, dtype=np.float64)
        result = FFTPlan(8).transform(x)
        assert np.allclose(result, np.fft.fft(x, n=8))

    def test_for_length_rounds_up(self):
        """for_length picks the next power of two."""
        assert FFTPlan.for_length(2000).size == 2048

    def test_rejects_non_power_of_two(self):
        """Only power-of-two sizes are accepted."""
        with pytest.raises(ValueError):
            FFTPlan(12)

    def test_interleaved_layout(self):
        """interleaved() returns [re0, im0, re1, im1, ...] of length 2 * size."""
        x = np.array([1.0, 2.0, 0.0, -1.0])
        plan = FFTPlan(4)
        inter = plan.interleaved(x)
        spectrum = np.fft.fft(x)
        assert inter.shape == (8,)
        assert np.allclose(inter[0::2], spectrum.real)
        assert np.allclose(inter[1::2], spectrum.imag)

    def test_transform_frames_matches_rows(self):
        """Batch transform equals transforming each row."""
        rng = np.random.default_rng(1)
        frames = rng.standard_normal((3, 16))
        result = FFTPlan(16).transform_frames(frames)
        assert result.shape == (3, 16)
        assert np.allclose(result, np.fft.fft(frames, axis=1))

    def test_transform_frames_empty_block(self):
        """A block without frames gives an empty result."""
        result = FFTPlan(16).transform_frames(np.zeros((0, 16)))
        assert result.shape == (0, 16)

    def test_inverse_recovers_signal(self):
        """inverse() undoes transform()."""
        rng = np.random.default_rng(2)
        x = rng.standard_normal(32)
        plan = FFTPlan(32)
        assert np.allclose(plan.inverse(plan.transform(x)).real, x)

    def test_tables_are_read_only(self):
        """Precomputed tables cannot be modified in place."""
        plan = FFTPlan(8)
        with pytest.raises(ValueError):
            plan._twiddles[0] = 0


class TestMagnitudePhase:
    def test_keeps_bins_up_to_nyquist(self):
        """Only size // 2 + 1 bins are returned."""
        spectrum = np.fft.fft(np.ones(8))
        mag, phase = magnitude_phase(spectrum)
        assert mag.shape == (5,)
        assert phase.shape == (5,)
        assert mag[0] == pytest.approx(8.0)
        assert np.allclose(mag[1:], 0.0)

    def test_pure_cosine_bin(self):
        """A cosine on bin 2 peaks there with zero phase."""
        n = 16
        x = np.cos(2 * np.pi * 2 * np.arange(n) / n)
        mag, phase = magnitude_phase(FFTPlan(n).transform(x))
        assert int(np.argmax(mag)) == 2
        assert mag[2] == pytest.approx(n / 2)
        assert phase[2] == pytest.approx(0.0, abs=1e-9)
