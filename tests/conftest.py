"""Shared synthetic signals for the vocal analysis tests."""

import numpy as np
import pytest

from pyvocalmap.analysis.config import AnalysisConfig

SR = 22050


def harmonic_tone(f0: float, duration: float, sr: int = SR, amplitude: float = 0.3) -> np.ndarray:
    """Sawtooth-like tone: every harmonic below 0.45 * sr with 1/k amplitude."""
    t = np.arange(int(round(duration * sr))) / sr
    signal = np.zeros_like(t)
    k = 1
    while k * f0 < 0.45 * sr:
        signal += np.sin(2 * np.pi * k * f0 * t) / k
        k += 1
    return amplitude * signal


def sine_tone(f0: float, duration: float, sr: int = SR, amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(int(round(duration * sr))) / sr
    return amplitude * np.sin(2 * np.pi * f0 * t)


def place_tone(
    duration: float,
    regions: list[tuple[float, float]],
    f0: float = 220.0,
    sr: int = SR,
    tone=None,
) -> np.ndarray:
    """Silence of ``duration`` seconds with ``tone`` (default harmonic) inside each ``(start, end)`` region."""
    out = np.zeros(int(round(duration * sr)))
    for start, end in regions:
        a, b = int(round(start * sr)), int(round(end * sr))
        out[a:b] = (tone or harmonic_tone)(f0, (b - a) / sr, sr)[: b - a]
    return out


def resonant_noise(
    duration: float,
    formants: tuple[float, ...] = (700.0, 1800.0),
    bandwidth: float = 80.0,
    sr: int = SR,
    seed: int = 0,
) -> np.ndarray:
    """White noise through a cascade of two-pole resonators."""
    from scipy.signal import lfilter

    rng = np.random.default_rng(seed)
    x = rng.standard_normal(int(round(duration * sr)))
    r = np.exp(-np.pi * bandwidth / sr)
    for f in formants:
        theta = 2 * np.pi * f / sr
        x = lfilter([1.0 - r], [1.0, -2.0 * r * np.cos(theta), r * r], x)
    return 0.5 * x / np.max(np.abs(x))


@pytest.fixture
def sr():
    return SR


@pytest.fixture
def config():
    return AnalysisConfig()


@pytest.fixture
def tone():
    return harmonic_tone


@pytest.fixture
def placed_tone():
    return place_tone
