"""
Formant Analyzer - LPC spectral envelope resonances.

For every frame:
1. Pre-emphasize the power spectrum (first-order high-pass, applied as a
   spectral weight so the frames stay untouched)
2. Autocorrelation = inverse FFT of the power spectrum
3. Levinson-Durbin recursion -> all-pole prediction polynomial A(z)
4. Envelope 1/|A|^2 on the FFT grid; its lowest three peaks above the
   glottal region are F1..F3, their half-power widths the bandwidths
"""

from __future__ import annotations

import numpy as np
from numba import njit
from scipy.signal import find_peaks, peak_widths

from pyvocalmap.analysis import constants as C
from pyvocalmap.analysis.config import AnalysisConfig
from pyvocalmap.analysis.fft import FFTPlan
from pyvocalmap.analysis.types import FormantTrack, SpectralFeatures

CHUNK_FRAMES = 256


@njit(cache=True)
def levinson_durbin(r: np.ndarray, order: int) -> tuple[np.ndarray, float]:
    """
    Solve the Yule-Walker equations for an all-pole model.

    Returns the prediction polynomial ``a`` (``a[0] == 1``) and the final
    prediction error. Stops early, keeping the coefficients found so far,
    once the error is no longer positive.
    """
    a = np.zeros(order + 1)
    a[0] = 1.0
    err = r[0]
    if err <= 0.0:
        return a, 0.0

    prev = np.zeros(order + 1)
    for i in range(1, order + 1):
        acc = r[i]
        for j in range(1, i):
            acc += a[j] * r[i - j]
        k = -acc / err

        prev[:] = a
        for j in range(1, i):
            a[j] = prev[j] + k * prev[i - j]
        a[i] = k

        err *= 1.0 - k * k
        if err <= 0.0:
            break

    return a, err


@njit(cache=True)
def _levinson_rows(r_block: np.ndarray, order: int) -> np.ndarray:
    out = np.zeros((r_block.shape[0], order + 1))
    for row in range(r_block.shape[0]):
        a, _ = levinson_durbin(r_block[row], order)
        out[row] = a
    return out


def pre_emphasis_gain(n_bins: int, n_fft: int, coeff: float = C.PRE_EMPHASIS) -> np.ndarray:
    """Squared magnitude response ``|1 - coeff e^{-jw}|^2`` of the pre-emphasis filter."""
    omega = 2.0 * np.pi * np.arange(n_bins) / n_fft
    return 1.0 + coeff * coeff - 2.0 * coeff * np.cos(omega)


def power_autocorrelation(power: np.ndarray, plan: FFTPlan, order: int) -> np.ndarray:
    """Lags ``0..order`` of the autocorrelation whose spectrum is ``power`` (bins up to Nyquist)."""
    full = np.concatenate([power, power[..., -2:0:-1]], axis=-1)
    return plan.inverse_frames(np.atleast_2d(full)).real[:, : order + 1]


def lpc_envelope(a: np.ndarray, plan: FFTPlan) -> np.ndarray:
    """All-pole power envelope ``1/|A(e^{jw})|^2`` on the bins up to Nyquist, per row."""
    spectrum = plan.transform_frames(np.atleast_2d(a))[:, : plan.n_bins]
    power = spectrum.real ** 2 + spectrum.imag ** 2
    return 1.0 / (power + C.EPS)


def pick_formants(
    envelope: np.ndarray,
    bin_hz: float,
    min_hz: float = C.MIN_FORMANT_HZ,
    n_formants: int = C.N_FORMANTS,
) -> tuple[np.ndarray, np.ndarray]:
    """Lowest ``n_formants`` envelope peaks above ``min_hz``: (frequencies, bandwidths) in Hz."""
    frequencies = np.zeros(n_formants)
    bandwidths = np.zeros(n_formants)

    peaks, _ = find_peaks(envelope)
    peaks = peaks[peaks * bin_hz > min_hz][:n_formants]
    if len(peaks) == 0:
        return frequencies, bandwidths

    widths = peak_widths(envelope, peaks, rel_height=0.5)[0]
    frequencies[: len(peaks)] = peaks * bin_hz
    bandwidths[: len(peaks)] = widths * bin_hz
    return frequencies, bandwidths


def analyze_formants(
    spectral: SpectralFeatures,
    config: AnalysisConfig,
    plan: FFTPlan | None = None,
) -> FormantTrack:
    """F1..F3 and their bandwidths for every frame; zeros for silent frames."""
    n_frames = spectral.n_frames
    if plan is None:
        plan = FFTPlan(spectral.n_fft)

    order = config.lpc_order
    bin_hz = spectral.sample_rate / plan.size
    gain = pre_emphasis_gain(plan.n_bins, plan.size)

    frequencies = np.zeros((n_frames, C.N_FORMANTS))
    bandwidths = np.zeros((n_frames, C.N_FORMANTS))

    for start in range(0, n_frames, CHUNK_FRAMES):
        stop = min(start + CHUNK_FRAMES, n_frames)
        power = spectral.magnitude[start:stop].astype(np.float64) ** 2 * gain
        r = np.ascontiguousarray(power_autocorrelation(power, plan, order))
        active = r[:, 0] > C.EPS
        if not active.any():
            continue

        coeffs = _levinson_rows(r[active], order)
        envelopes = lpc_envelope(coeffs, plan)

        for row, i in enumerate(np.flatnonzero(active) + start):
            frequencies[i], bandwidths[i] = pick_formants(envelopes[row], bin_hz)

    return FormantTrack(frequencies=frequencies, bandwidths=bandwidths)
