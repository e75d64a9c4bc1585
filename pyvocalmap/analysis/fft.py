"""
Spectral Transform - Iterative radix-2 FFT.

Cooley-Tukey decimation-in-time FFT working in place on a preallocated
scratch buffer. The bit-reversal permutation and twiddle factors are computed
once per transform size and kept read-only, so a single plan can be shared by
every frame of a track (and by several threads, each call allocating its own
scratch row).
"""

from __future__ import annotations

import numpy as np
from numba import njit


def next_pow2(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    n = int(n)
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def _bit_reversal(size: int) -> np.ndarray:
    bits = size.bit_length() - 1
    rev = np.zeros(size, dtype=np.int64)
    for i in range(size):
        r = 0
        x = i
        for _ in range(bits):
            r = (r << 1) | (x & 1)
            x >>= 1
        rev[i] = r
    return rev


@njit(cache=True)
def _fft_inplace(buf: np.ndarray, rev: np.ndarray, twiddles: np.ndarray) -> None:
    """In-place iterative radix-2 FFT of ``buf`` (complex128, power-of-two length)."""
    n = buf.shape[0]

    for i in range(n):
        j = rev[i]
        if j > i:
            tmp = buf[i]
            buf[i] = buf[j]
            buf[j] = tmp

    size = 2
    while size <= n:
        half = size // 2
        stride = n // size
        for start in range(0, n, size):
            for k in range(half):
                w = twiddles[k * stride]
                a = buf[start + k]
                b = buf[start + k + half] * w
                buf[start + k] = a + b
                buf[start + k + half] = a - b
        size *= 2


@njit(cache=True)
def _fft_rows(block: np.ndarray, rev: np.ndarray, twiddles: np.ndarray) -> None:
    for row in range(block.shape[0]):
        _fft_inplace(block[row], rev, twiddles)


class FFTPlan:
    """Precomputed tables for a fixed power-of-two FFT size."""

    __slots__ = ("size", "_rev", "_twiddles")

    def __init__(self, size: int) -> None:
        if size < 1 or size & (size - 1):
            raise ValueError(f"FFT size must be a power of two, got {size}")
        self.size = size

        rev = _bit_reversal(size)
        twiddles = np.exp(-2j * np.pi * np.arange(max(1, size // 2)) / size)
        rev.flags.writeable = False
        twiddles.flags.writeable = False
        self._rev = rev
        self._twiddles = twiddles

    @classmethod
    def for_length(cls, n: int) -> FFTPlan:
        """Plan sized to the next power of two >= n."""
        return cls(next_pow2(n))

    @property
    def n_bins(self) -> int:
        """Number of bins up to and including Nyquist."""
        return self.size // 2 + 1

    def transform(self, x: np.ndarray) -> np.ndarray:
        """Complex spectrum of ``x`` zero-padded (or truncated) to the plan size."""
        buf = np.zeros(self.size, dtype=np.complex128)
        n = min(len(x), self.size)
        buf[:n] = x[:n]
        _fft_inplace(buf, self._rev, self._twiddles)
        return buf

    def interleaved(self, x: np.ndarray) -> np.ndarray:
        """Spectrum as interleaved ``[re0, im0, re1, im1, ...]`` of length ``2 * size``."""
        return self.transform(x).view(np.float64)

    def transform_frames(self, frames: np.ndarray) -> np.ndarray:
        """Row-wise spectra of a ``(n_frames, m)`` block, shape ``(n_frames, size)``."""
        n_frames = frames.shape[0]
        block = np.zeros((n_frames, self.size), dtype=np.complex128)
        m = min(frames.shape[1], self.size) if frames.ndim == 2 else 0
        if n_frames and m:
            block[:, :m] = frames[:, :m]
            _fft_rows(block, self._rev, self._twiddles)
        return block

    def inverse(self, spectrum: np.ndarray) -> np.ndarray:
        """Inverse transform via the conjugation identity, complex output."""
        buf = np.ascontiguousarray(np.conj(np.asarray(spectrum, dtype=np.complex128)))
        _fft_inplace(buf, self._rev, self._twiddles)
        return np.conj(buf) / self.size

    def inverse_frames(self, spectra: np.ndarray) -> np.ndarray:
        block = np.ascontiguousarray(np.conj(np.asarray(spectra, dtype=np.complex128)))
        if block.shape[0]:
            _fft_rows(block, self._rev, self._twiddles)
        return np.conj(block) / self.size


def magnitude_phase(spectrum: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Magnitude and phase of the bins up to Nyquist (last axis)."""
    n_bins = spectrum.shape[-1] // 2 + 1
    half = spectrum[..., :n_bins]
    magnitude = np.sqrt(half.real ** 2 + half.imag ** 2)
    phase = np.arctan2(half.imag, half.real)
    return magnitude, phase
