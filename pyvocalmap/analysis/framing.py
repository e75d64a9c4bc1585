"""
Frame Extractor - overlapping Hann-windowed analysis frames.
"""

from __future__ import annotations

import librosa
import numpy as np
from scipy.signal import windows

from pyvocalmap.analysis.types import FrameBlock


def hann_window(frame_size: int) -> np.ndarray:
    """Symmetric Hann window ``0.5 - 0.5 cos(2 pi i / (N - 1))``, read-only."""
    window = windows.hann(frame_size, sym=True).astype(np.float64)
    window.flags.writeable = False
    return window


def count_frames(n_samples: int, frame_size: int, hop_size: int) -> int:
    if n_samples < frame_size:
        return 0
    return 1 + (n_samples - frame_size) // hop_size


def extract_frames(
    signal: np.ndarray,
    sample_rate: int,
    frame_size: int,
    hop_size: int,
    window: np.ndarray | None = None,
) -> FrameBlock:
    """
    Split a mono signal into overlapping windowed frames.

    A signal shorter than one frame yields an empty block rather than an
    error; downstream stages treat zero frames as "no data".
    """
    if window is None:
        window = hann_window(frame_size)

    signal = np.asarray(signal, dtype=np.float64)
    n_frames = count_frames(len(signal), frame_size, hop_size)

    if n_frames == 0:
        frames = np.zeros((0, frame_size), dtype=np.float64)
    else:
        strided = librosa.util.frame(signal, frame_length=frame_size, hop_length=hop_size, axis=0)
        frames = strided[:n_frames] * window
    frames.flags.writeable = False

    start_times = librosa.frames_to_time(np.arange(n_frames), sr=sample_rate, hop_length=hop_size)

    return FrameBlock(
        frames=frames,
        start_times=np.asarray(start_times, dtype=np.float64),
        frame_size=frame_size,
        hop_size=hop_size,
        sample_rate=sample_rate,
    )
