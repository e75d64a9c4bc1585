from dataclasses import dataclass
from pathlib import Path

import librosa
import numpy as np

from pyvocalmap.exceptions import AudioLoadError, InvalidBufferError


@dataclass(slots=True, frozen=True)
class AudioBuffer:
    """Decoded audio: ``samples`` is ``(n_channels, n_samples)`` float32."""

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        if not isinstance(self.sample_rate, (int, np.integer)) or self.sample_rate <= 0:
            raise InvalidBufferError(f"sample_rate must be a positive integer, got {self.sample_rate!r}")
        if self.samples.ndim != 2:
            raise InvalidBufferError(f"samples must be 2-D (channels, samples), got {self.samples.ndim}-D")
        if self.samples.shape[0] == 0:
            raise InvalidBufferError("samples must have at least one channel")
        if not np.isfinite(self.samples).all():
            raise InvalidBufferError("samples contain NaN or infinite values")

    @classmethod
    def from_array(cls, array, sample_rate: int) -> "AudioBuffer":
        """Build a buffer from a 1-D (mono) or 2-D array in either channel layout.

        For 2-D input the smaller non-empty axis is taken as the channel axis.
        """
        arr = np.asarray(array)
        if not (np.issubdtype(arr.dtype, np.integer) or np.issubdtype(arr.dtype, np.floating)):
            raise InvalidBufferError(f"samples must be numeric, got dtype {arr.dtype}")
        if arr.ndim == 1:
            arr = arr[np.newaxis, :]
        elif arr.ndim == 2:
            rows, cols = arr.shape
            if rows == 0 or rows > cols > 0:
                arr = arr.T
            if arr.size == 0 and arr.shape[0] == 0:
                arr = np.zeros((1, 0), dtype=arr.dtype)
        else:
            raise InvalidBufferError(f"samples must be 1-D or 2-D, got {arr.ndim}-D")

        return cls(samples=np.ascontiguousarray(arr, dtype=np.float32), sample_rate=int(sample_rate))

    @property
    def n_channels(self) -> int:
        return self.samples.shape[0]

    @property
    def n_samples(self) -> int:
        return self.samples.shape[1]

    @property
    def duration(self) -> float:
        return self.n_samples / self.sample_rate

    def to_mono(self) -> np.ndarray:
        """Channel average; a mono buffer passes through."""
        if self.n_channels == 1:
            return self.samples[0]
        if self.n_samples == 0:
            return np.zeros(0, dtype=self.samples.dtype)
        return librosa.to_mono(self.samples)


def load_audio(filepath: str | Path, sr: int | None = None) -> AudioBuffer:
    """Decode an audio file into an AudioBuffer, keeping its channels."""
    path = Path(filepath)

    try:
        raw_audio, rate = librosa.load(path, sr=sr, mono=False)
    except Exception as e:
        raise AudioLoadError(
            f"{path.name} could not be loaded. Invalid audio data or unsupported format."
        ) from e

    if raw_audio.size == 0:
        raise AudioLoadError(f'No audio data could be loaded from "{path}".')

    try:
        return AudioBuffer.from_array(raw_audio, rate)
    except InvalidBufferError as e:
        raise AudioLoadError(f'"{path}" decoded to invalid audio data: {e}') from e
