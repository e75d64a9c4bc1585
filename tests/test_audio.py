"""
Tests for audio.py: buffer validation, layouts and file decoding.
"""

import numpy as np
import pytest
from scipy.io import wavfile

from pyvocalmap.audio import AudioBuffer, load_audio
from pyvocalmap.exceptions import AudioLoadError, InvalidBufferError


class TestFromArray:
    def test_mono(self):
        buf = AudioBuffer.from_array(np.zeros(100), 8000)
        assert buf.samples.shape == (1, 100)
        assert buf.samples.dtype == np.float32
        assert buf.duration == pytest.approx(100 / 8000)

    def test_channel_last_is_transposed(self):
        buf = AudioBuffer.from_array(np.zeros((1000, 2)), 8000)
        assert buf.n_channels == 2
        assert buf.n_samples == 1000

    def test_channel_first_kept(self):
        buf = AudioBuffer.from_array(np.zeros((2, 1000)), 8000)
        assert buf.samples.shape == (2, 1000)

    def test_integer_samples(self):
        buf = AudioBuffer.from_array(np.arange(10, dtype=np.int16), 8000)
        assert buf.samples.dtype == np.float32

    def test_zero_length(self):
        buf = AudioBuffer.from_array(np.zeros(0), 8000)
        assert buf.n_samples == 0
        assert buf.duration == 0.0

    @pytest.mark.parametrize("shape", [(0, 2), (2, 0)])
    def test_zero_length_stereo(self, shape):
        """An empty stereo array is accepted in either layout."""
        buf = AudioBuffer.from_array(np.zeros(shape), 8000)
        assert buf.n_channels == 2
        assert buf.n_samples == 0

    def test_zero_length_2d_empty(self):
        buf = AudioBuffer.from_array(np.zeros((0, 0)), 8000)
        assert buf.samples.shape == (1, 0)


class TestValidation:
    @pytest.mark.parametrize(
        "array, sr",
        [
            (np.array(["a", "b"]), 8000),
            (np.zeros((2, 2, 2)), 8000),
            (np.array([0.0, np.nan]), 8000),
            (np.array([0.0, np.inf]), 8000),
            (np.zeros(10), 0),
            (np.zeros(10), -8000),
        ],
    )
    def test_rejects(self, array, sr):
        with pytest.raises(InvalidBufferError):
            AudioBuffer.from_array(array, sr)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            AudioBuffer.from_array(np.zeros((2, 2, 2)), 8000)

    def test_frozen(self):
        buf = AudioBuffer.from_array(np.zeros(10), 8000)
        with pytest.raises(AttributeError):
            buf.sample_rate = 44100


class TestMono:
    def test_channels_averaged(self):
        buf = AudioBuffer.from_array(np.array([[1.0, 1.0, 1.0], [0.0, 0.0, 0.0]]), 8000)
        assert np.allclose(buf.to_mono(), 0.5)

    def test_mono_passthrough(self):
        buf = AudioBuffer.from_array(np.linspace(-1, 1, 50), 8000)
        assert np.array_equal(buf.to_mono(), buf.samples[0])

    def test_empty_stereo(self):
        buf = AudioBuffer.from_array(np.zeros((2, 0)), 8000)
        assert buf.to_mono().shape == (0,)


class TestLoadAudio:
    def test_stereo_wav(self, tmp_path):
        path = tmp_path / "stereo.wav"
        data = np.zeros((4000, 2), dtype=np.float32)
        data[:, 0] = 0.25
        wavfile.write(path, 8000, data)

        buf = load_audio(path)
        assert buf.sample_rate == 8000
        assert buf.samples.shape == (2, 4000)
        assert np.allclose(buf.samples[0], 0.25)
        assert np.allclose(buf.samples[1], 0.0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(AudioLoadError):
            load_audio(tmp_path / "missing.wav")

    def test_not_audio(self, tmp_path):
        path = tmp_path / "notes.wav"
        path.write_text("not audio at all")
        with pytest.raises(AudioLoadError):
            load_audio(path)
