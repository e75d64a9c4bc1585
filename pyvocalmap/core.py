from pathlib import Path

from pyvocalmap.analysis import AnalysisConfig, AnalysisTables, VocalFeatures, analyze_vocals
from pyvocalmap.audio import AudioBuffer, load_audio


class VocalAnalyzer:
    """High-level API access to pyvocalmap's analysis.

    The window and FFT tables are built once here and only read afterwards,
    so one analyzer can serve independent buffers from several threads.
    """

    __slots__ = ("config", "tables")

    def __init__(self, config: AnalysisConfig | None = None):
        """Initializes the analyzer.

        Args:
            config (AnalysisConfig, optional): analysis parameters. Defaults to
                ``AnalysisConfig.from_env()``, i.e. the defaults plus any
                ``PVM_*`` environment overrides.
        """
        self.config = config or AnalysisConfig.from_env()
        self.tables = AnalysisTables.build(self.config)

    def analyze(self, buffer: AudioBuffer) -> VocalFeatures:
        """Analyze a decoded buffer."""
        return analyze_vocals(buffer, self.config, self.tables)

    def analyze_array(self, samples, sample_rate: int) -> VocalFeatures:
        """Analyze a raw sample array (1-D mono or 2-D in either channel layout)."""
        return self.analyze(AudioBuffer.from_array(samples, sample_rate))

    def analyze_file(self, filepath: str | Path, sr: int | None = None) -> VocalFeatures:
        """Decode an audio file with librosa and analyze it.

        Args:
            filepath (str | Path): path to the audio file.
            sr (int, optional): resample to this rate. Defaults to the file's native rate.
        """
        return self.analyze(load_audio(filepath, sr=sr))
