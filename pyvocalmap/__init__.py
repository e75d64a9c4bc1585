"""pyvocalmap - vocal feature extraction and segmentation."""

__version__ = "0.1.0"

from pyvocalmap.analysis import AnalysisConfig, VocalFeatures, analyze_vocals
from pyvocalmap.audio import AudioBuffer, load_audio
from pyvocalmap.core import VocalAnalyzer
from pyvocalmap.exceptions import AudioLoadError, InvalidBufferError, VocalAnalysisError

__all__ = [
    "__version__",
    "AnalysisConfig",
    "AudioBuffer",
    "AudioLoadError",
    "InvalidBufferError",
    "VocalAnalysisError",
    "VocalAnalyzer",
    "VocalFeatures",
    "analyze_vocals",
    "load_audio",
]
