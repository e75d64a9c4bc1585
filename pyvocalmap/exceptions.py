class VocalAnalysisError(Exception):
    """Base class for all errors raised by PyVocalMap."""


class InvalidBufferError(VocalAnalysisError, ValueError):
    """Raised when a sample buffer is malformed (bad shape, rate or non-finite samples)."""


class AudioLoadError(VocalAnalysisError):
    """Raised when audio file cannot be loaded or is invalid."""
