"""
Tests for console.py: formatting helpers and the Rich report.
"""

import dataclasses
import io
import logging

from rich.console import Console
from rich.logging import RichHandler

from pyvocalmap.analysis.types import InstrumentalSegment, VocalFeatures, VocalSegment, VocalType
from pyvocalmap.console import (
    STYLE_SCORE_HIGH,
    STYLE_SCORE_LOW,
    STYLE_SCORE_MED,
    format_duration,
    format_timestamp,
    print_vocal_report,
    score_to_style,
    setup_logging,
)


def capture() -> tuple[Console, io.StringIO]:
    out = io.StringIO()
    return Console(file=out, width=120, color_system=None), out


class TestFormatting:
    def test_duration(self):
        assert format_duration(5.0) == "5.0s"
        assert format_duration(125.5) == "2m 5.5s"

    def test_timestamp(self):
        assert format_timestamp(65.5) == "01:05.500"
        assert format_timestamp(0.0) == "00:00.000"

    def test_score_style(self):
        assert score_to_style(0.9) == STYLE_SCORE_HIGH
        assert score_to_style(0.6) == STYLE_SCORE_MED
        assert score_to_style(0.1) == STYLE_SCORE_LOW


class TestReport:
    def test_with_segments(self):
        features = dataclasses.replace(
            VocalFeatures.empty(10.0),
            vocal_confidence=0.9,
            vocal_segments=(VocalSegment(3.0, 6.0, 0.85, 0.95, VocalType.LEAD),),
            instrumental_segments=(InstrumentalSegment(0.0, 3.0, 0.8),),
        )
        console, out = capture()
        print_vocal_report(features, title="Song", console=console)
        text = out.getvalue()
        assert "Song" in text
        assert "Vocal Segments" in text
        assert "00:03.000" in text
        assert "lead" in text
        assert "Structure" in text

    def test_without_segments(self):
        console, out = capture()
        print_vocal_report(VocalFeatures.empty(4.0), console=console)
        assert "No vocal segments detected" in out.getvalue()


class TestLogging:
    def test_levels(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        console, _ = capture()
        try:
            setup_logging(debug=True, console=console)
            assert root.level == logging.DEBUG
            assert isinstance(root.handlers[0], RichHandler)

            setup_logging(verbose=True, console=console)
            assert root.level == logging.INFO

            setup_logging(console=console)
            assert root.level == logging.ERROR
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
