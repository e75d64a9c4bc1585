"""
Structural Analyzer - Five equal sections flagged by vocal overlap.
"""

from __future__ import annotations

from pyvocalmap.analysis import constants as C
from pyvocalmap.analysis.types import Section, SectionSummary, StructuralBreakdown, VocalSegment


def section_bounds(duration: float, n_sections: int = C.N_SECTIONS) -> list[tuple[float, float]]:
    """Equal ``[start, end)`` buckets; the last one absorbs rounding."""
    width = duration / n_sections
    bounds = [(i * width, (i + 1) * width) for i in range(n_sections - 1)]
    bounds.append(((n_sections - 1) * width, duration))
    return bounds


def analyze_structure(segments: tuple[VocalSegment, ...], duration: float) -> StructuralBreakdown:
    """Intro/verse/chorus/bridge/outro buckets, each vocal iff a segment overlaps it."""
    if duration <= 0:
        return StructuralBreakdown.empty(0.0)

    summaries = {}
    for section, (start, end) in zip(Section, section_bounds(duration)):
        summaries[section.value] = SectionSummary(
            has_vocals=any(seg.overlaps(start, end) for seg in segments),
            duration=end - start,
        )
    return StructuralBreakdown(**summaries)
