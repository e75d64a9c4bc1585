"""
Console utilities and Rich formatting for pyvocalmap.

Provides readable terminal output with the Rich library:
- Logging setup through RichHandler
- Styled tables and panels
- A full vocal analysis report
"""

import logging

from rich.box import ROUNDED
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from pyvocalmap.analysis.types import VocalFeatures

# Module-level rich console instance
rich_console = Console()

# ============================================================================
# STYLES
# ============================================================================

STYLE_SUCCESS = Style(color="green", bold=True)
STYLE_WARNING = Style(color="yellow")
STYLE_DIM = Style(dim=True)
STYLE_HEADER = Style(color="bright_white", bold=True)
STYLE_SCORE_HIGH = Style(color="green", bold=True)
STYLE_SCORE_MED = Style(color="yellow")
STYLE_SCORE_LOW = Style(color="red")


def setup_logging(verbose: bool = False, debug: bool = False, console: Console | None = None):
    """Route ``logging`` output through a RichHandler."""
    console = console or rich_console
    if verbose or debug:
        level = logging.DEBUG if debug else logging.INFO
        handler = RichHandler(level=level, console=console, rich_tracebacks=True, show_path=debug, show_time=False)
    else:
        level = logging.ERROR
        handler = RichHandler(level=level, console=console, show_time=False, show_path=False)
    logging.basicConfig(format="%(message)s", level=level, handlers=[handler], force=True)


# ============================================================================
# UI COMPONENTS
# ============================================================================

def score_to_style(score: float) -> Style:
    """Get appropriate style for a score value."""
    if score >= 0.75:
        return STYLE_SCORE_HIGH
    elif score >= 0.5:
        return STYLE_SCORE_MED
    else:
        return STYLE_SCORE_LOW


def format_score(score: float, width: int = 6) -> Text:
    """Format a score with appropriate coloring."""
    text = f"{score:.1%}".rjust(width)
    return Text(text, style=score_to_style(score))


def format_duration(duration: float) -> str:
    """Format duration in seconds to human readable."""
    if duration < 60:
        return f"{duration:.1f}s"
    else:
        mins = int(duration // 60)
        secs = duration % 60
        return f"{mins}m {secs:.1f}s"


def format_timestamp(seconds: float) -> str:
    return f"{int(seconds // 60):02d}:{seconds % 60:06.3f}"


def create_results_table(
    title: str,
    columns: list[tuple[str, str, str]],  # (name, style, justify)
) -> Table:
    """Create a styled results table."""
    table = Table(
        title=title,
        box=ROUNDED,
        header_style="bold cyan",
        border_style="dim",
        row_styles=["", "dim"],
    )

    for name, style, justify in columns:
        table.add_column(name, style=style, justify=justify)

    return table


def print_vocal_report(features: VocalFeatures, title: str = "Vocal Analysis", console: Console | None = None):
    """Print a summary panel, the segment table and the section breakdown."""
    console = console or rich_console

    header = Text(title, style=STYLE_HEADER)
    header.append(f"\n{features.summary()}", style=STYLE_DIM)
    console.print(Panel(header, box=ROUNDED, border_style="cyan", padding=(0, 2)))

    if features.vocal_segments:
        table = create_results_table(
            "Vocal Segments",
            [
                ("Start", "green", "right"),
                ("End", "green", "right"),
                ("Length", "", "right"),
                ("Confidence", "", "right"),
                ("Type", "cyan", "left"),
            ],
        )
        for seg in features.vocal_segments:
            table.add_row(
                format_timestamp(seg.start_time),
                format_timestamp(seg.end_time),
                format_duration(seg.duration),
                format_score(seg.confidence),
                seg.vocal_type.value,
            )
        console.print(table)
    else:
        console.print(Text("• No vocal segments detected", style=STYLE_WARNING))

    breakdown = create_results_table(
        "Structure",
        [("Section", "cyan", "left"), ("Length", "", "right"), ("Vocals", "", "center")],
    )
    for section, summary in features.breakdown:
        mark = Text("✓", style=STYLE_SUCCESS) if summary.has_vocals else Text("-", style=STYLE_DIM)
        breakdown.add_row(section.value, format_duration(summary.duration), mark)
    console.print(breakdown)
