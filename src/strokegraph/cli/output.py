"""Rich console output helpers for the CLI.

This module provides user-friendly console output using the Rich library
with tables and formatted messages.
"""

import math
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from strokegraph.core.analysis import SkeletonAnalysis
from strokegraph.core.segment import Loop, OpenSegment
from strokegraph.utils import AnalysisStats

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info

MAX_TABLE_ROWS = 20


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Strokegraph[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_image_info(image_path: str, width: int, height: int, foreground: int) -> None:
    """Print image information.

    Args:
        image_path: Path to the image file
        width: Image width in pixels
        height: Image height in pixels
        foreground: Number of ink pixels
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(image_path)
    console.print(line)
    console.print(f"  {width}x{height} px {SYM_DOT} {foreground:,} ink pixels")


def print_reduction(stats: AnalysisStats) -> None:
    """Print node counts before and after the reduction passes."""
    console.print(
        f"  {stats.initial_nodes:,} nodes {SYM_STEP} {stats.final_nodes:,} nodes "
        f"{SYM_DOT} {len(stats.passes_run)} passes"
    )
    if stats.pruned_segments:
        console.print(f"  {stats.pruned_segments} noise segments pruned")


def _format_number(value: float | None, digits: int = 3) -> str:
    if value is None or math.isnan(value):
        return "-"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    return f"{value:.{digits}f}"


def _kind(segment: OpenSegment) -> str:
    if segment.is_single:
        return "single"
    if segment.is_loop:
        return "loop"
    if segment.is_isolated:
        return "isolated"
    if segment.is_connector:
        return "connector"
    if segment.is_edge:
        return "edge"
    return "path"


def print_segment_table(segments: Sequence[OpenSegment], verbose: bool = False) -> None:
    """Print a table of segments.

    Args:
        segments: Segments in canonical order
        verbose: Show every segment instead of the first rows
    """
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Length", justify="right")
    table.add_column("Distance", justify="right")
    table.add_column("Curvature", justify="right")

    shown = segments if verbose else segments[:MAX_TABLE_ROWS]
    for i, segment in enumerate(shown):
        table.add_row(
            str(i + 1),
            _kind(segment),
            f"({segment.end1.x:g}, {segment.end1.y:g})",
            f"({segment.end2.x:g}, {segment.end2.y:g})",
            str(segment.length),
            _format_number(segment.distance, 2),
            _format_number(segment.circular_curvature()),
        )
    console.print(table)
    if len(segments) > len(shown):
        console.print(f"  {SYM_DOT}{SYM_DOT}{SYM_DOT} (+{len(segments) - len(shown)} more)")


def print_loops(loops: Sequence[Loop]) -> None:
    """Print significant loops.

    Args:
        loops: Loops in canonical order
    """
    if not loops:
        console.print("  No loops")
        return
    for i, loop in enumerate(loops):
        plural = "segment" if len(loop) == 1 else "segments"
        console.print(
            f"  Loop {i + 1}: {len(loop)} {plural} {SYM_DOT} "
            f"length {loop.length} {SYM_DOT} distance {loop.distance:.2f}"
        )


def print_measurements(analysis: SkeletonAnalysis) -> None:
    """Print the longest-segment measurements of an analysis."""
    longest = analysis.longest_segment
    console.print(
        f"  {len(analysis.segments)} segments {SYM_DOT} "
        f"{len(analysis.intersection_nodes)} intersections {SYM_DOT} "
        f"total distance {analysis.total_distance:.2f}"
    )
    console.print(f"  Max weighted curvature   {_format_number(analysis.max_curvature)}")
    if longest is None:
        console.print("  No segments")
        return

    console.print(f"  Longest segment          {longest.distance:.2f} ({longest.length} steps)")
    if analysis.regressions is not None:
        x_fit, y_fit = analysis.regressions
        console.print(
            f"  Regression R²            x {_format_number(x_fit.r2, 4)} "
            f"{SYM_DOT} y {_format_number(y_fit.r2, 4)}"
        )
    if analysis.inflections >= 0:
        console.print(f"  Inflections              {analysis.inflections}")
    if analysis.curvature_extrema is not None:
        extrema = analysis.curvature_extrema
        console.print(
            f"  Curvature peaks/troughs  {extrema.peaks} {SYM_DOT} {extrema.troughs}"
        )
    if analysis.start_angle is not None and analysis.end_angle is not None:
        console.print(
            f"  Start/end angle          {math.degrees(analysis.start_angle):.1f}° "
            f"{SYM_DOT} {math.degrees(analysis.end_angle):.1f}°"
        )
    if analysis.free_end_angle is not None:
        console.print(f"  Free end angle           {math.degrees(analysis.free_end_angle):.1f}°")


def print_success(total_time_s: float, segments: int, loops: int, errors: int) -> None:
    """Print success message with summary.

    Args:
        total_time_s: Total analysis time in seconds
        segments: Number of segments found
        loops: Number of significant loops found
        errors: Number of measurements that could not be computed
    """
    time_str = f"{total_time_s * 1000:.0f}ms" if total_time_s < 1 else f"{total_time_s:.1f}s"
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {segments} segments {SYM_DOT} {loops} loops {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
