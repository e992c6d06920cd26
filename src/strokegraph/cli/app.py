"""CLI application entry point for strokegraph.

This module provides the main CLI interface using Typer.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from strokegraph import __version__
from strokegraph.cli.output import (
    console,
    print_error,
    print_header,
    print_image_info,
    print_loops,
    print_measurements,
    print_reduction,
    print_segment_table,
    print_step,
    print_success,
)
from strokegraph.config import (
    CurveConfig,
    LoggingConfig,
    ReductionConfig,
    StrokeGraphSettings,
)
from strokegraph.core import SkeletonProcessor
from strokegraph.exceptions import ImageLoadError, ImageSaveError, StrokeGraphError
from strokegraph.io import ImageReader, ImageWriter

# Create the Typer app
app = typer.Typer(
    name="strokegraph",
    help="Trace the stroke skeleton of a binarized image and measure its segments and loops.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Strokegraph[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def analyze(
    image: Annotated[
        Path,
        typer.Argument(
            help="Path to a thinned, binarized stroke image",
            show_default=False,
        ),
    ],
    degree: Annotated[
        int,
        typer.Option(
            "--degree",
            "-d",
            help="Polynomial degree of the longest-segment regressions",
            min=0,
            max=12,
        ),
    ] = 4,
    no_prune: Annotated[
        bool,
        typer.Option(
            "--no-prune",
            help="Keep tiny edge and duplicate segments",
        ),
    ] = False,
    render: Annotated[
        Path | None,
        typer.Option(
            "--render",
            "-r",
            help="Write an image with every segment painted in its own color",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the analysis as JSON instead of tables",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Trace the skeleton of a stroke image and report its structure.

    The image must already be thinned to one-pixel-wide strokes. Every pixel
    that is not pure white is treated as ink.

    Example:
        strokegraph digit.png --render digit-segments.png
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    # Validate input file exists
    if not image.exists():
        print_error(
            f"Input file not found: {image}",
            details=f"The file '{image}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not image.is_file():
        print_error(
            f"Input path is not a file: {image}",
            details="Please provide a path to an image file.",
        )
        raise typer.Exit(code=1)

    show = not quiet and not as_json
    if show:
        print_header(__version__)

    # Create settings from CLI arguments
    settings = StrokeGraphSettings(
        reduction=ReductionConfig(prune_noise=not no_prune),
        curves=CurveConfig(regression_degree=degree),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )

    try:
        if show:
            print_step("Loading image")

        reader = ImageReader(image)
        reader.load()
        grid = reader.read_grid()

        if show:
            print_image_info(str(image), grid.width, grid.height, grid.foreground_count)
            print_step("Reducing skeleton")

        processor = SkeletonProcessor(settings)
        graph = processor.build_graph(grid)

        if show:
            print_reduction(processor.stats)
            print_step("Measuring")

        analysis = processor.analyze_graph(graph)

        if render is not None:
            ImageWriter(render).save(analysis.segments, grid.width, grid.height)

        if as_json:
            typer.echo(json.dumps(analysis.to_dict(), indent=2))
            return

        if show:
            print_measurements(analysis)
            print_step("Segments")
            print_segment_table(analysis.segments, verbose=verbose)
            print_step("Loops")
            print_loops(analysis.loops)
            if render is not None:
                console.print(f"\n  Rendered to {render}")
            stats = processor.stats
            print_success(
                total_time_s=stats.duration_seconds,
                segments=len(analysis.segments),
                loops=len(analysis.loops),
                errors=stats.error_count,
            )

    except ImageLoadError as e:
        print_error(f"Could not load image: {e.reason}")
        raise typer.Exit(code=1)
    except ImageSaveError as e:
        print_error(f"Could not save image: {e.reason}")
        raise typer.Exit(code=1)
    except StrokeGraphError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def cli() -> None:
    """Entry point for the CLI."""
    app()


def main() -> None:
    """Alternative entry point."""
    cli()


if __name__ == "__main__":
    cli()
