"""Skeleton analysis pipeline.

SkeletonProcessor runs the full workflow on a foreground grid:

1. Build a PixelGraph from the grid
2. Collapse solid rectangles
3. Collapse short connectors
4. Connect nearby free ends
5. Prune noise segments (optional)
6. Measure the result as a SkeletonAnalysis
"""

from collections.abc import Callable

import structlog

from strokegraph.config import StrokeGraphSettings
from strokegraph.core.analysis import SkeletonAnalysis
from strokegraph.core.graph import PixelGraph
from strokegraph.domain import BinaryGrid
from strokegraph.utils import AnalysisLogger, AnalysisStats, configure_logging


class SkeletonProcessor:
    """Orchestrates graph construction, reduction and measurement.

    Example:
        processor = SkeletonProcessor(StrokeGraphSettings())
        analysis = processor.analyze(BinaryGrid.from_strings(["###", "#.#", "###"]))
        len(analysis.loops)  # 1
    """

    def __init__(
        self,
        config: StrokeGraphSettings | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            config: Settings (defaults when None)
            logger: Logger to use; when None, logging is configured from
                ``config.logging``
        """
        self.config = config or StrokeGraphSettings()
        if logger is None:
            logger = configure_logging(
                log_file=self.config.logging.log_file,
                console_level=self.config.logging.log_level,
                file_level=self.config.logging.file_log_level,
            )
        self.logger = logger
        self.analysis_logger = AnalysisLogger(self.logger)

    @property
    def stats(self) -> AnalysisStats:
        return self.analysis_logger.stats

    def _run_pass(self, graph: PixelGraph, name: str, reduction: Callable[[], int]) -> int:
        before = len(graph)
        result = reduction()
        self.analysis_logger.log_pass(name, before, len(graph), len(graph.open_segments()))
        return result

    def build_graph(self, grid: BinaryGrid) -> PixelGraph:
        """Build and reduce the skeleton graph of a grid.

        Args:
            grid: Foreground grid

        Returns:
            The reduced graph
        """
        reduction = self.config.reduction
        self.analysis_logger.log_start(grid.width, grid.height, grid.foreground_count)

        graph = PixelGraph.from_binary_grid(grid)
        self.analysis_logger.log_graph_built(len(graph))

        self._run_pass(graph, "collapse_rectangles", graph.collapse_rectangles)
        self._run_pass(
            graph,
            "collapse_short_connectors",
            lambda: graph.collapse_short_connectors(reduction.short_connector_length),
        )
        self._run_pass(
            graph,
            "connect_nearby_ends",
            lambda: graph.connect_nearby_ends(
                reduction.nearby_end_distance, reduction.nearby_end_area_fraction
            ),
        )
        if reduction.prune_noise:
            removed = self._run_pass(
                graph,
                "prune_noise_segments",
                lambda: graph.prune_noise_segments(
                    reduction.noise_total_fraction, reduction.noise_longest_fraction
                ),
            )
            self.analysis_logger.log_pruned(removed)
        return graph

    def analyze(self, grid: BinaryGrid) -> SkeletonAnalysis:
        """Build, reduce and measure the skeleton of a grid."""
        graph = self.build_graph(grid)
        return self.analyze_graph(graph)

    def analyze_graph(self, graph: PixelGraph) -> SkeletonAnalysis:
        """Measure an already reduced graph."""
        analysis = SkeletonAnalysis.from_graph(
            graph,
            curves=self.config.curves,
            loops=self.config.loops,
            numeric=self.config.numeric,
            on_error=self.analysis_logger.log_measurement_error,
        )
        self.analysis_logger.log_complete(len(analysis.segments), len(analysis.loops))
        return analysis
