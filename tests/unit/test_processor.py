"""Tests for the skeleton analysis pipeline."""

import json
import math
from unittest.mock import MagicMock, patch

import pytest

from strokegraph.config import CurveConfig, LoopConfig, ReductionConfig, StrokeGraphSettings
from strokegraph.core.analysis import SkeletonAnalysis
from strokegraph.core.graph import PixelGraph
from strokegraph.core.measurements import free_end_angle
from strokegraph.core.processor import SkeletonProcessor
from strokegraph.domain import BinaryGrid
from strokegraph.exceptions import ArcLengthError


@pytest.fixture
def settings() -> StrokeGraphSettings:
    """Create default analysis settings."""
    return StrokeGraphSettings()


@pytest.fixture
def processor(settings: StrokeGraphSettings) -> SkeletonProcessor:
    """Create a processor with a mocked logger."""
    return SkeletonProcessor(settings, logger=MagicMock())


def grid_of(*rows: str) -> BinaryGrid:
    return BinaryGrid.from_strings(rows)


class TestSkeletonProcessor:
    """Tests for SkeletonProcessor class."""

    def test_init(self, settings: StrokeGraphSettings) -> None:
        """Test processor initialization."""
        logger = MagicMock()
        processor = SkeletonProcessor(settings, logger=logger)
        assert processor.config is settings
        assert processor.logger is logger
        assert processor.stats.passes_run == []

    def test_default_settings(self) -> None:
        """Test that settings default when omitted."""
        processor = SkeletonProcessor(logger=MagicMock())
        assert processor.config.loops.max_segments == 20

    def test_ring(self, processor: SkeletonProcessor) -> None:
        """Test a closed ring."""
        analysis = processor.analyze(grid_of("###", "#.#", "###"))
        assert len(analysis.segments) == 1
        assert len(analysis.loops) == 1
        assert analysis.loop_distances == [8.0]
        assert analysis.intersection_nodes == []

    def test_h_shape(self, processor: SkeletonProcessor) -> None:
        """Test that the crossbar of an H collapses into one hub."""
        grid = grid_of(
            "#...#",
            "#...#",
            "#...#",
            "#####",
            "#...#",
            "#...#",
            "#...#",
        )
        analysis = processor.analyze(grid)
        assert len(analysis.segments) == 4
        assert all(s.length == 3 for s in analysis.segments)
        assert len(analysis.intersection_nodes) == 1
        assert analysis.loops == []

        stats = processor.stats
        assert stats.initial_nodes == 17
        assert stats.final_nodes == 13
        assert stats.passes_run == [
            "collapse_rectangles",
            "collapse_short_connectors",
            "connect_nearby_ends",
            "prune_noise_segments",
        ]

    def test_figure_eight(self, processor: SkeletonProcessor) -> None:
        """Test two loops through one branch point."""
        grid = grid_of("###..", "#.#..", "#####", "..#.#", "..###")
        analysis = processor.analyze(grid)
        assert len(analysis.loops) == 2
        assert len(analysis.intersection_nodes) == 1

    def test_solid_block(self, processor: SkeletonProcessor) -> None:
        """Test that a filled block reduces to one node."""
        analysis = processor.analyze(grid_of("###", "###", "###"))
        assert len(analysis.segments) == 1
        assert analysis.segments[0].is_single

    def test_spur_pruned(self, processor: SkeletonProcessor) -> None:
        """Test that tiny spurs are pruned by default."""
        points = [(x, 2) for x in range(41)] + [(20, 1)]
        analysis = processor.analyze(BinaryGrid.from_points(41, 3, points))
        assert len(analysis.segments) == 1
        assert processor.stats.pruned_segments == 1

    def test_pruning_disabled(self) -> None:
        """Test that pruning can be switched off."""
        settings = StrokeGraphSettings(reduction=ReductionConfig(prune_noise=False))
        processor = SkeletonProcessor(settings, logger=MagicMock())
        points = [(x, 2) for x in range(41)] + [(20, 1)]
        analysis = processor.analyze(BinaryGrid.from_points(41, 3, points))
        assert len(analysis.segments) == 3
        assert "prune_noise_segments" not in processor.stats.passes_run

    def test_empty_grid(self, processor: SkeletonProcessor) -> None:
        """Test that an empty image gives empty measurements."""
        analysis = processor.analyze(grid_of("...", "..."))
        assert analysis.segments == []
        assert analysis.loops == []
        assert analysis.longest_segment is None
        assert analysis.bounding_box.area == 0.0

    def test_completion_logged(self) -> None:
        """Test that a finished analysis is logged."""
        logger = MagicMock()
        processor = SkeletonProcessor(logger=logger)
        processor.analyze(grid_of("#####"))
        logger.info.assert_called_once()
        assert logger.info.call_args.args[0] == "Analysis complete"

    def test_measurement_errors_reported(self, processor: SkeletonProcessor) -> None:
        """Test that failed measurements are counted, not raised."""
        error = ArcLengthError(1.0, 2.0, "chord is longer than the arc")
        with patch(
            "strokegraph.core.analysis.weighted_circular_curvature", side_effect=error
        ):
            analysis = processor.analyze(grid_of("#####"))

        assert analysis.max_curvature == 0.0
        assert processor.stats.error_count == 1
        assert processor.stats.errors[0][0] == "circular_curvature"


class TestSkeletonAnalysis:
    """Tests for SkeletonAnalysis measurements."""

    def test_straight_line(self) -> None:
        """Test the measurements of a straight stroke."""
        graph = PixelGraph.from_binary_grid(grid_of("#####"))
        analysis = SkeletonAnalysis.from_graph(graph)

        assert analysis.total_distance == 4.0
        assert analysis.max_curvature == 0.0
        assert analysis.longest_segment is analysis.segments[0]
        x_fit, _ = analysis.regressions
        assert x_fit.r2 == pytest.approx(1.0)
        assert analysis.inflections == 0
        assert analysis.start_angle == pytest.approx(0.0, abs=1e-6)
        assert analysis.end_angle == pytest.approx(0.0, abs=1e-6)
        assert analysis.curvature_extrema.peaks == 0

    def test_single_pixel(self) -> None:
        """Test that a zero-length stroke has no curve measurements."""
        graph = PixelGraph.from_binary_grid(grid_of("#"))
        analysis = SkeletonAnalysis.from_graph(graph)

        assert analysis.longest_segment is not None
        assert analysis.regressions is None
        assert analysis.inflections == -1
        assert analysis.start_angle is None
        assert analysis.curvature is None

    def test_degree_clamped_to_node_count(self) -> None:
        """Test that short segments get a lower regression degree."""
        graph = PixelGraph.from_binary_grid(grid_of("###"))
        curves = CurveConfig(regression_degree=6)
        analysis = SkeletonAnalysis.from_graph(graph, curves=curves)
        assert analysis.regressions[0].degree == 2

    def test_small_loops_ignored(self) -> None:
        """Test that loops too short for the image size are not significant."""
        ring = [(0, 0), (1, 0), (2, 0), (0, 1), (2, 1), (0, 2), (1, 2), (2, 2)]
        grid = BinaryGrid.from_points(21, 21, ring + [(20, 20)])
        graph = PixelGraph.from_binary_grid(grid)

        strict = LoopConfig(min_area_fraction=1.0, min_length_cap=8.0)
        analysis = SkeletonAnalysis.from_graph(graph, loops=strict)
        assert analysis.loops == []
        assert analysis.loop_distances == []

        loose = LoopConfig(min_area_fraction=1.0, min_length_cap=7.0)
        analysis = SkeletonAnalysis.from_graph(graph, loops=loose)
        assert len(analysis.loops) == 1

    def test_to_dict(self) -> None:
        """Test JSON-compatible serialization."""
        graph = PixelGraph.from_binary_grid(grid_of("###", "#.#", "###"))
        data = SkeletonAnalysis.from_graph(graph).to_dict()

        assert data["intersections"] == 0
        assert data["bounding_box"] == {"x": 0.0, "y": 0.0, "width": 2.0, "height": 2.0}
        assert len(data["loops"]) == 1
        assert data["longest_segment"]["loop"] is True
        json.dumps(data, allow_nan=False)

    def test_to_dict_without_segments(self) -> None:
        """Test serialization of an empty analysis."""
        data = SkeletonAnalysis.from_graph(PixelGraph()).to_dict()
        assert data["longest_segment"] is None
        assert data["regression_r2"] is None
        assert data["inflections"] == -1
        assert data["start_angle"] is None
        assert not math.isnan(data["total_distance"])

    def test_free_end_angle(self) -> None:
        """Test the direction leaving the free start of a line."""
        graph = PixelGraph.from_binary_grid(grid_of("#####"))
        analysis = SkeletonAnalysis.from_graph(graph)
        assert abs(analysis.free_end_angle) == pytest.approx(math.pi)
        assert analysis.to_dict()["free_end_angle"] == pytest.approx(analysis.free_end_angle)

    def test_ring_has_no_free_end(self) -> None:
        """Test that closed strokes have no free-end angle."""
        graph = PixelGraph.from_binary_grid(grid_of("###", "#.#", "###"))
        assert SkeletonAnalysis.from_graph(graph).free_end_angle is None

    def test_free_end_degree_bounded_by_config(self) -> None:
        """Test that the free-end fit never exceeds the configured maximum degree."""
        graph = PixelGraph.from_binary_grid(
            grid_of("#####", "....#", "....#", "....#", "....#")
        )
        (segment,) = graph.open_segments()
        curves = CurveConfig(regression_degree=4, max_regression_degree=1, free_end_min_r2=0.99)

        with patch(
            "strokegraph.core.analysis.measure_free_end_angle", wraps=free_end_angle
        ) as spy:
            analysis = SkeletonAnalysis.from_graph(graph, curves=curves)

        assert spy.call_args.kwargs["max_degree"] == 1
        assert spy.call_args.kwargs["min_r2"] == 0.99
        assert analysis.free_end_angle == free_end_angle(segment, 1)
