"""Read-only measurement bundle of a reduced skeleton graph.

SkeletonAnalysis is what classification code consumes: topology counts,
significant loops and the curve measurements of the longest segment. It is
computed once from a graph and never refers back to graph internals other
than through the Node, OpenSegment and Loop values it holds.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from strokegraph.config import CurveConfig, LoopConfig, NumericConfig
from strokegraph.core.graph import PixelGraph
from strokegraph.core.measurements import (
    curvature_function,
    free_end_angle as measure_free_end_angle,
    regression_derivative,
    weighted_circular_curvature,
)
from strokegraph.core.numeric import PeaksAndTroughs, RealFunction, peaks_and_troughs
from strokegraph.core.rational import RationalPolynomial
from strokegraph.core.regression import PolynomialRegression
from strokegraph.core.segment import Loop, OpenSegment
from strokegraph.domain import BoundingBox, Node
from strokegraph.exceptions import InvalidInputError

ErrorCallback = Callable[[str, Exception], None]


def _finite_or_none(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return value


@dataclass
class SkeletonAnalysis:
    """Measurements of one skeleton graph.

    Missing measurements use sentinels: None for absent objects and
    angles, -1 for the inflection count, NaN for undefined numbers.

    Attributes:
        bounding_box: Extent of the graph nodes
        intersection_nodes: Nodes with three or more neighbors
        segments: All segments, sorted canonically
        total_distance: Sum of segment arc lengths
        loops: Loops whose path length is significant for the image size
        loop_distances: Arc length of each significant loop
        max_curvature: Largest weighted circular curvature of any segment
        longest_segment: Segment with the greatest arc length
        regressions: (x, y) fits of the longest segment against arc length
        derivative: dy/dx of the longest segment
        second_derivative: Derivative of ``derivative``
        inflections: Sign changes of the second derivative
        curvature: Curvature function of the longest segment
        curvature_extrema: Peaks and troughs of the sampled curvature
        start_angle: Tangent angle near the start of the longest segment
        end_angle: Tangent angle near the end of the longest segment
        free_end_angle: Direction leaving the free end of the longest
            non-loop segment that has one
    """

    bounding_box: BoundingBox
    intersection_nodes: list[Node]
    segments: list[OpenSegment]
    total_distance: float
    loops: list[Loop]
    loop_distances: list[float]
    max_curvature: float
    longest_segment: OpenSegment | None = None
    regressions: tuple[PolynomialRegression, PolynomialRegression] | None = None
    derivative: RationalPolynomial | None = None
    second_derivative: RationalPolynomial | None = None
    inflections: int = -1
    curvature: RealFunction | None = field(default=None, repr=False)
    curvature_extrema: PeaksAndTroughs | None = None
    start_angle: float | None = None
    end_angle: float | None = None
    free_end_angle: float | None = None

    @classmethod
    def from_graph(
        cls,
        graph: PixelGraph,
        curves: CurveConfig | None = None,
        loops: LoopConfig | None = None,
        numeric: NumericConfig | None = None,
        on_error: ErrorCallback | None = None,
    ) -> "SkeletonAnalysis":
        """Measure a graph.

        Args:
            graph: Reduced skeleton graph
            curves: Regression and sampling settings
            loops: Loop extraction settings
            numeric: Newton solver settings
            on_error: Called with a measurement name and the error whenever
                a measurement cannot be computed

        Returns:
            The measurements
        """
        curves = curves or CurveConfig()
        loops = loops or LoopConfig()
        numeric = numeric or NumericConfig()

        def report(measurement: str, error: Exception) -> None:
            if on_error is not None:
                on_error(measurement, error)

        box = graph.bounding_box()
        segments = graph.open_segments()
        threshold = min(box.area * loops.min_area_fraction, loops.min_length_cap)
        significant = [
            loop
            for loop in graph.loops(loops.max_segments)
            if loop.length > threshold
        ]

        max_curvature = 0.0
        for segment in segments:
            try:
                value = weighted_circular_curvature(
                    segment.distance,
                    segment.chord_length,
                    numeric.max_error,
                    numeric.max_iterations,
                )
            except InvalidInputError as e:
                report("circular_curvature", e)
                continue
            if not math.isnan(value):
                max_curvature = max(max_curvature, value)

        analysis = cls(
            bounding_box=box,
            intersection_nodes=graph.vertices(3),
            segments=segments,
            total_distance=sum(s.distance for s in segments),
            loops=significant,
            loop_distances=[loop.distance for loop in significant],
            max_curvature=max_curvature,
            longest_segment=max(segments, key=lambda s: s.distance, default=None),
        )
        analysis._measure_longest(curves, report)
        analysis._measure_free_end(curves, report)
        return analysis

    def _measure_longest(self, curves: CurveConfig, report: ErrorCallback) -> None:
        segment = self.longest_segment
        if segment is None or segment.distance == 0:
            return

        nodes = segment.nodes()
        degree = min(curves.regression_degree, len(nodes) - 1)
        try:
            self.regressions = segment.regression_curves(degree)
        except InvalidInputError as e:
            report("regression", e)
            return

        length = segment.distance
        x, y = (fit.polynomial for fit in self.regressions)
        self.derivative = regression_derivative(x, y)
        self.second_derivative = self.derivative.differentiate()
        self.curvature = curvature_function(x, y)

        try:
            self.inflections = len(
                self.second_derivative.sign_change_points(
                    length * curves.inflection_margin,
                    length * (1 - curves.inflection_margin),
                )
            )
        except InvalidInputError as e:
            report("inflections", e)

        try:
            self.curvature_extrema = peaks_and_troughs(
                self.curvature,
                length * curves.curvature_margin,
                length * (1 - curves.curvature_margin),
                math.ceil(length) * curves.samples_per_unit,
            )
        except InvalidInputError as e:
            report("curvature_extrema", e)

        start = length * curves.angle_margin
        end = length * (1 - curves.angle_margin)
        self.start_angle = math.atan2(
            self.derivative.numerator.evaluate(start),
            self.derivative.denominator.evaluate(start),
        )
        self.end_angle = math.atan2(
            self.derivative.numerator.evaluate(end),
            self.derivative.denominator.evaluate(end),
        )

    def _measure_free_end(self, curves: CurveConfig, report: ErrorCallback) -> None:
        candidates = [
            s
            for s in self.segments
            if s.is_edge and not s.is_single and not s.is_loop and s.distance > 0
        ]
        segment = max(candidates, key=lambda s: s.distance, default=None)
        if segment is None:
            return
        try:
            self.free_end_angle = measure_free_end_angle(
                segment,
                curves.regression_degree,
                min_r2=curves.free_end_min_r2,
                max_degree=curves.max_regression_degree,
            )
        except InvalidInputError as e:
            report("free_end_angle", e)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible values; non-finite numbers become None."""
        longest = self.longest_segment
        extrema = self.curvature_extrema
        return {
            "bounding_box": {
                "x": self.bounding_box.min_x,
                "y": self.bounding_box.min_y,
                "width": self.bounding_box.width,
                "height": self.bounding_box.height,
            },
            "intersections": len(self.intersection_nodes),
            "segments": [s.to_dict() for s in self.segments],
            "total_distance": self.total_distance,
            "loops": [loop.to_dict() for loop in self.loops],
            "max_curvature": _finite_or_none(self.max_curvature),
            "longest_segment": longest.to_dict() if longest is not None else None,
            "regression_r2": (
                [_finite_or_none(fit.r2) for fit in self.regressions]
                if self.regressions is not None
                else None
            ),
            "inflections": self.inflections,
            "curvature_peaks": extrema.peaks if extrema is not None else None,
            "curvature_troughs": extrema.troughs if extrema is not None else None,
            "start_angle": _finite_or_none(self.start_angle),
            "end_angle": _finite_or_none(self.end_angle),
            "free_end_angle": _finite_or_none(self.free_end_angle),
        }
