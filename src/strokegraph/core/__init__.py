"""Core algorithms for strokegraph.

This module contains the core algorithms for:

- Polynomial and rational-function algebra with Sturm root counting
- Dense linear algebra and least-squares polynomial regression
- Newton root solving and sampled extrema detection
- Skeleton graph construction, reduction, segment tracing and loops

The algebra and graph modules are pure and never log. The processor
orchestrates them and reports through structlog.

Key classes:
- Polynomial: Exact dense polynomial arithmetic
- RationalPolynomial: Ratio of two polynomials
- Matrix: Immutable dense matrix
- PolynomialRegression: Least-squares polynomial fit
- PixelGraph: Mutable skeleton graph with reduction passes
- OpenSegment: Maximal path of a skeleton graph
- Loop: Elementary cycle of segments
- SkeletonAnalysis: Measurements of a reduced graph
- SkeletonProcessor: Pipeline from grid to measurements

Key functions:
- trace_segments: All segments of a graph
- extract_loops: Elementary loops of a set of segments
- newtons_method: Newton iteration with an oscillation guard
- circle_radius: Circle radius from arc and chord lengths
- peaks_and_troughs: Direction reversals of a sampled function
- local_extrema: Approximate local extrema of a sampled function
"""

from strokegraph.core.analysis import SkeletonAnalysis
from strokegraph.core.graph import PixelGraph
from strokegraph.core.loops import extract_loops
from strokegraph.core.matrix import Matrix
from strokegraph.core.numeric import (
    PeaksAndTroughs,
    circle_radius,
    ieee_divide,
    local_extrema,
    newtons_method,
    peaks_and_troughs,
    sampled_maximum,
)
from strokegraph.core.polynomial import Polynomial
from strokegraph.core.processor import SkeletonProcessor
from strokegraph.core.rational import RationalPolynomial
from strokegraph.core.regression import PolynomialRegression
from strokegraph.core.segment import Loop, OpenSegment
from strokegraph.core.tracer import trace_segments

__all__ = [
    # Algebra
    "Matrix",
    "Polynomial",
    "PolynomialRegression",
    "RationalPolynomial",
    # Numeric functions
    "PeaksAndTroughs",
    "circle_radius",
    "ieee_divide",
    "local_extrema",
    "newtons_method",
    "peaks_and_troughs",
    "sampled_maximum",
    # Graph
    "Loop",
    "OpenSegment",
    "PixelGraph",
    "extract_loops",
    "trace_segments",
    # Pipeline
    "SkeletonAnalysis",
    "SkeletonProcessor",
]
