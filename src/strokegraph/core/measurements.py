"""Geometric measurements of skeleton segments.

Moments are taken of node positions projected onto a direction given as
an angle in radians, measured from the positive x axis towards the
positive y axis (image rows grow downwards).

Curve measurements fit x(t) and y(t) as polynomials of the arc length t,
so dy/dx becomes the rational function y'(t) / x'(t).
"""

import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

from strokegraph.core.numeric import RealFunction, circle_radius, ieee_divide
from strokegraph.core.polynomial import Polynomial
from strokegraph.core.rational import RationalPolynomial
from strokegraph.core.regression import PolynomialRegression
from strokegraph.domain import Node
from strokegraph.exceptions import EmptyDomainError

if TYPE_CHECKING:
    from strokegraph.core.segment import OpenSegment

FREE_END_FRACTION = 0.025


def _components(nodes: Sequence[Node], direction: float) -> list[float]:
    dx = math.cos(direction)
    dy = math.sin(direction)
    return [dx * n.x + dy * n.y for n in nodes]


def mean(nodes: Sequence[Node], direction: float) -> float:
    """Mean of the node positions along ``direction``."""
    return ieee_divide(sum(_components(nodes, direction)), len(nodes))


def deviation(nodes: Sequence[Node], direction: float) -> float:
    """Sample standard deviation along ``direction``."""
    center = mean(nodes, direction)
    variance = sum((c - center) ** 2 for c in _components(nodes, direction))
    return math.sqrt(ieee_divide(variance, len(nodes) - 1))


def skewness(nodes: Sequence[Node], direction: float) -> float:
    """Sample skewness along ``direction``; NaN when all positions coincide."""
    center = mean(nodes, direction)
    total = sum((c - center) ** 3 for c in _components(nodes, direction))
    return ieee_divide(total, (len(nodes) - 1) * deviation(nodes, direction) ** 3)


def _wrap(angle: float) -> float:
    wrapped = angle % (2 * math.pi)
    return wrapped - 2 * math.pi if wrapped >= math.pi else wrapped


def turning_curvature(nodes: Sequence[Node]) -> float:
    """Sum of the slope-angle changes between consecutive steps."""
    curvature = 0.0
    previous_angle: float | None = None
    for a, b in zip(nodes, nodes[1:]):
        angle = math.atan(ieee_divide(b.y - a.y, b.x - a.x))
        if previous_angle is not None:
            curvature += _wrap(angle - previous_angle)
        previous_angle = angle
    return curvature


def circular_curvature(
    arc_length: float,
    chord_length: float,
    max_error: float = 1e-9,
    max_iterations: int = 1000,
) -> float:
    """Curvature (1 / radius) of the circle matching an arc and its chord."""
    if arc_length == 0 or chord_length == 0:
        return math.nan
    return 1.0 / circle_radius(arc_length, chord_length, max_error, max_iterations)


def weighted_circular_curvature(
    arc_length: float,
    chord_length: float,
    max_error: float = 1e-9,
    max_iterations: int = 1000,
) -> float:
    """Circular curvature scaled by arc length, the total turning of the arc."""
    if arc_length == 0 or chord_length == 0:
        return math.nan
    return arc_length / circle_radius(arc_length, chord_length, max_error, max_iterations)


def regression_curves(
    nodes: Sequence[Node],
    degree: int,
    distance_min: float = -math.inf,
    distance_max: float = math.inf,
) -> tuple[PolynomialRegression, PolynomialRegression]:
    """Fit x(t) and y(t) over nodes whose arc length t lies in the window.

    Raises:
        EmptyDomainError: No node falls inside [distance_min, distance_max]
    """
    distances: list[float] = []
    xs: list[float] = []
    ys: list[float] = []
    current = 0.0
    previous: Node | None = None
    for node in nodes:
        if previous is not None:
            current += previous.distance_to(node)
        if current > distance_max:
            break
        if distance_min <= current:
            distances.append(current)
            xs.append(node.x)
            ys.append(node.y)
        previous = node

    if not distances:
        raise EmptyDomainError(distance_min, distance_max)
    return (
        PolynomialRegression(distances, xs, degree),
        PolynomialRegression(distances, ys, degree),
    )


def regression_derivative(x: Polynomial, y: Polynomial) -> RationalPolynomial:
    """dy/dx of a curve parametrized by arc length, as y'(t) / x'(t)."""
    return RationalPolynomial(y.differentiate(), x.differentiate())


def regression_second_derivative(x: Polynomial, y: Polynomial) -> RationalPolynomial:
    """Derivative of dy/dx with respect to t."""
    return regression_derivative(x, y).differentiate()


def curvature_function(x: Polynomial, y: Polynomial) -> RealFunction:
    """Signed curvature k(t) = (x'y'' - x''y') / (x'^2 + y'^2)^1.5."""
    x1 = x.differentiate()
    x2 = x1.differentiate()
    y1 = y.differentiate()
    y2 = y1.differentiate()

    def curvature(t: float) -> float:
        dx = x1.evaluate(t)
        dy = y1.evaluate(t)
        return ieee_divide(dx * y2.evaluate(t) - x2.evaluate(t) * dy, (dx * dx + dy * dy) ** 1.5)

    return curvature


def end_angle(
    segment: "OpenSegment",
    x_fit: PolynomialRegression,
    y_fit: PolynomialRegression,
    at_end1: bool,
) -> float:
    """Direction in which the fitted curve leaves one end of a segment.

    The fit is evaluated a short way in from the requested end, and the
    tangent is flipped so the angle points out of the segment.
    """
    x0 = x_fit.polynomial.evaluate(0.0)
    y0 = y_fit.polynomial.evaluate(0.0)
    fit_starts_at_end1 = segment.end1.distance_to_point(x0, y0) < segment.end2.distance_to_point(x0, y0)

    position = segment.distance * FREE_END_FRACTION
    sign = -1.0
    if fit_starts_at_end1 != at_end1:
        position = segment.distance * (1 - FREE_END_FRACTION)
        sign = 1.0

    derivative = regression_derivative(x_fit.polynomial, y_fit.polynomial)
    return math.atan2(
        sign * derivative.numerator.evaluate(position),
        sign * derivative.denominator.evaluate(position),
    )


def free_end_angle(
    segment: "OpenSegment",
    degree: int,
    min_r2: float | None = None,
    max_degree: int = 8,
) -> float:
    """Angle leaving the free end of a segment.

    The free end is end1 when it has a single neighbor, end2 otherwise.
    The degree never exceeds ``max_degree`` or one less than the number of
    nodes. When ``min_r2`` is set it is raised until both axis fits reach it.
    """
    nodes = segment.nodes()
    limit = min(max_degree, len(nodes) - 1)
    degree = min(degree, limit)
    x_fit, y_fit = regression_curves(nodes, degree)
    while (
        min_r2 is not None
        and degree < limit
        and (x_fit.r2 < min_r2 or y_fit.r2 < min_r2)
    ):
        degree += 1
        x_fit, y_fit = regression_curves(nodes, degree)
    at_end1 = segment.graph.degree(segment.end1.index) == 1
    return end_angle(segment, x_fit, y_fit, at_end1)
