"""Numeric root solving and sampled extrema detection.

Key functions:
- newtons_method: Newton iteration with an oscillation guard
- circle_radius: Radius of the circle through a chord with a given arc length
- peaks_and_troughs: Count direction reversals of a sampled function
- local_extrema: Approximate positions of local extrema
- sampled_maximum: Largest sampled value of a function
"""

import math
from collections.abc import Callable, Iterator
from typing import NamedTuple, Protocol

from strokegraph.exceptions import ArcLengthError, InvalidInputError

RealFunction = Callable[[float], float]

# Relative difference below which an arc counts as straight or as a half circle
ARC_TOLERANCE = 1e-12


class Differentiable(Protocol):
    """A callable function that can produce its own derivative."""

    def __call__(self, x: float) -> float: ...

    def differentiate(self) -> RealFunction: ...


class PeaksAndTroughs(NamedTuple):
    """Direction reversals of a sampled function.

    Attributes:
        peaks: Number of increasing-to-decreasing reversals
        troughs: Number of decreasing-to-increasing reversals
        trend: Overall direction when there are no reversals (1 increasing,
            -1 decreasing, 0 flat); 0 whenever a reversal was found
    """

    peaks: int
    troughs: int
    trend: int


def ieee_divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE-754 semantics instead of raising on a zero denominator.

    ``x / 0`` is a signed infinity and ``0 / 0`` is NaN.
    """
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def newtons_method(
    function: RealFunction | Differentiable,
    target: float,
    initial_guess: float,
    max_error: float = 1e-9,
    max_iterations: int = 1000,
    derivative: RealFunction | None = None,
) -> float:
    """Solve ``function(x) == target`` with Newton's method.

    Iteration stops when the last evaluation is within ``max_error`` of the
    target, when the iteration limit is hit, or when the new guess lands
    within ``max_error`` of either of the two previous guesses.

    Args:
        function: Function to invert
        target: Value to solve for
        initial_guess: Starting point
        max_error: Convergence tolerance
        max_iterations: Iteration limit
        derivative: Derivative of ``function``; taken from
            ``function.differentiate()`` when omitted

    Returns:
        The final guess
    """
    if max_iterations <= 0:
        raise InvalidInputError("Newton's method requires at least 1 iteration")
    if max_error < 0:
        raise InvalidInputError(f"Max error ({max_error}) cannot be negative")
    if derivative is None:
        derivative = function.differentiate()

    guess = initial_guess
    last_guesses: list[float] = []
    value: float | None = None
    for _ in range(max_iterations):
        if value is not None and abs(value - target) <= max_error:
            break
        value = function(guess)
        guess = guess - ieee_divide(value - target, derivative(guess))
        if any(abs(guess - previous) <= max_error for previous in last_guesses):
            break
        last_guesses = [*last_guesses[-1:], guess]
    return guess


def _check_chord(radius: float, chord_length: float) -> None:
    if radius < chord_length / 2:
        raise InvalidInputError(f"Chord ({chord_length}) does not fit in radius ({radius})")


def minor_arc_length(radius: float, chord_length: float) -> float:
    """Length of the shorter arc of a circle cut by a chord."""
    _check_chord(radius, chord_length)
    return 2 * radius * math.asin(min(1.0, chord_length / (2 * radius)))


def major_arc_length(radius: float, chord_length: float) -> float:
    """Length of the longer arc of a circle cut by a chord."""
    _check_chord(radius, chord_length)
    return 2 * radius * (math.pi - math.asin(min(1.0, chord_length / (2 * radius))))


def _minor_arc_derivative(radius: float, chord_length: float) -> float:
    _check_chord(radius, chord_length)
    return 2 * math.asin(min(1.0, chord_length / (2 * radius))) - ieee_divide(
        2 * chord_length, math.sqrt(4 * radius * radius - chord_length * chord_length)
    )


def _major_arc_derivative(radius: float, chord_length: float) -> float:
    return 2 * math.pi - _minor_arc_derivative(radius, chord_length)


def circle_radius(
    arc_length: float,
    chord_length: float,
    max_error: float = 1e-9,
    max_iterations: int = 1000,
) -> float:
    """Radius of the circle whose arc over a chord has the given length.

    The result carries the sign of ``arc_length * chord_length``. A straight
    arc (arc equal to chord) has an infinite radius and a half circle has a
    radius of half the chord.

    Args:
        arc_length: Length along the arc
        chord_length: Straight-line distance between the arc's ends
        max_error: Newton tolerance, relative to the difference between
            arc and chord so that short arcs are solved as precisely as long ones
        max_iterations: Newton iteration limit

    Returns:
        The circle radius, NaN if either input is NaN

    Raises:
        ArcLengthError: For zero or infinite lengths, or a chord longer than the arc
    """
    if math.isnan(arc_length) or math.isnan(chord_length):
        return math.nan

    sign = 1.0 if (arc_length > 0) == (chord_length > 0) else -1.0
    arc = abs(arc_length)
    chord = abs(chord_length)
    half_chord = chord / 2
    half_circumference = math.pi * half_chord

    if math.isinf(arc) or math.isinf(chord):
        raise ArcLengthError(arc_length, chord_length, "lengths must be finite")
    if arc == 0 or chord == 0:
        raise ArcLengthError(arc_length, chord_length, "lengths must be non-zero")
    if abs(arc - chord) <= ARC_TOLERANCE * arc:
        return math.inf
    if abs(arc - half_circumference) <= ARC_TOLERANCE * arc:
        return sign * half_chord
    if chord > arc:
        raise ArcLengthError(arc_length, chord_length, "chord is longer than the arc")

    tolerance = max_error * (arc - chord)
    # Start just outside the radius where the chord is a diameter.
    start = half_chord * (1 + 1e-12)
    if arc < half_circumference:
        radius = newtons_method(
            lambda r: minor_arc_length(r, chord),
            arc,
            start,
            tolerance,
            max_iterations,
            derivative=lambda r: _minor_arc_derivative(r, chord),
        )
    else:
        radius = newtons_method(
            lambda r: major_arc_length(r, chord),
            arc,
            start,
            tolerance,
            max_iterations,
            derivative=lambda r: _major_arc_derivative(r, chord),
        )
    return sign * radius


def _samples(
    function: RealFunction, x1: float, x2: float, n: int
) -> Iterator[tuple[int, float]]:
    if n <= 0:
        raise InvalidInputError(f"Sample count ({n}) must be positive")
    step = (x2 - x1) / n
    for i in range(1, n + 1):
        yield i, function(x1 + i * step)


def _compare(y: float, last: float) -> int:
    if y > last:
        return 1
    if y < last:
        return -1
    return 0


def peaks_and_troughs(function: RealFunction, x1: float, x2: float, n: int) -> PeaksAndTroughs:
    """Count direction reversals of ``function`` sampled n times over [x1, x2].

    Equal consecutive samples neither count as a reversal nor reset the
    tracked direction.
    """
    increasing: bool | None = None
    peaks = 0
    troughs = 0
    last = function(x1)
    for _, y in _samples(function, x1, x2, n):
        compare = _compare(y, last)
        if compare < 0 and increasing:
            peaks += 1
        elif compare > 0 and increasing is False:
            troughs += 1
        if compare != 0:
            increasing = compare > 0
        last = y

    trend = 0
    if peaks == 0 and troughs == 0 and increasing is not None:
        trend = 1 if increasing else -1
    return PeaksAndTroughs(peaks, troughs, trend)


def local_extrema(function: RealFunction, x1: float, x2: float, n: int) -> list[float]:
    """Approximate local extrema of ``function`` sampled n times over [x1, x2].

    Each extremum is reported halfway between the two samples around the
    reversal.
    """
    extrema: list[float] = []
    increasing: bool | None = None
    step = (x2 - x1) / n if n > 0 else 0.0
    last = function(x1)
    for i, y in _samples(function, x1, x2, n):
        compare = _compare(y, last)
        if (compare < 0 and increasing) or (compare > 0 and increasing is False):
            extrema.append(x1 + (i - 0.5) * step)
        if compare != 0:
            increasing = compare > 0
        last = y
    return extrema


def sampled_maximum(function: RealFunction, x1: float, x2: float, n: int) -> float:
    """Largest of the n + 1 samples of ``function`` over [x1, x2]."""
    return max(function(x1), *(y for _, y in _samples(function, x1, x2, n)))
