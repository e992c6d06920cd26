"""Rational functions built from two polynomials.

A RationalPolynomial keeps numerator and denominator separate without
cancelling common factors. Differentiating one applies the quotient rule,
whose denominator is a perfect square; the result carries a flag so sign
queries can skip the denominator entirely.
"""

from strokegraph.core.numeric import ieee_divide
from strokegraph.core.polynomial import Polynomial

# Nudges applied to a candidate point sitting on a root before giving up.
MAX_NUDGES = 1000


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


class RationalPolynomial:
    """Ratio ``numerator / denominator`` of two polynomials.

    Attributes:
        numerator: Numerator polynomial
        denominator: Denominator polynomial
        non_negative_denominator: True when the denominator is known to be
            non-negative everywhere
    """

    __slots__ = ("numerator", "denominator", "non_negative_denominator")

    def __init__(
        self,
        numerator: Polynomial,
        denominator: Polynomial,
        non_negative_denominator: bool = False,
    ) -> None:
        self.numerator = numerator
        self.denominator = denominator
        self.non_negative_denominator = non_negative_denominator

    def evaluate(self, x: float) -> float:
        """Evaluate at x with IEEE semantics for a vanishing denominator."""
        return ieee_divide(self.numerator.evaluate(x), self.denominator.evaluate(x))

    def __call__(self, x: float) -> float:
        return self.evaluate(x)

    def add(self, other: "RationalPolynomial") -> "RationalPolynomial":
        numerator = self.numerator * other.denominator + other.numerator * self.denominator
        return RationalPolynomial(numerator, self.denominator * other.denominator)

    def negate(self) -> "RationalPolynomial":
        return RationalPolynomial(
            self.numerator.negate(), self.denominator, self.non_negative_denominator
        )

    def subtract(self, other: "RationalPolynomial") -> "RationalPolynomial":
        return self.add(other.negate())

    def multiply(self, other: "RationalPolynomial") -> "RationalPolynomial":
        return RationalPolynomial(
            self.numerator * other.numerator, self.denominator * other.denominator
        )

    def reciprocal(self) -> "RationalPolynomial":
        return RationalPolynomial(self.denominator, self.numerator)

    def divide(self, other: "RationalPolynomial") -> "RationalPolynomial":
        return self.multiply(other.reciprocal())

    def differentiate(self) -> "RationalPolynomial":
        """Differentiate with the quotient rule.

        Returns:
            ``(d*n' - n*d') / d^2`` flagged as having a non-negative denominator
        """
        numerator = (
            self.denominator * self.numerator.differentiate()
            - self.numerator * self.denominator.differentiate()
        )
        return RationalPolynomial(numerator, self.denominator * self.denominator, True)

    def sign_change_points(
        self,
        x1: float,
        x2: float,
        infinitesimal: float | None = None,
    ) -> list[float]:
        """Locate the points in (x1, x2] where the function changes sign.

        Numerator roots and denominator poles are separated with Sturm
        bisection, merged in increasing order and evaluated one by one. A
        candidate within ``infinitesimal`` of a root of either polynomial is
        nudged forward until its sign is well defined.

        Args:
            x1: Exclusive lower bound
            x2: Inclusive upper bound
            infinitesimal: Nudge step (default ``(x2 - x1) * 1e-9``)

        Returns:
            Ordered points just past each sign change
        """
        if self.non_negative_denominator:
            return self.numerator.sign_change_locations(x1, x2)

        if infinitesimal is None:
            infinitesimal = (x2 - x1) / 1e9

        numerator_points = sorted({*self.numerator.sign_change_locations(x1, x2), x2})
        candidates: set[float] = set()
        previous = x1
        for x in numerator_points:
            if x > previous:
                candidates.update(self.denominator.sign_change_locations(previous, x))
            candidates.add(x)
            previous = x

        changes: list[float] = []
        last_positive: bool | None = None
        for x in sorted(candidates):
            n = self.numerator.evaluate(x)
            d = self.denominator.evaluate(x)
            nudges = 0
            while (abs(n) < infinitesimal or abs(d) < infinitesimal) and nudges < MAX_NUDGES:
                x += infinitesimal
                n = self.numerator.evaluate(x)
                d = self.denominator.evaluate(x)
                nudges += 1
            positive = _sign(n) * _sign(d) > 0
            if last_positive is None:
                last_positive = positive
            elif last_positive != positive:
                last_positive = positive
                changes.append(x)
        return changes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RationalPolynomial):
            return NotImplemented
        return self.numerator == other.numerator and self.denominator == other.denominator

    def __hash__(self) -> int:
        return hash((self.numerator, self.denominator))

    def __repr__(self) -> str:
        return f"RationalPolynomial(numerator={self.numerator!r}, denominator={self.denominator!r})"

