"""Dense polynomials with exact arithmetic and Sturm root counting.

Polynomials are immutable and stored in canonical trimmed form: trailing
zero coefficients are dropped and the zero polynomial is the single
coefficient ``0.0`` with degree -1.

Real roots are counted with a Sturm sequence, so no numeric root solving
is needed to know how many roots lie in an interval or to separate them.
"""

import math
from collections.abc import Iterable

from strokegraph.exceptions import (
    IntervalError,
    InvalidInputError,
    NonFiniteCoefficientError,
    ZeroDivisorError,
)


def _sign_changes(chain: Iterable["Polynomial"], x: float) -> int:
    """Count sign changes of a polynomial chain evaluated at x, skipping zeros."""
    current_sign: bool | None = None
    changes = 0
    for polynomial in chain:
        y = polynomial.evaluate(x)
        if y != 0:
            positive = y > 0
            if current_sign is None:
                current_sign = positive
            elif current_sign != positive:
                current_sign = positive
                changes += 1
    return changes


class Polynomial:
    """A real polynomial in ascending-power coefficient form.

    ``Polynomial(1, 2, 3)`` is ``1 + 2x + 3x^2``.

    Attributes:
        coefficients: Trimmed coefficient tuple, lowest power first
    """

    __slots__ = ("_coefficients", "_sturm")

    def __init__(self, *coefficients: float) -> None:
        values = tuple(float(c) for c in coefficients)
        if not all(math.isfinite(c) for c in values):
            raise NonFiniteCoefficientError(values)

        end = len(values)
        while end > 0 and values[end - 1] == 0:
            end -= 1

        self._coefficients: tuple[float, ...] = values[:end] if end else (0.0,)
        self._sturm: tuple[Polynomial, ...] | None = None

    @classmethod
    def monomial(cls, coefficient: float, power: int) -> "Polynomial":
        """Create ``coefficient * x^power``."""
        if power < 0:
            raise InvalidInputError(f"Power ({power}) cannot be negative")
        return cls(*([0.0] * power), coefficient)

    @property
    def coefficients(self) -> tuple[float, ...]:
        """Trimmed coefficients, lowest power first."""
        return self._coefficients

    @property
    def degree(self) -> int:
        """Degree of the polynomial, -1 for the zero polynomial."""
        return -1 if self.is_zero() else len(self._coefficients) - 1

    @property
    def lead(self) -> float:
        """Leading coefficient (0.0 for the zero polynomial)."""
        return self._coefficients[-1]

    def coefficient(self, power: int) -> float:
        """Get the coefficient of ``x^power`` (0.0 beyond the degree)."""
        if power < 0:
            raise InvalidInputError(f"Power ({power}) cannot be negative")
        if power >= len(self._coefficients):
            return 0.0
        return self._coefficients[power]

    def is_zero(self) -> bool:
        """Check for the zero polynomial."""
        return len(self._coefficients) == 1 and self._coefficients[0] == 0

    def evaluate(self, x: float) -> float:
        """Evaluate the polynomial at x.

        Infinite arguments evaluate to the limit of the leading term and
        NaN propagates.

        Args:
            x: Point to evaluate at

        Returns:
            Value of the polynomial at x
        """
        if math.isnan(x):
            return x
        coefficients = self._coefficients
        if math.isinf(x):
            if len(coefficients) == 1:
                return coefficients[0]
            limit = x if len(coefficients) % 2 == 0 else math.inf
            return math.copysign(limit, limit * coefficients[-1])

        result = 0.0
        for c in reversed(coefficients):
            result = result * x + c
        return result

    def __call__(self, x: float) -> float:
        return self.evaluate(x)

    def differentiate(self) -> "Polynomial":
        """Get the derivative polynomial."""
        if len(self._coefficients) == 1:
            return ZERO
        return Polynomial(*(c * i for i, c in enumerate(self._coefficients) if i > 0))

    def antiderivative(self) -> "Polynomial":
        """Get the antiderivative with zero constant term."""
        return Polynomial(0.0, *(c / (i + 1) for i, c in enumerate(self._coefficients)))

    def average(self, x1: float, x2: float) -> float:
        """Get the mean value of the polynomial over [x1, x2]."""
        if x2 == x1:
            return self.evaluate(x1)
        integral = self.antiderivative()
        return (integral.evaluate(x2) - integral.evaluate(x1)) / (x2 - x1)

    def negate(self) -> "Polynomial":
        """Get the additive inverse."""
        return Polynomial(*(-c for c in self._coefficients))

    def add(self, other: "Polynomial") -> "Polynomial":
        """Add another polynomial."""
        size = max(len(self._coefficients), len(other._coefficients))
        return Polynomial(*(self.coefficient(i) + other.coefficient(i) for i in range(size)))

    def subtract(self, other: "Polynomial") -> "Polynomial":
        """Subtract another polynomial."""
        return self.add(other.negate())

    def multiply(self, other: "Polynomial") -> "Polynomial":
        """Multiply by another polynomial."""
        product = [0.0] * (len(self._coefficients) + len(other._coefficients) - 1)
        for i, a in enumerate(self._coefficients):
            for j, b in enumerate(other._coefficients):
                product[i + j] += a * b
        return Polynomial(*product)

    def crop(self, degree: int) -> "Polynomial":
        """Drop every term above ``degree``.

        Args:
            degree: Highest power to keep (negative keeps nothing)

        Returns:
            This polynomial if it is already of at most ``degree``
        """
        if degree >= self.degree:
            return self
        if degree < 0:
            return ZERO
        return Polynomial(*self._coefficients[: degree + 1])

    def divide(self, divisor: "Polynomial") -> tuple["Polynomial", "Polynomial"]:
        """Long division by ``divisor``.

        Args:
            divisor: Non-zero polynomial to divide by

        Returns:
            Tuple of (quotient, remainder) with remainder degree below the
            divisor's degree

        Raises:
            ZeroDivisorError: If divisor is the zero polynomial
        """
        if divisor.is_zero():
            raise ZeroDivisorError()

        quotient = ZERO
        remainder = self
        while not remainder.is_zero() and remainder.degree >= divisor.degree:
            term = Polynomial.monomial(
                remainder.lead / divisor.lead, remainder.degree - divisor.degree
            )
            quotient = quotient.add(term)
            # The leading term cancels exactly; rounding must not keep it alive.
            initial_degree = remainder.degree
            remainder = remainder.subtract(term.multiply(divisor)).crop(initial_degree - 1)
        return quotient, remainder

    def quotient(self, divisor: "Polynomial") -> "Polynomial":
        """Quotient of long division by ``divisor``."""
        return self.divide(divisor)[0]

    def remainder(self, divisor: "Polynomial") -> "Polynomial":
        """Remainder of long division by ``divisor``."""
        return self.divide(divisor)[1]

    def sturm_sequence(self) -> tuple["Polynomial", ...]:
        """Build the Sturm sequence of this polynomial.

        The sequence starts with the polynomial and its derivative, then
        continues with negated remainders until a remainder is exactly zero.

        Raises:
            InvalidInputError: For the zero polynomial
        """
        if self.is_zero():
            raise InvalidInputError("The zero polynomial has no Sturm sequence")
        if self._sturm is None:
            chain = [self]
            previous = self
            current = self.differentiate()
            while not current.is_zero():
                chain.append(current)
                following = previous.remainder(current).crop(current.degree - 1)
                previous, current = current, following.negate()
            self._sturm = tuple(chain)
        return self._sturm

    def count_roots(self, x1: float = -math.inf, x2: float = math.inf) -> int:
        """Count distinct real roots in the half-open interval (x1, x2].

        Args:
            x1: Exclusive lower bound
            x2: Inclusive upper bound

        Returns:
            Number of distinct roots in the interval

        Raises:
            IntervalError: If x2 <= x1
            InvalidInputError: For the zero polynomial
        """
        if not x2 > x1:
            raise IntervalError(x1, x2)
        chain = self.sturm_sequence()
        return _sign_changes(chain, x1) - _sign_changes(chain, x2)

    def sign_change_locations(self, x1: float, x2: float) -> list[float]:
        """Find points that separate the roots in (x1, x2].

        Each returned point bounds exactly one root together with the
        previous point (or x1 for the first one). When the last point is not
        x2 there are no roots between it and x2. Points come from bisection,
        so they usually sit on interval halves rather than on the roots.

        Args:
            x1: Exclusive lower bound (finite)
            x2: Inclusive upper bound (finite)

        Returns:
            Ordered separator points, empty when there are no roots
        """
        if self.is_zero():
            return []
        if not (math.isfinite(x1) and math.isfinite(x2)):
            raise InvalidInputError(f"Interval ({x1}, {x2}] must be finite")

        total = self.count_roots(x1, x2)
        if total == 0:
            return []
        if total == 1:
            return [x2]

        center = (x1 + x2) / 2.0
        if not x1 < center < x2:
            return [x2]

        left = self.count_roots(x1, center)
        right = total - left
        if left == 1 and right == 1:
            return [center, x2]
        if left == 0:
            return self.sign_change_locations(center, x2)
        if right == 0:
            return self.sign_change_locations(x1, center)
        if left == 1:
            return [center, *self.sign_change_locations(center, x2)]
        if right == 1:
            return [*self.sign_change_locations(x1, center), x2]
        return [*self.sign_change_locations(x1, center), *self.sign_change_locations(center, x2)]

    def __add__(self, other: "Polynomial") -> "Polynomial":
        return self.add(other)

    def __sub__(self, other: "Polynomial") -> "Polynomial":
        return self.subtract(other)

    def __mul__(self, other: "Polynomial") -> "Polynomial":
        return self.multiply(other)

    def __neg__(self) -> "Polynomial":
        return self.negate()

    def __divmod__(self, other: "Polynomial") -> tuple["Polynomial", "Polynomial"]:
        return self.divide(other)

    def __floordiv__(self, other: "Polynomial") -> "Polynomial":
        return self.quotient(other)

    def __mod__(self, other: "Polynomial") -> "Polynomial":
        return self.remainder(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self._coefficients == other._coefficients

    def __hash__(self) -> int:
        return hash(self._coefficients)

    def __repr__(self) -> str:
        return f"Polynomial({', '.join(repr(c) for c in self._coefficients)})"

    def __str__(self) -> str:
        terms: list[str] = []
        for power in range(len(self._coefficients) - 1, -1, -1):
            c = self._coefficients[power]
            if c == 0 and len(self._coefficients) > 1:
                continue
            magnitude = abs(c)
            text = "" if magnitude == 1 and power > 0 else f"{magnitude:g}"
            if power == 1:
                text += "x"
            elif power > 1:
                text += f"x^{power}"
            if not terms:
                terms.append(f"-{text}" if c < 0 else text)
            else:
                terms.append(f"{'-' if c < 0 else '+'} {text}")
        return " ".join(terms)


ZERO = Polynomial(0.0)
