"""Unit tests for polynomial and rational-function algebra.

Tests cover:
- Canonical form, evaluation and arithmetic
- Long division
- Sturm-sequence root counting and root separation
- Rational functions and their sign changes
"""

import math

import pytest

from strokegraph.core.polynomial import ZERO, Polynomial
from strokegraph.core.rational import RationalPolynomial
from strokegraph.exceptions import (
    IntervalError,
    InvalidInputError,
    NonFiniteCoefficientError,
    ZeroDivisorError,
)

# (x - 1)(x - 2)(x - 3)
CUBIC = Polynomial(-6, 11, -6, 1)


class TestPolynomialForm:
    """Tests for construction and canonical form."""

    def test_trailing_zeros_trimmed(self) -> None:
        """Test that high-order zero coefficients are dropped."""
        p = Polynomial(1, 2, 0, 0)
        assert p.coefficients == (1.0, 2.0)
        assert p.degree == 1

    def test_zero_polynomial(self) -> None:
        """Test the canonical zero polynomial."""
        p = Polynomial(0, 0, 0)
        assert p.is_zero()
        assert p.degree == -1
        assert p == ZERO
        assert Polynomial().is_zero()

    def test_constant_degree(self) -> None:
        """Test that a non-zero constant has degree 0."""
        assert Polynomial(5).degree == 0

    def test_non_finite_rejected(self) -> None:
        """Test that NaN and infinite coefficients are rejected."""
        with pytest.raises(NonFiniteCoefficientError):
            Polynomial(1, math.nan)
        with pytest.raises(InvalidInputError):
            Polynomial(math.inf)

    def test_monomial(self) -> None:
        """Test building a single term."""
        assert Polynomial.monomial(3, 2) == Polynomial(0, 0, 3)
        with pytest.raises(InvalidInputError):
            Polynomial.monomial(1, -1)

    def test_coefficient_lookup(self) -> None:
        """Test coefficient access beyond the degree."""
        p = Polynomial(1, 2)
        assert p.coefficient(1) == 2.0
        assert p.coefficient(5) == 0.0
        assert p.lead == 2.0

    def test_equality_and_hash(self) -> None:
        """Test value equality."""
        assert Polynomial(1, 2) == Polynomial(1.0, 2.0, 0.0)
        assert hash(Polynomial(1, 2)) == hash(Polynomial(1.0, 2.0))
        assert Polynomial(1, 2) != Polynomial(2, 1)

    def test_str(self) -> None:
        """Test human-readable rendering."""
        assert str(Polynomial(-1, 0, 2)) == "2x^2 - 1"
        assert str(Polynomial(0, -1)) == "-x"
        assert str(ZERO) == "0"


class TestPolynomialEvaluation:
    """Tests for evaluating polynomials."""

    def test_evaluate(self) -> None:
        """Test Horner evaluation."""
        p = Polynomial(1, 2, 3)
        assert p.evaluate(2.0) == 17.0
        assert p(0.0) == 1.0

    def test_evaluate_at_infinity(self) -> None:
        """Test limits of the leading term."""
        assert Polynomial(1, 0, -2).evaluate(math.inf) == -math.inf
        assert Polynomial(0, 1).evaluate(-math.inf) == -math.inf
        assert Polynomial(0, -1).evaluate(-math.inf) == math.inf
        assert Polynomial(0, 0, 1).evaluate(-math.inf) == math.inf
        assert Polynomial(5).evaluate(math.inf) == 5.0

    def test_evaluate_nan(self) -> None:
        """Test that NaN propagates."""
        assert math.isnan(Polynomial(1, 1).evaluate(math.nan))

    def test_average(self) -> None:
        """Test the mean value over an interval."""
        assert Polynomial(0, 1).average(0.0, 2.0) == pytest.approx(1.0)
        assert Polynomial(0, 1).average(3.0, 3.0) == 3.0


class TestPolynomialArithmetic:
    """Tests for polynomial arithmetic."""

    def test_add_subtract(self) -> None:
        """Test addition and subtraction."""
        a = Polynomial(1, 2, 3)
        b = Polynomial(1, 1, -3)
        assert a + b == Polynomial(2, 3)
        assert a - a == ZERO

    def test_multiply(self) -> None:
        """Test multiplication."""
        assert Polynomial(1, 1) * Polynomial(-1, 1) == Polynomial(-1, 0, 1)

    def test_negate(self) -> None:
        """Test negation."""
        assert -Polynomial(1, -2) == Polynomial(-1, 2)

    def test_differentiate(self) -> None:
        """Test term-wise differentiation."""
        assert Polynomial(1, 2, 3).differentiate() == Polynomial(2, 6)
        assert Polynomial(7).differentiate() == ZERO

    def test_antiderivative(self) -> None:
        """Test antiderivative with zero constant."""
        assert Polynomial(2, 6).antiderivative() == Polynomial(0, 2, 3)

    def test_crop(self) -> None:
        """Test dropping high-order terms."""
        p = Polynomial(1, 2, 3)
        assert p.crop(1) == Polynomial(1, 2)
        assert p.crop(5) is p
        assert p.crop(-1) == ZERO


class TestPolynomialDivision:
    """Tests for polynomial long division."""

    def test_exact_division(self) -> None:
        """Test division without remainder."""
        quotient, remainder = divmod(Polynomial(-1, 0, 1), Polynomial(-1, 1))
        assert quotient == Polynomial(1, 1)
        assert remainder == ZERO

    def test_division_with_remainder(self) -> None:
        """Test that remainder degree is below the divisor degree."""
        quotient, remainder = Polynomial(1, 0, 1).divide(Polynomial(0, 1))
        assert quotient == Polynomial(0, 1)
        assert remainder == Polynomial(1)

    def test_lower_degree_dividend(self) -> None:
        """Test dividing by a polynomial of higher degree."""
        assert Polynomial(3) // Polynomial(0, 1) == ZERO
        assert Polynomial(3) % Polynomial(0, 1) == Polynomial(3)

    def test_division_by_zero(self) -> None:
        """Test that the zero divisor is rejected."""
        with pytest.raises(ZeroDivisorError):
            Polynomial(1, 1).divide(ZERO)

    @pytest.mark.parametrize(
        "dividend, divisor",
        [
            (Polynomial(5, -3, 0, 2, 1), Polynomial(1, 2)),
            (Polynomial(1, 2, 3, 4), Polynomial(-1, 0, 3)),
            (Polynomial(0.5, -1.5, 2.25, 0, -4, 1), Polynomial(2, 0, -0.5, 3)),
            (Polynomial(7, 1), Polynomial(1, 1, 1)),
            (Polynomial(4), Polynomial(2)),
            (ZERO, Polynomial(1, 1)),
        ],
    )
    def test_division_identity(self, dividend: Polynomial, divisor: Polynomial) -> None:
        """Test that divisor * quotient + remainder rebuilds the dividend."""
        quotient, remainder = divmod(dividend, divisor)
        assert remainder.degree < divisor.degree
        rebuilt = divisor * quotient + remainder
        for x in [-2.0, -0.5, 0.0, 1.0, 3.0]:
            assert rebuilt(x) == pytest.approx(dividend(x), rel=1e-9, abs=1e-9)


class TestSturmRootCounting:
    """Tests for Sturm sequences and root counting."""

    def test_sturm_sequence_starts_with_derivative(self) -> None:
        """Test the first links of the chain."""
        chain = CUBIC.sturm_sequence()
        assert chain[0] == CUBIC
        assert chain[1] == CUBIC.differentiate()

    def test_count_roots(self) -> None:
        """Test root counts on half-open intervals."""
        assert CUBIC.count_roots(0.0, 4.0) == 3
        assert CUBIC.count_roots(1.5, 2.5) == 1
        assert CUBIC.count_roots(-1.0, 0.0) == 0

    def test_count_roots_whole_line(self) -> None:
        """Test counting over the entire real line."""
        assert CUBIC.count_roots() == 3
        assert Polynomial(1, 0, 1).count_roots() == 0

    def test_upper_bound_inclusive(self) -> None:
        """Test that a root on the upper bound is counted."""
        assert CUBIC.count_roots(0.0, 1.0) == 1
        assert CUBIC.count_roots(1.0, 1.5) == 0

    def test_repeated_root_counted_once(self) -> None:
        """Test that a double root counts as one distinct root."""
        assert Polynomial(1, -2, 1).count_roots(0.0, 2.0) == 1

    def test_invalid_interval(self) -> None:
        """Test that x2 must exceed x1."""
        with pytest.raises(IntervalError):
            CUBIC.count_roots(2.0, 2.0)

    def test_zero_polynomial_has_no_sequence(self) -> None:
        """Test that counting roots of zero is rejected."""
        with pytest.raises(InvalidInputError):
            ZERO.count_roots(0.0, 1.0)

    def test_sign_change_locations(self) -> None:
        """Test that separators bound one root each."""
        assert CUBIC.sign_change_locations(0.0, 4.0) == [1.0, 2.0, 4.0]

    def test_sign_change_locations_without_roots(self) -> None:
        """Test that a root-free interval has no separators."""
        assert CUBIC.sign_change_locations(3.5, 4.0) == []
        assert ZERO.sign_change_locations(0.0, 1.0) == []

    def test_sign_change_locations_single_root(self) -> None:
        """Test that one root gives the upper bound."""
        assert CUBIC.sign_change_locations(2.5, 4.0) == [4.0]

    def test_sign_change_locations_infinite_bounds(self) -> None:
        """Test that bisection requires a finite interval."""
        with pytest.raises(InvalidInputError):
            CUBIC.sign_change_locations(-math.inf, 0.0)


class TestRationalPolynomial:
    """Tests for RationalPolynomial class."""

    def test_evaluate(self) -> None:
        """Test evaluation with IEEE semantics at poles."""
        r = RationalPolynomial(Polynomial(1), Polynomial(0, 1))
        assert r.evaluate(2.0) == 0.5
        assert r.evaluate(0.0) == math.inf
        zero_over_zero = RationalPolynomial(Polynomial(0, 1), Polynomial(0, 1))
        assert math.isnan(zero_over_zero(0.0))

    def test_differentiate_quotient_rule(self) -> None:
        """Test that d(1/x) = -1/x^2 with a flagged denominator."""
        derivative = RationalPolynomial(Polynomial(1), Polynomial(0, 1)).differentiate()
        assert derivative.numerator == Polynomial(-1)
        assert derivative.denominator == Polynomial(0, 0, 1)
        assert derivative.non_negative_denominator
        assert derivative.evaluate(2.0) == pytest.approx(-0.25)

    def test_arithmetic(self) -> None:
        """Test add, multiply and divide without cancellation."""
        half = RationalPolynomial(Polynomial(1), Polynomial(2))
        x = RationalPolynomial(Polynomial(0, 1), Polynomial(1))
        assert half.add(half).evaluate(3.0) == pytest.approx(1.0)
        assert half.multiply(x).evaluate(4.0) == pytest.approx(2.0)
        assert x.divide(half).evaluate(3.0) == pytest.approx(6.0)
        assert x.subtract(x).evaluate(5.0) == 0.0

    def test_negate_keeps_flag(self) -> None:
        """Test that negation keeps the denominator flag."""
        r = RationalPolynomial(Polynomial(1), Polynomial(1), non_negative_denominator=True)
        assert r.negate().non_negative_denominator

    def test_equality(self) -> None:
        """Test structural equality."""
        a = RationalPolynomial(Polynomial(1), Polynomial(0, 1))
        b = RationalPolynomial(Polynomial(1.0), Polynomial(0.0, 1.0))
        assert a == b
        assert hash(a) == hash(b)

    def test_sign_changes_with_flagged_denominator(self) -> None:
        """Test that a non-negative denominator defers to the numerator."""
        r = RationalPolynomial(CUBIC, Polynomial(0, 0, 1), non_negative_denominator=True)
        assert r.sign_change_points(0.0, 4.0) == [1.0, 2.0, 4.0]

    def test_sign_changes_nudge_past_roots(self) -> None:
        """Test that candidates sitting on roots are evaluated just past them."""
        r = RationalPolynomial(CUBIC, Polynomial(1))
        changes = r.sign_change_points(0.0, 4.0)
        assert len(changes) == 2
        assert changes[0] == pytest.approx(2.0, abs=1e-6)
        assert changes[0] > 2.0
        assert changes[1] == 4.0

    def test_sign_changes_none(self) -> None:
        """Test a function without sign changes."""
        r = RationalPolynomial(Polynomial(1, 0, 1), Polynomial(2))
        assert r.sign_change_points(-3.0, 3.0) == []
