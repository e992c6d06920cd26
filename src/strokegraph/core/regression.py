"""Least-squares polynomial regression through the normal equations."""

import math
from collections.abc import Sequence

from strokegraph.core.matrix import Matrix
from strokegraph.core.polynomial import Polynomial
from strokegraph.exceptions import RegressionError, SingularMatrixError


class PolynomialRegression:
    """Least-squares fit of a polynomial of fixed degree to (x, y) samples.

    The coefficients solve ``(X^T X) b = X^T y`` where X is the Vandermonde
    matrix of the samples. Fewer distinct x values than ``degree + 1`` make
    ``X^T X`` singular and the fit fails with SingularMatrixError.

    Example:
        fit = PolynomialRegression([0, 1, 2], [0, 1, 2], degree=1)
        fit.polynomial.evaluate(3.0)  # ~3.0
        fit.r2                        # ~1.0

    Attributes:
        polynomial: Fitted polynomial
        degree: Requested degree
        ss_residual: Residual sum of squares
        ss_total: Total sum of squares around the mean of y
    """

    __slots__ = ("polynomial", "degree", "ss_residual", "ss_total")

    def __init__(self, x: Sequence[float], y: Sequence[float], degree: int) -> None:
        if len(x) != len(y):
            raise RegressionError(f"sample sizes differ ({len(x)} x values, {len(y)} y values)")
        if len(x) == 0:
            raise RegressionError("no data")
        if degree < 0:
            raise RegressionError(f"degree ({degree}) cannot be less than 0")
        distinct = len(set(x))
        if distinct < degree + 1:
            # Rounding would leave a tiny non-zero pivot in X^T X
            raise SingularMatrixError(degree + 1, distinct)

        design = Matrix([xi**power for power in range(degree + 1)] for xi in x)
        design_t = design.transpose()
        solution = (design_t @ design).inverse() @ design_t @ Matrix.column(y)

        self.degree = degree
        self.polynomial = Polynomial(*(solution[i, 0] for i in range(degree + 1)))

        mean = sum(y) / len(y)
        self.ss_residual = sum((yi - self.polynomial.evaluate(xi)) ** 2 for xi, yi in zip(x, y))
        self.ss_total = sum((yi - mean) ** 2 for yi in y)

    @property
    def r2(self) -> float:
        """Coefficient of determination, NaN when y is constant."""
        if self.ss_total == 0:
            return math.nan
        return 1.0 - self.ss_residual / self.ss_total

    def evaluate(self, x: float) -> float:
        return self.polynomial.evaluate(x)

    def __repr__(self) -> str:
        return f"PolynomialRegression(r2={self.r2!r}, polynomial={self.polynomial!r})"
