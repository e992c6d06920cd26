"""Small dense matrices for least-squares fitting.

Matrices are immutable; every operation returns a new Matrix. Elimination
uses partial pivoting, and inversion treats an exactly zero pivot column as
singular instead of returning a meaningless result.
"""

from collections.abc import Iterable, Sequence

from strokegraph.exceptions import MatrixDimensionError, SingularMatrixError

Rows = list[list[float]]


def _leading_column(row: Sequence[float]) -> int | None:
    return next((x for x, value in enumerate(row) if value != 0), None)


def _forward_eliminate(entries: Rows, columns: int, strict: bool) -> None:
    """Reduce ``entries`` in place to row echelon form over the first ``columns``.

    With ``strict`` every column must produce a pivot on the diagonal,
    otherwise SingularMatrixError is raised.
    """
    rows = len(entries)
    pivot_row = 0
    for col in range(columns):
        if pivot_row >= rows:
            break
        best = max(range(pivot_row, rows), key=lambda r: abs(entries[r][col]))
        if entries[best][col] == 0:
            if strict:
                raise SingularMatrixError(rows, col)
            continue
        entries[pivot_row], entries[best] = entries[best], entries[pivot_row]
        pivot = entries[pivot_row]
        for r in range(pivot_row + 1, rows):
            factor = entries[r][col] / pivot[col]
            if factor == 0:
                continue
            row = entries[r]
            for k in range(col + 1, len(row)):
                row[k] -= pivot[k] * factor
            row[col] = 0.0
        pivot_row += 1


def _back_substitute(entries: Rows) -> None:
    """Turn a row echelon form into reduced row echelon form in place."""
    for y in range(len(entries) - 1, -1, -1):
        row = entries[y]
        lead_col = _leading_column(row)
        if lead_col is None:
            continue
        lead = row[lead_col]
        entries[y] = row = [value / lead for value in row]
        for above in range(y):
            factor = entries[above][lead_col]
            if factor != 0:
                entries[above] = [a - factor * b for a, b in zip(entries[above], row)]


def _determinant(entries: Sequence[Sequence[float]]) -> float:
    if len(entries) == 1:
        return entries[0][0]
    if len(entries) == 2:
        return entries[0][0] * entries[1][1] - entries[1][0] * entries[0][1]
    total = 0.0
    for y, row in enumerate(entries):
        if row[0] == 0:
            continue
        minor = [other[1:] for i, other in enumerate(entries) if i != y]
        total += (1 if y % 2 == 0 else -1) * row[0] * _determinant(minor)
    return total


class Matrix:
    """Immutable dense matrix of floats.

    Example:
        a = Matrix([[1, 2], [3, 4]])
        b = a @ a.inverse()
    """

    __slots__ = ("_entries",)

    def __init__(self, rows: Iterable[Iterable[float]]) -> None:
        entries = tuple(tuple(float(v) for v in row) for row in rows)
        if not entries:
            raise MatrixDimensionError("Empty matrix")
        width = len(entries[0])
        for row in entries:
            if not row:
                raise MatrixDimensionError("Empty matrix row")
            if len(row) != width:
                raise MatrixDimensionError("Matrix contains rows of different sizes")
        self._entries: tuple[tuple[float, ...], ...] = entries

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[float]]) -> "Matrix":
        return cls(rows)

    @classmethod
    def column(cls, values: Iterable[float]) -> "Matrix":
        """Create a single-column matrix."""
        return cls([v] for v in values)

    @classmethod
    def row(cls, values: Iterable[float]) -> "Matrix":
        """Create a single-row matrix."""
        return cls([list(values)])

    @classmethod
    def identity(cls, n: int) -> "Matrix":
        return cls([1.0 if i == j else 0.0 for j in range(n)] for i in range(n))

    @classmethod
    def zeros(cls, rows: int, columns: int | None = None) -> "Matrix":
        return cls([0.0] * (rows if columns is None else columns) for _ in range(rows))

    @property
    def rows(self) -> int:
        return len(self._entries)

    @property
    def columns(self) -> int:
        return len(self._entries[0])

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.columns

    def entry(self, row: int, column: int) -> float:
        return self._entries[row][column]

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, column = index
        return self._entries[row][column]

    def to_lists(self) -> Rows:
        return [list(row) for row in self._entries]

    def is_square(self) -> bool:
        return self.rows == self.columns

    def transpose(self) -> "Matrix":
        return Matrix(zip(*self._entries))

    def augment(self, other: "Matrix") -> "Matrix":
        """Append the columns of ``other`` to the right of this matrix."""
        if self.rows != other.rows:
            raise MatrixDimensionError(
                f"Invalid matrix dimensions for appending {self._size()} <-> {other._size()}"
            )
        return Matrix(a + b for a, b in zip(self._entries, other._entries))

    def negate(self) -> "Matrix":
        return Matrix([-v for v in row] for row in self._entries)

    def add(self, other: "Matrix") -> "Matrix":
        if self.shape != other.shape:
            raise MatrixDimensionError(
                f"Invalid matrix dimensions for addition {self._size()} + {other._size()}"
            )
        return Matrix(
            [a + b for a, b in zip(row_a, row_b)]
            for row_a, row_b in zip(self._entries, other._entries)
        )

    def multiply(self, other: "Matrix") -> "Matrix":
        """Matrix product ``self @ other``."""
        if self.columns != other.rows:
            raise MatrixDimensionError(
                f"Invalid matrix dimensions for multiplication {self._size()} * {other._size()}"
            )
        other_columns = list(zip(*other._entries))
        return Matrix(
            [sum(a * b for a, b in zip(row, col)) for col in other_columns]
            for row in self._entries
        )

    def is_row_echelon_form(self) -> bool:
        """Check that zero rows are last and leading entries move strictly right."""
        previous_lead = -1
        seen_zero_row = False
        for row in self._entries:
            lead = _leading_column(row)
            if lead is None:
                seen_zero_row = True
                continue
            if seen_zero_row or lead <= previous_lead:
                return False
            previous_lead = lead
        return True

    def row_echelon_form(self) -> "Matrix":
        entries = self.to_lists()
        _forward_eliminate(entries, self.columns, strict=False)
        return Matrix(entries)

    def reduced_row_echelon_form(self) -> "Matrix":
        entries = self.to_lists()
        if not self.is_row_echelon_form():
            _forward_eliminate(entries, self.columns, strict=False)
        _back_substitute(entries)
        return Matrix(entries)

    def inverse(self) -> "Matrix":
        """Invert with Gauss-Jordan elimination on ``[A | I]``.

        Raises:
            MatrixDimensionError: If the matrix is not square
            SingularMatrixError: If a column has no non-zero pivot
        """
        if not self.is_square():
            raise MatrixDimensionError(f"Inverse of non-square matrix {self._size()}")
        n = self.rows
        entries = self.augment(Matrix.identity(n)).to_lists()
        _forward_eliminate(entries, n, strict=True)
        _back_substitute(entries)
        return Matrix(row[n:] for row in entries)

    def determinant(self) -> float:
        """Determinant by cofactor expansion along the first column."""
        if not self.is_square():
            raise MatrixDimensionError(f"Determinant of non-square matrix {self._size()}")
        return _determinant(self._entries)

    def __matmul__(self, other: "Matrix") -> "Matrix":
        return self.multiply(other)

    def __add__(self, other: "Matrix") -> "Matrix":
        return self.add(other)

    def __neg__(self) -> "Matrix":
        return self.negate()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def _size(self) -> str:
        return f"[{self.rows}x{self.columns}]"

    def __repr__(self) -> str:
        return f"Matrix({self.to_lists()!r})"
