"""Binary foreground grids.

A BinaryGrid is the input of graph construction: a width x height raster
where every cell is either ink (foreground) or background. Thresholding and
thinning happen upstream; the grid only answers membership queries.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from strokegraph.exceptions import InvalidInputError

DEFAULT_INK_CHARS = "#X@*1"


@dataclass(frozen=True, slots=True)
class BinaryGrid:
    """Immutable raster of foreground flags, stored row by row.

    Attributes:
        width: Number of columns
        height: Number of rows
        cells: Row-major foreground flags, ``cells[y][x]``
    """

    width: int
    height: int
    cells: tuple[tuple[bool, ...], ...]

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise InvalidInputError(f"Grid size ({self.width}x{self.height}) cannot be negative")
        if len(self.cells) != self.height:
            raise InvalidInputError(
                f"Grid has {len(self.cells)} rows, expected {self.height}"
            )
        for row in self.cells:
            if len(row) != self.width:
                raise InvalidInputError(
                    f"Grid row has {len(row)} cells, expected {self.width}"
                )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[bool]]) -> "BinaryGrid":
        """Create a grid from rows of truthy values."""
        cells = tuple(tuple(bool(v) for v in row) for row in rows)
        width = len(cells[0]) if cells else 0
        return cls(width=width, height=len(cells), cells=cells)

    @classmethod
    def from_strings(cls, lines: Iterable[str], ink: str = DEFAULT_INK_CHARS) -> "BinaryGrid":
        """Create a grid from text art.

        Rows are padded on the right to the longest line, so trailing
        background may be omitted.

        Example:
            BinaryGrid.from_strings([
                "###",
                "#.#",
                "###",
            ])
        """
        rows = [line.rstrip("\n") for line in lines]
        width = max((len(row) for row in rows), default=0)
        cells = tuple(
            tuple(i < len(row) and row[i] in ink for i in range(width)) for row in rows
        )
        return cls(width=width, height=len(cells), cells=cells)

    @classmethod
    def from_points(cls, width: int, height: int, points: Iterable[tuple[int, int]]) -> "BinaryGrid":
        """Create a grid with ink at the given (x, y) points."""
        filled = set(points)
        cells = tuple(
            tuple((x, y) in filled for x in range(width)) for y in range(height)
        )
        return cls(width=width, height=height, cells=cells)

    def is_foreground(self, x: int, y: int) -> bool:
        """Check whether (x, y) is ink; out-of-range cells are background."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.cells[y][x]
        return False

    @property
    def foreground_count(self) -> int:
        return sum(sum(row) for row in self.cells)

    def is_empty(self) -> bool:
        return self.foreground_count == 0

    def to_strings(self, ink: str = "#", background: str = ".") -> list[str]:
        """Render the grid as text art."""
        return ["".join(ink if v else background for v in row) for row in self.cells]
