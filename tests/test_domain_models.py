"""Tests for domain models to verify they work correctly."""

import pytest

from strokegraph.domain import BinaryGrid, BoundingBox, Node
from strokegraph.exceptions import InvalidInputError


class TestNode:
    """Tests for Node class."""

    def test_node_creation(self) -> None:
        """Test basic node creation."""
        n = Node(3, 10.0, 20.0)
        assert n.index == 3
        assert n.x == 10.0
        assert n.y == 20.0

    def test_node_to_tuple(self) -> None:
        """Test node to tuple conversion."""
        assert Node(0, 1.5, 2.5).to_tuple() == (1.5, 2.5)

    def test_node_serialization(self) -> None:
        """Test node serialization and deserialization."""
        n1 = Node(7, 4.0, 5.5)
        n2 = Node.from_dict(n1.to_dict())
        assert n2 == n1

    def test_node_immutable(self) -> None:
        """Test that node is immutable."""
        n = Node(0, 1.0, 1.0)
        with pytest.raises(AttributeError):
            n.x = 3.0  # type: ignore

    def test_sort_key_is_row_major(self) -> None:
        """Test that nodes order by row, then column, then index."""
        nodes = [Node(0, 5.0, 1.0), Node(1, 0.0, 2.0), Node(2, 2.0, 1.0), Node(3, 2.0, 1.0)]
        ordered = sorted(nodes, key=lambda n: n.sort_key)
        assert [n.index for n in ordered] == [2, 3, 0, 1]

    def test_distances(self) -> None:
        """Test euclidean distances to nodes and points."""
        a = Node(0, 0.0, 0.0)
        b = Node(1, 3.0, 4.0)
        assert a.distance_to(b) == 5.0
        assert b.distance_to_point(3.0, 0.0) == 4.0

    def test_equality_includes_index(self) -> None:
        """Test that nodes at the same position in different slots differ."""
        assert Node(0, 1.0, 1.0) != Node(1, 1.0, 1.0)


class TestBoundingBox:
    """Tests for BoundingBox class."""

    def test_of_nodes(self) -> None:
        """Test bounding box of a set of nodes."""
        box = BoundingBox.of([Node(0, 1.0, 2.0), Node(1, 4.0, 8.0), Node(2, 2.0, 3.0)])
        assert box == BoundingBox(1.0, 2.0, 3.0, 6.0)
        assert box.area == 18.0

    def test_of_nothing(self) -> None:
        """Test that an empty node set gives an all-zero box."""
        box = BoundingBox.of([])
        assert box.area == 0.0
        assert (box.min_x, box.min_y) == (0.0, 0.0)

    def test_single_node_has_zero_area(self) -> None:
        """Test that one node spans no area."""
        assert BoundingBox.of([Node(0, 5.0, 5.0)]).area == 0.0


class TestBinaryGrid:
    """Tests for BinaryGrid class."""

    def test_from_strings(self) -> None:
        """Test creating a grid from text art."""
        grid = BinaryGrid.from_strings(["#.#", "..#"])
        assert (grid.width, grid.height) == (3, 2)
        assert grid.is_foreground(0, 0)
        assert not grid.is_foreground(1, 0)
        assert grid.is_foreground(2, 1)
        assert grid.foreground_count == 3

    def test_from_strings_pads_short_rows(self) -> None:
        """Test that missing trailing cells are background."""
        grid = BinaryGrid.from_strings(["####", "#"])
        assert grid.width == 4
        assert grid.to_strings() == ["####", "#..."]

    def test_from_strings_custom_ink(self) -> None:
        """Test custom ink characters."""
        grid = BinaryGrid.from_strings(["ab", "ba"], ink="a")
        assert grid.to_strings() == ["#.", ".#"]

    def test_from_points(self) -> None:
        """Test creating a grid from ink coordinates."""
        grid = BinaryGrid.from_points(3, 2, [(0, 0), (2, 1)])
        assert grid.to_strings() == ["#..", "..#"]

    def test_from_rows(self) -> None:
        """Test creating a grid from truthy rows."""
        grid = BinaryGrid.from_rows([[1, 0], [0, 1]])
        assert grid.to_strings() == ["#.", ".#"]

    def test_out_of_range_is_background(self) -> None:
        """Test that cells outside the grid are never ink."""
        grid = BinaryGrid.from_strings(["#"])
        assert not grid.is_foreground(-1, 0)
        assert not grid.is_foreground(0, 1)

    def test_empty_grid(self) -> None:
        """Test an empty grid."""
        grid = BinaryGrid.from_strings([])
        assert (grid.width, grid.height) == (0, 0)
        assert grid.is_empty()

    def test_ragged_cells_rejected(self) -> None:
        """Test that rows of the wrong width are rejected."""
        with pytest.raises(InvalidInputError):
            BinaryGrid(width=2, height=1, cells=((True,),))

    def test_row_count_mismatch_rejected(self) -> None:
        """Test that a wrong number of rows is rejected."""
        with pytest.raises(InvalidInputError):
            BinaryGrid(width=1, height=2, cells=((True,),))

    def test_invalid_input_is_value_error(self) -> None:
        """Test that contract violations are also ValueErrors."""
        with pytest.raises(ValueError):
            BinaryGrid(width=-1, height=0, cells=())

