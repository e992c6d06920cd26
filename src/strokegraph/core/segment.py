"""Open segments and loops of a skeleton graph.

An OpenSegment is a maximal path between two interesting nodes (degree
other than 2), a closed ring through one node, or a single isolated node.
Its identity is the ordered pair of end nodes plus the first node stepped
to from each end, so two walks describing the same path from opposite
ends compare equal.

Segments keep a reference to the graph they were traced from and re-walk
it on demand. After the graph is mutated, previously obtained segments
are stale.
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strokegraph.core import measurements
from strokegraph.core.regression import PolynomialRegression
from strokegraph.domain import Node

if TYPE_CHECKING:
    from strokegraph.core.graph import PixelGraph

SegmentKey = tuple[int, int, int, int]


@dataclass(frozen=True, slots=True)
class OpenSegment:
    """A maximal path of a skeleton graph.

    Use ``OpenSegment.create`` to get the canonical orientation.

    Attributes:
        end1: First end node in row-major order
        end2: Second end node (same as end1 for rings and single nodes)
        neighbor1: Node stepped to from end1 (None for a single node)
        neighbor2: Node stepped to from end2 (None for a single node)
        length: Number of edges along the path, including the closing edge
            of a ring
        distance: Euclidean arc length along the path
    """

    end1: Node
    end2: Node
    neighbor1: Node | None
    neighbor2: Node | None
    length: int = field(compare=False)
    distance: float = field(compare=False)
    graph: "PixelGraph" = field(compare=False, repr=False)

    @classmethod
    def create(
        cls,
        graph: "PixelGraph",
        end_a: Node,
        end_b: Node,
        length: int,
        distance: float,
        neighbor_a: Node | None,
        neighbor_b: Node | None,
    ) -> "OpenSegment":
        """Create a segment in canonical orientation.

        Ends are ordered row-major. For a ring the walk starts towards the
        smaller of the two neighbors.
        """
        if end_b.sort_key < end_a.sort_key:
            end_a, end_b = end_b, end_a
            neighbor_a, neighbor_b = neighbor_b, neighbor_a
        if (
            end_a == end_b
            and neighbor_a is not None
            and neighbor_b is not None
            and neighbor_b.sort_key < neighbor_a.sort_key
        ):
            neighbor_a, neighbor_b = neighbor_b, neighbor_a
        return cls(end_a, end_b, neighbor_a, neighbor_b, length, distance, graph)

    @classmethod
    def single(cls, graph: "PixelGraph", node: Node) -> "OpenSegment":
        """Create the segment of an isolated node."""
        return cls(node, node, None, None, 0, 0.0, graph)

    @property
    def key(self) -> SegmentKey:
        """Canonical index tuple used for ordering."""
        return (
            self.end1.index,
            self.end2.index,
            self.neighbor1.index if self.neighbor1 is not None else -1,
            self.neighbor2.index if self.neighbor2 is not None else -1,
        )

    @property
    def is_single(self) -> bool:
        """A lone node without edges."""
        return self.end1 == self.end2 and self.length == 0

    @property
    def is_loop(self) -> bool:
        """A ring that starts and ends at the same node."""
        return self.end1 == self.end2 and self.length >= 3

    @property
    def is_isolated(self) -> bool:
        """Not attached to anything at either end."""
        return self.is_single or (
            self.graph.degree(self.end1.index) == 1 and self.graph.degree(self.end2.index) == 1
        )

    @property
    def is_edge(self) -> bool:
        """Has at least one free end."""
        return (
            self.is_single
            or self.graph.degree(self.end1.index) == 1
            or self.graph.degree(self.end2.index) == 1
        )

    @property
    def is_connector(self) -> bool:
        """Joins two distinct branch nodes."""
        return (
            self.end1 != self.end2
            and self.graph.degree(self.end1.index) > 2
            and self.graph.degree(self.end2.index) > 2
        )

    def other_end(self, node_index: int) -> int:
        """Index of the end opposite ``node_index``."""
        return self.end2.index if node_index == self.end1.index else self.end1.index

    def walk(self) -> Iterator[Node]:
        """Yield the nodes from end1 to end2.

        A ring yields each of its nodes once, starting at end1.
        """
        yield self.end1
        if self.neighbor1 is None:
            return
        graph = self.graph
        previous = self.end1
        current = self.neighbor1
        while current != self.end1:
            yield current
            if current == self.end2:
                return
            neighbors = graph.neighbors(current.index)
            if len(neighbors) != 2:
                return
            following = next(i for i in neighbors if i != previous.index)
            previous, current = current, graph.node(following)

    def nodes(self) -> list[Node]:
        """Nodes of the segment in walk order."""
        return list(self.walk())

    @property
    def node_count(self) -> int:
        return len(self.nodes())

    def inner_nodes(self) -> list[Node]:
        """Nodes strictly between the ends."""
        nodes = self.nodes()
        if self.is_single:
            return []
        if self.end1 == self.end2:
            return nodes[1:]
        return nodes[1:-1]

    def edge_nodes(self) -> list[Node]:
        """Nodes removed when the segment is deleted from its graph.

        These are the inner nodes plus any end that would be left dangling.
        """
        if self.is_single:
            return [self.end1]
        result: list[Node] = []
        if self.graph.degree(self.end1.index) <= 1:
            result.append(self.end1)
        result.extend(self.inner_nodes())
        if self.end2 != self.end1 and self.graph.degree(self.end2.index) == 1:
            result.append(self.end2)
        return result

    @property
    def start(self) -> Node:
        return self.end1

    @property
    def end(self) -> Node:
        return self.end2

    @property
    def chord_length(self) -> float:
        """Straight-line distance between the two ends."""
        return self.end1.distance_to(self.end2)

    def mean(self, direction: float) -> float:
        return measurements.mean(self.nodes(), direction)

    def deviation(self, direction: float) -> float:
        return measurements.deviation(self.nodes(), direction)

    def skewness(self, direction: float) -> float:
        return measurements.skewness(self.nodes(), direction)

    def turning_curvature(self) -> float:
        return measurements.turning_curvature(self.nodes())

    def relative_curvature(self) -> float:
        """Turning curvature scaled by how much longer the path is than its chord."""
        chord = self.chord_length
        if chord == 0:
            return math.nan
        return self.turning_curvature() * math.log(1 + self.distance / chord)

    def circular_curvature(self) -> float:
        """Curvature of the circle with this segment's arc and chord."""
        return measurements.circular_curvature(self.distance, self.chord_length)

    def weighted_circular_curvature(self) -> float:
        """Circular curvature multiplied by arc length."""
        return measurements.weighted_circular_curvature(self.distance, self.chord_length)

    def regression_curves(
        self,
        degree: int,
        distance_min: float = -math.inf,
        distance_max: float = math.inf,
    ) -> tuple[PolynomialRegression, PolynomialRegression]:
        """Fit x(t) and y(t) against arc length t.

        Args:
            degree: Polynomial degree of both fits
            distance_min: Start of the arc-length window
            distance_max: End of the arc-length window

        Returns:
            Tuple of (x regression, y regression)
        """
        return measurements.regression_curves(self.nodes(), degree, distance_min, distance_max)

    def to_dict(self) -> dict:
        """Serialize the segment's identity and measurements."""
        return {
            "end1": self.end1.to_dict(),
            "end2": self.end2.to_dict(),
            "length": self.length,
            "distance": self.distance,
            "nodes": self.node_count,
            "single": self.is_single,
            "loop": self.is_loop,
            "edge": self.is_edge,
            "connector": self.is_connector,
        }

    def __repr__(self) -> str:
        if self.is_single:
            return f"OpenSegment(node=({self.end1.x}, {self.end1.y}))"
        return (
            f"OpenSegment(({self.end1.x}, {self.end1.y}) -> ({self.end2.x}, {self.end2.y}), "
            f"length={self.length}, distance={self.distance:.3f})"
        )


@dataclass(frozen=True, slots=True)
class Loop:
    """A set of segments forming one closed walk.

    Attributes:
        segments: Segments of the loop
    """

    segments: frozenset[OpenSegment]

    @property
    def key(self) -> tuple[SegmentKey, ...]:
        """Sorted segment keys used for ordering."""
        return tuple(sorted(s.key for s in self.segments))

    @property
    def distance(self) -> float:
        """Total arc length of the loop."""
        return sum(s.distance for s in self.segments)

    @property
    def length(self) -> int:
        """Total path length (edge count) of the loop."""
        return sum(s.length for s in self.segments)

    def sorted_segments(self) -> list[OpenSegment]:
        return sorted(self.segments, key=lambda s: s.key)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[OpenSegment]:
        return iter(self.sorted_segments())

    def __contains__(self, segment: object) -> bool:
        return segment in self.segments

    def to_dict(self) -> dict:
        return {
            "segments": len(self.segments),
            "length": self.length,
            "distance": self.distance,
        }
