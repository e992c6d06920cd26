"""Pixel graph construction and reduction.

A PixelGraph holds one node per foreground pixel, connected to its
4-neighbors and to diagonal neighbors that are not already joined through
an orthogonal pixel. Reduction passes then simplify the raster structure:

1. Rectangle collapse: solid blocks of pixels become one centroid node
2. Short-connector collapse: branch points a few pixels apart are merged
3. Nearby-end connection: small gaps between stroke ends are bridged
4. Noise pruning: tiny dangling segments are removed

Nodes live in an arena keyed by index and adjacency is stored as index
sets, so segments and loops refer to nodes by value rather than identity.
"""

import math
import sys
from collections.abc import Callable, Iterable, Sequence

from strokegraph.core.loops import DEFAULT_MAX_SEGMENTS, extract_loops
from strokegraph.core.segment import Loop, OpenSegment
from strokegraph.core.tracer import trace_segments
from strokegraph.domain import BinaryGrid, BoundingBox, Node

ForegroundPredicate = Callable[[int, int], bool]

_DIAGONALS = ((-1, -1), (-1, 1), (1, -1), (1, 1))


class _Buckets:
    """Unit-cell spatial index used by the rectangle scan."""

    def __init__(self, nodes: Iterable[Node]) -> None:
        self._cells: dict[tuple[int, int], set[int]] = {}
        for node in nodes:
            self.add(node)

    @staticmethod
    def _cell(node: Node) -> tuple[int, int]:
        return (math.floor(node.x), math.floor(node.y))

    def add(self, node: Node) -> None:
        self._cells.setdefault(self._cell(node), set()).add(node.index)

    def discard(self, node: Node) -> None:
        cell = self._cells.get(self._cell(node))
        if cell is not None:
            cell.discard(node.index)

    def around(self, x_min: float, y_min: float, x_max: float, y_max: float) -> Iterable[int]:
        for bx in range(math.floor(x_min), math.floor(x_max) + 1):
            for by in range(math.floor(y_min), math.floor(y_max) + 1):
                yield from self._cells.get((bx, by), ())


class PixelGraph:
    """Mutable undirected graph of skeleton nodes.

    Example:
        grid = BinaryGrid.from_strings(["###", "#.#", "###"])
        graph = PixelGraph.from_binary_grid(grid)
        graph.collapse_rectangles()
        graph.open_segments()  # one ring segment
        graph.loops()          # one loop
    """

    def __init__(self) -> None:
        self._nodes: dict[int, Node] = {}
        self._adjacency: dict[int, set[int]] = {}
        self._order: list[int] = []
        self._next_index = 0

    @classmethod
    def from_grid(cls, width: int, height: int, is_foreground: ForegroundPredicate) -> "PixelGraph":
        """Build a graph from a foreground predicate over a width x height grid.

        Nodes are created in row-major order. Diagonal neighbors are joined
        only when both pixels between them are background.
        """
        graph = cls()
        pixels: dict[tuple[int, int], int] = {}
        for y in range(height):
            for x in range(width):
                if not is_foreground(x, y):
                    continue
                index = graph.add_node(x, y).index
                pixels[(x, y)] = index
                if (x - 1, y) in pixels:
                    graph.connect(pixels[(x - 1, y)], index)
                if (x, y - 1) in pixels:
                    graph.connect(pixels[(x, y - 1)], index)

        for (x, y), index in pixels.items():
            for dx, dy in _DIAGONALS:
                other = pixels.get((x + dx, y + dy))
                if other is None:
                    continue
                if (x + dx, y) not in pixels and (x, y + dy) not in pixels:
                    graph.connect(index, other)
        return graph

    @classmethod
    def from_binary_grid(cls, grid: BinaryGrid) -> "PixelGraph":
        return cls.from_grid(grid.width, grid.height, grid.is_foreground)

    # Nodes and edges

    def add_node(self, x: float, y: float, first: bool = False) -> Node:
        """Add an unconnected node.

        Args:
            x: X coordinate
            y: Y coordinate
            first: Place the node at the front of the iteration order
        """
        node = Node(self._next_index, float(x), float(y))
        self._next_index += 1
        self._nodes[node.index] = node
        self._adjacency[node.index] = set()
        if first:
            self._order.insert(0, node.index)
        else:
            self._order.append(node.index)
        return node

    def node(self, index: int) -> Node:
        return self._nodes[index]

    def nodes(self) -> list[Node]:
        """Nodes in iteration order."""
        return [self._nodes[i] for i in self._order]

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, index: object) -> bool:
        return index in self._nodes

    def neighbors(self, index: int) -> frozenset[int]:
        return frozenset(self._adjacency[index])

    def degree(self, index: int) -> int:
        return len(self._adjacency[index])

    def vertices(self, min_degree: int = 0, max_degree: int | None = None) -> list[Node]:
        """Nodes whose degree lies in [min_degree, max_degree].

        A max_degree of None leaves the range unbounded above.
        """
        upper = sys.maxsize if max_degree is None else max_degree
        return [n for n in self.nodes() if min_degree <= self.degree(n.index) <= upper]

    def edges(self) -> list[tuple[int, int]]:
        """Sorted list of (smaller index, larger index) edge pairs."""
        return sorted(
            (a, b) for a, neighbors in self._adjacency.items() for b in neighbors if a < b
        )

    def connect(self, a: int, b: int) -> bool:
        """Connect two nodes. Returns True if the edge is new."""
        if a == b or a not in self._nodes or b not in self._nodes:
            return False
        if b in self._adjacency[a]:
            return False
        self._adjacency[a].add(b)
        self._adjacency[b].add(a)
        return True

    def disconnect(self, a: int, b: int) -> None:
        if a in self._adjacency:
            self._adjacency[a].discard(b)
        if b in self._adjacency:
            self._adjacency[b].discard(a)

    def remove(self, index: int) -> None:
        """Remove a node and all of its edges; unknown indices are ignored."""
        if index not in self._nodes:
            return
        for other in self._adjacency.pop(index):
            self._adjacency[other].discard(index)
        del self._nodes[index]
        self._order.remove(index)

    def replace_nodes(
        self,
        indices: Iterable[int],
        x: float | None = None,
        y: float | None = None,
    ) -> Node:
        """Merge nodes into one new node.

        The new node is placed at the centroid unless a position is given,
        inherits every edge leading out of the merged set and goes to the
        front of the iteration order.
        """
        merged = [i for i in dict.fromkeys(indices) if i in self._nodes]
        if not merged:
            raise KeyError("no nodes to replace")
        if x is None or y is None:
            x = sum(self._nodes[i].x for i in merged) / len(merged)
            y = sum(self._nodes[i].y for i in merged) / len(merged)

        outside: set[int] = set()
        for i in merged:
            outside.update(self._adjacency[i])
        outside.difference_update(merged)
        for i in merged:
            self.remove(i)

        node = self.add_node(x, y, first=True)
        for other in sorted(outside):
            self.connect(node.index, other)
        return node

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.of(self._nodes.values())

    # Segments and loops

    def open_segments(self) -> list[OpenSegment]:
        """Trace the current segments, sorted by canonical key."""
        return trace_segments(self)

    def loops(self, max_segments: int = DEFAULT_MAX_SEGMENTS) -> list[Loop]:
        """Elementary loops of the current segments."""
        return extract_loops(self.open_segments(), max_segments)

    def remove_segment(self, segment: OpenSegment) -> None:
        """Remove the inner nodes of a segment and any end left dangling."""
        for node in segment.edge_nodes():
            self.remove(node.index)

    # Reduction passes

    def _block_at(self, anchor: Node, buckets: _Buckets) -> list[int]:
        """Nodes of the largest solid block anchored at ``anchor``.

        The scan works on unit cells offset by half a pixel. Rows are
        widened while each stays filled, and the final -2 shrink on width
        and height discards a trailing partial row or column.
        """
        left = anchor.x - 0.5
        top = anchor.y - 0.5

        def cell_of(node: Node) -> tuple[int, int]:
            return (math.floor(node.x - left), math.floor(node.y - top))

        def occupied(cx: int, cy: int) -> bool:
            x0 = left + cx
            y0 = top + cy
            for index in buckets.around(x0, y0, x0 + 1, y0 + 1):
                if cell_of(self._nodes[index]) == (cx, cy):
                    return True
            return False

        largest_width = 0
        largest_height = 0
        max_width = 0
        width = sys.maxsize
        height = 0
        y = 0
        while width > 0:
            height = y
            if largest_width * largest_height < width * height:
                largest_width, largest_height = width, height
            x = 0
            while x < width:
                if not occupied(x, y):
                    if y == 0:
                        max_width = x
                    width = x
                    if largest_width * largest_height < width * height:
                        largest_width, largest_height = width, height
                    break
                x += 1
            y += 1

        if largest_width == max_width - 1:
            largest_width = max_width - 2
        if largest_height == height - 1:
            largest_height = height - 2
        if largest_width <= 1 or largest_height <= 1:
            return []

        members = []
        for index in buckets.around(left, top, left + largest_width, top + largest_height):
            cx, cy = cell_of(self._nodes[index])
            if 0 <= cx < largest_width and 0 <= cy < largest_height:
                members.append(index)
        return sorted(members)

    def collapse_rectangles(self) -> int:
        """Replace every solid block of nodes by its centroid.

        Returns:
            Number of blocks collapsed
        """
        buckets = _Buckets(self._nodes.values())
        collapsed = 0
        i = 0
        while i < len(self._order):
            members = self._block_at(self._nodes[self._order[i]], buckets)
            if members:
                for index in members:
                    buckets.discard(self._nodes[index])
                buckets.add(self.replace_nodes(members))
                collapsed += 1
                i = max(i - len(members) + 1, 0)
            i += 1
        return collapsed

    def collapse_short_connectors(self, max_length: int = 5) -> int:
        """Merge connector segments shorter than ``max_length`` into one node.

        Segments are re-traced after every merge until none is left.

        Returns:
            Number of connectors merged
        """
        merged = 0
        while True:
            connector = next(
                (s for s in self.open_segments() if s.is_connector and s.length < max_length),
                None,
            )
            if connector is None:
                return merged
            self.replace_nodes(n.index for n in connector.nodes())
            merged += 1

    def connect_nearby_ends(self, max_distance: float = 5.0, area_fraction: float = 0.001) -> int:
        """Connect free ends closer than ``min(max_distance, area * area_fraction)``.

        Returns:
            Number of edges added
        """
        ends = self.vertices(1, 1)
        threshold = min(max_distance, self.bounding_box().area * area_fraction)
        added = 0
        for i, first in enumerate(ends):
            for second in ends[i + 1 :]:
                if first.distance_to(second) < threshold and self.connect(first.index, second.index):
                    added += 1
        return added

    def prune_noise_segments(
        self,
        total_fraction: float = 0.025,
        longest_fraction: float = 0.075,
    ) -> int:
        """Remove tiny dangling and duplicate segments.

        Only runs when the graph has more than two segments. A segment is
        noise when its arc length is below both ``total_fraction`` of the
        total arc length and ``longest_fraction`` of the longest segment.
        Noisy edge segments are removed first, then the shorter of any two
        segments joining the same pair of ends if it is noise.

        Returns:
            Number of segments removed
        """
        segments = self.open_segments()
        if len(segments) <= 2:
            return 0
        total = sum(s.distance for s in segments)
        longest = max(s.distance for s in segments)

        def is_noise(segment: OpenSegment) -> bool:
            return segment.distance < total * total_fraction and segment.distance < longest * longest_fraction

        removed = self._remove_segments([s for s in segments if s.is_edge and is_noise(s)])

        segments = self.open_segments()
        duplicates = [
            s2
            for s2 in segments
            if is_noise(s2)
            and any(
                s1 != s2
                and s1.distance >= s2.distance
                and (s1.end1, s1.end2) == (s2.end1, s2.end2)
                for s1 in segments
            )
        ]
        return removed + self._remove_segments(duplicates)

    def _remove_segments(self, segments: Sequence[OpenSegment]) -> int:
        """Delete segments, returning how many were actually removed.

        Edge nodes are collected before anything is deleted. A one-edge
        segment between two kept ends is removed by cutting its edge.
        """
        plan = [(segment, segment.edge_nodes()) for segment in segments]
        removed = 0
        for segment, nodes in plan:
            if nodes:
                for node in nodes:
                    self.remove(node.index)
                removed += 1
            elif segment.end1.index in self and segment.end2.index in self.neighbors(
                segment.end1.index
            ):
                self.disconnect(segment.end1.index, segment.end2.index)
                removed += 1
        return removed

    def __repr__(self) -> str:
        return f"PixelGraph(nodes={len(self)}, edges={len(self.edges())})"
