"""Skeleton graph vertices.

This module defines the vertex type shared by the graph, the segment tracer
and the measurement code:
- Node: A graph vertex at a (possibly averaged) 2D position
- BoundingBox: Axis-aligned extent of a set of nodes
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Node:
    """A vertex of a skeleton graph.

    Nodes are immutable values. Adjacency is owned by the graph, and the
    index is the node's slot in that graph's arena. Positions are pixel
    coordinates, fractional once nodes have been merged.

    Attributes:
        index: Arena slot of the node in its graph
        x: X coordinate in pixels (column)
        y: Y coordinate in pixels (row)
    """

    index: int
    x: float
    y: float

    @property
    def sort_key(self) -> tuple[float, float, int]:
        """Row-major ordering key (y, then x, then index)."""
        return (self.y, self.x, self.index)

    def distance_to(self, other: "Node") -> float:
        """Euclidean distance to another node."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def distance_to_point(self, x: float, y: float) -> float:
        """Euclidean distance to a point."""
        return math.hypot(self.x - x, self.y - y)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"index": self.index, "x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Node":
        """Deserialize from dictionary."""
        return cls(index=data["index"], x=data["x"], y=data["y"])


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box of a set of nodes.

    Attributes:
        min_x: Smallest x coordinate
        min_y: Smallest y coordinate
        width: Extent along x (max_x - min_x)
        height: Extent along y (max_y - min_y)
    """

    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @classmethod
    def of(cls, nodes: Iterable[Node]) -> "BoundingBox":
        """Bounding box of nodes; all zero when there are none."""
        xs: list[float] = []
        ys: list[float] = []
        for node in nodes:
            xs.append(node.x)
            ys.append(node.y)
        if not xs:
            return cls(0.0, 0.0, 0.0, 0.0)
        return cls(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
