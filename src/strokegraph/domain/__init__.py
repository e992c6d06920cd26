"""Domain models for strokegraph.

This module contains the value types that flow between the graph, the
tracer and the measurement code. All models are immutable (frozen
dataclasses) and independent of image libraries.

Key classes:
- Node: A graph vertex at a 2D position
- BoundingBox: Extent of a set of nodes
- BinaryGrid: Foreground raster used to build a graph
"""

from strokegraph.domain.grid import BinaryGrid
from strokegraph.domain.node import BoundingBox, Node

__all__: list[str] = [
    "BinaryGrid",
    "BoundingBox",
    "Node",
]
