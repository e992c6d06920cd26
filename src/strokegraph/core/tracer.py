"""Segment tracing over a PixelGraph.

A segment starts at every node whose degree is not 2 and follows each
incident edge through degree-2 nodes until it reaches another such node or
returns to where it started. Components made only of degree-2 nodes are
plain rings and are traced from one of their nodes.
"""

from typing import TYPE_CHECKING

from strokegraph.core.segment import OpenSegment

if TYPE_CHECKING:
    from strokegraph.core.graph import PixelGraph


def trace_from(graph: "PixelGraph", start_index: int) -> list[OpenSegment]:
    """Trace every segment leaving one node.

    Args:
        graph: Graph to walk
        start_index: Index of the node to start from

    Returns:
        One segment per incident edge (duplicates are possible for rings)
    """
    start = graph.node(start_index)
    segments: list[OpenSegment] = []
    for first in sorted(graph.neighbors(start_index)):
        previous = start_index
        current = first
        length = 1
        distance = start.distance_to(graph.node(first))
        while graph.degree(current) == 2:
            following = next(i for i in graph.neighbors(current) if i != previous)
            step = graph.node(current).distance_to(graph.node(following))
            previous, current = current, following
            length += 1
            distance += step
            if current == start_index:
                break
        segments.append(
            OpenSegment.create(
                graph,
                start,
                graph.node(current),
                length,
                distance,
                graph.node(first),
                graph.node(previous),
            )
        )
    return segments


def trace_segments(graph: "PixelGraph") -> list[OpenSegment]:
    """Trace all segments of a graph.

    Isolated nodes give single-node segments. Segments found from both of
    their ends are reported once.

    Returns:
        Segments sorted by their canonical key
    """
    found: dict[tuple[int, int, int, int], OpenSegment] = {}
    covered: set[int] = set()

    for node in graph.nodes():
        degree = graph.degree(node.index)
        if degree == 0:
            segment = OpenSegment.single(graph, node)
            found.setdefault(segment.key, segment)
            covered.add(node.index)
        elif degree != 2:
            for segment in trace_from(graph, node.index):
                if segment.key not in found:
                    found[segment.key] = segment
                    covered.update(n.index for n in segment.walk())

    for node in graph.nodes():
        if node.index in covered or graph.degree(node.index) != 2:
            continue
        for segment in trace_from(graph, node.index):
            if segment.key not in found:
                found[segment.key] = segment
                covered.update(n.index for n in segment.walk())

    return [found[key] for key in sorted(found)]
