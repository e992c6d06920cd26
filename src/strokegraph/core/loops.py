"""Elementary loop extraction.

Segments are treated as the edges of a multigraph whose vertices are the
segment end nodes. A depth-first search records, for every visited node,
the segment it was reached through. Each segment that leads back to an
already visited node closes a cycle, rebuilt by walking both parent chains
to their first common node.

When a component produces several cycles they may share segments (two
bowls of an "8" both contain the shared stroke). Each cycle is searched
again on its own segments; a cycle that still yields exactly one loop is
elementary, otherwise its own decomposition replaces it.
"""

from collections.abc import Iterable, Iterator, Sequence

from strokegraph.core.segment import Loop, OpenSegment

DEFAULT_MAX_SEGMENTS = 20


def _incidence(segments: Sequence[OpenSegment]) -> dict[int, list[OpenSegment]]:
    incident: dict[int, list[OpenSegment]] = {}
    for segment in segments:
        incident.setdefault(segment.end1.index, []).append(segment)
        if segment.end2.index != segment.end1.index:
            incident.setdefault(segment.end2.index, []).append(segment)
    return incident


def _close_cycle(
    node: int,
    back_edge: OpenSegment,
    parent: dict[int, OpenSegment | None],
) -> frozenset[OpenSegment] | None:
    """Build the cycle closed by ``back_edge`` arriving at visited ``node``."""
    path_nodes: list[int] = []
    path: list[OpenSegment] = []
    trace: int | None = node
    while trace is not None:
        path_nodes.append(trace)
        segment = parent.get(trace)
        if segment is None:
            trace = None
        else:
            path.append(segment)
            trace = segment.other_end(trace)

    current = back_edge.other_end(node)
    other_path: list[OpenSegment] = []
    on_path = set(path_nodes)
    while current not in on_path:
        segment = parent.get(current)
        if segment is None:
            return None
        other_path.append(segment)
        current = segment.other_end(current)

    cycle = set(other_path)
    for path_node, segment in zip(path_nodes, path):
        if path_node == current:
            break
        cycle.add(segment)
    cycle.add(back_edge)
    return frozenset(cycle)


def _search(
    root: int,
    incident: dict[int, list[OpenSegment]],
    max_segments: int,
    parent: dict[int, OpenSegment | None],
    cycles: set[frozenset[OpenSegment]],
) -> None:
    """Depth-first search from ``root`` with an explicit stack."""
    parent[root] = None
    stack: list[tuple[int, OpenSegment | None, Iterator[OpenSegment], int]] = [
        (root, None, iter(incident.get(root, [])), 0)
    ]
    while stack:
        node, via, remaining, depth = stack[-1]
        segment = next(remaining, None)
        if segment is None:
            stack.pop()
            continue
        if segment == via:
            continue
        other = segment.other_end(node)
        if other in parent:
            cycle = _close_cycle(other, segment, parent)
            if cycle is not None:
                cycles.add(cycle)
        elif depth + 1 < max_segments:
            parent[other] = segment
            stack.append((other, segment, iter(incident.get(other, [])), depth + 1))


def _find_cycles(
    segments: Sequence[OpenSegment], max_segments: int
) -> set[frozenset[OpenSegment]]:
    incident = _incidence(segments)
    cycles: set[frozenset[OpenSegment]] = set()
    visited: set[int] = set()
    for segment in segments:
        root = segment.end1.index
        if root in visited:
            continue
        parent: dict[int, OpenSegment | None] = {}
        _search(root, incident, max_segments, parent, cycles)
        visited.update(parent)
    return cycles


def _elementary(
    segments: Sequence[OpenSegment], max_segments: int
) -> set[frozenset[OpenSegment]]:
    cycles = _find_cycles(segments, max_segments)
    if len(cycles) <= 1:
        return cycles

    elementary: set[frozenset[OpenSegment]] = set()
    for cycle in cycles:
        if len(cycle) >= len(segments):
            continue
        nested = _elementary(sorted(cycle, key=lambda s: s.key), max_segments)
        if len(nested) == 1:
            elementary.add(cycle)
        else:
            elementary.update(nested)
    return elementary


def extract_loops(
    segments: Iterable[OpenSegment], max_segments: int = DEFAULT_MAX_SEGMENTS
) -> list[Loop]:
    """Find the elementary loops formed by a set of segments.

    Args:
        segments: Segments of one graph (single-node segments are ignored)
        max_segments: Maximum depth of the search, bounding the number of
            segments a loop can chain together

    Returns:
        Loops sorted by their sorted segment keys
    """
    edges = sorted((s for s in segments if not s.is_single), key=lambda s: s.key)
    loops = [Loop(cycle) for cycle in _elementary(edges, max_segments)]
    return sorted(loops, key=lambda loop: loop.key)
