"""Maximum-cardinality bipartite matching.

Two entry points share the same graph and matching types:

- ``find_augmenting_match()`` finds ONE shortest augmenting path with a
  breadth-first search and flips it. Calling it until it stops improving
  (``maximum_matching()``) yields a maximum matching.
- ``hopcroft_karp()`` batches vertex-disjoint shortest augmenting paths per
  phase for the O(E * sqrt(V)) bound. ContainmentSearch uses this one.

References:
- Hopcroft & Karp: "An n^5/2 algorithm for maximum matchings in bipartite
  graphs" (1973)
- König's theorem for the vertex cover certificate
"""

from collections import deque
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass, field

Vertex = Hashable

INFINITY = float("inf")


def _ordered(vertices: Iterable[Vertex]) -> list[Vertex]:
    """Deterministic ordering for sets of mixed or unorderable identifiers."""
    items = list(vertices)
    try:
        return sorted(items)
    except TypeError:
        return sorted(items, key=repr)


@dataclass
class BipartiteGraph:
    """A bipartite graph given by left->right adjacency.

    Attributes:
        left_vertices: Left partition
        right_vertices: Right partition, disjoint from the left one
        edges: Maps a left vertex to the right vertices it is adjacent to.
            Left vertices without an entry have no neighbours.

    Raises:
        ValueError: If the partitions overlap or an adjacency refers to a
            vertex outside its partition
    """

    left_vertices: set[Vertex]
    right_vertices: set[Vertex]
    edges: dict[Vertex, set[Vertex]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.left_vertices = set(self.left_vertices)
        self.right_vertices = set(self.right_vertices)
        self.edges = {u: set(vs) for u, vs in self.edges.items()}
        overlap = self.left_vertices & self.right_vertices
        if overlap:
            raise ValueError(
                f"Left and right vertices must be disjoint, shared: {_ordered(overlap)}"
            )
        for u, neighbours in self.edges.items():
            if u not in self.left_vertices:
                raise ValueError(f"Adjacency key {u!r} is not a left vertex")
            unknown = neighbours - self.right_vertices
            if unknown:
                raise ValueError(
                    f"Left vertex {u!r} has neighbours outside the right vertices: "
                    f"{_ordered(unknown)}"
                )
        # Sorted orders fix the search order
        self._left_order = _ordered(self.left_vertices)
        self._adjacency = {u: _ordered(vs) for u, vs in self.edges.items()}

    @classmethod
    def from_adjacency(cls, adjacency: Mapping[Vertex, Iterable[Vertex]]) -> "BipartiteGraph":
        """Build a graph whose partitions are inferred from ``adjacency``."""
        edges = {u: set(vs) for u, vs in adjacency.items()}
        right: set[Vertex] = set()
        for vs in edges.values():
            right.update(vs)
        return cls(set(edges), right, edges)

    @property
    def left_order(self) -> list[Vertex]:
        return self._left_order

    def neighbours(self, u: Vertex) -> list[Vertex]:
        return self._adjacency.get(u, [])

    @property
    def edge_count(self) -> int:
        return sum(len(vs) for vs in self.edges.values())


class Matching:
    """A partial injective pairing of left and right vertices.

    Partners are recorded in both directions, so ``partner()`` is O(1) from
    either side. ``len()`` is the number of matched pairs.
    """

    def __init__(self, pairs: Mapping[Vertex, Vertex] | None = None) -> None:
        self._mate: dict[Vertex, Vertex] = {}
        self._left: dict[Vertex, Vertex] = {}
        for u, v in (pairs or {}).items():
            self.pair(u, v)

    def pair(self, u: Vertex, v: Vertex) -> None:
        """Match left vertex ``u`` with right vertex ``v``, dropping stale partners."""
        old_v = self._left.pop(u, None)
        if old_v is not None:
            self._mate.pop(old_v, None)
        old_u = self._mate.get(v)
        if old_u is not None and old_u != u:
            self._left.pop(old_u, None)
            self._mate.pop(old_u, None)
        self._left[u] = v
        self._mate[u] = v
        self._mate[v] = u

    def partner(self, vertex: Vertex) -> Vertex | None:
        return self._mate.get(vertex)

    def is_matched(self, vertex: Vertex) -> bool:
        return vertex in self._mate

    def pairs(self) -> dict[Vertex, Vertex]:
        """Matched pairs as a left->right dict."""
        return dict(self._left)

    def copy(self) -> "Matching":
        return Matching(self._left)

    def __contains__(self, vertex: object) -> bool:
        return vertex in self._mate

    def __len__(self) -> int:
        return len(self._left)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matching):
            return NotImplemented
        return self._left == other._left

    def __repr__(self) -> str:
        return f"Matching({self._left!r})"


def find_augmenting_match(graph: BipartiteGraph, matching: Matching | None = None) -> Matching:
    """Extend ``matching`` by one pair along a shortest augmenting path.

    Breadth-first from every unmatched left vertex (distance 0), following
    unmatched edges left->right and matched edges right->left. The first
    unmatched right vertex reached ends an augmenting path, which is flipped.

    Args:
        graph: The bipartite graph
        matching: Starting matching (not modified). Empty if omitted.

    Returns:
        A new matching with one more pair, or a copy of the input matching
        if no augmenting path exists.
    """
    result = matching.copy() if matching is not None else Matching()

    dist: dict[Vertex, int] = {}
    # Right vertex -> left vertex it was reached from
    reached_from: dict[Vertex, Vertex] = {}
    queue: deque[Vertex] = deque()
    for u in graph.left_order:
        if not result.is_matched(u):
            dist[u] = 0
            queue.append(u)

    while queue:
        u = queue.popleft()
        for v in graph.neighbours(u):
            if v in reached_from:
                continue
            reached_from[v] = u
            w = result.partner(v)
            if w is None:
                _flip_path(result, reached_from, v)
                return result
            if w not in dist:
                dist[w] = dist[u] + 1
                queue.append(w)

    return result


def _flip_path(matching: Matching, reached_from: dict[Vertex, Vertex], end: Vertex) -> None:
    """Flip the alternating path that ends at the free right vertex ``end``."""
    v: Vertex | None = end
    while v is not None:
        u = reached_from[v]
        previous = matching.partner(u)
        matching.pair(u, v)
        v = previous


def maximum_matching(graph: BipartiteGraph) -> Matching:
    """Apply ``find_augmenting_match()`` until the matching stops growing."""
    matching = Matching()
    while True:
        improved = find_augmenting_match(graph, matching)
        if len(improved) == len(matching):
            return matching
        matching = improved


def hopcroft_karp(graph: BipartiteGraph) -> Matching:
    """Maximum matching by phases of vertex-disjoint shortest augmenting paths."""
    matching = Matching()
    dist: dict[Vertex, float] = {}
    # Length of the shortest augmenting path in the current phase
    shortest = INFINITY

    def bfs() -> bool:
        nonlocal shortest
        queue: deque[Vertex] = deque()
        for u in graph.left_order:
            if matching.is_matched(u):
                dist[u] = INFINITY
            else:
                dist[u] = 0
                queue.append(u)
        shortest = INFINITY
        while queue:
            u = queue.popleft()
            if dist[u] >= shortest:
                continue
            for v in graph.neighbours(u):
                w = matching.partner(v)
                if w is None:
                    shortest = min(shortest, dist[u] + 1)
                elif dist[w] == INFINITY:
                    dist[w] = dist[u] + 1
                    queue.append(w)
        return shortest != INFINITY

    def augment(root: Vertex) -> bool:
        """Depth-first search for one layered augmenting path from ``root``.

        Frames are ``[u, neighbour iterator, right vertex taken]`` so the
        path length is not limited by the interpreter's recursion depth.
        """
        stack = [[root, iter(graph.neighbours(root)), None]]
        while stack:
            frame = stack[-1]
            u, neighbours = frame[0], frame[1]
            for v in neighbours:
                w = matching.partner(v)
                if w is None:
                    if dist[u] + 1 == shortest:
                        frame[2] = v
                        # Pair from the free end back to the root
                        for left, _, right in reversed(stack):
                            matching.pair(left, right)
                        return True
                elif dist[w] == dist[u] + 1:
                    frame[2] = v
                    stack.append([w, iter(graph.neighbours(w)), None])
                    break
            else:
                dist[u] = INFINITY
                stack.pop()
        return False

    while bfs():
        for u in graph.left_order:
            if not matching.is_matched(u):
                augment(u)
    return matching


def greedy_matching(graph: BipartiteGraph) -> Matching:
    """One-pass greedy matching: each left vertex takes its first free neighbour."""
    matching = Matching()
    for u in graph.left_order:
        for v in graph.neighbours(u):
            if not matching.is_matched(v):
                matching.pair(u, v)
                break
    return matching


def minimum_vertex_cover(graph: BipartiteGraph, matching: Matching) -> set[Vertex]:
    """König's construction of a vertex cover from a maximum matching.

    Z = vertices reachable from unmatched left vertices by alternating paths.
    The cover is (L - Z) | (R & Z). Its size equals ``len(matching)`` exactly
    when ``matching`` is maximum.
    """
    reachable: set[Vertex] = set()
    queue: deque[Vertex] = deque()
    for u in graph.left_order:
        if not matching.is_matched(u):
            reachable.add(u)
            queue.append(u)
    while queue:
        u = queue.popleft()
        for v in graph.neighbours(u):
            if v in reachable or matching.partner(u) == v:
                continue
            reachable.add(v)
            w = matching.partner(v)
            if w is not None and w not in reachable:
                reachable.add(w)
                queue.append(w)
    return (graph.left_vertices - reachable) | (graph.right_vertices & reachable)
