"""Core hypergraph data structure.

A hypergraph is stored as a bidirectional incidence relation: every node
maps to the set of edges it belongs to, and every edge maps to the set of
nodes it connects. Both maps are plain insertion-ordered dicts, so every
query that depends on ordering (adjacency matrix, permutation) is stable
for an unmodified graph.

Symmetry invariant:
    Edge ``e`` is in ``nodes[v]`` if and only if node ``v`` is in
    ``edges[e]``. ``add_edge()`` does not touch ``nodes``; callers pair it
    with ``add_node()`` for every member (``from_edges()`` does this).
    ``validate()`` reports violations.
"""

import logging
from collections import Counter, defaultdict
from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import Any, Generic, TypeVar

V = TypeVar("V", bound=Hashable)
E = TypeVar("E", bound=Hashable)

logger = logging.getLogger(__name__)


class InvalidPermutationError(ValueError):
    """Raised by ``Hypergraph.permute(strict=True)`` for a non-bijective permutation."""

    def __init__(self, kind: str, reason: str) -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(f"Invalid {kind} permutation: {reason}")


def validate_permutation(permutation: Sequence[int], size: int) -> str | None:
    """Check that ``permutation`` is a bijection on ``0..size-1``.

    Returns:
        None if valid, otherwise a short description of the problem
    """
    if len(permutation) != size:
        return f"expected length {size}, got {len(permutation)}"
    seen: set[int] = set()
    for index in permutation:
        if not isinstance(index, int) or isinstance(index, bool):
            return f"index {index!r} is not an integer"
        if not 0 <= index < size:
            return f"index {index} out of range 0..{size - 1}"
        if index in seen:
            return f"duplicate index {index}"
        seen.add(index)
    return None


class Hypergraph(Generic[V, E]):
    """Incidence-based hypergraph over hashable node and edge identifiers.

    Example:
        >>> hg = Hypergraph.from_edges({0: ["a", "b"], 1: ["b", "c"]})
        >>> hg.degree("b")
        2
        >>> hg.adjacency_matrix()
        [[True, False], [True, True], [False, True]]
    """

    def __init__(self) -> None:
        self.nodes: dict[V, set[E]] = {}
        self.edges: dict[E, set[V]] = {}
        # Vertex-set index: frozenset of node ids -> edge ids with exactly that set
        self._edges_by_node_set: dict[frozenset[V], set[E]] = defaultdict(set)

    @classmethod
    def from_edges(cls, edges: Mapping[E, Iterable[V]]) -> "Hypergraph[V, E]":
        """Build a symmetric hypergraph from ``{edge: nodes}``."""
        hypergraph: Hypergraph[V, E] = cls()
        for edge, members in edges.items():
            # dict.fromkeys keeps first-appearance order for node insertion
            ordered = list(dict.fromkeys(members))
            for node in ordered:
                hypergraph.add_node(node, edge)
            hypergraph.add_edge(edge, ordered)
        return hypergraph

    # ========== Mutation ==========

    def add_node(self, node: V, edge: E) -> None:
        """Insert ``node`` if absent and associate it with ``edge``."""
        self.nodes.setdefault(node, set()).add(edge)

    def add_edge(self, edge: E, node_set: Iterable[V]) -> None:
        """Insert ``edge`` if absent and union ``node_set`` into its members.

        Does NOT update ``nodes``; call ``add_node()`` for every member to
        keep the incidence relation symmetric.
        """
        existed = edge in self.edges
        members = self.edges.setdefault(edge, set())
        old_key = frozenset(members)
        members.update(node_set)
        new_key = frozenset(members)
        if existed and old_key != new_key:
            self._edges_by_node_set[old_key].discard(edge)
            if not self._edges_by_node_set[old_key]:
                del self._edges_by_node_set[old_key]
        # The empty frozenset is a valid key for node-less edges
        self._edges_by_node_set[new_key].add(edge)

    def copy(self) -> "Hypergraph[V, E]":
        new_graph: Hypergraph[V, E] = Hypergraph()
        new_graph.nodes = {node: set(edges) for node, edges in self.nodes.items()}
        for edge, members in self.edges.items():
            new_graph.add_edge(edge, members)
        return new_graph

    # ========== Queries ==========

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    @property
    def rank(self) -> int:
        """Size of the largest edge (0 for an edgeless graph)."""
        return max((len(members) for members in self.edges.values()), default=0)

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def degree(self, node: V) -> int:
        """Number of edges incident to ``node`` (0 if unknown)."""
        return len(self.nodes.get(node, ()))

    def edge_size(self, edge: E) -> int:
        return len(self.edges.get(edge, ()))

    def size_profile(self, node: V) -> Counter:
        """Count of incident edges per edge size, e.g. ``Counter({2: 3, 4: 1})``."""
        return Counter(len(self.edges.get(edge, ())) for edge in self.nodes.get(node, ()))

    def edges_with_node_set(self, node_set: Iterable[V]) -> set[E]:
        """Edge ids whose incident node set equals ``node_set`` exactly.

        O(1) lookup via the vertex-set index.
        """
        return set(self._edges_by_node_set.get(frozenset(node_set), ()))

    def __contains__(self, node: object) -> bool:
        return node in self.nodes

    def __getitem__(self, edge: E) -> set[V]:
        return self.edges.get(edge, set())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hypergraph):
            return NotImplemented
        return self.nodes == other.nodes and self.edges == other.edges

    def __repr__(self) -> str:
        return f"Hypergraph(nodes={self.num_nodes}, edges={self.num_edges})"

    # ========== Structure ==========

    def adjacency_matrix(self) -> list[list[bool]]:
        """Node-by-edge incidence grid in insertion order.

        Cell ``[i][j]`` is True iff the i-th node is incident to the j-th edge.
        """
        edge_index = {edge: j for j, edge in enumerate(self.edges)}
        matrix = [[False] * len(edge_index) for _ in self.nodes]
        for i, incident in enumerate(self.nodes.values()):
            for edge in incident:
                j = edge_index.get(edge)
                if j is not None:
                    matrix[i][j] = True
        return matrix

    def permute(
        self,
        node_permutation: Sequence[int],
        edge_permutation: Sequence[int],
        strict: bool = False,
    ) -> "Hypergraph[V, E]":
        """Relabel nodes and edges through index permutations.

        The key at position ``i`` (insertion order) is renamed to the key at
        position ``permutation[i]``. Key order is kept, so applying the
        inverse permutations restores the original graph.

        Args:
            node_permutation: Bijection on ``0..num_nodes-1``
            edge_permutation: Bijection on ``0..num_edges-1``
            strict: Raise instead of falling back on an invalid permutation

        Returns:
            A new hypergraph isomorphic to this one. If either permutation
            is invalid and ``strict`` is False, an unchanged copy.

        Raises:
            InvalidPermutationError: If ``strict`` and a permutation is invalid
        """
        for kind, permutation, size in (
            ("node", node_permutation, self.num_nodes),
            ("edge", edge_permutation, self.num_edges),
        ):
            problem = validate_permutation(permutation, size)
            if problem is not None:
                if strict:
                    raise InvalidPermutationError(kind, problem)
                logger.warning("Ignoring invalid %s permutation: %s", kind, problem)
                return self.copy()

        node_keys = list(self.nodes)
        edge_keys = list(self.edges)
        node_relabel = {node_keys[i]: node_keys[j] for i, j in enumerate(node_permutation)}
        edge_relabel = {edge_keys[i]: edge_keys[j] for i, j in enumerate(edge_permutation)}

        new_nodes: dict[V, set[E]] = {}
        for node, incident in self.nodes.items():
            new_nodes[node_relabel[node]] = {edge_relabel.get(e, e) for e in incident}
        new_edges: dict[E, set[V]] = {}
        for edge, members in self.edges.items():
            new_edges[edge_relabel[edge]] = {node_relabel.get(v, v) for v in members}

        permuted: Hypergraph[V, E] = Hypergraph()
        permuted.nodes = {node: new_nodes[node] for node in node_keys}
        for edge in edge_keys:
            permuted.add_edge(edge, new_edges[edge])
        return permuted

    # ========== Presentation ==========

    def render_rows(self, present: str = "@", absent: str = " ") -> list[str]:
        return [
            "".join(present if cell else absent for cell in row)
            for row in self.adjacency_matrix()
        ]

    def render(self, present: str = "@", absent: str = " ") -> str:
        """Fixed-width text grid of the adjacency matrix, one row per node."""
        return "\n".join(self.render_rows(present, absent))

    def __str__(self) -> str:
        return self.render()

    # ========== Statistics & Validation ==========

    def stats(self) -> dict[str, Any]:
        """Get hypergraph statistics.

        Returns:
            Dict with node_count, edge_count, rank
        """
        return {
            "node_count": self.num_nodes,
            "edge_count": self.num_edges,
            "rank": self.rank,
        }

    def validate(self) -> dict[str, Any]:
        """Check the symmetry invariant of the incidence relation.

        Returns:
            Dict with ``valid`` (bool), ``errors`` and ``warnings`` (lists of str)
        """
        errors: list[str] = []
        warnings: list[str] = []

        for edge, members in self.edges.items():
            for node in members:
                if edge not in self.nodes.get(node, ()):
                    errors.append(f"Edge {edge!r} lists node {node!r} which does not list it back")
            if len(members) < 2:
                warnings.append(f"Edge {edge!r} has {len(members)} node(s)")

        for node, incident in self.nodes.items():
            for edge in incident:
                if node not in self.edges.get(edge, ()):
                    errors.append(f"Node {node!r} lists edge {edge!r} which does not list it back")

        return {"valid": not errors, "errors": errors, "warnings": warnings}
