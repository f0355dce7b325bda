"""Hypergraph containment search.

Decides whether a pattern hypergraph embeds into a host hypergraph: an
injective node map under which every pattern edge lands exactly on the
node set of a host edge, distinct pattern edges on distinct host edges.
The decision problem generalizes subgraph isomorphism, so the worst case
is exponential; candidate pruning is applied eagerly at every commitment.

Search outline:
    1. Seed a candidate set per pattern vertex from degree and edge-size
       profiles.
    2. Pick the unassigned pattern vertex with the fewest candidates
       (ties: pattern insertion order), commit candidates left-to-right in
       host insertion order.
    3. Each commitment removes the host vertex from every other candidate
       set and restricts the committed vertex's neighbours to host vertices
       on a host edge of the right size through the images fixed so far.
    4. Before branching on an ambiguous vertex, a bipartite matching over
       the remaining candidate sets checks that an injective completion is
       still possible.
    5. With every vertex assigned, pattern edges are matched onto host
       edges (perfect matching required).

The search is an explicit stack of frames over a shared candidate map with
an undo log, so backtracking pops log entries instead of copying state.
"""

import logging
from collections import Counter
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any

from .core import Hypergraph
from .matching import BipartiteGraph, hopcroft_karp

logger = logging.getLogger(__name__)


class SearchLimitExceeded(RuntimeError):
    """Raised when a containment search uses up its step budget."""

    def __init__(self, max_steps: int) -> None:
        self.max_steps = max_steps
        super().__init__(f"Containment search exceeded {max_steps} steps")


@dataclass
class _Frame:
    """One choice point: a pattern vertex and the host vertices left to try."""

    vertex: Hashable
    candidates: list[Hashable] = field(default_factory=list)
    position: int = 0
    mark: int = 0


class ContainmentSearch:
    """Backtracking search for an embedding of ``pattern`` into ``host``.

    Example:
        >>> search = ContainmentSearch(pattern, host, max_steps=10_000)
        >>> mapping = search.run()
        >>> search.edge_mapping, search.steps

    Attributes:
        node_mapping: Pattern node -> host node after a successful run
        edge_mapping: Pattern edge -> host edge after a successful run
        steps: Tentative commitments made by the last run
    """

    def __init__(
        self,
        pattern: Hypergraph,
        host: Hypergraph,
        max_steps: int | None = None,
    ) -> None:
        if max_steps is not None and max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got: {max_steps}")
        self.pattern = pattern
        self.host = host
        self.max_steps = max_steps
        self.steps = 0
        self.node_mapping: dict[Any, Any] | None = None
        self.edge_mapping: dict[Any, Any] | None = None

        self._pattern_index = {node: i for i, node in enumerate(pattern.nodes)}
        self._host_index = {node: i for i, node in enumerate(host.nodes)}
        self._assignment: dict[Any, Any] = {}
        self._candidates: dict[Any, set[Any]] = {}
        self._undo: list[tuple[Any, ...]] = []

    # ========== Public ==========

    def run(self) -> dict[Any, Any] | None:
        """Search for an embedding.

        Returns:
            Pattern node -> host node mapping, or None if not contained

        Raises:
            SearchLimitExceeded: If ``max_steps`` commitments did not settle it
        """
        self.steps = 0
        self.node_mapping = None
        self.edge_mapping = None
        self._assignment.clear()
        self._undo.clear()

        if self.pattern.is_empty or self.host.is_empty:
            if self.pattern.is_empty and self.host.is_empty:
                self.node_mapping, self.edge_mapping = {}, {}
                return {}
            return None
        if self._rejected_by_counts():
            return None
        if not self._seed_candidates():
            return None
        if not self._pattern_index:
            # Only node-less pattern edges: nothing to assign
            return self._complete()

        stack = [self._open_frame()]
        while stack:
            frame = stack[-1]
            if not self._advance(frame):
                stack.pop()
                logger.debug("Backtracking from %r", frame.vertex)
                continue
            if len(self._assignment) < len(self._pattern_index):
                stack.append(self._open_frame())
                continue
            mapping = self._complete()
            if mapping is not None:
                return mapping

        logger.debug("No embedding after %d steps", self.steps)
        return None

    def _complete(self) -> dict[Any, Any] | None:
        """Match edges for a full node assignment and record the embedding."""
        edge_mapping = self._match_edges()
        if edge_mapping is None:
            return None
        self.node_mapping = dict(self._assignment)
        self.edge_mapping = edge_mapping
        logger.debug("Embedding found after %d steps", self.steps)
        return dict(self.node_mapping)

    # ========== Setup ==========

    def _rejected_by_counts(self) -> bool:
        """Necessary conditions: enough host nodes, edges, and edges per size."""
        if self.host.num_nodes < self.pattern.num_nodes:
            return True
        if self.host.num_edges < self.pattern.num_edges:
            return True
        pattern_sizes = Counter(len(members) for members in self.pattern.edges.values())
        host_sizes = Counter(len(members) for members in self.host.edges.values())
        return any(host_sizes[size] < count for size, count in pattern_sizes.items())

    def _seed_candidates(self) -> bool:
        host_profiles = {h: self.host.size_profile(h) for h in self.host.nodes}
        for p in self.pattern.nodes:
            profile = self.pattern.size_profile(p)
            self._candidates[p] = {
                h
                for h, host_profile in host_profiles.items()
                if all(host_profile[size] >= count for size, count in profile.items())
            }
            if not self._candidates[p]:
                logger.debug("No host vertex can carry pattern vertex %r", p)
                return False
        return True

    # ========== Search ==========

    def _unassigned(self) -> list[Any]:
        return [p for p in self._pattern_index if p not in self._assignment]

    def _open_frame(self) -> _Frame:
        unassigned = self._unassigned()
        vertex = min(
            unassigned,
            key=lambda p: (len(self._candidates[p]), self._pattern_index[p]),
        )
        candidates = sorted(self._candidates[vertex], key=self._host_index.__getitem__)
        frame = _Frame(vertex, candidates, mark=len(self._undo))
        if len(candidates) > 1 and not self._injective_completion_exists(unassigned):
            frame.candidates = []
        return frame

    def _advance(self, frame: _Frame) -> bool:
        """Undo the frame's previous choice and commit its next viable candidate."""
        self._rollback(frame.mark)
        while frame.position < len(frame.candidates):
            host_vertex = frame.candidates[frame.position]
            frame.position += 1
            self.steps += 1
            if self.max_steps is not None and self.steps > self.max_steps:
                raise SearchLimitExceeded(self.max_steps)
            if self._commit(frame.vertex, host_vertex):
                logger.debug("Committed %r -> %r", frame.vertex, host_vertex)
                return True
            self._rollback(frame.mark)
        return False

    def _commit(self, vertex: Any, host_vertex: Any) -> bool:
        """Assign ``vertex`` to ``host_vertex`` and prune. False if infeasible."""
        self._assignment[vertex] = host_vertex
        self._undo.append(("assign", vertex, host_vertex))

        for other in self._unassigned():
            if host_vertex in self._candidates[other]:
                self._prune(other, {host_vertex})
                if not self._candidates[other]:
                    return False

        for edge in self.pattern.nodes[vertex]:
            members = self.pattern.edges[edge]
            fixed = {self._assignment[v] for v in members if v in self._assignment}
            support = self._host_support(len(members), fixed)
            if support is None:
                return False
            for other in members:
                if other in self._assignment:
                    continue
                removed = self._candidates[other] - support
                if removed:
                    self._prune(other, removed)
                if not self._candidates[other]:
                    return False
        return True

    def _host_support(self, size: int, fixed: set[Any]) -> set[Any] | None:
        """Host vertices that can complete a pattern edge of ``size``.

        Returns:
            Unfixed vertices of host edges of that size containing all of
            ``fixed``, or None if there is no such host edge
        """
        incident = [self.host.nodes.get(h, set()) for h in fixed]
        host_edges = {
            f for f in set.intersection(*incident) if len(self.host.edges[f]) == size
        }
        if not host_edges:
            return None
        support: set[Any] = set()
        for f in host_edges:
            support.update(self.host.edges[f])
        return support - fixed

    def _prune(self, vertex: Any, removed: set[Any]) -> None:
        self._candidates[vertex] -= removed
        self._undo.append(("prune", vertex, removed))

    def _rollback(self, mark: int) -> None:
        while len(self._undo) > mark:
            entry = self._undo.pop()
            if entry[0] == "assign":
                del self._assignment[entry[1]]
            else:
                _, vertex, removed = entry
                self._candidates[vertex] |= removed

    # ========== Matching checks ==========

    def _injective_completion_exists(self, unassigned: list[Any]) -> bool:
        """All-different check: can every unassigned vertex get its own candidate?"""
        offset = len(unassigned)
        edges = {
            i: {offset + self._host_index[h] for h in self._candidates[p]}
            for i, p in enumerate(unassigned)
        }
        graph = BipartiteGraph(
            set(range(offset)),
            set(range(offset, offset + len(self._host_index))),
            edges,
        )
        return len(hopcroft_karp(graph)) == offset

    def _match_edges(self) -> dict[Any, Any] | None:
        """Assign every pattern edge a distinct host edge with the mapped node set."""
        pattern_edges = list(self.pattern.edges)
        host_edges = list(self.host.edges)
        host_edge_index = {f: j for j, f in enumerate(host_edges)}
        offset = len(pattern_edges)

        edges: dict[int, set[int]] = {}
        for i, edge in enumerate(pattern_edges):
            image = {self._assignment[v] for v in self.pattern.edges[edge]}
            targets = self.host.edges_with_node_set(image)
            if not targets:
                return None
            edges[i] = {offset + host_edge_index[f] for f in targets}

        graph = BipartiteGraph(
            set(range(offset)),
            set(range(offset, offset + len(host_edges))),
            edges,
        )
        matching = hopcroft_karp(graph)
        if len(matching) < offset:
            logger.debug("Pattern edges cannot be realised by distinct host edges")
            return None
        return {pattern_edges[i]: host_edges[j - offset] for i, j in matching.pairs().items()}


def is_contained(
    pattern: Hypergraph,
    host: Hypergraph,
    max_steps: int | None = None,
) -> dict[Any, Any] | None:
    """Find an injective node mapping embedding ``pattern`` into ``host``.

    Args:
        pattern: The smaller hypergraph to look for
        host: The hypergraph to search in
        max_steps: Optional budget of tentative commitments

    Returns:
        Pattern node -> host node mapping, or None if not contained

    Raises:
        SearchLimitExceeded: If the budget runs out before a decision
    """
    return ContainmentSearch(pattern, host, max_steps=max_steps).run()


def find_isomorphism(
    first: Hypergraph,
    second: Hypergraph,
    max_steps: int | None = None,
) -> tuple[dict[Any, Any], dict[Any, Any]] | None:
    """Node and edge bijections between two hypergraphs, or None.

    With equal node and edge counts, an embedding is an isomorphism.
    """
    if first.num_nodes != second.num_nodes or first.num_edges != second.num_edges:
        return None
    search = ContainmentSearch(first, second, max_steps=max_steps)
    if search.run() is None:
        return None
    return search.node_mapping or {}, search.edge_mapping or {}


def is_isomorphic(first: Hypergraph, second: Hypergraph, max_steps: int | None = None) -> bool:
    return find_isomorphism(first, second, max_steps=max_steps) is not None
