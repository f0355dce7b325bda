"""Input builders that produce hypergraphs for the engine.

Text format, one hyperedge per line::

    a b c
    c d
    -

Vertex names are separated by whitespace. The edge id is the 0-based line
number, so ids survive skipped lines. Lines with fewer than two distinct
names are skipped. A line holding only the sentinel (``-`` by default)
ends the hypergraph, which lets several hypergraphs share one stream.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Iterator
from typing import IO

from hypercontain.engine.core import Hypergraph
from hypercontain.engine.matching import BipartiteGraph

SENTINEL = "-"


def from_lines(lines: Iterable[str], sentinel: str | None = SENTINEL) -> Hypergraph[str, int]:
    """Build a hypergraph from text lines, stopping at the sentinel line."""
    hypergraph: Hypergraph[str, int] = Hypergraph()
    for line_num, line in enumerate(lines):
        if sentinel is not None and line.strip() == sentinel:
            break
        words = list(dict.fromkeys(line.split()))
        if len(words) < 2:
            continue
        for word in words:
            hypergraph.add_node(word, line_num)
        hypergraph.add_edge(line_num, words)
    return hypergraph


def from_text(text: str, sentinel: str | None = SENTINEL) -> Hypergraph[str, int]:
    return from_lines(text.splitlines(), sentinel=sentinel)


def read_hypergraph(stream: IO[str], sentinel: str = SENTINEL) -> Hypergraph[str, int]:
    """Read one hypergraph from ``stream``, consuming lines up to and including the sentinel.

    Reads line by line so the rest of the stream stays available for the
    next hypergraph.
    """

    def lines() -> Iterator[str]:
        while True:
            line = stream.readline()
            if not line:
                return
            yield line

    return from_lines(lines(), sentinel=sentinel)


def to_lines(hypergraph: Hypergraph) -> list[str]:
    """One line per edge, names sorted, in edge insertion order."""
    return [" ".join(sorted(str(v) for v in members)) for members in hypergraph.edges.values()]


def node_name(index: int) -> str:
    """Bijective base-26 name: 0 -> "a", 25 -> "z", 26 -> "aa", 27 -> "ab"."""
    if index < 0:
        raise ValueError(f"index must be non-negative, got: {index}")
    letters = []
    while True:
        index, remainder = divmod(index, 26)
        letters.append(chr(ord("a") + remainder))
        if index == 0:
            break
        index -= 1
    return "".join(reversed(letters))


def random_hypergraph(
    num_nodes: int,
    num_edges: int,
    rank: int | None = None,
    seed: int | None = None,
) -> Hypergraph[str, int]:
    """Generate a random hypergraph for testing.

    Each edge draws a size in ``2..max(2, num_nodes)`` (or exactly ``rank``)
    and samples that many node indices with replacement, so edges can end up
    smaller than the drawn size and nodes may stay unused.

    Args:
        num_nodes: Size of the name pool
        num_edges: Number of edges to generate
        rank: Fixed draw size per edge (optional)
        seed: Random seed for reproducibility

    Raises:
        ValueError: On negative counts, or edges requested from an empty pool
    """
    if num_nodes < 0 or num_edges < 0:
        raise ValueError(
            f"Counts must be non-negative, got: {num_nodes} nodes, {num_edges} edges"
        )
    if num_edges and not num_nodes:
        raise ValueError("Cannot generate edges without nodes")
    if rank is not None and rank < 1:
        raise ValueError(f"rank must be positive, got: {rank}")

    rng = random.Random(seed)
    hypergraph: Hypergraph[str, int] = Hypergraph()
    for edge_num in range(num_edges):
        draws = rank if rank is not None else rng.randint(2, max(2, num_nodes))
        drawn = [node_name(rng.randrange(num_nodes)) for _ in range(draws)]
        members = list(dict.fromkeys(drawn))
        for node in members:
            hypergraph.add_node(node, edge_num)
        hypergraph.add_edge(edge_num, members)
    return hypergraph


def random_permutation(n: int, rng: random.Random | None = None) -> list[int]:
    """Uniform permutation of ``0..n-1`` (Fisher-Yates)."""
    permutation = list(range(n))
    (rng or random).shuffle(permutation)
    return permutation


def inverse_permutation(permutation: list[int]) -> list[int]:
    inverse = [0] * len(permutation)
    for i, j in enumerate(permutation):
        inverse[j] = i
    return inverse


def parse_bipartite(lines: Iterable[str]) -> BipartiteGraph:
    """Parse ``left right right ...`` lines of integer ids into a BipartiteGraph.

    Blank lines and lines starting with ``#`` are ignored. A line with only
    a left id declares an isolated left vertex.

    Raises:
        ValueError: On non-integer ids or overlapping partitions
    """
    adjacency: dict[int, set[int]] = {}
    for line_num, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        try:
            left, *rights = (int(token) for token in stripped.split())
        except ValueError:
            raise ValueError(f"Line {line_num}: expected integer vertex ids, got: {stripped!r}")
        adjacency.setdefault(left, set()).update(rights)
    return BipartiteGraph.from_adjacency(adjacency)
