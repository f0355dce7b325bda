"""Benchmark fixtures for containment and matching performance tests."""

import random

import pytest

from hypercontain.builders import random_hypergraph
from hypercontain.engine import BipartiteGraph, Hypergraph


def planted_pattern(host: Hypergraph, num_edges: int, seed: int = 42) -> Hypergraph:
    """Copy ``num_edges`` random host edges under fresh node names.

    The identity on the copied names is an embedding, so the result is
    always contained in ``host``.
    """
    rng = random.Random(seed)
    chosen = rng.sample(list(host.edges), num_edges)
    return Hypergraph.from_edges(
        {i: [f"p_{v}" for v in sorted(host.edges[e])] for i, e in enumerate(chosen)}
    )


def generate_bipartite(
    num_left: int,
    num_right: int,
    avg_degree: float = 3.0,
    seed: int = 42,
) -> BipartiteGraph:
    """Generate a random bipartite graph for benchmarking.

    Args:
        num_left: Number of left vertices
        num_right: Number of right vertices
        avg_degree: Average number of neighbours per left vertex
        seed: Random seed for reproducibility
    """
    rng = random.Random(seed)
    right = [f"r{i}" for i in range(num_right)]
    edges = {}
    for i in range(num_left):
        degree = min(num_right, max(1, int(rng.gauss(avg_degree, avg_degree / 2))))
        edges[f"l{i}"] = set(rng.sample(right, degree))
    return BipartiteGraph(set(edges), set(right), edges)


@pytest.fixture
def host_500() -> Hypergraph:
    """500-name pool, 1K edges of at most 3 nodes."""
    return random_hypergraph(500, 1000, rank=3, seed=42)


@pytest.fixture
def host_2k() -> Hypergraph:
    """2K-name pool, 5K edges of at most 3 nodes."""
    return random_hypergraph(2000, 5000, rank=3, seed=42)


@pytest.fixture
def bipartite_500() -> BipartiteGraph:
    """500 x 500 vertices, about 3 neighbours per left vertex."""
    return generate_bipartite(500, 500, avg_degree=3.0, seed=42)
