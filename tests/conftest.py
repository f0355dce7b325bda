"""Shared fixtures for hypercontain tests."""

from collections import Counter
from itertools import permutations

import pytest

from hypercontain.engine import Hypergraph


def assert_embedding(pattern: Hypergraph, host: Hypergraph, mapping: dict) -> None:
    """Check that ``mapping`` is an injective embedding of pattern into host."""
    assert set(mapping) == set(pattern.nodes)
    assert len(set(mapping.values())) == len(mapping), "mapping is not injective"
    assert set(mapping.values()) <= set(host.nodes)
    images = Counter(frozenset(mapping[v] for v in members) for members in pattern.edges.values())
    available = Counter(frozenset(members) for members in host.edges.values())
    for image, count in images.items():
        assert available[image] >= count, f"no host edge left for {set(image)}"


def brute_force_contained(pattern: Hypergraph, host: Hypergraph) -> bool:
    """Try every injective node assignment. Only for tiny graphs."""
    if pattern.is_empty or host.is_empty:
        return pattern.is_empty and host.is_empty
    pattern_nodes = list(pattern.nodes)
    available = Counter(frozenset(members) for members in host.edges.values())
    for image in permutations(host.nodes, len(pattern_nodes)):
        mapping = dict(zip(pattern_nodes, image))
        needed = Counter(
            frozenset(mapping[v] for v in members) for members in pattern.edges.values()
        )
        if all(available[key] >= count for key, count in needed.items()):
            return True
    return False


@pytest.fixture()
def path_pattern() -> Hypergraph:
    """Two hyperedges sharing a vertex: {a,b}, {b,c}."""
    return Hypergraph.from_edges({0: ["a", "b"], 1: ["b", "c"]})


@pytest.fixture()
def path_host() -> Hypergraph:
    """Three linked hyperedges: {x,y}, {y,z}, {z,w}."""
    return Hypergraph.from_edges({0: ["x", "y"], 1: ["y", "z"], 2: ["z", "w"]})


@pytest.fixture()
def medical_hypergraph() -> Hypergraph:
    """Reference medical hypergraph.

    Edges (4):
        treatment: dr_smith + patient_123 + aspirin + headache
        diagnosis: dr_jones + patient_123 + headache
        prescribes: dr_smith + aspirin
        consult: dr_smith + dr_jones + patient_123
    """
    return Hypergraph.from_edges(
        {
            "treatment": ["dr_smith", "patient_123", "aspirin", "headache"],
            "diagnosis": ["dr_jones", "patient_123", "headache"],
            "prescribes": ["dr_smith", "aspirin"],
            "consult": ["dr_smith", "dr_jones", "patient_123"],
        }
    )
