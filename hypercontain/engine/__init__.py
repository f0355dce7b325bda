from hypercontain.engine.containment import (
    ContainmentSearch,
    SearchLimitExceeded,
    find_isomorphism,
    is_contained,
    is_isomorphic,
)
from hypercontain.engine.core import Hypergraph, InvalidPermutationError, validate_permutation
from hypercontain.engine.matching import (
    BipartiteGraph,
    Matching,
    find_augmenting_match,
    greedy_matching,
    hopcroft_karp,
    maximum_matching,
    minimum_vertex_cover,
)

__all__ = [
    "Hypergraph",
    "InvalidPermutationError",
    "validate_permutation",
    "BipartiteGraph",
    "Matching",
    "find_augmenting_match",
    "maximum_matching",
    "hopcroft_karp",
    "greedy_matching",
    "minimum_vertex_cover",
    "ContainmentSearch",
    "SearchLimitExceeded",
    "is_contained",
    "find_isomorphism",
    "is_isomorphic",
]
