"""hypercontain — hypergraph containment search and bipartite matching."""

__version__ = "0.1.0"

from hypercontain.engine import (
    BipartiteGraph,
    ContainmentSearch,
    Hypergraph,
    InvalidPermutationError,
    Matching,
    SearchLimitExceeded,
    find_augmenting_match,
    hopcroft_karp,
    is_contained,
    maximum_matching,
)
from hypercontain.models import ContainmentResult, HypergraphStats, MatchingResult, ValidationResult

__all__ = [
    "BipartiteGraph",
    "ContainmentResult",
    "ContainmentSearch",
    "Hypergraph",
    "HypergraphStats",
    "InvalidPermutationError",
    "Matching",
    "MatchingResult",
    "SearchLimitExceeded",
    "ValidationResult",
    "find_augmenting_match",
    "hopcroft_karp",
    "is_contained",
    "maximum_matching",
    "__version__",
]
