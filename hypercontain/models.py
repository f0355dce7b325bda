"""Pydantic models for the hypercontain public API.

These are thin result wrappers over the engine types (engine.core,
engine.matching, engine.containment), providing validation and JSON
serialization for the CLI and MCP layers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from hypercontain.engine.containment import ContainmentSearch
from hypercontain.engine.core import Hypergraph
from hypercontain.engine.matching import Matching


class ContainmentResult(BaseModel):
    """Outcome of a containment search.

    When ``contained`` is True, ``node_mapping`` sends every pattern node to
    a distinct host node and ``edge_mapping`` sends every pattern edge to the
    host edge it lands on. Identifiers are stringified for display.
    """

    contained: bool
    node_mapping: dict[str, str] = Field(default_factory=dict)
    edge_mapping: dict[str, str] = Field(default_factory=dict)
    steps: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_mapping_only_when_contained(self) -> ContainmentResult:
        if not self.contained and (self.node_mapping or self.edge_mapping):
            raise ValueError("A negative result cannot carry a mapping")
        return self

    @classmethod
    def from_search(cls, search: ContainmentSearch) -> ContainmentResult:
        """Build from a ContainmentSearch after ``run()``."""
        if search.node_mapping is None:
            return cls(contained=False, steps=search.steps)
        return cls(
            contained=True,
            node_mapping={str(k): str(v) for k, v in search.node_mapping.items()},
            edge_mapping={str(k): str(v) for k, v in (search.edge_mapping or {}).items()},
            steps=search.steps,
        )


class MatchingResult(BaseModel):
    """A bipartite matching: matched pairs left -> right and their count."""

    size: int = Field(ge=0)
    pairs: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_matching(cls, matching: Matching) -> MatchingResult:
        return cls(
            size=len(matching),
            pairs={str(u): str(v) for u, v in matching.pairs().items()},
        )


class HypergraphStats(BaseModel):
    """Summary counts for a hypergraph."""

    node_count: int
    edge_count: int
    rank: int

    @classmethod
    def from_hypergraph(cls, hypergraph: Hypergraph) -> HypergraphStats:
        return cls(**hypergraph.stats())


class ValidationResult(BaseModel):
    """Result of a hypergraph consistency check.

    Contains a pass/fail flag, a list of errors, and a list of warnings
    found during validation.
    """

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: dict[str, Any]) -> ValidationResult:
        return cls(**report)
