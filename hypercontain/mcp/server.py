"""hypercontain MCP server — exposes containment and matching as tools for AI agents."""

from __future__ import annotations

import functools
import logging
import os
import sys
from collections.abc import Callable
from typing import Any

from mcp.server.fastmcp import FastMCP

from hypercontain.engine import BipartiteGraph, ContainmentSearch, Hypergraph, hopcroft_karp
from hypercontain.models import (
    ContainmentResult,
    HypergraphStats,
    MatchingResult,
    ValidationResult,
)

# Logging goes to stderr, stdout carries JSON-RPC
logging.basicConfig(stream=sys.stderr, level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger("hypercontain.mcp")

MAX_STEPS_ENV = "HYPERCONTAIN_MAX_STEPS"
DEFAULT_MAX_STEPS = 100_000


mcp = FastMCP(
    "hypercontain",
    instructions=(
        "hypercontain decides hypergraph containment. "
        "A hypergraph is passed as a list of hyperedges, each a list of node names; "
        "the edge id is its position in the list. "
        "check_containment looks for an injective node mapping sending every pattern edge "
        "onto a distinct host edge with exactly the mapped node set. "
        "Searches are bounded by a step budget (max_steps)."
    ),
)


def _default_max_steps() -> int:
    raw = os.environ.get(MAX_STEPS_ENV)
    if raw is None:
        return DEFAULT_MAX_STEPS
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", MAX_STEPS_ENV, raw)
        return DEFAULT_MAX_STEPS


def _safe_tool(fn: Callable[..., dict]) -> Callable[..., dict]:
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> dict:
        try:
            return fn(*args, **kwargs)
        except Exception as exc:
            logger.exception("Tool %s failed", fn.__name__)
            return {"error": True, "message": f"{type(exc).__name__}: {exc}"}
    return wrapper


def _hypergraph(edges: list[list[str]]) -> Hypergraph[str, int]:
    return Hypergraph.from_edges(dict(enumerate(edges)))


# ===================================================================
# Containment tools (2)
# ===================================================================


@mcp.tool()
@_safe_tool
def check_containment(
    pattern: list[list[str]],
    host: list[list[str]],
    max_steps: int | None = None,
) -> dict:
    """Check whether the pattern hypergraph is contained in the host hypergraph.

    Args:
        pattern: Hyperedges of the pattern, each a list of node names.
        host: Hyperedges of the host, each a list of node names.
        max_steps: Search budget; defaults to HYPERCONTAIN_MAX_STEPS or 100000.
    """
    budget = max_steps if max_steps is not None else _default_max_steps()
    search = ContainmentSearch(_hypergraph(pattern), _hypergraph(host), max_steps=budget)
    search.run()
    return ContainmentResult.from_search(search).model_dump()


@mcp.tool()
@_safe_tool
def maximum_matching(adjacency: dict[str, list[str]]) -> dict:
    """Maximum bipartite matching (Hopcroft-Karp).

    Args:
        adjacency: Maps each left vertex to the right vertices it may be matched with.
            Left and right vertex names must not overlap.
    """
    graph = BipartiteGraph.from_adjacency(adjacency)
    return MatchingResult.from_matching(hopcroft_karp(graph)).model_dump()


# ===================================================================
# Inspection tools (2)
# ===================================================================


@mcp.tool()
@_safe_tool
def adjacency_matrix(edges: list[list[str]], present: str = "@", absent: str = ".") -> dict:
    """Render a hypergraph as a node-by-edge incidence matrix.

    Args:
        edges: Hyperedges, each a list of node names.
        present: Symbol for an incidence.
        absent: Symbol for a non-incidence.
    """
    hg = _hypergraph(edges)
    return {
        "nodes": [str(node) for node in hg.nodes],
        "edges": list(hg.edges),
        "rows": hg.render_rows(present, absent),
    }


@mcp.tool()
@_safe_tool
def hypergraph_stats(edges: list[list[str]]) -> dict:
    """Node and edge counts, rank, and consistency warnings of a hypergraph.

    Args:
        edges: Hyperedges, each a list of node names.
    """
    hg = _hypergraph(edges)
    return {
        **HypergraphStats.from_hypergraph(hg).model_dump(),
        "validation": ValidationResult.from_report(hg.validate()).model_dump(),
    }


# ===================================================================
# Entry point
# ===================================================================


def run_server() -> None:
    """Run the hypercontain MCP server over stdio."""
    mcp.run(transport="stdio")
