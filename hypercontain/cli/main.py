"""hypercontain CLI — command-line interface for containment checks."""

from __future__ import annotations

import json
import logging
import random
import sys
from typing import IO

import click

from hypercontain.builders import (
    from_lines,
    inverse_permutation,
    parse_bipartite,
    random_hypergraph,
    random_permutation,
    read_hypergraph,
    to_lines,
)
from hypercontain.engine import (
    ContainmentSearch,
    Hypergraph,
    SearchLimitExceeded,
    hopcroft_karp,
    is_isomorphic,
)
from hypercontain.models import ContainmentResult, HypergraphStats, MatchingResult

logger = logging.getLogger("hypercontain.cli")

PROMPT = (
    "Please input the {which} hypergraph, one hyperedge per line,\n"
    "with the vertices of each hyperedge separated by whitespace.\n"
    "Indicate the end of the hypergraph by typing a single dash (-) on\n"
    "a line by itself."
)


def _echo_hypergraph(name: str, hypergraph: Hypergraph, present: str, absent: str) -> None:
    s = HypergraphStats.from_hypergraph(hypergraph)
    click.echo(f"{name}: {s.node_count} nodes, {s.edge_count} edges, rank {s.rank}")
    for node, row in zip(hypergraph.nodes, hypergraph.render_rows(present, absent)):
        click.echo(f"  {node!s:>8} |{row}|")


def _echo_containment(result: ContainmentResult, as_json: bool) -> None:
    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return
    if not result.contained:
        click.echo(f"Not contained ({result.steps} steps).")
        return
    click.echo(f"Contained ({result.steps} steps).")
    for pattern_node, host_node in result.node_mapping.items():
        click.echo(f"  {pattern_node} -> {host_node}")


def _search(pattern: Hypergraph, host: Hypergraph, max_steps: int | None) -> ContainmentResult:
    search = ContainmentSearch(pattern, host, max_steps=max_steps)
    try:
        search.run()
    except SearchLimitExceeded as exc:
        raise click.ClickException(str(exc))
    return ContainmentResult.from_search(search)


@click.group()
@click.option("--verbose", "-v", count=True, help="Log search progress (-vv for debug).")
@click.pass_context
def cli(ctx: click.Context, verbose: int) -> None:
    """Check whether one hypergraph is contained in another."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(stream=sys.stderr, level=level, format="%(levelname)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("input_file", type=click.File("r"))
@click.option("--present", default="@", show_default=True, help="Symbol for incidence.")
@click.option("--absent", default=" ", help="Symbol for no incidence.")
def show(input_file: IO[str], present: str, absent: str) -> None:
    """Show a hypergraph file as an adjacency matrix."""
    hypergraph = from_lines(input_file)
    _echo_hypergraph(input_file.name, hypergraph, present, absent)
    report = hypergraph.validate()
    for warn in report["warnings"]:
        click.echo(f"  WARNING: {warn}")


@cli.command()
@click.argument("pattern_file", type=click.File("r"))
@click.argument("host_file", type=click.File("r"))
@click.option("--max-steps", default=None, type=click.IntRange(min=0), help="Search budget.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def contains(
    pattern_file: IO[str],
    host_file: IO[str],
    max_steps: int | None,
    as_json: bool,
) -> None:
    """Check whether PATTERN_FILE is contained in HOST_FILE."""
    pattern = from_lines(pattern_file)
    host = from_lines(host_file)
    _echo_containment(_search(pattern, host, max_steps), as_json)


@cli.command()
@click.option("--max-steps", default=None, type=click.IntRange(min=0), help="Search budget.")
@click.option("--present", default="@", show_default=True, help="Symbol for incidence.")
@click.option("--absent", default=" ", help="Symbol for no incidence.")
def interactive(max_steps: int | None, present: str, absent: str) -> None:
    """Read two hypergraphs from stdin and check containment of the first in the second."""
    stdin = click.get_text_stream("stdin")
    click.echo(PROMPT.format(which="first"), err=True)
    pattern = read_hypergraph(stdin)
    click.echo(PROMPT.format(which="second"), err=True)
    host = read_hypergraph(stdin)

    _echo_hypergraph("Hypergraph 1", pattern, present, absent)
    _echo_hypergraph("Hypergraph 2", host, present, absent)
    _echo_containment(_search(pattern, host, max_steps), as_json=False)


@cli.command("random")
@click.argument("num_nodes", type=click.IntRange(min=0))
@click.argument("num_edges", type=click.IntRange(min=0))
@click.option("--rank", default=None, type=click.IntRange(min=1), help="Fixed edge draw size.")
@click.option("--seed", default=None, type=int, help="Random seed.")
def random_cmd(num_nodes: int, num_edges: int, rank: int | None, seed: int | None) -> None:
    """Print a random hypergraph in the line format."""
    try:
        hypergraph = random_hypergraph(num_nodes, num_edges, rank=rank, seed=seed)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    for line in to_lines(hypergraph):
        click.echo(line)
    click.echo("-")


@cli.command()
@click.argument("input_file", type=click.File("r"))
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def match(input_file: IO[str], as_json: bool) -> None:
    """Maximum bipartite matching of an adjacency file (lines: LEFT RIGHT...)."""
    try:
        graph = parse_bipartite(input_file)
    except ValueError as exc:
        raise click.ClickException(str(exc))
    result = MatchingResult.from_matching(hopcroft_karp(graph))
    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return
    click.echo(f"Matching size: {result.size}")
    for u, v in result.pairs.items():
        click.echo(f"  {u} <-> {v}")


@cli.command()
@click.option("--graphs", default=10, show_default=True, type=click.IntRange(min=1))
@click.option("--trials", default=10, show_default=True, type=click.IntRange(min=1))
@click.option("--min-nodes", default=3, show_default=True, type=click.IntRange(min=1))
@click.option("--max-nodes", default=8, show_default=True, type=click.IntRange(min=1))
@click.option("--seed", default=None, type=int, help="Random seed.")
def roundtrip(graphs: int, trials: int, min_nodes: int, max_nodes: int, seed: int | None) -> None:
    """Permute random hypergraphs and check the results stay isomorphic."""
    if min_nodes > max_nodes:
        raise click.BadParameter("--min-nodes must not exceed --max-nodes")
    rng = random.Random(seed)
    failures = 0
    for graph_number in range(graphs):
        num_nodes = rng.randint(min_nodes, max_nodes)
        num_edges = rng.randint(1, num_nodes)
        hypergraph = random_hypergraph(num_nodes, num_edges, seed=rng.randrange(2**32))
        logger.info(
            "Hypergraph %d: %d nodes, %d edges",
            graph_number,
            hypergraph.num_nodes,
            hypergraph.num_edges,
        )
        for _ in range(trials):
            node_perm = random_permutation(hypergraph.num_nodes, rng)
            edge_perm = random_permutation(hypergraph.num_edges, rng)
            permuted = hypergraph.permute(node_perm, edge_perm, strict=True)
            restored = permuted.permute(
                inverse_permutation(node_perm), inverse_permutation(edge_perm), strict=True
            )
            if restored != hypergraph or not is_isomorphic(hypergraph, permuted):
                failures += 1
                logger.warning(
                    "Round trip failed for hypergraph %d with %s / %s",
                    graph_number,
                    node_perm,
                    edge_perm,
                )
    total = graphs * trials
    click.echo(json.dumps({"checked": total, "failures": failures}))
    if failures:
        raise click.ClickException(f"{failures} of {total} round trips failed")


@cli.command()
@click.option(
    "--max-steps",
    default=None,
    type=click.IntRange(min=0),
    help="Default search budget (overrides HYPERCONTAIN_MAX_STEPS).",
)
def mcp(max_steps: int | None) -> None:
    """Start the MCP server for AI agent integration."""
    import os

    if max_steps is not None:
        os.environ["HYPERCONTAIN_MAX_STEPS"] = str(max_steps)
    from hypercontain.mcp.server import run_server

    run_server()


if __name__ == "__main__":
    cli()
