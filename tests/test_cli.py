"""Tests for the hypercontain command-line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from hypercontain.cli.main import cli
from hypercontain.mcp import server as mcp_server


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def pattern_file(tmp_path):
    path = tmp_path / "pattern.txt"
    path.write_text("a b\nb c\n-\n")
    return str(path)


@pytest.fixture()
def host_file(tmp_path):
    path = tmp_path / "host.txt"
    path.write_text("x y\ny z\nz w\n-\n")
    return str(path)


class TestShow:
    def test_summary_and_rows(self, runner, pattern_file):
        result = runner.invoke(cli, ["show", pattern_file])
        assert result.exit_code == 0
        assert "3 nodes, 2 edges, rank 2" in result.output
        assert "|@ |" in result.output
        assert "|@@|" in result.output
        assert "| @|" in result.output

    def test_custom_symbols(self, runner, pattern_file):
        result = runner.invoke(cli, ["show", pattern_file, "--present", "#", "--absent", "."])
        assert result.exit_code == 0
        assert "|#.|" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["show", str(tmp_path / "nope.txt")])
        assert result.exit_code == 2


class TestContains:
    def test_contained(self, runner, pattern_file, host_file):
        result = runner.invoke(cli, ["contains", pattern_file, host_file])
        assert result.exit_code == 0
        assert "Contained (3 steps)." in result.output
        assert "  a -> x" in result.output
        assert "  b -> y" in result.output
        assert "  c -> z" in result.output

    def test_not_contained(self, runner, pattern_file, host_file):
        result = runner.invoke(cli, ["contains", host_file, pattern_file])
        assert result.exit_code == 0
        assert "Not contained (0 steps)." in result.output

    def test_json_output(self, runner, pattern_file, host_file):
        result = runner.invoke(cli, ["contains", pattern_file, host_file, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["contained"] is True
        assert data["node_mapping"] == {"a": "x", "b": "y", "c": "z"}
        assert data["edge_mapping"] == {"0": "0", "1": "1"}
        assert data["steps"] == 3

    def test_budget_exceeded(self, runner, pattern_file, host_file):
        result = runner.invoke(cli, ["contains", pattern_file, host_file, "--max-steps", "0"])
        assert result.exit_code == 1
        assert "exceeded 0 steps" in result.output

    def test_negative_budget_rejected(self, runner, pattern_file, host_file):
        result = runner.invoke(cli, ["contains", pattern_file, host_file, "--max-steps", "-1"])
        assert result.exit_code == 2

    def test_verbose_flag(self, runner, pattern_file, host_file):
        result = runner.invoke(cli, ["-vv", "contains", pattern_file, host_file])
        assert result.exit_code == 0
        assert "Contained" in result.output


class TestInteractive:
    def test_reads_two_graphs_from_stdin(self, runner):
        stdin = "a b\nb c\n-\nx y\ny z\nz w\n-\n"
        result = runner.invoke(cli, ["interactive"], input=stdin)
        assert result.exit_code == 0
        assert "Hypergraph 1: 3 nodes, 2 edges, rank 2" in result.output
        assert "Hypergraph 2: 4 nodes, 3 edges, rank 2" in result.output
        assert "Contained (3 steps)." in result.output

    def test_not_contained(self, runner):
        stdin = "a b\nb c\n-\nx y\n-\n"
        result = runner.invoke(cli, ["interactive"], input=stdin)
        assert result.exit_code == 0
        assert "Not contained" in result.output


class TestRandom:
    def test_output_format(self, runner):
        result = runner.invoke(cli, ["random", "6", "4", "--seed", "1"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[-1] == "-"
        assert len(lines) == 5

    def test_reproducible(self, runner):
        first = runner.invoke(cli, ["random", "6", "4", "--seed", "9"])
        second = runner.invoke(cli, ["random", "6", "4", "--seed", "9"])
        assert first.output == second.output

    def test_fixed_rank(self, runner):
        result = runner.invoke(cli, ["random", "8", "5", "--rank", "2", "--seed", "3"])
        assert result.exit_code == 0
        for line in result.output.splitlines()[:-1]:
            assert len(line.split()) <= 2

    def test_edges_without_nodes(self, runner):
        result = runner.invoke(cli, ["random", "0", "3"])
        assert result.exit_code == 2
        assert "without nodes" in result.output


class TestMatch:
    @pytest.fixture()
    def adjacency_file(self, tmp_path):
        path = tmp_path / "adjacency.txt"
        path.write_text("# left right...\n1 10 11\n2 10\n")
        return str(path)

    def test_text_output(self, runner, adjacency_file):
        result = runner.invoke(cli, ["match", adjacency_file])
        assert result.exit_code == 0
        assert "Matching size: 2" in result.output
        assert "1 <-> 11" in result.output
        assert "2 <-> 10" in result.output

    def test_json_output(self, runner, adjacency_file):
        result = runner.invoke(cli, ["match", adjacency_file, "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"size": 2, "pairs": {"1": "11", "2": "10"}}

    def test_bad_input(self, runner, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("1 x\n")
        result = runner.invoke(cli, ["match", str(path)])
        assert result.exit_code == 1
        assert "Line 1" in result.output


class TestRoundtrip:
    def test_all_round_trips_pass(self, runner):
        result = runner.invoke(cli, ["roundtrip", "--graphs", "3", "--trials", "2", "--seed", "1"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"checked": 6, "failures": 0}

    def test_node_bounds_checked(self, runner):
        result = runner.invoke(cli, ["roundtrip", "--min-nodes", "5", "--max-nodes", "2"])
        assert result.exit_code == 2


class TestMcpCommand:
    def test_starts_server_with_budget(self, runner, monkeypatch):
        calls = []
        monkeypatch.setenv(mcp_server.MAX_STEPS_ENV, "1")
        monkeypatch.setattr(mcp_server, "run_server", lambda: calls.append(True))
        result = runner.invoke(cli, ["mcp", "--max-steps", "25"])
        assert result.exit_code == 0
        assert calls == [True]
        assert mcp_server._default_max_steps() == 25
