"""hypercontain MCP server — exposes containment checks as tools for AI agents."""

from hypercontain.mcp.server import mcp, run_server

__all__ = ["mcp", "run_server"]
