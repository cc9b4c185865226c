"""MCP surface for the family calendar."""

from .server import run_mcp_server, server

__all__ = ["run_mcp_server", "server"]
