"""MCP servers for the kinship service."""

from kinship.mcp.servers.relation_server import mcp as relation_mcp

__all__ = ["relation_mcp"]
