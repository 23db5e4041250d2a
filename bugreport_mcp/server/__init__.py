"""
Server - tool registry and the stdio JSON-RPC transport.
"""

from bugreport_mcp.server.registry import TOOLSETS, ToolRegistry, build_registry
from bugreport_mcp.server.stdio import StdioServer

__all__ = ["TOOLSETS", "StdioServer", "ToolRegistry", "build_registry"]
