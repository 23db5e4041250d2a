"""
AOSP Bugreport MCP - tool server for the AOSP bugreport analyzer agent.

A stdio process that exposes a handful of named tools to a calling agent
over newline-delimited JSON-RPC (the MCP protocol).

Tools:
- github.list_pull_requests / github.get_pr_diff (GitHub REST API)
- fs.save_summary (writes Markdown summaries under summaries/)
- adb.list_devices / adb.get_bugreport (local adb executable)

Architecture:
- stdout carries protocol messages only
- stderr carries diagnostics
- One request is handled to completion before the next line is read
- Configuration is read once at start-up and never changes
"""

__version__ = "0.1.0"
__author__ = "AOSPBugreportAnalyzer Team"
__license__ = "Apache-2.0"

from bugreport_mcp.server.registry import ToolRegistry, build_registry
from bugreport_mcp.server.stdio import StdioServer
from bugreport_mcp.validation.config import ServerConfig, load_config

__all__ = [
    "ServerConfig",
    "StdioServer",
    "ToolRegistry",
    "build_registry",
    "load_config",
    "__version__",
]
