"""
Tool handlers.

Each handler validates its input with a pydantic model, performs one
external operation through an adapter and returns a ToolResult.
"""

from bugreport_mcp.tools.adb import GetBugreportTool, ListDevicesTool, parse_devices
from bugreport_mcp.tools.base import TextContent, ToolHandler, ToolResult
from bugreport_mcp.tools.files import SaveSummaryTool, sanitize_file_name
from bugreport_mcp.tools.github import GetPullRequestDiffTool, ListPullRequestsTool

__all__ = [
    "GetBugreportTool",
    "GetPullRequestDiffTool",
    "ListDevicesTool",
    "ListPullRequestsTool",
    "SaveSummaryTool",
    "TextContent",
    "ToolHandler",
    "ToolResult",
    "parse_devices",
    "sanitize_file_name",
]
