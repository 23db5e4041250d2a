"""
Adapters - the single external side effect behind each tool.

- GitHubClient: HTTP GET against the GitHub REST API
- AdbRunner: local adb subprocess, buffered or streamed to a file
"""

from bugreport_mcp.adapters.adb import AdbRunner, ProcessOutput
from bugreport_mcp.adapters.github import GitHubClient

__all__ = ["AdbRunner", "GitHubClient", "ProcessOutput"]
