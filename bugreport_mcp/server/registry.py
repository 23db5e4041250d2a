"""Tool registry - name -> handler lookup for the stdio server."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from bugreport_mcp.adapters.adb import AdbRunner
from bugreport_mcp.adapters.github import GitHubClient
from bugreport_mcp.tools.adb import GetBugreportTool, ListDevicesTool
from bugreport_mcp.tools.base import ToolHandler
from bugreport_mcp.tools.files import SaveSummaryTool
from bugreport_mcp.tools.github import GetPullRequestDiffTool, ListPullRequestsTool
from bugreport_mcp.validation.config import ServerConfig

logger = logging.getLogger(__name__)

TOOLSETS = ("github", "files", "adb")


class ToolRegistry:
    """
    Holds the tools a server exposes.

    Lookup is by name only; registration order just decides the order of
    ``tools/list``.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, ToolHandler] = {}

    def register(self, handler: ToolHandler) -> None:
        """Register a tool handler."""
        if not handler.name:
            raise ValueError(f"ToolHandler {handler.__class__.__name__} has no name")
        if handler.name in self._handlers:
            raise ValueError(f"Tool already registered: {handler.name}")
        self._handlers[handler.name] = handler
        logger.debug("Registered tool: %s", handler.name)

    def get(self, name: str) -> Optional[ToolHandler]:
        return self._handlers.get(name)

    def names(self) -> List[str]:
        return list(self._handlers)

    def schemas(self) -> List[Dict[str, Any]]:
        """Tool schemas for discovery."""
        return [handler.get_schema() for handler in self._handlers.values()]

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers


def build_registry(
    config: ServerConfig,
    toolsets: Iterable[str] = TOOLSETS,
    github_client: Optional[GitHubClient] = None,
    adb_runner: Optional[AdbRunner] = None,
) -> ToolRegistry:
    """
    Create a registry populated with the requested toolsets.

    Parameters
    ----------
    config : start-up configuration shared by every handler
    toolsets : any of ``github``, ``files``, ``adb``
    github_client : override the GitHub adapter (tests)
    adb_runner : override the adb adapter (tests)
    """
    selected = set(toolsets)
    unknown = selected - set(TOOLSETS)
    if unknown:
        raise ValueError(f"Unknown toolset(s): {sorted(unknown)}. Available: {list(TOOLSETS)}")

    registry = ToolRegistry()

    if "github" in selected:
        client = github_client or GitHubClient(config)
        registry.register(ListPullRequestsTool(config, client))
        registry.register(GetPullRequestDiffTool(config, client))

    if "files" in selected:
        registry.register(SaveSummaryTool(config))

    if "adb" in selected:
        runner = adb_runner or AdbRunner(config.adb_path)
        registry.register(ListDevicesTool(runner))
        registry.register(GetBugreportTool(config, runner))

    logger.info("Registering tools: %s", ", ".join(registry.names()))
    return registry
