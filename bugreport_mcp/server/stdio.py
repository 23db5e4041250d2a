"""
MCP tool server over stdin/stdout (newline-delimited JSON-RPC 2.0).

Protocol:
- One JSON-RPC message per line
- Supports methods:
    - "initialize" → server info and capabilities
    - "ping"       → health check
    - "tools/list" → registered tool schemas
    - "tools/call" → calls a tool by name with arguments
- Messages without an id are notifications and get no response

stdout is reserved for protocol messages. Diagnostics go through logging,
which the CLI points at stderr.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Optional, TextIO

from bugreport_mcp.errors import InvalidArgument
from bugreport_mcp.server.registry import ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class JsonRpcError(Exception):
    """An error that becomes a JSON-RPC error response."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class StdioServer:
    """
    JSON-RPC tool server that communicates via stdin/stdout.

    Requests are handled strictly one at a time: a request's response is
    written and flushed before the next line is read.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        name: str = "aospbugreportanalyzer-mcp",
        version: str = "0.1.0",
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.registry = registry
        self.name = name
        self.version = version
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout

    # ── Main loop ─────────────────────────────────────────────────────────

    def run(self) -> None:
        """
        Read requests from stdin, dispatch, write responses to stdout.

        Blocks until stdin is closed.
        """
        logger.info("Connected to stdio, waiting for requests (%d tools)", len(self.registry))

        for line in self._stdin:
            response = self.handle_line(line)
            if response is not None:
                self._write(response)

        logger.info("stdin closed, shutting down")

    def handle_line(self, line: str) -> Optional[Dict[str, Any]]:
        """Process one raw input line; returns the response, if any."""
        line = line.strip()
        if not line:
            return None

        try:
            message = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("Unparseable message: %s", e)
            return _error(None, PARSE_ERROR, f"Parse error: {e}")

        return self.handle_message(message)

    def handle_message(self, message: Any) -> Optional[Dict[str, Any]]:
        """Process one decoded JSON-RPC message."""
        if not isinstance(message, dict) or not isinstance(message.get("method"), str):
            request_id = message.get("id") if isinstance(message, dict) else None
            return _error(request_id, INVALID_REQUEST, "Invalid Request")

        method = message["method"]
        params = message.get("params") or {}
        is_notification = "id" not in message
        request_id = message.get("id")

        if is_notification:
            logger.debug("Notification: %s", method)
            return None

        try:
            result = self._dispatch(method, params, request_id)
        except JsonRpcError as e:
            return _error(request_id, e.code, e.message)
        except Exception as e:
            logger.exception("Unhandled error in %s (id=%s)", method, request_id)
            return _error(request_id, INTERNAL_ERROR, f"Internal error: {e}")

        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    # ── Dispatch ──────────────────────────────────────────────────────────

    def _dispatch(self, method: str, params: Any, request_id: Any) -> Any:
        """Route a method call to the appropriate handler."""
        if not isinstance(params, dict):
            raise JsonRpcError(INVALID_PARAMS, "params must be an object")

        if method == "initialize":
            return self._initialize(params)

        if method == "ping":
            return {}

        if method == "tools/list":
            return {"tools": self.registry.schemas()}

        if method == "tools/call":
            return self._call_tool(params, request_id)

        raise JsonRpcError(METHOD_NOT_FOUND, f"Method not found: {method}")

    def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        client = params.get("clientInfo") or {}
        logger.info("Initialize from %s %s", client.get("name", "unknown"), client.get("version", ""))
        return {
            "protocolVersion": params.get("protocolVersion") or DEFAULT_PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": self.name, "version": self.version},
        }

    def _call_tool(self, params: Dict[str, Any], request_id: Any) -> Dict[str, Any]:
        tool_name = params.get("name", "")
        arguments = params.get("arguments")

        handler = self.registry.get(tool_name)
        if handler is None:
            raise JsonRpcError(
                INVALID_PARAMS,
                f"Unknown tool: '{tool_name}'. Available: {self.registry.names()}",
            )

        logger.info("Tool %s called: requestId=%s args=%s", tool_name, request_id, arguments)

        try:
            result = handler.call(arguments)
        except InvalidArgument as e:
            logger.error("Rejected %s: %s", tool_name, e)
            raise JsonRpcError(INVALID_PARAMS, str(e))

        return result.to_dict()

    # ── Output ────────────────────────────────────────────────────────────

    def _write(self, response: Dict[str, Any]) -> None:
        self._stdout.write(json.dumps(response) + "\n")
        self._stdout.flush()


def _error(request_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "error": {"code": code, "message": message},
    }
