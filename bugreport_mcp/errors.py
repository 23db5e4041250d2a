"""Failure kinds shared by the adapters and tool handlers."""

from __future__ import annotations

from typing import List


class ToolError(Exception):
    """Base class for every failure a tool can report."""


class MissingCredential(ToolError):
    """A required secret (the GitHub token) is not configured."""


class InvalidArgument(ToolError):
    """Tool arguments are missing or malformed."""


class RemoteRejected(ToolError):
    """The remote API answered with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"GitHub API error: {status_code} {body}".rstrip())


class TransportFailure(ToolError):
    """The remote API could not be reached at all."""


class SpawnFailed(ToolError):
    """A subprocess could not be started."""

    def __init__(self, command: List[str], reason: str):
        self.command = command
        super().__init__(f"Failed to start {' '.join(command)}: {reason}")


class SubprocessFailed(ToolError):
    """A subprocess ran but exited with a nonzero code."""

    def __init__(self, command: List[str], exit_code: int, stderr: str = ""):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"{' '.join(command)} failed with code {exit_code}: {stderr.strip()}")


class FilesystemFailure(ToolError):
    """A directory could not be created or a file could not be written."""
