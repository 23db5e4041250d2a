"""adb invocation via local subprocesses - buffered or streamed to a file."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import IO, List, Optional, Union

from bugreport_mcp.errors import FilesystemFailure, SpawnFailed, SubprocessFailed, ToolError

logger = logging.getLogger(__name__)


@dataclass
class ProcessOutput:
    """Outcome of one finished adb process."""

    command: List[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class AdbRunner:
    """
    Run the adb executable, one child process per call.

    ``run()`` keeps stdout in memory; ``run_to_file()`` hands the child an
    open file as its stdout so large payloads (bugreports) never pass
    through this process. Both classify failures the same way:
    ``SpawnFailed`` if the process can't start, ``SubprocessFailed`` on a
    nonzero exit code.
    """

    def __init__(self, executable: str = "adb"):
        self.executable = executable

    def command(self, args: List[str]) -> List[str]:
        return [self.executable] + list(args)

    # ── Buffered ──────────────────────────────────────────────────────────

    def run(self, args: List[str]) -> ProcessOutput:
        """Run adb with ``args`` and return its captured output."""
        result = self._execute(self.command(args), stdout=subprocess.PIPE)
        if not result.succeeded:
            raise SubprocessFailed(result.command, result.exit_code, result.stderr)
        return result

    # ── Streamed ──────────────────────────────────────────────────────────

    def run_to_file(self, args: List[str], destination: Path) -> ProcessOutput:
        """
        Run adb with its stdout written straight into ``destination``.

        On any failure the partially written file is removed before the
        error propagates.
        """
        command = self.command(args)
        try:
            sink = open(destination, "wb")
        except (OSError, ValueError) as exc:
            raise FilesystemFailure(f"Cannot create {destination}: {exc}") from exc

        try:
            with sink:
                result = self._execute(command, stdout=sink)
            if not result.succeeded:
                raise SubprocessFailed(command, result.exit_code, result.stderr)
        except ToolError:
            logger.debug("Removing partial output %s", destination)
            Path(destination).unlink(missing_ok=True)
            raise

        return result

    # ── Process ───────────────────────────────────────────────────────────

    def _execute(self, command: List[str], stdout: Union[int, IO[bytes], None] = None) -> ProcessOutput:
        logger.debug("Running %s", " ".join(command))
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=stdout,
                stderr=subprocess.PIPE,
            )
        except (OSError, ValueError) as exc:
            raise SpawnFailed(command, str(exc)) from exc

        # communicate() drains stdout and stderr concurrently
        out, err = process.communicate()

        return ProcessOutput(
            command=command,
            exit_code=process.returncode,
            stdout=_decode(out),
            stderr=_decode(err),
        )


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")
