"""Summary file tool - writes agent-produced Markdown under summaries/."""

from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from bugreport_mcp.errors import FilesystemFailure
from bugreport_mcp.tools.base import ToolHandler, ToolResult
from bugreport_mcp.validation.config import ServerConfig

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_NAME = "summary.md"

_SEPARATORS = re.compile(r"[/\\]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_file_name(file_name: str, default: str = DEFAULT_SUMMARY_NAME) -> str:
    """
    Reduce ``file_name`` to a single path component.

    Path separators become ``_``, every ``..`` is removed (repeatedly, so
    ``...`` can't collapse into a new one), and whitespace runs become
    ``_``. An empty result, or ``.``, falls back to ``default``.

        >>> sanitize_file_name("../../etc/passwd")
        '__etc_passwd'
        >>> sanitize_file_name("pr 43  summary.md")
        'pr_43_summary.md'
    """
    name = _SEPARATORS.sub("_", file_name)
    while ".." in name:
        name = name.replace("..", "")
    name = _WHITESPACE.sub("_", name.strip())
    if name in ("", "."):
        return default
    return name


class SaveSummaryInput(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    file_name: str = Field(
        alias="fileName",
        description="File name for the summary, e.g. pr-43-summary.md",
    )
    content: str = Field(
        description="Markdown content of the summary. Will be written to the file as-is.",
    )


class SavedFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(alias="filePath", description="Absolute path to the written file")


class SaveSummaryTool(ToolHandler):
    name = "fs.save_summary"
    description = "Save summary content into a Markdown file and return the path"
    failure_prefix = "Failed to save summary"
    input_model = SaveSummaryInput
    output_model = SavedFile

    def __init__(self, config: ServerConfig):
        self._config = config

    def handle(self, params: Any) -> ToolResult:
        safe_name = sanitize_file_name(params.file_name)
        logger.debug("Sanitized file name: %r -> %s", params.file_name, safe_name)

        summaries_dir = self._config.summaries_path()
        full_path = summaries_dir / safe_name
        try:
            # Encode before touching the disk so unencodable content leaves no empty file
            data = params.content.encode("utf-8")
            summaries_dir.mkdir(parents=True, exist_ok=True)
            with open(full_path, "wb") as f:
                f.write(data)
        except (OSError, ValueError) as exc:
            # ValueError: embedded NUL in the path, or lone surrogates in the content
            raise FilesystemFailure(str(exc)) from exc

        logger.info("Saved summary to: %s", full_path)
        return ToolResult.success(
            f"Summary saved to {full_path}",
            SavedFile(file_path=str(full_path)),
        )
