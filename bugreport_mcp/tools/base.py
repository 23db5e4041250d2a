"""
Tool handler base class and the result envelope every tool returns.

To create a tool:

    class EchoInput(BaseModel):
        message: str

    class EchoTool(ToolHandler):
        name = "demo.echo"
        description = "Echoes back the message"
        input_model = EchoInput
        failure_prefix = "Failed to echo"

        def handle(self, params: EchoInput) -> ToolResult:
            return ToolResult.success(params.message)

``call()`` validates the raw arguments, runs ``handle()`` and turns any
ToolError raised by the external operation into an error-flagged result.
Invalid arguments are the one failure that is raised instead, before
``handle()`` runs.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bugreport_mcp.errors import InvalidArgument, ToolError

logger = logging.getLogger(__name__)


class TextContent(BaseModel):
    """A human-readable display block."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Display blocks plus an optional structured payload."""

    model_config = ConfigDict(populate_by_name=True)

    content: List[TextContent] = Field(min_length=1)
    structured_content: Optional[Dict[str, Any]] = Field(default=None, alias="structuredContent")
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def success(cls, text: str, payload: Optional[BaseModel] = None) -> "ToolResult":
        structured = payload.model_dump(by_alias=True) if payload is not None else None
        return cls(content=[TextContent(text=text)], structured_content=structured)

    @classmethod
    def failure(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: camelCase keys, no structuredContent when absent."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ToolHandler(ABC):
    """
    Base class for a tool implementation.

    Subclasses define what a tool does. The server handles transport.
    """

    # Subclasses must set these
    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    failure_prefix: ClassVar[str] = "Tool failed"

    input_model: Type[BaseModel]
    output_model: Optional[Type[BaseModel]] = None

    @abstractmethod
    def handle(self, params: Any) -> ToolResult:
        """
        Execute the tool with validated parameters.

        Args:
            params: An instance of ``input_model``

        Returns:
            The tool result. External failures may be raised as ToolError.
        """
        ...

    def validate(self, arguments: Optional[Dict[str, Any]]) -> BaseModel:
        """Resolve defaults and reject malformed input."""
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidArgument(f"Invalid arguments for {self.name}: expected an object")
        try:
            return self.input_model.model_validate(arguments)
        except ValidationError as e:
            raise InvalidArgument(f"Invalid arguments for {self.name}: {_describe(e)}") from e

    def call(self, arguments: Optional[Dict[str, Any]]) -> ToolResult:
        """Validate, run, and convert external failures into an error result."""
        params = self.validate(arguments)
        try:
            return self.handle(params)
        except ToolError as exc:
            logger.error("Error in %s: %s", self.name, exc)
            return ToolResult.failure(f"{self.failure_prefix}: {exc}")

    def get_schema(self) -> Dict[str, Any]:
        """Return the tool schema for discovery."""
        schema: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_model.model_json_schema(by_alias=True),
        }
        if self.output_model is not None:
            schema["outputSchema"] = self.output_model.model_json_schema(by_alias=True)
        return schema


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "arguments"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)
