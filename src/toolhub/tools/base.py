"""Tool configuration shared by every tool module."""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from toolhub.schemas.tools import ToolResponse

ToolHandler = Callable[[Any], Awaitable[ToolResponse]]
"""Signature: async (validated input model) -> ToolResponse."""

TextFunction = Callable[..., Awaitable[str]]
"""Signature: async (**tool_arguments) -> response text. Used by the agent."""


class ToolConfig(BaseModel):
    """Name, description and input model of a tool."""

    name: str
    description: str
    input_model: type[BaseModel]

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the tool input, as advertised to clients."""
        return self.input_model.model_json_schema()


def error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__
