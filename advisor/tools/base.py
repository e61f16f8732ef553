"""Base Tool - Abstract base class for deterministic agent tools.

Tools are small calculators an agent may invoke once per turn when the LLM
asks for them. They never call the network.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from advisor.utils.exceptions import ToolError
from advisor.utils.logging import get_logger

logger = get_logger(__name__)

_PYTHON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "number": (int, float),
    "integer": (int,),
    "boolean": (bool,),
}


class ToolParameter(BaseModel):
    """Definition of a tool parameter."""

    name: str = Field(..., min_length=1, description="Parameter name")
    type: str = Field(default="string", description="Parameter type")
    description: str = Field(default="", description="Parameter description")
    required: bool = Field(default=True, description="Whether parameter is required")
    default: Any = Field(default=None, description="Default value if not required")

    model_config = {"extra": "forbid"}


class ToolResult(BaseModel):
    """Outcome of one tool execution."""

    tool_id: str = Field(..., description="Tool that ran")
    success: bool = Field(default=True)
    data: dict[str, Any] = Field(default_factory=dict, description="Structured output")
    summary: str = Field(default="", description="Human-readable result")
    error: str | None = Field(default=None)


class BaseTool(ABC):
    """Abstract base class for all tools.

    Subclasses declare their id, description and parameters, and implement
    ``_execute`` and ``format_result``.
    """

    tool_id: str = ""
    name: str = ""
    description: str = ""
    parameters: tuple[ToolParameter, ...] = ()

    @abstractmethod
    async def _execute(self, **kwargs: Any) -> dict[str, Any]:
        """Run the tool logic on validated arguments."""
        pass

    @abstractmethod
    def format_result(self, data: dict[str, Any]) -> str:
        """Render the structured output as a short paragraph."""
        pass

    def validate_parameters(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Validate arguments against the declared parameters.

        Args:
            arguments: Raw arguments from the tool call.

        Returns:
            Arguments with defaults applied. Unknown keys are dropped.

        Raises:
            ToolError: If a required parameter is missing or has the wrong type.
        """
        if not isinstance(arguments, dict):
            raise ToolError(self.tool_id, "Tool arguments must be an object")

        validated: dict[str, Any] = {}
        for param in self.parameters:
            if param.name not in arguments:
                if param.required:
                    raise ToolError(
                        self.tool_id, f"Missing required parameter: {param.name}"
                    )
                validated[param.name] = param.default
                continue

            value = arguments[param.name]
            expected = _PYTHON_TYPES.get(param.type)
            # bool is an int subclass; reject it for numeric parameters
            if expected and (
                not isinstance(value, expected)
                or (param.type != "boolean" and isinstance(value, bool))
            ):
                raise ToolError(
                    self.tool_id,
                    f"Parameter '{param.name}' must be of type {param.type}",
                )
            validated[param.name] = value

        return validated

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        """Validate arguments and run the tool.

        Raises:
            ToolError: If validation or execution fails.
        """
        validated = self.validate_parameters(arguments)
        try:
            data = await self._execute(**validated)
        except ToolError:
            raise
        except (ArithmeticError, ValueError) as e:
            raise ToolError(self.tool_id, f"Tool execution failed: {e}", cause=e) from e

        logger.info("Tool executed", tool_id=self.tool_id)
        return ToolResult(
            tool_id=self.tool_id,
            data=data,
            summary=self.format_result(data),
        )

    def describe(self) -> str:
        """One-line description used in system prompts."""
        params = ", ".join(
            f"{p.name} ({p.type}{'' if p.required else ', optional'})"
            for p in self.parameters
        )
        return f"- {self.tool_id}: {self.description} Arguments: {params}."

    def get_schema(self) -> dict[str, Any]:
        """JSON-schema style description of the tool."""
        return {
            "id": self.tool_id,
            "name": self.name,
            "description": self.description,
            "parameters": {
                "type": "object",
                "properties": {
                    p.name: {"type": p.type, "description": p.description}
                    for p in self.parameters
                },
                "required": [p.name for p in self.parameters if p.required],
            },
        }

    def __repr__(self) -> str:
        return f"Tool(id={self.tool_id})"
