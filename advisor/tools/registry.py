"""Tool Registry - tool registration and single tool-call resolution.

An LLM reply may contain at most one tool marker of the form
``[TOOL:<tool-id>:<json arguments>]``. Only the first marker is executed.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from advisor.tools.base import BaseTool, ToolResult
from advisor.tools.funding import FundingCalculatorTool
from advisor.tools.mvp_planner import MVPPlannerTool
from advisor.tools.runway import RunwayCalculatorTool
from advisor.tools.valuation import ValuationEstimatorTool
from advisor.utils.exceptions import ToolError
from advisor.utils.logging import get_logger

logger = get_logger(__name__)

TOOL_CALL_PATTERN = re.compile(r"\[TOOL:([a-z0-9_\-]+):(\{.*?\})\]", re.DOTALL)


@dataclass(frozen=True)
class ToolCall:
    """A tool marker found in model output."""

    tool_id: str
    raw_arguments: str
    marker: str

    def arguments(self) -> dict[str, Any]:
        """Decode the JSON arguments.

        Raises:
            ToolError: If the arguments are not a JSON object.
        """
        try:
            value = json.loads(self.raw_arguments)
        except json.JSONDecodeError as e:
            raise ToolError(self.tool_id, f"Invalid tool arguments: {e.msg}", cause=e) from e
        if not isinstance(value, dict):
            raise ToolError(self.tool_id, "Tool arguments must be a JSON object")
        return value


def find_tool_call(text: str) -> ToolCall | None:
    """Return the first tool marker in ``text``, if any."""
    match = TOOL_CALL_PATTERN.search(text)
    if match is None:
        return None
    return ToolCall(tool_id=match.group(1), raw_arguments=match.group(2), marker=match.group(0))


class ToolRegistry:
    """Registry of tools available to agents."""

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool.

        Raises:
            ToolError: If a tool with the same id is already registered.
        """
        if tool.tool_id in self._tools:
            raise ToolError(tool.tool_id, f"Tool already registered: {tool.tool_id}")
        self._tools[tool.tool_id] = tool
        logger.info("Tool registered", tool_id=tool.tool_id)

    def get(self, tool_id: str) -> BaseTool:
        """Get a tool by id.

        Raises:
            ToolError: If the tool is unknown.
        """
        if tool_id not in self._tools:
            raise ToolError(tool_id, f"Unknown tool: {tool_id}")
        return self._tools[tool_id]

    def list_tools(self) -> list[str]:
        return list(self._tools.keys())

    def describe(self, tool_ids: list[str]) -> str:
        """Prompt section describing the given tools (unknown ids skipped)."""
        lines = [self._tools[t].describe() for t in tool_ids if t in self._tools]
        if not lines:
            return ""
        return (
            "You may call ONE of these tools by writing "
            '[TOOL:<tool-id>:{"arg": value}] where the result should appear:\n'
            + "\n".join(lines)
        )

    async def execute(self, tool_id: str, arguments: dict[str, Any]) -> ToolResult:
        """Execute a registered tool.

        Raises:
            ToolError: If the tool is unknown or fails.
        """
        return await self.get(tool_id).execute(arguments)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, tool_id: str) -> bool:
        return tool_id in self._tools


def build_tool_registry() -> ToolRegistry:
    """Registry with the built-in calculators."""
    registry = ToolRegistry()
    registry.register(ValuationEstimatorTool())
    registry.register(RunwayCalculatorTool())
    registry.register(FundingCalculatorTool())
    registry.register(MVPPlannerTool())
    return registry
