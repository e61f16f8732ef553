"""Deterministic tools agents may call once per turn."""

from advisor.tools.base import BaseTool, ToolParameter, ToolResult
from advisor.tools.funding import FundingCalculatorTool
from advisor.tools.mvp_planner import MVPPlannerTool
from advisor.tools.registry import (
    TOOL_CALL_PATTERN,
    ToolCall,
    ToolRegistry,
    build_tool_registry,
    find_tool_call,
)
from advisor.tools.runway import RunwayCalculatorTool
from advisor.tools.valuation import ValuationEstimatorTool

__all__ = [
    "BaseTool",
    "ToolParameter",
    "ToolResult",
    "TOOL_CALL_PATTERN",
    "ToolCall",
    "ToolRegistry",
    "build_tool_registry",
    "find_tool_call",
    "FundingCalculatorTool",
    "MVPPlannerTool",
    "RunwayCalculatorTool",
    "ValuationEstimatorTool",
]
