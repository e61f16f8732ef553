"""Valuation estimator based on revenue multiples."""

from __future__ import annotations

from typing import Any

from advisor.tools.base import BaseTool, ToolParameter
from advisor.utils.exceptions import ToolError

INDUSTRY_MULTIPLES: dict[str, float] = {
    "ai": 10.0,
    "fintech": 12.0,
    "healthcare": 8.0,
    "gaming": 7.0,
    "blockchain": 15.0,
    "saas": 11.0,
    "ecommerce": 6.0,
    "cybersecurity": 9.0,
    "edtech": 8.0,
    "cleantech": 13.0,
}
DEFAULT_MULTIPLE = 8.0

STAGE_MULTIPLIERS: dict[str, float] = {
    "pre-seed": 0.5,
    "seed": 0.6,
    "series-a": 1.0,
    "series-b": 1.2,
    "series-c": 1.4,
    "growth": 1.1,
    "late-stage": 1.3,
}

RANGE_SPREAD = 0.2


class ValuationEstimatorTool(BaseTool):
    """Estimate a valuation range from revenue, growth and industry."""

    tool_id = "valuation-estimator"
    name = "Valuation Estimator"
    description = "Estimates a company valuation range from revenue, growth and industry multiples."
    parameters = (
        ToolParameter(name="industry", type="string", description="Industry (e.g. ai, fintech)"),
        ToolParameter(name="revenue", type="number", description="Annual revenue in millions USD"),
        ToolParameter(name="growth", type="number", description="Year-over-year growth (0.2 = 20%)"),
        ToolParameter(
            name="stage",
            type="string",
            description="Company stage (seed, series-a, ...)",
            required=False,
            default="series-a",
        ),
    )

    async def _execute(
        self,
        industry: str,
        revenue: float,
        growth: float,
        stage: str = "series-a",
    ) -> dict[str, Any]:
        if revenue < 0:
            raise ToolError(self.tool_id, "Revenue cannot be negative")
        if growth < -1:
            raise ToolError(self.tool_id, "Growth cannot be below -100%")

        industry = industry.strip().lower()
        stage = stage.strip().lower()
        industry_multiple = INDUSTRY_MULTIPLES.get(industry, DEFAULT_MULTIPLE)
        stage_multiplier = STAGE_MULTIPLIERS.get(stage, 1.0)
        final_multiple = industry_multiple * (1 + growth) * stage_multiplier
        base = revenue * final_multiple

        return {
            "industry": industry,
            "stage": stage,
            "revenue": revenue,
            "growth_pct": round(growth * 100, 1),
            "final_multiple": round(final_multiple, 2),
            "base_valuation": round(base, 2),
            "low": round(base * (1 - RANGE_SPREAD), 2),
            "high": round(base * (1 + RANGE_SPREAD), 2),
            "insights": self._insights(revenue, growth, final_multiple),
        }

    @staticmethod
    def _insights(revenue: float, growth: float, multiple: float) -> list[str]:
        insights: list[str] = []
        if multiple > 15:
            insights.append("Very high multiple; check it against current market comparables.")
        elif multiple < 5:
            insights.append("Conservative multiple; focus on growth metrics to move it.")
        if growth > 0.5:
            insights.append("Exceptional growth supports a premium valuation.")
        elif growth < 0.1:
            insights.append("Low growth is likely to be challenged by investors.")
        if revenue < 1:
            insights.append("Early revenue stage; traction and validation matter most.")
        return insights

    def format_result(self, data: dict[str, Any]) -> str:
        text = (
            f"Estimated valuation for a {data['stage']} {data['industry']} company: "
            f"${data['low']:,.2f}M - ${data['high']:,.2f}M "
            f"({data['final_multiple']}x revenue)."
        )
        if data["insights"]:
            text += " " + " ".join(data["insights"])
        return text
