"""Funding requirements calculator: how much to raise for a target runway."""

from __future__ import annotations

from typing import Any

from advisor.tools.base import BaseTool, ToolParameter
from advisor.utils.exceptions import ToolError

SAFETY_BUFFER = 0.2
MAX_RUNWAY_MONTHS = 60

# stage: (typical dilution, typical round size, time to raise)
STAGE_PROFILES: dict[str, tuple[float, str, str]] = {
    "pre-seed": (0.15, "$50K - $500K", "2-4 months"),
    "seed": (0.20, "$500K - $3M", "3-6 months"),
    "series-a": (0.25, "$3M - $15M", "4-8 months"),
    "series-b": (0.20, "$15M - $50M", "6-12 months"),
}


class FundingCalculatorTool(BaseTool):
    """Size a round from team, operating and marketing costs."""

    tool_id = "funding-calculator"
    name = "Funding Calculator"
    description = (
        "Calculates monthly burn, the amount to raise for a target runway "
        "and the implied valuation at typical dilution for the stage."
    )
    parameters = (
        ToolParameter(
            name="team_size", type="number", description="Full-time team size",
            required=False, default=5,
        ),
        ToolParameter(
            name="avg_salary", type="number", description="Average annual salary in USD",
            required=False, default=80000,
        ),
        ToolParameter(
            name="operational_costs", type="number",
            description="Annual operating costs in USD (office, software, ...)",
            required=False, default=60000,
        ),
        ToolParameter(
            name="marketing_budget", type="number", description="Annual marketing budget in USD",
            required=False, default=120000,
        ),
        ToolParameter(
            name="runway_months", type="number", description="Runway the round should fund",
            required=False, default=18,
        ),
        ToolParameter(
            name="stage", type="string", description="Round stage (pre-seed, seed, series-a, series-b)",
            required=False, default="seed",
        ),
    )

    async def _execute(
        self,
        team_size: float = 5,
        avg_salary: float = 80000,
        operational_costs: float = 60000,
        marketing_budget: float = 120000,
        runway_months: float = 18,
        stage: str = "seed",
    ) -> dict[str, Any]:
        if min(team_size, avg_salary, operational_costs, marketing_budget) < 0:
            raise ToolError(self.tool_id, "Team size and costs cannot be negative")
        if not 1 <= runway_months <= MAX_RUNWAY_MONTHS:
            raise ToolError(
                self.tool_id, f"Runway must be between 1 and {MAX_RUNWAY_MONTHS} months"
            )

        stage = stage.strip().lower()
        if stage not in STAGE_PROFILES:
            raise ToolError(
                self.tool_id, f"Unknown stage '{stage}'; use one of {', '.join(STAGE_PROFILES)}"
            )

        team_cost = team_size * avg_salary
        annual_burn = team_cost + operational_costs + marketing_budget
        if annual_burn <= 0:
            raise ToolError(self.tool_id, "Total spending must be positive")

        dilution, typical_range, time_to_raise = STAGE_PROFILES[stage]
        total_needed = annual_burn * runway_months / 12
        recommended_raise = total_needed * (1 + SAFETY_BUFFER)
        post_money = recommended_raise / dilution

        return {
            "stage": stage,
            "monthly_burn": round(annual_burn / 12, 2),
            "breakdown_pct": {
                "team": round(team_cost / annual_burn * 100, 1),
                "operations": round(operational_costs / annual_burn * 100, 1),
                "marketing": round(marketing_budget / annual_burn * 100, 1),
            },
            "runway_months": runway_months,
            "total_needed": round(total_needed, 2),
            "recommended_raise": round(recommended_raise, 2),
            "dilution_pct": round(dilution * 100, 1),
            "pre_money": round(post_money - recommended_raise, 2),
            "post_money": round(post_money, 2),
            "typical_range": typical_range,
            "time_to_raise": time_to_raise,
        }

    def format_result(self, data: dict[str, Any]) -> str:
        return (
            f"At ${data['monthly_burn']:,.0f}/month, {data['runway_months']:g} months of runway "
            f"needs ${data['total_needed']:,.0f}; raise ${data['recommended_raise']:,.0f} "
            f"with a {SAFETY_BUFFER:.0%} buffer. At {data['dilution_pct']:g}% dilution that implies "
            f"a ${data['pre_money']:,.0f} pre-money valuation. Typical {data['stage']} rounds are "
            f"{data['typical_range']} and take {data['time_to_raise']} to close."
        )
