"""Runway calculator for burn-rate planning."""

from __future__ import annotations

from typing import Any

from advisor.tools.base import BaseTool, ToolParameter
from advisor.utils.exceptions import ToolError

MAX_MONTHS = 120


class RunwayCalculatorTool(BaseTool):
    """Months of runway given cash, burn and (optionally growing) revenue."""

    tool_id = "runway-calculator"
    name = "Runway Calculator"
    description = "Calculates months of runway from cash on hand, monthly burn and revenue."
    parameters = (
        ToolParameter(name="cash", type="number", description="Cash on hand in USD"),
        ToolParameter(name="monthly_burn", type="number", description="Gross monthly spend in USD"),
        ToolParameter(
            name="monthly_revenue",
            type="number",
            description="Current monthly revenue in USD",
            required=False,
            default=0.0,
        ),
        ToolParameter(
            name="revenue_growth",
            type="number",
            description="Monthly revenue growth (0.05 = 5%)",
            required=False,
            default=0.0,
        ),
    )

    async def _execute(
        self,
        cash: float,
        monthly_burn: float,
        monthly_revenue: float = 0.0,
        revenue_growth: float = 0.0,
    ) -> dict[str, Any]:
        if cash < 0 or monthly_revenue < 0:
            raise ToolError(self.tool_id, "Cash and revenue cannot be negative")
        if monthly_burn <= 0:
            raise ToolError(self.tool_id, "Monthly burn must be positive")

        remaining = float(cash)
        runway_months: float | None = None
        for month in range(1, MAX_MONTHS + 1):
            revenue = monthly_revenue * (1 + revenue_growth) ** (month - 1)
            net_burn = monthly_burn - revenue
            if net_burn <= 0:
                break
            if remaining < net_burn:
                runway_months = round(month - 1 + remaining / net_burn, 1)
                break
            remaining -= net_burn
        else:
            runway_months = float(MAX_MONTHS)

        initial_net_burn = monthly_burn - monthly_revenue
        return {
            "cash": cash,
            "net_burn": round(initial_net_burn, 2),
            "runway_months": runway_months,
            "default_alive": runway_months is None,
            "recommendation": self._recommendation(runway_months),
        }

    @staticmethod
    def _recommendation(runway_months: float | None) -> str:
        if runway_months is None:
            return "Revenue covers spending before cash runs out; keep growth efficient."
        if runway_months < 6:
            return "Start fundraising or cut burn immediately."
        if runway_months < 12:
            return "Begin preparing your next round now; raises take 3-6 months."
        if runway_months < 18:
            return "Healthy runway; plan the next raise around key milestones."
        return "Comfortable runway; invest in growth while tracking burn monthly."

    def format_result(self, data: dict[str, Any]) -> str:
        if data["default_alive"]:
            head = f"At a net burn of ${data['net_burn']:,.0f}/month, revenue catches up before cash runs out."
        else:
            head = f"Runway: {data['runway_months']} months at a net burn of ${data['net_burn']:,.0f}/month."
        return f"{head} {data['recommendation']}"
