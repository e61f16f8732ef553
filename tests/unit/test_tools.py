"""Tests for the calculator tools and tool registry."""

import pytest

from advisor.tools import (
    FundingCalculatorTool,
    MVPPlannerTool,
    RunwayCalculatorTool,
    ToolRegistry,
    ValuationEstimatorTool,
    build_tool_registry,
    find_tool_call,
)
from advisor.utils.exceptions import ToolError


class TestValuationEstimator:
    """Tests for ValuationEstimatorTool."""

    @pytest.mark.asyncio
    async def test_estimate(self):
        result = await ValuationEstimatorTool().execute(
            {"industry": "SaaS", "revenue": 2, "growth": 0.5, "stage": "seed"}
        )

        # 11 x 1.5 x 0.6 = 9.9x revenue
        assert result.success
        assert result.data["final_multiple"] == 9.9
        assert result.data["base_valuation"] == 19.8
        assert result.data["low"] == 15.84
        assert result.data["high"] == 23.76
        assert "seed saas" in result.summary

    @pytest.mark.asyncio
    async def test_unknown_industry_uses_default_multiple(self):
        result = await ValuationEstimatorTool().execute(
            {"industry": "agritech", "revenue": 1, "growth": 0.0}
        )

        assert result.data["stage"] == "series-a"
        assert result.data["final_multiple"] == 8.0

    @pytest.mark.asyncio
    async def test_negative_revenue_rejected(self):
        with pytest.raises(ToolError):
            await ValuationEstimatorTool().execute(
                {"industry": "ai", "revenue": -1, "growth": 0.1}
            )

    @pytest.mark.asyncio
    async def test_wrong_type_rejected(self):
        with pytest.raises(ToolError, match="must be of type number"):
            await ValuationEstimatorTool().execute(
                {"industry": "ai", "revenue": "lots", "growth": 0.1}
            )

    @pytest.mark.asyncio
    async def test_bool_is_not_a_number(self):
        with pytest.raises(ToolError):
            await ValuationEstimatorTool().execute(
                {"industry": "ai", "revenue": True, "growth": 0.1}
            )


class TestRunwayCalculator:
    """Tests for RunwayCalculatorTool."""

    @pytest.mark.asyncio
    async def test_runway_without_revenue(self):
        result = await RunwayCalculatorTool().execute({"cash": 300000, "monthly_burn": 60000})

        assert result.data["runway_months"] == 5.0
        assert result.data["default_alive"] is False
        assert result.data["recommendation"] == "Start fundraising or cut burn immediately."

    @pytest.mark.asyncio
    async def test_partial_month(self):
        result = await RunwayCalculatorTool().execute({"cash": 100000, "monthly_burn": 40000})

        assert result.data["runway_months"] == 2.5

    @pytest.mark.asyncio
    async def test_revenue_covering_burn_is_default_alive(self):
        result = await RunwayCalculatorTool().execute(
            {"cash": 100000, "monthly_burn": 50000, "monthly_revenue": 60000}
        )

        assert result.data["runway_months"] is None
        assert result.data["default_alive"] is True
        assert "revenue catches up" in result.summary

    @pytest.mark.asyncio
    async def test_runway_is_capped(self):
        result = await RunwayCalculatorTool().execute(
            {"cash": 10_000_000, "monthly_burn": 1000}
        )

        assert result.data["runway_months"] == 120.0

    @pytest.mark.asyncio
    async def test_zero_burn_rejected(self):
        with pytest.raises(ToolError, match="positive"):
            await RunwayCalculatorTool().execute({"cash": 1000, "monthly_burn": 0})


class TestFundingCalculator:
    """Tests for FundingCalculatorTool."""

    @pytest.mark.asyncio
    async def test_defaults(self):
        result = await FundingCalculatorTool().execute({})

        # 5 x 80k salaries + 60k operations + 120k marketing = 580k a year
        assert result.data["monthly_burn"] == 48333.33
        assert result.data["total_needed"] == 870000.0
        assert result.data["recommended_raise"] == 1044000.0
        assert result.data["post_money"] == 5220000.0
        assert result.data["pre_money"] == 4176000.0
        assert result.data["breakdown_pct"] == {"team": 69.0, "operations": 10.3, "marketing": 20.7}
        assert "$1,044,000" in result.summary

    @pytest.mark.asyncio
    async def test_stage_sets_dilution(self):
        result = await FundingCalculatorTool().execute(
            {"team_size": 10, "avg_salary": 120000, "runway_months": 24, "stage": "Series-A"}
        )

        assert result.data["stage"] == "series-a"
        assert result.data["dilution_pct"] == 25.0
        assert result.data["typical_range"] == "$3M - $15M"

    @pytest.mark.asyncio
    async def test_unknown_stage_rejected(self):
        with pytest.raises(ToolError, match="Unknown stage"):
            await FundingCalculatorTool().execute({"stage": "series-z"})

    @pytest.mark.asyncio
    async def test_runway_bounds(self):
        with pytest.raises(ToolError, match="Runway"):
            await FundingCalculatorTool().execute({"runway_months": 0})
        with pytest.raises(ToolError, match="Runway"):
            await FundingCalculatorTool().execute({"runway_months": 120})

    @pytest.mark.asyncio
    async def test_zero_spending_rejected(self):
        with pytest.raises(ToolError, match="positive"):
            await FundingCalculatorTool().execute(
                {"team_size": 0, "operational_costs": 0, "marketing_budget": 0}
            )


class TestMVPPlanner:
    """Tests for MVPPlannerTool."""

    @pytest.mark.asyncio
    async def test_saas_plan(self):
        result = await MVPPlannerTool().execute({})

        phases = result.data["phases"]
        assert [p["weeks"] for p in phases] == [5, 5, 2]
        assert phases[0]["features"] == ["User authentication", "Core dashboard"]
        assert phases[1]["features"] == ["Basic analytics"]
        assert result.data["stack_tier"] == "standard"
        assert result.data["fits_timeline"] is True
        assert result.summary.startswith("12-week saas MVP plan")

    @pytest.mark.asyncio
    async def test_tight_marketplace_timeline(self):
        result = await MVPPlannerTool().execute(
            {"product_type": "marketplace", "timeline_weeks": 8, "budget": 5000}
        )

        assert sum(p["weeks"] for p in result.data["phases"]) == 8
        assert result.data["critical_weeks"] == 10
        assert result.data["fits_timeline"] is False
        assert result.data["stack_tier"] == "lean"
        assert "cut scope" in result.summary

    @pytest.mark.asyncio
    async def test_nice_to_have_is_deferred(self):
        result = await MVPPlannerTool().execute({"product_type": "mobile-app", "budget": 80000})

        assert result.data["deferred"] == ["Social sharing"]
        assert result.data["stack_tier"] == "scale"

    @pytest.mark.asyncio
    async def test_unknown_type_uses_saas_features(self):
        result = await MVPPlannerTool().execute({"product_type": "hardware"})

        assert result.data["product_type"] == "hardware"
        assert result.data["template"] == "saas"

    @pytest.mark.asyncio
    async def test_timeline_bounds(self):
        with pytest.raises(ToolError, match="Timeline"):
            await MVPPlannerTool().execute({"timeline_weeks": 2})


class TestToolCallParsing:
    """Tests for tool marker detection."""

    def test_find_first_marker(self):
        text = (
            'A [TOOL:runway-calculator:{"cash": 1, "monthly_burn": 2}] '
            'B [TOOL:valuation-estimator:{"industry": "ai"}]'
        )

        call = find_tool_call(text)

        assert call.tool_id == "runway-calculator"
        assert call.arguments() == {"cash": 1, "monthly_burn": 2}

    def test_no_marker(self):
        assert find_tool_call("Plain answer.") is None

    def test_invalid_json_arguments(self):
        call = find_tool_call("[TOOL:runway-calculator:{cash: 1}]")

        with pytest.raises(ToolError, match="Invalid tool arguments"):
            call.arguments()


class TestToolRegistry:
    """Tests for ToolRegistry."""

    def test_builtin_tools(self):
        registry = build_tool_registry()

        assert len(registry) == 4
        assert registry.list_tools() == [
            "valuation-estimator",
            "runway-calculator",
            "funding-calculator",
            "mvp-planner",
        ]
        assert "runway-calculator" in registry

    def test_duplicate_registration(self):
        registry = ToolRegistry()
        registry.register(RunwayCalculatorTool())

        with pytest.raises(ToolError):
            registry.register(RunwayCalculatorTool())

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        with pytest.raises(ToolError, match="Unknown tool"):
            await ToolRegistry().execute("ghost", {})

    def test_describe_skips_unknown_ids(self):
        registry = build_tool_registry()

        section = registry.describe(["runway-calculator", "ghost"])

        assert "runway-calculator" in section
        assert "ghost" not in section
        assert registry.describe(["ghost"]) == ""

    def test_schema(self):
        schema = RunwayCalculatorTool().get_schema()

        assert schema["id"] == "runway-calculator"
        assert schema["parameters"]["required"] == ["cash", "monthly_burn"]
