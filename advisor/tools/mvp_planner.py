"""MVP planner: phases a first release into build weeks."""

from __future__ import annotations

import math
from typing import Any

from advisor.tools.base import BaseTool, ToolParameter
from advisor.utils.exceptions import ToolError

MIN_WEEKS = 4
MAX_WEEKS = 52
DEFAULT_PRODUCT_TYPE = "saas"

EFFORT_WEEKS = {"low": 1, "medium": 2, "high": 3}

# (feature, priority, effort); nice-to-have features are deferred past launch
FEATURES: dict[str, tuple[tuple[str, str, str], ...]] = {
    "saas": (
        ("User authentication", "critical", "medium"),
        ("Core dashboard", "critical", "high"),
        ("Basic analytics", "important", "medium"),
        ("API integrations", "important", "high"),
        ("Mobile-friendly UI", "important", "medium"),
    ),
    "marketplace": (
        ("Listings", "critical", "high"),
        ("Search and filters", "critical", "medium"),
        ("Buyer-seller messaging", "critical", "medium"),
        ("Payments", "critical", "high"),
        ("Ratings and reviews", "important", "medium"),
    ),
    "mobile-app": (
        ("Onboarding flow", "critical", "medium"),
        ("Core functionality", "critical", "high"),
        ("Push notifications", "important", "medium"),
        ("Offline mode", "important", "high"),
        ("Social sharing", "nice-to-have", "medium"),
    ),
}

# Upper budget bound (USD, exclusive) -> stack tier
STACK_TIERS: tuple[tuple[float, str, tuple[str, ...]], ...] = (
    (10_000, "lean", ("Managed backend (free tier)", "Static hosting", "No-code admin")),
    (50_000, "standard", ("Web framework + PostgreSQL", "Cloud hosting with CI/CD", "Error monitoring")),
    (math.inf, "scale", ("Service-oriented backend", "Container orchestration", "Full observability")),
)


class MVPPlannerTool(BaseTool):
    """Split an MVP into foundation, essentials and launch phases."""

    tool_id = "mvp-planner"
    name = "MVP Planner"
    description = (
        "Plans an MVP: which features to build in which phase, how many weeks "
        "each phase gets and what stack fits the budget."
    )
    parameters = (
        ToolParameter(
            name="product_type", type="string",
            description="Product type (saas, marketplace, mobile-app)",
            required=False, default=DEFAULT_PRODUCT_TYPE,
        ),
        ToolParameter(
            name="timeline_weeks", type="number", description="Weeks until launch",
            required=False, default=12,
        ),
        ToolParameter(
            name="budget", type="number", description="Development budget in USD",
            required=False, default=25000,
        ),
    )

    async def _execute(
        self,
        product_type: str = DEFAULT_PRODUCT_TYPE,
        timeline_weeks: float = 12,
        budget: float = 25000,
    ) -> dict[str, Any]:
        if not MIN_WEEKS <= timeline_weeks <= MAX_WEEKS:
            raise ToolError(
                self.tool_id, f"Timeline must be between {MIN_WEEKS} and {MAX_WEEKS} weeks"
            )
        if budget < 0:
            raise ToolError(self.tool_id, "Budget cannot be negative")

        product_type = product_type.strip().lower()
        template = product_type if product_type in FEATURES else DEFAULT_PRODUCT_TYPE
        features = FEATURES[template]
        critical = [name for name, priority, _ in features if priority == "critical"]
        important = [name for name, priority, _ in features if priority == "important"]

        weeks = int(timeline_weeks)
        foundation_weeks = math.ceil(weeks * 0.4)
        launch_weeks = max(1, math.floor(weeks * 0.2))
        phases = [
            {"name": "Core foundation", "weeks": foundation_weeks, "features": critical[:2]},
            {
                "name": "Essential features",
                "weeks": weeks - foundation_weeks - launch_weeks,
                "features": critical[2:] + important[:1],
            },
            {"name": "Polish and launch", "weeks": launch_weeks, "features": important[1:]},
        ]

        critical_weeks = sum(
            EFFORT_WEEKS[effort] for _, priority, effort in features if priority == "critical"
        )
        tier, stack = next((name, stack) for bound, name, stack in STACK_TIERS if budget < bound)

        return {
            "product_type": product_type,
            "template": template,
            "timeline_weeks": weeks,
            "phases": phases,
            "deferred": [name for name, priority, _ in features if priority == "nice-to-have"],
            "critical_weeks": critical_weeks,
            "fits_timeline": critical_weeks <= weeks - launch_weeks,
            "stack_tier": tier,
            "stack": list(stack),
        }

    def format_result(self, data: dict[str, Any]) -> str:
        phases = ", ".join(f"{p['name']} ({p['weeks']} weeks)" for p in data["phases"])
        text = (
            f"{data['timeline_weeks']}-week {data['template']} MVP plan: {phases}. "
            f"Build first: {', '.join(data['phases'][0]['features'])}. "
            f"A {data['stack_tier']} stack fits the budget."
        )
        if not data["fits_timeline"]:
            text += (
                f" The critical features alone need about {data['critical_weeks']} weeks;"
                " cut scope or extend the timeline."
            )
        return text
