"""
Engine data classes

Funnel inputs and the result records returned by the marketing engine.
All of them are frozen value objects.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict


@dataclass(frozen=True)
class FunnelInputs:
    """The five funnel assumptions (ctr/cr in percent units, 2.5 == 2.5%)"""
    budget: float
    cpm: float
    ctr: float
    cr: float
    avg_check: float

    @property
    def is_valid(self) -> bool:
        return (
            self.budget > 0 and self.cpm > 0 and self.ctr > 0
            and self.cr > 0 and self.avg_check > 0
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


class ROASCategory(Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    BREAK_EVEN = "Break-even"
    LOSING = "Losing"

    @property
    def key(self) -> str:
        return _CATEGORY_KEYS[self]

    @property
    def description(self) -> str:
        return _CATEGORY_DESCRIPTIONS[self]


_CATEGORY_KEYS = {
    ROASCategory.EXCELLENT: "excellent",
    ROASCategory.GOOD: "good",
    ROASCategory.BREAK_EVEN: "break_even",
    ROASCategory.LOSING: "losing",
}

_CATEGORY_DESCRIPTIONS = {
    ROASCategory.EXCELLENT: "Campaign is highly profitable",
    ROASCategory.GOOD: "Campaign is profitable",
    ROASCategory.BREAK_EVEN: "Campaign is barely covering costs",
    ROASCategory.LOSING: "Campaign is losing money",
}


@dataclass(frozen=True)
class CampaignMetrics:
    """Forward calculation result"""
    impressions: float
    clicks: float
    cpc: float
    leads: float
    cpl: float
    revenue: float
    profit: float
    roas: float
    roi: float
    cac: float
    max_cpc: float
    break_even_budget: float
    cost_per_impression: float
    click_through_value: float
    conversion_value: float
    wasted_spend: float

    @classmethod
    def zero(cls) -> "CampaignMetrics":
        return cls(
            impressions=0.0, clicks=0.0, cpc=0.0, leads=0.0, cpl=0.0,
            revenue=0.0, profit=0.0, roas=0.0, roi=0.0, cac=0.0,
            max_cpc=0.0, break_even_budget=0.0, cost_per_impression=0.0,
            click_through_value=0.0, conversion_value=0.0, wasted_spend=0.0,
        )

    @property
    def is_profitable(self) -> bool:
        return self.profit > 0

    @property
    def is_viable(self) -> bool:
        return self.roas >= 1.0

    @property
    def roas_category(self) -> ROASCategory:
        # highest tier first, ties go to the higher tier
        if self.roas >= 4.0:
            return ROASCategory.EXCELLENT
        if self.roas >= 2.0:
            return ROASCategory.GOOD
        if self.roas >= 1.0:
            return ROASCategory.BREAK_EVEN
        return ROASCategory.LOSING

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["is_profitable"] = self.is_profitable
        data["is_viable"] = self.is_viable
        data["roas_category"] = self.roas_category.key
        data["roas_category_label"] = self.roas_category.value
        return data


NOT_ACHIEVABLE_REASON = (
    "Not achievable with current parameters. "
    "Increase CR or Average Check, or decrease CPM."
)


@dataclass(frozen=True)
class ReverseResult:
    """Reverse calculation result (budget needed for a target profit)"""
    required_budget: float
    required_impressions: float
    required_clicks: float
    required_leads: float
    total_revenue: float
    effective_roas: float
    effective_roi: float
    is_achievable: bool
    reason: str

    @classmethod
    def not_achievable(cls) -> "ReverseResult":
        return cls(
            required_budget=0.0, required_impressions=0.0, required_clicks=0.0,
            required_leads=0.0, total_revenue=0.0, effective_roas=0.0,
            effective_roi=0.0, is_achievable=False,
            reason=NOT_ACHIEVABLE_REASON,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FunnelStage:
    """One funnel row (Impressions / Clicks / Leads / Sales)"""
    name: str
    count: float
    cost: float
    drop_off: float     # % lost vs. the previous stage
    percentage: float   # % of impressions

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Severity(Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    POSITIVE = "positive"


@dataclass(frozen=True)
class MarketingInsight:
    severity: Severity
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"severity": self.severity.value, "message": self.message}
