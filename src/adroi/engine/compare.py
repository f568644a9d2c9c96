"""
Side-by-side comparison of two campaign scenarios (A/B)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .marketing_engine import calculate
from .models import CampaignMetrics, FunnelInputs


# (label, metric attribute, higher is better)
COMPARED_METRICS = [
    ("ROAS", "roas", True),
    ("Profit", "profit", True),
    ("ROI", "roi", True),
    ("CPC", "cpc", False),
    ("CPL", "cpl", False),
]


@dataclass(frozen=True)
class MetricComparison:
    metric: str
    value_a: float
    value_b: float
    a_wins: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "value_a": self.value_a,
            "value_b": self.value_b,
            "a_wins": self.a_wins,
        }


@dataclass(frozen=True)
class ScenarioComparison:
    metrics_a: CampaignMetrics
    metrics_b: CampaignMetrics
    rows: List[MetricComparison] = field(default_factory=list)
    score_a: int = 0
    winner: str = "B"

    @property
    def both_valid(self) -> bool:
        return self.metrics_a != CampaignMetrics.zero() and self.metrics_b != CampaignMetrics.zero()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metrics_a": self.metrics_a.to_dict(),
            "metrics_b": self.metrics_b.to_dict(),
            "rows": [row.to_dict() for row in self.rows],
            "score_a": self.score_a,
            "winner": self.winner,
            "both_valid": self.both_valid,
        }


def compare_scenarios(a: FunnelInputs, b: FunnelInputs) -> ScenarioComparison:
    """
    Compare two scenarios and pick a winner.

    A scores one point each for higher profit, higher ROAS and lower CPC.
    Two or more points make A the winner, otherwise B wins (ties included).
    """
    metrics_a = calculate(a.budget, a.cpm, a.ctr, a.cr, a.avg_check)
    metrics_b = calculate(b.budget, b.cpm, b.ctr, b.cr, b.avg_check)

    rows = []
    for label, attr, higher_is_better in COMPARED_METRICS:
        value_a = getattr(metrics_a, attr)
        value_b = getattr(metrics_b, attr)
        a_wins = value_a > value_b if higher_is_better else value_a < value_b
        rows.append(MetricComparison(label, value_a, value_b, a_wins))

    score_a = (
        (1 if metrics_a.profit > metrics_b.profit else 0)
        + (1 if metrics_a.roas > metrics_b.roas else 0)
        + (1 if metrics_a.cpc < metrics_b.cpc else 0)
    )

    return ScenarioComparison(
        metrics_a=metrics_a,
        metrics_b=metrics_b,
        rows=rows,
        score_a=score_a,
        winner="A" if score_a >= 2 else "B",
    )
