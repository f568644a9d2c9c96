"""
Marketing calculation engine

Pure functions over the five funnel inputs:
1. Forward calculation (metrics bundle)
2. Reverse calculation (budget for a target profit)
3. Funnel stages, break-even and CTR sensitivity samples
4. Advisory insights and A/B scenario comparison
"""

from .compare import ScenarioComparison, compare_scenarios
from .marketing_engine import (
    break_even_points,
    calculate,
    funnel_stages,
    insights,
    reverse_calculate,
    sensitivity_ctr,
)
from .models import (
    CampaignMetrics,
    FunnelInputs,
    FunnelStage,
    MarketingInsight,
    ReverseResult,
    ROASCategory,
    Severity,
)

__all__ = [
    'calculate',
    'reverse_calculate',
    'funnel_stages',
    'break_even_points',
    'sensitivity_ctr',
    'insights',
    'compare_scenarios',
    'ScenarioComparison',
    'CampaignMetrics',
    'FunnelInputs',
    'FunnelStage',
    'MarketingInsight',
    'ReverseResult',
    'ROASCategory',
    'Severity',
]
