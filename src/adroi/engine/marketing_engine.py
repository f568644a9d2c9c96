"""
Marketing calculation engine

Forward and reverse funnel formulas over five inputs:

    budget     total spend
    cpm        cost per 1000 impressions
    ctr        click-through rate, percent units (2.5 == 2.5%)
    cr         conversion rate, percent units
    avg_check  revenue per conversion

The funnel is multiplicative and linear in budget:

    impressions = budget / cpm * 1000
    clicks      = impressions * ctr / 100
    leads       = clicks * cr / 100
    revenue     = leads * avg_check

Every function is total. Non-positive inputs and zero denominators resolve
to zero values or a "not achievable" result instead of raising, so callers
may recalculate on every keystroke.
"""

from typing import List, Tuple

from . import formatting
from .models import (
    CampaignMetrics,
    FunnelStage,
    MarketingInsight,
    ReverseResult,
    Severity,
)


BREAK_EVEN_STEPS = 20
SENSITIVITY_CTR_RANGE = (0.5, 5.0)
SENSITIVITY_STEPS = 10


# ─────────────────────────────────────────────────────────
# Forward calculation
# ─────────────────────────────────────────────────────────

def calculate(
    budget: float,
    cpm: float,
    ctr: float,
    cr: float,
    avg_check: float,
) -> CampaignMetrics:
    """
    Forecast metrics for a campaign.

    Args:
        budget: total spend
        cpm: cost per 1000 impressions
        ctr: click-through rate in percent
        cr: conversion rate in percent
        avg_check: revenue per conversion

    Returns:
        CampaignMetrics, or CampaignMetrics.zero() if any input is <= 0
    """
    if not (budget > 0 and cpm > 0 and ctr > 0 and cr > 0 and avg_check > 0):
        return CampaignMetrics.zero()

    impressions = (budget / cpm) * 1000.0
    clicks = impressions * (ctr / 100.0)
    cpc = budget / clicks if clicks > 0 else 0.0
    leads = clicks * (cr / 100.0)
    cpl = budget / leads if leads > 0 else 0.0
    revenue = leads * avg_check
    profit = revenue - budget
    roas = revenue / budget
    roi = ((revenue - budget) / budget) * 100.0
    max_cpc = avg_check * (cr / 100.0)
    cost_per_impression = budget / impressions if impressions > 0 else 0.0

    click_through_value = revenue / clicks if clicks > 0 else 0.0
    conversion_value = revenue / leads if leads > 0 else 0.0
    wasted_spend = max(0.0, budget - revenue)

    # Binary signal: 0 when every impression earns more than it costs,
    # otherwise the whole budget is at risk.
    revenue_per_unit = (ctr / 100.0) * (cr / 100.0) * avg_check
    cost_per_unit = cpm / 1000.0
    break_even_budget = 0.0 if revenue_per_unit > cost_per_unit else budget

    return CampaignMetrics(
        impressions=impressions,
        clicks=clicks,
        cpc=cpc,
        leads=leads,
        cpl=cpl,
        revenue=revenue,
        profit=profit,
        roas=roas,
        roi=roi,
        cac=cpl,
        max_cpc=max_cpc,
        break_even_budget=break_even_budget,
        cost_per_impression=cost_per_impression,
        click_through_value=click_through_value,
        conversion_value=conversion_value,
        wasted_spend=wasted_spend,
    )


# ─────────────────────────────────────────────────────────
# Reverse calculation
# ─────────────────────────────────────────────────────────

def reverse_calculate(
    desired_profit: float,
    cpm: float,
    ctr: float,
    cr: float,
    avg_check: float,
) -> ReverseResult:
    """
    Solve the budget that yields ``desired_profit``.

    Revenue per unit of budget is

        k = ctr/100 * cr/100 * 1000/cpm * avg_check

    so profit = budget * (k - 1). With k <= 1 no budget is profitable.
    """
    if not (cpm > 0 and ctr > 0 and cr > 0 and avg_check > 0 and desired_profit > 0):
        return ReverseResult.not_achievable()

    k = (ctr / 100.0) * (cr / 100.0) * (1000.0 / cpm) * avg_check

    if k <= 1:
        return ReverseResult(
            required_budget=0.0,
            required_impressions=0.0,
            required_clicks=0.0,
            required_leads=0.0,
            total_revenue=0.0,
            effective_roas=k,
            effective_roi=(k - 1) * 100,
            is_achievable=False,
            reason=(
                f"Revenue per dollar spent ({k:.2f}x) is below 1.0x. "
                "Improve CTR, CR, or Average Check to make profit possible."
            ),
        )

    required_budget = desired_profit / (k - 1)
    required_impressions = (required_budget / cpm) * 1000.0
    required_clicks = required_impressions * (ctr / 100.0)
    required_leads = required_clicks * (cr / 100.0)
    total_revenue = required_leads * avg_check

    return ReverseResult(
        required_budget=required_budget,
        required_impressions=required_impressions,
        required_clicks=required_clicks,
        required_leads=required_leads,
        total_revenue=total_revenue,
        effective_roas=k,
        effective_roi=(k - 1) * 100,
        is_achievable=True,
        reason=f"Achievable. ROAS: {k:.2f}x",
    )


# ─────────────────────────────────────────────────────────
# Funnel stages
# ─────────────────────────────────────────────────────────

def funnel_stages(
    budget: float,
    cpm: float,
    ctr: float,
    cr: float,
    avg_check: float,
) -> List[FunnelStage]:
    """
    Impressions -> Clicks -> Leads -> Sales rows.

    ``percentage`` is relative to impressions for every stage, ``drop_off``
    is relative to the previous stage. Sales equal leads (one sale per lead).
    Returns [] when budget or cpm is <= 0.
    """
    if not (budget > 0 and cpm > 0):
        return []

    impressions = (budget / cpm) * 1000.0
    clicks = impressions * (ctr / 100.0)
    leads = clicks * (cr / 100.0)
    sales = leads

    click_drop_off = ((impressions - clicks) / impressions) * 100 if impressions > 0 else 0.0
    lead_drop_off = ((clicks - leads) / clicks) * 100 if clicks > 0 else 0.0

    def share(count: float) -> float:
        return (count / impressions) * 100 if impressions > 0 else 0.0

    return [
        FunnelStage(
            name="Impressions",
            count=impressions,
            cost=budget,
            drop_off=0.0,
            percentage=100.0,
        ),
        FunnelStage(
            name="Clicks",
            count=clicks,
            cost=budget / clicks * clicks if clicks > 0 else 0.0,
            drop_off=click_drop_off,
            percentage=share(clicks),
        ),
        FunnelStage(
            name="Leads",
            count=leads,
            cost=budget / leads * leads if leads > 0 else 0.0,
            drop_off=lead_drop_off,
            percentage=share(leads),
        ),
        FunnelStage(
            name="Sales",
            count=sales,
            cost=sales * avg_check,
            drop_off=0.0,
            percentage=share(sales),
        ),
    ]


# ─────────────────────────────────────────────────────────
# Break-even / sensitivity sampling
# ─────────────────────────────────────────────────────────

def break_even_points(
    cpm: float,
    ctr: float,
    cr: float,
    avg_check: float,
    max_budget: float,
) -> List[Tuple[float, float]]:
    """(budget, profit) for 21 budgets from 0 to max_budget inclusive"""
    if not max_budget > 0:
        return []

    step = max_budget / BREAK_EVEN_STEPS
    points = []
    for i in range(BREAK_EVEN_STEPS + 1):
        budget = step * i
        metrics = calculate(budget, cpm, ctr, cr, avg_check)
        points.append((budget, metrics.profit))
    return points


def sensitivity_ctr(
    budget: float,
    cpm: float,
    base_ctr: float,
    cr: float,
    avg_check: float,
    ctr_range: Tuple[float, float] = SENSITIVITY_CTR_RANGE,
    steps: int = SENSITIVITY_STEPS,
) -> List[Tuple[float, float]]:
    """
    (ctr, roas) pairs sampled uniformly across ``ctr_range`` (closed).

    ``base_ctr`` is accepted for call-site symmetry with the planner but does
    not move the sampled range.
    """
    if steps <= 0:
        return []

    lower, upper = ctr_range
    step = (upper - lower) / steps
    points = []
    for i in range(steps + 1):
        ctr = lower + step * i
        metrics = calculate(budget, cpm, ctr, cr, avg_check)
        points.append((ctr, metrics.roas))
    return points


# ─────────────────────────────────────────────────────────
# Advisory insights
# ─────────────────────────────────────────────────────────

def insights(
    metrics: CampaignMetrics,
    ctr: float,
    cr: float,
    avg_check: float,
) -> List[MarketingInsight]:
    """
    Threshold checks over a metrics bundle.

    The checks are independent (several can fire) and are emitted in a
    fixed order; only the two ROAS checks exclude each other.
    """
    result = []

    if metrics.cpc > metrics.max_cpc:
        result.append(MarketingInsight(
            Severity.CRITICAL,
            f"CPC ({formatting.currency(metrics.cpc)}) exceeds max profitable CPC "
            f"({formatting.currency(metrics.max_cpc)}). Lower CPM or increase CR.",
        ))

    if metrics.roas < 1.0:
        result.append(MarketingInsight(
            Severity.CRITICAL,
            "ROAS is below 1.0x, campaign loses money on every dollar spent.",
        ))
    elif metrics.roas < 2.0:
        result.append(MarketingInsight(
            Severity.WARNING,
            "ROAS is between 1-2x. Profitable but thin margins. Consider optimization.",
        ))

    if ctr < 1.0:
        result.append(MarketingInsight(
            Severity.WARNING,
            "CTR below 1% is typical but leaves room for creative optimization.",
        ))

    if cr < 2.0:
        result.append(MarketingInsight(
            Severity.INFO,
            "CR below 2% is common. A/B test landing pages to improve conversion.",
        ))

    if metrics.cpl > avg_check:
        result.append(MarketingInsight(
            Severity.CRITICAL,
            f"Cost per lead ({formatting.currency(metrics.cpl)}) exceeds average check "
            f"({formatting.currency(avg_check)}). Each lead costs more than it generates.",
        ))

    if metrics.is_profitable and metrics.roas >= 3.0:
        result.append(MarketingInsight(
            Severity.POSITIVE,
            f"Strong ROAS of {formatting.roas(metrics.roas)}. "
            "Consider scaling budget to maximize returns.",
        ))

    return result
