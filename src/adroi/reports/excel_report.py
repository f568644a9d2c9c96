import pandas as pd
from pathlib import Path
from typing import List
from datetime import datetime

from ..engine import funnel_stages
from ..store import CampaignRecord


def generate_excel_report(
    campaigns: List[CampaignRecord],
    output_dir: str = "output"
) -> str:
    """
    Export saved campaigns to an Excel workbook.

    Summary sheet has one row per campaign; each campaign also gets a
    funnel sheet named after it.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    file_path = output_path / f"AdROI_Campaigns_{timestamp}.xlsx"

    # 1. Summary DataFrame
    summary_data = []
    for c in campaigns:
        m = c.metrics
        summary_data.append({
            "Campaign": c.name,
            "Platform": c.platform or "",
            "Currency": c.currency,
            "Budget": c.budget,
            "CPM": c.cpm,
            "CTR %": c.ctr,
            "CR %": c.cr,
            "Avg Check": c.avg_check,
            "Impressions": m.impressions,
            "Clicks": m.clicks,
            "Leads": m.leads,
            "CPC": m.cpc,
            "CPL": m.cpl,
            "Revenue": m.revenue,
            "Profit": m.profit,
            "ROAS": m.roas,
            "ROI %": m.roi,
            "ROAS Category": m.roas_category.value,
            "Updated": c.updated_at,
        })

    df_summary = pd.DataFrame(summary_data, columns=SUMMARY_COLUMNS)

    # 2. Write workbook
    used_names = {"summary"}
    with pd.ExcelWriter(file_path, engine='openpyxl') as writer:
        df_summary.to_excel(writer, sheet_name="Summary", index=False)

        for c in campaigns:
            stages = funnel_stages(c.budget, c.cpm, c.ctr, c.cr, c.avg_check)
            if not stages:
                continue

            df_funnel = pd.DataFrame([
                {
                    "Stage": s.name,
                    "Count": s.count,
                    "Cost": s.cost,
                    "Drop-off %": s.drop_off,
                    "% of Impressions": s.percentage,
                }
                for s in stages
            ])
            df_funnel.to_excel(writer, sheet_name=_sheet_name(c.name, used_names), index=False)

    return str(file_path)


SUMMARY_COLUMNS = [
    "Campaign", "Platform", "Currency", "Budget", "CPM", "CTR %", "CR %",
    "Avg Check", "Impressions", "Clicks", "Leads", "CPC", "CPL", "Revenue",
    "Profit", "ROAS", "ROI %", "ROAS Category", "Updated",
]


def _sheet_name(name: str, used: set) -> str:
    # Excel: max 31 chars, no []:*?/\ and unique per workbook
    base = "".join(ch for ch in name if ch not in '[]:*?/\\').strip()[:31] or "Campaign"
    candidate = base
    n = 2
    while candidate.casefold() in used:
        suffix = f" ({n})"
        candidate = base[:31 - len(suffix)] + suffix
        n += 1
    used.add(candidate.casefold())
    return candidate
