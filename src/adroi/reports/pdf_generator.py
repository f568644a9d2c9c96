"""
Campaign report PDF

Layout:
- Title / campaign name / platform / generation date
- INPUT PARAMETERS: budget, CPM, CTR, CR, average check
- CALCULATED METRICS: volumes, unit costs, revenue, profit, ROAS, ROI, max CPC
  (profit / ROAS / ROI coloured by sign)
- CONVERSION FUNNEL: one bar per stage, scaled to the impressions stage
- Insights and disclaimer

HTML is rendered to PDF with WeasyPrint.
"""

import html
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..engine import calculate, funnel_stages, insights
from ..engine import formatting as fmt
from ..store import CampaignRecord

try:
    from weasyprint import HTML
except (ImportError, OSError):
    # OSError: weasyprint is installed but its system libraries (pango) are not
    HTML = None


logger = logging.getLogger(__name__)

GREEN = "#00c853"
RED = "#ff5252"
ACCENT = "#00a8cc"


def generate_campaign_pdf(campaign: CampaignRecord, output_path: str) -> str:
    """
    Render the report for one campaign.

    Args:
        campaign: saved campaign record
        output_path: target .pdf path (parent directories are created)

    Returns:
        Path of the written PDF
    """
    if HTML is None:
        raise RuntimeError("WeasyPrint is not available: pip install weasyprint")

    html_content = build_report_html(
        campaign_name=campaign.name,
        budget=campaign.budget,
        cpm=campaign.cpm,
        ctr=campaign.ctr,
        cr=campaign.cr,
        avg_check=campaign.avg_check,
        currency=campaign.currency,
        platform=campaign.platform,
    )

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    try:
        HTML(string=html_content).write_pdf(str(output_file))
    except Exception:
        logger.exception("PDF rendering failed for campaign %s", campaign.id)
        raise

    logger.info("Wrote campaign report %s", output_file)
    return str(output_file)


def build_report_html(
    campaign_name: str,
    budget: float,
    cpm: float,
    ctr: float,
    cr: float,
    avg_check: float,
    currency: str = "$",
    platform: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    metrics = calculate(budget, cpm, ctr, cr, avg_check)
    stages = funnel_stages(budget, cpm, ctr, cr, avg_check)
    findings = insights(metrics, ctr, cr, avg_check)

    generated_at = generated_at or datetime.now()
    today = generated_at.strftime("%B %d, %Y")

    def money(value: float) -> str:
        return html.escape(fmt.currency_full(value, symbol=currency))

    inputs_rows = _build_rows([
        ("Budget", money(budget), None),
        ("CPM", money(cpm), None),
        ("CTR", fmt.percent(ctr), None),
        ("Conversion Rate", fmt.percent(cr), None),
        ("Average Check", money(avg_check), None),
    ])

    metric_rows = _build_rows([
        ("Impressions", fmt.integer(metrics.impressions), None),
        ("Clicks", fmt.integer(metrics.clicks), None),
        ("CPC", money(metrics.cpc), None),
        ("Leads / Sales", fmt.integer(metrics.leads), None),
        ("CPL / CAC", money(metrics.cpl), None),
        ("Revenue", money(metrics.revenue), None),
        ("Profit", money(metrics.profit), GREEN if metrics.is_profitable else RED),
        ("ROAS", fmt.roas(metrics.roas), GREEN if metrics.roas >= 1 else RED),
        ("ROI", fmt.percent(metrics.roi), GREEN if metrics.roi >= 0 else RED),
        ("Max CPC (break-even)", money(metrics.max_cpc), None),
    ])

    funnel_html = _build_funnel_rows(stages)

    insights_html = "".join(
        f'<li class="{item.severity.value}">{html.escape(item.message)}</li>'
        for item in findings
    )

    platform_html = ""
    if platform:
        platform_html = f'<p class="platform">Platform: {html.escape(platform)}</p>'

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<style>
    @page {{
        size: Letter;
        margin: 14mm;
    }}
    * {{
        font-family: 'Helvetica Neue', 'Noto Sans', -apple-system, sans-serif;
        box-sizing: border-box;
    }}
    body {{
        margin: 0; padding: 0;
        font-size: 10pt; line-height: 1.5; color: #1a1a1a;
    }}

    /* Title */
    h1 {{ margin: 0; font-size: 20pt; }}
    h2 {{ margin: 4px 0; font-size: 15pt; color: {ACCENT}; }}
    .platform {{ margin: 0; font-size: 10pt; color: #666; }}
    .date {{ margin: 0 0 12px 0; font-size: 8pt; color: #888; }}

    /* Sections */
    .section {{
        border-top: 1px solid #ddd; padding-top: 10px; margin-top: 10px;
    }}
    .section h3 {{
        margin: 0 0 6px 0; font-size: 11pt; color: {ACCENT}; letter-spacing: 0.5px;
    }}
    table.kv {{ width: 100%; border-collapse: collapse; }}
    table.kv td {{ padding: 2px 0; font-size: 9.5pt; }}
    table.kv td.lbl {{ color: #666; width: 40%; }}
    table.kv td.val {{ font-weight: bold; }}

    /* Funnel */
    .stage {{ margin-bottom: 6px; }}
    .stage .head {{ display: flex; justify-content: space-between; font-size: 9pt; }}
    .stage .bar {{
        height: 10px; border-radius: 4px; background: {ACCENT}; opacity: 0.6;
    }}

    /* Insights */
    ul.insights {{ margin: 0; padding-left: 16px; font-size: 9pt; }}
    ul.insights li.critical {{ color: {RED}; }}
    ul.insights li.warning {{ color: #b58900; }}
    ul.insights li.positive {{ color: {GREEN}; }}

    .disclaimer {{ margin-top: 16px; font-size: 7pt; color: #888; }}
</style>
</head>
<body>
    <h1>Ad ROI Architect - Campaign Report</h1>
    <h2>{html.escape(campaign_name)}</h2>
    {platform_html}
    <p class="date">Generated: {today}</p>

    <div class="section">
        <h3>INPUT PARAMETERS</h3>
        <table class="kv">{inputs_rows}</table>
    </div>

    <div class="section">
        <h3>CALCULATED METRICS</h3>
        <table class="kv">{metric_rows}</table>
    </div>

    <div class="section">
        <h3>CONVERSION FUNNEL</h3>
        {funnel_html}
    </div>

    <div class="section">
        <h3>INSIGHTS</h3>
        <ul class="insights">{insights_html}</ul>
    </div>

    <p class="disclaimer">{fmt.DISCLAIMER}</p>
</body>
</html>"""


def _build_rows(rows: List[tuple]) -> str:
    out = ""
    for label, value, color in rows:
        style = f' style="color: {color};"' if color else ""
        out += f'<tr><td class="lbl">{label}</td><td class="val"{style}>{value}</td></tr>'
    return out


def _build_funnel_rows(stages) -> str:
    if not stages:
        return ""

    max_count = stages[0].count
    out = ""
    for stage in stages:
        width = (stage.count / max_count) * 100 if max_count > 0 else 0
        out += '<div class="stage">'
        out += f'<div class="head"><span>{stage.name}</span><span>{fmt.integer(stage.count)}</span></div>'
        out += f'<div class="bar" style="width: {width:.1f}%;"></div>'
        out += "</div>"
    return out


def get_pdf_filename(campaign_name: str) -> str:
    """'Spring Sale / FB' -> 'Spring_Sale_FB_report.pdf'"""
    safe = re.sub(r'[^\w\-]+', '_', campaign_name.strip()).strip('_')
    return f"{safe or 'campaign'}_report.pdf"
