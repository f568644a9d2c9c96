#!/usr/bin/env python3
"""
Ad ROI Architect CLI

Usage:
    # Quick calculation (prints metrics, funnel and insights)
    python3 scripts/run_report.py calc --budget 1000 --cpm 10 --ctr 2 --cr 5 --avg-check 50

    # Budget needed for a target profit
    python3 scripts/run_report.py reverse --profit 5000 --cpm 10 --ctr 2 --cr 5 --avg-check 50

    # Saved campaigns
    python3 scripts/run_report.py list --search facebook

    # PDF report for one saved campaign
    python3 scripts/run_report.py pdf <campaign_id>

    # Excel workbook of every saved campaign
    python3 scripts/run_report.py excel
"""

import argparse
import sys
from pathlib import Path

from adroi.config import load_settings
from adroi.engine import calculate, funnel_stages, insights, reverse_calculate
from adroi.engine import formatting as fmt
from adroi.reports import generate_campaign_pdf, generate_excel_report, get_pdf_filename
from adroi.store import CampaignStore


SEVERITY_ICONS = {
    "critical": "❌",
    "warning": "⚠️ ",
    "info": "ℹ️ ",
    "positive": "✅",
}


def add_funnel_args(parser: argparse.ArgumentParser, with_budget: bool = True):
    if with_budget:
        parser.add_argument("--budget", "-b", default="0", help="ad budget (e.g. 1000, $1,000)")
    parser.add_argument("--cpm", default="0", help="cost per 1000 impressions")
    parser.add_argument("--ctr", default="0", help="click-through rate, percent")
    parser.add_argument("--cr", default="0", help="conversion rate, percent")
    parser.add_argument("--avg-check", "-a", default="0", help="revenue per sale")


def main() -> bool:
    parser = argparse.ArgumentParser(
        description="Ad ROI Architect",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config-dir", default=None, help="settings directory (default: config/)")
    parser.add_argument("--currency", "-c", default=None, help="currency symbol for output")

    sub = parser.add_subparsers(dest="command", required=True)

    add_funnel_args(sub.add_parser("calc", help="forward calculation"))

    reverse = sub.add_parser("reverse", help="budget for a target profit")
    reverse.add_argument("--profit", "-p", default="0", help="desired profit")
    add_funnel_args(reverse, with_budget=False)

    listing = sub.add_parser("list", help="saved campaigns")
    listing.add_argument("--search", "-s", default=None)

    pdf = sub.add_parser("pdf", help="campaign report PDF")
    pdf.add_argument("campaign_id")
    pdf.add_argument("--output", "-o", default=None, help="output .pdf path")

    excel = sub.add_parser("excel", help="Excel workbook of saved campaigns")
    excel.add_argument("--output-dir", "-o", default=None)

    args = parser.parse_args()
    settings = load_settings(args.config_dir)
    symbol = args.currency or settings.default_currency

    try:
        if args.command == "calc":
            return run_calc(args, symbol)
        if args.command == "reverse":
            return run_reverse(args, symbol)

        store = CampaignStore(settings.data_dir)
        if args.command == "list":
            return run_list(store, args.search)
        if args.command == "pdf":
            return run_pdf(store, args.campaign_id, args.output, settings.output_dir)
        if args.command == "excel":
            return run_excel(store, args.output_dir or str(Path(settings.output_dir) / "reports"))
        return False

    except Exception as e:
        print(f"\n❌ Error: {e}")
        import traceback
        traceback.print_exc()
        return False


def run_calc(args, symbol: str) -> bool:
    budget = fmt.parse_input(args.budget)
    cpm = fmt.parse_input(args.cpm)
    ctr = fmt.parse_input(args.ctr)
    cr = fmt.parse_input(args.cr)
    avg_check = fmt.parse_input(args.avg_check)

    m = calculate(budget, cpm, ctr, cr, avg_check)

    print(f"\n{'='*60}")
    print("Campaign metrics")
    print(f"{'='*60}")
    print(f"Impressions:   {fmt.integer(m.impressions)}")
    print(f"Clicks:        {fmt.integer(m.clicks)}")
    print(f"Leads / Sales: {fmt.integer(m.leads)}")
    print(f"CPC:           {fmt.currency_full(m.cpc, symbol)}")
    print(f"CPL / CAC:     {fmt.currency_full(m.cpl, symbol)}")
    print(f"Revenue:       {fmt.currency_full(m.revenue, symbol)}")
    print(f"Profit:        {fmt.currency_full(m.profit, symbol)}")
    print(f"ROAS:          {fmt.roas(m.roas)} ({m.roas_category.value})")
    print(f"ROI:           {fmt.percent(m.roi)}")
    print(f"Max CPC:       {fmt.currency_full(m.max_cpc, symbol)}")
    print(f"Break-even:    {fmt.currency_full(m.break_even_budget, symbol)}")

    stages = funnel_stages(budget, cpm, ctr, cr, avg_check)
    if stages:
        print(f"\n{'-'*60}")
        for s in stages:
            print(f"{s.name:<12} {fmt.integer(s.count):>12}  drop-off {fmt.percent(s.drop_off):>7}")

    findings = insights(m, ctr, cr, avg_check)
    if findings:
        print(f"\n{'-'*60}")
        for item in findings:
            print(f"{SEVERITY_ICONS[item.severity.value]} {item.message}")
    print()
    return True


def run_reverse(args, symbol: str) -> bool:
    result = reverse_calculate(
        desired_profit=fmt.parse_input(args.profit),
        cpm=fmt.parse_input(args.cpm),
        ctr=fmt.parse_input(args.ctr),
        cr=fmt.parse_input(args.cr),
        avg_check=fmt.parse_input(args.avg_check),
    )

    if not result.is_achievable:
        print(f"❌ {result.reason}")
        return True

    print(f"✅ {result.reason}")
    print(f"   Required budget: {fmt.currency_full(result.required_budget, symbol)}")
    print(f"   Impressions: {fmt.integer(result.required_impressions)}")
    print(f"   Clicks: {fmt.integer(result.required_clicks)}")
    print(f"   Leads: {fmt.integer(result.required_leads)}")
    return True


def run_list(store: CampaignStore, search) -> bool:
    records = store.list(search=search)
    if not records:
        print("No saved campaigns")
        return True

    for r in records:
        m = r.metrics
        platform = f" [{r.platform}]" if r.platform else ""
        print(f"{r.id}  {r.name}{platform}")
        print(f"    budget {fmt.currency(r.budget, r.currency)}  "
              f"profit {fmt.currency(m.profit, r.currency)}  ROAS {fmt.roas(m.roas)}")
    return True


def run_pdf(store: CampaignStore, campaign_id: str, output, output_dir: str) -> bool:
    record = store.get(campaign_id)
    if record is None:
        print(f"❌ Campaign not found: {campaign_id}")
        return False

    if output is None:
        output = str(Path(output_dir) / "reports" / get_pdf_filename(record.name))
    path = generate_campaign_pdf(record, output)
    print(f"✅ PDF written: {path}")
    return True


def run_excel(store: CampaignStore, output_dir: str) -> bool:
    records = store.list()
    path = generate_excel_report(records, output_dir)
    print(f"✅ Excel written: {path} ({len(records)} campaigns)")
    return True


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
