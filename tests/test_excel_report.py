"""
Excel export of saved campaigns (read back with pandas)
"""

from pathlib import Path

import pandas as pd
import pytest

from adroi.reports import generate_excel_report
from adroi.reports.excel_report import SUMMARY_COLUMNS


def test_summary_and_funnel_sheets(store, spring_inputs, tmp_path):
    spring = store.create(name="Spring Sale", platform="Facebook Ads", **spring_inputs)
    store.create(name="Draft", budget=0, cpm=0, ctr=0, cr=0, avg_check=0)

    path = generate_excel_report(store.list(), str(tmp_path / "out"))

    assert Path(path).name.startswith("AdROI_Campaigns_")
    assert path.endswith(".xlsx")

    # the draft has no funnel, so no sheet of its own
    book = pd.ExcelFile(path)
    assert sorted(book.sheet_names) == ["Spring Sale", "Summary"]

    summary = pd.read_excel(path, sheet_name="Summary")
    assert list(summary.columns) == SUMMARY_COLUMNS
    assert len(summary) == 2

    row = summary[summary["Campaign"] == "Spring Sale"].iloc[0]
    assert row["Platform"] == "Facebook Ads"
    assert row["Revenue"] == pytest.approx(140_625)
    assert row["Profit"] == pytest.approx(130_625)
    assert row["ROAS Category"] == "Excellent"
    assert row["Updated"] == spring.updated_at

    funnel = pd.read_excel(path, sheet_name="Spring Sale")
    assert list(funnel["Stage"]) == ["Impressions", "Clicks", "Leads", "Sales"]
    assert funnel["Count"].iloc[0] == pytest.approx(1_250_000)
    assert funnel["% of Impressions"].iloc[1] == pytest.approx(2.5)


def test_sheet_names_are_sanitized_and_unique(store, spring_inputs, tmp_path):
    long_name = "A very long campaign name that Excel would reject"
    store.create(name=long_name, **spring_inputs)
    store.create(name=long_name, **spring_inputs)
    store.create(name="summary", **spring_inputs)
    store.create(name="Q1/Q2 [test]", **spring_inputs)

    path = generate_excel_report(store.list(), str(tmp_path))
    names = pd.ExcelFile(path).sheet_names

    assert len(names) == 5
    assert all(len(n) <= 31 for n in names)
    assert len({n.casefold() for n in names}) == 5
    assert "Q1Q2 test" in names
    assert "summary (2)" in names
    assert long_name[:31] in names
    assert long_name[:27] + " (2)" in names


def test_empty_export(tmp_path):
    path = generate_excel_report([], str(tmp_path))

    summary = pd.read_excel(path, sheet_name="Summary")
    assert list(summary.columns) == SUMMARY_COLUMNS
    assert summary.empty
