"""
HTTP API (FastAPI TestClient)
"""

import pytest
from fastapi.testclient import TestClient

from adroi.api import backend
from adroi.config import Settings
from adroi.reports import pdf_generator


SPRING = {"budget": 10000, "cpm": 8, "ctr": 2.5, "cr": 3, "avg_check": 150}


@pytest.fixture
def client(tmp_path):
    settings = Settings(
        data_dir=str(tmp_path / "data"),
        output_dir=str(tmp_path / "output"),
    )
    backend.configure(settings, new_config_dir=str(tmp_path / "config"))
    return TestClient(backend.app)


@pytest.fixture
def campaign(client):
    response = client.post("/api/campaigns", json={"name": "Spring Sale", "platform": "Facebook Ads", **SPRING})
    assert response.status_code == 201
    return response.json()


class FakeHTML:
    def __init__(self, string):
        self.string = string

    def write_pdf(self, target):
        with open(target, "wb") as f:
            f.write(b"%PDF-1.7 fake")


def test_health_and_index(client):
    assert client.get("/health").json()["status"] == "healthy"
    index = client.get("/").json()
    assert "calculate" in index["api_endpoints"]


# ─────────────────────────────────────────────────────────
# Engine
# ─────────────────────────────────────────────────────────

def test_calculate(client):
    data = client.post("/api/engine/calculate", json=SPRING).json()

    assert data["is_valid"] is True
    assert data["metrics"]["revenue"] == pytest.approx(140_625)
    assert data["metrics"]["roas_category"] == "excellent"
    assert [s["name"] for s in data["stages"]] == ["Impressions", "Clicks", "Leads", "Sales"]
    assert data["insights"][0]["severity"] == "positive"


def test_calculate_parses_raw_strings(client):
    payload = {"budget": "$10,000", "cpm": "8", "ctr": "2.5%", "cr": "3 %", "avg_check": "150.00"}
    data = client.post("/api/engine/calculate", json=payload).json()

    assert data["inputs"] == {"budget": 10000, "cpm": 8, "ctr": 2.5, "cr": 3, "avg_check": 150}
    assert data["metrics"]["profit"] == pytest.approx(130_625)


def test_calculate_garbage_is_zero(client):
    data = client.post("/api/engine/calculate", json={"budget": "abc", "cpm": ""}).json()

    assert data["is_valid"] is False
    assert data["metrics"]["revenue"] == 0
    assert data["stages"] == []


def test_reverse(client):
    payload = {"desired_profit": 50000, "cpm": 8, "ctr": 2.5, "cr": 3, "avg_check": 150}
    data = client.post("/api/engine/reverse", json=payload).json()

    assert data["is_achievable"] is True
    assert data["required_budget"] == pytest.approx(50000 / 13.0625)

    data = client.post("/api/engine/reverse", json={**payload, "avg_check": 1}).json()
    assert data["is_achievable"] is False
    assert "below 1.0x" in data["reason"]


def test_funnel_break_even_sensitivity(client):
    stages = client.post("/api/engine/funnel", json=SPRING).json()["stages"]
    assert len(stages) == 4

    rates = {k: v for k, v in SPRING.items() if k != "budget"}
    points = client.post("/api/engine/break-even", json={**rates, "max_budget": 20000}).json()["points"]
    assert len(points) == 21
    assert points[-1]["budget"] == pytest.approx(20000)

    payload = {**SPRING, "base_ctr": 2.5}
    points = client.post("/api/engine/sensitivity", json=payload).json()["points"]
    assert len(points) == 11
    assert points[0]["ctr"] == pytest.approx(0.5)

    points = client.post("/api/engine/sensitivity", json={**payload, "steps": 4}).json()["points"]
    assert len(points) == 5

    assert client.post("/api/engine/sensitivity", json={**payload, "steps": 0}).status_code == 422


def test_compare(client):
    worse = {**SPRING, "cpm": 16}
    data = client.post("/api/engine/compare", json={"scenario_a": SPRING, "scenario_b": worse}).json()

    assert data["winner"] == "A"
    assert data["score_a"] == 3
    assert data["both_valid"] is True
    assert [r["metric"] for r in data["rows"]] == ["ROAS", "Profit", "ROI", "CPC", "CPL"]


# ─────────────────────────────────────────────────────────
# Campaigns
# ─────────────────────────────────────────────────────────

def test_campaign_crud(client, campaign):
    cid = campaign["id"]
    assert campaign["currency"] == "$"
    assert campaign["metrics"]["revenue"] == pytest.approx(140_625)

    fetched = client.get(f"/api/campaigns/{cid}").json()
    assert fetched["name"] == "Spring Sale"

    updated = client.put(f"/api/campaigns/{cid}", json={"budget": "20,000", "notes": "scale up"}).json()
    assert updated["budget"] == 20000
    assert updated["notes"] == "scale up"
    assert updated["platform"] == "Facebook Ads"
    assert updated["metrics"]["revenue"] == pytest.approx(281_250)

    assert client.delete(f"/api/campaigns/{cid}").json()["status"] == "deleted"
    assert client.get(f"/api/campaigns/{cid}").status_code == 404
    assert client.delete(f"/api/campaigns/{cid}").status_code == 404


def test_missing_campaign(client):
    assert client.get("/api/campaigns/nope").status_code == 404
    assert client.put("/api/campaigns/nope", json={"name": "x"}).status_code == 404
    assert client.post("/api/campaigns/nope/scenarios", json=SPRING).status_code == 404
    assert client.post("/api/campaigns/nope/report").status_code == 404


def test_list_search_and_delete_all(client, campaign):
    client.post("/api/campaigns", json={"name": "Brand", "platform": "Google Ads", **SPRING})

    listing = client.get("/api/campaigns").json()
    assert listing["count"] == 2

    found = client.get("/api/campaigns", params={"search": "google"}).json()
    assert [c["name"] for c in found["campaigns"]] == ["Brand"]

    assert client.delete("/api/campaigns").json()["count"] == 2
    assert client.get("/api/campaigns").json()["count"] == 0


def test_default_currency_from_settings(client):
    assert client.post("/api/settings", json={"default_currency": "€", "default_platform": "TikTok Ads"}).status_code == 200

    created = client.post("/api/campaigns", json={"name": "Launch", **SPRING}).json()
    assert created["currency"] == "€"
    assert created["platform"] == "TikTok Ads"


def test_scenarios(client, campaign):
    cid = campaign["id"]
    response = client.post(f"/api/campaigns/{cid}/scenarios", json={"name": "Cheaper", **SPRING, "cpm": 6})
    assert response.status_code == 201
    scenario = response.json()
    assert scenario["metrics"]["roas"] > campaign["metrics"]["roas"]

    fetched = client.get(f"/api/campaigns/{cid}").json()
    assert [s["name"] for s in fetched["scenarios"]] == ["Cheaper"]
    assert "metrics" in fetched["scenarios"][0]

    sid = scenario["id"]
    assert client.delete(f"/api/campaigns/{cid}/scenarios/{sid}").status_code == 200
    assert client.delete(f"/api/campaigns/{cid}/scenarios/{sid}").status_code == 404


# ─────────────────────────────────────────────────────────
# Reports
# ─────────────────────────────────────────────────────────

def test_pdf_report_and_download(client, campaign, monkeypatch):
    monkeypatch.setattr(pdf_generator, "HTML", FakeHTML)

    data = client.post(f"/api/campaigns/{campaign['id']}/report").json()
    assert data["status"] == "completed"
    assert data["pdf_file"] == "Spring_Sale_report.pdf"

    download = client.get(f"/api/reports/download/{data['pdf_file']}")
    assert download.status_code == 200
    assert download.headers["content-type"] == "application/pdf"
    assert download.content.startswith(b"%PDF")


def test_pdf_report_without_weasyprint(client, campaign, monkeypatch):
    monkeypatch.setattr(pdf_generator, "HTML", None)
    response = client.post(f"/api/campaigns/{campaign['id']}/report")
    assert response.status_code == 500


def test_excel_export(client, campaign):
    client.post("/api/campaigns", json={"name": "Brand", **SPRING})

    data = client.post("/api/campaigns/export-excel", json={}).json()
    assert data["campaign_count"] == 2

    data = client.post("/api/campaigns/export-excel", json={"campaign_ids": [campaign["id"]]}).json()
    assert data["campaign_count"] == 1

    download = client.get(f"/api/reports/download/{data['file']}")
    assert download.status_code == 200
    assert download.content[:2] == b"PK"


def test_download_missing(client):
    assert client.get("/api/reports/download/nothing.pdf").status_code == 404


# ─────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────

def test_settings(client, tmp_path):
    data = client.get("/api/settings").json()
    assert data["default_currency"] == "$"
    assert "R$" in data["currencies"]
    assert "Google Ads" in data["platforms"]

    saved = client.post("/api/settings", json={"default_currency": "£"}).json()
    assert saved["settings"]["default_currency"] == "£"
    assert (tmp_path / "config" / "settings.json").exists()
    assert client.get("/api/settings").json()["default_currency"] == "£"


@pytest.mark.parametrize("payload", [
    {"default_currency": "XYZ"},
    {"default_platform": "MySpace Ads"},
    {"log_level": "LOUD"},
])
def test_settings_rejects_unknown_values(client, payload):
    assert client.post("/api/settings", json=payload).status_code == 400


# ─────────────────────────────────────────────────────────
# Glossary
# ─────────────────────────────────────────────────────────

def test_glossary(client):
    data = client.get("/api/glossary").json()
    assert data["count"] == 17
    categories = [group["category"] for group in data["categories"]]
    assert categories == sorted(categories)

    found = client.get("/api/glossary", params={"search": "ctr"}).json()
    ids = [t["id"] for group in found["categories"] for t in group["terms"]]
    assert "ctr" in ids

    assert "glossary" in client.get("/").json()["api_endpoints"]


# ─────────────────────────────────────────────────────────
# Bad data and bad input
# ─────────────────────────────────────────────────────────

def test_corrupt_campaign_file_is_not_found(client, campaign, tmp_path):
    (tmp_path / "data" / "campaigns" / "deadbeef.json").write_text("{not json", encoding="utf-8")

    assert client.get("/api/campaigns").json()["count"] == 1
    assert client.get("/api/campaigns/deadbeef").status_code == 404
    assert client.put("/api/campaigns/deadbeef", json={"name": "x"}).status_code == 404
    assert client.post("/api/campaigns/deadbeef/scenarios", json=SPRING).status_code == 404
    assert client.post("/api/campaigns/deadbeef/report").status_code == 404


def test_empty_name_update_keeps_a_name(client, campaign):
    updated = client.put(f"/api/campaigns/{campaign['id']}", json={"name": ""}).json()
    assert updated["name"] == "Untitled Campaign"


def test_unknown_currency_rejected(client, campaign):
    assert client.post("/api/campaigns", json={"name": "x", "currency": "XYZ", **SPRING}).status_code == 400
    assert client.put(f"/api/campaigns/{campaign['id']}", json={"currency": "XYZ"}).status_code == 400
    assert client.get(f"/api/campaigns/{campaign['id']}").json()["currency"] == "$"

    created = client.post("/api/campaigns", json={"name": "Kyiv", "currency": "₴", **SPRING})
    assert created.status_code == 201


def test_startup_with_invalid_env_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("ADROI_LOG_LEVEL", "verbose")
    monkeypatch.setenv("ADROI_CURRENCY", "XYZ")
    monkeypatch.setenv("ADROI_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ADROI_OUTPUT_DIR", str(tmp_path / "output"))
    monkeypatch.setattr(backend, "settings", None)
    monkeypatch.setattr(backend, "store", None)
    monkeypatch.setattr(backend, "config_dir", tmp_path / "config")

    with TestClient(backend.app) as client:
        assert client.get("/health").status_code == 200
        data = client.get("/api/settings").json()

    assert data["log_level"] == "INFO"
    assert data["default_currency"] == "$"
