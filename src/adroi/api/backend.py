"""
Ad ROI Architect - FastAPI backend

Local API for the planner UI:
1. Engine endpoints -> forward / reverse calculation, funnel, break-even,
   CTR sensitivity, A/B comparison (recomputed on every input change)
2. Saved campaigns and comparison scenarios (JSON files)
3. PDF campaign report / Excel export + download
4. Settings (default currency / platform)
5. Glossary
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..config import Settings, default_config_dir, load_settings, save_settings
from ..engine import (
    FunnelInputs,
    break_even_points,
    calculate,
    compare_scenarios,
    funnel_stages,
    insights,
    reverse_calculate,
    sensitivity_ctr,
)
from ..engine.formatting import CURRENCIES, PLATFORM_NAMES, parse_input
from ..engine.glossary import group_by_category, search_glossary
from ..reports import generate_campaign_pdf, generate_excel_report, get_pdf_filename
from ..store import CampaignRecord, CampaignStore


logger = logging.getLogger(__name__)

app = FastAPI(
    title="Ad ROI Architect API",
    description="Marketing funnel simulation and saved campaign API",
    version=__version__,
)

# Local UI only
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

settings: Optional[Settings] = None
store: Optional[CampaignStore] = None
config_dir: Path = default_config_dir()

Number = Union[float, str, None]


# ============================================================================
# Pydantic models
# ============================================================================

class FunnelRequest(BaseModel):
    """Five funnel inputs (raw values, unparsable -> 0)"""
    budget: Number = 0
    cpm: Number = 0
    ctr: Number = 0
    cr: Number = 0
    avg_check: Number = 0

    def to_inputs(self) -> FunnelInputs:
        return FunnelInputs(
            budget=parse_input(self.budget),
            cpm=parse_input(self.cpm),
            ctr=parse_input(self.ctr),
            cr=parse_input(self.cr),
            avg_check=parse_input(self.avg_check),
        )


class ReverseRequest(BaseModel):
    desired_profit: Number = 0
    cpm: Number = 0
    ctr: Number = 0
    cr: Number = 0
    avg_check: Number = 0


class BreakEvenRequest(BaseModel):
    cpm: Number = 0
    ctr: Number = 0
    cr: Number = 0
    avg_check: Number = 0
    max_budget: Number = 0


class SensitivityRequest(BaseModel):
    budget: Number = 0
    cpm: Number = 0
    base_ctr: Number = 0
    cr: Number = 0
    avg_check: Number = 0
    range_min: float = 0.5
    range_max: float = 5.0
    steps: int = Field(10, ge=1, le=200)


class CompareRequest(BaseModel):
    scenario_a: FunnelRequest
    scenario_b: FunnelRequest


class CampaignRequest(FunnelRequest):
    """Create campaign"""
    name: str = "Untitled Campaign"
    currency: Optional[str] = None
    platform: Optional[str] = None
    notes: Optional[str] = None


class CampaignUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their value"""
    name: Optional[str] = None
    budget: Number = None
    cpm: Number = None
    ctr: Number = None
    cr: Number = None
    avg_check: Number = None
    currency: Optional[str] = None
    platform: Optional[str] = None
    notes: Optional[str] = None


class ScenarioRequest(FunnelRequest):
    name: str = "Scenario"


class ExcelExportRequest(BaseModel):
    campaign_ids: Optional[List[str]] = None


class SettingsRequest(BaseModel):
    default_currency: Optional[str] = None
    default_platform: Optional[str] = None
    log_level: Optional[str] = None


# ============================================================================
# Initialization
# ============================================================================

def configure(new_settings: Settings, new_config_dir: Optional[str] = None) -> None:
    """Bind the app to a settings object (data/output directories)"""
    global settings, store, config_dir
    settings = new_settings
    store = CampaignStore(new_settings.data_dir)
    if new_config_dir is not None:
        config_dir = Path(new_config_dir)
    Path(new_settings.output_dir).mkdir(parents=True, exist_ok=True)


def _get_store() -> CampaignStore:
    if store is None:
        configure(load_settings(str(config_dir)))
    return store


def _get_settings() -> Settings:
    if settings is None:
        configure(load_settings(str(config_dir)))
    return settings


def _get_campaign(campaign_id: str) -> CampaignRecord:
    record = _get_store().get(campaign_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Campaign {campaign_id} not found")
    return record


def _check_currency(currency: str) -> str:
    if currency not in CURRENCIES:
        raise HTTPException(status_code=400, detail=f"Unsupported currency: {currency}")
    return currency


def _campaign_payload(record: CampaignRecord) -> Dict[str, Any]:
    data = record.to_dict()
    data["metrics"] = record.metrics.to_dict()
    for scenario_data, scenario in zip(data["scenarios"], record.scenarios):
        scenario_data["metrics"] = scenario.metrics.to_dict()
    return data


def _analysis_payload(inputs: FunnelInputs) -> Dict[str, Any]:
    metrics = calculate(inputs.budget, inputs.cpm, inputs.ctr, inputs.cr, inputs.avg_check)
    stages = funnel_stages(inputs.budget, inputs.cpm, inputs.ctr, inputs.cr, inputs.avg_check)
    return {
        "inputs": inputs.to_dict(),
        "is_valid": inputs.is_valid,
        "metrics": metrics.to_dict(),
        "stages": [s.to_dict() for s in stages],
        "insights": [i.to_dict() for i in insights(metrics, inputs.ctr, inputs.cr, inputs.avg_check)],
    }


@app.on_event("startup")
async def startup_event():
    """Load settings and set up logging"""
    current = _get_settings()
    logging.basicConfig(
        level=current.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Ad ROI Architect API started (data: %s)", current.data_dir)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


# ============================================================================
# Engine
# ============================================================================

@app.post("/api/engine/calculate")
async def calculate_metrics(request: FunnelRequest) -> Dict[str, Any]:
    """Forward calculation + funnel stages + insights"""
    return _analysis_payload(request.to_inputs())


@app.post("/api/engine/reverse")
async def reverse_metrics(request: ReverseRequest) -> Dict[str, Any]:
    """Budget required for a target profit"""
    result = reverse_calculate(
        desired_profit=parse_input(request.desired_profit),
        cpm=parse_input(request.cpm),
        ctr=parse_input(request.ctr),
        cr=parse_input(request.cr),
        avg_check=parse_input(request.avg_check),
    )
    return result.to_dict()


@app.post("/api/engine/funnel")
async def funnel(request: FunnelRequest) -> Dict[str, Any]:
    i = request.to_inputs()
    stages = funnel_stages(i.budget, i.cpm, i.ctr, i.cr, i.avg_check)
    return {"stages": [s.to_dict() for s in stages]}


@app.post("/api/engine/break-even")
async def break_even(request: BreakEvenRequest) -> Dict[str, Any]:
    points = break_even_points(
        cpm=parse_input(request.cpm),
        ctr=parse_input(request.ctr),
        cr=parse_input(request.cr),
        avg_check=parse_input(request.avg_check),
        max_budget=parse_input(request.max_budget),
    )
    return {"points": [{"budget": b, "profit": p} for b, p in points]}


@app.post("/api/engine/sensitivity")
async def sensitivity(request: SensitivityRequest) -> Dict[str, Any]:
    points = sensitivity_ctr(
        budget=parse_input(request.budget),
        cpm=parse_input(request.cpm),
        base_ctr=parse_input(request.base_ctr),
        cr=parse_input(request.cr),
        avg_check=parse_input(request.avg_check),
        ctr_range=(request.range_min, request.range_max),
        steps=request.steps,
    )
    return {"points": [{"ctr": c, "roas": r} for c, r in points]}


@app.post("/api/engine/compare")
async def compare(request: CompareRequest) -> Dict[str, Any]:
    """A/B scenario comparison"""
    comparison = compare_scenarios(request.scenario_a.to_inputs(), request.scenario_b.to_inputs())
    return comparison.to_dict()


# ============================================================================
# Saved campaigns
# ============================================================================

@app.get("/api/campaigns")
async def list_campaigns(search: Optional[str] = None) -> Dict[str, Any]:
    """Saved campaigns, most recently updated first"""
    records = _get_store().list(search=search)
    return {
        "campaigns": [_campaign_payload(r) for r in records],
        "count": len(records),
    }


@app.post("/api/campaigns", status_code=201)
async def create_campaign(request: CampaignRequest) -> Dict[str, Any]:
    current = _get_settings()
    i = request.to_inputs()
    currency = _check_currency(request.currency or current.default_currency)
    try:
        record = _get_store().create(
            name=request.name,
            budget=i.budget,
            cpm=i.cpm,
            ctr=i.ctr,
            cr=i.cr,
            avg_check=i.avg_check,
            currency=currency,
            platform=request.platform if request.platform is not None else current.default_platform,
            notes=request.notes,
        )
    except Exception as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _campaign_payload(record)


@app.delete("/api/campaigns")
async def delete_all_campaigns() -> Dict[str, Any]:
    """Delete every campaign (and its scenarios)"""
    count = _get_store().delete_all()
    return {"status": "deleted", "count": count}


@app.post("/api/campaigns/export-excel")
async def export_excel(request: ExcelExportRequest) -> Dict[str, Any]:
    """Excel workbook of saved campaigns (all, or the given ids)"""
    try:
        records = _get_store().list()
        if request.campaign_ids is not None:
            wanted = set(request.campaign_ids)
            records = [r for r in records if r.id in wanted]

        output_dir = str(Path(_get_settings().output_dir) / "reports")
        file_path = generate_excel_report(records, output_dir)
        return {
            "status": "completed",
            "file": Path(file_path).name,
            "path": file_path,
            "campaign_count": len(records),
        }
    except Exception as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/campaigns/{campaign_id}")
async def get_campaign(campaign_id: str) -> Dict[str, Any]:
    return _campaign_payload(_get_campaign(campaign_id))


@app.put("/api/campaigns/{campaign_id}")
async def update_campaign(campaign_id: str, request: CampaignUpdateRequest) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    for key in ("name", "currency", "platform", "notes"):
        value = getattr(request, key)
        if value is not None:
            fields[key] = value
    for key in ("budget", "cpm", "ctr", "cr", "avg_check"):
        value = getattr(request, key)
        if value is not None:
            fields[key] = parse_input(value)
    if "currency" in fields:
        _check_currency(fields["currency"])

    try:
        record = _get_store().update(campaign_id, **fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if record is None:
        raise HTTPException(status_code=404, detail=f"Campaign {campaign_id} not found")
    return _campaign_payload(record)


@app.delete("/api/campaigns/{campaign_id}")
async def delete_campaign(campaign_id: str) -> Dict[str, Any]:
    if not _get_store().delete(campaign_id):
        raise HTTPException(status_code=404, detail=f"Campaign {campaign_id} not found")
    return {"status": "deleted", "campaign_id": campaign_id}


# ============================================================================
# Comparison scenarios
# ============================================================================

@app.post("/api/campaigns/{campaign_id}/scenarios", status_code=201)
async def add_scenario(campaign_id: str, request: ScenarioRequest) -> Dict[str, Any]:
    i = request.to_inputs()
    scenario = _get_store().add_scenario(
        campaign_id,
        name=request.name,
        budget=i.budget,
        cpm=i.cpm,
        ctr=i.ctr,
        cr=i.cr,
        avg_check=i.avg_check,
    )
    if scenario is None:
        raise HTTPException(status_code=404, detail=f"Campaign {campaign_id} not found")

    data = scenario.to_dict()
    data["metrics"] = scenario.metrics.to_dict()
    return data


@app.delete("/api/campaigns/{campaign_id}/scenarios/{scenario_id}")
async def remove_scenario(campaign_id: str, scenario_id: str) -> Dict[str, Any]:
    if not _get_store().remove_scenario(campaign_id, scenario_id):
        raise HTTPException(status_code=404, detail="Scenario not found")
    return {"status": "deleted", "scenario_id": scenario_id}


# ============================================================================
# Reports
# ============================================================================

@app.post("/api/campaigns/{campaign_id}/report")
async def generate_report(campaign_id: str) -> Dict[str, Any]:
    """Campaign report PDF (synchronous)"""
    try:
        record = _get_campaign(campaign_id)
        output_dir = Path(_get_settings().output_dir) / "reports"
        pdf_path = generate_campaign_pdf(record, str(output_dir / get_pdf_filename(record.name)))
        return {
            "status": "completed",
            "pdf_file": Path(pdf_path).name,
            "pdf_path": pdf_path,
        }
    except HTTPException:
        raise
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/reports/download/{filename}")
async def download_report(filename: str):
    """Download a generated PDF / Excel file"""
    file_path = Path(_get_settings().output_dir) / "reports" / Path(filename).name
    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")

    if file_path.suffix == ".pdf":
        media_type = "application/pdf"
    else:
        media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    return FileResponse(str(file_path), media_type=media_type, filename=file_path.name)


# ============================================================================
# Settings
# ============================================================================

@app.get("/api/settings")
async def get_settings() -> Dict[str, Any]:
    data = _get_settings().to_dict()
    data["currencies"] = CURRENCIES
    data["platforms"] = PLATFORM_NAMES
    return data


@app.post("/api/settings")
async def update_settings(request: SettingsRequest) -> Dict[str, Any]:
    global settings
    current = _get_settings()
    updated = Settings(
        data_dir=current.data_dir,
        output_dir=current.output_dir,
        default_currency=request.default_currency if request.default_currency is not None else current.default_currency,
        default_platform=request.default_platform if request.default_platform is not None else current.default_platform,
        log_level=request.log_level if request.log_level is not None else current.log_level,
    )

    try:
        save_settings(updated, str(config_dir))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    settings = updated
    logging.getLogger().setLevel(updated.log_level.upper())
    return {"status": "saved", "settings": updated.to_dict()}


# ============================================================================
# Glossary
# ============================================================================

@app.get("/api/glossary")
async def glossary(search: Optional[str] = None) -> Dict[str, Any]:
    """Glossary cards grouped by category (optional search)"""
    terms = search_glossary(search)
    return {
        "categories": [
            {"category": category, "terms": [t.to_dict() for t in group]}
            for category, group in group_by_category(terms)
        ],
        "count": len(terms),
    }


# ============================================================================
# Root
# ============================================================================

@app.get("/")
async def root():
    """API info"""
    return {
        "message": f"Ad ROI Architect API v{__version__}",
        "docs": "/docs",
        "api_endpoints": {
            "calculate": "POST /api/engine/calculate",
            "reverse": "POST /api/engine/reverse",
            "funnel": "POST /api/engine/funnel",
            "break_even": "POST /api/engine/break-even",
            "sensitivity": "POST /api/engine/sensitivity",
            "compare": "POST /api/engine/compare",
            "campaigns": "GET/POST/DELETE /api/campaigns",
            "campaign": "GET/PUT/DELETE /api/campaigns/{campaign_id}",
            "scenarios": "POST /api/campaigns/{campaign_id}/scenarios",
            "scenario": "DELETE /api/campaigns/{campaign_id}/scenarios/{scenario_id}",
            "report": "POST /api/campaigns/{campaign_id}/report",
            "export_excel": "POST /api/campaigns/export-excel",
            "download": "GET /api/reports/download/{filename}",
            "settings": "GET/POST /api/settings",
            "glossary": "GET /api/glossary",
        }
    }


if __name__ == "__main__":
    uvicorn.run(
        app,
        host="127.0.0.1",
        port=8000,
        log_level="info"
    )
