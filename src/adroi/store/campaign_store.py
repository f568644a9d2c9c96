"""
Saved campaign store

One JSON document per campaign under <data_dir>/campaigns/<id>.json.
Comparison scenarios live inside their campaign's document and are removed
together with it.
"""

import json
import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..engine import CampaignMetrics, FunnelInputs, calculate


logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "name", "budget", "cpm", "ctr", "cr", "avg_check",
    "currency", "platform", "notes",
)


def _now() -> str:
    return datetime.now().isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


def _none_if_empty(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class ScenarioRecord:
    """Comparison scenario attached to a campaign"""
    id: str
    name: str = "Scenario"
    budget: float = 0.0
    cpm: float = 0.0
    ctr: float = 0.0
    cr: float = 0.0
    avg_check: float = 0.0
    created_at: str = ""

    @property
    def inputs(self) -> FunnelInputs:
        return FunnelInputs(self.budget, self.cpm, self.ctr, self.cr, self.avg_check)

    @property
    def metrics(self) -> CampaignMetrics:
        return calculate(self.budget, self.cpm, self.ctr, self.cr, self.avg_check)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScenarioRecord":
        return cls(
            id=data["id"],
            name=data.get("name", "Scenario"),
            budget=float(data.get("budget", 0.0)),
            cpm=float(data.get("cpm", 0.0)),
            ctr=float(data.get("ctr", 0.0)),
            cr=float(data.get("cr", 0.0)),
            avg_check=float(data.get("avg_check", 0.0)),
            created_at=data.get("created_at", ""),
        )


@dataclass
class CampaignRecord:
    """Saved campaign: the five funnel inputs plus metadata"""
    id: str
    name: str = "Untitled Campaign"
    budget: float = 0.0
    cpm: float = 0.0
    ctr: float = 0.0
    cr: float = 0.0
    avg_check: float = 0.0
    currency: str = "$"
    platform: Optional[str] = None
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
    scenarios: List[ScenarioRecord] = field(default_factory=list)

    @property
    def inputs(self) -> FunnelInputs:
        return FunnelInputs(self.budget, self.cpm, self.ctr, self.cr, self.avg_check)

    @property
    def metrics(self) -> CampaignMetrics:
        return calculate(self.budget, self.cpm, self.ctr, self.cr, self.avg_check)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["scenarios"] = [s.to_dict() for s in self.scenarios]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CampaignRecord":
        scenarios = [ScenarioRecord.from_dict(s) for s in data.get("scenarios", [])]
        scenarios.sort(key=lambda s: s.created_at)
        return cls(
            id=data["id"],
            name=data.get("name", "Untitled Campaign"),
            budget=float(data.get("budget", 0.0)),
            cpm=float(data.get("cpm", 0.0)),
            ctr=float(data.get("ctr", 0.0)),
            cr=float(data.get("cr", 0.0)),
            avg_check=float(data.get("avg_check", 0.0)),
            currency=data.get("currency", "$"),
            platform=data.get("platform"),
            notes=data.get("notes"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
            scenarios=scenarios,
        )


class CampaignStore:
    def __init__(self, data_dir: str):
        self.campaigns_dir = Path(data_dir) / "campaigns"
        self.campaigns_dir.mkdir(parents=True, exist_ok=True)

    # ──────────────────────────────────────────────
    # File helpers
    # ──────────────────────────────────────────────

    def _path(self, campaign_id: str) -> Path:
        # ids are uuid hex strings, never path fragments
        return self.campaigns_dir / f"{Path(campaign_id).name}.json"

    def _load(self, campaign_id: str) -> Optional[CampaignRecord]:
        path = self._path(campaign_id)
        if not path.exists():
            return None
        return self._read(path)

    def _read(self, path: Path) -> Optional[CampaignRecord]:
        # corrupt documents read as missing
        try:
            with open(path, "r", encoding="utf-8") as f:
                return CampaignRecord.from_dict(json.load(f))
        except (OSError, ValueError, KeyError) as e:
            logger.warning("Skipping unreadable campaign file %s: %s", path.name, e)
            return None

    def _save(self, record: CampaignRecord) -> None:
        path = self._path(record.id)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(record.to_dict(), f, ensure_ascii=False, indent=2)
        tmp_path.replace(path)

    # ──────────────────────────────────────────────
    # Campaigns
    # ──────────────────────────────────────────────

    def create(
        self,
        name: str,
        budget: float,
        cpm: float,
        ctr: float,
        cr: float,
        avg_check: float,
        currency: str = "$",
        platform: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> CampaignRecord:
        now = _now()
        record = CampaignRecord(
            id=_new_id(),
            name=name or "Untitled Campaign",
            budget=budget,
            cpm=cpm,
            ctr=ctr,
            cr=cr,
            avg_check=avg_check,
            currency=currency or "$",
            platform=_none_if_empty(platform),
            notes=_none_if_empty(notes),
            created_at=now,
            updated_at=now,
        )
        self._save(record)
        logger.info("Created campaign %s (%s)", record.id, record.name)
        return record

    def get(self, campaign_id: str) -> Optional[CampaignRecord]:
        return self._load(campaign_id)

    def update(self, campaign_id: str, **fields) -> Optional[CampaignRecord]:
        """
        Update campaign fields and bump ``updated_at``.

        Returns:
            The updated record, or None if the campaign does not exist

        Raises:
            ValueError: for a field that is not editable
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown campaign fields: {', '.join(sorted(unknown))}")

        record = self._load(campaign_id)
        if record is None:
            return None

        for key, value in fields.items():
            if key in ("platform", "notes"):
                value = _none_if_empty(value)
            elif key == "name":
                value = value or "Untitled Campaign"
            elif key == "currency":
                value = value or "$"
            setattr(record, key, value)
        record.updated_at = _now()

        self._save(record)
        logger.info("Updated campaign %s", campaign_id)
        return record

    def delete(self, campaign_id: str) -> bool:
        path = self._path(campaign_id)
        if not path.exists():
            return False
        path.unlink()
        logger.info("Deleted campaign %s", campaign_id)
        return True

    def delete_all(self) -> int:
        count = 0
        for path in self.campaigns_dir.glob("*.json"):
            path.unlink()
            count += 1
        logger.info("Deleted all campaigns (%d)", count)
        return count

    def list(self, search: Optional[str] = None) -> List[CampaignRecord]:
        """Campaigns, most recently updated first; ``search`` matches name or platform"""
        records = []
        for path in self.campaigns_dir.glob("*.json"):
            record = self._read(path)
            if record is not None:
                records.append(record)

        if search:
            needle = search.casefold()
            records = [
                r for r in records
                if needle in r.name.casefold() or needle in (r.platform or "").casefold()
            ]

        records.sort(key=lambda r: r.updated_at, reverse=True)
        return records

    # ──────────────────────────────────────────────
    # Scenarios
    # ──────────────────────────────────────────────

    def add_scenario(
        self,
        campaign_id: str,
        name: str,
        budget: float,
        cpm: float,
        ctr: float,
        cr: float,
        avg_check: float,
    ) -> Optional[ScenarioRecord]:
        record = self._load(campaign_id)
        if record is None:
            return None

        scenario = ScenarioRecord(
            id=_new_id(),
            name=name or "Scenario",
            budget=budget,
            cpm=cpm,
            ctr=ctr,
            cr=cr,
            avg_check=avg_check,
            created_at=_now(),
        )
        record.scenarios.append(scenario)
        self._save(record)
        return scenario

    def remove_scenario(self, campaign_id: str, scenario_id: str) -> bool:
        record = self._load(campaign_id)
        if record is None:
            return False

        remaining = [s for s in record.scenarios if s.id != scenario_id]
        if len(remaining) == len(record.scenarios):
            return False

        record.scenarios = remaining
        self._save(record)
        return True
