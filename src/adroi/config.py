"""
Application settings

Resolution order: environment variables > <config_dir>/settings.json > defaults.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .engine.formatting import CURRENCIES, PLATFORM_NAMES


logger = logging.getLogger(__name__)

BASE_PATH = Path(__file__).resolve().parent.parent.parent
SETTINGS_FILENAME = "settings.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_KEYS = {
    "data_dir": "ADROI_DATA_DIR",
    "output_dir": "ADROI_OUTPUT_DIR",
    "default_currency": "ADROI_CURRENCY",
    "default_platform": "ADROI_PLATFORM",
    "log_level": "ADROI_LOG_LEVEL",
}


@dataclass
class Settings:
    data_dir: str
    output_dir: str
    default_currency: str = "$"
    default_platform: str = ""
    log_level: str = "INFO"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def default_config_dir() -> Path:
    return Path(os.environ.get("ADROI_CONFIG_DIR", str(BASE_PATH / "config")))


def _default_settings() -> Dict[str, Any]:
    return {
        "data_dir": str(BASE_PATH / "data"),
        "output_dir": str(BASE_PATH / "output"),
        "default_currency": "$",
        "default_platform": "",
        "log_level": "INFO",
    }


def load_settings(config_dir: Optional[str] = None) -> Settings:
    """Load settings (env > config file > defaults)"""
    config_path = Path(config_dir) if config_dir else default_config_dir()
    values = _default_settings()

    settings_file = config_path / SETTINGS_FILENAME
    if settings_file.exists():
        try:
            with open(settings_file, "r", encoding="utf-8") as f:
                stored = json.load(f)
            values.update({k: v for k, v in stored.items() if k in values})
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", settings_file, e)

    for key, env_var in ENV_KEYS.items():
        if os.environ.get(env_var):
            values[key] = os.environ[env_var]

    defaults = _default_settings()
    for key, value in values.items():
        if not _is_valid(key, value):
            logger.warning("Invalid %s %r, using default %r", key, value, defaults[key])
            values[key] = defaults[key]

    return Settings(**values)


def _is_valid(key: str, value: Any) -> bool:
    if not isinstance(value, str):
        return False
    if key == "default_currency":
        return value in CURRENCIES
    if key == "default_platform":
        return not value or value in PLATFORM_NAMES
    if key == "log_level":
        return value.upper() in LOG_LEVELS
    return bool(value)


def save_settings(settings: Settings, config_dir: Optional[str] = None) -> Path:
    """Validate and persist settings to <config_dir>/settings.json"""
    validate_settings(settings)

    config_path = Path(config_dir) if config_dir else default_config_dir()
    config_path.mkdir(parents=True, exist_ok=True)

    data = settings.to_dict()
    data["updated_at"] = datetime.now().isoformat()

    settings_file = config_path / SETTINGS_FILENAME
    with open(settings_file, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    return settings_file


def validate_settings(settings: Settings) -> None:
    if settings.default_currency not in CURRENCIES:
        raise ValueError(f"Unsupported currency: {settings.default_currency}")
    if settings.default_platform and settings.default_platform not in PLATFORM_NAMES:
        raise ValueError(f"Unsupported platform: {settings.default_platform}")
    if settings.log_level.upper() not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {settings.log_level}")
