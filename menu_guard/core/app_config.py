import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from menu_guard.core.logging_config import get_logger

load_dotenv()

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_OVERRIDES = {
    "catalog_path": "MENU_GUARD_CATALOG_PATH",
    "assignments_path": "MENU_GUARD_ASSIGNMENTS_PATH",
    "custom_allergens_path": "MENU_GUARD_CUSTOM_ALLERGENS_PATH",
    "log_level": "MENU_GUARD_LOG_LEVEL",
}


@dataclass(frozen=True)
class AppConfig:
    catalog_path: str = "data/catalog.json"
    # Empty path keeps the store in memory
    assignments_path: str = "data/assignments.json"
    custom_allergens_path: str = "data/custom_allergens.json"
    log_level: str = "INFO"

    def resolve(self, path: str) -> Optional[Path]:
        """Resolve a configured path against the project root."""
        if not path:
            return None
        candidate = Path(path)
        return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _as_str(value: Any, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip()
    return default


def _config_path() -> Path:
    return PROJECT_ROOT / "config" / "app_config.json"


def _apply_env(config: AppConfig) -> AppConfig:
    overrides: Dict[str, str] = {}
    for field_name, env_name in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is not None:
            overrides[field_name] = value.strip()
    return replace(config, **overrides) if overrides else config


def load_app_config(path: Optional[Path] = None) -> AppConfig:
    config_path = path or _config_path()
    defaults = AppConfig()
    try:
        data: Dict[str, Any] = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return _apply_env(defaults)
    except json.JSONDecodeError as exc:
        logger.warning(f"Invalid app config JSON at {config_path}: {exc}")
        return _apply_env(defaults)

    config = AppConfig(
        catalog_path=_as_str(data.get("catalog_path"), defaults.catalog_path),
        assignments_path=_as_str(data.get("assignments_path"), defaults.assignments_path),
        custom_allergens_path=_as_str(data.get("custom_allergens_path"), defaults.custom_allergens_path),
        log_level=_as_str(data.get("log_level"), defaults.log_level) or defaults.log_level,
    )
    return _apply_env(config)
