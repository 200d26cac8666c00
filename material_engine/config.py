from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from typing import Dict, Optional

from .errors import ConfigError
from .logger import setup_logger

logger = setup_logger(__name__)

SETTINGS_PATH = os.path.join(os.getcwd(), "settings.json")
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

ENV_OVERRIDES = {
    "api_base": "MATERIAL_ENGINE_API_BASE",
    "reasoning_model": "MATERIAL_ENGINE_REASONING_MODEL",
    "fast_model": "MATERIAL_ENGINE_FAST_MODEL",
    "image_model": "MATERIAL_ENGINE_IMAGE_MODEL",
    "thinking_budget": "MATERIAL_ENGINE_THINKING_BUDGET",
    "request_timeout": "MATERIAL_ENGINE_TIMEOUT",
    "log_level": "MATERIAL_ENGINE_LOG_LEVEL",
}


@dataclass
class EngineConfig:
    api_key: str = ""
    api_base: str = DEFAULT_API_BASE
    reasoning_model: str = "gemini-3-pro-preview"
    fast_model: str = "gemini-2.5-flash"
    image_model: str = "imagen-4.0-generate-001"
    thinking_budget: int = 32768
    request_timeout: float = 120.0
    log_level: str = "INFO"

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["api_key"] = "***" if self.api_key else ""
        return data


def _read_settings_file(path: str) -> Dict[str, object]:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Could not read settings file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must hold a JSON object")
    return data


def _coerce_field(name: str, value: object) -> object:
    if name == "thinking_budget":
        return int(value)
    if name == "request_timeout":
        return float(value)
    return str(value).strip()


def load_config(path: Optional[str] = None) -> EngineConfig:
    """Build the engine config from the settings file, then the environment.

    Environment variables win over the file. The API key is read from
    GEMINI_API_KEY, falling back to API_KEY.
    """
    settings = _read_settings_file(path or SETTINGS_PATH)
    known = {f.name for f in fields(EngineConfig)}
    values: Dict[str, object] = {}
    for key, raw in settings.items():
        if key not in known:
            logger.debug("Ignoring unknown setting %s", key)
            continue
        try:
            values[key] = _coerce_field(key, raw)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid value for {key}: {raw!r}") from exc

    for key, env_name in ENV_OVERRIDES.items():
        raw = os.getenv(env_name, "").strip()
        if not raw:
            continue
        try:
            values[key] = _coerce_field(key, raw)
        except ValueError as exc:
            raise ConfigError(f"Invalid value for {env_name}: {raw!r}") from exc

    api_key = os.getenv("GEMINI_API_KEY", "").strip() or os.getenv("API_KEY", "").strip()
    if api_key:
        values["api_key"] = api_key

    config = EngineConfig(**values)
    config.api_base = config.api_base.rstrip("/")
    if not config.api_key:
        logger.warning("API key is missing; set GEMINI_API_KEY (or API_KEY) for generative calls to work.")
    return config
