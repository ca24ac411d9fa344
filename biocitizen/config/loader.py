from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError as SchemaValidationError

"""Configuration loader.

Responsibilities:
- Load the YAML config (default ``config/biocitizen.yml``; a missing file means
  all defaults)
- Validate it against ``config_schema.json`` (shipped next to this module)
- Apply defaults
- Resolve the API key from the environment (``.env`` is loaded by the CLI)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/biocitizen.yml")
API_KEY_ENV = "GEMINI_API_KEY"

DEFAULT_MODEL = "gemini-2.5-flash-preview-09-2025"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class AIConfig:
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 60.0
    retries: int = 2
    backoff_factor: float = 0.5


@dataclass(frozen=True)
class AppConfig:
    strict_abundance: bool = False
    decimals: int = 4
    null_sentinels: set[str] = field(default_factory=set)  # upper-cased
    ai: AIConfig = field(default_factory=AIConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except SchemaValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path | None = None) -> AppConfig:
    """Load and validate the config file, falling back to defaults.

    An explicitly passed path must exist; the default path is optional.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
        if not path.exists():
            return AppConfig()
    elif not path.exists():
        raise ConfigError(f"config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    ai_raw = data.get("ai", {})
    defaults = AIConfig()
    ai = AIConfig(
        model=ai_raw.get("model", defaults.model),
        base_url=ai_raw.get("base_url", defaults.base_url).rstrip("/"),
        timeout_seconds=float(ai_raw.get("timeout_seconds", defaults.timeout_seconds)),
        retries=ai_raw.get("retries", defaults.retries),
        backoff_factor=float(ai_raw.get("backoff_factor", defaults.backoff_factor)),
    )
    return AppConfig(
        strict_abundance=data.get("strict_abundance", False),
        decimals=data.get("decimals", 4),
        null_sentinels={s.strip().upper() for s in data.get("null_sentinels", [])},
        ai=ai,
    )


def get_api_key() -> str:
    """Return the generative-AI API key from the environment.

    Raises:
        ConfigError: the variable is unset or empty
    """
    key = os.getenv(API_KEY_ENV, "").strip()
    if not key:
        raise ConfigError(f"environment variable {API_KEY_ENV} is not set")
    return key
