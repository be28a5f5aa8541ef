from __future__ import annotations

import codecs
import json
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from dotenv import load_dotenv
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Locate the optional YAML config (explicit path > HUCOMPARE_CONFIG > ./hucompare.yml)
- Validate it against the packaged JSON schema
- Apply defaults for every missing key
"""

__all__ = [
    "ConfigError",
    "ErrorLogConfig",
    "CompareConfig",
    "DEFAULT_CONFIG_PATH",
    "CONFIG_ENV_VAR",
    "load_config",
    "load_env_file",
    "resolve_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("hucompare.yml")
CONFIG_ENV_VAR = "HUCOMPARE_CONFIG"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ErrorLogConfig:
    enabled: bool = False
    directory: str = "./logs"


@dataclass(frozen=True)
class CompareConfig:
    default_tolerance: float = 0.0
    max_differences: int = 50  # 差分表示上限 (総数は常に表示)
    encoding: str = "utf-8"
    error_log: ErrorLogConfig = field(default_factory=ErrorLogConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the data
            fails validation (wrong types, unknown keys, out-of-range values).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> CompareConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    tolerance = float(data.get("default_tolerance", 0.0))
    if not math.isfinite(tolerance):
        raise ConfigError(f"default_tolerance must be finite: {tolerance}")
    encoding = data.get("encoding", "utf-8")
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ConfigError(f"unknown encoding: {encoding}") from e
    log_raw = data.get("error_log", {})
    return CompareConfig(
        default_tolerance=tolerance,
        max_differences=data.get("max_differences", 50),
        encoding=encoding,
        error_log=ErrorLogConfig(
            enabled=log_raw.get("enabled", False),
            directory=log_raw.get("directory", "./logs"),
        ),
    )


def load_env_file(path: Path, override: bool = False) -> None:
    """Load a .env file (if present) into the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def resolve_config(explicit: Path | None = None) -> CompareConfig:
    """Load the effective configuration.

    Resolution order:
        1. ``explicit`` path (--config); must exist
        2. HUCOMPARE_CONFIG environment variable (.env 読み込み後); must exist
        3. ./hucompare.yml when present
        4. built-in defaults
    """
    if explicit is not None:
        return load_config(explicit)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return CompareConfig()
