from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from dotenv import load_dotenv
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_ACTIVITY_COLUMNS,
    FieldMISConfig,
    HttpConfig,
    UserEntry,
)

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/fieldmis.yml``)
- Validate it against the bundled JSON schema
- Apply defaults (timeout 20s, lenient CSV, standard activity columns)
- Apply environment overrides, which win over the YAML:
    FIELDMIS_APPS_SCRIPT_URL      -> apps_script_url
    FIELDMIS_FEED_<NAME>          -> feeds.<name> (adds the feed if missing)
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "load_env_file",
]

DEFAULT_CONFIG_PATH = Path("config/fieldmis.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

ENV_APPS_SCRIPT_URL = "FIELDMIS_APPS_SCRIPT_URL"
ENV_FEED_PREFIX = "FIELDMIS_FEED_"


class ConfigError(Exception):
    pass


def load_env_file(path: Path = Path(".env"), override: bool = True) -> bool:
    """Load ``.env`` into the process environment.

    override=True lets ``.env`` values replace variables already present.
    Returns True when a file was found and loaded.
    """
    if not path.exists():
        return False
    return bool(load_dotenv(dotenv_path=path, override=override))


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: if the schema file is missing or not valid JSON, or the
            config fails validation (missing keys, wrong types, extra keys).
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


def _apply_env_overrides(
    feeds: dict[str, str], apps_script_url: str | None, environ: Mapping[str, str]
) -> tuple[dict[str, str], str | None]:
    feeds = dict(feeds)
    for key, value in environ.items():
        if key.startswith(ENV_FEED_PREFIX) and value.strip():
            name = key[len(ENV_FEED_PREFIX):].lower()
            if name:
                feeds[name] = value.strip()
    env_script = environ.get(ENV_APPS_SCRIPT_URL, "").strip()
    if env_script:
        apps_script_url = env_script
    return feeds, apps_script_url


def load_config(path: Path = DEFAULT_CONFIG_PATH, environ: Mapping[str, str] | None = None) -> FieldMISConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    http_raw = data.get("http") or {}
    http = HttpConfig(
        timeout_seconds=float(http_raw.get("timeout_seconds", 20)),
        cache_bust_param=http_raw.get("cache_bust_param", "_"),
        max_workers=int(http_raw.get("max_workers", 4)),
    )
    csv_raw = data.get("csv") or {}
    activity_columns = tuple(data.get("activity_columns") or DEFAULT_ACTIVITY_COLUMNS)
    users = tuple(
        UserEntry(
            username=u["username"],
            password_hash=u["password_hash"],
            role=u.get("role", "field"),
        )
        for u in data.get("users") or []
    )

    feeds, apps_script_url = _apply_env_overrides(
        data["feeds"],
        data.get("apps_script_url"),
        os.environ if environ is None else environ,
    )

    return FieldMISConfig(
        feeds=feeds,
        apps_script_url=apps_script_url,
        http=http,
        strict_csv=bool(csv_raw.get("strict", False)),
        activity_columns=activity_columns,
        users=users,
        logs_dir=data.get("logs_dir", "./logs"),
    )
