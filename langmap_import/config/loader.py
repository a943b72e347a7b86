from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    AppConfig,
    DatabaseConfig,
    ImportConfig,
    ParseConfig,
    TaxonomyMapping,
)

"""Config loader for config/import.yml.

Responsibilities:
- Load YAML
- Validate against schemas/config_schema.json
- Apply defaults (every section is optional)
"""

SCHEMA_DIR = Path(__file__).parent / "schemas"
SCHEMA_PATH = SCHEMA_DIR / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/import.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: Schema file missing/invalid or the data violates it
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


def _parse_section(raw: dict[str, Any]) -> ParseConfig:
    defaults = ParseConfig()
    taxonomy_columns = raw.get("taxonomy_columns")
    return ParseConfig(
        max_file_size=raw.get("max_file_size", defaults.max_file_size),
        max_rows=raw.get("max_rows", defaults.max_rows),
        delimiter=raw.get("delimiter", defaults.delimiter),
        required_columns=tuple(raw.get("required_columns", defaults.required_columns)),
        taxonomy_columns=tuple(taxonomy_columns) if taxonomy_columns is not None else None,
    )


def _import_section(raw: dict[str, Any] | None) -> ImportConfig | None:
    if raw is None:
        return None
    mappings = tuple(
        TaxonomyMapping(
            csv_column=m["csv_column"],
            taxonomy_type_id=m["taxonomy_type_id"],
            value_mapping=dict(m.get("value_mapping", {})),
        )
        for m in raw.get("taxonomy_mappings", [])
    )
    return ImportConfig(
        city_slug=raw["city_slug"],
        locale=raw.get("locale", "en"),
        taxonomy_mappings=mappings,
        skip_errors=raw.get("skip_errors", False),
        update_existing=raw.get("update_existing", False),
    )


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    db_raw = data.get("database", {})
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return AppConfig(
        parse=_parse_section(data.get("parse", {})),
        import_=_import_section(data.get("import")),
        database=db,
    )
