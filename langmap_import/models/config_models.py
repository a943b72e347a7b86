from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the language CSV import tool.

ParseConfig drives parse_language_csv, ImportConfig drives import_languages and
DatabaseConfig is the fallback for connection settings not given through the
environment. AppConfig bundles the three sections of config/import.yml.
"""

__all__ = [
    "DEFAULT_MAX_FILE_SIZE",
    "DEFAULT_MAX_ROWS",
    "ParseConfig",
    "TaxonomyMapping",
    "ImportConfig",
    "DatabaseConfig",
    "AppConfig",
]

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MiB
DEFAULT_MAX_ROWS = 10_000


@dataclass(frozen=True)
class ParseConfig:
    """Per-call parser configuration. All fields have defaults."""
    max_file_size: int = DEFAULT_MAX_FILE_SIZE  # bytes
    max_rows: int = DEFAULT_MAX_ROWS  # rows beyond the cap are dropped silently
    delimiter: str = ","
    required_columns: tuple[str, ...] = ("name",)
    # Explicit taxonomy columns; None falls back to the header heuristic
    taxonomy_columns: tuple[str, ...] | None = None


@dataclass(frozen=True)
class TaxonomyMapping:
    """Maps one CSV taxonomy column to a taxonomy type and its values."""
    csv_column: str
    taxonomy_type_id: str
    value_mapping: dict[str, str] = field(default_factory=dict)  # CSV value -> taxonomy_value id


@dataclass(frozen=True)
class ImportConfig:
    """Settings for persisting parsed rows to the database."""
    city_slug: str
    locale: str = "en"
    taxonomy_mappings: tuple[TaxonomyMapping, ...] = ()
    skip_errors: bool = False  # continue after a failed row
    update_existing: bool = False  # update languages with the same translated name


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection fallback.

    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object loaded from config/import.yml."""
    parse: ParseConfig = field(default_factory=ParseConfig)
    import_: ImportConfig | None = None  # "import" section, optional
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
