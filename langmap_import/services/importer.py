from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import psycopg2

from ..db.batch_insert import BatchInsertError, batch_insert
from ..models.config_models import ImportConfig, TaxonomyMapping
from ..models.import_result import (
    ImportResult,
    ImportSummary,
    TaxonomyTypeOption,
    TaxonomyValueOption,
)
from ..models.language_row import ParsedLanguageRow
from .progress import ProgressTracker
from .sanitize import SanitizationError, sanitize_endonym, sanitize_iso_code, sanitize_language_name

logger = logging.getLogger(__name__)

"""Bulk import of parsed language rows into PostgreSQL.

The import runs in one transaction. Each row gets its own savepoint so a failed
row leaves no partial language behind; taxonomy assignments get a nested
savepoint because a failure there is logged but does not fail the row.

Without skip_errors the first failed row stops the import; rows written before
it are still committed.
"""

__all__ = [
    "LanguageImportError",
    "import_languages",
    "fetch_taxonomy_types",
]

_SQL_CITY_ID = "SELECT id FROM cities WHERE slug = %s"
_SQL_EXISTING = (
    "SELECT lt.language_id FROM language_translations lt "
    "JOIN languages l ON l.id = lt.language_id "
    "WHERE lt.name = %s AND lt.locale_code = %s AND l.city_id = %s"
)
_SQL_UPDATE_LANGUAGE = (
    "UPDATE languages SET endonym = %s, iso_639_3_code = %s, updated_at = now() WHERE id = %s"
)
_SQL_UPDATE_TRANSLATION = (
    "UPDATE language_translations SET name = %s, updated_at = now() "
    "WHERE language_id = %s AND locale_code = %s"
)
_SQL_INSERT_LANGUAGE = (
    "INSERT INTO languages (city_id, endonym, iso_639_3_code) VALUES (%s, %s, %s) RETURNING id"
)
_SQL_INSERT_TRANSLATION = (
    "INSERT INTO language_translations (language_id, locale_code, name) VALUES (%s, %s, %s)"
)
_SQL_DELETE_TAXONOMIES = "DELETE FROM language_taxonomies WHERE language_id = %s"
_SQL_TAXONOMY_TYPES = (
    "SELECT tt.id, tt.slug, COALESCE(ttt.name, tt.slug), "
    "tv.id, tv.slug, COALESCE(tvt.name, tv.slug) "
    "FROM taxonomy_types tt "
    "LEFT JOIN taxonomy_type_translations ttt "
    "ON ttt.taxonomy_type_id = tt.id AND ttt.locale_code = %s "
    "LEFT JOIN taxonomy_values tv ON tv.taxonomy_type_id = tt.id "
    "LEFT JOIN taxonomy_value_translations tvt "
    "ON tvt.taxonomy_value_id = tv.id AND tvt.locale_code = %s "
    "WHERE tt.city_id = %s "
    "ORDER BY tt.slug, tv.slug"
)

_ROW_SAVEPOINT = "language_row"
_TAXONOMY_SAVEPOINT = "language_taxonomies"


class LanguageImportError(Exception):
    """Raised when import prerequisites (city, taxonomy lookup) fail."""


def _find_city_id(cursor: Any, city_slug: str) -> Any | None:
    cursor.execute(_SQL_CITY_ID, (city_slug,))
    found = cursor.fetchone()
    return found[0] if found else None


def _replace_taxonomies(
    cursor: Any,
    language_id: Any,
    row: ParsedLanguageRow,
    mappings: Sequence[TaxonomyMapping],
) -> None:
    """Swap the language's taxonomy assignments for the ones in this row."""
    assignments: list[tuple[Any, str]] = []
    for mapping in mappings:
        column = mapping.csv_column.strip().lower()
        csv_value = row.taxonomies.get(column)
        if not csv_value:
            continue
        value_id = mapping.value_mapping.get(csv_value)
        if not value_id:
            logger.warning(
                f"row {row.row_number}: no mapping for value '{csv_value}' in column '{column}'"
            )
            continue
        assignments.append((language_id, value_id))

    cursor.execute(f"SAVEPOINT {_TAXONOMY_SAVEPOINT}")
    try:
        cursor.execute(_SQL_DELETE_TAXONOMIES, (language_id,))
        inserted = batch_insert(cursor, "language_taxonomies", ("language_id", "taxonomy_value_id"), assignments)
        cursor.execute(f"RELEASE SAVEPOINT {_TAXONOMY_SAVEPOINT}")
        logger.debug(f"row {row.row_number}: {inserted} taxonomy assignments for language {language_id}")
    except (psycopg2.Error, BatchInsertError) as e:
        cursor.execute(f"ROLLBACK TO SAVEPOINT {_TAXONOMY_SAVEPOINT}")
        logger.error(f"row {row.row_number}: failed to assign taxonomies for language {language_id}: {e}")


def _import_single_language(
    cursor: Any,
    row: ParsedLanguageRow,
    city_id: Any,
    config: ImportConfig,
) -> ImportResult:
    try:
        name = sanitize_language_name(row.name)
    except SanitizationError as e:
        return ImportResult(row_number=row.row_number, success=False, language_name=row.name, error=str(e))

    endonym = sanitize_endonym(row.endonym)
    iso_code = sanitize_iso_code(row.iso_639_3_code)

    cursor.execute(f"SAVEPOINT {_ROW_SAVEPOINT}")
    step = "look up language"
    try:
        cursor.execute(_SQL_EXISTING, (name, config.locale, city_id))
        existing = cursor.fetchone()

        if existing is not None:
            if not config.update_existing:
                cursor.execute(f"RELEASE SAVEPOINT {_ROW_SAVEPOINT}")
                return ImportResult(
                    row_number=row.row_number,
                    success=False,
                    language_name=row.name,
                    error=f'Language "{row.name}" already exists',
                )
            language_id = existing[0]
            step = "update language"
            cursor.execute(_SQL_UPDATE_LANGUAGE, (endonym, iso_code, language_id))
            step = "update translation"
            cursor.execute(_SQL_UPDATE_TRANSLATION, (name, language_id, config.locale))
        else:
            step = "create language"
            cursor.execute(_SQL_INSERT_LANGUAGE, (city_id, endonym, iso_code))
            inserted = cursor.fetchone()
            if inserted is None:
                raise psycopg2.DataError("no id returned")
            language_id = inserted[0]
            step = "create translation"
            cursor.execute(_SQL_INSERT_TRANSLATION, (language_id, config.locale, name))
    except psycopg2.Error as e:
        cursor.execute(f"ROLLBACK TO SAVEPOINT {_ROW_SAVEPOINT}")
        return ImportResult(
            row_number=row.row_number,
            success=False,
            language_name=name,
            error=f"Failed to {step}: {e}",
        )

    _replace_taxonomies(cursor, language_id, row, config.taxonomy_mappings)
    cursor.execute(f"RELEASE SAVEPOINT {_ROW_SAVEPOINT}")
    return ImportResult(
        row_number=row.row_number,
        success=True,
        language_name=name,
        language_id=str(language_id),
    )


def _all_failed(rows: Sequence[ParsedLanguageRow], error: str, row_error: str | None = None) -> ImportSummary:
    return ImportSummary(
        total=len(rows),
        successful=0,
        failed=len(rows),
        results=[
            ImportResult(row_number=r.row_number, success=False, language_name=r.name, error=row_error or error)
            for r in rows
        ],
        error=error,
    )


def import_languages(
    rows: Sequence[ParsedLanguageRow],
    config: ImportConfig,
    cursor: Any,
) -> ImportSummary:
    """Import parsed rows (usually ParseResult.valid_row_list()) for one city.

    Args:
        rows: Parsed language rows
        config: Import configuration (city, locale, mappings, policies)
        cursor: psycopg2 cursor on an autocommit connection

    Returns:
        ImportSummary; operation-level problems are reported in ``error``
    """
    if not rows:
        return ImportSummary(total=0, successful=0, failed=0, results=[], error="No rows provided for import")
    if not config.city_slug:
        return ImportSummary(total=0, successful=0, failed=0, results=[], error="City slug is required")

    try:
        city_id = _find_city_id(cursor, config.city_slug)
    except psycopg2.Error as e:
        logger.error(f"city lookup failed: {e}")
        return _all_failed(rows, str(e), "Bulk import failed")
    if city_id is None:
        return _all_failed(rows, f"City not found: {config.city_slug}")

    results: list[ImportResult] = []
    successful = 0
    failed = 0
    stop_error: str | None = None

    cursor.execute("BEGIN")
    try:
        with ProgressTracker(len(rows)) as progress:
            for row in rows:
                progress.start_row(row.row_number, row.name)
                result = _import_single_language(cursor, row, city_id, config)
                results.append(result)
                progress.finish_row(success=result.success)

                if result.success:
                    successful += 1
                else:
                    failed += 1
                    if not config.skip_errors:
                        logger.error(f"import failed at row {row.row_number}: {result.error}")
                        stop_error = f"Import stopped at row {row.row_number}: {result.error}"
                        break
                    logger.warning(f"row {row.row_number} skipped: {result.error}")
        cursor.execute("COMMIT")
    except psycopg2.Error as e:
        try:
            cursor.execute("ROLLBACK")
        except psycopg2.Error as rollback_e:
            logger.error(f"rollback failed: {rollback_e}")
        logger.error(f"bulk import failed: {e}")
        return _all_failed(rows, str(e), "Bulk import failed")

    logger.info(
        f"city={config.city_slug} locale={config.locale} imported={successful} failed={failed}"
    )
    return ImportSummary(
        total=len(rows),
        successful=successful,
        failed=failed,
        results=results,
        error=stop_error,
    )


def fetch_taxonomy_types(cursor: Any, city_slug: str, locale: str = "en") -> list[TaxonomyTypeOption]:
    """Taxonomy types (with values) of a city, for column mappings and templates.

    Names fall back to slugs when no translation exists for ``locale``.

    Raises:
        LanguageImportError: Missing slug, unknown city or query failure
    """
    if not city_slug:
        raise LanguageImportError("City slug is required")
    try:
        city_id = _find_city_id(cursor, city_slug)
        if city_id is None:
            raise LanguageImportError(f"City not found: {city_slug}")
        cursor.execute(_SQL_TAXONOMY_TYPES, (locale, locale, city_id))
        records = cursor.fetchall()
    except psycopg2.Error as e:
        raise LanguageImportError(f"Failed to fetch taxonomy types: {e}") from e

    types: dict[Any, TaxonomyTypeOption] = {}
    for type_id, type_slug, type_name, value_id, value_slug, value_name in records:
        option = types.get(type_id)
        if option is None:
            option = TaxonomyTypeOption(id=str(type_id), slug=type_slug, name=type_name or type_slug)
            types[type_id] = option
        if value_id is not None:
            option.values.append(
                TaxonomyValueOption(id=str(value_id), slug=value_slug, name=value_name or value_slug)
            )
    return list(types.values())
