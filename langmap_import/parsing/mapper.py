from __future__ import annotations

from collections.abc import Collection, Sequence

from ..models.language_row import ParsedLanguageRow
from ..schema import COLUMN_ALIASES, STANDARD_FIELDS, TAXONOMY_HEADER_MAX_LENGTH

"""Row mapper: tokenized cells -> ParsedLanguageRow.

Standard columns (and their aliases) fill the typed fields. Every other column
with a non-empty value lands in ``taxonomies`` or ``custom_fields`` depending on
is_taxonomy_column().
"""

__all__ = [
    "RowShapeError",
    "is_taxonomy_column",
    "parse_row",
]


class RowShapeError(ValueError):
    """Raised when row, headers or row number are structurally invalid."""


def is_taxonomy_column(header: str, allowlist: Collection[str] | None = None) -> bool:
    """Decide whether a non-standard column holds taxonomy values.

    With an allowlist the decision is plain membership. Without one, headers
    containing "_" or shorter than 20 characters count as taxonomy columns.
    """
    if allowlist is not None:
        return header in {a.strip().lower() for a in allowlist}
    return "_" in header or len(header) < TAXONOMY_HEADER_MAX_LENGTH


def _field(data: dict[str, str], column: str) -> str | None:
    value = data.get(column, "")
    alias = COLUMN_ALIASES.get(column)
    if not value and alias:
        value = data.get(alias, "")
    return value or None


def parse_row(
    row: Sequence[str],
    headers: Sequence[str],
    row_number: int,
    taxonomy_columns: Collection[str] | None = None,
) -> ParsedLanguageRow:
    """Map one tokenized row onto the language fields.

    Parameters
    ----------
    row: raw cells; missing trailing cells read as "", extra cells are ignored
    headers: normalized headers (see parse_csv_content)
    row_number: 1-based file line of this row
    taxonomy_columns: optional explicit taxonomy headers (see is_taxonomy_column)
    """
    if not isinstance(row, (list, tuple)):
        raise RowShapeError(f"Invalid row data at line {row_number}")
    if not isinstance(headers, (list, tuple)) or not headers:
        raise RowShapeError("Headers array is required and must not be empty")
    if isinstance(row_number, bool) or not isinstance(row_number, int) or row_number < 1:
        raise RowShapeError("Row number must be a positive number")

    data: dict[str, str] = {}
    for index, header in enumerate(headers):
        cell = row[index] if index < len(row) else ""
        data[header] = (cell or "").strip()

    taxonomies: dict[str, str] = {}
    custom_fields: dict[str, str] = {}
    for header in headers:
        value = data[header]
        if header in STANDARD_FIELDS or not value:
            continue
        if is_taxonomy_column(header, taxonomy_columns):
            taxonomies[header] = value
        else:
            custom_fields[header] = value

    return ParsedLanguageRow(
        row_number=row_number,
        name=data.get("name", ""),
        endonym=_field(data, "endonym"),
        iso_639_3_code=_field(data, "iso_639_3_code"),
        language_family=_field(data, "language_family"),
        country_of_origin=_field(data, "country_of_origin"),
        taxonomies=taxonomies,
        custom_fields=custom_fields,
    )
