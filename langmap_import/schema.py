from __future__ import annotations

"""Column schema shared by the CSV parser and the template generator.

Keeping the standard columns, their aliases and the template sample row in one
place lets ``parse_row`` and ``generate_csv_template`` agree on the file shape.
"""

__all__ = [
    "MAX_LANGUAGE_NAME_LENGTH",
    "STANDARD_COLUMNS",
    "COLUMN_ALIASES",
    "STANDARD_FIELDS",
    "TEMPLATE_SAMPLE",
    "TAXONOMY_HEADER_MAX_LENGTH",
]

MAX_LANGUAGE_NAME_LENGTH = 200

# Canonical column order, as written by the template.
STANDARD_COLUMNS: tuple[str, ...] = (
    "name",
    "endonym",
    "iso_639_3_code",
    "language_family",
    "country_of_origin",
)

# Canonical column -> accepted alternative header
COLUMN_ALIASES: dict[str, str] = {
    "iso_639_3_code": "iso_code",
    "language_family": "family",
    "country_of_origin": "country",
}

# Headers never routed into taxonomies/custom_fields
STANDARD_FIELDS: frozenset[str] = frozenset(STANDARD_COLUMNS) | frozenset(COLUMN_ALIASES.values())

# Example row for the template, aligned with STANDARD_COLUMNS
TEMPLATE_SAMPLE: dict[str, str] = {
    "name": "Spanish",
    "endonym": "Español",
    "iso_639_3_code": "spa",
    "language_family": "Indo-European",
    "country_of_origin": "Spain",
}

# Headers shorter than this (or containing "_") are treated as taxonomy columns
TAXONOMY_HEADER_MAX_LENGTH = 20
