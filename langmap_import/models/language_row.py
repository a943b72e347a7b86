from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""ParsedLanguageRow model for the language CSV import.

A ParsedLanguageRow is one CSV data line after header mapping and before
persistence. Row numbers follow the file: the header is row 1, so the first
data line is row 2.
"""

__all__ = [
    "ParsedLanguageRow",
]


@dataclass(frozen=True)
class ParsedLanguageRow:
    """Logical representation of a single language record read from CSV.

    Optional fields are ``None`` when the cell is missing or blank; ``name`` is
    always a string (possibly empty, which the validator reports as an error).
    """
    row_number: int  # 1-based file line (header = 1)
    name: str  # display name, translated per locale downstream
    endonym: str | None = None  # self-designation, not translated
    iso_639_3_code: str | None = None  # stored as given, format only warned
    language_family: str | None = None
    country_of_origin: str | None = None
    taxonomies: dict[str, str] = field(default_factory=dict)  # header -> value
    custom_fields: dict[str, str] = field(default_factory=dict)  # header -> value

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase row number used by the upload UI."""
        return {
            "rowNumber": self.row_number,
            "name": self.name,
            "endonym": self.endonym,
            "iso_639_3_code": self.iso_639_3_code,
            "language_family": self.language_family,
            "country_of_origin": self.country_of_origin,
            "taxonomies": dict(self.taxonomies),
            "custom_fields": dict(self.custom_fields),
        }
