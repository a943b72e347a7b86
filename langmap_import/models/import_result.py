from __future__ import annotations

from dataclasses import dataclass, field

"""Result models for persisting parsed language rows.

Phase: import (after parse). One ImportResult per attempted row; ImportSummary
aggregates them. ``error`` on the summary is set when the whole operation
stopped or could not start.
"""

__all__ = [
    "ImportResult",
    "ImportSummary",
    "TaxonomyValueOption",
    "TaxonomyTypeOption",
]


@dataclass(frozen=True)
class ImportResult:
    row_number: int  # CSV row number
    success: bool
    language_name: str  # sanitized name when available
    language_id: str | None = None  # set on success
    error: str | None = None  # set on failure


@dataclass(frozen=True)
class ImportSummary:
    total: int  # rows handed to the importer
    successful: int
    failed: int
    results: list[ImportResult] = field(default_factory=list)
    error: str | None = None  # operation-level failure


@dataclass(frozen=True)
class TaxonomyValueOption:
    id: str
    slug: str
    name: str


@dataclass(frozen=True)
class TaxonomyTypeOption:
    """A city's taxonomy type with its values, for building column mappings."""
    id: str
    slug: str
    name: str
    values: list[TaxonomyValueOption] = field(default_factory=list)
