from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .language_row import ParsedLanguageRow
from .validation_issue import Severity, ValidationIssue

"""Parse result models for the language CSV import.

ParseResult is the single return value of parse_language_csv. RowOutcome keeps
rows that could not be mapped visible: ``outcomes`` is aligned one-to-one with
the processed data lines, while ``rows`` only holds mapped rows.
"""

__all__ = [
    "RowOutcome",
    "ParseResult",
]


@dataclass(frozen=True)
class RowOutcome:
    """Mapping outcome of one processed data line."""
    row_number: int
    row: ParsedLanguageRow | None = None  # None when mapping failed
    failure: str | None = None  # mapping failure message

    @property
    def ok(self) -> bool:
        return self.row is not None


@dataclass(frozen=True)
class ParseResult:
    """Aggregated output of one CSV parse.

    Invariant: ``valid_rows <= total_rows == len(outcomes)`` and
    ``len(rows) <= total_rows``.
    """
    rows: list[ParsedLanguageRow]  # mapped rows, including rows with errors
    errors: list[ValidationIssue]  # all issues in processing order
    total_rows: int  # data lines processed after the max_rows cap
    valid_rows: int  # mapped rows without ERROR issues
    headers: list[str]  # normalized headers in file order
    outcomes: list[RowOutcome] = field(default_factory=list)
    truncated_rows: int = 0  # data lines dropped by max_rows (not an issue)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self.errors if e.severity is Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self.errors if e.severity is Severity.WARNING)

    @property
    def failed_rows(self) -> list[RowOutcome]:
        """Outcomes for lines that could not be mapped at all."""
        return [o for o in self.outcomes if not o.ok]

    def issues_for(self, row_number: int) -> list[ValidationIssue]:
        return [e for e in self.errors if e.row_number == row_number]

    def valid_row_list(self) -> list[ParsedLanguageRow]:
        """Rows without ERROR issues, in file order (input for the importer)."""
        error_rows = {e.row_number for e in self.errors if e.severity is Severity.ERROR}
        return [r for r in self.rows if r.row_number not in error_rows]

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows": [r.to_dict() for r in self.rows],
            "errors": [e.to_dict() for e in self.errors],
            "totalRows": self.total_rows,
            "validRows": self.valid_rows,
            "headers": list(self.headers),
        }
