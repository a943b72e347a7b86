from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Row-level validation issues for the language CSV import.

Issues never abort a parse. ERROR issues exclude their row from the valid
count, WARNING issues do not.
"""

__all__ = [
    "Severity",
    "ValidationIssue",
    "ROW_FIELD",
]

# Field name used when the whole row could not be mapped
ROW_FIELD = "row"


class Severity(Enum):
    """Severity of a ValidationIssue.

    - ERROR: row is excluded from the import
    - WARNING: row is imported, the UI shows a caution badge
    """
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found for one row/field.

    Attributes:
        row_number: Row the issue concerns (same numbering as ParsedLanguageRow)
        field: Offending field ("name", "iso_639_3_code", "endonym" or "row")
        message: Human readable explanation
        severity: Severity.ERROR or Severity.WARNING
    """
    row_number: int
    field: str
    message: str
    severity: Severity

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "rowNumber": self.row_number,
            "field": self.field,
            "message": self.message,
            "severity": self.severity.value,
        }
