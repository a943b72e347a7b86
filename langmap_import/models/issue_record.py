from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .validation_issue import ValidationIssue

"""IssueRecord model for the JSON Lines issue log.

An IssueRecord is a ValidationIssue (or an import failure) stamped with the
source file and the time it was logged. row=-1 marks file-level problems where
no row applies.

The key set is fixed by langmap_import/config/schemas/issue_log_schema.json.
"""

__all__ = [
    "IssueRecord",
]


@dataclass(frozen=True)
class IssueRecord:
    """Structured issue record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: CSV filename being processed
        row: Row number (header = 1). -1 for file-level problems
        field: Offending field, "row" for unmappable rows, "file" for file-level
        severity: "error" or "warning"
        message: Human readable explanation
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    field: str
    severity: str
    message: str

    @staticmethod
    def create(file: str, row: int, field: str, severity: str, message: str) -> IssueRecord:
        """Create a new IssueRecord with the current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return IssueRecord(
            timestamp=ts,
            file=file,
            row=row,
            field=field,
            severity=severity,
            message=message,
        )

    @staticmethod
    def from_issue(file: str, issue: ValidationIssue) -> IssueRecord:
        return IssueRecord.create(
            file=file,
            row=issue.row_number,
            field=issue.field,
            severity=issue.severity.value,
            message=issue.message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON Lines entry (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
