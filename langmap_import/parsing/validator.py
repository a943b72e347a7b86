from __future__ import annotations

import re

from ..models.language_row import ParsedLanguageRow
from ..models.validation_issue import Severity, ValidationIssue
from ..schema import MAX_LANGUAGE_NAME_LENGTH

"""Per-row validation rules for parsed language rows."""

__all__ = [
    "validate_row",
]

_ISO_639_3 = re.compile(r"[a-zA-Z]{3}")


def validate_row(row: ParsedLanguageRow) -> list[ValidationIssue]:
    """Return the issues for one row. Never raises.

    Rule order: name required, name length, ISO code format, endonym presence.
    """
    issues: list[ValidationIssue] = []

    if not row.name or not row.name.strip():
        issues.append(ValidationIssue(
            row_number=row.row_number,
            field="name",
            message="Language name is required",
            severity=Severity.ERROR,
        ))

    if row.name and len(row.name) > MAX_LANGUAGE_NAME_LENGTH:
        issues.append(ValidationIssue(
            row_number=row.row_number,
            field="name",
            message=f"Language name exceeds maximum length ({MAX_LANGUAGE_NAME_LENGTH} characters)",
            severity=Severity.ERROR,
        ))

    if row.iso_639_3_code and not _ISO_639_3.fullmatch(row.iso_639_3_code):
        issues.append(ValidationIssue(
            row_number=row.row_number,
            field="iso_639_3_code",
            message="ISO 639-3 code must be exactly 3 letters",
            severity=Severity.WARNING,
        ))

    if not row.endonym:
        issues.append(ValidationIssue(
            row_number=row.row_number,
            field="endonym",
            message="Endonym is recommended but not required",
            severity=Severity.WARNING,
        ))

    return issues
