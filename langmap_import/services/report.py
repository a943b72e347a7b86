from __future__ import annotations

from pathlib import Path

import pandas as pd

from ..models.parse_result import ParseResult

"""Tabular views of a ParseResult (pandas).

rows_to_frame backs the CLI preview (--inspect-data); issues_to_frame backs the
downloadable issue report (--report), one line per issue, sorted by row.
"""

__all__ = [
    "ISSUE_COLUMNS",
    "rows_to_frame",
    "issues_to_frame",
    "write_issue_report",
]

ISSUE_COLUMNS = ["row_number", "field", "severity", "message", "name"]


def rows_to_frame(result: ParseResult) -> pd.DataFrame:
    """One line per mapped row; taxonomy/custom values flattened into columns.

    A ``status`` column tells error / warning / ok rows apart.
    """
    records = []
    for row in result.rows:
        issues = result.issues_for(row.row_number)
        if any(i.is_error for i in issues):
            status = "error"
        elif issues:
            status = "warning"
        else:
            status = "ok"
        record = {
            "row_number": row.row_number,
            "status": status,
            "name": row.name,
            "endonym": row.endonym,
            "iso_639_3_code": row.iso_639_3_code,
            "language_family": row.language_family,
            "country_of_origin": row.country_of_origin,
        }
        record.update({f"taxonomy:{k}": v for k, v in row.taxonomies.items()})
        record.update({f"custom:{k}": v for k, v in row.custom_fields.items()})
        records.append(record)

    if not records:
        return pd.DataFrame(columns=["row_number", "status", "name"])
    return pd.DataFrame.from_records(records).set_index("row_number")


def issues_to_frame(result: ParseResult) -> pd.DataFrame:
    names = {row.row_number: row.name for row in result.rows}
    records = [
        {
            "row_number": issue.row_number,
            "field": issue.field,
            "severity": issue.severity.value,
            "message": issue.message,
            "name": names.get(issue.row_number),
        }
        for issue in result.errors
    ]
    frame = pd.DataFrame.from_records(records, columns=ISSUE_COLUMNS)
    # stable sort keeps the validator's field order within a row
    return frame.sort_values("row_number", kind="stable").reset_index(drop=True)


def write_issue_report(result: ParseResult, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    issues_to_frame(result).to_csv(path, index=False, encoding="utf-8")
    return path
