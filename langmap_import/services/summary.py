from __future__ import annotations

from ..models.import_result import ImportSummary
from ..models.parse_result import ParseResult

"""SUMMARY line rendering for parse and import runs.

Formats:
    SUMMARY file={name} rows={total} valid={valid} errors={errors} warnings={warnings} unparsed={failed} truncated={truncated}
    SUMMARY city={slug} total={total} imported={ok} failed={failed} stopped={yes|no}
"""


def render_summary_line(file_name: str, result: ParseResult) -> str:
    """Render the SUMMARY line for one parsed file.

    Examples:
        >>> from langmap_import.models.parse_result import ParseResult
        >>> result = ParseResult(rows=[], errors=[], total_rows=0, valid_rows=0, headers=["name"])
        >>> render_summary_line("langs.csv", result)
        'SUMMARY file=langs.csv rows=0 valid=0 errors=0 warnings=0 unparsed=0 truncated=0'
    """
    return (
        f"SUMMARY file={file_name} "
        f"rows={result.total_rows} "
        f"valid={result.valid_rows} "
        f"errors={result.error_count} "
        f"warnings={result.warning_count} "
        f"unparsed={len(result.failed_rows)} "
        f"truncated={result.truncated_rows}"
    )


def render_import_summary_line(city_slug: str, summary: ImportSummary) -> str:
    return (
        f"SUMMARY city={city_slug} "
        f"total={summary.total} "
        f"imported={summary.successful} "
        f"failed={summary.failed} "
        f"stopped={'yes' if summary.error else 'no'}"
    )
