from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

from ..models.config_models import ParseConfig
from ..models.language_row import ParsedLanguageRow
from ..models.parse_result import ParseResult, RowOutcome
from ..models.uploaded_file import CSVFile
from ..models.validation_issue import ROW_FIELD, Severity, ValidationIssue
from ..parsing.mapper import RowShapeError, parse_row
from ..parsing.tokenizer import (
    DuplicateHeaderError,
    EmptyInputError,
    InvalidDelimiterError,
    parse_csv_content,
)
from ..parsing.validator import validate_row

logger = logging.getLogger(__name__)

"""Parse orchestration for language CSV uploads.

This module drives the whole parse for one uploaded file:
1. File-level checks (presence, size, extension)
2. Read content off the event loop
3. Tokenize, check required columns, apply the row cap
4. Map + validate every row, collecting issues without aborting
5. Aggregate a ParseResult

File-level and header-level problems raise CSVParseError; row-level problems
end up in ParseResult.errors.
"""

__all__ = [
    "ParseErrorKind",
    "CSVParseError",
    "parse_language_csv",
    "parse_language_csv_sync",
]

_MIB = 1024 * 1024


class ParseErrorKind(Enum):
    """Classification of file-level parse failures."""
    MISSING_FILE = "missing_file"
    FILE_TOO_LARGE = "file_too_large"
    INVALID_FILE_TYPE = "invalid_file_type"
    READ_FAILURE = "read_failure"
    EMPTY_FILE = "empty_file"
    INVALID_DELIMITER = "invalid_delimiter"
    DUPLICATE_HEADERS = "duplicate_headers"
    MISSING_COLUMNS = "missing_columns"
    UNEXPECTED = "unexpected"


class CSVParseError(Exception):
    """File-level parse failure.

    ``str(error)`` is the display message ("Failed to parse CSV file: ...").
    ``reason`` is the unwrapped message, ``kind`` the ParseErrorKind and
    ``details`` any structured data (e.g. {"columns": [...]} for MISSING_COLUMNS).
    """

    def __init__(self, kind: ParseErrorKind, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Failed to parse CSV file: {reason}")
        self.kind = kind
        self.reason = reason
        self.details = details or {}


def _check_file(file: Any, config: ParseConfig) -> None:
    if file is None:
        raise CSVParseError(ParseErrorKind.MISSING_FILE, "No file provided for parsing")

    name = getattr(file, "name", None)
    size = getattr(file, "size", None)
    if not isinstance(name, str) or not isinstance(size, int):
        raise CSVParseError(ParseErrorKind.READ_FAILURE, "Invalid file object provided")

    if size > config.max_file_size:
        raise CSVParseError(
            ParseErrorKind.FILE_TOO_LARGE,
            f"File size ({size / _MIB:.2f}MB) exceeds maximum allowed size "
            f"({config.max_file_size / _MIB:.2f}MB)",
            {"size": size, "max_file_size": config.max_file_size},
        )

    if not name.endswith(".csv"):
        raise CSVParseError(
            ParseErrorKind.INVALID_FILE_TYPE,
            "Invalid file type. Only CSV files are supported.",
            {"name": name},
        )


async def _read_file_content(file: Any) -> str:
    """Read the whole file as UTF-8 text in a worker thread."""
    read = getattr(file, "read", None)
    if not callable(read):
        raise CSVParseError(ParseErrorKind.READ_FAILURE, "Invalid file object provided")

    try:
        data = await asyncio.to_thread(read)
    except Exception as e:
        # any error raised by read() is a read failure
        raise CSVParseError(ParseErrorKind.READ_FAILURE, f"File reading failed: {e}") from e

    if isinstance(data, (bytes, bytearray)):
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise CSVParseError(ParseErrorKind.READ_FAILURE, f"File reading failed: {e}") from e
    elif isinstance(data, str):
        text = data
    else:
        raise CSVParseError(
            ParseErrorKind.READ_FAILURE,
            f"Error processing file data: unsupported content type {type(data).__name__}",
        )

    if not text:
        raise CSVParseError(ParseErrorKind.READ_FAILURE, "Failed to read file content: No data returned")
    return text


def _tokenize(content: str, delimiter: str) -> tuple[list[str], list[list[str]]]:
    try:
        return parse_csv_content(content, delimiter)
    except InvalidDelimiterError as e:
        raise CSVParseError(ParseErrorKind.INVALID_DELIMITER, str(e)) from e
    except EmptyInputError as e:
        raise CSVParseError(ParseErrorKind.EMPTY_FILE, str(e)) from e
    except DuplicateHeaderError as e:
        raise CSVParseError(ParseErrorKind.DUPLICATE_HEADERS, str(e)) from e


def _process_rows(
    raw_rows: list[list[str]],
    headers: list[str],
    config: ParseConfig,
) -> tuple[list[ParsedLanguageRow], list[ValidationIssue], list[RowOutcome]]:
    rows: list[ParsedLanguageRow] = []
    errors: list[ValidationIssue] = []
    outcomes: list[RowOutcome] = []

    for index, raw in enumerate(raw_rows):
        row_number = index + 2  # header is row 1
        try:
            parsed = parse_row(raw, headers, row_number, config.taxonomy_columns)
        except RowShapeError as e:
            logger.warning(f"row {row_number}: could not be parsed: {e}")
            errors.append(ValidationIssue(
                row_number=row_number,
                field=ROW_FIELD,
                message=str(e),
                severity=Severity.ERROR,
            ))
            outcomes.append(RowOutcome(row_number=row_number, failure=str(e)))
            continue

        rows.append(parsed)
        errors.extend(validate_row(parsed))
        outcomes.append(RowOutcome(row_number=row_number, row=parsed))

    return rows, errors, outcomes


async def parse_language_csv(file: CSVFile | None, config: ParseConfig | None = None) -> ParseResult:
    """Parse and validate an uploaded language CSV.

    Args:
        file: Handle exposing ``name``, ``size`` and ``read()`` (see models.uploaded_file)
        config: Parser configuration (defaults: 5 MiB, 10,000 rows, ",", ["name"])

    Returns:
        ParseResult with mapped rows, issues and counts

    Raises:
        CSVParseError: For file-level and header-level problems
    """
    config = config or ParseConfig()
    try:
        _check_file(file, config)
        content = await _read_file_content(file)
        headers, raw_rows = _tokenize(content, config.delimiter)

        missing = [c for c in config.required_columns if c not in headers]
        if missing:
            raise CSVParseError(
                ParseErrorKind.MISSING_COLUMNS,
                f"Missing required columns: {', '.join(missing)}",
                {"columns": missing},
            )

        limited = raw_rows[:config.max_rows]
        truncated = len(raw_rows) - len(limited)
        if truncated:
            logger.warning(
                f"{file.name}: CSV contains {len(raw_rows)} rows, "
                f"but only {config.max_rows} will be processed"
            )

        rows, errors, outcomes = _process_rows(limited, headers, config)
    except CSVParseError:
        raise
    except Exception as e:
        raise CSVParseError(ParseErrorKind.UNEXPECTED, str(e) or type(e).__name__) from e

    error_rows = {e.row_number for e in errors if e.severity is Severity.ERROR}
    valid_rows = sum(1 for r in rows if r.row_number not in error_rows)

    logger.debug(
        f"{file.name}: parsed rows={len(limited)} valid={valid_rows} issues={len(errors)}"
    )
    return ParseResult(
        rows=rows,
        errors=errors,
        total_rows=len(limited),
        valid_rows=valid_rows,
        headers=headers,
        outcomes=outcomes,
        truncated_rows=truncated,
    )


def parse_language_csv_sync(file: CSVFile | None, config: ParseConfig | None = None) -> ParseResult:
    """Blocking wrapper around parse_language_csv for scripts and the CLI."""
    return asyncio.run(parse_language_csv(file, config))
