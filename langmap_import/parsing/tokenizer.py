from __future__ import annotations

import re

"""CSV tokenizer for language import files.

Splits raw text into a normalized header row and data rows. Quoting follows
RFC 4180 within a single line: a doubled quote inside a quoted field is a
literal quote, and the delimiter is literal while quoted. Records spanning
several lines are not supported; every non-blank line is one record.
"""

__all__ = [
    "EmptyInputError",
    "InvalidDelimiterError",
    "DuplicateHeaderError",
    "parse_csv_content",
    "parse_csv_line",
]

BOM = "\ufeff"
_LINE_SPLIT = re.compile(r"\r?\n")


class EmptyInputError(ValueError):
    """Raised when content is empty or has no non-blank line."""

class InvalidDelimiterError(EmptyInputError):
    """Raised when the delimiter is not exactly one character."""

class DuplicateHeaderError(ValueError):
    """Raised when two headers normalize to the same name."""


def parse_csv_content(content: str, delimiter: str = ",") -> tuple[list[str], list[list[str]]]:
    """Parse CSV text into (headers, rows).

    Steps:
    1. Validate content and delimiter
    2. Split on LF / CRLF and drop lines that are blank after strip()
    3. First remaining line -> headers (BOM stripped, trimmed, lowercased)
    4. Remaining lines -> rows of raw (untrimmed) cells
    """
    if not isinstance(content, str) or not content:
        raise EmptyInputError("CSV content must be a non-empty string")
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        raise InvalidDelimiterError("Delimiter must be a single character")

    lines = [line for line in _LINE_SPLIT.split(content) if line.replace(BOM, "").strip()]
    if not lines:
        raise EmptyInputError("CSV file is empty")

    raw_headers = parse_csv_line(lines[0], delimiter)
    if raw_headers[0].startswith(BOM):
        raw_headers[0] = raw_headers[0][len(BOM):]
    headers = [h.strip().lower() for h in raw_headers]

    if len(set(headers)) != len(headers):
        raise DuplicateHeaderError("CSV file contains duplicate column headers")

    rows = [parse_csv_line(line, delimiter) for line in lines[1:]]
    return headers, rows


def parse_csv_line(line: str, delimiter: str = ",") -> list[str]:
    """Split one line into cells, honoring double-quote quoting."""
    cells: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    length = len(line)
    while i < length:
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < length and line[i + 1] == '"':
                # escaped quote
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            cells.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    cells.append("".join(current))
    return cells
