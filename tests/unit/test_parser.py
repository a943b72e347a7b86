from __future__ import annotations

import asyncio
import io
import logging

import pytest

from langmap_import.models.config_models import ParseConfig
from langmap_import.models.uploaded_file import CSVFile, UploadedFile
from langmap_import.models.validation_issue import Severity
from langmap_import.parsing.mapper import RowShapeError, parse_row
from langmap_import.services.parser import (
    CSVParseError,
    ParseErrorKind,
    parse_language_csv,
    parse_language_csv_sync,
)

HEADER = "name,endonym,iso_639_3_code,language_family,country_of_origin"


class _BrokenFile:
    name = "broken.csv"
    size = 10

    def read(self) -> bytes:
        raise OSError("disk went away")


class _ClosedHandleFile:
    """Upload whose underlying stream was closed before the read."""
    name = "closed.csv"
    size = 10

    def __init__(self) -> None:
        self._stream = io.BytesIO(b"name\nSpanish")
        self._stream.close()

    def read(self) -> bytes:
        return self._stream.read()


class _AbortedUpload:
    name = "aborted.csv"
    size = 10

    def read(self) -> bytes:
        raise RuntimeError("upload aborted by client")


class _NoReader:
    name = "languages.csv"
    size = 10


def _expect(kind: ParseErrorKind, file, config: ParseConfig | None = None) -> CSVParseError:
    with pytest.raises(CSVParseError) as ei:
        asyncio.run(parse_language_csv(file, config))
    assert ei.value.kind is kind
    assert str(ei.value) == f"Failed to parse CSV file: {ei.value.reason}"
    return ei.value


def test_happy_path(parse_text) -> None:
    content = f"{HEADER}\nSpanish,Español,spa,Indo-European,Spain\nFrench,Français,fra,Indo-European,France"
    result = parse_text(content)
    assert result.total_rows == 2
    assert result.valid_rows == 2
    assert result.errors == []
    assert [r.name for r in result.rows] == ["Spanish", "French"]
    assert [r.row_number for r in result.rows] == [2, 3]
    assert result.headers == HEADER.split(",")


def test_row_numbers_follow_file_lines(parse_text) -> None:
    result = parse_text("name\nA\nB\nC")
    assert [o.row_number for o in result.outcomes] == [2, 3, 4]
    assert len(result.outcomes) == result.total_rows


def test_quoted_fields(parse_text) -> None:
    content = 'name,endonym\n"Spanish, Castilian",Español\n"""Quoted Language""",Q'
    result = parse_text(content)
    assert [r.name for r in result.rows] == ["Spanish, Castilian", '"Quoted Language"']


def test_row_errors_do_not_abort(parse_text) -> None:
    result = parse_text(f"name,endonym\n,Español\n{'x' * 201},X\nFrench,Français")
    assert result.total_rows == 3
    assert result.valid_rows == 1
    assert result.error_count == 2
    assert {e.row_number for e in result.errors if e.is_error} == {2, 3}
    assert [r.name for r in result.valid_row_list()] == ["French"]


def test_warnings_keep_row_valid(parse_text) -> None:
    result = parse_text("name,iso_639_3_code\nSpanish,es\nFrench,fran\nDutch,nld")
    assert result.valid_rows == 3
    assert result.error_count == 0
    iso = [e for e in result.errors if e.field == "iso_639_3_code"]
    assert [e.row_number for e in iso] == [2, 3]
    assert all(e.severity is Severity.WARNING for e in iso)


def test_parse_is_idempotent(parse_text) -> None:
    content = f"{HEADER}\nSpanish,Español,es,,\n,Nameless,,,"
    assert parse_text(content) == parse_text(content)


def test_bom_and_crlf(parse_text) -> None:
    result = parse_text("\ufeffName,Endonym\r\nSpanish,Español\r\n")
    assert result.headers == ["name", "endonym"]
    assert result.rows[0].name == "Spanish"


def test_headers_only(parse_text) -> None:
    result = parse_text("name,endonym\n")
    assert result.total_rows == 0
    assert result.valid_rows == 0
    assert result.rows == []
    assert result.headers == ["name", "endonym"]


def test_accepts_bytes_content() -> None:
    file = UploadedFile(name="bytes.csv", content="name\nEspañol".encode("utf-8"))
    result = parse_language_csv_sync(file)
    assert result.rows[0].name == "Español"


def test_row_cap_truncates_and_logs(parse_text, caplog) -> None:
    content = "name\n" + "\n".join(f"Lang{i}" for i in range(15))
    caplog.set_level(logging.WARNING, logger="langmap_import")
    result = parse_text(content, config=ParseConfig(max_rows=10))
    assert result.total_rows == 10
    assert result.truncated_rows == 5
    assert len(result.rows) == 10
    assert result.rows[-1].name == "Lang9"
    assert "only 10 will be processed" in caplog.text


def test_missing_required_column() -> None:
    err = _expect(ParseErrorKind.MISSING_COLUMNS, UploadedFile("t.csv", "endonym\nEspañol"))
    assert str(err) == "Failed to parse CSV file: Missing required columns: name"
    assert err.details == {"columns": ["name"]}


def test_missing_columns_listed_in_config_order() -> None:
    cfg = ParseConfig(required_columns=("name", "iso_639_3_code", "endonym"))
    err = _expect(ParseErrorKind.MISSING_COLUMNS, UploadedFile("t.csv", "name\nSpanish"), cfg)
    assert err.reason == "Missing required columns: iso_639_3_code, endonym"


def test_oversized_file() -> None:
    content = "name\n" + "x" * 2048
    err = _expect(ParseErrorKind.FILE_TOO_LARGE, UploadedFile("big.csv", content), ParseConfig(max_file_size=1024))
    assert "exceeds maximum allowed size" in str(err)
    assert "(0.00MB)" in err.reason


def test_duplicate_headers() -> None:
    err = _expect(ParseErrorKind.DUPLICATE_HEADERS, UploadedFile("t.csv", "name,Name\nA,B"))
    assert "duplicate column headers" in str(err)


def test_empty_content_is_read_failure() -> None:
    err = _expect(ParseErrorKind.READ_FAILURE, UploadedFile("t.csv", ""))
    assert err.reason == "Failed to read file content: No data returned"


def test_blank_lines_only_is_empty_file() -> None:
    err = _expect(ParseErrorKind.EMPTY_FILE, UploadedFile("t.csv", "\n \r\n"))
    assert err.reason == "CSV file is empty"


def test_missing_file() -> None:
    err = _expect(ParseErrorKind.MISSING_FILE, None)
    assert err.reason == "No file provided for parsing"


def test_non_csv_extension() -> None:
    err = _expect(ParseErrorKind.INVALID_FILE_TYPE, UploadedFile("languages.txt", "name\nSpanish"))
    assert err.reason == "Invalid file type. Only CSV files are supported."


def test_invalid_file_object() -> None:
    err = _expect(ParseErrorKind.READ_FAILURE, _NoReader())
    assert err.reason == "Invalid file object provided"


def test_read_oserror_is_chained() -> None:
    err = _expect(ParseErrorKind.READ_FAILURE, _BrokenFile())
    assert err.reason.startswith("File reading failed:")
    assert isinstance(err.__cause__, OSError)


def test_read_on_closed_handle_is_read_failure() -> None:
    """A ValueError from read() is still a read failure, not an unexpected one."""
    err = _expect(ParseErrorKind.READ_FAILURE, _ClosedHandleFile())
    assert err.reason == "File reading failed: I/O operation on closed file."
    assert isinstance(err.__cause__, ValueError)


def test_aborted_read_is_read_failure() -> None:
    err = _expect(ParseErrorKind.READ_FAILURE, _AbortedUpload())
    assert err.reason == "File reading failed: upload aborted by client"
    assert isinstance(err.__cause__, RuntimeError)


def test_undecodable_bytes() -> None:
    err = _expect(ParseErrorKind.READ_FAILURE, UploadedFile("t.csv", b"name\n\xff\xfe\xfa"))
    assert err.reason.startswith("File reading failed:")


def test_invalid_delimiter() -> None:
    err = _expect(ParseErrorKind.INVALID_DELIMITER, UploadedFile("t.csv", "name\nA"), ParseConfig(delimiter=";;"))
    assert err.reason == "Delimiter must be a single character"


def test_custom_delimiter(parse_text) -> None:
    result = parse_text("name;endonym\nSpanish, Castilian;Español", config=ParseConfig(delimiter=";"))
    assert result.rows[0].name == "Spanish, Castilian"
    assert result.rows[0].endonym == "Español"


def test_taxonomy_allowlist_from_config(parse_text) -> None:
    cfg = ParseConfig(taxonomy_columns=("status",))
    result = parse_text("name,status,region\nFrisian,vulnerable,north", config=cfg)
    assert result.rows[0].taxonomies == {"status": "vulnerable"}
    assert result.rows[0].custom_fields == {"region": "north"}


def test_unexpected_errors_are_wrapped(monkeypatch) -> None:
    def _boom(*_a, **_kw):
        raise RuntimeError("validator exploded")

    monkeypatch.setattr("langmap_import.services.parser.validate_row", _boom)
    err = _expect(ParseErrorKind.UNEXPECTED, UploadedFile("t.csv", "name\nSpanish"))
    assert err.reason == "validator exploded"
    assert isinstance(err.__cause__, RuntimeError)


def test_unmappable_row_is_recorded_as_failed_outcome(monkeypatch) -> None:
    def _flaky(row, headers, row_number, taxonomy_columns=None):
        if row_number == 3:
            raise RowShapeError(f"Invalid row data at line {row_number}")
        return parse_row(row, headers, row_number, taxonomy_columns)

    monkeypatch.setattr("langmap_import.services.parser.parse_row", _flaky)
    result = parse_language_csv_sync(UploadedFile("t.csv", "name,endonym\nA,a\nB,b\nC,c"))
    assert result.total_rows == 3
    assert len(result.rows) == 2
    assert result.valid_rows == 2
    assert [o.ok for o in result.outcomes] == [True, False, True]
    assert result.failed_rows[0].failure == "Invalid row data at line 3"
    row_issues = result.issues_for(3)
    assert len(row_issues) == 1
    assert row_issues[0].field == "row"
    assert row_issues[0].is_error


class _StreamFile:
    """CSVFile backed by an open binary stream, as a web framework hands it over."""
    name = "languages.csv"

    def __init__(self, data: bytes) -> None:
        self._stream = io.BytesIO(data)
        self.size = len(data)

    def read(self) -> bytes:
        return self._stream.read()


def test_any_csv_file_shaped_object_is_parsed() -> None:
    """Only name, size and read() are needed; the dataclass wrappers are optional."""
    file: CSVFile = _StreamFile("name,endonym\nSpanish,Español\n".encode("utf-8"))
    result = parse_language_csv_sync(file)
    assert result.valid_rows == 1
    assert result.rows[0].endonym == "Español"
