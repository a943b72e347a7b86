"""Domain models for the language CSV import tool.

This package contains the dataclasses shared by the parser, the importer and
the CLI.
"""

from .config_models import AppConfig, DatabaseConfig, ImportConfig, ParseConfig, TaxonomyMapping
from .import_result import ImportResult, ImportSummary, TaxonomyTypeOption, TaxonomyValueOption
from .issue_record import IssueRecord
from .language_row import ParsedLanguageRow
from .parse_result import ParseResult, RowOutcome
from .uploaded_file import CSVFile, PathFile, UploadedFile
from .validation_issue import ROW_FIELD, Severity, ValidationIssue

__all__ = [
    # Configuration models
    "AppConfig",
    "DatabaseConfig",
    "ImportConfig",
    "ParseConfig",
    "TaxonomyMapping",
    # Parsing models
    "CSVFile",
    "PathFile",
    "UploadedFile",
    "ParsedLanguageRow",
    "ParseResult",
    "RowOutcome",
    "ROW_FIELD",
    "Severity",
    "ValidationIssue",
    "IssueRecord",
    # Import models
    "ImportResult",
    "ImportSummary",
    "TaxonomyTypeOption",
    "TaxonomyValueOption",
]
