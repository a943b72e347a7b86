"""Language CSV import for city language maps.

Parse and validate operator uploads of language records, generate the matching
CSV template, and import valid rows into the language map database.
"""

from .models import ParseConfig, ParsedLanguageRow, ParseResult, Severity, UploadedFile, ValidationIssue
from .parsing.template import generate_csv_template
from .services.importer import import_languages
from .services.parser import CSVParseError, ParseErrorKind, parse_language_csv, parse_language_csv_sync

__version__ = "0.1.0"

__all__ = [
    "CSVParseError",
    "ParseConfig",
    "ParseErrorKind",
    "ParseResult",
    "ParsedLanguageRow",
    "Severity",
    "UploadedFile",
    "ValidationIssue",
    "generate_csv_template",
    "import_languages",
    "parse_language_csv",
    "parse_language_csv_sync",
]
