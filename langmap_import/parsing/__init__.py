"""CSV tokenizing, row mapping, row validation and template generation."""

from .mapper import RowShapeError, is_taxonomy_column, parse_row
from .template import generate_csv_template
from .tokenizer import (
    DuplicateHeaderError,
    EmptyInputError,
    InvalidDelimiterError,
    parse_csv_content,
    parse_csv_line,
)
from .validator import validate_row

__all__ = [
    "DuplicateHeaderError",
    "EmptyInputError",
    "InvalidDelimiterError",
    "RowShapeError",
    "generate_csv_template",
    "is_taxonomy_column",
    "parse_csv_content",
    "parse_csv_line",
    "parse_row",
    "validate_row",
]
