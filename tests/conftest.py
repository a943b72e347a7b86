# Shared pytest fixtures
from __future__ import annotations

import asyncio
import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from langmap_import.logging.init import LOGGER_NAME, reset_logging
from langmap_import.models.config_models import ParseConfig
from langmap_import.models.parse_result import ParseResult
from langmap_import.models.uploaded_file import UploadedFile
from langmap_import.services.parser import parse_language_csv


@pytest.fixture(autouse=True)
def _fresh_logger():
    """Undo setup_logging() so caplog sees records again after CLI tests."""
    reset_logging()
    yield
    reset_logging()
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """parse:
  max_rows: 500
  delimiter: ","
  required_columns: [name]
import:
  city_slug: amsterdam
  locale: nl
  skip_errors: true
  taxonomy_mappings:
    - csv_column: status
      taxonomy_type_id: tt-status
      value_mapping:
        endangered: tv-endangered
        stable: tv-stable
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: langmap
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_csv(temp_workdir: Path) -> Callable[..., Path]:
    def _write(content: str, name: str = "languages.csv") -> Path:
        p = temp_workdir / "data" / name
        p.write_bytes(content.encode("utf-8"))
        return p
    return _write


@pytest.fixture()
def parse_text() -> Callable[..., ParseResult]:
    """Parse in-memory CSV text through the public coroutine."""
    def _parse(content: str, name: str = "test.csv", config: ParseConfig | None = None) -> ParseResult:
        return asyncio.run(parse_language_csv(UploadedFile(name=name, content=content), config))
    return _parse
