from __future__ import annotations

import psycopg2
import pytest

import langmap_import.db.batch_insert as bi
from langmap_import.db.batch_insert import BatchInsertError, batch_insert


class DummyCursor:
    def __init__(self) -> None:
        self.queries: list[str] = []
        self.rows: list[list] = []
        self.page_size: int | None = None


# execute_values needs a real connection; record the call instead
@pytest.fixture(autouse=True)
def patch_execute_values(monkeypatch):
    def fake_execute_values(cursor, sql, rows, page_size=1000):
        cursor.queries.append(sql)
        cursor.rows = list(rows)
        cursor.page_size = page_size
    monkeypatch.setattr(bi, "execute_values", fake_execute_values)
    return fake_execute_values


def test_batch_insert_basic() -> None:
    """Quoted column list, one VALUES placeholder, row count returned."""
    cur = DummyCursor()
    inserted = batch_insert(
        cur, "language_taxonomies", ["language_id", "taxonomy_value_id"], [("lang-1", "tv-1"), ("lang-1", "tv-2")]
    )
    assert inserted == 2
    assert cur.queries == ['INSERT INTO language_taxonomies ("language_id","taxonomy_value_id") VALUES %s']
    assert cur.rows == [("lang-1", "tv-1"), ("lang-1", "tv-2")]
    assert cur.page_size == 1000


def test_batch_insert_page_size_and_generator_rows() -> None:
    cur = DummyCursor()
    inserted = batch_insert(cur, "language_taxonomies", ["language_id"], ((f"lang-{i}",) for i in range(3)), page_size=2)
    assert inserted == 3
    assert cur.page_size == 2


def test_batch_insert_empty_rows_skips_statement() -> None:
    cur = DummyCursor()
    assert batch_insert(cur, "language_taxonomies", ["language_id"], []) == 0
    assert cur.queries == []


def test_batch_insert_wraps_driver_errors(monkeypatch) -> None:
    def failing(cursor, sql, rows, page_size=1000):
        raise psycopg2.IntegrityError("duplicate key value")

    monkeypatch.setattr(bi, "execute_values", failing)
    with pytest.raises(BatchInsertError, match="duplicate key value") as ei:
        batch_insert(DummyCursor(), "t", ["c"], [[1]])
    assert isinstance(ei.value.__cause__, psycopg2.IntegrityError)
