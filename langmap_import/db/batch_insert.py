from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import psycopg2
from psycopg2.extras import execute_values

"""Batched INSERT helper built on psycopg2.extras.execute_values.

Used for link-table writes (language_taxonomies) where one statement carries
many rows. Table and column names come from code, never from CSV input.
"""

__all__ = [
    "BatchInsertError",
    "batch_insert",
]


class BatchInsertError(Exception):
    pass


def batch_insert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    page_size: int = 1000,
) -> int:
    """Perform a batched INSERT and return the number of rows sent.

    Parameters
    ----------
    cursor: psycopg2 cursor
    table: target table (trusted identifier)
    columns: insert columns
    rows: row sequences aligned with ``columns``
    page_size: execute_values page size
    """
    rows_list = list(rows)
    if not rows_list:
        return 0

    cols_sql = ",".join(f'"{c}"' for c in columns)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"

    try:
        execute_values(cursor, sql, rows_list, page_size=page_size)
    except psycopg2.Error as e:
        raise BatchInsertError(str(e)) from e

    return len(rows_list)
