from __future__ import annotations

from collections.abc import Sequence

from ..schema import STANDARD_COLUMNS, TEMPLATE_SAMPLE

"""Downloadable CSV template (served as text/csv)."""

__all__ = [
    "generate_csv_template",
]


def generate_csv_template(taxonomy_type_names: Sequence[str] = ()) -> str:
    """Build a two-line CSV: headers and one example row.

    Taxonomy columns follow the standard columns and are left empty in the
    example row. No quoting is applied.
    """
    names = list(taxonomy_type_names)
    header_row = ",".join([*STANDARD_COLUMNS, *names])
    example_row = ",".join([*(TEMPLATE_SAMPLE[c] for c in STANDARD_COLUMNS), *("" for _ in names)])
    return f"{header_row}\n{example_row}"
