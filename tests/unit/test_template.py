from __future__ import annotations

from langmap_import.parsing.template import generate_csv_template
from langmap_import.parsing.tokenizer import parse_csv_content


def test_template_without_taxonomies() -> None:
    assert generate_csv_template() == (
        "name,endonym,iso_639_3_code,language_family,country_of_origin\n"
        "Spanish,Español,spa,Indo-European,Spain"
    )


def test_template_with_taxonomies_adds_empty_cells() -> None:
    lines = generate_csv_template(["status", "region"]).split("\n")
    assert lines[0].endswith(",status,region")
    assert lines[1] == "Spanish,Español,spa,Indo-European,Spain,,"


def test_template_headers_survive_tokenizer() -> None:
    names = ["status", "region"]
    headers, rows = parse_csv_content(generate_csv_template(names))
    assert headers == ["name", "endonym", "iso_639_3_code", "language_family", "country_of_origin", *names]
    assert len(rows) == 1
    assert len(rows[0]) == len(headers)
