from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

import psycopg2

from langmap_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from langmap_import.db.connection import db_cursor, load_env_file
from langmap_import.logging.init import enable_debug, log_summary, setup_logging
from langmap_import.logging.issue_log import IssueLogBuffer
from langmap_import.models.config_models import AppConfig, ImportConfig
from langmap_import.models.issue_record import IssueRecord
from langmap_import.models.language_row import ParsedLanguageRow
from langmap_import.models.uploaded_file import PathFile
from langmap_import.parsing.template import generate_csv_template
from langmap_import.services.importer import LanguageImportError, fetch_taxonomy_types, import_languages
from langmap_import.services.parser import CSVParseError, parse_language_csv_sync
from langmap_import.services.report import rows_to_frame, write_issue_report
from langmap_import.services.summary import render_import_summary_line, render_summary_line

"""CLI entrypoint.

Flow:
- Load .env and config/import.yml (optional unless --config is given)
- --template / --template-city: print a CSV template and exit
- Otherwise parse FILE, write the issue log / report, print the SUMMARY line
- --import: persist the valid rows for a city
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_ROW_ERRORS = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="langmap-import", description="Language CSV import for city language maps"
    )
    p.add_argument("csv_file", nargs="?", help="CSV file to parse")
    p.add_argument("--config", help=f"Config file (default: {DEFAULT_CONFIG_PATH}, optional)")
    p.add_argument(
        "--template", nargs="*", metavar="TAXONOMY",
        help="Print a CSV template with the given taxonomy columns and exit",
    )
    p.add_argument("--template-city", metavar="SLUG", help="Add the city's taxonomy types to the template")
    p.add_argument("--inspect-data", action="store_true", help="Print a preview of the parsed rows")
    p.add_argument("--report", metavar="PATH", help="Write the issue report as CSV")
    p.add_argument("--import", dest="do_import", action="store_true", help="Import valid rows")
    p.add_argument("--city", help="City slug for --import (overrides config)")
    p.add_argument("--locale", choices=["en", "nl", "fr"], help="Translation locale (overrides config)")
    p.add_argument("--skip-errors", action="store_true", help="Continue after a failed row")
    p.add_argument("--update-existing", action="store_true", help="Update languages that already exist")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _load_app_config(args: argparse.Namespace) -> AppConfig:
    if args.config:
        return load_config(Path(args.config))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return AppConfig()


def _resolve_import_config(cfg: AppConfig, args: argparse.Namespace) -> ImportConfig | None:
    base = cfg.import_
    city = args.city or (base.city_slug if base else None)
    if not city:
        return None
    if base is None:
        base = ImportConfig(city_slug=city)
    overrides: dict[str, object] = {"city_slug": city}
    if args.locale:
        overrides["locale"] = args.locale
    if args.skip_errors:
        overrides["skip_errors"] = True
    if args.update_existing:
        overrides["update_existing"] = True
    return dataclasses.replace(base, **overrides)


def _print_template(cfg: AppConfig, args: argparse.Namespace) -> int:
    logger = setup_logging()
    names = list(args.template or [])
    if args.template_city:
        locale = args.locale or (cfg.import_.locale if cfg.import_ else "en")
        try:
            with db_cursor(cfg.database) as cur:
                types = fetch_taxonomy_types(cur, args.template_city, locale)
        except (LanguageImportError, psycopg2.Error) as e:
            logger.error(f"template: {e}")
            return EXIT_FATAL
        names.extend(t.slug for t in types if t.slug not in names)
    print(generate_csv_template(names))
    return EXIT_SUCCESS


def _run_import(
    result_rows: list[ParsedLanguageRow],
    import_cfg: ImportConfig,
    cfg: AppConfig,
    file_name: str,
    issue_log: IssueLogBuffer,
) -> int:
    logger = setup_logging()
    try:
        with db_cursor(cfg.database) as cur:
            summary = import_languages(result_rows, import_cfg, cur)
    except psycopg2.Error as e:
        logger.error(f"database: {e}")
        return EXIT_FATAL

    for r in summary.results:
        if not r.success:
            issue_log.append(IssueRecord.create(file_name, r.row_number, "import", "error", r.error or ""))
    issue_log.flush()

    log_summary(render_import_summary_line(import_cfg.city_slug, summary).removeprefix("SUMMARY "))
    if summary.error:
        logger.error(f"import: {summary.error}")
        return EXIT_ROW_ERRORS
    return EXIT_ROW_ERRORS if summary.failed else EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None -> read process args; [] stays empty (tests call main([]))
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        enable_debug()

    # .env wins over the existing environment (DB connection parameters)
    load_env_file(Path(".env"), override=True)
    try:
        cfg = _load_app_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.template is not None or args.template_city:
        return _print_template(cfg, args)

    if not args.csv_file:
        logger.error("no CSV file given")
        return EXIT_FATAL
    path = Path(args.csv_file)
    if not path.is_file():
        logger.error(f"file not found: {path}")
        return EXIT_FATAL

    import_cfg = None
    if args.do_import:
        import_cfg = _resolve_import_config(cfg, args)
        if import_cfg is None:
            logger.error("--import needs a city (--city or import.city_slug in config)")
            return EXIT_FATAL

    issue_log = IssueLogBuffer()
    file = PathFile.from_path(path)
    logger.info(f"Parsing: {path}")
    try:
        result = parse_language_csv_sync(file, cfg.parse)
    except CSVParseError as e:
        logger.error(str(e))
        issue_log.append(IssueRecord.create(file.name, -1, "file", "error", e.reason))
        issue_log.flush()
        return EXIT_FATAL

    logger.info(f"headers: {', '.join(result.headers)}")
    for issue in result.errors:
        logger.debug(f"row {issue.row_number} {issue.field} [{issue.severity.value}]: {issue.message}")

    issue_log.extend_issues(file.name, result.errors)
    log_path = issue_log.flush()
    if log_path is not None:
        logger.info(f"issue log: {log_path}")

    if args.report:
        report_path = write_issue_report(result, Path(args.report))
        logger.info(f"issue report: {report_path}")

    if args.inspect_data:
        print(rows_to_frame(result).head(10).to_string())

    log_summary(render_summary_line(file.name, result).removeprefix("SUMMARY "))

    if import_cfg is not None:
        rows = result.valid_row_list()
        if not rows:
            logger.error("import: no valid rows to import")
            return EXIT_ROW_ERRORS
        return _run_import(rows, import_cfg, cfg, file.name, issue_log)

    return EXIT_ROW_ERRORS if result.error_count else EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
