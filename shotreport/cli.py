"""Command-line interface for shotreport."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from . import __version__
from .config import ReportConfig, load_environment
from .core import generate_report
from .errors import ConfigError, ShotReportError
from .logging_utils import configure_logging
from .storage import ScreenshotRecord, SqliteRecordStore

LOGGER = logging.getLogger("shotreport.cli")


def _page_size(value: str) -> int:
    try:
        size = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid page size: {value!r}") from exc
    if size <= 0:
        raise argparse.ArgumentTypeError("Page size must be a positive integer")
    return size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shotreport",
        description="Build a paginated static HTML report from captured screenshot records.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--db", type=Path, help="Path to the record store (default: $SHOTREPORT_DB or screenshots.db)")
    parser.add_argument("--log-json", action="store_true", help="Emit structured JSON logs to the log file")
    parser.add_argument("--log-file", type=Path, help="Write logs to the specified path")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", help="Enable debug logging")
    verbosity.add_argument("--quiet", action="store_true", help="Reduce logging output")

    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="Generate an HTML report from the record store")
    generate.add_argument("-p", "--page-size", type=_page_size, help="Results per page (default: 40)")
    generate.add_argument(
        "-i",
        "--include-errors",
        action="store_true",
        default=None,
        help="Include non-2xx responses",
    )
    generate.add_argument("-o", "--output-dir", type=Path, help="Directory receiving page-N.html files (default: .)")

    importer = commands.add_parser("import", help="Add JSON-lines probe records to the record store")
    importer.add_argument("source", type=Path, help="File with one JSON record per line")
    return parser


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(list(argv) if argv is not None else None)


def configure_cli_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    configure_logging(level=level, json_logs=args.log_json, logfile=args.log_file)


def build_config(args: argparse.Namespace) -> ReportConfig:
    """Merge environment defaults with explicit command-line flags."""

    return ReportConfig.from_env(
        page_size=getattr(args, "page_size", None),
        include_errors=getattr(args, "include_errors", None),
        output_dir=getattr(args, "output_dir", None),
        db_path=args.db,
    )


def _read_jsonl(source: Path) -> list[tuple[str, ScreenshotRecord]]:
    items: list[tuple[str, ScreenshotRecord]] = []
    with source.open("rb") as handle:
        for line_number, raw in enumerate(handle, start=1):
            if not raw.strip():
                continue
            try:
                record = ScreenshotRecord.from_dict(json.loads(raw.decode("utf-8")))
            except ValueError as exc:
                raise ShotReportError(f"{source}:{line_number}: invalid record: {exc}") from exc
            if not record.url:
                raise ShotReportError(f"{source}:{line_number}: record has no URL")
            items.append((record.url, record))
    return items


def run_generate(config: ReportConfig) -> int:
    result = generate_report(SqliteRecordStore(config.db_path), config)
    if result.first_page is None:
        return 0
    LOGGER.info(
        "%d screenshot(s) on %d page(s), %d ignored; open %s",
        result.kept,
        len(result.pages),
        result.ignored,
        result.first_page,
    )
    return 0


def run_import(config: ReportConfig, source: Path) -> int:
    try:
        items = _read_jsonl(source)
    except OSError as exc:
        raise ShotReportError(f"Unable to read {source}: {exc}") from exc
    stored = SqliteRecordStore(config.db_path).put_many(items)
    LOGGER.info("Imported %d record(s) into %s", stored, config.db_path)
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    load_environment()
    args = parse_args(argv)

    configure_cli_logging(args)

    try:
        config = build_config(args)
        if args.command == "import":
            return run_import(config, args.source)
        return run_generate(config)
    except ConfigError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 1
    except ShotReportError as exc:
        LOGGER.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
