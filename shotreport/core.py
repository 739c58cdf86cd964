"""High-level orchestration of screenshot report generation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .config import ReportConfig
from .loader import PLACEHOLDER_IMAGE, load_records
from .paging import paginate
from .reporters import write_pages
from .storage import RecordStore, ScreenshotRecord

LOGGER = logging.getLogger(__name__)

SUCCESS_RANGE = range(200, 300)


@dataclass(frozen=True)
class FilterResult:
    kept: list[ScreenshotRecord]
    ignored: int


@dataclass(frozen=True)
class ReportResult:
    pages: list[Path] = field(default_factory=list)
    kept: int = 0
    ignored: int = 0
    candidates: int = 0

    @property
    def first_page(self) -> Path | None:
        return self.pages[0] if self.pages else None


def is_success(record: ScreenshotRecord) -> bool:
    return record.response_code in SUCCESS_RANGE


def filter_records(records: Sequence[ScreenshotRecord], *, include_errors: bool) -> FilterResult:
    """Keep 2xx responses, or everything when ``include_errors`` is set."""

    if include_errors:
        return FilterResult(kept=list(records), ignored=0)

    kept: list[ScreenshotRecord] = []
    ignored = 0
    for record in records:
        if is_success(record):
            kept.append(record)
        else:
            ignored += 1
    return FilterResult(kept=kept, ignored=ignored)


def untitled_boundary(records: Sequence[ScreenshotRecord]) -> int:
    """Return the end of the leading run of untitled records.

    When no record has a title the whole list is the untitled run.
    """

    for index, record in enumerate(records):
        if record.page_title != "":
            return index
    return len(records)


def sort_records(records: Sequence[ScreenshotRecord]) -> list[ScreenshotRecord]:
    """Order by title, then untitled records by their ``Server`` header.

    Both comparisons are case-insensitive and stable.
    """

    ordered = sorted(records, key=lambda record: record.page_title.lower())
    boundary = untitled_boundary(ordered)
    ordered[:boundary] = sorted(
        ordered[:boundary],
        key=lambda record: record.server_header().lower(),
    )
    return ordered


def generate_report(
    store: RecordStore,
    config: ReportConfig,
    *,
    placeholder: str = PLACEHOLDER_IMAGE,
) -> ReportResult:
    """Load, filter, sort and paginate ``store`` and write the HTML pages."""

    records = load_records(store, placeholder=placeholder)
    filtered = filter_records(records, include_errors=config.include_errors)

    if not filtered.kept:
        LOGGER.error(
            "No screenshot entries exist to create a report (%d candidate(s), %d ignored)",
            len(records),
            filtered.ignored,
        )
        return ReportResult(kept=0, ignored=filtered.ignored, candidates=len(records))

    ordered = sort_records(filtered.kept)
    pages = paginate(ordered, config.page_size)
    LOGGER.debug(
        "Paginated %d record(s) into %d page(s) of up to %d",
        len(ordered),
        len(pages),
        config.page_size,
    )

    written = write_pages(
        pages,
        config,
        total=len(ordered),
        ignored=filtered.ignored,
        placeholder=placeholder,
    )
    LOGGER.info("Report generated: %s", written[0])
    return ReportResult(
        pages=written,
        kept=len(ordered),
        ignored=filtered.ignored,
        candidates=len(records),
    )


__all__ = [
    "FilterResult",
    "ReportResult",
    "filter_records",
    "generate_report",
    "is_success",
    "sort_records",
    "untitled_boundary",
]
