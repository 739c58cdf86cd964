"""Fixed-size pagination with circular previous/next navigation."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .errors import ConfigError
from .storage import ScreenshotRecord


def page_file_name(number: int) -> str:
    return f"page-{number}.html"


@dataclass(frozen=True)
class Page:
    number: int
    records: tuple[ScreenshotRecord, ...]
    prev_number: int
    next_number: int

    @property
    def file_name(self) -> str:
        return page_file_name(self.number)

    @property
    def prev_file_name(self) -> str:
        return page_file_name(self.prev_number)

    @property
    def next_file_name(self) -> str:
        return page_file_name(self.next_number)


def page_count(total: int, page_size: int) -> int:
    if page_size <= 0:
        raise ConfigError(f"Page size must be positive, got {page_size}")
    return math.ceil(total / page_size)


def paginate(records: Sequence[ScreenshotRecord], page_size: int) -> list[Page]:
    """Split ``records`` into pages of ``page_size``; the last page may be short."""

    count = page_count(len(records), page_size)
    pages: list[Page] = []
    for number in range(count):
        start = number * page_size
        end = min(len(records), start + page_size)
        pages.append(
            Page(
                number=number,
                records=tuple(records[start:end]),
                prev_number=(number + count - 1) % count,
                next_number=(number + 1) % count,
            )
        )
    return pages


__all__ = ["Page", "page_count", "page_file_name", "paginate"]
