"""HTML rendering of report pages."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape
from markupsafe import Markup

from . import __version__
from .config import ReportConfig
from .errors import RenderError, ReportWriteError
from .loader import PLACEHOLDER_IMAGE
from .paging import Page, page_file_name
from .storage import HTTPHeader, ScreenshotRecord

LOGGER = logging.getLogger(__name__)

HTML_TEMPLATE_NAME = "page.html"
PAGE_SEPARATOR = "&#8226;"

_JINJA_ENV = Environment(
    loader=PackageLoader("shotreport", "templates"),
    autoescape=select_autoescape(["html", "xml"]),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


@dataclass(frozen=True)
class DisplayRecord:
    """Record as shown on a page: screenshot by base name, ``Server`` headers only."""

    url: str
    final_url: str
    response_code: int
    page_title: str
    screenshot_file: str
    headers: tuple[HTTPHeader, ...]


def project_record(record: ScreenshotRecord, *, placeholder: str = PLACEHOLDER_IMAGE) -> DisplayRecord:
    screenshot = record.screenshot_file
    if screenshot != placeholder:
        screenshot = os.path.basename(screenshot)
    return DisplayRecord(
        url=record.url,
        final_url=record.final_url,
        response_code=record.response_code,
        page_title=record.page_title,
        screenshot_file=screenshot,
        headers=tuple(header for header in record.headers if header.is_server()),
    )


def build_page_index(count: int) -> Markup:
    return Markup("").join(
        Markup(f'{PAGE_SEPARATOR}<a class="page-number" href="{page_file_name(number)}">{number}</a>')
        for number in range(count)
    )


def build_prev_link(page: Page) -> Markup:
    return Markup(f'<a id="prev-page" href="{page.prev_file_name}">Prev</a>')


def build_next_link(page: Page) -> Markup:
    return Markup(f'{PAGE_SEPARATOR}<a id="next-page" href="{page.next_file_name}">Next</a>')


def render_page(
    page: Page,
    *,
    page_index: Markup,
    total: int,
    ignored: int,
    placeholder: str = PLACEHOLDER_IMAGE,
) -> str:
    """Render one page to an HTML document."""

    context = {
        "screenshots": [project_record(record, placeholder=placeholder) for record in page.records],
        "page_index": page_index,
        "page_count": total,
        "page_next": build_next_link(page),
        "page_prev": build_prev_link(page),
        "page_number": page.number,
        "errors_ignored": ignored,
        "version": __version__,
    }
    try:
        template = _JINJA_ENV.get_template(HTML_TEMPLATE_NAME)
        return template.render(**context)
    except TemplateError as exc:
        raise RenderError(page.number, str(exc)) from exc


def write_pages(
    pages: Sequence[Page],
    config: ReportConfig,
    *,
    total: int,
    ignored: int,
    placeholder: str = PLACEHOLDER_IMAGE,
) -> list[Path]:
    """Render and write every page; raise :class:`ReportWriteError` if any failed.

    A page that fails is logged and skipped so the remaining pages are
    still written under their own numbers.
    """

    output_dir = config.output_dir
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.error("Unable to create report directory %s: %s", output_dir, exc)
        raise ReportWriteError({page.number: str(exc) for page in pages}) from exc
    page_index = build_page_index(len(pages))

    written: list[Path] = []
    failures: dict[int, str] = {}
    for page in pages:
        out_path = output_dir / page.file_name
        try:
            html_output = render_page(
                page,
                page_index=page_index,
                total=total,
                ignored=ignored,
                placeholder=placeholder,
            )
            out_path.write_text(html_output, encoding="utf-8")
        except (RenderError, OSError) as exc:
            LOGGER.error("Unable to write report page %s: %s", out_path, exc)
            failures[page.number] = str(exc)
            continue
        LOGGER.debug("Wrote %s with %d record(s)", out_path, len(page.records))
        written.append(out_path)

    if failures:
        raise ReportWriteError(failures)
    return written


__all__ = [
    "DisplayRecord",
    "build_next_link",
    "build_page_index",
    "build_prev_link",
    "project_record",
    "render_page",
    "write_pages",
]
