from __future__ import annotations

import pytest

from conftest import make_record
from shotreport.errors import ConfigError
from shotreport.paging import page_count, page_file_name, paginate


@pytest.mark.parametrize(
    ("total", "size", "expected"),
    [(0, 40, 0), (1, 40, 1), (40, 40, 1), (41, 40, 2), (85, 40, 3), (7, 1, 7)],
)
def test_page_count_rounds_up(total: int, size: int, expected: int) -> None:
    assert page_count(total, size) == expected


@pytest.mark.parametrize("size", [0, -3])
def test_page_size_must_be_positive(size: int) -> None:
    with pytest.raises(ConfigError):
        page_count(10, size)


@pytest.mark.parametrize(("total", "size"), [(85, 40), (10, 3), (12, 4), (1, 5)])
def test_pages_concatenate_back_to_input(total: int, size: int) -> None:
    records = [make_record(f"http://{index}.test") for index in range(total)]

    pages = paginate(records, size)

    assert len(pages) == page_count(total, size)
    assert [page.number for page in pages] == list(range(len(pages)))
    assert [record for page in pages for record in page.records] == records
    assert all(len(page.records) == size for page in pages[:-1])


def test_navigation_wraps_around() -> None:
    pages = paginate([make_record() for _ in range(5)], 1)

    assert pages[0].prev_number == 4
    assert pages[4].next_number == 0
    assert [(page.prev_number, page.next_number) for page in pages[1:4]] == [(0, 2), (1, 3), (2, 4)]
    assert pages[0].prev_file_name == "page-4.html"
    assert pages[4].next_file_name == "page-0.html"


def test_single_page_links_to_itself() -> None:
    (page,) = paginate([make_record()], 40)

    assert page.prev_number == 0
    assert page.next_number == 0
    assert page.file_name == page_file_name(0) == "page-0.html"


def test_empty_input_has_no_pages() -> None:
    assert paginate([], 40) == []
