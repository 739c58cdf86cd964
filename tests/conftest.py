import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shotreport.storage import HTTPHeader, ScreenshotRecord, SqliteRecordStore  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    for name in ("SHOTREPORT_DB", "SHOTREPORT_PAGE_SIZE", "SHOTREPORT_INCLUDE_ERRORS", "SHOTREPORT_OUTPUT_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


def make_record(
    url: str = "http://example.com/",
    *,
    code: int = 200,
    title: str = "",
    screenshot: str = "/nonexistent/shot.png",
    server: str | None = None,
    headers: list[tuple[str, str]] | None = None,
) -> ScreenshotRecord:
    pairs = list(headers or [])
    if server is not None:
        pairs.append(("Server", server))
    return ScreenshotRecord(
        url=url,
        final_url=url,
        response_code=code,
        page_title=title,
        screenshot_file=screenshot,
        headers=tuple(HTTPHeader(key, value) for key, value in pairs),
    )


@pytest.fixture()
def record_store(tmp_path):
    def _build(records, *, path: Path | None = None) -> SqliteRecordStore:
        store = SqliteRecordStore(path or tmp_path / "screenshots.db")
        store.put_many((f"{index:05d}-{record.url}", record) for index, record in enumerate(records))
        return store

    return _build
