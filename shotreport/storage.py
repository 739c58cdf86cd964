"""Screenshot probe records and the key-value store they are read from."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable, Iterator, Mapping
from contextlib import closing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from .errors import StoreError

LOGGER = logging.getLogger(__name__)

SERVER_HEADER = "server"

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS records (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


@dataclass(frozen=True)
class HTTPHeader:
    key: str
    value: str

    def is_server(self) -> bool:
        return self.key.lower() == SERVER_HEADER


@dataclass(frozen=True)
class ScreenshotRecord:
    """One captured probe result as stored by the screenshot tool."""

    url: str = ""
    final_url: str = ""
    response_code: int = 0
    page_title: str = ""
    screenshot_file: str = ""
    headers: tuple[HTTPHeader, ...] = field(default_factory=tuple)

    def server_header(self) -> str:
        """Return the first ``Server`` header value, or an empty string."""

        for header in self.headers:
            if header.is_server():
                return header.value
        return ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScreenshotRecord":
        """Build a record from its stored JSON object; raise ``ValueError`` on bad field types."""

        if not isinstance(data, Mapping):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")

        headers_raw = _field(data, "Headers") or []
        if not isinstance(headers_raw, list):
            raise ValueError("'Headers' must be an array")
        headers: list[HTTPHeader] = []
        for index, item in enumerate(headers_raw):
            if not isinstance(item, Mapping):
                raise ValueError(f"header #{index} must be an object")
            headers.append(
                HTTPHeader(
                    key=_string_field(item, "Key"),
                    value=_string_field(item, "Value"),
                )
            )

        code = _field(data, "ResponseCode")
        if code is None:
            code = 0
        if isinstance(code, bool) or not isinstance(code, int):
            raise ValueError("'ResponseCode' must be an integer")

        return cls(
            url=_string_field(data, "URL"),
            final_url=_string_field(data, "FinalURL"),
            response_code=code,
            page_title=_string_field(data, "PageTitle"),
            screenshot_file=_string_field(data, "ScreenshotFile"),
            headers=tuple(headers),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "URL": self.url,
            "FinalURL": self.final_url,
            "ResponseCode": self.response_code,
            "PageTitle": self.page_title,
            "ScreenshotFile": self.screenshot_file,
            "Headers": [{"Key": header.key, "Value": header.value} for header in self.headers],
        }


def _field(data: Mapping[str, Any], name: str) -> Any:
    """Look up ``name`` case-insensitively; the last non-null matching key wins."""

    folded = name.lower()
    value = None
    for key, candidate in data.items():
        if candidate is not None and isinstance(key, str) and key.lower() == folded:
            value = candidate
    return value


def _string_field(data: Mapping[str, Any], name: str) -> str:
    value = _field(data, name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{name!r} must be a string")
    return value


def decode_record(value: str) -> ScreenshotRecord:
    """Decode a serialized record; raise ``ValueError`` when it is malformed."""

    return ScreenshotRecord.from_dict(json.loads(value))


class RecordStore(Protocol):
    """Anything that can list all stored records in key order."""

    def ascend(self) -> Iterator[tuple[str, str]]:
        ...


class SqliteRecordStore:
    """Key-value snapshot of probe records kept in a single SQLite table."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"SqliteRecordStore({str(self.path)!r})"

    def _read_only(self) -> sqlite3.Connection:
        if not self.path.exists():
            raise StoreError(f"Record store {self.path} does not exist")
        uri = f"{self.path.resolve().as_uri()}?mode=ro"
        try:
            return sqlite3.connect(uri, uri=True, isolation_level=None)
        except sqlite3.Error as exc:
            raise StoreError(f"Unable to open record store {self.path}: {exc}") from exc

    def _write_rows(self, rows: list[tuple[str, str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with closing(sqlite3.connect(str(self.path))) as conn:
                conn.executescript(_SCHEMA_SQL)
                conn.executemany(
                    "INSERT OR REPLACE INTO records (key, value) VALUES (?, ?)",
                    rows,
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to write to record store {self.path}: {exc}") from exc

    def ascend(self) -> Iterator[tuple[str, str]]:
        """Yield every ``(key, value)`` pair in key order inside one read transaction."""

        with closing(self._read_only()) as conn:
            try:
                conn.execute("BEGIN")
                try:
                    cursor = conn.execute("SELECT key, value FROM records ORDER BY key")
                    for key, value in cursor:
                        yield key, value
                finally:
                    conn.execute("ROLLBACK")
            except sqlite3.Error as exc:
                raise StoreError(f"Failed to scan record store {self.path}: {exc}") from exc

    def count(self) -> int:
        with closing(self._read_only()) as conn:
            try:
                (total,) = conn.execute("SELECT COUNT(*) FROM records").fetchone()
            except sqlite3.Error as exc:
                raise StoreError(f"Failed to count records in {self.path}: {exc}") from exc
        return int(total)

    def put_raw(self, key: str, value: str) -> None:
        self._write_rows([(key, value)])

    def put(self, key: str, record: ScreenshotRecord) -> None:
        self.put_raw(key, json.dumps(record.to_dict()))

    def put_many(self, items: Iterable[tuple[str, ScreenshotRecord]]) -> int:
        rows = [(key, json.dumps(record.to_dict())) for key, record in items]
        self._write_rows(rows)
        LOGGER.debug("Stored %d record(s) in %s", len(rows), self.path)
        return len(rows)


__all__ = [
    "HTTPHeader",
    "RecordStore",
    "ScreenshotRecord",
    "SqliteRecordStore",
    "decode_record",
]
