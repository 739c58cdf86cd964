"""Tests for loading records and resolving screenshot files."""

from __future__ import annotations

import os

import pytest

from conftest import make_record
from shotreport.errors import RecordDecodeError, ScreenshotProbeError
from shotreport.loader import PLACEHOLDER_IMAGE, load_records


def test_existing_screenshot_keeps_its_path(tmp_path, record_store) -> None:
    shot = tmp_path / "shots" / "present.png"
    shot.parent.mkdir()
    shot.write_bytes(b"\x89PNG")
    store = record_store([make_record("http://present.test", screenshot=str(shot))])

    (record,) = load_records(store)

    assert record.screenshot_file == str(shot)


def test_missing_screenshot_gets_placeholder(tmp_path, record_store) -> None:
    store = record_store(
        [
            make_record("http://missing.test", screenshot=str(tmp_path / "missing.png")),
            make_record("http://blank.test", screenshot=""),
        ]
    )

    records = load_records(store)

    assert [record.screenshot_file for record in records] == [PLACEHOLDER_IMAGE, PLACEHOLDER_IMAGE]


def test_custom_placeholder_is_used(record_store) -> None:
    store = record_store([make_record(screenshot="/does/not/exist.png")])

    (record,) = load_records(store, placeholder="missing.png")

    assert record.screenshot_file == "missing.png"


def test_records_load_in_key_order(record_store) -> None:
    store = record_store([make_record("http://first.test"), make_record("http://second.test")])

    records = load_records(store)

    assert [record.url for record in records] == ["http://first.test", "http://second.test"]


def test_decode_failure_names_the_key(tmp_path, record_store) -> None:
    store = record_store([make_record("http://fine.test")])
    store.put_raw("zz-broken", "{not json")

    with pytest.raises(RecordDecodeError) as exc:
        load_records(store)

    assert exc.value.key == "zz-broken"
    assert "zz-broken" in str(exc.value)


def test_unexpected_stat_error_is_not_treated_as_missing(monkeypatch, record_store) -> None:
    store = record_store([make_record("http://locked.test", screenshot="/locked/shot.png")])
    real_stat = os.stat

    def fake_stat(path, *args, **kwargs):
        if str(path) == "/locked/shot.png":
            raise PermissionError(13, "Permission denied", path)
        return real_stat(path, *args, **kwargs)

    monkeypatch.setattr("shotreport.loader.os.stat", fake_stat)

    with pytest.raises(ScreenshotProbeError) as exc:
        load_records(store)

    assert exc.value.path == "/locked/shot.png"


def test_unrepresentable_screenshot_path_raises_probe_error(record_store) -> None:
    store = record_store([make_record("http://nul.test", screenshot="shots/a\x00b.png")])

    with pytest.raises(ScreenshotProbeError) as exc:
        load_records(store)

    assert exc.value.path == "shots/a\x00b.png"
    assert "http://nul.test" in exc.value.key
