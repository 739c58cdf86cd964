"""Read every stored probe record and resolve its screenshot file."""

from __future__ import annotations

import dataclasses
import logging
import os

from .errors import RecordDecodeError, ScreenshotProbeError
from .storage import RecordStore, ScreenshotRecord, decode_record

LOGGER = logging.getLogger(__name__)

# 1x1 transparent PNG shown in place of screenshots that were never written to disk.
PLACEHOLDER_IMAGE = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


def screenshot_exists(key: str, path: str) -> bool:
    if not path:
        return False
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except (OSError, ValueError) as exc:
        # ValueError covers paths the OS cannot represent, e.g. embedded NUL bytes.
        raise ScreenshotProbeError(key, path, str(exc)) from exc
    return True


def load_records(store: RecordStore, *, placeholder: str = PLACEHOLDER_IMAGE) -> list[ScreenshotRecord]:
    """Decode all records from ``store`` in key order.

    Records whose screenshot file is missing get ``placeholder`` as their
    screenshot reference. Decode failures abort the load with
    :class:`RecordDecodeError`.
    """

    records: list[ScreenshotRecord] = []
    for key, value in store.ascend():
        try:
            record = decode_record(value)
        except ValueError as exc:
            raise RecordDecodeError(key, str(exc)) from exc

        LOGGER.debug("Generating screenshot entry for %s", record.url or key)
        if not screenshot_exists(key, record.screenshot_file):
            LOGGER.debug("Adding placeholder for missing screenshot %s", record.screenshot_file or "<empty>")
            record = dataclasses.replace(record, screenshot_file=placeholder)
        records.append(record)

    LOGGER.debug("Loaded %d record(s)", len(records))
    return records


__all__ = ["PLACEHOLDER_IMAGE", "load_records", "screenshot_exists"]
