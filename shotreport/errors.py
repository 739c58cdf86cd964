"""Exceptions raised while building a screenshot report."""

from __future__ import annotations

from typing import Mapping


class ShotReportError(RuntimeError):
    """Base class for every failure the report pipeline surfaces."""


class ConfigError(ShotReportError):
    """Raised when report configuration values are invalid."""


class StoreError(ShotReportError):
    """Raised when the record store cannot be opened or scanned."""


class RecordDecodeError(ShotReportError):
    """Raised when a stored record body cannot be decoded."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Unable to decode record {key!r}: {reason}")
        self.key = key
        self.reason = reason


class ScreenshotProbeError(ShotReportError):
    """Raised when checking a screenshot file fails for a reason other than absence."""

    def __init__(self, key: str, path: str, reason: str) -> None:
        super().__init__(f"Unable to check screenshot {path!r} for record {key!r}: {reason}")
        self.key = key
        self.path = path


class RenderError(ShotReportError):
    """Raised when the page template fails to render."""

    def __init__(self, page_number: int, reason: str) -> None:
        super().__init__(f"Failed to render page {page_number}: {reason}")
        self.page_number = page_number


class ReportWriteError(ShotReportError):
    """Raised after writing pages when one or more of them failed."""

    def __init__(self, failures: Mapping[int, str]) -> None:
        self.failures = dict(sorted(failures.items()))
        pages = ", ".join(str(number) for number in self.failures)
        super().__init__(f"Failed to write report page(s): {pages}")


__all__ = [
    "ShotReportError",
    "ConfigError",
    "StoreError",
    "RecordDecodeError",
    "ScreenshotProbeError",
    "RenderError",
    "ReportWriteError",
]
