"""Configuration helpers and .env loading for shotreport."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Mapping

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_ENV_FILES: tuple[Path, ...] = (
    Path(".env"),
    Path("config/.env"),
)

DEFAULT_PAGE_SIZE = 40
DEFAULT_DB_PATH = Path("screenshots.db")
DEFAULT_OUTPUT_DIR = Path(".")

ENV_DB = "SHOTREPORT_DB"
ENV_PAGE_SIZE = "SHOTREPORT_PAGE_SIZE"
ENV_INCLUDE_ERRORS = "SHOTREPORT_INCLUDE_ERRORS"
ENV_OUTPUT_DIR = "SHOTREPORT_OUTPUT_DIR"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@lru_cache(maxsize=1)
def load_environment(*, extra_files: Iterable[Path] | None = None) -> dict[str, str]:
    """Load environment variables from .env files once per process."""

    candidates = list(DEFAULT_ENV_FILES)
    if extra_files:
        candidates = [*candidates, *extra_files]

    for path in candidates:
        try:
            if path.exists():
                load_dotenv(path, override=False)
        except OSError:
            continue

    load_dotenv(override=False)
    return dict(os.environ)


def parse_page_size(value: object) -> int:
    try:
        size = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Page size must be an integer, got {value!r}") from exc
    if size <= 0:
        raise ConfigError(f"Page size must be positive, got {size}")
    return size


def parse_flag(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable '{name}' must be a boolean, got {value!r}")


@dataclass(frozen=True)
class ReportConfig:
    """Settings for one report generation run."""

    page_size: int = DEFAULT_PAGE_SIZE
    include_errors: bool = False
    output_dir: Path = field(default=DEFAULT_OUTPUT_DIR)
    db_path: Path = field(default=DEFAULT_DB_PATH)

    def __post_init__(self) -> None:
        object.__setattr__(self, "page_size", parse_page_size(self.page_size))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        object.__setattr__(self, "db_path", Path(self.db_path))

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        page_size: int | None = None,
        include_errors: bool | None = None,
        output_dir: Path | None = None,
        db_path: Path | None = None,
    ) -> "ReportConfig":
        """Build a config from explicit values, falling back to the environment.

        Environment variables are only read for settings not given explicitly,
        so a malformed variable does not matter once its setting is overridden.
        """

        env = os.environ if environ is None else environ
        if page_size is None:
            page_size = env.get(ENV_PAGE_SIZE) or DEFAULT_PAGE_SIZE
        if include_errors is None:
            include_raw = env.get(ENV_INCLUDE_ERRORS)
            include_errors = parse_flag(ENV_INCLUDE_ERRORS, include_raw) if include_raw is not None else False
        if output_dir is None:
            output_dir = Path(env.get(ENV_OUTPUT_DIR) or DEFAULT_OUTPUT_DIR)
        if db_path is None:
            db_path = Path(env.get(ENV_DB) or DEFAULT_DB_PATH)
        return cls(
            page_size=page_size,
            include_errors=include_errors,
            output_dir=output_dir,
            db_path=db_path,
        )


__all__ = [
    "DEFAULT_ENV_FILES",
    "DEFAULT_PAGE_SIZE",
    "ReportConfig",
    "load_environment",
    "parse_flag",
    "parse_page_size",
]
