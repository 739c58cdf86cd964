"""shotreport package: static HTML reports from captured screenshot probes."""

from __future__ import annotations

__all__ = ["__version__"]

# Semantic version for package consumers.
__version__ = "0.1.0"
