"""Output generation for the run summary.

Modules:
    report: Build the per-package report and format it as JSON or text
"""

from .report import (
    build_report,
    error_report,
    format_human_readable,
    format_json,
    package_entry,
)

__all__ = [
    "build_report",
    "error_report",
    "format_human_readable",
    "format_json",
    "package_entry",
]
