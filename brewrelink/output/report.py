"""Run summary output for the brewrelink command.

``build_report`` collects per-package outcomes into one dictionary that is
printed either as JSON (``--json``) or as a short human-readable summary.
"""

import json
from typing import Any, Optional

from brewrelink.errors import BrewRelinkError
from brewrelink.relocator import RelocationResult


def package_entry(
    package: str,
    result: Optional[RelocationResult] = None,
    error: Optional[BaseException] = None,
    skipped: bool = False,
) -> dict[str, Any]:
    """Build the report entry for one package."""
    if result is not None:
        entry = result.to_dict()
        entry["status"] = "success"
        return entry

    entry: dict[str, Any] = {"package": package}
    if skipped:
        entry["status"] = "skipped"
    else:
        entry["status"] = "error"
        entry["error"] = str(error) if error is not None else "unknown error"
        entry["error_type"] = type(error).__name__ if error is not None else None
    return entry


def build_report(entries: list[dict[str, Any]], settings: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Combine package entries into the final report.

    Status is 'success' when every package succeeded, 'partial' when some
    did, and 'error' when none did.
    """
    failed = [e for e in entries if e["status"] == "error"]
    succeeded = [e for e in entries if e["status"] == "success"]

    if not failed:
        status = "success"
    elif succeeded:
        status = "partial"
    else:
        status = "error"

    report: dict[str, Any] = {
        "status": status,
        "packages": entries,
        "summary": {
            "total": len(entries),
            "succeeded": len(succeeded),
            "failed": len(failed),
            "skipped": sum(1 for e in entries if e["status"] == "skipped"),
            "files_moved": sum(e.get("moved_count", 0) for e in succeeded),
        },
        "errors": [f"{e['package']}: {e['error']}" for e in failed],
    }
    if settings is not None:
        report["settings"] = settings
    return report


def error_report(error: BaseException) -> dict[str, Any]:
    """Report for failures that happen before any package is processed."""
    report = build_report([])
    report["status"] = "error"
    report["errors"] = [str(error)]
    if not isinstance(error, BrewRelinkError):
        report["exception_type"] = type(error).__name__
    return report


def format_json(report: dict[str, Any]) -> str:
    return json.dumps(report, indent=2, default=str)


def format_human_readable(report: dict[str, Any]) -> str:
    """Format a report for terminal output."""
    lines = ["Relocation Summary", "=" * 18]

    for entry in report["packages"]:
        name = entry["package"]
        status = entry["status"]
        if status == "error":
            lines.append(f"  [ERROR] {name}: {entry['error']}")
        elif status == "skipped":
            lines.append(f"  [--] {name}: skipped after earlier failure")
        elif entry.get("dry_run") and entry.get("planned"):
            lines.append(
                f"  [DRY] {name} {entry['version']}: would move "
                f"{len(entry['planned'])} file(s) to {entry['destination']}"
            )
        elif entry.get("moved_count"):
            lines.append(
                f"  [OK] {name} {entry['version']}: moved {entry['moved_count']} "
                f"file(s), linked {entry['keg_name']}"
            )
        else:
            lines.append(f"  [OK] {name}: nothing to relocate")

    if not report["packages"]:
        for error in report["errors"]:
            lines.append(f"  [ERROR] {error}")

    summary = report["summary"]
    lines.append(
        f"\nStatus: {report['status']} "
        f"({summary['succeeded']} ok, {summary['failed']} failed, "
        f"{summary['files_moved']} file(s) moved)"
    )
    return "\n".join(lines)
