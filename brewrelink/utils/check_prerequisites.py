"""Prerequisites checker for brewrelink.

Verifies Homebrew is available and reports, per configured package, whether
the file its version probe needs (a binary in the bin directory or a plist)
is present.

Usage:
    brewrelink --check-prerequisites [--json]
"""

from pathlib import Path
from typing import Optional

from brewrelink.errors import PackageManagerError


def check_homebrew(package_manager) -> tuple[bool, Optional[str], Optional[str]]:
    """Check Homebrew availability and version.

    Returns:
        Tuple of (is_available, version, error_message)
    """
    try:
        return True, package_manager.version(), None
    except PackageManagerError as e:
        return False, None, str(e)


def check_probe_inputs(packages, registry, bin_dir: Path) -> dict:
    """Check that each package's probe input exists.

    Returns:
        Mapping of package name to check details
    """
    checks = {}
    for package in packages:
        if package.name not in registry:
            checks[package.name] = {
                "available": False,
                "probe": None,
                "requires": None,
                "error": "no version probe registered",
            }
            continue

        probe = registry.get(package.name)
        required = probe.requirement(bin_dir)
        available = required.exists()
        checks[package.name] = {
            "available": available,
            "probe": probe.describe(),
            "requires": str(required),
            "error": None if available else f"{required} not found",
        }
    return checks


def check_all_prerequisites(package_manager, settings=None) -> dict:
    """Run all prerequisite checks and return structured results.

    Args:
        package_manager: PackageManager used to query Homebrew
        settings: Resolved Settings, or None when the Homebrew paths could
            not be determined (the paths are then reported unavailable)

    Returns:
        Dictionary with status, checks, and summary
    """
    available, version, error = check_homebrew(package_manager)
    homebrew = {
        "available": available,
        "version": version,
        "error": error,
        "required": True,
        "install_cmd": '/bin/bash -c "$(curl -fsSL https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"',
    }

    if settings is None:
        bin_dir = {"path": None, "available": False}
        keg_root = {"path": None, "available": False}
        packages = {}
    else:
        bin_dir = {"path": str(settings.bin_dir), "available": settings.bin_dir.is_dir()}
        keg_root = {"path": str(settings.keg_root), "available": settings.keg_root.is_dir()}
        packages = check_probe_inputs(settings.packages, settings.registry, settings.bin_dir)
    missing_probe_inputs = [name for name, c in packages.items() if not c["available"]]

    # A package whose probe input is missing only matters once its binaries
    # show up, so those are reported but don't block a run
    if not available or not bin_dir["available"]:
        status = "missing_required"
    elif missing_probe_inputs:
        status = "missing_optional"
    else:
        status = "ready"

    return {
        "status": status,
        "homebrew": homebrew,
        "bin_dir": bin_dir,
        "keg_root": keg_root,
        "packages": packages,
        "summary": {
            "packages": len(packages),
            "probe_inputs_missing": len(missing_probe_inputs),
        },
    }


def format_human_readable(results: dict) -> str:
    """Format results for human-readable output.

    Args:
        results: Results dictionary from check_all_prerequisites()

    Returns:
        Formatted string for terminal output
    """
    lines = ["Prerequisites Check", "=" * 19]

    lines.append("\nRequired:")
    homebrew = results["homebrew"]
    if homebrew["available"]:
        lines.append(f"  [OK] Homebrew {homebrew['version']}")
    else:
        lines.append(f"  [--] Homebrew (install: {homebrew['install_cmd']})")

    bin_dir = results["bin_dir"]
    marker = "[OK]" if bin_dir["available"] else "[--]"
    lines.append(f"  {marker} Binary directory {bin_dir['path'] or '(could not be determined)'}")

    lines.append("\nVersion probes:")
    for name, check in results["packages"].items():
        if check["available"]:
            lines.append(f"  [OK] {name} ({check['probe']})")
        else:
            lines.append(f"  [--] {name}: {check['error']}")

    status = results["status"]
    if status == "ready":
        lines.append("\nStatus: Ready to proceed")
    elif status == "missing_optional":
        lines.append("\nStatus: Ready (some packages cannot be probed until installed)")
    else:
        lines.append("\nStatus: Missing required tools - install them before continuing")

    return "\n".join(lines)
