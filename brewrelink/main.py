"""brewrelink main entry point.

Moves binaries that installers dropped straight into Homebrew's bin
directory into versioned ``<name>-executables`` kegs, then links those kegs
so Homebrew manages the binaries from then on.

Usage:
    brewrelink                      # meld, virtualbox, openzfs
    brewrelink PATTERN PACKAGE      # one package, e.g. 'v(irtual)?box.*' virtualbox
    brewrelink --check-prerequisites

This script:
    1. Resolves the Homebrew prefix and Cellar (flags, config, environment,
       then brew itself)
    2. Relocates each package in order, stopping at the first failure
       unless --keep-going is given
    3. Prints a summary (or JSON with --json)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from brewrelink import __version__
from brewrelink.config import PackageSpec, Settings, resolve_settings
from brewrelink.errors import BrewRelinkError, PackageManagerError
from brewrelink.output import (
    build_report,
    error_report,
    format_human_readable,
    format_json,
    package_entry,
)
from brewrelink.package_manager import Homebrew, PackageManager
from brewrelink.relocator import Relocator
from brewrelink.utils.logging_config import resolve_level, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brewrelink",
        description=(
            "Move unmanaged binaries from the Homebrew bin directory into "
            "versioned kegs and link them with brew."
        ),
    )
    parser.add_argument(
        "pattern",
        nargs="?",
        help="Case-insensitive regex for the binaries to relocate (requires PACKAGE)",
    )
    parser.add_argument(
        "package",
        nargs="?",
        help="Package name with a registered version probe (requires PATTERN)",
    )
    parser.add_argument("--config", type=Path, help="YAML config file")
    parser.add_argument("--prefix", help="Homebrew prefix (default: $HOMEBREW_PREFIX or brew --prefix)")
    parser.add_argument("--cellar", help="Homebrew Cellar (default: $HOMEBREW_CELLAR or brew --cellar)")
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue with the next package after a failure",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be moved without changing anything",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON for machine parsing",
    )
    parser.add_argument(
        "--check-prerequisites",
        action="store_true",
        help="Check Homebrew and version probe inputs, then exit",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only warnings and errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_relocations(
    settings: Settings,
    package_manager: PackageManager,
    packages: Optional[list[PackageSpec]] = None,
    keep_going: bool = False,
    dry_run: bool = False,
) -> dict:
    """Relocate packages in order and return the report.

    Args:
        settings: Resolved settings (paths, registry, configured packages)
        package_manager: Collaborator used for uninstall/link
        packages: Packages to process (default: settings.packages)
        keep_going: Continue after a failed package instead of stopping
        dry_run: Only report planned moves

    Returns:
        Report dictionary from output.build_report()
    """
    if packages is None:
        packages = settings.packages

    relocator = Relocator(
        bin_dir=settings.bin_dir,
        keg_root=settings.keg_root,
        package_manager=package_manager,
        registry=settings.registry,
        dry_run=dry_run,
    )

    entries = []
    failed = False
    for package in packages:
        if failed and not keep_going:
            entries.append(package_entry(package.name, skipped=True))
            continue

        try:
            result = relocator.relocate(package.pattern, package.name)
        except BrewRelinkError as e:
            logger.error("[ERROR] %s: %s", package.name, e)
            entries.append(package_entry(package.name, error=e))
            failed = True
            continue

        entries.append(package_entry(package.name, result=result))

    return build_report(entries, settings=settings.to_dict())


def _report_error(error: BrewRelinkError, as_json: bool) -> int:
    logger.error("[ERROR] %s", error)
    report = error_report(error)
    print(format_json(report) if as_json else format_human_readable(report))
    return 1


def main(argv: Optional[Sequence[str]] = None, package_manager: Optional[PackageManager] = None) -> int:
    """Main entry point for brewrelink."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.pattern is None) != (args.package is None):
        parser.error("PATTERN and PACKAGE must be given together")

    flag_level = "DEBUG" if args.verbose else "WARNING" if args.quiet else None
    setup_logging(resolve_level(flag_level))

    if package_manager is None:
        package_manager = Homebrew()

    settings = None
    try:
        settings = resolve_settings(
            package_manager,
            config_path=args.config,
            prefix=args.prefix,
            cellar=args.cellar,
        )
    except PackageManagerError as e:
        # The prerequisite check reports a missing brew itself
        if not args.check_prerequisites:
            return _report_error(e, args.json)
        logger.warning("Could not resolve Homebrew paths: %s", e)
    except BrewRelinkError as e:
        return _report_error(e, args.json)

    if args.check_prerequisites:
        from brewrelink.utils.check_prerequisites import (
            check_all_prerequisites,
            format_human_readable as format_prerequisites,
        )

        results = check_all_prerequisites(package_manager, settings)
        print(format_json(results) if args.json else format_prerequisites(results))
        return 0 if results["status"] != "missing_required" else 1

    if args.package is not None:
        packages = [PackageSpec(args.package, args.pattern)]
    else:
        packages = settings.packages

    report = run_relocations(
        settings,
        package_manager,
        packages=packages,
        keep_going=args.keep_going,
        dry_run=args.dry_run,
    )

    print(format_json(report) if args.json else format_human_readable(report))
    return 0 if report["status"] == "success" else 1


if __name__ == "__main__":
    sys.exit(main())
