"""Package manager collaborator used by the relocator.

The relocator only needs a handful of operations: ask whether a keg is
installed, uninstall it, link it, and report where the package manager
keeps its prefix and Cellar. ``Homebrew`` implements them by shelling out
to ``brew``; tests substitute a fake with the same methods.
"""

import logging
from pathlib import Path

from brewrelink.errors import PackageManagerError
from brewrelink.utils.commands import CommandResult, run_command
from brewrelink.utils.constants import TIMEOUT_PACKAGE_MUTATION, TIMEOUT_PACKAGE_QUERY

logger = logging.getLogger(__name__)


class PackageManager:
    """Operations the relocator needs from a package manager."""

    def is_installed(self, name: str) -> bool:
        raise NotImplementedError

    def uninstall(self, name: str) -> CommandResult:
        raise NotImplementedError

    def link(self, name: str) -> CommandResult:
        raise NotImplementedError

    def prefix(self) -> Path:
        raise NotImplementedError

    def cellar(self) -> Path:
        raise NotImplementedError


class Homebrew(PackageManager):
    """PackageManager backed by the ``brew`` command line tool."""

    def __init__(self, brew: str = "brew"):
        self.brew = brew

    def _run(self, *args: str, timeout=TIMEOUT_PACKAGE_QUERY) -> CommandResult:
        result = run_command([self.brew, *args], timeout=timeout)
        if result.not_found:
            raise PackageManagerError(f"Homebrew not available: {result.stderr.strip()}")
        return result

    def _query_path(self, flag: str) -> Path:
        result = self._run(flag)
        output = result.stdout.strip()
        if not result.ok or not output:
            raise PackageManagerError(f"Could not determine Homebrew path: {result.describe()}")
        return Path(output)

    def version(self) -> str:
        """Return the Homebrew version string, e.g. '4.4.0'."""
        result = self._run("--version", timeout=TIMEOUT_PACKAGE_QUERY)
        if not result.ok:
            raise PackageManagerError(result.describe())
        # Output format: "Homebrew 4.4.0"
        first_line = result.stdout.strip().split("\n")[0]
        parts = first_line.split()
        return parts[1] if len(parts) >= 2 else first_line

    def is_installed(self, name: str) -> bool:
        """Check whether a keg for name is installed, linked or not.

        This is broader than asking whether the keg is linked: an unlinked
        keg left over from an earlier run still has to be uninstalled before
        the new version is linked. ``brew list --versions`` exits non-zero
        and prints nothing for packages that are not installed.
        """
        result = self._run("list", "--versions", name)
        return result.ok and bool(result.stdout.strip())

    def uninstall(self, name: str) -> CommandResult:
        """Uninstall name. A non-zero exit is returned, not raised."""
        return self._run("uninstall", name, timeout=TIMEOUT_PACKAGE_MUTATION)

    def link(self, name: str) -> CommandResult:
        """Link name's keg into the prefix.

        Raises:
            PackageManagerError: If brew link exits non-zero
        """
        result = self._run("link", name, timeout=TIMEOUT_PACKAGE_MUTATION)
        if not result.ok:
            raise PackageManagerError(f"Linking {name} failed: {result.describe()}")
        return result

    def prefix(self) -> Path:
        return self._query_path("--prefix")

    def cellar(self) -> Path:
        return self._query_path("--cellar")
