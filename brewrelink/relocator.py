"""Move unmanaged binaries into a versioned keg and let Homebrew link them.

For one package the relocator:

    1. finds regular files in the bin directory matching the package's
       search pattern (symlinks are Homebrew's own and are skipped)
    2. asks the package's version probe for the installed version
    3. uninstalls a previously linked ``<name>-executables`` keg
    4. moves the files into ``<cellar>/<name>-executables/<version>/bin``
    5. runs ``brew link <name>-executables``

Finding nothing is the steady state and ends the run early without probing
or touching the package manager. A failed link after the move is not
rolled back: the files stay in the keg and the error says where.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from brewrelink.errors import BrewRelinkError, RelocationError, VersionProbeError
from brewrelink.package_manager import PackageManager
from brewrelink.probes import ProbeRegistry
from brewrelink.scanners import find_unlinked_binaries
from brewrelink.utils.constants import KEG_BIN_DIR, KEG_SUFFIX

logger = logging.getLogger(__name__)


def keg_name_for(package: str) -> str:
    return f"{package}{KEG_SUFFIX}"


def keg_destination(keg_root: Path, package: str, version: str) -> Path:
    """Return the directory the package's binaries are moved into.

    >>> keg_destination(Path("/Cellar"), "meld", "3.21.2")
    PosixPath('/Cellar/meld-executables/3.21.2/bin')
    """
    return Path(keg_root) / keg_name_for(package) / version / KEG_BIN_DIR


@dataclass
class RelocationResult:
    """Outcome of relocating one package."""

    package: str
    keg_name: str
    version: Optional[str] = None
    destination: Optional[Path] = None
    moved: list[tuple[Path, Path]] = field(default_factory=list)
    planned: list[tuple[Path, Path]] = field(default_factory=list)
    uninstalled_previous: bool = False
    linked: bool = False
    dry_run: bool = False

    @property
    def moved_count(self) -> int:
        return len(self.moved)

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.package,
            "keg_name": self.keg_name,
            "version": self.version,
            "destination": str(self.destination) if self.destination else None,
            "moved_count": self.moved_count,
            "moved": [{"source": str(s), "dest": str(d)} for s, d in self.moved],
            "planned": [{"source": str(s), "dest": str(d)} for s, d in self.planned],
            "uninstalled_previous": self.uninstalled_previous,
            "linked": self.linked,
            "dry_run": self.dry_run,
        }


class Relocator:
    """Relocate unmanaged binaries for registered packages.

    Example:
        >>> relocator = Relocator(Path("/opt/homebrew/bin"), Path("/opt/homebrew/Cellar"),
        ...                       Homebrew(), default_registry())
        >>> result = relocator.relocate(r"v(irtual)?box.*", "virtualbox")
        >>> result.moved_count
        2
    """

    def __init__(
        self,
        bin_dir: Path,
        keg_root: Path,
        package_manager: PackageManager,
        registry: ProbeRegistry,
        dry_run: bool = False,
    ):
        self.bin_dir = Path(bin_dir)
        self.keg_root = Path(keg_root)
        self.package_manager = package_manager
        self.registry = registry
        self.dry_run = dry_run

    def relocate(self, pattern: str, package: str) -> RelocationResult:
        """Relocate the unmanaged binaries of one package.

        Args:
            pattern: Search pattern for the package's binaries
            package: Upstream package name with a registered version probe

        Returns:
            RelocationResult describing what was moved

        Raises:
            UnsupportedPackageError: No probe registered (nothing touched)
            FilesystemScanError: The bin directory could not be scanned
            VersionProbeError: The version could not be determined
                (nothing moved)
            RelocationError: A move failed; earlier moves stay in place
            PackageManagerError: Linking failed after the move
        """
        try:
            return self._relocate(pattern, package)
        except BrewRelinkError as e:
            if e.package is None:
                e.package = package
            raise

    def _relocate(self, pattern: str, package: str) -> RelocationResult:
        probe = self.registry.get(package)
        keg_name = keg_name_for(package)
        result = RelocationResult(package=package, keg_name=keg_name, dry_run=self.dry_run)

        logger.info("Looking for unlinked %s binaries in %s...", package, self.bin_dir)
        binaries = find_unlinked_binaries(self.bin_dir, pattern)
        if not binaries:
            logger.info("No unlinked %s binaries found", package)
            return result

        logger.info("Found %d unlinked %s binaries", len(binaries), package)
        version = probe.probe(self.bin_dir)
        if not version:
            raise VersionProbeError(f"Version probe for {package} returned nothing")
        result.version = version

        destination = keg_destination(self.keg_root, package, version)
        result.destination = destination
        logger.info("Installed %s version: %s", package, version)

        if self.dry_run:
            result.planned = [(source, destination / source.name) for source in binaries]
            for source, dest in result.planned:
                logger.info("Would move %s -> %s", source, dest)
            logger.info("Would link %s", keg_name)
            return result

        self._remove_previous(keg_name, result)

        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RelocationError(f"Could not create {destination}: {e}")

        for source in binaries:
            dest = destination / source.name
            # shutil.move would put the file inside an existing directory
            if dest.is_dir() and not dest.is_symlink():
                raise RelocationError(
                    f"Could not move {source} to {dest}: destination is a directory "
                    f"({result.moved_count} of {len(binaries)} file(s) already moved)"
                )
            try:
                # shutil.move follows a symlink to a directory, so replace
                # the link itself
                if dest.is_symlink():
                    dest.unlink()
                shutil.move(str(source), str(dest))
            except (OSError, shutil.Error) as e:
                raise RelocationError(
                    f"Could not move {source} to {dest}: {e} "
                    f"({result.moved_count} of {len(binaries)} file(s) already moved)"
                )
            result.moved.append((source, dest))
            logger.info("Moved %s -> %s", source, dest)

        logger.info("Linking %s...", keg_name)
        try:
            self.package_manager.link(keg_name)
        except BrewRelinkError as e:
            logger.error("Binaries remain in %s but are not linked", destination)
            e.args = (f"{e} (binaries remain unlinked in {destination})",)
            raise
        result.linked = True

        logger.info("[OK] %s %s: relocated %d binaries", package, version, result.moved_count)
        return result

    def _remove_previous(self, keg_name: str, result: RelocationResult) -> None:
        """Uninstall an existing keg so the new version can be linked.

        Failure is logged and tolerated: brew reports some harmless
        conditions (e.g. a keg that is installed but already unlinked) with a
        non-zero exit.
        """
        if not self.package_manager.is_installed(keg_name):
            return

        logger.info("Uninstalling existing %s...", keg_name)
        outcome = self.package_manager.uninstall(keg_name)
        if outcome.ok:
            result.uninstalled_previous = True
            logger.info("Uninstalled %s", keg_name)
        else:
            logger.warning("Uninstalling %s failed, continuing: %s", keg_name, outcome.describe())
