"""Exception types raised while relocating unmanaged binaries.

Every error is fatal to the package being processed. The entry point decides
whether the remaining packages are still attempted (see ``--keep-going``).
"""

from typing import Optional


class BrewRelinkError(Exception):
    """Base class for all brewrelink failures."""

    def __init__(self, message: str, package: Optional[str] = None):
        super().__init__(message)
        self.package = package


class UnsupportedPackageError(BrewRelinkError):
    """Raised when no version probe is registered for a package."""
    pass


class VersionProbeError(BrewRelinkError):
    """Raised when a version probe fails or yields no usable version."""
    pass


class FilesystemScanError(BrewRelinkError):
    """Raised when the binary directory cannot be scanned."""
    pass


class RelocationError(BrewRelinkError):
    """Raised when a discovered file cannot be moved into its keg."""
    pass


class PackageManagerError(BrewRelinkError):
    """Raised when a package manager query or link call fails."""
    pass


class ConfigError(BrewRelinkError):
    """Raised for malformed configuration files or entries."""
    pass
