"""Version probe strategies and the registry that maps packages to them.

A probe answers one question: which version of an upstream package is
installed? The answer names the versioned keg directory the package's
binaries are moved into, so an empty answer is treated as a failure.
"""

import logging
import re
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence, Union

from brewrelink.errors import ConfigError, UnsupportedPackageError, VersionProbeError
from brewrelink.utils.commands import CommandResult, run_command
from brewrelink.utils.constants import TIMEOUT_PREREQUISITE
from brewrelink.utils.plist import PlistError, read_plist_value

logger = logging.getLogger(__name__)


class VersionProbe:
    """Base class for version lookup strategies."""

    def probe(self, bin_dir: Path) -> str:
        """Return the installed version.

        Args:
            bin_dir: Homebrew bin directory holding the unmanaged binaries

        Raises:
            VersionProbeError: If the version cannot be determined
        """
        raise NotImplementedError

    def requirement(self, bin_dir: Path) -> Path:
        """Return the file this probe reads or executes."""
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


class CommandProbe(VersionProbe):
    """Shared command handling for probes that run a program.

    A bare program name (no slash) is resolved inside the bin directory,
    since the unmanaged binary being relocated is the one that knows its
    version.
    """

    def __init__(self, command: Sequence[str], timeout: Optional[int] = TIMEOUT_PREREQUISITE):
        if not command:
            raise ConfigError("Probe command must not be empty")
        self.command = [str(part) for part in command]
        self.timeout = timeout

    def requirement(self, bin_dir: Path) -> Path:
        program = self.command[0]
        if "/" in program:
            return Path(program).expanduser()
        return Path(bin_dir) / program

    def describe(self) -> str:
        return " ".join(self.command)

    def run(self, bin_dir: Path) -> CommandResult:
        cmd = [str(self.requirement(bin_dir))] + self.command[1:]
        result = run_command(cmd, timeout=self.timeout)
        if not result.ok:
            raise VersionProbeError(f"Version probe failed: {result.describe()}")
        return result


class CommandRegexProbe(CommandProbe):
    """Run a command and extract the version with a regular expression.

    The first capture group of the first match is the version. stdout is
    searched first, then stderr (some tools print their banner there).
    """

    def __init__(
        self,
        command: Sequence[str],
        regex: str,
        timeout: Optional[int] = TIMEOUT_PREREQUISITE,
    ):
        super().__init__(command, timeout)
        try:
            self.regex = re.compile(regex, re.MULTILINE)
        except re.error as e:
            raise ConfigError(f"Invalid probe regex {regex!r}: {e}")
        if self.regex.groups < 1:
            raise ConfigError(f"Probe regex {regex!r} needs a capture group")

    def probe(self, bin_dir: Path) -> str:
        result = self.run(bin_dir)
        for stream in (result.stdout, result.stderr):
            match = self.regex.search(stream)
            if match and match.group(1):
                return match.group(1).strip()
        output = (result.stdout.strip() or result.stderr.strip())[:80]
        raise VersionProbeError(
            f"Could not parse version from '{self.describe()}' output: {output!r}"
        )


class CommandOutputProbe(CommandProbe):
    """Run a command and use its standard output as the version."""

    def probe(self, bin_dir: Path) -> str:
        version = self.run(bin_dir).stdout.strip()
        if not version:
            raise VersionProbeError(f"'{self.describe()}' printed no version")
        return version


class PlistKeyProbe(VersionProbe):
    """Read the version from a property list, e.g. a bundle's Info.plist.

    Relative plist paths are resolved against the bin directory.
    """

    def __init__(self, plist_path: Union[str, Path], key: str):
        if not key:
            raise ConfigError("Plist probe needs a key")
        self.plist_path = Path(plist_path).expanduser()
        self.key = key

    def requirement(self, bin_dir: Path) -> Path:
        if self.plist_path.is_absolute():
            return self.plist_path
        return Path(bin_dir) / self.plist_path

    def describe(self) -> str:
        return f"{self.plist_path}:{self.key}"

    def probe(self, bin_dir: Path) -> str:
        path = self.requirement(bin_dir)
        try:
            value = read_plist_value(path, self.key)
        except PlistError as e:
            raise VersionProbeError(f"Version probe failed: {e}")

        version = str(value).strip() if value is not None else ""
        if not version or isinstance(value, (dict, list)):
            raise VersionProbeError(f"No usable version under '{self.key}' in {path}")
        return version


def probe_from_config(entry: dict[str, Any], context: str = "probe") -> VersionProbe:
    """Build a probe from a declarative config entry.

    Supported shapes::

        {command: [prog, --version], regex: "prog (\\S+)"}   # CommandRegexProbe
        {command: [prog, --version]}                         # CommandOutputProbe
        {plist: /path/Info.plist, key: CFBundleVersion}      # PlistKeyProbe

    Args:
        entry: Mapping loaded from YAML
        context: Description for error messages

    Returns:
        The configured probe

    Raises:
        ConfigError: If the entry is malformed
    """
    if not isinstance(entry, dict):
        raise ConfigError(f"{context} must be a mapping")

    if "plist" in entry:
        return PlistKeyProbe(entry["plist"], entry.get("key") or "CFBundleShortVersionString")

    command = entry.get("command")
    if isinstance(command, str):
        command = command.split()
    if not isinstance(command, list) or not command:
        raise ConfigError(f"{context} needs either 'command' or 'plist'")

    timeout = entry.get("timeout", TIMEOUT_PREREQUISITE)
    if entry.get("regex"):
        return CommandRegexProbe(command, entry["regex"], timeout=timeout)
    return CommandOutputProbe(command, timeout=timeout)


class ProbeRegistry:
    """Explicit mapping of package name to version probe."""

    def __init__(self):
        self._probes: dict[str, VersionProbe] = {}

    def register(self, name: str, probe: VersionProbe) -> None:
        if name in self._probes:
            logger.debug("Replacing version probe for %s", name)
        self._probes[name] = probe

    def get(self, name: str) -> VersionProbe:
        """Return the probe for name.

        Raises:
            UnsupportedPackageError: If no probe is registered
        """
        try:
            return self._probes[name]
        except KeyError:
            supported = ", ".join(self.names()) or "none"
            raise UnsupportedPackageError(
                f"No version probe registered for '{name}' (supported: {supported})",
                package=name,
            ) from None

    def names(self) -> list[str]:
        return sorted(self._probes)

    def __contains__(self, name: object) -> bool:
        return name in self._probes

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._probes)
