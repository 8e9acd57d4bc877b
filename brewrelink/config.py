"""Configuration: path roots, package list and extra version probes.

Path roots are resolved in precedence order:
    --prefix / --cellar flag  >  config file  >  HOMEBREW_PREFIX /
    HOMEBREW_CELLAR env vars  >  ``brew --prefix`` / ``brew --cellar``

The optional YAML config file lives at
``$XDG_CONFIG_HOME/brewrelink/config.yaml`` (or wherever BREWRELINK_CONFIG
or --config points)::

    prefix: /opt/homebrew
    cellar: /opt/homebrew/Cellar
    packages:
      - name: meld
        pattern: meld
      - name: foo
        pattern: "foo(-cli)?"
        probe:
          command: [foo, --version]
          regex: "foo (\\S+)"

A ``packages`` list replaces the built-in one. Every package needs a probe,
either built in or given inline.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from brewrelink.errors import ConfigError
from brewrelink.package_manager import PackageManager
from brewrelink.probes import ProbeRegistry, VersionProbe, default_registry, probe_from_config
from brewrelink.utils.constants import (
    CONFIG_FILENAME,
    ENV_CELLAR,
    ENV_CONFIG,
    ENV_PREFIX,
    KEG_SUFFIX,
)

logger = logging.getLogger(__name__)


@dataclass
class PackageSpec:
    """A package to relocate: upstream name plus search pattern."""

    name: str
    pattern: str
    probe: Optional[VersionProbe] = None

    @property
    def keg_name(self) -> str:
        return f"{self.name}{KEG_SUFFIX}"


# Processed in this order when no package is given on the command line
BUILTIN_PACKAGES = [
    PackageSpec("meld", "meld"),
    PackageSpec("virtualbox", r"v(irtual)?box.*"),
    PackageSpec(
        "openzfs",
        r"(zfs|zpool|zdb|zed|zhack|zinject|zstream|zstreamdump|zsysctl|zconfigd"
        r"|zilstat|ztest|raidz_test|arc_summary|arcstat|dbufstat|fsck\.zfs"
        r"|mount_zfs|InvariantDisks)(\.py)?",
    ),
]


@dataclass
class Settings:
    """Resolved settings for one run."""

    bin_dir: Path
    keg_root: Path
    packages: list[PackageSpec] = field(default_factory=list)
    registry: ProbeRegistry = field(default_factory=default_registry)
    config_path: Optional[Path] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "bin_dir": str(self.bin_dir),
            "keg_root": str(self.keg_root),
            "packages": [p.name for p in self.packages],
            "config_path": str(self.config_path) if self.config_path else None,
        }


def default_config_path() -> Path:
    """Return the config file location (which may not exist)."""
    explicit = os.environ.get(ENV_CONFIG)
    if explicit:
        return Path(explicit).expanduser()

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config).expanduser() if xdg_config else Path.home() / ".config"
    return base / "brewrelink" / CONFIG_FILENAME


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load and validate the YAML config file.

    Args:
        config_path: Path to the config file

    Returns:
        Parsed mapping (empty for an empty file)

    Raises:
        ConfigError: If the file cannot be read, is malformed YAML, or has
            the wrong shape
    """
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {config_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    packages = data.get("packages")
    if packages is not None and not isinstance(packages, list):
        raise ConfigError(f"'packages' in {config_path} must be a list")

    return data


def parse_packages(entries: list[Any], registry: ProbeRegistry) -> list[PackageSpec]:
    """Turn config package entries into PackageSpecs.

    Inline probes are registered into registry. Packages without an inline
    probe must already have one registered.

    Raises:
        ConfigError: For malformed entries or packages without a probe
    """
    packages = []
    for index, entry in enumerate(entries):
        context = f"packages[{index}]"
        if not isinstance(entry, dict):
            raise ConfigError(f"{context} must be a mapping")

        name = entry.get("name")
        pattern = entry.get("pattern")
        if not name or not isinstance(name, str):
            raise ConfigError(f"{context} needs a 'name'")
        if not pattern or not isinstance(pattern, str):
            raise ConfigError(f"{context} ({name}) needs a 'pattern'")

        probe = None
        if entry.get("probe") is not None:
            probe = probe_from_config(entry["probe"], context=f"{context}.probe")
            registry.register(name, probe)
        elif name not in registry:
            raise ConfigError(f"{context}: no version probe known for '{name}', add a 'probe' entry")

        packages.append(PackageSpec(name, pattern, probe))
    return packages


def _resolve_root(
    flag_value: Optional[str],
    config_value: Optional[str],
    env_name: str,
    query,
) -> Path:
    for candidate in (flag_value, config_value, os.environ.get(env_name)):
        if candidate:
            return Path(candidate).expanduser()
    return query()


def resolve_settings(
    package_manager: PackageManager,
    config_path: Optional[Path] = None,
    prefix: Optional[str] = None,
    cellar: Optional[str] = None,
) -> Settings:
    """Build Settings from flags, config file, environment and brew.

    Args:
        package_manager: Queried for prefix/Cellar only when nothing else
            provides them
        config_path: Explicit config file; must exist when given
        prefix: --prefix flag value
        cellar: --cellar flag value

    Returns:
        Resolved Settings

    Raises:
        ConfigError: If the config file is invalid or missing when explicit
        PackageManagerError: If brew has to be queried and fails
    """
    config: dict[str, Any] = {}
    if config_path is not None:
        config_path = Path(config_path).expanduser()
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
    else:
        candidate = default_config_path()
        if candidate.is_file():
            config_path = candidate

    if config_path is not None:
        logger.debug("Loading config from %s", config_path)
        config = load_config_file(config_path)

    registry = default_registry()
    if config.get("packages") is not None:
        packages = parse_packages(config["packages"], registry)
    else:
        packages = [PackageSpec(p.name, p.pattern) for p in BUILTIN_PACKAGES]

    prefix_path = _resolve_root(prefix, config.get("prefix"), ENV_PREFIX, package_manager.prefix)
    keg_root = _resolve_root(cellar, config.get("cellar"), ENV_CELLAR, package_manager.cellar)

    return Settings(
        bin_dir=prefix_path / "bin",
        keg_root=keg_root,
        packages=packages,
        registry=registry,
        config_path=config_path,
    )
