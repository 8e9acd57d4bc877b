"""Version probes: one strategy per supported package.

Modules:
    base: Probe strategies (command + regex, command output, plist key)
        and the ProbeRegistry
    builtin: Probes for meld, virtualbox and openzfs
"""

from .base import (
    VersionProbe,
    CommandProbe,
    CommandRegexProbe,
    CommandOutputProbe,
    PlistKeyProbe,
    ProbeRegistry,
    probe_from_config,
)
from .builtin import (
    BUILTIN_PROBES,
    default_registry,
)

__all__ = [
    # base
    "VersionProbe",
    "CommandProbe",
    "CommandRegexProbe",
    "CommandOutputProbe",
    "PlistKeyProbe",
    "ProbeRegistry",
    "probe_from_config",
    # builtin
    "BUILTIN_PROBES",
    "default_registry",
]
