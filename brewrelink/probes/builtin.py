"""Version probes for the packages brewrelink supports out of the box.

    meld: ``meld --version`` prints ``meld 3.21.2``
    virtualbox: ``VBoxManage --version`` prints the bare version
        (e.g. ``7.0.14r161095``), used verbatim
    openzfs: the zfs kernel extension's Info.plist; the command line tools
        have no version flag
"""

from .base import CommandOutputProbe, CommandRegexProbe, PlistKeyProbe, ProbeRegistry

OPENZFS_PLIST = "/Library/Extensions/zfs.kext/Contents/Info.plist"
OPENZFS_VERSION_KEY = "CFBundleShortVersionString"


def meld_probe() -> CommandRegexProbe:
    return CommandRegexProbe(["meld", "--version"], r"^meld\s+(\S+)")


def virtualbox_probe() -> CommandOutputProbe:
    return CommandOutputProbe(["VBoxManage", "--version"])


def openzfs_probe() -> PlistKeyProbe:
    return PlistKeyProbe(OPENZFS_PLIST, OPENZFS_VERSION_KEY)


BUILTIN_PROBES = {
    "meld": meld_probe,
    "virtualbox": virtualbox_probe,
    "openzfs": openzfs_probe,
}


def default_registry() -> ProbeRegistry:
    """Return a registry holding the built-in probes."""
    registry = ProbeRegistry()
    for name, factory in BUILTIN_PROBES.items():
        registry.register(name, factory())
    return registry
