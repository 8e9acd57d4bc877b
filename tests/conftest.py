"""
Shared test fixtures and configuration.
"""

import stat
from pathlib import Path

import pytest

from brewrelink.errors import PackageManagerError, VersionProbeError
from brewrelink.package_manager import PackageManager
from brewrelink.probes import ProbeRegistry, VersionProbe
from brewrelink.utils.commands import CommandResult


class FakePackageManager(PackageManager):
    """Records calls instead of running brew."""

    def __init__(self, installed=(), link_fails=False, uninstall_fails=False,
                 prefix_path=None, cellar_path=None):
        self.installed = set(installed)
        self.link_fails = link_fails
        self.uninstall_fails = uninstall_fails
        self.prefix_path = prefix_path
        self.cellar_path = cellar_path
        self.calls: list[tuple[str, str]] = []

    def is_installed(self, name):
        self.calls.append(("is_installed", name))
        return name in self.installed

    def uninstall(self, name):
        self.calls.append(("uninstall", name))
        if self.uninstall_fails:
            return CommandResult(["brew", "uninstall", name], 1, stderr="Error: no such keg")
        self.installed.discard(name)
        return CommandResult(["brew", "uninstall", name], 0)

    def link(self, name):
        self.calls.append(("link", name))
        if self.link_fails:
            raise PackageManagerError(f"Linking {name} failed")
        self.installed.add(name)
        return CommandResult(["brew", "link", name], 0)

    def prefix(self):
        self.calls.append(("prefix", ""))
        if self.prefix_path is None:
            raise PackageManagerError("Homebrew not available")
        return Path(self.prefix_path)

    def cellar(self):
        self.calls.append(("cellar", ""))
        if self.cellar_path is None:
            raise PackageManagerError("Homebrew not available")
        return Path(self.cellar_path)

    def version(self):
        return "4.4.0"

    def call_names(self):
        return [name for name, _ in self.calls]


class StaticProbe(VersionProbe):
    """Probe returning a fixed version and counting calls."""

    def __init__(self, version):
        self.version = version
        self.calls = 0

    def probe(self, bin_dir):
        self.calls += 1
        return self.version

    def requirement(self, bin_dir):
        return Path(bin_dir)


class FailingProbe(VersionProbe):
    def __init__(self):
        self.calls = 0

    def probe(self, bin_dir):
        self.calls += 1
        raise VersionProbeError("probe exploded")

    def requirement(self, bin_dir):
        return Path(bin_dir) / "missing"


def make_executable(path: Path, script: str) -> Path:
    """Write a shell script and mark it executable."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + script + "\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def make_file(path: Path, content: str = "binary") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def prefix_dir(tmp_path: Path) -> Path:
    """Return a temporary Homebrew prefix with an empty bin directory."""
    prefix = tmp_path / "homebrew"
    (prefix / "bin").mkdir(parents=True)
    return prefix


@pytest.fixture
def bin_dir(prefix_dir: Path) -> Path:
    return prefix_dir / "bin"


@pytest.fixture
def cellar(tmp_path: Path) -> Path:
    cellar_dir = tmp_path / "Cellar"
    cellar_dir.mkdir()
    return cellar_dir


@pytest.fixture
def fake_brew() -> FakePackageManager:
    return FakePackageManager()


@pytest.fixture
def registry() -> ProbeRegistry:
    reg = ProbeRegistry()
    reg.register("virtualbox", StaticProbe("6.1.34"))
    reg.register("meld", StaticProbe("3.21.2"))
    return reg


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch):
    """Keep the user's Homebrew and brewrelink settings out of tests."""
    for name in ("HOMEBREW_PREFIX", "HOMEBREW_CELLAR", "BREWRELINK_CONFIG", "BREWRELINK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
