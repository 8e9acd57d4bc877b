"""
Tests for the Homebrew wrapper, using a shell script standing in for brew.
"""

from pathlib import Path

import pytest

from brewrelink.errors import PackageManagerError
from brewrelink.package_manager import Homebrew
from brewrelink.utils.commands import run_command

from conftest import make_executable

FAKE_BREW = """
echo "$@" >> "$(dirname "$0")/calls.log"
case "$1" in
  --prefix) echo /opt/homebrew ;;
  --cellar) echo /opt/homebrew/Cellar ;;
  --version) echo "Homebrew 4.4.0"; echo "Homebrew/homebrew-core (git revision abc)" ;;
  list)
    if [ "$3" = "meld-executables" ]; then echo "meld-executables 3.21.2"; else exit 1; fi ;;
  uninstall)
    if [ "$2" = "broken-executables" ]; then echo "Error: keg is busy" >&2; exit 1; fi ;;
  link)
    if [ "$2" = "broken-executables" ]; then echo "Error: Could not symlink bin/x" >&2; exit 1; fi
    echo "Linking /opt/homebrew/Cellar/$2... 2 symlinks created." ;;
esac
"""


@pytest.fixture
def brew(tmp_path: Path) -> Homebrew:
    script = make_executable(tmp_path / "fakebrew" / "brew", FAKE_BREW)
    return Homebrew(brew=str(script))


def calls(brew: Homebrew) -> list[str]:
    log = Path(brew.brew).parent / "calls.log"
    return log.read_text().splitlines() if log.exists() else []


class TestHomebrew:
    def test_prefix_and_cellar(self, brew):
        assert brew.prefix() == Path("/opt/homebrew")
        assert brew.cellar() == Path("/opt/homebrew/Cellar")

    def test_version(self, brew):
        assert brew.version() == "4.4.0"

    def test_is_installed(self, brew):
        assert brew.is_installed("meld-executables")
        assert not brew.is_installed("virtualbox-executables")
        assert calls(brew)[-1] == "list --versions virtualbox-executables"

    def test_uninstall_reports_failure_without_raising(self, brew):
        assert brew.uninstall("meld-executables").ok
        outcome = brew.uninstall("broken-executables")
        assert not outcome.ok
        assert "keg is busy" in outcome.describe()

    def test_link(self, brew):
        assert brew.link("meld-executables").ok
        assert calls(brew)[-1] == "link meld-executables"

    def test_link_failure_raises(self, brew):
        with pytest.raises(PackageManagerError, match="Could not symlink"):
            brew.link("broken-executables")

    def test_missing_brew(self, tmp_path):
        brew = Homebrew(brew=str(tmp_path / "no-such-brew"))
        with pytest.raises(PackageManagerError, match="Homebrew not available"):
            brew.prefix()

    def test_empty_prefix_output(self, tmp_path):
        script = make_executable(tmp_path / "brew", "exit 0")
        with pytest.raises(PackageManagerError, match="Could not determine"):
            Homebrew(brew=str(script)).prefix()


class TestRunCommand:
    def test_captures_output(self):
        result = run_command(["sh", "-c", "echo out; echo err >&2; exit 2"])
        assert result.returncode == 2
        assert result.stdout == "out\n"
        assert result.stderr == "err\n"
        assert not result.ok

    def test_not_found(self, tmp_path):
        result = run_command([str(tmp_path / "missing")])
        assert result.not_found
        assert "command not found" in result.stderr

    def test_timeout(self):
        result = run_command(["sleep", "5"], timeout=1)
        assert result.returncode == 124
        assert "timed out" in result.describe()

    def test_arguments_are_stringified(self, tmp_path):
        result = run_command(["echo", tmp_path])
        assert result.stdout.strip() == str(tmp_path)
