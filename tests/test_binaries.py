"""
Tests for discovery of unlinked binaries.
"""

import os
import re

import pytest

from brewrelink.errors import FilesystemScanError
from brewrelink.scanners import compile_pattern, find_unlinked_binaries, path_matches

from conftest import make_file


class TestPathMatches:
    def test_basename_pattern(self, bin_dir):
        compiled = compile_pattern(r"v(irtual)?box.*")
        assert path_matches(bin_dir / "vbox", bin_dir, compiled)
        assert path_matches(bin_dir / "VirtualBoxManage", bin_dir, compiled)
        assert not path_matches(bin_dir / "meld", bin_dir, compiled)

    def test_whole_component_must_match(self, bin_dir):
        compiled = compile_pattern("meld")
        assert path_matches(bin_dir / "meld", bin_dir, compiled)
        assert not path_matches(bin_dir / "meld-helper", bin_dir, compiled)
        assert not path_matches(bin_dir / "xmeld", bin_dir, compiled)

    def test_full_path_pattern(self, bin_dir):
        compiled = compile_pattern(re.escape(str(bin_dir)) + "/meld")
        assert path_matches(bin_dir / "meld", bin_dir, compiled)
        assert not path_matches(bin_dir / "sub" / "meld2", bin_dir, compiled)

    def test_nested_component(self, bin_dir):
        compiled = compile_pattern("tools/zfs")
        assert path_matches(bin_dir / "tools" / "zfs", bin_dir, compiled)
        assert path_matches(bin_dir / "extra" / "tools" / "zfs", bin_dir, compiled)

    def test_files_below_matching_directory_match(self, bin_dir):
        compiled = compile_pattern(r"v(irtual)?box.*")
        assert path_matches(bin_dir / "vbox-dir" / "anything", bin_dir, compiled)
        assert not path_matches(bin_dir / "other-dir" / "anything", bin_dir, compiled)

    def test_prefix_directories_are_not_matched(self, tmp_path):
        bin_dir = tmp_path / "vboxstuff" / "bin"
        compiled = compile_pattern(r"v(irtual)?box.*")
        assert not path_matches(bin_dir / "meld", bin_dir, compiled)

    def test_invalid_pattern(self):
        with pytest.raises(FilesystemScanError, match="Invalid search pattern"):
            compile_pattern("v(irtual")


class TestFindUnlinkedBinaries:
    def test_case_insensitive(self, bin_dir):
        make_file(bin_dir / "VBoxManage")
        make_file(bin_dir / "vboxheadless")
        assert find_unlinked_binaries(bin_dir, "vbox.*") == [
            bin_dir / "VBoxManage",
            bin_dir / "vboxheadless",
        ]

    def test_skips_symlinks(self, bin_dir, tmp_path):
        target = make_file(tmp_path / "Cellar" / "x" / "vbox")
        make_file(bin_dir / "vbox")
        os.symlink(target, bin_dir / "vboxlink")

        assert find_unlinked_binaries(bin_dir, r"v(irtual)?box.*") == [bin_dir / "vbox"]

    def test_skips_broken_symlinks(self, bin_dir):
        os.symlink(bin_dir / "nowhere", bin_dir / "vbox")
        assert find_unlinked_binaries(bin_dir, "vbox") == []

    def test_does_not_descend_symlinked_directories(self, bin_dir, tmp_path):
        outside = tmp_path / "outside"
        make_file(outside / "vbox")
        os.symlink(outside, bin_dir / "linked-dir")

        assert find_unlinked_binaries(bin_dir, ".*vbox") == []

    def test_recurses_into_real_directories(self, bin_dir):
        make_file(bin_dir / "nested" / "deeper" / "zpool")
        make_file(bin_dir / "zfs")

        assert find_unlinked_binaries(bin_dir, "zfs|zpool") == [
            bin_dir / "nested" / "deeper" / "zpool",
            bin_dir / "zfs",
        ]

    def test_directories_are_not_candidates(self, bin_dir):
        (bin_dir / "vbox-dir").mkdir()
        assert find_unlinked_binaries(bin_dir, "vbox.*") == []

    def test_no_matches(self, bin_dir):
        make_file(bin_dir / "git")
        assert find_unlinked_binaries(bin_dir, "meld") == []

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FilesystemScanError, match="not found"):
            find_unlinked_binaries(tmp_path / "missing", "meld")

    def test_symlinked_bin_dir_is_rejected(self, bin_dir, tmp_path):
        link = tmp_path / "bin-link"
        os.symlink(bin_dir, link)
        with pytest.raises(FilesystemScanError):
            find_unlinked_binaries(link, "meld")

    @pytest.mark.skipif(os.geteuid() == 0, reason="root can read any directory")
    def test_unreadable_subdirectory(self, bin_dir):
        locked = bin_dir / "locked"
        make_file(locked / "meld")
        locked.chmod(0o000)
        try:
            with pytest.raises(FilesystemScanError, match="Could not read"):
                find_unlinked_binaries(bin_dir, "meld")
        finally:
            locked.chmod(0o755)
