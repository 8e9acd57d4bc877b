"""Scanner for unmanaged binaries in the Homebrew bin directory.

Homebrew exposes everything it manages as symbolic links into the Cellar.
Any regular file sitting in the bin directory was therefore put there by
something else (an installer package, a drag-and-drop app helper, ...) and
is a candidate for relocation.

Patterns follow GNU ``find -iregex`` semantics: case-insensitive, matched
against the whole path. A pattern may also start at any path component below
the bin directory, so ``meld`` selects ``/opt/homebrew/bin/meld`` without
spelling out the prefix.
"""

import logging
import os
import re
from pathlib import Path

from brewrelink.errors import FilesystemScanError

logger = logging.getLogger(__name__)


def compile_pattern(pattern: str) -> re.Pattern:
    """Compile a search pattern for case-insensitive matching.

    Raises:
        FilesystemScanError: If the pattern is not a valid regular expression
    """
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise FilesystemScanError(f"Invalid search pattern {pattern!r}: {e}")


def path_matches(path: Path, bin_dir: Path, compiled: re.Pattern) -> bool:
    """Check whether path matches as a whole or from a component below bin_dir.

    For ``/opt/homebrew/bin/sub/vbox`` the candidates are the full path,
    ``sub/vbox`` and ``vbox``.

    Nested files therefore match on their sub-paths too: under
    ``v(irtual)?box.*`` every file below ``bin/vbox-dir/`` matches through
    ``vbox-dir/<name>``, whatever its own name. The relocator moves such
    files flat into the keg's ``bin`` directory by base name.
    """
    if compiled.fullmatch(str(path)):
        return True

    parts = path.relative_to(bin_dir).parts
    for start in range(len(parts)):
        if compiled.fullmatch("/".join(parts[start:])):
            return True
    return False


def find_unlinked_binaries(bin_dir: Path, pattern: str) -> list[Path]:
    """Find regular files under bin_dir whose path matches pattern.

    Symbolic links are never returned and never followed, so a symlinked
    directory is not descended either. Directories are walked but are not
    candidates themselves.

    Args:
        bin_dir: Directory to scan (e.g. /opt/homebrew/bin)
        pattern: Search pattern, see compile_pattern()

    Returns:
        Sorted list of matching file paths

    Raises:
        FilesystemScanError: If bin_dir is missing or cannot be read
    """
    compiled = compile_pattern(pattern)
    bin_dir = Path(bin_dir)

    if bin_dir.is_symlink() or not bin_dir.is_dir():
        raise FilesystemScanError(f"Binary directory not found: {bin_dir}")

    def _on_error(error: OSError) -> None:
        raise FilesystemScanError(f"Could not read {error.filename}: {error.strerror}")

    matches = []
    for root, dirs, files in os.walk(bin_dir, onerror=_on_error, followlinks=False):
        root_path = Path(root)

        # os.walk lists symlinked directories in dirs but, with followlinks
        # off, never enters them; they are still links and never candidates.
        for name in files:
            path = root_path / name
            if path.is_symlink():
                continue
            if path_matches(path, bin_dir, compiled):
                matches.append(path)

    matches.sort()
    logger.debug("Found %d unlinked file(s) matching %r in %s", len(matches), pattern, bin_dir)
    return matches
