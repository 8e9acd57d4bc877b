"""Scanner modules for finding binaries Homebrew does not manage.

Modules:
    binaries: Walk the Homebrew bin directory for non-symlink files
        matching a search pattern
"""

from .binaries import (
    compile_pattern,
    find_unlinked_binaries,
    path_matches,
)

__all__ = [
    "compile_pattern",
    "find_unlinked_binaries",
    "path_matches",
]
