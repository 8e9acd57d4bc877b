"""Property list reading for bundle metadata.

macOS bundles describe themselves in ``Contents/Info.plist``. The file may
be stored as XML or in the binary format; ``plistlib`` reads both.
"""

import plistlib
from pathlib import Path
from typing import Any


class PlistError(Exception):
    """Raised when plist operations fail."""
    pass


def read_plist(file_path: Path) -> dict[str, Any]:
    """Read a plist file and return its contents as a dictionary.

    Handles both binary and XML plist formats.

    Args:
        file_path: Path to the plist file

    Returns:
        Dictionary with plist contents

    Raises:
        PlistError: If file cannot be read or parsed
    """
    try:
        with open(file_path, 'rb') as f:
            data = plistlib.load(f)
    except plistlib.InvalidFileException as e:
        raise PlistError(f"Invalid plist format: {e}")
    except OSError as e:
        raise PlistError(f"Could not read plist: {e}")
    except Exception as e:
        # plistlib surfaces malformed XML as ExpatError/ValueError
        raise PlistError(f"Could not parse plist: {e}")

    if not isinstance(data, dict):
        raise PlistError(f"Top-level plist object is {type(data).__name__}, expected dict")
    return data


def read_plist_value(file_path: Path, key: str) -> Any:
    """Read a single value from a plist file.

    Dotted keys descend into nested dictionaries. At each level a key that
    exists verbatim wins over splitting it at the first dot, so bundle
    identifiers such as ``com.apple.kpi.bsd`` stay addressable.

    Args:
        file_path: Path to the plist file
        key: Top-level key, or dotted path into nested dictionaries

    Returns:
        The stored value

    Raises:
        PlistError: If the file cannot be read or the key is missing
    """
    node: Any = read_plist(file_path)
    remaining = key
    while remaining:
        if not isinstance(node, dict):
            raise PlistError(f"Key '{key}' not found in {file_path}")
        if remaining in node:
            return node[remaining]
        head, sep, tail = remaining.partition(".")
        if not sep or head not in node:
            raise PlistError(f"Key '{key}' not found in {file_path}")
        node, remaining = node[head], tail
    raise PlistError(f"Key '{key}' not found in {file_path}")
