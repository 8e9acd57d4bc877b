"""Utility modules for common operations.

Modules:
    commands: Subprocess execution with captured output
    plist: Property list reading for bundle metadata
    constants: Timeouts, naming and environment variable names
    logging_config: Process-wide logging setup
    check_prerequisites: Homebrew and version probe input checks
"""

from .commands import (
    CommandResult,
    run_command,
)

from .plist import (
    read_plist,
    read_plist_value,
    PlistError,
)

from .logging_config import (
    resolve_level,
    setup_logging,
)

__all__ = [
    # commands
    'CommandResult',
    'run_command',
    # plist
    'read_plist',
    'read_plist_value',
    'PlistError',
    # logging_config
    'resolve_level',
    'setup_logging',
]
