"""Centralized constants for brewrelink.

Provides standardized timeout values and default locations used throughout
the codebase. Centralizing these values makes them easier to tune and
ensures consistency.
"""

# =============================================================================
# SUBPROCESS TIMEOUTS (in seconds)
# =============================================================================

# Prerequisite and version checks
# Used for: meld --version, VBoxManage --version, brew --version
TIMEOUT_PREREQUISITE = 10

# Read-only package manager queries
# Used for: brew --prefix, brew --cellar, brew list --versions
TIMEOUT_PACKAGE_QUERY = 30

# Mutating package manager calls (brew uninstall, brew link) have no timeout:
# interrupting them halfway leaves the keg in an unknown state.
TIMEOUT_PACKAGE_MUTATION = None

# =============================================================================
# NAMING
# =============================================================================

# Suffix appended to the upstream name to build the keg name
KEG_SUFFIX = "-executables"

# Directory inside a versioned keg that receives the binaries
KEG_BIN_DIR = "bin"

# =============================================================================
# ENVIRONMENT
# =============================================================================

ENV_PREFIX = "HOMEBREW_PREFIX"
ENV_CELLAR = "HOMEBREW_CELLAR"
ENV_LOG_LEVEL = "BREWRELINK_LOG_LEVEL"
ENV_CONFIG = "BREWRELINK_CONFIG"

# Config file name looked up under $XDG_CONFIG_HOME/brewrelink/
CONFIG_FILENAME = "config.yaml"
