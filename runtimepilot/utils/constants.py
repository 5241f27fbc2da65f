"""Centralized constants for RuntimePilot.

Provides timeout values, the per-user config directory and the key
prefixes used in the preference store. Centralizing these values makes
them easier to tune and keeps every scanner consistent.
"""

import os
from pathlib import Path

# =============================================================================
# SUBPROCESS TIMEOUTS (in seconds)
# =============================================================================

# Runtime introspection commands that should return almost instantly
# Used for: go version, go env GOROOT, python3 --version, which
TIMEOUT_COMMAND = 5

# JDK enumeration can be slower on machines with many JVMs installed
# Used for: /usr/libexec/java_home -X
TIMEOUT_JAVA_HOME = 10

# Prerequisite and version checks
# Used for: brew --version
TIMEOUT_PREREQUISITE = 10

# =============================================================================
# CONFIG DIRECTORY
# =============================================================================

# Environment variable that relocates the config directory (tests, sandboxes)
CONFIG_DIR_ENV = "RUNTIMEPILOT_CONFIG_DIR"

# Shell scripts and preferences live here; shells source <identifier>_env.sh
DEFAULT_CONFIG_DIR = Path("~/.config/devmanager")

PREFERENCES_FILE_NAME = "preferences.yaml"

ENV_SCRIPT_SUFFIX = "_env.sh"

# =============================================================================
# PREFERENCE KEYS
# =============================================================================

ACTIVE_VERSION_KEY_PREFIX = "ActiveVersion_"
CUSTOM_SCAN_PATHS_KEY_PREFIX = "CustomScanPaths_"
CUSTOM_LANGUAGES_KEY = "CustomLanguages"
MIGRATED_KEY = "HasMigratedBuiltInLanguages"
MIGRATION_VERSION_KEY = "MigrationVersion"
CURRENT_MIGRATION_VERSION = "2.0"

# =============================================================================
# HOMEBREW
# =============================================================================

# Apple Silicon first, then Intel
CELLAR_ROOTS = ("/opt/homebrew/Cellar", "/usr/local/Cellar")

BREW_CANDIDATES = ("/opt/homebrew/bin/brew", "/usr/local/bin/brew")

JAVA_HOME_TOOL = "/usr/libexec/java_home"

# =============================================================================
# LANGUAGES
# =============================================================================

# Custom languages are ordered after the built-ins
CUSTOM_ORDER_START = 100

# =============================================================================
# PERMISSION MODES
# =============================================================================

# Generated scripts must be readable by the user's shell
SCRIPT_FILE_MODE = 0o644

# Preferences may carry local paths only the owner should see
PREFERENCES_FILE_MODE = 0o600

DIR_MODE = 0o755


def get_config_dir() -> Path:
    """Return the directory that holds generated scripts and preferences.

    Honors $RUNTIMEPILOT_CONFIG_DIR when set, otherwise ~/.config/devmanager.

    Returns:
        Absolute path to the config directory (may not exist yet)
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_DIR.expanduser()
