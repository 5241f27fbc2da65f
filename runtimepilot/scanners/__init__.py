"""Scanners producing VersionRecords for each language.

Modules:
    base: VersionRecord, discovery strategies, RuntimeScanner
    homebrew: Cellar path helpers
    java, node, python, go: Built-in language scanners
    custom: Config-driven scanner for user-defined languages
    manager: VersionManager (snapshot, background refresh, activation)

The language scanners and the manager are imported by module path
(runtimepilot.scanners.java, runtimepilot.scanners.manager).
"""

from .base import (
    DirectoryWalkStrategy,
    DiscoveryStrategy,
    RuntimeScanner,
    VersionRecord,
    any_directory,
    bin_marker,
    deduplicate,
    sort_records,
)
from .homebrew import (
    BrewInstalledVersion,
    is_homebrew_install,
    parse_cellar_path,
)

__all__ = [
    # base
    "DirectoryWalkStrategy",
    "DiscoveryStrategy",
    "RuntimeScanner",
    "VersionRecord",
    "any_directory",
    "bin_marker",
    "deduplicate",
    "sort_records",
    # homebrew
    "BrewInstalledVersion",
    "is_homebrew_install",
    "parse_cellar_path",
]
