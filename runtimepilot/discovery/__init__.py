"""Discovery primitives shared by every scanner.

Modules:
    paths: Scan path specifications and wildcard resolution
    versions: Version extraction, source labels, numeric ordering
    access: Directory access gate
"""

from .access import (
    AllowAllAccess,
    AuthorizedDirectories,
    DirectoryAccess,
)
from .paths import (
    BUILT_IN_SCAN_PATHS,
    PathResolver,
    PathSource,
    ScanPathSpec,
    built_in_scan_paths,
    expand_home,
)
from .versions import (
    clean_brew_version,
    compare_versions,
    detect_source,
    extract_java_version,
    extract_version,
    read_java_release,
    version_key,
)

__all__ = [
    # access
    'AllowAllAccess',
    'AuthorizedDirectories',
    'DirectoryAccess',
    # paths
    'BUILT_IN_SCAN_PATHS',
    'PathResolver',
    'PathSource',
    'ScanPathSpec',
    'built_in_scan_paths',
    'expand_home',
    # versions
    'clean_brew_version',
    'compare_versions',
    'detect_source',
    'extract_java_version',
    'extract_version',
    'read_java_release',
    'version_key',
]
