"""Utility modules for common operations.

Modules:
    constants: Timeouts, config directory, preference keys
    subprocess_utils: Safe command execution with timeouts
    plist: Property list parsing (java_home -X output)
    path_safety: Identifier and script file name validation
    file_ops: Atomic writes and directory helpers
    check_prerequisites: External tool detection
"""

from .plist import (
    parse_plist,
    parse_plist_safe,
    records_from_plist,
    PlistError,
)

from .file_ops import (
    atomic_write_text,
    ensure_directory,
    list_directory,
    marker_exists,
    read_text_safe,
)

from .path_safety import (
    InvalidIdentifierError,
    PathTraversalError,
    normalize_path,
    safe_join,
    validate_identifier,
    validate_script_file_name,
)

from .subprocess_utils import (
    run_command,
)

__all__ = [
    # plist
    'parse_plist',
    'parse_plist_safe',
    'records_from_plist',
    'PlistError',
    # file_ops
    'atomic_write_text',
    'ensure_directory',
    'list_directory',
    'marker_exists',
    'read_text_safe',
    # path_safety
    'InvalidIdentifierError',
    'PathTraversalError',
    'normalize_path',
    'safe_join',
    'validate_identifier',
    'validate_script_file_name',
    # subprocess_utils
    'run_command',
]
