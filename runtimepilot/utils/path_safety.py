"""Path safety utilities for identifiers and generated script names.

Language identifiers and script file names are user-supplied (custom
languages) and end up as file names inside the config directory. They
are validated so a crafted value like "../../.zshrc" can never make the
script writer touch a file outside that directory.
"""

import os
import re
from pathlib import Path
from typing import Union


class PathTraversalError(ValueError):
    """Raised when a joined path would escape its base directory."""
    pass


class InvalidIdentifierError(ValueError):
    """Raised when a language identifier or script file name is unusable."""
    pass


_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.+-]*$")


def validate_identifier(identifier: str) -> str:
    """Validate a language identifier.

    Identifiers start with a letter or digit and contain only letters,
    digits, '_', '.', '+' and '-'. They must not be '.' or '..'.

    Args:
        identifier: Candidate identifier

    Returns:
        The identifier unchanged

    Raises:
        InvalidIdentifierError: If the identifier is empty or malformed

    Examples:
        >>> validate_identifier("ruby")
        'ruby'
    """
    if not identifier or not _IDENTIFIER_RE.match(identifier) or ".." in identifier:
        raise InvalidIdentifierError(f"Invalid language identifier: {identifier!r}")
    return identifier


def validate_script_file_name(file_name: str) -> str:
    """Validate a generated script file name.

    A script file name is a single path component: no separators, not
    hidden, no traversal.

    Raises:
        InvalidIdentifierError: If the name is not a plain file name
    """
    if (
        not file_name
        or file_name.startswith(".")
        or "/" in file_name
        or os.sep in file_name
        or file_name != os.path.basename(file_name)
    ):
        raise InvalidIdentifierError(f"Invalid script file name: {file_name!r}")
    return file_name


def safe_join(base: Path, relative: Union[str, Path]) -> Path:
    """Join paths with traversal protection.

    Args:
        base: The base directory
        relative: The relative path to join

    Returns:
        The joined path (base is not resolved, symlinked config dirs stay as-is)

    Raises:
        PathTraversalError: If the joined path escapes base
    """
    rel = Path(relative)
    if rel.is_absolute() or ".." in rel.parts:
        raise PathTraversalError(f"Path escapes {base}: {relative}")

    joined = base / rel
    try:
        joined.resolve().relative_to(base.resolve())
    except ValueError:
        raise PathTraversalError(f"Path escapes {base}: {relative}")
    return joined


def normalize_path(path: str) -> str:
    """Normalize a filesystem path for identity comparisons.

    Expands a leading '~', collapses redundant separators and '.'
    components, and drops any trailing slash. Symlinks are not resolved:
    two different links to the same JDK are reported separately, the
    way the shell would see them.

    Examples:
        >>> normalize_path("/opt/homebrew/Cellar/node/20.11.0/")
        '/opt/homebrew/Cellar/node/20.11.0'
    """
    stripped = path.strip()
    if not stripped:
        return stripped
    return os.path.normpath(os.path.expanduser(stripped))
