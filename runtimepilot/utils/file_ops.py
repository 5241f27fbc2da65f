"""File operations used by the script writer and the preference store.

Writes are atomic from a reader's point of view: content goes to a
temporary file in the destination directory which is then renamed over
the target. A shell sourcing an env script concurrently either sees the
old file or the new one, never a truncated one.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional


def ensure_directory(path: Path, mode: Optional[int] = None) -> Path:
    """Create a directory (and parents) if it does not exist.

    Args:
        path: Directory to create
        mode: Optional permission mode for newly created directories

    Returns:
        The directory path

    Raises:
        OSError: If the directory cannot be created, or path exists as a file
    """
    if mode is None:
        path.mkdir(parents=True, exist_ok=True)
    else:
        path.mkdir(mode=mode, parents=True, exist_ok=True)
    if not path.is_dir():
        raise NotADirectoryError(f"Not a directory: {path}")
    return path


def atomic_write_text(target: Path, content: str, mode: int = 0o644) -> None:
    """Write text to target atomically.

    Args:
        target: Destination file
        content: Text to write (UTF-8)
        mode: Permission mode applied to the file before it is renamed

    Raises:
        OSError: If the temporary file cannot be written or renamed
    """
    fd, tmp_name = tempfile.mkstemp(
        dir=str(target.parent),
        prefix=f".{target.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def read_text_safe(path: Path) -> Optional[str]:
    """Read a UTF-8 text file, returning None if it is missing or unreadable."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def list_directory(path: str) -> list[str]:
    """List the entry names of a directory.

    Returns:
        Sorted entry names; empty if the directory is missing or unreadable
    """
    try:
        return sorted(os.listdir(path))
    except OSError:
        return []


def marker_exists(path: str) -> bool:
    """Check whether an install marker (file or directory) exists."""
    return os.path.exists(path)
