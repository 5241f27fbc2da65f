"""Directory access gate consulted before every directory listing.

In a sandboxed host the application may only read directories the user
explicitly granted. The scanners do not know how grants are obtained;
they only ask `is_accessible(path)` and treat a denial exactly like a
missing directory.
"""

import os
from typing import Iterable, Protocol


class DirectoryAccess(Protocol):
    """Collaborator deciding whether a directory may be read."""

    def is_accessible(self, path: str) -> bool:
        ...


class AllowAllAccess:
    """Unsandboxed access: every path may be read (OS permissions still apply)."""

    def is_accessible(self, path: str) -> bool:
        return True


class AuthorizedDirectories:
    """Access limited to a set of granted directory trees.

    A path is accessible when it equals one of the granted roots or lies
    beneath one. Roots may use '~'.

    Example:
        >>> access = AuthorizedDirectories(["/opt/homebrew", "~/.nvm/versions"])
        >>> access.is_accessible("/opt/homebrew/Cellar/node")
        True
        >>> access.is_accessible("/opt/homebrew-old")
        False
    """

    def __init__(self, roots: Iterable[str] = ()):
        self._roots: list[str] = []
        for root in roots:
            self.grant(root)

    @property
    def roots(self) -> list[str]:
        return list(self._roots)

    def grant(self, root: str) -> None:
        """Add a granted directory tree."""
        normalized = os.path.normpath(os.path.expanduser(root))
        if normalized not in self._roots:
            self._roots.append(normalized)

    def revoke(self, root: str) -> None:
        """Remove a granted directory tree."""
        normalized = os.path.normpath(os.path.expanduser(root))
        if normalized in self._roots:
            self._roots.remove(normalized)

    def is_accessible(self, path: str) -> bool:
        target = os.path.normpath(os.path.expanduser(path))
        for root in self._roots:
            if target == root or target.startswith(root.rstrip(os.sep) + os.sep):
                return True
        return False
