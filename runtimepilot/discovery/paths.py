"""Scan path specifications and wildcard path resolution.

A scan path is a configured location searched for runtime installs. It
may start with '~' and may contain one '*' wildcard segment:

    ~/.nvm/versions/node                literal, home-relative
    /opt/homebrew/Cellar/node*          Homebrew formulae node, node@18, ...
    ~/sdks/jdk*/Contents/Home           generic prefix match plus a suffix

Resolution lists directories but never checks whether a literal path
exists; that is the scanner's job.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Union

from ..utils.constants import CELLAR_ROOTS
from ..utils.file_ops import list_directory
from .access import AllowAllAccess, DirectoryAccess

logger = logging.getLogger(__name__)


class PathSource(str, Enum):
    """Where a scan path comes from."""

    HOMEBREW = "homebrew"
    PYENV = "pyenv"
    NVM = "nvm"
    GVM = "gvm"
    ASDF = "asdf"
    RBENV = "rbenv"
    RVM = "rvm"
    RUSTUP = "rustup"
    JAVA_HOME = "java_home"
    SYSTEM = "system"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        return _SOURCE_DISPLAY_NAMES[self]


_SOURCE_DISPLAY_NAMES = {
    PathSource.HOMEBREW: "Homebrew",
    PathSource.PYENV: "pyenv",
    PathSource.NVM: "nvm",
    PathSource.GVM: "gvm",
    PathSource.ASDF: "asdf",
    PathSource.RBENV: "rbenv",
    PathSource.RVM: "RVM",
    PathSource.RUSTUP: "rustup",
    PathSource.JAVA_HOME: "Java Home",
    PathSource.SYSTEM: "System",
    PathSource.CUSTOM: "Custom",
}


def expand_home(path: str) -> str:
    """Expand a leading '~' to the user's home directory."""
    if path.startswith("~"):
        return os.path.expanduser(path)
    return path


@dataclass(frozen=True)
class ScanPathSpec:
    """A configured scan path.

    Attributes:
        path: Raw path as configured (may contain '~' or '*')
        source: Provenance tag
        is_built_in: True for paths shipped in code, False for user-added ones
        display_name: Label shown next to the path (defaults to the source name)
    """
    path: str
    source: PathSource = PathSource.CUSTOM
    is_built_in: bool = True
    display_name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.display_name or self.source.display_name

    @property
    def expanded_path(self) -> str:
        return expand_home(self.path)

    @property
    def is_wildcard(self) -> bool:
        return "*" in self.path


def _homebrew(path: str, arch: str) -> ScanPathSpec:
    return ScanPathSpec(path, PathSource.HOMEBREW, True, f"Homebrew ({arch})")


BUILT_IN_SCAN_PATHS: dict[str, tuple[ScanPathSpec, ...]] = {
    "python": (
        _homebrew("/opt/homebrew/Cellar/python*", "Apple Silicon"),
        _homebrew("/usr/local/Cellar/python*", "Intel"),
        ScanPathSpec("~/.pyenv/versions", PathSource.PYENV),
        ScanPathSpec("~/.asdf/installs/python", PathSource.ASDF),
    ),
    "go": (
        _homebrew("/opt/homebrew/Cellar/go*", "Apple Silicon"),
        _homebrew("/usr/local/Cellar/go*", "Intel"),
        ScanPathSpec("~/.gvm/gos", PathSource.GVM),
        ScanPathSpec("~/.asdf/installs/golang", PathSource.ASDF),
    ),
    "node": (
        _homebrew("/opt/homebrew/Cellar/node*", "Apple Silicon"),
        _homebrew("/usr/local/Cellar/node*", "Intel"),
        ScanPathSpec("~/.nvm/versions/node", PathSource.NVM),
    ),
    "java": (
        ScanPathSpec("/Library/Java/JavaVirtualMachines", PathSource.JAVA_HOME, True, "System JDK"),
        _homebrew("/opt/homebrew/Cellar/openjdk*", "Apple Silicon"),
        _homebrew("/usr/local/Cellar/openjdk*", "Intel"),
    ),
}


def built_in_scan_paths(language_id: str) -> list[ScanPathSpec]:
    """Return the built-in scan paths for a language (empty for custom ones)."""
    return list(BUILT_IN_SCAN_PATHS.get(language_id, ()))


class PathResolver:
    """Expand scan path specifications into concrete directories.

    Only one '*' per path segment is understood, and only as a trailing
    "prefix*" match. Under a Homebrew Cellar root the match is stricter:
    an entry must equal the prefix or start with "<prefix>@", so
    `Cellar/go*` finds `go` and `go@1.21` but not `gobject-introspection`.

    Args:
        access: Directory access gate consulted before each listing
        cellar_roots: Directories treated as Homebrew cellars. Any directory
            named "Cellar" is treated as one as well.
    """

    def __init__(
        self,
        access: Optional[DirectoryAccess] = None,
        cellar_roots: Iterable[str] = CELLAR_ROOTS,
    ):
        self.access = access or AllowAllAccess()
        self.cellar_roots = {os.path.normpath(root) for root in cellar_roots}

    def resolve(self, spec: Union[ScanPathSpec, str]) -> list[str]:
        """Resolve a scan path into zero or more absolute paths.

        Args:
            spec: Scan path specification or raw path string

        Returns:
            Literal paths as a single-element list; wildcard matches sorted,
            or an empty list if nothing could be listed
        """
        raw = spec.path if isinstance(spec, ScanPathSpec) else spec
        expanded = expand_home(raw.strip())
        if not expanded:
            return []
        if "*" not in expanded:
            return [expanded]
        return self._resolve_wildcard(expanded)

    def is_cellar_root(self, path: str) -> bool:
        normalized = os.path.normpath(path)
        return normalized in self.cellar_roots or os.path.basename(normalized) == "Cellar"

    def _resolve_wildcard(self, path: str) -> list[str]:
        parts = path.split("/")
        index = next(i for i, part in enumerate(parts) if "*" in part)

        parent = "/".join(parts[:index]) or ("/" if path.startswith("/") else ".")
        prefix = parts[index].replace("*", "")
        remainder = [part for part in parts[index + 1:] if part]

        if not self.access.is_accessible(parent):
            logger.debug("Access denied for %s", parent)
            return []

        entries = list_directory(parent)
        if not entries:
            return []

        cellar = self.is_cellar_root(parent)
        matches = []
        for entry in entries:
            if entry.startswith("."):
                continue
            if cellar:
                if entry != prefix and not entry.startswith(f"{prefix}@"):
                    continue
            elif not entry.startswith(prefix):
                continue

            candidate = os.path.join(parent, entry)
            if os.path.isdir(candidate):
                matches.append(candidate)

        if not remainder:
            return matches

        resolved: list[str] = []
        for match in matches:
            joined = os.path.join(match, *remainder)
            if "*" in joined:
                resolved.extend(self._resolve_wildcard(joined))
            else:
                resolved.append(joined)
        return sorted(resolved)
