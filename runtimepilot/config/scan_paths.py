"""User-added scan paths for the built-in languages.

Built-in scan paths are fixed in code; users may add extra locations per
language (an SDK unpacked under ~/sdks, a second Homebrew prefix). They
are stored as a list of strings under CustomScanPaths_<identifier>.
"""

import logging
import os
import threading
from dataclasses import dataclass
from typing import Optional

from ..discovery.access import DirectoryAccess
from ..discovery.paths import PathResolver, PathSource, ScanPathSpec, built_in_scan_paths, expand_home
from ..utils.constants import CUSTOM_SCAN_PATHS_KEY_PREFIX
from ..utils.file_ops import list_directory
from .preferences import PreferenceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathStatus:
    """What a scan path currently looks like on disk.

    Attributes:
        exists: The directory (or, for wildcards, at least one match) exists
        is_accessible: Readable and allowed by the access gate
        version_count: Visible entries (wildcards: matching directories);
            None when it could not be counted
    """
    exists: bool
    is_accessible: bool
    version_count: Optional[int] = None


def normalize_scan_path(path: str) -> str:
    """Strip whitespace and trailing slashes ('/' itself is kept)."""
    normalized = path.strip()
    while len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


class ScanPathConfigManager:
    """Per-language user scan paths plus a path status cache.

    Args:
        preferences: Store for CustomScanPaths_<identifier>
        resolver: Wildcard resolver (carries the directory access gate)
    """

    def __init__(self, preferences: PreferenceStore, resolver: Optional[PathResolver] = None):
        self.preferences = preferences
        self.resolver = resolver or PathResolver()
        self._status_cache: dict[str, PathStatus] = {}
        self._lock = threading.Lock()

    @property
    def access(self) -> DirectoryAccess:
        return self.resolver.access

    @staticmethod
    def _key(identifier: str) -> str:
        return f"{CUSTOM_SCAN_PATHS_KEY_PREFIX}{identifier}"

    def custom_paths(self, identifier: str) -> list[str]:
        stored = self.preferences.get(self._key(identifier)) or []
        if not isinstance(stored, list):
            logger.warning("Ignoring malformed %s", self._key(identifier))
            return []
        return [str(p) for p in stored]

    def all_scan_paths(self, identifier: str) -> list[ScanPathSpec]:
        """Built-in scan paths followed by the user's own."""
        paths = built_in_scan_paths(identifier)
        for path in self.custom_paths(identifier):
            paths.append(ScanPathSpec(path, PathSource.CUSTOM, False, "Custom"))
        return paths

    def provider(self, identifier: str):
        """Callable returning all_scan_paths(identifier), for scanners."""
        return lambda: self.all_scan_paths(identifier)

    def add_custom_path(self, identifier: str, path: str) -> bool:
        """Add a user scan path.

        Rejected (returns False): empty paths, paths already added, and
        paths overlapping a built-in one (one containing the other).
        """
        normalized = normalize_scan_path(path)
        if not normalized:
            return False

        paths = self.custom_paths(identifier)
        if normalized in paths:
            logger.debug("%s: %s is already a scan path", identifier, normalized)
            return False

        expanded = expand_home(normalized)
        for spec in built_in_scan_paths(identifier):
            built_in = spec.expanded_path
            if expanded in built_in or built_in in expanded:
                logger.info("%s: %s overlaps built-in scan path %s", identifier, normalized, spec.path)
                return False

        paths.append(normalized)
        self.preferences.set(self._key(identifier), paths)
        logger.info("%s: added scan path %s", identifier, normalized)
        return True

    def remove_custom_path(self, identifier: str, path: str) -> bool:
        paths = self.custom_paths(identifier)
        if path not in paths:
            return False
        paths.remove(path)
        self.preferences.set(self._key(identifier), paths)
        with self._lock:
            self._status_cache.pop(path, None)
        logger.info("%s: removed scan path %s", identifier, path)
        return True

    def check_path_status(self, path: str) -> PathStatus:
        """Inspect a scan path; results are cached until clear_status_cache()."""
        with self._lock:
            cached = self._status_cache.get(path)
        if cached is not None:
            return cached

        status = self._inspect(path)
        with self._lock:
            self._status_cache[path] = status
        return status

    def clear_status_cache(self) -> None:
        with self._lock:
            self._status_cache.clear()

    def _readable(self, path: str) -> bool:
        return self.access.is_accessible(path) and os.access(path, os.R_OK)

    def _inspect(self, path: str) -> PathStatus:
        expanded = expand_home(path.strip())

        if "*" in expanded:
            matches = [m for m in self.resolver.resolve(expanded) if os.path.isdir(m)]
            if not matches:
                return PathStatus(exists=False, is_accessible=False, version_count=0)
            accessible = all(self._readable(m) for m in matches)
            return PathStatus(exists=True, is_accessible=accessible, version_count=len(matches))

        if not os.path.isdir(expanded):
            return PathStatus(exists=False, is_accessible=False)

        if not self._readable(expanded):
            return PathStatus(exists=True, is_accessible=False)

        entries = [e for e in list_directory(expanded) if not e.startswith(".")]
        return PathStatus(exists=True, is_accessible=True, version_count=len(entries))
