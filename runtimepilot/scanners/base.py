"""Version records, discovery strategies and the per-language scanner.

A RuntimeScanner composes discovery strategies in priority order:

    metadata command   java_home -X (Java)
    external command   `go version` / `python3 --version` (system installs)
    directory walk     every resolved scan path (all languages)

Results are merged by normalized install path, first report wins, so a
command that knows the exact version beats a guess from a directory name.
"""

import logging
import os
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from ..discovery.access import AllowAllAccess, DirectoryAccess
from ..discovery.paths import PathResolver, ScanPathSpec
from ..discovery.versions import clean_brew_version, detect_source, extract_version, version_key
from ..utils.file_ops import list_directory, marker_exists
from ..utils.path_safety import normalize_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionRecord:
    """One discovered runtime installation.

    Attributes:
        version: Freeform version string ("20.11.0", "17.0.2", "1.22")
        source: Display label ("Homebrew (node@20)", "NVM", "System JDK")
        install_path: Runtime home/root; contains the runtime's executable
        strategy: Name of the discovery strategy that reported it
        id: Opaque identifier, stable for the lifetime of this object only
    """
    version: str
    source: str
    install_path: str
    strategy: str = "directory"
    id: str = field(default_factory=lambda: uuid.uuid4().hex, compare=False)

    @property
    def key(self) -> str:
        """Identity used for de-duplication and active-version matching."""
        return normalize_path(self.install_path)

    @property
    def bin_path(self) -> str:
        return os.path.join(self.install_path, "bin")

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "source": self.source,
            "install_path": self.install_path,
            "strategy": self.strategy,
        }


def sort_records(records: Iterable[VersionRecord]) -> list[VersionRecord]:
    """Sort by descending numeric version, then source and path for stability."""
    ordered = sorted(records, key=lambda r: (r.source, r.install_path))
    return sorted(ordered, key=lambda r: version_key(r.version), reverse=True)


def deduplicate(records: Iterable[VersionRecord]) -> list[VersionRecord]:
    """Keep the first record reported for each normalized install path."""
    seen: set[str] = set()
    unique = []
    for record in records:
        if record.key in seen:
            continue
        seen.add(record.key)
        unique.append(record)
    return unique


class DiscoveryStrategy:
    """A way of finding installs. Subclasses implement discover()."""

    name = "strategy"

    def discover(self) -> list[VersionRecord]:
        raise NotImplementedError


# Given a candidate directory, return the runtime root inside it (or None)
InstallLocator = Callable[[str], Optional[str]]


def bin_marker(*executables: str) -> InstallLocator:
    """Locator accepting a directory whose bin/ holds one of the executables."""
    def locate(candidate: str) -> Optional[str]:
        for executable in executables:
            if marker_exists(os.path.join(candidate, "bin", executable)):
                return candidate
        return None
    return locate


def any_directory(candidate: str) -> Optional[str]:
    """Locator accepting every directory (custom languages without an executable)."""
    return candidate


def default_version(entry_name: str, install_path: str) -> str:
    """Version from the scanned entry's name, Homebrew revision suffix removed."""
    return extract_version(clean_brew_version(entry_name))


class DirectoryWalkStrategy(DiscoveryStrategy):
    """Walk every resolved scan path and accept directories holding a runtime.

    Args:
        scan_paths: Callable returning the scan paths to walk; evaluated on
            every discover() call so edits to the configuration apply
        locate: Maps a candidate directory to its runtime root, or None
        resolver: Wildcard path resolver
        access: Directory access gate (denied == not found)
        version_for: Maps (entry name, install path) to a version string
        label_for: Maps an install path to its source label
        accept_root: Also test each resolved scan path itself as an install
    """

    name = "directory"

    def __init__(
        self,
        scan_paths: Callable[[], Iterable[ScanPathSpec]],
        locate: InstallLocator,
        resolver: Optional[PathResolver] = None,
        access: Optional[DirectoryAccess] = None,
        version_for: Callable[[str, str], str] = default_version,
        label_for: Callable[[str], str] = detect_source,
        accept_root: bool = False,
    ):
        self.scan_paths = scan_paths
        self.locate = locate
        self.access = access or (resolver.access if resolver else AllowAllAccess())
        self.resolver = resolver or PathResolver(access=self.access)
        self.version_for = version_for
        self.label_for = label_for
        self.accept_root = accept_root

    def discover(self) -> list[VersionRecord]:
        records: list[VersionRecord] = []
        for spec in self.scan_paths():
            for root in self.resolver.resolve(spec):
                records.extend(self._scan_root(root))
        return records

    def _scan_root(self, root: str) -> list[VersionRecord]:
        if not self.access.is_accessible(root):
            logger.debug("Skipping %s: access denied", root)
            return []
        if not os.path.isdir(root):
            logger.debug("Skipping %s: not a directory", root)
            return []

        if self.accept_root:
            install = self.locate(root)
            if install:
                return [self._record(os.path.basename(root), install)]

        records = []
        for entry in list_directory(root):
            if entry.startswith("."):
                continue
            candidate = os.path.join(root, entry)
            if not os.path.isdir(candidate):
                continue
            try:
                install = self.locate(candidate)
            except OSError as e:
                logger.debug("Could not inspect %s: %s", candidate, e)
                continue
            if install:
                records.append(self._record(entry, install))
        return records

    def _record(self, entry_name: str, install_path: str) -> VersionRecord:
        return VersionRecord(
            version=self.version_for(entry_name, install_path),
            source=self.label_for(install_path),
            install_path=install_path,
            strategy=self.name,
        )


class RuntimeScanner:
    """Discover the installed versions of one language.

    scan() is synchronous and keeps no state between calls; callers run
    it off the interactive thread (see VersionManager).

    Args:
        language_id: Identifier of the language being scanned
        strategies: Discovery strategies, highest priority first
    """

    def __init__(self, language_id: str, strategies: Iterable[DiscoveryStrategy]):
        self.language_id = language_id
        self.strategies = list(strategies)

    def scan(self) -> list[VersionRecord]:
        """Run every strategy and return de-duplicated, sorted records.

        A failing strategy is logged and contributes nothing; the scan
        itself never raises.
        """
        found: list[VersionRecord] = []
        for strategy in self.strategies:
            try:
                records = strategy.discover()
            except Exception:
                logger.exception("%s: %s discovery failed", self.language_id, strategy.name)
                continue
            logger.debug("%s: %s found %d install(s)", self.language_id, strategy.name, len(records))
            found.extend(records)

        return sort_records(deduplicate(found))
