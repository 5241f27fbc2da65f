"""VersionManager: one language's scan results and active version.

Scans run on a shared thread pool. Each refresh publishes a complete
new snapshot, replacing the previous one in a single assignment, so a
reader never sees a mix of two scans. When refreshes overlap, a result
older than the one already published is dropped.

Subscribers are called with the new snapshot on the thread that
finished the scan; UI layers hop to their own thread from there.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..active import ActiveVersionResolver
from ..config.languages import LanguageConfig
from ..discovery.paths import PathResolver, ScanPathSpec
from ..output.env_script import EnvironmentScriptWriter, ScriptWriteError
from . import go, java, node, python
from .base import RuntimeScanner, VersionRecord
from .homebrew import is_homebrew_install, parse_cellar_path

logger = logging.getLogger(__name__)

MAX_SCAN_WORKERS = 4

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def shared_executor() -> ThreadPoolExecutor:
    """Thread pool shared by every manager, created on first use."""
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=MAX_SCAN_WORKERS, thread_name_prefix="runtimepilot-scan")
        return _executor


class ActivationError(Exception):
    """The active-version preference could not be stored.

    Attributes:
        identifier: Language being activated
        error: Underlying OSError
    """

    def __init__(self, identifier: str, error: OSError):
        self.identifier = identifier
        self.error = error
        super().__init__(f"Could not store the active {identifier} version: {error}")


@dataclass(frozen=True)
class VersionSnapshot:
    """Published result of one scan.

    Attributes:
        versions: Records, sorted by descending version
        active: Active record, or None
        generation: Number of the refresh that produced it (0: never scanned)
    """
    versions: tuple[VersionRecord, ...] = ()
    active: Optional[VersionRecord] = None
    generation: int = 0

    def display_versions(self) -> list[VersionRecord]:
        """Active version first, then the rest in descending version order."""
        if self.active is None:
            return list(self.versions)
        rest = [r for r in self.versions if r.key != self.active.key]
        return [self.active] + rest


SnapshotCallback = Callable[[VersionSnapshot], None]


class VersionManager:
    """Owns the scanner, snapshot and activation of one language.

    Args:
        language: Language config (replaced with update_config)
        scanner: Scanner producing the language's records
        resolver: Active-version resolver (preferences + script fallback)
        writer: Script writer used by set_active
        executor: Pool for background scans; defaults to the shared pool
    """

    def __init__(
        self,
        language: LanguageConfig,
        scanner: RuntimeScanner,
        resolver: ActiveVersionResolver,
        writer: EnvironmentScriptWriter,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.language = language
        self.scanner = scanner
        self.resolver = resolver
        self.writer = writer
        self._executor = executor

        self._snapshot = VersionSnapshot()
        self._subscribers: list[SnapshotCallback] = []
        self._requested = 0
        self._activations = 0
        self._lock = threading.Lock()
        self._activate_lock = threading.Lock()

    # -- state -------------------------------------------------------------

    @property
    def identifier(self) -> str:
        return self.language.identifier

    @property
    def snapshot(self) -> VersionSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def versions(self) -> list[VersionRecord]:
        return list(self.snapshot.versions)

    @property
    def active_version(self) -> Optional[VersionRecord]:
        return self.snapshot.active

    def display_versions(self) -> list[VersionRecord]:
        return self.snapshot.display_versions()

    def update_config(self, language: LanguageConfig) -> None:
        self.language = language

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """Call callback with every published snapshot.

        Returns:
            A function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # -- scanning ----------------------------------------------------------

    def refresh(self, callback: Optional[SnapshotCallback] = None) -> "Future[VersionSnapshot]":
        """Scan in the background.

        Args:
            callback: Called with the published snapshot once the scan ends

        Returns:
            Future resolving to the snapshot current after this scan
        """
        generation = self._next_generation()
        executor = self._executor or shared_executor()
        return executor.submit(self._run_scan, generation, callback)

    def refresh_sync(self) -> VersionSnapshot:
        """Scan on the calling thread (which must not be an interactive one)."""
        return self._run_scan(self._next_generation(), None)

    def _next_generation(self) -> int:
        with self._lock:
            self._requested += 1
            return self._requested

    def _run_scan(self, generation: int, callback: Optional[SnapshotCallback]) -> VersionSnapshot:
        with self._lock:
            activations = self._activations

        records = self.scanner.scan()
        active = self.resolver.resolve_active(records, self.language)
        if active is None:
            active = self._seed_default(records)

        with self._lock:
            if generation <= self._snapshot.generation:
                logger.debug("%s: dropping superseded scan #%d", self.identifier, generation)
                return self._snapshot
            if activations != self._activations:
                # set_active ran while scanning; its choice wins
                active = self.resolver.resolve_active(records, self.language)
            snapshot = VersionSnapshot(tuple(records), active, generation)
            self._snapshot = snapshot

        logger.debug("%s: published %d version(s), active=%s",
                     self.identifier, len(records), active.install_path if active else None)
        self._notify(snapshot, callback)
        return snapshot

    def _seed_default(self, records: list[VersionRecord]) -> Optional[VersionRecord]:
        with self._activate_lock:
            # Checked under the lock so a concurrent set_active is never overridden
            default = self.resolver.select_default(records, self.language)
            if default is None:
                return None
            try:
                self._activate(default)
            except (ScriptWriteError, ActivationError) as e:
                logger.warning("%s: could not activate default version: %s", self.identifier, e)
                return None
        return default

    def _notify(self, snapshot: VersionSnapshot, callback: Optional[SnapshotCallback]) -> None:
        with self._lock:
            callbacks = list(self._subscribers)
        if callback is not None:
            callbacks.append(callback)
        for cb in callbacks:
            try:
                cb(snapshot)
            except Exception:
                logger.exception("%s: snapshot subscriber failed", self.identifier)

    # -- activation --------------------------------------------------------

    def set_active(self, record: VersionRecord) -> Path:
        """Make record the active version.

        Writes the script, stores the preference and publishes a snapshot
        with the new active record. Calls are serialized per manager, and
        the snapshot changes under the same lock as the files on disk.

        Returns:
            Path of the written script

        Raises:
            ScriptWriteError: If the script could not be written; the
                preference and snapshot are left untouched
            ActivationError: If the preference could not be stored; the
                previous script is restored and the snapshot left untouched
        """
        with self._activate_lock:
            path = self._activate(record)
            with self._lock:
                self._snapshot = replace(self._snapshot, active=record)
                snapshot = self._snapshot
        self._notify(snapshot, None)
        return path

    def _activate(self, record: VersionRecord) -> Path:
        """Write the script and store the preference. Caller holds _activate_lock."""
        previous = self.writer.read_active_path(self.language)
        path = self.writer.write(self.language, record)
        try:
            self.resolver.remember(self.language, record)
        except OSError as e:
            logger.error("%s: could not store active version: %s", self.identifier, e)
            self._restore_script(previous)
            raise ActivationError(self.identifier, e) from e

        with self._lock:
            self._activations += 1
        logger.info("%s: activated %s (%s)", self.identifier, record.version, record.install_path)
        return path

    def _restore_script(self, install_path: Optional[str]) -> None:
        try:
            if install_path:
                self.writer.write_path(self.language, install_path)
            else:
                self.writer.remove(self.language)
        except ScriptWriteError as e:
            logger.error("%s: could not restore previous script: %s", self.identifier, e)

    # -- package-manager helpers ----------------------------------------------

    def can_uninstall(self, record: VersionRecord) -> bool:
        """Whether the package-manager collaborator could remove this install."""
        return is_homebrew_install(record.install_path) and parse_cellar_path(record.install_path) is not None

    def formula_for(self, record: VersionRecord) -> Optional[str]:
        """Homebrew formula owning an install, e.g. "node@20"."""
        brew = parse_cellar_path(record.install_path)
        return brew.formula_name if brew else None


# =============================================================================
# BUILT-IN LANGUAGES
# =============================================================================

BUILT_IN_SCANNER_FACTORIES = {
    "java": java.create_scanner,
    "node": node.create_scanner,
    "python": python.create_scanner,
    "go": go.create_scanner,
}


def create_built_in_manager(
    language: LanguageConfig,
    scan_paths: Callable[[], Iterable[ScanPathSpec]],
    resolver: ActiveVersionResolver,
    writer: EnvironmentScriptWriter,
    path_resolver: Optional[PathResolver] = None,
    executor: Optional[ThreadPoolExecutor] = None,
) -> VersionManager:
    """Manager for java, node, python or go.

    Raises:
        KeyError: If language is not a built-in language
    """
    factory = BUILT_IN_SCANNER_FACTORIES[language.identifier]
    scanner = factory(scan_paths, resolver=path_resolver)
    return VersionManager(language, scanner, resolver, writer, executor=executor)
