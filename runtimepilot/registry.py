"""Table of registered languages.

Maps a language identifier to its config and the VersionManager owning
its scan results. Registration is bookkeeping only: nothing is scanned
until the caller refreshes the manager.
"""

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .config.languages import LanguageConfig, is_built_in

if TYPE_CHECKING:
    from .scanners.manager import VersionManager

logger = logging.getLogger(__name__)


class DuplicateLanguageError(ValueError):
    """Raised when an identifier is already taken or reserved."""
    pass


@dataclass(frozen=True)
class RegisteredLanguage:
    config: LanguageConfig
    manager: "VersionManager"


class LanguageRegistry:
    """Thread-safe identifier -> (config, manager) table.

    Built-in identifiers (java, node, python, go) are reserved for the
    built-in languages. A built-in may be registered again, replacing its
    own entry; a custom language may replace only its own entry (same
    persistent id).
    """

    def __init__(self):
        self._entries: dict[str, RegisteredLanguage] = {}
        self._lock = threading.RLock()

    def register(self, config: LanguageConfig, manager: "VersionManager") -> None:
        """Register a language.

        Raises:
            DuplicateLanguageError: If the identifier is reserved or taken
        """
        identifier = config.identifier
        with self._lock:
            if config.is_custom and is_built_in(identifier):
                raise DuplicateLanguageError(f"'{identifier}' is reserved for a built-in language")

            existing = self._entries.get(identifier)
            if existing is not None and existing.config.id != config.id:
                raise DuplicateLanguageError(f"Language '{identifier}' is already registered")

            self._entries[identifier] = RegisteredLanguage(config, manager)
        logger.debug("Registered %s", identifier)

    def unregister(self, identifier: str) -> bool:
        """Remove a language; returns False if it was not registered."""
        with self._lock:
            removed = self._entries.pop(identifier, None)
        if removed is not None:
            logger.debug("Unregistered %s", identifier)
        return removed is not None

    def get(self, identifier: str) -> Optional[RegisteredLanguage]:
        with self._lock:
            return self._entries.get(identifier)

    def is_registered(self, identifier: str) -> bool:
        with self._lock:
            return identifier in self._entries

    def all(self) -> list[LanguageConfig]:
        """Registered configs by display order, then identifier."""
        with self._lock:
            configs = [entry.config for entry in self._entries.values()]
        return sorted(configs, key=lambda c: (c.order, c.identifier))

    def managers(self) -> list["VersionManager"]:
        """Managers in the same order as all()."""
        with self._lock:
            entries = list(self._entries.values())
        entries.sort(key=lambda e: (e.config.order, e.config.identifier))
        return [entry.manager for entry in entries]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
