"""CRUD for user-defined languages.

Definitions are persisted as a YAML list under CustomLanguages. Each
language gets its own VersionManager, keyed by identifier, which is
re-keyed when the identifier is edited.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Optional

from ..active import ActiveVersionResolver
from ..discovery.paths import PathResolver
from ..output.env_script import EnvironmentScriptWriter
from ..registry import DuplicateLanguageError, LanguageRegistry
from ..scanners.custom import create_scanner
from ..scanners.manager import VersionManager
from ..utils.constants import CUSTOM_LANGUAGES_KEY, CUSTOM_ORDER_START
from .languages import LanguageConfig, is_built_in
from .preferences import PreferenceStore

logger = logging.getLogger(__name__)


class CustomLanguageManager:
    """Add, edit and delete custom languages.

    Args:
        preferences: Store holding the CustomLanguages list
        resolver: Active-version resolver shared with the built-ins
        writer: Script writer shared with the built-ins
        path_resolver: Wildcard resolver (carries the directory access gate)
        executor: Pool for background scans; defaults to the shared pool
    """

    def __init__(
        self,
        preferences: PreferenceStore,
        resolver: ActiveVersionResolver,
        writer: EnvironmentScriptWriter,
        path_resolver: Optional[PathResolver] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.preferences = preferences
        self.resolver = resolver
        self.writer = writer
        self.path_resolver = path_resolver
        self.executor = executor

        self._configs: dict[str, LanguageConfig] = {}
        self._managers: dict[str, VersionManager] = {}
        self._registry: Optional[LanguageRegistry] = None
        self._lock = threading.RLock()
        self._load()

    # -- persistence -------------------------------------------------------

    def _load(self) -> None:
        stored = self.preferences.get(CUSTOM_LANGUAGES_KEY) or []
        if not isinstance(stored, list):
            logger.warning("Ignoring malformed %s preference", CUSTOM_LANGUAGES_KEY)
            return

        for data in stored:
            try:
                config = LanguageConfig.from_dict(data)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable custom language %r: %s", data, e)
                continue
            errors = config.validation_errors()
            if errors:
                logger.warning("Skipping invalid custom language %r: %s", config.identifier, "; ".join(errors))
                continue
            if is_built_in(config.identifier) or self.is_identifier_taken(config.identifier):
                logger.warning("Skipping custom language with duplicate identifier %s", config.identifier)
                continue
            self._configs[config.id] = config
            self._managers[config.identifier] = self._create_manager(config)

    def _save(self) -> None:
        self.preferences.set(CUSTOM_LANGUAGES_KEY, [c.to_dict() for c in self.languages])

    def _create_manager(self, config: LanguageConfig) -> VersionManager:
        language_id = config.id
        # A deleted language keeps scanning with its last definition
        scanner = create_scanner(lambda: self._configs.get(language_id, config), resolver=self.path_resolver)
        return VersionManager(config, scanner, self.resolver, self.writer, executor=self.executor)

    # -- queries -----------------------------------------------------------

    @property
    def languages(self) -> list[LanguageConfig]:
        """Custom languages by display order."""
        with self._lock:
            configs = list(self._configs.values())
        return sorted(configs, key=lambda c: (c.order, c.identifier))

    def get_config(self, identifier: str) -> Optional[LanguageConfig]:
        with self._lock:
            for config in self._configs.values():
                if config.identifier == identifier:
                    return config
        return None

    def get_config_by_id(self, language_id: str) -> Optional[LanguageConfig]:
        with self._lock:
            return self._configs.get(language_id)

    def get_manager(self, identifier: str) -> Optional[VersionManager]:
        with self._lock:
            return self._managers.get(identifier)

    def is_identifier_taken(self, identifier: str, excluding_id: Optional[str] = None) -> bool:
        """Whether identifier belongs to a built-in or another custom language."""
        if is_built_in(identifier):
            return True
        with self._lock:
            return any(
                c.identifier == identifier and c.id != excluding_id
                for c in self._configs.values()
            )

    def is_custom_language(self, identifier: str) -> bool:
        return self.get_config(identifier) is not None

    # -- CRUD ----------------------------------------------------------------

    def _check(self, config: LanguageConfig, excluding_id: Optional[str] = None) -> None:
        errors = config.validation_errors()
        if errors:
            raise ValueError("; ".join(errors))
        if self.is_identifier_taken(config.identifier, excluding_id):
            raise DuplicateLanguageError(f"Identifier '{config.identifier}' is already in use")

    def add_language(self, config: LanguageConfig) -> LanguageConfig:
        """Add a custom language.

        The language is appended to the display order (100 for the first).

        Returns:
            The stored config

        Raises:
            ValueError: If the config is invalid
            DuplicateLanguageError: If the identifier is taken or reserved
        """
        with self._lock:
            self._check(config)
            orders = [c.order for c in self._configs.values()]
            order = max(orders) + 1 if orders else CUSTOM_ORDER_START
            stored = replace(config, order=order, is_custom=True)

            self._configs[stored.id] = stored
            manager = self._create_manager(stored)
            self._managers[stored.identifier] = manager
            self._save()
            if self._registry is not None:
                self._registry.register(stored, manager)

        logger.info("Added custom language %s", stored.identifier)
        return stored

    def update_language(self, config: LanguageConfig) -> bool:
        """Replace a custom language's definition (matched by config.id).

        Returns:
            False if no language has that id

        Raises:
            ValueError: If the config is invalid
            DuplicateLanguageError: If the new identifier is taken or reserved
        """
        with self._lock:
            current = self._configs.get(config.id)
            if current is None:
                return False
            self._check(config, excluding_id=config.id)
            stored = replace(config, is_custom=True)

            self._configs[stored.id] = stored
            manager = self._managers.pop(current.identifier)
            manager.update_config(stored)
            self._managers[stored.identifier] = manager
            self._save()

            if self._registry is not None:
                self._registry.unregister(current.identifier)
                self._registry.register(stored, manager)

        if current.identifier != stored.identifier:
            logger.info("Renamed custom language %s to %s", current.identifier, stored.identifier)
        else:
            logger.info("Updated custom language %s", stored.identifier)
        return True

    def delete_language(self, language_id: str) -> bool:
        """Delete a custom language, its active pointer and its script.

        Returns:
            False if no language has that id

        Raises:
            ScriptWriteError: If the script exists but cannot be removed
        """
        with self._lock:
            config = self._configs.pop(language_id, None)
            if config is None:
                return False
            self._managers.pop(config.identifier, None)
            self._save()
            if self._registry is not None:
                self._registry.unregister(config.identifier)

        self.resolver.forget(config)
        self.writer.remove(config)
        logger.info("Deleted custom language %s", config.identifier)
        return True

    # -- registry ------------------------------------------------------------

    def register_all(self, registry: LanguageRegistry) -> None:
        """Register every custom language and keep registry in sync afterwards."""
        with self._lock:
            self._registry = registry
            for config in self.languages:
                registry.register(config, self._managers[config.identifier])

    def unregister_all(self, registry: LanguageRegistry) -> None:
        with self._lock:
            for config in self._configs.values():
                registry.unregister(config.identifier)
            if self._registry is registry:
                self._registry = None

    def refresh_all(self) -> None:
        with self._lock:
            managers = list(self._managers.values())
        for manager in managers:
            manager.refresh()
