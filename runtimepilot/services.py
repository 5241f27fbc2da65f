"""Wiring of the core services.

Everything is constructed explicitly and passed by reference; nothing in
the core is a process-wide singleton. A host (the CLI, a GUI) builds one
RuntimePilot at startup:

    pilot = RuntimePilot.create()
    java = pilot.registry.get("java").manager
    snapshot = java.refresh_sync()
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .active import ActiveVersionResolver
from .config.custom_languages import CustomLanguageManager
from .config.languages import BUILT_IN_CONFIGS, built_in_config
from .config.migration import MigrationManager
from .config.preferences import PreferenceStore, YamlPreferenceStore
from .config.scan_paths import ScanPathConfigManager
from .discovery.access import DirectoryAccess
from .discovery.paths import PathResolver
from .output.env_script import EnvironmentScriptWriter
from .registry import LanguageRegistry
from .scanners.manager import VersionManager, create_built_in_manager
from .utils.constants import PREFERENCES_FILE_NAME, get_config_dir

logger = logging.getLogger(__name__)


@dataclass
class RuntimePilot:
    """The assembled core."""

    config_dir: Path
    preferences: PreferenceStore
    writer: EnvironmentScriptWriter
    resolver: ActiveVersionResolver
    path_resolver: PathResolver
    scan_paths: ScanPathConfigManager
    registry: LanguageRegistry
    custom_languages: CustomLanguageManager
    migration: MigrationManager

    @classmethod
    def create(
        cls,
        config_dir: Optional[Path] = None,
        preferences: Optional[PreferenceStore] = None,
        access: Optional[DirectoryAccess] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        migrate: bool = True,
    ) -> "RuntimePilot":
        """Build and register every language.

        Args:
            config_dir: Scripts and preferences directory (default: config dir)
            preferences: Preference store (default: YAML file in config_dir)
            access: Directory access gate (default: allow all)
            executor: Pool for background scans (default: shared pool)
            migrate: Run the legacy-state migration if it never ran
        """
        config_dir = config_dir or get_config_dir()
        preferences = preferences or YamlPreferenceStore(config_dir / PREFERENCES_FILE_NAME)
        writer = EnvironmentScriptWriter(config_dir)
        resolver = ActiveVersionResolver(preferences, writer)
        path_resolver = PathResolver(access=access)
        scan_paths = ScanPathConfigManager(preferences, path_resolver)
        registry = LanguageRegistry()
        migration = MigrationManager(preferences, writer)

        if migrate:
            migration.migrate_if_needed()

        for identifier in BUILT_IN_CONFIGS:
            language = built_in_config(identifier)
            manager = create_built_in_manager(
                language,
                scan_paths.provider(identifier),
                resolver,
                writer,
                path_resolver=path_resolver,
                executor=executor,
            )
            registry.register(language, manager)

        custom_languages = CustomLanguageManager(
            preferences, resolver, writer, path_resolver=path_resolver, executor=executor,
        )
        custom_languages.register_all(registry)
        logger.debug("Registered %d language(s)", len(registry))

        return cls(
            config_dir=config_dir,
            preferences=preferences,
            writer=writer,
            resolver=resolver,
            path_resolver=path_resolver,
            scan_paths=scan_paths,
            registry=registry,
            custom_languages=custom_languages,
            migration=migration,
        )

    def manager(self, identifier: str) -> Optional[VersionManager]:
        entry = self.registry.get(identifier)
        return entry.manager if entry else None

    def refresh_all(self) -> None:
        """Start a background refresh of every registered language."""
        for manager in self.registry.managers():
            manager.refresh()
