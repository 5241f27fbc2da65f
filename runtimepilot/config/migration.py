"""One-shot migration of state written by older releases.

Older releases recorded the active version only in the generated
scripts (and in per-language keys such as ActiveJavaVersion). The
migration copies that pointer into ActiveVersion_<identifier> once, so
the preference becomes the source of truth.
"""

import logging

from ..active import active_version_key
from ..output.env_script import EnvironmentScriptWriter
from ..utils.constants import CURRENT_MIGRATION_VERSION, MIGRATED_KEY, MIGRATION_VERSION_KEY
from .languages import built_in_config
from .preferences import PreferenceStore

logger = logging.getLogger(__name__)

# identifier -> key used before ActiveVersion_<identifier>
LEGACY_ACTIVE_KEYS = {
    "java": "ActiveJavaVersion",
    "node": "ActiveNodeVersion",
    "python": "ActivePythonVersion",
    "go": "ActiveGoVersion",
}


class MigrationManager:
    """Move legacy active-version state into the preference store.

    Args:
        preferences: Preference store to migrate into
        writer: Script writer, used to locate and parse legacy scripts
    """

    def __init__(self, preferences: PreferenceStore, writer: EnvironmentScriptWriter):
        self.preferences = preferences
        self.writer = writer

    @property
    def has_migrated(self) -> bool:
        return bool(self.preferences.get(MIGRATED_KEY, False))

    def migrate_if_needed(self) -> int:
        """Run the migration unless it already ran.

        Returns:
            Number of languages whose active version was migrated
        """
        if self.has_migrated:
            return 0
        return self._perform()

    def force_migrate(self) -> int:
        """Run the migration again regardless of the stored flag."""
        self.preferences.set(MIGRATED_KEY, False)
        return self._perform()

    def reset(self) -> None:
        self.preferences.delete(MIGRATED_KEY)
        self.preferences.delete(MIGRATION_VERSION_KEY)

    def _perform(self) -> int:
        migrated = 0
        for identifier, legacy_key in LEGACY_ACTIVE_KEYS.items():
            if self._migrate_language(identifier, legacy_key):
                migrated += 1

        self.preferences.set(MIGRATED_KEY, True)
        self.preferences.set(MIGRATION_VERSION_KEY, CURRENT_MIGRATION_VERSION)
        if migrated:
            logger.info("Migration completed: %d language(s) migrated", migrated)
        return migrated

    def _migrate_language(self, identifier: str, legacy_key: str) -> bool:
        language = built_in_config(identifier)
        if not self.writer.script_path(language).exists():
            return False

        key = active_version_key(identifier)
        if self.preferences.get(key):
            logger.debug("%s already has an active version preference", identifier)
            return False

        active_path = self.preferences.get(legacy_key) or self.writer.read_active_path(language)
        if not active_path:
            return False

        self.preferences.set(key, active_path)
        self.preferences.delete(legacy_key)
        logger.debug("%s: migrated active version %s", identifier, active_path)
        return True
