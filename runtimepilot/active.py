"""Which discovered version is active.

The active version is never stored as an object. It is derived from two
places, in order:

    1. The preference ActiveVersion_<identifier> (install path)
    2. The language's generated script (export JAVA_HOME="..."), which
       covers state written before preferences existed

A pointer that matches none of the scanned records means "no active
version", which is a valid state.
"""

import logging
from typing import Iterable, Optional, Sequence

from .config.languages import LanguageConfig
from .config.preferences import PreferenceStore
from .output.env_script import EnvironmentScriptWriter
from .scanners.base import VersionRecord
from .utils.constants import ACTIVE_VERSION_KEY_PREFIX
from .utils.path_safety import normalize_path

logger = logging.getLogger(__name__)


def active_version_key(identifier: str) -> str:
    return f"{ACTIVE_VERSION_KEY_PREFIX}{identifier}"


def find_record(records: Iterable[VersionRecord], install_path: Optional[str]) -> Optional[VersionRecord]:
    """Record whose normalized install path equals install_path."""
    if not install_path:
        return None
    wanted = normalize_path(install_path)
    for record in records:
        if record.key == wanted:
            return record
    return None


class ActiveVersionResolver:
    """Resolve, remember and forget active versions.

    Args:
        preferences: Store holding ActiveVersion_<identifier> keys
        writer: Script writer, read back when no preference matches
    """

    def __init__(self, preferences: PreferenceStore, writer: EnvironmentScriptWriter):
        self.preferences = preferences
        self.writer = writer

    def stored_path(self, language: LanguageConfig) -> Optional[str]:
        value = self.preferences.get(active_version_key(language.identifier))
        return value if isinstance(value, str) and value else None

    def resolve_active(self, records: Sequence[VersionRecord], language: LanguageConfig) -> Optional[VersionRecord]:
        """Find the active record among freshly scanned records.

        Args:
            records: Records from the latest scan
            language: Language the records belong to

        Returns:
            The active record, or None
        """
        if not records:
            return None

        record = find_record(records, self.stored_path(language))
        if record is not None:
            return record

        script_path = self.writer.read_active_path(language)
        record = find_record(records, script_path)
        if record is None and script_path:
            logger.debug("%s: script points at %s, which was not found", language.identifier, script_path)
        return record

    def select_default(self, records: Sequence[VersionRecord], language: LanguageConfig) -> Optional[VersionRecord]:
        """Version to activate implicitly when none was ever chosen.

        Only custom languages get one: the first, highest, record. Built-in
        languages stay without an active version until the user picks one.
        """
        if not language.is_custom or not records:
            return None
        if self.stored_path(language) or self.writer.read_active_path(language):
            return None
        return records[0]

    def remember(self, language: LanguageConfig, record: VersionRecord) -> None:
        self.preferences.set(active_version_key(language.identifier), record.install_path)

    def forget(self, language: LanguageConfig) -> None:
        self.preferences.delete(active_version_key(language.identifier))
