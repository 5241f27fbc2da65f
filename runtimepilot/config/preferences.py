"""Preference store: string-keyed persistence for small pieces of state.

Holds the active-version pointers, user-added scan paths and custom
language definitions. The file-backed store keeps everything in one YAML
mapping:

    ActiveVersion_java: /Library/Java/JavaVirtualMachines/zulu-17.jdk/Contents/Home
    CustomScanPaths_node:
      - ~/sdks/node
    CustomLanguages:
      - identifier: ruby
        name: Ruby
        ...
"""

import logging
import threading
from pathlib import Path
from typing import Any, Optional, Protocol

import yaml

from ..utils.constants import DIR_MODE, PREFERENCES_FILE_MODE, PREFERENCES_FILE_NAME, get_config_dir
from ..utils.file_ops import atomic_write_text, ensure_directory

logger = logging.getLogger(__name__)


class PreferenceStore(Protocol):
    """Collaborator persisting values by key."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryPreferenceStore:
    """In-process store, used by tests and by callers that persist elsewhere."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._values: dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def as_dict(self) -> dict[str, Any]:
        with self._lock:
            return dict(self._values)


class YamlPreferenceStore:
    """Preferences persisted to a YAML file.

    The file is read once on first access and rewritten atomically after
    every change. A missing file is an empty store; a corrupt one is
    logged and treated as empty (it is replaced on the next write).

    Args:
        path: Preferences file. Defaults to preferences.yaml in the
            config directory.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path or get_config_dir() / PREFERENCES_FILE_NAME
        self._values: Optional[dict[str, Any]] = None
        self._lock = threading.RLock()

    def _load(self) -> dict[str, Any]:
        if self._values is not None:
            return self._values

        values: dict[str, Any] = {}
        if self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    loaded = yaml.safe_load(f)
            except (yaml.YAMLError, OSError) as e:
                logger.warning("Ignoring unreadable preferences file %s: %s", self.path, e)
                loaded = None
            if isinstance(loaded, dict):
                values = loaded
            elif loaded is not None:
                logger.warning("Ignoring preferences file %s: not a mapping", self.path)

        self._values = values
        return values

    def _save(self, values: dict[str, Any]) -> None:
        """Write values to disk, then adopt them as the in-memory copy.

        Raises:
            OSError: If the file cannot be written; the in-memory copy is
                left as it was
        """
        ensure_directory(self.path.parent, DIR_MODE)
        content = yaml.safe_dump(values, default_flow_style=False, sort_keys=True, allow_unicode=True)
        atomic_write_text(self.path, content, PREFERENCES_FILE_MODE)
        self._values = values

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            values = dict(self._load())
            values[key] = value
            self._save(values)

    def delete(self, key: str) -> None:
        with self._lock:
            values = dict(self._load())
            if key in values:
                del values[key]
                self._save(values)

    def reload(self) -> None:
        """Drop the in-memory copy; the next access re-reads the file."""
        with self._lock:
            self._values = None
