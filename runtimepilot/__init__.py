"""RuntimePilot: discover, switch and shell-integrate language runtimes.

Modules:
    discovery: Scan paths, wildcard resolution, version heuristics
    scanners: Per-language scanners and the VersionManager
    active: Active-version resolution
    output: Generated environment scripts
    config: Preferences, language definitions, scan paths, migration
    registry: Language table
    services: Wiring of the above
"""

__version__ = "2.0.0"

from .scanners.base import RuntimeScanner, VersionRecord
from .config.languages import LanguageConfig
from .config.preferences import MemoryPreferenceStore, YamlPreferenceStore
from .output.env_script import EnvironmentScriptWriter, ScriptWriteError
from .active import ActiveVersionResolver
from .registry import DuplicateLanguageError, LanguageRegistry
from .scanners.manager import ActivationError, VersionManager, VersionSnapshot
from .config.custom_languages import CustomLanguageManager
from .config.migration import MigrationManager
from .services import RuntimePilot

__all__ = [
    "__version__",
    "ActivationError",
    "ActiveVersionResolver",
    "CustomLanguageManager",
    "DuplicateLanguageError",
    "EnvironmentScriptWriter",
    "LanguageConfig",
    "LanguageRegistry",
    "MemoryPreferenceStore",
    "MigrationManager",
    "RuntimePilot",
    "RuntimeScanner",
    "ScriptWriteError",
    "VersionManager",
    "VersionRecord",
    "VersionSnapshot",
    "YamlPreferenceStore",
]
