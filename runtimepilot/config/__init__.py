"""User configuration: preferences, language definitions, scan paths.

Modules:
    preferences: YAML-backed preference store
    languages: LanguageConfig, built-in languages, templates
    scan_paths: User-added scan paths and path status
    custom_languages: CRUD for user-defined languages
    migration: One-shot migration of legacy active-version state

custom_languages and migration depend on the scanners and are imported
by module path.
"""

from .preferences import (
    MemoryPreferenceStore,
    PreferenceStore,
    YamlPreferenceStore,
)
from .languages import (
    BUILT_IN_CONFIGS,
    LANGUAGE_TEMPLATES,
    LanguageConfig,
    built_in_config,
    is_built_in,
    template_config,
)
from .scan_paths import (
    PathStatus,
    ScanPathConfigManager,
    normalize_scan_path,
)

__all__ = [
    # preferences
    "MemoryPreferenceStore",
    "PreferenceStore",
    "YamlPreferenceStore",
    # languages
    "BUILT_IN_CONFIGS",
    "LANGUAGE_TEMPLATES",
    "LanguageConfig",
    "built_in_config",
    "is_built_in",
    "template_config",
    # scan_paths
    "PathStatus",
    "ScanPathConfigManager",
    "normalize_scan_path",
]
