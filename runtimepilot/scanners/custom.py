"""Scanner for user-defined languages, driven entirely by LanguageConfig.

Each scan path is walked one level deep. With an `executable` set, a
candidate is accepted when <candidate>/bin/<executable> exists, and a
scan path that is itself such an install (~/flutter) is accepted too.
Without one, every visible subdirectory counts as an install.
"""

from typing import Callable, Optional

from ..config.languages import LanguageConfig
from ..discovery.paths import PathResolver, ScanPathSpec
from .base import DirectoryWalkStrategy, RuntimeScanner, VersionRecord, any_directory, bin_marker


class CustomRuntimeScanner(RuntimeScanner):
    """RuntimeScanner reading its language config on every scan.

    Args:
        config_provider: Returns the current config, so edits to scan
            paths or the executable apply without rebuilding the scanner
        resolver: Wildcard resolver (carries the directory access gate)
    """

    def __init__(self, config_provider: Callable[[], LanguageConfig], resolver: Optional[PathResolver] = None):
        self.config_provider = config_provider
        self.walk = DirectoryWalkStrategy(self._scan_paths, self._locate, resolver=resolver)
        super().__init__(config_provider().identifier, [self.walk])

    def _scan_paths(self) -> list[ScanPathSpec]:
        return self.config_provider().scan_path_specs()

    def _locate(self, candidate: str) -> Optional[str]:
        executable = self.config_provider().executable
        if executable:
            return bin_marker(executable)(candidate)
        return any_directory(candidate)

    def scan(self) -> list[VersionRecord]:
        config = self.config_provider()
        self.language_id = config.identifier
        # Without a marker every directory would match, the root included
        self.walk.accept_root = bool(config.executable)
        return super().scan()


def create_scanner(
    config_provider: Callable[[], LanguageConfig],
    resolver: Optional[PathResolver] = None,
) -> CustomRuntimeScanner:
    return CustomRuntimeScanner(config_provider, resolver=resolver)
