"""Node.js discovery: Homebrew node* formulae and nvm.

    /opt/homebrew/Cellar/node@20/20.11.1/bin/node
    ~/.nvm/versions/node/v18.16.0/bin/node

Node has no canonical home variable, so its environment script only
prepends <root>/bin to PATH.
"""

from typing import Callable, Iterable, Optional

from ..discovery.paths import PathResolver, ScanPathSpec
from .base import DirectoryWalkStrategy, RuntimeScanner, bin_marker

LANGUAGE_ID = "node"


def create_scanner(
    scan_paths: Callable[[], Iterable[ScanPathSpec]],
    resolver: Optional[PathResolver] = None,
) -> RuntimeScanner:
    return RuntimeScanner(
        LANGUAGE_ID,
        [DirectoryWalkStrategy(scan_paths, bin_marker("node"), resolver=resolver)],
    )
