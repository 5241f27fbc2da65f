"""Go discovery.

Sources, highest priority first:
    1. go on PATH             `go version` + `go env GOROOT`
    2. Directory walk         Homebrew go* formulae, gvm, asdf

GOROOT layouts:

    /opt/homebrew/Cellar/go/1.22.1/libexec      Homebrew
    ~/.gvm/gos/go1.21.0                         gvm
    ~/.asdf/installs/golang/1.22.1/go           asdf
"""

import logging
import os
from typing import Callable, Iterable, Optional

from ..discovery.paths import PathResolver, ScanPathSpec
from ..discovery.versions import detect_source
from ..utils.file_ops import marker_exists
from ..utils.subprocess_utils import run_command
from .base import DirectoryWalkStrategy, DiscoveryStrategy, RuntimeScanner, VersionRecord

logger = logging.getLogger(__name__)

LANGUAGE_ID = "go"

GOROOT_LAYOUTS = ("libexec", "", "go")


def is_goroot(path: str) -> bool:
    return marker_exists(os.path.join(path, "bin", "go"))


def locate_goroot(candidate: str) -> Optional[str]:
    """Find the GOROOT inside a scanned directory, or None."""
    for layout in GOROOT_LAYOUTS:
        root = os.path.join(candidate, layout) if layout else candidate
        if is_goroot(root):
            return root
    return None


def parse_go_version(output: Optional[str]) -> Optional[str]:
    """Version from `go version` output.

    Examples:
        >>> parse_go_version("go version go1.22.1 darwin/arm64")
        '1.22.1'
    """
    if not output or not output.startswith("go version"):
        return None
    parts = output.split()
    if len(parts) < 3:
        return None
    raw = parts[2]
    version = raw[2:] if raw.startswith("go") else raw
    return version or None


class SystemGoStrategy(DiscoveryStrategy):
    """Detect the Go toolchain on PATH, wherever it came from."""

    name = "system_command"

    def __init__(self, run: Callable[..., Optional[str]] = run_command):
        self.run = run

    def discover(self) -> list[VersionRecord]:
        version = parse_go_version(self.run(["go", "version"]))
        if version is None:
            return []

        goroot = (self.run(["go", "env", "GOROOT"]) or "").strip()
        if not goroot or not is_goroot(goroot):
            logger.debug("go reported unusable GOROOT %r", goroot)
            return []

        source = detect_source(goroot)
        if source == "Local":
            source = "System"
        return [VersionRecord(version=version, source=source, install_path=goroot, strategy=self.name)]


def create_scanner(
    scan_paths: Callable[[], Iterable[ScanPathSpec]],
    resolver: Optional[PathResolver] = None,
    run: Callable[..., Optional[str]] = run_command,
) -> RuntimeScanner:
    return RuntimeScanner(
        LANGUAGE_ID,
        [
            SystemGoStrategy(run=run),
            DirectoryWalkStrategy(scan_paths, locate_goroot, resolver=resolver),
        ],
    )
