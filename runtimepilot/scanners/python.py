"""Python discovery.

Sources, highest priority first:
    1. python3 on PATH        `python3 --version` + `which python3`
    2. Directory walk         Homebrew python@X.Y formulae, pyenv, asdf

Only versioned Homebrew formulae (python@3.12) are considered; the bare
`python` formula is an alias Homebrew keeps for the default version and
would be reported twice.
"""

import logging
import os
import re
from typing import Callable, Iterable, Optional

from ..discovery.paths import PathResolver, ScanPathSpec
from ..discovery.versions import detect_source
from ..utils.file_ops import marker_exists
from ..utils.subprocess_utils import run_command
from .base import DirectoryWalkStrategy, DiscoveryStrategy, RuntimeScanner, VersionRecord
from .homebrew import parse_cellar_path

logger = logging.getLogger(__name__)

LANGUAGE_ID = "python"

PYTHON_EXECUTABLES = ("python3", "python")

_PYTHON_VERSION_RE = re.compile(r"Python\s+(\d+\.\d+(?:\.\d+)?\S*)", re.IGNORECASE)


def locate_python_root(candidate: str) -> Optional[str]:
    """Accept a directory whose bin/ holds a Python interpreter.

    Inside a Cellar, only versioned formulae count, and the versioned
    interpreter name (python3.12 for python@3.12) is checked first.
    """
    executables = list(PYTHON_EXECUTABLES)
    brew = parse_cellar_path(candidate)
    if brew is not None:
        if not brew.is_versioned_formula:
            return None
        executables.insert(0, "python" + brew.formula_name.split("@", 1)[1])

    for executable in executables:
        if marker_exists(os.path.join(candidate, "bin", executable)):
            return candidate
    return None


def parse_python_version(output: Optional[str]) -> Optional[str]:
    """Version from `python3 --version` output ("Python 3.12.1")."""
    if not output:
        return None
    match = _PYTHON_VERSION_RE.search(output)
    return match.group(1) if match else None


class SystemPythonStrategy(DiscoveryStrategy):
    """Detect the python3 found on PATH.

    The install root is the parent of the interpreter's bin directory
    (/usr for /usr/bin/python3). Shims that do not sit in a real bin/
    directory with an interpreter are rejected.
    """

    name = "system_command"

    def __init__(self, run: Callable[..., Optional[str]] = run_command):
        self.run = run

    def discover(self) -> list[VersionRecord]:
        version = parse_python_version(self.run(["python3", "--version"]))
        if version is None:
            return []

        executable = self.run(["which", "python3"])
        if not executable:
            return []

        bin_dir = os.path.dirname(executable.strip())
        if os.path.basename(bin_dir) != "bin":
            logger.debug("python3 at %s is not inside a bin directory", executable)
            return []

        root = os.path.dirname(bin_dir)
        if locate_python_root(root) is None:
            return []

        source = detect_source(root)
        if source == "Local":
            source = "System"
        return [VersionRecord(version=version, source=source, install_path=root, strategy=self.name)]


def create_scanner(
    scan_paths: Callable[[], Iterable[ScanPathSpec]],
    resolver: Optional[PathResolver] = None,
    run: Callable[..., Optional[str]] = run_command,
) -> RuntimeScanner:
    return RuntimeScanner(
        LANGUAGE_ID,
        [
            SystemPythonStrategy(run=run),
            DirectoryWalkStrategy(scan_paths, locate_python_root, resolver=resolver),
        ],
    )
