"""Java (JDK) discovery.

Sources, highest priority first:
    1. /usr/libexec/java_home -X   every JVM registered with macOS, as a plist
    2. Directory walk              /Library/Java/JavaVirtualMachines, Homebrew
                                   openjdk* formulae and user-added paths

A JDK's home is not always the directory that was scanned:

    /Library/Java/JavaVirtualMachines/zulu-17.jdk/Contents/Home
    /opt/homebrew/Cellar/openjdk@17/17.0.9/libexec/openjdk.jdk/Contents/Home

Versions come from the JDK's `release` file (JAVA_VERSION="17.0.9")
when present.
"""

import logging
import os
from typing import Callable, Iterable, Optional

from ..discovery.paths import PathResolver, ScanPathSpec
from ..discovery.versions import detect_source, extract_java_version
from ..utils.constants import JAVA_HOME_TOOL, TIMEOUT_JAVA_HOME
from ..utils.file_ops import marker_exists
from ..utils.plist import parse_plist_safe, records_from_plist
from ..utils.subprocess_utils import run_command
from .base import DirectoryWalkStrategy, DiscoveryStrategy, RuntimeScanner, VersionRecord
from .homebrew import parse_cellar_path

logger = logging.getLogger(__name__)

LANGUAGE_ID = "java"

# Nested homes, relative to a scanned directory
JDK_HOME_LAYOUTS = (
    os.path.join("Contents", "Home"),
    os.path.join("libexec", "openjdk.jdk", "Contents", "Home"),
    "",
)


def is_jdk_home(path: str) -> bool:
    return marker_exists(os.path.join(path, "bin", "java"))


def locate_jdk_home(candidate: str) -> Optional[str]:
    """Find the JDK home inside a scanned directory.

    Args:
        candidate: A `.jdk` bundle, a Cellar version directory or a plain home

    Returns:
        The directory containing bin/java, or None
    """
    for layout in JDK_HOME_LAYOUTS:
        home = os.path.join(candidate, layout) if layout else candidate
        if is_jdk_home(home):
            return home
    return None


def jdk_version(entry_name: str, install_path: str) -> str:
    return extract_java_version(install_path, fallback_name=entry_name)


def jdk_label(install_path: str) -> str:
    """Source label for a JDK home.

    Homebrew JDKs read "OpenJDK (Homebrew)" or "openjdk@17 (Homebrew)";
    everything else uses the generic path markers.
    """
    brew = parse_cellar_path(install_path)
    if brew is None:
        return detect_source(install_path)
    if brew.formula_name == "openjdk":
        return "OpenJDK (Homebrew)"
    return f"{brew.formula_name} (Homebrew)"


class JavaHomeStrategy(DiscoveryStrategy):
    """Enumerate JVMs with `/usr/libexec/java_home -X`.

    The tool prints an XML plist: an array of dicts carrying JVMHomePath,
    JVMName and JVMVersion. A missing tool, a non-zero exit or an
    unparseable payload yields no records.
    """

    name = "java_home"

    def __init__(self, run: Callable[..., Optional[object]] = run_command, tool: str = JAVA_HOME_TOOL):
        self.run = run
        self.tool = tool

    def discover(self) -> list[VersionRecord]:
        output = self.run([self.tool, "-X"], timeout=TIMEOUT_JAVA_HOME, text=False)
        data, error = parse_plist_safe(output)
        if error:
            logger.debug("java_home returned nothing usable: %s", error)
            return []

        records = []
        for entry in records_from_plist(data, ("JVMHomePath", "JVMName", "JVMVersion")):
            home = entry["JVMHomePath"]
            if not is_jdk_home(home):
                logger.debug("Ignoring %s: no bin/java", home)
                continue

            source = jdk_label(home)
            if source == "Local":
                source = entry["JVMName"]
            records.append(
                VersionRecord(
                    version=entry["JVMVersion"],
                    source=source,
                    install_path=home,
                    strategy=self.name,
                )
            )
        return records


def create_scanner(
    scan_paths: Callable[[], Iterable[ScanPathSpec]],
    resolver: Optional[PathResolver] = None,
    run: Callable[..., Optional[object]] = run_command,
) -> RuntimeScanner:
    """Build the Java scanner.

    Args:
        scan_paths: Provider of built-in plus user-added scan paths
        resolver: Wildcard resolver (carries the directory access gate)
        run: Command runner, replaceable in tests
    """
    return RuntimeScanner(
        LANGUAGE_ID,
        [
            JavaHomeStrategy(run=run),
            DirectoryWalkStrategy(
                scan_paths,
                locate_jdk_home,
                resolver=resolver,
                version_for=jdk_version,
                label_for=jdk_label,
                accept_root=True,
            ),
        ],
    )
