"""Version and source-label extraction for discovered installs.

Version strings come from three places, strongest first:
    1. Runtime metadata (a JDK's `release` file, command output)
    2. Directory names (`3.12.0`, `ruby-3.2.0`, `v18.0.0`, `go1.21.0`)
    3. The raw directory name when nothing looks like a version

Source labels are inferred from marker substrings in the install path.
"""

import os
import re
from pathlib import Path
from typing import Optional

from ..utils.file_ops import read_text_safe

_VERSION = r"(\d+\.\d+(?:\.\d+)?)"

# Tried in order; group 1 is the version
VERSION_PATTERNS = (
    # Plain version: 3.12.0, 18.0.0
    re.compile(rf"^{_VERSION}$"),
    # Name, optional dash, version: ruby-3.2.0, python-3.12.0
    re.compile(rf"^[a-zA-Z]+-?{_VERSION}$"),
    # v-prefixed: v18.0.0
    re.compile(rf"^v{_VERSION}$"),
    # Name fused with version: go1.21.0
    re.compile(rf"^[a-zA-Z]+{_VERSION}$"),
    # Anything carrying a version: graalvm-ce-java17-22.3.1
    re.compile(_VERSION),
)

_JAVA_VERSION_RE = re.compile(r'^\s*JAVA_VERSION\s*=\s*"?([^"\n]*)"?\s*$', re.MULTILINE)

_BREW_REVISION_RE = re.compile(r"_\d+$")

_CELLAR_FORMULA_RE = re.compile(r"/Cellar/([^/]+)", re.IGNORECASE)

# Checked in order: package managers, version managers, system, local.
SOURCE_MARKERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("homebrew", "cellar"), "Homebrew"),
    (("rbenv",), "rbenv"),
    (("rvm",), "RVM"),
    (("pyenv",), "pyenv"),
    (("rustup",), "rustup"),
    (("nvm",), "NVM"),
    (("asdf",), "asdf"),
    (("gvm",), "GVM"),
    (("javavirtualmachines",), "System JDK"),
)

SYSTEM_PREFIXES = ("/usr/bin", "/usr/lib", "/usr/local/bin", "/usr/local/lib", "/system/")


def extract_version(directory_name: str) -> str:
    """Derive a version string from a directory name.

    Args:
        directory_name: Last path component of a candidate install

    Returns:
        The extracted version, or the name itself when no pattern matches

    Examples:
        >>> extract_version("ruby-3.2.0")
        '3.2.0'
        >>> extract_version("go1.21.0")
        '1.21.0'
        >>> extract_version("system")
        'system'
    """
    for pattern in VERSION_PATTERNS:
        match = pattern.search(directory_name)
        if match:
            return match.group(1)
    return directory_name


def clean_brew_version(version: str) -> str:
    """Strip a Homebrew revision suffix: '3.12.1_1' -> '3.12.1'."""
    return _BREW_REVISION_RE.sub("", version)


def parse_java_release(content: str) -> Optional[str]:
    """Parse the JAVA_VERSION value out of a JDK `release` file."""
    match = _JAVA_VERSION_RE.search(content)
    if match:
        value = match.group(1).strip().strip("'")
        return value or None
    return None


def read_java_release(java_home: str) -> Optional[str]:
    """Read JAVA_VERSION from <java_home>/release.

    Returns:
        The version, or None if the file is missing or has no usable line
    """
    content = read_text_safe(Path(java_home) / "release")
    if content is None:
        return None
    return parse_java_release(content)


def java_home_name(java_home: str) -> str:
    """Name identifying a JDK home: `zulu-17.jdk` for `.../zulu-17.jdk/Contents/Home`."""
    normalized = os.path.normpath(java_home)
    if normalized.endswith(os.path.join("Contents", "Home")):
        return os.path.basename(os.path.dirname(os.path.dirname(normalized)))
    return os.path.basename(normalized)


def extract_java_version(java_home: str, fallback_name: Optional[str] = None) -> str:
    """Version of a JDK: release file first, then directory-name heuristics."""
    version = read_java_release(java_home)
    if version:
        return version
    name = fallback_name or java_home_name(java_home)
    return extract_version(clean_brew_version(name))


def formula_from_path(path: str) -> Optional[str]:
    """Homebrew formula name from a Cellar path.

    Examples:
        >>> formula_from_path("/opt/homebrew/Cellar/node@20/20.11.0")
        'node@20'
        >>> formula_from_path("/Users/me/.nvm/versions/node/v18.0.0") is None
        True
    """
    match = _CELLAR_FORMULA_RE.search(path)
    if match:
        return match.group(1)
    return None


def homebrew_label(formula: Optional[str]) -> str:
    """'Homebrew (node@20)' for versioned formulae, plain 'Homebrew' otherwise."""
    if formula and "@" in formula:
        return f"Homebrew ({formula})"
    return "Homebrew"


def detect_source(path: str) -> str:
    """Infer a human-readable source label from an install path.

    Markers are matched case-insensitively in a fixed priority order, so a
    Homebrew prefix under the user's home is still labeled Homebrew.

    Args:
        path: Absolute install (or scan) path

    Returns:
        Source label such as 'Homebrew (node@20)', 'pyenv', 'System', 'Local'
    """
    lowered = path.lower()
    for markers, label in SOURCE_MARKERS:
        if any(marker in lowered for marker in markers):
            if label == "Homebrew":
                return homebrew_label(formula_from_path(path))
            return label

    if lowered.startswith(SYSTEM_PREFIXES):
        return "System"
    return "Local"


def version_key(version: str) -> tuple[int, ...]:
    """Numeric sort key for a dotted version string.

    Each dot-separated component contributes its leading digits; the
    first component without any ends the key. Trailing zeros are dropped,
    which makes comparison behave as if missing components were 0.

    Examples:
        >>> version_key("v20.11.0")
        (20, 11)
        >>> version_key("17.0.2+8")
        (17, 0, 2)
        >>> version_key("1.0") == version_key("1.0.0")
        True
    """
    text = version.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]

    parts: list[int] = []
    for component in text.split("."):
        digits = re.match(r"\d+", component)
        if not digits:
            break
        parts.append(int(digits.group(0)))

    while parts and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings numerically.

    Returns:
        Negative if a < b, zero if equal, positive if a > b
    """
    key_a, key_b = version_key(a), version_key(b)
    return (key_a > key_b) - (key_a < key_b)
