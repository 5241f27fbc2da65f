"""Homebrew Cellar helpers.

Cellar layout:

    /opt/homebrew/Cellar/<formula>/<version>[_<revision>]/...
    /opt/homebrew/Cellar/node@20/20.11.1/bin/node

Discovery itself is done by the directory walk over `Cellar/<name>*`
scan paths; these helpers identify which formula an install belongs to
so the package-manager collaborator (install/uninstall, owned by the UI)
knows what to act on.
"""

import os
from dataclasses import dataclass
from typing import Iterable, Optional

from ..discovery.versions import clean_brew_version, homebrew_label
from ..utils.constants import CELLAR_ROOTS


@dataclass(frozen=True)
class BrewInstalledVersion:
    """A formula version directory inside a Cellar.

    Attributes:
        formula_name: e.g. "node", "node@18", "python@3.13"
        version: Version directory name, e.g. "24.9.0", "3.13.11_1"
        cellar_path: e.g. "/opt/homebrew/Cellar/node/24.9.0"
    """
    formula_name: str
    version: str
    cellar_path: str

    @property
    def clean_version(self) -> str:
        """Version without the _1 style revision suffix."""
        return clean_brew_version(self.version)

    @property
    def source_display(self) -> str:
        return homebrew_label(self.formula_name)

    @property
    def is_versioned_formula(self) -> bool:
        return "@" in self.formula_name


def parse_cellar_path(path: str) -> Optional[BrewInstalledVersion]:
    """Identify the formula version directory an install path lives in.

    Works for the version directory itself and for anything nested in it
    (a Go `libexec`, a JDK `libexec/openjdk.jdk/Contents/Home`).

    Args:
        path: Absolute install path

    Returns:
        The formula version, or None if the path is not inside a Cellar

    Examples:
        >>> parse_cellar_path("/opt/homebrew/Cellar/go/1.22.1/libexec").formula_name
        'go'
    """
    parts = os.path.normpath(path).split(os.sep)
    if "Cellar" not in parts:
        return None

    index = parts.index("Cellar")
    if len(parts) < index + 3:
        return None

    formula, version = parts[index + 1], parts[index + 2]
    if not formula or not version:
        return None

    cellar_path = os.sep.join(parts[: index + 3])
    return BrewInstalledVersion(formula_name=formula, version=version, cellar_path=cellar_path)


def is_homebrew_install(path: str, cellar_roots: Iterable[str] = CELLAR_ROOTS) -> bool:
    """Check whether an install path lives inside a Homebrew prefix."""
    normalized = os.path.normpath(path)
    if normalized.startswith("/opt/homebrew/"):
        return True
    for root in cellar_roots:
        if normalized.startswith(os.path.normpath(root) + os.sep):
            return True
    return parse_cellar_path(normalized) is not None
