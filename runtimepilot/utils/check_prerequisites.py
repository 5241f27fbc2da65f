"""External tool detection for RuntimePilot.

Reports which of the tools the scanners can use are present on this
machine. None of them is required: a missing tool only means the
matching discovery strategy finds nothing.

Usage:
    # As module
    from runtimepilot.utils.check_prerequisites import check_all_prerequisites
    results = check_all_prerequisites()

    # From the command line
    runtimepilot doctor [--json]
"""

import os
import re
import subprocess
from typing import Optional

from .constants import BREW_CANDIDATES, JAVA_HOME_TOOL, TIMEOUT_PREREQUISITE
from .subprocess_utils import run_command


def resolve_brew_path() -> Optional[str]:
    """Locate the Homebrew executable.

    Checks the Apple Silicon and Intel install locations first, then
    asks `which brew`.

    Returns:
        Absolute path to brew, or None if Homebrew is not installed
    """
    for candidate in BREW_CANDIDATES:
        if os.path.isfile(candidate):
            return candidate

    resolved = run_command(["which", "brew"])
    if resolved and os.path.isfile(resolved):
        return resolved
    return None


def _check_version(cmd: list[str], pattern: str, missing: str) -> tuple[bool, Optional[str], Optional[str]]:
    """Run a version command and pull the version out of its first line."""
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=TIMEOUT_PREREQUISITE
        )
        if result.returncode == 0:
            output = (result.stdout.strip() or result.stderr.strip()).split("\n")[0]
            match = re.search(pattern, output)
            version = match.group(1) if match else output
            return True, version, None
        return False, None, f"{cmd[0]} returned non-zero exit code"
    except FileNotFoundError:
        return False, None, missing
    except subprocess.TimeoutExpired:
        return False, None, f"Timeout checking {cmd[0]}"
    except OSError as e:
        return False, None, f"Error: {e}"


def check_homebrew() -> tuple[bool, Optional[str], Optional[str]]:
    """Check Homebrew availability and version.

    Returns:
        Tuple of (is_available, version, error_message)
    """
    brew = resolve_brew_path()
    if brew is None:
        return False, None, "Homebrew not installed"
    # Output format: "Homebrew 4.4.0"
    return _check_version([brew, "--version"], r"Homebrew (\d+\.\d+(?:\.\d+)?)", "Homebrew not installed")


def check_java_home() -> tuple[bool, Optional[str], Optional[str]]:
    """Check the macOS JDK enumeration utility.

    Returns:
        Tuple of (is_available, path, error_message)
    """
    if os.path.isfile(JAVA_HOME_TOOL):
        return True, JAVA_HOME_TOOL, None
    return False, None, f"{JAVA_HOME_TOOL} not found (not on macOS?)"


def check_go() -> tuple[bool, Optional[str], Optional[str]]:
    """Check for a Go toolchain on PATH."""
    # Output format: "go version go1.22.1 darwin/arm64"
    return _check_version(["go", "version"], r"go version go(\S+)", "go not found")


def check_python3() -> tuple[bool, Optional[str], Optional[str]]:
    """Check for python3 on PATH."""
    # Output format: "Python 3.12.1"
    return _check_version(["python3", "--version"], r"Python (\d+\.\d+(?:\.\d+)?)", "python3 not found")


def check_all_prerequisites() -> dict:
    """Run all tool checks and return structured results.

    Returns:
        Dictionary with status, checks, and summary
    """
    checks = {}

    available, version, error = check_homebrew()
    checks["homebrew"] = {
        "available": available,
        "version": version,
        "error": error,
        "used_for": "Cellar scanning (java, node, python, go)",
    }

    available, version, error = check_java_home()
    checks["java_home"] = {
        "available": available,
        "version": version,
        "error": error,
        "used_for": "System JDK enumeration",
    }

    available, version, error = check_go()
    checks["go"] = {
        "available": available,
        "version": version,
        "error": error,
        "used_for": "System Go detection",
    }

    available, version, error = check_python3()
    checks["python3"] = {
        "available": available,
        "version": version,
        "error": error,
        "used_for": "System Python detection",
    }

    total = len(checks)
    available_count = sum(1 for c in checks.values() if c["available"])
    missing = [name for name, c in checks.items() if not c["available"]]

    return {
        "status": "ready" if not missing else "partial",
        "checks": checks,
        "summary": {
            "total": total,
            "available": available_count,
            "missing": len(missing),
        }
    }


def format_human_readable(results: dict) -> str:
    """Format results for terminal output.

    Args:
        results: Results dictionary from check_all_prerequisites()

    Returns:
        Formatted string
    """
    lines = ["Tool Check", "=" * 10]

    for name, check in results["checks"].items():
        if check["available"]:
            lines.append(f"  [OK] {name} {check['version']}")
        else:
            lines.append(f"  [--] {name} ({check['error']}; affects: {check['used_for']})")

    if results["status"] == "ready":
        lines.append("\nStatus: All discovery strategies available")
    else:
        lines.append("\nStatus: Some discovery strategies will find nothing")

    return "\n".join(lines)
