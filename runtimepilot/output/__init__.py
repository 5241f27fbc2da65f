"""Generated shell scripts.

Modules:
    env_script: EnvironmentScriptWriter and script parsing
"""

from .env_script import (
    EnvironmentScriptWriter,
    ScriptWriteError,
    parse_active_path,
    render_script,
)

__all__ = [
    "EnvironmentScriptWriter",
    "ScriptWriteError",
    "parse_active_path",
    "render_script",
]
