"""Generated shell scripts that put the active runtime on PATH.

One script per language, `<identifier>_env.sh` in the config directory,
sourced from the user's shell profile:

    export JAVA_HOME="/Library/Java/JavaVirtualMachines/zulu-17.jdk/Contents/Home"
    export PATH="$JAVA_HOME/bin:$PATH"

Languages without a home variable get a single line:

    export PATH="/opt/homebrew/Cellar/node/20.11.1/bin:$PATH"

Every write replaces the whole file, so sourcing it any number of times
leaves the shell in the same state.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from ..config.languages import LanguageConfig
from ..scanners.base import VersionRecord
from ..utils.constants import DIR_MODE, SCRIPT_FILE_MODE, get_config_dir
from ..utils.file_ops import atomic_write_text, ensure_directory, read_text_safe
from ..utils.path_safety import safe_join, validate_script_file_name

logger = logging.getLogger(__name__)


class ScriptWriteError(Exception):
    """A generated script could not be written or removed.

    Attributes:
        path: Script that was being written
        error: Underlying OSError
    """

    def __init__(self, path: Path, error: OSError):
        self.path = path
        self.error = error
        super().__init__(f"Could not write {path}: {error}")


_DQ_SPECIAL_RE = re.compile(r'(["\\$`])')
_DQ_ESCAPE_RE = re.compile(r"\\(.)")


def escape_value(value: str) -> str:
    """Escape a value for use inside POSIX double quotes."""
    return _DQ_SPECIAL_RE.sub(r"\\\1", value)


def unescape_value(value: str) -> str:
    return _DQ_ESCAPE_RE.sub(r"\1", value)


def render_script(env_var_name: Optional[str], install_path: str) -> str:
    """Build the script content for an install.

    Args:
        env_var_name: Home variable to export, or None for PATH only
        install_path: Runtime root; its bin/ is prepended to PATH

    Returns:
        Script text, newline-terminated
    """
    escaped = escape_value(install_path)
    if env_var_name:
        return (
            f'export {env_var_name}="{escaped}"\n'
            f'export PATH="${env_var_name}/bin:$PATH"\n'
        )
    return f'export PATH="{escaped}/bin:$PATH"\n'


def parse_active_path(content: str, env_var_name: Optional[str]) -> Optional[str]:
    """Extract the install path a script points at.

    Accepts double-quoted, single-quoted and unquoted assignments, so
    hand-edited or older scripts still resolve.

    Args:
        content: Script text
        env_var_name: Home variable, or None to read the PATH line

    Returns:
        The install path, or None if the script has no usable line
    """
    if env_var_name:
        var = re.escape(env_var_name)
        patterns = (
            (re.compile(rf'^\s*export\s+{var}="((?:[^"\\]|\\.)+)"', re.MULTILINE), True),
            (re.compile(rf"^\s*export\s+{var}='([^']+)'", re.MULTILINE), False),
            (re.compile(rf"^\s*export\s+{var}=([^\s\"']+)", re.MULTILINE), False),
        )
    else:
        patterns = (
            (re.compile(r'^\s*export\s+PATH="((?:[^"\\]|\\.)+?)/bin:\$PATH"', re.MULTILINE), True),
            (re.compile(r"^\s*export\s+PATH='([^']+?)/bin:\$PATH'", re.MULTILINE), False),
            (re.compile(r"^\s*export\s+PATH=([^\s\"':]+)/bin:\$PATH", re.MULTILINE), False),
        )

    for pattern, escaped in patterns:
        match = pattern.search(content)
        if match:
            value = match.group(1)
            return unescape_value(value) if escaped else value
    return None


class EnvironmentScriptWriter:
    """Write, read back and remove per-language environment scripts.

    Args:
        config_dir: Directory holding the scripts; defaults to the config dir
    """

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or get_config_dir()

    def script_path(self, language: LanguageConfig) -> Path:
        """Location of a language's script.

        Raises:
            InvalidIdentifierError: If the configured file name is unsafe
        """
        file_name = validate_script_file_name(language.script_file_name)
        return safe_join(self.config_dir, file_name)

    def write(self, language: LanguageConfig, record: VersionRecord) -> Path:
        """Point a language's script at an install.

        Returns:
            The script path

        Raises:
            ScriptWriteError: If the directory or the file cannot be written
        """
        return self.write_path(language, record.install_path)

    def write_path(self, language: LanguageConfig, install_path: str) -> Path:
        """Point a language's script at an install path (see write)."""
        target = self.script_path(language)
        content = render_script(language.env_var_name, install_path)
        try:
            ensure_directory(self.config_dir, DIR_MODE)
            atomic_write_text(target, content, SCRIPT_FILE_MODE)
        except OSError as e:
            logger.error("Failed to write %s: %s", target, e)
            raise ScriptWriteError(target, e) from e

        logger.info("%s now points at %s", target.name, install_path)
        return target

    def read_active_path(self, language: LanguageConfig) -> Optional[str]:
        """Install path recorded in a language's script, if any."""
        content = read_text_safe(self.script_path(language))
        if content is None:
            return None
        return parse_active_path(content, language.env_var_name)

    def remove(self, language: LanguageConfig) -> bool:
        """Delete a language's script.

        Returns:
            True if a script was removed, False if there was none

        Raises:
            ScriptWriteError: If the file exists but cannot be deleted
        """
        target = self.script_path(language)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error("Failed to remove %s: %s", target, e)
            raise ScriptWriteError(target, e) from e
        logger.info("Removed %s", target)
        return True
