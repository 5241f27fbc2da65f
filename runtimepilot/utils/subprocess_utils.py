"""Safe command execution for runtime introspection.

Every external process the scanners start goes through run_command so
that a missing binary, a non-zero exit or a hung process all collapse
into "no output" instead of an exception.
"""

import logging
import os
import subprocess
from typing import Optional

from .constants import TIMEOUT_COMMAND

logger = logging.getLogger(__name__)


def run_command(
    cmd: list[str],
    timeout: float = TIMEOUT_COMMAND,
    env: Optional[dict] = None,
    text: bool = True,
) -> Optional[str]:
    """Run a command and return its stdout, or None on failure.

    Args:
        cmd: Command and arguments as a list
        timeout: Timeout in seconds
        env: Optional environment variables merged over os.environ
        text: Decode stdout as text; when False raw bytes are returned

    Returns:
        stdout (stripped when text), or None if the command failed,
        timed out or could not be started
    """
    try:
        run_env = os.environ.copy()
        if env:
            run_env.update(env)

        result = subprocess.run(
            cmd,
            capture_output=True,
            text=text,
            timeout=timeout,
            env=run_env,
        )
        if result.returncode == 0:
            return result.stdout.strip() if text else result.stdout
        logger.debug("%s exited with %d", cmd[0], result.returncode)
        return None
    except subprocess.TimeoutExpired:
        logger.warning("%s timed out after %ss", " ".join(cmd), timeout)
        return None
    except (FileNotFoundError, OSError) as e:
        logger.debug("Could not run %s: %s", cmd[0], e)
        return None
