from __future__ import annotations

import os
import subprocess
from typing import Callable, Dict, Optional, Sequence

from .utils import logger

CommandRunner = Callable[..., Optional[str]]

FALLBACK_PATH = "/usr/local/bin:/opt/homebrew/bin:/usr/sbin:/usr/bin:/sbin:/bin"


def _subprocess_env() -> Dict[str, str]:
    env = os.environ.copy()
    if "PATH" not in env or not env["PATH"]:
        env["PATH"] = FALLBACK_PATH
    return env


def run_command(args: Sequence[str], timeout: Optional[float] = None) -> Optional[str]:
    """Run ``args`` and return its stdout, or ``None`` if the command failed.

    Missing binaries, timeouts and non-zero exit codes all come back as
    ``None``; callers treat that as an absent signal rather than an error.
    """

    try:
        proc = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            timeout=timeout,
            env=_subprocess_env(),
        )
    except subprocess.TimeoutExpired:
        logger.debug("%s timed out after %ss", args[0], timeout)
        return None
    except (FileNotFoundError, OSError, subprocess.SubprocessError) as exc:
        logger.debug("%s failed to start: %s", args[0], exc)
        return None
    if proc.returncode != 0:
        logger.debug("%s exited rc=%s", args[0], proc.returncode)
        return None
    return proc.stdout


__all__ = ["CommandRunner", "run_command"]
