from __future__ import annotations

import subprocess
from typing import Callable

import psutil

from .resolver import normalize_repository_url
from .utils import logger


class ActionError(Exception):
    def __init__(self, title: str, message: str):
        super().__init__(f"{title}: {message}")
        self.title = title
        self.message = message


def open_url(url: str, open_command: str = "open") -> None:
    subprocess.run(
        [open_command, url],
        check=True,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )


def open_in_browser(port: int, host: str = "localhost", open_command: str = "open") -> str:
    url = f"http://{host}:{port}"
    try:
        open_url(url, open_command)
    except (OSError, subprocess.SubprocessError) as exc:
        logger.info("failed to open %s: %s", url, exc)
        raise ActionError("Failed to open browser", str(exc)) from exc
    return url


def open_repository(raw_url: str, open_command: str = "open") -> str:
    url = normalize_repository_url(raw_url)
    try:
        open_url(url, open_command)
    except (OSError, subprocess.SubprocessError) as exc:
        logger.info("failed to open repository %s: %s", url, exc)
        raise ActionError("Failed to open repository", str(exc)) from exc
    return url


def stop_server(
    pid: int,
    process_factory: Callable[[int], psutil.Process] = psutil.Process,
) -> None:
    """Send SIGKILL to ``pid``; the next poll prunes it from the store."""

    try:
        process_factory(pid).kill()
    except (psutil.Error, OSError) as exc:
        logger.info("failed to stop pid %s: %s", pid, exc)
        raise ActionError("Failed to stop server", str(exc)) from exc


__all__ = ["ActionError", "open_in_browser", "open_repository", "open_url", "stop_server"]
