from __future__ import annotations

from typing import Iterable, Optional

from .commands import CommandRunner, run_command
from .models import Classification

# ps aux columns: USER PID %CPU %MEM VSZ RSS TT STAT STARTED TIME COMMAND...
PS_PID_COLUMN = 1
PS_COMMAND_COLUMN = 10
DEFAULT_KEYWORDS = ("nuxt", "nuxi", "nitro")


def placeholder_command(port: int) -> str:
    return f"Node.js server on port {port}"


def fetch_process_table(
    runner: CommandRunner = run_command, timeout: Optional[float] = None
) -> Optional[str]:
    """Return the raw ``ps aux`` text, or ``None`` when it is unavailable."""

    return runner(["ps", "aux"], timeout=timeout)


def classify_process(
    process_table: Optional[str],
    pid: int,
    port: int,
    keywords: Iterable[str] = DEFAULT_KEYWORDS,
) -> Classification:
    """Decide whether ``pid`` is a dev server and extract its command.

    A missing table (as opposed to one with no matching row) accepts the
    candidate with a placeholder command: the listening socket alone is
    still worth showing.
    """

    if process_table is None:
        return Classification(is_match=True, command=placeholder_command(port))

    target = str(pid)
    lowered_keywords = [keyword.lower() for keyword in keywords]
    for line in process_table.splitlines():
        tokens = line.split()
        if len(tokens) <= PS_PID_COLUMN or tokens[PS_PID_COLUMN] != target:
            continue
        lowered = line.lower()
        if any(keyword in lowered for keyword in lowered_keywords):
            command = " ".join(tokens[PS_COMMAND_COLUMN:]) or placeholder_command(port)
            return Classification(is_match=True, command=command)
    return Classification(is_match=False, command=placeholder_command(port))


__all__ = ["classify_process", "fetch_process_table", "placeholder_command"]
