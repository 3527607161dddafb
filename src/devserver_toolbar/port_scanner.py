from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .commands import CommandRunner, run_command
from .models import ListeningSocket
from .utils import format_port_range

PORT_PATTERN = re.compile(r":(\d+)$")
LSOF_MIN_COLUMNS = 9
LSOF_NAME_COLUMN = 8


def lsof_listen_args(port_range: Tuple[int, int]) -> List[str]:
    return ["lsof", "-i", f":{format_port_range(port_range)}", "-sTCP:LISTEN", "-n", "-P"]


def parse_lsof_listeners(
    output: Optional[str],
    engine_keyword: str = "node",
    port_range: Optional[Tuple[int, int]] = None,
) -> List[ListeningSocket]:
    """Parse ``lsof -i`` listener output into ``(pid, port)`` sockets.

    Lines look like ``node 1234 me 23u IPv4 0x.. 0t0 TCP *:3000 (LISTEN)``.
    Only rows whose command column contains ``engine_keyword`` are kept;
    headers and malformed rows are skipped.
    """

    if not output:
        return []
    keyword = engine_keyword.lower()
    sockets: List[ListeningSocket] = []
    seen = set()
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < LSOF_MIN_COLUMNS:
            continue
        process_name = parts[0]
        if keyword not in process_name.lower():
            continue
        if not parts[1].isdigit():
            continue
        match = PORT_PATTERN.search(parts[LSOF_NAME_COLUMN])
        if not match:
            continue
        pid = int(parts[1])
        port = int(match.group(1))
        if port_range is not None and not port_range[0] <= port <= port_range[1]:
            continue
        # IPv4 and IPv6 listeners of one process show up as separate rows
        if (pid, port) in seen:
            continue
        seen.add((pid, port))
        sockets.append(ListeningSocket(pid=pid, port=port, process_name=process_name))
    return sockets


def scan_listening_ports(
    port_range: Tuple[int, int] = (3000, 3010),
    engine_keyword: str = "node",
    runner: CommandRunner = run_command,
    timeout: Optional[float] = None,
) -> List[ListeningSocket]:
    output = runner(lsof_listen_args(port_range), timeout=timeout)
    return parse_lsof_listeners(output, engine_keyword, port_range)


__all__ = ["lsof_listen_args", "parse_lsof_listeners", "scan_listening_ports"]
