from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

DEBUG_MODE = os.getenv("DEVSERVER_TOOLBAR_DEBUG")
logger = logging.getLogger("devserver_toolbar")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[devserver-toolbar] %(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)


def format_memory(memory_mb: Optional[int]) -> Optional[str]:
    if memory_mb is None:
        return None
    return f"{memory_mb} MB"


def format_cpu(cpu_percent: Optional[float]) -> Optional[str]:
    if cpu_percent is None:
        return None
    return f"{cpu_percent:.1f}%"


def format_port_range(port_range: Tuple[int, int]) -> str:
    start, end = port_range
    if start == end:
        return str(start)
    return f"{start}-{end}"


def kilobytes_to_megabytes(kilobytes: int) -> int:
    # Halves round up, as ps-based tools report them.
    return (kilobytes + 512) // 1024


__all__ = [
    "DEBUG_MODE",
    "format_cpu",
    "format_memory",
    "format_port_range",
    "kilobytes_to_megabytes",
    "logger",
]
