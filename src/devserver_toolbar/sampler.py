from __future__ import annotations

import time
from typing import Callable

import psutil

from .models import ResourceUsage
from .utils import kilobytes_to_megabytes, logger


def _lifetime_cpu_percent(proc: psutil.Process) -> float:
    # Same figure as ps(1) %CPU: cpu time over wall time since start.
    times = proc.cpu_times()
    elapsed = time.time() - proc.create_time()
    if elapsed <= 0:
        return 0.0
    return (times.user + times.system) / elapsed * 100.0


def sample_resources(
    pid: int,
    process_factory: Callable[[int], psutil.Process] = psutil.Process,
) -> ResourceUsage:
    """Read resident memory (MB) and CPU percentage for ``pid``.

    A process that exits mid-sample or cannot be inspected yields an empty
    ``ResourceUsage``.
    """

    try:
        proc = process_factory(pid)
        with proc.oneshot():
            rss_kb = proc.memory_info().rss // 1024
            cpu = _lifetime_cpu_percent(proc)
    except (psutil.Error, OSError) as exc:
        logger.debug("resource sample for pid %s failed: %s", pid, exc)
        return ResourceUsage()
    return ResourceUsage(
        memory_mb=kilobytes_to_megabytes(rss_kb),
        cpu_percent=round(cpu, 1),
    )


__all__ = ["sample_resources"]
