from __future__ import annotations

import time
from typing import Callable, Dict, List

from .classifier import classify_process, fetch_process_table
from .commands import CommandRunner, run_command
from .config import ToolbarConfig
from .menu import build_server_entries
from .models import ResolvedDetails, ResourceUsage, ServerEntry, ServerProcess
from .port_scanner import scan_listening_ports
from .resolver import resolve_project
from .sampler import sample_resources
from .store import CorrelationStore
from .utils import logger

Sampler = Callable[[int], ResourceUsage]


def discover_servers(config: ToolbarConfig, runner: CommandRunner = run_command) -> List[ServerProcess]:
    sockets = scan_listening_ports(
        config.port_range,
        config.engine_keyword,
        runner=runner,
        timeout=config.command_timeout,
    )
    if not sockets:
        return []

    table = fetch_process_table(runner, timeout=config.command_timeout)
    if table is None:
        logger.debug("process table unavailable; accepting %s listeners", len(sockets))

    processes: List[ServerProcess] = []
    for socket in sockets:
        result = classify_process(table, socket.pid, socket.port, config.framework_keywords)
        if not result.is_match:
            continue
        processes.append(ServerProcess(pid=socket.pid, port=socket.port, command=result.command))
    return processes


class DevServerMonitor:
    """Runs the scan, classify, resolve and reconcile steps of one poll."""

    def __init__(
        self,
        config: ToolbarConfig,
        runner: CommandRunner = run_command,
        sampler: Sampler = sample_resources,
    ):
        self.config = config
        self._runner = runner
        self._sampler = sampler
        self.store = CorrelationStore(self._resolve)
        self._processes: List[ServerProcess] = []
        self._entries: List[ServerEntry] = []

    def _resolve(self, process: ServerProcess) -> ResolvedDetails:
        project = resolve_project(
            process.pid,
            process.command,
            runner=self._runner,
            timeout=self.config.cwd_lookup_timeout,
        )
        usage = self._sampler(process.pid)
        return ResolvedDetails.combine(project, usage)

    def poll(self) -> List[ServerEntry]:
        started = time.perf_counter()
        processes = discover_servers(self.config, self._runner)
        details = self.store.reconcile(processes)
        self._processes = processes
        self._entries = build_server_entries(processes, details)
        logger.debug(
            "poll complete in %.3fs (servers=%s, ports=%s)",
            time.perf_counter() - started,
            len(processes),
            len(self._entries),
        )
        return list(self._entries)

    @property
    def processes(self) -> List[ServerProcess]:
        return list(self._processes)

    @property
    def entries(self) -> List[ServerEntry]:
        return list(self._entries)

    def details(self) -> Dict[int, ResolvedDetails]:
        return self.store.snapshot()


__all__ = ["DevServerMonitor", "discover_servers"]
