from __future__ import annotations

from collections import Counter
from typing import Dict, List, Mapping, Sequence

from .models import ResolvedDetails, ServerEntry, ServerProcess
from .utils import format_cpu, format_memory


def _group_by_port(processes: Sequence[ServerProcess]) -> Dict[int, List[ServerProcess]]:
    grouped: Dict[int, List[ServerProcess]] = {}
    for process in processes:
        grouped.setdefault(process.port, []).append(process)
    return grouped


def build_server_entries(
    processes: Sequence[ServerProcess],
    details: Mapping[int, ResolvedDetails],
) -> List[ServerEntry]:
    """Collapse processes into one menu entry per port.

    The first process seen on a port supplies the project details; every
    process on the port gets its own stop action. Menu items are keyed by
    title, so a project name shared by several ports gets a ``(:PORT)``
    suffix.
    """

    entries: List[ServerEntry] = []
    for port, group in sorted(_group_by_port(processes).items()):
        main = group[0]
        resolved = details.get(main.pid) or ResolvedDetails()
        info = resolved.project_info
        entries.append(
            ServerEntry(
                port=port,
                title=resolved.project_name or f"Port {port}",
                pids=[process.pid for process in group],
                version=info.version if info else None,
                memory=format_memory(resolved.memory_mb),
                cpu=format_cpu(resolved.cpu_percent),
                repository=info.repository if info else None,
                cwd=resolved.cwd,
            )
        )

    title_counts = Counter(entry.title for entry in entries)
    for entry in entries:
        if title_counts[entry.title] > 1:
            entry.title = f"{entry.title} (:{entry.port})"
    return entries


def detail_rows(entry: ServerEntry) -> List[str]:
    rows = [f"Port: {entry.port}"]
    if entry.version:
        rows.append(f"Version: {entry.version}")
    if entry.memory:
        rows.append(f"Memory: {entry.memory}")
    if entry.cpu:
        rows.append(f"CPU: {entry.cpu}")
    return rows


def menu_bar_title(process_count: int) -> str:
    return str(process_count) if process_count else ""


__all__ = ["build_server_entries", "detail_rows", "menu_bar_title"]
