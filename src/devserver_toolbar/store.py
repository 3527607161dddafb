from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, Mapping

from .models import ResolvedDetails, ServerProcess
from .utils import logger

Resolver = Callable[[ServerProcess], ResolvedDetails]


@dataclass(frozen=True)
class ReconcileDiff:
    added: FrozenSet[int]
    removed: FrozenSet[int]
    kept: FrozenSet[int]

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed


def diff_process_ids(stored: Iterable[int], current: Iterable[int]) -> ReconcileDiff:
    stored_ids = frozenset(stored)
    current_ids = frozenset(current)
    return ReconcileDiff(
        added=current_ids - stored_ids,
        removed=stored_ids - current_ids,
        kept=current_ids & stored_ids,
    )


class CorrelationStore:
    """Process-id keyed cache of resolved server details.

    Each pid is resolved once per appearance. ``reconcile`` keeps entries for
    pids that are still live, resolves new ones and drops the rest, then
    swaps the whole mapping in one assignment.
    """

    def __init__(self, resolver: Resolver):
        self._resolver = resolver
        self._details: Dict[int, ResolvedDetails] = {}

    def reconcile(self, processes: Iterable[ServerProcess]) -> Mapping[int, ResolvedDetails]:
        by_pid: Dict[int, ServerProcess] = {}
        for process in processes:
            by_pid.setdefault(process.pid, process)

        diff = diff_process_ids(self._details.keys(), by_pid.keys())
        if diff.is_empty:
            return self.snapshot()

        logger.debug(
            "reconcile: added=%s removed=%s kept=%s",
            sorted(diff.added),
            sorted(diff.removed),
            len(diff.kept),
        )
        updated = {pid: self._details[pid] for pid in diff.kept}
        for pid in sorted(diff.added):
            updated[pid] = self._resolver(by_pid[pid])
        self._details = updated
        return self.snapshot()

    def snapshot(self) -> Dict[int, ResolvedDetails]:
        return dict(self._details)

    def get(self, pid: int) -> ResolvedDetails | None:
        return self._details.get(pid)

    def __contains__(self, pid: object) -> bool:
        return pid in self._details

    def __len__(self) -> int:
        return len(self._details)


__all__ = ["CorrelationStore", "ReconcileDiff", "Resolver", "diff_process_ids"]
