"""Shared fakes for the devserver_toolbar tests."""

from typing import Dict, List, Optional, Sequence, Tuple

import pytest


class FakeRunner:
    """Stands in for run_command, answering by executable + first argument."""

    def __init__(self, responses: Optional[Dict[Tuple[str, ...], Optional[str]]] = None):
        self.responses = dict(responses or {})
        self.calls: List[Tuple[Tuple[str, ...], Optional[float]]] = []

    def __call__(self, args: Sequence[str], timeout: Optional[float] = None) -> Optional[str]:
        key = tuple(args)
        self.calls.append((key, timeout))
        for prefix in sorted(self.responses, key=len, reverse=True):
            if key[: len(prefix)] == prefix:
                return self.responses[prefix]
        return None

    def count(self, *prefix: str) -> int:
        return sum(1 for args, _ in self.calls if args[: len(prefix)] == prefix)


LSOF_HEADER = "COMMAND   PID USER   FD   TYPE             DEVICE SIZE/OFF NODE NAME"


def lsof_line(command: str, pid: int, address: str) -> str:
    return f"{command} {pid} dev 23u IPv4 0x1a2b3c4d 0t0 TCP {address} (LISTEN)"


def ps_line(pid: int, command: str, user: str = "dev") -> str:
    return f"{user} {pid} 0.0 0.4 4123456 65432 s001 S+ 10:00AM 0:01.23 {command}"


@pytest.fixture
def fake_runner():
    return FakeRunner()
