"""Tests for per-process resource sampling."""

import contextlib
import time
from collections import namedtuple

import psutil

from devserver_toolbar.models import ResourceUsage
from devserver_toolbar.sampler import sample_resources

MemInfo = namedtuple("MemInfo", "rss vms")
CpuTimes = namedtuple("CpuTimes", "user system children_user children_system")


class FakeProcess:
    def __init__(self, pid, rss=0, user=0.0, system=0.0, age=100.0, error=None):
        self.pid = pid
        self._rss = rss
        self._user = user
        self._system = system
        self._created = time.time() - age
        self._error = error

    @contextlib.contextmanager
    def oneshot(self):
        yield

    def memory_info(self):
        if self._error:
            raise self._error
        return MemInfo(rss=self._rss, vms=0)

    def cpu_times(self):
        return CpuTimes(self._user, self._system, 0.0, 0.0)

    def create_time(self):
        return self._created


class TestSampleResources:
    """Tests for sample_resources."""

    def test_memory_rounded_to_megabytes(self):
        """Test RSS is reported as rounded megabytes."""
        proc = FakeProcess(1, rss=150 * 1024 * 1024 + 700 * 1024)
        usage = sample_resources(1, process_factory=lambda pid: proc)
        assert usage.memory_mb == 151

    def test_cpu_is_lifetime_average(self):
        """Test CPU is cpu time over elapsed time, one decimal place."""
        proc = FakeProcess(1, rss=1024, user=10.0, system=2.5, age=100.0)
        usage = sample_resources(1, process_factory=lambda pid: proc)
        assert 12.4 <= usage.cpu_percent <= 12.5
        assert usage.cpu_percent == round(usage.cpu_percent, 1)

    def test_exited_process_yields_empty_usage(self):
        """Test a vanished process produces an empty result."""
        def factory(pid):
            raise psutil.NoSuchProcess(pid)

        assert sample_resources(1234, process_factory=factory) == ResourceUsage()

    def test_access_denied_yields_empty_usage(self):
        """Test permission errors mid-sample produce an empty result."""
        proc = FakeProcess(1, error=psutil.AccessDenied(1))
        usage = sample_resources(1, process_factory=lambda pid: proc)
        assert usage.memory_mb is None
        assert usage.cpu_percent is None
