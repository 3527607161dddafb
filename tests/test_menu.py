"""Tests for the menu view model."""

from devserver_toolbar.menu import build_server_entries, detail_rows, menu_bar_title
from devserver_toolbar.models import ProjectInfo, ResolvedDetails, ServerEntry, ServerProcess


def test_menu_bar_title_counts_processes():
    """Test the title shows the server count, or nothing."""
    assert menu_bar_title(3) == "3"
    assert menu_bar_title(0) == ""


class TestBuildServerEntries:
    """Tests for build_server_entries."""

    def test_groups_by_port_and_sorts(self):
        """Test processes sharing a port become one entry."""
        processes = [
            ServerProcess(pid=3, port=3001, command="a"),
            ServerProcess(pid=1, port=3000, command="b"),
            ServerProcess(pid=2, port=3000, command="c"),
        ]
        entries = build_server_entries(processes, {})
        assert [e.port for e in entries] == [3000, 3001]
        assert entries[0].pids == [1, 2]

    def test_first_process_supplies_details(self):
        """Test the first process on a port names the entry."""
        processes = [
            ServerProcess(pid=1, port=3000, command="a"),
            ServerProcess(pid=2, port=3000, command="b"),
        ]
        details = {
            1: ResolvedDetails(project_info=ProjectInfo(name="first", version="0.1.0")),
            2: ResolvedDetails(project_info=ProjectInfo(name="second")),
        }
        entry = build_server_entries(processes, details)[0]
        assert entry.title == "first"
        assert entry.version == "0.1.0"

    def test_missing_details_fall_back_to_port(self):
        """Test a server without details is titled by port."""
        entry = build_server_entries([ServerProcess(pid=5, port=3005, command="x")], {})[0]
        assert entry.title == "Port 3005"
        assert entry.memory is None

    def test_repository_and_usage_are_formatted(self):
        """Test usage fields are formatted for display."""
        details = {
            5: ResolvedDetails(
                project_info=ProjectInfo(name="x", repository="git@github.com:a/b.git"),
                memory_mb=64,
                cpu_percent=0.0,
            )
        }
        entry = build_server_entries([ServerProcess(pid=5, port=3000, command="x")], details)[0]
        assert entry.memory == "64 MB"
        assert entry.cpu == "0.0%"
        assert entry.repository == "git@github.com:a/b.git"

    def test_repeated_project_names_get_port_suffix(self):
        """Test ports sharing a project name get distinct titles."""
        processes = [
            ServerProcess(pid=1, port=3000, command="a"),
            ServerProcess(pid=2, port=3001, command="b"),
            ServerProcess(pid=3, port=3002, command="c"),
        ]
        details = {
            1: ResolvedDetails(project_info=ProjectInfo(name="shop")),
            2: ResolvedDetails(project_info=ProjectInfo(name="shop")),
            3: ResolvedDetails(project_info=ProjectInfo(name="admin")),
        }
        titles = [e.title for e in build_server_entries(processes, details)]
        assert titles == ["shop (:3000)", "shop (:3001)", "admin"]
        assert len(set(titles)) == len(titles)


def test_detail_rows_skip_absent_fields():
    """Test only present fields produce rows."""
    entry = ServerEntry(port=3000, title="x", cpu="1.0%")
    assert detail_rows(entry) == ["Port: 3000", "CPU: 1.0%"]
