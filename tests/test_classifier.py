"""Tests for the process-table classifier."""

from conftest import FakeRunner, ps_line

from devserver_toolbar.classifier import (
    classify_process,
    fetch_process_table,
    placeholder_command,
)

PS_HEADER = "USER PID %CPU %MEM VSZ RSS TT STAT STARTED TIME COMMAND"


def _table(*lines: str) -> str:
    return "\n".join([PS_HEADER, *lines])


class TestClassifyProcess:
    """Tests for classify_process."""

    def test_keyword_match_extracts_command(self):
        """Test a nuxt row matches and yields its invocation tail."""
        table = _table(ps_line(1234, "node /home/u/app/node_modules/.bin/nuxt dev"))
        result = classify_process(table, 1234, 3000)
        assert result.is_match
        assert result.command == "node /home/u/app/node_modules/.bin/nuxt dev"

    def test_keyword_match_is_case_insensitive(self):
        """Test keywords match regardless of case."""
        table = _table(ps_line(99, "node .output/server/NITRO.mjs"))
        assert classify_process(table, 99, 3000).is_match

    def test_missing_pid_is_not_a_match(self):
        """Test a table without the pid token yields no match."""
        table = _table(ps_line(5678, "node nuxt dev"))
        result = classify_process(table, 1234, 3000)
        assert not result.is_match

    def test_pid_must_be_a_whole_token(self):
        """Test pid 123 does not match a row for pid 1234."""
        table = _table(ps_line(1234, "node nuxi dev"))
        assert not classify_process(table, 123, 3000).is_match

    def test_pid_only_matches_pid_column(self):
        """Test a pid appearing in another row's arguments is not confirmed."""
        table = _table(
            ps_line(1234, "node /x/node_modules/.bin/nuxi dev --port 3001"),
            ps_line(3001, "node api.js"),
        )
        result = classify_process(table, 3001, 3000)
        assert not result.is_match

    def test_pid_without_keyword_is_not_a_match(self):
        """Test a plain node process is rejected."""
        table = _table(ps_line(1234, "node server.js"))
        assert not classify_process(table, 1234, 3000).is_match

    def test_empty_table_is_not_a_match(self):
        """Test an available but empty table rejects candidates."""
        assert not classify_process("", 1234, 3000).is_match

    def test_unavailable_table_accepts_optimistically(self):
        """Test a missing table accepts the candidate with a placeholder."""
        result = classify_process(None, 1234, 3001)
        assert result.is_match
        assert result.command == placeholder_command(3001)
        assert "3001" in result.command

    def test_custom_keywords(self):
        """Test the keyword set can be replaced."""
        table = _table(ps_line(1, "node node_modules/.bin/vite"))
        assert classify_process(table, 1, 5173, keywords=["vite"]).is_match
        assert not classify_process(table, 1, 5173).is_match


class TestFetchProcessTable:
    """Tests for fetch_process_table."""

    def test_returns_runner_output(self):
        """Test the raw ps text is returned."""
        runner = FakeRunner({("ps", "aux"): "table"})
        assert fetch_process_table(runner) == "table"

    def test_failure_returns_none(self):
        """Test a failing ps run yields None."""
        assert fetch_process_table(FakeRunner()) is None
