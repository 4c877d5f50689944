"""Tests for the upstream command executor."""

import tempfile
from pathlib import Path

from contextrunner.core.executor import ChildExit, CommandExecutor


class TestCommandExecutor:
    """Tests for CommandExecutor."""

    def test_execute_simple_command(self):
        """Test executing a simple command."""
        executor = CommandExecutor(timeout_seconds=10, capture_output=True)

        result = executor.execute("echo 'upstream output'")

        assert isinstance(result, ChildExit)
        assert "upstream output" in result.stdout
        assert result.exit_code == 0
        assert result.success is True
        assert result.command == "echo 'upstream output'"

    def test_execute_failing_command(self):
        """Test command that exits with non-zero code."""
        executor = CommandExecutor(timeout_seconds=10)

        result = executor.execute("exit 7")

        assert result.exit_code == 7
        assert result.success is False

    def test_execute_in_specific_directory(self):
        """Test command execution in specific directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)
            (tmpdir_path / "built.txt").write_text("content")

            executor = CommandExecutor(
                working_directory=tmpdir_path,
                timeout_seconds=10,
                capture_output=True,
            )
            result = executor.execute("cat built.txt")

            assert "content" in result.stdout
            assert result.exit_code == 0

    def test_execute_with_environment_variables(self):
        """Test command execution with custom environment."""
        executor = CommandExecutor(
            timeout_seconds=10,
            environment={"UPSTREAM_VAR": "upstream_value"},
            capture_output=True,
        )

        result = executor.execute("echo $UPSTREAM_VAR")

        assert "upstream_value" in result.stdout

    def test_execute_timeout(self):
        """Test a command that times out is reported as a failure."""
        executor = CommandExecutor(timeout_seconds=1, capture_output=True)

        result = executor.execute("sleep 5")

        assert result.exit_code == 1
        assert "timed out" in result.stderr
        assert result.duration_ms == 1000

