"""Tests for the command-line interface."""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from contextrunner import __version__
from contextrunner.cli import discover_files, main

PASSING = textwrap.dedent(
    """
    def register(runner):
        @runner.context("A passing context")
        def passing(ctx):
            ctx.setup(lambda situation: 2)
            ctx.asserts("is two", lambda topic: topic == 2)
    """
)

FAILING = textwrap.dedent(
    """
    def register(runner):
        runner.context("A failing context", lambda ctx: ctx.asserts("is false", lambda t: False))
    """
)


@pytest.fixture
def cli():
    return CliRunner()


@pytest.fixture
def suite(tmp_path, monkeypatch):
    """Create a test directory and make it the working directory."""
    monkeypatch.chdir(tmp_path)
    tests = tmp_path / "tests"
    tests.mkdir()
    return tests


class TestRunCommand:
    """Tests for `contextrunner run`."""

    def test_passing_suite_exits_zero(self, cli, suite):
        """Test a passing suite exits with status 0."""
        (suite / "test_passing.py").write_text(PASSING)

        result = cli.invoke(main, ["run", "--plain", str(suite)])

        assert result.exit_code == 0
        assert "A passing context" in result.output
        assert "+ is two" in result.output

    def test_failing_suite_exits_one(self, cli, suite):
        """Test a failing context makes the run exit with status 1."""
        (suite / "test_passing.py").write_text(PASSING)
        (suite / "test_failing.py").write_text(FAILING)

        result = cli.invoke(main, ["run", "--plain", str(suite)])

        assert result.exit_code == 1
        assert "- is false" in result.output

    def test_silent_prints_nothing(self, cli, suite):
        """Test --silent only sets the exit status."""
        (suite / "test_failing.py").write_text(FAILING)

        result = cli.invoke(main, ["run", "--silent", "--reporter", "dots", str(suite)])

        assert result.exit_code == 1
        assert result.output == ""

    def test_dots_reporter(self, cli, suite):
        """Test selecting the dot matrix reporter."""
        (suite / "test_passing.py").write_text(PASSING)

        result = cli.invoke(main, ["run", "--plain", "--reporter", "dots", str(suite)])

        assert result.exit_code == 0
        assert "1 assertion, 0 failed, 0 errors" in result.output

    def test_failing_upstream_command_is_adopted(self, cli, suite):
        """Test a failing --before command decides the exit status."""
        (suite / "test_passing.py").write_text(PASSING)

        result = cli.invoke(main, ["run", "--plain", "--before", "exit 3", str(suite)])

        assert result.exit_code == 3
        assert "Upstream command failed" in result.output
        assert "A passing context" not in result.output

    def test_passing_upstream_command_runs_tests(self, cli, suite):
        """Test a successful --before command lets the tests run."""
        (suite / "test_failing.py").write_text(FAILING)

        result = cli.invoke(main, ["run", "--plain", "--before", "true", str(suite)])

        assert result.exit_code == 1

    def test_config_file_is_used(self, cli, suite, tmp_path):
        """Test options are read from contextrunner.json."""
        (tmp_path / "contextrunner.json").write_text(json.dumps({"silent": True}))
        (suite / "test_passing.py").write_text(PASSING)

        result = cli.invoke(main, ["run", str(suite)])

        assert result.exit_code == 0
        assert result.output == ""

    def test_standalone_config_still_runs(self, cli, suite, tmp_path):
        """Test the CLI acts on the result itself in standalone mode."""
        (tmp_path / "contextrunner.json").write_text(json.dumps({"standalone": True, "silent": True}))
        (suite / "test_failing.py").write_text(FAILING)

        result = cli.invoke(main, ["run", str(suite)])

        assert result.exit_code == 1

    def test_invalid_config(self, cli, suite, tmp_path):
        """Test an invalid configuration file is reported."""
        config = tmp_path / "bad.json"
        config.write_text(json.dumps({"reporter": "fancy"}))

        result = cli.invoke(main, ["--config", str(config), "run", str(suite)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_file_without_register(self, cli, suite):
        """Test a test file must define register(runner)."""
        (suite / "test_empty.py").write_text("X = 1\n")

        result = cli.invoke(main, ["run", "--plain", str(suite)])

        assert result.exit_code == 1
        assert "does not define register(runner)" in result.output

    def test_no_tests_is_success(self, cli, suite):
        """Test running an empty directory succeeds."""
        result = cli.invoke(main, ["run", "--plain", str(suite)])
        assert result.exit_code == 0


class TestInitCommand:
    """Tests for `contextrunner init`."""

    def test_creates_config(self, cli, tmp_path):
        """Test init writes a configuration file."""
        output = tmp_path / "contextrunner.json"

        result = cli.invoke(main, ["init", "--output", str(output)])

        assert result.exit_code == 0
        assert json.loads(output.read_text())["reporter"] == "story"

    def test_refuses_to_overwrite(self, cli, tmp_path):
        """Test init keeps an existing file unless forced."""
        output = tmp_path / "contextrunner.json"
        output.write_text("{}")

        result = cli.invoke(main, ["init", "--output", str(output)])
        assert result.exit_code == 1
        assert output.read_text() == "{}"

        result = cli.invoke(main, ["init", "--output", str(output), "--force"])
        assert result.exit_code == 0


class TestDiscoverFiles:
    """Tests for test file discovery."""

    def test_directories_are_expanded(self, tmp_path):
        """Test directories yield sorted test files only."""
        (tmp_path / "test_b.py").write_text("")
        (tmp_path / "a_test.py").write_text("")
        (tmp_path / "helpers.py").write_text("")

        files = discover_files((str(tmp_path),))

        assert [f.name for f in files] == ["a_test.py", "test_b.py"]

    def test_files_are_kept_in_order(self, tmp_path):
        """Test explicit files are kept as given."""
        first = tmp_path / "z.py"
        second = tmp_path / "a.py"
        assert discover_files((str(first), str(second))) == [first, second]


def test_version(cli):
    """Test --version prints the version."""
    result = cli.invoke(main, ["--version"])
    assert __version__ in result.output
