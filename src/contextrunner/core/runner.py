"""Root context registry and run orchestration."""

import logging
from pathlib import Path
from typing import Any, Callable, Optional

from rich.console import Console

from contextrunner.config import ReporterKind, ReporterOptions, RunnerOptions
from contextrunner.core.context import Context
from contextrunner.core.executor import ChildExit, CommandExecutor
from contextrunner.report import REPORTERS, Reporter

log = logging.getLogger(__name__)


class Runner:
    """Owns the run options and the root contexts of one test process.

    Build one runner in the hosting program, register root contexts on it
    and either call ``run()`` yourself (standalone mode) or hand it to the
    exit hook in ``contextrunner.core.exit``.
    """

    def __init__(
        self,
        options: Optional[RunnerOptions] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the runner.

        Args:
            options: Starting options (default: created on first access)
            console: Console handed to every reporter (default: stdout)
        """
        self._options = options
        self.console = console
        self.root_contexts: list[Context] = []
        self.child_status: Optional[int] = None

    # Configuration

    @property
    def options(self) -> RunnerOptions:
        """The live options, created with defaults on first access."""
        if self._options is None:
            self._options = RunnerOptions()
        return self._options

    def set_silent(self) -> None:
        """Report nothing, whichever reporter is selected."""
        self.options.silent = True

    @property
    def is_silent(self) -> bool:
        return self.options.silent

    def set_standalone(self) -> None:
        """Skip the exit hook; the caller runs the tests and exits itself."""
        self.options.standalone = True

    @property
    def is_standalone(self) -> bool:
        return self.options.standalone

    def set_reporter(self, kind: ReporterKind | str) -> None:
        """Select the reporter kind. Stored even while silent."""
        self.options.reporter = kind

    def verbose(self) -> None:
        self.set_reporter(ReporterKind.VERBOSE)

    def dots(self) -> None:
        self.set_reporter(ReporterKind.DOTS)

    def pretty_dots(self) -> None:
        self.set_reporter(ReporterKind.PRETTY_DOTS)

    def set_plain_output(self) -> None:
        """Turn coloured output off."""
        self.options.reporter_options.plain = True

    @property
    def reporter_options(self) -> ReporterOptions:
        return self.options.reporter_options

    def resolve_reporter(self) -> tuple[ReporterKind, ReporterOptions]:
        """Return the reporter kind to use and a snapshot of its options."""
        kind = ReporterKind.SILENT if self.is_silent else self.options.reporter
        return kind, self.reporter_options.model_copy(deep=True)

    @property
    def reporter_class(self) -> type[Reporter]:
        kind, _ = self.resolve_reporter()
        return REPORTERS[kind]

    # Registration

    def context(
        self,
        description: str,
        definition: Optional[Callable[[Context], Any]] = None,
        context_class: type[Context] = Context,
    ):
        """Register a root context and return it.

        Without ``definition`` this returns a decorator, so a definition
        function can register itself::

            @runner.context("A calculator")
            def calculator(ctx):
                ...
        """
        if not isinstance(description, str) or not description.strip():
            raise ValueError("A root context needs a non-empty description")

        if definition is None:
            return lambda fn: self.context(description, fn, context_class)

        ctx = context_class(description, definition)
        self.root_contexts.append(ctx)
        log.debug("Registered root context %r (%d total)", description, len(self.root_contexts))
        return ctx

    describe = context

    # Upstream processes

    def record_child_exit(self, exit_code: Optional[int]) -> None:
        """Remember the exit status of the most recent upstream child process."""
        if exit_code is not None and exit_code < 0:
            # Killed by a signal: there is no exit status to adopt.
            exit_code = None
        self.child_status = exit_code

    def run_command(
        self,
        command: str,
        working_directory: Optional[Path] = None,
        timeout_seconds: int = 300,
    ) -> ChildExit:
        """Run an upstream command and record its exit status."""
        executor = CommandExecutor(
            working_directory=working_directory,
            timeout_seconds=timeout_seconds,
        )
        child = executor.execute(command)
        self.record_child_exit(child.exit_code)
        return child

    @property
    def prior_failure(self) -> Optional[int]:
        """The recorded child status when it signals a failure, else None."""
        if self.child_status is None or self.child_status == 0:
            return None
        if not 1 <= self.child_status <= 255:
            # The OS keeps only the low byte, which could read as success.
            return 1
        return self.child_status

    # Running

    def build_reporter(self) -> Reporter:
        _, options = self.resolve_reporter()
        return self.reporter_class(options, console=self.console)

    def run(self) -> Reporter:
        """Run every root context, in registration order, against one reporter.

        Returns:
            The reporter that was used. With no root contexts registered it
            is returned untouched and no report is produced.
        """
        reporter = self.build_reporter()
        if not self.root_contexts:
            log.debug("No root contexts registered, nothing to run")
            return reporter

        log.debug(
            "Running %d root context(s) with %s",
            len(self.root_contexts),
            type(reporter).__name__,
        )
        with reporter.summarize():
            for ctx in self.root_contexts:
                ctx.run(reporter)

        log.debug(
            "Run finished: %d passed, %d failed, %d errors",
            reporter.passes,
            reporter.failures,
            reporter.errors,
        )
        return reporter
