"""Reporters that record and render assertion results."""

import time
import traceback
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console
from rich.markup import escape

from contextrunner.config import ReporterOptions
from contextrunner.models import AssertionResult, AssertionStatus


class Reporter(ABC):
    """Abstract base class for reporters.

    A reporter counts passes, failures and errors across every context of
    a run. ``summarize()`` wraps the whole run and prints the totals when
    it exits.
    """

    def __init__(
        self,
        options: Optional[ReporterOptions] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the reporter.

        Args:
            options: Reporter options snapshot (``plain`` disables colour)
            console: Console to write to (default: a new stdout console)
        """
        self.options = options or ReporterOptions()
        self.console = console or Console(no_color=self.options.plain, highlight=False)
        self.passes = 0
        self.failures = 0
        self.errors = 0
        self.current_context = None

    @property
    def plain(self) -> bool:
        return self.options.plain

    @property
    def success(self) -> bool:
        """Whether nothing failed or errored."""
        return (self.failures + self.errors) == 0

    @contextmanager
    def summarize(self) -> Iterator["Reporter"]:
        """Wrap a full run; the results are printed on exit."""
        started = time.perf_counter()
        try:
            yield self
        finally:
            self.results(time.perf_counter() - started)

    def describe_context(self, context) -> None:
        self.current_context = context
        self.new_context(context.detailed_description)

    def report(self, description: str, result: AssertionResult) -> None:
        """Count a result and hand it to the matching rendering hook."""
        if result.status == AssertionStatus.PASSED:
            self.passes += 1
            self.pass_(description, result)
        elif result.status == AssertionStatus.FAILED:
            self.failures += 1
            self.fail(description, result)
        else:
            self.errors += 1
            self.error(description, result)

    def new_context(self, description: str) -> None:
        pass

    @abstractmethod
    def pass_(self, description: str, result: AssertionResult) -> None:
        pass

    @abstractmethod
    def fail(self, description: str, result: AssertionResult) -> None:
        pass

    @abstractmethod
    def error(self, description: str, result: AssertionResult) -> None:
        pass

    @abstractmethod
    def results(self, duration: float) -> None:
        """Render the totals for the run."""
        pass

    def _styled(self, text: str, style: str) -> str:
        text = escape(text)
        if self.plain:
            return text
        return f"[{style}]{text}[/{style}]"

    def _totals(self, duration: float) -> str:
        total = self.passes + self.failures + self.errors
        return (
            f"{total} {'assertion' if total == 1 else 'assertions'}, "
            f"{self.failures} failed, {self.errors} errors in {duration:.6f} seconds"
        )


class StoryReporter(Reporter):
    """Narrates each context followed by its assertions."""

    def new_context(self, description: str) -> None:
        self.console.print(escape(description))

    def pass_(self, description: str, result: AssertionResult) -> None:
        line = f"  + {description}"
        if result.message:
            line += f" {result.message}"
        self.console.print(self._styled(line, "green"))

    def fail(self, description: str, result: AssertionResult) -> None:
        self.console.print(self._styled(f"  - {description}: {result.message}", "yellow"))

    def error(self, description: str, result: AssertionResult) -> None:
        self.console.print(self._styled(f"  ! {description}: {result.message}", "red"))

    def results(self, duration: float) -> None:
        self.console.print()
        self.console.print(self._totals(duration))


class VerboseStoryReporter(StoryReporter):
    """Story reporter that also prints the traceback of every error."""

    def error(self, description: str, result: AssertionResult) -> None:
        super().error(description, result)
        if result.exception is not None:
            lines = traceback.format_exception(
                type(result.exception), result.exception, result.exception.__traceback__
            )
            for line in "".join(lines).rstrip().splitlines():
                self.console.print(self._styled(f"      {line}", "red"))


class DotMatrixReporter(Reporter):
    """Prints one mark per assertion and the details of problems at the end."""

    PASS_MARK = "."
    FAIL_MARK = "F"
    ERROR_MARK = "E"

    def __init__(self, options=None, console=None):
        super().__init__(options, console)
        self.details: list[tuple[str, str, AssertionResult]] = []

    def pass_(self, description: str, result: AssertionResult) -> None:
        self._mark(self.PASS_MARK, "green")

    def fail(self, description: str, result: AssertionResult) -> None:
        self._mark(self.FAIL_MARK, "yellow")
        self._remember(description, result)

    def error(self, description: str, result: AssertionResult) -> None:
        self._mark(self.ERROR_MARK, "red")
        self._remember(description, result)

    def results(self, duration: float) -> None:
        self.console.print()
        for context, description, result in self.details:
            label = "FAILURE" if result.status == AssertionStatus.FAILED else "ERROR"
            style = "yellow" if result.status == AssertionStatus.FAILED else "red"
            self.console.print()
            self.console.print(self._styled(f"#{label} - \"{context} {description}\"", style))
            self.console.print(f"  {escape(result.message)}")
        self.console.print()
        self.console.print(self._totals(duration))

    def _mark(self, mark: str, style: str) -> None:
        self.console.print(self._styled(mark, style), end="")

    def _remember(self, description: str, result: AssertionResult) -> None:
        context = self.current_context.detailed_description if self.current_context else ""
        self.details.append((context, description, result))


class PrettyDotMatrixReporter(DotMatrixReporter):
    """Dot matrix with unicode marks."""

    PASS_MARK = "●"
    FAIL_MARK = "✗"
    ERROR_MARK = "✖"


class SilentReporter(Reporter):
    """Counts results without printing anything."""

    def pass_(self, description: str, result: AssertionResult) -> None:
        pass

    def fail(self, description: str, result: AssertionResult) -> None:
        pass

    def error(self, description: str, result: AssertionResult) -> None:
        pass

    def results(self, duration: float) -> None:
        pass
