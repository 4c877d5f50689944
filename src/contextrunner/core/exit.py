"""Exit status resolution, run once when the test process shuts down.

The hosting entry point wires this up explicitly as its last step::

    runner = Runner()
    ...  # register contexts
    shutdown(runner)

A failing upstream child process recorded on the runner wins over running
the tests: its status becomes the exit status and nothing runs.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Optional

from contextrunner.core.runner import Runner

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExitOutcome:
    """The exit status chosen for the process."""

    status: int
    deferred: bool = False

    @property
    def success(self) -> bool:
        return self.status == 0


class ExitStatusResolver:
    """Decides, once, which status the process exits with."""

    def __init__(self, runner: Runner):
        self.runner = runner
        self._outcome: Optional[ExitOutcome] = None

    @property
    def outcome(self) -> Optional[ExitOutcome]:
        return self._outcome

    def resolve(self) -> ExitOutcome:
        """Adopt a prior child failure or run the tests and map their result.

        Only the first call does any work; later calls return the same
        outcome.
        """
        if self._outcome is not None:
            return self._outcome

        prior = self.runner.prior_failure
        if prior is not None:
            log.info("Upstream process failed with status %d, not running tests", prior)
            self._outcome = ExitOutcome(status=prior, deferred=True)
            return self._outcome

        reporter = self.runner.run()
        self._outcome = ExitOutcome(status=0 if reporter.success else 1)
        return self._outcome

    def shutdown(self) -> Optional[int]:
        """Resolve the outcome and exit the process with it.

        Does nothing in standalone mode, where the caller owns the run.
        """
        if self.runner.is_standalone:
            log.debug("Standalone mode, skipping the exit hook")
            return None

        outcome = self.resolve()
        sys.exit(outcome.status)


def shutdown(runner: Runner) -> Optional[int]:
    """Exit hook for entry points: resolve the status for ``runner`` and exit."""
    return ExitStatusResolver(runner).shutdown()
