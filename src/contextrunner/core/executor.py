"""Upstream command executor.

Runs a command that belongs to the same pipeline as the test run (a build
step, a code generator, another test suite) and captures its exit status,
so that a failure upstream can decide the exit status of the whole run.
"""

import logging
import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)


@dataclass
class ChildExit:
    """Exit information of a finished child process."""

    command: str
    exit_code: int
    duration_ms: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class CommandExecutor:
    """Executes shell commands and captures their exit status."""

    def __init__(
        self,
        working_directory: Optional[Path] = None,
        timeout_seconds: int = 300,
        environment: Optional[dict[str, str]] = None,
        capture_output: bool = False,
    ):
        """Initialize the executor.

        Args:
            working_directory: Directory to run commands in (default: cwd)
            timeout_seconds: Maximum time to allow for one command
            environment: Additional environment variables to set
            capture_output: Capture stdout/stderr instead of passing them through
        """
        self.working_directory = working_directory
        self.timeout_seconds = timeout_seconds
        self.environment = environment or {}
        self.capture_output = capture_output

    def execute(self, command: str) -> ChildExit:
        """Run ``command`` through the shell and wait for it to finish.

        A command that times out or cannot be started is reported with
        exit code 1 rather than raising.
        """
        env = {**os.environ, **self.environment}
        start_time = time.time()
        log.debug("Running upstream command: %s", command)

        try:
            result = subprocess.run(
                command,
                shell=True,
                capture_output=self.capture_output,
                text=True,
                cwd=self.working_directory,
                timeout=self.timeout_seconds,
                env=env,
            )
            duration_ms = int((time.time() - start_time) * 1000)
            child = ChildExit(
                command=command,
                exit_code=result.returncode,
                duration_ms=duration_ms,
                stdout=result.stdout or "",
                stderr=result.stderr or "",
            )

        except subprocess.TimeoutExpired:
            child = ChildExit(
                command=command,
                exit_code=1,
                duration_ms=self.timeout_seconds * 1000,
                stderr=f"Command timed out after {self.timeout_seconds} seconds",
            )

        except OSError as e:
            child = ChildExit(
                command=command,
                exit_code=1,
                duration_ms=int((time.time() - start_time) * 1000),
                stderr=f"Error executing command: {e}",
            )

        log.debug("Upstream command exited with %d after %dms", child.exit_code, child.duration_ms)
        return child
