"""
ContextRunner - context-based test framework runner.

This package provides tools to:
- Register root contexts (independently runnable test groups)
- Run them in registration order against a single reporter
- Choose between story, dot-matrix and silent reporting
- Resolve the process exit status, deferring to an upstream failure
"""

__version__ = "0.1.0"
__author__ = "ContextRunner Team"

from contextrunner.config import ReporterKind, ReporterOptions, RunnerOptions
from contextrunner.core.context import Context, Situation
from contextrunner.core.exit import ExitOutcome, ExitStatusResolver, shutdown
from contextrunner.core.runner import Runner

__all__ = [
    "Context",
    "ExitOutcome",
    "ExitStatusResolver",
    "ReporterKind",
    "ReporterOptions",
    "Runner",
    "RunnerOptions",
    "Situation",
    "shutdown",
]
