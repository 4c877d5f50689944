"""Core orchestration: contexts, the runner and the exit hook."""

from contextrunner.core.context import Context, Situation
from contextrunner.core.executor import ChildExit, CommandExecutor
from contextrunner.core.exit import ExitOutcome, ExitStatusResolver, shutdown
from contextrunner.core.runner import Runner

__all__ = [
    "ChildExit",
    "CommandExecutor",
    "Context",
    "ExitOutcome",
    "ExitStatusResolver",
    "Runner",
    "Situation",
    "shutdown",
]
