"""Contexts: named groups of setups, assertions and nested contexts.

A context is defined by a plain callable that receives the context and
declares its body::

    def calculator(ctx):
        ctx.setup(lambda situation: Calculator())
        ctx.asserts("starts at zero", lambda calc: calc.total == 0)

        @ctx.context("with a starting total")
        def _(ctx):
            ctx.setup(lambda situation: Calculator(total=2))
            ctx.asserts("totals 2", lambda calc: calc.total == 2)

The definition is deferred: it runs the first time the context is loaded,
normally from ``run()``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from contextrunner.models import AssertionResult

log = logging.getLogger(__name__)


class Situation:
    """Attribute namespace shared by the setups, assertions and teardowns of one run."""

    def __init__(self) -> None:
        self.topic: Any = None

    def __repr__(self) -> str:
        return f"Situation({vars(self)!r})"


@dataclass
class Assertion:
    """A described check against the topic."""

    description: str
    check: Callable[[Any], Any]
    negate: bool = False

    def evaluate(self, situation: Situation) -> AssertionResult:
        """Run the check and classify the outcome."""
        try:
            actual = self.check(situation.topic)
            if bool(actual) != self.negate:
                return AssertionResult.passed()
            expected = "falsy" if self.negate else "truthy"
            return AssertionResult.failed(f"expected a {expected} result but got {actual!r}")
        except AssertionError as e:
            return AssertionResult.failed(str(e) or "assertion raised AssertionError")
        except Exception as e:
            return AssertionResult.errored(e)


class Context:
    """A test group, runnable against any reporter."""

    def __init__(
        self,
        description: str,
        definition: Optional[Callable[["Context"], Any]] = None,
        parent: Optional["Context"] = None,
    ):
        self.description = description
        self.parent = parent
        self._definition = definition
        self._loaded = False
        self._load_error: Optional[BaseException] = None

        self.setups: list[Callable[[Situation], Any]] = []
        self.teardowns: list[Callable[[Situation], Any]] = []
        self.assertions: list[Assertion] = []
        self.children: list["Context"] = []

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.detailed_description!r}>"

    @property
    def detailed_description(self) -> str:
        """The description prefixed by every parent description."""
        if self.parent is None:
            return self.description
        return f"{self.parent.detailed_description} {self.description}"

    def load(self) -> None:
        """Evaluate the definition once, remembering any error it raised."""
        if self._loaded:
            return
        self._loaded = True
        if self._definition is None:
            return
        try:
            self._definition(self)
        except Exception as e:
            log.debug("Definition of %r raised %s", self.detailed_description, e)
            self._load_error = e

    # Definition API

    def setup(self, fn: Callable[[Situation], Any]) -> Callable[[Situation], Any]:
        """Register a setup; its return value becomes the topic."""
        self.setups.append(fn)
        return fn

    def teardown(self, fn: Callable[[Situation], Any]) -> Callable[[Situation], Any]:
        self.teardowns.append(fn)
        return fn

    def asserts(self, description: str, check: Optional[Callable[[Any], Any]] = None):
        """Register an assertion that passes when ``check(topic)`` is truthy."""
        return self._add_assertion(description, check, negate=False)

    should = asserts

    def denies(self, description: str, check: Optional[Callable[[Any], Any]] = None):
        """Register an assertion that passes when ``check(topic)`` is falsy."""
        return self._add_assertion(description, check, negate=True)

    def context(self, description: str, definition: Optional[Callable[["Context"], Any]] = None):
        """Define a nested context, directly or as a decorator."""
        if definition is None:
            return lambda fn: self.context(description, fn)
        child = type(self)(description, definition, parent=self)
        self.children.append(child)
        return child

    def _add_assertion(self, description, check, negate):
        if check is None:
            def decorator(fn):
                self.assertions.append(Assertion(description, fn, negate=negate))
                return fn

            return decorator
        self.assertions.append(Assertion(description, check, negate=negate))
        return check

    # Running

    def run(self, reporter) -> None:
        """Run this context and its nested contexts against ``reporter``."""
        self.load()
        reporter.describe_context(self)

        if self._load_error is not None:
            reporter.report("definition", AssertionResult.errored(self._load_error))
            return

        situation = Situation()
        try:
            if self._run_setups(situation, reporter):
                for assertion in self.assertions:
                    reporter.report(assertion.description, assertion.evaluate(situation))
        finally:
            self._run_teardowns(situation, reporter)

        for child in self.children:
            child.run(reporter)

    def _all_setups(self) -> list[Callable[[Situation], Any]]:
        if self.parent is None:
            return list(self.setups)
        return self.parent._all_setups() + self.setups

    def _all_teardowns(self) -> list[Callable[[Situation], Any]]:
        if self.parent is None:
            return list(self.teardowns)
        return self.teardowns + self.parent._all_teardowns()

    def _run_setups(self, situation: Situation, reporter) -> bool:
        for fn in self._all_setups():
            try:
                situation.topic = fn(situation)
            except Exception as e:
                reporter.report("setup", AssertionResult.errored(e))
                return False
        return True

    def _run_teardowns(self, situation: Situation, reporter) -> None:
        for fn in self._all_teardowns():
            try:
                fn(situation)
            except Exception as e:
                reporter.report("teardown", AssertionResult.errored(e))
