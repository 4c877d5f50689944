"""Data models for assertion results."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AssertionStatus(str, Enum):
    """Outcome of a single assertion."""

    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class AssertionResult:
    """Represents the result of evaluating one assertion."""

    status: AssertionStatus = AssertionStatus.PASSED
    message: str = ""
    exception: Optional[BaseException] = None

    @classmethod
    def passed(cls, message: str = "") -> "AssertionResult":
        return cls(status=AssertionStatus.PASSED, message=message)

    @classmethod
    def failed(cls, message: str) -> "AssertionResult":
        return cls(status=AssertionStatus.FAILED, message=message)

    @classmethod
    def errored(cls, exception: BaseException) -> "AssertionResult":
        """Wrap an unexpected exception raised by a test body."""
        return cls(
            status=AssertionStatus.ERROR,
            message=f"{type(exception).__name__}: {exception}",
            exception=exception,
        )
