"""Result reporting."""

from contextrunner.config import ReporterKind
from contextrunner.report.reporters import (
    DotMatrixReporter,
    PrettyDotMatrixReporter,
    Reporter,
    SilentReporter,
    StoryReporter,
    VerboseStoryReporter,
)

REPORTERS: dict[ReporterKind, type[Reporter]] = {
    ReporterKind.STORY: StoryReporter,
    ReporterKind.VERBOSE: VerboseStoryReporter,
    ReporterKind.DOTS: DotMatrixReporter,
    ReporterKind.PRETTY_DOTS: PrettyDotMatrixReporter,
    ReporterKind.SILENT: SilentReporter,
}

__all__ = [
    "REPORTERS",
    "Reporter",
    "StoryReporter",
    "VerboseStoryReporter",
    "DotMatrixReporter",
    "PrettyDotMatrixReporter",
    "SilentReporter",
]
