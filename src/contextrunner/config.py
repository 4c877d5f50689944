"""Configuration management for ContextRunner."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAMES = ("contextrunner.json", ".contextrunner.json")


class ReporterKind(str, Enum):
    """The closed set of reporter kinds a run can use."""

    STORY = "story"
    VERBOSE = "verbose"
    DOTS = "dots"
    PRETTY_DOTS = "pretty_dots"
    SILENT = "silent"


class ReporterOptions(BaseModel):
    """Options handed to a reporter when it is constructed."""

    model_config = ConfigDict(extra="allow")

    plain: bool = Field(default=False, description="Disable coloured output")


class RunnerOptions(BaseModel):
    """Process-wide settings that tell a runner how to run."""

    model_config = ConfigDict(validate_assignment=True)

    silent: bool = Field(default=False, description="Report nothing, whatever reporter is selected")
    standalone: bool = Field(
        default=False, description="Caller runs the tests and handles the exit status itself"
    )
    reporter: ReporterKind = Field(default=ReporterKind.STORY, description="Selected reporter kind")
    reporter_options: ReporterOptions = Field(default_factory=ReporterOptions)

    @field_validator("reporter", mode="before")
    @classmethod
    def validate_reporter(cls, v):
        if isinstance(v, str):
            v = v.lower().replace("-", "_")
        return v

    @classmethod
    def from_file(cls, path: Path | str) -> "RunnerOptions":
        """Load options from a JSON file."""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        return cls.model_validate_json(path.read_text())

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "RunnerOptions":
        """Load the nearest contextrunner.json from ``start_dir`` or its parents."""
        start = Path(start_dir or Path.cwd()).resolve()
        for directory in (start, *start.parents):
            for name in CONFIG_FILENAMES:
                if (directory / name).is_file():
                    return cls.from_file(directory / name)

        raise FileNotFoundError(
            "No configuration file found. Create contextrunner.json or run 'contextrunner init'"
        )

    def to_file(self, path: Path | str) -> None:
        """Save options to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    RunnerOptions().to_file(output_path)
    return output_path
