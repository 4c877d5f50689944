"""Command-line interface for ContextRunner."""

import importlib.util
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from contextrunner import __version__
from contextrunner.config import ReporterKind, RunnerOptions, create_example_config
from contextrunner.core.exit import shutdown
from contextrunner.core.runner import Runner

console = Console()
log = logging.getLogger(__name__)


def print_banner() -> None:
    """Print the ContextRunner banner."""
    console.print(
        Panel.fit(
            "[bold blue]ContextRunner[/bold blue] - context-based test runner",
            subtitle=f"v{__version__}",
        )
    )


def discover_files(paths: tuple[str, ...]) -> list[Path]:
    """Expand directories into the test files they contain, keeping order."""
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            found = set(path.rglob("test_*.py")) | set(path.rglob("*_test.py"))
            files.extend(sorted(found))
        else:
            files.append(path)
    return files


def load_definitions(runner: Runner, path: Path) -> None:
    """Import a test file and let its ``register(runner)`` add root contexts."""
    module_name = f"contextrunner_tests_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import test file: {path}")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    register = getattr(module, "register", None)
    if not callable(register):
        raise AttributeError(f"{path} does not define register(runner)")

    before = len(runner.root_contexts)
    register(runner)
    log.debug("Loaded %d root context(s) from %s", len(runner.root_contexts) - before, path)


def load_options(config_path: Optional[str]) -> RunnerOptions:
    """Load options from --config, a discovered file, or defaults."""
    if config_path:
        return RunnerOptions.from_file(config_path)
    try:
        return RunnerOptions.find_and_load()
    except FileNotFoundError:
        return RunnerOptions()


@click.group()
@click.version_option(version=__version__, prog_name="contextrunner")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: contextrunner.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """ContextRunner - run context-based tests and exit with their status."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="contextrunner.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(output: str, force: bool) -> None:
    """Initialize a new ContextRunner configuration file."""
    print_banner()

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists:[/yellow] {output_path}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
        console.print(f"[green]Created configuration file:[/green] {output_path}")
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)


@main.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True))
@click.option("--silent", is_flag=True, help="Report nothing, only set the exit status")
@click.option(
    "--reporter",
    "-r",
    type=click.Choice([kind.value for kind in ReporterKind]),
    help="Reporter to use (default: story)",
)
@click.option("--plain", is_flag=True, help="Disable coloured output")
@click.option(
    "--before",
    metavar="COMMAND",
    help="Upstream command to run first; if it fails its status is used and no tests run",
)
@click.pass_context
def run(
    ctx: click.Context,
    paths: tuple[str, ...],
    silent: bool,
    reporter: Optional[str],
    plain: bool,
    before: Optional[str],
) -> None:
    """Load test files and run their root contexts."""
    try:
        options = load_options(ctx.obj.get("config_path"))
    except (FileNotFoundError, ValidationError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        console.print("Run [bold]contextrunner init[/bold] to create a configuration file")
        sys.exit(1)

    runner = Runner(options)
    if silent:
        runner.set_silent()
    if reporter:
        runner.set_reporter(reporter)
    if plain:
        runner.set_plain_output()

    if not runner.is_silent:
        print_banner()

    if before:
        child = runner.run_command(before)
        if not child.success and not runner.is_silent:
            console.print(
                f"[yellow]Upstream command failed with status {child.exit_code}:[/yellow] {before}"
            )

    for path in discover_files(paths):
        try:
            load_definitions(runner, path)
        except Exception as e:
            console.print(f"[red]Error loading {path}:[/red] {escape(str(e))}", soft_wrap=True)
            sys.exit(1)

    shutdown(runner)

    # Standalone mode skips the exit hook, so act on the result here.
    result = runner.run()
    sys.exit(0 if result.success else 1)


if __name__ == "__main__":
    main()
