"""Root bachctl command with global flags.

Options come first; everything from the first positional argument on is
the raw operation handed to :func:`bachctl.services.pipeline.run`.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Any

import click

from bachctl import __version__
from bachctl.config.logging import configure_logging
from bachctl.config.settings import BachSettings
from bachctl.output.console import render_status
from bachctl.plugins.manager import PluginManager
from bachctl.services import pipeline
from bachctl.services.context import BuildContext


class BuildFailed(click.ClickException):
    """Fatal top-level error; the process exits with the pipeline's code."""

    def __init__(self, code: int) -> None:
        super().__init__(f"bachctl failed with error code: {code}")
        self.exit_code = code


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class BachCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


@click.command(
    cls=BachCommand,
    context_settings={"allow_interspersed_args": False, "ignore_unknown_options": True},
    examples="""\
  bachctl
  bachctl --base demo --verbose
  bachctl --dormant
  bachctl tool javac --version
  bachctl tool tree src
  bachctl tool modules src/main/java""",
)
@click.version_option(version=__version__, prog_name="bachctl")
@click.option(
    "-b",
    "--base",
    type=click.Path(path_type=Path),
    default=None,
    help="Project base directory (default: current directory).",
)
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("-q", "--quiet", is_flag=True, help="Omit the final build status line.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--offline", is_flag=True, help="Never touch the network.")
@click.option("--dormant", is_flag=True, help="Skip compilation of the project.")
@click.argument("operation", nargs=-1, type=click.UNPROCESSED)
def cli(
    operation: tuple[str, ...],
    base: Path | None,
    config_path: str | None,
    verbose: bool,
    quiet: bool,
    log_json: bool,
    offline: bool,
    dormant: bool,
) -> None:
    """bachctl: build a modular Java project.

    Without OPERATION all realms are compiled.  ``tool NAME [ARGS]...``
    runs a single tool with its output on the terminal.
    """
    settings = BachSettings.from_cli(
        config_path=config_path,
        base=base,
        verbose=verbose or None,
        log_json=log_json or None,
        offline=offline or None,
        project={"dormant": True} if dormant else None,
    )
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    plugins = PluginManager()
    plugins.discover_and_load()
    context = BuildContext.create(settings, plugin_manager=plugins)

    start = time.perf_counter()
    code = pipeline.run(context, operation)
    elapsed = time.perf_counter() - start

    if not quiet:
        status = render_status(
            context.project.name,
            code,
            elapsed,
            no_color=not sys.stderr.isatty(),
        )
        click.echo(status, err=True)
    if code != 0:
        raise BuildFailed(code)
