"""CLI adapter for ``stork_launcher`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose launcher generation as a command line tool so build pipelines can turn
launcher config files into platform artifacts without writing Python.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling and log verbosity.
* :func:`cli_info` – lists supported routes and helper lookup settings.
* :func:`cli_generate` – parses config files and writes the artifact tree.
* :func:`cli_plan` – prints the planned artifacts as JSON without writing.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It calls the composition root
(:class:`stork_launcher.core.Generator`) and leaves exit-code mapping to
``lib_cli_exit_tools`` so every failure yields a non-zero status.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from importlib import metadata
from pathlib import Path
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.config_loaders.factory import ConfigurationFactory
from .adapters.resources.bundled import HELPERS_DIR_ENV, BundledResourceCopier
from .adapters.templates.jinja import JinjaTemplateRenderer
from .application.dispatch import DISPATCH, RouteKey, plan_configuration
from .core import Generator
from .observability import get_logger

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_LOG_FORMAT: Final[str] = "%(levelname)s %(name)s: %(message)s"
TEMPLATES_DIR_ENV: Final[str] = "STORK_LAUNCHER_TEMPLATES_DIR"

CONFIG_FILE = click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True)


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` when not installed."""

    try:
        return metadata.version("stork_launcher")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Generate platform-native launchers from launcher config files",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="stork_launcher",
    message="stork_launcher version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log generation progress to stderr")
@click.pass_context
def cli(ctx: click.Context, traceback: bool, verbose: bool) -> None:
    """Root command configuring traceback handling and logging for subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``; configures a stderr
        logging handler via :func:`logging.basicConfig`.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr)
    get_logger().setLevel(level)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print the installed version, the supported routes, and helper lookup settings."""

    click.echo(f"stork_launcher {_resolve_version()}")
    click.echo("Supported routes (platform, type, daemon method):")
    for platform, launcher_type, method in sorted(DISPATCH, key=_route_sort_key):
        click.echo(f"  {str(platform):<8} {str(launcher_type):<8} {method if method is not None else '-'}")
    click.echo(f"Helper directories env : {HELPERS_DIR_ENV}={os.environ.get(HELPERS_DIR_ENV, '')}")
    click.echo(f"Template override env  : {TEMPLATES_DIR_ENV}={os.environ.get(TEMPLATES_DIR_ENV, '')}")


def _route_sort_key(key: RouteKey) -> tuple[int, str, str]:
    platform, launcher_type, method = key
    return platform.sort_key, str(launcher_type), str(method or "")


@cli.command("generate", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("config_files", nargs=-1, required=True, type=CONFIG_FILE)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(path_type=Path, file_okay=False, dir_okay=True),
    required=True,
    help="Directory that will receive the generated launchers",
)
@click.option(
    "--helpers-dir",
    "helpers_dirs",
    multiple=True,
    type=click.Path(path_type=Path, exists=True, file_okay=False, dir_okay=True),
    help="Directory holding service wrapper executables (repeatable)",
)
@click.option(
    "--templates-dir",
    envvar=TEMPLATES_DIR_ENV,
    type=click.Path(path_type=Path, exists=True, file_okay=False, dir_okay=True),
    default=None,
    help="Directory whose templates override the bundled ones",
)
def cli_generate(
    config_files: Sequence[Path],
    output_dir: Path,
    helpers_dirs: Sequence[Path],
    templates_dir: Optional[Path],
) -> None:
    """Generate launchers for every CONFIG_FILE into the output directory.

    Emits ``{"generated": <count>}`` as JSON on success. Any parse, dispatch,
    or write failure aborts the run and exits non-zero.
    """

    generator = Generator(JinjaTemplateRenderer(templates_dir), BundledResourceCopier(helpers_dirs))
    generated = generator.generate(list(config_files), output_dir)
    click.echo(json.dumps({"generated": generated}))


@cli.command("plan", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("config_files", nargs=-1, required=True, type=CONFIG_FILE)
@click.option("--indent", type=int, default=2, show_default=True, help="JSON indentation")
def cli_plan(config_files: Sequence[Path], indent: int) -> None:
    """Print the artifacts each CONFIG_FILE would produce, without writing files."""

    factory = ConfigurationFactory()
    payload = []
    for config_file in config_files:
        config = factory.load(config_file)
        for plan in plan_configuration(config):
            payload.append(
                {
                    "source": config.identity,
                    "platform": str(plan.platform),
                    "reused_from": str(plan.reused_from) if plan.reused_from is not None else None,
                    "artifacts": [artifact.describe() for artifact in plan.artifacts],
                }
            )
    click.echo(json.dumps(payload, indent=indent))


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI and return its exit code instead of raising.

    ``--traceback`` mutates ``lib_cli_exit_tools.config`` globally; with
    *restore_traceback* the previous settings are put back afterwards so
    embedding callers (tests, build scripts) see no lasting change.
    """

    saved = (
        getattr(lib_cli_exit_tools.config, "traceback", False),
        getattr(lib_cli_exit_tools.config, "traceback_force_color", False),
    )
    try:
        return _run(argv)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback, lib_cli_exit_tools.config.traceback_force_color = saved


def _run(argv: Optional[Sequence[str]]) -> int:
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name="stork-launcher",
        )
    except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
        verbose = bool(lib_cli_exit_tools.config.traceback)
        lib_cli_exit_tools.print_exception_message(
            trace_back=verbose,
            length_limit=_TRACEBACK_VERBOSE_LIMIT if verbose else _TRACEBACK_SUMMARY_LIMIT,
        )
        return lib_cli_exit_tools.get_system_exit_code(exc)
