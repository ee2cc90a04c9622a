"""Root CLI group for shrinker with global flags and subcommands.

Values are given as JSON. Predicates are imported from ``module:attr``
references, so a failing property can be minimized straight from a shell::

  shrinker candidates '[3, "ab"]'
  shrinker run '[-3, 8, 4, 99]' --predicate mytests.props:sum_is_broken
"""

from __future__ import annotations

import importlib
import itertools
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from shrinker import __version__
from shrinker.config.logging import configure_logging
from shrinker.config.settings import ShrinkSettings
from shrinker.registry import Shrinker, build_shrinker


class CliContext:
    """Settings resolved at the root group, shared with subcommands."""

    def __init__(self, settings: ShrinkSettings) -> None:
        self.settings = settings
        self._shrinker: Shrinker | None = None

    @property
    def shrinker(self) -> Shrinker:
        """Registry built from the settings on first use."""
        if self._shrinker is None:
            self._shrinker = build_shrinker(self.settings)
        return self._shrinker


def _parse_value(_ctx: click.Context, _param: click.Parameter, raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}") from exc


def _load_predicate(
    _ctx: click.Context, _param: click.Parameter, ref: str
) -> Callable[[Any], Any]:
    """Import ``module:attr`` and check the result is callable."""
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise click.BadParameter(f"expected 'module:attr', got {ref!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(f"cannot import {module_name!r}: {exc}") from exc

    target: Any = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise click.BadParameter(f"{module_name!r} has no attribute {attr!r}") from exc
    if not callable(target):
        raise click.BadParameter(f"{ref!r} is not callable")
    return target


def _dump(value: Any) -> str:
    return json.dumps(value, default=str)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="shrinker")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output.")
@click.option("--float", "include_float", is_flag=True, help="Also shrink non-integer floats.")
@click.option("--plugins", "load_plugins", is_flag=True, help="Load rules from installed plugins.")
@click.option(
    "--plugin-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory of single-file rule plugins.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    log_json: bool,
    include_float: bool,
    load_plugins: bool,
    plugin_dir: Path | None,
) -> None:
    """shrinker: minimize failing test inputs."""
    try:
        settings = ShrinkSettings.from_cli(
            verbose=verbose or None,
            log_json=log_json or None,
            include_float=include_float or None,
            load_plugins=load_plugins or None,
            plugin_dir=plugin_dir,
        )
    except ValidationError as exc:
        raise click.ClickException(f"Invalid settings: {exc}") from exc

    configure_logging(verbose=settings.verbose, log_json=settings.log_json)
    ctx.obj = CliContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("value", callback=_parse_value)
@click.option("--max", "max_count", type=click.IntRange(min=0), default=None, help="Stop after N.")
@click.pass_obj
def candidates(app: CliContext, value: Any, max_count: int | None) -> None:
    """Print the shrink candidates of VALUE, one JSON document per line."""
    stream = app.shrinker.shrinks(value)
    for candidate in itertools.islice(stream, max_count):
        click.echo(_dump(candidate))


@cli.command()
@click.argument("value", callback=_parse_value)
@click.option(
    "-p",
    "--predicate",
    required=True,
    callback=_load_predicate,
    help="Still-failing test as 'module:attr'.",
)
@click.option("--limit", type=click.IntRange(min=0), default=None, help="Max accepted steps.")
@click.pass_obj
def run(
    app: CliContext,
    value: Any,
    predicate: Callable[[Any], Any],
    limit: int | None,
) -> None:
    """Minimize VALUE while PREDICATE holds and print the result as JSON."""
    if limit is None:
        limit = app.settings.limit
    result = app.shrinker.shrink(value, predicate, limit)
    click.echo(_dump(result.model_dump()))
