"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands to the
runner.
"""

from __future__ import annotations

from functools import wraps
from pathlib import Path
from typing import Any, Callable

import click
from dotenv import load_dotenv

from CloudQuery.cli.commands import QueryOptions
from CloudQuery.cli.runner import CommandRunner
from CloudQuery.config import load_config_with_defaults
from CloudQuery.config.app import DEFAULT_CONFIG_PATH


@click.group(help="CloudQuery: build queries for the document data service and run them.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file, merged over the defaults.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from a .env file before reading the config.
    """
    load_dotenv()
    ctx.obj = load_config_with_defaults(config_path)


def query_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the shared query-building options to a command."""
    pair_help = "key=value; value parsed as JSON when possible. Repeatable."
    options = [
        click.argument("class_name"),
        click.option("--equal", multiple=True, metavar="KEY=VALUE", help=f"Equality, {pair_help}"),
        click.option("--not-equal", multiple=True, metavar="KEY=VALUE", help=f"Inequality, {pair_help}"),
        click.option("--exists", multiple=True, metavar="KEY", help="Key must exist. Repeatable."),
        click.option("--not-exists", multiple=True, metavar="KEY", help="Key must not exist. Repeatable."),
        click.option("--prefix", multiple=True, metavar="KEY=TEXT", help="String prefix match. Repeatable."),
        click.option("--contains", multiple=True, metavar="KEY=TEXT", help="Substring match. Repeatable."),
        click.option("--asc", multiple=True, metavar="KEY", help="Ascending order key. Repeatable."),
        click.option("--desc", multiple=True, metavar="KEY", help="Descending order key. Repeatable."),
        click.option("--include", multiple=True, metavar="KEY", help="Expand referenced objects. Repeatable."),
        click.option("--select", multiple=True, metavar="KEY", help="Restrict returned keys. Repeatable."),
        click.option("--limit", type=click.IntRange(min=0), default=None, help="Maximum number of objects."),
        click.option("--skip", type=click.IntRange(min=0), default=None, help="Number of objects to skip."),
    ]

    @wraps(func)
    def wrapper(ctx: click.Context, **kwargs: Any) -> Any:
        return func(ctx, QueryOptions(**kwargs))

    for option in reversed(options):
        wrapper = option(wrapper)
    return wrapper


def _run(ctx: click.Context, options: QueryOptions) -> None:
    CommandRunner(ctx.obj).run(action=ctx.command.name, options=options)


@cli.command("compile")
@click.pass_context
@query_options
def compile_cmd(ctx: click.Context, options: QueryOptions) -> None:
    """Print the request parameters of a query without sending it."""
    _run(ctx, options)


@cli.command("find")
@click.pass_context
@query_options
def find_cmd(ctx: click.Context, options: QueryOptions) -> None:
    """Find objects and print them as JSON lines."""
    _run(ctx, options)


@cli.command("count")
@click.pass_context
@query_options
def count_cmd(ctx: click.Context, options: QueryOptions) -> None:
    """Count matching objects."""
    _run(ctx, options)
