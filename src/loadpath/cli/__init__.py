"""
loadpath CLI - inspect how paths resolve in the virtual filesystem.

Usage:
    loadpath --help
    loadpath resolve ../lib/set.rb --cwd /artichoke/virtual_root/src/lib
    loadpath locate set.rb --backend search_path --search-path ./lib
    loadpath cat /tmp/script.rb --backend native
"""

import logging
import sys
from typing import Optional, Tuple

import click
from pydantic import ValidationError

from ..config import BACKENDS, LoadPathConfig
from ..exceptions import LoadPathError
from ..filesystem import LoadSources, create_filesystem
from ..paths import display_path, resolve_path
from ..utils import init_loadpath_logging


def _build_filesystem(
    backend: str, cwd: Optional[str], flavor: Optional[str], search_paths: Tuple[str, ...]
) -> LoadSources:
    try:
        config = LoadPathConfig(
            backend=backend, cwd=cwd, flavor=flavor, search_paths=list(search_paths)
        )
    except ValidationError as e:
        click.echo(f"Error: Invalid configuration: {e.errors()[0]['msg']}", err=True)
        sys.exit(1)
    return create_filesystem(config)


def store_options(func):
    """Options shared by the commands that build a store."""
    func = click.option(
        "--search-path",
        "search_paths",
        multiple=True,
        type=click.Path(file_okay=False),
        help="Search root for the search_path backend (repeatable, highest priority first)",
    )(func)
    func = click.option(
        "--flavor", type=click.Choice(["posix", "nt"]), default=None, help="Path convention"
    )(func)
    func = click.option("--cwd", default=None, help="Working directory of the store")(func)
    func = click.option(
        "--backend",
        type=click.Choice(list(BACKENDS)),
        default="hybrid",
        show_default=True,
        help="Filesystem strategy",
    )(func)
    return func


@click.group()
@click.version_option(package_name="loadpath")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log store activity to stderr at this level"
)
def main(log_level: Optional[str]):
    """loadpath - virtual filesystem and load path resolution.

    Inspect how an embedded interpreter's require/load builtins see paths.

    \b
    Examples:
        loadpath --log-level debug locate set.rb --backend memory
    """
    if log_level is not None:
        init_loadpath_logging(level=getattr(logging, log_level.upper()))


@main.command()
@click.argument("path")
@click.option("--cwd", default="/", show_default=True, help="Base directory for relative paths")
@click.option("--flavor", type=click.Choice(["posix", "nt"]), default=None, help="Path convention")
def resolve(path: str, cwd: str, flavor: Optional[str]):
    """Print the canonical form of PATH resolved against --cwd.

    \b
    Examples:
        loadpath resolve foo/../bar --cwd /home/artichoke
        loadpath resolve 'foo\\bar\\..' --cwd 'C:\\Users' --flavor nt
    """
    try:
        click.echo(display_path(resolve_path(path, cwd, flavor)))
    except LoadPathError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("path")
@store_options
def locate(path: str, backend: str, cwd: Optional[str], flavor: Optional[str], search_paths):
    """Show where PATH lives in the configured store.

    \b
    Examples:
        loadpath locate set.rb --backend memory
        loadpath locate json.rb --backend search_path --search-path ./lib
    """
    filesystem = _build_filesystem(backend, cwd, flavor, search_paths)
    try:
        key = filesystem.resolve(path)
        exists = filesystem.exists(path)
        directory = filesystem.is_directory(path)
        served_by = filesystem.served_by(path)
    except LoadPathError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"{'Path':<12} {display_path(key)}")
    click.echo(f"{'Backend':<12} {filesystem.name}")
    click.echo(f"{'Served by':<12} {served_by}")
    click.echo(f"{'Exists':<12} {'yes' if exists else 'no'}")
    click.echo(f"{'Directory':<12} {'yes' if directory else 'no'}")


@main.command()
@click.argument("path")
@store_options
def cat(path: str, backend: str, cwd: Optional[str], flavor: Optional[str], search_paths):
    """Write the contents of PATH to stdout."""
    filesystem = _build_filesystem(backend, cwd, flavor, search_paths)
    try:
        data = filesystem.read(path)
    except LoadPathError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(data, nl=False)


if __name__ == "__main__":
    main()
