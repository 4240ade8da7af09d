"""CLI entry point: registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="cochange-insight",
    help="Cochange Insight - change-coupling centrality for git repositories",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"cochange-insight {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Rank files by how central they are in the co-change graph."""


# Import subcommands to register them
from .centrality import centrality as _centrality  # noqa: F401, E402
from .export import graph as _graph, neighbours as _neighbours  # noqa: F401, E402


def main() -> None:
    app()
