from typing import Optional

import typer

from hoard.config import config
from hoard.utils import setup_logging

ABOUT = """A command-line tool for organizing files using links.

Files are stored once, by content hash, and every place a file appears in the
working tree is a hardlink to that stored copy. Files can be categorized into
folders and appear in several folders at once without taking extra space.

Use `init` to create a new hoard."""


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import hoard

        typer.echo(f"hoard version: {hoard.__version__}")
        raise typer.Exit()


app = typer.Typer(name="hoard", help=ABOUT, no_args_is_help=True)


@app.callback()
def app_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log to stderr.",
        envvar="HOARD_CONSOLE_LOGGING",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """hoard - organize files using links."""
    setup_logging(
        log_file=config.log_file,
        level="DEBUG" if verbose else config.log_level,
        console=verbose or config.console_logging,
    )
