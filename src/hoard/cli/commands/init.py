"""Init command for hoard CLI."""

from pathlib import Path

import typer

from hoard.cli.app import app
from hoard.cli.commands.command_utils import console, handle_errors
from hoard.services.repository_service import Repository


@app.command()
def init(
    name: Path = typer.Argument(Path("."), help="The directory of the new hoard"),
) -> None:
    """Create a new hoard."""
    with handle_errors("Init"):
        repository = Repository.init(name)
    console.print(f"Initialized new hoard repository in {repository.root}")
