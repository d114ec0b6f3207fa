"""Info command for hoard CLI."""

import typer
from rich.table import Table

from hoard.cli.app import app
from hoard.cli.commands.command_utils import console, get_repository, handle_errors


@app.command()
def info(
    query: str = typer.Argument(..., metavar="OBJECT", help="The path, name, or hash of the object"),
) -> None:
    """List information about an object."""
    with handle_errors("Info"):
        repository = get_repository()
        obj = repository.find_object(query)
        paths = repository.current_state().objects.get(obj.name, [])

    table = Table(show_header=False, box=None)
    table.add_row("[bold]name[/bold]", obj.name)
    table.add_row("[bold]hash[/bold]", obj.hash.hex)
    table.add_row("[bold]object[/bold]", obj.path.relative_to(repository.root).as_posix())
    table.add_row("[bold]inode[/bold]", str(obj.ino))
    for i, path in enumerate(paths):
        table.add_row("[bold]paths[/bold]" if i == 0 else "", path.as_posix())
    console.print(table)
