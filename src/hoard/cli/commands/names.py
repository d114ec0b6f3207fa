"""Commands for managing object names."""

from typing import List

import typer

from hoard.cli.app import app
from hoard.cli.commands.command_utils import console, get_repository, handle_errors


@app.command("ls")
def list_objects(
    pattern: str = typer.Argument("*", help="Shell-style pattern to filter names"),
) -> None:
    """List all objects whose name matches the pattern."""
    with handle_errors("List"):
        objects = get_repository().name_index.match(pattern)

    for obj in objects:
        console.print(f"{obj.hash.short}  {obj.name}")


@app.command("mv")
def rename(
    old: str = typer.Argument(..., help="The current name of the object"),
    new: str = typer.Argument(..., help="The new name"),
) -> None:
    """Rename an object in the hoard."""
    with handle_errors("Rename"):
        get_repository().rename(old, new)
    console.print(f"rename: {old} -> {new}")


@app.command("rm")
def remove(
    names: List[str] = typer.Argument(..., help="The unique names of the objects"),
) -> None:
    """Remove object names from the hoard; stored content is kept."""
    with handle_errors("Remove"):
        repository = get_repository()
        for name in names:
            repository.remove(name)
            console.print(f"[red]remove:[/red] {name}")
