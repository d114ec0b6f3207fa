"""Add command for hoard CLI."""

from pathlib import Path
from typing import List

import typer

from hoard.cli.app import app
from hoard.cli.commands.command_utils import console, get_repository, handle_errors


@app.command()
def add(
    paths: List[Path] = typer.Argument(..., help="Files or directories to add"),
) -> None:
    """Add objects to the hoard."""
    with handle_errors("Add"):
        repository = get_repository()
        report = repository.ingest_paths(paths)

    linked = set(report.linked)
    for path in report.paths:
        relative = path.relative_to(repository.root).as_posix()
        if path in linked:
            console.print(f"[yellow]link:[/yellow] {relative}")
        else:
            console.print(f"[green]add:[/green] {relative}")
    for name in report.named:
        console.print(f"[blue]name:[/blue] {name}")
