"""Apply command for hoard CLI."""

from hoard.cli.app import app
from hoard.cli.commands.command_utils import console, get_repository, handle_errors


@app.command()
def apply() -> None:
    """Remove redundant links and empty directories from the working tree."""
    with handle_errors("Apply"):
        report = get_repository().apply()

    for path in report.deleted:
        console.print(f"[red]delete:[/red] {path.as_posix()}")
    for directory in report.removed_dirs:
        console.print(f"[red]delete:[/red] {directory.as_posix()}/")
    if not report.deleted and not report.removed_dirs:
        console.print("[green]Nothing to apply[/green]")
