"""Command module for hoard sync operations."""

from pathlib import Path
from typing import Optional

import typer
from rich.tree import Tree

from hoard.cli.app import app
from hoard.cli.commands.command_utils import console, get_repository, handle_errors
from hoard.schemas import Manifest
from hoard.services.sync_service import SyncService
from hoard.sync.utils import SyncReport


def display_sync_summary(report: SyncReport, dry_run: bool = False):
    """Display a one-line summary of sync changes."""
    total_changes = report.total_changes
    if total_changes == 0:
        console.print("[green]Everything up to date[/green]")
        return

    # Format as: "Synced X paths (A created, B modified, C deleted)"
    changes = []
    if report.created:
        changes.append(f"[green]{len(report.created)} created[/green]")
    if report.modified:
        changes.append(f"[yellow]{len(report.modified)} modified[/yellow]")
    if report.deleted:
        changes.append(f"[red]{len(report.deleted)} deleted[/red]")

    verb = "Would sync" if dry_run else "Synced"
    console.print(f"{verb} {total_changes} paths ({', '.join(changes)})")


def display_detailed_sync_results(report: SyncReport, title: str = "Sync Results"):
    """Display detailed sync results as a tree."""
    tree = Tree(f"[bold]{title}[/bold]")
    if report.total_changes == 0:
        tree.add("[green]Everything up to date[/green]")

    for label, style, paths in [
        ("Created", "green", report.created),
        ("Modified", "yellow", report.modified),
        ("Deleted", "red", report.deleted),
        ("Untracked", "dim", report.ignored),
    ]:
        if paths:
            branch = tree.add(f"[{style}]{label}[/{style}]")
            for path in sorted(paths):
                branch.add(f"[{style}]{path.as_posix()}[/{style}]")

    if report.removed_dirs:
        branch = tree.add("[red]Removed directories[/red]")
        for directory in report.removed_dirs:
            branch.add(f"[red]{directory.as_posix()}/[/red]")

    console.print(tree)


@app.command()
def status(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List every path"),
) -> None:
    """Show what a sync against the repository manifest would change."""
    with handle_errors("Status"):
        report = SyncService(get_repository()).status()

    if verbose:
        display_detailed_sync_results(report, title="Status")
    else:
        display_sync_summary(report, dry_run=True)


@app.command()
def sync(
    manifest: Optional[Path] = typer.Argument(
        None, help="Manifest to sync to (default: the repository manifest)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Only show the changes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List every path"),
) -> None:
    """Sync the working tree to a manifest."""
    with handle_errors("Sync"):
        repository = get_repository()
        desired = Manifest.read(manifest) if manifest else repository.read_manifest()
        report = SyncService(repository).sync(desired, dry_run=dry_run)

    if verbose:
        display_detailed_sync_results(report)
    else:
        display_sync_summary(report, dry_run=dry_run)


@app.command()
def export(
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the manifest here instead of stdout"
    ),
) -> None:
    """Write the current layout of the working tree as a manifest."""
    with handle_errors("Export"):
        manifest = get_repository().current_state().to_manifest()
        if output:
            manifest.write(output)

    if not output:
        typer.echo(manifest.to_json())
