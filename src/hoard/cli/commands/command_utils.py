"""utility functions for commands"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer
from loguru import logger
from rich.console import Console

from hoard.exceptions import HoardError
from hoard.services.repository_service import Repository, open_repository

console = Console()


@contextmanager
def handle_errors(action: str) -> Iterator[None]:
    """Turn a HoardError into one error line and exit status 1."""
    try:
        yield
    except HoardError as e:
        logger.error(f"{action} failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def get_repository() -> Repository:
    return open_repository(Path.cwd())
