"""CLI commands for hoard."""

from . import add, apply, info, init, names, sync

__all__ = ["add", "apply", "info", "init", "names", "sync"]
