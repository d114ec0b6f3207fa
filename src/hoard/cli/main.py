"""Main CLI entry point for hoard."""  # pragma: no cover

from hoard.cli.app import app  # pragma: no cover

# Register commands
from hoard.cli.commands import add, apply, info, init, names, sync  # pragma: no cover

__all__ = ["add", "apply", "info", "init", "names", "sync"]  # pragma: no cover


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
