"""CLI entrypoint.

Re-export the Typer app from the CLI surface.
"""

from .surfaces.cli.cli import app, create_cli, main  # noqa: F401

__all__ = ["app", "create_cli", "main"]


if __name__ == "__main__":  # pragma: no cover
    # Must be runnable so `python -m gatsby_cli.cli --help` produces output.
    main()
