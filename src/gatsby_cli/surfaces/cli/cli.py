import shutil
from pathlib import Path
from typing import Optional

import typer
from typer.core import TyperGroup

from ...core.config import ConfigError, load_cli_config
from ...core.logging_utils import setup_logging
from ...core.reporter import Reporter
from ...core.runtime import CliRuntime, Initializer
from .commands.local import register_local_commands
from .commands.new import register_new_command
from .commands.utils import get_cli_version, handler, show_root_help

NO_COMMAND_MESSAGE = "Pass --help to see all available commands and options."


class GatsbyGroup(TyperGroup):
    """Root group that answers an unmatched command with help and guidance."""

    def resolve_command(self, ctx, args):
        name = args[0] if args else ""
        if (
            name
            and not name.startswith("-")
            and not ctx.resilient_parsing
            and self.get_command(ctx, name) is None
        ):
            show_root_help(ctx)
            typer.echo(NO_COMMAND_MESSAGE, err=True)
            raise typer.Exit(code=1)
        return super().resolve_command(ctx, args)


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(get_cli_version())
    raise typer.Exit(code=0)


def create_cli(
    *,
    directory: Optional[Path] = None,
    reporter: Optional[Reporter] = None,
    initializer: Optional[Initializer] = None,
) -> typer.Typer:
    """Build the `gatsby` app with its fixed command registry."""
    width = shutil.get_terminal_size().columns
    app = typer.Typer(
        cls=GatsbyGroup,
        add_completion=False,
        invoke_without_command=True,
        context_settings={
            "help_option_names": ["-h", "--help"],
            "terminal_width": width,
            "max_content_width": width,
        },
        options_metavar="[options]",
        rich_markup_mode=None,
    )
    runtime = CliRuntime(directory=directory, reporter=reporter, initializer=initializer)
    run_and_exit = handler(runtime.reporter)

    @app.callback()
    def _root(
        ctx: typer.Context,
        version: bool = typer.Option(
            False,
            "--version",
            "-v",
            callback=_version_callback,
            is_eager=True,
            help="Show version number",
        ),
        verbose: bool = typer.Option(
            False, "--verbose", help="Turn on verbose output"
        ),
    ) -> None:
        try:
            config = load_cli_config()
        except ConfigError as exc:
            runtime.reporter.panic(exc)
        verbose = verbose or config.verbose
        setup_logging(verbose)
        if verbose:
            runtime.reporter.set_verbose(True)

        if ctx.invoked_subcommand is None:
            show_root_help(ctx)
            typer.echo(NO_COMMAND_MESSAGE, err=True)
            raise typer.Exit(code=1)

    register_local_commands(app, runtime=runtime, run_and_exit=run_and_exit)
    register_new_command(app, runtime=runtime, run_and_exit=run_and_exit)
    return app


app = create_cli()


def main() -> None:
    """Entrypoint for CLI execution."""
    app(prog_name="gatsby")


if __name__ == "__main__":
    main()
