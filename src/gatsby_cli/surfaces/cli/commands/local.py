import os
from typing import Any, Callable, Dict, NoReturn, Optional

import typer

from ....core.bundle import build_argument_bundle
from ....core.locator import CommandImplementation, FailureReason, Resolved
from ....core.runtime import CliRuntime
from .utils import show_root_help

DEFAULT_HOST = "localhost"
DEFAULT_PORT = "8000"
PRODUCTION_ENV = ("NODE_ENV", "production")

NOT_A_LOCAL_SITE_MESSAGE = (
    "gatsby <{command}> can only be run for a gatsby site. \n"
    "Either the current working directory does not contain a package.json or "
    "'gatsby' is not specified as a dependency"
)
LOAD_FAILURE_MESSAGE = (
    "There was a problem loading the local {command} command. "
    "Gatsby may not be installed."
)


def resolve_local_command(
    ctx: typer.Context, runtime: CliRuntime, command: str
) -> CommandImplementation:
    reporter = runtime.reporter
    result = runtime.resolve_command(command)
    if isinstance(result, Resolved):
        return result.implementation

    if result.reason is FailureReason.NOT_A_LOCAL_SITE:
        show_root_help(ctx)
        reporter.verbose(f"current directory: {runtime.site.directory}")
        reporter.panic(NOT_A_LOCAL_SITE_MESSAGE.format(command=command))

    message = LOAD_FAILURE_MESSAGE.format(command=command)
    if result.reason is FailureReason.LOAD_ERROR:
        show_root_help(ctx)
        reporter.panic(message, result.cause)
    reporter.panic(message)


def register_local_commands(
    app: typer.Typer,
    *,
    runtime: CliRuntime,
    run_and_exit: Callable[[Callable[..., Any]], Callable[..., NoReturn]],
) -> None:
    def delegate(ctx: typer.Context, command: str, flags: Dict[str, Any]) -> Any:
        implementation = resolve_local_command(ctx, runtime, command)
        return implementation(build_argument_bundle(flags, runtime.site))

    @app.command(
        "develop",
        help=(
            "Start development server. Watches files, rebuilds, and hot reloads "
            "if something changes"
        ),
    )
    @run_and_exit
    def develop(
        ctx: typer.Context,
        host: str = typer.Option(
            DEFAULT_HOST, "--host", "-H", help=f"Set host. Defaults to {DEFAULT_HOST}"
        ),
        port: str = typer.Option(
            DEFAULT_PORT, "--port", "-p", help=f"Set port. Defaults to {DEFAULT_PORT}"
        ),
        open_browser: Optional[bool] = typer.Option(
            None, "--open", "-o", help="Open the site in your browser for you."
        ),
    ):
        return delegate(
            ctx, "develop", {"host": host, "port": port, "open": open_browser}
        )

    @app.command("build", help="Build a Gatsby project.")
    @run_and_exit
    def build(
        ctx: typer.Context,
        prefix_paths: bool = typer.Option(
            False,
            "--prefix-paths",
            help="Build site with link paths prefixed (set prefix in your config).",
        ),
    ):
        # Must be visible to the local command while it is being loaded.
        name, value = PRODUCTION_ENV
        os.environ[name] = value
        return delegate(ctx, "build", {"prefix_paths": prefix_paths})

    @app.command("serve", help="Serve previously built Gatsby site.")
    @run_and_exit
    def serve(
        ctx: typer.Context,
        host: str = typer.Option(
            DEFAULT_HOST, "--host", "-H", help=f"Set host. Defaults to {DEFAULT_HOST}"
        ),
        port: str = typer.Option(
            DEFAULT_PORT, "--port", "-p", help=f"Set port. Defaults to {DEFAULT_PORT}"
        ),
        open_browser: Optional[bool] = typer.Option(
            None, "--open", "-o", help="Open the site in your browser for you."
        ),
    ):
        return delegate(ctx, "serve", {"host": host, "port": port, "open": open_browser})
