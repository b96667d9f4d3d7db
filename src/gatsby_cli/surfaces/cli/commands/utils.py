import asyncio
import functools
import importlib.metadata
import inspect
import logging
from typing import Any, Awaitable, Callable, NoReturn

import typer

from ....core.logging_utils import log_event
from ....core.reporter import Reporter

logger = logging.getLogger("gatsby_cli.cli")


def get_cli_version() -> str:
    try:
        return importlib.metadata.version("gatsby-cli")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def show_root_help(ctx: typer.Context) -> None:
    typer.echo(ctx.find_root().get_help(), err=True)


async def _settle(outcome: Awaitable[Any]) -> Any:
    return await outcome


def handler(reporter: Reporter) -> Callable[[Callable[..., Any]], Callable[..., NoReturn]]:
    """Run a command action to completion and terminate the process.

    Awaitable results are awaited. Success exits 0; any exception is handed
    to `reporter.panic` unchanged.
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., NoReturn]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> NoReturn:
            log_event(logger, logging.DEBUG, "dispatch.start", command=fn.__name__)
            try:
                outcome = fn(*args, **kwargs)
                if inspect.isawaitable(outcome):
                    asyncio.run(_settle(outcome))
            except typer.Exit:
                raise
            except Exception as exc:
                log_event(
                    logger,
                    logging.DEBUG,
                    "dispatch.failed",
                    command=fn.__name__,
                    exc=exc,
                )
                reporter.panic(exc)
            log_event(logger, logging.DEBUG, "dispatch.completed", command=fn.__name__)
            raise typer.Exit(code=0)

        return wrapper

    return decorator
