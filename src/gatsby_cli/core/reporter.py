"""Reporter sink for user-facing CLI output.

`panic` is the single fatal path: it writes the message (and the attached
cause, if any) to stderr and raises `typer.Exit(code=1)`.
"""

from __future__ import annotations

import logging
import traceback
from typing import NoReturn, Optional, Union

import typer

from .logging_utils import log_event

logger = logging.getLogger("gatsby_cli.reporter")


class Reporter:
    def __init__(self, *, verbose: bool = False) -> None:
        self.is_verbose = verbose

    def set_verbose(self, verbose: bool = True) -> None:
        self.is_verbose = verbose

    def info(self, message: str) -> None:
        typer.echo(message)

    def verbose(self, message: str) -> None:
        if self.is_verbose:
            typer.echo(f"verbose {message}", err=True)

    def panic(
        self,
        message: Union[str, BaseException],
        cause: Optional[BaseException] = None,
    ) -> NoReturn:
        if isinstance(message, BaseException):
            if cause is None:
                cause = message
            text = str(message) or type(message).__name__
        else:
            text = message
        log_event(logger, logging.DEBUG, "reporter.panic", message=text, exc=cause)
        typer.echo(text, err=True)
        if cause is not None:
            if cause is not message:
                typer.echo(f"{type(cause).__name__}: {cause}", err=True)
            if self.is_verbose:
                trace = traceback.format_exception(
                    type(cause), cause, cause.__traceback__
                )
                typer.echo("".join(trace), err=True, nl=False)
            raise typer.Exit(code=1) from cause
        raise typer.Exit(code=1)
