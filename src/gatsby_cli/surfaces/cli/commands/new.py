from pathlib import Path
from typing import Any, Callable, NoReturn, Optional

import typer

from ....core.runtime import CliRuntime
from ....init_starter import DEFAULT_STARTER


def register_new_command(
    app: typer.Typer,
    *,
    runtime: CliRuntime,
    run_and_exit: Callable[[Callable[..., Any]], Callable[..., NoReturn]],
) -> None:
    @app.command("new", help="Create new Gatsby project.")
    @run_and_exit
    def new(
        root_path: Optional[str] = typer.Argument(
            None, help="Directory to create the site in"
        ),
        starter: str = typer.Argument(
            DEFAULT_STARTER, help="Starter to scaffold from"
        ),
    ):
        outcome = runtime.init_starter(starter, {"rootPath": root_path})
        if isinstance(outcome, Path):
            runtime.reporter.info(f"Created new site at {outcome}")
        return outcome
