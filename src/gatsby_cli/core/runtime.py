from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from .locator import (
    CommandLocator,
    FailureReason,
    ResolutionFailure,
    ResolutionResult,
)
from .reporter import Reporter
from .site import FRAMEWORK_PACKAGE, SiteContext, detect_site

Initializer = Callable[[str, Mapping[str, Any]], Any]


class CliRuntime:
    """Per-process collaborators shared by every registered command.

    The site context is detected on first access and reused afterwards.
    """

    def __init__(
        self,
        *,
        directory: Optional[Path] = None,
        reporter: Optional[Reporter] = None,
        initializer: Optional[Initializer] = None,
        package: str = FRAMEWORK_PACKAGE,
    ) -> None:
        self._directory = directory
        self.reporter = reporter or Reporter()
        self._initializer = initializer
        self.package = package

    @cached_property
    def site(self) -> SiteContext:
        return detect_site(self._directory or Path.cwd(), package=self.package)

    def locator(self) -> CommandLocator:
        return CommandLocator(
            self.site.directory,
            package=self.package,
            verbose=self.reporter.verbose,
        )

    def resolve_command(self, command: str) -> ResolutionResult:
        if not self.site.is_local_site:
            return ResolutionFailure(command, FailureReason.NOT_A_LOCAL_SITE)
        return self.locator().resolve(command)

    def init_starter(self, starter: str, options: Mapping[str, Any]) -> Any:
        initializer = self._initializer
        if initializer is None:
            from ..init_starter import init_starter as initializer
        return initializer(starter, options)
