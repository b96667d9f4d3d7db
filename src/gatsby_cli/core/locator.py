"""Locate and load a command implementation from the site's own install.

Candidates are searched the way the host project resolves its packages:
every ancestor `node_modules` directory of the site, nearest first. A
candidate that is present in none of them falls through to the next one.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Union

from .logging_utils import log_event
from .site import FRAMEWORK_PACKAGE

logger = logging.getLogger("gatsby_cli.core.locator")

MODULES_DIRNAME = "node_modules"
ENTRYPOINT_ATTR = "main"

CommandImplementation = Callable[[dict[str, Any]], Any]


class FailureReason(str, Enum):
    NOT_A_LOCAL_SITE = "not-a-local-site"
    NOT_FOUND = "not-found"
    LOAD_ERROR = "load-error"


@dataclass(frozen=True)
class Resolved:
    command: str
    path: Path
    implementation: CommandImplementation


@dataclass(frozen=True)
class ResolutionFailure:
    command: str
    reason: FailureReason
    cause: Optional[BaseException] = None
    path: Optional[Path] = None


ResolutionResult = Union[Resolved, ResolutionFailure]


@dataclass(frozen=True)
class LookupStrategy:
    name: str
    subpath: tuple[str, ...]

    def request(self, package: str, command: str) -> Path:
        return Path(package, *self.subpath, command)


# Current layout first, then the legacy `dist/utils` location.
COMMAND_LOOKUPS: tuple[LookupStrategy, ...] = (
    LookupStrategy("commands", ("dist", "commands")),
    LookupStrategy("legacy-utils", ("dist", "utils")),
)


def module_search_roots(directory: Path) -> Iterator[Path]:
    for base in (directory, *directory.parents):
        if base.name == MODULES_DIRNAME:
            continue
        candidate = base / MODULES_DIRNAME
        if candidate.is_dir():
            yield candidate


def _module_file(base: Path) -> Optional[Path]:
    as_file = base.with_name(base.name + ".py")
    if as_file.is_file():
        return as_file
    as_package = base / "__init__.py"
    if as_package.is_file():
        return as_package
    return None


def _module_name(path: Path) -> str:
    digest = abs(hash(str(path)))
    return f"_gatsby_local_{path.stem}_{digest:x}"


def load_implementation(path: Path) -> CommandImplementation:
    """Execute the module at `path` and return its `main` callable."""
    name = _module_name(path)
    search_locations = [str(path.parent)] if path.name == "__init__.py" else None
    spec = importlib.util.spec_from_file_location(
        name, path, submodule_search_locations=search_locations
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load module from {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    implementation = getattr(module, ENTRYPOINT_ATTR, None)
    if not callable(implementation):
        raise TypeError(f"{path} does not define a callable `{ENTRYPOINT_ATTR}`")
    return implementation


class CommandLocator:
    def __init__(
        self,
        directory: Path,
        *,
        package: str = FRAMEWORK_PACKAGE,
        lookups: tuple[LookupStrategy, ...] = COMMAND_LOOKUPS,
        verbose: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.directory = directory
        self.package = package
        self.lookups = lookups
        self._verbose = verbose

    def find(self, command: str) -> Optional[Path]:
        roots = list(module_search_roots(self.directory))
        for lookup in self.lookups:
            request = lookup.request(self.package, command)
            for root in roots:
                path = _module_file(root / request)
                if path is not None:
                    return path
            log_event(
                logger,
                logging.DEBUG,
                "locator.candidate_miss",
                command=command,
                lookup=lookup.name,
                request=request.as_posix(),
            )
        return None

    def resolve(self, command: str) -> ResolutionResult:
        try:
            path = self.find(command)
        except OSError as exc:
            return ResolutionFailure(command, FailureReason.LOAD_ERROR, cause=exc)
        if path is None:
            return ResolutionFailure(command, FailureReason.NOT_FOUND)

        if self._verbose is not None:
            self._verbose(f"loading local command from: {path}")
        try:
            implementation = load_implementation(path)
        except Exception as exc:
            log_event(
                logger,
                logging.DEBUG,
                "locator.load_failed",
                command=command,
                path=str(path),
                exc=exc,
            )
            return ResolutionFailure(
                command, FailureReason.LOAD_ERROR, cause=exc, path=path
            )
        log_event(
            logger, logging.DEBUG, "locator.resolved", command=command, path=str(path)
        )
        return Resolved(command=command, path=path, implementation=implementation)
