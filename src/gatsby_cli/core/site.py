from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .logging_utils import log_event

logger = logging.getLogger("gatsby_cli.core.site")

FRAMEWORK_PACKAGE = "gatsby"
MANIFEST_FILENAME = "package.json"
DEFAULT_BROWSERS: tuple[str, ...] = (
    "> 1%",
    "last 2 versions",
    "IE >= 9",
)


@dataclass(frozen=True)
class ManifestInfo:
    dependencies: Mapping[str, Any]
    dev_dependencies: Mapping[str, Any]
    browserslist: tuple[str, ...]
    raw: Mapping[str, Any]

    def declares(self, package: str) -> bool:
        return bool(self.dependencies.get(package)) or bool(
            self.dev_dependencies.get(package)
        )


@dataclass(frozen=True)
class SiteContext:
    is_local_site: bool
    directory: Path
    manifest: Optional[ManifestInfo] = None
    browser_targets: tuple[str, ...] = DEFAULT_BROWSERS


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return MappingProxyType(dict(value)) if isinstance(value, dict) else MappingProxyType({})


def _as_browser_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return ()
    return tuple(value)


def read_manifest(directory: Path) -> Optional[ManifestInfo]:
    """Parse `package.json`; any read or parse failure means no manifest."""
    path = directory / MANIFEST_FILENAME
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    return ManifestInfo(
        dependencies=_as_mapping(data.get("dependencies")),
        dev_dependencies=_as_mapping(data.get("devDependencies")),
        browserslist=_as_browser_list(data.get("browserslist")),
        raw=MappingProxyType(data),
    )


def detect_site(
    directory: Optional[Path] = None, *, package: str = FRAMEWORK_PACKAGE
) -> SiteContext:
    directory = (directory or Path.cwd()).resolve()
    manifest = read_manifest(directory)
    is_local_site = manifest is not None and manifest.declares(package)
    browser_targets = DEFAULT_BROWSERS
    if is_local_site and manifest is not None and manifest.browserslist:
        browser_targets = manifest.browserslist
    log_event(
        logger,
        logging.DEBUG,
        "site.detected",
        directory=str(directory),
        is_local_site=is_local_site,
        has_manifest=manifest is not None,
    )
    return SiteContext(
        is_local_site=is_local_site,
        directory=directory,
        manifest=manifest,
        browser_targets=browser_targets,
    )
