"""Scaffold a new site from a starter.

A starter is either a local directory, which is copied, or a git repository
(`owner/repo` on GitHub, or any URL git understands), which is cloned with
its history dropped.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any, Mapping, Optional

from .core.logging_utils import log_event
from .core.site import MANIFEST_FILENAME

logger = logging.getLogger("gatsby_cli.init_starter")

DEFAULT_STARTER = "gatsbyjs/gatsby-starter-default"
_COPY_IGNORE = shutil.ignore_patterns(".git", "node_modules")


class StarterError(Exception):
    """Raised when a starter cannot be scaffolded."""


def starter_url(starter: str) -> str:
    if "://" in starter or starter.startswith("git@"):
        return starter
    return f"https://github.com/{starter.strip('/')}.git"


def _copy_starter(source: Path, root: Path) -> None:
    if root == source or source in root.parents:
        raise StarterError(f"Cannot create a site at {root} inside its starter {source}")
    log_event(logger, logging.INFO, "starter.copy", source=str(source), root=str(root))
    shutil.copytree(source, root, ignore=_COPY_IGNORE, dirs_exist_ok=True)


def _clone_starter(starter: str, root: Path) -> None:
    url = starter_url(starter)
    log_event(logger, logging.INFO, "starter.clone", url=url, root=str(root))
    git = shutil.which("git")
    if git is None:
        raise StarterError("git is required to clone starters but was not found on PATH.")
    result = subprocess.run(
        [git, "clone", "--depth=1", url, str(root)],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip()
        raise StarterError(f"Failed to clone starter {starter}: {detail}")
    shutil.rmtree(root / ".git", ignore_errors=True)


def init_starter(starter: str, options: Optional[Mapping[str, Any]] = None) -> Path:
    options = options or {}
    root_path = options.get("rootPath")
    root = Path(root_path) if root_path else Path.cwd()
    root = root.resolve()

    if (root / MANIFEST_FILENAME).exists():
        raise StarterError(f"Directory {root} is already an npm project")

    source = Path(starter).expanduser()
    if source.is_dir():
        _copy_starter(source.resolve(), root)
    else:
        _clone_starter(starter, root)
    return root
