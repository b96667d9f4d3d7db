"""Test harness configuration.

This repo uses a `src/` layout. In some developer environments an older
installed `gatsby_cli` package can shadow the local sources.

Ensure tests always import the in-repo code.
"""

from __future__ import annotations

import json
import logging
import sys
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import pytest

DEFAULT_NON_INTEGRATION_TIMEOUT_SECONDS = 120


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    src_path = str(src_dir)
    if sys.path[:1] != [src_path] and src_path not in sys.path:
        sys.path.insert(0, src_path)


def pytest_collection_modifyitems(
    session: pytest.Session, config: pytest.Config, items: list[pytest.Item]
) -> None:
    """
    Apply a default per-test timeout to non-integration tests.

    This relies on `pytest-timeout` when installed; if it isn't installed, the
    marker is inert but still documents the intent.
    """
    _ = session, config
    for item in items:
        if item.get_closest_marker("integration") is not None:
            continue
        item.add_marker(pytest.mark.timeout(DEFAULT_NON_INTEGRATION_TIMEOUT_SECONDS))


@pytest.fixture(autouse=True)
def isolated_cli_env(tmp_path_factory, monkeypatch):
    """Keep the user's config file and environment out of every test."""
    config_dir = tmp_path_factory.mktemp("cli-config")
    monkeypatch.setenv("GATSBY_CLI_CONFIG", str(config_dir / "missing.yml"))
    monkeypatch.delenv("GATSBY_CLI_VERBOSE", raising=False)
    monkeypatch.setenv("NODE_ENV", "development")


@pytest.fixture(autouse=True)
def restore_cli_logger():
    """Undo `setup_logging` so handler, level and propagation never leak between tests."""
    logger = logging.getLogger("gatsby_cli")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


# Local command module that records the bundle it was called with, plus the
# NODE_ENV it observed at call time, as one line of `<site>/calls.jsonl`.
RECORDING_COMMAND = textwrap.dedent(
    """
    import json
    import os
    from pathlib import Path

    NAME = {name!r}


    def main(bundle):
        payload = dict(bundle)
        payload["directory"] = str(bundle["directory"])
        payload["_node_env"] = os.environ.get("NODE_ENV")
        payload["_source"] = NAME
        log = Path(bundle["directory"]) / "calls.jsonl"
        with log.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload) + "\\n")
        return None
    """
)


@dataclass(frozen=True)
class Site:
    root: Path

    @property
    def install_root(self) -> Path:
        return self.root / "node_modules" / "gatsby"

    def write_manifest(self, manifest: dict[str, Any]) -> None:
        (self.root / "package.json").write_text(json.dumps(manifest))

    def install_command(
        self,
        name: str,
        *,
        layout: str = "commands",
        source: Optional[str] = None,
        as_package: bool = False,
        label: Optional[str] = None,
    ) -> Path:
        base = self.install_root / "dist" / layout
        if as_package:
            target = base / name / "__init__.py"
        else:
            target = base / f"{name}.py"
        target.parent.mkdir(parents=True, exist_ok=True)
        if source is None:
            source = RECORDING_COMMAND.format(name=label or f"{layout}/{name}")
        target.write_text(source)
        return target

    def recorded_calls(self) -> list[dict[str, Any]]:
        log = self.root / "calls.jsonl"
        if not log.exists():
            return []
        return [json.loads(line) for line in log.read_text().splitlines() if line]


@pytest.fixture()
def site(tmp_path: Path) -> Site:
    """An empty working directory; tests add a manifest and commands as needed."""
    root = tmp_path / "site"
    root.mkdir()
    return Site(root=root.resolve())


@pytest.fixture()
def local_site(site: Site) -> Site:
    site.write_manifest({"name": "my-site", "dependencies": {"gatsby": "^4.0.0"}})
    return site
